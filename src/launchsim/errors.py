"""
Exceptions raised by launchsim.

- ConfigurationError: invalid user configuration, raised before any launch
- LaunchContractError: caller broke the launch protocol (programming error)

Degenerate numerics (zero luminosity, zero weights) are never errors; they
are resolved by the allocation fallback in core.launch_plan.
"""


class LaunchSimError(Exception):
    """Base class for all launchsim errors."""


class ConfigurationError(LaunchSimError, ValueError):
    """A configuration value is out of range or inconsistent."""


class LaunchContractError(LaunchSimError, RuntimeError):
    """A launch was requested outside the contract of the current plan."""
