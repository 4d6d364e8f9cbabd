"""
Configuration for the primary source system.

All wavelengths are in meter. Values are validated on construction so that
configuration errors surface before any emission segment runs.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
import tomllib

from launchsim.errors import ConfigurationError

# Allowed wavelength domain: 1 Angstrom to 1 m
MIN_ALLOWED_WAVELENGTH = 1e-10
MAX_ALLOWED_WAVELENGTH = 1.0

MAX_NUM_PACKETS_MULTIPLIER = 1000.0


@dataclass(frozen=True)
class WavelengthRange:
    """Closed wavelength interval [min, max] in meter."""

    min: float
    max: float

    def contains(self, wavelength: float) -> bool:
        return self.min <= wavelength <= self.max

    @property
    def width(self) -> float:
        return self.max - self.min


@dataclass
class SourceSystemConfig:
    """Configuration for a primary source system."""

    min_wavelength: float = 0.09e-6  # Shortest launched wavelength (m)
    max_wavelength: float = 20e-6    # Longest launched wavelength (m)
    source_bias: float = 0.5         # Fraction of packets distributed by weight instead of luminosity
    num_packets_multiplier: float = 1.0  # Scales the requested packet count per segment
    seed: int = 0                    # Root seed for per-history random streams

    def __post_init__(self):
        for name in ("min_wavelength", "max_wavelength"):
            value = getattr(self, name)
            if not MIN_ALLOWED_WAVELENGTH <= value <= MAX_ALLOWED_WAVELENGTH:
                raise ConfigurationError(
                    f"{name}={value!r} outside [{MIN_ALLOWED_WAVELENGTH}, {MAX_ALLOWED_WAVELENGTH}] m"
                )
        if not self.min_wavelength < self.max_wavelength:
            raise ConfigurationError(
                f"min_wavelength={self.min_wavelength!r} must be smaller than "
                f"max_wavelength={self.max_wavelength!r}"
            )
        if not 0.0 <= self.source_bias <= 1.0:
            raise ConfigurationError(f"source_bias={self.source_bias!r} outside [0, 1]")
        if not 0.0 < self.num_packets_multiplier <= MAX_NUM_PACKETS_MULTIPLIER:
            raise ConfigurationError(
                f"num_packets_multiplier={self.num_packets_multiplier!r} "
                f"outside ]0, {MAX_NUM_PACKETS_MULTIPLIER:g}]"
            )
        if self.seed < 0:
            raise ConfigurationError(f"seed={self.seed!r} must be non-negative")

    @property
    def wavelength_range(self) -> WavelengthRange:
        return WavelengthRange(self.min_wavelength, self.max_wavelength)

    def num_packets(self, base_num_packets: int) -> int:
        """
        Number of packets N for one emission segment.

        Args:
            base_num_packets: Packet count requested by the simulation

        Returns:
            base_num_packets scaled by num_packets_multiplier, truncated
        """
        if base_num_packets < 0:
            raise ConfigurationError(f"num_packets={base_num_packets!r} must be non-negative")
        return int(base_num_packets * self.num_packets_multiplier)

    @classmethod
    def from_toml(cls, path: str | Path) -> SourceSystemConfig:
        """
        Load configuration from the [source_system] table of a TOML file.

        Missing keys keep their defaults; unknown keys are rejected.
        """
        with open(path, "rb") as f:
            data = tomllib.load(f)

        table = data.get("source_system", {})
        known = {fld.name for fld in fields(cls)}
        unknown = sorted(set(table) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown source_system setting(s) in {path}: {', '.join(unknown)}"
            )
        return cls(**table)
