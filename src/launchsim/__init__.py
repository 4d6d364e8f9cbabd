"""
launchsim: primary source launch scheduling for Monte Carlo radiative transfer

Distributes the photon packets of an emission segment across a system of
superposed primary sources.

Core concepts:
- Each source gets one contiguous block of history indices
- Block sizes mix luminosity-proportional and weight-proportional sampling
- A history index maps to its source by binary search (no random draw)
- Sources may partition their block again over particles or cells
- Workers launch disjoint index chunks in parallel without coordination

See DESIGN.md for full details.
"""

__version__ = "0.1.0"
