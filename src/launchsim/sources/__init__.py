"""
Sources: the emitters superposed in a source system.

Sources own their geometry and spectrum. The source system only sees the
Source interface.
- PointSource: isotropic emission from one position
- ParticleSource: smoothed particles, each with its own black-body spectrum
- SED, BlackBodySED, TabulatedSED: spectral shapes and their CDFs
"""

from launchsim.sources.base import Source
from launchsim.sources.seds import SED, BlackBodySED, TabulatedSED, SpectralCDF
from launchsim.sources.point import PointSource
from launchsim.sources.particle import ParticleSource, load_particles

__all__ = [
    "Source",
    "SED",
    "BlackBodySED",
    "TabulatedSED",
    "SpectralCDF",
    "PointSource",
    "ParticleSource",
    "load_particles",
]
