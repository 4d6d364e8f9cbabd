"""
Pytest configuration and shared fixtures.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


@pytest.fixture
def wavelength_range():
    """Wavelength range used by source-level tests (0.1 to 10 micron)."""
    from launchsim.core import WavelengthRange
    return WavelengthRange(1e-7, 1e-5)


@pytest.fixture
def two_star_system():
    """Two point sources with luminosity ratio 3:1 and equal weights, bias 0.5."""
    from launchsim.core import SourceSystem, SourceSystemConfig
    from launchsim.sources import BlackBodySED, PointSource
    return SourceSystem(
        sources=[
            PointSource(luminosity=30.0, sed=BlackBodySED(5800.0)),
            PointSource(luminosity=10.0, sed=BlackBodySED(3500.0), position=(1.0, 2.0, 3.0)),
        ],
        config=SourceSystemConfig(source_bias=0.5, seed=7),
    )


@pytest.fixture
def particle_source():
    """Small particle source: 5 particles with varying luminosity and temperature."""
    from launchsim.sources import ParticleSource
    rng = np.random.default_rng(seed=42)
    return ParticleSource(
        positions=rng.normal(0.0, 10.0, size=(5, 3)),
        smoothing_lengths=np.full(5, 0.5),
        luminosities=np.array([1.0, 4.0, 0.0, 2.0, 3.0]),
        temperatures=np.array([3000.0, 6000.0, 9000.0, 12000.0, 20000.0]),
        particle_bias=0.3,
    )


@pytest.fixture
def mixed_system(particle_source):
    """A point source plus a particle source."""
    from launchsim.core import SourceSystem, SourceSystemConfig
    from launchsim.sources import BlackBodySED, PointSource
    return SourceSystem(
        sources=[PointSource(luminosity=20.0, sed=BlackBodySED(5800.0)), particle_source],
        config=SourceSystemConfig(source_bias=0.5, seed=3),
    )
