"""
ParticleSource: emission from a set of smoothed particles.

Each particle has a position, a smoothing length, a bolometric luminosity and
a black-body temperature. The block of history indices given to the source
is partitioned over the particles exactly like the source system partitions
its packets over sources, so consecutive launches on a worker usually come
from the same particle.

The spectral CDF of a particle is expensive compared to a single launch. It
is built on first use and cached per thread until that thread moves on to
another particle or a new emission segment starts.
"""

from __future__ import annotations
import threading
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from launchsim.core.launch_plan import LaunchPlan, build_launch_plan
from launchsim.core.photon_packet import isotropic_direction
from launchsim.errors import ConfigurationError, LaunchContractError
from launchsim.sources.base import Source
from launchsim.sources.seds import BlackBodySED, SpectralCDF

if TYPE_CHECKING:
    from launchsim.core.photon_packet import PhotonPacket

# Columns of a particle file: x y z (m), h (m), L (W), T (K)
PARTICLE_COLUMNS = ("x", "y", "z", "h", "L", "T")


class ParticleSource(Source):
    """
    A source composed of many weighted particles.

    The particle allocation uses its own bias: a fraction particle_bias of the
    source's packets is spread evenly over the particles, the remainder in
    proportion to particle luminosity.
    """

    def __init__(
        self,
        positions: np.ndarray,
        smoothing_lengths: np.ndarray,
        luminosities: np.ndarray,
        temperatures: np.ndarray,
        emission_weight: float = 1.0,
        particle_bias: float = 0.5,
    ):
        super().__init__(emission_weight)
        self.positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        self.smoothing_lengths = np.asarray(smoothing_lengths, dtype=np.float64)
        self.luminosities = np.asarray(luminosities, dtype=np.float64)
        self.temperatures = np.asarray(temperatures, dtype=np.float64)

        n = len(self.positions)
        if n == 0:
            raise ConfigurationError("ParticleSource needs at least one particle")
        for name in ("smoothing_lengths", "luminosities", "temperatures"):
            if getattr(self, name).shape != (n,):
                raise ConfigurationError(f"{name} must have one value per particle ({n})")
        if not np.all(np.isfinite(self.smoothing_lengths)) or np.any(self.smoothing_lengths < 0):
            raise ConfigurationError("smoothing lengths must be finite and non-negative")
        if not np.all(np.isfinite(self.luminosities)) or np.any(self.luminosities < 0):
            raise ConfigurationError("particle luminosities must be finite and non-negative")
        if not np.all(np.isfinite(self.temperatures)) or np.any(self.temperatures <= 0):
            raise ConfigurationError("particle temperatures must be finite and positive")
        if not 0.0 <= particle_bias <= 1.0:
            raise ConfigurationError(f"particle_bias={particle_bias!r} outside [0, 1]")

        self.particle_bias = float(particle_bias)
        self._plan: LaunchPlan | None = None
        self._generation = 0
        self._local = threading.local()

    @classmethod
    def from_file(cls, path: str | Path, **kwargs) -> ParticleSource:
        """Create a particle source from a column text file (see load_particles)."""
        data = load_particles(path)
        return cls(
            positions=data[:, 0:3],
            smoothing_lengths=data[:, 3],
            luminosities=data[:, 4],
            temperatures=data[:, 5],
            **kwargs,
        )

    @property
    def num_particles(self) -> int:
        return len(self.positions)

    def luminosity(self) -> float:
        return float(self.luminosities.sum())

    def dimension(self) -> int:
        return 3

    def prepare_for_launch(self, first_index: int, num_indices: int) -> None:
        super().prepare_for_launch(first_index, num_indices)
        # The system sets the absolute packet luminosity; particles only rescale it
        # by their bias correction, so the average packet luminosity is unused here
        self._plan = build_launch_plan(
            self.luminosities,
            np.ones(self.num_particles),
            self.particle_bias,
            num_indices,
        )
        # Caches from the previous segment must not be reused
        self._generation += 1

    def particle_for(self, local_index: int) -> int:
        """Index of the particle that emits the given local history index."""
        if self._plan is None:
            raise LaunchContractError("ParticleSource.launch called before prepare_for_launch")
        return self._plan.locate(local_index)[0]

    def _build_cdf(self, particle: int) -> SpectralCDF:
        return BlackBodySED(self.temperatures[particle]).cdf(self.wavelength_range)

    def _cached_cdf(self, particle: int) -> SpectralCDF:
        key = (self._generation, particle)
        cache = self._local
        if getattr(cache, "key", None) != key:
            cache.cdf = self._build_cdf(particle)
            cache.key = key
        return cache.cdf

    def launch(
        self,
        packet: "PhotonPacket",
        local_index: int,
        packet_luminosity: float,
        rng: np.random.Generator,
    ) -> None:
        particle = self.particle_for(local_index)
        cdf = self._cached_cdf(particle)

        wavelength = cdf.sample(rng.random())
        offset = rng.normal(0.0, 1.0, 3) * self.smoothing_lengths[particle]
        direction = isotropic_direction(rng)
        luminosity = packet_luminosity * float(self._plan.luminosity_factors[particle])

        packet.launch(wavelength, luminosity, self.positions[particle] + offset, direction)


def load_particles(path: str | Path) -> np.ndarray:
    """
    Read particles from a whitespace separated column text file.

    Columns: x y z (m), smoothing length h (m), luminosity L (W),
    temperature T (K). Lines starting with '#' are ignored.

    Returns:
        [M, 6] array
    """
    data = np.loadtxt(path, comments="#", ndmin=2)
    if data.shape[1] != len(PARTICLE_COLUMNS):
        raise ConfigurationError(
            f"{path}: expected {len(PARTICLE_COLUMNS)} columns "
            f"({' '.join(PARTICLE_COLUMNS)}), found {data.shape[1]}"
        )
    return data
