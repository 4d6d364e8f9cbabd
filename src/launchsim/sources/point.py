"""
PointSource: isotropic, unpolarized emission from a single position.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

import numpy as np

from launchsim.core.photon_packet import isotropic_direction
from launchsim.errors import ConfigurationError
from launchsim.sources.base import Source
from launchsim.sources.seds import SED, SpectralCDF

if TYPE_CHECKING:
    from launchsim.core.config import WavelengthRange
    from launchsim.core.photon_packet import PhotonPacket


class PointSource(Source):
    """
    A point source with a fixed bolometric luminosity and spectral shape.

    The spectral CDF is immutable after setup, so launches share it across
    threads without any per-thread state.
    """

    def __init__(
        self,
        luminosity: float,
        sed: SED,
        position: tuple[float, float, float] = (0.0, 0.0, 0.0),
        emission_weight: float = 1.0,
    ):
        super().__init__(emission_weight)
        if not np.isfinite(luminosity) or luminosity < 0:
            raise ConfigurationError(f"luminosity={luminosity!r} must be finite and non-negative")
        self._luminosity = float(luminosity)
        self.sed = sed
        self.position = np.asarray(position, dtype=np.float64)
        if self.position.shape != (3,):
            raise ConfigurationError(f"position must be a 3-vector, got shape {self.position.shape}")
        self._cdf: SpectralCDF | None = None

    def setup(self, wavelength_range: "WavelengthRange") -> None:
        super().setup(wavelength_range)
        self._cdf = self.sed.cdf(wavelength_range)

    def luminosity(self) -> float:
        return self._luminosity

    def dimension(self) -> int:
        x, y, z = self.position
        if x == 0 and y == 0:
            return 1 if z == 0 else 2
        return 3

    def launch(
        self,
        packet: "PhotonPacket",
        local_index: int,
        packet_luminosity: float,
        rng: np.random.Generator,
    ) -> None:
        wavelength = self._cdf.sample(rng.random())
        direction = isotropic_direction(rng)
        packet.launch(wavelength, packet_luminosity, self.position, direction)
