"""
Base class for primary sources.

A source is one of the superposed emitters held by the source system. The
system talks to it through a small interface:

- setup(wavelength_range): called once, before any luminosity query
- luminosity(): bolometric luminosity inside the wavelength range
- emission_weight: user weight for the uniform share of the allocation
- dimension(): 1 (spherical), 2 (axial) or 3 (no symmetry)
- prepare_for_launch(first_index, num_indices): the block of history
  indices allocated for the coming emission segment
- launch(packet, local_index, packet_luminosity, rng): emit one packet

Launches run concurrently. Anything a source caches while launching must live
in storage owned by the calling thread, never in a plain attribute.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from launchsim.errors import ConfigurationError

if TYPE_CHECKING:
    from launchsim.core.config import WavelengthRange
    from launchsim.core.photon_packet import PhotonPacket


class Source(ABC):
    """
    Base class for sources in a primary source system.
    """

    def __init__(self, emission_weight: float = 1.0):
        if not np.isfinite(emission_weight) or emission_weight < 0:
            raise ConfigurationError(f"emission_weight={emission_weight!r} must be finite and non-negative")
        self.emission_weight = float(emission_weight)
        self.wavelength_range: WavelengthRange | None = None
        self.first_index = 0
        self.num_indices = 0

    def setup(self, wavelength_range: "WavelengthRange") -> None:
        """
        Receive the wavelength range of the source system.

        Subclasses extending this should call super().setup() first.
        """
        self.wavelength_range = wavelength_range

    @abstractmethod
    def luminosity(self) -> float:
        """Bolometric luminosity (W) across the configured wavelength range."""
        ...

    @abstractmethod
    def dimension(self) -> int:
        """Dimension of the source geometry: 1, 2 or 3."""
        ...

    def prepare_for_launch(self, first_index: int, num_indices: int) -> None:
        """
        Receive the block of history indices allocated to this source.

        Called serially, once per emission segment, before any launch.
        Composite sources override this to partition the block over their
        subcomponents.
        """
        self.first_index = first_index
        self.num_indices = num_indices

    @abstractmethod
    def launch(
        self,
        packet: "PhotonPacket",
        local_index: int,
        packet_luminosity: float,
        rng: "np.random.Generator",
    ) -> None:
        """
        Emit one photon packet.

        Args:
            packet: Packet to reinitialize in place
            local_index: Index within this source's block, in [0, num_indices)
            packet_luminosity: Luminosity assigned to the packet by the system
            rng: Random stream for this history
        """
        ...
