"""
SourceSystem: the superposition of all primary sources.

Launches are distributed deterministically rather than by drawing a random
source for every packet. For each emission segment of N packets:

1. prepare_for_launch(N), serially: build the LaunchPlan mapping consecutive
   history index blocks to sources, and hand each source its block
2. launch(packet, i) for every i in [0, N), from any number of threads in
   any order: binary search the plan and delegate to the owning source

Since N is much larger than the number of sources, this is equivalent to
random selection, and it lets sources made of many components iterate over
those components and cache per-component data while they do.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

import numpy as np

from launchsim.core.config import SourceSystemConfig, WavelengthRange
from launchsim.core.launch_plan import (
    LaunchPlan,
    build_launch_plan,
    relative_luminosities,
    relative_weights,
)
from launchsim.errors import ConfigurationError, LaunchContractError
from launchsim.logger import logger

if TYPE_CHECKING:
    from launchsim.core.photon_packet import PhotonPacket
    from launchsim.sources.base import Source


@dataclass
class SourceSystem:
    """
    Primary source system: owns the sources and schedules their launches.

    Sources are set up and their luminosities collected once, at construction.
    """

    sources: Sequence["Source"]
    config: SourceSystemConfig = field(default_factory=SourceSystemConfig)

    # Set up once, read-only afterwards
    total_luminosity: float = field(default=0.0, init=False)
    relative_luminosity: np.ndarray = field(default=None, init=False)
    relative_weight: np.ndarray = field(default=None, init=False)

    # Replaced wholesale by every prepare_for_launch()
    _plan: LaunchPlan | None = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.sources = tuple(self.sources)
        if not self.sources:
            raise ConfigurationError("a source system needs at least one source")

        wavelength_range = self.config.wavelength_range
        for source in self.sources:
            source.setup(wavelength_range)

        luminosities = np.array([source.luminosity() for source in self.sources], dtype=np.float64)
        if np.any(luminosities < 0) or not np.all(np.isfinite(luminosities)):
            raise ConfigurationError(f"source luminosities must be finite and non-negative: {luminosities}")
        weights = np.array([source.emission_weight for source in self.sources], dtype=np.float64)

        self.total_luminosity = float(luminosities.sum())
        self.relative_luminosity = relative_luminosities(luminosities)
        self.relative_weight = relative_weights(weights)
        self.relative_luminosity.setflags(write=False)
        self.relative_weight.setflags(write=False)

        if self.total_luminosity == 0:
            logger.warning("Source system has zero total luminosity; allocating packets by emission weight")

    def dimension(self) -> int:
        """Highest dimension among the sources (the least symmetric one wins)."""
        return max(source.dimension() for source in self.sources)

    def num_sources(self) -> int:
        return len(self.sources)

    def wavelength_range(self) -> WavelengthRange:
        return self.config.wavelength_range

    def luminosity(self) -> float:
        """Bolometric luminosity of the system, summed over all sources."""
        return self.total_luminosity

    @property
    def plan(self) -> LaunchPlan | None:
        """Launch plan of the current emission segment, None before the first."""
        return self._plan

    def prepare_for_launch(self, num_packets: int) -> LaunchPlan:
        """
        Map history indices [0, num_packets) onto the sources.

        Must be called serially, with no launch in flight.

        Args:
            num_packets: Number of packets N in the coming emission segment

        Returns:
            The new LaunchPlan, which also replaces the current one
        """
        # A failed rebuild must not leave the previous segment launchable
        self._plan = None
        plan = build_launch_plan(
            self.relative_luminosity,
            self.relative_weight,
            self.config.source_bias,
            num_packets,
            total_luminosity=self.total_luminosity,
        )

        counts = plan.counts()
        for s, source in enumerate(self.sources):
            first, count = int(plan.boundaries[s]), int(counts[s])
            logger.debug("Source %d: history indices [%d, %d)", s, first, first + count)
            source.prepare_for_launch(first, count)

        self._plan = plan
        logger.info(
            "Prepared launch plan for %d packets over %d sources (bias %g)",
            plan.num_packets, self.num_sources(), self.config.source_bias,
        )
        return plan

    def launch(self, packet: "PhotonPacket", history_index: int) -> None:
        """
        Launch the packet with the given history index from its source.

        The packet is fully reinitialized. The result depends only on the
        configuration, the plan and the history index.

        Raises:
            LaunchContractError: If no plan exists or the index is outside [0, N)
        """
        plan = self._plan
        if plan is None:
            raise LaunchContractError("launch called before prepare_for_launch")

        s, local_index = plan.locate(history_index)
        rng = np.random.default_rng([self.config.seed, history_index])

        packet.history_index = history_index
        packet.source_index = s
        self.sources[s].launch(packet, local_index, plan.packet_luminosity(s), rng)
