"""
LaunchPlan: deterministic partition of history indices over emitters.

For N packets and S emitters (sources, or the particles inside a source),
emitter s receives the contiguous index block [boundaries[s], boundaries[s+1]).
The size of each block follows

    f_s = (1 - ξ)·L_s/ΣL + ξ·w_s/Σw
    N_s ≈ f_s · N

where ξ is the emission bias. Blocks are laid out in declaration order and
rounded cumulatively, so the counts always add up to N exactly.

The same routine is used by the source system across its sources and by
composite sources across their subcomponents.
"""

from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from launchsim.errors import LaunchContractError


def relative_luminosities(luminosities: np.ndarray) -> np.ndarray:
    """Luminosities normalized to unit sum, or all zeros if there is no luminosity."""
    luminosities = np.asarray(luminosities, dtype=np.float64)
    total = luminosities.sum()
    if total > 0:
        return luminosities / total
    return np.zeros_like(luminosities)


def relative_weights(weights: np.ndarray) -> np.ndarray:
    """Weights normalized to unit sum, or a uniform split if all weights are zero."""
    weights = np.asarray(weights, dtype=np.float64)
    total = weights.sum()
    if total > 0:
        return weights / total
    return np.full_like(weights, 1.0 / len(weights))


def mixture_fractions(
    relative_luminosity: np.ndarray,
    relative_weight: np.ndarray,
    bias: float,
) -> np.ndarray:
    """
    Fraction of the packets allocated to each emitter.

    Without any luminosity the luminosity term carries no information, so the
    allocation falls back to the weight term alone, whatever the bias.
    """
    if relative_luminosity.sum() > 0:
        return (1.0 - bias) * relative_luminosity + bias * relative_weight
    return relative_weight.copy()


def partition(fractions: np.ndarray, num_packets: int) -> np.ndarray:
    """
    Cumulatively rounded block boundaries for the given fractions.

    boundaries[s+1] = floor(N·Σ_{k≤s} f_k + 0.5), so every prefix is within
    half a packet of the exact running total and the last boundary is N.

    Returns:
        int64 array of length len(fractions) + 1
    """
    cumulative = np.cumsum(fractions) * num_packets
    boundaries = np.empty(len(fractions) + 1, dtype=np.int64)
    boundaries[0] = 0
    boundaries[1:] = np.clip(np.floor(cumulative + 0.5), 0, num_packets)
    boundaries[-1] = num_packets
    # cumsum of non-negative fractions is monotone; guard against float noise
    np.maximum.accumulate(boundaries, out=boundaries)
    return boundaries


def luminosity_factors(relative_luminosity: np.ndarray, fractions: np.ndarray) -> np.ndarray:
    """
    Bias correction L_s/ΣL / f_s for the luminosity of each launched packet.

    Emitters that receive no packets (f_s == 0) get a factor of zero.
    """
    factors = np.zeros_like(fractions)
    np.divide(relative_luminosity, fractions, out=factors, where=fractions > 0)
    return factors


@dataclass(frozen=True, eq=False)
class LaunchPlan:
    """
    Immutable mapping of history indices [0, N) onto emitters.

    Shared read-only by all concurrent launches; rebuilt, never mutated.
    """

    boundaries: np.ndarray          # [S+1] first history index of each emitter, plus N
    average_packet_luminosity: float  # Lpp = L/N (0 if L == 0 or N == 0)
    fractions: np.ndarray           # [S] fraction of packets allocated to each emitter
    luminosity_factors: np.ndarray  # [S] packet luminosity = Lpp × factor

    def __post_init__(self):
        for array in (self.boundaries, self.fractions, self.luminosity_factors):
            array.setflags(write=False)

    @property
    def num_packets(self) -> int:
        return int(self.boundaries[-1])

    @property
    def num_emitters(self) -> int:
        return len(self.boundaries) - 1

    def counts(self) -> np.ndarray:
        """Number of packets allocated to each emitter."""
        return np.diff(self.boundaries)

    def index_range(self, emitter: int) -> range:
        """History indices owned by an emitter."""
        return range(int(self.boundaries[emitter]), int(self.boundaries[emitter + 1]))

    def locate(self, history_index: int) -> tuple[int, int]:
        """
        Find the emitter owning a history index.

        Binary search, O(log S). Emitters with an empty block are skipped
        because side="right" lands after every boundary equal to the index.

        Returns:
            (emitter index, index local to the emitter's block)

        Raises:
            LaunchContractError: If history_index is outside [0, N)
        """
        if not 0 <= history_index < self.num_packets:
            raise LaunchContractError(
                f"history index {history_index} outside launch plan range [0, {self.num_packets})"
            )
        emitter = int(np.searchsorted(self.boundaries, history_index, side="right")) - 1
        return emitter, history_index - int(self.boundaries[emitter])

    def packet_luminosity(self, emitter: int) -> float:
        """Luminosity carried by each packet launched from an emitter."""
        return self.average_packet_luminosity * float(self.luminosity_factors[emitter])


def build_launch_plan(
    luminosities: np.ndarray,
    weights: np.ndarray,
    bias: float,
    num_packets: int,
    total_luminosity: float | None = None,
) -> LaunchPlan:
    """
    Build the launch plan for one emission segment.

    Args:
        luminosities: [S] bolometric luminosity of each emitter
        weights: [S] emission weight of each emitter
        bias: ξ in [0, 1], fraction of packets distributed by weight
        num_packets: N, total number of packets in the segment
        total_luminosity: Luminosity spread over the N packets (defaults to ΣL).
            Composite sources that receive an absolute packet luminosity from
            the system leave this alone and read luminosity_factors directly.

    Returns:
        LaunchPlan with S+1 boundaries covering [0, N)
    """
    if num_packets < 0:
        raise LaunchContractError(f"number of packets must be non-negative, got {num_packets}")
    if len(luminosities) == 0:
        raise LaunchContractError("cannot build a launch plan without emitters")

    rel_lum = relative_luminosities(luminosities)
    rel_weight = relative_weights(weights)
    fractions = mixture_fractions(rel_lum, rel_weight, bias)

    if total_luminosity is None:
        total_luminosity = float(np.sum(luminosities))
    average = total_luminosity / num_packets if num_packets > 0 and total_luminosity > 0 else 0.0

    return LaunchPlan(
        boundaries=partition(fractions, num_packets),
        average_packet_luminosity=average,
        fractions=fractions,
        luminosity_factors=luminosity_factors(rel_lum, fractions),
    )
