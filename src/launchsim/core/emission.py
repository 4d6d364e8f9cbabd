"""
Emission segments: launch every packet of a segment, possibly in parallel.

The history index range [0, N) is cut into contiguous chunks. Each worker
thread takes whole chunks, reuses one PhotonPacket for all its histories and
writes the launched state into its own slice of the record, so workers never
share mutable state. Leaving the executor joins all workers, which is the
barrier required before the next prepare_for_launch().
"""

from __future__ import annotations
import concurrent.futures
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from launchsim.core.photon_packet import PhotonPacket
from launchsim.errors import ConfigurationError
from launchsim.logger import logger

if TYPE_CHECKING:
    from launchsim.core.source_system import SourceSystem

DEFAULT_CHUNKS_PER_THREAD = 8


@dataclass
class EmissionRecord:
    """Launch state of every packet in a segment, indexed by history index."""

    source_index: np.ndarray  # [N] int
    wavelength: np.ndarray    # [N] m
    luminosity: np.ndarray    # [N] W
    position: np.ndarray      # [N, 3] m
    direction: np.ndarray     # [N, 3]

    @classmethod
    def allocate(cls, num_packets: int) -> EmissionRecord:
        return cls(
            source_index=np.full(num_packets, -1, dtype=np.int64),
            wavelength=np.zeros(num_packets, dtype=np.float64),
            luminosity=np.zeros(num_packets, dtype=np.float64),
            position=np.zeros((num_packets, 3), dtype=np.float64),
            direction=np.zeros((num_packets, 3), dtype=np.float64),
        )

    @property
    def num_packets(self) -> int:
        return len(self.source_index)

    def store(self, packet: PhotonPacket) -> None:
        i = packet.history_index
        self.source_index[i] = packet.source_index
        self.wavelength[i] = packet.wavelength
        self.luminosity[i] = packet.luminosity
        self.position[i] = packet.position
        self.direction[i] = packet.direction

    def counts_by_source(self, num_sources: int) -> np.ndarray:
        """Number of packets launched by each source."""
        return np.bincount(self.source_index, minlength=num_sources)

    def luminosity_by_source(self, num_sources: int) -> np.ndarray:
        """Total luminosity carried by the packets of each source."""
        return np.bincount(self.source_index, weights=self.luminosity, minlength=num_sources)


def chunk_ranges(num_packets: int, chunk_size: int) -> list[range]:
    """Split [0, num_packets) into consecutive ranges of at most chunk_size."""
    return [
        range(start, min(start + chunk_size, num_packets))
        for start in range(0, num_packets, chunk_size)
    ]


def _launch_chunk(system: "SourceSystem", record: EmissionRecord, chunk: range) -> None:
    packet = PhotonPacket()
    for history_index in chunk:
        system.launch(packet, history_index)
        record.store(packet)


def run_emission_segment(
    system: "SourceSystem",
    num_packets: int,
    num_threads: int = 1,
    chunk_size: int | None = None,
) -> EmissionRecord:
    """
    Run one primary emission segment.

    Args:
        system: Source system to launch from
        num_packets: Requested packet count, scaled by the system's
            num_packets_multiplier to obtain N
        num_threads: Number of worker threads (1 runs serially)
        chunk_size: History indices per chunk (default: N spread over
            DEFAULT_CHUNKS_PER_THREAD chunks per thread)

    Returns:
        EmissionRecord with the launch state of all N packets
    """
    if num_threads < 1:
        raise ConfigurationError(f"num_threads={num_threads!r} must be at least 1")
    if chunk_size is not None and chunk_size < 1:
        raise ConfigurationError(f"chunk_size={chunk_size!r} must be at least 1")

    n = system.config.num_packets(num_packets)
    system.prepare_for_launch(n)
    record = EmissionRecord.allocate(n)

    if chunk_size is None:
        chunk_size = max(1, -(-n // (num_threads * DEFAULT_CHUNKS_PER_THREAD)))
    chunks = chunk_ranges(n, chunk_size)
    logger.info(
        "Launching %d packets in %d chunks on %d thread(s)", n, len(chunks), num_threads
    )

    if num_threads == 1:
        for chunk in chunks:
            _launch_chunk(system, record, chunk)
        return record

    with concurrent.futures.ThreadPoolExecutor(max_workers=num_threads) as executor:
        futures = [executor.submit(_launch_chunk, system, record, chunk) for chunk in chunks]
        for future in concurrent.futures.as_completed(futures):
            future.result()
    return record
