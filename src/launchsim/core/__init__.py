"""
Core launch scheduling.

This layer knows NOTHING about how a source emits its packets.
It only knows:
- The luminosity and emission weight of each source
- How to split [0, N) into one contiguous block per source
- Which source owns a given history index
- How to run an emission segment over worker threads

Sources live in launchsim.sources and implement the Source interface.
"""

from launchsim.core.config import SourceSystemConfig, WavelengthRange
from launchsim.core.photon_packet import PhotonPacket
from launchsim.core.launch_plan import LaunchPlan, build_launch_plan, partition
from launchsim.core.source_system import SourceSystem
from launchsim.core.emission import EmissionRecord, run_emission_segment

__all__ = [
    "SourceSystemConfig",
    "WavelengthRange",
    "PhotonPacket",
    "LaunchPlan",
    "build_launch_plan",
    "partition",
    "SourceSystem",
    "EmissionRecord",
    "run_emission_segment",
]
