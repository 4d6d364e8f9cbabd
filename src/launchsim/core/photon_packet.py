"""
PhotonPacket: the state of one photon packet history at launch.

Sources fill in every field through launch(); nothing from a previous
history survives a relaunch.
"""

from __future__ import annotations

import numpy as np

# Stokes vector (I, Q, U, V) of unpolarized radiation
UNPOLARIZED = (1.0, 0.0, 0.0, 0.0)


class PhotonPacket:
    """
    Mutable photon packet, reused across the histories handled by one worker.
    """

    def __init__(self):
        self.history_index: int = -1
        self.source_index: int = -1
        self.wavelength: float = 0.0
        self.luminosity: float = 0.0
        self.position = np.zeros(3, dtype=np.float64)
        self.direction = np.array([0.0, 0.0, 1.0])
        self.stokes = np.array(UNPOLARIZED)

    def launch(
        self,
        wavelength: float,
        luminosity: float,
        position: np.ndarray,
        direction: np.ndarray,
        stokes: tuple[float, float, float, float] = UNPOLARIZED,
    ) -> None:
        """
        Reinitialize the packet for a new history.

        history_index and source_index are set by the source system before
        the source is asked to launch.

        Args:
            wavelength: Wavelength in meter
            luminosity: Luminosity carried by the packet (W)
            position: Emission position (3-vector, m)
            direction: Unit propagation direction (3-vector)
            stokes: Normalized Stokes vector
        """
        self.wavelength = float(wavelength)
        self.luminosity = float(luminosity)
        self.position[:] = position
        self.direction[:] = direction
        self.stokes[:] = stokes

    def state(self) -> tuple:
        """Hashable snapshot of the packet state."""
        return (
            self.history_index,
            self.source_index,
            self.wavelength,
            self.luminosity,
            tuple(self.position.tolist()),
            tuple(self.direction.tolist()),
            tuple(self.stokes.tolist()),
        )

    def __repr__(self) -> str:
        return (
            f"PhotonPacket(history={self.history_index}, source={self.source_index}, "
            f"wavelength={self.wavelength:.4e}, luminosity={self.luminosity:.4e})"
        )


def isotropic_direction(rng: np.random.Generator) -> np.ndarray:
    """Random unit vector drawn uniformly on the sphere."""
    cos_theta = 2.0 * rng.random() - 1.0
    phi = 2.0 * np.pi * rng.random()
    sin_theta = np.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
    return np.array([sin_theta * np.cos(phi), sin_theta * np.sin(phi), cos_theta])
