"""
Spectral energy distributions and their cumulative distributions.

An SED only provides the spectral shape. Normalization is the job of the
source, which knows its bolometric luminosity.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from scipy import constants
from scipy.integrate import cumulative_trapezoid

from launchsim.errors import ConfigurationError

if TYPE_CHECKING:
    from launchsim.core.config import WavelengthRange

DEFAULT_CDF_POINTS = 256


@dataclass(frozen=True, eq=False)
class SpectralCDF:
    """Normalized cumulative distribution over wavelength."""

    wavelengths: np.ndarray  # Grid (m), strictly increasing
    cumulative: np.ndarray   # P(λ) on the grid, from 0 to 1

    def sample(self, uniform: float) -> float:
        """Inverse-transform sample for a uniform deviate in [0, 1)."""
        return float(np.interp(uniform, self.cumulative, self.wavelengths))


class SED(ABC):
    """Spectral shape of a source."""

    @abstractmethod
    def specific_luminosity(self, wavelengths: np.ndarray) -> np.ndarray:
        """Specific luminosity in arbitrary units at the given wavelengths (m)."""
        ...

    def grid(self, wavelength_range: "WavelengthRange", num_points: int) -> np.ndarray:
        """Logarithmic wavelength grid covering the range."""
        return np.geomspace(wavelength_range.min, wavelength_range.max, num_points)

    def cdf(
        self,
        wavelength_range: "WavelengthRange",
        num_points: int = DEFAULT_CDF_POINTS,
    ) -> SpectralCDF:
        """
        Build the cumulative distribution inside the wavelength range.

        A SED without emission in the range gets a log-uniform distribution,
        so that sampling stays well defined.
        """
        lambdav = self.grid(wavelength_range, num_points)
        pv = np.clip(self.specific_luminosity(lambdav), 0.0, None)
        Pv = cumulative_trapezoid(pv, lambdav, initial=0.0)
        if Pv[-1] > 0:
            Pv /= Pv[-1]
        else:
            Pv = np.log(lambdav / lambdav[0]) / np.log(lambdav[-1] / lambdav[0])
        return SpectralCDF(wavelengths=lambdav, cumulative=Pv)


class BlackBodySED(SED):
    """Planck spectrum B_λ(T)."""

    def __init__(self, temperature: float):
        if not np.isfinite(temperature) or temperature <= 0:
            raise ConfigurationError(f"temperature={temperature!r} must be finite and positive")
        self.temperature = float(temperature)

    def specific_luminosity(self, wavelengths: np.ndarray) -> np.ndarray:
        lam = np.asarray(wavelengths, dtype=np.float64)
        h, c, k = constants.h, constants.c, constants.k
        with np.errstate(over="ignore"):
            return 2 * h * c**2 / lam**5 / np.expm1(h * c / (lam * k * self.temperature))

    def __repr__(self) -> str:
        return f"BlackBodySED(temperature={self.temperature:g})"


class TabulatedSED(SED):
    """SED given as a table, linearly interpolated, zero outside the table."""

    def __init__(self, wavelengths, values):
        wavelengths = np.asarray(wavelengths, dtype=np.float64)
        values = np.asarray(values, dtype=np.float64)
        if wavelengths.ndim != 1 or wavelengths.shape != values.shape or len(wavelengths) < 2:
            raise ConfigurationError("SED table needs two matching 1D columns with at least 2 rows")
        if np.any(np.diff(wavelengths) <= 0):
            raise ConfigurationError("SED table wavelengths must be strictly increasing")
        if np.any(values < 0):
            raise ConfigurationError("SED table values must be non-negative")
        self.wavelengths = wavelengths
        self.values = values

    def specific_luminosity(self, wavelengths: np.ndarray) -> np.ndarray:
        return np.interp(wavelengths, self.wavelengths, self.values, left=0.0, right=0.0)

    def grid(self, wavelength_range: "WavelengthRange", num_points: int) -> np.ndarray:
        # Include the table points so that sharp features are not smoothed away
        inside = (self.wavelengths > wavelength_range.min) & (self.wavelengths < wavelength_range.max)
        return np.union1d(super().grid(wavelength_range, num_points), self.wavelengths[inside])
