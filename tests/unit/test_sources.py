"""Unit tests for SEDs and point sources."""

import numpy as np
import pytest

from launchsim.core import PhotonPacket, WavelengthRange
from launchsim.errors import ConfigurationError
from launchsim.sources import BlackBodySED, PointSource, TabulatedSED


class TestBlackBodySED:
    """Tests for the Planck spectrum."""

    def test_invalid_temperature(self):
        with pytest.raises(ConfigurationError):
            BlackBodySED(0.0)

    @pytest.mark.parametrize("temperature", [float("nan"), float("inf")])
    def test_non_finite_temperature(self, temperature):
        with pytest.raises(ConfigurationError):
            BlackBodySED(temperature)

    def test_wien_peak(self):
        sed = BlackBodySED(5800.0)
        lam = np.geomspace(1e-7, 1e-5, 4000)
        peak = lam[np.argmax(sed.specific_luminosity(lam))]
        assert peak == pytest.approx(2.8978e-3 / 5800.0, rel=0.01)

    def test_short_wavelengths_do_not_overflow(self):
        values = BlackBodySED(100.0).specific_luminosity(np.array([1e-10, 1e-9]))
        assert np.all(np.isfinite(values))
        assert np.all(values == 0.0)

    def test_cdf_is_normalized_and_monotone(self, wavelength_range):
        cdf = BlackBodySED(5800.0).cdf(wavelength_range)

        assert cdf.cumulative[0] == 0.0
        assert cdf.cumulative[-1] == pytest.approx(1.0)
        assert np.all(np.diff(cdf.cumulative) >= 0)
        assert cdf.wavelengths[0] == pytest.approx(wavelength_range.min)
        assert cdf.wavelengths[-1] == pytest.approx(wavelength_range.max)

    def test_hotter_is_bluer(self, wavelength_range):
        cool = BlackBodySED(3000.0).cdf(wavelength_range)
        hot = BlackBodySED(20000.0).cdf(wavelength_range)
        assert hot.sample(0.5) < cool.sample(0.5)

    def test_cdf_compares_by_identity(self, wavelength_range):
        """CDFs hold arrays, so equality is identity and they stay hashable."""
        sed = BlackBodySED(5000.0)
        a = sed.cdf(wavelength_range)
        b = sed.cdf(wavelength_range)

        assert a == a
        assert a != b
        assert len({a, b}) == 2


class TestTabulatedSED:
    """Tests for tabulated spectra."""

    def test_zero_outside_table(self):
        sed = TabulatedSED([1e-6, 2e-6], [1.0, 1.0])
        values = sed.specific_luminosity(np.array([0.5e-6, 1.5e-6, 3e-6]))
        assert values.tolist() == [0.0, 1.0, 0.0]

    def test_samples_stay_inside_support(self, wavelength_range):
        sed = TabulatedSED([1e-6, 1.5e-6, 2e-6], [0.0, 1.0, 0.0])
        cdf = sed.cdf(wavelength_range)
        rng = np.random.default_rng(seed=5)

        samples = np.array([cdf.sample(u) for u in rng.random(500)])
        assert np.all(samples >= 1e-6)
        assert np.all(samples <= 2e-6)

    def test_no_emission_in_range_is_log_uniform(self):
        sed = TabulatedSED([1e-3, 2e-3], [1.0, 1.0])
        cdf = sed.cdf(WavelengthRange(1e-7, 1e-5))

        assert cdf.cumulative[-1] == pytest.approx(1.0)
        assert cdf.sample(0.5) == pytest.approx(1e-6, rel=1e-3)

    @pytest.mark.parametrize(
        "wavelengths, values",
        [
            ([1e-6], [1.0]),
            ([2e-6, 1e-6], [1.0, 1.0]),
            ([1e-6, 2e-6], [1.0, -1.0]),
            ([1e-6, 2e-6, 3e-6], [1.0, 1.0]),
        ],
    )
    def test_invalid_tables(self, wavelengths, values):
        with pytest.raises(ConfigurationError):
            TabulatedSED(wavelengths, values)


class TestPointSource:
    """Tests for PointSource."""

    @pytest.mark.parametrize(
        "position, dim",
        [((0.0, 0.0, 0.0), 1), ((0.0, 0.0, 5.0), 2), ((1.0, 0.0, 0.0), 3)],
    )
    def test_dimension(self, position, dim):
        source = PointSource(1.0, BlackBodySED(5000.0), position=position)
        assert source.dimension() == dim

    def test_luminosity(self):
        assert PointSource(12.5, BlackBodySED(5000.0)).luminosity() == 12.5

    def test_negative_luminosity_rejected(self):
        with pytest.raises(ConfigurationError):
            PointSource(-1.0, BlackBodySED(5000.0))

    @pytest.mark.parametrize("luminosity", [float("nan"), float("inf")])
    def test_non_finite_luminosity_rejected(self, luminosity):
        with pytest.raises(ConfigurationError):
            PointSource(luminosity, BlackBodySED(5000.0))

    def test_bad_position_rejected(self):
        with pytest.raises(ConfigurationError):
            PointSource(1.0, BlackBodySED(5000.0), position=(1.0, 2.0))

    def test_launch(self, wavelength_range):
        source = PointSource(1.0, BlackBodySED(5000.0), position=(1.0, 2.0, 3.0))
        source.setup(wavelength_range)
        pp = PhotonPacket()

        source.launch(pp, 0, 0.25, np.random.default_rng(seed=0))

        assert pp.luminosity == 0.25
        assert pp.position.tolist() == [1.0, 2.0, 3.0]
        assert np.linalg.norm(pp.direction) == pytest.approx(1.0)
        assert wavelength_range.contains(pp.wavelength)
        assert pp.stokes.tolist() == [1.0, 0.0, 0.0, 0.0]

    def test_launch_is_isotropic(self, wavelength_range):
        source = PointSource(1.0, BlackBodySED(5000.0))
        source.setup(wavelength_range)
        pp = PhotonPacket()
        rng = np.random.default_rng(seed=1)

        directions = []
        for _ in range(4000):
            source.launch(pp, 0, 1.0, rng)
            directions.append(pp.direction.copy())
        mean = np.mean(directions, axis=0)
        assert np.all(np.abs(mean) < 0.05)
