"""Unit tests for launch plots."""

from matplotlib.figure import Figure

from launchsim.core import build_launch_plan, run_emission_segment
from launchsim.viz import plot_emission_spectrum, plot_launch_plan, save_figure


class TestPlotLaunchPlan:
    """Tests for the launch plan bar chart."""

    def test_returns_figure(self):
        plan = build_launch_plan([30.0, 10.0], [1.0, 1.0], 0.5, 1000)
        fig, ax = plot_launch_plan(plan, labels=["A", "B"])

        assert isinstance(fig, Figure)
        assert [p.get_height() for p in ax.patches] == [625, 375]
        assert "N = 1000" in ax.get_title()


class TestPlotEmissionSpectrum:
    """Tests for the emitted spectrum histogram."""

    def test_histogram_carries_luminosity(self, two_star_system):
        record = run_emission_segment(two_star_system, 500)
        fig, ax = plot_emission_spectrum(record, bins=20)

        total = sum(p.get_height() for p in ax.patches)
        assert abs(total - two_star_system.luminosity()) < 1e-6 * two_star_system.luminosity()
        assert ax.get_xscale() == "log"

    def test_empty_record(self, two_star_system):
        record = run_emission_segment(two_star_system, 0)
        fig, ax = plot_emission_spectrum(record)
        assert len(ax.patches) == 0


def test_save_figure(tmp_path):
    plan = build_launch_plan([1.0], [1.0], 0.5, 10)
    fig, _ = plot_launch_plan(plan)
    path = tmp_path / "plan.png"
    save_figure(fig, path)
    assert path.exists()
