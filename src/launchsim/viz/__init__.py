"""
Visualization utilities.

- Launch plan bar charts
- Emitted spectra
"""

from launchsim.viz.launch import (
    plot_launch_plan,
    plot_emission_spectrum,
    save_figure,
)

__all__ = [
    "plot_launch_plan",
    "plot_emission_spectrum",
    "save_figure",
]
