"""
Plots of launch plans and emitted spectra.

- Launch plan: packets allocated to each source
- Emission spectrum: luminosity-weighted wavelength histogram of a segment

All plots use matplotlib and return (fig, ax) for further styling.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes

if TYPE_CHECKING:
    from launchsim.core.launch_plan import LaunchPlan
    from launchsim.core.emission import EmissionRecord


COLOR_PACKETS = (0.192, 0.407, 0.556)   # Blue
COLOR_SPECTRUM = (0.855, 0.345, 0.114)  # Orange-red


def _get_axes(ax: Axes | None, figsize: tuple[float, float]) -> tuple[Figure, Axes]:
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure
    return fig, ax


def plot_launch_plan(
    plan: "LaunchPlan",
    labels: Sequence[str] | None = None,
    title: str = "Packets per source",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 5),
) -> tuple[Figure, Axes]:
    """
    Bar chart of the number of packets allocated to each source.

    Args:
        plan: Launch plan to show
        labels: Source labels (defaults to source indices)
        title: Plot title
        ax: Existing axes to plot on (creates new figure if None)
        figsize: Figure size if creating new figure

    Returns:
        (fig, ax) tuple
    """
    fig, ax = _get_axes(ax, figsize)
    counts = plan.counts()
    if labels is None:
        labels = [str(s) for s in range(len(counts))]

    bars = ax.bar(labels, counts, color=COLOR_PACKETS)
    ax.bar_label(bars, labels=[f"{c:d}" for c in counts])

    ax.set_xlabel("Source")
    ax.set_ylabel("Packets")
    ax.set_title(f"{title} (N = {plan.num_packets})")
    return fig, ax


def plot_emission_spectrum(
    record: "EmissionRecord",
    bins: int = 50,
    title: str = "Emitted spectrum",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 5),
) -> tuple[Figure, Axes]:
    """
    Luminosity-weighted histogram of launched wavelengths, on logarithmic bins.

    Returns:
        (fig, ax) tuple
    """
    fig, ax = _get_axes(ax, figsize)
    wavelengths = record.wavelength[record.source_index >= 0]
    weights = record.luminosity[record.source_index >= 0]

    if len(wavelengths) > 0:
        edges = np.geomspace(wavelengths.min(), wavelengths.max() * (1 + 1e-9), bins + 1)
        ax.hist(wavelengths * 1e6, bins=edges * 1e6, weights=weights, color=COLOR_SPECTRUM)
        ax.set_xscale("log")

    ax.set_xlabel("Wavelength (μm)")
    ax.set_ylabel("Luminosity per bin (W)")
    ax.set_title(title)
    return fig, ax


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
