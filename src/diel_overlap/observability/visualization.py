"""
Visualization Module
====================

matplotlib renderers for activity densities, overlaps and rose diagrams.

Figures:
    - Density plot: one or more activity curves over 0-24 h
    - Overlap plot: two curves with the shared area (pointwise minimum) shaded
    - Rose diagram: polar histogram of detection times, midnight at the top,
      running clockwise

Figures are built on matplotlib.figure.Figure directly, never through the
pyplot state machine, so rendering works headless and leaves no global
figure state behind. Every function accepts an existing Axes to draw into.

PURELY DESCRIPTIVE. Nothing here feeds back into the estimates.
"""

import logging
from itertools import combinations
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from diel_overlap.models.activity import ActivityReport
from diel_overlap.models.density import DensityCurve
from diel_overlap.models.overlap import OverlapResult
from diel_overlap.models.sample import Sample
from diel_overlap.timing.normalizer import HOURS_PER_DAY, TWO_PI


logger = logging.getLogger(__name__)

HOUR_TICKS = [0, 3, 6, 9, 12, 15, 18, 21, 24]

# Radians -> hours, and density per radian -> density per hour
_HOUR_SCALE = HOURS_PER_DAY / TWO_PI


def _new_axes(polar: bool = False, figsize=(8, 4.5)) -> Axes:
    fig = Figure(figsize=figsize)
    if polar:
        return fig.add_subplot(projection="polar")
    return fig.add_subplot()


def _hours_curve(curve: DensityCurve):
    grid, density = curve.closed()
    return grid * _HOUR_SCALE, density / _HOUR_SCALE


def _format_hour_axis(ax: Axes) -> None:
    ax.set_xlim(0, HOURS_PER_DAY)
    ax.set_xticks(HOUR_TICKS)
    ax.set_xticklabels([f"{h:02d}:00" for h in HOUR_TICKS])
    ax.set_xlabel("Time of day")
    ax.set_ylabel("Density")
    ax.grid(True, alpha=0.3)


def plot_density(
    curves: Sequence[DensityCurve],
    ax: Optional[Axes] = None,
) -> Axes:
    """
    Plot activity density curves against time of day.

    Args:
        curves: Curves to draw
        ax: Axes to draw into (a new figure is created when None)

    Returns:
        The Axes drawn into
    """
    if ax is None:
        ax = _new_axes()
    for curve in curves:
        hours, density = _hours_curve(curve)
        ax.plot(hours, density, linewidth=2, label=f"{curve.label} (n={curve.n})")
    _format_hour_axis(ax)
    ax.set_ylim(bottom=0)
    if curves:
        ax.legend(loc="upper right")
    return ax


def plot_overlap(
    curve_a: DensityCurve,
    curve_b: DensityCurve,
    result: Optional[OverlapResult] = None,
    ax: Optional[Axes] = None,
) -> Axes:
    """
    Plot two activity curves with their overlap shaded.

    Args:
        curve_a: First curve
        curve_b: Second curve on the same grid
        result: Optional overlap result shown in the title
        ax: Axes to draw into

    Returns:
        The Axes drawn into
    """
    ax = plot_density([curve_a, curve_b], ax=ax)
    hours, density_a = _hours_curve(curve_a)
    _, density_b = _hours_curve(curve_b)
    ax.fill_between(
        hours,
        np.minimum(density_a, density_b),
        color="grey",
        alpha=0.4,
        label="Overlap",
    )
    ax.legend(loc="upper right")

    title = f"{curve_a.label} vs {curve_b.label}"
    if result is not None:
        title += (
            f": Δ = {result.overlap:.2f} "
            f"[{result.ci_low:.2f}, {result.ci_high:.2f}]"
        )
    ax.set_title(title)
    return ax


def plot_rose(
    sample: Sample,
    bins: int = 24,
    ax: Optional[Axes] = None,
) -> Axes:
    """
    Polar histogram of detection times.

    Args:
        sample: Sample to plot
        bins: Number of equal sectors over 24 hours
        ax: Polar Axes to draw into

    Returns:
        The Axes drawn into
    """
    if ax is None:
        ax = _new_axes(polar=True, figsize=(5, 5))

    counts, edges = np.histogram(sample.angles, bins=bins, range=(0.0, TWO_PI))
    width = TWO_PI / bins
    ax.bar(edges[:-1], counts, width=width, align="edge", edgecolor="black", alpha=0.7)

    ax.set_theta_zero_location("N")
    ax.set_theta_direction(-1)
    tick_angles = np.array(HOUR_TICKS[:-1]) / _HOUR_SCALE
    ax.set_xticks(tick_angles)
    ax.set_xticklabels([f"{h:02d}" for h in HOUR_TICKS[:-1]])
    ax.set_title(f"{sample.label} (n={len(sample)})")
    return ax


def save_figure(fig: Figure, path: Union[str, Path], dpi: int = 150) -> Path:
    """Write a figure to an explicit path, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi)
    logger.debug(f"Saved figure: {path}")
    return path


def _slug(label: str) -> str:
    return "".join(c if c.isalnum() else "_" for c in label.strip().lower())


def _file_slugs(labels: Sequence[str]) -> Dict[str, str]:
    """One distinct file slug per label; later collisions get _2, _3, ..."""
    slugs: Dict[str, str] = {}
    taken = set()
    for label in labels:
        base = slug = _slug(label)
        suffix = 2
        while slug in taken:
            slug = f"{base}_{suffix}"
            suffix += 1
        taken.add(slug)
        slugs[label] = slug
    return slugs


def render_report(
    samples: Dict[str, Sample],
    curves: Dict[str, DensityCurve],
    report: ActivityReport,
    output_dir: Union[str, Path],
    dpi: int = 150,
) -> List[Path]:
    """
    Write the standard figure set for a report.

    One rose diagram per analysed species, one density plot with all species
    and one overlap plot per pair. Labels that reduce to the same file name
    ("roe deer", "roe-deer") are told apart by a numeric suffix.

    Returns:
        Paths of the written files
    """
    output_dir = Path(output_dir)
    written = []
    analysed = [s.species for s in report.species]
    slugs = _file_slugs(analysed)

    for label in analysed:
        ax = plot_rose(samples[label])
        written.append(save_figure(ax.figure, output_dir / f"rose_{slugs[label]}.png", dpi))

    ax = plot_density([curves[label] for label in analysed])
    written.append(save_figure(ax.figure, output_dir / "activity_density.png", dpi))

    for label_a, label_b in combinations(analysed, 2):
        ax = plot_overlap(
            curves[label_a],
            curves[label_b],
            result=report.overlap_for(label_a, label_b),
        )
        name = f"overlap_{slugs[label_a]}__{slugs[label_b]}.png"
        written.append(save_figure(ax.figure, output_dir / name, dpi))

    logger.info(f"Wrote {len(written)} figure(s) to {output_dir}")
    return written
