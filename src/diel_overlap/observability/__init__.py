"""
Observability Module
====================

Figures for inspecting activity patterns.

This module provides:
    - plot_density / plot_overlap: curves over 0-24 h
    - plot_rose: polar histogram of detection times
    - render_report: standard figure set for an ActivityReport

DESIGN RULES:
    - Does NOT influence estimates
    - Writes only to explicit paths
"""

from diel_overlap.observability.visualization import (
    plot_density,
    plot_overlap,
    plot_rose,
    render_report,
    save_figure,
)


__all__ = [
    "plot_density",
    "plot_overlap",
    "plot_rose",
    "render_report",
    "save_figure",
]
