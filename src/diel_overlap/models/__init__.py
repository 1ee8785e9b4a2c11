"""
Data Models
===========

Data models for diel_overlap.

This module re-exports all data models for convenient access.

Models:
    Input:
        - Observation: One species detection with a timestamp

    Pipeline:
        - Sample: Angles of one species
        - DensityCurve: Tabulated circular density
        - RayleighResult: Uniformity test outcome

    Output:
        - OverlapResult: Overlap coefficient with confidence interval
        - SpeciesActivity: Per-species summary
        - ActivityReport: Complete analysis report
"""

from diel_overlap.models.observation import Observation
from diel_overlap.models.sample import Sample
from diel_overlap.models.density import DensityCurve
from diel_overlap.models.overlap import OverlapResult
from diel_overlap.models.activity import ActivityReport, RayleighResult, SpeciesActivity

__all__ = [
    # Input
    "Observation",
    # Pipeline
    "Sample",
    "DensityCurve",
    "RayleighResult",
    # Output
    "OverlapResult",
    "SpeciesActivity",
    "ActivityReport",
]
