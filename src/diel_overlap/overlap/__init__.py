"""
Overlap Module
==============

Temporal overlap between two activity patterns.

This module provides:
    - Overlap coefficient of two density curves (dhat1)
    - Sample-point estimators dhat4 and dhat5
    - Bootstrap replicates and confidence intervals
"""

from diel_overlap.overlap.estimators import (
    ESTIMATORS,
    estimate_overlap,
    overlap,
    resolve_estimator,
)
from diel_overlap.overlap.bootstrap import (
    CI_METHODS,
    bootstrap_ci,
    bootstrap_overlaps,
    compare,
    confidence_interval,
)

__all__ = [
    "ESTIMATORS",
    "CI_METHODS",
    "overlap",
    "estimate_overlap",
    "resolve_estimator",
    "bootstrap_overlaps",
    "bootstrap_ci",
    "confidence_interval",
    "compare",
]
