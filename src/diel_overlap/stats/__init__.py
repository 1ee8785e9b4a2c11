"""
Statistics Module
=================

Circular summary statistics and the Rayleigh test of uniformity.
"""

from diel_overlap.stats.circular import (
    circular_variance,
    mean_direction,
    mean_resultant_length,
)
from diel_overlap.stats.rayleigh import rayleigh_p_value, rayleigh_test

__all__ = [
    "mean_resultant_length",
    "mean_direction",
    "circular_variance",
    "rayleigh_test",
    "rayleigh_p_value",
]
