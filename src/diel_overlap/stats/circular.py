"""
Circular Moments
================

First-moment summaries of angles on the circle.

Formulas:
    C = mean(cos θ),  S = mean(sin θ)
    R̄ = sqrt(C² + S²)             mean resultant length, in [0, 1]
    mean direction = atan2(S, C)   reported in [0, 2π)
    circular variance = 1 - R̄

Reference:
    Fisher, N.I. (1993). Statistical Analysis of Circular Data.
"""

from typing import Tuple

import numpy as np

from diel_overlap.errors import EmptySampleError
from diel_overlap.timing.normalizer import TWO_PI


def _components(angles: np.ndarray) -> Tuple[float, float]:
    angles = np.asarray(angles, dtype=float)
    if angles.size == 0:
        raise EmptySampleError("Circular moments of an empty sample")
    return float(np.mean(np.cos(angles))), float(np.mean(np.sin(angles)))


def mean_resultant_length(angles: np.ndarray) -> float:
    """R̄ = |mean(e^{iθ})|, in [0, 1]."""
    cos_mean, sin_mean = _components(angles)
    return float(min(1.0, np.hypot(cos_mean, sin_mean)))


def mean_direction(angles: np.ndarray) -> float:
    """Circular mean in [0, 2π)."""
    cos_mean, sin_mean = _components(angles)
    direction = float(np.arctan2(sin_mean, cos_mean) % TWO_PI)
    return 0.0 if direction >= TWO_PI else direction


def circular_variance(angles: np.ndarray) -> float:
    """1 - R̄: 0 = all angles equal, 1 = balanced around the circle."""
    return 1.0 - mean_resultant_length(angles)
