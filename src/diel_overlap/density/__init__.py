"""
Density Module
==============

Kernel density estimation on the circle.

This module provides:
    - Wrap-aware circular distance and kernels (von Mises, wrapped normal)
    - Rule-of-thumb kernel concentration (Taylor 2008)
    - CircularDensityEstimator producing DensityCurve tables
"""

from diel_overlap.density.kernels import (
    KERNELS,
    circular_distance,
    vonmises_kernel,
    wrapped_normal_kernel,
)
from diel_overlap.density.bandwidth import (
    estimate_vonmises_kappa,
    reference_kappa,
)
from diel_overlap.density.estimator import (
    CircularDensityEstimator,
    estimate,
    make_grid,
)

__all__ = [
    # Kernels
    "KERNELS",
    "circular_distance",
    "vonmises_kernel",
    "wrapped_normal_kernel",
    # Bandwidth
    "estimate_vonmises_kappa",
    "reference_kappa",
    # Estimation
    "CircularDensityEstimator",
    "estimate",
    "make_grid",
]
