"""
Circular Kernels
================

Smoothing kernels defined on the circle, plus the wrap-aware distance they
are built on.

Both kernels depend on the angular difference only through the circular
distance d = min(|a - b|, 2π - |a - b|), so a kernel centred just after
midnight puts the same weight just before midnight as a kernel centred at
noon puts either side of noon.

Kernels:
    vonmises:        exp(κ cos d) / (2π I0(κ))
    wrapped_normal:  Σ_k φ(d + 2πk; σ), σ² = -2 ln(I1(κ) / I0(κ))

The wrapped normal is matched to the von Mises kernel of the same κ by
equal mean resultant length.

Reference:
    Mardia, K.V. & Jupp, P.E. (2000). Directional Statistics.
"""

import math
from typing import Callable, Dict

import numpy as np
from scipy.special import i0e, i1e

from diel_overlap.errors import InvalidParameterError
from diel_overlap.timing.normalizer import TWO_PI


# Upper bound on wrap terms for very flat wrapped normal kernels
MAX_WRAP_TERMS = 50


def circular_distance(a, b) -> np.ndarray:
    """
    Shortest arc length between angles a and b (broadcasting).

    Returns:
        Distance in [0, π]
    """
    diff = np.abs(np.mod(a, TWO_PI) - np.mod(b, TWO_PI))
    return np.minimum(diff, TWO_PI - diff)


def vonmises_kernel(distance: np.ndarray, kappa: float) -> np.ndarray:
    """
    Von Mises kernel evaluated at circular distances.

    Uses the exponentially scaled Bessel function so large κ does not
    overflow: exp(κ(cos d - 1)) / (2π I0e(κ)) == exp(κ cos d) / (2π I0(κ)).
    """
    return np.exp(kappa * (np.cos(distance) - 1.0)) / (TWO_PI * i0e(kappa))


def wrapped_normal_sigma(kappa: float) -> float:
    """Standard deviation of the wrapped normal matched to a von Mises κ."""
    resultant = i1e(kappa) / i0e(kappa)
    if resultant <= 0.0:
        return math.inf
    return math.sqrt(-2.0 * math.log(resultant))


def wrapped_normal_kernel(distance: np.ndarray, kappa: float) -> np.ndarray:
    """Wrapped normal kernel evaluated at circular distances."""
    sigma = wrapped_normal_sigma(kappa)
    if not math.isfinite(sigma) or sigma <= 0.0:
        return np.full_like(np.asarray(distance, dtype=float), 1.0 / TWO_PI)

    terms = min(int(math.ceil(8.0 * sigma / TWO_PI)) + 1, MAX_WRAP_TERMS)
    distance = np.asarray(distance, dtype=float)
    total = np.zeros_like(distance)
    for k in range(-terms, terms + 1):
        shifted = distance + TWO_PI * k
        total += np.exp(-0.5 * (shifted / sigma) ** 2)
    return total / (sigma * math.sqrt(TWO_PI))


KERNELS: Dict[str, Callable[[np.ndarray, float], np.ndarray]] = {
    "vonmises": vonmises_kernel,
    "wrapped_normal": wrapped_normal_kernel,
}


def get_kernel(name: str) -> Callable[[np.ndarray, float], np.ndarray]:
    """Look up a kernel by name."""
    try:
        return KERNELS[name]
    except KeyError:
        raise InvalidParameterError(
            f"Unknown kernel '{name}', expected one of {sorted(KERNELS)}"
        ) from None
