"""
Rayleigh Test
=============

Test of circular uniformity against a unimodal alternative.

    H0: activity is spread uniformly over the 24 hours
    H1: activity is concentrated around one mean time

Statistic and p-value:
    z = n R̄²
    p = exp(-z) · [1 + (2z - z²) / (4n) - (24z - 132z² + 76z³ - 9z⁴) / (288n²)]

The bracketed correction is applied for n < 50; for larger samples
p = exp(-z). Small p-values reject uniformity.

References:
    Wilkie, D. (1983). Rayleigh test for randomness of circular data.
    Applied Statistics 32, 311-312.
    Jammalamadaka, S.R. & SenGupta, A. (2001). Topics in Circular Statistics.
"""

import logging

import numpy as np

from diel_overlap.errors import EmptySampleError
from diel_overlap.models.activity import RayleighResult
from diel_overlap.models.sample import Sample
from diel_overlap.stats.circular import mean_direction, mean_resultant_length


logger = logging.getLogger(__name__)

# Below this size the small-sample correction is applied
SMALL_SAMPLE_N = 50


def rayleigh_p_value(z: float, n: int) -> float:
    """p-value of the Rayleigh statistic z for a sample of size n."""
    correction = 1.0
    if n < SMALL_SAMPLE_N:
        correction = (
            1.0
            + (2.0 * z - z * z) / (4.0 * n)
            - (24.0 * z - 132.0 * z**2 + 76.0 * z**3 - 9.0 * z**4) / (288.0 * n * n)
        )
    return float(np.clip(np.exp(-z) * correction, 0.0, 1.0))


def rayleigh_test(sample: Sample) -> RayleighResult:
    """
    Rayleigh test of uniformity for one sample.

    Args:
        sample: Non-empty sample of angles

    Returns:
        RayleighResult with R̄, mean direction, z and p-value

    Raises:
        EmptySampleError: If the sample has no observations
    """
    if sample.is_empty:
        raise EmptySampleError(f"Sample '{sample.label}' is empty")

    n = len(sample)
    r_bar = mean_resultant_length(sample.angles)
    z = n * r_bar * r_bar
    result = RayleighResult(
        n=n,
        mean_angle=mean_direction(sample.angles),
        mean_resultant_length=r_bar,
        z=z,
        p_value=rayleigh_p_value(z, n),
    )
    logger.debug(f"Rayleigh test for '{sample.label}': {result!r}")
    return result
