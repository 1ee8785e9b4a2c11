"""
Bootstrap Confidence Intervals
==============================

Bootstrap resampling of the overlap coefficient.

Each replicate draws a resample of the same size, with replacement, from
each of the two samples independently, re-estimates both densities (the
kernel concentration is refitted on the resample) and recomputes the
overlap. Interval bounds come from the distribution of replicates.

Interval methods:
    percentile: [q(α/2), q(1 - α/2)]
    basic:      [2Δ̂ - q(1 - α/2), 2Δ̂ - q(α/2)]
    normal:     Δ̂ ± z(1 - α/2) · sd(replicates)

All bounds are clipped to [0, 1].

Reproducibility:
    Replicates are drawn in fixed-size chunks. Every chunk gets its own
    generator spawned from one numpy SeedSequence, and chunk results are
    concatenated in chunk order. With a seed the bounds are identical for
    any number of workers. Without a seed they vary from run to run.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from numbers import Integral
from typing import List, Optional, Tuple

import numpy as np
from scipy.stats import norm

from diel_overlap.density.estimator import CircularDensityEstimator
from diel_overlap.errors import EmptySampleError, InvalidParameterError
from diel_overlap.models.overlap import OverlapResult
from diel_overlap.models.sample import Sample
from diel_overlap.overlap.estimators import estimate_overlap, resolve_estimator


logger = logging.getLogger(__name__)

CI_METHODS = ("percentile", "basic", "normal")

# Replicates per chunk; fixed so seeded output does not depend on n_workers
CHUNK_SIZE = 50


def _check_inputs(sample_a: Sample, sample_b: Sample, n_resamples: int) -> None:
    for sample in (sample_a, sample_b):
        if sample.is_empty:
            raise EmptySampleError(f"Sample '{sample.label}' is empty")
    if isinstance(n_resamples, bool) or not isinstance(n_resamples, Integral) or n_resamples < 1:
        raise InvalidParameterError(f"n_resamples must be an integer >= 1, got {n_resamples!r}")


def _check_interval_options(confidence: float, ci_method: str) -> None:
    if not 0.0 < confidence < 1.0:
        raise InvalidParameterError(f"confidence must be in (0, 1), got {confidence!r}")
    if ci_method not in CI_METHODS:
        raise InvalidParameterError(
            f"Unknown CI method '{ci_method}', expected one of {list(CI_METHODS)}"
        )


def bootstrap_overlaps(
    sample_a: Sample,
    sample_b: Sample,
    estimator: Optional[CircularDensityEstimator] = None,
    n_resamples: int = 1000,
    method: str = "dhat1",
    seed: Optional[int] = None,
    n_workers: int = 1,
) -> np.ndarray:
    """
    Overlap estimates for n_resamples paired bootstrap resamples.

    Args:
        sample_a: First sample
        sample_b: Second sample
        estimator: Density estimator used for every replicate
        n_resamples: Number of replicates (>= 1)
        method: Overlap estimator name ("auto" is resolved on the original sizes)
        seed: Seed for the resampling RNG, None for fresh entropy
        n_workers: Threads used to run chunks of replicates

    Returns:
        Array of n_resamples overlap values in [0, 1]

    Raises:
        EmptySampleError: If either sample is empty
        InvalidParameterError: If n_resamples < 1 or n_workers < 1
    """
    _check_inputs(sample_a, sample_b, n_resamples)
    if n_workers < 1:
        raise InvalidParameterError(f"n_workers must be >= 1, got {n_workers!r}")
    if estimator is None:
        estimator = CircularDensityEstimator()

    resolved = resolve_estimator(method, len(sample_a), len(sample_b))
    n_chunks = math.ceil(n_resamples / CHUNK_SIZE)
    sizes = [CHUNK_SIZE] * (n_chunks - 1) + [n_resamples - CHUNK_SIZE * (n_chunks - 1)]
    children = np.random.SeedSequence(seed).spawn(n_chunks)

    def run_chunk(args: Tuple[np.random.SeedSequence, int]) -> List[float]:
        child, size = args
        rng = np.random.default_rng(child)
        values = []
        for _ in range(size):
            resample_a = sample_a.resample(rng)
            resample_b = sample_b.resample(rng)
            values.append(estimate_overlap(resample_a, resample_b, estimator, resolved))
        return values

    chunks = list(zip(children, sizes))
    if n_workers == 1 or n_chunks == 1:
        results = [run_chunk(chunk) for chunk in chunks]
    else:
        with ThreadPoolExecutor(max_workers=n_workers) as pool:
            results = list(pool.map(run_chunk, chunks))

    replicates = np.concatenate([np.asarray(r, dtype=float) for r in results])
    logger.debug(
        f"Bootstrap {sample_a.label} vs {sample_b.label}: "
        f"{replicates.size} replicates, mean={replicates.mean():.4f}"
    )
    return replicates


def confidence_interval(
    point_estimate: float,
    replicates: np.ndarray,
    confidence: float = 0.95,
    method: str = "percentile",
) -> Tuple[float, float]:
    """
    Confidence interval from bootstrap replicates.

    Args:
        point_estimate: Overlap estimated on the original samples
        replicates: Bootstrap overlap values
        confidence: Confidence level in (0, 1)
        method: "percentile", "basic" or "normal"

    Returns:
        (low, high) with 0 <= low <= high <= 1
    """
    _check_interval_options(confidence, method)
    replicates = np.asarray(replicates, dtype=float)
    if replicates.size == 0:
        raise InvalidParameterError("No bootstrap replicates")

    alpha = 1.0 - confidence
    q_low, q_high = np.quantile(replicates, [alpha / 2, 1 - alpha / 2])

    if method == "percentile":
        low, high = q_low, q_high
    elif method == "basic":
        low, high = 2 * point_estimate - q_high, 2 * point_estimate - q_low
    else:
        ddof = 1 if replicates.size > 1 else 0
        half_width = norm.ppf(1 - alpha / 2) * replicates.std(ddof=ddof)
        low, high = point_estimate - half_width, point_estimate + half_width

    low = float(np.clip(low, 0.0, 1.0))
    high = float(np.clip(high, 0.0, 1.0))
    return min(low, high), max(low, high)


def bootstrap_ci(
    sample_a: Sample,
    sample_b: Sample,
    bandwidth: float = 1.0,
    n_resamples: int = 1000,
    confidence: float = 0.95,
    seed: Optional[int] = None,
    grid_size: int = 512,
    method: str = "dhat1",
    ci_method: str = "percentile",
    n_workers: int = 1,
) -> Tuple[float, float]:
    """
    Bootstrap confidence interval of the overlap between two samples.

    Returns:
        (low, high) in [0, 1]

    Raises:
        EmptySampleError: If either sample is empty
        InvalidParameterError: On invalid bandwidth, resample count or method
    """
    _check_inputs(sample_a, sample_b, n_resamples)
    _check_interval_options(confidence, ci_method)
    estimator = CircularDensityEstimator(bandwidth=bandwidth, grid_size=grid_size)
    replicates = bootstrap_overlaps(
        sample_a, sample_b, estimator, n_resamples, method, seed, n_workers,
    )
    point = estimate_overlap(sample_a, sample_b, estimator, method)
    return confidence_interval(point, replicates, confidence, ci_method)


def compare(
    sample_a: Sample,
    sample_b: Sample,
    estimator: Optional[CircularDensityEstimator] = None,
    n_resamples: int = 1000,
    confidence: float = 0.95,
    method: str = "dhat1",
    ci_method: str = "percentile",
    seed: Optional[int] = None,
    n_workers: int = 1,
) -> OverlapResult:
    """
    Overlap point estimate and bootstrap interval for two samples.

    Returns:
        OverlapResult with estimate, interval and run metadata
    """
    _check_inputs(sample_a, sample_b, n_resamples)
    _check_interval_options(confidence, ci_method)
    if estimator is None:
        estimator = CircularDensityEstimator()

    resolved = resolve_estimator(method, len(sample_a), len(sample_b))
    point = estimate_overlap(sample_a, sample_b, estimator, resolved)
    replicates = bootstrap_overlaps(
        sample_a, sample_b, estimator, n_resamples, resolved, seed, n_workers,
    )
    low, high = confidence_interval(point, replicates, confidence, ci_method)

    if seed is None:
        logger.debug("Unseeded bootstrap: interval bounds will vary between runs")
    logger.info(
        f"Overlap {sample_a.label} vs {sample_b.label}: {point:.4f} "
        f"[{low:.4f}, {high:.4f}] ({resolved}, {ci_method}, B={n_resamples})"
    )

    return OverlapResult(
        species_a=sample_a.label,
        species_b=sample_b.label,
        n_a=len(sample_a),
        n_b=len(sample_b),
        overlap=point,
        ci_low=low,
        ci_high=high,
        estimator=resolved,
        ci_method=ci_method,
        confidence=confidence,
        n_resamples=n_resamples,
        seed=seed,
    )
