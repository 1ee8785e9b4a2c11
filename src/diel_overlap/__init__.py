"""
diel_overlap
============

Daily activity patterns and temporal overlap of species from camera-trap
detections.

Detection times are mapped onto the circle (midnight = 0, noon = π), smoothed
into per-species activity densities with circular kernels, tested for
non-uniformity and compared pairwise with the overlap coefficient and a
bootstrap confidence interval.

Components:
    - timing: Clock time to circular angle
    - density: Circular kernel density estimation
    - overlap: Overlap coefficient and bootstrap intervals
    - stats: Circular moments and the Rayleigh test
    - loader: CSV loading and per-species grouping
    - analysis: End-to-end activity analysis
    - observability: matplotlib figures

Example:
    from diel_overlap.models import Sample
    from diel_overlap.density import estimate
    from diel_overlap.overlap import overlap, bootstrap_ci

    deer = Sample.from_times("roe deer", ["06:00:00", "06:15:00", "05:45:00"])
    boar = Sample.from_times("wild boar", ["18:00:00", "18:10:00", "17:50:00"])

    print(overlap(estimate(deer), estimate(boar)))
    print(bootstrap_ci(deer, boar, bandwidth=1.0, n_resamples=500, seed=1))
"""

__version__ = "0.1.0"
__author__ = "diel_overlap contributors"

__all__ = [
    "__version__",
]
