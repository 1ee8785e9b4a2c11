"""
Activity Analysis
=================

Runs the full activity pipeline over a set of observations.

This analyzer:
    - Groups observations into one Sample per species
    - Summarises each species (Rayleigh test, mean time, density peak)
    - Estimates the overlap and bootstrap interval for every species pair
    - Packages everything into an ActivityReport

Data flows strictly forward:
    observations -> samples -> density curves -> overlap results
"""

import logging
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence

from diel_overlap.config import Settings
from diel_overlap.density.estimator import CircularDensityEstimator
from diel_overlap.errors import EmptySampleError, InvalidParameterError
from diel_overlap.loader import group_by_species
from diel_overlap.models.activity import ActivityReport, SpeciesActivity
from diel_overlap.models.density import DensityCurve
from diel_overlap.models.observation import Observation
from diel_overlap.models.overlap import OverlapResult
from diel_overlap.models.sample import Sample
from diel_overlap.overlap.bootstrap import compare
from diel_overlap.stats.rayleigh import rayleigh_test
from diel_overlap.timing.normalizer import HOURS_PER_DAY, hours_from_angle


logger = logging.getLogger(__name__)


def _report_hour(angle: float) -> float:
    """Decimal hours rounded for reporting; 23:59:59.9 rounds to 0.0, not 24.0."""
    return round(hours_from_angle(angle), 4) % HOURS_PER_DAY


class ActivityAnalyzer:
    """
    Species activity and pairwise overlap analysis.

    Attributes:
        estimator: Density estimator shared by every species
        n_resamples: Bootstrap resamples per pair
        confidence: Confidence level of the intervals
        method: Overlap estimator name ("auto" resolved per pair)
        ci_method: Interval construction
        seed: Bootstrap seed, None for unseeded runs
        n_workers: Threads per bootstrap
        min_observations: Smallest sample size that is analysed

    Example:
        analyzer = ActivityAnalyzer(bandwidth=1.0, n_resamples=500, seed=1)
        report = analyzer.run(observations)
        print(report.overlap_for("roe deer", "wild boar").overlap)
    """

    def __init__(
        self,
        bandwidth: float = 1.0,
        grid_size: int = 512,
        kernel: str = "vonmises",
        n_resamples: int = 1000,
        confidence: float = 0.95,
        method: str = "auto",
        ci_method: str = "percentile",
        seed: Optional[int] = None,
        n_workers: int = 1,
        min_observations: int = 2,
        max_kappa: float = 500.0,
    ) -> None:
        """
        Initialize activity analyzer.

        Args:
            bandwidth: Density smoothing multiplier (> 0)
            grid_size: Density grid points
            kernel: Kernel name
            n_resamples: Bootstrap resamples per pair (>= 1)
            confidence: Interval confidence level
            method: Overlap estimator ("dhat1", "dhat4", "dhat5", "auto")
            ci_method: "percentile", "basic" or "normal"
            seed: Bootstrap seed
            n_workers: Bootstrap threads
            min_observations: Species below this size are skipped
            max_kappa: Cap on the fitted von Mises concentration
        """
        if min_observations < 1:
            raise InvalidParameterError("min_observations must be >= 1")

        self.estimator = CircularDensityEstimator(
            bandwidth=bandwidth,
            grid_size=grid_size,
            kernel=kernel,
            max_kappa=max_kappa,
        )
        self.n_resamples = n_resamples
        self.confidence = confidence
        self.method = method
        self.ci_method = ci_method
        self.seed = seed
        self.n_workers = n_workers
        self.min_observations = min_observations

        logger.info(
            f"ActivityAnalyzer initialized: bandwidth={bandwidth}, "
            f"grid_size={grid_size}, kernel={kernel}, B={n_resamples}, "
            f"method={method}, seed={seed}"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ActivityAnalyzer":
        """Build an analyzer from loaded settings."""
        return cls(
            bandwidth=settings.density.bandwidth,
            grid_size=settings.density.grid_size,
            kernel=settings.density.kernel,
            max_kappa=settings.density.max_kappa,
            n_resamples=settings.bootstrap.n_resamples,
            confidence=settings.bootstrap.confidence,
            ci_method=settings.bootstrap.ci_method,
            seed=settings.bootstrap.seed,
            n_workers=settings.bootstrap.n_workers,
            method=settings.analysis.estimator,
            min_observations=settings.analysis.min_observations,
        )

    def density(self, sample: Sample) -> DensityCurve:
        """Density curve of one sample."""
        return self.estimator.estimate(sample)

    def summarize(self, sample: Sample) -> SpeciesActivity:
        """
        Summarise the activity of one species.

        Raises:
            EmptySampleError: If the sample has no observations
        """
        rayleigh = rayleigh_test(sample)
        curve = self.density(sample)
        return SpeciesActivity(
            species=sample.label,
            n=len(sample),
            rayleigh=rayleigh.to_dict(),
            mean_hour=_report_hour(rayleigh.mean_angle),
            peak_hour=_report_hour(curve.peak_angle),
            kappa=curve.kappa,
        )

    def compare(self, sample_a: Sample, sample_b: Sample) -> OverlapResult:
        """Overlap and bootstrap interval of two samples."""
        return compare(
            sample_a,
            sample_b,
            estimator=self.estimator,
            n_resamples=self.n_resamples,
            confidence=self.confidence,
            method=self.method,
            ci_method=self.ci_method,
            seed=self.seed,
            n_workers=self.n_workers,
        )

    def run_samples(
        self,
        samples: Dict[str, Sample],
        species: Optional[Sequence[str]] = None,
    ) -> ActivityReport:
        """
        Analyse pre-built samples.

        Args:
            samples: Mapping of species label to Sample
            species: Species to include (default: all, in mapping order)

        Returns:
            ActivityReport

        Raises:
            EmptySampleError: If a requested species has no observations
        """
        if species is None:
            species = list(samples)
        else:
            # Repeated labels are analysed once, first occurrence wins
            species = list(dict.fromkeys(species))

        selected: List[Sample] = []
        skipped: Dict[str, int] = {}
        for label in species:
            sample = samples.get(label)
            if sample is None or sample.is_empty:
                raise EmptySampleError(f"No observations for species '{label}'")
            if len(sample) < self.min_observations:
                logger.warning(
                    f"Skipping '{label}': {len(sample)} observation(s), "
                    f"need at least {self.min_observations}"
                )
                skipped[label] = len(sample)
                continue
            selected.append(sample)

        summaries = [self.summarize(sample) for sample in selected]
        overlaps = [self.compare(a, b) for a, b in combinations(selected, 2)]

        logger.info(
            f"Analysis complete: {len(summaries)} species, "
            f"{len(overlaps)} pair(s), {len(skipped)} skipped"
        )

        return ActivityReport(
            parameters=self.parameters(),
            species=summaries,
            skipped=skipped,
            overlaps=overlaps,
        )

    def run(
        self,
        observations: Iterable[Observation],
        species: Optional[Sequence[str]] = None,
    ) -> ActivityReport:
        """Analyse raw observations (see run_samples)."""
        return self.run_samples(group_by_species(observations), species)

    def parameters(self) -> dict:
        """Estimation parameters recorded in reports."""
        return {
            "bandwidth": self.estimator.bandwidth,
            "grid_size": self.estimator.grid_size,
            "kernel": self.estimator.kernel,
            "n_resamples": self.n_resamples,
            "confidence": self.confidence,
            "estimator": self.method,
            "ci_method": self.ci_method,
            "seed": self.seed,
            "min_observations": self.min_observations,
        }
