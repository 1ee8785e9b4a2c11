"""
Activity Models
===============

Per-species activity summaries and the report produced by the analysis
pipeline.

Report Contract:
    {
        "generated_at": "2026-10-18T09:30:00",
        "parameters": {"bandwidth": 1.0, "grid_size": 512, ...},
        "species": [
            {
                "species": "roe deer",
                "n": 412,
                "rayleigh": {"z": 57.1, "p_value": 0.0, ...},
                "mean_hour": 5.93,
                "peak_hour": 6.09
            }
        ],
        "skipped": {"fox": 3},
        "overlaps": [ {OverlapResult} ]
    }
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from diel_overlap.models.overlap import OverlapResult


@dataclass(frozen=True, slots=True)
class RayleighResult:
    """
    Outcome of the Rayleigh test of circular uniformity.

    Attributes:
        n: Number of observations
        mean_angle: Circular mean direction in [0, 2π)
        mean_resultant_length: R̄ in [0, 1], 0 = uniform, 1 = all identical
        z: Rayleigh statistic n * R̄²
        p_value: Probability of a z this large under uniformity
    """

    n: int
    mean_angle: float
    mean_resultant_length: float
    z: float
    p_value: float

    def __repr__(self) -> str:
        return (
            f"RayleighResult(n={self.n}, R={self.mean_resultant_length:.3f}, "
            f"z={self.z:.3f}, p={self.p_value:.4g})"
        )

    def is_significant(self, alpha: float = 0.05) -> bool:
        """True when uniformity is rejected at level alpha."""
        return self.p_value < alpha

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "n": self.n,
            "mean_angle": round(self.mean_angle, 4),
            "mean_resultant_length": round(self.mean_resultant_length, 4),
            "z": round(self.z, 4),
            "p_value": self.p_value,
        }


class SpeciesActivity(BaseModel):
    """
    Activity summary for one species.

    Attributes:
        species: Species label
        n: Number of observations
        rayleigh: Rayleigh test output (see RayleighResult.to_dict)
        mean_hour: Circular mean activity time in decimal hours
        peak_hour: Hour of maximum estimated density
        kappa: Kernel concentration used for the density curve
    """

    species: str
    n: int = Field(..., ge=1)
    rayleigh: dict
    mean_hour: float = Field(..., ge=0.0, lt=24.0)
    peak_hour: float = Field(..., ge=0.0, lt=24.0)
    kappa: float = Field(..., gt=0.0)


class ActivityReport(BaseModel):
    """
    Complete output of one analysis run.

    Attributes:
        generated_at: Wall-clock time the report was built
        parameters: Estimation parameters used for the run
        species: Summaries of the species that were analysed
        skipped: Species left out for having too few observations (label -> n)
        overlaps: Overlap results for every unordered pair of analysed species
    """

    generated_at: datetime = Field(default_factory=datetime.now)
    parameters: Dict[str, Any] = Field(default_factory=dict)
    species: List[SpeciesActivity] = Field(default_factory=list)
    skipped: Dict[str, int] = Field(default_factory=dict)
    overlaps: List[OverlapResult] = Field(default_factory=list)

    def overlap_for(self, species_a: str, species_b: str) -> OverlapResult:
        """Look up the overlap of a pair regardless of order."""
        for result in self.overlaps:
            if {result.species_a, result.species_b} == {species_a, species_b}:
                return result
        raise KeyError(f"No overlap computed for ({species_a}, {species_b})")
