"""
Overlap Models
==============

Result schema for the temporal overlap between two activity samples.

Output Contract:
    {
        "species_a": "roe deer",
        "species_b": "wild boar",
        "overlap": 0.42,
        "ci_low": 0.35,
        "ci_high": 0.51,
        "estimator": "dhat1",
        "ci_method": "percentile",
        "confidence": 0.95,
        "n_resamples": 1000,
        "seed": null
    }

Rules:
    - overlap, ci_low and ci_high lie in [0, 1]
    - ci_low <= ci_high
    - An unseeded bootstrap gives bounds that differ between runs; this is
      expected and recorded by seed being null
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator


class OverlapResult(BaseModel):
    """
    Overlap coefficient of two activity densities with a bootstrap interval.

    Attributes:
        species_a: Label of the first sample
        species_b: Label of the second sample
        n_a: Observations in the first sample
        n_b: Observations in the second sample
        overlap: Point estimate of the overlap coefficient
        ci_low: Lower confidence bound
        ci_high: Upper confidence bound
        estimator: Overlap estimator used ("dhat1", "dhat4", "dhat5")
        ci_method: Interval construction ("percentile", "basic", "normal")
        confidence: Confidence level of the interval
        n_resamples: Number of bootstrap resamples
        seed: Seed of the resampling RNG, None when unseeded
    """

    species_a: str = Field(default="A", description="Label of the first sample")
    species_b: str = Field(default="B", description="Label of the second sample")
    n_a: int = Field(default=0, ge=0, description="Observations in sample A")
    n_b: int = Field(default=0, ge=0, description="Observations in sample B")

    overlap: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Area under the pointwise minimum of the two densities",
    )

    ci_low: float = Field(..., ge=0.0, le=1.0, description="Lower CI bound")
    ci_high: float = Field(..., ge=0.0, le=1.0, description="Upper CI bound")

    estimator: str = Field(default="dhat1", description="Overlap estimator")
    ci_method: str = Field(default="percentile", description="CI construction")
    confidence: float = Field(default=0.95, gt=0.0, lt=1.0)
    n_resamples: int = Field(default=0, ge=0)
    seed: Optional[int] = Field(default=None, description="Bootstrap RNG seed")

    @model_validator(mode="after")
    def check_interval(self) -> "OverlapResult":
        """Interval bounds must be ordered."""
        if self.ci_low > self.ci_high:
            raise ValueError("ci_low must not exceed ci_high")
        return self

    def contains(self, value: float, tolerance: float = 0.0) -> bool:
        """Whether value falls inside the interval widened by tolerance."""
        return self.ci_low - tolerance <= value <= self.ci_high + tolerance

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        data = self.model_dump()
        for key in ("overlap", "ci_low", "ci_high"):
            data[key] = round(data[key], 4)
        return data

    class Config:
        """Pydantic model configuration."""

        frozen = True
