"""
Observation Schema
==================

Pydantic model for a single camera-trap detection.

An Observation is created by parsing one row of the input table and is never
mutated afterwards. Only its time-of-day component is used downstream: the
Time Normalizer turns it into an angle on the unit circle, after which the
Observation itself is no longer needed.

Input Contract (one CSV row):
    {
        "species": "wild boar",
        "timestamp": "2024-03-14 21:47:05"
    }

Example:
    from diel_overlap.models.observation import Observation

    obs = Observation(species="roe deer", timestamp="2024-03-14 06:12:00")
    print(obs.angle)
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from diel_overlap.timing.normalizer import normalize_time


class Observation(BaseModel):
    """
    One species detection at a point in time.

    Attributes:
        species: Species label as written by the classifier / annotator
        timestamp: Date and time of the detection (local clock time)
    """

    species: str = Field(
        ...,
        min_length=1,
        description="Species label of the detection",
    )

    timestamp: datetime = Field(
        ...,
        description="Local date and time of the detection",
    )

    @field_validator("species")
    @classmethod
    def strip_species(cls, value: str) -> str:
        """Trim surrounding whitespace; blank labels are rejected."""
        value = value.strip()
        if not value:
            raise ValueError("species must not be blank")
        return value

    @property
    def angle(self) -> float:
        """Time of day as an angle in [0, 2π)."""
        return normalize_time(self.timestamp)

    class Config:
        """Pydantic model configuration."""

        frozen = True
        json_schema_extra = {
            "example": {
                "species": "wild boar",
                "timestamp": "2024-03-14T21:47:05",
            }
        }
