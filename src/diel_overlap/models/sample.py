"""
Sample Model
============

Ordered, read-only collection of angles belonging to one species.

A Sample is produced once by the loader or the Time Normalizer and is only
read afterwards. The angle array is copied on construction and marked
read-only, so sharing a Sample between density estimation and bootstrap
resampling is safe.
"""

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from diel_overlap.errors import InvalidParameterError
from diel_overlap.timing.normalizer import TWO_PI, TimeLike, to_angles


@dataclass(frozen=True, slots=True)
class Sample:
    """
    Angles (radians in [0, 2π)) for one species or filter.

    Attributes:
        label: Species label or filter name
        angles: 1-D read-only float array, input order preserved
    """

    label: str
    angles: np.ndarray

    def __post_init__(self) -> None:
        """Validate and freeze the angle array."""
        angles = np.array(self.angles, dtype=float).ravel()
        if not np.all(np.isfinite(angles)):
            raise InvalidParameterError(
                f"Sample '{self.label}' contains non-finite angles"
            )
        angles = np.mod(angles, TWO_PI)
        angles[angles >= TWO_PI] = 0.0
        angles.setflags(write=False)
        object.__setattr__(self, "angles", angles)

    @classmethod
    def from_times(cls, label: str, times: Iterable[TimeLike]) -> "Sample":
        """Build a Sample from clock times ("HH:MM:SS", datetime, ...)."""
        return cls(label=label, angles=to_angles(times))

    def __len__(self) -> int:
        return int(self.angles.size)

    def __repr__(self) -> str:
        return f"Sample(label={self.label!r}, n={len(self)})"

    @property
    def is_empty(self) -> bool:
        """True when the sample holds no observations."""
        return self.angles.size == 0

    def resample(self, rng: np.random.Generator) -> "Sample":
        """Draw a bootstrap resample of the same size, with replacement."""
        picks = rng.integers(0, len(self), size=len(self))
        return Sample(label=self.label, angles=self.angles[picks])
