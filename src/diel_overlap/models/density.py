"""
Density Models
==============

Data model for a circular activity density tabulated on a regular grid.

A DensityCurve is derived from exactly one Sample plus a bandwidth.
The grid covers [0, 2π) with the end point excluded; grid point N would be
the wrap point 2π, which is the same instant as grid point 0. `closed()`
appends it explicitly for plotting.
"""

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from diel_overlap.timing.normalizer import HOURS_PER_DAY, TWO_PI


@dataclass(frozen=True, slots=True)
class DensityCurve:
    """
    Periodic density tabulated over a regular grid on [0, 2π).

    Produced by CircularDensityEstimator, consumed by the overlap
    estimators and the plotting helpers.

    Attributes:
        label: Label of the sample the curve was estimated from
        grid: Grid angles, shape (grid_size,), spacing 2π / grid_size
        density: Non-negative density values, sum(density) * spacing == 1
        bandwidth: Smoothing multiplier used for the estimate
        kappa: Effective kernel concentration
        kernel: Kernel name ("vonmises" or "wrapped_normal")
        n: Number of observations in the source sample
    """

    label: str
    grid: np.ndarray
    density: np.ndarray
    bandwidth: float
    kappa: float
    kernel: str
    n: int

    def __repr__(self) -> str:
        return (
            f"DensityCurve(label={self.label!r}, n={self.n}, "
            f"grid_size={self.grid_size}, kappa={self.kappa:.3f})"
        )

    @property
    def grid_size(self) -> int:
        return int(self.grid.size)

    @property
    def spacing(self) -> float:
        """Grid spacing in radians."""
        return TWO_PI / self.grid.size

    def integral(self) -> float:
        """Riemann sum of the density over the full circle."""
        return float(np.sum(self.density) * self.spacing)

    def evaluate(self, angles) -> np.ndarray:
        """
        Density at arbitrary angles by periodic linear interpolation.

        Angles are taken modulo 2π, so evaluate(2π) == evaluate(0).
        """
        points = np.mod(np.asarray(angles, dtype=float), TWO_PI)
        return np.interp(points, self.grid, self.density, period=TWO_PI)

    def closed(self) -> Tuple[np.ndarray, np.ndarray]:
        """Grid and density with the wrap point 2π appended."""
        grid = np.append(self.grid, TWO_PI)
        density = np.append(self.density, self.density[0])
        return grid, density

    @property
    def peak_angle(self) -> float:
        """Grid angle of the highest density."""
        return float(self.grid[int(np.argmax(self.density))])

    def to_table(self, hours: bool = False) -> List[Tuple[float, float]]:
        """
        Export (angle, density) pairs.

        With hours=True the x value is in hours and the density is rescaled
        to integrate to 1 over [0, 24).
        """
        scale = HOURS_PER_DAY / TWO_PI if hours else 1.0
        return [
            (float(x) * scale, float(y) / scale)
            for x, y in zip(self.grid, self.density)
        ]
