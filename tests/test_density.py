"""
Density Estimation Tests
========================

Tests for circular kernels, bandwidth selection and density curves.
"""

import math

import numpy as np
import pytest

from diel_overlap.density import (
    CircularDensityEstimator,
    circular_distance,
    estimate,
    estimate_vonmises_kappa,
    make_grid,
    reference_kappa,
    vonmises_kernel,
    wrapped_normal_kernel,
)
from diel_overlap.density.bandwidth import MIN_KAPPA
from diel_overlap.errors import EmptySampleError, InvalidParameterError
from diel_overlap.models.sample import Sample


TWO_PI = 2 * math.pi


class TestCircularDistance:
    """Tests for the wrap-aware distance."""

    def test_across_midnight(self):
        assert circular_distance(0.1, TWO_PI - 0.1) == pytest.approx(0.2)

    def test_symmetric_and_bounded(self):
        rng = np.random.default_rng(1)
        a = rng.uniform(-10, 10, 200)
        b = rng.uniform(-10, 10, 200)
        d = circular_distance(a, b)
        assert np.allclose(d, circular_distance(b, a))
        assert np.all((d >= 0) & (d <= math.pi + 1e-12))

    def test_opposite_points(self):
        assert circular_distance(0.0, math.pi) == pytest.approx(math.pi)


class TestKernels:
    """Tests for the von Mises and wrapped normal kernels."""

    @pytest.mark.parametrize("kernel", [vonmises_kernel, wrapped_normal_kernel])
    @pytest.mark.parametrize("kappa", [0.5, 4.0, 50.0])
    def test_kernel_integrates_to_one(self, kernel, kappa):
        grid = make_grid(4096)
        values = kernel(circular_distance(grid, 1.0), kappa)
        assert values.sum() * TWO_PI / grid.size == pytest.approx(1.0, rel=1e-6)

    def test_large_kappa_does_not_overflow(self):
        values = vonmises_kernel(np.array([0.0, 0.01, math.pi]), 5000.0)
        assert np.all(np.isfinite(values))
        assert values[0] > values[1] > values[2]

    def test_kernels_agree_for_concentrated_data(self):
        grid = make_grid(1024)
        distance = circular_distance(grid, math.pi)
        vm = vonmises_kernel(distance, 50.0)
        wn = wrapped_normal_kernel(distance, 50.0)
        assert np.max(np.abs(vm - wn)) < 0.05 * vm.max()


class TestBandwidth:
    """Tests for the reference concentration rule."""

    def test_uniform_data_gives_flat_kernel(self, uniform_sample):
        assert reference_kappa(uniform_sample) == MIN_KAPPA

    def test_clustered_data_capped(self):
        angles = np.full(10, 1.0)
        assert estimate_vonmises_kappa(angles, max_kappa=200.0) == 200.0

    def test_more_data_gives_larger_kappa(self):
        rng = np.random.default_rng(5)
        angles = rng.vonmises(0.0, 2.0, size=400)
        small = reference_kappa(Sample(label="s", angles=angles[:40]))
        large = reference_kappa(Sample(label="l", angles=angles))
        assert small > 0
        assert large > small

    def test_empty_sample(self):
        with pytest.raises(EmptySampleError):
            reference_kappa(Sample(label="empty", angles=[]))


class TestCircularDensityEstimator:
    """Tests for density curves on the grid."""

    @pytest.mark.parametrize("kernel", ["vonmises", "wrapped_normal"])
    @pytest.mark.parametrize("bandwidth", [0.25, 1.0, 4.0])
    def test_integrates_to_one(self, morning_sample, kernel, bandwidth):
        curve = estimate(morning_sample, bandwidth=bandwidth, kernel=kernel)
        assert curve.integral() == pytest.approx(1.0, abs=1e-9)
        assert np.all(curve.density >= 0)

    def test_grid(self):
        estimator = CircularDensityEstimator(grid_size=8)
        assert estimator.grid.size == 8
        assert estimator.grid[0] == 0.0
        assert estimator.grid[-1] < TWO_PI
        assert np.allclose(np.diff(estimator.grid), TWO_PI / 8)

    @pytest.mark.parametrize("bandwidth", [0.25, 1.0, 4.0])
    def test_wrap_continuity(self, midnight_sample, bandwidth):
        """The step across midnight is no larger than any interior step."""
        curve = estimate(midnight_sample, bandwidth=bandwidth)
        density = curve.density
        wrap_step = abs(density[0] - density[-1])
        max_step = np.max(np.abs(np.diff(density)))
        assert wrap_step <= max_step + 1e-12

    def test_density_at_is_periodic(self, midnight_sample):
        estimator = CircularDensityEstimator()
        values = estimator.density_at(midnight_sample, np.array([0.0, TWO_PI, -TWO_PI]))
        assert values[0] == pytest.approx(values[1])
        assert values[0] == pytest.approx(values[2])

    def test_midnight_peak(self, midnight_sample):
        """Activity around midnight peaks at midnight, not at the grid edges only."""
        curve = estimate(midnight_sample)
        assert circular_distance(curve.peak_angle, 0.0) < 0.1
        assert curve.evaluate(0.0) > 10 * curve.evaluate(math.pi)

    def test_evaluate_wraps(self, midnight_sample):
        curve = estimate(midnight_sample)
        assert curve.evaluate(TWO_PI) == pytest.approx(curve.evaluate(0.0))
        assert curve.evaluate(curve.grid[5]) == pytest.approx(curve.density[5])

    def test_larger_bandwidth_is_smoother(self):
        sample = Sample(label="noon", angles=np.linspace(math.pi - 0.5, math.pi + 0.5, 30))
        narrow = estimate(sample, bandwidth=0.5)
        wide = estimate(sample, bandwidth=2.0)
        assert wide.density.max() < narrow.density.max()
        assert wide.kappa < narrow.kappa

    def test_uniform_sample_flat(self, uniform_sample):
        curve = estimate(uniform_sample)
        assert np.allclose(curve.density, 1 / TWO_PI, rtol=1e-3)

    def test_fixed_kappa(self, morning_sample):
        estimator = CircularDensityEstimator(kappa=3.0)
        assert estimator.concentration(morning_sample) == 3.0
        assert estimator.estimate(morning_sample).kappa == 3.0

    def test_curve_is_read_only(self, morning_sample):
        curve = estimate(morning_sample)
        with pytest.raises(ValueError):
            curve.density[0] = 0.0

    def test_to_table_in_hours(self, morning_sample):
        curve = estimate(morning_sample, grid_size=96)
        table = curve.to_table(hours=True)
        assert len(table) == 96
        assert table[0][0] == 0.0
        assert table[-1][0] < 24.0
        assert sum(y for _, y in table) * 24.0 / 96 == pytest.approx(1.0)

    def test_closed_appends_wrap_point(self, morning_sample):
        curve = estimate(morning_sample, grid_size=16)
        grid, density = curve.closed()
        assert grid.size == 17
        assert grid[-1] == TWO_PI
        assert density[-1] == density[0]

    def test_empty_sample(self):
        empty = Sample(label="empty", angles=[])
        with pytest.raises(EmptySampleError):
            estimate(empty)
        with pytest.raises(EmptySampleError):
            CircularDensityEstimator().density_at(empty, [0.0])

    @pytest.mark.parametrize("bandwidth", [0, -1.0, float("nan"), float("inf"), "1"])
    def test_invalid_bandwidth(self, bandwidth):
        with pytest.raises(InvalidParameterError):
            CircularDensityEstimator(bandwidth=bandwidth)

    @pytest.mark.parametrize("grid_size", [0, 1, 2.5])
    def test_invalid_grid_size(self, grid_size):
        with pytest.raises(InvalidParameterError):
            CircularDensityEstimator(grid_size=grid_size)

    def test_unknown_kernel(self):
        with pytest.raises(InvalidParameterError):
            CircularDensityEstimator(kernel="epanechnikov")
