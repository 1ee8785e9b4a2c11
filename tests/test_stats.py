"""
Circular Statistics Tests
=========================

Tests for circular moments and the Rayleigh test.
"""

import math

import numpy as np
import pytest

from diel_overlap.density import circular_distance
from diel_overlap.errors import EmptySampleError
from diel_overlap.models.sample import Sample
from diel_overlap.stats import (
    circular_variance,
    mean_direction,
    mean_resultant_length,
    rayleigh_p_value,
    rayleigh_test,
)


class TestCircularMoments:
    """Tests for mean direction and resultant length."""

    def test_identical_angles(self):
        angles = np.full(5, 1.2)
        assert mean_resultant_length(angles) == pytest.approx(1.0)
        assert mean_direction(angles) == pytest.approx(1.2)
        assert circular_variance(angles) == pytest.approx(0.0, abs=1e-12)

    def test_mean_across_midnight(self):
        """23:00 and 01:00 average to midnight, not noon."""
        angles = np.array([2 * math.pi - 0.26, 0.26])
        assert circular_distance(mean_direction(angles), 0.0) < 1e-9

    def test_mean_direction_in_range(self):
        angles = np.array([math.pi + 0.1, 2 * math.pi - 0.1])
        direction = mean_direction(angles)
        assert 0.0 <= direction < 2 * math.pi
        assert direction == pytest.approx(3 * math.pi / 2)

    def test_balanced_angles(self):
        angles = np.array([0.0, math.pi / 2, math.pi, 3 * math.pi / 2])
        assert mean_resultant_length(angles) == pytest.approx(0.0, abs=1e-12)

    def test_empty(self):
        with pytest.raises(EmptySampleError):
            mean_resultant_length(np.array([]))
        with pytest.raises(EmptySampleError):
            mean_direction(np.array([]))


class TestRayleigh:
    """Tests for the Rayleigh test of uniformity."""

    def test_clustered_activity_rejects_uniformity(self):
        sample = Sample(label="dawn", angles=np.linspace(math.pi / 2 - 0.2, math.pi / 2 + 0.2, 60))
        result = rayleigh_test(sample)
        assert result.n == 60
        assert result.mean_resultant_length > 0.95
        assert result.mean_angle == pytest.approx(math.pi / 2)
        assert result.p_value < 1e-6
        assert result.is_significant()

    def test_uniform_activity(self, uniform_sample):
        result = rayleigh_test(uniform_sample)
        assert result.z == pytest.approx(0.0, abs=1e-9)
        assert result.p_value > 0.9
        assert not result.is_significant()

    def test_small_sample(self, morning_sample):
        result = rayleigh_test(morning_sample)
        assert 0.0 <= result.p_value <= 1.0
        assert result.mean_angle == pytest.approx(math.pi / 2, abs=0.01)

    def test_p_value_bounds(self):
        for n in (2, 10, 49, 50, 500):
            for z in (0.0, 0.5, 3.0, 20.0, n * 0.99):
                assert 0.0 <= rayleigh_p_value(z, n) <= 1.0

    def test_large_sample_formula(self):
        assert rayleigh_p_value(2.0, 100) == pytest.approx(math.exp(-2.0))

    def test_to_dict(self, morning_sample):
        data = rayleigh_test(morning_sample).to_dict()
        assert set(data) == {"n", "mean_angle", "mean_resultant_length", "z", "p_value"}

    def test_empty(self):
        with pytest.raises(EmptySampleError):
            rayleigh_test(Sample(label="empty", angles=[]))
