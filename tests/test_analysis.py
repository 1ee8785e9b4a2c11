"""
Analysis Pipeline Tests
=======================

Tests for ActivityAnalyzer summaries and reports.
"""

import json
from datetime import datetime

import pytest

from diel_overlap.analysis import ActivityAnalyzer
from diel_overlap.config import Settings
from diel_overlap.errors import EmptySampleError, InvalidParameterError
from diel_overlap.models.activity import ActivityReport
from diel_overlap.models.observation import Observation


@pytest.fixture
def analyzer():
    """Small, seeded analyzer."""
    return ActivityAnalyzer(grid_size=256, n_resamples=40, seed=1)


class TestActivityAnalyzer:
    """Tests for the end-to-end analysis."""

    def test_report(self, analyzer, observations):
        report = analyzer.run(observations)
        assert isinstance(report, ActivityReport)
        assert [s.species for s in report.species] == ["roe deer", "wild boar"]
        assert report.skipped == {"fox": 1}
        assert len(report.overlaps) == 1

    def test_species_summary(self, analyzer, observations):
        report = analyzer.run(observations)
        deer = report.species[0]
        assert deer.n == 10
        assert deer.mean_hour == pytest.approx(6.09, abs=0.05)
        assert abs(deer.peak_hour - 6.09) < 0.25
        assert deer.rayleigh["p_value"] < 0.01

    def test_dawn_and_dusk_separated(self, analyzer, observations):
        result = analyzer.run(observations).overlap_for("wild boar", "roe deer")
        assert result.overlap < 0.05
        assert result.estimator == "dhat1"
        assert result.seed == 1

    def test_species_selection(self, analyzer, observations):
        report = analyzer.run(observations, species=["wild boar"])
        assert [s.species for s in report.species] == ["wild boar"]
        assert report.overlaps == []

    def test_requested_species_missing(self, analyzer, observations):
        with pytest.raises(EmptySampleError):
            analyzer.run(observations, species=["lynx"])

    def test_report_serializes(self, analyzer, observations):
        report = analyzer.run(observations)
        data = json.loads(report.model_dump_json())
        assert data["parameters"]["seed"] == 1
        assert data["parameters"]["grid_size"] == 256
        assert data["overlaps"][0]["species_a"] == "roe deer"

    def test_seeded_runs_repeat(self, observations):
        first = ActivityAnalyzer(grid_size=128, n_resamples=30, seed=4).run(observations)
        second = ActivityAnalyzer(grid_size=128, n_resamples=30, seed=4).run(observations)
        assert first.overlaps == second.overlaps

    def test_invalid_min_observations(self):
        with pytest.raises(InvalidParameterError):
            ActivityAnalyzer(min_observations=0)

    def test_from_settings(self):
        settings = Settings.model_validate({
            "density": {"bandwidth": 2.0, "grid_size": 64},
            "bootstrap": {"n_resamples": 25, "seed": 8},
            "analysis": {"estimator": "dhat5", "min_observations": 3},
        })
        analyzer = ActivityAnalyzer.from_settings(settings)
        assert analyzer.estimator.bandwidth == 2.0
        assert analyzer.estimator.grid_size == 64
        assert analyzer.n_resamples == 25
        assert analyzer.seed == 8
        assert analyzer.method == "dhat5"
        assert analyzer.min_observations == 3

    def test_mean_just_before_midnight_wraps(self):
        """A circular mean a fraction of a second before midnight reports 0.0, not 24.0."""
        observations = [
            Observation(species="badger", timestamp=datetime(2024, 7, day, 0, 0, 0))
            for day in range(1, 6)
        ]
        observations.append(Observation(species="badger", timestamp=datetime(2024, 7, 6, 23, 59, 59)))
        report = ActivityAnalyzer(grid_size=128, n_resamples=5, seed=1).run(observations)
        badger = report.species[0]
        assert 0.0 <= badger.mean_hour < 24.0
        assert min(badger.mean_hour, 24.0 - badger.mean_hour) < 1e-3
        assert 0.0 <= badger.peak_hour < 24.0

    def test_repeated_species_analysed_once(self, analyzer, observations):
        report = analyzer.run(observations, species=["roe deer", "wild boar", "roe deer"])
        assert [s.species for s in report.species] == ["roe deer", "wild boar"]
        assert len(report.overlaps) == 1
        assert report.overlaps[0].species_a != report.overlaps[0].species_b
