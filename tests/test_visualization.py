"""
Visualization Tests
===================

Tests for density, overlap and rose figures.
"""

import pytest

from diel_overlap.density import estimate
from diel_overlap.models.activity import ActivityReport
from diel_overlap.observability import (
    plot_density,
    plot_overlap,
    plot_rose,
    render_report,
    save_figure,
)
from diel_overlap.overlap import compare


@pytest.fixture
def curves(morning_sample, evening_sample):
    return estimate(morning_sample, grid_size=128), estimate(evening_sample, grid_size=128)


class TestPlots:
    """Tests for individual figures."""

    def test_density_plot(self, curves):
        ax = plot_density(list(curves))
        assert len(ax.get_lines()) == 2
        assert ax.get_xlim() == (0, 24)

    def test_density_curve_closed_over_day(self, curves):
        ax = plot_density([curves[0]])
        xdata = ax.get_lines()[0].get_xdata()
        assert xdata[0] == 0.0
        assert xdata[-1] == pytest.approx(24.0)

    def test_overlap_plot(self, curves, morning_sample, evening_sample):
        result = compare(morning_sample, evening_sample, n_resamples=5, seed=0)
        ax = plot_overlap(*curves, result=result)
        assert len(ax.collections) == 1
        assert "roe deer vs wild boar" in ax.get_title()

    def test_rose_plot(self, morning_sample):
        ax = plot_rose(morning_sample, bins=12)
        assert ax.name == "polar"
        assert len(ax.patches) == 12
        assert sum(p.get_height() for p in ax.patches) == len(morning_sample)

    def test_save_figure(self, curves, tmp_path):
        ax = plot_density(list(curves))
        path = save_figure(ax.figure, tmp_path / "nested" / "density.png", dpi=60)
        assert path.exists()
        assert path.stat().st_size > 0


class TestRenderReport:
    """Tests for the standard figure set."""

    def test_render_report(self, morning_sample, evening_sample, curves, tmp_path):
        samples = {"roe deer": morning_sample, "wild boar": evening_sample}
        curve_map = {"roe deer": curves[0], "wild boar": curves[1]}
        report = ActivityReport.model_validate({
            "species": [
                {"species": "roe deer", "n": 3, "rayleigh": {}, "mean_hour": 6.0,
                 "peak_hour": 6.0, "kappa": 400.0},
                {"species": "wild boar", "n": 3, "rayleigh": {}, "mean_hour": 18.0,
                 "peak_hour": 18.0, "kappa": 400.0},
            ],
            "overlaps": [
                {"species_a": "roe deer", "species_b": "wild boar",
                 "overlap": 0.0, "ci_low": 0.0, "ci_high": 0.01},
            ],
        })
        written = render_report(samples, curve_map, report, tmp_path, dpi=60)
        names = sorted(p.name for p in written)
        assert names == [
            "activity_density.png",
            "overlap_roe_deer__wild_boar.png",
            "rose_roe_deer.png",
            "rose_wild_boar.png",
        ]
        assert all(p.exists() for p in written)

    def test_colliding_labels_get_distinct_files(self, morning_sample, evening_sample, tmp_path):
        """Labels that reduce to the same file name do not overwrite each other."""
        samples = {"roe deer": morning_sample, "roe-deer": evening_sample}
        curve_map = {
            "roe deer": estimate(morning_sample, grid_size=64),
            "roe-deer": estimate(evening_sample, grid_size=64),
        }
        report = ActivityReport.model_validate({
            "species": [
                {"species": label, "n": 3, "rayleigh": {}, "mean_hour": 6.0,
                 "peak_hour": 6.0, "kappa": 400.0}
                for label in samples
            ],
            "overlaps": [
                {"species_a": "roe deer", "species_b": "roe-deer",
                 "overlap": 0.0, "ci_low": 0.0, "ci_high": 0.01},
            ],
        })
        written = render_report(samples, curve_map, report, tmp_path, dpi=40)
        names = [p.name for p in written]
        assert len(set(names)) == len(names) == 4
        assert "rose_roe_deer.png" in names
        assert "rose_roe_deer_2.png" in names
        assert "overlap_roe_deer__roe_deer_2.png" in names
