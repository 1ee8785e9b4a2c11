"""
diel_overlap Command Line
=========================

Entry point for running an activity analysis on a CSV of detections.

Steps:
    1. Load settings (config file + environment), then apply CLI flags
    2. Load observations from the CSV path given on the command line
    3. Summarise every species and compare every pair
    4. Write the JSON report (stdout by default) and optional figures

Usage:
    diel-overlap detections.csv
    diel-overlap detections.csv --species "roe deer" "wild boar" --seed 7
    diel-overlap detections.csv --output report.json --plots figures/

Exit Codes:
    0  success
    2  invalid input (missing file, bad column, malformed time, bad parameter)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from diel_overlap.analysis import ActivityAnalyzer
from diel_overlap.config import Settings, load_config, setup_logging
from diel_overlap.errors import DielOverlapError
from diel_overlap.loader import group_by_species, load_observations
from diel_overlap.overlap.bootstrap import CI_METHODS
from diel_overlap.overlap.estimators import ESTIMATORS


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    """Command line parser; unset flags fall back to settings."""
    parser = argparse.ArgumentParser(
        prog="diel-overlap",
        description="Daily activity patterns and temporal overlap of species",
    )
    parser.add_argument("csv", help="CSV file of detections")
    parser.add_argument(
        "--species",
        nargs="+",
        default=None,
        help="Species to analyse (default: all)",
    )
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--bandwidth", type=float, default=None, help="Smoothing multiplier")
    parser.add_argument("--grid-size", type=int, default=None, help="Density grid points")
    parser.add_argument("--resamples", type=int, default=None, help="Bootstrap resamples")
    parser.add_argument("--seed", type=int, default=None, help="Bootstrap seed")
    parser.add_argument(
        "--estimator",
        choices=list(ESTIMATORS) + ["auto"],
        default=None,
        help="Overlap estimator",
    )
    parser.add_argument(
        "--ci-method",
        choices=list(CI_METHODS),
        default=None,
        help="Confidence interval method",
    )
    parser.add_argument("--workers", type=int, default=None, help="Bootstrap threads")
    parser.add_argument("--output", default=None, help="Write the JSON report here")
    parser.add_argument("--plots", default=None, help="Write figures to this directory")
    return parser


def _apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with every CLI flag that was given applied."""
    data = settings.model_dump()
    overrides = {
        ("density", "bandwidth"): args.bandwidth,
        ("density", "grid_size"): args.grid_size,
        ("bootstrap", "n_resamples"): args.resamples,
        ("bootstrap", "seed"): args.seed,
        ("bootstrap", "ci_method"): args.ci_method,
        ("bootstrap", "n_workers"): args.workers,
        ("analysis", "estimator"): args.estimator,
        ("output", "report_path"): args.output,
        ("output", "plots_dir"): args.plots,
    }
    for (section, key), value in overrides.items():
        if value is not None:
            data[section][key] = value
    return Settings.model_validate(data)


def run(args: argparse.Namespace) -> int:
    """Run one analysis; returns the process exit code."""
    settings = _apply_cli_overrides(load_config(args.config), args)
    setup_logging(settings)

    loader = settings.loader
    observations = load_observations(
        Path(args.csv),
        species_column=loader.species_column,
        timestamp_column=loader.timestamp_column,
        time_column=loader.time_column,
        date_column=loader.date_column,
        exclude=loader.exclude,
    )
    samples = group_by_species(observations)

    analyzer = ActivityAnalyzer.from_settings(settings)
    report = analyzer.run_samples(samples, args.species)

    payload = report.model_dump_json(indent=2)
    if settings.output.report_path:
        report_path = Path(settings.output.report_path)
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(payload)
        logger.info(f"Report written to {report_path}")
    else:
        print(payload)

    if settings.output.plots_dir:
        # Imported lazily so report-only runs do not load matplotlib
        from diel_overlap.observability import render_report

        curves = {s.species: analyzer.density(samples[s.species]) for s in report.species}
        render_report(samples, curves, report, settings.output.plots_dir, settings.output.dpi)

    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point."""
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except (DielOverlapError, FileNotFoundError, ValidationError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return EXIT_INVALID_INPUT


if __name__ == "__main__":
    sys.exit(main())
