"""
Test Configuration
==================

Pytest fixtures and test configuration for diel_overlap.
"""

import math
from datetime import datetime

import matplotlib
import numpy as np
import pytest

from diel_overlap.models.observation import Observation
from diel_overlap.models.sample import Sample


matplotlib.use("Agg")


@pytest.fixture
def morning_times():
    """Detection times clustered around 06:00."""
    return ["06:00:00", "06:15:00", "05:45:00"]


@pytest.fixture
def evening_times():
    """Detection times clustered around 18:00."""
    return ["18:00:00", "18:10:00", "17:50:00"]


@pytest.fixture
def morning_sample(morning_times):
    """Sample of a dawn-active species."""
    return Sample.from_times("roe deer", morning_times)


@pytest.fixture
def evening_sample(evening_times):
    """Sample of a dusk-active species."""
    return Sample.from_times("wild boar", evening_times)


@pytest.fixture
def midnight_sample():
    """Sample straddling midnight."""
    return Sample.from_times(
        "badger",
        ["23:40:00", "23:55:00", "00:05:00", "00:20:00", "23:50:00", "00:10:00"],
    )


@pytest.fixture
def uniform_sample():
    """24 observations spread evenly over the day."""
    return Sample(label="uniform", angles=np.linspace(0, 2 * math.pi, 24, endpoint=False))


@pytest.fixture
def overlapping_samples():
    """Two moderately overlapping von Mises samples (seeded)."""
    rng = np.random.default_rng(2024)
    a = Sample(label="fox", angles=rng.vonmises(1.0, 2.0, size=60))
    b = Sample(label="marten", angles=rng.vonmises(2.0, 2.0, size=60))
    return a, b


@pytest.fixture
def observations():
    """Observations of two clustered species and one singleton."""
    records = []
    for day in range(1, 11):
        records.append(Observation(species="roe deer", timestamp=datetime(2024, 5, day, 6, day)))
        records.append(Observation(species="wild boar", timestamp=datetime(2024, 5, day, 21, 2 * day)))
    records.append(Observation(species="fox", timestamp=datetime(2024, 5, 3, 2, 30)))
    return records


@pytest.fixture
def detections_csv(tmp_path):
    """Write a small detections table and return its path."""
    path = tmp_path / "detections.csv"
    rows = ["species,timestamp"]
    for day in range(1, 13):
        rows.append(f"roe deer,2024-04-{day:02d} 06:{day:02d}:00")
        rows.append(f"wild boar,2024-04-{day:02d} 20:{2 * day:02d}:00")
    rows.append("none,2024-04-02 12:00:00")
    rows.append("Unknown,2024-04-03 13:00:00")
    path.write_text("\n".join(rows) + "\n")
    return path
