"""
Observation Loader
==================

Loads camera-trap detections from CSV files and groups them into
per-species samples.

Input Table:
    species,timestamp
    roe deer,2024-03-14 06:12:00
    wild boar,2024-03-14 21:47:05

    Column names are configurable. Alternatively a separate "HH:MM:SS"
    time column can be used, optionally with a date column.

Rules:
    - Paths are always explicit; nothing is resolved against the working
      directory implicitly
    - Each timestamp is parsed on its own, so rows may mix formats
      ("2024-01-01 02:00" next to "2024-01-02T03:00:30")
    - An unparseable or missing time raises InvalidTimeError naming the
      offending CSV line; rows are never silently turned into NaN
    - Rows with a blank species label are dropped with a warning
    - Labels listed in `exclude` (case-insensitive) are dropped
"""

import logging
from collections import OrderedDict
from datetime import date, datetime, time
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from diel_overlap.errors import InvalidParameterError, InvalidTimeError
from diel_overlap.models.observation import Observation
from diel_overlap.models.sample import Sample
from diel_overlap.timing.normalizer import TimeLike, normalize_time, parse_time


logger = logging.getLogger(__name__)

# Date used when the table only holds times of day
DEFAULT_DATE = date(1970, 1, 1)

# Line number of the first data row (header is line 1)
_FIRST_DATA_LINE = 2


def _bad_lines(mask: pd.Series, limit: int = 5) -> str:
    lines = [str(i + _FIRST_DATA_LINE) for i in mask[mask].index[:limit]]
    more = int(mask.sum()) - len(lines)
    return ", ".join(lines) + (f" (+{more} more)" if more > 0 else "")


def _parse_timestamps(frame: pd.DataFrame, column: str) -> pd.Series:
    parsed = pd.to_datetime(frame[column], format="mixed", errors="coerce")
    invalid = parsed.isna()
    if invalid.any():
        raise InvalidTimeError(
            f"Unparseable timestamps in column '{column}' on line(s) {_bad_lines(invalid)}"
        )
    return parsed


def _parse_times(
    frame: pd.DataFrame,
    time_column: str,
    date_column: Optional[str],
) -> List[datetime]:
    dates = None
    if date_column is not None:
        dates = pd.to_datetime(frame[date_column], format="mixed", errors="coerce")
        invalid = dates.isna()
        if invalid.any():
            raise InvalidTimeError(
                f"Unparseable dates in column '{date_column}' on line(s) {_bad_lines(invalid)}"
            )

    timestamps = []
    for position, (index, raw) in enumerate(frame[time_column].items()):
        try:
            hour, minute, second = parse_time(raw)
        except InvalidTimeError as e:
            raise InvalidTimeError(f"Line {index + _FIRST_DATA_LINE}: {e}") from e
        whole = int(second)
        clock = time(hour, minute, whole, int(round((second - whole) * 1e6)) % 1_000_000)
        day = dates.iloc[position].date() if dates is not None else DEFAULT_DATE
        timestamps.append(datetime.combine(day, clock))
    return timestamps


def load_observations(
    path: Union[str, Path],
    species_column: str = "species",
    timestamp_column: str = "timestamp",
    time_column: Optional[str] = None,
    date_column: Optional[str] = None,
    exclude: Sequence[str] = ("none", "unknown"),
) -> List[Observation]:
    """
    Load detections from a CSV file.

    Args:
        path: Explicit path of the CSV file
        species_column: Column holding species labels
        timestamp_column: Column holding date-times (ignored if time_column is set)
        time_column: Optional column of "HH:MM[:SS]" strings
        date_column: Optional date column combined with time_column
        exclude: Species labels to drop (case-insensitive)

    Returns:
        Observations in file order

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidParameterError: If a required column is missing
        InvalidTimeError: If any time value cannot be parsed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Observation file not found: {path}")

    frame = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[""])
    time_source = time_column or timestamp_column
    required = [species_column, time_source] + ([date_column] if date_column else [])
    missing = [c for c in required if c not in frame.columns]
    if missing:
        raise InvalidParameterError(
            f"Missing required columns: {missing}. Found: {list(frame.columns)}"
        )

    species = frame[species_column].fillna("").str.strip()
    blank = species == ""
    if blank.any():
        logger.warning(f"Dropping {int(blank.sum())} row(s) without a species label")

    excluded = species.str.lower().isin({label.lower() for label in exclude})
    if excluded.any():
        logger.info(f"Dropping {int(excluded.sum())} row(s) with excluded labels {list(exclude)}")

    keep = ~(blank | excluded)
    frame = frame[keep]
    species = species[keep]

    if time_column is not None:
        timestamps = _parse_times(frame, time_column, date_column)
    else:
        timestamps = [ts.to_pydatetime() for ts in _parse_timestamps(frame, timestamp_column)]

    observations = [
        Observation(species=label, timestamp=ts)
        for label, ts in zip(species, timestamps)
    ]
    logger.info(
        f"Loaded {len(observations)} observations of "
        f"{species.nunique()} species from {path}"
    )
    return observations


def group_by_species(observations: Iterable[Observation]) -> Dict[str, Sample]:
    """
    Group observations into one Sample per species.

    Species appear in order of first occurrence; angles keep input order.
    """
    grouped: "OrderedDict[str, List[float]]" = OrderedDict()
    for obs in observations:
        grouped.setdefault(obs.species, []).append(obs.angle)
    return {label: Sample(label=label, angles=angles) for label, angles in grouped.items()}


def samples_from_records(
    records: Iterable[Union[Tuple[str, TimeLike], Mapping[str, object]]],
) -> Dict[str, Sample]:
    """
    Build per-species samples from in-memory records.

    Each record is either a (species, time) pair or a mapping with
    "species" and "time" keys. Times may be "HH:MM:SS" strings,
    (hour, minute, second) tuples, datetime.time or datetime values.

    Raises:
        InvalidTimeError: If a time cannot be normalised
        InvalidParameterError: If a record has no species label
    """
    grouped: "OrderedDict[str, List[float]]" = OrderedDict()
    for record in records:
        if isinstance(record, Mapping):
            label, value = record.get("species"), record.get("time")
        else:
            label, value = record
        if not isinstance(label, str) or not label.strip():
            raise InvalidParameterError(f"Record without species label: {record!r}")
        grouped.setdefault(label.strip(), []).append(normalize_time(value))
    return {label: Sample(label=label, angles=angles) for label, angles in grouped.items()}
