"""
Time Normalizer
===============

Converts wall-clock time of day into a point on the unit circle.

Mapping:
    decimal_hours = hour + minute / 60 + second / 3600
    angle = decimal_hours / 24 * 2π

The result always lies in [0, 2π). Midnight is 0 and 24:00 wraps to 0,
so 23:59:59 and 00:00:00 are neighbours under circular distance.

Malformed or out-of-range times raise InvalidTimeError immediately instead
of producing NaN values that would leak into later statistics.
"""

import math
import re
from datetime import datetime, time
from numbers import Real
from typing import Iterable, Tuple, Union

import numpy as np

from diel_overlap.errors import InvalidTimeError


TWO_PI = 2.0 * math.pi
HOURS_PER_DAY = 24.0

# HH:MM or HH:MM:SS, seconds may carry a fraction
_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}(?:\.\d+)?))?\s*$")

TimeLike = Union[str, time, datetime, Tuple[int, int, float]]


def _check_component(name: str, value: Real, upper: int) -> None:
    """Require 0 <= value < upper for one clock component."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidTimeError(f"{name} must be a number, got {value!r}")
    # NaN fails both comparisons
    if not 0 <= value < upper:
        raise InvalidTimeError(f"{name} must be in [0, {upper}), got {value!r}")


def normalize(hour: int, minute: int = 0, second: float = 0) -> float:
    """
    Convert a time of day to an angle in radians.

    Args:
        hour: Hour in [0, 24)
        minute: Minute in [0, 60)
        second: Second in [0, 60), may be fractional

    Returns:
        Angle in [0, 2π)

    Raises:
        InvalidTimeError: If any component is out of range or not a number
    """
    _check_component("hour", hour, 24)
    _check_component("minute", minute, 60)
    _check_component("second", second, 60)

    decimal_hours = hour + minute / 60.0 + second / 3600.0
    angle = decimal_hours / HOURS_PER_DAY * TWO_PI

    # 23:59:59.999999 can round up to exactly 2π
    if angle >= TWO_PI:
        return 0.0
    return float(angle)


def parse_time(text: str) -> Tuple[int, int, float]:
    """
    Parse an "HH:MM" or "HH:MM:SS" string into clock components.

    "24:00" / "24:00:00" is accepted and returned as midnight (0, 0, 0.0).

    Raises:
        InvalidTimeError: If the string is not a valid time of day
    """
    if not isinstance(text, str):
        raise InvalidTimeError(f"Expected a time string, got {text!r}")

    match = _TIME_PATTERN.match(text)
    if match is None:
        raise InvalidTimeError(f"Malformed time string: {text!r}")

    hour = int(match.group(1))
    minute = int(match.group(2))
    second = float(match.group(3)) if match.group(3) is not None else 0.0

    if hour == 24 and minute == 0 and second == 0:
        return 0, 0, 0.0

    _check_component("hour", hour, 24)
    _check_component("minute", minute, 60)
    _check_component("second", second, 60)
    return hour, minute, second


def normalize_time(value: TimeLike) -> float:
    """
    Convert any supported time representation to an angle.

    Accepts "HH:MM[:SS]" strings, datetime.time, datetime.datetime
    (including pandas Timestamp) and (hour, minute, second) tuples.
    The date part of a datetime is ignored.

    Raises:
        InvalidTimeError: If the value is missing, malformed or unsupported
    """
    if isinstance(value, str):
        return normalize(*parse_time(value))

    if isinstance(value, (datetime, time)):
        # pandas.NaT passes the isinstance check but has NaN components
        second = value.second + value.microsecond / 1e6
        return normalize(value.hour, value.minute, second)

    if isinstance(value, tuple) and len(value) == 3:
        return normalize(*value)

    raise InvalidTimeError(f"Unsupported time value: {value!r}")


def to_angles(values: Iterable[TimeLike]) -> np.ndarray:
    """Convert a sequence of times to a float array of angles."""
    return np.array([normalize_time(v) for v in values], dtype=float)


def hours_from_angle(angle: float) -> float:
    """Inverse mapping: angle (any real) to decimal hours in [0, 24)."""
    hours = (float(angle) % TWO_PI) / TWO_PI * HOURS_PER_DAY
    return 0.0 if hours >= HOURS_PER_DAY else hours


def format_hours(hours: float) -> str:
    """Render decimal hours as "HH:MM" (rounded to the nearest minute)."""
    total_minutes = int(round(hours * 60)) % (24 * 60)
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"
