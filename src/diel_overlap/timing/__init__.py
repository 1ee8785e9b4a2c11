"""
Timing Module
=============

Conversion of clock time to circular (radian) time of day.
"""

from diel_overlap.timing.normalizer import (
    HOURS_PER_DAY,
    TWO_PI,
    format_hours,
    hours_from_angle,
    normalize,
    normalize_time,
    parse_time,
    to_angles,
)

__all__ = [
    "TWO_PI",
    "HOURS_PER_DAY",
    "normalize",
    "parse_time",
    "normalize_time",
    "to_angles",
    "hours_from_angle",
    "format_hours",
]
