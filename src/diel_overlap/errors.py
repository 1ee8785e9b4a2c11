"""
Errors
======

Exception types raised by the diel_overlap components.

All errors are local and synchronous: they are raised where the problem is
detected and propagate unchanged to the caller. Nothing is retried.

Hierarchy:
    DielOverlapError
        - InvalidTimeError: time-of-day components out of range or unparseable
        - InvalidParameterError: bad numeric parameter or input shape
        - EmptySampleError: no observations for a species / filter

Each subclass also derives from ValueError so generic validation handlers
keep working.
"""


class DielOverlapError(Exception):
    """Base class for all diel_overlap errors."""
    pass


class InvalidTimeError(DielOverlapError, ValueError):
    """Raised when a time of day cannot be converted to an angle."""
    pass


class InvalidParameterError(DielOverlapError, ValueError):
    """Raised when a parameter is outside its valid domain."""
    pass


class EmptySampleError(DielOverlapError, ValueError):
    """Raised when a computation receives a sample with no observations."""
    pass
