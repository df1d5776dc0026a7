"""
Domain layer - Pure availability logic without external dependencies.
"""

from .exceptions import (
    AmbiguousLocalTimeError,
    DateRangesError,
    InvalidIntervalError,
    InvalidWeekdayError,
    InvalidWindowError,
    UnknownResourceError,
)
from .interval_subtractor import filter_min_duration, intersect, normalize, subtract
from .models import AvailabilityWindow, DateOverrideRule, Interval, Schedule, WallTimeRule
from .override_resolver import resolve
from .range_builder import build
from .weekday_expander import expand

__all__ = [
    "AmbiguousLocalTimeError",
    "AvailabilityWindow",
    "DateOverrideRule",
    "DateRangesError",
    "Interval",
    "InvalidIntervalError",
    "InvalidWeekdayError",
    "InvalidWindowError",
    "Schedule",
    "UnknownResourceError",
    "WallTimeRule",
    "build",
    "expand",
    "filter_min_duration",
    "intersect",
    "normalize",
    "resolve",
    "subtract",
]
