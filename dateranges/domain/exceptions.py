"""
Domain-specific exception hierarchy for the date range calculations.
"""


class DateRangesError(Exception):
    """Base class for all application-level errors."""


class InvalidWeekdayError(DateRangesError, ValueError):
    """Raised when a recurring rule names a weekday outside 0 (Sunday) to 6 (Saturday)."""


class InvalidWindowError(DateRangesError, ValueError):
    """Raised when an availability window starts after it ends."""


class InvalidIntervalError(DateRangesError, ValueError):
    """Raised when an interval's start lies after its end."""


class AmbiguousLocalTimeError(DateRangesError):
    """Raised in strict mode when a wall-clock time is skipped or repeated by a DST transition."""


class UnknownResourceError(DateRangesError, LookupError):
    """Raised when a schedule source has no definition for the requested resource."""
