"""
Resolution of date-specific overrides into concrete intervals.
"""

from .models import DateOverrideRule, Interval
from .zoned import local_range


def resolve(rule: DateOverrideRule, time_zone: str, *, strict: bool = False) -> Interval:
    """
    Resolve an override to the interval it covers in ``time_zone``.

    The override's calendar date is taken as a zone-free value and its
    wall-clock times are built directly in ``time_zone``. The date is never
    re-projected from the zone it was captured in.
    Equal start and end times give a zero-length interval.
    """
    start, end = local_range(
        rule.civil_date,
        rule.start_time,
        rule.end_time,
        time_zone,
        strict=strict,
    )
    return Interval(start=start, end=end)
