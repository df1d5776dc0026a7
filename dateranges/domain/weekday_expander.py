"""
Expansion of recurring weekly rules into concrete intervals.
"""

from typing import List

from .models import AvailabilityWindow, Interval, WallTimeRule
from .zoned import local_range


def expand(
    rule: WallTimeRule,
    window: AvailabilityWindow,
    *,
    strict: bool = False,
) -> List[Interval]:
    """
    Produce one interval per civil date of ``window`` on which ``rule`` recurs.

    Start and end are built as local wall-clock times in ``window.time_zone``
    for that date, so they read exactly ``rule.start_time`` and
    ``rule.end_time`` whatever DST transitions happen around them.
    Zero-length intervals are returned as-is.

    Args:
        rule: The recurring rule to expand
        window: The dates and zone to expand over
        strict: Raise AmbiguousLocalTimeError for skipped or repeated local times

    Returns:
        Intervals in ascending date order
    """
    intervals: List[Interval] = []

    for day in window.dates():
        if not rule.applies_to(day):
            continue

        start, end = local_range(
            day,
            rule.start_time,
            rule.end_time,
            window.time_zone,
            strict=strict,
        )
        intervals.append(Interval(start=start, end=end))

    return intervals
