"""
Merging of recurring rules and date overrides into one availability sequence.
"""

import logging
from typing import Dict, Iterable, List, Sequence

from pendulum import Date

from .models import AvailabilityWindow, DateOverrideRule, Interval, WallTimeRule
from .override_resolver import resolve
from .weekday_expander import expand
from .zoned import instant

logger = logging.getLogger(__name__)


def build(
    recurring_rules: Iterable[WallTimeRule],
    overrides: Sequence[DateOverrideRule],
    window: AvailabilityWindow,
    *,
    strict: bool = False,
) -> List[Interval]:
    """
    Build the availability intervals of a schedule within ``window``.

    Rules of precedence:
    1. An override replaces every recurring interval on its civil date
    2. Several overrides on the same date are all kept
    3. Equal start and end times mean "unavailable": such rules add nothing,
       such overrides still clear their date. Intervals that collapse to zero
       length across a DST gap are dropped as well
    4. Overrides dated outside the window are ignored

    Intervals are ordered by start instant. Overlapping slots are not merged.
    """
    window_dates = window.dates()
    in_window = set(window_dates)

    # Step 1: Resolve overrides per civil date
    overridden: Dict[Date, List[Interval]] = {}

    for override in overrides:
        day = override.civil_date
        if day not in in_window:
            continue
        day_intervals = overridden.setdefault(day, [])
        if override.is_unavailable():
            continue
        day_intervals.append(resolve(override, window.time_zone, strict=strict))

    # Step 2: Expand recurring rules, skipping overridden dates
    intervals: List[Interval] = []

    for rule in recurring_rules:
        if rule.is_unavailable():
            continue
        for interval in expand(rule, window, strict=strict):
            if interval.start.date() in overridden:
                continue
            intervals.append(interval)

    for day_intervals in overridden.values():
        intervals.extend(day_intervals)

    # Step 3: Drop collapsed intervals and order by instant
    available = [interval for interval in intervals if not interval.is_empty()]
    available.sort(key=lambda interval: (instant(interval.start), instant(interval.end)))

    logger.debug(
        "Built %d interval(s) over %d date(s) in %s, overrides applied on %s",
        len(available),
        len(window_dates),
        window.time_zone,
        sorted(day.isoformat() for day in overridden) or "no dates",
    )

    return available
