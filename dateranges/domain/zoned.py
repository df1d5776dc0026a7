"""
Helpers for turning civil dates and wall-clock times into zoned instants.

A civil date is a plain (year, month, day) value. A zone is attached only
when the local instant is built, and the zone library resolves the UTC
offset at that exact local moment.
"""

from datetime import date, datetime, time, timedelta
from typing import Tuple

import pendulum
from pendulum import Date, DateTime
from pendulum.tz.exceptions import AmbiguousTime, NonExistingTime

from .exceptions import AmbiguousLocalTimeError


def civil_date(value: date) -> Date:
    """
    Return the calendar date of ``value`` as read in its own frame.

    Aware datetimes are not converted to any other zone first: a value
    captured as midnight UTC on the 13th is the 13th.
    """
    if isinstance(value, datetime):
        value = value.date()
    return pendulum.date(value.year, value.month, value.day)


def instant(value: datetime) -> float:
    """
    Return the absolute position of ``value`` on the time line.

    Aware datetimes sharing one tzinfo compare by wall clock and ignore
    ``fold``, so ordering across a fall-back hour must go through this.
    """
    return value.timestamp()


def weekday_number(day: date) -> int:
    """Return the weekday of ``day`` counted from 0=Sunday to 6=Saturday."""
    return day.isoweekday() % 7


def local_datetime(day: date, wall_time: time, tz: str, *, strict: bool = False) -> DateTime:
    """
    Build the instant at which clocks in ``tz`` read ``wall_time`` on ``day``.

    Times inside a DST gap are shifted forward by the size of the gap and
    repeated times resolve to the later occurrence, which is pendulum's
    default. With ``strict`` both cases raise AmbiguousLocalTimeError.
    """
    try:
        return pendulum.datetime(
            day.year,
            day.month,
            day.day,
            wall_time.hour,
            wall_time.minute,
            wall_time.second,
            tz=tz,
            raise_on_unknown_times=strict,
        )
    except NonExistingTime as exc:
        raise AmbiguousLocalTimeError(
            f"{day.isoformat()} {wall_time.strftime('%H:%M')} does not exist in {tz}"
        ) from exc
    except AmbiguousTime as exc:
        raise AmbiguousLocalTimeError(
            f"{day.isoformat()} {wall_time.strftime('%H:%M')} occurs twice in {tz}"
        ) from exc


def local_range(
    day: date,
    start_time: time,
    end_time: time,
    tz: str,
    *,
    strict: bool = False,
) -> Tuple[DateTime, DateTime]:
    """
    Build the (start, end) instants of a wall-clock slot on ``day``.

    An end time earlier than the start time closes the slot on the next day.
    """
    start = local_datetime(day, start_time, tz, strict=strict)
    end_day = day + timedelta(days=1) if end_time < start_time else day
    end = local_datetime(end_day, end_time, tz, strict=strict)
    return start, end
