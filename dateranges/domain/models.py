"""
Domain models for availability rules, windows and intervals.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import FrozenSet, Iterable, List, Tuple

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidIntervalError, InvalidWeekdayError, InvalidWindowError
from .zoned import civil_date, instant, weekday_number

WEEKDAY_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}


def _as_pendulum(value: datetime) -> DateTime:
    if isinstance(value, DateTime):
        return value
    return pendulum.instance(value)


@dataclass(frozen=True, eq=False)
class Interval:
    """
    Represents an immutable span between two zoned instants.

    Invariant: start must not be after end. Equality compares absolute
    instants; the zone of ``start`` is only used for display.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        object.__setattr__(self, "start", _as_pendulum(self.start))
        object.__setattr__(self, "end", _as_pendulum(self.end))
        if instant(self.start) > instant(self.end):
            raise InvalidIntervalError(
                f"Start time {self.start} must not be after end time {self.end}"
            )

    def _instants(self) -> Tuple[float, float]:
        return instant(self.start), instant(self.end)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self._instants() == other._instants()

    def __hash__(self) -> int:
        return hash(self._instants())

    def is_empty(self) -> bool:
        """Return True for a zero-length interval."""
        return instant(self.start) == instant(self.end)

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((instant(self.end) - instant(self.start)) // 60)

    def overlaps(self, other: "Interval") -> bool:
        """Check if this interval overlaps with another."""
        return instant(self.start) < instant(other.end) and instant(self.end) > instant(other.start)

    def intersect(self, other: "Interval") -> "Interval | None":
        """
        Calculate the intersection of two intervals.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        start = max(self.start, other.start, key=instant)
        end = min(self.end, other.end, key=instant)

        return Interval(start=start, end=end)

    def in_timezone(self, tz: str) -> "Interval":
        """Return the same interval displayed in ``tz``."""
        return Interval(start=self.start.in_timezone(tz), end=self.end.in_timezone(tz))

    def __repr__(self) -> str:
        return f"Interval({self.start.isoformat()}, {self.end.isoformat()})"

    def __str__(self) -> str:
        end_format = "HH:mm" if self.start.date() == self.end.date() else "DD.MM.YYYY HH:mm"
        return f"{self.start.format('ddd DD.MM.YYYY HH:mm')} - {self.end.format(end_format)}"


def _check_times(start_time: time, end_time: time) -> None:
    if not isinstance(start_time, time) or not isinstance(end_time, time):
        raise TypeError("start_time and end_time must be datetime.time values")


@dataclass(frozen=True)
class WallTimeRule:
    """
    A recurring slot on a set of weekdays (0=Sunday, 6=Saturday).

    Equal start and end times encode an unavailable slot. An end time
    earlier than the start time closes the slot on the following day.
    """
    weekdays: FrozenSet[int]
    start_time: time
    end_time: time

    def __post_init__(self):
        weekdays = frozenset(self.weekdays)
        invalid = sorted(day for day in weekdays if not isinstance(day, int) or day not in range(7))
        if invalid:
            raise InvalidWeekdayError(f"Weekdays must be between 0 and 6, got {invalid}")
        object.__setattr__(self, "weekdays", weekdays)
        _check_times(self.start_time, self.end_time)

    def is_unavailable(self) -> bool:
        return self.start_time == self.end_time

    def applies_to(self, day: date) -> bool:
        """Check if the rule recurs on the weekday of ``day``."""
        return weekday_number(day) in self.weekdays

    def describe(self) -> str:
        days = ", ".join(WEEKDAY_NAMES[day][:3] for day in sorted(self.weekdays))
        return f"{days} {self.start_time.strftime('%H:%M')}-{self.end_time.strftime('%H:%M')}"


@dataclass(frozen=True)
class DateOverrideRule:
    """
    Replacement availability for one calendar day.

    ``date`` may be a plain date or an aware datetime captured in any
    reference zone; its calendar date is read in that value's own frame.
    """
    date: date
    start_time: time
    end_time: time

    def __post_init__(self):
        _check_times(self.start_time, self.end_time)

    @property
    def civil_date(self) -> Date:
        return civil_date(self.date)

    def is_unavailable(self) -> bool:
        return self.start_time == self.end_time


@dataclass(frozen=True)
class AvailabilityWindow:
    """
    Query parameters for a date range calculation.

    The window covers every civil date from ``from_``'s date, read in
    ``from_``'s own zone, up to the last date whose midnight in that zone
    lies before ``to``.
    """
    from_: DateTime
    to: DateTime
    time_zone: str

    def __post_init__(self):
        object.__setattr__(self, "from_", _as_pendulum(self.from_))
        object.__setattr__(self, "to", _as_pendulum(self.to))
        # Unknown zone identifiers are rejected by pendulum itself.
        pendulum.timezone(self.time_zone)
        if instant(self.from_) > instant(self.to):
            raise InvalidWindowError(
                f"Window start {self.from_} must not be after window end {self.to}"
            )

    def dates(self) -> List[Date]:
        """Return the civil dates spanned by the window in ascending order."""
        days: List[Date] = []

        current = self.from_.start_of("day")

        while instant(current) < instant(self.to):
            days.append(civil_date(current))
            current = current.add(days=1)

        return days


@dataclass(frozen=True)
class Schedule:
    """
    The complete availability definition of one resource.
    """
    time_zone: str
    rules: Tuple[WallTimeRule, ...] = field(default_factory=tuple)
    overrides: Tuple[DateOverrideRule, ...] = field(default_factory=tuple)

    @classmethod
    def create(
        cls,
        time_zone: str,
        rules: Iterable[WallTimeRule] = (),
        overrides: Iterable[DateOverrideRule] = (),
    ) -> "Schedule":
        return cls(time_zone=time_zone, rules=tuple(rules), overrides=tuple(overrides))

    def is_empty(self) -> bool:
        return not self.rules and not self.overrides
