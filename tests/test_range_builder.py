"""
Tests for the range builder.
"""

from datetime import date, time

import pendulum

from dateranges.domain.models import AvailabilityWindow, DateOverrideRule, Interval, WallTimeRule
from dateranges.domain.range_builder import build

WORK_WEEK = WallTimeRule(weekdays={1, 2, 3, 4, 5}, start_time=time(8), end_time=time(17))


def _window(time_zone: str, start: str = "2023-06-13T00:00:00Z", end: str = "2023-06-15T00:00:00Z"):
    return AvailabilityWindow(from_=pendulum.parse(start), to=pendulum.parse(end), time_zone=time_zone)


def _utc(start: str, end: str) -> Interval:
    return Interval(start=pendulum.parse(start), end=pendulum.parse(end))


class TestBuild:
    """Tests for build()."""

    def test_override_replaces_recurring_slot(self):
        override = DateOverrideRule(date=date(2023, 6, 13), start_time=time(10), end_time=time(15))

        results = build([WORK_WEEK], [override], _window("America/New_York"))

        assert results == [
            _utc("2023-06-13T14:00:00Z", "2023-06-13T19:00:00Z"),
            _utc("2023-06-14T12:00:00Z", "2023-06-14T21:00:00Z"),
        ]

    def test_override_already_next_day_in_utc(self):
        """22:00-23:00 on the 13th in New York is the 14th in UTC."""
        override = DateOverrideRule(
            date=pendulum.datetime(2023, 6, 13, tz="UTC"),
            start_time=time(22),
            end_time=time(23),
        )

        results = build([WORK_WEEK], [override], _window("America/New_York"))

        assert len(results) == 2
        assert results[0] == _utc("2023-06-14T02:00:00Z", "2023-06-14T03:00:00Z")
        assert results[1] == _utc("2023-06-14T12:00:00Z", "2023-06-14T21:00:00Z")
        assert results[0].start.timezone_name == "America/New_York"

    def test_full_day_unavailable_override(self):
        override = DateOverrideRule(date=date(2023, 6, 13), start_time=time(0), end_time=time(0))

        results = build([WORK_WEEK], [override], _window("Europe/London"))

        assert results == [_utc("2023-06-14T07:00:00Z", "2023-06-14T16:00:00Z")]
        assert not any(interval.start.date() == date(2023, 6, 13) for interval in results)

    def test_day_shift_between_brussels_window_and_honolulu(self):
        overrides = [
            DateOverrideRule(
                date=pendulum.datetime(2023, 8, 15, tz="UTC"),
                start_time=time(9),
                end_time=time(17),
            ),
            DateOverrideRule(
                date=pendulum.datetime(2023, 8, 15, tz="UTC"),
                start_time=time(19),
                end_time=time(21),
            ),
        ]
        window = AvailabilityWindow(
            from_=pendulum.datetime(2023, 8, 15, tz="Europe/Brussels").start_of("day"),
            to=pendulum.datetime(2023, 8, 15, tz="Europe/Brussels").end_of("day"),
            time_zone="Pacific/Honolulu",
        )

        results = build([], overrides, window)

        assert len(results) == 2
        assert results[0].end.isoformat() != "2023-08-14T17:00:00-10:00"
        assert results[0].end.isoformat() == "2023-08-15T17:00:00-10:00"
        assert results[1].start.isoformat() == "2023-08-15T19:00:00-10:00"

    def test_multiple_overlapping_rules_are_not_merged(self):
        morning = WallTimeRule(weekdays={1}, start_time=time(11), end_time=time(14))
        early = WallTimeRule(weekdays={1}, start_time=time(9), end_time=time(12))
        window = AvailabilityWindow(
            from_=pendulum.datetime(2023, 6, 12, tz="Europe/Berlin"),  # Monday
            to=pendulum.datetime(2023, 6, 12, tz="Europe/Berlin").end_of("day"),
            time_zone="Europe/Berlin",
        )

        results = build([morning, early], [], window)

        assert [(r.start.hour, r.end.hour) for r in results] == [(9, 12), (11, 14)]

    def test_output_is_ordered_by_start(self):
        afternoon = WallTimeRule(weekdays={1, 2}, start_time=time(13), end_time=time(17))
        morning = WallTimeRule(weekdays={1, 2}, start_time=time(8), end_time=time(12))
        window = AvailabilityWindow(
            from_=pendulum.datetime(2023, 6, 12, tz="UTC"),
            to=pendulum.datetime(2023, 6, 14, tz="UTC"),
            time_zone="UTC",
        )

        results = build([afternoon, morning], [], window)

        starts = [r.start for r in results]
        assert starts == sorted(starts)
        assert [(r.start.day, r.start.hour) for r in results] == [(12, 8), (12, 13), (13, 8), (13, 13)]

    def test_overrides_outside_window_are_ignored(self):
        override = DateOverrideRule(date=date(2023, 6, 20), start_time=time(10), end_time=time(11))

        results = build([WORK_WEEK], [override], _window("America/New_York"))

        assert len(results) == 2
        assert all(r.start.hour == 8 for r in results)

    def test_override_on_non_working_day_adds_availability(self):
        saturday = DateOverrideRule(date=date(2023, 6, 17), start_time=time(10), end_time=time(12))
        window = _window("Europe/Berlin", "2023-06-16T00:00:00+02:00", "2023-06-18T00:00:00+02:00")

        results = build([WORK_WEEK], [saturday], window)

        assert [(r.start.day, r.start.hour) for r in results] == [(16, 8), (17, 10)]

    def test_override_crossing_midnight_is_not_truncated(self):
        override = DateOverrideRule(date=date(2023, 6, 13), start_time=time(21), end_time=time(3))

        results = build([], [override], _window("America/New_York"))

        assert results == [_utc("2023-06-14T01:00:00Z", "2023-06-14T07:00:00Z")]
        assert results[0].end.date() == date(2023, 6, 14)

    def test_zero_length_recurring_rule_contributes_nothing(self):
        closed = WallTimeRule(weekdays={2}, start_time=time(12), end_time=time(12))

        assert build([closed], [], _window("UTC")) == []

    def test_unavailable_entries_skip_local_time_resolution(self):
        """01:00 does not exist in London on 2023-03-26, yet strict mode accepts closed slots."""
        closed = WallTimeRule(weekdays={0}, start_time=time(1), end_time=time(1))
        day_off = DateOverrideRule(date=date(2023, 3, 26), start_time=time(1, 30), end_time=time(1, 30))
        sundays = WallTimeRule(weekdays={0}, start_time=time(9), end_time=time(12))
        window = AvailabilityWindow(
            from_=pendulum.datetime(2023, 3, 26, tz="Europe/London"),
            to=pendulum.datetime(2023, 3, 27, tz="Europe/London"),
            time_zone="Europe/London",
        )

        assert build([closed], [], window, strict=True) == []
        assert build([sundays], [day_off], window, strict=True) == []

    def test_empty_inputs(self):
        assert build([], [], _window("UTC")) == []
