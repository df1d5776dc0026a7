"""
Tests for the AvailabilityService orchestration layer.
"""

import asyncio
from datetime import date, time
from typing import Dict, List

import pendulum
import pytest

from dateranges.domain.models import DateOverrideRule, Interval, Schedule, WallTimeRule
from dateranges.services.availability import AvailabilityService

TZ = "Europe/Berlin"


class StubScheduleSource:
    """Minimal stub matching ScheduleSourceProtocol."""

    def __init__(self, schedules: Dict[str, Schedule], busy: Dict[str, List[Interval]]):
        self._schedules = schedules
        self._busy = busy
        self.busy_calls: List[Dict[str, str]] = []

    async def get_schedule(self, resource):
        return self._schedules[resource]

    async def get_busy_times(self, resource, start_time, end_time):
        self.busy_calls.append(
            {
                "resource": resource,
                "start": start_time.to_datetime_string(),
                "end": end_time.to_datetime_string(),
            }
        )
        return self._busy.get(resource, [])


def _berlin(text: str) -> pendulum.DateTime:
    return pendulum.parse(text, tz=TZ)


def _interval(start: str, end: str) -> Interval:
    return Interval(start=_berlin(start), end=_berlin(end))


def _office_hours(time_zone: str = TZ) -> Schedule:
    return Schedule.create(
        time_zone,
        rules=[WallTimeRule(weekdays={1, 2, 3, 4, 5}, start_time=time(9), end_time=time(17))],
        overrides=[DateOverrideRule(date=date(2024, 11, 26), start_time=time(0), end_time=time(0))],
    )


def _build_service(schedules, busy=None) -> AvailabilityService:
    return AvailabilityService(StubScheduleSource(schedules, busy or {}))


def test_date_ranges_use_schedule_timezone():
    """Ranges are built in the resource's own zone, not the window's."""
    service = _build_service({"a": _office_hours("America/New_York")})

    ranges = asyncio.run(
        service.date_ranges(
            "a",
            start_date=pendulum.parse("2024-11-25 00:00", tz="America/New_York"),
            end_date=pendulum.parse("2024-11-25 23:59", tz="America/New_York"),
        )
    )

    assert len(ranges) == 1
    assert ranges[0].start.timezone_name == "America/New_York"
    assert ranges[0].start.hour == 9


def test_date_ranges_honour_unavailable_override():
    service = _build_service({"a": _office_hours()})

    ranges = asyncio.run(
        service.date_ranges(
            "a",
            start_date=_berlin("2024-11-25 00:00"),  # Monday
            end_date=_berlin("2024-11-27 23:59"),  # Wednesday
        )
    )

    assert [interval.start.day for interval in ranges] == [25, 27]


def test_empty_schedule_yields_nothing():
    service = _build_service({"a": Schedule.create(TZ)})

    ranges = asyncio.run(
        service.free_ranges(
            "a",
            start_date=_berlin("2024-11-25 00:00"),
            end_date=_berlin("2024-11-25 23:59"),
        )
    )

    assert ranges == []


def test_free_ranges_subtract_busy_times_and_filter_duration():
    busy = {
        "a": [
            _interval("2024-11-25 09:00", "2024-11-25 09:45"),
            _interval("2024-11-25 10:00", "2024-11-25 12:00"),
        ]
    }
    service = _build_service({"a": _office_hours()}, busy)

    free = asyncio.run(
        service.free_ranges(
            "a",
            start_date=_berlin("2024-11-25 00:00"),
            end_date=_berlin("2024-11-25 23:59"),
            min_duration_minutes=30,
        )
    )

    # The 15 minute gap between 09:45 and 10:00 is too short
    assert free == [_interval("2024-11-25 12:00", "2024-11-25 17:00")]


def test_free_ranges_query_busy_times_over_built_span():
    source = StubScheduleSource({"a": _office_hours()}, {})
    service = AvailabilityService(source)

    asyncio.run(
        service.free_ranges(
            "a",
            start_date=_berlin("2024-11-25 00:00"),
            end_date=_berlin("2024-11-27 23:59"),
        )
    )

    assert source.busy_calls == [
        {"resource": "a", "start": "2024-11-25 09:00:00", "end": "2024-11-27 17:00:00"}
    ]


def test_common_free_ranges_intersect_all_resources():
    busy = {
        "a": [_interval("2024-11-25 10:00", "2024-11-25 12:00")],
        "b": [_interval("2024-11-25 14:00", "2024-11-25 15:00")],
    }
    service = _build_service({"a": _office_hours(), "b": _office_hours()}, busy)

    free = asyncio.run(
        service.common_free_ranges(
            ["a", "b"],
            start_date=_berlin("2024-11-25 00:00"),
            end_date=_berlin("2024-11-25 23:59"),
            min_duration_minutes=30,
        )
    )

    assert [interval.duration_minutes() for interval in free] == [60, 120, 120]
    assert free[0] == _interval("2024-11-25 09:00", "2024-11-25 10:00")


def test_common_free_ranges_stop_when_nothing_is_shared():
    morning = Schedule.create(
        TZ, rules=[WallTimeRule(weekdays={1}, start_time=time(8), end_time=time(12))]
    )
    afternoon = Schedule.create(
        TZ, rules=[WallTimeRule(weekdays={1}, start_time=time(13), end_time=time(17))]
    )
    source = StubScheduleSource({"a": morning, "b": afternoon, "c": morning}, {})
    service = AvailabilityService(source)

    free = asyncio.run(
        service.common_free_ranges(
            ["a", "b", "c"],
            start_date=_berlin("2024-11-25 00:00"),
            end_date=_berlin("2024-11-25 23:59"),
        )
    )

    assert free == []
    assert [call["resource"] for call in source.busy_calls] == ["a", "b"]


def test_common_free_ranges_require_resources():
    service = _build_service({})

    with pytest.raises(ValueError, match="No resources"):
        asyncio.run(
            service.common_free_ranges(
                [],
                start_date=_berlin("2024-11-25 00:00"),
                end_date=_berlin("2024-11-25 23:59"),
            )
        )
