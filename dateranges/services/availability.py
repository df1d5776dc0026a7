"""
Application services for computing availability and free time.

The service coordinates fetching schedules and busy times via a schedule
source adapter and delegates the actual interval calculations to the domain
layer. This keeps the CLI thin and allows the source to be replaced by a
simple stub in tests.
"""

from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

from pendulum import DateTime

from ..domain.interval_subtractor import filter_min_duration, intersect, subtract
from ..domain.models import AvailabilityWindow, Interval, Schedule
from ..domain.range_builder import build
from ..domain.zoned import instant

logger = logging.getLogger(__name__)


class ScheduleSourceProtocol(Protocol):
    """Protocol describing the schedule source behaviour needed by the service."""

    async def get_schedule(self, resource: str) -> Schedule:
        """Return the recurring rules and overrides of a resource."""

    async def get_busy_times(
        self,
        resource: str,
        start_time: DateTime,
        end_time: DateTime,
    ) -> List[Interval]:
        """Return busy intervals of a resource overlapping the given span."""


class AvailabilityService:
    """
    Orchestrates schedule retrieval, range building and busy-time subtraction.
    """

    def __init__(
        self,
        schedule_source: ScheduleSourceProtocol,
        *,
        strict_local_times: bool = False,
    ) -> None:
        self._schedule_source = schedule_source
        self._strict_local_times = strict_local_times

    async def date_ranges(
        self,
        resource: str,
        *,
        start_date: DateTime,
        end_date: DateTime,
    ) -> List[Interval]:
        """Build the availability intervals of a resource in its own timezone."""
        schedule = await self._schedule_source.get_schedule(resource)

        if schedule.is_empty():
            logger.warning("Resource %s has no rules or overrides configured", resource)
            return []

        window = AvailabilityWindow(
            from_=start_date,
            to=end_date,
            time_zone=schedule.time_zone,
        )

        return build(
            schedule.rules,
            schedule.overrides,
            window,
            strict=self._strict_local_times,
        )

    async def free_ranges(
        self,
        resource: str,
        *,
        start_date: DateTime,
        end_date: DateTime,
        min_duration_minutes: int = 0,
    ) -> List[Interval]:
        """
        Availability of a resource minus its busy times.
        """
        available = await self.date_ranges(
            resource,
            start_date=start_date,
            end_date=end_date,
        )

        if not available:
            return []

        busy_times = await self._schedule_source.get_busy_times(
            resource,
            start_time=available[0].start,
            end_time=max((interval.end for interval in available), key=instant),
        )

        free = subtract(available, busy_times)

        logger.debug(
            "%s: %d available, %d busy, %d free interval(s)",
            resource,
            len(available),
            len(busy_times),
            len(free),
        )

        return filter_min_duration(free, min_duration_minutes)

    async def common_free_ranges(
        self,
        resources: Sequence[str],
        *,
        start_date: DateTime,
        end_date: DateTime,
        min_duration_minutes: int = 0,
    ) -> List[Interval]:
        """
        Calculate the time when ALL resources are free.

        The minimum duration applies to the intersected result.
        """
        if not resources:
            raise ValueError("No resources provided.")

        result: List[Interval] | None = None

        for resource in resources:
            free = await self.free_ranges(
                resource,
                start_date=start_date,
                end_date=end_date,
            )
            result = free if result is None else intersect(result, free)

            # Early exit if no common time
            if not result:
                return []

        return filter_min_duration(result, min_duration_minutes)
