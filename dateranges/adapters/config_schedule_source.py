"""
Schedule source backed by the resources defined in the application config.
"""

import logging
from typing import List

import pendulum
from pendulum import DateTime

from ..config import AppConfig, ResourceConfig
from ..domain.exceptions import UnknownResourceError
from ..domain.models import Interval, Schedule
from ..domain.zoned import instant

logger = logging.getLogger(__name__)


class ConfigScheduleSource:
    """
    Serves schedules and busy times straight from an AppConfig.

    Matches ScheduleSourceProtocol, so it can be handed to the
    AvailabilityService in place of a calendar-backed source.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the source.

        Args:
            config: Loaded application configuration
        """
        self.config = config

    def _get_resource(self, name: str) -> ResourceConfig:
        resource = self.config.find_resource(name)
        if resource is None:
            raise UnknownResourceError(
                f"Unknown resource: '{name}'. Use one of the configured resource names."
            )
        return resource

    async def get_schedule(self, resource: str) -> Schedule:
        """Return the configured rules and overrides of a resource."""
        return self._get_resource(resource).to_schedule(self.config.timezone)

    async def get_busy_times(
        self,
        resource: str,
        start_time: DateTime,
        end_time: DateTime,
    ) -> List[Interval]:
        """
        Parse the configured busy periods of a resource.

        Args:
            resource: Resource name
            start_time: Start of the time span
            end_time: End of the time span

        Returns:
            Busy intervals overlapping the span, in configuration order
        """
        config = self._get_resource(resource)
        timezone = self.config.resource_timezone(resource)
        busy_times: List[Interval] = []

        for entry in config.busy:
            busy_start = pendulum.parse(entry.start, tz=timezone)
            busy_end = pendulum.parse(entry.end, tz=timezone)

            # Check if the busy period overlaps with the requested span
            if instant(busy_start) < instant(end_time) and instant(busy_end) > instant(start_time):
                busy_times.append(Interval(start=busy_start, end=busy_end))

        logger.debug("Loaded %d busy interval(s) for %s", len(busy_times), resource)

        return busy_times
