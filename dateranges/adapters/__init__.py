"""
Adapters layer - Schedule sources feeding the availability service.
"""

from .config_schedule_source import ConfigScheduleSource

__all__ = ["ConfigScheduleSource"]
