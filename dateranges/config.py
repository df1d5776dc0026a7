"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import date, time
from pathlib import Path
from typing import List

import pendulum
import yaml
from pendulum.tz.exceptions import InvalidTimezone
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import DateOverrideRule, Schedule, WallTimeRule


def _check_timezone(value: str) -> None:
    """Ensure ``value`` names a known IANA timezone."""
    try:
        pendulum.timezone(value)
    except (InvalidTimezone, KeyError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: '{value}'") from exc


def _parse_wall_time(value: str) -> time:
    """Parse an ``HH:MM`` string into a time object."""
    try:
        hour_str, minute_str = value.split(":")
        return time(hour=int(hour_str), minute=int(minute_str))
    except ValueError as exc:
        raise ValueError(f"Wall time must look like HH:MM, got '{value}'") from exc


class DefaultsConfig(BaseModel):
    """Default settings for searches."""
    duration_minutes: int = 30

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure the minimum duration is not negative."""
        if value < 0:
            raise ValueError("duration_minutes must not be negative")
        return value


class RuleConfig(BaseModel):
    """Recurring weekly availability (0=Sunday, 6=Saturday)."""
    days: List[int]
    start: str
    end: str

    @field_validator("days")
    @classmethod
    def validate_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"days must be between 0 and 6, got {invalid_days}")
        return value

    @field_validator("start", "end")
    @classmethod
    def validate_wall_time(cls, value: str) -> str:
        _parse_wall_time(value)
        return value

    def to_rule(self) -> WallTimeRule:
        return WallTimeRule(
            weekdays=frozenset(self.days),
            start_time=_parse_wall_time(self.start),
            end_time=_parse_wall_time(self.end),
        )


class OverrideConfig(BaseModel):
    """Replacement availability for a single date. Equal start and end mean unavailable."""
    date: date
    start: str = "00:00"
    end: str = "00:00"

    @field_validator("start", "end")
    @classmethod
    def validate_wall_time(cls, value: str) -> str:
        _parse_wall_time(value)
        return value

    def to_override(self) -> DateOverrideRule:
        return DateOverrideRule(
            date=self.date,
            start_time=_parse_wall_time(self.start),
            end_time=_parse_wall_time(self.end),
        )


class BusyConfig(BaseModel):
    """A busy period, given as ISO 8601 strings."""
    start: str
    end: str


class ResourceConfig(BaseModel):
    """A person or resource whose availability can be queried."""
    name: str
    timezone: str = ""  # Falls back to the application timezone
    rules: List[RuleConfig] = Field(default_factory=list)
    overrides: List[OverrideConfig] = Field(default_factory=list)
    busy: List[BusyConfig] = Field(default_factory=list)

    def to_schedule(self, default_timezone: str) -> Schedule:
        return Schedule.create(
            time_zone=self.timezone or default_timezone,
            rules=[rule.to_rule() for rule in self.rules],
            overrides=[override.to_override() for override in self.overrides],
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"
    strict_local_times: bool = False
    log_level: str = "WARNING"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    resources: List[ResourceConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        _check_timezone(value)
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @model_validator(mode="after")
    def validate_resources(self) -> "AppConfig":
        """Ensure resource names are unique and their timezones exist."""
        seen_names: set[str] = set()
        for resource in self.resources:
            name_key = resource.name.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate resource name detected: {resource.name}")
            seen_names.add(name_key)
            if resource.timezone:
                _check_timezone(resource.timezone)
        return self

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def find_resource(self, name: str) -> ResourceConfig | None:
        """Find a resource by its name, ignoring case."""
        for resource in self.resources:
            if resource.name.lower() == name.lower():
                return resource
        return None

    def resource_timezone(self, name: str) -> str:
        resource = self.find_resource(name)
        if resource and resource.timezone:
            return resource.timezone
        return self.timezone


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
