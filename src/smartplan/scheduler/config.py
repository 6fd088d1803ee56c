"""Configuration classes for the scheduling system."""

from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from smartplan.exceptions import ConfigurationError

MINUTES_PER_HOUR = 60


class BackwardPassMode(str, Enum):
    """How the backward pass turns a latest end into a latest start.

    WALL_CLOCK reproduces the original scheduler output, where latest starts
    are the latest end minus the duration in plain hours. Use it to compare
    against schedules computed before WORKING_TIME became the default.
    """

    WORKING_TIME = "working_time"  # Subtract the duration inside working windows
    WALL_CLOCK = "wall_clock"  # Plain instant subtraction, the pre-working-time behaviour


def parse_time_of_day(value: Any) -> time:
    """Parse a working-hours boundary such as ``"09:00"``.

    YAML 1.1 reads unquoted ``17:00`` as the sexagesimal integer 1020, so
    integers are taken as minutes since midnight.
    """
    if isinstance(value, time):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        hours, minutes = divmod(value, MINUTES_PER_HOUR)
        return time(hours, minutes)
    if isinstance(value, str):
        return time.fromisoformat(value.strip())
    raise ValueError(f"Expected a time of day like '09:00', got {value!r}")


def parse_instant(value: Any) -> datetime | None:
    """Parse an ISO-8601 instant; a bare date means midnight of that day."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    raise ValueError(f"Expected an ISO-8601 instant, got {value!r}")


class ScheduleSettings(BaseModel):
    """Working-time constraints and switches for one scheduling run.

    Every field has a default. Keys may be given in snake_case or in the
    camelCase spelling used by plan views (``workingHoursStart``).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    project_start_date: datetime | None = None  # None = the caller's current time
    working_hours_start: time = time(9, 0)
    working_hours_end: time = time(17, 0)
    hours_per_day: float = Field(default=8.0, gt=0)  # Informational only
    working_days: frozenset[int] = frozenset({1, 2, 3, 4, 5})  # 0=Sunday .. 6=Saturday
    respect_dependencies: bool = True
    respect_working_hours: bool = True
    backward_pass_mode: BackwardPassMode = BackwardPassMode.WORKING_TIME

    @field_validator("project_start_date", mode="before")
    @classmethod
    def coerce_start(cls, v: Any) -> datetime | None:
        return parse_instant(v)

    @field_validator("working_hours_start", "working_hours_end", mode="before")
    @classmethod
    def coerce_time_of_day(cls, v: Any) -> time:
        return parse_time_of_day(v)

    @field_validator("working_days", mode="before")
    @classmethod
    def coerce_working_days(cls, v: Any) -> frozenset[int]:
        if v is None:
            return frozenset()
        days = frozenset(int(day) for day in v)
        out_of_range = sorted(day for day in days if not 0 <= day <= 6)
        if out_of_range:
            raise ValueError(
                f"working_days must be weekday indices 0 (Sunday) to 6 (Saturday), "
                f"got {out_of_range}"
            )
        return days

    @field_serializer("working_days")
    def serialize_working_days(self, days: frozenset[int]) -> list[int]:
        return sorted(days)

    @field_serializer("working_hours_start", "working_hours_end")
    def serialize_time_of_day(self, value: time) -> str:
        return value.strftime("%H:%M")

    @property
    def window_hours(self) -> float:
        """Length of one working window in hours (negative if misconfigured)."""
        start = self.working_hours_start
        end = self.working_hours_end
        start_minutes = start.hour * MINUTES_PER_HOUR + start.minute + start.second / 60
        end_minutes = end.hour * MINUTES_PER_HOUR + end.minute + end.second / 60
        return (end_minutes - start_minutes) / MINUTES_PER_HOUR

    def merged(self, overrides: dict[str, Any]) -> ScheduleSettings:
        """Return new settings with ``overrides`` applied on top of these.

        None values in ``overrides`` mean "not given" and keep the current value.
        """
        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return settings_from_mapping(data)


def settings_from_mapping(data: dict[str, Any] | None) -> ScheduleSettings:
    """Build settings from untrusted input, raising ConfigurationError on bad values."""
    try:
        return ScheduleSettings.model_validate(data or {})
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid schedule settings: {e}") from e
