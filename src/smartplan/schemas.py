"""Pydantic schemas for plan documents.

Plan documents come from an AI plan generator and from hand edits, so
they are treated as untrusted: these schemas check structure and types,
and the scheduler's validation pre-pass checks durations and dependencies.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .scheduler.config import parse_instant, parse_time_of_day


class TaskSchema(BaseModel):
    """Schema for one task record. Unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    id: int
    title: str
    description: str = ""
    category: str = ""
    estimated_duration_hours: float
    dependencies: list[int] = Field(default_factory=list)
    completed: bool = False
    scheduled_start: datetime | None = None
    scheduled_end: datetime | None = None
    slack_time: int | None = None
    is_critical_path: bool | None = None

    @field_validator("dependencies", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[Any]:
        """Accept a missing, null or scalar dependency field."""
        if v is None:
            return []
        if isinstance(v, list):
            return v  # type: ignore[return-value]
        return [v]

    @field_validator("description", "category", mode="before")
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("scheduled_start", "scheduled_end", mode="before")
    @classmethod
    def coerce_instant(cls, v: Any) -> datetime | None:
        return parse_instant(v)


class WorkingHoursSchema(BaseModel):
    """Schema for a plan's stored working hours."""

    start: str = "09:00"
    end: str = "17:00"
    hours_per_day: float = 8.0

    @field_validator("start", "end", mode="before")
    @classmethod
    def normalize_time(cls, v: Any) -> str:
        return parse_time_of_day(v).strftime("%H:%M")


class PlanScheduleSettingsSchema(BaseModel):
    """Schema for a plan's stored auto-schedule switches."""

    auto_schedule_enabled: bool = False
    last_scheduled_at: datetime | None = None
    schedule_from: str | None = None  # "now" or "project_start"
    respect_dependencies: bool = True
    respect_working_hours: bool = True

    @field_validator("last_scheduled_at", mode="before")
    @classmethod
    def coerce_instant(cls, v: Any) -> datetime | None:
        return parse_instant(v)


class PlanSchema(BaseModel):
    """Schema for a whole plan document.

    Names follow the stored documents: ``projectName``, ``projectSummary``
    and ``goalText`` in camelCase, scheduling fields in snake_case. Both
    spellings are accepted for the former.
    """

    project_name: str = Field(validation_alias=AliasChoices("projectName", "project_name"))
    project_summary: str = Field(
        default="", validation_alias=AliasChoices("projectSummary", "project_summary")
    )
    goal_text: str = Field(default="", validation_alias=AliasChoices("goalText", "goal_text"))
    tasks: list[TaskSchema] = Field(default_factory=list)
    project_start_date: datetime | None = None
    project_end_date: datetime | None = None
    working_hours: WorkingHoursSchema | None = None
    working_days: list[int] | None = None
    schedule_settings: PlanScheduleSettingsSchema | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("project_start_date", "project_end_date", mode="before")
    @classmethod
    def coerce_instant(cls, v: Any) -> datetime | None:
        return parse_instant(v)
