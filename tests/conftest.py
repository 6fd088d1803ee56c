"""Pytest configuration and fixtures for smartplan tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, time, timedelta
from typing import Any

import pytest

from smartplan import context
from smartplan.logger import reset_logger
from smartplan.scheduler import ScheduledTask, ScheduleSettings, Task

# 2025-01-06 is a Monday
MONDAY = datetime(2025, 1, 6, 9, 0)


@pytest.fixture(autouse=True)
def clean_global_state() -> Iterator[None]:
    """Reset logger handlers and CLI context between tests."""
    yield
    reset_logger()
    context.set_config_path(None)
    context.set_current_time(None)


@pytest.fixture
def settings() -> ScheduleSettings:
    """Default settings anchored at Monday 09:00."""
    return ScheduleSettings(project_start_date=MONDAY)


def make_task(
    task_id: int,
    hours: float = 8.0,
    dependencies: list[int] | None = None,
    title: str | None = None,
    **meta: Any,
) -> Task:
    """Build a Task with a generated title."""
    return Task(
        id=task_id,
        title=title or f"Task {task_id}",
        estimated_duration_hours=hours,
        dependencies=dependencies or [],
        meta=dict(meta),
    )


def by_id(scheduled: list[ScheduledTask]) -> dict[int, ScheduledTask]:
    return {st.id: st for st in scheduled}


def working_hours_between(
    start: datetime, end: datetime, schedule_settings: ScheduleSettings
) -> float:
    """Hours of [start, end) that fall inside working windows on working days."""
    total = 0.0
    day = start.replace(hour=0, minute=0, second=0, microsecond=0)
    while day < end:
        if (day.weekday() + 1) % 7 in schedule_settings.working_days:
            window_start = datetime.combine(day.date(), schedule_settings.working_hours_start)
            window_end = datetime.combine(day.date(), schedule_settings.working_hours_end)
            overlap_start = max(start, window_start)
            overlap_end = min(end, window_end)
            if overlap_end > overlap_start:
                total += (overlap_end - overlap_start).total_seconds() / 3600
        day += timedelta(days=1)
    return total


def in_working_window(
    instant: datetime, schedule_settings: ScheduleSettings, *, as_end: bool = False
) -> bool:
    """Whether a start (or end) instant lies inside a working window."""
    if (instant.weekday() + 1) % 7 not in schedule_settings.working_days:
        return False
    tod: time = instant.time()
    if as_end:
        return schedule_settings.working_hours_start < tod <= schedule_settings.working_hours_end
    return schedule_settings.working_hours_start <= tod < schedule_settings.working_hours_end
