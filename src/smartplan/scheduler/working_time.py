"""Working-time calendar arithmetic.

All functions work on the wall-clock time of the instants they are given:
naive datetimes stay naive and aware datetimes keep their tzinfo. Weekdays
use the 0=Sunday .. 6=Saturday numbering of ``ScheduleSettings.working_days``.

Forward snapping treats a working window as ``[start, end)``: a task may
begin at 09:00 but not at 17:00. Backward snapping treats it as
``(start, end]`` because it normalizes end instants: finishing at 09:00 on a
Wednesday is the same as finishing at 17:00 on the working day before.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta
from enum import Enum

from smartplan.exceptions import ConfigurationError
from smartplan.logger import debug_enabled, get_logger

from .config import ScheduleSettings

logger = get_logger()

DAYS_PER_WEEK = 7
_ONE_DAY = timedelta(days=1)
_ZERO = timedelta(0)


class SnapDirection(str, Enum):
    """Which way snap_to_working_window moves an instant."""

    FORWARD = "forward"
    BACKWARD = "backward"


def weekday_index(instant: datetime) -> int:
    """Day of week with 0=Sunday .. 6=Saturday."""
    return (instant.weekday() + 1) % DAYS_PER_WEEK


def is_working_day(instant: datetime, settings: ScheduleSettings) -> bool:
    return weekday_index(instant) in settings.working_days


def hours_between(start: datetime, end: datetime) -> float:
    """Wall-clock hours from ``start`` to ``end`` (negative if end is earlier)."""
    return (end - start).total_seconds() / 3600


def check_calendar(settings: ScheduleSettings) -> None:
    """Ensure the working calendar has at least one usable window per week.

    Raises:
        ConfigurationError: If no working days are configured or the daily
            window is empty
    """
    if not settings.working_days:
        raise ConfigurationError(
            "working_days is empty; at least one working day is required "
            "when respect_working_hours is enabled"
        )
    if settings.window_hours <= 0:
        raise ConfigurationError(
            f"working_hours_end ({settings.working_hours_end:%H:%M}) must be after "
            f"working_hours_start ({settings.working_hours_start:%H:%M})"
        )


def _at(instant: datetime, time_of_day: time) -> datetime:
    return instant.replace(
        hour=time_of_day.hour,
        minute=time_of_day.minute,
        second=time_of_day.second,
        microsecond=time_of_day.microsecond,
    )


def _next_working_day_start(instant: datetime, settings: ScheduleSettings) -> datetime:
    day = instant + _ONE_DAY
    for _ in range(DAYS_PER_WEEK):
        if is_working_day(day, settings):
            return _at(day, settings.working_hours_start)
        day += _ONE_DAY
    raise ConfigurationError("No working day found within a week")


def _previous_working_day_end(instant: datetime, settings: ScheduleSettings) -> datetime:
    day = instant - _ONE_DAY
    for _ in range(DAYS_PER_WEEK):
        if is_working_day(day, settings):
            return _at(day, settings.working_hours_end)
        day -= _ONE_DAY
    raise ConfigurationError("No working day found within a week")


def snap_to_working_window(
    instant: datetime,
    settings: ScheduleSettings,
    direction: SnapDirection = SnapDirection.FORWARD,
) -> datetime:
    """Move ``instant`` to the nearest valid working instant in ``direction``.

    Instants already inside a window are returned unchanged. When
    ``respect_working_hours`` is off every instant is valid.

    Args:
        instant: Instant to normalize
        settings: Working window and working days
        direction: FORWARD for start instants, BACKWARD for end instants

    Returns:
        The snapped instant
    """
    if not settings.respect_working_hours:
        return instant
    check_calendar(settings)

    start_of_day = settings.working_hours_start
    end_of_day = settings.working_hours_end
    time_of_day = instant.time()

    if direction == SnapDirection.FORWARD:
        if not is_working_day(instant, settings) or time_of_day >= end_of_day:
            return _next_working_day_start(instant, settings)
        if time_of_day < start_of_day:
            return _at(instant, start_of_day)
        return instant

    if not is_working_day(instant, settings) or time_of_day <= start_of_day:
        return _previous_working_day_end(instant, settings)
    if time_of_day > end_of_day:
        return _at(instant, end_of_day)
    return instant


def add_working_duration(start: datetime, hours: float, settings: ScheduleSettings) -> datetime:
    """Return the instant reached after working ``hours`` from ``start``.

    Duration is consumed only inside working windows on working days; what
    does not fit in the current window spills into the next working day.
    An 8-hour task starting at 16:00 in a 09:00-17:00 day ends at 16:00 on
    the next working day.

    Args:
        start: Instant work begins (snapped forward first)
        hours: Work-hours to consume, >= 0
        settings: Working window, working days and respect_working_hours

    Returns:
        Instant the work is finished

    Raises:
        ValueError: If hours is negative
        ConfigurationError: If the calendar has no usable window
    """
    if hours < 0:
        raise ValueError(f"Cannot add a negative duration ({hours} hours)")
    if not settings.respect_working_hours:
        return start + timedelta(hours=hours)

    current = snap_to_working_window(start, settings, SnapDirection.FORWARD)
    remaining = timedelta(hours=hours)

    while remaining > _ZERO:
        available = max(_at(current, settings.working_hours_end) - current, _ZERO)
        if remaining <= available:
            current += remaining
            break
        remaining -= available
        current = _next_working_day_start(current, settings)
        if debug_enabled():
            logger.debug(f"      spill {remaining} into window starting {current.isoformat()}")

    return current


def subtract_working_duration(
    end: datetime, hours: float, settings: ScheduleSettings
) -> datetime:
    """Return the latest instant from which ``hours`` of work finish by ``end``.

    Mirror image of add_working_duration: ``end`` is snapped backward and the
    duration is taken out of working windows going back in time.

    Raises:
        ValueError: If hours is negative
        ConfigurationError: If the calendar has no usable window
    """
    if hours < 0:
        raise ValueError(f"Cannot subtract a negative duration ({hours} hours)")
    if not settings.respect_working_hours:
        return end - timedelta(hours=hours)

    current = snap_to_working_window(end, settings, SnapDirection.BACKWARD)
    remaining = timedelta(hours=hours)

    while remaining > _ZERO:
        available = max(current - _at(current, settings.working_hours_start), _ZERO)
        if remaining <= available:
            current -= remaining
            break
        remaining -= available
        current = _previous_working_day_end(current, settings)
        if debug_enabled():
            logger.debug(f"      carry {remaining} back to window ending {current.isoformat()}")

    return current
