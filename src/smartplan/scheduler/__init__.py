"""Scheduler package - critical path scheduling under working-time constraints.

Main entry points:
- schedule_tasks_automatically: Task list to annotated schedule
- get_schedule_statistics: Project summary of a schedule
- SchedulingService: The same pipeline as a class

Building blocks:
- working_time: Calendar arithmetic over working windows and working days
- graph: Dependency graph walking and cycle detection
- ScheduleInputValidator: Validation pre-pass
- ForwardPass / BackwardPass: The two CPM sweeps
- analyze_critical_path: Slack and critical flags
"""

# Configuration
from .config import BackwardPassMode, ScheduleSettings, settings_from_mapping

# Core dataclasses
from .core import CriticalPathTask, ScheduledTask, ScheduleStatistics, Task, TimeWindow

# Critical path analysis
from .critical_path import CriticalPathAnalysis, analyze_critical_path, compute_slack

# Graph walking
from .graph import build_successors, find_cycle, topological_order

# CPM passes
from .passes import BackwardPass, ForwardPass, compute_earliest, compute_latest

# Facade
from .service import SchedulingService, get_schedule_statistics, schedule_tasks_automatically

# Input validation
from .validator import ScheduleInputValidator

# Calendar arithmetic
from .working_time import (
    SnapDirection,
    add_working_duration,
    hours_between,
    snap_to_working_window,
    subtract_working_duration,
)

__all__ = [
    # Configuration
    "BackwardPassMode",
    "ScheduleSettings",
    "settings_from_mapping",
    # Core dataclasses
    "Task",
    "TimeWindow",
    "ScheduledTask",
    "ScheduleStatistics",
    "CriticalPathTask",
    # Calendar arithmetic
    "SnapDirection",
    "add_working_duration",
    "subtract_working_duration",
    "snap_to_working_window",
    "hours_between",
    # Graph walking
    "topological_order",
    "build_successors",
    "find_cycle",
    # Validation
    "ScheduleInputValidator",
    # Passes
    "ForwardPass",
    "BackwardPass",
    "compute_earliest",
    "compute_latest",
    # Critical path
    "CriticalPathAnalysis",
    "analyze_critical_path",
    "compute_slack",
    # Facade
    "SchedulingService",
    "schedule_tasks_automatically",
    "get_schedule_statistics",
]
