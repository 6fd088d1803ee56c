"""Command-line interface for smartplan."""

from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any

import typer

from . import context
from .exceptions import ConfigurationError, SmartplanError, ValidationError
from .logger import get_logger, setup_logger
from .models import ProjectPlan
from .parser import load_plan, write_plan_file
from .project_config import discover_project_config
from .scheduler import (
    BackwardPassMode,
    ScheduledTask,
    ScheduleInputValidator,
    ScheduleSettings,
    ScheduleStatistics,
    SchedulingService,
)
from .scheduler.config import parse_instant
from .storage import YamlPlanRepository

logger = get_logger()

app = typer.Typer(
    name="smartplan",
    help="Schedule project plans onto working hours with critical path analysis",
    add_completion=False,
)

_TIME_FORMAT = "%a %Y-%m-%d %H:%M"

PlanFileArgument = Annotated[Path, typer.Argument(help="Path to the plan file (YAML or JSON)")]
StartOption = Annotated[
    str | None,
    typer.Option("--start", "-s", help="Project start (ISO-8601 date or datetime)"),
]
HoursStartOption = Annotated[
    str | None, typer.Option("--hours-start", help="Start of the working day, e.g. 09:00")
]
HoursEndOption = Annotated[
    str | None, typer.Option("--hours-end", help="End of the working day, e.g. 17:00")
]
WorkingDaysOption = Annotated[
    str | None,
    typer.Option(
        "--working-days",
        help="Comma-separated weekday indices, 0=Sunday .. 6=Saturday (default 1,2,3,4,5)",
    ),
]
DependenciesOption = Annotated[
    bool | None,
    typer.Option(
        "--respect-dependencies/--ignore-dependencies",
        help="Start tasks only after their dependencies finish",
        show_default=False,
    ),
]
WorkingHoursOption = Annotated[
    bool | None,
    typer.Option(
        "--respect-working-hours/--ignore-working-hours",
        help="Consume durations only inside working hours on working days",
        show_default=False,
    ),
]
BackwardPassOption = Annotated[
    BackwardPassMode | None,
    typer.Option("--backward-pass", help="How latest start times are computed"),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Print JSON instead of text")]


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=placements, 2=checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: smartplan_config.yaml)",
        ),
    ] = None,
    current_time: Annotated[
        str | None,
        typer.Option(
            "--current-time",
            help="Instant to treat as 'now' when a plan has no start date (ISO-8601)",
        ),
    ] = None,
) -> None:
    """Global options for smartplan commands."""
    setup_logger(verbose)
    context.set_config_path(config)
    context.set_current_time(_parse_instant_option(current_time, "current-time"))


def _parse_instant_option(value: str | None, option_name: str) -> datetime | None:
    if value is None:
        return None
    try:
        return parse_instant(value)
    except ValueError:
        typer.echo(
            f"Error: Invalid --{option_name} '{value}'. Use ISO-8601, e.g. 2025-01-06T09:00",
            err=True,
        )
        raise typer.Exit(1) from None


def _parse_working_days(value: str | None) -> list[int] | None:
    if value is None:
        return None
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        typer.echo(
            f"Error: Invalid --working-days '{value}'. Use e.g. 1,2,3,4,5",
            err=True,
        )
        raise typer.Exit(1) from None


def _fail(error: SmartplanError) -> typer.Exit:
    """Report an error and return the Exit to raise."""
    logger.debug(f"{type(error).__name__} raised while handling command")
    typer.echo(f"Error: {error}", err=True)
    if isinstance(error, ValidationError):
        typer.echo("Check your task dependencies and durations.", err=True)
    return typer.Exit(1)


def _resolve_settings(  # noqa: PLR0913 - one parameter per CLI override
    plan: ProjectPlan,
    file: Path,
    *,
    start: str | None,
    hours_start: str | None,
    hours_end: str | None,
    working_days: str | None,
    respect_dependencies: bool | None,
    respect_working_hours: bool | None,
    backward_pass: BackwardPassMode | None,
) -> ScheduleSettings:
    """Merge settings: defaults < config file < values stored on the plan < CLI."""
    project_config = discover_project_config(file)
    base = project_config.scheduler if project_config else ScheduleSettings()

    overrides: dict[str, Any] = dict(plan.stored_settings())
    overrides.update(
        {
            "project_start_date": _parse_instant_option(start, "start"),
            "working_hours_start": hours_start,
            "working_hours_end": hours_end,
            "working_days": _parse_working_days(working_days),
            "respect_dependencies": respect_dependencies,
            "respect_working_hours": respect_working_hours,
            "backward_pass_mode": backward_pass,
        }
    )
    return base.merged(overrides)


def _run_schedule(
    plan: ProjectPlan, settings: ScheduleSettings
) -> tuple[list[ScheduledTask], ScheduleStatistics]:
    service = SchedulingService(plan.scheduler_tasks(), settings, context.get_current_time())
    return service.schedule_with_statistics()


def _display_schedule_results(
    scheduled: Sequence[ScheduledTask], statistics: ScheduleStatistics
) -> None:
    """Display schedule results to stdout."""
    typer.echo("Schedule Results")
    typer.echo("=" * 80)
    typer.echo("")

    for st in scheduled:
        marker = "  [critical]" if st.is_critical_path else ""
        typer.echo(f"{st.title} ({st.id}){marker}")
        typer.echo(f"  Start:    {st.scheduled_start:{_TIME_FORMAT}}")
        typer.echo(f"  End:      {st.scheduled_end:{_TIME_FORMAT}}")
        typer.echo(f"  Duration: {st.task.estimated_duration_hours:g}h")
        typer.echo(f"  Slack:    {st.slack_time}h")
        if st.task.dependencies:
            typer.echo(f"  Depends on: {', '.join(str(d) for d in st.task.dependencies)}")
        typer.echo("")

    _display_statistics(statistics)


def _display_statistics(statistics: ScheduleStatistics) -> None:
    typer.echo("Summary")
    typer.echo("-" * 80)
    if statistics.project_start is None or statistics.project_end is None:
        typer.echo("  No tasks to schedule")
        return
    typer.echo(f"  Project start:  {statistics.project_start:{_TIME_FORMAT}}")
    typer.echo(f"  Project end:    {statistics.project_end:{_TIME_FORMAT}}")
    typer.echo(f"  Total days:     {statistics.total_days}")
    typer.echo(f"  Total tasks:    {statistics.total_tasks}")
    typer.echo(f"  Critical tasks: {statistics.critical_path_length}")
    for entry in statistics.critical_path_tasks:
        typer.echo(f"    - {entry.title} ({entry.id}, {entry.duration:g}h)")


def _export_schedule_csv(scheduled: Sequence[ScheduledTask], output_path: Path) -> None:
    """Export schedule results to CSV."""
    with output_path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(
            [
                "id",
                "title",
                "estimated_duration_hours",
                "scheduled_start",
                "scheduled_end",
                "slack_time",
                "is_critical_path",
            ]
        )
        for st in scheduled:
            writer.writerow(
                [
                    st.id,
                    st.title,
                    st.task.estimated_duration_hours,
                    st.scheduled_start.isoformat(),
                    st.scheduled_end.isoformat(),
                    st.slack_time,
                    st.is_critical_path,
                ]
            )


@app.command()
def schedule(  # noqa: PLR0913 - CLI command needs multiple options
    file: PlanFileArgument,
    *,
    start: StartOption = None,
    hours_start: HoursStartOption = None,
    hours_end: HoursEndOption = None,
    working_days: WorkingDaysOption = None,
    respect_dependencies: DependenciesOption = None,
    respect_working_hours: WorkingHoursOption = None,
    backward_pass: BackwardPassOption = None,
    as_json: JsonOption = False,
    apply: Annotated[
        bool,
        typer.Option("--apply", help="Write the schedule back onto the plan file"),
    ] = False,
    output_csv: Annotated[
        Path | None,
        typer.Option("--output-csv", help="Export the schedule to a CSV file"),
    ] = None,
) -> None:
    """Compute a schedule and preview it, export it, or apply it to the plan."""
    try:
        plan = load_plan(file)
        settings = _resolve_settings(
            plan,
            file,
            start=start,
            hours_start=hours_start,
            hours_end=hours_end,
            working_days=working_days,
            respect_dependencies=respect_dependencies,
            respect_working_hours=respect_working_hours,
            backward_pass=backward_pass,
        )
        scheduled, statistics = _run_schedule(plan, settings)
    except SmartplanError as e:
        raise _fail(e) from None

    if as_json:
        payload = {
            "tasks": [st.to_dict() for st in scheduled],
            "statistics": statistics.to_dict(),
        }
        typer.echo(json.dumps(payload, indent=2))
    else:
        _display_schedule_results(scheduled, statistics)

    if output_csv:
        _export_schedule_csv(scheduled, output_csv)
        typer.echo(f"Schedule exported to {output_csv}", err=as_json)

    if apply:
        applied_at = context.get_current_time() or datetime.now()  # noqa: DTZ005
        updated = plan.apply_schedule(scheduled, statistics, settings, applied_at)
        write_plan_file(file, updated)
        typer.echo(f"Schedule applied to {len(scheduled)} tasks in {file}", err=as_json)


@app.command()
def stats(  # noqa: PLR0913 - CLI command needs multiple options
    file: PlanFileArgument,
    *,
    start: StartOption = None,
    hours_start: HoursStartOption = None,
    hours_end: HoursEndOption = None,
    working_days: WorkingDaysOption = None,
    respect_dependencies: DependenciesOption = None,
    respect_working_hours: WorkingHoursOption = None,
    backward_pass: BackwardPassOption = None,
    as_json: JsonOption = False,
) -> None:
    """Show project span and critical path statistics for a plan."""
    try:
        plan = load_plan(file)
        settings = _resolve_settings(
            plan,
            file,
            start=start,
            hours_start=hours_start,
            hours_end=hours_end,
            working_days=working_days,
            respect_dependencies=respect_dependencies,
            respect_working_hours=respect_working_hours,
            backward_pass=backward_pass,
        )
        _, statistics = _run_schedule(plan, settings)
    except SmartplanError as e:
        raise _fail(e) from None

    if as_json:
        typer.echo(json.dumps(statistics.to_dict(), indent=2))
    else:
        _display_statistics(statistics)


@app.command()
def validate(file: PlanFileArgument) -> None:
    """Check a plan's tasks and settings without scheduling it."""
    try:
        plan = load_plan(file)
        settings = _resolve_settings(
            plan,
            file,
            start=None,
            hours_start=None,
            hours_end=None,
            working_days=None,
            respect_dependencies=None,
            respect_working_hours=None,
            backward_pass=None,
        )
        ScheduleInputValidator(settings).validate(plan.scheduler_tasks())
    except SmartplanError as e:
        raise _fail(e) from None

    typer.echo(f"OK: {plan.project_name} ({plan.total_tasks} tasks)")


@app.command()
def plans(
    store: Annotated[
        Path | None,
        typer.Option("--store", help="Plan directory (default: plans_directory from config)"),
    ] = None,
) -> None:
    """List the plans in a plan directory."""
    directory = store
    if directory is None:
        try:
            project_config = discover_project_config()
        except ConfigurationError as e:
            raise _fail(e) from None
        if project_config is None or project_config.plans_directory is None:
            typer.echo("Error: No --store given and no plans_directory configured", err=True)
            raise typer.Exit(1)
        directory = project_config.plans_directory

    repository = YamlPlanRepository(directory)
    plan_ids = repository.list_ids()
    if not plan_ids:
        typer.echo(f"No plans in {directory}")
        return

    for plan_id in plan_ids:
        try:
            plan = repository.get(plan_id)
        except SmartplanError as e:
            typer.echo(f"{plan_id}: unreadable ({e})", err=True)
            continue
        last = "never scheduled"
        if plan.schedule_settings and plan.schedule_settings.last_scheduled_at:
            last = f"scheduled {plan.schedule_settings.last_scheduled_at:%Y-%m-%d %H:%M}"
        typer.echo(
            f"{plan_id}: {plan.project_name} - {plan.total_tasks} tasks, "
            f"{plan.progress_percentage}% done, {last}"
        )


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
