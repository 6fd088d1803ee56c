"""Custom exceptions for smartplan."""


class SmartplanError(Exception):
    """Base exception for all smartplan errors."""

    pass


class ValidationError(SmartplanError):
    """Raised when task or plan data fails validation."""

    pass


class CyclicDependencyError(ValidationError):
    """Raised when the dependency graph contains a cycle."""

    def __init__(self, cycle: list[int]):
        self.cycle = cycle
        path = " -> ".join(str(task_id) for task_id in cycle)
        super().__init__(f"Cyclic dependency detected: {path}")


class UnknownDependencyError(ValidationError):
    """Raised when a task depends on an id that is not in the task list."""

    def __init__(self, task_id: int, dependency_id: int):
        self.task_id = task_id
        self.dependency_id = dependency_id
        super().__init__(f"Task {task_id} depends on unknown task {dependency_id}")


class InvalidDurationError(ValidationError):
    """Raised when a task duration is not a positive finite number."""

    def __init__(self, task_id: int, duration: object):
        self.task_id = task_id
        self.duration = duration
        super().__init__(
            f"Task {task_id} has invalid estimated_duration_hours {duration!r} "
            "(must be a positive finite number)"
        )


class ConfigurationError(SmartplanError):
    """Raised when schedule settings cannot produce a schedule."""

    pass


class SchedulingInvariantError(SmartplanError):
    """Raised when the forward and backward passes disagree (internal defect)."""

    pass


class ParseError(SmartplanError):
    """Raised when a plan document cannot be read."""

    pass


class PlanNotFoundError(SmartplanError):
    """Raised when a plan id is not present in the repository."""

    pass
