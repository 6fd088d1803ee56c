"""Plan document store.

One document per plan, each embedding its task list. Schedules are
persisted by writing the annotated fields onto the stored task records
(see ProjectPlan.apply_schedule); there is no separate schedule table.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol

from .exceptions import PlanNotFoundError, ValidationError
from .logger import get_logger
from .models import ProjectPlan
from .parser import PlanParser, write_plan_file

logger = get_logger()

_PLAN_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class PlanRepository(Protocol):
    """Protocol for plan storage backends."""

    def get(self, plan_id: str) -> ProjectPlan:
        """Load a plan.

        Raises:
            PlanNotFoundError: If no plan has this id
        """
        ...

    def save(self, plan_id: str, plan: ProjectPlan) -> None:
        """Create or overwrite a plan."""
        ...

    def delete(self, plan_id: str) -> None:
        """Remove a plan.

        Raises:
            PlanNotFoundError: If no plan has this id
        """
        ...

    def list_ids(self) -> list[str]:
        """All stored plan ids, sorted."""
        ...


class YamlPlanRepository:
    """Stores each plan as ``<plan_id>.yaml`` in a directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)
        self.parser = PlanParser()

    def path_for(self, plan_id: str) -> Path:
        if not _PLAN_ID_PATTERN.match(plan_id):
            raise ValidationError(f"Invalid plan id '{plan_id}'")
        return self.directory / f"{plan_id}.yaml"

    def get(self, plan_id: str) -> ProjectPlan:
        path = self.path_for(plan_id)
        if not path.exists():
            raise PlanNotFoundError(f"Plan '{plan_id}' not found in {self.directory}")
        return self.parser.parse_file(path)

    def save(self, plan_id: str, plan: ProjectPlan) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(plan_id)
        write_plan_file(path, plan)
        logger.placements(f"Saved plan '{plan_id}' ({plan.total_tasks} tasks) to {path}")

    def delete(self, plan_id: str) -> None:
        path = self.path_for(plan_id)
        if not path.exists():
            raise PlanNotFoundError(f"Plan '{plan_id}' not found in {self.directory}")
        path.unlink()

    def list_ids(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(path.stem for path in self.directory.glob("*.yaml"))
