"""Tests for the YAML plan repository."""

from pathlib import Path

import pytest

from smartplan.exceptions import PlanNotFoundError, ValidationError
from smartplan.models import PlanTask, ProjectPlan
from smartplan.storage import PlanRepository, YamlPlanRepository
from tests.conftest import make_task


@pytest.fixture
def repository(tmp_path: Path) -> YamlPlanRepository:
    return YamlPlanRepository(tmp_path / "plans")


def _plan(name: str) -> ProjectPlan:
    return ProjectPlan(
        project_name=name,
        tasks=[PlanTask(make_task(1)), PlanTask(make_task(2, dependencies=[1]))],
    )


class TestYamlPlanRepository:
    """Test storing plans as YAML documents."""

    def test_satisfies_protocol(self, repository: YamlPlanRepository) -> None:
        store: PlanRepository = repository
        assert store.list_ids() == []

    def test_save_and_get(self, repository: YamlPlanRepository) -> None:
        repository.save("launch", _plan("Launch"))

        assert (repository.directory / "launch.yaml").exists()
        plan = repository.get("launch")
        assert plan.project_name == "Launch"
        assert plan.tasks[1].task.dependencies == [1]

    def test_save_overwrites(self, repository: YamlPlanRepository) -> None:
        repository.save("launch", _plan("Launch"))
        repository.save("launch", _plan("Relaunch"))

        assert repository.get("launch").project_name == "Relaunch"
        assert repository.list_ids() == ["launch"]

    def test_list_ids_sorted(self, repository: YamlPlanRepository) -> None:
        for plan_id in ("zeta", "alpha", "mid-2025"):
            repository.save(plan_id, _plan(plan_id))

        assert repository.list_ids() == ["alpha", "mid-2025", "zeta"]

    def test_delete(self, repository: YamlPlanRepository) -> None:
        repository.save("launch", _plan("Launch"))
        repository.delete("launch")

        assert repository.list_ids() == []
        with pytest.raises(PlanNotFoundError):
            repository.delete("launch")

    def test_get_missing(self, repository: YamlPlanRepository) -> None:
        with pytest.raises(PlanNotFoundError, match="'nope'"):
            repository.get("nope")

    @pytest.mark.parametrize("plan_id", ["../escape", "", "a/b", ".hidden"])
    def test_rejects_unsafe_ids(self, repository: YamlPlanRepository, plan_id: str) -> None:
        with pytest.raises(ValidationError, match="Invalid plan id"):
            repository.path_for(plan_id)
