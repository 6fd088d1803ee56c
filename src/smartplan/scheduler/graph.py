"""Dependency graph walking over integer task ids."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence

from smartplan.exceptions import CyclicDependencyError, UnknownDependencyError
from smartplan.logger import checks_enabled, get_logger

from .core import Task

logger = get_logger()

_UNVISITED = 0
_IN_PROGRESS = 1
_DONE = 2


def build_dependency_map(tasks: Sequence[Task]) -> dict[int, list[int]]:
    """Map each task id to its dependency ids.

    Raises:
        UnknownDependencyError: If a dependency id is not a task in the list
        CyclicDependencyError: If a task depends on itself
    """
    known_ids = {task.id for task in tasks}
    dependency_map: dict[int, list[int]] = {}
    for task in tasks:
        for dep_id in task.dependencies:
            if dep_id == task.id:
                raise CyclicDependencyError([task.id, task.id])
            if dep_id not in known_ids:
                raise UnknownDependencyError(task.id, dep_id)
        dependency_map[task.id] = list(dict.fromkeys(task.dependencies))
    return dependency_map


def build_successors(tasks: Sequence[Task]) -> dict[int, list[int]]:
    """Map each task id to the ids of the tasks that depend on it.

    Every task gets an entry; sinks map to an empty list. Ids appear in
    input order.
    """
    successors: dict[int, list[int]] = {task.id: [] for task in tasks}
    for task in tasks:
        for dep_id in dict.fromkeys(task.dependencies):
            if dep_id in successors:
                successors[dep_id].append(task.id)
    return successors


def find_cycle(
    dependency_map: dict[int, list[int]], start_ids: Iterable[int] | None = None
) -> list[int] | None:
    """Find one dependency cycle with a visited/in-progress colouring walk.

    Args:
        dependency_map: Task id to dependency ids
        start_ids: Ids to start walking from (defaults to every id)

    Returns:
        The cycle as a list of ids whose first and last element are the same,
        or None if the graph reachable from ``start_ids`` is acyclic
    """
    color = dict.fromkeys(dependency_map, _UNVISITED)
    for root in start_ids if start_ids is not None else dependency_map:
        if color.get(root, _DONE) != _UNVISITED:
            continue
        path: list[int] = [root]
        stack = [iter(dependency_map[root])]
        color[root] = _IN_PROGRESS
        while stack:
            next_id = next(stack[-1], None)
            if next_id is None:
                color[path.pop()] = _DONE
                stack.pop()
                continue
            state = color.get(next_id, _DONE)
            if state == _IN_PROGRESS:
                return [*path[path.index(next_id) :], next_id]
            if state == _UNVISITED:
                color[next_id] = _IN_PROGRESS
                path.append(next_id)
                stack.append(iter(dependency_map[next_id]))
    return None


def topological_order(tasks: Sequence[Task]) -> list[Task]:
    """Order tasks so that every task comes after all of its dependencies.

    Uses a work queue: a task whose dependencies are not all processed yet is
    re-queued. Once every queued task has been re-queued without any progress
    the remaining tasks cannot be resolved, which bounds the number of
    re-queues by O(N^2). Ties keep input order.

    Raises:
        UnknownDependencyError: If a dependency id is not in the list
        CyclicDependencyError: If the dependencies contain a cycle
    """
    dependency_map = build_dependency_map(tasks)

    queue: deque[Task] = deque(tasks)
    processed: set[int] = set()
    order: list[Task] = []
    requeued_without_progress = 0

    while queue:
        task = queue.popleft()
        pending = [dep_id for dep_id in dependency_map[task.id] if dep_id not in processed]
        if pending:
            queue.append(task)
            requeued_without_progress += 1
            if checks_enabled():
                logger.checks(f"    task {task.id} waiting on {pending}")
            if requeued_without_progress >= len(queue):
                remaining = [queued.id for queued in queue]
                cycle = find_cycle(dependency_map, remaining) or remaining
                raise CyclicDependencyError(cycle)
            continue

        requeued_without_progress = 0
        processed.add(task.id)
        order.append(task)

    return order
