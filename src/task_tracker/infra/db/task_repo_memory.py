from __future__ import annotations
from datetime import datetime
from itertools import count
from typing import Dict, List, Optional

from task_tracker.domain.task_models import Task, TaskStatus


def _newest_first(tasks) -> List[Task]:
    return sorted(tasks, key=lambda t: (t.created_at, t.id), reverse=True)


class InMemoryTaskRepo:
    """
    Dict-backed TaskRepo.

    Same contract as SQLTaskRepo: ids come from a sequence that never reuses
    a value, and callers always get copies so they can't mutate stored rows.
    """
    def __init__(self):
        self._tasks: Dict[int, Task] = {}
        self._ids = count(1)

    async def find_by_id(self, task_id: int) -> Optional[Task]:
        task = self._tasks.get(task_id)
        return task.model_copy() if task else None

    async def find_all_ordered_by_created_at_desc(self) -> List[Task]:
        return [t.model_copy() for t in _newest_first(self._tasks.values())]

    async def find_by_status(self, status: TaskStatus) -> List[Task]:
        return [t.model_copy() for t in self._tasks.values() if t.status == status]

    async def find_by_status_ordered_by_due_date(self, status: TaskStatus) -> List[Task]:
        matching = [t for t in self._tasks.values() if t.status == status]
        # no due date sorts last
        matching.sort(key=lambda t: (t.due_date is None, t.due_date or datetime.min))
        return [t.model_copy() for t in matching]

    async def find_by_due_date_between(self, start: datetime, end: datetime) -> List[Task]:
        return [
            t.model_copy()
            for t in self._tasks.values()
            if t.due_date is not None and start <= t.due_date <= end
        ]

    async def save(self, task: Task) -> Task:
        stored = task.model_copy()
        if stored.id is None:
            stored.id = next(self._ids)
        self._tasks[stored.id] = stored
        return stored.model_copy()

    async def exists_by_id(self, task_id: int) -> bool:
        return task_id in self._tasks

    async def delete_by_id(self, task_id: int) -> None:
        self._tasks.pop(task_id, None)
