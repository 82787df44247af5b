"""
Storage port for tasks.

The service depends on this Protocol, not on a concrete store, so the SQL
repository and the in-memory one are interchangeable.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from task_tracker.domain.task_models import Task, TaskStatus


class TaskRepo(Protocol):
    async def find_by_id(self, task_id: int) -> Optional[Task]: ...

    async def find_all_ordered_by_created_at_desc(self) -> List[Task]: ...

    async def find_by_status(self, status: TaskStatus) -> List[Task]: ...

    async def find_by_status_ordered_by_due_date(self, status: TaskStatus) -> List[Task]: ...

    async def find_by_due_date_between(self, start: datetime, end: datetime) -> List[Task]: ...

    async def save(self, task: Task) -> Task: ...

    async def exists_by_id(self, task_id: int) -> bool: ...

    async def delete_by_id(self, task_id: int) -> None: ...
