import logging
from datetime import datetime, timedelta
from typing import List, Optional

from task_tracker.domain.task_models import Task, TaskCreate, TaskResponse, TaskStatus, TaskUpdate
from task_tracker.domain.task_repo import TaskRepo

logger = logging.getLogger("tasks.service")


def _next_updated_at(previous: datetime) -> datetime:
    # updated_at must move forward on every mutation, even within one clock tick
    now = datetime.now()
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class TaskService:
    def __init__(self, repo: TaskRepo):
        self.repo = repo

    async def list_tasks(self, status: Optional[TaskStatus] = None) -> List[TaskResponse]:
        if status is None:
            tasks = await self.repo.find_all_ordered_by_created_at_desc()
        else:
            tasks = await self.repo.find_by_status(status)
            tasks.sort(key=lambda t: (t.created_at, t.id), reverse=True)
        return [TaskResponse.from_task(t) for t in tasks]

    async def get_task(self, task_id: int) -> Optional[TaskResponse]:
        task = await self.repo.find_by_id(task_id)
        return TaskResponse.from_task(task) if task else None

    async def create_task(self, data: TaskCreate) -> TaskResponse:
        now = datetime.now()
        task = Task(
            title=data.title,
            description=data.description,
            status=data.status,
            due_date=data.due_date,
            created_at=now,
            updated_at=now,
        )
        saved = await self.repo.save(task)
        logger.info(
            "task.create",
            extra={"category": "tasks", "event": "task.create", "task_id": saved.id, "title": saved.title},
        )
        return TaskResponse.from_task(saved)

    async def update_task(self, task_id: int, data: TaskUpdate) -> Optional[TaskResponse]:
        task = await self.repo.find_by_id(task_id)
        if task is None:
            return None
        changes = data.changes()
        for field, value in changes.items():
            setattr(task, field, value)
        task.updated_at = _next_updated_at(task.updated_at)
        saved = await self.repo.save(task)
        logger.info(
            "task.update",
            extra={"category": "tasks", "event": "task.update", "task_id": task_id, "fields": sorted(changes)},
        )
        return TaskResponse.from_task(saved)

    async def update_task_status(self, task_id: int, status: TaskStatus) -> Optional[TaskResponse]:
        task = await self.repo.find_by_id(task_id)
        if task is None:
            return None
        previous = task.status
        task.status = status
        task.updated_at = _next_updated_at(task.updated_at)
        saved = await self.repo.save(task)
        logger.info(
            "task.status",
            extra={
                "category": "tasks",
                "event": "task.status",
                "task_id": task_id,
                "from": previous.value,
                "to": status.value,
            },
        )
        return TaskResponse.from_task(saved)

    async def delete_task(self, task_id: int) -> bool:
        if not await self.repo.exists_by_id(task_id):
            return False
        await self.repo.delete_by_id(task_id)
        logger.info("task.delete", extra={"category": "tasks", "event": "task.delete", "task_id": task_id})
        return True
