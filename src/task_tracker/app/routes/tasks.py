from typing import Annotated, Optional

from fastapi import APIRouter, Path, Response, status as http_status
from task_tracker.domain.task_models import TaskCreate, TaskResponse, TaskStatus, TaskUpdate
from task_tracker.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

# ids live in a signed 64-bit column
TaskId = Annotated[int, Path(ge=-(2**63), le=2**63 - 1)]


def get_service() -> TaskService:
    # Overwritten in main.py:
    # tasks.get_service = lambda: svc
    raise RuntimeError("TaskService not wired")


def _not_found() -> Response:
    return Response(status_code=http_status.HTTP_404_NOT_FOUND)


@router.get("", response_model=list[TaskResponse])
async def list_tasks(status: Optional[TaskStatus] = None):
    svc = get_service()
    return await svc.list_tasks(status)


@router.get("/{task_id}", response_model=TaskResponse, responses={404: {"description": "Task not found"}})
async def get_task(task_id: TaskId):
    svc = get_service()
    task = await svc.get_task(task_id)
    if task is None:
        return _not_found()
    return task


@router.post("", response_model=TaskResponse, status_code=http_status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate):
    svc = get_service()
    return await svc.create_task(payload)


@router.put("/{task_id}", response_model=TaskResponse, responses={404: {"description": "Task not found"}})
async def update_task(task_id: TaskId, payload: TaskUpdate):
    svc = get_service()
    task = await svc.update_task(task_id, payload)
    if task is None:
        return _not_found()
    return task


@router.patch("/{task_id}/status", response_model=TaskResponse, responses={404: {"description": "Task not found"}})
async def update_task_status(task_id: TaskId, status: TaskStatus):
    # status comes from the query string, not the body
    svc = get_service()
    task = await svc.update_task_status(task_id, status)
    if task is None:
        return _not_found()
    return task


@router.delete("/{task_id}", status_code=http_status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_task(task_id: TaskId):
    svc = get_service()
    if not await svc.delete_task(task_id):
        return _not_found()
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)
