from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, NaiveDatetime, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError
from enum import Enum
from datetime import datetime
from typing import Optional

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 2000


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class CamelModel(BaseModel):
    # JSON is camelCase on the wire; snake_case is still accepted on input.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not value.strip():
        raise PydanticCustomError("blank", "Title is required")
    if len(value) > TITLE_MAX_LENGTH:
        raise PydanticCustomError(
            "too_long", "Title must not exceed {max} characters", {"max": TITLE_MAX_LENGTH}
        )
    return value


def _check_description(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > DESCRIPTION_MAX_LENGTH:
        raise PydanticCustomError(
            "too_long", "Description must not exceed {max} characters", {"max": DESCRIPTION_MAX_LENGTH}
        )
    return value


class TaskCreate(CamelModel):
    title: str
    description: Optional[str] = None
    status: TaskStatus
    due_date: Optional[NaiveDatetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value):
        return _check_title(value)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value):
        return _check_description(value)


class TaskUpdate(CamelModel):
    """Partial update: a field that is absent or null keeps its stored value."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[NaiveDatetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value):
        return _check_title(value)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value):
        return _check_description(value)

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class Task(BaseModel):
    """Persisted task. `id` is None until the store assigns one."""

    id: Optional[int] = None
    title: str
    description: Optional[str] = None
    status: TaskStatus
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TaskResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls.model_validate(task.model_dump())


class ErrorResponse(CamelModel):
    message: str
    status: int
    timestamp: datetime = Field(default_factory=datetime.now)
    field_errors: Optional[dict[str, str]] = None
