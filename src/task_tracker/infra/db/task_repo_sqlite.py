from __future__ import annotations
from datetime import datetime
from typing import Optional, List

from sqlalchemy import Integer, String, Text, DateTime, select, delete
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from task_tracker.domain.task_models import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Task,
    TaskStatus,
)


class Base(DeclarativeBase):
    pass


class TaskRow(Base):
    __tablename__ = "tasks"
    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted row again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text(DESCRIPTION_MAX_LENGTH), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    @classmethod
    def from_domain(cls, task: Task) -> "TaskRow":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status.value,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    def to_domain(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            description=self.description,
            status=TaskStatus(self.status),
            due_date=self.due_date,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class SQLTaskRepo:
    def __init__(self, sessionmaker):
        self.sessionmaker = sessionmaker

    async def _all(self, stmt) -> List[Task]:
        async with self.sessionmaker() as session:
            res = await session.execute(stmt)
            return [r.to_domain() for r in res.scalars().all()]

    async def find_by_id(self, task_id: int) -> Optional[Task]:
        async with self.sessionmaker() as session:
            row = await session.get(TaskRow, task_id)
            return row.to_domain() if row else None

    async def find_all_ordered_by_created_at_desc(self) -> List[Task]:
        return await self._all(
            select(TaskRow).order_by(TaskRow.created_at.desc(), TaskRow.id.desc())
        )

    async def find_by_status(self, status: TaskStatus) -> List[Task]:
        return await self._all(
            select(TaskRow).where(TaskRow.status == status.value).order_by(TaskRow.id)
        )

    async def find_by_status_ordered_by_due_date(self, status: TaskStatus) -> List[Task]:
        return await self._all(
            select(TaskRow)
            .where(TaskRow.status == status.value)
            .order_by(TaskRow.due_date.is_(None), TaskRow.due_date.asc(), TaskRow.id)
        )

    async def find_by_due_date_between(self, start: datetime, end: datetime) -> List[Task]:
        return await self._all(
            select(TaskRow)
            .where(TaskRow.due_date.between(start, end))
            .order_by(TaskRow.due_date.asc(), TaskRow.id)
        )

    async def save(self, task: Task) -> Task:
        # merge inserts when id is None and updates the existing row otherwise
        async with self.sessionmaker() as session:
            row = await session.merge(TaskRow.from_domain(task))
            await session.commit()
            return row.to_domain()

    async def exists_by_id(self, task_id: int) -> bool:
        async with self.sessionmaker() as session:
            res = await session.execute(select(TaskRow.id).where(TaskRow.id == task_id))
            return res.scalar_one_or_none() is not None

    async def delete_by_id(self, task_id: int) -> None:
        async with self.sessionmaker() as session:
            await session.execute(delete(TaskRow).where(TaskRow.id == task_id))
            await session.commit()
