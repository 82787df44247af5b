from __future__ import annotations
import os
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from pathlib import Path

def make_sqlite_url(db_path: str) -> str:
    # db_path like "./data/tasks.db"
    p = Path(db_path).resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{p.as_posix()}"

def resolve_database_url(database_url: Optional[str] = None, db_path: Optional[str] = None) -> str:
    """DATABASE_URL wins; otherwise a SQLite file at DB_PATH."""
    url = database_url or os.getenv("DATABASE_URL")
    if url:
        return url
    return make_sqlite_url(db_path or os.getenv("DB_PATH", "./data/tasks.db"))

def make_engine(database_url: str):
    return create_async_engine(database_url, future=True)

def make_sessionmaker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)
