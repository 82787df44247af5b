"""Test configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from task_tracker.app.main import create_app
from task_tracker.infra.db.sqlite import make_engine, make_sessionmaker
from task_tracker.infra.db.task_repo_memory import InMemoryTaskRepo
from task_tracker.infra.db.task_repo_sqlite import Base, SQLTaskRepo
from task_tracker.services.task_service import TaskService


def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{(tmp_path / 'tasks.db').as_posix()}"


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep logs and any default database inside the test's tmp dir."""
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("DB_PATH", str(tmp_path / "default.db"))
    monkeypatch.delenv("DATABASE_URL", raising=False)


@pytest.fixture
def memory_repo() -> InMemoryTaskRepo:
    return InMemoryTaskRepo()


@pytest.fixture
def service(memory_repo: InMemoryTaskRepo) -> TaskService:
    return TaskService(memory_repo)


@pytest_asyncio.fixture
async def sql_repo(tmp_path: Path) -> AsyncGenerator[SQLTaskRepo, None]:
    engine = make_engine(sqlite_url(tmp_path))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield SQLTaskRepo(make_sessionmaker(engine))
    await engine.dispose()


@pytest.fixture
def client(tmp_path: Path) -> Generator[TestClient, None, None]:
    """Create test client backed by a fresh SQLite file."""
    app = create_app(database_url=sqlite_url(tmp_path))
    with TestClient(app) as c:
        yield c
