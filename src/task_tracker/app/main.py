import os
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from task_tracker.app.routes import tasks
from task_tracker.app.errors import register_error_handlers
from task_tracker.infra.db.sqlite import resolve_database_url, make_engine, make_sessionmaker
from task_tracker.infra.db.task_repo_sqlite import Base, SQLTaskRepo
from task_tracker.services.task_service import TaskService
from task_tracker.observability.logging import setup_logging
from task_tracker.app.middleware.access_log import AccessLogMiddleware

logger = logging.getLogger("tasks.system")


def create_app(database_url: Optional[str] = None) -> FastAPI:
    setup_logging()
    logger.info("system.start", extra={"category": "system", "event": "system.start"})

    app = FastAPI(title="Task Tracker")
    app.add_middleware(AccessLogMiddleware)
    # the demo frontend is served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # --- DB wiring ---
    url = resolve_database_url(database_url)
    engine = make_engine(url)
    sessionmaker = make_sessionmaker(engine)

    repo = SQLTaskRepo(sessionmaker)
    svc = TaskService(repo)
    tasks.get_service = lambda: svc

    app.include_router(tasks.router)

    # Create tables on startup
    @app.on_event("startup")
    async def _startup():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(
            "db.ready",
            extra={"category": "system", "event": "db.ready", "database": engine.url.render_as_string(hide_password=True)},
        )

    @app.on_event("shutdown")
    async def _shutdown():
        await engine.dispose()
        logger.info("system.stop", extra={"category": "system", "event": "system.stop"})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def run() -> None:
    uvicorn.run(
        "task_tracker.app.main:create_app",
        factory=True,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8080")),
        log_config=None,
    )
