import logging
from contextlib import asynccontextmanager
from typing import Optional

import redis
import uvicorn
from fastapi import FastAPI

from app import __version__
from app.config import HOST, PORT, REDIS_URL
from app.errors import register_error_handlers
from app.handlers import router as tasks_router
from app.observability import configure_logging, instrument_app
from app.repository import RedisTaskRepository, TaskRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # An injected repository (tests) owns its own storage.
    if getattr(app.state, "repository", None) is not None:
        yield
        return

    client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    app.state.repository = RedisTaskRepository(client)
    logger.info("Task store opened", extra={"redis_url": REDIS_URL})
    try:
        yield
    finally:
        app.state.repository = None
        client.close()
        logger.info("Task store closed")


def create_app(repository: Optional[TaskRepository] = None) -> FastAPI:
    app = FastAPI(title="task-service", version=__version__, lifespan=lifespan)
    app.state.repository = repository
    register_error_handlers(app)
    app.include_router(tasks_router)

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


configure_logging()
app = create_app()
instrument_app(app)


def run() -> None:
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
