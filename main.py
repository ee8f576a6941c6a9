import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import ServiceFailure, service_failure_handler
from api.routes import auth, balancing, health, members, tasks
from app.config import settings
from app.db import init_db
from app.logger import setup_logging

setup_logging(level=settings.log_level, log_file=settings.log_file)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    logger.info("Starting application...")

    try:
        if settings.app_env != "test":
            init_db()
    except Exception as e:
        logger.error(f"Error during startup: {e}")

    yield

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Task Balancer Backend",
        description="Team task tracking with capacity-aware auto-assignment and rebalancing",
        version="1.0.0",
        lifespan=app_lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceFailure, service_failure_handler)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(members.router)
    app.include_router(tasks.router)
    app.include_router(balancing.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
