"""FastAPI application factory and lifespan management."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from zkcloud import __version__
from zkcloud.config import Settings
from zkcloud.config import settings as default_settings
from zkcloud.logging_config import configure_logging
from zkcloud.storage.blob import FileBlobStore
from zkcloud.storage.store import LocalStorage
from zkcloud.workers.registry import WorkerRegistry, load_workers
from zkcloud.workers.registry import registry as default_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Restore storage and start the task scheduler; flush on shutdown."""
    settings: Settings = app.state.settings
    store: LocalStorage = app.state.store
    await store.open()

    scheduler_task = None
    if settings.scheduler_enabled:
        from zkcloud.workers.scheduler import run_scheduler
        scheduler_task = asyncio.create_task(run_scheduler(app))

    logger.info("zkcloud started (snapshot=%s)", store.snapshot_name or "none")
    yield

    if scheduler_task is not None:
        scheduler_task.cancel()
        try:
            await scheduler_task
        except asyncio.CancelledError:
            pass
    await store.close()
    logger.info("zkcloud shutdown complete")


def create_app(
    settings: Settings | None = None,
    store: LocalStorage | None = None,
    registry: WorkerRegistry | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or default_settings
    app = FastAPI(
        title="zkcloud",
        version=__version__,
        description="Local cloud for zk proof workers.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store or LocalStorage(
        blobs=FileBlobStore(settings.data_dir),
        snapshot_name=settings.snapshot_name,
    )
    app.state.registry = registry if registry is not None else default_registry

    from zkcloud.api.middleware.trace_context import TraceContextMiddleware
    app.add_middleware(TraceContextMiddleware)

    from zkcloud.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from zkcloud.api.router import api_router
    app.include_router(api_router)

    return app


def build_app(settings: Settings | None = None, registry: WorkerRegistry | None = None) -> FastAPI:
    """uvicorn factory: configure logging, load configured workers, create the app."""
    settings = settings or default_settings
    configure_logging(log_level=settings.log_level, json_output=settings.json_logs)
    registry = load_workers(settings.workers, registry if registry is not None else default_registry)
    return create_app(settings=settings, registry=registry)
