"""FastAPI dependency injection providers."""

from fastapi import Request

from zkcloud.config import Settings
from zkcloud.errors.exceptions import NotFoundError
from zkcloud.storage.store import LocalStorage
from zkcloud.workers.base import WorkerFactory
from zkcloud.workers.registry import WorkerRegistry


def get_store(request: Request) -> LocalStorage:
    """Return the process store from app state."""
    return request.app.state.store


def get_registry(request: Request) -> WorkerRegistry:
    return request.app.state.registry


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_trace_id(request: Request) -> str:
    """Extract trace_id from request state (set by middleware)."""
    return getattr(request.state, "trace_id", "unknown")


def resolve_factory(registry: WorkerRegistry, developer: str, repo: str) -> WorkerFactory:
    """Return the registered worker factory or raise 404."""
    factory = registry.get(developer, repo)
    if factory is None:
        raise NotFoundError("Worker", f"{developer}/{repo}")
    return factory
