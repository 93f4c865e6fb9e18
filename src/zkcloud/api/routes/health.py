"""Health check endpoints."""

from fastapi import APIRouter, Depends

from zkcloud import __version__
from zkcloud.dependencies import get_registry, get_store
from zkcloud.storage.store import LocalStorage
from zkcloud.workers.registry import WorkerRegistry

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    store: LocalStorage = Depends(get_store),
    registry: WorkerRegistry = Depends(get_registry),
):
    """Return service health and table sizes."""
    return {
        "status": "healthy",
        "service": "zkcloud",
        "version": __version__,
        "workers": len(registry),
        "tasks": await store.count_tasks(),
    }
