"""Snapshot save/restore endpoints."""

from fastapi import APIRouter, Depends

from zkcloud.dependencies import get_store
from zkcloud.errors.exceptions import NotFoundError
from zkcloud.storage.store import LocalStorage

router = APIRouter(tags=["Snapshots"])


@router.post("/snapshots/{name}", status_code=201)
async def save_snapshot(name: str, store: LocalStorage = Depends(get_store)) -> dict:
    await store.save_snapshot(name)
    return {"name": name, "status": "saved"}


@router.post("/snapshots/{name}/restore")
async def restore_snapshot(name: str, store: LocalStorage = Depends(get_store)) -> dict:
    if not await store.load_snapshot(name):
        raise NotFoundError("Snapshot", name)
    return {"name": name, "status": "restored"}
