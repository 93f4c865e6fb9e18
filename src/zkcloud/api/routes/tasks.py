"""Task scheduling endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from zkcloud.config import Settings
from zkcloud.dependencies import get_registry, get_settings, get_store, resolve_factory
from zkcloud.models.enums import Blockchain
from zkcloud.models.task import TaskData
from zkcloud.storage.store import LocalStorage
from zkcloud.workers.registry import WorkerRegistry
from zkcloud.workers.scheduler import process_tasks

router = APIRouter(tags=["Tasks"])


class AddTaskRequest(TaskData):
    developer: str
    repo: str
    chain: Blockchain | None = None


class ProcessTasksRequest(BaseModel):
    developer: str
    repo: str
    chain: Blockchain | None = None


@router.post("/tasks", status_code=201)
async def add_task(
    body: AddTaskRequest,
    store: LocalStorage = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> dict:
    data = TaskData(**body.model_dump(include=set(TaskData.model_fields)))
    task_id = await store.add_task(
        body.developer, body.repo, data, body.chain or settings.default_chain
    )
    return {"task_id": task_id}


@router.get("/tasks")
async def list_tasks(store: LocalStorage = Depends(get_store)) -> list[dict]:
    return [task.model_dump(mode="json", exclude_none=True) for task in await store.get_tasks()]


@router.delete("/tasks/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    store: LocalStorage = Depends(get_store),
) -> None:
    await store.delete_task(task_id)


@router.post("/tasks/process")
async def process_pending_tasks(
    body: ProcessTasksRequest,
    store: LocalStorage = Depends(get_store),
    registry: WorkerRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> dict:
    factory = resolve_factory(registry, body.developer, body.repo)
    count = await process_tasks(
        store,
        body.developer,
        body.repo,
        factory,
        body.chain or settings.default_chain,
        settings=settings,
    )
    return {"count": count}
