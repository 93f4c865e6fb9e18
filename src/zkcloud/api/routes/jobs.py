"""Job submission and result endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from zkcloud.config import Settings
from zkcloud.dependencies import get_registry, get_settings, get_store, resolve_factory
from zkcloud.errors.exceptions import NotFoundError
from zkcloud.models.enums import Blockchain, Command
from zkcloud.models.job import JobData
from zkcloud.storage.store import LocalStorage
from zkcloud.workers.registry import WorkerRegistry
from zkcloud.workers.runner import run_job

router = APIRouter(tags=["Jobs"])


class SubmitJobRequest(JobData):
    chain: Blockchain | None = None


class SubmitJobResponse(BaseModel):
    job_id: str


async def _submit(
    command: Command,
    body: SubmitJobRequest,
    store: LocalStorage,
    registry: WorkerRegistry,
    settings: Settings,
) -> SubmitJobResponse:
    factory = resolve_factory(registry, body.developer, body.repo)
    data = JobData(**body.model_dump(exclude={"chain"}))
    job_id = await run_job(
        store,
        command,
        data,
        body.chain or settings.default_chain,
        factory,
        settings=settings,
    )
    return SubmitJobResponse(job_id=job_id)


@router.post("/jobs/recursive-proof", status_code=201)
async def submit_recursive_proof(
    body: SubmitJobRequest,
    store: LocalStorage = Depends(get_store),
    registry: WorkerRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> SubmitJobResponse:
    if body.task is None:
        body.task = "recursiveProof"
    return await _submit(Command.RECURSIVE_PROOF, body, store, registry, settings)


@router.post("/jobs/execute", status_code=201)
async def submit_execute(
    body: SubmitJobRequest,
    store: LocalStorage = Depends(get_store),
    registry: WorkerRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> SubmitJobResponse:
    return await _submit(Command.EXECUTE, body, store, registry, settings)


@router.get("/jobs/{job_id}")
async def get_job_result(
    job_id: str,
    store: LocalStorage = Depends(get_store),
) -> dict:
    job = await store.get_job(job_id)
    if not job:
        raise NotFoundError("Job", job_id)
    return job.model_dump(mode="json", exclude_none=True)
