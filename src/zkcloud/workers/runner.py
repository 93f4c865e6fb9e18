"""Job runner: allocate a Job, resolve a worker, dispatch, record the outcome."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from zkcloud.cloud.local import LocalCloud
from zkcloud.config import Settings
from zkcloud.config import settings as default_settings
from zkcloud.errors.exceptions import (
    EmptyInputError,
    UnsupportedOperationError,
    ValidationError,
    WorkerNotResolvedError,
    ZkCloudError,
)
from zkcloud.logging_config import job_log_context
from zkcloud.models.enums import Blockchain, Command
from zkcloud.models.job import Job, JobData
from zkcloud.models.outcome import Outcome
from zkcloud.models.task import Task
from zkcloud.services.id_generator import generate_id, now_ms
from zkcloud.storage.store import LocalStorage
from zkcloud.workers.base import WorkerFactory, ZkCloudWorker
from zkcloud.workers.sequencer import sequence

logger = logging.getLogger(__name__)


async def resolve_worker(worker_factory: WorkerFactory, cloud: LocalCloud) -> ZkCloudWorker:
    """Call the factory (sync or async) and check that it produced a worker."""
    if worker_factory is None:
        raise WorkerNotResolvedError("no worker factory given")
    worker = worker_factory(cloud)
    if inspect.isawaitable(worker):
        worker = await worker
    if worker is None:
        raise WorkerNotResolvedError()
    if not isinstance(worker, ZkCloudWorker):
        raise WorkerNotResolvedError(f"factory returned {type(worker).__name__}, not a worker")
    return worker


async def capture_outcome(
    call: Callable[[], Awaitable[str | None]],
    timeout: float | None = None,
) -> Outcome:
    """Run a worker capability and fold whatever happens into an Outcome."""
    try:
        if timeout is not None:
            result = await asyncio.wait_for(call(), timeout)
        else:
            result = await call()
    except UnsupportedOperationError as exc:
        return Outcome.not_applicable(exc.message)
    except ZkCloudError as exc:
        return Outcome.failure(exc.code, exc.message)
    except TimeoutError:
        return Outcome.failure("TIMEOUT", f"worker did not finish within {timeout}s" if timeout is not None else "worker timed out")
    except Exception as exc:
        logger.exception("Worker raised %s", type(exc).__name__)
        return Outcome.failure("WORKER_ERROR", str(exc) or type(exc).__name__)

    if result is None:
        return Outcome.failure("WORKER_FAILED", "worker returned no result")
    if not isinstance(result, str):
        return Outcome.failure("WORKER_FAILED", f"worker returned {type(result).__name__}, expected str")
    return Outcome.success(result)


async def _complete(
    store: LocalStorage,
    job: Job,
    call: Callable[[], Awaitable[str | None]],
    settings: Settings,
) -> None:
    with job_log_context(job.job_id, job.developer, job.repo, job.task_id):
        outcome = await capture_outcome(call, settings.job_timeout_seconds)
        now = now_ms()
        if outcome.ok:
            job.finish(outcome.value, now)
            logger.info("Job %s finished in %d ms", job.job_id, job.billed_duration)
        else:
            job.fail(outcome.to_error(), now)
            logger.warning(
                "Job %s failed (%s): %s", job.job_id, outcome.code, outcome.reason
            )
        await store.put_job(job)


async def run_job(
    store: LocalStorage,
    command: Command | str,
    data: JobData,
    chain: Blockchain = Blockchain.LOCAL,
    worker_factory: WorkerFactory | None = None,
    *,
    settings: Settings | None = None,
) -> str:
    """Run a recursive-proof or execute job and return its job_id.

    Worker failures end up in the stored Job (status ``failed``) and are not
    raised. An empty transaction list for a recursive proof, an unknown
    command or a factory that yields no worker are raised before any Job is
    stored.
    """
    settings = settings or default_settings
    try:
        command = Command(command)
    except ValueError:
        raise ValidationError(f"unknown command: {command}") from None
    if command == Command.RECURSIVE_PROOF and not data.transactions:
        raise EmptyInputError()

    job = Job.start(
        generate_id(),
        now_ms(),
        developer=data.developer,
        repo=data.repo,
        task=data.task,
        user_id=data.user_id,
        args=data.args,
        metadata=data.metadata,
        chain=chain,
        tx_number=len(data.transactions) if command == Command.RECURSIVE_PROOF else 1,
    )
    cloud = LocalCloud(job=job, store=store, worker_factory=worker_factory, settings=settings)
    worker = await resolve_worker(worker_factory, cloud)

    transactions = list(data.transactions)
    if command == Command.RECURSIVE_PROOF:
        call = lambda: sequence(worker, transactions)  # noqa: E731
    else:
        call = lambda: worker.execute(transactions)  # noqa: E731

    logger.info(
        "Job %s started (command=%s, txs=%d, %s/%s)",
        job.job_id, command, job.tx_number, job.developer, job.repo,
    )
    await _complete(store, job, call, settings)
    return job.job_id


async def run_task_job(
    store: LocalStorage,
    task: Task,
    developer: str,
    repo: str,
    worker_factory: WorkerFactory,
    chain: Blockchain = Blockchain.LOCAL,
    *,
    settings: Settings | None = None,
) -> Job:
    """Run ``worker.task()`` for a stored Task and return the recorded Job."""
    settings = settings or default_settings
    job = Job.start(
        generate_id(),
        now_ms(),
        task_id=task.task_id,
        developer=developer,
        repo=repo,
        task=task.task,
        user_id=task.user_id,
        args=task.args,
        metadata=task.metadata,
        chain=chain,
        tx_number=1,
    )
    cloud = LocalCloud(job=job, store=store, worker_factory=worker_factory, settings=settings)
    worker = await resolve_worker(worker_factory, cloud)

    logger.info("Job %s started for task %s (%s)", job.job_id, task.task_id, task.task)
    await _complete(store, job, worker.task, settings)
    return job
