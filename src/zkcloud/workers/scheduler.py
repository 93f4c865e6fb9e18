"""Task polling and the background scheduler that drives it."""

import asyncio
import logging

from zkcloud.config import Settings
from zkcloud.config import settings as default_settings
from zkcloud.errors.exceptions import NotFoundError
from zkcloud.models.enums import Blockchain, JobStatus, TaskPolicy
from zkcloud.services.id_generator import now_ms
from zkcloud.storage.store import LocalStorage
from zkcloud.workers.base import WorkerFactory
from zkcloud.workers.registry import WorkerRegistry
from zkcloud.workers.runner import run_task_job

logger = logging.getLogger(__name__)


async def process_tasks(
    store: LocalStorage,
    developer: str,
    repo: str,
    worker_factory: WorkerFactory,
    chain: Blockchain = Blockchain.LOCAL,
    *,
    settings: Settings | None = None,
    now: int | None = None,
    match_owner: bool = False,
) -> int:
    """Run every due task once and return the number of tasks in the table.

    A task is due when it has no ``start_time`` or its ``start_time`` is not
    after the poll time. Under the recurring policy tasks stay in the table
    and run again on the next poll; under the one-shot policy a task is
    removed after its job finishes. With ``match_owner`` only tasks added by
    ``developer``/``repo`` are considered.
    """
    settings = settings or default_settings
    poll_time = now if now is not None else now_ms()

    for task in await store.get_tasks():
        if match_owner and (task.developer, task.repo) != (developer, repo):
            continue
        if not task.is_due(poll_time):
            logger.debug("Task %s not due until %d", task.task_id, task.start_time)
            continue

        job = await run_task_job(
            store,
            task,
            developer,
            repo,
            worker_factory,
            chain,
            settings=settings,
        )
        if settings.task_policy == TaskPolicy.ONE_SHOT and job.job_status == JobStatus.FINISHED:
            try:
                await store.delete_task(task.task_id)
            except NotFoundError:
                logger.debug("Task %s already removed by its worker", task.task_id)

    return await store.count_tasks()


async def poll_registered_workers(
    store: LocalStorage,
    registry: WorkerRegistry,
    settings: Settings,
) -> int:
    """Poll tasks once for every registered worker. Returns the table size."""
    count = await store.count_tasks()
    for (developer, repo), factory in registry.items():
        count = await process_tasks(
            store,
            developer,
            repo,
            factory,
            settings.default_chain,
            settings=settings,
            match_owner=True,
        )
    return count


async def run_scheduler(app) -> None:
    """Background task that periodically runs due tasks."""
    settings: Settings = app.state.settings
    logger.info("Task scheduler started (poll_interval=%ss)", settings.task_poll_interval)

    while True:
        try:
            await asyncio.sleep(settings.task_poll_interval)
            count = await poll_registered_workers(app.state.store, app.state.registry, settings)
            logger.debug("Scheduler poll complete (%d tasks pending)", count)

        except asyncio.CancelledError:
            logger.info("Task scheduler stopped")
            break
        except Exception as exc:
            logger.exception("Scheduler error: %s", exc)
