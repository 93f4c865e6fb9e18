"""In-process cloud: the context workers see when run by the local runner."""

import logging
from pathlib import Path

from zkcloud.cloud.base import Cloud, CloudIdentity
from zkcloud.config import Settings
from zkcloud.errors.exceptions import UnsupportedOperationError
from zkcloud.models.enums import CloudVariant, Command
from zkcloud.models.job import Job, JobData
from zkcloud.models.task import TaskData, TransactionRecord
from zkcloud.storage.store import LocalStorage
from zkcloud.workers.base import WorkerFactory

logger = logging.getLogger(__name__)

# Worker files live apart from snapshots, which sit at the blob store root
FILES_PREFIX = "files/"


class LocalCloud(Cloud):
    """Cloud context backed by a ``LocalStorage`` in the same process."""

    variant = CloudVariant.LOCAL

    def __init__(
        self,
        *,
        job: Job,
        store: LocalStorage,
        worker_factory: WorkerFactory,
        settings: Settings,
        step_id: str | None = None,
        cache: Path | None = None,
    ):
        super().__init__(
            CloudIdentity(
                job_id=job.job_id,
                step_id=step_id or "stepId",
                task_id=job.task_id or "taskId",
                developer=job.developer,
                repo=job.repo,
                task=job.task,
                user_id=job.user_id,
                args=job.args,
                metadata=job.metadata,
                chain=job.chain,
                cache=cache or settings.cache_dir,
            )
        )
        self.store = store
        self.worker_factory = worker_factory
        self.settings = settings

    async def get_deployer(self) -> str | None:
        if self.settings.deployer is None:
            return None
        return self.settings.deployer.get_secret_value()

    async def release_deployer(self, tx_hashes: list[str]) -> None:
        logger.info("Deployer released (txs=%s)", tx_hashes)

    def log(self, msg: str) -> None:
        logger.info("LocalCloud: %s", msg)

    async def get_data_by_key(self, key: str) -> str | None:
        return await self.store.get_data(key)

    async def save_data_by_key(self, key: str, value: str | None) -> None:
        await self.store.set_data(key, value)

    async def save_file(self, filename: str, value: bytes) -> None:
        await self.store.blobs.save(FILES_PREFIX + filename, value)

    async def load_file(self, filename: str) -> bytes | None:
        return await self.store.blobs.load(FILES_PREFIX + filename)

    async def load_environment(self, password: str) -> None:
        raise UnsupportedOperationError("load_environment")

    async def recursive_proof(
        self,
        transactions: list[str],
        task: str | None = None,
        user_id: str | None = None,
        args: str | None = None,
        metadata: str | None = None,
    ) -> str:
        return await self._submit(
            Command.RECURSIVE_PROOF,
            JobData(
                developer=self.developer,
                repo=self.repo,
                transactions=transactions,
                task=task or "recursiveProof",
                user_id=user_id,
                args=args,
                metadata=metadata,
            ),
        )

    async def execute(
        self,
        transactions: list[str],
        task: str | None = None,
        user_id: str | None = None,
        args: str | None = None,
        metadata: str | None = None,
    ) -> str:
        return await self._submit(
            Command.EXECUTE,
            JobData(
                developer=self.developer,
                repo=self.repo,
                transactions=transactions,
                task=task,
                user_id=user_id,
                args=args,
                metadata=metadata,
            ),
        )

    async def _submit(self, command: Command, data: JobData) -> str:
        from zkcloud.workers.runner import run_job

        return await run_job(
            self.store,
            command,
            data,
            self.chain,
            self.worker_factory,
            settings=self.settings,
        )

    async def job_result(self, job_id: str) -> Job | None:
        return await self.store.get_job(job_id)

    async def add_task(self, data: TaskData) -> str:
        return await self.store.add_task(self.developer, self.repo, data, self.chain)

    async def delete_task(self, task_id: str) -> None:
        await self.store.delete_task(task_id)

    async def process_tasks(self) -> int:
        from zkcloud.workers.scheduler import process_tasks

        return await process_tasks(
            self.store,
            self.developer,
            self.repo,
            self.worker_factory,
            self.chain,
            settings=self.settings,
        )

    async def add_transactions(self, transactions: list[str]) -> list[str]:
        return await self.store.add_transactions(transactions)

    async def delete_transaction(self, tx_id: str) -> None:
        await self.store.delete_transaction(tx_id)

    async def get_transactions(self) -> list[TransactionRecord]:
        return await self.store.get_transactions()
