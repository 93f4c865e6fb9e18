"""In-memory tables for jobs, tasks, pending transactions and key/value data.

A ``LocalStorage`` instance owns the four tables and their locks. It is
constructed once per process (or per test), optionally restored from a named
snapshot with ``open()``, and flushed with ``close()``.
"""

import asyncio
import logging
from contextlib import AsyncExitStack, asynccontextmanager

from pydantic import ValidationError as PydanticValidationError

from zkcloud.errors.exceptions import NotFoundError, SnapshotError, ValidationError
from zkcloud.models.enums import Blockchain
from zkcloud.models.job import Job
from zkcloud.models.snapshot import SNAPSHOT_SCHEMA_VERSION, StorageSnapshot
from zkcloud.models.task import Task, TaskData, TransactionRecord
from zkcloud.services.id_generator import generate_id, now_ms
from zkcloud.storage.blob import BlobStore, MemoryBlobStore

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = ".cloud"


def _snapshot_blob(name: str) -> str:
    if not name or "/" in name or name.startswith("."):
        raise ValidationError("invalid snapshot name", details={"name": name})
    return name + SNAPSHOT_SUFFIX


class LocalStorage:
    """Process-local store backing the local cloud."""

    def __init__(self, blobs: BlobStore | None = None, snapshot_name: str | None = None):
        self.blobs = blobs if blobs is not None else MemoryBlobStore()
        self.snapshot_name = snapshot_name
        self.jobs: dict[str, Job] = {}
        self.data: dict[str, str] = {}
        self.transactions: dict[str, TransactionRecord] = {}
        self.tasks: dict[str, Task] = {}
        self._jobs_lock = asyncio.Lock()
        self._data_lock = asyncio.Lock()
        self._transactions_lock = asyncio.Lock()
        self._tasks_lock = asyncio.Lock()

    # --- Lifecycle ---

    async def open(self) -> None:
        """Restore the configured snapshot, if any."""
        if self.snapshot_name:
            restored = await self.load_snapshot(self.snapshot_name)
            logger.info("Storage opened (snapshot=%s, restored=%s)", self.snapshot_name, restored)

    async def close(self) -> None:
        """Flush to the configured snapshot, if any."""
        if self.snapshot_name:
            await self.save_snapshot(self.snapshot_name)
            logger.info("Storage flushed to snapshot %s", self.snapshot_name)

    # --- Jobs ---

    async def put_job(self, job: Job) -> None:
        async with self._jobs_lock:
            self.jobs[job.job_id] = job.model_copy(deep=True)

    async def get_job(self, job_id: str) -> Job | None:
        async with self._jobs_lock:
            job = self.jobs.get(job_id)
            return job.model_copy(deep=True) if job else None

    async def list_jobs(self) -> list[Job]:
        async with self._jobs_lock:
            return [job.model_copy(deep=True) for job in self.jobs.values()]

    # --- Key/value data ---

    async def get_data(self, key: str) -> str | None:
        async with self._data_lock:
            return self.data.get(key)

    async def set_data(self, key: str, value: str | None) -> None:
        """Upsert a value; ``None`` removes the key."""
        async with self._data_lock:
            if value is None:
                self.data.pop(key, None)
            else:
                self.data[key] = value

    # --- Transactions ---

    async def add_transactions(self, transactions: list[str]) -> list[str]:
        """Store a batch of transactions and return their generated IDs."""
        time_received = now_ms()
        tx_ids = []
        async with self._transactions_lock:
            for tx in transactions:
                tx_id = generate_id()
                self.transactions[tx_id] = TransactionRecord(
                    tx_id=tx_id, transaction=tx, time_received=time_received
                )
                tx_ids.append(tx_id)
        logger.debug("Added %d transactions", len(tx_ids))
        return tx_ids

    async def get_transactions(self) -> list[TransactionRecord]:
        async with self._transactions_lock:
            return [record.model_copy() for record in self.transactions.values()]

    async def delete_transaction(self, tx_id: str) -> None:
        async with self._transactions_lock:
            if tx_id not in self.transactions:
                raise NotFoundError("Transaction", tx_id)
            del self.transactions[tx_id]

    # --- Tasks ---

    async def add_task(
        self,
        developer: str,
        repo: str,
        data: TaskData,
        chain: Blockchain = Blockchain.LOCAL,
    ) -> str:
        task_id = generate_id()
        task = Task(
            **data.model_dump(),
            task_id=task_id,
            developer=developer,
            repo=repo,
            chain=chain,
            time_created=now_ms(),
        )
        async with self._tasks_lock:
            self.tasks[task_id] = task
        logger.info("Added task %s (%s) for %s/%s", task_id, data.task, developer, repo)
        return task_id

    async def get_task(self, task_id: str) -> Task | None:
        async with self._tasks_lock:
            task = self.tasks.get(task_id)
            return task.model_copy() if task else None

    async def get_tasks(self) -> list[Task]:
        async with self._tasks_lock:
            return [task.model_copy() for task in self.tasks.values()]

    async def count_tasks(self) -> int:
        async with self._tasks_lock:
            return len(self.tasks)

    async def delete_task(self, task_id: str) -> None:
        async with self._tasks_lock:
            if task_id not in self.tasks:
                raise NotFoundError("Task", task_id)
            del self.tasks[task_id]

    # --- Snapshots ---

    @asynccontextmanager
    async def _all_tables(self):
        async with AsyncExitStack() as stack:
            for lock in (self._jobs_lock, self._data_lock, self._transactions_lock, self._tasks_lock):
                await stack.enter_async_context(lock)
            yield

    async def save_snapshot(self, name: str) -> None:
        """Write all four tables to the blob ``name + ".cloud"``."""
        async with self._all_tables():
            snapshot = StorageSnapshot(
                jobs=self.jobs,
                data=self.data,
                transactions=self.transactions,
                tasks=self.tasks,
            )
            payload = snapshot.model_dump_json().encode("utf-8")
        await self.blobs.save(_snapshot_blob(name), payload)
        logger.info(
            "Saved snapshot %s (jobs=%d, tasks=%d, transactions=%d, data=%d)",
            name, len(snapshot.jobs), len(snapshot.tasks), len(snapshot.transactions), len(snapshot.data),
        )

    async def load_snapshot(self, name: str) -> bool:
        """Replace all four tables from a snapshot blob.

        Returns False and leaves the tables untouched when the blob does not
        exist. The blob is fully validated before any table is replaced.
        """
        payload = await self.blobs.load(_snapshot_blob(name))
        if payload is None:
            logger.info("Snapshot %s not found, keeping current state", name)
            return False

        try:
            snapshot = StorageSnapshot.model_validate_json(payload)
        except PydanticValidationError as exc:
            raise SnapshotError(name, f"invalid snapshot: {exc.error_count()} errors") from exc
        if snapshot.schema_version != SNAPSHOT_SCHEMA_VERSION:
            raise SnapshotError(name, f"unsupported schema_version {snapshot.schema_version}")

        async with self._all_tables():
            self.jobs = snapshot.jobs
            self.data = snapshot.data
            self.transactions = snapshot.transactions
            self.tasks = snapshot.tasks
        logger.info("Restored snapshot %s", name)
        return True
