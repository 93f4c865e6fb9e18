"""Cloud context interface handed to workers.

A ``Cloud`` is built fresh for every Job and is owned by that Job's
execution only. Its identity is fixed at construction; workers use it to log,
read and write scoped storage, fetch the deployer key and spawn follow-up
jobs or tasks.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from zkcloud.models.enums import Blockchain, CloudVariant
from zkcloud.models.job import Job
from zkcloud.models.task import TaskData, TransactionRecord


class CloudIdentity(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    job_id: str
    step_id: str
    task_id: str
    developer: str
    repo: str
    task: str | None = None
    user_id: str | None = None
    args: str | None = None
    metadata: str | None = None
    chain: Blockchain = Blockchain.LOCAL
    cache: Path


class Cloud(ABC):
    """Capabilities a worker may use, independent of where it runs."""

    variant: CloudVariant

    def __init__(self, identity: CloudIdentity):
        self._identity = identity

    @property
    def identity(self) -> CloudIdentity:
        return self._identity

    @property
    def job_id(self) -> str:
        return self._identity.job_id

    @property
    def step_id(self) -> str:
        return self._identity.step_id

    @property
    def task_id(self) -> str:
        return self._identity.task_id

    @property
    def developer(self) -> str:
        return self._identity.developer

    @property
    def repo(self) -> str:
        return self._identity.repo

    @property
    def task(self) -> str | None:
        return self._identity.task

    @property
    def user_id(self) -> str | None:
        return self._identity.user_id

    @property
    def args(self) -> str | None:
        return self._identity.args

    @property
    def metadata(self) -> str | None:
        return self._identity.metadata

    @property
    def chain(self) -> Blockchain:
        return self._identity.chain

    @property
    def cache(self) -> Path:
        return self._identity.cache

    @property
    def is_local_cloud(self) -> bool:
        return self.variant == CloudVariant.LOCAL

    # --- Per-job capabilities ---

    @abstractmethod
    async def get_deployer(self) -> str | None: ...

    @abstractmethod
    async def release_deployer(self, tx_hashes: list[str]) -> None: ...

    @abstractmethod
    def log(self, msg: str) -> None: ...

    @abstractmethod
    async def get_data_by_key(self, key: str) -> str | None: ...

    @abstractmethod
    async def save_data_by_key(self, key: str, value: str | None) -> None: ...

    @abstractmethod
    async def save_file(self, filename: str, value: bytes) -> None: ...

    @abstractmethod
    async def load_file(self, filename: str) -> bytes | None: ...

    @abstractmethod
    async def load_environment(self, password: str) -> None: ...

    # --- Spawning follow-up work ---

    @abstractmethod
    async def recursive_proof(
        self,
        transactions: list[str],
        task: str | None = None,
        user_id: str | None = None,
        args: str | None = None,
        metadata: str | None = None,
    ) -> str: ...

    @abstractmethod
    async def execute(
        self,
        transactions: list[str],
        task: str | None = None,
        user_id: str | None = None,
        args: str | None = None,
        metadata: str | None = None,
    ) -> str: ...

    @abstractmethod
    async def job_result(self, job_id: str) -> Job | None: ...

    @abstractmethod
    async def add_task(self, data: TaskData) -> str: ...

    @abstractmethod
    async def delete_task(self, task_id: str) -> None: ...

    @abstractmethod
    async def process_tasks(self) -> int: ...

    @abstractmethod
    async def add_transactions(self, transactions: list[str]) -> list[str]: ...

    @abstractmethod
    async def delete_transaction(self, tx_id: str) -> None: ...

    @abstractmethod
    async def get_transactions(self) -> list[TransactionRecord]: ...
