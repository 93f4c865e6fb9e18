"""Shared test fixtures."""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from zkcloud.config import Settings
from zkcloud.storage.blob import MemoryBlobStore
from zkcloud.storage.store import LocalStorage
from zkcloud.workers.base import ZkCloudWorker
from zkcloud.workers.registry import WorkerRegistry

DEVELOPER = "dev"
REPO = "proofs"


class ProofWorker(ZkCloudWorker):
    """String-building worker: create(x) = p(x), merge(a, b) = m(a,b)."""

    def __init__(self, cloud, calls: list, fail_create: set | None = None, fail_merge_at: int | None = None):
        super().__init__(cloud)
        self.calls = calls
        self.fail_create = fail_create or set()
        self.fail_merge_at = fail_merge_at

    async def create(self, transaction: str) -> str | None:
        self.calls.append(("create", transaction))
        if transaction in self.fail_create:
            return None
        return f"p({transaction})"

    async def merge(self, proof1: str, proof2: str) -> str | None:
        self.calls.append(("merge", proof1, proof2))
        merges = sum(1 for call in self.calls if call[0] == "merge")
        if self.fail_merge_at is not None and merges == self.fail_merge_at:
            return None
        return f"m({proof1},{proof2})"

    async def execute(self, transactions: list[str]) -> str | None:
        self.calls.append(("execute", tuple(transactions)))
        return "executed:" + ",".join(transactions)

    async def task(self) -> str | None:
        self.calls.append(("task", self.cloud.task_id))
        if self.cloud.task == "broken":
            return None
        return f"task:{self.cloud.task}"


class SlowWorker(ZkCloudWorker):
    async def execute(self, transactions: list[str]) -> str | None:
        await asyncio.sleep(5)
        return "late"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=tmp_path / "data",
        cache_dir=tmp_path / "cache",
        scheduler_enabled=False,
        snapshot_name=None,
        deployer=None,
        job_timeout_seconds=None,
    )


@pytest.fixture
def store():
    """Fresh in-memory store per test."""
    return LocalStorage(blobs=MemoryBlobStore())


@pytest.fixture
def calls():
    return []


@pytest.fixture
def clouds():
    """Every cloud context handed to the worker factory."""
    return []


@pytest.fixture
def worker_factory(calls, clouds):
    def factory(cloud):
        clouds.append(cloud)
        return ProofWorker(cloud, calls)

    return factory


@pytest.fixture
def registry(worker_factory):
    reg = WorkerRegistry()
    reg.register(DEVELOPER, REPO, worker_factory)
    return reg


@pytest.fixture
def app(settings, store, registry):
    """Application instance wired to the per-test store and registry."""
    from zkcloud.main import create_app

    return create_app(settings=settings, store=store, registry=registry)


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def proof_worker_factory(cloud):
    """Importable factory used by worker-loading tests."""
    return ProofWorker(cloud, [])


not_a_factory = "proofs"
