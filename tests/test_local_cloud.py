"""Tests for the local cloud context as seen from inside a worker."""

import pytest
from pydantic import SecretStr

from conftest import DEVELOPER, REPO, ProofWorker
from zkcloud.errors.exceptions import UnsupportedOperationError
from zkcloud.models.enums import Blockchain, CloudVariant, Command, JobStatus
from zkcloud.models.job import JobData
from zkcloud.models.task import TaskData
from zkcloud.workers.base import ZkCloudWorker
from zkcloud.workers.runner import run_job


class StorageWorker(ZkCloudWorker):
    """Exercises the context's storage capabilities from execute()."""

    async def execute(self, transactions):
        await self.cloud.save_data_by_key("counter", "1")
        await self.cloud.save_data_by_key("scratch", "x")
        await self.cloud.save_data_by_key("scratch", None)
        await self.cloud.save_file("out.bin", b"proof-bytes")
        loaded = await self.cloud.load_file("out.bin")
        self.cloud.log("storage checks done")
        return f"{await self.cloud.get_data_by_key('counter')}:{loaded.decode()}"


async def _execute(store, settings, factory, chain=Blockchain.LOCAL):
    return await run_job(
        store, Command.EXECUTE, JobData(developer=DEVELOPER, repo=REPO, transactions=["x"]),
        chain, factory, settings=settings,
    )


@pytest.mark.asyncio
async def test_data_and_files(store, settings):
    job_id = await _execute(store, settings, StorageWorker)
    job = await store.get_job(job_id)
    assert job.result == "1:proof-bytes"
    assert store.data == {"counter": "1"}
    assert await store.blobs.load("files/out.bin") == b"proof-bytes"


@pytest.mark.asyncio
async def test_context_is_local_and_read_only(store, settings, worker_factory, clouds):
    await _execute(store, settings, worker_factory)
    (cloud,) = clouds
    assert cloud.variant == CloudVariant.LOCAL
    assert cloud.is_local_cloud
    assert cloud.cache == settings.cache_dir
    with pytest.raises(AttributeError):
        cloud.job_id = "other"


@pytest.mark.asyncio
async def test_load_environment_not_supported(store, settings, worker_factory, clouds):
    await _execute(store, settings, worker_factory)
    with pytest.raises(UnsupportedOperationError):
        await clouds[0].load_environment("secret")


@pytest.mark.asyncio
async def test_deployer_from_settings(store, settings, worker_factory, clouds):
    await _execute(store, settings, worker_factory)
    assert await clouds[0].get_deployer() is None

    settings.deployer = SecretStr("EKDeployerKey")
    await _execute(store, settings, worker_factory)
    assert await clouds[1].get_deployer() == "EKDeployerKey"
    await clouds[1].release_deployer(["tx1"])


@pytest.mark.asyncio
async def test_worker_spawns_recursive_proof(store, settings, calls):
    class Spawning(ProofWorker):
        async def execute(self, transactions):
            child_id = await self.cloud.recursive_proof(transactions)
            child = await self.cloud.job_result(child_id)
            return f"{child_id}|{child.result}"

    job_id = await run_job(
        store, Command.EXECUTE, JobData(developer=DEVELOPER, repo=REPO, transactions=["a", "b"]),
        Blockchain.DEVNET, lambda cloud: Spawning(cloud, calls), settings=settings,
    )
    parent = await store.get_job(job_id)
    child_id, child_result = parent.result.split("|")
    assert child_result == "m(p(a),p(b))"

    child = await store.get_job(child_id)
    assert child.task == "recursiveProof"
    assert child.chain == Blockchain.DEVNET
    assert child.tx_number == 2


@pytest.mark.asyncio
async def test_worker_schedules_and_processes_tasks(store, settings, calls):
    class Scheduling(ProofWorker):
        async def execute(self, transactions):
            task_id = await self.cloud.add_task(TaskData(task="followup"))
            count = await self.cloud.process_tasks()
            await self.cloud.delete_task(task_id)
            return str(count)

    job_id = await _execute(store, settings, lambda cloud: Scheduling(cloud, calls))
    job = await store.get_job(job_id)
    assert job.result == "1"
    assert await store.count_tasks() == 0
    task_jobs = [j for j in await store.list_jobs() if j.task_id]
    assert len(task_jobs) == 1
    assert task_jobs[0].job_status == JobStatus.FINISHED


@pytest.mark.asyncio
async def test_worker_manages_transactions(store, settings):
    class Batching(ZkCloudWorker):
        async def execute(self, transactions):
            ids = await self.cloud.add_transactions(transactions)
            await self.cloud.delete_transaction(ids[0])
            remaining = await self.cloud.get_transactions()
            return ",".join(r.transaction for r in remaining)

    job_id = await run_job(
        store, Command.EXECUTE, JobData(developer=DEVELOPER, repo=REPO, transactions=["a", "b", "c"]),
        Blockchain.LOCAL, Batching, settings=settings,
    )
    assert (await store.get_job(job_id)).result == "b,c"


def test_worker_capabilities():
    class CreateMerge(ZkCloudWorker):
        async def create(self, transaction):
            return transaction

        async def merge(self, proof1, proof2):
            return proof1 + proof2

    assert CreateMerge.capabilities() == ["create", "merge"]
    assert not CreateMerge.supports("task")
    assert ProofWorker.supports("execute")
    with pytest.raises(ValueError):
        CreateMerge.supports("verify")


@pytest.mark.asyncio
async def test_base_worker_raises_unsupported():
    worker = ZkCloudWorker(None)
    with pytest.raises(UnsupportedOperationError):
        await worker.deployed_contracts()
    with pytest.raises(UnsupportedOperationError):
        await worker.task()


@pytest.mark.asyncio
async def test_worker_files_do_not_clobber_snapshots(store, settings):
    class Clobbering(ZkCloudWorker):
        async def execute(self, transactions):
            await self.cloud.save_file("state.cloud", b"not a snapshot")
            return (await self.cloud.load_file("state.cloud")).decode()

    await store.add_transactions(["keep"])
    await store.save_snapshot("state")
    job_id = await _execute(store, settings, Clobbering)
    assert (await store.get_job(job_id)).result == "not a snapshot"

    await store.add_transactions(["extra"])
    assert await store.load_snapshot("state") is True
    assert [t.transaction for t in await store.get_transactions()] == ["keep"]
