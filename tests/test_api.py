"""Tests for the HTTP surface."""

import pytest
import structlog

from conftest import DEVELOPER, REPO
from zkcloud.workers.base import ZkCloudWorker
from zkcloud.services.id_generator import now_ms


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "zkcloud"
    assert data["workers"] == 1
    assert response.headers["x-trace-id"].startswith("trc_")


@pytest.mark.asyncio
async def test_submit_recursive_proof_and_fetch(client):
    r = await client.post("/api/v1/jobs/recursive-proof", json={
        "developer": DEVELOPER,
        "repo": REPO,
        "transactions": ["t1", "t2", "t3"],
        "chain": "devnet",
    })
    assert r.status_code == 201
    job_id = r.json()["job_id"]

    r = await client.get(f"/api/v1/jobs/{job_id}")
    assert r.status_code == 200
    job = r.json()
    assert job["job_status"] == "finished"
    assert job["result"] == "m(m(p(t1),p(t2)),p(t3))"
    assert job["task"] == "recursiveProof"
    assert job["chain"] == "devnet"
    assert job["tx_number"] == 3
    assert "time_failed" not in job


@pytest.mark.asyncio
async def test_submit_execute(client, calls):
    r = await client.post("/api/v1/jobs/execute", json={
        "developer": DEVELOPER, "repo": REPO, "transactions": ["a"], "task": "mint",
    })
    assert r.status_code == 201
    job = (await client.get(f"/api/v1/jobs/{r.json()['job_id']}")).json()
    assert job["result"] == "executed:a"
    assert job["tx_number"] == 1
    assert calls == [("execute", ("a",))]


@pytest.mark.asyncio
async def test_empty_recursive_proof_rejected(client, store):
    r = await client.post("/api/v1/jobs/recursive-proof", json={
        "developer": DEVELOPER, "repo": REPO, "transactions": [],
    })
    assert r.status_code == 400
    body = r.json()
    assert body["error"]["code"] == "EMPTY_INPUT"
    assert body["error"]["trace_id"] == r.headers["x-trace-id"]
    assert await store.list_jobs() == []


@pytest.mark.asyncio
async def test_unregistered_worker(client):
    r = await client.post("/api/v1/jobs/execute", json={
        "developer": "nobody", "repo": "nothing", "transactions": ["a"],
    })
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_unknown_job(client):
    r = await client.get("/api/v1/jobs/local.0.missing")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_transactions_lifecycle(client):
    r = await client.post("/api/v1/transactions", json={"transactions": ["a", "b"]})
    assert r.status_code == 201
    tx_ids = r.json()["tx_ids"]
    assert len(set(tx_ids)) == 2

    listed = (await client.get("/api/v1/transactions")).json()
    assert sorted(t["transaction"] for t in listed) == ["a", "b"]

    r = await client.delete(f"/api/v1/transactions/{tx_ids[0]}")
    assert r.status_code == 204
    listed = (await client.get("/api/v1/transactions")).json()
    assert [t["tx_id"] for t in listed] == [tx_ids[1]]

    r = await client.delete(f"/api/v1/transactions/{tx_ids[0]}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_tasks_lifecycle(client, store):
    r = await client.post("/api/v1/tasks", json={
        "developer": DEVELOPER, "repo": REPO, "task": "nightly",
    })
    assert r.status_code == 201
    task_id = r.json()["task_id"]
    await client.post("/api/v1/tasks", json={
        "developer": DEVELOPER, "repo": REPO, "task": "later", "start_time": now_ms() + 600_000,
    })

    r = await client.post("/api/v1/tasks/process", json={"developer": DEVELOPER, "repo": REPO})
    assert r.status_code == 200
    assert r.json()["count"] == 2
    jobs = await store.list_jobs()
    assert [job.task_id for job in jobs] == [task_id]

    r = await client.delete(f"/api/v1/tasks/{task_id}")
    assert r.status_code == 204
    r = await client.delete(f"/api/v1/tasks/{task_id}")
    assert r.status_code == 404
    assert len((await client.get("/api/v1/tasks")).json()) == 1


@pytest.mark.asyncio
async def test_snapshot_save_and_restore(client, store):
    await client.post("/api/v1/transactions", json={"transactions": ["keep"]})
    r = await client.post("/api/v1/snapshots/checkpoint")
    assert r.status_code == 201

    await client.post("/api/v1/transactions", json={"transactions": ["extra"]})
    assert len(await store.get_transactions()) == 2

    r = await client.post("/api/v1/snapshots/checkpoint/restore")
    assert r.status_code == 200
    assert [t.transaction for t in await store.get_transactions()] == ["keep"]


@pytest.mark.asyncio
async def test_restore_missing_snapshot(client):
    r = await client.post("/api/v1/snapshots/nothing/restore")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_invalid_snapshot_name(client):
    r = await client.post("/api/v1/snapshots/.hidden")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


class LogContextWorker(ZkCloudWorker):
    """Reports the log context it runs under."""

    async def execute(self, transactions):
        ctx = structlog.contextvars.get_contextvars()
        return f"{ctx.get('trace_id')}|{ctx.get('job_id')}|{ctx.get('repo')}"


@pytest.mark.asyncio
async def test_job_log_context_carries_request_trace_id(client, registry):
    registry.register(DEVELOPER, "traced", LogContextWorker)
    r = await client.post(
        "/api/v1/jobs/execute",
        json={"developer": DEVELOPER, "repo": "traced", "transactions": ["a"]},
        headers={"X-Trace-Id": "trc_fromcaller"},
    )
    assert r.status_code == 201
    assert r.headers["x-trace-id"] == "trc_fromcaller"
    job_id = r.json()["job_id"]

    job = (await client.get(f"/api/v1/jobs/{job_id}")).json()
    assert job["result"] == f"trc_fromcaller|{job_id}|traced"
    assert "trace_id" not in structlog.contextvars.get_contextvars()
