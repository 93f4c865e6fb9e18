"""Master API router mounted at /api/v1."""

from fastapi import APIRouter

from zkcloud.api.routes import health, jobs, snapshots, tasks, transactions

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health.router)
api_router.include_router(jobs.router)
api_router.include_router(transactions.router)
api_router.include_router(tasks.router)
api_router.include_router(snapshots.router)
