"""Pydantic models for pending tasks and transactions."""

from pydantic import BaseModel, ConfigDict, Field

from zkcloud.models.enums import Blockchain


class TaskData(BaseModel):
    """Caller-supplied part of a task."""

    model_config = ConfigDict(extra="forbid")

    task: str = Field(..., min_length=1)
    start_time: int | None = None
    user_id: str | None = None
    args: str | None = None
    metadata: str | None = None


class Task(TaskData):
    """A deferred or recurring unit of work, run by the task poller."""

    id: str = "local"
    task_id: str
    developer: str
    repo: str
    chain: Blockchain = Blockchain.LOCAL
    time_created: int

    def is_due(self, now: int) -> bool:
        return self.start_time is None or self.start_time <= now


class TransactionRecord(BaseModel):
    """A pending transaction awaiting sequencing."""

    model_config = ConfigDict(extra="forbid")

    tx_id: str
    transaction: str
    time_received: int
