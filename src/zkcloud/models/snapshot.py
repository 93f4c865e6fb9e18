"""Pydantic model for the aggregate storage snapshot blob."""

from pydantic import BaseModel, ConfigDict, Field

from zkcloud.models.job import Job
from zkcloud.models.task import Task, TransactionRecord

SNAPSHOT_SCHEMA_VERSION = "1.0"


class StorageSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    schema_version: str = SNAPSHOT_SCHEMA_VERSION
    jobs: dict[str, Job] = Field(default_factory=dict)
    data: dict[str, str] = Field(default_factory=dict)
    transactions: dict[str, TransactionRecord] = Field(default_factory=dict)
    tasks: dict[str, Task] = Field(default_factory=dict)
