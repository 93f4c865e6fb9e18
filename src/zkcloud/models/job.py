"""Pydantic models for Job records and job submission payloads."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from zkcloud.models.enums import Blockchain, JobStatus


class JobError(BaseModel):
    """Reason recorded on a failed Job."""

    model_config = ConfigDict(extra="forbid")

    code: str
    message: str


class JobData(BaseModel):
    """Coordinates and input of a job submission."""

    model_config = ConfigDict(extra="forbid")

    developer: str = Field(..., min_length=1)
    repo: str = Field(..., min_length=1)
    transactions: list[str] = Field(default_factory=list)
    task: str | None = None
    user_id: str | None = None
    args: str | None = None
    metadata: str | None = None


class Job(BaseModel):
    """One execution attempt of a command.

    Only the status, timing, result and error fields change after creation,
    and they change once: a Job leaves ``started`` for exactly one of
    ``finished`` or ``failed``.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = "local"
    job_id: str
    task_id: str | None = None
    developer: str
    repo: str
    task: str | None = None
    user_id: str | None = None
    args: str | None = None
    metadata: str | None = None
    chain: Blockchain = Blockchain.LOCAL
    tx_number: int = Field(..., ge=1)
    time_created: int
    time_created_string: str
    time_started: int
    time_finished: int | None = None
    time_failed: int | None = None
    billed_duration: int | None = None
    job_status: JobStatus = JobStatus.STARTED
    max_attempts: int = 0
    result: str | None = None
    error: JobError | None = None

    @classmethod
    def start(cls, job_id: str, time_created: int, **fields) -> "Job":
        """Build a Job in the ``started`` state."""
        return cls(
            job_id=job_id,
            time_created=time_created,
            time_created_string=datetime.fromtimestamp(time_created / 1000, tz=timezone.utc).isoformat(),
            time_started=time_created,
            job_status=JobStatus.STARTED,
            **fields,
        )

    @property
    def is_terminal(self) -> bool:
        return self.job_status != JobStatus.STARTED

    def finish(self, result: str, now: int) -> None:
        self._ensure_started()
        self.job_status = JobStatus.FINISHED
        self.time_finished = now
        self.result = result
        self._close(now)

    def fail(self, error: JobError, now: int) -> None:
        self._ensure_started()
        self.job_status = JobStatus.FAILED
        self.time_failed = now
        self.result = None
        self.error = error
        self._close(now)

    def _ensure_started(self) -> None:
        if self.is_terminal:
            raise RuntimeError(f"Job {self.job_id} already {self.job_status}")

    def _close(self, now: int) -> None:
        self.max_attempts = 1
        self.billed_duration = max(0, now - self.time_created)
