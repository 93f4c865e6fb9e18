"""Tri-state outcome of a worker capability call.

Workers signal "attempted and failed" by returning ``None`` and "does not
implement this" by raising ``UnsupportedOperationError``. The runner folds
both, plus success, into an ``Outcome`` before touching the Job record, so
the two kinds of failure stay distinguishable in ``Job.error.code``.
"""

from pydantic import BaseModel, ConfigDict

from zkcloud.models.enums import OutcomeKind
from zkcloud.models.job import JobError


class Outcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    value: str | None = None
    code: str | None = None
    reason: str | None = None

    @classmethod
    def success(cls, value: str) -> "Outcome":
        return cls(kind=OutcomeKind.SUCCESS, value=value)

    @classmethod
    def failure(cls, code: str, reason: str) -> "Outcome":
        return cls(kind=OutcomeKind.FAILURE, code=code, reason=reason)

    @classmethod
    def not_applicable(cls, reason: str) -> "Outcome":
        return cls(kind=OutcomeKind.NOT_APPLICABLE, code="NOT_APPLICABLE", reason=reason)

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    def to_error(self) -> JobError:
        if self.ok:
            raise ValueError("successful outcome has no error")
        return JobError(code=self.code or "WORKER_FAILED", message=self.reason or "")
