"""Worker contract implemented by integrators.

A worker holds the proof system. Each capability it does not provide keeps
the base implementation, which raises ``UnsupportedOperationError`` so the
runner can tell "not applicable" apart from "attempted and failed" (``None``).
"""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from zkcloud.errors.exceptions import UnsupportedOperationError
from zkcloud.models.enums import Blockchain

if TYPE_CHECKING:
    from zkcloud.cloud.base import Cloud

CAPABILITIES = ("create", "merge", "execute", "task", "deployed_contracts")


class DeployedContract(BaseModel):
    """A contract the worker's code is deployed as, for verification."""

    model_config = ConfigDict(extra="forbid")

    address: str
    name: str
    chain: Blockchain


class ZkCloudWorker:
    """Base class for proof workers bound to a cloud context."""

    def __init__(self, cloud: "Cloud"):
        self.cloud = cloud

    @classmethod
    def supports(cls, capability: str) -> bool:
        """Return True if this worker class overrides ``capability``."""
        if capability not in CAPABILITIES:
            raise ValueError(f"unknown capability: {capability}")
        return getattr(cls, capability) is not getattr(ZkCloudWorker, capability)

    @classmethod
    def capabilities(cls) -> list[str]:
        return [name for name in CAPABILITIES if cls.supports(name)]

    async def deployed_contracts(self) -> list[DeployedContract]:
        raise UnsupportedOperationError("deployed_contracts")

    # Recursive proofs
    async def create(self, transaction: str) -> str | None:
        raise UnsupportedOperationError("create")

    async def merge(self, proof1: str, proof2: str) -> str | None:
        raise UnsupportedOperationError("merge")

    # Everything except recursive proofs
    async def execute(self, transactions: list[str]) -> str | None:
        raise UnsupportedOperationError("execute")

    async def task(self) -> str | None:
        raise UnsupportedOperationError("task")


WorkerFactory = Callable[["Cloud"], ZkCloudWorker | None | Awaitable[ZkCloudWorker | None]]
