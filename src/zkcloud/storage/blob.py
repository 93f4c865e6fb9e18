"""Opaque key/value blob stores used for snapshots and worker files."""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class BlobStore(ABC):
    """Named byte blobs. Saving overwrites; loading a missing name returns None."""

    @abstractmethod
    async def save(self, name: str, value: bytes) -> None: ...

    @abstractmethod
    async def load(self, name: str) -> bytes | None: ...


class MemoryBlobStore(BlobStore):
    def __init__(self):
        self._blobs: dict[str, bytes] = {}

    async def save(self, name: str, value: bytes) -> None:
        self._blobs[name] = bytes(value)

    async def load(self, name: str) -> bytes | None:
        return self._blobs.get(name)


class FileBlobStore(BlobStore):
    """Blobs stored as files under a root directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        path = (self.root / name).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise ValueError(f"blob name escapes store root: {name}")
        return path

    async def save(self, name: str, value: bytes) -> None:
        path = self._path(name)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_name(path.name + ".tmp")
            tmp.write_bytes(value)
            tmp.replace(path)

        await asyncio.to_thread(_write)
        logger.debug("Saved blob %s (%d bytes)", path, len(value))

    async def load(self, name: str) -> bytes | None:
        path = self._path(name)

        def _read() -> bytes | None:
            try:
                return path.read_bytes()
            except FileNotFoundError:
                return None

        return await asyncio.to_thread(_read)
