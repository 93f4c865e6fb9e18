"""Worker registry mapping developer/repo to worker factories."""

import importlib
import logging
from collections.abc import Iterable, Iterator

from zkcloud.errors.exceptions import ValidationError
from zkcloud.workers.base import WorkerFactory

logger = logging.getLogger(__name__)


class WorkerRegistry:
    def __init__(self):
        self._factories: dict[tuple[str, str], WorkerFactory] = {}

    def register(self, developer: str, repo: str, factory: WorkerFactory) -> None:
        """Register (or replace) the worker factory for a developer/repo."""
        self._factories[(developer, repo)] = factory

    def get(self, developer: str, repo: str) -> WorkerFactory | None:
        return self._factories.get((developer, repo))

    def items(self) -> Iterator[tuple[tuple[str, str], WorkerFactory]]:
        return iter(list(self._factories.items()))

    def clear(self) -> None:
        self._factories.clear()

    def __len__(self) -> int:
        return len(self._factories)


registry = WorkerRegistry()


def parse_worker_spec(spec: str) -> tuple[str, str, str, str]:
    """Split ``"developer/repo=package.module:factory"`` into its four parts."""
    owner, sep, target = spec.partition("=")
    developer, slash, repo = owner.strip().partition("/")
    module_name, colon, attr = target.strip().partition(":")
    if not (sep and slash and colon and developer and repo and module_name and attr):
        raise ValidationError(
            f"invalid worker spec {spec!r}, expected 'developer/repo=package.module:factory'"
        )
    return developer, repo, module_name, attr


def load_workers(specs: Iterable[str], target: WorkerRegistry | None = None) -> WorkerRegistry:
    """Import each worker factory named in ``specs`` and register it."""
    target = target if target is not None else registry
    for spec in specs:
        developer, repo, module_name, attr = parse_worker_spec(spec)
        try:
            factory = getattr(importlib.import_module(module_name), attr)
        except (ImportError, AttributeError) as exc:
            raise ValidationError(f"cannot load worker {module_name}:{attr}: {exc}") from exc
        if not callable(factory):
            raise ValidationError(f"worker {module_name}:{attr} is not callable")
        target.register(developer, repo, factory)
        logger.info("Registered worker %s:%s for %s/%s", module_name, attr, developer, repo)
    return target
