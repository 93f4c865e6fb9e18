"""Structured logging for zkcloud.

Modules log through the stdlib (``logging.getLogger(__name__)``); structlog
renders every record and merges whatever is bound in the current async
context. Requests bind ``trace_id`` and jobs bind their identity, so a job
started by a request logs both.
"""

import logging
import sys
from typing import TextIO

import structlog

QUIET_LOGGERS = ("uvicorn.access",)


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_processors(json_output: bool, stream: TextIO) -> list:
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=stream.isatty())]


def configure_logging(log_level: str = "info", json_output: bool = False, stream: TextIO | None = None) -> None:
    """Route stdlib and structlog records through one structlog formatter.

    Args:
        log_level: debug/info/warning/error.
        json_output: JSON lines when True, console rendering otherwise.
        stream: Output stream, stdout by default.
    """
    stream = stream or sys.stdout
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render_processors(json_output, stream),
            ],
            foreign_pre_chain=shared,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def request_log_context(trace_id: str):
    """Bind a request's trace id for everything logged while handling it."""
    return structlog.contextvars.bound_contextvars(trace_id=trace_id)


def job_log_context(job_id: str, developer: str, repo: str, task_id: str | None = None):
    """Bind job identity to log records emitted inside the ``with`` block.

    Previously bound values are restored on exit, so a job spawned from inside
    another job's worker does not erase its parent's context.
    """
    ctx = {"job_id": job_id, "developer": developer, "repo": repo}
    if task_id:
        ctx["task_id"] = task_id
    return structlog.contextvars.bound_contextvars(**ctx)
