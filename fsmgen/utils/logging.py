"""structlog setup for fsmgen.

Every event carries the pipeline stage currently running and, when
FSMGEN_FILE is set, the human-readable source name.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, TextIO

import structlog

stage_var: ContextVar[str] = ContextVar("stage", default="")
source_file_var: ContextVar[str] = ContextVar("source_file", default="")

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def set_source_file(name: str) -> None:
    source_file_var.set(name)


def add_context_info(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor copying the stage and source file into the event."""
    for key, var in (("stage", stage_var), ("source_file", source_file_var)):
        value = var.get()
        if value:
            event_dict.setdefault(key, value)
    return event_dict


def _renderer(format_type: str) -> structlog.types.Processor:
    if format_type == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    level: str = "info",
    format_type: str = "text",
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog.

    Args:
        level: debug, info, warn or error; unknown names mean info
        format_type: 'json' for one object per line, anything else for
            key=value console output
        stream: Destination (default: sys.stderr, so --stdout output stays clean)
    """
    log_level = LEVELS.get(level.lower(), logging.INFO)

    # The CLI reconfigures once options and env are known, so loggers
    # created at import time must not cache the defaults.
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_context_info,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(format_type),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a logger, bound to `logger_name` when a name is given."""
    logger = structlog.get_logger()
    return logger.bind(logger_name=name) if name else logger


@contextmanager
def log_stage(stage: str) -> Iterator[None]:
    """
    Mark `stage` as current for the block and log how long it took.

    The stage is cleared again on exit, whether or not the block raised.
    """
    token = stage_var.set(stage)
    started = time.monotonic()
    try:
        yield
    finally:
        get_logger("timing").debug(
            "stage_completed",
            duration_seconds=round(time.monotonic() - started, 3),
        )
        stage_var.reset(token)


configure_logging()
