"""Structured logging configuration using structlog."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

import structlog


def configure_logging(
    log_level: str = "info",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog as the renderer for stdlib logging.

    Modules log through ``logging.getLogger(__name__)``; records are rendered
    by structlog so context bound with :func:`inbox_context` is attached.

    Args:
        log_level: Logging level string (debug/info/warning/error).
        json_output: If True, output JSON (production). If False, plain console (dev).
        stream: Destination stream, stderr by default.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger("threadinbox")
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(level)



@contextmanager
def inbox_context(user: str | None = None, operation: str | None = None) -> Iterator[None]:
    """Bind the acting user and operation name to log records emitted inside."""
    ctx = {}
    if user:
        ctx["user"] = user
    if operation:
        ctx["operation"] = operation
    with structlog.contextvars.bound_contextvars(**ctx):
        yield
