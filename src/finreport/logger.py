"""Structured logging configuration.

Services log through structlog; the standard library logging module is the
sink so third-party loggers (SQLAlchemy) share the same handler.
"""

import logging
import os
import sys
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import Processor

DEFAULT_LOG_LEVEL = "WARNING"


def _build_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _select_renderer(json_output: bool) -> Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """Configure structlog and the root logging handler.

    Args:
        level: Log level name. Defaults to FINREPORT_LOG_LEVEL, then WARNING
        json_output: Render JSON lines. Defaults to FINREPORT_LOG_JSON=1
    """
    if level is None:
        level = os.environ.get("FINREPORT_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    if json_output is None:
        json_output = os.environ.get("FINREPORT_LOG_JSON") == "1"

    processors = _build_processors()

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=_select_renderer(json_output),
        foreign_pre_chain=processors,
    )
    # Logs go to stderr so report output on stdout stays machine readable.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logging.basicConfig(
        handlers=[handler],
        level=getattr(logging, level.upper(), logging.WARNING),
        force=True,
    )


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """Get a structured logger."""
    return structlog.get_logger(name)
