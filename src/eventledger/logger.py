"""Structured logging configuration.

structlog is routed through the standard ``logging`` module so that library
code only ever calls ``get_logger(__name__)``; the CLI (or an embedding
application) decides once how records are rendered.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import Processor


def _build_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _select_renderer(json_output: bool) -> Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(level: str = "WARNING", json_output: bool = False, stream: Optional[object] = None) -> None:
    """Configure structlog and the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_output: Emit one JSON object per line instead of console text
        stream: Output stream, defaults to stderr
    """
    processors = _build_processors()

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=_select_renderer(json_output),
        foreign_pre_chain=processors,
    )
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    logging.basicConfig(
        handlers=[handler],
        level=getattr(logging, level.upper(), logging.WARNING),
        force=True,
    )


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """Get a structured logger."""
    return structlog.get_logger(name)
