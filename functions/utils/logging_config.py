"""structlog configuration for RenoQuote entry points."""

import logging
import sys
from typing import Optional

import structlog

from config.settings import settings


def _stderr_logger(*args) -> structlog.PrintLogger:
    # Looked up per logger so a redirected sys.stderr is used
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: Optional[str] = None, json_output: bool = False) -> None:
    """Configure structlog processors and the minimum log level.

    Log lines go to stderr; stdout is left for command output.

    Args:
        level: Level name (defaults to LOG_LEVEL).
        json_output: Render JSON lines instead of the console format
            (Cloud Functions log ingestion).
    """
    level_name = (level or settings.log_level).upper()
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.INFO)
        ),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
