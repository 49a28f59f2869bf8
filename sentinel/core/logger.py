from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from sentinel.config.settings import Settings


def get_logger(name: str | None = None):
    return structlog.get_logger(name)


def _renderer(log_format: str) -> Any:
    if log_format == "console":
        # CI job logs are read by people; keep them uncoloured
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer(ensure_ascii=False)


def configure_structlog(log_format: str = "json") -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(config: Settings) -> None:
    """Route structlog through stdlib logging on stdout at the configured level."""
    level = getattr(logging, config.effective_log_level, logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)
    # request lines from httpx would interleave with the structured events
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    configure_structlog(config.log_format)
