"""Structured logging (structlog): dotted event names, correlation id from contextvars."""
import logging
import sys

import structlog

from contentcraft.config import get_settings

# Third-party loggers that are chatty at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite")


def configure_logging() -> None:
    """Configure structlog and standard logging. Console output locally, JSON elsewhere."""
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    local = settings.app_env == "local"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if local else structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Lazy logger for a module; resolves against the config active at first use."""
    return structlog.get_logger(name)
