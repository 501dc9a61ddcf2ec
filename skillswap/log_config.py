"""Structured logging setup."""

import logging

import structlog

from skillswap.config import LOG_JSON, LOG_LEVEL

_LOGGING_CONFIGURED = False


def configure_logging(level: str = LOG_LEVEL, json_enabled: bool = LOG_JSON) -> None:
    """Initialize structlog and stdlib logging formatting."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
    ]
    if json_enabled:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.processors.KeyValueRenderer(key_order=["event", "message_id"])
        )
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(level=log_level)

    # SQL echo is controlled by SQL_DEBUG, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
