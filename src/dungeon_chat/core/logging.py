"""Structured logging for the dungeon_chat game engine.

structlog renders either colored console lines (debug) or one JSON object
per line (production). Third-party libraries that log through the
standard library (openai, httpx) are routed to the same stream.

Raw narrator text can be long, so string values over ``MAX_VALUE_LENGTH``
characters are clipped before rendering.

Example:
    >>> from dungeon_chat.core.logging import configure_logging, get_logger
    >>> configure_logging()                  # level and format from settings
    >>> logger = get_logger(__name__)
    >>> logger.info("Turn completed", chat_id=42, messages=3)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from dungeon_chat.core.config import Settings


MAX_VALUE_LENGTH = 500
"""Longest string value rendered as-is; longer ones are clipped."""

_NOISY_LOGGERS = ("httpx", "httpcore", "openai")
_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_app_context: dict[str, str] = {"app": "dungeon_chat"}


# =============================================================================
# Processors
# =============================================================================


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Stamp every entry with the application name and version."""
    for key, value in _app_context.items():
        event_dict.setdefault(key, value)
    return event_dict


def clip_long_values(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Shorten oversized string values such as raw model output.

    The event message itself is never clipped.
    """
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_VALUE_LENGTH:
            event_dict[key] = f"{value[:MAX_VALUE_LENGTH]}... [{len(value)} chars]"
    return event_dict


# =============================================================================
# Setup
# =============================================================================


def configure_logging(
    settings: Settings | None = None,
    *,
    level: str | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure application-wide logging.

    Args:
        settings: Source of defaults. Loaded with ``get_settings`` if None.
        level: Overrides ``settings.log_level``.
        json_format: Overrides the default, which is JSON in production.
        log_file: Optional path for a plain-text copy of stdlib log records.
    """
    if settings is None:
        from dungeon_chat.core.config import get_settings

        settings = get_settings()

    level_name = (level or settings.log_level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    if json_format is None:
        json_format = settings.is_production

    _app_context.update(app="dungeon_chat", version=settings.app_version)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        clip_long_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        renderer: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        renderer = [
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=[*shared_processors, *renderer],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format=_STDLIB_FORMAT,
        level=numeric_level,
        stream=sys.stdout,
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(_STDLIB_FORMAT))
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key/values to every log entry of the current update.

    The bot binds ``chat_id`` when an update arrives.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop everything bound with ``bind_context``."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "MAX_VALUE_LENGTH",
    "add_app_context",
    "clip_long_values",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
