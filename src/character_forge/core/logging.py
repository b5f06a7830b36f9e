"""Logging setup for Character Forge.

All modules log through structlog. :func:`configure_logging` reads its
defaults from the application settings: the configured level, console
output while ``debug`` is on and JSON lines otherwise, and an optional
log file.

Example:
    >>> from character_forge.core.logging import get_logger, log_context
    >>> logger = get_logger(__name__)
    >>> with log_context(character_id="abc"):
    ...     logger.info("Character saved", level=3)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from character_forge.core.config import get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def app_context_processor(app_name: str, app_version: str) -> Processor:
    """Processor tagging each entry with the application name and version."""

    def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("version", app_version)
        return event_dict

    return add_app_context


def _level_number(level: str) -> int:
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def configure_logging(
    *,
    level: str | None = None,
    json_format: bool | None = None,
    log_file: str | Path | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Logging level name; defaults to ``settings.log_level``.
        json_format: Render JSON lines; defaults to ``settings.is_production``.
        log_file: Extra file for standard library records; defaults to
            ``settings.log_file``.
    """
    settings = get_settings()
    level_number = _level_number(level or settings.log_level)
    if json_format is None:
        json_format = settings.is_production
    log_file = log_file or settings.log_file

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context_processor(settings.app_name, settings.app_version),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_number),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format=STDLIB_FORMAT, level=level_number, stream=sys.stdout, force=True)
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(level_number)
        handler.setFormatter(logging.Formatter(STDLIB_FORMAT))
        logging.getLogger().addHandler(handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Logger for a module, usually called with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind values that appear in every later log entry until cleared."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop every bound context value."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind values for the duration of a block.

    Values bound before the block are restored on exit.

    Example:
        >>> with log_context(character_class="wizard"):
        ...     initialize_spellcasting("wizard", 1, scores)
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "log_context",
]
