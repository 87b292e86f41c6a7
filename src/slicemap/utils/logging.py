"""Structured logging configuration using structlog.

Provides correlation IDs for tracing which composition and view a log
event belongs to, and configurable output formats (JSON for machines,
colored console for interactive use).
"""

import logging
import sys
from collections.abc import MutableMapping
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.types import Processor

from slicemap.config import settings

# Context variables for correlation IDs
_composition: ContextVar[str | None] = ContextVar("composition", default=None)
_view_mode: ContextVar[str | None] = ContextVar("view_mode", default=None)


def set_correlation_context(
    composition: str | None = None,
    view_mode: str | None = None,
) -> None:
    """Set correlation IDs for the current context.

    Args:
        composition: Name of the composition being resolved
        view_mode: Active view mode ("input" or "output")
    """
    if composition is not None:
        _composition.set(composition)
    if view_mode is not None:
        _view_mode.set(view_mode)


def clear_correlation_context() -> None:
    """Clear all correlation context variables."""
    _composition.set(None)
    _view_mode.set(None)


def _add_correlation_ids(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor to add correlation IDs to log events."""
    _ = logger, method_name  # Required by structlog processor signature
    composition = _composition.get()
    view_mode = _view_mode.get()

    # Values bound on the logger or passed with the event win over the context
    if composition is not None:
        event_dict.setdefault("composition", composition)
    if view_mode is not None:
        event_dict.setdefault("view_mode", view_mode)

    return event_dict


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
) -> None:
    """Configure structlog with the specified settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to settings.LOG_LEVEL.
        log_format: Output format ("console" or "json").
                    Defaults to settings.LOG_FORMAT.
    """
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_correlation_ids,
    ]

    if log_format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
        force=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name. If None, uses the calling module's name.

    Returns:
        A bound structlog logger instance.
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
