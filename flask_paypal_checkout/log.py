"""structlog configuration and the default component loggers."""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: int | str = logging.INFO, *, json: bool = True) -> None:
    """Configure structlog once per process.

    Args:
        level: Minimum level, as a :mod:`logging` constant or name.
        json: Render JSON lines when ``True``, otherwise the console renderer.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str, logger=None):
    """Return *logger* bound to *component*, or a fresh structlog logger."""
    base = logger if logger is not None else structlog.get_logger()
    return base.bind(component=component)
