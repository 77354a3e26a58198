"""
Structured logging for model factory operations.

Configures structlog with the same processor chain the application uses
elsewhere: context variables, ISO timestamps and log level, rendered to the
console in development and as JSON everywhere else.
"""

import logging
import os
from typing import Optional

import structlog


_CONFIGURED = False


def _resolve_level(level_name: Optional[str]) -> int:
    level = getattr(logging, str(level_name or 'INFO').upper(), None)
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging(level: Optional[str] = None, renderer: Optional[str] = None,
                      force: bool = False) -> None:
    """
    Configure structlog for factory logging.

    Args:
        level: Minimum log level name, defaults to the LOG_LEVEL env var
        renderer: ``console`` or ``json``, defaults to the LOG_RENDERER env var
        force: Reconfigure even if logging was already configured
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    level = level or os.environ.get('LOG_LEVEL', 'INFO')
    if renderer is None:
        renderer = os.environ.get('LOG_RENDERER')
    if renderer is None:
        renderer = 'console' if os.environ.get('FLASK_ENV') == 'development' else 'json'

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]

    if renderer == 'console':
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=False)]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        logger_factory=structlog.WriteLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    _CONFIGURED = True


def get_logger(name: Optional[str] = None):
    """Return a structlog logger bound to the given component name."""
    configure_logging()
    if name:
        return structlog.get_logger("factories", component=name)
    return structlog.get_logger("factories")


__all__ = ['configure_logging', 'get_logger']
