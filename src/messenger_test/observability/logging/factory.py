"""Observability – configure_logging."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from messenger_test.config.settings import EnvSettingsLoader, LoggingSettings
from messenger_test.observability.logging.processors import EnvelopeContextProcessor


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Route structlog through the stdlib root logger.

    When *settings* is omitted they are read from ``MESSENGER_TEST_*``
    environment variables.
    """
    settings = settings or EnvSettingsLoader().load(LoggingSettings)
    level = logging.getLevelNamesMapping()[settings.log_level.upper()]

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        EnvelopeContextProcessor(),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


__all__ = ["configure_logging"]
