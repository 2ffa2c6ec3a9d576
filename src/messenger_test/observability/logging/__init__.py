"""Observability – structlog-based logging helpers."""
from messenger_test.observability.logging.factory import configure_logging
from messenger_test.observability.logging.processors import EnvelopeContextProcessor, get_logger

__all__ = ["EnvelopeContextProcessor", "configure_logging", "get_logger"]
