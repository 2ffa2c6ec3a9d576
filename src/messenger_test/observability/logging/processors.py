"""Observability – get_logger helper and transport context processor."""
from __future__ import annotations

from typing import Any

import structlog


class EnvelopeContextProcessor:
    """structlog processor that flattens an ``envelope`` key into plain fields.

    Log calls may pass ``envelope=<Envelope>``; the processor replaces it with
    ``message_type`` and ``message_id`` so renderers never see the raw object.
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        envelope = event_dict.pop("envelope", None)
        if envelope is None:
            return event_dict
        from messenger_test.kernel.messaging.stamps import TransportMessageIdStamp

        event_dict.setdefault("message_type", type(envelope.message).__qualname__)
        id_stamp = envelope.last(TransportMessageIdStamp)
        if id_stamp is not None:
            event_dict.setdefault("message_id", id_stamp.id)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["EnvelopeContextProcessor", "get_logger"]
