"""Kernel messaging – envelope stamps (metadata annotations)."""
from __future__ import annotations

import dataclasses
from datetime import datetime, timedelta
from typing import Any


class Stamp:
    """Marker base for envelope metadata."""


@dataclasses.dataclass(frozen=True)
class DelayStamp(Stamp):
    """Ask the transport to hold the message for ``delay_ms`` milliseconds."""

    delay_ms: int

    def __post_init__(self) -> None:
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {self.delay_ms}")

    @classmethod
    def for_seconds(cls, seconds: float) -> DelayStamp:
        return cls(int(seconds * 1000))

    @property
    def delay(self) -> timedelta:
        return timedelta(milliseconds=self.delay_ms)


@dataclasses.dataclass(frozen=True)
class TransportMessageIdStamp(Stamp):
    """Delivery identifier assigned by the transport on send."""

    id: str


@dataclasses.dataclass(frozen=True)
class SentStamp(Stamp):
    transport_name: str


@dataclasses.dataclass(frozen=True)
class ReceivedStamp(Stamp):
    transport_name: str


@dataclasses.dataclass(frozen=True)
class AvailableAtStamp(Stamp):
    """Point in time from which a delayed envelope may be received."""

    available_at: datetime


@dataclasses.dataclass(frozen=True)
class HandledStamp(Stamp):
    """Result of one handler that processed the message."""

    handler_name: str
    result: Any = None


@dataclasses.dataclass(frozen=True)
class RedeliveryStamp(Stamp):
    """Marks a redelivery scheduled after a failed attempt."""

    retry_count: int


@dataclasses.dataclass(frozen=True)
class ErrorDetailsStamp(Stamp):
    """Failure recorded against an envelope when handling raised."""

    exception_class: str
    message: str
    code: str | None = None
    detail: dict[str, Any] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorDetailsStamp:
        # Importing lazily avoids a cycle between errors and messaging.
        from messenger_test.kernel.errors import BaseError, HandlerFailedError

        origin: BaseException = exc
        if isinstance(exc, HandlerFailedError):
            origin = exc.exceptions[0]
        code = origin.code if isinstance(origin, BaseError) else None
        detail = origin.detail if isinstance(origin, BaseError) else {}
        return cls(
            exception_class=f"{type(origin).__module__}.{type(origin).__qualname__}",
            message=str(origin),
            code=code,
            detail=dict(detail),
        )


__all__ = [
    "AvailableAtStamp",
    "DelayStamp",
    "ErrorDetailsStamp",
    "HandledStamp",
    "ReceivedStamp",
    "RedeliveryStamp",
    "SentStamp",
    "Stamp",
    "TransportMessageIdStamp",
]
