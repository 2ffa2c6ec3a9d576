"""Messaging errors – serialization, handling and queue processing failures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from messenger_test.kernel.errors.base import MessengerTestError

if TYPE_CHECKING:
    from messenger_test.kernel.messaging.envelope import Envelope


class MessageSerializationError(MessengerTestError):
    """Failed to encode or decode an envelope.

    Raised by the transport whenever the serialization round-trip fails,
    whatever the ``catch_exceptions`` option says.
    """

    default_code = "message_serialization_error"

    def __init__(
        self,
        message: str,
        *,
        message_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.message_type = message_type


class HandlingError(MessengerTestError):
    """A message could not be handled by the bus."""

    default_code = "handling_error"


class NoHandlerForMessageError(HandlingError):
    """The bus has no handler registered for the message type."""

    default_code = "no_handler_for_message"

    def __init__(self, message_type: type, **kwargs: Any) -> None:
        super().__init__(f"No handler for message {message_type.__qualname__!r}", **kwargs)
        self.message_type = message_type


class HandlerFailedError(HandlingError):
    """One or more handlers raised while handling an envelope.

    ``exceptions`` holds the original handler exceptions, in handler order.
    """

    default_code = "handler_failed"

    def __init__(self, envelope: Envelope, exceptions: list[Exception], **kwargs: Any) -> None:
        first = exceptions[0]
        msg = f"Handling {type(envelope.message).__qualname__!r} failed: {first}"
        if len(exceptions) > 1:
            msg += f" (and {len(exceptions) - 1} other failure(s))"
        kwargs.setdefault("cause", first)
        super().__init__(msg, **kwargs)
        self.envelope = envelope
        self.exceptions = exceptions

    def wrapped(self, exc_type: type[BaseException]) -> list[Exception]:
        """Return the wrapped exceptions that are instances of *exc_type*."""
        return [e for e in self.exceptions if isinstance(e, exc_type)]


class UnrecoverableMessageError(HandlingError):
    """Raised by a handler to signal that retrying the message is pointless."""

    default_code = "unrecoverable_message"


class NoMoreMessagesError(MessengerTestError):
    """``process(n)`` asked for more messages than the queue holds."""

    default_code = "no_more_messages"

    def __init__(self, transport_name: str, requested: int, processed: int, **kwargs: Any) -> None:
        super().__init__(
            f"Expected to process {requested} message(s) on transport "
            f"'{transport_name}' but only {processed} were available",
            **kwargs,
        )
        self.transport_name = transport_name
        self.requested = requested
        self.processed = processed


class EnvelopeNotPendingError(MessengerTestError):
    """``dispatch(envelope)`` was given an envelope the transport is not holding."""

    default_code = "envelope_not_pending"

    def __init__(self, transport_name: str, message_type: str, **kwargs: Any) -> None:
        super().__init__(
            f"{message_type} envelope is not pending on transport '{transport_name}'",
            **kwargs,
        )
        self.transport_name = transport_name
        self.message_type = message_type


__all__ = [
    "EnvelopeNotPendingError",
    "HandlerFailedError",
    "HandlingError",
    "MessageSerializationError",
    "NoHandlerForMessageError",
    "NoMoreMessagesError",
    "UnrecoverableMessageError",
]
