"""Kernel messaging – MessageBus port and the in-process reference bus."""
from __future__ import annotations

import abc
from typing import Any, Callable

from messenger_test.kernel.errors import HandlerFailedError, NoHandlerForMessageError
from messenger_test.kernel.messaging.envelope import Envelope
from messenger_test.kernel.messaging.stamps import HandledStamp
from messenger_test.observability.logging import get_logger

Handler = Callable[[Any], Any]

logger = get_logger(__name__)


class MessageBus(abc.ABC):
    """Port: hand a message to its handlers synchronously."""

    @abc.abstractmethod
    def dispatch(self, message: Any) -> Envelope[Any]:
        """Handle *message* (a bare message or an :class:`Envelope`).

        Returns the envelope stamped with the handlers' results; raises when
        handling fails.
        """


def handler_name(handler: Handler) -> str:
    name = getattr(handler, "__qualname__", None) or type(handler).__qualname__
    module = getattr(handler, "__module__", None) or type(handler).__module__
    return f"{module}.{name}"


class InProcessMessageBus(MessageBus):
    """In-process bus with handlers registered per message type.

    Handlers registered for a base class also receive its subclasses. A
    handler that already left a :class:`HandledStamp` on the envelope is
    skipped, so a redelivered message only re-runs the handlers that failed.
    Failures are collected and raised together as :class:`HandlerFailedError`
    once every handler has been given its chance.

    Each registration gets its own stamp name: ``module.qualname``, suffixed
    with ``#<n>`` when that name is already taken on this bus (two lambdas,
    two instances of one handler class).
    """

    def __init__(self, *, allow_no_handlers: bool = False) -> None:
        self._handlers: dict[type, list[tuple[str, Handler]]] = {}
        self._names: set[str] = set()
        self._allow_no_handlers = allow_no_handlers

    def register(self, message_type: type, handler: Handler) -> str:
        """Register *handler* for *message_type* and return its stamp name."""
        base = handler_name(handler)
        name, index = base, 1
        while name in self._names:
            index += 1
            name = f"{base}#{index}"
        self._names.add(name)
        self._handlers.setdefault(message_type, []).append((name, handler))
        return name

    def registrations_for(self, message_type: type) -> list[tuple[str, Handler]]:
        """``(stamp name, handler)`` pairs for *message_type*, base classes included."""
        registrations: list[tuple[str, Handler]] = []
        for klass in message_type.__mro__:
            registrations.extend(self._handlers.get(klass, []))
        return registrations

    def handlers_for(self, message_type: type) -> list[Handler]:
        return [handler for _, handler in self.registrations_for(message_type)]

    def dispatch(self, message: Any) -> Envelope[Any]:
        envelope = Envelope.wrap(message)
        registrations = self.registrations_for(envelope.message_type)
        if not registrations and not self._allow_no_handlers:
            raise NoHandlerForMessageError(envelope.message_type)

        already_handled = {s.handler_name for s in envelope.all(HandledStamp)}
        exceptions: list[Exception] = []
        for name, handler in registrations:
            if name in already_handled:
                continue
            try:
                result = handler(envelope.message)
            except Exception as exc:
                logger.warning("bus.handler_failed", handler=name, envelope=envelope, error=repr(exc))
                exceptions.append(exc)
                continue
            envelope = envelope.with_(HandledStamp(name, result))
            logger.debug("bus.message_handled", handler=name, envelope=envelope)

        if exceptions:
            raise HandlerFailedError(envelope, exceptions)
        return envelope


__all__ = ["Handler", "InProcessMessageBus", "MessageBus", "handler_name"]
