"""Kernel messaging – transport lifecycle events and the EventDispatcher port."""
from __future__ import annotations

import abc
import dataclasses
from typing import Any, Callable, TypeVar

from messenger_test.kernel.messaging.envelope import Envelope

E = TypeVar("E", bound="TransportEvent")
Listener = Callable[[Any], None]


@dataclasses.dataclass(frozen=True)
class TransportEvent:
    envelope: Envelope[Any]
    transport_name: str


@dataclasses.dataclass(frozen=True)
class MessageSentEvent(TransportEvent):
    """The envelope was captured by the transport."""


@dataclasses.dataclass(frozen=True)
class MessageReceivedEvent(TransportEvent):
    """The envelope was taken off the queue for handling."""


@dataclasses.dataclass(frozen=True)
class MessageHandledEvent(TransportEvent):
    """Every handler succeeded."""


@dataclasses.dataclass(frozen=True)
class MessageFailedEvent(TransportEvent):
    error: BaseException
    will_retry: bool = False


class EventDispatcher(abc.ABC):
    """Port: fire-and-forget notification of lifecycle events."""

    @abc.abstractmethod
    def dispatch(self, event: object) -> None: ...


class NullEventDispatcher(EventDispatcher):
    def dispatch(self, event: object) -> None:
        return None


class InMemoryEventDispatcher(EventDispatcher):
    """Calls listeners registered per event type and keeps every event seen."""

    def __init__(self) -> None:
        self._listeners: dict[type, list[Listener]] = {}
        self._events: list[object] = []

    def listen(self, event_type: type, listener: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def dispatch(self, event: object) -> None:
        self._events.append(event)
        for klass in type(event).__mro__:
            for listener in self._listeners.get(klass, []):
                listener(event)

    @property
    def events(self) -> list[object]:
        return list(self._events)

    def of_type(self, event_type: type[E]) -> list[E]:
        return [e for e in self._events if isinstance(e, event_type)]

    def clear(self) -> None:
        self._events.clear()


__all__ = [
    "EventDispatcher",
    "InMemoryEventDispatcher",
    "Listener",
    "MessageFailedEvent",
    "MessageHandledEvent",
    "MessageReceivedEvent",
    "MessageSentEvent",
    "NullEventDispatcher",
    "TransportEvent",
]
