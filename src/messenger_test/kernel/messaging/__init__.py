"""Kernel messaging – envelopes, stamps, bus, events and serializer ports."""
from messenger_test.kernel.messaging.bus import Handler, InProcessMessageBus, MessageBus, handler_name
from messenger_test.kernel.messaging.envelope import Envelope
from messenger_test.kernel.messaging.events import (
    EventDispatcher,
    InMemoryEventDispatcher,
    MessageFailedEvent,
    MessageHandledEvent,
    MessageReceivedEvent,
    MessageSentEvent,
    NullEventDispatcher,
    TransportEvent,
)
from messenger_test.kernel.messaging.serializer import JsonSerializer, Serializer
from messenger_test.kernel.messaging.stamps import (
    AvailableAtStamp,
    DelayStamp,
    ErrorDetailsStamp,
    HandledStamp,
    ReceivedStamp,
    RedeliveryStamp,
    SentStamp,
    Stamp,
    TransportMessageIdStamp,
)

__all__ = [
    "AvailableAtStamp",
    "DelayStamp",
    "Envelope",
    "ErrorDetailsStamp",
    "EventDispatcher",
    "HandledStamp",
    "Handler",
    "InMemoryEventDispatcher",
    "InProcessMessageBus",
    "JsonSerializer",
    "MessageBus",
    "MessageFailedEvent",
    "MessageHandledEvent",
    "MessageReceivedEvent",
    "MessageSentEvent",
    "NullEventDispatcher",
    "ReceivedStamp",
    "RedeliveryStamp",
    "SentStamp",
    "Serializer",
    "Stamp",
    "TransportEvent",
    "TransportMessageIdStamp",
    "handler_name",
]
