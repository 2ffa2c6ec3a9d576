"""Testing fixtures – registry, bus, dispatcher, clock and factory.

Requires pytest, which the ``messenger-test[testing]`` extra installs.
"""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from messenger_test.kernel.messaging import InMemoryEventDispatcher, InProcessMessageBus, JsonSerializer
from messenger_test.kernel.time import MockClock
from messenger_test.transport import TestTransportFactory, TransportRegistry


@pytest.fixture
def transport_registry() -> Iterator[TransportRegistry]:
    """A fresh registry, reset once the test finishes."""
    registry = TransportRegistry()
    yield registry
    registry.reset_all()


@pytest.fixture
def message_bus() -> InProcessMessageBus:
    return InProcessMessageBus()


@pytest.fixture
def event_dispatcher() -> InMemoryEventDispatcher:
    return InMemoryEventDispatcher()


@pytest.fixture
def mock_clock() -> MockClock:
    """Pytest fixture: a MockClock pinned to 2026-01-01 12:00 UTC."""
    return MockClock()


@pytest.fixture
def serializer() -> JsonSerializer:
    return JsonSerializer()


@pytest.fixture
def transport_factory(
    message_bus: InProcessMessageBus,
    event_dispatcher: InMemoryEventDispatcher,
    mock_clock: MockClock,
    transport_registry: TransportRegistry,
) -> TestTransportFactory:
    """Factory wired to the other fixtures.

    Usage::

        def test_order_is_queued(transport_factory):
            transport = transport_factory.create_transport("test://", {"transport_name": "async"})
            ...
    """
    return TestTransportFactory(
        message_bus,
        event_dispatcher,
        mock_clock,
        registry=transport_registry,
    )


__all__ = [
    "event_dispatcher",
    "message_bus",
    "mock_clock",
    "serializer",
    "transport_factory",
    "transport_registry",
]
