"""Transport – TestTransportFactory: DSN + options in, registered TestTransport out."""
from __future__ import annotations

from typing import Any, Mapping

from messenger_test.config.dsn import SCHEME, Dsn, has_scheme
from messenger_test.config.options import resolve_options, transport_name
from messenger_test.kernel.errors import InvalidDsnError, TransportConflictError
from messenger_test.kernel.messaging import EventDispatcher, MessageBus, Serializer
from messenger_test.kernel.time import Clock
from messenger_test.observability.logging import get_logger
from messenger_test.transport.registry import TransportRegistry
from messenger_test.transport.retry import RetryStrategy
from messenger_test.transport.transport import TestTransport

logger = get_logger(__name__)


class TestTransportFactory:
    """Build :class:`TestTransport` instances for ``test://`` connection strings.

    Usage::

        factory = TestTransportFactory(bus, dispatcher, clock, registry=registry)
        if factory.supports("test://?intercept=false", {}):
            transport = factory.create_transport(
                "test://?intercept=false",
                {"transport_name": "async"},
                JsonSerializer(),
            )

    Creating a transport whose name is already registered returns the
    registered instance when the resolved options match, and raises
    :class:`TransportConflictError` otherwise.
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        bus: MessageBus,
        event_dispatcher: EventDispatcher | None = None,
        clock: Clock | None = None,
        *,
        registry: TransportRegistry | None = None,
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        self._bus = bus
        self._event_dispatcher = event_dispatcher
        self._clock = clock
        self._registry = registry if registry is not None else TransportRegistry()
        self._retry_strategy = retry_strategy

    @property
    def registry(self) -> TransportRegistry:
        return self._registry

    def supports(self, dsn: str, options: Mapping[str, Any] | None = None) -> bool:  # noqa: ARG002
        """True when *dsn* uses the ``test://`` scheme. Query parameters are ignored."""
        return has_scheme(dsn, SCHEME)

    def create_transport(
        self,
        dsn: str,
        options: Mapping[str, Any] | None = None,
        serializer: Serializer | None = None,
    ) -> TestTransport:
        if not self.supports(dsn, options):
            raise InvalidDsnError(dsn, f"only the '{SCHEME}://' scheme is supported")
        resolved = resolve_options(Dsn.parse(dsn), options)
        name = transport_name(options)

        existing = self._registry.find(name)
        if existing is not None:
            if existing.options != resolved:
                raise TransportConflictError(name)
            return existing

        transport = TestTransport(
            name,
            resolved,
            self._bus,
            event_dispatcher=self._event_dispatcher,
            clock=self._clock,
            serializer=serializer,
            retry_strategy=self._retry_strategy,
        )
        self._registry.register(transport)
        logger.debug("factory.transport_created", transport=name, **resolved.as_dict())
        return transport


__all__ = ["TestTransportFactory"]
