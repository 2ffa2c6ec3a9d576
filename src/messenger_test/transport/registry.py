"""Transport – TransportRegistry: explicit bookkeeping of named test transports."""
from __future__ import annotations

from collections.abc import Iterator

from messenger_test.kernel.errors import TransportConflictError, TransportNotFoundError
from messenger_test.observability.logging import get_logger
from messenger_test.transport.transport import TestTransport

logger = get_logger(__name__)


class TransportRegistry:
    """Named transports created for one test session.

    Pass the same registry to the factory and to whatever runs test
    setup/teardown; call :meth:`reset_all` between test cases::

        registry = TransportRegistry()
        factory = TestTransportFactory(bus, registry=registry)
        ...
        registry.reset_all()
    """

    def __init__(self) -> None:
        self._transports: dict[str, TestTransport] = {}

    def register(self, transport: TestTransport) -> TestTransport:
        existing = self._transports.get(transport.name)
        if existing is not None and existing is not transport:
            raise TransportConflictError(transport.name)
        self._transports[transport.name] = transport
        return transport

    def find(self, name: str) -> TestTransport | None:
        return self._transports.get(name)

    def get(self, name: str | None = None) -> TestTransport:
        """Return the transport called *name*.

        Without a name, return the only registered transport; fail when
        there are none or several.
        """
        if name is None:
            if len(self._transports) == 1:
                return next(iter(self._transports.values()))
            raise TransportNotFoundError(None, self.names())
        try:
            return self._transports[name]
        except KeyError:
            raise TransportNotFoundError(name, self.names()) from None

    def names(self) -> list[str]:
        return list(self._transports)

    def __contains__(self, name: object) -> bool:
        return name in self._transports

    def __iter__(self) -> Iterator[TestTransport]:
        return iter(list(self._transports.values()))

    def __len__(self) -> int:
        return len(self._transports)

    def reset_all(self) -> None:
        """Clear every registered transport, then forget them all."""
        for transport in self._transports.values():
            transport.reset()
        logger.debug("registry.reset_all", transports=self.names())
        self._transports.clear()


__all__ = ["TransportRegistry"]
