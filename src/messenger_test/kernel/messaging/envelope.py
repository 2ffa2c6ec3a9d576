"""Kernel messaging – Envelope: a message plus its ordered stamps."""
from __future__ import annotations

import dataclasses
from typing import Any, Generic, TypeVar

from messenger_test.kernel.messaging.stamps import Stamp

T = TypeVar("T")
S = TypeVar("S", bound=Stamp)


@dataclasses.dataclass(frozen=True)
class Envelope(Generic[T]):
    """Immutable unit of transport.

    Stamps are kept in the order they were added; every mutator returns a
    new envelope::

        envelope = Envelope(PlaceOrder(order_id="o-1")).with_(DelayStamp(1000))
        envelope.last(DelayStamp)  # DelayStamp(delay_ms=1000)
    """

    message: T
    stamps: tuple[Stamp, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.message, Envelope):
            raise TypeError("Cannot wrap an Envelope in another Envelope; use Envelope.wrap()")
        stamps = tuple(self.stamps)
        for stamp in stamps:
            if not isinstance(stamp, Stamp):
                raise TypeError(f"{stamp!r} is not a Stamp")
        object.__setattr__(self, "stamps", stamps)

    @classmethod
    def wrap(cls, message: Any, stamps: tuple[Stamp, ...] | list[Stamp] = ()) -> Envelope[Any]:
        """Return *message* as an envelope, adding *stamps* to it."""
        if isinstance(message, Envelope):
            return message.with_(*stamps)
        return cls(message, tuple(stamps))

    @property
    def message_type(self) -> type:
        return type(self.message)

    def with_(self, *stamps: Stamp) -> Envelope[T]:
        return dataclasses.replace(self, stamps=self.stamps + stamps)

    def without(self, stamp_type: type[Stamp]) -> Envelope[T]:
        """Drop every stamp of *stamp_type* (subclasses included)."""
        kept = tuple(s for s in self.stamps if not isinstance(s, stamp_type))
        return dataclasses.replace(self, stamps=kept)

    def last(self, stamp_type: type[S]) -> S | None:
        for stamp in reversed(self.stamps):
            if isinstance(stamp, stamp_type):
                return stamp
        return None

    def all(self, stamp_type: type[S] | None = None) -> list[Any]:
        if stamp_type is None:
            return list(self.stamps)
        return [s for s in self.stamps if isinstance(s, stamp_type)]


__all__ = ["Envelope"]
