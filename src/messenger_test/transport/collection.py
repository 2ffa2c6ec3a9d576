"""Transport – EnvelopeCollection: a read-only snapshot with assertion helpers."""
from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, TypeVar, overload

from messenger_test.kernel.messaging import Envelope

M = TypeVar("M")


class EnvelopeCollection(Sequence[Envelope[Any]]):
    """Snapshot of envelopes taken from a transport.

    Usage::

        transport.queue().assert_count(1)
        transport.acknowledged().assert_contains(OrderPlaced, times=2)
        order = transport.dispatched().first(OrderPlaced)
    """

    def __init__(self, envelopes: list[Envelope[Any]] | tuple[Envelope[Any], ...] = ()) -> None:
        self._envelopes: tuple[Envelope[Any], ...] = tuple(envelopes)

    @overload
    def __getitem__(self, index: int) -> Envelope[Any]: ...
    @overload
    def __getitem__(self, index: slice) -> EnvelopeCollection: ...

    def __getitem__(self, index: int | slice) -> Envelope[Any] | EnvelopeCollection:
        if isinstance(index, slice):
            return EnvelopeCollection(self._envelopes[index])
        return self._envelopes[index]

    def __len__(self) -> int:
        return len(self._envelopes)

    def __iter__(self) -> Iterator[Envelope[Any]]:
        return iter(self._envelopes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EnvelopeCollection):
            return self._envelopes == other._envelopes
        if isinstance(other, (list, tuple)):
            return list(self._envelopes) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"EnvelopeCollection({[type(e.message).__qualname__ for e in self._envelopes]})"

    def of_type(self, message_type: type) -> EnvelopeCollection:
        return EnvelopeCollection([e for e in self._envelopes if isinstance(e.message, message_type)])

    def messages(self, message_type: type[M] | None = None) -> list[Any]:
        """Return the bare messages, optionally filtered by type."""
        source = self if message_type is None else self.of_type(message_type)
        return [e.message for e in source]

    def first(self, message_type: type[M] | None = None) -> Envelope[Any]:
        """Return the first envelope (of *message_type*); fail if there is none."""
        source = self if message_type is None else self.of_type(message_type)
        if not source:
            what = "envelope" if message_type is None else f"{message_type.__qualname__} envelope"
            raise AssertionError(f"Expected at least one {what}, found none")
        return source[0]

    # ------------------------------------------------------------------
    # Assertions
    # ------------------------------------------------------------------

    def assert_empty(self) -> EnvelopeCollection:
        return self.assert_count(0)

    def assert_not_empty(self) -> EnvelopeCollection:
        if not self._envelopes:
            raise AssertionError("Expected at least one envelope, found none")
        return self

    def assert_count(self, expected: int) -> EnvelopeCollection:
        if len(self._envelopes) != expected:
            raise AssertionError(f"Expected {expected} envelope(s), found {len(self._envelopes)}: {self!r}")
        return self

    def assert_contains(self, message_type: type, times: int | None = None) -> EnvelopeCollection:
        found = len(self.of_type(message_type))
        if times is None and found == 0:
            raise AssertionError(f"Expected at least one {message_type.__qualname__}, found none: {self!r}")
        if times is not None and found != times:
            raise AssertionError(
                f"Expected {message_type.__qualname__} {times} time(s), found {found}: {self!r}"
            )
        return self

    def assert_not_contains(self, message_type: type) -> EnvelopeCollection:
        found = len(self.of_type(message_type))
        if found:
            raise AssertionError(f"Expected no {message_type.__qualname__}, found {found}: {self!r}")
        return self


__all__ = ["EnvelopeCollection"]
