"""Kernel time – Clock protocol + implementations used for delay stamps."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: read-only source of the current time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Production clock that delegates to ``datetime.now(UTC)``."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class MockClock:
    """Test clock that only moves when told to.

    ``sleep`` advances the clock instead of blocking, so delayed messages can
    be made due without waiting::

        clock = MockClock()
        transport.send(Envelope(Ping()).with_(DelayStamp(5000)))
        clock.sleep(5)
        transport.process()
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs: int | float) -> None:
        """Advance the clock by the given ``timedelta`` kwargs."""
        self._now += timedelta(**kwargs)

    def sleep(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)

    def set(self, moment: datetime) -> None:
        self._now = moment


__all__ = ["Clock", "MockClock", "SystemClock"]
