"""Transport – retry strategy used when retries are not disabled."""
from __future__ import annotations

import abc
from typing import Any

from messenger_test.kernel.errors import HandlerFailedError, UnrecoverableMessageError
from messenger_test.kernel.messaging import Envelope, RedeliveryStamp


class BackoffStrategy(abc.ABC):
    """Compute the wait (seconds) before the *attempt*-th redelivery."""

    @abc.abstractmethod
    def compute(self, attempt: int) -> float: ...


class ConstantBackoff(BackoffStrategy):
    """Fixed delay between attempts."""

    def __init__(self, delay: float = 1.0) -> None:
        self._delay = delay

    def compute(self, attempt: int) -> float:  # noqa: ARG002
        return self._delay


class ExponentialBackoff(BackoffStrategy):
    """Delay grows exponentially: ``base_delay * multiplier^(attempt - 1)``.

    ``max_delay`` of ``None`` leaves the delay uncapped.
    """

    def __init__(
        self,
        base_delay: float = 1.0,
        multiplier: float = 2.0,
        max_delay: float | None = None,
    ) -> None:
        self._base = base_delay
        self._multiplier = multiplier
        self._max = max_delay

    def compute(self, attempt: int) -> float:
        delay = self._base * (self._multiplier ** max(attempt - 1, 0))
        return delay if self._max is None else min(delay, self._max)


def _origins(exc: BaseException) -> list[BaseException]:
    if isinstance(exc, HandlerFailedError):
        return list(exc.exceptions)
    return [exc]


class RetryStrategy:
    """Decide whether a failed envelope is redelivered, and after how long.

    ``max_retries`` of ``None`` retries forever. An
    :class:`UnrecoverableMessageError` anywhere in the failure stops retries.
    """

    def __init__(
        self,
        max_retries: int | None = 3,
        backoff: BackoffStrategy | None = None,
        retryable_exceptions: tuple[type[BaseException], ...] = (Exception,),
    ) -> None:
        self.max_retries = max_retries
        self.backoff = backoff or ExponentialBackoff()
        self.retryable_exceptions = retryable_exceptions

    @staticmethod
    def retry_count(envelope: Envelope[Any]) -> int:
        stamp = envelope.last(RedeliveryStamp)
        return stamp.retry_count if stamp is not None else 0

    def is_retryable(self, envelope: Envelope[Any], exc: BaseException) -> bool:
        origins = _origins(exc)
        if any(isinstance(e, UnrecoverableMessageError) for e in origins):
            return False
        if not any(isinstance(e, self.retryable_exceptions) for e in origins):
            return False
        return self.max_retries is None or self.retry_count(envelope) < self.max_retries

    def wait_ms(self, envelope: Envelope[Any]) -> int:
        return int(self.backoff.compute(self.retry_count(envelope) + 1) * 1000)


__all__ = ["BackoffStrategy", "ConstantBackoff", "ExponentialBackoff", "RetryStrategy"]
