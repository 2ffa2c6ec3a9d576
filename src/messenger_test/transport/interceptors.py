"""Transport – interceptors wrapped around the bus call.

The chain is composed once, when the transport is built, from the resolved
options::

    chain = (
        InterceptorChain(deliver)
        .add(CatchExceptionsInterceptor(on_caught))      # catch_exceptions
        .add(RetryInterceptor(strategy, redeliver))      # not disable_retries
        .add(FailureRecorder(on_failure, will_retry))    # always
    )
    envelope = chain(envelope)

The first interceptor added is the outermost one.
"""
from __future__ import annotations

import abc
from typing import Any, Callable

from messenger_test.kernel.messaging import Envelope
from messenger_test.transport.retry import RetryStrategy

Next = Callable[[Envelope[Any]], Envelope[Any]]


class Interceptor(abc.ABC):
    """Single node in the interceptor chain."""

    @abc.abstractmethod
    def __call__(self, envelope: Envelope[Any], next_: Next) -> Envelope[Any]: ...


class InterceptorChain:
    """Ordered chain of interceptors ending with a terminal handler."""

    def __init__(self, handler: Next) -> None:
        self._handler = handler
        self._interceptors: list[Interceptor] = []
        self._chain: Next = handler

    def add(self, interceptor: Interceptor) -> InterceptorChain:
        """Append an interceptor (fluent API)."""
        self._interceptors.append(interceptor)
        self._chain = self._compose()
        return self

    @property
    def interceptors(self) -> list[Interceptor]:
        return list(self._interceptors)

    def _compose(self) -> Next:
        chain = self._handler
        for interceptor in reversed(self._interceptors):

            def _wrap(env: Envelope[Any], *, _n: Next = chain, _i: Interceptor = interceptor) -> Envelope[Any]:
                return _i(env, _n)

            chain = _wrap
        return chain

    def __call__(self, envelope: Envelope[Any]) -> Envelope[Any]:
        return self._chain(envelope)


class FailureRecorder(Interceptor):
    """Report every failure, then let it continue outwards."""

    def __init__(
        self,
        on_failure: Callable[[Envelope[Any], Exception, bool], None],
        will_retry: Callable[[Envelope[Any], Exception], bool],
    ) -> None:
        self._on_failure = on_failure
        self._will_retry = will_retry

    def __call__(self, envelope: Envelope[Any], next_: Next) -> Envelope[Any]:
        try:
            return next_(envelope)
        except Exception as exc:
            self._on_failure(envelope, exc, self._will_retry(envelope, exc))
            raise


class RetryInterceptor(Interceptor):
    """Schedule a redelivery for retryable failures. The failure still propagates."""

    def __init__(
        self,
        strategy: RetryStrategy,
        redeliver: Callable[[Envelope[Any], Exception], None],
    ) -> None:
        self._strategy = strategy
        self._redeliver = redeliver

    def __call__(self, envelope: Envelope[Any], next_: Next) -> Envelope[Any]:
        try:
            return next_(envelope)
        except Exception as exc:
            if self._strategy.is_retryable(envelope, exc):
                self._redeliver(envelope, exc)
            raise


class CatchExceptionsInterceptor(Interceptor):
    """Swallow handling failures; the callback turns them into a result envelope."""

    def __init__(self, on_caught: Callable[[Envelope[Any], Exception], Envelope[Any]]) -> None:
        self._on_caught = on_caught

    def __call__(self, envelope: Envelope[Any], next_: Next) -> Envelope[Any]:
        try:
            return next_(envelope)
        except Exception as exc:
            return self._on_caught(envelope, exc)


__all__ = [
    "CatchExceptionsInterceptor",
    "FailureRecorder",
    "Interceptor",
    "InterceptorChain",
    "Next",
    "RetryInterceptor",
]
