"""Unit tests for the interceptor chain."""

from __future__ import annotations

from typing import Any

import pytest

from messenger_test.kernel.messaging import Envelope, HandledStamp
from messenger_test.transport import (
    CatchExceptionsInterceptor,
    FailureRecorder,
    Interceptor,
    InterceptorChain,
    RetryInterceptor,
    RetryStrategy,
)


def _ok(envelope: Envelope[Any]) -> Envelope[Any]:
    return envelope.with_(HandledStamp("ok"))


def _fail(envelope: Envelope[Any]) -> Envelope[Any]:
    raise RuntimeError("boom")


class _Tag(Interceptor):
    def __init__(self, name: str, log: list[str]) -> None:
        self._name = name
        self._log = log

    def __call__(self, envelope: Envelope[Any], next_: Any) -> Envelope[Any]:
        self._log.append(f"{self._name}:before")
        result = next_(envelope)
        self._log.append(f"{self._name}:after")
        return result


class TestInterceptorChain:
    def test_without_interceptors_calls_handler(self) -> None:
        result = InterceptorChain(_ok)(Envelope("ping"))
        assert result.last(HandledStamp) == HandledStamp("ok")

    def test_first_added_is_outermost(self) -> None:
        log: list[str] = []
        chain = InterceptorChain(_ok).add(_Tag("a", log)).add(_Tag("b", log))
        chain(Envelope("ping"))
        assert log == ["a:before", "b:before", "b:after", "a:after"]

    def test_interceptors_property_is_copy(self) -> None:
        chain = InterceptorChain(_ok).add(_Tag("a", []))
        chain.interceptors.clear()
        assert len(chain.interceptors) == 1


class TestFailureRecorder:
    def test_reports_and_reraises(self) -> None:
        seen: list[tuple[Any, ...]] = []
        recorder = FailureRecorder(lambda e, exc, retry: seen.append((e.message, str(exc), retry)), lambda e, exc: True)
        chain = InterceptorChain(_fail).add(recorder)
        with pytest.raises(RuntimeError):
            chain(Envelope("ping"))
        assert seen == [("ping", "boom", True)]

    def test_silent_on_success(self) -> None:
        seen: list[Any] = []
        chain = InterceptorChain(_ok).add(FailureRecorder(lambda *a: seen.append(a), lambda e, exc: False))
        chain(Envelope("ping"))
        assert seen == []


class TestRetryInterceptor:
    def test_redelivers_retryable_failure_and_reraises(self) -> None:
        redelivered: list[Envelope[Any]] = []
        chain = InterceptorChain(_fail).add(RetryInterceptor(RetryStrategy(), lambda e, exc: redelivered.append(e)))
        with pytest.raises(RuntimeError):
            chain(Envelope("ping"))
        assert len(redelivered) == 1

    def test_skips_when_not_retryable(self) -> None:
        redelivered: list[Envelope[Any]] = []
        chain = InterceptorChain(_fail).add(
            RetryInterceptor(RetryStrategy(max_retries=0), lambda e, exc: redelivered.append(e))
        )
        with pytest.raises(RuntimeError):
            chain(Envelope("ping"))
        assert redelivered == []


class TestCatchExceptionsInterceptor:
    def test_turns_failure_into_result(self) -> None:
        chain = InterceptorChain(_fail).add(
            CatchExceptionsInterceptor(lambda e, exc: e.with_(HandledStamp("caught", str(exc))))
        )
        result = chain(Envelope("ping"))
        assert result.last(HandledStamp) == HandledStamp("caught", "boom")

    def test_passes_success_through(self) -> None:
        chain = InterceptorChain(_ok).add(CatchExceptionsInterceptor(lambda e, exc: e))
        assert chain(Envelope("ping")).last(HandledStamp) == HandledStamp("ok")
