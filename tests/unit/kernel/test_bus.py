"""Unit tests for the in-process message bus."""

from __future__ import annotations

import dataclasses

import pytest

from messenger_test.kernel.errors import HandlerFailedError, NoHandlerForMessageError
from messenger_test.kernel.messaging import (
    Envelope,
    HandledStamp,
    InProcessMessageBus,
    SentStamp,
    handler_name,
)


@dataclasses.dataclass(frozen=True)
class OrderPlaced:
    order_id: str


@dataclasses.dataclass(frozen=True)
class PriorityOrderPlaced(OrderPlaced):
    pass


def send_email(message: OrderPlaced) -> str:
    return f"email:{message.order_id}"


def update_stock(message: OrderPlaced) -> str:
    return f"stock:{message.order_id}"


def broken(message: OrderPlaced) -> None:
    raise RuntimeError(f"cannot handle {message.order_id}")


class TestDispatch:
    def test_runs_handlers_in_registration_order(self) -> None:
        bus = InProcessMessageBus()
        bus.register(OrderPlaced, send_email)
        bus.register(OrderPlaced, update_stock)
        envelope = bus.dispatch(OrderPlaced("o-1"))
        assert [s.result for s in envelope.all(HandledStamp)] == ["email:o-1", "stock:o-1"]

    def test_accepts_envelope_and_keeps_stamps(self) -> None:
        bus = InProcessMessageBus()
        bus.register(OrderPlaced, send_email)
        envelope = bus.dispatch(Envelope(OrderPlaced("o-1"), (SentStamp("async"),)))
        assert envelope.last(SentStamp) == SentStamp("async")
        assert envelope.last(HandledStamp) is not None

    def test_base_class_handlers_receive_subclasses(self) -> None:
        bus = InProcessMessageBus()
        bus.register(OrderPlaced, send_email)
        envelope = bus.dispatch(PriorityOrderPlaced("o-2"))
        assert envelope.last(HandledStamp).result == "email:o-2"

    def test_no_handler_raises(self) -> None:
        with pytest.raises(NoHandlerForMessageError):
            InProcessMessageBus().dispatch(OrderPlaced("o-1"))

    def test_no_handler_allowed(self) -> None:
        envelope = InProcessMessageBus(allow_no_handlers=True).dispatch(OrderPlaced("o-1"))
        assert envelope.all(HandledStamp) == []

    def test_failure_runs_remaining_handlers_then_raises(self) -> None:
        bus = InProcessMessageBus()
        bus.register(OrderPlaced, broken)
        bus.register(OrderPlaced, send_email)
        with pytest.raises(HandlerFailedError) as exc_info:
            bus.dispatch(OrderPlaced("o-1"))
        err = exc_info.value
        assert [type(e) for e in err.exceptions] == [RuntimeError]
        assert [s.handler_name for s in err.envelope.all(HandledStamp)] == [handler_name(send_email)]

    def test_already_handled_handlers_are_skipped(self) -> None:
        calls: list[str] = []

        def record(message: OrderPlaced) -> None:
            calls.append(message.order_id)

        bus = InProcessMessageBus()
        bus.register(OrderPlaced, record)
        first = bus.dispatch(OrderPlaced("o-1"))
        bus.dispatch(first)
        assert calls == ["o-1"]


class TestRegistrationNames:
    def test_first_registration_uses_plain_name(self) -> None:
        assert InProcessMessageBus().register(OrderPlaced, send_email) == handler_name(send_email)

    def test_same_name_gets_suffix(self) -> None:
        bus = InProcessMessageBus()
        first = bus.register(OrderPlaced, lambda m: "a")
        second = bus.register(OrderPlaced, lambda m: "b")
        assert first != second
        assert second == f"{first}#2"
        envelope = bus.dispatch(OrderPlaced("o-1"))
        assert [s.handler_name for s in envelope.all(HandledStamp)] == [first, second]

    def test_failed_lambda_reruns_next_to_successful_twin(self) -> None:
        calls: list[str] = []

        def flaky(message: OrderPlaced) -> None:
            calls.append("flaky")
            if len(calls) == 1:
                raise RuntimeError("first attempt")

        bus = InProcessMessageBus()
        bus.register(OrderPlaced, lambda m: flaky(m))
        bus.register(OrderPlaced, lambda m: "steady")
        with pytest.raises(HandlerFailedError) as exc_info:
            bus.dispatch(OrderPlaced("o-1"))

        retried = bus.dispatch(exc_info.value.envelope)
        assert calls == ["flaky", "flaky"]
        assert [s.result for s in retried.all(HandledStamp)] == ["steady", None]

    def test_instances_of_one_class_are_told_apart(self) -> None:
        class Counter:
            def __init__(self) -> None:
                self.calls = 0

            def __call__(self, message: OrderPlaced) -> int:
                self.calls += 1
                return self.calls

        first, second = Counter(), Counter()
        bus = InProcessMessageBus()
        bus.register(OrderPlaced, first)
        bus.register(OrderPlaced, second)
        bus.dispatch(OrderPlaced("o-1"))
        assert (first.calls, second.calls) == (1, 1)


class TestHandlerName:
    def test_function(self) -> None:
        assert handler_name(send_email).endswith("test_bus.send_email")

    def test_callable_instance(self) -> None:
        class Handler:
            def __call__(self, message: object) -> None:
                return None

        assert handler_name(Handler()).endswith("Handler")
