"""Transport – TestTransport: an in-memory stand-in for a broker connection.

Lifecycle of a queue::

    empty --send()--> has pending envelopes --dispatch()/purge()--> empty

The transport does no locking. A host that shares one transport between
threads must serialise its calls.
"""
from __future__ import annotations

from typing import Any
from uuid import uuid4

from messenger_test.config.options import TransportOptions
from messenger_test.kernel.errors import (
    EnvelopeNotPendingError,
    HandlerFailedError,
    MessageSerializationError,
    NoMoreMessagesError,
    UnsupportedStampError,
)
from messenger_test.kernel.messaging import (
    AvailableAtStamp,
    DelayStamp,
    Envelope,
    ErrorDetailsStamp,
    EventDispatcher,
    JsonSerializer,
    MessageBus,
    MessageFailedEvent,
    MessageHandledEvent,
    MessageReceivedEvent,
    MessageSentEvent,
    NullEventDispatcher,
    ReceivedStamp,
    RedeliveryStamp,
    SentStamp,
    Serializer,
    TransportMessageIdStamp,
)
from messenger_test.kernel.time import Clock, SystemClock
from messenger_test.observability.logging import get_logger
from messenger_test.transport.collection import EnvelopeCollection
from messenger_test.transport.interceptors import (
    CatchExceptionsInterceptor,
    FailureRecorder,
    InterceptorChain,
    RetryInterceptor,
)
from messenger_test.transport.retry import RetryStrategy


class TestTransport:
    """Captures sent envelopes in memory and replays them through a bus on demand.

    Args:
        name: Logical queue name, unique within a registry.
        options: Resolved flags; immutable for the transport's lifetime.
        bus: Bus that handles dispatched envelopes.
        event_dispatcher: Receives lifecycle events (sent/received/handled/failed).
        clock: Time source for delay stamps.
        serializer: Used for the send-time round-trip when ``test_serialization`` is on.
        retry_strategy: Redelivery policy when ``disable_retries`` is off.
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        name: str,
        options: TransportOptions,
        bus: MessageBus,
        event_dispatcher: EventDispatcher | None = None,
        clock: Clock | None = None,
        serializer: Serializer | None = None,
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        self._name = name
        self._options = options
        self._bus = bus
        self._events = event_dispatcher or NullEventDispatcher()
        self._clock = clock or SystemClock()
        self._serializer = serializer or JsonSerializer()
        self._retry_strategy = retry_strategy or RetryStrategy()
        self._log = get_logger(__name__, transport=name)

        self._queue: list[Envelope[Any]] = []
        self._sent: list[Envelope[Any]] = []
        self._dispatched: list[Envelope[Any]] = []
        self._acknowledged: list[Envelope[Any]] = []
        self._rejected: list[Envelope[Any]] = []
        # Redeliveries awaiting immediate handling when not intercepting.
        self._redeliveries: list[Envelope[Any]] = []

        self._handle = self._build_chain()

    def __repr__(self) -> str:
        return f"TestTransport(name={self._name!r}, options={self._options!r}, pending={len(self._queue)})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> TransportOptions:
        return self._options

    # ------------------------------------------------------------------
    # Flag queries
    # ------------------------------------------------------------------

    def is_intercepting(self) -> bool:
        return self._options.intercept

    def is_catching_exceptions(self) -> bool:
        return self._options.catch_exceptions

    def should_test_serialization(self) -> bool:
        return self._options.test_serialization

    def is_retries_disabled(self) -> bool:
        return self._options.disable_retries

    def supports_delay_stamp(self) -> bool:
        return self._options.support_delay_stamp

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    def send(self, message: Any) -> Envelope[Any]:
        """Capture *message* (bare or enveloped) and return the queued envelope.

        Raises :class:`UnsupportedStampError` for a delayed envelope when
        delay stamps are not supported, and :class:`MessageSerializationError`
        when the serialization round-trip fails. When not intercepting, the
        envelope is handled before this method returns.
        """
        envelope = Envelope.wrap(message)
        delay = envelope.last(DelayStamp)
        if delay is not None and not self._options.support_delay_stamp:
            raise UnsupportedStampError(DelayStamp, self._name)

        if self._options.test_serialization:
            envelope = self._round_trip(envelope)

        envelope = envelope.with_(TransportMessageIdStamp(uuid4().hex), SentStamp(self._name))
        if delay is not None:
            envelope = envelope.with_(AvailableAtStamp(self._clock.now() + delay.delay))

        self._queue.append(envelope)
        self._sent.append(envelope)
        self._log.debug("transport.message_sent", envelope=envelope)
        self._events.dispatch(MessageSentEvent(envelope, self._name))

        if not self._options.intercept and self._is_available(envelope):
            self.dispatch(envelope)
        return envelope

    def _round_trip(self, envelope: Envelope[Any]) -> Envelope[Any]:
        try:
            return self._serializer.decode(self._serializer.encode(envelope))
        except MessageSerializationError:
            self._log.error("transport.serialization_failed", envelope=envelope)
            raise
        except Exception as exc:
            self._log.error("transport.serialization_failed", envelope=envelope, error=repr(exc))
            raise MessageSerializationError(
                f"Serialization round-trip of {type(envelope.message).__qualname__} failed: {exc}",
                message_type=type(envelope.message).__qualname__,
                cause=exc,
            ) from exc

    # ------------------------------------------------------------------
    # Dispatching
    # ------------------------------------------------------------------

    def dispatch(self, envelope: Envelope[Any] | None = None) -> EnvelopeCollection:
        """Hand queued envelopes to the bus and return the outcomes.

        With *envelope*, only that pending envelope is handled (even if its
        delay has not elapsed). Without it, every envelope available when the
        call starts is handled in order. Redeliveries scheduled meanwhile wait
        for the next call, unless the transport is not intercepting: then
        each one that is already available is handled before returning.
        """
        results: list[Envelope[Any]] = []
        if envelope is not None:
            results.append(self._receive_and_handle(self._take(envelope)))
        else:
            for pending in self._available():
                self._remove(pending)
                results.append(self._receive_and_handle(pending))

        if not self._options.intercept:
            results.extend(self._consume_redeliveries())
        return EnvelopeCollection(results)

    def process(self, number: int | None = None) -> EnvelopeCollection:
        """Handle exactly *number* available envelopes, or all of them when None."""
        if number is None:
            return self.dispatch()
        results: list[Envelope[Any]] = []
        while len(results) < number:
            available = self._available()
            if not available:
                raise NoMoreMessagesError(self._name, number, len(results))
            results.extend(self.dispatch(available[0]))
        return EnvelopeCollection(results)

    def _receive_and_handle(self, envelope: Envelope[Any]) -> Envelope[Any]:
        received = envelope.with_(ReceivedStamp(self._name))
        self._dispatched.append(received)
        self._log.debug("transport.message_received", envelope=received)
        self._events.dispatch(MessageReceivedEvent(received, self._name))
        return self._handle(received)

    def _deliver(self, envelope: Envelope[Any]) -> Envelope[Any]:
        result = self._bus.dispatch(envelope)
        handled = result if isinstance(result, Envelope) else envelope
        self._acknowledged.append(handled)
        self._log.debug("transport.message_handled", envelope=handled)
        self._events.dispatch(MessageHandledEvent(handled, self._name))
        return handled

    def _build_chain(self) -> InterceptorChain:
        chain = InterceptorChain(self._deliver)
        if self._options.catch_exceptions:
            chain.add(CatchExceptionsInterceptor(self._on_caught))
        if not self._options.disable_retries:
            chain.add(RetryInterceptor(self._retry_strategy, self._redeliver))
        chain.add(FailureRecorder(self._on_failure, self._will_retry))
        return chain

    # ------------------------------------------------------------------
    # Failure handling
    # ------------------------------------------------------------------

    @staticmethod
    def _failed_envelope(envelope: Envelope[Any], exc: Exception) -> Envelope[Any]:
        base = exc.envelope if isinstance(exc, HandlerFailedError) else envelope
        return base.with_(ErrorDetailsStamp.from_exception(exc))

    def _will_retry(self, envelope: Envelope[Any], exc: Exception) -> bool:
        return not self._options.disable_retries and self._retry_strategy.is_retryable(envelope, exc)

    def _on_failure(self, envelope: Envelope[Any], exc: Exception, will_retry: bool) -> None:
        failed = self._failed_envelope(envelope, exc)
        self._rejected.append(failed)
        self._log.warning("transport.message_failed", envelope=failed, error=repr(exc), will_retry=will_retry)
        self._events.dispatch(MessageFailedEvent(failed, self._name, exc, will_retry))

    def _on_caught(self, envelope: Envelope[Any], exc: Exception) -> Envelope[Any]:
        self._log.info("transport.exception_caught", envelope=envelope, error=repr(exc))
        return self._failed_envelope(envelope, exc)

    def _redeliver(self, envelope: Envelope[Any], exc: Exception) -> None:
        base = exc.envelope if isinstance(exc, HandlerFailedError) else envelope
        retry_count = self._retry_strategy.retry_count(base) + 1
        wait_ms = self._retry_strategy.wait_ms(base)
        redelivery = base
        for stamp_type in (ReceivedStamp, RedeliveryStamp, TransportMessageIdStamp, DelayStamp, AvailableAtStamp):
            redelivery = redelivery.without(stamp_type)
        redelivery = redelivery.with_(TransportMessageIdStamp(uuid4().hex), RedeliveryStamp(retry_count))
        if self._options.support_delay_stamp and wait_ms > 0:
            delay = DelayStamp(wait_ms)
            redelivery = redelivery.with_(delay, AvailableAtStamp(self._clock.now() + delay.delay))
        self._queue.append(redelivery)
        if not self._options.intercept:
            self._redeliveries.append(redelivery)
        self._log.info("transport.message_retried", envelope=redelivery, retry_count=retry_count, delay_ms=wait_ms)

    def _consume_redeliveries(self) -> list[Envelope[Any]]:
        # Handling a redelivery may schedule the next one; the loop picks it up.
        results: list[Envelope[Any]] = []
        while self._redeliveries:
            redelivery = self._redeliveries.pop(0)
            if not self._is_pending(redelivery) or not self._is_available(redelivery):
                continue
            self._remove(redelivery)
            results.append(self._receive_and_handle(redelivery))
        return results

    # ------------------------------------------------------------------
    # Queue inspection
    # ------------------------------------------------------------------

    def _is_available(self, envelope: Envelope[Any]) -> bool:
        stamp = envelope.last(AvailableAtStamp)
        return stamp is None or stamp.available_at <= self._clock.now()

    def _available(self) -> list[Envelope[Any]]:
        return [e for e in self._queue if self._is_available(e)]

    def _is_pending(self, envelope: Envelope[Any]) -> bool:
        return any(queued is envelope for queued in self._queue)

    def _remove(self, envelope: Envelope[Any]) -> None:
        for index, queued in enumerate(self._queue):
            if queued is envelope:
                del self._queue[index]
                return

    def _take(self, envelope: Envelope[Any]) -> Envelope[Any]:
        wanted = envelope.last(TransportMessageIdStamp)
        for index, queued in enumerate(self._queue):
            if queued is envelope or (wanted is not None and queued.last(TransportMessageIdStamp) == wanted):
                return self._queue.pop(index)
        raise EnvelopeNotPendingError(self._name, type(envelope.message).__qualname__)

    def receive(self) -> EnvelopeCollection:
        """Pending envelopes that are available now. Nothing is removed."""
        return EnvelopeCollection(self._available())

    def queue(self) -> EnvelopeCollection:
        """Every pending envelope, delayed or not. Nothing is removed."""
        return EnvelopeCollection(self._queue)

    def sent(self) -> EnvelopeCollection:
        return EnvelopeCollection(self._sent)

    def dispatched(self) -> EnvelopeCollection:
        return EnvelopeCollection(self._dispatched)

    def acknowledged(self) -> EnvelopeCollection:
        return EnvelopeCollection(self._acknowledged)

    def rejected(self) -> EnvelopeCollection:
        return EnvelopeCollection(self._rejected)

    def purge(self) -> None:
        """Drop every pending envelope."""
        self._queue.clear()
        self._redeliveries.clear()

    def reset(self) -> None:
        """Drop pending envelopes and the sent/dispatched/acknowledged/rejected history."""
        self._queue.clear()
        self._redeliveries.clear()
        self._sent.clear()
        self._dispatched.clear()
        self._acknowledged.clear()
        self._rejected.clear()


__all__ = ["TestTransport"]
