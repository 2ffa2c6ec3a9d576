"""Transport – the in-memory test transport, its factory and registry."""
from messenger_test.transport.collection import EnvelopeCollection
from messenger_test.transport.factory import TestTransportFactory
from messenger_test.transport.interceptors import (
    CatchExceptionsInterceptor,
    FailureRecorder,
    Interceptor,
    InterceptorChain,
    RetryInterceptor,
)
from messenger_test.transport.registry import TransportRegistry
from messenger_test.transport.retry import BackoffStrategy, ConstantBackoff, ExponentialBackoff, RetryStrategy
from messenger_test.transport.transport import TestTransport

__all__ = [
    "BackoffStrategy",
    "CatchExceptionsInterceptor",
    "ConstantBackoff",
    "EnvelopeCollection",
    "ExponentialBackoff",
    "FailureRecorder",
    "Interceptor",
    "InterceptorChain",
    "RetryInterceptor",
    "RetryStrategy",
    "TestTransport",
    "TestTransportFactory",
    "TransportRegistry",
]
