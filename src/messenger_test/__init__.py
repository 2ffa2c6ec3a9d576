"""
messenger_test – in-memory test transport for message-bus applications.

Import path convention::

    from messenger_test.transport import TestTransportFactory, TransportRegistry
    from messenger_test.kernel.messaging import Envelope, DelayStamp
    from messenger_test.config import resolve_options
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
