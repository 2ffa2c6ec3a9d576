"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    └── MessengerTestError
        ├── ConfigurationError              (configuration.py)
        │   ├── InvalidDsnError
        │   ├── InvalidOptionError
        │   ├── InvalidSettingValueError
        │   ├── UnsupportedStampError
        │   ├── TransportNotFoundError
        │   └── TransportConflictError
        ├── MessageSerializationError       (messaging.py)
        ├── HandlingError
        │   ├── HandlerFailedError
        │   ├── NoHandlerForMessageError
        │   └── UnrecoverableMessageError
        ├── NoMoreMessagesError
        └── EnvelopeNotPendingError
"""

from messenger_test.kernel.errors.base import BaseError, MessengerTestError
from messenger_test.kernel.errors.configuration import (
    ConfigurationError,
    InvalidDsnError,
    InvalidOptionError,
    InvalidSettingValueError,
    TransportConflictError,
    TransportNotFoundError,
    UnsupportedStampError,
)
from messenger_test.kernel.errors.messaging import (
    EnvelopeNotPendingError,
    HandlerFailedError,
    HandlingError,
    MessageSerializationError,
    NoHandlerForMessageError,
    NoMoreMessagesError,
    UnrecoverableMessageError,
)

__all__ = [
    "BaseError",
    "ConfigurationError",
    "EnvelopeNotPendingError",
    "HandlerFailedError",
    "HandlingError",
    "InvalidDsnError",
    "InvalidOptionError",
    "InvalidSettingValueError",
    "MessageSerializationError",
    "MessengerTestError",
    "NoHandlerForMessageError",
    "NoMoreMessagesError",
    "TransportConflictError",
    "TransportNotFoundError",
    "UnrecoverableMessageError",
    "UnsupportedStampError",
]
