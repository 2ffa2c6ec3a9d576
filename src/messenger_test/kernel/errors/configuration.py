"""Configuration errors – bad DSNs, bad options, unsupported stamps, registry misuse.

These are never caught by the transport; they always reach the caller.
"""

from __future__ import annotations

from typing import Any

from messenger_test.kernel.errors.base import MessengerTestError


class ConfigurationError(MessengerTestError):
    """The transport was configured or used in a way it cannot honour."""

    default_code = "configuration_error"


class InvalidDsnError(ConfigurationError):
    """The connection string could not be parsed."""

    default_code = "invalid_dsn"

    def __init__(self, dsn: str, reason: str, **kwargs: Any) -> None:
        super().__init__(f"Invalid DSN {dsn!r}: {reason}", **kwargs)
        self.dsn = dsn
        self.reason = reason


class InvalidOptionError(ConfigurationError):
    """A recognized option carries a value of the wrong kind."""

    default_code = "invalid_option"

    def __init__(
        self,
        option: str,
        value: object,
        source: str,
        *,
        expected: str = "a boolean",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Option '{option}' from {source} must be {expected}, got {value!r}",
            **kwargs,
        )
        self.option = option
        self.value = value
        self.source = source


class UnsupportedStampError(ConfigurationError):
    """An envelope carries a stamp the transport was configured to reject."""

    default_code = "unsupported_stamp"

    def __init__(self, stamp_type: type, transport_name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Transport '{transport_name}' does not support {stamp_type.__name__}; "
            "enable the 'support_delay_stamp' option to send delayed messages",
            **kwargs,
        )
        self.stamp_type = stamp_type
        self.transport_name = transport_name


class InvalidSettingValueError(ConfigurationError):
    """An ambient setting is present but semantically invalid."""

    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}", **kwargs
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


class TransportNotFoundError(ConfigurationError):
    """No transport matches the requested name."""

    default_code = "transport_not_found"

    def __init__(self, name: str | None, available: list[str], **kwargs: Any) -> None:
        if name is None:
            msg = (
                "A transport name is required when the number of registered "
                f"transports is not exactly one (registered: {available})"
            )
        else:
            msg = f"Transport '{name}' is not registered (registered: {available})"
        super().__init__(msg, **kwargs)
        self.name = name
        self.available = available


class TransportConflictError(ConfigurationError):
    """A transport name is already registered with different options."""

    default_code = "transport_conflict"

    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Transport '{name}' is already registered with different options",
            **kwargs,
        )
        self.name = name


__all__ = [
    "ConfigurationError",
    "InvalidDsnError",
    "InvalidOptionError",
    "InvalidSettingValueError",
    "TransportConflictError",
    "TransportNotFoundError",
    "UnsupportedStampError",
]
