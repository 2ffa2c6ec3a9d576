"""Config – DSN parsing, transport option resolution and ambient settings."""
from messenger_test.config.dsn import SCHEME, Dsn, has_scheme
from messenger_test.config.options import (
    DEFAULT_TRANSPORT_NAME,
    OPTION_DEFAULTS,
    TRANSPORT_NAME_OPTION,
    TransportOptions,
    parse_dsn_bool,
    resolve_options,
    transport_name,
)
from messenger_test.config.settings import EnvSettingsLoader, LoggingSettings, Settings

__all__ = [
    "DEFAULT_TRANSPORT_NAME",
    "OPTION_DEFAULTS",
    "SCHEME",
    "TRANSPORT_NAME_OPTION",
    "Dsn",
    "EnvSettingsLoader",
    "LoggingSettings",
    "Settings",
    "TransportOptions",
    "has_scheme",
    "parse_dsn_bool",
    "resolve_options",
    "transport_name",
]
