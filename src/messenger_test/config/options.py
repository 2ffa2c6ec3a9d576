"""Config – resolve the five transport flags from a DSN and an options map.

Precedence, evaluated per key: options map, then DSN query, then default.
"""
from __future__ import annotations

import dataclasses
from types import MappingProxyType
from typing import Any, Mapping

from messenger_test.config.dsn import Dsn
from messenger_test.kernel.errors import InvalidOptionError

TRANSPORT_NAME_OPTION = "transport_name"
DEFAULT_TRANSPORT_NAME = "test"

OPTION_DEFAULTS: Mapping[str, bool] = MappingProxyType(
    {
        "intercept": True,
        "catch_exceptions": True,
        "test_serialization": True,
        "disable_retries": True,
        "support_delay_stamp": False,
    }
)

_DSN_TRUE = frozenset({"true", "1"})
_DSN_FALSE = frozenset({"false", "0"})


@dataclasses.dataclass(frozen=True)
class TransportOptions:
    """Resolved transport configuration. Every flag always holds a bool."""

    intercept: bool = True
    catch_exceptions: bool = True
    test_serialization: bool = True
    disable_retries: bool = True
    support_delay_stamp: bool = False

    def __post_init__(self) -> None:
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if not isinstance(value, bool):
                raise InvalidOptionError(field.name, value, "TransportOptions")

    def as_dict(self) -> dict[str, bool]:
        return dataclasses.asdict(self)


def parse_dsn_bool(option: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _DSN_TRUE:
        return True
    if lowered in _DSN_FALSE:
        return False
    raise InvalidOptionError(option, raw, "the DSN")


def resolve_options(dsn: str | Dsn, options: Mapping[str, Any] | None = None) -> TransportOptions:
    """Resolve a :class:`TransportOptions` from *dsn* and *options*.

    Unrecognized keys in either source are ignored. Raises
    :class:`~messenger_test.kernel.errors.InvalidDsnError` for a malformed DSN
    and :class:`~messenger_test.kernel.errors.InvalidOptionError` for a
    non-boolean value of a recognized key.
    """
    parsed = dsn if isinstance(dsn, Dsn) else Dsn.parse(dsn)
    explicit = options or {}
    query = parsed.params
    resolved: dict[str, bool] = {}

    for key, default in OPTION_DEFAULTS.items():
        if key in explicit:
            value = explicit[key]
            if not isinstance(value, bool):
                raise InvalidOptionError(key, value, "the options map")
            resolved[key] = value
        elif key in query:
            resolved[key] = parse_dsn_bool(key, query[key])
        else:
            resolved[key] = default

    return TransportOptions(**resolved)


def transport_name(options: Mapping[str, Any] | None) -> str:
    """Return the logical queue name carried by *options*."""
    name = (options or {}).get(TRANSPORT_NAME_OPTION, DEFAULT_TRANSPORT_NAME)
    if not isinstance(name, str) or not name:
        raise InvalidOptionError(
            TRANSPORT_NAME_OPTION, name, "the options map", expected="a non-empty string"
        )
    return name


__all__ = [
    "DEFAULT_TRANSPORT_NAME",
    "OPTION_DEFAULTS",
    "TRANSPORT_NAME_OPTION",
    "TransportOptions",
    "parse_dsn_bool",
    "resolve_options",
    "transport_name",
]
