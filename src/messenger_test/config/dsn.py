"""Config – connection string (DSN) parsing.

Syntax::

    test://[?intercept=false&support_delay_stamp=true]
"""
from __future__ import annotations

import dataclasses
import re
from urllib.parse import parse_qsl, urlsplit

from messenger_test.kernel.errors import InvalidDsnError

SCHEME = "test"
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


@dataclasses.dataclass(frozen=True)
class Dsn:
    """A parsed connection string. Query parameters keep their raw string values."""

    scheme: str
    host: str = ""
    path: str = ""
    query: tuple[tuple[str, str], ...] = ()

    @classmethod
    def parse(cls, dsn: str) -> Dsn:
        """Parse *dsn*, raising :class:`InvalidDsnError` when it is malformed."""
        if not isinstance(dsn, str):
            raise InvalidDsnError(repr(dsn), "a DSN must be a string")
        scheme, sep, _ = dsn.partition("://")
        if not sep:
            raise InvalidDsnError(dsn, "missing '://' after the scheme")
        if not _SCHEME_RE.match(scheme):
            raise InvalidDsnError(dsn, f"invalid scheme {scheme!r}")
        try:
            parts = urlsplit(dsn)
            pairs = parse_qsl(parts.query, keep_blank_values=True, strict_parsing=True) if parts.query else []
        except ValueError as exc:
            raise InvalidDsnError(dsn, str(exc), cause=exc) from exc
        return cls(
            scheme=scheme.lower(),
            host=parts.netloc,
            path=parts.path,
            query=tuple(pairs),
        )

    @property
    def params(self) -> dict[str, str]:
        """Query parameters as a dict; the last occurrence of a key wins."""
        return dict(self.query)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.params.get(key, default)


def has_scheme(dsn: str, scheme: str = SCHEME) -> bool:
    """Return True when *dsn* starts with ``<scheme>://``. Never raises."""
    return isinstance(dsn, str) and dsn.startswith(f"{scheme}://")


__all__ = ["SCHEME", "Dsn", "has_scheme"]
