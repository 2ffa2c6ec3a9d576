"""Kernel messaging – Serializer port and the JSON reference serializer."""
from __future__ import annotations

import abc
import base64
import dataclasses
import enum
import importlib
import json
import uuid
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from messenger_test.kernel.errors import MessageSerializationError
from messenger_test.kernel.messaging.envelope import Envelope
from messenger_test.kernel.messaging.stamps import Stamp

_TYPE = "__type__"
_DATA = "__data__"
_MODEL = "__model__"
_ENUM = "__enum__"
_DICT = "__dict__"
_TUPLE = "__tuple__"
_SET = "__set__"
_FROZENSET = "__frozenset__"
_DATETIME = "__datetime__"
_DATE = "__date__"
_TIME = "__time__"
_UUID = "__uuid__"
_DECIMAL = "__decimal__"
_BYTES = "__bytes__"

# Single-key wrappers whose value is a string, and how each is rebuilt.
_SCALAR_DECODERS: dict[str, Any] = {
    _DATETIME: datetime.fromisoformat,
    _DATE: date.fromisoformat,
    _TIME: time.fromisoformat,
    _UUID: uuid.UUID,
    _DECIMAL: Decimal,
    _BYTES: base64.b64decode,
}
_RESERVED = frozenset({_TYPE, _DATA, _MODEL, _ENUM, _DICT, _TUPLE, _SET, _FROZENSET, *_SCALAR_DECODERS})


class Serializer(abc.ABC):
    """Port: turn an envelope into bytes and back."""

    @abc.abstractmethod
    def encode(self, envelope: Envelope[Any]) -> bytes: ...

    @abc.abstractmethod
    def decode(self, data: bytes) -> Envelope[Any]: ...


def _type_path(cls: type) -> str:
    if "<locals>" in cls.__qualname__:
        raise TypeError(f"{cls.__qualname__} is defined in a local scope and cannot be imported back")
    return f"{cls.__module__}:{cls.__qualname__}"


def _import_type(path: str) -> type:
    module_name, _, qualname = path.partition(":")
    obj: Any = importlib.import_module(module_name)
    for attr in qualname.split("."):
        obj = getattr(obj, attr)
    if not isinstance(obj, type):
        raise TypeError(f"{path} is not a class")
    return obj


class JsonSerializer(Serializer):
    """JSON serializer for dataclass, enum and pydantic-style messages.

    Class identity travels with the payload as ``module:qualname``; decoding
    imports the class back, so messages must be importable (module-level).
    Models exposing ``model_dump``/``model_validate`` go through those hooks.

    Values JSON has no type for (tuples, sets, datetimes, dates, times,
    UUIDs, decimals, bytes) travel as single-key ``{"__tag__": ...}``
    objects. A plain dict using one of those keys is wrapped under
    ``__dict__`` so it comes back unchanged.
    """

    def encode(self, envelope: Envelope[Any]) -> bytes:
        try:
            document = {
                "message": self._dump(envelope.message),
                "stamps": [self._dump(stamp) for stamp in envelope.stamps],
            }
            return json.dumps(document, separators=(",", ":")).encode()
        except (TypeError, ValueError) as exc:
            raise MessageSerializationError(
                f"Cannot encode {type(envelope.message).__qualname__}: {exc}",
                message_type=type(envelope.message).__qualname__,
                cause=exc,
            ) from exc

    def decode(self, data: bytes) -> Envelope[Any]:
        try:
            document = json.loads(data)
            message = self._load(document["message"])
            stamps = tuple(self._load(raw) for raw in document.get("stamps", []))
        except (TypeError, ValueError, ArithmeticError, KeyError, AttributeError, ImportError) as exc:
            raise MessageSerializationError(f"Cannot decode envelope: {exc}", cause=exc) from exc
        for stamp in stamps:
            if not isinstance(stamp, Stamp):
                raise MessageSerializationError(f"Decoded stamp {stamp!r} is not a Stamp")
        return Envelope(message, stamps)

    def _dump(self, value: Any) -> Any:  # noqa: PLR0911, PLR0912
        if value is None or isinstance(value, (bool, int, float, str)) and not isinstance(value, enum.Enum):
            return value
        if isinstance(value, datetime):
            return {_DATETIME: value.isoformat()}
        if isinstance(value, date):
            return {_DATE: value.isoformat()}
        if isinstance(value, time):
            return {_TIME: value.isoformat()}
        if isinstance(value, uuid.UUID):
            return {_UUID: str(value)}
        if isinstance(value, Decimal):
            return {_DECIMAL: str(value)}
        if isinstance(value, (bytes, bytearray)):
            return {_BYTES: base64.b64encode(value).decode("ascii")}
        if isinstance(value, enum.Enum):
            return {_TYPE: _type_path(type(value)), _ENUM: self._dump(value.value)}
        if isinstance(value, tuple):
            return {_TUPLE: [self._dump(v) for v in value]}
        if isinstance(value, frozenset):
            return {_FROZENSET: [self._dump(v) for v in value]}
        if isinstance(value, set):
            return {_SET: [self._dump(v) for v in value]}
        if isinstance(value, list):
            return [self._dump(v) for v in value]
        if isinstance(value, dict):
            out: dict[str, Any] = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise TypeError(f"dict keys must be strings, got {key!r}")
                out[key] = self._dump(item)
            # A plain dict must never be mistaken for a tagged value.
            return {_DICT: out} if _RESERVED.intersection(out) else out
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            fields = {
                f.name: self._dump(getattr(value, f.name))
                for f in dataclasses.fields(value)
                if f.init
            }
            return {_TYPE: _type_path(type(value)), _DATA: fields}
        if hasattr(value, "model_dump") and hasattr(type(value), "model_validate"):
            return {_TYPE: _type_path(type(value)), _MODEL: value.model_dump(mode="json")}
        raise TypeError(f"object of type {type(value).__qualname__} is not serializable")

    def _load(self, raw: Any) -> Any:  # noqa: PLR0911
        if isinstance(raw, list):
            return [self._load(v) for v in raw]
        if not isinstance(raw, dict):
            return raw
        if _DICT in raw:
            return {k: self._load(v) for k, v in raw[_DICT].items()}
        for tag, decode in _SCALAR_DECODERS.items():
            if tag in raw:
                return decode(raw[tag])
        if _TUPLE in raw:
            return tuple(self._load(v) for v in raw[_TUPLE])
        if _SET in raw:
            return {self._load(v) for v in raw[_SET]}
        if _FROZENSET in raw:
            return frozenset(self._load(v) for v in raw[_FROZENSET])
        if _TYPE in raw:
            cls = _import_type(raw[_TYPE])
            if _ENUM in raw:
                return cls(self._load(raw[_ENUM]))
            if _MODEL in raw:
                return cls.model_validate(raw[_MODEL])  # type: ignore[attr-defined]
            if not dataclasses.is_dataclass(cls):
                raise TypeError(f"{raw[_TYPE]} is not a dataclass")
            return cls(**{k: self._load(v) for k, v in raw[_DATA].items()})
        return {k: self._load(v) for k, v in raw.items()}


__all__ = ["JsonSerializer", "Serializer"]
