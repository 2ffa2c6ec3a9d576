"""Unit tests for the kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from messenger_test.kernel.errors import (
    BaseError,
    ConfigurationError,
    HandlerFailedError,
    HandlingError,
    InvalidDsnError,
    InvalidOptionError,
    MessageSerializationError,
    MessengerTestError,
    NoHandlerForMessageError,
    NoMoreMessagesError,
    TransportConflictError,
    TransportNotFoundError,
    UnrecoverableMessageError,
    UnsupportedStampError,
)
from messenger_test.kernel.messaging import DelayStamp, Envelope


class Ping:
    pass


class TestBaseError:
    def test_message_is_stored(self) -> None:
        err = BaseError("something went wrong")
        assert err.message == "something went wrong"
        assert str(err) == "something went wrong"

    def test_default_code(self) -> None:
        assert BaseError("m").code == "base_error"

    def test_custom_code(self) -> None:
        assert BaseError("m", code="custom").code == "custom"

    def test_to_dict_basic(self) -> None:
        err = BaseError("m", code="my_code", detail={"key": "val"})
        assert err.to_dict() == {"code": "my_code", "message": "m", "detail": {"key": "val"}}

    def test_to_dict_includes_cause_repr(self) -> None:
        err = BaseError("wrapper", cause=ValueError("original"))
        assert "original" in err.to_dict()["cause"]

    def test_cause_sets_dunder_cause(self) -> None:
        cause = RuntimeError("root")
        assert BaseError("wrap", cause=cause).__cause__ is cause

    def test_to_json_is_valid_json(self) -> None:
        parsed = json.loads(BaseError("oops", code="oops", detail={"x": 1}).to_json())
        assert parsed["code"] == "oops"
        assert parsed["detail"] == {"x": 1}

    def test_repr(self) -> None:
        assert repr(BaseError("m", code="c")) == "BaseError(code='c', message='m')"


class TestHierarchy:
    @pytest.mark.parametrize(
        "err",
        [
            InvalidDsnError("x", "bad"),
            InvalidOptionError("intercept", "maybe", "the DSN"),
            UnsupportedStampError(DelayStamp, "async"),
            TransportNotFoundError("a", []),
            TransportConflictError("a"),
        ],
    )
    def test_configuration_errors(self, err: ConfigurationError) -> None:
        assert isinstance(err, ConfigurationError)
        assert isinstance(err, MessengerTestError)

    def test_handling_errors(self) -> None:
        assert issubclass(NoHandlerForMessageError, HandlingError)
        assert issubclass(HandlerFailedError, HandlingError)
        assert issubclass(UnrecoverableMessageError, HandlingError)

    def test_serialization_error_is_not_handling_error(self) -> None:
        assert not issubclass(MessageSerializationError, HandlingError)
        assert not issubclass(MessageSerializationError, ConfigurationError)


class TestMessages:
    def test_invalid_dsn(self) -> None:
        err = InvalidDsnError("test:/", "missing '://'")
        assert err.code == "invalid_dsn"
        assert "test:/" in str(err)

    def test_invalid_option(self) -> None:
        err = InvalidOptionError("intercept", "maybe", "the DSN")
        assert str(err) == "Option 'intercept' from the DSN must be a boolean, got 'maybe'"

    def test_unsupported_stamp_mentions_option(self) -> None:
        err = UnsupportedStampError(DelayStamp, "async")
        assert "support_delay_stamp" in str(err)
        assert err.stamp_type is DelayStamp

    def test_transport_not_found_without_name(self) -> None:
        err = TransportNotFoundError(None, ["a", "b"])
        assert "exactly one" in str(err)

    def test_no_more_messages(self) -> None:
        err = NoMoreMessagesError("async", 3, 1)
        assert (err.requested, err.processed) == (3, 1)


class TestHandlerFailedError:
    def test_wraps_first_exception_as_cause(self) -> None:
        first, second = ValueError("a"), KeyError("b")
        err = HandlerFailedError(Envelope(Ping()), [first, second])
        assert err.__cause__ is first
        assert "1 other failure" in str(err)

    def test_wrapped_filters_by_type(self) -> None:
        err = HandlerFailedError(Envelope(Ping()), [ValueError("a"), KeyError("b")])
        assert [type(e) for e in err.wrapped(KeyError)] == [KeyError]

    def test_no_handler_names_message_type(self) -> None:
        assert "Ping" in str(NoHandlerForMessageError(Ping))
