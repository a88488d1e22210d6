from __future__ import annotations

from multi_ownable.errors import (
    AuthorizationError,
    ErrorCode,
    InvalidArguments,
    MultiOwnableError,
    SerializationError,
    StorageError,
    UnrecognizedCallError,
)


def test_codes():
    assert AuthorizationError("bob").code == ErrorCode.UNAUTHORIZED.value == "MO/UNAUTHORIZED"
    assert InvalidArguments("x").code == "MO/INVALID_ARGUMENTS"
    assert UnrecognizedCallError("nope").code == "MO/UNRECOGNIZED_CALL"
    assert SerializationError().code == "MO/SERIALIZATION"


def test_hierarchy():
    for e in (AuthorizationError("a"), InvalidArguments(), StorageError(), SerializationError()):
        assert isinstance(e, MultiOwnableError)
        assert isinstance(e, Exception)


def test_to_dict_is_json_safe():
    err = StorageError("bad key", key=b"\x01\x02")
    d = err.to_dict()
    assert d == {"code": "MO/STORAGE", "message": "bad key", "data": {"key": "0102"}}


def test_cause_is_optional_in_dict():
    err = SerializationError().with_cause(ValueError("bad json"))
    assert "cause" not in err.to_dict()
    assert err.to_dict(include_cause=True)["cause"] == {"type": "ValueError", "message": "bad json"}


def test_message_in_str():
    assert "predecessor must be an owner" in str(AuthorizationError("mallory"))
