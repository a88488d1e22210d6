"""Call enum checks and call-name parsing."""

from __future__ import annotations

from enum import Enum

import pytest

from multi_ownable import ConfigError, MultiOwnable, UnrecognizedCallError
from multi_ownable.calls import UPDATE_KEY, check_call_enum, parse_call, try_parse_call
from multi_ownable.storage import MemoryKV

from .conftest import Call


class Shadowing(str, Enum):
    OK = "ok"
    SNEAKY = UPDATE_KEY


class Empty(Enum):
    pass


class Numeric(Enum):
    ONE = 1


def test_parse_call():
    assert parse_call(Call, "set_fee") is Call.SET_FEE
    assert try_parse_call(Call, "nope") is None
    with pytest.raises(UnrecognizedCallError) as ei:
        parse_call(Call, "nope")
    assert ei.value.data == {"call_name": "nope"}


def test_update_key_never_parses():
    assert try_parse_call(Call, UPDATE_KEY) is None


@pytest.mark.parametrize("bad", [Shadowing, Empty, Numeric, dict])
def test_bad_call_enums_rejected(bad):
    with pytest.raises(ConfigError):
        check_call_enum(bad)


def test_facade_checks_call_enum():
    with pytest.raises(ConfigError):
        MultiOwnable(MemoryKV(), calls=Shadowing, on_approved=lambda c, p: None)


@pytest.mark.parametrize(
    "owners_key,calls_key",
    [(b"mo", b"mo:calls"), (b"same", b"same"), (b"", b"mo:calls")],
)
def test_facade_rejects_colliding_namespaces(owners_key, calls_key):
    with pytest.raises(ConfigError):
        MultiOwnable(
            MemoryKV(),
            calls=Call,
            on_approved=lambda c, p: None,
            owners_key=owners_key,
            calls_key=calls_key,
        )


def test_custom_namespaces_isolate_two_gates():
    kv = MemoryKV()
    a = MultiOwnable(kv, calls=Call, on_approved=lambda c, p: None, owners_key=b"a:o", calls_key=b"a:c")
    b = MultiOwnable(kv, calls=Call, on_approved=lambda c, p: None, owners_key=b"b:o", calls_key=b"b:c")
    a.initialize(["alice"], 1)
    b.initialize(["bob", "carol"], 2)
    assert a.get_owners() == ["alice"]
    assert b.get_owners() == ["bob", "carol"]
    b.submit_call("bob", "pause", "")
    assert a.pending_calls() == []
