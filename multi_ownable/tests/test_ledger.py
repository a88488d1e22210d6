"""Pending-approval ledger keyed by fingerprint."""

from __future__ import annotations

from multi_ownable.fingerprint import fingerprint
from multi_ownable.ledger import Ledger
from multi_ownable.storage import MemoryKV


def test_insert_get_remove():
    led = Ledger(MemoryKV(), b"mo:calls")
    fp = fingerprint("set_fee", "1")
    assert led.get(fp) is None
    led.insert_or_replace(fp, ["alice"])
    assert led.get(fp) == ["alice"]
    assert fp in led
    led.insert_or_replace(fp, ["alice", "bob"])
    assert led.get(fp) == ["alice", "bob"]
    led.remove(fp)
    assert fp not in led


def test_get_returns_a_copy():
    led = Ledger(MemoryKV(), b"mo:calls")
    fp = fingerprint("x", "")
    led.insert_or_replace(fp, ["alice"])
    led.get(fp).append("mallory")
    assert led.get(fp) == ["alice"]


def test_empty_entry_is_distinct_from_absent():
    led = Ledger(MemoryKV(), b"mo:calls")
    fp = fingerprint("x", "")
    led.insert_or_replace(fp, [])
    assert led.get(fp) == []
    assert len(led) == 1


def test_clear_all_and_pending():
    led = Ledger(MemoryKV(), b"mo:calls")
    a, b = fingerprint("a", ""), fingerprint("b", "")
    led.insert_or_replace(a, ["alice"])
    led.insert_or_replace(b, ["bob"])
    assert sorted(led.pending()) == sorted([(a, ["alice"]), (b, ["bob"])])
    assert led.clear_all() == 2
    assert led.pending() == []
