"""A failing dispatch callback reverts the whole operation."""

from __future__ import annotations

import pytest

from multi_ownable import SerializationError
from multi_ownable.fingerprint import fingerprint


def test_failed_dispatch_keeps_pending_approvals(make_gate):
    mo, rec, kv = make_gate(["alice", "bob"], 2)
    mo.submit_call("alice", "set_fee", "bad")
    before = kv.snapshot()
    n_events = len(mo.events)

    rec.fail_with = SerializationError("could not decode call arguments")
    with pytest.raises(SerializationError):
        mo.submit_call("bob", "set_fee", "bad")

    assert kv.snapshot() == before
    assert mo.pending_calls() == [(fingerprint("set_fee", "bad"), ["alice"])]
    assert len(mo.events) == n_events
    assert mo.journal.depth() == 0


def test_failed_dispatch_at_threshold_one_leaves_no_trace(make_gate):
    mo, rec, kv = make_gate(["alice"], 1)
    before = kv.snapshot()
    rec.fail_with = ValueError("boom")
    with pytest.raises(ValueError):
        mo.submit_call("alice", "pause", "")
    assert kv.snapshot() == before
    assert mo.events.names() == ["Initialized"]


def test_gate_recovers_after_failure(make_gate):
    mo, rec, _ = make_gate(["alice", "bob"], 2)
    mo.submit_call("alice", "pause", "")
    rec.fail_with = RuntimeError("transient")
    with pytest.raises(RuntimeError):
        mo.submit_call("bob", "pause", "")
    rec.fail_with = None
    assert mo.submit_call("bob", "pause", "")
    assert len(rec.calls) == 1
