"""KV backends, namespace keys and the write journal."""

from __future__ import annotations

import pytest

from multi_ownable.storage import Journal, MemoryKV, Prefix, open_sqlite_kv
from multi_ownable.storage.kv import KV, split_key


@pytest.fixture(params=["memory", "sqlite"])
def kv(request, tmp_path):
    if request.param == "memory":
        store = MemoryKV()
    else:
        store = open_sqlite_kv(tmp_path / "kv.db")
    yield store
    store.close()


# --- Prefix -----------------------------------------------------------------


def test_prefix_normalizes_separator():
    assert Prefix(b"mo:owners").raw == b"mo:owners:"
    assert Prefix("mo:owners:").raw == b"mo:owners:"


def test_prefix_rejects_empty():
    with pytest.raises(ValueError):
        Prefix(b"")


def test_prefix_parts_are_length_prefixed():
    p = Prefix(b"ns")
    assert p.key(b"ab", b"c") != p.key(b"a", b"bc")
    assert split_key(p, p.key(b"e", "alice")) == [b"e", b"alice"]


def test_split_key_rejects_foreign_key():
    with pytest.raises(ValueError):
        split_key(Prefix(b"a"), b"b:xyz")


# --- backends ---------------------------------------------------------------


def test_backend_satisfies_protocol(kv):
    assert isinstance(kv, KV)


def test_put_get_delete(kv):
    assert kv.get(b"k") is None
    kv.put(b"k", b"v")
    assert kv.has(b"k")
    assert kv.get(b"k") == b"v"
    kv.put(b"k", b"w")
    assert kv.get(b"k") == b"w"
    kv.delete(b"k")
    assert kv.get(b"k") is None
    kv.delete(b"k")


def test_iter_prefix_sorted_and_bounded(kv):
    for k in (b"a:2", b"a:1", b"b:1", b"a\xff", b"a:3"):
        kv.put(k, k)
    assert [k for k, _ in kv.iter_prefix(b"a:")] == [b"a:1", b"a:2", b"a:3"]


def test_batch_applies_on_clean_exit(kv):
    with kv.batch() as b:
        b.put(b"x", b"1")
        b.put(b"y", b"2")
        b.delete(b"x")
    assert kv.get(b"x") is None
    assert kv.get(b"y") == b"2"


def test_batch_discards_on_error(kv):
    with pytest.raises(RuntimeError):
        with kv.batch() as b:
            b.put(b"x", b"1")
            raise RuntimeError("boom")
    assert kv.get(b"x") is None


def test_memory_kv_rejects_non_bytes_value():
    with pytest.raises(TypeError):
        MemoryKV().put(b"k", "v")  # type: ignore[arg-type]


def test_sqlite_reopen_persists(tmp_path):
    path = tmp_path / "persist.db"
    a = open_sqlite_kv(path)
    a.put(b"k", b"v")
    a.close()
    b = open_sqlite_kv(path, create=False)
    assert b.get(b"k") == b"v"
    b.close()


def test_sqlite_missing_file_without_create(tmp_path):
    with pytest.raises(FileNotFoundError):
        open_sqlite_kv(tmp_path / "nope.db", create=False)


# --- Journal ----------------------------------------------------------------


def test_journal_writes_through_without_checkpoint():
    base = MemoryKV()
    j = Journal(base)
    j.put(b"k", b"v")
    assert base.get(b"k") == b"v"


def test_journal_revert_discards_writes():
    base = MemoryKV({b"k": b"old"})
    j = Journal(base)
    j.begin()
    j.put(b"k", b"new")
    j.put(b"n", b"1")
    assert j.get(b"k") == b"new"
    assert j.pending_writes() == 2
    j.revert()
    assert j.get(b"k") == b"old"
    assert not j.has(b"n")
    assert base.snapshot() == {b"k": b"old"}


def test_journal_commit_flushes_to_base():
    base = MemoryKV({b"gone": b"1"})
    j = Journal(base)
    j.begin()
    j.put(b"k", b"v")
    j.delete(b"gone")
    assert base.get(b"k") is None
    j.commit()
    assert base.snapshot() == {b"k": b"v"}
    assert j.depth() == 0


def test_journal_nested_inner_revert_keeps_outer():
    base = MemoryKV()
    j = Journal(base)
    j.begin()
    j.put(b"outer", b"1")
    j.begin()
    j.put(b"inner", b"2")
    j.delete(b"outer")
    assert not j.has(b"outer")
    j.revert()
    assert j.get(b"outer") == b"1"
    j.commit()
    assert base.snapshot() == {b"outer": b"1"}


def test_journal_nested_commit_merges_into_parent():
    base = MemoryKV()
    j = Journal(base)
    j.begin()
    j.begin()
    j.put(b"k", b"v")
    j.commit()
    assert base.get(b"k") is None
    j.commit()
    assert base.get(b"k") == b"v"


def test_journal_commit_without_checkpoint():
    with pytest.raises(RuntimeError):
        Journal(MemoryKV()).commit()
    with pytest.raises(RuntimeError):
        Journal(MemoryKV()).revert()


def test_journal_atomic():
    base = MemoryKV()
    j = Journal(base)
    with j.atomic():
        j.put(b"a", b"1")
    assert base.get(b"a") == b"1"

    with pytest.raises(KeyError):
        with j.atomic():
            j.put(b"b", b"2")
            raise KeyError("b")
    assert base.get(b"b") is None
    assert j.depth() == 0


def test_journal_iter_prefix_merges_overlays():
    base = MemoryKV({b"p:1": b"a", b"p:2": b"b", b"q:1": b"x"})
    j = Journal(base)
    j.begin()
    j.delete(b"p:1")
    j.put(b"p:3", b"c")
    j.put(b"p:2", b"B")
    assert list(j.iter_prefix(b"p:")) == [(b"p:2", b"B"), (b"p:3", b"c")]
