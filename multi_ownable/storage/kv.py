from __future__ import annotations

"""
KV interface & namespace prefixes
=================================

A backend-agnostic Key–Value interface for the host storage the gate lives in,
plus a small DSL for building namespaced keys.

Backends (memory, sqlite) implement this interface and the batch semantics.

Key building
------------
    Prefix(b"mo:owners").key(b"e", b"alice.near")
        -> b"mo:owners:" + len|b"e" + len|b"alice.near"

Parts are length-prefixed, so no delimiter escaping is needed and distinct part
tuples never produce the same key.

Batching
--------
`KV.batch()` returns a context manager. Use it to atomically put/delete:

>>> with kv.batch() as b:
...     b.put(k1, b"1")
...     b.delete(k2)
"""

from typing import (Dict, Iterator, List, Optional, Protocol, Tuple, Union,
                    runtime_checkable)

# ---------------------------------------------------------------------------
# Prefix helpers
# ---------------------------------------------------------------------------

NS_SEP = b":"


class Prefix:
    """
    Represents a logical namespace prefix.

    .raw gives the raw bytes prefix.
    .key(*parts) builds a composite key: prefix + ∑ (uvarlen | part_bytes).
    """

    __slots__ = ("_raw",)

    def __init__(self, ns: Union[bytes, bytearray, memoryview, str]) -> None:
        if isinstance(ns, str):
            ns_b = ns.encode("utf-8")
        else:
            ns_b = bytes(ns)
        if len(ns_b) == 0:
            raise ValueError("namespace must be non-empty")
        self._raw = ns_b.rstrip(NS_SEP) + NS_SEP

    @property
    def raw(self) -> bytes:
        return self._raw

    def key(self, *parts: Union[bytes, bytearray, memoryview, str]) -> bytes:
        """Build a composite key under this prefix."""
        out = bytearray(self._raw)
        for p in parts:
            pb = p.encode("utf-8") if isinstance(p, str) else bytes(p)
            out.extend(_uvarint_len(len(pb)))
            out.extend(pb)
        return bytes(out)

    def __repr__(self) -> str:
        return f"Prefix({self._raw!r})"


def _uvarint_len(n: int) -> bytes:
    """LEB128-like unsigned length prefix."""
    if n < 0:
        raise ValueError("length must be non-negative")
    out = bytearray()
    while True:
        b = n & 0x7F
        n >>= 7
        if n:
            out.append(0x80 | b)
        else:
            out.append(b)
            break
    return bytes(out)


def split_key(prefix: Prefix, key: bytes) -> List[bytes]:
    """Inverse of `Prefix.key`: return the parts of `key` under `prefix`."""
    if not key.startswith(prefix.raw):
        raise ValueError("key is not under prefix")
    parts: List[bytes] = []
    i = len(prefix.raw)
    while i < len(key):
        n = 0
        shift = 0
        while True:
            b = key[i]
            i += 1
            n |= (b & 0x7F) << shift
            shift += 7
            if not b & 0x80:
                break
        parts.append(key[i : i + n])
        i += n
    return parts


# ---------------------------------------------------------------------------
# KV protocols & Batch
# ---------------------------------------------------------------------------


@runtime_checkable
class Batch(Protocol):
    """
    A write-batch context manager. Backend guarantees atomicity when exiting
    the context without exception. If an exception escapes, the batch is rolled back.
    """

    def put(self, key: bytes, value: bytes) -> None: ...
    def delete(self, key: bytes) -> None: ...
    def __enter__(self) -> "Batch": ...
    def __exit__(self, exc_type, exc, tb) -> Optional[bool]: ...


@runtime_checkable
class KV(Protocol):
    """Full RW KV surface."""

    def get(self, key: bytes) -> Optional[bytes]:
        """Fetch value or None if missing."""
        ...

    def has(self, key: bytes) -> bool: ...

    def iter_prefix(self, prefix: bytes) -> Iterator[Tuple[bytes, bytes]]:
        """Iterate (key, value) pairs under `prefix` in lexicographic key order."""
        ...

    def put(self, key: bytes, value: bytes) -> None:
        """Persist (key,value). Overwrites if exists."""
        ...

    def delete(self, key: bytes) -> None:
        """Remove key if present (idempotent)."""
        ...

    def batch(self) -> Batch: ...

    def close(self) -> None: ...


# ---------------------------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------------------------


class MemoryBatch:
    __slots__ = ("_kv", "_ops")

    def __init__(self, kv: "MemoryKV") -> None:
        self._kv = kv
        self._ops: List[Tuple[bytes, Optional[bytes]]] = []

    def __enter__(self) -> "MemoryBatch":
        self._ops = []
        return self

    def put(self, key: bytes, value: bytes) -> None:
        self._ops.append((bytes(key), bytes(value)))

    def delete(self, key: bytes) -> None:
        self._ops.append((bytes(key), None))

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        if exc_type is None:
            for k, v in self._ops:
                if v is None:
                    self._kv.delete(k)
                else:
                    self._kv.put(k, v)
        self._ops = []
        return None


class MemoryKV:
    """Process-local dict backend for tests, simulations and embedding."""

    def __init__(self, initial: Optional[Dict[bytes, bytes]] = None) -> None:
        self._store: Dict[bytes, bytes] = dict(initial or {})

    def get(self, key: bytes) -> Optional[bytes]:
        return self._store.get(bytes(key))

    def has(self, key: bytes) -> bool:
        return bytes(key) in self._store

    def iter_prefix(self, prefix: bytes) -> Iterator[Tuple[bytes, bytes]]:
        # Snapshot the matching keys so callers may mutate while iterating.
        keys = sorted(k for k in self._store if k.startswith(prefix))
        for k in keys:
            v = self._store.get(k)
            if v is not None:
                yield k, v

    def put(self, key: bytes, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("value must be bytes")
        self._store[bytes(key)] = bytes(value)

    def delete(self, key: bytes) -> None:
        self._store.pop(bytes(key), None)

    def batch(self) -> MemoryBatch:
        return MemoryBatch(self)

    def close(self) -> None:
        pass

    def snapshot(self) -> Dict[bytes, bytes]:
        """Copy of every stored pair (tests compare before/after)."""
        return dict(self._store)

    def __len__(self) -> int:
        return len(self._store)


__all__ = [
    "KV",
    "Batch",
    "Prefix",
    "split_key",
    "MemoryKV",
    "MemoryBatch",
]
