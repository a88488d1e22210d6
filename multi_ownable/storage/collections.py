"""
multi_ownable.storage.collections — persistent set & map over a namespaced KV.

Both collections are thin views: they hold no data in memory, every operation
reads or writes the underlying store (a `KV` or a `Journal` over one).

Storage layout
--------------
- UnorderedSet element:  prefix.key(b"e", utf8(element)) → CBOR(element)
- UnorderedMap entry:    prefix.key(b"m", key_bytes)     → CBOR(value)

Values are canonical CBOR (cbor2) so the stored bytes for a given value are
stable across runs and hosts.
"""

from __future__ import annotations

from typing import Any, Generic, Iterator, List, Optional, Tuple, TypeVar

import cbor2

from ..errors import StorageError
from .kv import KV, Prefix, split_key

V = TypeVar("V")

_ELEM = b"e"
_ENTRY = b"m"


def encode_value(value: Any) -> bytes:
    try:
        return cbor2.dumps(value, canonical=True)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
        raise StorageError("could not encode value", type=type(value).__name__).with_cause(e)


def decode_value(raw: bytes) -> Any:
    try:
        return cbor2.loads(raw)
    except (cbor2.CBORDecodeError, ValueError) as e:
        raise StorageError("corrupt stored value", size=len(raw)).with_cause(e)


class UnorderedSet:
    """A set of strings stored under one namespace."""

    def __init__(self, store: KV, namespace: bytes) -> None:
        self._store = store
        self._prefix = Prefix(namespace)
        self._scan = self._prefix.key(_ELEM)

    @property
    def prefix(self) -> Prefix:
        return self._prefix

    def _key(self, element: str) -> bytes:
        return self._prefix.key(_ELEM, element)

    def contains(self, element: str) -> bool:
        return self._store.has(self._key(element))

    def insert(self, element: str) -> bool:
        """Add `element`; return True if it was not already present."""
        k = self._key(element)
        if self._store.has(k):
            return False
        self._store.put(k, encode_value(element))
        return True

    def remove(self, element: str) -> bool:
        k = self._key(element)
        if not self._store.has(k):
            return False
        self._store.delete(k)
        return True

    def clear(self) -> None:
        for k, _ in list(self._store.iter_prefix(self._scan)):
            self._store.delete(k)

    def __iter__(self) -> Iterator[str]:
        for _, raw in self._store.iter_prefix(self._scan):
            yield decode_value(raw)

    def to_list(self) -> List[str]:
        """Elements in ascending order."""
        return sorted(self)

    def __contains__(self, element: object) -> bool:
        return isinstance(element, str) and self.contains(element)

    def __len__(self) -> int:
        return sum(1 for _ in self._store.iter_prefix(self._scan))


class UnorderedMap(Generic[V]):
    """A bytes-keyed map of CBOR-encodable values stored under one namespace."""

    def __init__(self, store: KV, namespace: bytes) -> None:
        self._store = store
        self._prefix = Prefix(namespace)
        self._scan = self._prefix.key(_ENTRY)

    @property
    def prefix(self) -> Prefix:
        return self._prefix

    def _key(self, key: bytes) -> bytes:
        return self._prefix.key(_ENTRY, key)

    def get(self, key: bytes) -> Optional[V]:
        raw = self._store.get(self._key(key))
        if raw is None:
            return None
        return decode_value(raw)

    def insert(self, key: bytes, value: V) -> None:
        self._store.put(self._key(key), encode_value(value))

    def remove(self, key: bytes) -> Optional[V]:
        k = self._key(key)
        raw = self._store.get(k)
        if raw is None:
            return None
        self._store.delete(k)
        return decode_value(raw)

    def clear(self) -> int:
        """Delete every entry; return how many were removed."""
        keys = [k for k, _ in self._store.iter_prefix(self._scan)]
        for k in keys:
            self._store.delete(k)
        return len(keys)

    def items(self) -> Iterator[Tuple[bytes, V]]:
        for k, raw in self._store.iter_prefix(self._scan):
            parts = split_key(self._prefix, k)
            if len(parts) != 2 or parts[0] != _ENTRY:
                raise StorageError("unexpected key under map namespace", key=k)
            yield parts[1], decode_value(raw)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, (bytes, bytearray)) and self._store.has(self._key(bytes(key)))

    def __len__(self) -> int:
        return sum(1 for _ in self._store.iter_prefix(self._scan))


__all__ = ["UnorderedSet", "UnorderedMap", "encode_value", "decode_value"]
