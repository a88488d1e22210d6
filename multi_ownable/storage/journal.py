"""
multi_ownable.storage.journal — journaling writes, checkpoints, revert/commit.

A deterministic, in-memory write journal layered over a `KV`. It supports
nested checkpoints via a stack of overlays. Writes go to the top overlay;
reads consult overlays from top → base. `commit()` merges the top overlay into
the next layer, or flushes it to the base KV in one batch when it is the
outermost checkpoint. `revert()` discards the top overlay.

This reproduces the host's all-or-nothing call semantics: each public
operation of the gate runs inside `atomic()`, so an exception anywhere (a
failed check, a dispatch callback rejecting its payload) leaves the base
storage exactly as it was.

Intended usage
--------------
    j = Journal(kv)
    with j.atomic():
        j.put(k, b"value")
        j.delete(other)
    # both writes are now in `kv`, or neither is

Outside any checkpoint, writes go straight to the base KV.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .kv import KV

# ``None`` in an overlay marks a deletion.
_Writes = Dict[bytes, Optional[bytes]]


@dataclass
class _Overlay:
    writes: _Writes = field(default_factory=dict)


class Journal:
    """
    A copy-on-write write journal with nested checkpoints over a `KV`.

    API highlights
    --------------
    - begin() / commit() / revert() / atomic()
    - get(), has(), put(), delete(), iter_prefix()  (same shape as KV)
    """

    def __init__(self, base: KV) -> None:
        self._base = base
        self._layers: List[_Overlay] = []

    @property
    def base(self) -> KV:
        return self._base

    # ------------------------------------------------------------------ #
    # Checkpointing
    # ------------------------------------------------------------------ #

    def depth(self) -> int:
        """Number of open checkpoints (0 when writes go straight to base)."""
        return len(self._layers)

    def begin(self) -> int:
        """Start a new checkpoint. Returns the new depth marker."""
        self._layers.append(_Overlay())
        return len(self._layers)

    def commit(self) -> None:
        """Merge the top overlay into its parent, or flush it to the base KV."""
        if not self._layers:
            raise RuntimeError("commit without an open checkpoint")
        top = self._layers.pop()
        if self._layers:
            self._layers[-1].writes.update(top.writes)
            return
        if not top.writes:
            return
        with self._base.batch() as b:
            for k, v in top.writes.items():
                if v is None:
                    b.delete(k)
                else:
                    b.put(k, v)

    def revert(self) -> None:
        """Discard the top overlay."""
        if not self._layers:
            raise RuntimeError("revert without an open checkpoint")
        self._layers.pop()

    @contextmanager
    def atomic(self) -> Iterator["Journal"]:
        """Checkpoint for the duration of the block; commit on success, revert on error."""
        self.begin()
        try:
            yield self
        except BaseException:
            self.revert()
            raise
        else:
            self.commit()

    # ------------------------------------------------------------------ #
    # KV surface
    # ------------------------------------------------------------------ #

    def get(self, key: bytes) -> Optional[bytes]:
        key = bytes(key)
        for layer in reversed(self._layers):
            if key in layer.writes:
                return layer.writes[key]
        return self._base.get(key)

    def has(self, key: bytes) -> bool:
        return self.get(key) is not None

    def put(self, key: bytes, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("value must be bytes")
        if self._layers:
            self._layers[-1].writes[bytes(key)] = bytes(value)
        else:
            self._base.put(bytes(key), bytes(value))

    def delete(self, key: bytes) -> None:
        if self._layers:
            self._layers[-1].writes[bytes(key)] = None
        else:
            self._base.delete(bytes(key))

    def iter_prefix(self, prefix: bytes) -> Iterator[Tuple[bytes, bytes]]:
        """Merged view of base + overlays under `prefix`, in key order."""
        merged: Dict[bytes, Optional[bytes]] = dict(self._base.iter_prefix(prefix))
        for layer in self._layers:
            for k, v in layer.writes.items():
                if k.startswith(prefix):
                    merged[k] = v
        for k in sorted(merged):
            v = merged[k]
            if v is not None:
                yield k, v

    def pending_writes(self) -> int:
        """Staged writes across all open checkpoints (diagnostics)."""
        return sum(len(layer.writes) for layer in self._layers)


__all__ = ["Journal"]
