"""
multi_ownable.ledger — pending approvals, keyed by proposal fingerprint.

Each entry maps a 32-byte fingerprint to the owners that approved it, in
approval order. Identical (call, payload) proposals share one entry, so the
ledger never grows with payload size.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .storage.collections import UnorderedMap
from .storage.kv import KV


class Ledger:
    def __init__(self, store: KV, calls_key: bytes) -> None:
        self._calls: UnorderedMap[List[str]] = UnorderedMap(store, calls_key)

    def get(self, fp: bytes) -> Optional[List[str]]:
        signers = self._calls.get(fp)
        return list(signers) if signers is not None else None

    def insert_or_replace(self, fp: bytes, signers: Sequence[str]) -> None:
        self._calls.insert(fp, list(signers))

    def remove(self, fp: bytes) -> None:
        self._calls.remove(fp)

    def clear_all(self) -> int:
        return self._calls.clear()

    def pending(self) -> List[Tuple[bytes, List[str]]]:
        return [(fp, list(signers)) for fp, signers in self._calls.items()]

    def __contains__(self, fp: object) -> bool:
        return fp in self._calls

    def __len__(self) -> int:
        return len(self._calls)


__all__ = ["Ledger"]
