"""
multi_ownable.storage — host storage primitives for the threshold gate.

- kv:          KV/Batch protocols, namespace `Prefix`, in-memory backend
- sqlite:      persistent SQLite backend
- journal:     nested checkpoints giving each call all-or-nothing semantics
- collections: persistent `UnorderedSet` / `UnorderedMap` views
"""

from __future__ import annotations

from .collections import UnorderedMap, UnorderedSet
from .journal import Journal
from .kv import KV, Batch, MemoryKV, Prefix
from .sqlite import SQLiteKV, open_sqlite_kv

__all__ = [
    "KV",
    "Batch",
    "Prefix",
    "MemoryKV",
    "SQLiteKV",
    "open_sqlite_kv",
    "Journal",
    "UnorderedSet",
    "UnorderedMap",
]
