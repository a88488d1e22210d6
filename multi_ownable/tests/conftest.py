from __future__ import annotations

import os
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

import pytest

from multi_ownable import ApprovalPolicy, MultiOwnable
from multi_ownable.config import load_config
from multi_ownable.logging import clear_context
from multi_ownable.storage import MemoryKV


class Call(str, Enum):
    SET_FEE = "set_fee"
    PAUSE = "pause"


class Recorder:
    """on_approved callback that remembers every dispatch."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Call, str]] = []
        self.fail_with: Optional[BaseException] = None

    def __call__(self, call: Call, payload: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.calls.append((call, payload))


GateFactory = Callable[..., Tuple[MultiOwnable, Recorder, MemoryKV]]


@pytest.fixture
def make_gate() -> GateFactory:
    def _make(
        owners: Sequence[str] = ("alice",),
        threshold: int = 1,
        policy: Optional[ApprovalPolicy] = None,
    ) -> Tuple[MultiOwnable, Recorder, MemoryKV]:
        kv = MemoryKV()
        rec = Recorder()
        mo = MultiOwnable(kv, calls=Call, on_approved=rec, policy=policy)
        mo.initialize(list(owners), threshold)
        return mo, rec, kv

    return _make


@pytest.fixture
def clean_config(monkeypatch):
    """Fresh `load_config()` with no MULTI_OWNABLE_* variables set."""
    for name in list(os.environ):
        if name.startswith("MULTI_OWNABLE_"):
            monkeypatch.delenv(name)
    load_config.cache_clear()
    clear_context()
    yield
    load_config.cache_clear()
    clear_context()
