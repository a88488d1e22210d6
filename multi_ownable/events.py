"""
multi_ownable.events — records of state changes.

Event names (convention)
------------------------
- "Initialized"    args: {"owners": [str], "threshold": int}
- "Proposed"       args: {"fingerprint": hex, "call": str, "owner": str}
- "Approved"       args: {"fingerprint": hex, "call": str, "owner": str, "approvals": int}
- "Executed"       args: {"fingerprint": hex, "call": str, "owner": str}
- "Revoked"        args: {"fingerprint": hex, "call": str, "owner": str, "approvals": int}
- "OwnersUpdated"  args: {"owners": [str], "threshold": int, "cleared": int}

Events raised inside an operation that later fails are rolled back together
with its storage writes (see `EventLog.mark` / `EventLog.rollback`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List


@dataclass(frozen=True)
class Event:
    name: str
    args: Dict[str, Any] = field(default_factory=dict)


class EventLog:
    def __init__(self) -> None:
        self._events: List[Event] = []

    def emit(self, name: str, **args: Any) -> None:
        self._events.append(Event(name=name, args=args))

    def mark(self) -> int:
        return len(self._events)

    def rollback(self, mark: int) -> None:
        del self._events[mark:]

    def names(self) -> List[str]:
        return [e.name for e in self._events]

    def clear(self) -> None:
        self._events.clear()

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, i: int) -> Event:
        return self._events[i]


__all__ = ["Event", "EventLog"]
