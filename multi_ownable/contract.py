"""
multi_ownable.contract — the public facade.

`MultiOwnable` bundles the owner registry, the approval ledger and the state
machine over a single KV store. Integrators construct one per contract:

    class MyCall(str, Enum):
        UPDATE_NUMBER = "update_number"

    def on_approved(call: MyCall, payload: str) -> None:
        ...

    mo = MultiOwnable(MemoryKV(), calls=MyCall, on_approved=on_approved)
    mo.initialize(["alice.near", "bob.near"], 2)
    mo.submit_call("alice.near", "update_number", '{"number":1}')   # False
    mo.submit_call("bob.near", "update_number", '{"number":1}')     # True

Every mutating operation is all-or-nothing: it runs inside a journal
checkpoint that is committed on success and reverted on any exception,
including exceptions raised by `on_approved`. Events emitted by a reverted
operation are dropped with it.

Integrators that keep their own state should write it through `store` so it
shares the same checkpoint.
"""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Generic, Iterator, List, Optional, Sequence, Tuple, Type, TypeVar

from .calls import check_call_enum, parse_call
from .config import DEFAULT_CALLS_KEY, DEFAULT_OWNERS_KEY, validate_namespaces
from .errors import AlreadyInitialized
from .events import EventLog
from .ledger import Ledger
from .logging import context_scope, get_logger
from .machine import ApprovalMachine, OnApproved
from .policy import ApprovalPolicy
from .registry import OwnerId, Registry
from .storage.journal import Journal
from .storage.kv import KV

log = get_logger(__name__)

C = TypeVar("C", bound=Enum)


class MultiOwnable(Generic[C]):
    def __init__(
        self,
        kv: KV,
        calls: Type[C],
        on_approved: OnApproved,
        *,
        owners_key: bytes = DEFAULT_OWNERS_KEY,
        calls_key: bytes = DEFAULT_CALLS_KEY,
        policy: Optional[ApprovalPolicy] = None,
        name: Optional[str] = None,
    ) -> None:
        check_call_enum(calls)
        validate_namespaces(owners_key, calls_key)
        self.calls = calls
        self.name = name or calls.__name__
        self.journal = Journal(kv)
        self.events = EventLog()
        self.registry = Registry(self.journal, owners_key, policy or ApprovalPolicy())
        self.ledger = Ledger(self.journal, calls_key)
        self._machine: ApprovalMachine[C] = ApprovalMachine(
            self.registry, self.ledger, calls, on_approved, self.events
        )

    @property
    def store(self) -> Journal:
        """The journaled store all state is written through."""
        return self.journal

    @property
    def policy(self) -> ApprovalPolicy:
        return self.registry.policy

    @contextmanager
    def _operation(self, **fields: object) -> Iterator[None]:
        mark = self.events.mark()
        with context_scope(contract=self.name, **fields):
            try:
                with self.journal.atomic():
                    yield
            except Exception:
                self.events.rollback(mark)
                raise

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def initialize(self, owners: Sequence[OwnerId], threshold: int) -> None:
        """Install the first owner set and threshold. May only run once."""
        with self._operation():
            if self.registry.initialized:
                raise AlreadyInitialized()
            self.registry.initialize(owners, threshold)
            self.events.emit("Initialized", owners=self.registry.owners(), threshold=threshold)

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    def get_owners(self) -> List[OwnerId]:
        return self.registry.owners()

    def get_threshold(self) -> int:
        return self.registry.threshold

    def is_owner(self, identity: OwnerId) -> bool:
        return self.registry.is_owner(identity)

    def pending_calls(self) -> List[Tuple[bytes, List[OwnerId]]]:
        """(fingerprint, approvers) for every proposal awaiting approvals."""
        return self.ledger.pending()

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def update(self, caller: OwnerId, new_owners: Sequence[OwnerId], new_threshold: int) -> bool:
        """
        Propose or approve replacing the registry with (new_owners, new_threshold).

        Returns True when the change was applied by this call. Applying it
        discards every pending approval.
        """
        with self._operation(caller=caller, call="update"):
            self._machine.require_initialized()
            return self._machine.update(new_owners, new_threshold, caller)

    def submit_call(self, caller: OwnerId, call_identifier: str, payload: str) -> bool:
        """
        Propose or approve `call_identifier(payload)`.

        Returns True when the threshold was reached and `on_approved` ran.
        """
        with self._operation(caller=caller, call=call_identifier):
            self._machine.require_initialized()
            self._machine.require_owner(caller)
            parse_call(self.calls, call_identifier)
            return self._machine.propose_or_approve(call_identifier, payload, caller)

    def revoke_call(self, caller: OwnerId, call_identifier: str, payload: str) -> bool:
        """Withdraw `caller`'s approval. Returns False when nothing was pending."""
        with self._operation(caller=caller, call=call_identifier):
            self._machine.require_initialized()
            self._machine.require_owner(caller)
            parse_call(self.calls, call_identifier)
            return self._machine.revoke(call_identifier, payload, caller)


__all__ = ["MultiOwnable"]
