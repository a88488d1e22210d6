"""
multi_ownable.machine — the approval state machine.

Given a proposal (call identifier, payload) from an owner, decide whether it
executes now, records one more approval, or has just crossed the threshold:

    threshold == 1                 → dispatch immediately, no ledger entry
    no entry for the fingerprint   → record [caller], not yet approved
    entry, count >= threshold      → dispatch, drop the entry, approved
    entry, count <  threshold      → record the approval, not yet approved

How `count` is computed and which approvals are recorded depends on
`ApprovalPolicy.distinct_approvals` (see multi_ownable.policy).

Dispatch maps the identifier back onto the integrator's call enum and invokes
`on_approved(call, payload)`. The reserved update identifier is not a member of
that enum; dispatching it is a no-op, `update` applies the registry change
itself once the proposal is approved.

The machine has no transactional logic of its own. Callers run every entry
point inside `Journal.atomic()` so a failing callback leaves no trace.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Generic, List, Sequence, Type, TypeVar

from .calls import UPDATE_KEY, try_parse_call, update_payload
from .errors import AuthorizationError, NotInitialized
from .events import EventLog
from .fingerprint import fingerprint
from .ledger import Ledger
from .logging import get_logger
from .registry import OwnerId, Registry

log = get_logger(__name__)

C = TypeVar("C", bound=Enum)

OnApproved = Callable[[C, str], None]


class ApprovalMachine(Generic[C]):
    def __init__(
        self,
        registry: Registry,
        ledger: Ledger,
        calls: Type[C],
        on_approved: OnApproved,
        events: EventLog,
    ) -> None:
        self.registry = registry
        self.ledger = ledger
        self.calls = calls
        self.on_approved = on_approved
        self.events = events

    # ------------------------------------------------------------------ #
    # Guards
    # ------------------------------------------------------------------ #

    def require_initialized(self) -> None:
        if not self.registry.initialized:
            raise NotInitialized()

    def require_owner(self, caller: OwnerId) -> None:
        if not self.registry.is_owner(caller):
            log.warning("rejected non-owner", extra={"caller": caller})
            raise AuthorizationError(caller)

    # ------------------------------------------------------------------ #
    # Protocol
    # ------------------------------------------------------------------ #

    def dispatch(self, call_identifier: str, payload: str) -> None:
        call = try_parse_call(self.calls, call_identifier)
        if call is None:
            # Update proposals: the registry change is applied by `update`.
            return
        self.on_approved(call, payload)

    def propose_or_approve(self, call_identifier: str, payload: str, caller: OwnerId) -> bool:
        """Record `caller`'s approval; return True iff the call was released."""
        self.require_owner(caller)
        fp = fingerprint(call_identifier, payload)
        threshold = self.registry.threshold

        if threshold == 1:
            self.dispatch(call_identifier, payload)
            self.events.emit("Executed", fingerprint=fp.hex(), call=call_identifier, owner=caller)
            log.info("executed", extra={"fingerprint": fp, "approvals": 1, "threshold": 1})
            return True

        existing = self.ledger.get(fp)
        if existing is None:
            self.ledger.insert_or_replace(fp, [caller])
            self.events.emit("Proposed", fingerprint=fp.hex(), call=call_identifier, owner=caller)
            log.info("proposed", extra={"fingerprint": fp, "approvals": 1, "threshold": threshold})
            return False

        if self.registry.policy.distinct_approvals:
            count = len(set(existing) | {caller})
        else:
            count = len(existing) + 1

        if count >= threshold:
            self.dispatch(call_identifier, payload)
            self.ledger.remove(fp)
            self.events.emit("Executed", fingerprint=fp.hex(), call=call_identifier, owner=caller)
            log.info("executed", extra={"fingerprint": fp, "approvals": count, "threshold": threshold})
            return True

        if self.registry.policy.distinct_approvals:
            record = caller not in existing
        else:
            # Literal accounting: only an already-recorded signer is appended.
            record = caller in existing

        if record:
            signers = existing + [caller]
            self.ledger.insert_or_replace(fp, signers)
            self.events.emit(
                "Approved",
                fingerprint=fp.hex(),
                call=call_identifier,
                owner=caller,
                approvals=len(signers),
            )
            log.debug("approval recorded", extra={"fingerprint": fp, "approvals": len(signers)})
        else:
            log.debug("approval not recorded", extra={"fingerprint": fp, "approvals": len(existing)})
        return False

    def revoke(self, call_identifier: str, payload: str, caller: OwnerId) -> bool:
        """Withdraw `caller`'s approval; True iff a ledger entry existed."""
        self.require_owner(caller)
        fp = fingerprint(call_identifier, payload)
        existing = self.ledger.get(fp)
        if existing is None:
            return False
        signers = [s for s in existing if s != caller]
        # An entry revoked down to nothing stays behind as [].
        self.ledger.insert_or_replace(fp, signers)
        self.events.emit(
            "Revoked",
            fingerprint=fp.hex(),
            call=call_identifier,
            owner=caller,
            approvals=len(signers),
        )
        log.info("revoked", extra={"fingerprint": fp, "approvals": len(signers)})
        return True

    def update(self, new_owners: Sequence[OwnerId], new_threshold: int, caller: OwnerId) -> bool:
        """Propose or approve an owner/threshold change; apply it once approved."""
        self.require_owner(caller)
        self.registry.validate(new_owners, new_threshold)
        payload = update_payload(new_owners, new_threshold)
        if not self.propose_or_approve(UPDATE_KEY, payload, caller):
            return False
        self.registry.set(new_owners, new_threshold)
        cleared = self.ledger.clear_all()
        owners: List[OwnerId] = self.registry.owners()
        self.events.emit("OwnersUpdated", owners=owners, threshold=new_threshold, cleared=cleared)
        log.info(
            "owners updated",
            extra={"owners": owners, "threshold": new_threshold, "cleared": cleared},
        )
        return True


__all__ = ["ApprovalMachine", "OnApproved"]
