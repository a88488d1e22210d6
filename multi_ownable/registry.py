"""
multi_ownable.registry — the owner set and approval threshold.

Storage layout (under the owners namespace)
-------------------------------------------
- owner element:  Prefix(owners_key).key(b"e", owner)  → CBOR(owner)
- threshold:      Prefix(owners_key).key(b"threshold") → CBOR(uint)

A threshold of 0 (or absent) means "not initialized".

The registry is only ever mutated by `initialize` and by a successful update
proposal; both go through `set`.
"""

from __future__ import annotations

from typing import List, Sequence

from .errors import InvalidArguments
from .logging import get_logger
from .policy import ApprovalPolicy, ThresholdRule
from .storage.collections import UnorderedSet, decode_value, encode_value
from .storage.kv import KV

log = get_logger(__name__)

OwnerId = str

_THRESHOLD = b"threshold"


def validate_arguments(
    owners: Sequence[OwnerId],
    threshold: int,
    rule: ThresholdRule = ThresholdRule.LITERAL,
) -> None:
    """
    Raise InvalidArguments unless (owners, threshold) is an acceptable registry.

    - owners must be non-empty and contain only non-empty strings
    - threshold must be an int >= 1
    - `rule` decides how threshold relates to the owner count
    """
    if len(owners) == 0:
        raise InvalidArguments("too few owners")
    for o in owners:
        if not isinstance(o, str) or not o:
            raise InvalidArguments("owner ids must be non-empty strings", owner=repr(o))
    if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 1:
        raise InvalidArguments("threshold must be at least 1", threshold=repr(threshold))
    if not rule.accepts(len(owners), threshold):
        if rule is ThresholdRule.LITERAL:
            msg = "owners must be less than or equal to threshold"
        else:
            msg = "threshold must be less than or equal to owners"
        raise InvalidArguments(msg, owners=len(owners), threshold=threshold)


class Registry:
    """Owner set + threshold, persisted under one namespace."""

    def __init__(self, store: KV, owners_key: bytes, policy: ApprovalPolicy) -> None:
        self._store = store
        self._owners = UnorderedSet(store, owners_key)
        self._threshold_key = self._owners.prefix.key(_THRESHOLD)
        self._policy = policy

    @property
    def policy(self) -> ApprovalPolicy:
        return self._policy

    # -- reads ---------------------------------------------------------------

    @property
    def threshold(self) -> int:
        raw = self._store.get(self._threshold_key)
        return int(decode_value(raw)) if raw is not None else 0

    @property
    def initialized(self) -> bool:
        return self.threshold > 0

    def owners(self) -> List[OwnerId]:
        return self._owners.to_list()

    def is_owner(self, identity: OwnerId) -> bool:
        return self._owners.contains(identity)

    # -- writes --------------------------------------------------------------

    def validate(self, owners: Sequence[OwnerId], threshold: int) -> None:
        validate_arguments(owners, threshold, self._policy.threshold_rule)

    def initialize(self, owners: Sequence[OwnerId], threshold: int) -> None:
        self.validate(owners, threshold)
        self.set(owners, threshold)

    def set(self, owners: Sequence[OwnerId], threshold: int) -> None:
        """
        Union `owners` into the owner set (or replace it under the
        `replace_owners` policy) and overwrite the threshold.
        """
        if self._policy.replace_owners:
            self._owners.clear()
        added = [o for o in owners if self._owners.insert(o)]
        self._store.put(self._threshold_key, encode_value(int(threshold)))
        log.info(
            "registry set",
            extra={"added": added, "owners": len(self._owners), "threshold": threshold},
        )


__all__ = ["OwnerId", "Registry", "validate_arguments"]
