"""
multi_ownable.examples.number — a contract holding a single number.

Two guarded calls:

- ``update_number``      payload ``{"number": <uint>}``; stores the number
- ``do_something_else``  payload ignored; no state change

The number lives in the same journaled store as the owner registry, so a
malformed payload reverts the whole submission (including any approvals it
would have cleared).
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config import DEFAULT_CALLS_KEY, DEFAULT_OWNERS_KEY
from ..contract import MultiOwnable
from ..errors import SerializationError
from ..logging import get_logger
from ..policy import ApprovalPolicy
from ..storage.collections import decode_value, encode_value
from ..storage.kv import KV, MemoryKV, Prefix

log = get_logger(__name__)

NUMBER_KEY = Prefix(b"number").key(b"value")


class NumberCall(str, Enum):
    UPDATE_NUMBER = "update_number"
    DO_SOMETHING_ELSE = "do_something_else"


class UpdateNumberArgs(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    number: int = Field(ge=0)


class NumberContract:
    """
    Owns a `MultiOwnable` gate and a number.

    Passing `owner_id` initializes a fresh contract with ``[owner_id]`` and
    threshold 1. Omit it to reopen state that already lives in `kv`.
    """

    def __init__(
        self,
        owner_id: Optional[str] = None,
        kv: Optional[KV] = None,
        *,
        policy: Optional[ApprovalPolicy] = None,
        owners_key: bytes = DEFAULT_OWNERS_KEY,
        calls_key: bytes = DEFAULT_CALLS_KEY,
    ) -> None:
        self.mo: MultiOwnable[NumberCall] = MultiOwnable(
            kv if kv is not None else MemoryKV(),
            calls=NumberCall,
            on_approved=self.on_call,
            owners_key=owners_key,
            calls_key=calls_key,
            policy=policy,
            name="number",
        )
        if owner_id is not None:
            self.mo.initialize([owner_id], 1)

    # -- views ---------------------------------------------------------------

    def get_number(self) -> int:
        raw = self.mo.store.get(NUMBER_KEY)
        return int(decode_value(raw)) if raw is not None else 0

    def get_owners(self) -> List[str]:
        return self.mo.get_owners()

    def get_threshold(self) -> int:
        return self.mo.get_threshold()

    def pending_calls(self) -> List[Tuple[bytes, List[str]]]:
        return self.mo.pending_calls()

    # -- gated entry points --------------------------------------------------

    def multi_ownable_call(self, caller: str, call_name: str, arguments: str) -> bool:
        return self.mo.submit_call(caller, call_name, arguments)

    def multi_ownable_revoke(self, caller: str, call_name: str, arguments: str) -> bool:
        return self.mo.revoke_call(caller, call_name, arguments)

    def update_multi_ownable(self, caller: str, owners: List[str], threshold: int) -> bool:
        return self.mo.update(caller, owners, threshold)

    # -- dispatch ------------------------------------------------------------

    def on_call(self, call: NumberCall, arguments: str) -> None:
        if call is NumberCall.UPDATE_NUMBER:
            self._update_number(arguments)
        elif call is NumberCall.DO_SOMETHING_ELSE:
            self._do_something_else(arguments)

    def _update_number(self, arguments: str) -> None:
        try:
            args = UpdateNumberArgs.model_validate_json(arguments)
        except ValidationError as e:
            raise SerializationError("invalid update_number arguments", arguments=arguments).with_cause(e)
        self.mo.store.put(NUMBER_KEY, encode_value(args.number))
        log.info("number updated", extra={"number": args.number})

    def _do_something_else(self, arguments: str) -> None:
        log.debug("do_something_else", extra={"arguments": arguments})


__all__ = ["NumberCall", "NumberContract", "UpdateNumberArgs", "NUMBER_KEY"]
