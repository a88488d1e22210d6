"""
multi_ownable.calls — the integrator's call enum and the reserved update call.

Integrators describe the guarded operations as a closed string enum:

    class MyCall(str, Enum):
        UPDATE_NUMBER = "update_number"
        DO_SOMETHING_ELSE = "do_something_else"

`submit_call("update_number", ...)` is accepted; any other name is rejected
with UnrecognizedCallError before a fingerprint is computed.

Owner/threshold changes travel through the same approval path under the
reserved identifier ``UPDATE_KEY``, which no integrator enum may use.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ConfigDict

from .errors import ConfigError, UnrecognizedCallError

UPDATE_KEY = "_"

E = TypeVar("E", bound=Enum)


class UpdateArgs(BaseModel):
    """Payload of an update proposal. Field order is part of the fingerprint."""

    model_config = ConfigDict(frozen=True)

    threshold: int
    owners: List[str]


def update_payload(owners: Sequence[str], threshold: int) -> str:
    """
    Canonical JSON for an update proposal: compact, ``threshold`` then
    ``owners``, owners sorted so submission order never changes the fingerprint.

    >>> update_payload(["bob", "alice"], 2)
    '{"threshold":2,"owners":["alice","bob"]}'
    """
    return UpdateArgs(threshold=threshold, owners=sorted(owners)).model_dump_json()


def check_call_enum(calls: Type[Enum]) -> None:
    """Reject call enums that are empty, non-string, or shadow the update key."""
    if not isinstance(calls, type) or not issubclass(calls, Enum):
        raise ConfigError("calls must be an Enum subclass", calls=repr(calls))
    members = list(calls)
    if not members:
        raise ConfigError("call enum has no members", calls=calls.__name__)
    for m in members:
        if not isinstance(m.value, str) or not m.value:
            raise ConfigError("call enum values must be non-empty strings", member=m.name)
        if m.value == UPDATE_KEY:
            raise ConfigError("call enum may not use the reserved update key", member=m.name)


def try_parse_call(calls: Type[E], call_name: str) -> Optional[E]:
    """Return the enum member named by its value, or None."""
    try:
        return calls(call_name)
    except ValueError:
        return None


def parse_call(calls: Type[E], call_name: str) -> E:
    call = try_parse_call(calls, call_name)
    if call is None:
        raise UnrecognizedCallError(call_name)
    return call


__all__ = [
    "UPDATE_KEY",
    "UpdateArgs",
    "update_payload",
    "check_call_enum",
    "parse_call",
    "try_parse_call",
]
