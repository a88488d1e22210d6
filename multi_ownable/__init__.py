"""
multi_ownable — N-of-M owner approval gate for privileged operations.

A set of owners and a threshold guard a closed set of named calls. Each owner
submits (call, payload); once enough owners have submitted the same pair the
integrator's callback runs exactly once and the pending approvals are dropped.
Owners and threshold are themselves changed through the same approval path.

Quick start
-----------
    from enum import Enum
    from multi_ownable import MultiOwnable
    from multi_ownable.storage import MemoryKV

    class Call(str, Enum):
        SET_FEE = "set_fee"

    mo = MultiOwnable(MemoryKV(), calls=Call, on_approved=lambda call, payload: ...)
    mo.initialize(["alice", "bob"], 2)
"""

from .calls import UPDATE_KEY, update_payload
from .contract import MultiOwnable
from .errors import (
    AlreadyInitialized,
    AuthorizationError,
    ConfigError,
    ErrorCode,
    InvalidArguments,
    MultiOwnableError,
    NotInitialized,
    SerializationError,
    StorageError,
    UnrecognizedCallError,
)
from .events import Event, EventLog
from .fingerprint import fingerprint, fingerprint_hex
from .policy import ApprovalPolicy, ThresholdRule
from .version import __version__

__all__ = [
    "__version__",
    "MultiOwnable",
    "ApprovalPolicy",
    "ThresholdRule",
    "Event",
    "EventLog",
    "UPDATE_KEY",
    "update_payload",
    "fingerprint",
    "fingerprint_hex",
    "ErrorCode",
    "MultiOwnableError",
    "AuthorizationError",
    "InvalidArguments",
    "UnrecognizedCallError",
    "SerializationError",
    "NotInitialized",
    "AlreadyInitialized",
    "ConfigError",
    "StorageError",
]
