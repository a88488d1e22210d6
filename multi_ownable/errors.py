"""
multi_ownable.errors
--------------------

A small, consistent error system for the threshold gate.

Design goals
------------
- One root `MultiOwnableError` with a machine-friendly `code` and optional `data`.
- Concrete subclasses for the failure classes callers must tell apart
  (authorization, arguments, call names, payload decoding, lifecycle, storage).
- Safe JSON representation (`to_dict`) suitable for logs and CLI output.

Every error is raised *before* any state is touched, or inside an atomic scope
whose writes are reverted, so callers never observe partial effects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, Enum):
    UNAUTHORIZED = "MO/UNAUTHORIZED"
    INVALID_ARGUMENTS = "MO/INVALID_ARGUMENTS"
    UNRECOGNIZED_CALL = "MO/UNRECOGNIZED_CALL"
    SERIALIZATION = "MO/SERIALIZATION"
    NOT_INITIALIZED = "MO/NOT_INITIALIZED"
    ALREADY_INITIALIZED = "MO/ALREADY_INITIALIZED"
    CONFIG = "MO/CONFIG"
    STORAGE = "MO/STORAGE"


@dataclass(eq=False)
class MultiOwnableError(Exception):
    """
    Root error for the package.

    Attributes
    ----------
    code: str
        Machine-stable error code (see ErrorCode).
    message: str
        Human hint suitable for logs.
    data: dict
        Optional machine data (ids, fingerprints, sizes). JSON-serializable.
    cause: Optional[BaseException]
        Wrapped original exception; not part of equality.
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        super().__init__(f"{self.code}: {self.message}")

    def with_cause(self, exc: BaseException) -> "MultiOwnableError":
        self.cause = exc
        return self

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        out = {
            "code": str(self.code),
            "message": self.message,
            "data": _jsonmap(self.data),
        }
        if include_cause and self.cause is not None:
            out["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }
        return out

    def __str__(self) -> str:  # pragma: no cover - human formatting
        parts = [f"{self.code}: {self.message}"]
        if self.data:
            preview = ", ".join(f"{k}={_coerce_json(v)}" for k, v in self.data.items())
            parts.append(f"[{preview}]")
        return " ".join(parts)


class AuthorizationError(MultiOwnableError):
    def __init__(self, caller: str, message: str = "predecessor must be an owner") -> None:
        super().__init__(
            code=ErrorCode.UNAUTHORIZED.value,
            message=message,
            data={"caller": caller},
        )


class InvalidArguments(MultiOwnableError):
    def __init__(self, message: str = "invalid arguments", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ARGUMENTS.value,
            message=message,
            data=_jsonmap(data),
        )


class UnrecognizedCallError(MultiOwnableError):
    def __init__(self, call_name: str) -> None:
        super().__init__(
            code=ErrorCode.UNRECOGNIZED_CALL.value,
            message=f"invalid call name {call_name}",
            data={"call_name": call_name},
        )


class SerializationError(MultiOwnableError):
    def __init__(self, message: str = "could not decode call arguments", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.SERIALIZATION.value,
            message=message,
            data=_jsonmap(data),
        )


class NotInitialized(MultiOwnableError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_INITIALIZED.value,
            message="multi-ownable state is not initialized",
        )


class AlreadyInitialized(MultiOwnableError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_INITIALIZED.value,
            message="multi-ownable state is already initialized",
        )


class ConfigError(MultiOwnableError):
    def __init__(self, message: str = "invalid configuration", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.CONFIG.value,
            message=message,
            data=_jsonmap(data),
        )


class StorageError(MultiOwnableError):
    def __init__(self, message: str = "storage error", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.STORAGE.value,
            message=message,
            data=_jsonmap(data),
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; hex-encode bytes; stringify the rest.
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (list, tuple)):
        return [_coerce_json(x) for x in v]
    if isinstance(v, dict):
        return {str(k): _coerce_json(x) for k, x in v.items()}
    if isinstance(v, (bytes, bytearray)):
        return bytes(v).hex()
    return str(v)


__all__ = [
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
