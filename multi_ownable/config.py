"""
multi_ownable.config — storage namespaces, approval policy and logging knobs.

This module has NO third-party deps and is safe to import very early.

Configuration precedence:
  1) Environment variables (MULTI_OWNABLE_*)
  2) Hardcoded defaults below

Env vars:
  - MULTI_OWNABLE_OWNERS_KEY         (str)    default: "mo:owners"
  - MULTI_OWNABLE_CALLS_KEY          (str)    default: "mo:calls"
  - MULTI_OWNABLE_THRESHOLD_RULE     (str)    default: "literal"  (literal|conventional)
  - MULTI_OWNABLE_DISTINCT_APPROVALS (bool)   default: true
  - MULTI_OWNABLE_REPLACE_OWNERS     (bool)   default: false
  - MULTI_OWNABLE_LOG_LEVEL          (str)    default: "WARNING"
  - MULTI_OWNABLE_LOG_JSON           (bool)   default: false
  - MULTI_OWNABLE_DB                 (path)   default: "./multi_ownable.db"

Usage:
    from multi_ownable.config import load_config
    CFG = load_config()
    contract = MultiOwnable(kv, calls=MyCall, on_approved=cb,
                            owners_key=CFG.owners_key, calls_key=CFG.calls_key,
                            policy=CFG.policy)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from .errors import ConfigError
from .policy import ApprovalPolicy, ThresholdRule

DEFAULT_OWNERS_KEY = b"mo:owners"
DEFAULT_CALLS_KEY = b"mo:calls"
DEFAULT_DB_PATH = "./multi_ownable.db"


# ----------------------------- helpers ---------------------------------------


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "t", "yes", "y", "on")


def _env_bytes(name: str, default: bytes) -> bytes:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().encode("utf-8")


def _env_rule(name: str, default: ThresholdRule) -> ThresholdRule:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return ThresholdRule(raw.strip().lower())
    except ValueError as e:
        raise ConfigError(
            f"{name} must be one of: {', '.join(r.value for r in ThresholdRule)}",
            value=raw,
        ).with_cause(e)


def validate_namespaces(owners_key: bytes, calls_key: bytes) -> None:
    """Both namespaces must be non-empty and neither may prefix the other."""
    if not owners_key or not calls_key:
        raise ConfigError("storage namespace keys must be non-empty")
    if owners_key.startswith(calls_key) or calls_key.startswith(owners_key):
        raise ConfigError(
            "owners and calls namespaces collide",
            owners_key=owners_key.decode("utf-8", "replace"),
            calls_key=calls_key.decode("utf-8", "replace"),
        )


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class MultiOwnableConfig:
    owners_key: bytes
    calls_key: bytes
    policy: ApprovalPolicy
    log_level: str
    log_json: bool
    db_path: Path

    def as_dict(self) -> Dict[str, Any]:
        return {
            "owners_key": self.owners_key.decode("utf-8", "replace"),
            "calls_key": self.calls_key.decode("utf-8", "replace"),
            "policy": self.policy.as_dict(),
            "log_level": self.log_level,
            "log_json": self.log_json,
            "db_path": str(self.db_path),
        }


@lru_cache(maxsize=1)
def load_config() -> MultiOwnableConfig:
    """
    Resolve configuration from the environment. Cached; call
    `load_config.cache_clear()` after changing the environment in tests.
    """
    owners_key = _env_bytes("MULTI_OWNABLE_OWNERS_KEY", DEFAULT_OWNERS_KEY)
    calls_key = _env_bytes("MULTI_OWNABLE_CALLS_KEY", DEFAULT_CALLS_KEY)
    validate_namespaces(owners_key, calls_key)

    policy = ApprovalPolicy(
        threshold_rule=_env_rule("MULTI_OWNABLE_THRESHOLD_RULE", ThresholdRule.LITERAL),
        distinct_approvals=_env_bool("MULTI_OWNABLE_DISTINCT_APPROVALS", True),
        replace_owners=_env_bool("MULTI_OWNABLE_REPLACE_OWNERS", False),
    )

    return MultiOwnableConfig(
        owners_key=owners_key,
        calls_key=calls_key,
        policy=policy,
        log_level=os.getenv("MULTI_OWNABLE_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
        log_json=_env_bool("MULTI_OWNABLE_LOG_JSON", False),
        db_path=Path(os.getenv("MULTI_OWNABLE_DB", DEFAULT_DB_PATH)).expanduser(),
    )


__all__ = [
    "DEFAULT_OWNERS_KEY",
    "DEFAULT_CALLS_KEY",
    "DEFAULT_DB_PATH",
    "MultiOwnableConfig",
    "load_config",
    "validate_namespaces",
]
