"""multi_ownable.version — package version.

Resolution order: env MULTI_OWNABLE_VERSION → installed package metadata →
BASE_VERSION.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata as importlib_metadata

BASE_VERSION = "0.1.0"


@lru_cache(maxsize=1)
def compute_version() -> str:
    env = os.getenv("MULTI_OWNABLE_VERSION")
    if env:
        return env.strip()
    try:
        return importlib_metadata.version("multi-ownable")
    except importlib_metadata.PackageNotFoundError:
        return BASE_VERSION


__version__ = compute_version()

__all__ = ["__version__", "BASE_VERSION", "compute_version"]
