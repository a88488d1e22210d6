"""
multi_ownable.fingerprint — collapse a proposed call into a fixed-size key.

    fingerprint(identifier, payload) = sha256(utf8(identifier) || utf8(payload))

There is no separator between the two parts, so ``("ab", "c")`` and
``("a", "bc")`` share a key. Identifiers come from a closed enum known to the
integrator, which keeps that surface narrow; it is still a real collision and
is covered by tests.

Only the 32-byte digest is stored, so ledger entries stay small no matter how
large the argument payload is. The digest is not a commitment to *who*
proposed the call: anyone resubmitting identical text lands on the same entry.
"""

from __future__ import annotations

import hashlib

FINGERPRINT_SIZE = 32


def fingerprint(identifier: str, payload: str) -> bytes:
    """Return the 32-byte SHA-256 digest of ``identifier + payload``."""
    h = hashlib.sha256()
    h.update(identifier.encode("utf-8"))
    h.update(payload.encode("utf-8"))
    return h.digest()


def fingerprint_hex(identifier: str, payload: str) -> str:
    return fingerprint(identifier, payload).hex()


__all__ = ["FINGERPRINT_SIZE", "fingerprint", "fingerprint_hex"]
