"""
multi_ownable.policy — behavioral switches for the threshold gate.

Three behaviors of the gate are surprising enough that an integrator
has to pick them explicitly:

threshold_rule
    LITERAL       owners/threshold are valid iff ``len(owners) <= threshold``
                  (the historical check).
    CONVENTIONAL  valid iff ``threshold <= len(owners)`` (classic N-of-M).

distinct_approvals
    True   an owner is recorded at most once per proposal and a repeated
           approval never counts toward the threshold.
    False  literal accounting: the threshold is crossed when
           ``len(existing) + 1 >= threshold`` regardless of who calls, and a
           pending proposal only grows when the caller is *already* recorded.

replace_owners
    False  a successful update unions the new owners into the current set.
    True   a successful update replaces the owner set.

`ApprovalPolicy()` uses LITERAL / distinct / additive; `ApprovalPolicy.literal()`
reproduces the historical behavior on every switch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any


class ThresholdRule(str, Enum):
    LITERAL = "literal"
    CONVENTIONAL = "conventional"

    def accepts(self, owner_count: int, threshold: int) -> bool:
        if self is ThresholdRule.LITERAL:
            return owner_count <= threshold
        return threshold <= owner_count


@dataclass(frozen=True)
class ApprovalPolicy:
    threshold_rule: ThresholdRule = ThresholdRule.LITERAL
    distinct_approvals: bool = True
    replace_owners: bool = False

    @classmethod
    def literal(cls) -> "ApprovalPolicy":
        return cls(
            threshold_rule=ThresholdRule.LITERAL,
            distinct_approvals=False,
            replace_owners=False,
        )

    @classmethod
    def conventional(cls) -> "ApprovalPolicy":
        return cls(
            threshold_rule=ThresholdRule.CONVENTIONAL,
            distinct_approvals=True,
            replace_owners=True,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "threshold_rule": self.threshold_rule.value,
            "distinct_approvals": self.distinct_approvals,
            "replace_owners": self.replace_owners,
        }


__all__ = ["ThresholdRule", "ApprovalPolicy"]
