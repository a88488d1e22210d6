"""Owner registry and argument validation."""

from __future__ import annotations

import pytest

from multi_ownable.errors import InvalidArguments
from multi_ownable.policy import ApprovalPolicy, ThresholdRule
from multi_ownable.registry import Registry, validate_arguments
from multi_ownable.storage import MemoryKV


def _registry(policy=None) -> Registry:
    return Registry(MemoryKV(), b"mo:owners", policy or ApprovalPolicy())


# --- validation -------------------------------------------------------------


def test_empty_owners_rejected():
    with pytest.raises(InvalidArguments, match="too few owners"):
        validate_arguments([], 1)


@pytest.mark.parametrize("threshold", [0, -1, True, 1.5, "2"])
def test_threshold_must_be_positive_int(threshold):
    with pytest.raises(InvalidArguments, match="threshold must be at least 1"):
        validate_arguments(["a"], threshold)


def test_owner_ids_must_be_non_empty_strings():
    with pytest.raises(InvalidArguments):
        validate_arguments(["a", ""], 2)


def test_literal_rule_requires_owners_not_above_threshold():
    validate_arguments(["a"], 1)
    validate_arguments(["a"], 5)
    validate_arguments(["a", "b"], 2)
    with pytest.raises(InvalidArguments, match="owners must be less than or equal to threshold"):
        validate_arguments(["a", "b", "c"], 2)


def test_conventional_rule_is_n_of_m():
    rule = ThresholdRule.CONVENTIONAL
    validate_arguments(["a", "b", "c"], 2, rule)
    with pytest.raises(InvalidArguments, match="threshold must be less than or equal to owners"):
        validate_arguments(["a"], 2, rule)


# --- registry ---------------------------------------------------------------


def test_uninitialized_registry():
    r = _registry()
    assert r.threshold == 0
    assert not r.initialized
    assert r.owners() == []


def test_initialize_sets_owners_and_threshold():
    r = _registry()
    r.initialize(["bob", "alice"], 2)
    assert r.initialized
    assert r.threshold == 2
    assert r.owners() == ["alice", "bob"]
    assert r.is_owner("alice")
    assert not r.is_owner("carol")


def test_set_is_additive_by_default():
    r = _registry()
    r.initialize(["alice", "bob"], 2)
    r.set(["carol"], 3)
    assert r.owners() == ["alice", "bob", "carol"]
    assert r.threshold == 3


def test_set_replaces_under_replace_policy():
    r = _registry(ApprovalPolicy(replace_owners=True))
    r.initialize(["alice", "bob"], 2)
    r.set(["carol"], 1)
    assert r.owners() == ["carol"]
    assert r.threshold == 1


def test_initialize_validates_before_writing():
    kv = MemoryKV()
    r = Registry(kv, b"mo:owners", ApprovalPolicy())
    with pytest.raises(InvalidArguments):
        r.initialize(["a", "b", "c"], 1)
    assert kv.snapshot() == {}
