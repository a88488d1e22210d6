from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from multi_ownable.cli import app
from multi_ownable.fingerprint import fingerprint_hex

runner = CliRunner()

ARGS = '{"number": 7}'


@pytest.fixture
def db(tmp_path, clean_config):
    return str(tmp_path / "cli.db")


def _run(db, *args):
    return runner.invoke(app, ["--db", db, *args])


def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "submit" in result.output


def test_fingerprint_needs_no_database(db):
    result = _run(db, "fingerprint", "update_number", ARGS)
    assert result.exit_code == 0
    assert result.output.strip() == fingerprint_hex("update_number", ARGS)


def test_missing_database(db):
    result = _run(db, "owners")
    assert result.exit_code == 1
    assert "database not found" in result.output


def test_init_and_views(db):
    assert _run(db, "init", "alice").exit_code == 0
    assert _run(db, "owners").output.split() == ["alice"]
    assert _run(db, "threshold").output.strip() == "1"
    assert _run(db, "number").output.strip() == "0"
    result = _run(db, "--json", "owners")
    assert json.loads(result.output) == ["alice"]


def test_init_twice_fails(db):
    _run(db, "init", "alice")
    result = _run(db, "init", "bob")
    assert result.exit_code == 1
    assert "MO/ALREADY_INITIALIZED" in result.output


def test_two_owner_flow(db):
    _run(db, "init", "alice")
    result = _run(db, "update", "--caller", "alice", "--owner", "alice", "--owner", "bob", "--threshold", "2")
    assert result.exit_code == 0, result.output
    assert "owners updated" in result.output

    result = _run(db, "--json", "submit", "--caller", "alice", "update_number", ARGS)
    assert json.loads(result.output) == {"executed": False}

    pending = json.loads(_run(db, "--json", "pending").output)
    assert pending == [{"fingerprint": fingerprint_hex("update_number", ARGS), "approvals": ["alice"]}]

    result = _run(db, "submit", "--caller", "bob", "update_number", ARGS)
    assert result.exit_code == 0
    assert "executed" in result.output
    assert _run(db, "number").output.strip() == "7"
    assert "no pending calls" in _run(db, "pending").output


def test_revoke(db):
    _run(db, "init", "alice")
    _run(db, "update", "--caller", "alice", "--owner", "alice", "--owner", "bob", "--threshold", "2")
    _run(db, "submit", "--caller", "alice", "update_number", ARGS)
    result = _run(db, "--json", "revoke", "--caller", "alice", "update_number", ARGS)
    assert json.loads(result.output) == {"revoked": True}
    result = _run(db, "revoke", "--caller", "alice", "update_number", '{"number": 8}')
    assert "nothing pending" in result.output


def test_domain_errors_exit_1(db):
    _run(db, "init", "alice")

    result = _run(db, "submit", "--caller", "mallory", "update_number", ARGS)
    assert result.exit_code == 1
    assert "MO/UNAUTHORIZED: predecessor must be an owner" in result.output

    result = _run(db, "submit", "--caller", "alice", "launch", ARGS)
    assert result.exit_code == 1
    assert "MO/UNRECOGNIZED_CALL" in result.output

    result = _run(db, "submit", "--caller", "alice", "update_number", "{oops")
    assert result.exit_code == 1
    assert "MO/SERIALIZATION" in result.output
    assert _run(db, "number").output.strip() == "0"
