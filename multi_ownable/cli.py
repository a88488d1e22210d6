"""
multi-ownable — command-line driver for a sqlite-backed number contract.

Each invocation opens the database, performs one operation as the given
caller and closes it again, so a multi-owner flow is a sequence of commands:

    multi-ownable --db ./mo.db init alice
    multi-ownable --db ./mo.db update --caller alice --owner alice --owner bob --threshold 2
    multi-ownable --db ./mo.db submit --caller alice update_number '{"number": 7}'
    multi-ownable --db ./mo.db pending
    multi-ownable --db ./mo.db submit --caller bob update_number '{"number": 7}'
    multi-ownable --db ./mo.db number

Global options:
  --db PATH   sqlite database (env MULTI_OWNABLE_DB, default ./multi_ownable.db)
  --json      Output JSON instead of human-readable text

Domain errors exit with status 1 and print ``<code>: <message>`` on stderr.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional

import typer

from . import logging as mlog
from .config import load_config
from .errors import MultiOwnableError
from .examples.number import NumberContract
from .fingerprint import fingerprint_hex
from .storage.sqlite import open_sqlite_kv

app = typer.Typer(
    name="multi-ownable",
    help="Drive an N-of-M owner-gated number contract stored in sqlite.",
    no_args_is_help=True,
    add_completion=False,
)


class GlobalContext:
    def __init__(self) -> None:
        self.db_path: Optional[Path] = None
        self.json_output: bool = False


_ctx = GlobalContext()


@app.callback()
def main_callback(
    db: Optional[Path] = typer.Option(
        None,
        "--db",
        help="Path to the sqlite database (env MULTI_OWNABLE_DB)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output JSON instead of human-readable text",
    ),
) -> None:
    """Owner-gated number contract over sqlite."""
    cfg = load_config()
    mlog.configure(json=cfg.log_json, level=cfg.log_level)
    _ctx.db_path = db if db is not None else cfg.db_path
    _ctx.json_output = json_output


# -------------------- helpers --------------------


def _fail(err: MultiOwnableError) -> None:
    typer.echo(f"{err.code}: {err.message}", err=True)
    raise typer.Exit(code=1)


@contextmanager
def _contract(*, create: bool = False, owner: Optional[str] = None) -> Iterator[NumberContract]:
    cfg = load_config()
    path = _ctx.db_path or cfg.db_path
    try:
        kv = open_sqlite_kv(path, create=create)
    except FileNotFoundError:
        typer.echo(f"database not found: {path} (run `multi-ownable init OWNER` first)", err=True)
        raise typer.Exit(code=1)
    try:
        yield NumberContract(
            owner,
            kv,
            policy=cfg.policy,
            owners_key=cfg.owners_key,
            calls_key=cfg.calls_key,
        )
    except MultiOwnableError as e:
        _fail(e)
    finally:
        kv.close()


def _emit(value: Any, human: str) -> None:
    if _ctx.json_output:
        typer.echo(json.dumps(value))
    else:
        typer.echo(human)


# -------------------- commands --------------------


@app.command("init")
def init_cmd(owner: str = typer.Argument(..., help="Initial sole owner (threshold 1)")) -> None:
    """Create the contract with a single owner and threshold 1."""
    with _contract(create=True, owner=owner) as c:
        _emit({"owners": c.get_owners(), "threshold": c.get_threshold()}, f"initialized: owner={owner} threshold=1")


@app.command("owners")
def owners_cmd() -> None:
    """List the current owners."""
    with _contract() as c:
        owners = c.get_owners()
        _emit(owners, "\n".join(owners))


@app.command("threshold")
def threshold_cmd() -> None:
    """Show the approval threshold."""
    with _contract() as c:
        t = c.get_threshold()
        _emit(t, str(t))


@app.command("number")
def number_cmd() -> None:
    """Show the stored number."""
    with _contract() as c:
        n = c.get_number()
        _emit(n, str(n))


@app.command("pending")
def pending_cmd() -> None:
    """List proposals awaiting approvals."""
    with _contract() as c:
        rows = [{"fingerprint": fp.hex(), "approvals": signers} for fp, signers in c.pending_calls()]
        human = "\n".join(f"{r['fingerprint']}  {','.join(r['approvals']) or '-'}" for r in rows)
        _emit(rows, human or "no pending calls")


@app.command("submit")
def submit_cmd(
    call: str = typer.Argument(..., help="Call name, e.g. update_number"),
    args: str = typer.Argument(..., help="Call arguments as a JSON string"),
    caller: str = typer.Option(..., "--caller", help="Identity submitting the call"),
) -> None:
    """Propose or approve a call."""
    with _contract() as c:
        executed = c.multi_ownable_call(caller, call, args)
        _emit({"executed": executed}, "executed" if executed else "approval recorded")


@app.command("revoke")
def revoke_cmd(
    call: str = typer.Argument(..., help="Call name"),
    args: str = typer.Argument(..., help="Call arguments exactly as submitted"),
    caller: str = typer.Option(..., "--caller", help="Identity revoking its approval"),
) -> None:
    """Withdraw an approval."""
    with _contract() as c:
        revoked = c.multi_ownable_revoke(caller, call, args)
        _emit({"revoked": revoked}, "revoked" if revoked else "nothing pending")


@app.command("update")
def update_cmd(
    caller: str = typer.Option(..., "--caller", help="Identity proposing the change"),
    owner: List[str] = typer.Option(..., "--owner", help="New owner (repeatable)"),
    threshold: int = typer.Option(..., "--threshold", help="New approval threshold"),
) -> None:
    """Propose or approve a new owner set and threshold."""
    with _contract() as c:
        applied = c.update_multi_ownable(caller, owner, threshold)
        _emit({"applied": applied}, "owners updated" if applied else "approval recorded")


@app.command("fingerprint")
def fingerprint_cmd(
    call: str = typer.Argument(..., help="Call name"),
    args: str = typer.Argument(..., help="Call arguments"),
) -> None:
    """Print the proposal fingerprint (no state is read)."""
    fp = fingerprint_hex(call, args)
    _emit({"fingerprint": fp}, fp)


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
