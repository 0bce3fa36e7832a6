"""Shared CLI helpers: open the ledger database, report ledger errors."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, NoReturn

import typer

from predledger.errors import LedgerError
from predledger.ledger import LedgerContract, LocalRuntime
from predledger.storage import AccountBook, LedgerState, get_connection, init_schema


@contextmanager
def open_ledger(ctx: typer.Context) -> Iterator[tuple[LedgerState, LedgerContract]]:
    """Yield (state, contract) for the configured database, acting as the --caller identity."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        state = LedgerState(conn)
        runtime = LocalRuntime(
            AccountBook(conn),
            signer=ctx.obj.get("caller"),
            escrow_account=settings.escrow_account,
        )
        yield state, LedgerContract(state, runtime)
    finally:
        conn.close()


def fail(e: LedgerError) -> NoReturn:
    fail_with(e.code, str(e))


def fail_with(code: str, message: str) -> NoReturn:
    typer.echo(f"error: {code}: {message}", err=True)
    raise typer.Exit(1)
