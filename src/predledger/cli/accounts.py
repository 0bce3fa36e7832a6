"""Account subcommand: deposit, balance."""

from __future__ import annotations

import typer

from predledger.cli.common import fail, open_ledger
from predledger.errors import Unauthorized
from predledger.storage import AccountBook

app = typer.Typer(help="Account balances for stakes and payouts")


@app.command("deposit")
def deposit(
    ctx: typer.Context,
    account: str = typer.Argument(..., help="Account to fund"),
    amount: int = typer.Argument(..., min=1, help="Amount"),
) -> None:
    """Fund an account (admin only; pass --caller)."""
    with open_ledger(ctx) as (state, _):
        if ctx.obj.get("caller") is None or ctx.obj["caller"] != state.get_admin():
            fail(Unauthorized())
        with state.transaction():
            balance = AccountBook(state.conn).deposit(account, amount)
    typer.echo(f"{account}: {balance}")


@app.command("balance")
def balance(
    ctx: typer.Context,
    account: str | None = typer.Argument(None, help="Account (omit to list all)"),
) -> None:
    """Show one balance or all balances."""
    with open_ledger(ctx) as (state, _):
        book = AccountBook(state.conn)
        if account:
            typer.echo(f"{account}: {book.balance(account)}")
            return
        rows = book.list_balances()
        for r in rows:
            typer.echo(f"  {r['account']:<24}  {r['amount']}")
        typer.echo(f"Total: {len(rows)} accounts")
