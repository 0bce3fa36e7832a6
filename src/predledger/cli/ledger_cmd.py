"""Ledger subcommand: init, status, exec, leaderboard."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from pydantic import ValidationError

from predledger.cli.common import fail, fail_with, open_ledger
from predledger.errors import LedgerError
from predledger.ledger import LedgerContract, LocalRuntime
from predledger.ledger.queries import leaderboard as ledger_leaderboard
from predledger.models import InstantiationArgument, parse_operation
from predledger.storage import AccountBook

app = typer.Typer(help="Ledger instantiation, batch operations and standings")


@app.command("init")
def init(
    ctx: typer.Context,
    admin: str = typer.Option(..., "--admin", help="Identity allowed to resolve markets"),
) -> None:
    """Instantiate the ledger: set the admin and reset the id counter. Only once per database."""
    with open_ledger(ctx) as (_, contract):
        try:
            contract.instantiate(InstantiationArgument(admin=admin))
        except LedgerError as e:
            fail(e)
    typer.echo(f"Ledger initialized. Admin: {admin}")


@app.command("status")
def status(ctx: typer.Context) -> None:
    """Show admin, id counter and market count."""
    with open_ledger(ctx) as (state, _):
        typer.echo(f"Admin: {state.get_admin() or '(not initialized)'}")
        typer.echo(f"Id counter: {state.id_counter()}")
        typer.echo(f"Markets: {len(state.list_markets())}")


@app.command("exec")
def exec_operations(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help='JSON list of {"caller", "operation"}'),
) -> None:
    """Execute operations from a JSON file in order. Stops at the first failure."""
    try:
        items = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        fail_with("invalid_operation", f"{path}: {e}")
    settings = ctx.obj["settings"]
    with open_ledger(ctx) as (state, _):
        for i, item in enumerate(items):
            try:
                operation = parse_operation(item["operation"])
            except KeyError:
                fail_with("invalid_operation", f"operation {i}: missing \"operation\"")
            except (TypeError, ValidationError) as e:
                fail_with("invalid_operation", f"operation {i}: {e}")
            runtime = LocalRuntime(
                AccountBook(state.conn),
                signer=item.get("caller"),
                escrow_account=settings.escrow_account,
            )
            try:
                result = LedgerContract(state, runtime).execute_operation(operation)
            except LedgerError as e:
                typer.echo(f"operation {i} failed", err=True)
                fail(e)
            typer.echo(f"{i}: {result.model_dump_json(exclude_none=True)}")


@app.command("leaderboard")
def leaderboard(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-n", help="Max entries"),
) -> None:
    """Rank owners by profit on resolved markets."""
    with open_ledger(ctx) as (state, _):
        entries = ledger_leaderboard(state, limit=limit)
        for e in entries:
            typer.echo(f"  #{e.rank}  {e.owner:<24}  profit {e.total_profit:>12}  win {e.win_rate:>6.2f}%  volume {e.volume}")
        typer.echo(f"Total: {len(entries)} owners")
