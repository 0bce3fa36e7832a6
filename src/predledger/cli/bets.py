"""Bet subcommand: place, claim, list."""

from __future__ import annotations

import typer

from predledger.cli.common import fail, open_ledger
from predledger.errors import LedgerError
from predledger.ledger.queries import bet_payout, bet_status
from predledger.models import ClaimWinnings, PlaceBet

app = typer.Typer(help="Place bets, claim winnings, list bets")


@app.command("place")
def place(
    ctx: typer.Context,
    market_id: str = typer.Argument(..., help="Market id"),
    outcome_id: str = typer.Argument(..., help="Outcome id (e.g. id_1_0)"),
    amount: int = typer.Argument(..., min=0, help="Stake amount"),
) -> None:
    """Stake on an outcome as --caller. Prints the new bet id."""
    with open_ledger(ctx) as (_, contract):
        try:
            result = contract.execute_operation(PlaceBet(market_id=market_id, outcome_id=outcome_id, amount=amount))
        except LedgerError as e:
            fail(e)
    typer.echo(result.bet_id)


@app.command("claim")
def claim(ctx: typer.Context, market_id: str = typer.Argument(..., help="Resolved market id")) -> None:
    """Claim the payout for one winning bet as --caller."""
    with open_ledger(ctx) as (_, contract):
        try:
            result = contract.execute_operation(ClaimWinnings(market_id=market_id))
        except LedgerError as e:
            fail(e)
    typer.echo(f"Payout: {result.payout}")


@app.command("list")
def list_bets(
    ctx: typer.Context,
    owner: str | None = typer.Option(None, "--owner", help="Bets by owner (default: --caller)"),
    market: str | None = typer.Option(None, "--market", "-m", help="Bets by market"),
) -> None:
    """List bets by owner or by market."""
    with open_ledger(ctx) as (state, _):
        if market:
            bets = state.bets_for_market(market)
        else:
            owner = owner or ctx.obj.get("caller")
            if not owner:
                typer.echo("Pass --owner, --market or --caller")
                raise typer.Exit(1)
            bets = state.bets_for_owner(owner)
        markets = {}
        for b in bets:
            if b.market_id not in markets:
                markets[b.market_id] = state.get_market(b.market_id)
            m = markets[b.market_id]
            status = bet_status(b, m).value if m else "?"
            payout = bet_payout(b, m) if m else 0
            claimed = "claimed" if b.claimed else ""
            typer.echo(f"  {b.id:<10}  {b.owner:<20}  {b.outcome_id:<12}  {b.amount:>10}  {status:<7}  {payout:>10}  {claimed}")
        typer.echo(f"Total: {len(bets)} bets")
