"""Market subcommand: create, list, show, resolve."""

from __future__ import annotations

import typer

from predledger.cli.common import fail, open_ledger
from predledger.errors import LedgerError
from predledger.ledger.queries import child_markets, filter_markets, market_odds
from predledger.ledger.registry import get_market
from predledger.ledger.runtime import now_micros
from predledger.models import CreateMarket, MarketCategory, MarketStatus, ResolveMarket

app = typer.Typer(help="Market creation, listing and resolution")

MICROS_PER_SECOND = 1_000_000


@app.command("create")
def create(
    ctx: typer.Context,
    question: str = typer.Option(..., "--question", "-q", help="Market question"),
    outcomes: list[str] = typer.Option(..., "--outcome", "-o", help="Outcome name (repeat, at least 2)"),
    expires_in: int | None = typer.Option(None, "--expires-in", help="Seconds from now until expiry"),
    expiry: int | None = typer.Option(None, "--expiry", help="Absolute expiry (epoch microseconds)"),
    category: MarketCategory = typer.Option(MarketCategory.OTHER, "--category", help="Market category"),
    parent: str | None = typer.Option(None, "--parent", help="Parent market id (cascading market)"),
) -> None:
    """Create a market. Prints the new market id."""
    if expiry is None and expires_in is None:
        typer.echo("One of --expiry or --expires-in is required")
        raise typer.Exit(1)
    expiry_time = expiry if expiry is not None else now_micros() + expires_in * MICROS_PER_SECOND
    op = CreateMarket(
        question=question,
        outcome_names=outcomes,
        expiry_time=expiry_time,
        category=category,
        parent_id=parent,
    )
    with open_ledger(ctx) as (_, contract):
        try:
            result = contract.execute_operation(op)
        except LedgerError as e:
            fail(e)
    typer.echo(result.market_id)


@app.command("list")
def list_markets(
    ctx: typer.Context,
    category: MarketCategory | None = typer.Option(None, "--category", help="Filter by category"),
    status: MarketStatus | None = typer.Option(None, "--status", help="Filter by status"),
) -> None:
    """List markets in creation order."""
    with open_ledger(ctx) as (state, _):
        markets = filter_markets(state.list_markets(), category=category, status=status)
        for m in markets:
            typer.echo(f"  {m.id:<10}  {m.status.value:<8}  {m.category.value:<9}  {m.total_staked:>12}  {m.question[:60]}")
        typer.echo(f"Total: {len(markets)} markets")


@app.command("show")
def show(ctx: typer.Context, market_id: str = typer.Argument(..., help="Market id")) -> None:
    """Show one market with outcome stakes and odds."""
    with open_ledger(ctx) as (state, _):
        try:
            market = get_market(state, market_id)
        except LedgerError as e:
            fail(e)
        odds = market_odds(market)
        typer.echo(f"Market: {market.id}  [{market.status.value}]  {market.category.value}")
        typer.echo(f"Question: {market.question}")
        typer.echo(f"Expiry: {market.expiry_time}  Expired: {market.is_expired(now_micros())}")
        if market.parent_id:
            typer.echo(f"Parent: {market.parent_id}")
        for o in market.outcomes:
            marker = "*" if o.id == market.winning_outcome_id else " "
            typer.echo(
                f" {marker} {o.id:<12}  {o.name:<20}  staked {o.total_staked:>12}"
                f"  odds {odds[o.id]['odds']:.2f}  ({odds[o.id]['probability']:.1f}%)"
            )
        typer.echo(f"Total staked: {market.total_staked}")
        children = child_markets(state, market.id)
        if children:
            typer.echo("Child markets: " + ", ".join(c.id for c in children))


@app.command("resolve")
def resolve(
    ctx: typer.Context,
    market_id: str = typer.Argument(..., help="Market id"),
    winning_outcome_id: str = typer.Argument(..., help="Winning outcome id"),
) -> None:
    """Resolve a market (admin only; pass --caller)."""
    with open_ledger(ctx) as (_, contract):
        try:
            contract.execute_operation(ResolveMarket(market_id=market_id, winning_outcome_id=winning_outcome_id))
        except LedgerError as e:
            fail(e)
    typer.echo(f"Resolved {market_id}: winner {winning_outcome_id}")
