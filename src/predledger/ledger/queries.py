"""Read-side views over ledger state: odds, market tree, payout preview, leaderboard."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from predledger.ledger.settlement import compute_payout
from predledger.models import Bet, BetStatus, Market, MarketCategory, MarketStatus
from predledger.storage.state import LedgerState


def market_odds(market: Market) -> dict[str, dict[str, float]]:
    """outcome_id -> {odds (decimal), probability (percent of pool)}."""
    return {
        o.id: {
            "odds": market.calculate_odds(o.id),
            "probability": market.implied_probability(o.id),
        }
        for o in market.outcomes
    }


def child_markets(state: LedgerState, parent_id: str) -> list[Market]:
    """Markets created with ``parent_id`` (cascading markets)."""
    return [m for m in state.list_markets() if m.parent_id == parent_id]


def filter_markets(
    markets: list[Market],
    category: MarketCategory | None = None,
    status: MarketStatus | None = None,
) -> list[Market]:
    return [
        m for m in markets
        if (category is None or m.category == category) and (status is None or m.status == status)
    ]


def potential_payout(market: Market, outcome_id: str, amount: int) -> int:
    """Payout if a new bet of ``amount`` were placed now and this outcome won (no other bets after)."""
    o = market.outcome(outcome_id)
    if o is None or amount <= 0:
        return 0
    return compute_payout(amount, market.total_staked + amount, o.total_staked + amount)


def bet_status(bet: Bet, market: Market) -> BetStatus:
    if market.status != MarketStatus.RESOLVED or market.winning_outcome_id is None:
        return BetStatus.PENDING
    return BetStatus.WON if bet.outcome_id == market.winning_outcome_id else BetStatus.LOST


def bet_payout(bet: Bet, market: Market) -> int:
    """Payout owed (or paid) for a bet; 0 unless it won."""
    if bet_status(bet, market) != BetStatus.WON:
        return 0
    winner = market.winning_outcome()
    return compute_payout(bet.amount, market.total_staked, winner.total_staked if winner else 0)


@dataclass
class LeaderboardEntry:
    rank: int
    owner: str
    total_profit: int
    win_rate: float
    volume: int
    bets: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "rank": self.rank,
            "owner": self.owner,
            "total_profit": self.total_profit,
            "win_rate": self.win_rate,
            "volume": self.volume,
            "bets": self.bets,
        }


def leaderboard(state: LedgerState, limit: int | None = None) -> list[LeaderboardEntry]:
    """Owners ranked by profit on resolved markets (payouts minus stakes), then volume."""
    markets = {m.id: m for m in state.list_markets()}
    entries: list[LeaderboardEntry] = []
    for owner in state.list_owners():
        bets = state.bets_for_owner(owner)
        volume = sum(b.amount for b in bets)
        profit = 0
        settled = 0
        won = 0
        for bet in bets:
            market = markets.get(bet.market_id)
            if market is None or market.status != MarketStatus.RESOLVED:
                continue
            settled += 1
            payout = bet_payout(bet, market)
            if bet_status(bet, market) == BetStatus.WON:
                won += 1
            profit += payout - bet.amount
        win_rate = round(won / settled * 100.0, 2) if settled else 0.0
        entries.append(
            LeaderboardEntry(rank=0, owner=owner, total_profit=profit, win_rate=win_rate, volume=volume, bets=len(bets))
        )
    entries.sort(key=lambda e: (-e.total_profit, -e.volume, e.owner))
    for i, e in enumerate(entries, start=1):
        e.rank = i
    return entries[:limit] if limit else entries
