"""Settlement engine: admin resolution and pari-mutuel claims.

Winners split the whole pool in proportion to their share of the winning
outcome's stake. Payouts are floored, so the sum of all payouts for a market
can be less than ``total_staked``; the remainder stays in escrow.
"""

from __future__ import annotations

import structlog

from predledger.errors import (
    AlreadyClaimed,
    BetNotFound,
    InsufficientFunds,
    MarketNotActive,
    MarketNotResolved,
    OutcomeNotFound,
)
from predledger.ledger.auth import require_admin, require_signer
from predledger.ledger.registry import get_market
from predledger.ledger.runtime import Runtime
from predledger.models import Bet, MarketResolved, MarketStatus
from predledger.storage.state import LedgerState

log = structlog.get_logger(__name__)


def compute_payout(bet_amount: int, market_total: int, winning_total: int) -> int:
    """floor(bet_amount * market_total / winning_total), or 0 when nothing is staked on the winner."""
    if winning_total <= 0:
        return 0
    return bet_amount * market_total // winning_total


def resolve_market(state: LedgerState, runtime: Runtime, market_id: str, winning_outcome_id: str) -> MarketResolved:
    """Active -> Resolved, admin only. Returns the advisory resolution message."""
    require_admin(state, runtime)
    market = get_market(state, market_id)
    if market.status != MarketStatus.ACTIVE:
        raise MarketNotActive()
    if market.outcome(winning_outcome_id) is None:
        raise OutcomeNotFound(winning_outcome_id)

    market.status = MarketStatus.RESOLVED
    market.winning_outcome_id = winning_outcome_id
    state.put_market(market)
    log.info("market_resolved", market_id=market_id, winning_outcome_id=winning_outcome_id, total_staked=market.total_staked)
    return MarketResolved(market_id=market_id, winning_outcome_id=winning_outcome_id)


def _first_unclaimed_winning_bet(bets: list[Bet], market_id: str, winning_outcome_id: str) -> Bet | None:
    for bet in bets:
        if bet.market_id == market_id and bet.outcome_id == winning_outcome_id and not bet.claimed:
            return bet
    return None


def claim_winnings(state: LedgerState, runtime: Runtime, market_id: str) -> int:
    """Settle the caller's first unclaimed winning bet on the market. Returns the payout."""
    caller = require_signer(runtime)
    market = get_market(state, market_id)
    if market.status != MarketStatus.RESOLVED or market.winning_outcome_id is None:
        raise MarketNotResolved()
    winning_outcome_id = market.winning_outcome_id

    bet = _first_unclaimed_winning_bet(state.bets_for_owner(caller), market_id, winning_outcome_id)
    if bet is None:
        raise BetNotFound()
    if bet.claimed:
        raise AlreadyClaimed()

    winning_outcome = market.winning_outcome()
    winning_total = winning_outcome.total_staked if winning_outcome is not None else 0
    payout = compute_payout(bet.amount, market.total_staked, winning_total)
    if payout == 0:
        raise InsufficientFunds(required=1, available=0)

    runtime.transfer(runtime.escrow_account, caller, payout)

    bet.claimed = True
    state.update_bet(bet)
    log.info("winnings_claimed", bet_id=bet.id, market_id=market_id, owner=caller, payout=payout)
    return payout
