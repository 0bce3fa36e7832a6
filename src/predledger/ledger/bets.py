"""Bet ledger: stake on an outcome, move the stake to escrow, record the bet in both indices."""

from __future__ import annotations

import structlog

from predledger.errors import InvalidBetAmount, MarketExpired, MarketNotActive, OutcomeNotFound
from predledger.ledger.auth import require_signer
from predledger.ledger.registry import get_market
from predledger.ledger.runtime import Runtime
from predledger.models import U64_MAX, Bet, MarketStatus
from predledger.storage.state import LedgerState

log = structlog.get_logger(__name__)


def place_bet(state: LedgerState, runtime: Runtime, market_id: str, outcome_id: str, amount: int) -> str:
    """Place a bet and return its id. Must run inside the operation transaction."""
    if amount == 0:
        raise InvalidBetAmount()
    caller = require_signer(runtime)

    market = get_market(state, market_id)
    if market.status != MarketStatus.ACTIVE:
        raise MarketNotActive()
    if runtime.system_time() >= market.expiry_time:
        raise MarketExpired()

    outcome = market.outcome(outcome_id)
    if outcome is None:
        raise OutcomeNotFound(outcome_id)

    if market.total_staked + amount > U64_MAX:
        raise InvalidBetAmount("Invalid bet amount: market stake would exceed 64 bits")

    outcome.total_staked += amount
    market.total_staked += amount

    runtime.transfer(None, runtime.escrow_account, amount)

    bet = Bet(
        id=state.generate_id(),
        owner=caller,
        market_id=market_id,
        outcome_id=outcome_id,
        amount=amount,
        claimed=False,
    )
    state.put_market(market)
    state.add_bet(bet)
    log.info("bet_placed", bet_id=bet.id, market_id=market_id, outcome_id=outcome_id, amount=amount, owner=caller)
    return bet.id
