"""Market registry: create markets and their outcomes, look markets up."""

from __future__ import annotations

import structlog

from predledger.errors import InvalidExpiryTime, InvalidOutcomeCount, MarketNotFound
from predledger.ledger.runtime import Runtime
from predledger.models import Market, MarketCategory, MarketStatus, Outcome
from predledger.storage.state import LedgerState

log = structlog.get_logger(__name__)


def create_market(
    state: LedgerState,
    runtime: Runtime,
    question: str,
    outcome_names: list[str],
    expiry_time: int,
    category: MarketCategory = MarketCategory.OTHER,
    parent_id: str | None = None,
) -> str:
    """Create an Active market with zero stakes. Outcome ids are ``<market_id>_<index>``."""
    if len(outcome_names) < 2:
        raise InvalidOutcomeCount()
    if expiry_time <= runtime.system_time():
        raise InvalidExpiryTime()

    market_id = state.generate_id()
    outcomes = [
        Outcome(id=f"{market_id}_{idx}", name=name, total_staked=0)
        for idx, name in enumerate(outcome_names)
    ]
    market = Market(
        id=market_id,
        question=question,
        outcomes=outcomes,
        total_staked=0,
        status=MarketStatus.ACTIVE,
        expiry_time=expiry_time,
        winning_outcome_id=None,
        parent_id=parent_id,
        category=category,
    )
    state.put_market(market)
    log.info("market_created", market_id=market_id, outcomes=len(outcomes), category=category.value, parent_id=parent_id)
    return market_id


def get_market(state: LedgerState, market_id: str) -> Market:
    market = state.get_market(market_id)
    if market is None:
        raise MarketNotFound(market_id)
    return market
