"""Market, Outcome - ledger entities."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

U64_MAX = 2**64 - 1


class MarketStatus(str, Enum):
    ACTIVE = "Active"
    RESOLVED = "Resolved"
    EXPIRED = "Expired"  # never entered by any operation


class MarketCategory(str, Enum):
    CRYPTO = "Crypto"
    POLITICS = "Politics"
    ECONOMICS = "Economics"
    TECH = "Tech"
    SPORTS = "Sports"
    OTHER = "Other"


class Outcome(BaseModel):
    """One possible answer to a market's question. ``id`` is ``<market_id>_<index>``."""

    id: str
    name: str
    total_staked: int = Field(0, ge=0, le=U64_MAX)


class Market(BaseModel):
    """A question with mutually exclusive outcomes and a pooled stake."""

    id: str
    question: str
    outcomes: list[Outcome] = Field(..., min_length=2)
    total_staked: int = Field(0, ge=0, le=U64_MAX)
    status: MarketStatus = MarketStatus.ACTIVE
    expiry_time: int = Field(..., ge=0, le=U64_MAX)  # epoch micros
    winning_outcome_id: str | None = None
    parent_id: str | None = None
    category: MarketCategory = MarketCategory.OTHER

    def outcome(self, outcome_id: str) -> Outcome | None:
        for o in self.outcomes:
            if o.id == outcome_id:
                return o
        return None

    def winning_outcome(self) -> Outcome | None:
        if self.winning_outcome_id is None:
            return None
        return self.outcome(self.winning_outcome_id)

    def calculate_odds(self, outcome_id: str) -> float:
        """Decimal odds for display: total_staked / outcome.total_staked (0.0 if no stake)."""
        o = self.outcome(outcome_id)
        if o is None or o.total_staked == 0:
            return 0.0
        return self.total_staked / o.total_staked

    def implied_probability(self, outcome_id: str) -> float:
        """Share of the pool on this outcome, in percent. Even split while the pool is empty."""
        o = self.outcome(outcome_id)
        if o is None:
            return 0.0
        if self.total_staked == 0:
            return 100.0 / len(self.outcomes)
        return o.total_staked / self.total_staked * 100.0

    def is_expired(self, now: int) -> bool:
        return now >= self.expiry_time
