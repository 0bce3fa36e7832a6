"""Bet - a caller's stake on one outcome of one market."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from predledger.models.market import U64_MAX


class BetStatus(str, Enum):
    """Derived for display; not stored."""

    PENDING = "Pending"
    WON = "Won"
    LOST = "Lost"


class Bet(BaseModel):
    id: str
    owner: str
    market_id: str
    outcome_id: str
    amount: int = Field(..., gt=0, le=U64_MAX)
    claimed: bool = False
