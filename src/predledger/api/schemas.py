"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from pydantic import BaseModel, Field

from predledger.models import Bet, BetStatus, Market


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. market_not_found, unauthorized")


# --- Admin ---
class AdminResponse(BaseModel):
    admin: str | None


# --- Markets ---
class OutcomeOdds(BaseModel):
    odds: float = Field(..., description="Decimal odds: pool / outcome stake (0 when unstaked)")
    probability: float = Field(..., description="Share of pool on this outcome, percent")


class MarketDetailResponse(BaseModel):
    market: Market
    odds: dict[str, OutcomeOdds]
    expired: bool
    child_market_ids: list[str] = Field(default_factory=list)


class MarketsListResponse(BaseModel):
    markets: list[Market]
    total: int


# --- Bets ---
class BetView(BaseModel):
    bet: Bet
    status: BetStatus
    payout: int = Field(0, description="Payout owed or paid if the bet won")


class BetsListResponse(BaseModel):
    bets: list[BetView]
    total: int


class PayoutPreviewResponse(BaseModel):
    market_id: str
    outcome_id: str
    amount: int
    potential_payout: int


# --- Leaderboard ---
class LeaderboardItem(BaseModel):
    rank: int
    owner: str
    total_profit: int
    win_rate: float
    volume: int
    bets: int


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardItem]


# --- Accounts ---
class BalanceResponse(BaseModel):
    account: str
    balance: int


class DepositRequest(BaseModel):
    amount: int = Field(..., gt=0)
