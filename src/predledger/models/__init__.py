"""Ledger schema (Pydantic) - Market, Outcome, Bet, operations and messages."""

from predledger.models.bet import Bet, BetStatus
from predledger.models.market import U64_MAX, Market, MarketCategory, MarketStatus, Outcome
from predledger.models.operations import (
    ClaimWinnings,
    CreateMarket,
    InstantiationArgument,
    MarketResolved,
    Message,
    Operation,
    OperationResult,
    PlaceBet,
    ResolveMarket,
    parse_operation,
)

__all__ = [
    "U64_MAX",
    "Market",
    "MarketCategory",
    "MarketStatus",
    "Outcome",
    "Bet",
    "BetStatus",
    "CreateMarket",
    "PlaceBet",
    "ResolveMarket",
    "ClaimWinnings",
    "Operation",
    "OperationResult",
    "MarketResolved",
    "Message",
    "InstantiationArgument",
    "parse_operation",
]
