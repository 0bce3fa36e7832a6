"""Write operations and cross-chain messages - closed tagged unions."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from predledger.models.market import U64_MAX, MarketCategory


class InstantiationArgument(BaseModel):
    """The admin who can resolve markets."""

    admin: str = Field(..., min_length=1)


# Outcome count, zero amount and past expiry are checked by the engine, not here.
class CreateMarket(BaseModel):
    type: Literal["create_market"] = "create_market"
    question: str
    outcome_names: list[str]
    expiry_time: int = Field(..., ge=0, le=U64_MAX)
    category: MarketCategory = MarketCategory.OTHER
    parent_id: str | None = None


class PlaceBet(BaseModel):
    type: Literal["place_bet"] = "place_bet"
    market_id: str
    outcome_id: str
    amount: int = Field(..., ge=0, le=U64_MAX)


class ResolveMarket(BaseModel):
    type: Literal["resolve_market"] = "resolve_market"
    market_id: str
    winning_outcome_id: str


class ClaimWinnings(BaseModel):
    type: Literal["claim_winnings"] = "claim_winnings"
    market_id: str


Operation = Annotated[
    Union[CreateMarket, PlaceBet, ResolveMarket, ClaimWinnings],
    Field(discriminator="type"),
]

_operation_adapter: TypeAdapter[Operation] = TypeAdapter(Operation)


def parse_operation(raw: dict[str, Any] | str | bytes) -> CreateMarket | PlaceBet | ResolveMarket | ClaimWinnings:
    """Parse an operation from a dict or JSON document (discriminated on ``type``)."""
    if isinstance(raw, (str, bytes)):
        return _operation_adapter.validate_json(raw)
    return _operation_adapter.validate_python(raw)


class MarketResolved(BaseModel):
    """Advisory notification that a market was resolved."""

    type: Literal["market_resolved"] = "market_resolved"
    market_id: str
    winning_outcome_id: str


Message = MarketResolved


class OperationResult(BaseModel):
    """Success result of one write operation."""

    kind: Literal["create_market", "place_bet", "resolve_market", "claim_winnings"]
    market_id: str
    bet_id: str | None = None
    payout: int | None = None
