"""Ledger error taxonomy.

Every write operation either succeeds or raises exactly one ``LedgerError``.
Storage failures (``duckdb.Error``) and decode failures (pydantic
``ValidationError``) are not wrapped and propagate unchanged.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base for all ledger errors. ``code`` is machine-readable, the message human-readable."""

    code = "ledger_error"
    message = "Ledger error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


# --- Categories ---
class InvalidInputError(LedgerError):
    """Caller supplied malformed input."""


class NotFoundError(LedgerError):
    """Referenced entity does not exist or does not match the query."""


class StateConflictError(LedgerError):
    """Operation is valid in isolation but not in the current entity state."""


class AuthorizationError(LedgerError):
    """Missing or non-admin caller for a gated operation."""


class FundsError(LedgerError):
    """Value cannot be moved."""


# --- Validation ---
class InvalidOutcomeCount(InvalidInputError):
    code = "invalid_outcome_count"
    message = "Invalid market: must have at least 2 outcomes"


class InvalidExpiryTime(InvalidInputError):
    code = "invalid_expiry_time"
    message = "Invalid expiry time: must be in the future"


class InvalidBetAmount(InvalidInputError):
    code = "invalid_bet_amount"
    message = "Invalid bet amount: must be greater than 0"


# --- Not found ---
class MarketNotFound(NotFoundError):
    code = "market_not_found"

    def __init__(self, market_id: str) -> None:
        self.market_id = market_id
        super().__init__(f"Market not found: {market_id}")


class OutcomeNotFound(NotFoundError):
    code = "outcome_not_found"

    def __init__(self, outcome_id: str) -> None:
        self.outcome_id = outcome_id
        super().__init__(f"Outcome not found: {outcome_id}")


class BetNotFound(NotFoundError):
    code = "bet_not_found"
    message = "Bet not found for this market"


# --- State conflict ---
class MarketNotActive(StateConflictError):
    code = "market_not_active"
    message = "Market is not in Active status"


class MarketExpired(StateConflictError):
    code = "market_expired"
    message = "Market has already expired"


class MarketNotResolved(StateConflictError):
    code = "market_not_resolved"
    message = "Market is not in Resolved status"


class AlreadyClaimed(StateConflictError):
    code = "already_claimed"
    message = "Bet already claimed"


class AlreadyInstantiated(StateConflictError):
    code = "already_instantiated"
    message = "Ledger already instantiated: admin is set"


# --- Authorization ---
class Unauthorized(AuthorizationError):
    code = "unauthorized"
    message = "Unauthorized: only admin can perform this operation"


# --- Funds ---
class InsufficientFunds(FundsError):
    code = "insufficient_funds"

    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(f"Insufficient funds: required {required}, available {available}")
