"""Operation dispatcher - one transaction per operation, exhaustive over the closed unions."""

from __future__ import annotations

import structlog

from predledger.errors import AlreadyInstantiated
from predledger.ledger.bets import place_bet
from predledger.ledger.registry import create_market
from predledger.ledger.runtime import Runtime
from predledger.ledger.settlement import claim_winnings, resolve_market
from predledger.models import (
    ClaimWinnings,
    CreateMarket,
    InstantiationArgument,
    MarketResolved,
    Message,
    Operation,
    OperationResult,
    PlaceBet,
    ResolveMarket,
)
from predledger.storage.state import LedgerState

log = structlog.get_logger(__name__)


class LedgerContract:
    """Executes write operations against a LedgerState with a given Runtime.

    Each call to ``execute_operation`` commits all of its state changes (including
    transfers in the account book) or none of them.
    """

    def __init__(self, state: LedgerState, runtime: Runtime):
        self.state = state
        self.runtime = runtime

    def instantiate(self, argument: InstantiationArgument) -> None:
        """Set the admin and reset the id counter. Allowed exactly once per state."""
        with self.state.transaction():
            if self.state.get_admin() is not None:
                raise AlreadyInstantiated()
            self.state.set_admin(argument.admin)
            self.state.set_id_counter(0)
        log.info("ledger_instantiated", admin=argument.admin)

    def execute_operation(self, operation: Operation) -> OperationResult:
        """Run one operation to completion. Ledger errors propagate after rollback."""
        outbox: list[Message] = []
        try:
            with self.state.transaction():
                result = self._dispatch(operation, outbox)
        except Exception as e:
            log.warning(
                "operation_failed",
                operation=getattr(operation, "type", type(operation).__name__),
                caller=self.runtime.authenticated_signer(),
                error=getattr(e, "code", type(e).__name__),
                detail=str(e),
            )
            raise
        # Notices go out only after commit
        for message in outbox:
            self.runtime.notify(message)
        return result

    def _dispatch(self, operation: Operation, outbox: list[Message]) -> OperationResult:
        if isinstance(operation, CreateMarket):
            market_id = create_market(
                self.state,
                self.runtime,
                operation.question,
                operation.outcome_names,
                operation.expiry_time,
                operation.category,
                operation.parent_id,
            )
            return OperationResult(kind=operation.type, market_id=market_id)
        if isinstance(operation, PlaceBet):
            bet_id = place_bet(self.state, self.runtime, operation.market_id, operation.outcome_id, operation.amount)
            return OperationResult(kind=operation.type, market_id=operation.market_id, bet_id=bet_id)
        if isinstance(operation, ResolveMarket):
            message = resolve_market(self.state, self.runtime, operation.market_id, operation.winning_outcome_id)
            outbox.append(message)
            return OperationResult(kind=operation.type, market_id=operation.market_id)
        if isinstance(operation, ClaimWinnings):
            payout = claim_winnings(self.state, self.runtime, operation.market_id)
            return OperationResult(kind=operation.type, market_id=operation.market_id, payout=payout)
        raise TypeError(f"unknown operation: {type(operation).__name__}")

    def execute_message(self, message: Message) -> None:
        """Handle a cross-chain message. Advisory only: no state changes."""
        if isinstance(message, MarketResolved):
            log.info("message_received", kind=message.type, market_id=message.market_id, winning_outcome_id=message.winning_outcome_id)
            return
        raise TypeError(f"unknown message: {type(message).__name__}")
