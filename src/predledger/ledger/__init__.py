"""Market/bet accounting and settlement engine."""

from predledger.ledger.contract import LedgerContract
from predledger.ledger.runtime import LocalRuntime, Runtime, now_micros
from predledger.ledger.settlement import compute_payout

__all__ = ["LedgerContract", "LocalRuntime", "Runtime", "compute_payout", "now_micros"]
