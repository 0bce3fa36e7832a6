"""DuckDB-backed keyed persistence: registers, markets, bet indices, balances."""

from predledger.storage.accounts import AccountBook
from predledger.storage.db import get_connection, init_schema
from predledger.storage.state import LedgerState

__all__ = ["AccountBook", "LedgerState", "get_connection", "init_schema"]
