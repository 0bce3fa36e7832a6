"""Account balances - the value-transfer backing used by the local runtime."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from predledger.errors import InsufficientFunds

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

log = structlog.get_logger(__name__)


class AccountBook:
    """Balances per account in the ledger database, so transfers commit with the operation."""

    def __init__(self, conn: DuckDBPyConnection):
        self.conn = conn

    def balance(self, account: str) -> int:
        row = self.conn.execute("SELECT amount FROM balances WHERE account = ?", [account]).fetchone()
        return int(row[0]) if row else 0

    def _set_balance(self, account: str, amount: int) -> None:
        self.conn.execute(
            """
            INSERT INTO balances (account, amount) VALUES (?, ?)
            ON CONFLICT (account) DO UPDATE SET amount = excluded.amount
            """,
            [account, amount],
        )

    def deposit(self, account: str, amount: int) -> int:
        """Credit an account from outside the ledger (faucet / funding). Returns new balance."""
        if amount <= 0:
            raise ValueError("deposit amount must be positive")
        new_balance = self.balance(account) + amount
        self._set_balance(account, new_balance)
        return new_balance

    def transfer(self, source: str, destination: str, amount: int) -> None:
        """Move amount from source to destination. Raises InsufficientFunds if source is short."""
        available = self.balance(source)
        if available < amount:
            raise InsufficientFunds(required=amount, available=available)
        self._set_balance(source, available - amount)
        self._set_balance(destination, self.balance(destination) + amount)
        log.debug("transfer", source=source, destination=destination, amount=amount)

    def list_balances(self) -> list[dict]:
        rows = self.conn.execute("SELECT account, amount FROM balances ORDER BY amount DESC, account").fetchall()
        return [{"account": r[0], "amount": int(r[1])} for r in rows]
