"""Ledger state over DuckDB: registers (admin, id counter), markets, dual-indexed bets."""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator

from pydantic import TypeAdapter

from predledger.errors import BetNotFound
from predledger.models import Bet, Market

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

ADMIN = "admin"
ID_COUNTER = "id_counter"

_bet_list = TypeAdapter(list[Bet])


def _bets_json(bets: list[Bet]) -> str:
    return json.dumps([b.model_dump(mode="json") for b in bets])


class LedgerState:
    """Explicit ledger state bound to one connection. Every write goes through these methods."""

    def __init__(self, conn: DuckDBPyConnection):
        self.conn = conn
        self._in_transaction = False

    @contextmanager
    def transaction(self) -> Iterator[LedgerState]:
        """Apply all writes in the block or none. Nested blocks join the outer transaction."""
        if self._in_transaction:
            yield self
            return
        self.conn.begin()
        self._in_transaction = True
        try:
            yield self
        except BaseException:
            self.conn.rollback()
            raise
        else:
            self.conn.commit()
        finally:
            self._in_transaction = False

    # --- Registers ---
    def _get_register(self, name: str) -> Any:
        row = self.conn.execute("SELECT value FROM registers WHERE name = ?", [name]).fetchone()
        if not row:
            return None
        return json.loads(row[0]) if isinstance(row[0], str) else row[0]

    def _set_register(self, name: str, value: Any) -> None:
        self.conn.execute(
            """
            INSERT INTO registers (name, value) VALUES (?, ?)
            ON CONFLICT (name) DO UPDATE SET value = excluded.value
            """,
            [name, json.dumps(value)],
        )

    def get_admin(self) -> str | None:
        return self._get_register(ADMIN)

    def set_admin(self, owner: str) -> None:
        self._set_register(ADMIN, owner)

    def id_counter(self) -> int:
        return int(self._get_register(ID_COUNTER) or 0)

    def set_id_counter(self, value: int) -> None:
        self._set_register(ID_COUNTER, value)

    def generate_id(self) -> str:
        """Increment the shared counter and return ``id_<new value>``. Markets and bets share it."""
        next_value = self.id_counter() + 1
        self.set_id_counter(next_value)
        return f"id_{next_value}"

    # --- Markets ---
    def get_market(self, market_id: str) -> Market | None:
        row = self.conn.execute("SELECT payload FROM markets WHERE market_id = ?", [market_id]).fetchone()
        if not row:
            return None
        return Market.model_validate_json(row[0])

    def put_market(self, market: Market) -> None:
        """Insert or replace a market (add and update share this path)."""
        self.conn.execute(
            """
            INSERT INTO markets (market_id, payload) VALUES (?, ?)
            ON CONFLICT (market_id) DO UPDATE SET payload = excluded.payload
            """,
            [market.id, market.model_dump_json()],
        )

    def list_markets(self) -> list[Market]:
        rows = self.conn.execute("SELECT payload FROM markets ORDER BY seq").fetchall()
        return [Market.model_validate_json(r[0]) for r in rows]

    # --- Bets ---
    def bets_for_owner(self, owner: str) -> list[Bet]:
        row = self.conn.execute("SELECT payload FROM bets_by_owner WHERE owner = ?", [owner]).fetchone()
        return _bet_list.validate_json(row[0]) if row else []

    def bets_for_market(self, market_id: str) -> list[Bet]:
        row = self.conn.execute("SELECT payload FROM bets_by_market WHERE market_id = ?", [market_id]).fetchone()
        return _bet_list.validate_json(row[0]) if row else []

    def list_owners(self) -> list[str]:
        rows = self.conn.execute("SELECT owner FROM bets_by_owner ORDER BY owner").fetchall()
        return [r[0] for r in rows]

    def _put_owner_bets(self, owner: str, bets: list[Bet]) -> None:
        self.conn.execute(
            """
            INSERT INTO bets_by_owner (owner, payload) VALUES (?, ?)
            ON CONFLICT (owner) DO UPDATE SET payload = excluded.payload
            """,
            [owner, _bets_json(bets)],
        )

    def _put_market_bets(self, market_id: str, bets: list[Bet]) -> None:
        self.conn.execute(
            """
            INSERT INTO bets_by_market (market_id, payload) VALUES (?, ?)
            ON CONFLICT (market_id) DO UPDATE SET payload = excluded.payload
            """,
            [market_id, _bets_json(bets)],
        )

    def add_bet(self, bet: Bet) -> None:
        """Append the bet to both the owner list and the market list."""
        with self.transaction():
            owner_bets = self.bets_for_owner(bet.owner)
            owner_bets.append(bet)
            self._put_owner_bets(bet.owner, owner_bets)

            market_bets = self.bets_for_market(bet.market_id)
            market_bets.append(bet)
            self._put_market_bets(bet.market_id, market_bets)

    def update_bet(self, bet: Bet) -> None:
        """Replace the bet with the same id in both indices. Raises BetNotFound if either copy is missing."""
        with self.transaction():
            owner_bets = self.bets_for_owner(bet.owner)
            market_bets = self.bets_for_market(bet.market_id)
            owner_pos = next((i for i, b in enumerate(owner_bets) if b.id == bet.id), None)
            market_pos = next((i for i, b in enumerate(market_bets) if b.id == bet.id), None)
            if owner_pos is None or market_pos is None:
                raise BetNotFound()
            owner_bets[owner_pos] = bet
            market_bets[market_pos] = bet
            self._put_owner_bets(bet.owner, owner_bets)
            self._put_market_bets(bet.market_id, market_bets)
