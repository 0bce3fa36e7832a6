"""DuckDB connection and schema init."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import duckdb

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

MEMORY = ":memory:"

SCHEMA_SQL = """
-- Insertion order for markets (map iteration follows creation)
CREATE SEQUENCE IF NOT EXISTS market_seq START 1;

-- Singleton registers: admin, id_counter
CREATE TABLE IF NOT EXISTS registers (
    name            VARCHAR PRIMARY KEY,
    value           JSON NOT NULL
);

-- Markets by id (payload is the serialized Market)
CREATE TABLE IF NOT EXISTS markets (
    market_id       VARCHAR PRIMARY KEY,
    seq             BIGINT NOT NULL DEFAULT nextval('market_seq'),
    payload         JSON NOT NULL
);

-- Bet lists keyed by owner (payload is a JSON array of Bet)
CREATE TABLE IF NOT EXISTS bets_by_owner (
    owner           VARCHAR PRIMARY KEY,
    payload         JSON NOT NULL
);

-- Bet lists keyed by market (same bets, denormalized)
CREATE TABLE IF NOT EXISTS bets_by_market (
    market_id       VARCHAR PRIMARY KEY,
    payload         JSON NOT NULL
);

-- Account balances for stakes, escrow and payouts
CREATE TABLE IF NOT EXISTS balances (
    account         VARCHAR PRIMARY KEY,
    amount          HUGEINT NOT NULL
);
"""


def get_connection(db_path: str | Path, read_only: bool = False) -> DuckDBPyConnection:
    """Return a DuckDB connection. Caller must close or use as context manager.
    Pass ":memory:" for an isolated in-process database (tests)."""
    if str(db_path) == MEMORY:
        return duckdb.connect(MEMORY)
    path = Path(db_path)
    if not read_only:
        path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path), read_only=read_only)


def init_schema(conn: DuckDBPyConnection) -> None:
    """Create tables and sequences if they do not exist."""
    for stmt in SCHEMA_SQL.split(";"):
        stmt = stmt.strip()
        if stmt:
            try:
                conn.execute(stmt)
            except duckdb.Error as e:
                if "already exists" not in str(e).lower():
                    raise
