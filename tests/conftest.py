"""Shared fixtures: isolated in-memory ledger, controllable clock and caller."""

from __future__ import annotations

import pytest

from predledger.ledger import LedgerContract, LocalRuntime
from predledger.models import CreateMarket, InstantiationArgument, MarketCategory, PlaceBet
from predledger.storage import AccountBook, LedgerState, get_connection, init_schema

NOW = 1_700_000_000_000_000  # epoch micros
HOUR = 3_600_000_000
ADMIN = "admin"
ESCROW = "escrow"


class Harness:
    """One ledger database with a fixed clock; hands out contracts per caller."""

    def __init__(self, state: LedgerState, accounts: AccountBook, now: int = NOW):
        self.state = state
        self.accounts = accounts
        self.now = now
        self.notices = []

    def contract(self, caller: str | None = None) -> LedgerContract:
        runtime = LocalRuntime(
            self.accounts,
            signer=caller,
            escrow_account=ESCROW,
            clock=lambda: self.now,
            listener=self.notices.append,
        )
        return LedgerContract(self.state, runtime)

    def create_market(self, outcomes: list[str] | None = None, expiry_time: int | None = None, **kwargs) -> str:
        op = CreateMarket(
            question=kwargs.pop("question", "Will it happen?"),
            outcome_names=outcomes or ["Yes", "No"],
            expiry_time=expiry_time if expiry_time is not None else self.now + HOUR,
            category=kwargs.pop("category", MarketCategory.OTHER),
            **kwargs,
        )
        return self.contract("creator").execute_operation(op).market_id

    def bet(self, caller: str, market_id: str, outcome_id: str, amount: int) -> str:
        op = PlaceBet(market_id=market_id, outcome_id=outcome_id, amount=amount)
        return self.contract(caller).execute_operation(op).bet_id


@pytest.fixture
def conn():
    c = get_connection(":memory:")
    init_schema(c)
    yield c
    c.close()


@pytest.fixture
def state(conn):
    return LedgerState(conn)


@pytest.fixture
def accounts(conn):
    return AccountBook(conn)


@pytest.fixture
def ledger(state, accounts):
    """Instantiated ledger (admin = "admin") with funded bettors."""
    h = Harness(state, accounts)
    h.contract(ADMIN).instantiate(InstantiationArgument(admin=ADMIN))
    for owner in ("alice", "bob", "carol", "dave"):
        accounts.deposit(owner, 10_000)
    return h
