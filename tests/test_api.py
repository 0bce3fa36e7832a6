"""FastAPI front-end over a temporary ledger database."""

import duckdb
import pytest
from fastapi.testclient import TestClient

from predledger.api.main import create_app
from predledger.config import Settings
from predledger.ledger import LedgerContract
from predledger.ledger.runtime import now_micros

HOUR = 3_600_000_000


@pytest.fixture
def client(tmp_path):
    settings = Settings(storage={"db_path": str(tmp_path / "api.duckdb")}, ledger={"escrow_account": "pool"})
    with TestClient(create_app(settings)) as c:
        yield c


def _op(client, caller, **body):
    headers = {"X-Caller": caller} if caller else {}
    return client.post("/operations", json=body, headers=headers)


@pytest.fixture
def seeded(client):
    """Admin set via a direct instantiate, bettors funded, one market with two bets."""
    from predledger.ledger import LedgerContract, LocalRuntime
    from predledger.models import InstantiationArgument
    from predledger.storage import AccountBook, LedgerState, get_connection, init_schema

    settings = client.app.state.settings
    conn = get_connection(settings.db_path)
    try:
        init_schema(conn)
        state = LedgerState(conn)
        LedgerContract(state, LocalRuntime(AccountBook(conn))).instantiate(InstantiationArgument(admin="admin"))
    finally:
        conn.close()
    for owner in ("alice", "bob"):
        r = client.post(f"/accounts/{owner}/deposit", json={"amount": 1000}, headers={"X-Caller": "admin"})
        assert r.status_code == 200
    r = _op(
        client, "admin",
        type="create_market", question="Rain?", outcome_names=["Yes", "No"],
        expiry_time=now_micros() + HOUR, category="Tech",
    )
    assert r.status_code == 200
    assert _op(client, "alice", type="place_bet", market_id="id_1", outcome_id="id_1_0", amount=100).status_code == 200
    assert _op(client, "bob", type="place_bet", market_id="id_1", outcome_id="id_1_1", amount=300).status_code == 200
    return client


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_admin_before_init(client):
    assert client.get("/admin").json() == {"admin": None}


def test_read_markets_and_bets(seeded):
    assert seeded.get("/admin").json() == {"admin": "admin"}

    listing = seeded.get("/markets").json()
    assert listing["total"] == 1
    assert listing["markets"][0]["total_staked"] == 400
    assert seeded.get("/markets", params={"category": "Sports"}).json()["total"] == 0

    detail = seeded.get("/markets/id_1").json()
    assert detail["market"]["status"] == "Active"
    assert detail["odds"]["id_1_0"]["odds"] == 4.0
    assert detail["expired"] is False
    assert detail["child_market_ids"] == []

    bets = seeded.get("/markets/id_1/bets").json()
    assert bets["total"] == 2
    assert [b["status"] for b in bets["bets"]] == ["Pending", "Pending"]
    assert seeded.get("/owners/alice/bets").json()["bets"][0]["bet"]["id"] == "id_2"

    preview = seeded.get("/markets/id_1/payout", params={"outcome_id": "id_1_0", "amount": 100}).json()
    assert preview["potential_payout"] == 100 * 500 // 200

    assert seeded.get("/accounts/pool").json() == {"account": "pool", "balance": 400}


def test_resolve_and_claim(seeded):
    r = _op(seeded, "alice", type="resolve_market", market_id="id_1", winning_outcome_id="id_1_0")
    assert r.status_code == 403
    assert r.json()["code"] == "unauthorized"

    r = _op(seeded, "admin", type="resolve_market", market_id="id_1", winning_outcome_id="id_1_0")
    assert r.status_code == 200

    r = _op(seeded, "alice", type="claim_winnings", market_id="id_1")
    assert r.status_code == 200
    assert r.json()["payout"] == 400
    assert seeded.get("/accounts/alice").json()["balance"] == 1000 - 100 + 400

    r = _op(seeded, "alice", type="claim_winnings", market_id="id_1")
    assert r.status_code == 404
    assert r.json()["code"] == "bet_not_found"

    board = seeded.get("/leaderboard").json()["entries"]
    assert board[0]["owner"] == "alice"
    assert board[0]["total_profit"] == 300


def test_error_mapping(seeded):
    assert seeded.get("/markets/id_404").status_code == 404
    r = _op(seeded, "alice", type="place_bet", market_id="id_1", outcome_id="id_1_0", amount=0)
    assert r.status_code == 400
    assert r.json() == {"detail": "Invalid bet amount: must be greater than 0", "code": "invalid_bet_amount"}
    r = _op(seeded, None, type="place_bet", market_id="id_1", outcome_id="id_1_0", amount=1)
    assert r.status_code == 403
    r = _op(seeded, "alice", type="claim_winnings", market_id="id_1")
    assert r.status_code == 409
    r = _op(seeded, "alice", type="place_bet", market_id="id_1", outcome_id="id_1_0", amount=5000)
    assert r.status_code == 402
    r = _op(seeded, "alice", type="explode", market_id="id_1")
    assert r.status_code == 422


def test_deposit_requires_admin(seeded):
    r = seeded.post("/accounts/alice/deposit", json={"amount": 5}, headers={"X-Caller": "alice"})
    assert r.status_code == 403
    assert seeded.get("/accounts/alice").json()["balance"] == 900


def test_write_conflict_maps_to_409(client, monkeypatch):
    def conflict(self, operation):
        raise duckdb.TransactionException("Conflict on update")

    monkeypatch.setattr(LedgerContract, "execute_operation", conflict)
    r = _op(client, "alice", type="claim_winnings", market_id="id_1")
    assert r.status_code == 409
    assert r.json()["code"] == "transaction_conflict"
