"""Read-side views: odds, children, payout preview, bet status, leaderboard."""

from predledger.ledger.queries import (
    bet_payout,
    bet_status,
    child_markets,
    filter_markets,
    leaderboard,
    market_odds,
    potential_payout,
)
from predledger.models import BetStatus, ClaimWinnings, MarketCategory, MarketStatus, ResolveMarket


def test_market_odds(ledger):
    market_id = ledger.create_market()
    ledger.bet("alice", market_id, "id_1_0", 1000)
    ledger.bet("bob", market_id, "id_1_1", 3000)
    odds = market_odds(ledger.state.get_market(market_id))
    assert odds["id_1_0"] == {"odds": 4.0, "probability": 25.0}
    assert odds["id_1_1"]["probability"] == 75.0


def test_child_markets(ledger):
    parent = ledger.create_market()
    a = ledger.create_market(parent_id=parent)
    ledger.create_market()
    b = ledger.create_market(parent_id=parent)
    assert [m.id for m in child_markets(ledger.state, parent)] == [a, b]
    assert child_markets(ledger.state, a) == []


def test_filter_markets(ledger):
    ledger.create_market(category=MarketCategory.SPORTS)
    crypto = ledger.create_market(category=MarketCategory.CRYPTO)
    ledger.contract("admin").execute_operation(ResolveMarket(market_id=crypto, winning_outcome_id=f"{crypto}_0"))
    markets = ledger.state.list_markets()
    assert [m.id for m in filter_markets(markets, category=MarketCategory.CRYPTO)] == [crypto]
    assert len(filter_markets(markets, status=MarketStatus.ACTIVE)) == 1
    assert len(filter_markets(markets)) == 2


def test_potential_payout_includes_the_new_stake(ledger):
    market_id = ledger.create_market()
    market = ledger.state.get_market(market_id)
    # Empty pool: stake comes straight back
    assert potential_payout(market, "id_1_0", 100) == 100
    ledger.bet("alice", market_id, "id_1_0", 900)
    ledger.bet("bob", market_id, "id_1_1", 3000)
    market = ledger.state.get_market(market_id)
    assert potential_payout(market, "id_1_0", 100) == 100 * 4000 // 1000
    assert potential_payout(market, "missing", 100) == 0
    assert potential_payout(market, "id_1_0", 0) == 0


def test_bet_status_and_payout(ledger):
    market_id = ledger.create_market()
    ledger.bet("alice", market_id, "id_1_0", 100)
    ledger.bet("bob", market_id, "id_1_1", 300)
    alice_bet, bob_bet = ledger.state.bets_for_market(market_id)
    market = ledger.state.get_market(market_id)
    assert bet_status(alice_bet, market) == BetStatus.PENDING
    assert bet_payout(alice_bet, market) == 0

    ledger.contract("admin").execute_operation(ResolveMarket(market_id=market_id, winning_outcome_id="id_1_0"))
    market = ledger.state.get_market(market_id)
    assert bet_status(alice_bet, market) == BetStatus.WON
    assert bet_status(bob_bet, market) == BetStatus.LOST
    assert bet_payout(alice_bet, market) == 400
    assert bet_payout(bob_bet, market) == 0


def test_leaderboard(ledger):
    m1 = ledger.create_market()
    ledger.bet("alice", m1, f"{m1}_0", 100)
    ledger.bet("bob", m1, f"{m1}_1", 300)
    ledger.bet("carol", m1, f"{m1}_0", 100)
    ledger.contract("admin").execute_operation(ResolveMarket(market_id=m1, winning_outcome_id=f"{m1}_0"))
    m2 = ledger.create_market()
    ledger.bet("dave", m2, f"{m2}_0", 5000)  # unresolved: volume only

    entries = leaderboard(ledger.state)
    by_owner = {e.owner: e for e in entries}
    assert by_owner["alice"].total_profit == 150
    assert by_owner["alice"].win_rate == 100.0
    assert by_owner["bob"].total_profit == -300
    assert by_owner["bob"].win_rate == 0.0
    assert by_owner["dave"].total_profit == 0
    assert by_owner["dave"].volume == 5000
    assert [e.owner for e in entries] == ["alice", "carol", "dave", "bob"]
    assert [e.rank for e in entries] == [1, 2, 3, 4]
    assert len(leaderboard(ledger.state, limit=2)) == 2


def test_leaderboard_profit_includes_unclaimed_winnings(ledger):
    market_id = ledger.create_market()
    ledger.bet("alice", market_id, f"{market_id}_0", 100)
    ledger.bet("bob", market_id, f"{market_id}_1", 300)
    ledger.contract("admin").execute_operation(ResolveMarket(market_id=market_id, winning_outcome_id=f"{market_id}_0"))
    before = {e.owner: e.total_profit for e in leaderboard(ledger.state)}
    ledger.contract("alice").execute_operation(ClaimWinnings(market_id=market_id))
    after = {e.owner: e.total_profit for e in leaderboard(ledger.state)}
    assert before == after == {"alice": 300, "bob": -300}
