"""CreateMarket and market lookup."""

import pytest

from conftest import HOUR
from predledger.errors import InvalidExpiryTime, InvalidOutcomeCount, MarketNotFound
from predledger.ledger.registry import get_market
from predledger.models import CreateMarket, MarketCategory, MarketStatus


def test_create_market_builds_outcomes(ledger):
    market_id = ledger.create_market(outcomes=["Yes", "No", "Maybe"], category=MarketCategory.TECH)
    assert market_id == "id_1"
    market = get_market(ledger.state, market_id)
    assert [o.id for o in market.outcomes] == ["id_1_0", "id_1_1", "id_1_2"]
    assert [o.name for o in market.outcomes] == ["Yes", "No", "Maybe"]
    assert all(o.total_staked == 0 for o in market.outcomes)
    assert market.total_staked == 0
    assert market.status == MarketStatus.ACTIVE
    assert market.winning_outcome_id is None
    assert market.category == MarketCategory.TECH
    assert market.expiry_time == ledger.now + HOUR


def test_create_market_without_caller(ledger):
    op = CreateMarket(question="q", outcome_names=["a", "b"], expiry_time=ledger.now + 1)
    result = ledger.contract(None).execute_operation(op)
    assert result.market_id == "id_1"


def test_duplicate_names_and_questions_allowed(ledger):
    first = ledger.create_market(outcomes=["Same", "Same"], question="Dup?")
    second = ledger.create_market(outcomes=["Same", "Same"], question="Dup?")
    assert first != second
    assert len(ledger.state.list_markets()) == 2


def test_parent_id_is_stored(ledger):
    parent = ledger.create_market()
    child = ledger.create_market(parent_id=parent)
    assert get_market(ledger.state, child).parent_id == parent


@pytest.mark.parametrize("names", [[], ["Only"]])
def test_fewer_than_two_outcomes_fails(ledger, names):
    op = CreateMarket(question="q", outcome_names=names, expiry_time=ledger.now + HOUR)
    with pytest.raises(InvalidOutcomeCount):
        ledger.contract("creator").execute_operation(op)
    assert ledger.state.list_markets() == []


@pytest.mark.parametrize("delta", [0, -1, -HOUR])
def test_expiry_not_in_future_fails(ledger, delta):
    op = CreateMarket(question="q", outcome_names=["a", "b"], expiry_time=ledger.now + delta)
    with pytest.raises(InvalidExpiryTime):
        ledger.contract("creator").execute_operation(op)


def test_failed_create_does_not_consume_an_id(ledger):
    with pytest.raises(InvalidOutcomeCount):
        ledger.create_market(outcomes=["a"])
    assert ledger.create_market() == "id_1"


def test_get_market_not_found(ledger):
    with pytest.raises(MarketNotFound) as exc:
        get_market(ledger.state, "id_404")
    assert exc.value.market_id == "id_404"
