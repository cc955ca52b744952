from dataclasses import replace
from datetime import date

import pytest

from loanquote.closing_costs import (
    CostContext,
    CostItemKind,
    closing_cost_breakdown,
    item_cost,
    total_item_costs,
)
from loanquote.engine import calculate_scenario
from loanquote.models import ClosingCostItem, default_scenario

CTX = CostContext(
    purchase_price=500000,
    interest_rate=6.5,
    property_tax_yearly=3600,
    home_insurance_yearly=1200,
    hoa_monthly=0,
    total_loan_amount=400000,
)


def _item(**kw):
    return ClosingCostItem(**kw)


def test_unknown_ids_are_generic():
    assert CostItemKind.for_item("courier") == CostItemKind.GENERIC
    assert CostItemKind.for_item("tax-reserves") == CostItemKind.TAX_RESERVES


def test_title_insurance_uses_amount_or_tiers():
    assert item_cost(_item(id="title-insurance"), CTX) == pytest.approx(1200.0)
    assert item_cost(_item(id="title-insurance", amount=800), CTX) == 800


def test_reserve_months():
    assert item_cost(_item(id="tax-reserves", months=3), CTX) == pytest.approx(900.0)
    assert item_cost(_item(id="prepaid-insurance", months=12), CTX) == pytest.approx(1200.0)
    assert item_cost(_item(id="insurance-reserves", months=2), CTX) == pytest.approx(200.0)
    assert item_cost(_item(id="tax-reserves"), CTX) == 0


def test_hoa_prepay_requires_dues():
    item = _item(id="hoa-prepay", months=2)
    assert item_cost(item, CTX) == 0
    assert item_cost(item, replace(CTX, hoa_monthly=250)) == pytest.approx(500.0)


def test_percentage_items_choose_their_base():
    assert item_cost(_item(id="buyers-agent-commission", amount=2.5, is_fixed=False), CTX) == pytest.approx(12500.0)
    assert item_cost(_item(id="discount-points", amount=1, is_fixed=False), CTX) == pytest.approx(4000.0)
    assert item_cost(_item(id="courier", amount=0.5, is_fixed=False), CTX) == pytest.approx(2000.0)
    assert item_cost(_item(id="underwriting", amount=995), CTX) == 995


def test_blank_id_costs_nothing():
    assert item_cost(_item(id="", amount=500), CTX) == 0


def test_prepaid_interest_item():
    item = _item(id="prepaid-interest", days=15)
    assert item_cost(item, CTX) == pytest.approx(400000 * 0.065 / 365 * 15)
    dated = replace(CTX, settlement_date=date(2023, 1, 31))
    assert item_cost(item, dated) == pytest.approx(400000 * 0.065 / 365)


def test_total_item_costs():
    items = [_item(id="underwriting", amount=995), _item(id="tax-reserves", months=3)]
    assert total_item_costs(items, CTX) == pytest.approx(1895.0)


def test_breakdown_adds_up_to_results():
    scenario = default_scenario(buydown={"active": True, "type": "2-1"})
    results = calculate_scenario(scenario)
    table = closing_cost_breakdown(scenario, results)
    assert list(table.columns) == ["id", "category", "name", "kind", "cost"]
    assert "buydown" in table["id"].values
    assert table["cost"].sum() == pytest.approx(results.total_closing_costs)


def test_breakdown_without_buydown():
    scenario = default_scenario()
    results = calculate_scenario(scenario)
    table = closing_cost_breakdown(scenario, results)
    assert "buydown" not in table["id"].values
    assert len(table) == len(scenario.closing_costs)
    assert table["cost"].sum() == pytest.approx(results.total_closing_costs)
