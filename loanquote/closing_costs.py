"""Closing cost valuation.

:func:`item_cost` is the only place a closing cost line is turned into
dollars.  The scenario total and the per-item breakdown both go through it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional

import pandas as pd

from loanquote.calculators import lenders_title_insurance, prepaid_interest
from loanquote.models import CalculatedResults, ClosingCostItem, Scenario
from loanquote.utils import nz


class CostItemKind(str, Enum):
    PREPAID_INTEREST = "prepaid-interest"
    TITLE_INSURANCE = "title-insurance"
    PREPAID_INSURANCE = "prepaid-insurance"
    INSURANCE_RESERVES = "insurance-reserves"
    TAX_RESERVES = "tax-reserves"
    HOA_PREPAY = "hoa-prepay"
    BUYERS_AGENT_COMMISSION = "buyers-agent-commission"
    HOA_TRANSFER = "hoa-transfer"
    REALTOR_ADMIN = "realtor-admin"
    GENERIC = "generic"

    @classmethod
    def for_item(cls, item_id: str) -> "CostItemKind":
        """Map an item identifier to its kind; unknown ids are generic."""
        try:
            return cls(item_id)
        except ValueError:
            return cls.GENERIC


# Percentage-mode items quoted against the purchase price rather than the loan.
PRICE_BASED = {
    CostItemKind.BUYERS_AGENT_COMMISSION,
    CostItemKind.HOA_TRANSFER,
    CostItemKind.REALTOR_ADMIN,
}


@dataclass(frozen=True)
class CostContext:
    """Scenario values and resolved loan totals an item may be priced from."""

    purchase_price: float
    interest_rate: float
    property_tax_yearly: float
    home_insurance_yearly: float
    hoa_monthly: float
    total_loan_amount: float
    settlement_date: Optional[date] = None


def cost_context(scenario: Scenario, total_loan_amount: float) -> CostContext:
    return CostContext(
        purchase_price=scenario.purchase_price,
        interest_rate=scenario.interest_rate,
        property_tax_yearly=scenario.property_tax_yearly,
        home_insurance_yearly=scenario.home_insurance_yearly,
        hoa_monthly=scenario.hoa_monthly,
        total_loan_amount=nz(total_loan_amount),
        settlement_date=scenario.settlement_date,
    )


def item_cost(item: ClosingCostItem, ctx: CostContext) -> float:
    """Dollar cost of one closing cost line."""

    if not item.id:
        return 0.0
    kind = CostItemKind.for_item(item.id)
    months = nz(item.months)

    if kind == CostItemKind.PREPAID_INTEREST:
        if ctx.settlement_date is not None:
            return prepaid_interest(ctx.total_loan_amount, ctx.interest_rate, ctx.settlement_date)
        return prepaid_interest(ctx.total_loan_amount, ctx.interest_rate, manual_days=nz(item.days))
    if kind == CostItemKind.TITLE_INSURANCE:
        if item.amount > 0:
            return item.amount
        return lenders_title_insurance(ctx.total_loan_amount)
    if kind in (CostItemKind.PREPAID_INSURANCE, CostItemKind.INSURANCE_RESERVES):
        return ctx.home_insurance_yearly / 12 * months
    if kind == CostItemKind.TAX_RESERVES:
        return ctx.property_tax_yearly / 12 * months
    if kind == CostItemKind.HOA_PREPAY:
        return ctx.hoa_monthly * months if ctx.hoa_monthly > 0 else 0.0

    if item.is_fixed:
        return item.amount
    if kind in PRICE_BASED:
        return ctx.purchase_price * item.amount / 100
    return ctx.total_loan_amount * item.amount / 100


def total_item_costs(items: Iterable[ClosingCostItem], ctx: CostContext) -> float:
    return sum(item_cost(item, ctx) for item in items)


def closing_cost_breakdown(scenario: Scenario, results: CalculatedResults) -> pd.DataFrame:
    """Itemized closing costs for display.

    Uses the loan total already resolved in ``results`` so the rows, including
    the buydown subsidy line, add up to ``results.total_closing_costs``.
    """

    ctx = cost_context(scenario, results.total_loan_amount)
    rows = [
        {
            "id": item.id,
            "category": item.category,
            "name": item.name or item.id,
            "kind": CostItemKind.for_item(item.id).value,
            "cost": item_cost(item, ctx),
        }
        for item in scenario.closing_costs
    ]
    if results.buydown_cost > 0:
        rows.append(
            {
                "id": "buydown",
                "category": "Buydown",
                "name": f"Temporary Buydown ({scenario.buydown.type.value})",
                "kind": "buydown",
                "cost": results.buydown_cost,
            }
        )
    return pd.DataFrame(rows, columns=["id", "category", "name", "kind", "cost"])
