"""Scenario intake and editing helpers.

Partial scenarios come from the natural-language intake service and from
form edits.  Missing fields always fall back to the caller's defaults; no
value is invented here.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from loanquote.models import LoanType, Scenario
from loanquote.presets import UFMIP_DEFAULTS
from loanquote.utils import nz


class ParsedScenario(BaseModel):
    """Fields extracted from free text, with the parser's confidence."""

    purchase_price: Optional[float] = None
    down_payment_percent: Optional[float] = None
    down_payment_amount: Optional[float] = None
    loan_type: Optional[LoanType] = None
    client_name: Optional[str] = None
    interest_rate: Optional[float] = None
    credit_score: Optional[int] = None
    property_tax_yearly: Optional[float] = None
    hoa_monthly: Optional[float] = None
    confidence: float = 0.0
    clarifications: List[str] = Field(default_factory=list)

    @field_validator(
        "purchase_price",
        "down_payment_percent",
        "down_payment_amount",
        "interest_rate",
        "credit_score",
        "property_tax_yearly",
        "hoa_monthly",
        mode="before",
    )
    @classmethod
    def _drop_empty(cls, v):
        # Parsers report "unknown" as 0, "", or null
        val = nz(v, default=None)
        return val if val else None

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v):
        return min(100.0, max(0.0, nz(v)))


def _round2(value: float) -> float:
    return round(value, 2)


def with_purchase_price(scenario: Scenario, price) -> Scenario:
    """Change the price, keeping the down payment percentage."""

    price = nz(price)
    pct = _round2(scenario.down_payment_percent)
    return scenario.model_copy(
        update={"purchase_price": price, "down_payment_amount": _round2(price * pct / 100)}
    )


def with_down_payment_percent(scenario: Scenario, percent) -> Scenario:
    pct = _round2(nz(percent))
    return scenario.model_copy(
        update={
            "down_payment_percent": pct,
            "down_payment_amount": _round2(scenario.purchase_price * pct / 100),
        }
    )


def with_down_payment_amount(scenario: Scenario, amount) -> Scenario:
    amt = nz(amount)
    price = scenario.purchase_price
    pct = amt / price * 100 if price > 0 else 0.0
    return scenario.model_copy(
        update={"down_payment_amount": amt, "down_payment_percent": _round2(pct)}
    )


def with_loan_type(scenario: Scenario, loan_type) -> Scenario:
    """Switch programs, resetting the upfront premium and interest-only flag."""

    loan_type = LoanType(loan_type)
    is_gov = loan_type in (LoanType.FHA, LoanType.VA)
    return scenario.model_copy(
        update={
            "loan_type": loan_type,
            "ufmip_rate": UFMIP_DEFAULTS.get(loan_type.value, 0.0),
            "interest_only": False if is_gov else scenario.interest_only,
        }
    )


def scenario_name(scenario: Scenario) -> str:
    label = "Conv" if scenario.loan_type == LoanType.CONVENTIONAL else scenario.loan_type.value
    return f"{label} - {scenario.down_payment_percent:.2f}% Down"


def merge_parsed(parsed: ParsedScenario, defaults: Scenario) -> Scenario:
    """Overlay parsed fields on ``defaults``.

    Price and down payment are applied through the editing helpers so the
    amount/percent pair stays consistent.  An explicit amount wins over a
    percentage when both were extracted.
    """

    scenario = defaults
    if parsed.loan_type is not None:
        scenario = with_loan_type(scenario, parsed.loan_type)
    if parsed.purchase_price is not None:
        scenario = with_purchase_price(scenario, parsed.purchase_price)
    if parsed.down_payment_amount is not None:
        scenario = with_down_payment_amount(scenario, parsed.down_payment_amount)
    elif parsed.down_payment_percent is not None:
        scenario = with_down_payment_percent(scenario, parsed.down_payment_percent)

    update = {
        field: getattr(parsed, field)
        for field in (
            "client_name",
            "interest_rate",
            "credit_score",
            "property_tax_yearly",
            "hoa_monthly",
        )
        if getattr(parsed, field) is not None
    }
    scenario = scenario.model_copy(update=update)
    return scenario.model_copy(update={"name": scenario_name(scenario)})
