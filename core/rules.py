from __future__ import annotations
from typing import Literal, List, Dict, Any, Optional
from pydantic import BaseModel, Field

from loanquote.models import CalculatedResults, LoanType, Scenario
from loanquote.presets import LOAN_LIMITS, LTV_RULES, VALIDATION_THRESHOLDS


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    field: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)


def evaluate_rules(
    scenario: Scenario,
    results: CalculatedResults,
    loan_limits: Optional[dict] = None,
    ltv_rules: Optional[dict] = None,
    thresholds: Optional[dict] = None,
) -> List[RuleResult]:
    limits = loan_limits or LOAN_LIMITS
    ltv_rules = ltv_rules or LTV_RULES
    th = thresholds or VALIDATION_THRESHOLDS
    res: List[RuleResult] = []

    price = scenario.purchase_price
    loan_type = scenario.loan_type

    if price <= 0:
        res.append(
            RuleResult(
                code="PRICE_NOT_POSITIVE",
                severity="critical",
                field="purchase_price",
                message="Purchase price must be greater than zero.",
            )
        )
    if price < th["purchase_price_min"]:
        res.append(
            RuleResult(
                code="PRICE_LOW",
                severity="warn",
                field="purchase_price",
                message="Purchase price seems unusually low.",
                context={"price": price, "minimum": th["purchase_price_min"]},
            )
        )

    if loan_type == LoanType.CONVENTIONAL and price > limits["conventional_conforming"]:
        res.append(
            RuleResult(
                code="OVER_CONFORMING_LIMIT",
                severity="warn",
                field="loan_type",
                message=f"Exceeds conforming limit (${limits['conventional_conforming']:,.0f}). Consider Jumbo loan.",
            )
        )
    if loan_type == LoanType.FHA and results.base_loan_amount > limits["fha_ceiling"]:
        res.append(
            RuleResult(
                code="OVER_FHA_LIMIT",
                severity="critical",
                field="purchase_price",
                message=f"Exceeds FHA loan limit (${limits['fha_ceiling']:,.0f}).",
            )
        )

    rule = ltv_rules.get(loan_type.value)
    if rule:
        if scenario.down_payment_percent < rule["min_down_pct"]:
            res.append(
                RuleResult(
                    code="DOWN_PAYMENT_BELOW_MIN",
                    severity="critical",
                    field="down_payment_percent",
                    message=f"{loan_type.value} requires minimum {rule['min_down_pct']}% down payment.",
                )
            )
        if results.ltv > rule["max_ltv"]:
            res.append(
                RuleResult(
                    code="LTV_OVER_MAX",
                    severity="critical",
                    field="down_payment_percent",
                    message=f"LTV ({results.ltv:.1f}%) exceeds maximum {rule['max_ltv']}% for {loan_type.value}.",
                    context={"actual": results.ltv, "limit": rule["max_ltv"]},
                )
            )

    # Rental-only qualification is judged on DSCR, not DTI
    inc = scenario.income
    has_borrower_income = inc.borrower1 > 0 or inc.borrower2 > 0 or inc.other > 0
    if has_borrower_income or inc.rental <= 0:
        if results.dti.front_end > th["dti_front_end_warning"]:
            res.append(
                RuleResult(
                    code="HOUSING_RATIO_OVER_LIMIT",
                    severity="warn",
                    field="income",
                    message=f"Front-end DTI ({results.dti.front_end:.1f}%) exceeds typical limit ({th['dti_front_end_warning']}%).",
                    context={"actual": results.dti.front_end, "limit": th["dti_front_end_warning"]},
                )
            )
        if results.dti.back_end > th["dti_back_end_max"]:
            res.append(
                RuleResult(
                    code="TOTAL_DTI_OVER_LIMIT",
                    severity="critical",
                    field="income",
                    message=f"Back-end DTI ({results.dti.back_end:.1f}%) exceeds typical limit ({th['dti_back_end_max']}%).",
                    context={"actual": results.dti.back_end, "limit": th["dti_back_end_max"]},
                )
            )

    if loan_type == LoanType.FHA and scenario.credit_score < th["credit_score_fha_min"]:
        res.append(
            RuleResult(
                code="FHA_CREDIT_SCORE",
                severity="critical",
                field="credit_score",
                message=f"FHA requires minimum {th['credit_score_fha_min']} credit score.",
            )
        )
    if loan_type == LoanType.CONVENTIONAL and scenario.credit_score < th["credit_score_conventional_min"]:
        res.append(
            RuleResult(
                code="CONV_CREDIT_SCORE",
                severity="warn",
                field="credit_score",
                message=f"Conventional loans typically require {th['credit_score_conventional_min']}+ credit score.",
            )
        )

    if scenario.interest_rate > th["interest_rate_max"]:
        res.append(
            RuleResult(
                code="RATE_HIGH",
                severity="warn",
                field="interest_rate",
                message="Interest rate seems unusually high. Please verify.",
            )
        )
    if scenario.interest_rate < th["interest_rate_min"]:
        res.append(
            RuleResult(
                code="RATE_LOW",
                severity="warn",
                field="interest_rate",
                message="Interest rate seems unusually low. Please verify.",
            )
        )

    if results.warnings.excess_concessions:
        res.append(
            RuleResult(
                code="EXCESS_CREDITS",
                severity="warn",
                field="seller_concessions",
                message="Credits exceed total closing costs; the overflow is unused.",
                context={"unused": results.unused_credits},
            )
        )
    if 0 < results.max_concessions_allowed < results.seller_concessions_amount:
        res.append(
            RuleResult(
                code="CONCESSIONS_OVER_LIMIT",
                severity="warn",
                field="seller_concessions",
                message="Seller concessions exceed the program maximum.",
                context={
                    "actual": results.seller_concessions_amount,
                    "limit": results.max_concessions_allowed,
                },
            )
        )
    if results.warnings.excess_dpa:
        res.append(
            RuleResult(
                code="EXCESS_DPA",
                severity="warn",
                field="dpa",
                message="Assistance exceeds down payment plus closing costs.",
                context={"dpa": results.total_dpa_amount},
            )
        )
    if results.dscr is not None and not results.dscr.passes:
        res.append(
            RuleResult(
                code="DSCR_BELOW_MIN",
                severity="warn",
                field="income",
                message="Rental income does not cover the housing payment.",
                context={"ratio": results.dscr.ratio},
            )
        )

    return res


def has_blocking(res: List[RuleResult]) -> bool:
    return any(r.severity == "critical" for r in res)
