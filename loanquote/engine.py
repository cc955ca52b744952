"""Scenario orchestrator.

:func:`calculate_scenario` resolves a :class:`~loanquote.models.Scenario` into
a fresh :class:`~loanquote.models.CalculatedResults`.  Stages run in a fixed
order because later stages read earlier totals: loan amounts, MI, DPA, fixed
monthly costs, buydown, closing costs, credits, cash to close, qualification,
DSCR.  Closing cost percentages in particular must see the total loan amount
including any financed upfront premium.
"""

from __future__ import annotations

from loanquote.calculators import (
    apply_credits,
    buydown_schedule,
    compute_ltv,
    dpa_payment,
    dpa_principal,
    dti,
    evaluate_dscr,
    implied_mi_rate,
    interest_only_eligible,
    lender_credit_amount,
    max_concession_pct,
    monthly_mortgage_insurance,
    prepaid_interest,
    prepaid_interest_days,
    principal_and_interest,
    reverse_affordability,
    upfront_premium_pct,
)
from loanquote.closing_costs import CostItemKind, cost_context, total_item_costs
from loanquote.logging_utils import get_logger
from loanquote.models import (
    CalculatedResults,
    DTIRatios,
    IncomeBreakdown,
    Occupancy,
    Scenario,
    ScenarioWarnings,
)
from loanquote.presets import DEFAULT_TERM_MONTHS, DTI_RULES, RENTAL_INCOME_FACTOR
from loanquote.utils import nz

logger = get_logger(__name__)


def _qualifying_income(scenario: Scenario):
    """Return ``(effective_rental, total_income, monthly_debt)``.

    DSCR loans qualify on the property, so borrower income and debts are
    ignored.
    """

    inc = scenario.income
    effective_rental = inc.rental * RENTAL_INCOME_FACTOR
    if scenario.is_dscr_loan:
        return effective_rental, 0.0, 0.0
    total = inc.borrower1 + inc.borrower2 + effective_rental + inc.other
    return effective_rental, total, scenario.debts.monthly_total


def calculate_scenario(scenario: Scenario) -> CalculatedResults:
    """Compute payments, costs, cash to close and qualification figures."""

    price = scenario.purchase_price
    down = scenario.down_payment_amount
    rate = scenario.interest_rate
    term = scenario.loan_term_months if scenario.loan_term_months > 0 else DEFAULT_TERM_MONTHS
    tax_monthly = scenario.property_tax_yearly / 12
    ins_monthly = scenario.home_insurance_yearly / 12
    hoa = scenario.hoa_monthly

    # Loan amounts
    base_loan = max(0.0, price - down)
    financed_mip = base_loan * upfront_premium_pct(scenario.loan_type, scenario.ufmip_rate) / 100
    total_loan = base_loan + financed_mip
    ltv = compute_ltv(price, base_loan)

    interest_only = scenario.interest_only and interest_only_eligible(scenario.loan_type)
    pi = principal_and_interest(total_loan, rate, term, interest_only)

    # Mortgage insurance; a manual override only back-derives a display rate
    monthly_mi, mi_factor = monthly_mortgage_insurance(
        scenario.loan_type, ltv, total_loan, scenario.manual_mi
    )
    mi_rate_percent = mi_factor if mi_factor is not None else implied_mi_rate(monthly_mi, total_loan)

    dpa1 = dpa_payment(scenario.dpa)
    dpa2 = dpa_payment(scenario.dpa2)

    fixed_monthly = tax_monthly + ins_monthly + monthly_mi + hoa + dpa1 + dpa2

    schedule = None
    buydown_cost = 0.0
    if scenario.buydown.active:
        schedule, buydown_cost = buydown_schedule(
            scenario.buydown.type, rate, term, total_loan, interest_only, fixed_monthly
        )

    # Closing costs
    ctx = cost_context(scenario, total_loan)
    total_closing = total_item_costs(scenario.closing_costs, ctx) + buydown_cost

    if scenario.settlement_date is not None:
        prepaid_days = prepaid_interest_days(scenario.settlement_date)
        prepaid = prepaid_interest(total_loan, rate, scenario.settlement_date)
    else:
        prepaid_days = next(
            (
                nz(c.days)
                for c in scenario.closing_costs
                if CostItemKind.for_item(c.id) == CostItemKind.PREPAID_INTEREST
            ),
            0.0,
        )
        prepaid = prepaid_interest(total_loan, rate, manual_days=prepaid_days)

    # Credits and concessions
    seller = scenario.seller_concessions if scenario.show_seller_concessions else 0.0
    seller_pct = seller / price * 100 if price > 0 else 0.0
    lender_val = scenario.lender_credits if scenario.show_lender_credits else 0.0
    lender = lender_credit_amount(lender_val, scenario.lender_credits_mode, total_loan)
    max_concessions = price * max_concession_pct(scenario.loan_type, ltv) / 100
    total_credits = lender + seller
    net_closing, unused_credits, excessive = apply_credits(total_closing, total_credits)

    # Cash to close
    total_dpa = dpa_principal(scenario.dpa) + dpa_principal(scenario.dpa2)
    funds_required = down + net_closing - total_dpa
    cash_to_close = funds_required - scenario.earnest_money
    excess_dpa = total_dpa > down + net_closing

    base_payment = pi + fixed_monthly
    total_payment = base_payment
    if schedule:
        total_payment = base_payment - schedule[0].subsidy

    # Qualification uses the note-rate payment, never the bought-down one
    effective_rental, total_income, monthly_debt = _qualifying_income(scenario)
    front, back = (0.0, 0.0) if scenario.is_dscr_loan else dti(base_payment, monthly_debt, total_income)
    affordability = {
        program: reverse_affordability(
            program,
            limits["FE"],
            limits["BE"],
            total_income,
            monthly_debt,
            base_payment,
            price,
            scenario.down_payment_percent,
            front,
            back,
        )
        for program, limits in DTI_RULES.items()
    }

    dscr = None
    if scenario.occupancy_type == Occupancy.INVESTMENT:
        dscr = evaluate_dscr(scenario.income.rental, base_payment)

    logger.debug(
        "scenario calculated",
        extra={
            "context": {
                "scenario": scenario.name,
                "loan_type": scenario.loan_type.value,
                "total_loan": round(total_loan, 2),
                "payment": round(total_payment, 2),
                "cash_to_close": round(cash_to_close, 2),
            }
        },
    )

    return CalculatedResults(
        base_loan_amount=base_loan,
        financed_mip=financed_mip,
        total_loan_amount=total_loan,
        monthly_principal_and_interest=pi,
        monthly_tax=tax_monthly,
        monthly_insurance=ins_monthly,
        monthly_mi=monthly_mi,
        monthly_hoa=hoa,
        monthly_dpa_payment=dpa1,
        monthly_dpa2_payment=dpa2,
        total_monthly_payment=total_payment,
        base_monthly_payment=base_payment,
        total_closing_costs=total_closing,
        buydown_cost=buydown_cost,
        net_closing_costs=net_closing,
        unused_credits=unused_credits,
        prepaid_interest=prepaid,
        prepaid_interest_days=prepaid_days,
        down_payment_required=down,
        earnest_money=scenario.earnest_money,
        seller_concessions_amount=seller,
        seller_concessions_percent=seller_pct,
        max_concessions_allowed=max_concessions,
        lender_credits_amount=lender,
        total_credits=total_credits,
        is_concessions_excessive=excessive,
        total_dpa_amount=total_dpa,
        total_funds_required=funds_required,
        cash_to_close=cash_to_close,
        ltv=ltv,
        mi_rate_percent=mi_rate_percent,
        buydown_schedule=schedule,
        dti=DTIRatios(front_end=front, back_end=back),
        conventional=affordability["Conventional"],
        fha=affordability["FHA"],
        warnings=ScenarioWarnings(excess_concessions=excessive, excess_dpa=excess_dpa),
        income=IncomeBreakdown(effective_rental=effective_rental, total=total_income),
        dscr=dscr,
    )
