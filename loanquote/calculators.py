"""Core calculation utilities.

Every function here is pure: numbers in, numbers out.  Non-finite results are
coerced to ``0`` so nothing downstream ever sees ``NaN``.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import List, Optional, Tuple

from loanquote.models import (
    AffordabilityResult,
    BuydownType,
    BuydownYear,
    DPAConfig,
    DSCRResult,
    LoanType,
)
from loanquote.presets import (
    BUYDOWN_DROPS,
    CONCESSION_LIMITS,
    CONV_MI_BANDS,
    DEFAULT_DPA_TERM_MONTHS,
    FHA_MIP_TABLE,
    MIN_DSCR,
    TITLE_TIERS,
    UFMIP_DEFAULTS,
)
from loanquote.utils import fmt_money, nz


def payment(rate, nper, pv):
    """Fixed periodic payment for a loan.

    ``rate`` is the periodic (monthly) rate as a fraction, ``nper`` the number
    of periods and ``pv`` the principal.  A zero rate or zero term returns
    ``0`` rather than a straight-line payment; callers only reach that branch
    for degenerate input.
    """

    r = nz(rate)
    n = nz(nper)
    if r == 0 or n == 0:
        return 0.0
    try:
        pvif = (1 + r) ** n
        pmt = r * nz(pv) * pvif / (pvif - 1)
    except (OverflowError, ZeroDivisionError):
        return 0.0
    return nz(pmt)


def interest_only_eligible(loan_type: LoanType) -> bool:
    """Government programs always amortize."""

    return loan_type in (LoanType.CONVENTIONAL, LoanType.JUMBO)


def principal_and_interest(loan_amount, annual_rate_pct, term_months, interest_only=False):
    """Monthly P&I at ``annual_rate_pct`` over the full term.

    ``interest_only`` should already account for program eligibility.
    """

    monthly_rate = nz(annual_rate_pct) / 100 / 12
    if interest_only:
        return nz(loan_amount) * monthly_rate
    return payment(monthly_rate, term_months, loan_amount)


def prepaid_interest_days(settlement_date: Optional[date]) -> int:
    """Days from settlement to month end, counting the settlement day."""

    if settlement_date is None:
        return 0
    last_day = calendar.monthrange(settlement_date.year, settlement_date.month)[1]
    return max(0, last_day - settlement_date.day + 1)


def prepaid_interest(loan_amount, annual_rate_pct, settlement_date=None, manual_days=None):
    """Per-diem interest collected at closing.

    The settlement date wins when present; otherwise ``manual_days`` is used.
    With neither the result is ``0``.
    """

    loan = nz(loan_amount)
    rate = nz(annual_rate_pct)
    if loan <= 0 or rate <= 0:
        return 0.0
    if settlement_date is not None:
        days = prepaid_interest_days(settlement_date)
    elif manual_days is not None:
        days = nz(manual_days)
    else:
        return 0.0
    if days == 0:
        return 0.0
    daily = loan * (rate / 100) / 365
    return daily * days


def lenders_title_insurance(loan_amount):
    """Tiered lender's title premium for ``loan_amount``."""

    loan = nz(loan_amount)
    if loan <= 0:
        return 0.0
    if loan <= TITLE_TIERS["low_max"]:
        return loan * TITLE_TIERS["low_pct"] / 100
    if loan < TITLE_TIERS["mid_max"]:
        return loan * TITLE_TIERS["mid_pct"] / 100
    return TITLE_TIERS["flat_fee"]


def compute_ltv(purchase_price, base_loan):
    """Compute loan-to-value percentage."""

    price = nz(purchase_price)
    if price <= 0:
        return 0.0
    return 100.0 * nz(base_loan) / price


def upfront_premium_pct(loan_type: LoanType, scenario_rate) -> float:
    """UFMIP (FHA) or funding fee (VA) percentage financed into the loan."""

    if loan_type not in (LoanType.FHA, LoanType.VA):
        return 0.0
    rate = nz(scenario_rate)
    return rate if rate > 0 else UFMIP_DEFAULTS[loan_type.value]


def mi_annual_factor(loan_type: LoanType, ltv) -> float:
    """Annual mortgage insurance factor in percent for a program and LTV."""

    ltv = nz(ltv)
    if loan_type == LoanType.FHA:
        return FHA_MIP_TABLE[">95"] if ltv > 95 else FHA_MIP_TABLE["<=95"]
    if loan_type == LoanType.CONVENTIONAL:
        for floor, pct in CONV_MI_BANDS:
            if ltv > floor:
                return pct
    return 0.0


def monthly_mortgage_insurance(loan_type: LoanType, ltv, total_loan, manual_mi=None):
    """Resolve monthly MI and the annual factor that produced it.

    A manual override is taken verbatim and the factor comes back as ``None``;
    see :func:`implied_mi_rate` for a display figure in that case.
    """

    if manual_mi is not None:
        return nz(manual_mi), None
    factor = mi_annual_factor(loan_type, ltv)
    return nz(total_loan) * factor / 100 / 12, factor


def implied_mi_rate(monthly_mi, total_loan):
    """Annual MI rate implied by a monthly premium, for display only."""

    loan = nz(total_loan)
    if loan <= 0:
        return 0.0
    return nz(monthly_mi) * 12 / loan * 100


def dpa_payment(config: Optional[DPAConfig]):
    """Monthly payment on a down payment assistance loan.

    Deferred or inactive assistance never produces a payment.
    """

    if config is None or not config.active or config.is_deferred:
        return 0.0
    term = config.term_months if config.term_months > 0 else DEFAULT_DPA_TERM_MONTHS
    return payment(config.rate / 100 / 12, term, config.amount)


def dpa_principal(config: Optional[DPAConfig]):
    if config is None or not config.active:
        return 0.0
    return nz(config.amount)


def buydown_schedule(
    buydown_type: BuydownType,
    note_rate_pct,
    term_months,
    loan_amount,
    interest_only=False,
    fixed_monthly_costs=0.0,
) -> Tuple[List[BuydownYear], float]:
    """Year-by-year temporary buydown schedule and its total subsidy cost.

    Each relief year recomputes P&I at ``note rate - drop`` over the full
    original term.  One terminal full-rate year follows the relief window.
    """

    drops = BUYDOWN_DROPS[BuydownType(buydown_type).value]
    note_payment = principal_and_interest(loan_amount, note_rate_pct, term_months, interest_only)
    fixed = nz(fixed_monthly_costs)
    rows: List[BuydownYear] = []
    cost = 0.0
    for year in range(1, len(drops) + 2):
        drop = drops[year - 1] if year <= len(drops) else 0.0
        year_rate = nz(note_rate_pct)
        year_payment = note_payment
        subsidy = 0.0
        if drop > 0:
            year_rate = year_rate - drop
            year_payment = principal_and_interest(loan_amount, year_rate, term_months, interest_only)
            subsidy = note_payment - year_payment
            cost += subsidy * 12
        rows.append(
            BuydownYear(
                year=year,
                rate=year_rate,
                payment=year_payment,
                subsidy=subsidy,
                full_payment=year_payment + fixed,
            )
        )
    return rows, cost


def max_concession_pct(loan_type: LoanType, ltv) -> float:
    """Guideline ceiling on seller concessions as % of price."""

    limit = CONCESSION_LIMITS[loan_type.value]
    if isinstance(limit, list):
        ltv = nz(ltv)
        for floor, pct in limit:
            if ltv > floor:
                return pct
        return limit[-1][1]
    return limit


def lender_credit_amount(value, mode, total_loan):
    """Lender credit in dollars; percent mode is a share of the total loan."""

    val = nz(value)
    if getattr(mode, "value", mode) == "percent":
        return nz(total_loan) * val / 100
    return val


def apply_credits(total_closing_costs, total_credits):
    """Offset credits against costs.

    Returns ``(net_closing_costs, unused_credits, excessive)``.  Net cost is
    never negative; any overflow is reported as unused credit.
    """

    raw = nz(total_closing_costs) - nz(total_credits)
    net = max(0.0, raw)
    unused = -raw if raw < 0 else 0.0
    excessive = nz(total_credits) > nz(total_closing_costs)
    return net, unused, excessive


def dti(housing_payment, monthly_debt, total_income):
    """Return front-end and back-end debt-to-income ratios in percent."""

    inc = nz(total_income)
    if inc <= 0:
        return 0.0, 0.0
    fe = nz(housing_payment) / inc * 100
    be = (nz(housing_payment) + nz(monthly_debt)) / inc * 100
    return fe, be


def payment_ceilings(total_income, monthly_debt, max_fe_pct, max_be_pct):
    """Housing payment ceilings under front-end and back-end limits.

    Returns ``(front_ceiling, back_ceiling, binding, limiting_factor)``.  A tie
    reports the back-end ratio as the limiting factor.
    """

    inc = nz(total_income)
    front = inc * nz(max_fe_pct) / 100
    back = max(0.0, inc * nz(max_be_pct) / 100 - nz(monthly_debt))
    binding = min(front, back)
    factor = "Front-End" if front < back else "Back-End"
    return front, back, binding, factor


def reverse_affordability(
    program,
    max_fe_pct,
    max_be_pct,
    total_income,
    monthly_debt,
    current_payment,
    purchase_price,
    down_payment_pct,
    front_end_dti=0.0,
    back_end_dti=0.0,
) -> AffordabilityResult:
    """Estimate the maximum price and loan a borrower could carry.

    The maximum price scales the current price by ``ceiling / current
    payment``.  This is a linearization: taxes, insurance and MI do not scale
    exactly with price, so results near MI tier boundaries are approximate.
    """

    inc = nz(total_income)
    debt = nz(monthly_debt)
    res = AffordabilityResult(
        program=program,
        max_front_end_pct=max_fe_pct,
        max_back_end_pct=max_be_pct,
    )
    # Without qualifying income nothing was checked, so the program does not pass
    if inc <= 0:
        return res

    front, back, binding, factor = payment_ceilings(inc, debt, max_fe_pct, max_be_pct)
    pmt = nz(current_payment)
    price = nz(purchase_price)
    down_pct = nz(down_payment_pct)
    ratio = max_price = max_loan = 0.0
    if pmt > 0 and price > 0:
        ratio = binding / pmt
        max_price = price * ratio
        max_loan = max_price * (1 - down_pct / 100)

    steps = [
        f"Total Income: {fmt_money(inc, 2)}",
        "Max Housing Payment Logic:",
        f" • Front-End Limit ({max_fe_pct:g}%): {fmt_money(front)}",
        f" • Back-End Limit ({max_be_pct:g}%): {fmt_money(inc * max_be_pct / 100)}"
        f" - Debts ({fmt_money(debt)}) = {fmt_money(back)}",
        f" • Limiting Factor: {factor} (Lowest of above)",
        f" • Result: {fmt_money(binding)} / month",
        "Max Price Logic (Ratio Method):",
        f" • Current Pmt: {fmt_money(pmt)}",
        f" • Ratio (Max / Current): {ratio:.4f}",
        f" • Max Price ({fmt_money(price)} * {ratio:.4f}): {fmt_money(max_price)}",
        f" • Max Loan ({fmt_money(max_price)} - {down_pct}% Down): {fmt_money(max_loan)}",
    ]
    return res.model_copy(
        update={
            "front_end_ceiling": front,
            "back_end_ceiling": back,
            "limiting_factor": factor,
            "max_housing_payment": binding,
            "ratio": ratio,
            "max_price": max_price,
            "max_loan": max_loan,
            "passes": front_end_dti <= max_fe_pct and back_end_dti <= max_be_pct,
            "steps": steps,
        }
    )


def evaluate_dscr(gross_rental_income, debt_service) -> DSCRResult:
    """Debt service coverage for an investment property."""

    rent = nz(gross_rental_income)
    service = nz(debt_service)
    ratio = rent / service if service > 0 else 0.0
    return DSCRResult(
        ratio=ratio,
        gross_rental_income=rent,
        debt_service=service,
        passes=ratio >= MIN_DSCR,
    )
