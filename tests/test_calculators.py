from datetime import date

import pytest

from loanquote.calculators import (
    apply_credits,
    buydown_schedule,
    dpa_payment,
    dti,
    evaluate_dscr,
    lender_credit_amount,
    lenders_title_insurance,
    max_concession_pct,
    mi_annual_factor,
    payment,
    payment_ceilings,
    prepaid_interest,
    prepaid_interest_days,
    principal_and_interest,
    reverse_affordability,
    upfront_premium_pct,
)
from loanquote.models import BuydownType, DPAConfig, LoanType


def test_payment_zero_rate_or_term():
    assert payment(0, 360, 100000) == 0
    assert payment(0.005, 0, 100000) == 0
    assert principal_and_interest(100000, 0, 360) == 0


def test_payment_known_value():
    assert principal_and_interest(200000, 6.0, 360) == pytest.approx(1199.10, abs=0.01)


def test_interest_only_payment():
    assert principal_and_interest(100000, 6.0, 360, interest_only=True) == pytest.approx(500.0)


def test_title_insurance_tiers():
    assert lenders_title_insurance(0) == 0
    assert lenders_title_insurance(250000) == pytest.approx(925.0)
    assert lenders_title_insurance(250000.01) == pytest.approx(750.00003)
    assert lenders_title_insurance(549999.99) == pytest.approx(1649.99997)
    assert lenders_title_insurance(550000) == 1650.0
    assert lenders_title_insurance(900000) == 1650.0


def test_fha_mip_boundary():
    assert mi_annual_factor(LoanType.FHA, 96) == 0.55
    assert mi_annual_factor(LoanType.FHA, 95) == 0.50


def test_conventional_mi_bands():
    assert mi_annual_factor(LoanType.CONVENTIONAL, 80) == 0.0
    assert mi_annual_factor(LoanType.CONVENTIONAL, 80.01) == 0.28
    assert mi_annual_factor(LoanType.CONVENTIONAL, 85.5) == 0.48
    assert mi_annual_factor(LoanType.CONVENTIONAL, 95) == 0.75
    assert mi_annual_factor(LoanType.CONVENTIONAL, 96) == 0.95
    assert mi_annual_factor(LoanType.VA, 100) == 0.0
    assert mi_annual_factor(LoanType.JUMBO, 95) == 0.0


def test_upfront_premium_defaults():
    assert upfront_premium_pct(LoanType.FHA, 0) == 1.75
    assert upfront_premium_pct(LoanType.VA, 0) == 2.15
    assert upfront_premium_pct(LoanType.FHA, 1.5) == 1.5
    assert upfront_premium_pct(LoanType.CONVENTIONAL, 1.75) == 0.0


def test_prepaid_interest_days_counts_settlement_day():
    assert prepaid_interest_days(date(2024, 2, 10)) == 20
    assert prepaid_interest_days(date(2023, 1, 31)) == 1
    assert prepaid_interest_days(None) == 0


def test_prepaid_interest():
    assert prepaid_interest(365000, 10, date(2023, 1, 31)) == pytest.approx(100.0)
    assert prepaid_interest(365000, 10, manual_days=15) == pytest.approx(1500.0)
    assert prepaid_interest(365000, 0, manual_days=15) == 0
    assert prepaid_interest(365000, 10) == 0


def test_dpa_payment_rules():
    deferred = DPAConfig(active=True, amount=10000, rate=6, term_months=120, is_deferred=True)
    inactive = DPAConfig(active=False, amount=10000, rate=6, term_months=120)
    no_term = DPAConfig(active=True, amount=10000, rate=6, term_months=0)
    assert dpa_payment(deferred) == 0
    assert dpa_payment(inactive) == 0
    assert dpa_payment(None) == 0
    assert dpa_payment(no_term) == pytest.approx(payment(0.005, 120, 10000))


def test_two_one_buydown_schedule():
    rows, cost = buydown_schedule(BuydownType.TWO_ONE, 7.0, 360, 400000)
    assert [r.rate for r in rows] == [5.0, 6.0, 7.0]
    assert rows[2].subsidy == 0
    assert cost == pytest.approx(12 * (rows[0].subsidy + rows[1].subsidy))
    note = principal_and_interest(400000, 7.0, 360)
    assert rows[0].subsidy == pytest.approx(note - principal_and_interest(400000, 5.0, 360))


def test_buydown_row_counts_and_full_payment():
    assert len(buydown_schedule(BuydownType.ONE_ZERO, 7.0, 360, 400000)[0]) == 2
    assert len(buydown_schedule(BuydownType.ONE_ONE, 7.0, 360, 400000)[0]) == 3
    rows, _ = buydown_schedule(BuydownType.THREE_TWO_ONE, 7.0, 360, 400000, fixed_monthly_costs=500)
    assert len(rows) == 4
    assert all(r.full_payment == pytest.approx(r.payment + 500) for r in rows)


def test_concession_limits():
    assert max_concession_pct(LoanType.CONVENTIONAL, 95) == 3.0
    assert max_concession_pct(LoanType.CONVENTIONAL, 90) == 6.0
    assert max_concession_pct(LoanType.CONVENTIONAL, 75) == 9.0
    assert max_concession_pct(LoanType.FHA, 96.5) == 6.0
    assert max_concession_pct(LoanType.VA, 100) == 4.0
    assert max_concession_pct(LoanType.JUMBO, 80) == 0.0


def test_lender_credit_modes():
    assert lender_credit_amount(1, "percent", 400000) == pytest.approx(4000.0)
    assert lender_credit_amount(2500, "fixed", 400000) == 2500.0


def test_credits_overflow_is_unused():
    net, unused, excessive = apply_credits(10000, 11000)
    assert net == 0
    assert unused == pytest.approx(1000)
    assert excessive
    assert apply_credits(10000, 10000) == (0.0, 0.0, False)


def test_dti_zero_income():
    assert dti(2000, 500, 0) == (0.0, 0.0)
    assert dti(2000, 500, 10000) == pytest.approx((20.0, 25.0))


def test_payment_ceilings_back_end_binds():
    front, back, binding, factor = payment_ceilings(10000, 500, 46.99, 49.99)
    assert front == pytest.approx(4699.0)
    assert back == pytest.approx(4499.0)
    assert binding == pytest.approx(4499.0)
    assert factor == "Back-End"


def test_payment_ceilings_tie_reports_back_end():
    assert payment_ceilings(10000, 0, 45, 45)[3] == "Back-End"
    assert payment_ceilings(10000, 500, 30, 45)[3] == "Front-End"


def test_reverse_affordability_ratio_method():
    res = reverse_affordability("Conventional", 46.99, 49.99, 10000, 500, 3000, 500000, 5, 30, 35)
    ratio = 4499.0 / 3000
    assert res.limiting_factor == "Back-End"
    assert res.ratio == pytest.approx(ratio)
    assert res.max_price == pytest.approx(500000 * ratio)
    assert res.max_loan == pytest.approx(500000 * ratio * 0.95)
    assert res.passes
    assert " • Limiting Factor: Back-End (Lowest of above)" in res.steps
    assert res.steps[2].startswith(" • Front-End Limit (46.99%)")


def test_whole_number_limits_print_without_decimals():
    res = reverse_affordability("FHA", 46.99, 57.0, 10000, 500, 3000, 500000, 3.5)
    assert res.steps[3].startswith(" • Back-End Limit (57%): $5,700")


def test_reverse_affordability_without_income():
    res = reverse_affordability("FHA", 46.99, 57.0, 0, 500, 3000, 500000, 5)
    # zero ratios would sit under both ceilings, but no income means no pass
    assert res.max_price == 0
    assert res.steps == []
    assert not res.passes


def test_dscr():
    d = evaluate_dscr(3000, 2500)
    assert d.ratio == pytest.approx(1.2)
    assert d.passes
    d = evaluate_dscr(3000, 0)
    assert d.ratio == 0
    assert not d.passes
    assert evaluate_dscr(2500, 2500).passes
