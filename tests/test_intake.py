from loanquote.intake import (
    ParsedScenario,
    merge_parsed,
    scenario_name,
    with_down_payment_amount,
    with_down_payment_percent,
    with_loan_type,
    with_purchase_price,
)
from loanquote.models import LoanType, default_scenario


def test_parsed_scenario_drops_unknowns():
    parsed = ParsedScenario(purchase_price=0, down_payment_percent="", interest_rate=None, confidence=150)
    assert parsed.purchase_price is None
    assert parsed.down_payment_percent is None
    assert parsed.interest_rate is None
    assert parsed.confidence == 100


def test_merge_applies_price_percent_and_program():
    parsed = ParsedScenario(purchase_price=400000, down_payment_percent=10, loan_type="FHA", client_name="Lee")
    merged = merge_parsed(parsed, default_scenario())
    assert merged.purchase_price == 400000
    assert merged.down_payment_amount == 40000
    assert merged.down_payment_percent == 10
    assert merged.loan_type == LoanType.FHA
    assert merged.ufmip_rate == 1.75
    assert merged.client_name == "Lee"
    assert merged.name == "FHA - 10.00% Down"


def test_merge_amount_wins_over_percent():
    parsed = ParsedScenario(purchase_price=300000, down_payment_amount=30000, down_payment_percent=20)
    merged = merge_parsed(parsed, default_scenario())
    assert merged.down_payment_amount == 30000
    assert merged.down_payment_percent == 10.0


def test_merge_keeps_defaults_for_missing_fields():
    defaults = default_scenario()
    merged = merge_parsed(ParsedScenario(), defaults)
    assert merged.interest_rate == defaults.interest_rate
    assert merged.purchase_price == defaults.purchase_price
    assert merged.name == "Conv - 5.00% Down"


def test_price_change_keeps_percent():
    s = with_purchase_price(default_scenario(), 400000)
    assert s.down_payment_percent == 5.0
    assert s.down_payment_amount == 20000


def test_down_payment_helpers_round_trip_pair():
    s = with_down_payment_percent(default_scenario(), 3.5)
    assert s.down_payment_amount == 17500
    s = with_down_payment_amount(s, 33333)
    assert s.down_payment_percent == 6.67
    zero = with_down_payment_amount(default_scenario(purchase_price=0), 5000)
    assert zero.down_payment_percent == 0


def test_loan_type_switch_resets_program_fields():
    conv = default_scenario(interest_only=True)
    assert with_loan_type(conv, "Jumbo").interest_only
    va = with_loan_type(conv, "VA")
    assert not va.interest_only
    assert va.ufmip_rate == 2.15
    assert with_loan_type(va, "Conventional").ufmip_rate == 0


def test_scenario_name():
    assert scenario_name(default_scenario()) == "Conv - 5.00% Down"
    assert scenario_name(default_scenario(loan_type="VA", down_payment_percent=0)) == "VA - 0.00% Down"
