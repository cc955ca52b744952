from streamlit.testing.v1 import AppTest

from loanquote.engine import calculate_scenario
from loanquote.models import default_scenario


def calculator_app():
    import app

    app.render_calculator()


def _caption(at, prefix):
    return next(c.value for c in at.caption if c.value.startswith(prefix))


def test_payment_caption_matches_engine():
    at = AppTest.from_function(calculator_app)
    at.run(timeout=30)
    assert not at.exception
    expected = calculate_scenario(default_scenario()).total_monthly_payment
    assert _caption(at, "Total Monthly Payment") == f"Total Monthly Payment: ${expected:,.2f}"


def test_rate_change_updates_payment():
    at = AppTest.from_function(calculator_app)
    at.run(timeout=30)
    at.number_input(key="in_rate").set_value(7.0)
    at.run(timeout=30)
    expected = calculate_scenario(default_scenario(interest_rate=7.0)).monthly_principal_and_interest
    assert _caption(at, "Monthly P&I") == f"Monthly P&I: ${expected:,.2f}"
    assert at.session_state["scenario"]["interest_rate"] == 7.0


def test_seeded_scenario_and_critical_warning():
    at = AppTest.from_function(calculator_app)
    at.session_state["scenario"] = default_scenario(
        loan_type="FHA", credit_score=560, down_payment_amount=17500, down_payment_percent=3.5
    ).model_dump(mode="json")
    at.run(timeout=30)
    assert not at.exception
    assert any("FHA_CREDIT_SCORE" in e.value for e in at.error)
    caption = _caption(at, "Base Loan")
    assert "Financed Premium" in caption


def test_full_app_renders(tmp_path, monkeypatch):
    from core import state

    monkeypatch.setattr(state, "SESSION_FILE", str(tmp_path / "session.json"))
    at = AppTest.from_file("../app.py")
    at.run(timeout=30)
    assert not at.exception
    assert (tmp_path / "session.json").exists()


def test_second_assistance_can_be_switched_off():
    at = AppTest.from_function(calculator_app)
    at.session_state["scenario"] = default_scenario(
        dpa2={"active": True, "amount": 10000, "rate": 6, "term_months": 120}
    ).model_dump(mode="json")
    at.run(timeout=30)
    assert at.session_state["scenario"]["dpa2"]["active"] is True
    assert any(c.value.startswith("Assistance Payments") for c in at.caption)

    at.checkbox(key="in_dpa2_active").uncheck()
    at.run(timeout=30)
    assert not at.exception
    assert at.session_state["scenario"]["dpa2"]["active"] is False
    assert not any(c.value.startswith("Assistance Payments") for c in at.caption)
    expected = calculate_scenario(default_scenario()).total_monthly_payment
    assert _caption(at, "Total Monthly Payment") == f"Total Monthly Payment: ${expected:,.2f}"
