import pandas as pd
import streamlit as st

from loanquote.intake import with_down_payment_percent, with_loan_type
from loanquote.models import (
    BuydownType,
    LenderCreditMode,
    LoanType,
    Occupancy,
    Scenario,
    default_scenario,
)
from loanquote.presets import UFMIP_DEFAULTS
from loanquote.utils import parse_iso_date

LOAN_TYPES = [t.value for t in LoanType]
OCCUPANCIES = [o.value for o in Occupancy]
BUYDOWNS = [b.value for b in BuydownType]
CREDIT_MODES = [m.value for m in LenderCreditMode]


def reset_inputs():
    """Drop widget state so the next run renders from ``session_state["scenario"]``."""
    for key in [k for k in st.session_state if str(k).startswith("in_")]:
        del st.session_state[key]


def _dpa_inputs(label: str, key: str, dpa: dict) -> dict:
    with st.expander(label):
        dpa["active"] = st.checkbox("Active", value=bool(dpa.get("active", False)), key=f"{key}_active")
        dpa["amount"] = st.number_input("Amount", value=float(dpa.get("amount", 0.0)), key=f"{key}_amount")
        dpa["rate"] = st.number_input("Rate %", value=float(dpa.get("rate", 0.0)), key=f"{key}_rate")
        dpa["term_months"] = st.number_input(
            "Term (months)", value=float(dpa.get("term_months", 120)), key=f"{key}_term"
        )
        dpa["is_deferred"] = st.checkbox(
            "Deferred (no payment)", value=bool(dpa.get("is_deferred", False)), key=f"{key}_deferred"
        )
    return dpa


def render_closing_cost_editor(items: list) -> list:
    """Editable closing cost lines; returns records for the scenario.

    The editor stores its edits relative to the frame it was first given, so
    that frame is pinned in session state until the inputs are reset.
    """
    base = st.session_state.setdefault("in_closing_costs_base", items)
    df = pd.DataFrame(base, columns=["id", "category", "name", "amount", "is_fixed", "months", "days"])
    edited = st.data_editor(df, key="in_closing_costs", num_rows="dynamic", hide_index=True)
    return edited.to_dict("records")


def render_scenario_inputs() -> Scenario:
    """Render scenario inputs and return the validated scenario.

    The raw dictionary in ``st.session_state["scenario"]`` is the source of
    truth between reruns; widgets only overlay edits.
    """
    st.session_state.setdefault("scenario", default_scenario().model_dump(mode="json"))
    s = dict(st.session_state["scenario"])

    with st.expander("Property & Loan", expanded=True):
        s["name"] = st.text_input("Scenario Name", value=s.get("name", ""), key="in_name")
        s["client_name"] = st.text_input("Client", value=s.get("client_name", ""), key="in_client")
        s["purchase_price"] = st.number_input(
            "Purchase Price", value=float(s.get("purchase_price", 0.0)), key="in_price"
        )
        down_pct = st.number_input(
            "Down Payment %", value=float(s.get("down_payment_percent", 0.0)), key="in_down_pct"
        )
        loan_type = st.selectbox(
            "Loan Type", LOAN_TYPES, index=LOAN_TYPES.index(s.get("loan_type", "Conventional")), key="in_loan_type"
        )
        if loan_type != s.get("loan_type"):
            s["ufmip_rate"] = UFMIP_DEFAULTS.get(loan_type, 0.0)
        s["occupancy_type"] = st.selectbox(
            "Occupancy",
            OCCUPANCIES,
            index=OCCUPANCIES.index(s.get("occupancy_type", Occupancy.PRIMARY.value)),
            key="in_occupancy",
        )
        s["interest_rate"] = st.number_input("Rate %", value=float(s.get("interest_rate", 0.0)), key="in_rate")
        s["loan_term_months"] = st.number_input(
            "Term (months)", value=float(s.get("loan_term_months", 360)), key="in_term"
        )
        s["interest_only"] = st.checkbox(
            "Interest Only", value=bool(s.get("interest_only", False)), key="in_io"
        )
        s["credit_score"] = st.number_input(
            "Credit Score", value=float(s.get("credit_score", 740)), key="in_fico"
        )
        s["earnest_money"] = st.number_input(
            "Earnest Money", value=float(s.get("earnest_money", 0.0)), key="in_emd"
        )
        s["settlement_date"] = st.date_input(
            "Settlement Date", value=parse_iso_date(s.get("settlement_date")), key="in_settlement"
        )
        if st.checkbox("Override MI", value=s.get("manual_mi") is not None, key="in_mi_override"):
            s["manual_mi"] = st.number_input(
                "Monthly MI", value=float(s.get("manual_mi") or 0.0), key="in_manual_mi"
            )
        else:
            s["manual_mi"] = None
        if loan_type in (LoanType.FHA.value, LoanType.VA.value):
            s["ufmip_rate"] = st.number_input(
                "UFMIP / Funding Fee %", value=float(s.get("ufmip_rate", 0.0)), key=f"in_ufmip_{loan_type}"
            )

    with st.expander("Housing Costs"):
        s["property_tax_yearly"] = st.number_input(
            "Property Tax (yearly)", value=float(s.get("property_tax_yearly", 0.0)), key="in_tax"
        )
        s["home_insurance_yearly"] = st.number_input(
            "Insurance (yearly)", value=float(s.get("home_insurance_yearly", 0.0)), key="in_hoi"
        )
        s["hoa_monthly"] = st.number_input("HOA Monthly", value=float(s.get("hoa_monthly", 0.0)), key="in_hoa")

    with st.expander("Credits"):
        s["show_seller_concessions"] = st.checkbox(
            "Apply Seller Concessions", value=bool(s.get("show_seller_concessions", False)), key="in_show_sc"
        )
        s["seller_concessions"] = st.number_input(
            "Seller Concessions", value=float(s.get("seller_concessions", 0.0)), key="in_sc"
        )
        s["show_lender_credits"] = st.checkbox(
            "Apply Lender Credits", value=bool(s.get("show_lender_credits", False)), key="in_show_lc"
        )
        s["lender_credits"] = st.number_input(
            "Lender Credits", value=float(s.get("lender_credits", 0.0)), key="in_lc"
        )
        s["lender_credits_mode"] = st.radio(
            "Lender Credit Mode",
            CREDIT_MODES,
            index=CREDIT_MODES.index(s.get("lender_credits_mode", "fixed")),
            horizontal=True,
            key="in_lc_mode",
        )

    with st.expander("Income & Debts"):
        inc = dict(s.get("income", {}))
        inc["borrower1"] = st.number_input("Borrower 1 Monthly", value=float(inc.get("borrower1", 0.0)), key="in_b1")
        inc["borrower2"] = st.number_input("Borrower 2 Monthly", value=float(inc.get("borrower2", 0.0)), key="in_b2")
        inc["rental"] = st.number_input("Gross Rental Monthly", value=float(inc.get("rental", 0.0)), key="in_rent")
        inc["other"] = st.number_input("Other Monthly", value=float(inc.get("other", 0.0)), key="in_other")
        s["income"] = inc
        debts = dict(s.get("debts", {}))
        debts["monthly_total"] = st.number_input(
            "Monthly Debts", value=float(debts.get("monthly_total", 0.0)), key="in_debts"
        )
        s["debts"] = debts
        s["is_dscr_loan"] = st.checkbox("DSCR Loan", value=bool(s.get("is_dscr_loan", False)), key="in_dscr")

    with st.expander("Buydown & Assistance"):
        bd = dict(s.get("buydown", {}))
        bd["active"] = st.checkbox("Temporary Buydown", value=bool(bd.get("active", False)), key="in_bd_active")
        bd["type"] = st.selectbox(
            "Buydown Type", BUYDOWNS, index=BUYDOWNS.index(bd.get("type", "2-1")), key="in_bd_type"
        )
        s["buydown"] = bd
        s["dpa"] = _dpa_inputs("Assistance 1", "in_dpa1", dict(s.get("dpa") or {}))
        dpa2 = _dpa_inputs("Assistance 2", "in_dpa2", dict(s.get("dpa2") or {}))
        # None until a second assistance loan is entered
        if dpa2.get("active") or s.get("dpa2"):
            s["dpa2"] = dpa2

    with st.expander("Closing Costs"):
        s["closing_costs"] = render_closing_cost_editor(s.get("closing_costs", []))

    scenario = Scenario.model_validate(s)
    if loan_type != scenario.loan_type.value:
        scenario = with_loan_type(scenario, loan_type)
    scenario = with_down_payment_percent(scenario, down_pct)
    st.session_state["scenario"] = scenario.model_dump(mode="json")
    return scenario
