import pandas as pd
import streamlit as st

from core.rules import RuleResult
from loanquote.closing_costs import closing_cost_breakdown
from loanquote.models import AffordabilityResult, CalculatedResults, Scenario


def render_payment_summary(results: CalculatedResults):
    """Monthly payment breakdown and headline cash figures."""
    st.subheader("Monthly Payment")
    cols = st.columns(4)
    cols[0].metric("Total Monthly Payment", f"${results.total_monthly_payment:,.2f}")
    cols[1].metric("Total Loan", f"${results.total_loan_amount:,.0f}")
    cols[2].metric("LTV", f"{results.ltv:.2f}%")
    cols[3].metric("Cash to Close", f"${results.cash_to_close:,.2f}")

    st.caption(f"Total Monthly Payment: ${results.total_monthly_payment:,.2f}")
    st.caption(f"Monthly P&I: ${results.monthly_principal_and_interest:,.2f}")
    st.caption(
        f"Taxes: ${results.monthly_tax:,.2f} • Insurance: ${results.monthly_insurance:,.2f}"
        f" • HOA: ${results.monthly_hoa:,.2f}"
    )
    st.caption(f"Mortgage Insurance: ${results.monthly_mi:,.2f} ({results.mi_rate_percent:.2f}%)")
    if results.monthly_dpa_payment or results.monthly_dpa2_payment:
        st.caption(
            f"Assistance Payments: ${results.monthly_dpa_payment + results.monthly_dpa2_payment:,.2f}"
        )
    if results.financed_mip:
        st.caption(
            f"Base Loan: ${results.base_loan_amount:,.0f} • Financed Premium: ${results.financed_mip:,.0f}"
            f" • Total Loan: ${results.total_loan_amount:,.0f}"
        )
    if results.total_monthly_payment != results.base_monthly_payment:
        st.caption(f"Note Rate Payment: ${results.base_monthly_payment:,.2f}")


def render_buydown(results: CalculatedResults):
    if not results.buydown_schedule:
        return
    st.subheader("Temporary Buydown")
    df = pd.DataFrame([y.model_dump() for y in results.buydown_schedule])
    st.dataframe(df, hide_index=True, use_container_width=True)
    st.caption(f"Buydown Cost: ${results.buydown_cost:,.2f}")


def render_closing_costs(scenario: Scenario, results: CalculatedResults) -> pd.DataFrame:
    """Itemized costs, credits and the cash to close roll-up."""
    st.subheader("Closing Costs")
    table = closing_cost_breakdown(scenario, results)
    st.dataframe(table[table["cost"] != 0], hide_index=True, use_container_width=True)
    cols = st.columns(4)
    cols[0].metric("Total Closing Costs", f"${results.total_closing_costs:,.2f}")
    cols[1].metric("Credits", f"${results.total_credits:,.2f}")
    cols[2].metric("Net Closing Costs", f"${results.net_closing_costs:,.2f}")
    cols[3].metric("Funds Required", f"${results.total_funds_required:,.2f}")
    if results.unused_credits:
        st.caption(f"Unused Credits: ${results.unused_credits:,.2f}")
    if results.prepaid_interest:
        st.caption(
            f"Prepaid Interest: ${results.prepaid_interest:,.2f} ({results.prepaid_interest_days:.0f} days)"
        )
    st.caption(
        f"Seller Concessions: ${results.seller_concessions_amount:,.2f}"
        f" ({results.seller_concessions_percent:.2f}% of price, max ${results.max_concessions_allowed:,.0f})"
    )
    return table


def _affordability(aff: AffordabilityResult):
    st.markdown(f"**{aff.program}**: {'PASS' if aff.passes else 'CHECK'}")
    st.caption(f"Max Price: ${aff.max_price:,.0f} • Max Loan: ${aff.max_loan:,.0f}")
    with st.expander(f"{aff.program} derivation"):
        for step in aff.steps:
            st.text(step)


def render_qualification(results: CalculatedResults):
    """DTI and reverse affordability, or DSCR for investment properties."""
    st.subheader("Qualification")
    if results.dscr is not None:
        d = results.dscr
        cols = st.columns(3)
        cols[0].metric("DSCR", f"{d.ratio:.2f}", delta="PASS" if d.passes else "CHECK")
        cols[1].metric("Gross Rent", f"${d.gross_rental_income:,.2f}")
        cols[2].metric("Debt Service", f"${d.debt_service:,.2f}")
    if results.income.total <= 0:
        st.info("Enter borrower income to see debt-to-income ratios.")
        return
    cols = st.columns(3)
    cols[0].metric("Qualifying Income", f"${results.income.total:,.2f}")
    cols[1].metric("Front-End DTI", f"{results.dti.front_end:.2f}%")
    cols[2].metric("Back-End DTI", f"{results.dti.back_end:.2f}%")
    c1, c2 = st.columns(2)
    with c1:
        _affordability(results.conventional)
    with c2:
        _affordability(results.fha)


def render_rule_results(rule_results: list[RuleResult]):
    if not rule_results:
        st.success("No warnings.")
        return
    for r in rule_results:
        if r.severity == "critical":
            st.error(f"[{r.code}] {r.message}")
        elif r.severity == "warn":
            st.warning(f"[{r.code}] {r.message}")
        else:
            st.info(f"[{r.code}] {r.message}")
