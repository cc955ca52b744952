import io

import streamlit as st

from core.rules import evaluate_rules, has_blocking
from core.state import load_state, save_state
from export.pdf_export import build_scenario_pdf
from loanquote.closing_costs import closing_cost_breakdown
from loanquote.config import config
from loanquote.engine import calculate_scenario
from loanquote.logging_utils import get_logger
from loanquote.presets import DISCLAIMER
from ui.results import (
    render_buydown,
    render_closing_costs,
    render_payment_summary,
    render_qualification,
    render_rule_results,
)
from ui.scenario_form import render_scenario_inputs
from ui.scenarios import render_history, render_saved_scenarios

logger = get_logger(__name__)


def render_calculator():
    """Scenario inputs on the left, live results on the right."""
    left, right = st.columns([1, 2])
    with left:
        scenario = render_scenario_inputs()
    results = calculate_scenario(scenario)
    with right:
        render_payment_summary(results)
        render_buydown(results)
        render_closing_costs(scenario, results)
        render_qualification(results)
        st.divider()
        render_rule_results(evaluate_rules(scenario, results))
    return scenario, results


def render_exports(scenario, results):
    rule_results = evaluate_rules(scenario, results)
    blocking = has_blocking(rule_results)
    branding = st.session_state.setdefault(
        "branding", {"title": config.PDF_TITLE, "mlo": "", "nmls": "", "contact": ""}
    )
    st.write("**Branding**")
    c1, c2, c3 = st.columns(3)
    branding["mlo"] = c1.text_input("Loan Officer", value=branding.get("mlo", ""), key="brand_mlo")
    branding["nmls"] = c2.text_input("NMLS", value=branding.get("nmls", ""), key="brand_nmls")
    branding["contact"] = c3.text_input("Contact", value=branding.get("contact", ""), key="brand_contact")

    st.write("**Disclaimer**")
    st.caption(DISCLAIMER)
    st.divider()

    override_reason = ""
    if blocking:
        st.error("Critical warnings present. Provide an override reason to enable PDF export.")
        override_reason = st.text_input("Override reason (will be embedded in PDF)", key="override_reason")
    if blocking and not override_reason.strip():
        st.info("Resolve critical warnings or add an override reason to enable PDF export.")
        return

    buf = io.BytesIO()
    build_scenario_pdf(
        buf,
        branding,
        scenario,
        results,
        cost_table=closing_cost_breakdown(scenario, results),
        warnings=rule_results,
        override_reason=override_reason.strip() or None,
    )
    logger.info(
        "scenario pdf built",
        extra={"context": {"scenario": scenario.name, "override": bool(override_reason.strip())}},
    )
    st.download_button(
        "Download PDF",
        data=buf.getvalue(),
        file_name="scenario_summary.pdf",
        mime="application/pdf",
    )


def main():
    st.set_page_config(page_title=config.PDF_TITLE, layout="wide")
    load_state()
    st.title("Loan Scenario Calculator")
    calc_tab, compare_tab, history_tab, export_tab = st.tabs(["Calculator", "Compare", "History", "Export"])
    with calc_tab:
        scenario, results = render_calculator()
    with compare_tab:
        render_saved_scenarios(scenario)
    with history_tab:
        render_history()
    with export_tab:
        render_exports(scenario, results)
    save_state()


if __name__ == "__main__":
    main()
