import streamlit as st

from core.history import ScenarioHistory
from loanquote.compare import compare_scenarios
from loanquote.models import Scenario
from ui.scenario_form import reset_inputs


def render_saved_scenarios(scenario: Scenario):
    """Save the current scenario and compare saved ones side by side."""
    st.subheader("Compare Scenarios")
    saved = st.session_state.setdefault("saved_scenarios", [])
    c1, c2 = st.columns(2)
    if c1.button("Save Scenario", key="btn_save_scenario"):
        saved.append(scenario.model_dump(mode="json"))
        history = ScenarioHistory.from_dict(st.session_state.get("history", []))
        history.record(scenario, note="Saved")
        st.session_state["history"] = history.as_dict()
    if saved and c2.button("Clear Saved", key="btn_clear_saved"):
        saved.clear()
    if not saved:
        st.caption("No saved scenarios yet.")
        return
    table = compare_scenarios([Scenario.model_validate(s) for s in saved])
    st.dataframe(table, use_container_width=True)


def render_history():
    st.subheader("History")
    history = ScenarioHistory.from_dict(st.session_state.get("history", []))
    if not history.entries:
        st.caption("No versions recorded.")
        return
    for entry in reversed(history.entries):
        with st.expander(f"{entry.timestamp:%Y-%m-%d %H:%M} • {entry.snapshot.name}"):
            if entry.note:
                st.write(entry.note)
            for change in entry.changes:
                st.markdown(f"- {change}")
            if st.button("Restore", key=f"restore_{entry.id}"):
                st.session_state["scenario"] = history.restore(entry.id).model_dump(mode="json")
                reset_inputs()
                st.rerun()
