import json
import streamlit as st
from core import state


def test_save_state_ignores_widget_keys(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    st.session_state["scenario"] = {"name": "A"}
    st.session_state["in_price"] = 400000.0
    state.save_state()
    data = json.loads(file.read_text())
    assert "in_price" not in data
    assert data["scenario"] == {"name": "A"}


def test_load_state_ignores_widget_keys(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    file.write_text(json.dumps({"saved_scenarios": [], "in_price": 1.0}))
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    state.load_state()
    assert "saved_scenarios" in st.session_state
    assert "in_price" not in st.session_state


def test_load_state_tolerates_corrupt_file(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    file.write_text("{not json")
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    state.load_state()
    assert "scenario" not in st.session_state
