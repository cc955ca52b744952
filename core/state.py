import json
import os
from typing import Any

import streamlit as st

from loanquote.config import config
from loanquote.logging_utils import get_logger

logger = get_logger(__name__)

SESSION_FILE = config.SESSION_FILE

# Only persist a curated subset of ``st.session_state`` keys. Streamlit
# widgets inject their own keys into ``session_state`` when interacted with.
# Persisting those ephemeral keys causes ``StreamlitAPIException`` on the next
# run because widgets with the same keys disallow manual assignment.
PERSISTED_KEYS = {
    "scenario",
    "saved_scenarios",
    "history",
    "branding",
}


def _serializable(value: Any) -> bool:
    return isinstance(value, (int, float, str, bool, list, dict))


def load_state() -> None:
    """Restore Streamlit session state from ``SESSION_FILE`` if it exists."""
    if not os.path.exists(SESSION_FILE):
        return
    try:
        with open(SESSION_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("could not read session file", extra={"context": {"error": str(exc)}})
        return
    for key, val in data.items():
        if key in PERSISTED_KEYS:
            st.session_state.setdefault(key, val)


def save_state() -> None:
    """Persist serializable session state to ``SESSION_FILE``."""
    data = {
        k: v
        for k, v in st.session_state.items()
        if k in PERSISTED_KEYS and _serializable(v)
    }
    try:
        with open(SESSION_FILE, "w", encoding="utf-8") as f:
            json.dump(data, f)
    except (OSError, TypeError) as exc:
        logger.warning("could not write session file", extra={"context": {"error": str(exc)}})
