import json
import logging
import os
from typing import Any

import streamlit as st

from core.config import get_settings
from core.configs import CALCULATORS

logger = logging.getLogger(__name__)

SESSION_FILE = get_settings().session_file


def form_key(slug: str) -> str:
    """Session key holding the last submitted form values for a calculator."""
    return f"form_{slug}"


# Only persist a curated subset of ``st.session_state`` keys. Streamlit
# widgets inject their own keys (e.g. ``calc_purchase``) into
# ``session_state`` when interacted with, and assigning to those on the next
# run raises ``StreamlitAPIException``.
PERSISTED_KEYS = {form_key(slug) for slug in CALCULATORS} | {
    "fee_tables",
    "early_payoff",
    "page",
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
        logger.warning("could not read session file %s: %s", SESSION_FILE, exc)
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
    except OSError as exc:
        logger.warning("could not write session file %s: %s", SESSION_FILE, exc)
