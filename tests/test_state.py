import json

import streamlit as st

from core import state


def test_form_key():
    assert state.form_key("va-purchase") == "form_va-purchase"


def test_save_state_ignores_widget_keys(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    st.session_state["form_purchase"] = {"home_price": 350000.0}
    st.session_state["calc_purchase_home_price"] = 350000.0
    state.save_state()
    data = json.loads(file.read_text())
    assert "calc_purchase_home_price" not in data
    assert data["form_purchase"] == {"home_price": 350000.0}


def test_load_state_ignores_widget_keys(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    file.write_text(json.dumps({"fee_tables": {"usda": {"annual_pct": 0.5}}, "calc_dscr_down_payment": 1}))
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    state.load_state()
    assert "fee_tables" in st.session_state
    assert "calc_dscr_down_payment" not in st.session_state


def test_load_state_survives_corrupt_file(tmp_path, monkeypatch, caplog):
    file = tmp_path / "session.json"
    file.write_text("{not json")
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    state.load_state()
    assert "could not read session file" in caplog.text


def test_load_state_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr(state, "SESSION_FILE", str(tmp_path / "missing.json"))
    st.session_state.clear()
    state.load_state()
    assert "fee_tables" not in st.session_state
