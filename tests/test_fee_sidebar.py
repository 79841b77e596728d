import json

from streamlit.testing.v1 import AppTest


def sidebar_app():
    from ui.calculator_page import render_calculator_page

    render_calculator_page("purchase")


FORM = {
    "home_price": 350000.0,
    "down_payment": 30000.0,
    "interest_rate": 7.0,
    "loan_term": 30.0,
    "property_tax_rate": 0.0,
    "insurance": 0.0,
    "hoa": 0.0,
    "loan_program": "Conventional",
    "finance_upfront": True,
}


def _mi_cell(at):
    frame = at.dataframe[0].value
    return frame.loc[frame["Item"] == "Mortgage Insurance", "Value"].iloc[0]


def test_conventional_mi_table_editable():
    at = AppTest.from_function(sidebar_app)
    at.session_state["form_purchase"] = dict(FORM)
    at.run()
    base_loan = 320000.0
    assert _mi_cell(at) == f"${base_loan * 0.40 / 100 / 12:,.0f}"

    ta = next(w for w in at.sidebar.text_area if w.label == "Conventional MI Table")
    tbl = at.session_state["fee_tables"]["conv_mi"]
    tbl["90-95"] = 1.00
    ta.set_value(json.dumps(tbl, indent=2))
    at.run()
    assert _mi_cell(at) == f"${base_loan * 1.00 / 100 / 12:,.0f}"
    assert at.session_state["fee_tables"]["conv_mi"]["90-95"] == 1.00


def test_invalid_json_keeps_previous_table():
    at = AppTest.from_function(sidebar_app)
    at.session_state["form_purchase"] = dict(FORM)
    at.run()
    at.sidebar.text_area(key="fee_fha").set_value("{not json")
    at.run()
    assert any(e.value.startswith("FHA MIP Table: invalid JSON") for e in at.sidebar.error)
    assert at.session_state["fee_tables"]["fha"]["ufmip_pct"] == 1.75


def test_non_object_json_rejected():
    at = AppTest.from_function(sidebar_app)
    at.run()
    at.sidebar.text_area(key="fee_usda").set_value("[1, 2]")
    at.run()
    assert any(e.value == "USDA Guarantee Fee Table: expected a JSON object" for e in at.sidebar.error)


def test_string_rate_reported_and_previous_table_kept():
    at = AppTest.from_function(sidebar_app)
    at.session_state["form_purchase"] = dict(FORM)
    at.run()
    at.sidebar.text_area(key="fee_conv_mi").set_value(json.dumps({"90-95": "0.40"}))
    at.run()
    assert not at.exception
    assert any(e.value.startswith("Conventional MI Table: 90-95:") for e in at.sidebar.error)
    assert at.session_state["fee_tables"]["conv_mi"]["90-95"] == 0.40
    assert _mi_cell(at) == f"${320000.0 * 0.40 / 100 / 12:,.0f}"


def test_fha_scalar_annual_table_reported():
    at = AppTest.from_function(sidebar_app)
    at.session_state["form_purchase"] = {**FORM, "loan_program": "FHA"}
    at.run()
    at.sidebar.text_area(key="fee_fha").set_value(json.dumps({"ufmip_pct": 1.75, "annual_table": 5}))
    at.run()
    assert not at.exception
    assert any(e.value.startswith("FHA MIP Table: annual_table") for e in at.sidebar.error)
    assert at.session_state["fee_tables"]["fha"]["annual_table"]["<=95_>15"] == 0.50
