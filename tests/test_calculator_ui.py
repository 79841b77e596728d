from streamlit.testing.v1 import AppTest

from core.amortization import monthly_payment
from core.formatters import format_currency


def purchase_app():
    from ui.calculator_page import render_calculator_page

    render_calculator_page("purchase")


def va_purchase_app():
    from ui.calculator_page import render_calculator_page

    render_calculator_page("va-purchase")


def dscr_app():
    from ui.calculator_page import render_calculator_page

    render_calculator_page("dscr")


def _metric(at, label):
    return next(m.value for m in at.metric if m.label == label)


def test_purchase_defaults_render_total_payment():
    at = AppTest.from_function(purchase_app)
    at.run()
    assert not at.exception
    expected = monthly_payment(280000, 7.0, 30) + 350 + 100
    assert _metric(at, "Total Monthly Payment") == format_currency(expected)
    assert at.session_state["form_purchase"]["home_price"] == 350000.0


def test_purchase_updates_when_rate_changes():
    at = AppTest.from_function(purchase_app)
    at.run()
    at.number_input(key="calc_purchase_interest_rate").set_value(6.0)
    at.number_input(key="calc_purchase_loan_term").set_value(15)
    at.run()
    expected = monthly_payment(280000, 6.0, 15) + 350 + 100
    assert _metric(at, "Total Monthly Payment") == format_currency(expected)


def test_down_payment_above_price_shows_field_error():
    at = AppTest.from_function(purchase_app)
    at.run()
    at.number_input(key="calc_purchase_down_payment").set_value(400000)
    at.run()
    assert not at.exception
    assert [e.value for e in at.error] == ["Down Payment: Down payment cannot exceed home price"]
    assert len(at.metric) == 0


def test_out_of_range_rate_shows_message():
    at = AppTest.from_function(purchase_app)
    at.run()
    at.number_input(key="calc_purchase_interest_rate").set_value(25.0)
    at.run()
    assert "Interest Rate (%): Interest rate must be between 0% and 20%" in [e.value for e in at.error]


def test_va_options_only_for_va_program():
    at = AppTest.from_function(purchase_app)
    at.run()
    assert not [c for c in at.checkbox if c.key == "calc_purchase_va_exempt"]
    at.selectbox(key="calc_purchase_loan_program").set_value("VA")
    at.run()
    assert [c for c in at.checkbox if c.key == "calc_purchase_va_exempt"]


def test_saved_form_values_are_restored():
    at = AppTest.from_function(dscr_app)
    at.session_state["form_dscr"] = {
        "property_price": 300000.0,
        "down_payment": 300000.0,
        "interest_rate": 7.5,
        "monthly_rent": 2500.0,
        "monthly_expenses": 800.0,
    }
    at.run()
    assert _metric(at, "DSCR Ratio") == "999"


def test_dscr_advisories():
    at = AppTest.from_function(dscr_app)
    at.session_state["form_dscr"] = {
        "property_price": 300000.0,
        "down_payment": 60000.0,
        "interest_rate": 7.5,
        "monthly_rent": 1500.0,
        "monthly_expenses": 800.0,
    }
    at.run()
    warnings = [w.value for w in at.warning]
    assert any(w.startswith("[DSCR_BELOW_MINIMUM]") for w in warnings)
    assert any(w.startswith("[NEGATIVE_CASH_FLOW]") for w in warnings)


def test_pdf_export_prepares_download():
    at = AppTest.from_function(dscr_app)
    at.run()
    at.button(key="pdf_dscr").click()
    at.run()
    assert not at.exception
    assert at.session_state["pdf_bytes_dscr"].startswith(b"%PDF")
    assert any("PDF exports remaining today" in c.value for c in at.caption)


def test_va_purchase_early_payoff():
    at = AppTest.from_function(va_purchase_app)
    at.run()
    assert _metric(at, "Interest Savings") == "$0"
    at.number_input(key="ep_extra").set_value(200.0)
    at.run()
    assert _metric(at, "Interest Savings") != "$0"
    assert _metric(at, "Term Reduction") != "0 months"
    assert at.session_state["early_payoff"]["extra_monthly"] == 200.0
    assert any(c.value.startswith("Estimated payoff:") for c in at.caption)
