from datetime import date

import pandas as pd
import streamlit as st

from core.amortization import (
    FREQUENCIES,
    LUMP_SUM_FREQUENCIES,
    amortization_schedule,
    early_payoff,
    insurance_dollar_to_percent,
    insurance_percent_to_dollar,
    lump_sum_per_month,
    months_in_term,
    payment_dates,
    periods_per_year,
)
from core.formatters import format_currency

EARLY_PAYOFF_DEFAULTS = {
    "extra_monthly": 0.0,
    "frequency": "monthly",
    "lump_sum": 0.0,
    "lump_sum_frequency": "one-time",
}


def balance_chart_frame(principal, rate_pct, term_years, extra_per_month) -> pd.DataFrame:
    """Remaining balance by month for the standard and accelerated schedules."""
    months = months_in_term(term_years)
    base = amortization_schedule(principal, rate_pct, months).set_index("Period")["Balance"]
    fast = amortization_schedule(principal, rate_pct, months, extra_per_month).set_index("Period")["Balance"]
    frame = pd.DataFrame({"Standard": base, "With extra payments": fast})
    return frame.fillna(0.0)


def render_early_payoff(principal, rate_pct, term_years):
    """Extra-payment planner shown under the VA purchase results."""
    st.subheader("Early Payoff")
    opts = {**EARLY_PAYOFF_DEFAULTS, **st.session_state.get("early_payoff", {})}
    c1, c2 = st.columns(2)
    opts["extra_monthly"] = c1.number_input(
        "Extra Monthly Payment", min_value=0.0, value=float(opts["extra_monthly"]), step=50.0, key="ep_extra"
    )
    freqs = list(FREQUENCIES)
    opts["frequency"] = c2.selectbox(
        "Payment Frequency", freqs, index=freqs.index(opts["frequency"]), key="ep_frequency"
    )
    opts["lump_sum"] = c1.number_input(
        "Lump Sum", min_value=0.0, value=float(opts["lump_sum"]), step=500.0, key="ep_lump"
    )
    lumps = list(LUMP_SUM_FREQUENCIES)
    opts["lump_sum_frequency"] = c2.selectbox(
        "Lump Sum Frequency", lumps, index=lumps.index(opts["lump_sum_frequency"]), key="ep_lump_frequency"
    )
    first = st.date_input("First Payment Date", value=date.today().replace(day=1), key="ep_first_payment")
    st.session_state["early_payoff"] = opts

    result = early_payoff(
        principal,
        rate_pct,
        term_years,
        opts["extra_monthly"],
        opts["frequency"],
        opts["lump_sum"],
        opts["lump_sum_frequency"],
    )
    m1, m2, m3 = st.columns(3)
    m1.metric("Interest Savings", format_currency(result.interest_savings))
    m2.metric("New Monthly Outlay", format_currency(result.new_payment, 2))
    m3.metric("Term Reduction", f"{result.term_reduction_months} months")

    # Payoff date counted in payments of the chosen frequency.
    payments = max(1, round(result.accelerated_months * periods_per_year(opts["frequency"]) / 12))
    payoff = payment_dates(first, opts["frequency"], payments)[-1]
    st.caption(f"Estimated payoff: {payoff:%B %Y} ({result.accelerated_months} months)")

    per_month = opts["extra_monthly"] * 12 / periods_per_year(opts["frequency"]) + lump_sum_per_month(
        opts["lump_sum"], opts["lump_sum_frequency"], months_in_term(term_years)
    )
    st.line_chart(balance_chart_frame(principal, rate_pct, term_years, per_month))
    return result


def render_insurance_helper(home_price, key_prefix="ins"):
    """Convert annual homeowners insurance between dollars and a percent of home value."""
    with st.expander("Insurance calculator"):
        c1, c2 = st.columns(2)
        pct = c1.number_input("Insurance (% of home value)", min_value=0.0, value=0.35, step=0.05,
                              key=f"{key_prefix}_pct")
        c1.caption(f"Annual premium: {format_currency(insurance_percent_to_dollar(pct, home_price))}")
        dollars = c2.number_input("Insurance ($ per year)", min_value=0.0, value=1200.0, step=100.0,
                                  key=f"{key_prefix}_dollars")
        c2.caption(f"Share of home value: {insurance_dollar_to_percent(dollars, home_price):.2f}%")
