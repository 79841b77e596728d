from datetime import date

import pytest

from core.amortization import (
    amortization_schedule,
    early_payoff,
    insurance_dollar_to_percent,
    insurance_percent_to_dollar,
    lump_sum_per_month,
    monthly_payment,
    payment_dates,
    periods_per_year,
    principal_from_payment,
    remaining_balance,
)


def test_amortization_inverse_roundtrip():
    principal = 400000
    rate = 6.5
    term = 30
    pmt = monthly_payment(principal, rate, term)
    back = principal_from_payment(pmt, rate, term)
    assert abs(back - principal) < 0.01


def test_known_payment():
    assert monthly_payment(200000, 6.0, 30) == pytest.approx(1199.10, abs=0.01)


def test_zero_rate_is_straight_line():
    assert monthly_payment(360000, 0, 30) == pytest.approx(1000.0)
    assert principal_from_payment(1000, 0, 30) == pytest.approx(360000.0)
    assert remaining_balance(120000, 0, 10, 60) == pytest.approx(60000.0)


def test_no_principal_or_term_means_no_payment():
    assert monthly_payment(0, 7, 30) == 0.0
    assert monthly_payment(-5000, 7, 30) == 0.0
    assert monthly_payment(100000, 7, 0) == 0.0


def test_payment_grows_with_rate_and_shrinks_with_term():
    assert monthly_payment(300000, 7, 30) > monthly_payment(300000, 6, 30)
    assert monthly_payment(300000, 7, 15) > monthly_payment(300000, 7, 30)


def test_remaining_balance_bounds():
    assert remaining_balance(250000, 6.5, 30, 0) == pytest.approx(250000, abs=0.01)
    assert remaining_balance(250000, 6.5, 30, 360) == 0.0
    mid = remaining_balance(250000, 6.5, 30, 120)
    assert 0 < mid < 250000


def test_schedule_matches_closed_form():
    sched = amortization_schedule(200000, 6.0, 360)
    assert list(sched.columns) == ["Period", "Payment", "Interest", "Principal", "Extra", "Balance"]
    assert len(sched) == 360
    assert sched["Balance"].iloc[-1] == pytest.approx(0.0, abs=0.01)
    assert sched["Balance"].iloc[59] == pytest.approx(remaining_balance(200000, 6.0, 30, 60), abs=0.01)
    total_interest = sched["Interest"].sum()
    assert total_interest == pytest.approx(monthly_payment(200000, 6.0, 30) * 360 - 200000, abs=0.05)


def test_extra_payment_shortens_schedule():
    base = amortization_schedule(200000, 6.0, 360)
    fast = amortization_schedule(200000, 6.0, 360, extra_payment=200)
    assert len(fast) < len(base)
    assert fast["Interest"].sum() < base["Interest"].sum()


def test_periods_per_year():
    assert periods_per_year("monthly") == 12
    assert periods_per_year("bi-weekly") == 26
    assert periods_per_year("weekly") == 52
    with pytest.raises(ValueError):
        periods_per_year("daily")


def test_payment_dates_clamp_month_end():
    dates = payment_dates(date(2024, 1, 31), "monthly", 3)
    assert dates == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]


def test_payment_dates_fixed_steps():
    assert payment_dates(date(2024, 1, 1), "bi-weekly", 3)[-1] == date(2024, 1, 29)
    assert payment_dates(date(2024, 1, 1), "weekly", 2)[-1] == date(2024, 1, 8)


def test_lump_sum_spreading():
    assert lump_sum_per_month(3600, "one-time", 360) == pytest.approx(10.0)
    assert lump_sum_per_month(1200, "yearly", 360) == pytest.approx(100.0)
    assert lump_sum_per_month(300, "quarterly", 360) == pytest.approx(100.0)
    assert lump_sum_per_month(0, "sometimes", 360) == 0.0
    with pytest.raises(ValueError):
        lump_sum_per_month(100, "sometimes", 360)


def test_early_payoff_savings():
    res = early_payoff(300000, 6.5, 30, extra_monthly=200)
    assert res.interest_savings > 0
    assert res.term_reduction_months > 0
    assert res.new_payment == pytest.approx(monthly_payment(300000, 6.5, 30) + 200)


def test_early_payoff_normalises_frequency():
    res = early_payoff(300000, 6.5, 30, extra_monthly=260, frequency="bi-weekly")
    assert res.new_payment == pytest.approx(monthly_payment(300000, 6.5, 30) + 120)


def test_early_payoff_without_extra_saves_nothing():
    res = early_payoff(300000, 6.5, 30)
    assert res.interest_savings == 0.0
    assert res.term_reduction_months == 0


def test_insurance_conversion():
    assert insurance_percent_to_dollar(0.5, 300000) == pytest.approx(1500.0)
    assert insurance_dollar_to_percent(1500, 300000) == pytest.approx(0.5)
    assert insurance_dollar_to_percent(1500, 0) == 0.0
