"""Fixed-rate amortization math shared by every calculator."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import List

import pandas as pd

FREQUENCIES = {"monthly": 12, "bi-weekly": 26, "weekly": 52}
LUMP_SUM_FREQUENCIES = ("one-time", "yearly", "quarterly")


def nz(x, default=0.0):
    """Return a float for ``x`` or a fallback value.

    Form fields arrive as blanks, ``None`` or ``NaN`` while a visitor is still
    typing.  Treating those as zero keeps the running totals from breaking.
    """

    try:
        if x is None or (isinstance(x, float) and math.isnan(x)):
            return default
        return float(x)
    except (TypeError, ValueError):
        return default


def months_in_term(term_years) -> int:
    """Whole number of monthly payments in a term given in years."""
    return int(round(nz(term_years) * 12))


def monthly_payment(principal, annual_rate_pct, term_years):
    """Calculate the fully amortizing monthly payment for a loan.

    ``principal`` is the starting loan amount, ``annual_rate_pct`` is the
    nominal yearly interest rate (e.g. ``6.5`` for 6.5%), and ``term_years`` is
    the amortization period in years.  Uses
    ``M = P * r(1+r)^n / ((1+r)^n - 1)`` and falls back to ``P / n`` when the
    rate is zero.
    """

    L = nz(principal)
    r = nz(annual_rate_pct) / 100 / 12
    n = months_in_term(term_years)
    if n <= 0 or L <= 0:
        return 0.0
    if r == 0:
        return L / n
    growth = (1 + r) ** n
    return L * (r * growth) / (growth - 1)


def principal_from_payment(payment, annual_rate_pct, term_years):
    """Reverse amortization to find the loan amount for a given payment.

    Used by the affordability calculator: given the payment a buyer can carry,
    determine the largest principal that fits the rate and term.
    """

    P = nz(payment)
    r = nz(annual_rate_pct) / 100 / 12
    n = months_in_term(term_years)
    if n <= 0:
        return 0.0
    if r == 0:
        return P * n
    return P * (1 - (1 + r) ** (-n)) / r


def remaining_balance(principal, annual_rate_pct, term_years, months_paid):
    """Loan balance left after ``months_paid`` scheduled payments."""

    L = nz(principal)
    n = months_in_term(term_years)
    k = int(months_paid)
    if L <= 0 or k >= n:
        return 0.0
    pmt = monthly_payment(L, annual_rate_pct, term_years)
    r = nz(annual_rate_pct) / 100 / 12
    if r == 0:
        return max(0.0, L - pmt * k)
    return max(0.0, pmt * (1 - (1 + r) ** (-(n - k))) / r)


def amortization_schedule(principal, annual_rate_pct, term_months, extra_payment=0.0) -> pd.DataFrame:
    """Period-by-period schedule with an optional extra principal payment.

    The scheduled payment is computed for the full term; ``extra_payment`` is
    added every period until the balance is retired.  The loop stops after
    twice the term as a guard against payments that never cover interest.
    """

    L = nz(principal)
    r = nz(annual_rate_pct) / 100 / 12
    n = int(term_months)
    extra = max(0.0, nz(extra_payment))
    pmt = monthly_payment(L, annual_rate_pct, n / 12)

    rows = []
    bal = L
    period = 0
    # Stop at half a cent so float drift never adds a trailing period.
    while bal > 0.005 and period < n * 2:
        period += 1
        interest = bal * r
        scheduled_principal = min(pmt - interest, bal)
        applied_extra = min(extra, bal - scheduled_principal)
        bal -= scheduled_principal + applied_extra
        rows.append(
            {
                "Period": period,
                "Payment": scheduled_principal + interest,
                "Interest": interest,
                "Principal": scheduled_principal,
                "Extra": applied_extra,
                "Balance": max(bal, 0.0),
            }
        )
    return pd.DataFrame(rows, columns=["Period", "Payment", "Interest", "Principal", "Extra", "Balance"])


def periods_per_year(frequency: str) -> int:
    try:
        return FREQUENCIES[frequency]
    except KeyError:
        raise ValueError(f"Unknown payment frequency: {frequency!r}") from None


def payment_dates(first_payment: date, frequency: str, count: int) -> List[date]:
    """Dates of the first ``count`` payments starting on ``first_payment``.

    Monthly payments keep the day of month (clamped to month end); bi-weekly
    and weekly payments step 14 and 7 days.
    """

    periods_per_year(frequency)
    start = pd.Timestamp(first_payment)
    if frequency == "monthly":
        stamps = [start + pd.DateOffset(months=i) for i in range(count)]
    else:
        step = 14 if frequency == "bi-weekly" else 7
        stamps = [start + pd.Timedelta(days=step * i) for i in range(count)]
    return [s.date() for s in stamps]


@dataclass(frozen=True)
class EarlyPayoff:
    baseline_interest: float
    accelerated_interest: float
    interest_savings: float
    new_payment: float
    baseline_months: int
    accelerated_months: int

    @property
    def term_reduction_months(self) -> int:
        return self.baseline_months - self.accelerated_months


def lump_sum_per_month(amount, lump_sum_frequency: str, term_months: int) -> float:
    amt = max(0.0, nz(amount))
    if amt == 0:
        return 0.0
    if lump_sum_frequency == "one-time":
        return amt / term_months
    if lump_sum_frequency == "yearly":
        return amt / 12
    if lump_sum_frequency == "quarterly":
        return amt / 3
    raise ValueError(f"Unknown lump sum frequency: {lump_sum_frequency!r}")


def early_payoff(
    principal,
    annual_rate_pct,
    term_years,
    extra_monthly=0.0,
    frequency: str = "monthly",
    lump_sum=0.0,
    lump_sum_frequency: str = "one-time",
) -> EarlyPayoff:
    """Compare a standard payoff with an accelerated one.

    The extra monthly amount is normalised to the payment frequency
    (``extra * 12 / periods``) and lump sums are spread into an equivalent
    monthly contribution before re-running the schedule.
    """

    term_months = months_in_term(term_years)
    adjusted_extra = max(0.0, nz(extra_monthly)) * 12 / periods_per_year(frequency)
    lump = lump_sum_per_month(lump_sum, lump_sum_frequency, term_months)

    baseline = amortization_schedule(principal, annual_rate_pct, term_months)
    accelerated = amortization_schedule(principal, annual_rate_pct, term_months, adjusted_extra + lump)

    base_interest = float(baseline["Interest"].sum())
    accel_interest = float(accelerated["Interest"].sum())
    return EarlyPayoff(
        baseline_interest=base_interest,
        accelerated_interest=accel_interest,
        interest_savings=max(0.0, base_interest - accel_interest),
        new_payment=monthly_payment(principal, annual_rate_pct, term_years) + adjusted_extra + lump,
        baseline_months=len(baseline),
        accelerated_months=len(accelerated),
    )


def insurance_percent_to_dollar(percent, home_value) -> float:
    """Annual insurance premium from a percent of home value."""

    return nz(home_value) * nz(percent) / 100


def insurance_dollar_to_percent(dollars, home_value) -> float:
    value = nz(home_value)
    return nz(dollars) / value * 100 if value > 0 else 0.0
