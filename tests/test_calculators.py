import pytest

from core.amortization import monthly_payment, principal_from_payment
from core.calculators import (
    calculate_affordability,
    calculate_dscr,
    calculate_fix_flip,
    calculate_purchase,
    calculate_refinance,
    calculate_rent_vs_buy,
    calculate_va_purchase,
    calculate_va_refinance,
)
from core.errors import DownPaymentExceedsPriceError
from core.programs import default_tables


def by_label(results):
    return {r.label: r for r in results}


PURCHASE = {
    "home_price": 350000,
    "down_payment": 70000,
    "interest_rate": 7.0,
    "loan_term": 30,
    "property_tax_rate": 1.2,
    "insurance": 1200,
    "hoa": 0,
}


def test_affordability_uses_43_percent_dti():
    res = by_label(
        calculate_affordability(
            {"annual_income": 120000, "monthly_debts": 500, "down_payment": 40000, "interest_rate": 6.0}
        )
    )
    max_loan = principal_from_payment(3800, 6.0, 30)
    assert res["Maximum Loan Amount"].value == pytest.approx(max_loan)
    assert res["Maximum Home Price"].value == pytest.approx(max_loan + 40000)
    assert res["Maximum Home Price"].highlight
    assert res["Estimated Monthly Payment"].value == pytest.approx(3800, abs=0.01)
    assert res["Debt-to-Income Ratio"].value == pytest.approx(0.43, abs=1e-6)


def test_affordability_with_debts_above_budget():
    res = by_label(
        calculate_affordability(
            {"annual_income": 12000, "monthly_debts": 1000, "down_payment": 0, "interest_rate": 6.0}
        )
    )
    assert res["Maximum Loan Amount"].value < 0
    assert res["Estimated Monthly Payment"].value == pytest.approx(-570.0)


def test_purchase_conventional_at_80_ltv_has_no_mi():
    res = by_label(calculate_purchase(PURCHASE))
    pi = monthly_payment(280000, 7.0, 30)
    assert res["Principal & Interest"].value == pytest.approx(pi)
    assert res["Property Taxes"].value == pytest.approx(350.0)
    assert res["Homeowners Insurance"].value == pytest.approx(100.0)
    assert res["Mortgage Insurance"].value == 0.0
    assert res["Total Monthly Payment"].value == pytest.approx(pi + 450.0)
    assert res["Loan-to-Value Ratio"].value == pytest.approx(0.8)
    assert res["Total Interest Paid"].value == pytest.approx(pi * 360 - 280000)


def test_purchase_result_order():
    labels = [r.label for r in calculate_purchase(PURCHASE)]
    assert labels[0] == "Total Monthly Payment"
    assert labels[-1] == "Loan-to-Value Ratio"


def test_purchase_fha_finances_upfront_mip():
    res = by_label(calculate_purchase({**PURCHASE, "down_payment": 12250, "loan_program": "FHA"}))
    base = 350000 - 12250
    upfront = base * 0.0175
    assert res["Upfront Program Fee"].value == pytest.approx(upfront)
    assert res["Loan Amount"].value == pytest.approx(base + upfront)
    assert res["Mortgage Insurance"].value > 0
    assert res["Principal & Interest"].value == pytest.approx(monthly_payment(base + upfront, 7.0, 30))


def test_purchase_uses_edited_tables():
    tables = default_tables()
    tables["conv_mi"]["90-95"] = 1.0
    res = by_label(calculate_purchase({**PURCHASE, "down_payment": 30000}, tables))
    assert res["Mortgage Insurance"].value == pytest.approx(320000 * 0.01 / 12)


def test_purchase_cash_buyer():
    res = by_label(calculate_purchase({**PURCHASE, "down_payment": 350000}))
    assert res["Principal & Interest"].value == 0.0
    assert res["Total Interest Paid"].value == 0.0
    assert res["Loan Amount"].value == 0.0


def test_purchase_down_payment_above_price():
    with pytest.raises(DownPaymentExceedsPriceError, match="Down payment cannot exceed home price"):
        calculate_purchase({**PURCHASE, "down_payment": 400000})


def test_purchase_fractional_term_counts_rounded_months():
    res = by_label(calculate_purchase({**PURCHASE, "loan_term": 2.99}))
    pi = monthly_payment(280000, 7.0, 2.99)
    assert res["Principal & Interest"].value == pytest.approx(pi)
    assert res["Total Interest Paid"].value == pytest.approx(pi * 36 - 280000)


def test_refinance_fractional_terms_count_rounded_months():
    res = by_label(calculate_refinance({**REFI, "remaining_term": 24.99, "mortgage_insurance": 0}))
    current = monthly_payment(250000, 7.5, 25)
    new = monthly_payment(255000, 6.5, 30)
    assert res["Lifetime Savings"].value == pytest.approx(current * 300 - new * 360)


def test_purchase_zero_rate():
    res = by_label(calculate_purchase({**PURCHASE, "interest_rate": 0}))
    assert res["Principal & Interest"].value == pytest.approx(280000 / 360)
    assert res["Total Interest Paid"].value == pytest.approx(0.0, abs=1e-6)


REFI = {
    "current_balance": 250000,
    "current_rate": 7.5,
    "new_rate": 6.5,
    "remaining_term": 25,
    "new_term": 30,
    "closing_costs": 5000,
}


def test_refinance_without_mi_matches_pi_comparison():
    res = by_label(calculate_refinance({**REFI, "mortgage_insurance": 0}))
    current = monthly_payment(250000, 7.5, 25)
    new = monthly_payment(255000, 6.5, 30)
    assert res["Current Monthly Payment"].value == pytest.approx(current)
    assert res["New Monthly Payment"].value == pytest.approx(new)
    assert res["Monthly Savings"].value == pytest.approx(current - new)
    assert res["Break-Even Point"].value == pytest.approx(5000 / (current - new))
    assert res["Interest Rate Reduction"].value == pytest.approx(0.01)
    assert res["New Loan Amount"].value == 255000


def test_refinance_estimates_conventional_mi():
    res = by_label(calculate_refinance(REFI))
    mi = 255000 * 0.005 / 12
    assert res["Mortgage Insurance"].value == pytest.approx(mi)
    assert res["New Monthly Payment"].value == pytest.approx(monthly_payment(255000, 6.5, 30) + mi)


def test_refinance_va_has_no_mi():
    res = by_label(calculate_refinance({**REFI, "loan_program": "VA", "mortgage_insurance": 2400}))
    assert res["Mortgage Insurance"].value == 0.0


def test_refinance_never_breaks_even():
    res = by_label(calculate_refinance({**REFI, "new_rate": 9.0, "new_term": 25}))
    assert res["Monthly Savings"].value < 0
    assert res["Break-Even Point"].value == 0
    assert res["Break-Even Point"].description == "Never breaks even with current parameters"


RENT = {
    "home_price": 350000,
    "down_payment": 70000,
    "interest_rate": 7.0,
    "rent_amount": 2000,
    "years_to_stay": 7,
    "appreciation_rate": 3.0,
}


def test_rent_vs_buy_recommendation_follows_difference():
    res = by_label(calculate_rent_vs_buy(RENT))
    buying = res["Total Cost of Buying"].value
    renting = res["Total Cost of Renting"].value
    assert res["Net Difference"].value == pytest.approx(abs(renting - buying))
    expected = "Buying is more cost-effective" if renting > buying else "Renting is more cost-effective"
    assert res["Recommendation"].description == expected
    assert res["Closing Costs"].value == pytest.approx(10500.0)


def test_rent_vs_buy_cheap_rent_finds_later_break_even():
    res = by_label(calculate_rent_vs_buy({**RENT, "rent_amount": 500, "years_to_stay": 1}))
    assert res["Recommendation"].description == "Renting is more cost-effective"
    assert res["Break-Even Point"].value == 0 or res["Break-Even Point"].value > 1


def test_rent_vs_buy_renting_total_inflates():
    res = by_label(calculate_rent_vs_buy({**RENT, "years_to_stay": 2}))
    assert res["Total Cost of Renting"].value == pytest.approx(2000 * 12 + 2000 * 1.03 * 12)


VA = {
    "home_price": 300000,
    "down_payment": 0,
    "interest_rate": 6.5,
    "va_funding_fee": 2.15,
    "property_tax_rate": 1.2,
    "insurance": 1200,
}


def test_va_purchase_finances_funding_fee():
    res = by_label(calculate_va_purchase(VA))
    fee = 300000 * 0.0215
    assert res["VA Funding Fee"].value == pytest.approx(fee)
    assert res["Total Loan Amount"].value == pytest.approx(300000 + fee)
    assert res["Principal & Interest"].value == pytest.approx(monthly_payment(300000 + fee, 6.5, 30))
    assert res["Loan-to-Value Ratio"].value == pytest.approx(1.0)


def test_va_purchase_down_payment_above_price():
    with pytest.raises(DownPaymentExceedsPriceError):
        calculate_va_purchase({**VA, "down_payment": 300001})


def test_va_refinance_cash_out():
    res = by_label(
        calculate_va_refinance(
            {"current_balance": 300000, "current_rate": 7.0, "new_rate": 6.0, "cash_out_amount": 20000,
             "va_funding_fee": 2.3}
        )
    )
    fee = 320000 * 0.023
    assert res["VA Funding Fee"].value == pytest.approx(fee)
    assert res["New Loan Amount"].value == pytest.approx(320000 + fee)
    assert res["Loan Increase"].value == pytest.approx(20000 + fee)
    assert res["Cash Out Amount"].highlight


def test_va_refinance_rate_and_term_hides_cash_out():
    res = by_label(
        calculate_va_refinance(
            {"current_balance": 300000, "current_rate": 7.0, "new_rate": 6.0, "cash_out_amount": 0,
             "va_funding_fee": 0.5}
        )
    )
    assert not res["Cash Out Amount"].highlight
    assert res["Monthly Savings"].value > 0


DSCR = {"property_price": 300000, "down_payment": 60000, "interest_rate": 7.5, "monthly_rent": 2500,
        "monthly_expenses": 800}


def test_dscr_ratio_is_noi_over_debt_service():
    res = by_label(calculate_dscr(DSCR))
    pi = monthly_payment(240000, 7.5, 30)
    assert res["DSCR Ratio"].value == pytest.approx(1700 / pi)
    assert res["Monthly Cash Flow"].value == pytest.approx(1700 - pi)
    assert res["Total Cash Invested"].value == pytest.approx(69000.0)
    assert res["Cap Rate"].value == pytest.approx(1700 * 12 / 300000)


def test_dscr_cash_purchase():
    res = by_label(calculate_dscr({**DSCR, "down_payment": 300000}))
    assert res["DSCR Ratio"].value == 999
    assert res["Qualification Status"].description.startswith("Cash Purchase")


def test_dscr_cash_purchase_without_income():
    res = by_label(calculate_dscr({**DSCR, "down_payment": 300000, "monthly_rent": 500}))
    assert res["DSCR Ratio"].value == 0.0


def test_dscr_down_payment_above_price():
    with pytest.raises(DownPaymentExceedsPriceError, match="property price"):
        calculate_dscr({**DSCR, "down_payment": 400000})


FLIP = {
    "purchase_price": 500000,
    "renovation_cost": 75000,
    "after_repair_value": 750000,
    "loan_length": 6,
    "annual_property_taxes": 4000,
    "annual_insurance": 3000,
    "purchase_price_ltv": 80,
    "interest_rate": 10.0,
    "origination_fee": 2.0,
    "other_closing_costs": 3.0,
    "cost_to_sell": 5,
}


def test_fix_flip_profit():
    res = by_label(calculate_fix_flip(FLIP))
    assert res["Loan Amount"].value == pytest.approx(400000)
    assert res["Total Interest Over Term"].value == pytest.approx(20000)
    assert res["Closing Costs"].value == pytest.approx(23000)
    assert res["Carrying Costs"].value == pytest.approx(3500)
    assert res["Net Profit"].value == pytest.approx(91000)
    assert res["Borrowed Equity Needed"].value == pytest.approx(198000)
    assert res["Return on Investment"].value == pytest.approx(91000 / 198000)
    assert res["Loan to After Repaired Value"].value == pytest.approx(400000 / 750000)


def test_fix_flip_without_arv():
    res = by_label(calculate_fix_flip({**FLIP, "after_repair_value": 0}))
    assert res["Loan to After Repaired Value"].value == 0.0
    assert res["Net Profit"].value < 0


def test_calculators_accept_validated_models():
    from core.models import PurchaseInputs

    assert calculate_purchase(PurchaseInputs(**PURCHASE)) == calculate_purchase(PURCHASE)
