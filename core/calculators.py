"""Closed-form mortgage calculators.

Each ``calculate_*`` function accepts either a mapping of raw values or an
already-validated input model and returns an ordered list of
:class:`~core.models.CalculatorResult`.  The matching ``validate_*`` function
never raises; it reports the first message per field instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel, ValidationError

from core.amortization import months_in_term, monthly_payment, principal_from_payment, remaining_balance
from core.errors import DownPaymentExceedsPriceError
from core.models import (
    AffordabilityInputs,
    CalculatorResult,
    DSCRInputs,
    FixFlipInputs,
    PurchaseInputs,
    RefinanceInputs,
    RentVsBuyInputs,
    VAPurchaseInputs,
    VARefinanceInputs,
)
from core.presets import CLOSING_COST_PCT, DSCR_CASH_SENTINEL, DTI_RATIO, RENT_VS_BUY, STANDARD_TERM_YEARS
from core.programs import apply_program_fees, dscr_qualification, refinance_mi_monthly

logger = logging.getLogger(__name__)

Inputs = Union[Mapping[str, Any], BaseModel]
Results = List[CalculatorResult]


def _parse(model: Type[BaseModel], inputs: Inputs):
    if isinstance(inputs, model):
        return inputs
    if isinstance(inputs, BaseModel):
        inputs = inputs.model_dump()
    return model.model_validate(inputs)


def _loan_amount(price: float, down_payment: float, noun: str = "home price") -> float:
    loan = price - down_payment
    if loan < 0:
        raise DownPaymentExceedsPriceError(f"Down payment cannot exceed {noun}")
    return loan


def _r(label, value, fmt="currency", highlight=False, description=None) -> CalculatorResult:
    return CalculatorResult(
        label=label, value=float(value), format=fmt, highlight=highlight, description=description
    )


def calculate_affordability(inputs: Inputs) -> Results:
    """Largest home price a buyer can carry at a 43% debt-to-income ratio."""

    data = _parse(AffordabilityInputs, inputs)
    monthly_income = data.annual_income / 12
    max_payment = monthly_income * DTI_RATIO - data.monthly_debts
    max_loan = principal_from_payment(max_payment, data.interest_rate, STANDARD_TERM_YEARS)
    max_price = max_loan + data.down_payment

    # Negative capacity flows through as a negative loan and payment.
    if max_loan > 0:
        est_payment = monthly_payment(max_loan, data.interest_rate, STANDARD_TERM_YEARS)
    else:
        est_payment = max_payment
    ltv = max_loan / max_price if max_price > 0 else 0.0
    dti = (est_payment + data.monthly_debts) / monthly_income if monthly_income > 0 else 0.0
    logger.debug("affordability: max_loan=%.2f max_price=%.2f", max_loan, max_price)

    return [
        _r("Maximum Home Price", max_price, highlight=True,
           description="The maximum home price you can afford based on your income and debts"),
        _r("Maximum Loan Amount", max_loan, description="The maximum mortgage loan amount you qualify for"),
        _r("Down Payment", data.down_payment, description="Your planned down payment amount"),
        _r("Estimated Monthly Payment", est_payment,
           description="Estimated principal and interest payment (excludes taxes and insurance)"),
        _r("Loan-to-Value Ratio", ltv, "percentage",
           description="The ratio of your loan amount to the home price"),
        _r("Debt-to-Income Ratio", dti, "percentage",
           description="Your total monthly debt payments as a percentage of gross income"),
    ]


def calculate_purchase(inputs: Inputs, tables: Optional[dict] = None) -> Results:
    """Monthly PITI for a home purchase with the loan-program overlay applied.

    ``tables`` overrides the preset MI and upfront fee tables, as edited from
    the sidebar.
    """

    data = _parse(PurchaseInputs, inputs)
    base_loan = _loan_amount(data.home_price, data.down_payment)
    fees = apply_program_fees(
        data.loan_program,
        data.home_price,
        base_loan,
        data.down_payment,
        data.loan_term,
        tables,
        finance_upfront=data.finance_upfront,
        first_use_va=data.first_use_va,
        va_exempt=data.va_exempt,
    )
    n = months_in_term(data.loan_term)
    pi = monthly_payment(fees.adjusted_loan, data.interest_rate, data.loan_term)
    tax = data.home_price * data.property_tax_rate / 100 / 12
    ins = data.insurance / 12
    total = pi + tax + ins + data.hoa + fees.mi_monthly

    total_payments = pi * n
    total_interest = total_payments - fees.adjusted_loan if fees.adjusted_loan > 0 else 0.0
    cash_upfront = 0.0 if data.finance_upfront else fees.upfront_amt
    total_cost = (
        data.down_payment
        + cash_upfront
        + total_payments
        + (tax + ins + data.hoa + fees.mi_monthly) * n
    )
    down_pct = data.down_payment / data.home_price * 100
    term = f"{data.loan_term:g}"
    logger.debug("purchase: program=%s loan=%.2f total=%.2f", data.loan_program, fees.adjusted_loan, total)

    return [
        _r("Total Monthly Payment", total, highlight=True,
           description="Your total monthly payment including P&I, taxes, insurance, HOA, and mortgage insurance"),
        _r("Principal & Interest", pi, description="Monthly principal and interest payment on the loan"),
        _r("Property Taxes", tax, description="Estimated monthly property tax payment"),
        _r("Homeowners Insurance", ins, description="Monthly homeowners insurance payment"),
        _r("HOA Fees", data.hoa, description="Monthly homeowners association fees"),
        _r("Mortgage Insurance", fees.mi_monthly,
           description=f"Monthly {data.loan_program} mortgage insurance"),
        _r("Loan Amount", fees.adjusted_loan,
           description="The mortgage loan amount (home price minus down payment, plus any financed fee)"),
        _r("Upfront Program Fee", fees.upfront_amt,
           description="Financed into the loan" if data.finance_upfront else "Paid in cash at closing"),
        _r("Down Payment", data.down_payment,
           description=f"Your down payment ({down_pct:.1f}% of home price)"),
        _r("Total Interest Paid", total_interest, description=f"Total interest paid over {term} years"),
        _r("Total Cost", total_cost,
           description=f"Total cost including down payment, all payments, taxes, insurance, and HOA over {term} years"),
        _r("Loan-to-Value Ratio", base_loan / data.home_price, "percentage",
           description="The ratio of your loan amount to the home price"),
    ]


def calculate_refinance(inputs: Inputs) -> Results:
    """Compare the remaining payments on a loan with a new one.

    Closing costs are rolled into the new balance.  Program mortgage
    insurance is added to the new payment.
    """

    data = _parse(RefinanceInputs, inputs)
    current_n = months_in_term(data.remaining_term)
    new_n = months_in_term(data.new_term)
    current_payment = monthly_payment(data.current_balance, data.current_rate, data.remaining_term)
    new_loan = data.current_balance + data.closing_costs
    new_pi = monthly_payment(new_loan, data.new_rate, data.new_term)
    mi = refinance_mi_monthly(data.loan_program, new_loan, data.mortgage_insurance)
    new_payment = new_pi + mi

    savings = current_payment - new_payment
    break_even = data.closing_costs / savings if savings > 0 else 0.0
    current_total = current_payment * current_n
    new_total = new_payment * new_n
    lifetime = current_total - new_total
    rate_reduction = data.current_rate - data.new_rate
    remaining = f"{data.remaining_term:g}"
    new_term = f"{data.new_term:g}"
    logger.debug("refinance: savings=%.2f break_even=%.2f", savings, break_even)

    return [
        _r("New Monthly Payment", new_payment, highlight=True,
           description="Your new monthly principal, interest, and mortgage insurance payment"),
        _r("Current Monthly Payment", current_payment,
           description="Your current monthly principal and interest payment"),
        _r("Monthly Savings", savings, highlight=True,
           description="Amount you save each month" if savings >= 0 else "Additional monthly cost (negative savings)"),
        _r("Break-Even Point", break_even, "number", highlight=True,
           description="Months to recover closing costs through savings" if savings > 0
           else "Never breaks even with current parameters"),
        _r("Lifetime Savings", lifetime,
           description=f"Total savings over {new_term} years" if lifetime >= 0 else f"Additional cost over {new_term} years"),
        _r("Closing Costs", data.closing_costs, description="Upfront costs to refinance (rolled into new loan)"),
        _r("New Loan Amount", new_loan, description="Current balance plus closing costs"),
        _r("Mortgage Insurance", mi, description=f"Monthly {data.loan_program} mortgage insurance on the new loan"),
        _r("Interest Rate Reduction", rate_reduction / 100, "percentage",
           description="Reduction in interest rate" if rate_reduction >= 0 else "Increase in interest rate"),
        _r("Total Interest (Current Loan)", current_total - data.current_balance,
           description=f"Total interest over remaining {remaining} years"),
        _r("Total Interest (New Loan)", new_pi * new_n - new_loan, description=f"Total interest over {new_term} years"),
    ]


def _renting_cost(rent: float, years: int) -> float:
    total = 0.0
    for _ in range(years):
        total += rent * 12
        rent *= 1 + RENT_VS_BUY["rent_inflation_pct"]
    return total


def calculate_rent_vs_buy(inputs: Inputs) -> Results:
    """Net cost of owning versus renting over the planned stay."""

    data = _parse(RentVsBuyInputs, inputs)
    price = data.home_price
    loan = _loan_amount(price, data.down_payment)
    years = int(data.years_to_stay)
    pi = monthly_payment(loan, data.interest_rate, STANDARD_TERM_YEARS)
    owning = pi + price * (
        RENT_VS_BUY["property_tax_pct"] + RENT_VS_BUY["insurance_pct"] + RENT_VS_BUY["maintenance_pct"]
    ) / 12
    closing = price * CLOSING_COST_PCT
    growth = 1 + data.appreciation_rate / 100

    def net_buying(yrs: int):
        value = price * growth ** yrs
        balance = remaining_balance(loan, data.interest_rate, STANDARD_TERM_YEARS, yrs * 12)
        equity = data.down_payment + (loan - balance) + (value - price)
        return data.down_payment + closing + owning * yrs * 12 - equity, equity, value

    net_buy, equity, future_value = net_buying(years)
    renting = _renting_cost(data.rent_amount, years)
    diff = renting - net_buy
    if diff > 0:
        recommendation = "Buying is more cost-effective"
    elif diff < 0:
        recommendation = "Renting is more cost-effective"
    else:
        recommendation = "Costs are equal"

    break_even = 0
    if diff < 0:
        for yrs in range(years + 1, RENT_VS_BUY["max_horizon_years"] + 1):
            if _renting_cost(data.rent_amount, yrs) >= net_buying(yrs)[0]:
                break_even = yrs
                break
    logger.debug("rent_vs_buy: diff=%.2f break_even=%d", diff, break_even)

    return [
        _r("Total Cost of Buying", net_buy, highlight=True,
           description=f"Net cost of buying over {years} years (after equity and appreciation)"),
        _r("Total Cost of Renting", renting, highlight=True,
           description=f"Total rent paid over {years} years (with 3% annual inflation)"),
        _r("Net Difference", abs(diff), highlight=True,
           description="Buying saves you this amount" if diff > 0 else "Renting saves you this amount"),
        _r("Recommendation", 0, "number", description=recommendation),
        _r("Monthly Mortgage Payment", pi, description="Principal and interest payment"),
        _r("Total Monthly Homeownership Cost", owning,
           description="Includes P&I, taxes, insurance, and maintenance"),
        _r("Current Monthly Rent", data.rent_amount, description="Your current monthly rent payment"),
        _r("Equity Built", equity, description="Down payment + principal paid + home appreciation"),
        _r("Home Value After Period", future_value, description=f"Estimated home value after {years} years"),
        _r("Total Appreciation", future_value - price, description=f"Home value increase over {years} years"),
        _r("Closing Costs", closing, description="Estimated closing costs (3% of home price)"),
        _r("Break-Even Point", break_even, "number",
           description="Years until buying becomes more cost-effective" if break_even > 0
           else "Buying is already more cost-effective"),
    ]


def calculate_va_purchase(inputs: Inputs) -> Results:
    """VA purchase payment with the funding fee financed and no PMI."""

    data = _parse(VAPurchaseInputs, inputs)
    base_loan = _loan_amount(data.home_price, data.down_payment)
    fee = base_loan * data.va_funding_fee / 100
    total_loan = base_loan + fee
    n = STANDARD_TERM_YEARS * 12
    pi = monthly_payment(total_loan, data.interest_rate, STANDARD_TERM_YEARS)
    tax = data.home_price * data.property_tax_rate / 100 / 12
    ins = data.insurance / 12
    total_payments = pi * n
    down_pct = data.down_payment / data.home_price * 100
    logger.debug("va_purchase: base=%.2f fee=%.2f", base_loan, fee)

    return [
        _r("Total Monthly Payment", pi + tax + ins, highlight=True,
           description="Your total monthly payment including P&I, taxes, and insurance (no PMI required)"),
        _r("Principal & Interest", pi, description="Monthly principal and interest payment on the loan"),
        _r("Property Taxes", tax, description="Estimated monthly property tax payment"),
        _r("Homeowners Insurance", ins, description="Monthly homeowners insurance payment"),
        _r("Base Loan Amount", base_loan,
           description="The mortgage loan amount before funding fee (home price minus down payment)"),
        _r("VA Funding Fee", fee,
           description=f"VA funding fee ({data.va_funding_fee:.2f}% of loan amount, typically financed into loan)"),
        _r("Total Loan Amount", total_loan, description="Total loan amount including VA funding fee"),
        _r("Down Payment", data.down_payment,
           description=f"Your down payment ({down_pct:.1f}% of home price)"),
        _r("Total Interest Paid", total_payments - total_loan if total_loan > 0 else 0.0,
           description=f"Total interest paid over {STANDARD_TERM_YEARS} years"),
        _r("Total Cost", data.down_payment + total_payments + (tax + ins) * n,
           description=f"Total cost including down payment, all payments, taxes, and insurance over {STANDARD_TERM_YEARS} years"),
        _r("Loan-to-Value Ratio", base_loan / data.home_price, "percentage",
           description="The ratio of your base loan amount to the home price"),
    ]


def calculate_va_refinance(inputs: Inputs) -> Results:
    """VA refinance (IRRRL or cash-out) with the funding fee financed."""

    data = _parse(VARefinanceInputs, inputs)
    term = STANDARD_TERM_YEARS
    n = term * 12
    current_payment = monthly_payment(data.current_balance, data.current_rate, term)
    base = data.current_balance + data.cash_out_amount
    fee = base * data.va_funding_fee / 100
    new_loan = base + fee
    new_payment = monthly_payment(new_loan, data.new_rate, term)
    savings = current_payment - new_payment
    current_total = current_payment * n
    new_total = new_payment * n
    lifetime = current_total - new_total
    rate_reduction = data.current_rate - data.new_rate
    logger.debug("va_refinance: new_loan=%.2f savings=%.2f", new_loan, savings)

    return [
        _r("New Monthly Payment", new_payment, highlight=True,
           description="Your new monthly principal and interest payment"),
        _r("Current Monthly Payment", current_payment,
           description="Your current monthly principal and interest payment"),
        _r("Monthly Savings", savings, highlight=True,
           description="Amount you save each month" if savings >= 0 else "Additional monthly cost (negative savings)"),
        _r("Cash Out Amount", data.cash_out_amount, highlight=data.cash_out_amount > 0,
           description="Cash you receive from the refinance"),
        _r("VA Funding Fee", fee,
           description=f"VA funding fee ({data.va_funding_fee:.2f}% of loan amount, typically financed into loan)"),
        _r("New Loan Amount", new_loan, description="Total new loan amount including cash out and funding fee"),
        _r("Current Loan Balance", data.current_balance, description="Your current mortgage balance"),
        _r("Loan Increase", new_loan - data.current_balance,
           description="Amount your loan balance will increase (cash out + funding fee)"),
        _r("Interest Rate Reduction", rate_reduction / 100, "percentage",
           description="Reduction in interest rate" if rate_reduction >= 0 else "Increase in interest rate"),
        _r("Lifetime Savings", lifetime,
           description=f"Total savings over {term} years" if lifetime >= 0 else f"Additional cost over {term} years"),
        _r("Total Interest (Current Loan)", current_total - data.current_balance,
           description=f"Total interest over {term} years at current rate"),
        _r("Total Interest (New Loan)", new_total - new_loan,
           description=f"Total interest over {term} years at new rate"),
    ]


def calculate_dscr(inputs: Inputs) -> Results:
    """Debt service coverage and cash flow for a rental investment."""

    data = _parse(DSCRInputs, inputs)
    price = data.property_price
    loan = _loan_amount(price, data.down_payment, "property price")
    pi = monthly_payment(loan, data.interest_rate, STANDARD_TERM_YEARS)
    noi = data.monthly_rent - data.monthly_expenses
    if pi == 0:
        ratio = DSCR_CASH_SENTINEL if noi > 0 else 0.0
    else:
        ratio = noi / pi
    cash_flow = noi - pi
    invested = data.down_payment + price * CLOSING_COST_PCT
    roi = cash_flow * 12 / invested if invested else 0.0
    status, status_desc = dscr_qualification(ratio, loan)
    total_interest = pi * STANDARD_TERM_YEARS * 12 - loan if loan > 0 else 0.0
    logger.debug("dscr: ratio=%.3f status=%s", ratio, status)

    return [
        _r("DSCR Ratio", ratio, "number", highlight=True,
           description="No debt service (cash purchase)" if ratio >= DSCR_CASH_SENTINEL
           else f"Debt Service Coverage Ratio ({ratio:.2f})"),
        _r("Qualification Status", 0, "number", highlight=True, description=f"{status}: {status_desc}"),
        _r("Monthly Cash Flow", cash_flow, highlight=True,
           description="Positive monthly cash flow" if cash_flow >= 0 else "Negative monthly cash flow (cash drain)"),
        _r("Annual Cash Flow", cash_flow * 12, description="Total cash flow over 12 months"),
        _r("Annual ROI (Cash-on-Cash)", roi, "percentage", highlight=True,
           description="Return on investment based on cash invested"),
        _r("Monthly Rent Income", data.monthly_rent, description="Gross monthly rental income"),
        _r("Monthly Expenses", data.monthly_expenses,
           description="Operating expenses (taxes, insurance, maintenance, etc.)"),
        _r("Net Operating Income", noi, description="Monthly rent minus monthly expenses"),
        _r("Monthly Debt Service (P&I)", pi, description="Monthly principal and interest payment"),
        _r("Loan Amount", loan, description=f"Mortgage loan amount ({loan / price * 100:.1f}% LTV)"),
        _r("Down Payment", data.down_payment,
           description=f"Your down payment ({data.down_payment / price * 100:.1f}% of property price)"),
        _r("Total Cash Invested", invested, description="Down payment plus estimated closing costs (3%)"),
        _r("Cap Rate", noi * 12 / price, "percentage",
           description="Capitalization rate (annual NOI / property price)"),
        _r("Total Interest Paid", total_interest,
           description=f"Total interest paid over {STANDARD_TERM_YEARS} years"),
    ]


def calculate_fix_flip(inputs: Inputs) -> Results:
    """Profit and return on an interest-only fix-and-flip bridge loan."""

    data = _parse(FixFlipInputs, inputs)
    price = data.purchase_price
    months = data.loan_length
    loan = price * data.purchase_price_ltv / 100
    down = price - loan
    monthly_interest = loan * data.interest_rate / 100 / 12
    total_interest = monthly_interest * months
    origination = loan * data.origination_fee / 100
    other_closing = price * data.other_closing_costs / 100
    cost_to_sell = data.after_repair_value * data.cost_to_sell / 100
    carrying = (data.annual_property_taxes + data.annual_insurance) / 12 * months
    closing = origination + other_closing
    total_costs = price + data.renovation_cost + total_interest + closing + carrying + cost_to_sell
    profit = data.after_repair_value - total_costs
    equity = down + data.renovation_cost + closing
    roi = profit / equity if equity > 0 else 0.0
    loan_to_arv = loan / data.after_repair_value if data.after_repair_value > 0 else 0.0
    logger.debug("fix_flip: profit=%.2f equity=%.2f", profit, equity)

    return [
        _r("Borrowed Equity Needed", equity, highlight=True,
           description="Down payment, renovation, and closing costs paid in cash"),
        _r("Net Profit", profit, highlight=True, description="After repair value minus all project costs"),
        _r("Return on Investment", roi, "percentage", highlight=True,
           description="Net profit divided by equity needed"),
        _r("Loan to After Repaired Value", loan_to_arv, "percentage", highlight=True,
           description="Loan amount as a share of the after repair value"),
        _r("Loan Amount", loan, description=f"Purchase price financed at {data.purchase_price_ltv:g}% LTV"),
        _r("Down Payment", down, description="Purchase price not covered by the loan"),
        _r("Monthly Interest Payment", monthly_interest, description="Interest-only payment"),
        _r("Total Interest Over Term", total_interest, description=f"Interest over {months:g} months"),
        _r("Origination Fee Amount", origination, description="Lender origination fee"),
        _r("Other Closing Costs Amount", other_closing, description="Title, escrow, and other closing costs"),
        _r("Cost To Sell Amount", cost_to_sell, description="Commissions and selling costs"),
        _r("Closing Costs", closing, description="Origination fee plus other closing costs"),
        _r("Carrying Costs", carrying, description=f"Property taxes and insurance over {months:g} months"),
    ]


@dataclass
class ValidationResult:
    success: bool
    errors: Dict[str, str] = field(default_factory=dict)
    data: Optional[BaseModel] = None


def _validator(model: Type[BaseModel], price_field: Optional[str] = None, noun: str = "home price"):
    def validate(raw: Inputs) -> ValidationResult:
        try:
            data = _parse(model, raw)
        except ValidationError as exc:
            errors: Dict[str, str] = {}
            for err in exc.errors():
                name = str(err["loc"][0]) if err["loc"] else "__root__"
                errors.setdefault(name, err["msg"])
            logger.info("invalid %s input: %s", model.__name__, errors)
            return ValidationResult(False, errors)
        if price_field is not None:
            try:
                _loan_amount(getattr(data, price_field), data.down_payment, noun)
            except DownPaymentExceedsPriceError as exc:
                logger.info("invalid %s input: %s", model.__name__, exc)
                return ValidationResult(False, {exc.field: str(exc)})
        return ValidationResult(True, data=data)
    return validate


validate_affordability_inputs = _validator(AffordabilityInputs)
validate_purchase_inputs = _validator(PurchaseInputs, "home_price")
validate_refinance_inputs = _validator(RefinanceInputs)
validate_rent_vs_buy_inputs = _validator(RentVsBuyInputs, "home_price")
validate_va_purchase_inputs = _validator(VAPurchaseInputs, "home_price")
validate_va_refinance_inputs = _validator(VARefinanceInputs)
validate_dscr_inputs = _validator(DSCRInputs, "property_price", "property price")
validate_fix_flip_inputs = _validator(FixFlipInputs)
