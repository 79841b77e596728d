import math
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, field_validator
from pydantic_core import PydanticCustomError


LoanProgram = Literal["Conventional", "FHA", "VA", "USDA", "Jumbo"]
ResultFormat = Literal["currency", "percentage", "number"]


def _range_check(lo: float, hi: float, lo_msg: str, hi_msg: str):
    def check(v: float) -> float:
        if not math.isfinite(v):
            raise PydanticCustomError("finite_number", "Value must be a finite number")
        if v < lo:
            raise PydanticCustomError("range", lo_msg)
        if v > hi:
            raise PydanticCustomError("range", hi_msg)
        return v

    return check


def Bounded(lo: float, hi: float, lo_msg: str, hi_msg: str):
    """Float field restricted to ``[lo, hi]`` with a message for each bound."""

    return Annotated[float, AfterValidator(_range_check(lo, hi, lo_msg, hi_msg))]


HomePrice = Bounded(1000, 100_000_000, "Home price must be at least $1,000", "Home price exceeds maximum")
PropertyPrice = Bounded(
    1000, 100_000_000, "Property price must be at least $1,000", "Property price exceeds maximum"
)
DownPayment = Bounded(0, 100_000_000, "Down payment cannot be negative", "Down payment exceeds maximum")
InterestRate = Bounded(0, 20, "Interest rate must be positive", "Interest rate must be between 0% and 20%")
PropertyTaxRate = Bounded(0, 10, "Property tax rate cannot be negative", "Property tax rate exceeds maximum")
AnnualInsurance = Bounded(0, 100_000, "Insurance cannot be negative", "Insurance exceeds maximum")
VAFundingFee = Bounded(0, 10, "VA funding fee cannot be negative", "VA funding fee exceeds maximum")
CurrentBalance = Bounded(
    1000, 100_000_000, "Current balance must be at least $1,000", "Balance exceeds maximum"
)
CurrentRate = Bounded(0, 20, "Current rate must be positive", "Current rate must be between 0% and 20%")
NewRate = Bounded(0, 20, "New rate must be positive", "New rate must be between 0% and 20%")


class AffordabilityInputs(BaseModel):
    annual_income: Bounded(0, 10_000_000, "Income must be positive", "Income exceeds maximum")
    monthly_debts: Bounded(0, 100_000, "Debts cannot be negative", "Debts exceed maximum")
    down_payment: Bounded(0, 10_000_000, "Down payment cannot be negative", "Down payment exceeds maximum")
    interest_rate: InterestRate


class PurchaseInputs(BaseModel):
    home_price: HomePrice
    down_payment: DownPayment
    interest_rate: InterestRate
    loan_term: Bounded(1, 30, "Loan term must be at least 1 year", "Loan term cannot exceed 30 years")
    property_tax_rate: PropertyTaxRate
    insurance: AnnualInsurance
    hoa: Bounded(0, 10_000, "HOA fees cannot be negative", "HOA fees exceed maximum")
    loan_program: LoanProgram = "Conventional"
    finance_upfront: bool = True
    first_use_va: bool = True
    va_exempt: bool = False


class RefinanceInputs(BaseModel):
    current_balance: CurrentBalance
    current_rate: CurrentRate
    new_rate: NewRate
    remaining_term: Bounded(
        1, 30, "Remaining term must be at least 1 year", "Remaining term cannot exceed 30 years"
    )
    new_term: Bounded(1, 30, "New term must be at least 1 year", "New term cannot exceed 30 years")
    closing_costs: Bounded(0, 100_000, "Closing costs cannot be negative", "Closing costs exceed maximum")
    loan_program: LoanProgram = "Conventional"
    mortgage_insurance: Optional[
        Bounded(0, 100_000, "Mortgage insurance cannot be negative", "Mortgage insurance exceeds maximum")
    ] = None


class RentVsBuyInputs(BaseModel):
    home_price: HomePrice
    down_payment: DownPayment
    interest_rate: InterestRate
    rent_amount: Bounded(0, 50_000, "Rent amount cannot be negative", "Rent amount exceeds maximum")
    years_to_stay: Bounded(1, 30, "Years to stay must be at least 1", "Years to stay cannot exceed 30")
    appreciation_rate: Bounded(-10, 20, "Appreciation rate too low", "Appreciation rate too high")

    @field_validator("years_to_stay")
    @classmethod
    def _whole_years(cls, v: float) -> float:
        if v != int(v):
            raise PydanticCustomError("whole_years", "Years to stay must be a whole number")
        return v


class VAPurchaseInputs(BaseModel):
    home_price: HomePrice
    down_payment: DownPayment
    interest_rate: InterestRate
    va_funding_fee: VAFundingFee
    property_tax_rate: PropertyTaxRate
    insurance: AnnualInsurance


class VARefinanceInputs(BaseModel):
    current_balance: CurrentBalance
    current_rate: CurrentRate
    new_rate: NewRate
    cash_out_amount: Bounded(
        0, 10_000_000, "Cash out amount cannot be negative", "Cash out amount exceeds maximum"
    )
    va_funding_fee: VAFundingFee


class DSCRInputs(BaseModel):
    property_price: PropertyPrice
    down_payment: DownPayment
    interest_rate: InterestRate
    monthly_rent: Bounded(0, 100_000, "Monthly rent cannot be negative", "Monthly rent exceeds maximum")
    monthly_expenses: Bounded(
        0, 100_000, "Monthly expenses cannot be negative", "Monthly expenses exceeds maximum"
    )


class FixFlipInputs(BaseModel):
    purchase_price: Bounded(
        1000, 100_000_000, "Purchase price must be at least $1,000", "Purchase price exceeds maximum"
    )
    renovation_cost: Bounded(0, 100_000_000, "Renovation cost cannot be negative", "Renovation cost exceeds maximum")
    after_repair_value: Bounded(
        0, 100_000_000, "After repair value cannot be negative", "After repair value exceeds maximum"
    )
    loan_length: Bounded(1, 60, "Loan length must be at least 1 month", "Loan length cannot exceed 60 months")
    annual_property_taxes: Bounded(0, 1_000_000, "Property taxes cannot be negative", "Property taxes exceed maximum")
    annual_insurance: Bounded(0, 1_000_000, "Insurance cannot be negative", "Insurance exceeds maximum")
    purchase_price_ltv: Bounded(0, 100, "LTV cannot be negative", "LTV cannot exceed 100%")
    interest_rate: Bounded(0, 30, "Interest rate must be positive", "Interest rate must be between 0% and 30%")
    origination_fee: Bounded(0, 20, "Origination fee cannot be negative", "Origination fee exceeds maximum")
    other_closing_costs: Bounded(0, 20, "Closing costs cannot be negative", "Closing costs exceed maximum")
    cost_to_sell: Bounded(0, 20, "Cost to sell cannot be negative", "Cost to sell exceeds maximum")


class CalculatorResult(BaseModel):
    """One labeled figure in a calculator's output, in presentation order.

    Percentages are stored as fractions (``0.05`` renders as ``5.00%``).
    """

    model_config = ConfigDict(frozen=True)

    label: str
    value: float
    format: ResultFormat
    highlight: bool = False
    description: Optional[str] = None

    @field_validator("value")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("result values must be finite")
        return v
