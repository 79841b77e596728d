"""Registry describing each calculator's form, page text and callables."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from core import calculators as calc
from core.presets import LOAN_PROGRAMS


@dataclass(frozen=True)
class CalculatorInput:
    name: str
    label: str
    kind: str = "currency"  # currency | percentage | number | select | toggle
    placeholder: str = ""
    default: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: float = 1.0
    required: bool = True
    help: str = ""
    options: Sequence[str] = ()

    @property
    def initial(self):
        """Value a fresh form starts with."""
        if self.kind == "select":
            return self.default if self.default is not None else self.options[0]
        if self.kind == "toggle":
            return bool(self.default)
        if self.default is not None:
            return float(self.default)
        if not self.placeholder:
            return None if not self.required else 0.0
        return float(self.placeholder)


@dataclass(frozen=True)
class PageMetadata:
    title: str
    description: str
    keywords: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CalculatorConfig:
    id: str
    title: str
    description: str
    icon: str
    inputs: List[CalculatorInput]
    calculate: Callable
    validate: Callable
    metadata: PageMetadata

    def numeric_inputs(self) -> List[CalculatorInput]:
        return [i for i in self.inputs if i.kind in ("currency", "percentage", "number")]

    def defaults(self) -> Dict[str, object]:
        return {i.name: i.initial for i in self.inputs}


def _rate(placeholder="7.0", default=None, help="Current mortgage interest rate", name="interest_rate",
          label="Interest Rate (%)", hi=20):
    return CalculatorInput(name, label, "percentage", placeholder, default, 0, hi, 0.1, help=help)


def _home_price(help="The purchase price of the home"):
    return CalculatorInput("home_price", "Home Price", "currency", "350000", None, 1000, 100_000_000, 1000, help=help)


def _down(placeholder="70000", default=None, help="Amount you plan to put down on the home", hi=100_000_000):
    return CalculatorInput("down_payment", "Down Payment", "currency", placeholder, default, 0, hi, 1000, help=help)


def _tax_rate():
    return CalculatorInput(
        "property_tax_rate", "Property Tax Rate (%)", "percentage", "1.2", 1.2, 0, 10, 0.1,
        help="Annual property tax as percentage of home price",
    )


def _insurance():
    return CalculatorInput(
        "insurance", "Annual Insurance", "currency", "1200", 1200, 0, 100_000, 100,
        help="Annual homeowners insurance premium",
    )


def _fee(help):
    return CalculatorInput("va_funding_fee", "VA Funding Fee (%)", "percentage", "2.15", 2.15, 0, 10, 0.05, help=help)


AFFORDABILITY = CalculatorConfig(
    id="affordability",
    title="How Much Can I Afford?",
    description="Calculate your maximum home purchase price based on your income, debts, and down payment.",
    icon="💵",
    inputs=[
        CalculatorInput("annual_income", "Annual Gross Income", "currency", "80000", None, 0, 10_000_000, 1000,
                        help="Your total annual income before taxes"),
        CalculatorInput("monthly_debts", "Monthly Debts", "currency", "500", None, 0, 100_000, 50,
                        help="Car payments, credit cards, student loans, etc."),
        _down("20000", hi=10_000_000),
        _rate(default=7.0),
    ],
    calculate=calc.calculate_affordability,
    validate=calc.validate_affordability_inputs,
    metadata=PageMetadata(
        "Home Affordability Calculator | How Much House Can I Afford? | Model Mortgage",
        "Calculate how much house you can afford based on income, debts, and down payment.",
        ["home affordability calculator", "how much house can I afford", "DTI calculator",
         "Houston mortgage calculator"],
    ),
)

PURCHASE = CalculatorConfig(
    id="purchase",
    title="Purchase Calculator",
    description="Estimate your monthly mortgage payment including principal, interest, taxes, insurance, and HOA fees.",
    icon="🏠",
    inputs=[
        _home_price(),
        _down(),
        _rate(default=7.0),
        CalculatorInput("loan_term", "Loan Term (years)", "number", "30", 30, 1, 30, 1,
                        help="Length of the mortgage in years"),
        _tax_rate(),
        _insurance(),
        CalculatorInput("hoa", "Monthly HOA Fees", "currency", "0", 0, 0, 10_000, 50,
                        help="Monthly homeowners association fees"),
        CalculatorInput("loan_program", "Loan Program", "select", default="Conventional", options=LOAN_PROGRAMS,
                        help="Program rules decide mortgage insurance and upfront fees"),
        CalculatorInput("finance_upfront", "Finance upfront fee", "toggle", default=1,
                        help="Roll the FHA MIP, VA funding fee or USDA guarantee fee into the loan"),
        CalculatorInput("first_use_va", "First-time VA use", "toggle", default=1),
        CalculatorInput("va_exempt", "Funding fee exempt (disability)", "toggle", default=0),
    ],
    calculate=calc.calculate_purchase,
    validate=calc.validate_purchase_inputs,
    metadata=PageMetadata(
        "Mortgage Purchase Calculator | Monthly Payment Estimator | Model Mortgage",
        "Calculate monthly mortgage payment including principal, interest, taxes, insurance, and HOA fees.",
        ["mortgage calculator", "monthly payment calculator", "PITI calculator", "FHA MIP", "PMI"],
    ),
)

REFINANCE = CalculatorConfig(
    id="refinance",
    title="Refinance Calculator",
    description="Calculate your potential savings from refinancing your mortgage. Compare your current loan to a "
    "new loan and see your break-even point.",
    icon="🔄",
    inputs=[
        CalculatorInput("current_balance", "Current Loan Balance", "currency", "250000", None, 1000, 100_000_000, 1000,
                        help="Your current outstanding mortgage balance"),
        _rate("7.5", name="current_rate", label="Current Interest Rate (%)",
              help="Your current mortgage interest rate"),
        _rate("6.5", name="new_rate", label="New Interest Rate (%)", help="The new interest rate you qualify for"),
        CalculatorInput("remaining_term", "Remaining Term (years)", "number", "25", None, 1, 30, 1,
                        help="Years remaining on your current mortgage"),
        CalculatorInput("new_term", "New Loan Term (years)", "number", "30", 30, 1, 30, 1,
                        help="Length of the new mortgage in years"),
        CalculatorInput("closing_costs", "Closing Costs", "currency", "5000", 5000, 0, 100_000, 500,
                        help="Upfront costs to refinance (rolled into new loan)"),
        CalculatorInput("loan_program", "Loan Program", "select", default="Conventional", options=LOAN_PROGRAMS),
        CalculatorInput("mortgage_insurance", "Annual Mortgage Insurance", "currency", "", None, 0, 100_000, 100,
                        required=False,
                        help="Leave blank to estimate from the program rate. Ignored for VA loans."),
    ],
    calculate=calc.calculate_refinance,
    validate=calc.validate_refinance_inputs,
    metadata=PageMetadata(
        "Mortgage Refinance Calculator | Calculate Refinance Savings | Model Mortgage",
        "Calculate potential savings from refinancing. Compare monthly payments, break-even point, and lifetime savings.",
        ["refinance calculator", "refinance break even", "mortgage refinance savings"],
    ),
)

RENT_VS_BUY = CalculatorConfig(
    id="rent-vs-buy",
    title="Rent vs Buy Calculator",
    description="Compare the total costs of renting versus buying a home over time.",
    icon="🏡",
    inputs=[
        _home_price(),
        _down(),
        _rate(help="Mortgage interest rate"),
        CalculatorInput("rent_amount", "Monthly Rent", "currency", "2000", None, 0, 50_000, 50,
                        help="Your current monthly rent payment"),
        CalculatorInput("years_to_stay", "Years to Stay", "number", "7", None, 1, 30, 1,
                        help="How long you plan to stay in the home"),
        CalculatorInput("appreciation_rate", "Home Appreciation Rate (%)", "percentage", "3.0", None, -10, 20, 0.1,
                        help="Expected annual home value appreciation"),
    ],
    calculate=calc.calculate_rent_vs_buy,
    validate=calc.validate_rent_vs_buy_inputs,
    metadata=PageMetadata(
        "Rent vs Buy Calculator | Should I Rent or Buy a Home? | Model Mortgage",
        "Compare costs of renting versus buying. Calculate total costs, equity building, and break-even point.",
        ["rent vs buy calculator", "should I rent or buy"],
    ),
)

VA_PURCHASE = CalculatorConfig(
    id="va-purchase",
    title="VA Purchase Calculator",
    description="Calculate your monthly VA loan payment with no PMI required. Includes VA funding fee, property "
    "taxes, and insurance.",
    icon="🎖️",
    inputs=[
        _home_price(),
        _down("0", 0, "VA loans allow 0% down payment (optional down payment reduces loan amount)"),
        _rate("6.5", 6.5, "Current VA loan interest rate"),
        _fee("VA funding fee (typically 2.15% for first-time use with 0% down, can be financed)"),
        _tax_rate(),
        _insurance(),
    ],
    calculate=calc.calculate_va_purchase,
    validate=calc.validate_va_purchase_inputs,
    metadata=PageMetadata(
        "VA Loan Purchase Calculator | No PMI Required | Model Mortgage",
        "Calculate your VA loan monthly payment with 0% down and no PMI.",
        ["VA loan calculator", "VA funding fee", "no PMI mortgage"],
    ),
)

VA_REFINANCE = CalculatorConfig(
    id="va-refinance",
    title="VA Refinance Calculator",
    description="Calculate your VA refinance savings with IRRRL or cash-out refinance options.",
    icon="🏠",
    inputs=[
        CalculatorInput("current_balance", "Current Loan Balance", "currency", "300000", None, 1000, 100_000_000, 1000,
                        help="Your current mortgage balance"),
        _rate(name="current_rate", label="Current Interest Rate (%)", help="Your current mortgage interest rate"),
        _rate("6.0", name="new_rate", label="New Interest Rate (%)", help="The new VA loan interest rate"),
        CalculatorInput("cash_out_amount", "Cash Out Amount", "currency", "0", 0, 0, 10_000_000, 1000,
                        help="Amount of cash you want to take out (0 for rate-and-term refinance)"),
        _fee("VA funding fee (typically 2.15% for IRRRL, 2.3% for cash-out, can be financed)"),
    ],
    calculate=calc.calculate_va_refinance,
    validate=calc.validate_va_refinance_inputs,
    metadata=PageMetadata(
        "VA Refinance Calculator | IRRRL & Cash-Out | Model Mortgage",
        "Compare IRRRL and cash-out refinance options. See monthly savings, cash out amounts, and funding fees.",
        ["VA refinance calculator", "IRRRL calculator", "VA cash-out refinance"],
    ),
)

DSCR = CalculatorConfig(
    id="dscr",
    title="DSCR Investment Calculator",
    description="Calculate Debt Service Coverage Ratio (DSCR) for investment property loans.",
    icon="🏢",
    inputs=[
        CalculatorInput("property_price", "Property Price", "currency", "300000", None, 1000, 100_000_000, 1000,
                        help="The purchase price of the investment property"),
        _down("60000", help="Amount you plan to put down (typically 20-25% for investment properties)"),
        _rate("7.5", 7.5, "Current interest rate for investment property loans"),
        CalculatorInput("monthly_rent", "Monthly Rent", "currency", "2500", None, 0, 100_000, 50,
                        help="Expected monthly rental income from the property"),
        CalculatorInput("monthly_expenses", "Monthly Expenses", "currency", "800", None, 0, 100_000, 50,
                        help="Property taxes, insurance, maintenance, HOA, property management, etc."),
    ],
    calculate=calc.calculate_dscr,
    validate=calc.validate_dscr_inputs,
    metadata=PageMetadata(
        "DSCR Calculator | Investment Property Loan Calculator | Model Mortgage",
        "Calculate DSCR for investment property loans. Analyze rental income, cash flow, and ROI.",
        ["DSCR calculator", "investment property loan", "rental cash flow"],
    ),
)

FIX_FLIP = CalculatorConfig(
    id="fix-flip",
    title="Fix & Flip Calculator",
    description="Calculate potential returns on fix and flip investment properties.",
    icon="🔨",
    inputs=[
        CalculatorInput("purchase_price", "Purchase Price", "currency", "500000", None, 1000, 100_000_000, 1000),
        CalculatorInput("renovation_cost", "Renovation Cost", "currency", "75000", None, 0, 100_000_000, 1000),
        CalculatorInput("after_repair_value", "After Repaired Value", "currency", "750000", None, 0, 100_000_000, 1000),
        CalculatorInput("loan_length", "Length of Loan (months)", "number", "6", None, 1, 60, 1),
        CalculatorInput("annual_property_taxes", "Annual Property Taxes", "currency", "4000", None, 0, 1_000_000, 100),
        CalculatorInput("annual_insurance", "Annual Insurance", "currency", "3000", None, 0, 1_000_000, 100),
        CalculatorInput("purchase_price_ltv", "Purchase Price LTV (%)", "percentage", "80", None, 0, 100, 1),
        _rate("10.00", hi=30, help="Bridge loan interest rate"),
        CalculatorInput("origination_fee", "Origination Fee (%)", "percentage", "2.00", None, 0, 20, 0.25),
        CalculatorInput("other_closing_costs", "Other Closing Costs (%)", "percentage", "3.0", None, 0, 20, 0.25),
        CalculatorInput("cost_to_sell", "Cost To Sell (%)", "percentage", "5", None, 0, 20, 0.5),
    ],
    calculate=calc.calculate_fix_flip,
    validate=calc.validate_fix_flip_inputs,
    metadata=PageMetadata(
        "Fix & Flip Calculator | Investment Property Returns | Model Mortgage",
        "Calculate potential returns on fix and flip investment properties.",
        ["fix and flip calculator", "hard money loan", "after repair value"],
    ),
)

CALCULATORS: Dict[str, CalculatorConfig] = {
    c.id: c for c in (AFFORDABILITY, PURCHASE, REFINANCE, RENT_VS_BUY, VA_PURCHASE, VA_REFINANCE, DSCR, FIX_FLIP)
}


def get_calculator(slug: str) -> CalculatorConfig:
    try:
        return CALCULATORS[slug]
    except KeyError:
        raise KeyError(f"Unknown calculator: {slug}") from None
