from __future__ import annotations
from typing import Literal, List, Dict, Any, Iterable
from pydantic import BaseModel, Field

from core.models import CalculatorResult
from core.presets import DSCR_TIERS


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def _values(results: Iterable[CalculatorResult]) -> Dict[str, float]:
    return {r.label: r.value for r in results}


def evaluate_calculator_rules(calculator_id: str, results: List[CalculatorResult], inputs: dict = None) -> List[RuleResult]:
    """Advisory notes for a calculator's results, most severe concerns first."""
    res: List[RuleResult] = []
    v = _values(results)
    inputs = inputs or {}

    if calculator_id == "affordability":
        if v.get("Maximum Loan Amount", 0.0) <= 0:
            res.append(
                RuleResult(
                    code="AFFORD_NO_CAPACITY",
                    severity="critical",
                    message="Monthly debts use the entire 43% debt-to-income budget; no loan amount is supported.",
                    context={"max_loan": v.get("Maximum Loan Amount", 0.0)},
                )
            )

    if calculator_id == "purchase":
        ltv = v.get("Loan-to-Value Ratio", 0.0) * 100
        if inputs.get("loan_program", "Conventional") == "Conventional" and ltv > 80:
            res.append(
                RuleResult(
                    code="HIGH_LTV_PMI",
                    severity="info",
                    message="Conventional loans above 80% LTV carry private mortgage insurance.",
                    context={"ltv": ltv},
                )
            )

    if calculator_id == "dscr":
        ratio = v.get("DSCR Ratio", 0.0)
        loan = v.get("Loan Amount", 0.0)
        minimum = DSCR_TIERS[1][0]
        if loan > 0 and ratio < minimum:
            res.append(
                RuleResult(
                    code="DSCR_BELOW_MINIMUM",
                    severity="warn",
                    message=f"DSCR is below {minimum:.2f}; most lenders will not qualify the property.",
                    context={"dscr": ratio},
                )
            )
        if v.get("Monthly Cash Flow", 0.0) < 0:
            res.append(
                RuleResult(
                    code="NEGATIVE_CASH_FLOW",
                    severity="warn",
                    message="Rent does not cover expenses and debt service.",
                    context={"monthly_cash_flow": v["Monthly Cash Flow"]},
                )
            )

    if calculator_id in ("refinance", "va-refinance"):
        if v.get("Monthly Savings", 0.0) <= 0:
            res.append(
                RuleResult(
                    code="REFI_NO_BREAK_EVEN",
                    severity="warn",
                    message="The new payment is not lower, so refinancing never recovers its costs.",
                    context={"monthly_savings": v.get("Monthly Savings", 0.0)},
                )
            )

    if calculator_id == "rent-vs-buy":
        if v.get("Total Cost of Renting", 0.0) < v.get("Total Cost of Buying", 0.0):
            res.append(
                RuleResult(
                    code="RENT_CHEAPER",
                    severity="info",
                    message="Renting costs less than buying over the planned stay.",
                    context={"break_even_years": v.get("Break-Even Point", 0.0)},
                )
            )

    if calculator_id == "fix-flip":
        if v.get("Net Profit", 0.0) < 0:
            res.append(
                RuleResult(
                    code="FLIP_LOSS",
                    severity="warn",
                    message="Projected sale does not cover project costs.",
                    context={"net_profit": v["Net Profit"]},
                )
            )

    return res


def has_blocking(res: List[RuleResult]) -> bool:
    return any(r.severity == "critical" for r in res)
