"""Loan-program overlays: mortgage insurance, upfront fees and DSCR tiers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, TypeAdapter

from core.amortization import nz
from core.presets import (
    CONV_MI_BANDS,
    DSCR_FLOOR,
    DSCR_TIERS,
    FHA_TABLES,
    REFI_MI_RATES,
    USDA_TABLE,
    VA_TABLE,
)


@dataclass(frozen=True)
class ProgramFees:
    adjusted_loan: float
    upfront_amt: float
    mi_monthly: float
    ltv: float


def default_tables() -> dict:
    """Fresh copies of the preset fee tables, keyed the way the sidebar edits them."""

    return {
        "conv_mi": dict(CONV_MI_BANDS),
        "fha": {"ufmip_pct": FHA_TABLES["ufmip_pct"], "annual_table": dict(FHA_TABLES["annual_table"])},
        "va": dict(VA_TABLE),
        "usda": dict(USDA_TABLE),
    }


Rate = Annotated[StrictFloat, Field(ge=0)]


class FhaTable(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ufmip_pct: Rate = FHA_TABLES["ufmip_pct"]
    annual_table: Dict[str, Rate]


_RATE_TABLE = TypeAdapter(Dict[str, Rate])


def validate_fee_table(key: str, table) -> dict:
    """Check an edited fee table; raises ``pydantic.ValidationError`` on bad values."""

    if key == "fha":
        return FhaTable.model_validate(table).model_dump()
    return _RATE_TABLE.validate_python(table)


def compute_ltv(purchase_price, base_loan):
    """Compute loan-to-value percentage."""

    if nz(purchase_price) == 0:
        return 0.0
    return 100.0 * nz(base_loan) / nz(purchase_price)


def conventional_mi_factor(ltv, mi_table: Mapping[str, float] = CONV_MI_BANDS):
    """Annual private MI percentage for a conventional loan at ``ltv``."""

    if ltv >= 97:
        return mi_table.get(">=97", 0.90)
    if ltv >= 95:
        return mi_table.get("95-97", 0.62)
    if ltv >= 90:
        return mi_table.get("90-95", 0.40)
    if ltv >= 85:
        return mi_table.get("85-90", 0.25)
    if ltv > 80:
        return mi_table.get("80-85", 0.15)
    return mi_table.get("<=80", 0.0)


def fha_mip_factor(ltv, term_years, table: Mapping[str, float] = FHA_TABLES["annual_table"]):
    """Retrieve FHA annual MIP factor from lookup table."""

    key = ("<=95" if ltv <= 95 else ">95") + "_" + ("<=15" if term_years <= 15 else ">15")
    return table.get(key, 0.55)


def va_funding_fee_pct(first_use, down_pct, table: Mapping[str, float] = VA_TABLE, exempt=False):
    """Funding fee percentage for VA loans based on usage and down payment.

    Veterans receiving compensation for a service-connected disability are
    exempt and pay no fee.
    """

    if exempt:
        return 0.0
    prefix = "first" if first_use else "subseq"
    if down_pct >= 10:
        return table.get(f"{prefix}_10+", 1.25)
    if down_pct >= 5:
        return table.get(f"{prefix}_5_10", 1.50)
    return table.get(f"{prefix}_0_5", 2.15 if first_use else 3.30)


def usda_guarantee_pct(table: Mapping[str, float] = USDA_TABLE):
    """USDA upfront guarantee fee percentage."""

    return table.get("guarantee_pct", 1.0)


def usda_annual_fee_pct(table: Mapping[str, float] = USDA_TABLE):
    return table.get("annual_pct", 0.35)


def apply_program_fees(
    program,
    purchase_price,
    base_loan,
    down_payment,
    term_years,
    tables: Optional[dict] = None,
    finance_upfront=True,
    first_use_va=True,
    va_exempt=False,
) -> ProgramFees:
    """Calculate adjusted loan amount, upfront fee and monthly MI by program.

    ``tables`` holds the ``conv_mi``, ``fha``, ``va`` and ``usda`` tables; any
    missing entry falls back to the presets.  Upfront fees are rolled into the
    loan when ``finance_upfront`` is set, and LTV then reflects the financed
    amount.
    """

    tables = {**default_tables(), **(tables or {})}
    base_loan = nz(base_loan)
    ltv = compute_ltv(purchase_price, base_loan)
    down_pct = 100.0 * nz(down_payment) / nz(purchase_price) if nz(purchase_price) else 0.0

    if program == "Conventional":
        mi_ann_pct = conventional_mi_factor(ltv, tables["conv_mi"])
        return ProgramFees(base_loan, 0.0, base_loan * (mi_ann_pct / 100) / 12, ltv)

    if program == "FHA":
        fha = tables["fha"]
        upfront = base_loan * (fha.get("ufmip_pct", 1.75) / 100)
        ann_pct = fha_mip_factor(ltv, term_years, fha.get("annual_table", {}))
    elif program == "VA":
        upfront = base_loan * (va_funding_fee_pct(first_use_va, down_pct, tables["va"], va_exempt) / 100)
        ann_pct = 0.0
    elif program == "USDA":
        upfront = base_loan * (usda_guarantee_pct(tables["usda"]) / 100)
        ann_pct = usda_annual_fee_pct(tables["usda"])
    else:
        return ProgramFees(base_loan, 0.0, 0.0, ltv)

    adj = base_loan + upfront if finance_upfront else base_loan
    ltv_calc = compute_ltv(purchase_price, adj) if finance_upfront else ltv
    return ProgramFees(adj, upfront, adj * (ann_pct / 100) / 12, ltv_calc)


def refinance_mi_monthly(program, balance, manual_annual=None):
    """Monthly mortgage insurance on a refinanced balance.

    A manual annual premium replaces the flat program rate. VA loans never
    carry monthly MI.
    """

    if program == "VA":
        return 0.0
    if manual_annual is not None:
        return max(0.0, nz(manual_annual)) / 12
    return nz(balance) * REFI_MI_RATES.get(program, 0.0) / 100 / 12


def dscr_qualification(ratio, loan_amount) -> Tuple[str, str]:
    """Qualification tier and description for a DSCR ratio."""

    if nz(loan_amount) <= 0:
        return "Cash Purchase", "No loan required - purchasing with cash"
    for threshold, status, desc in DSCR_TIERS:
        if ratio >= threshold:
            return status, desc
    return DSCR_FLOOR
