"""Display formatting and form-input parsing."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping

from core.models import CalculatorResult

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def format_currency(value: float, decimals: int = 0) -> str:
    amount = round(value, decimals)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.{decimals}f}"


def format_percentage(fraction: float, decimals: int = 2) -> str:
    """Render a fraction as a percentage, so ``0.05`` becomes ``5.00%``."""
    return f"{fraction * 100:.{decimals}f}%"


def format_number(value: float, decimals: int = 0) -> str:
    return f"{value:,.{decimals}f}"


def format_result(result: CalculatorResult) -> str:
    if result.format == "currency":
        return format_currency(result.value)
    if result.format == "percentage":
        return format_percentage(result.value)
    # DSCR ratios and break-even months read better with decimals.
    return format_number(result.value, 2 if result.value % 1 else 0)


def parse_numeric_input(text) -> float:
    """Parse user text like ``"$350,000"`` into a float.

    Everything but digits, ``.`` and a leading ``-`` is dropped. Blank or
    unparseable text becomes ``0.0``.
    """

    if text is None:
        return 0.0
    if isinstance(text, (int, float)):
        return float(text)
    raw = str(text).strip()
    negative = raw.startswith("-")
    cleaned = _NON_NUMERIC.sub("", raw).replace("-", "")
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return -value if negative else value


def coerce_inputs(raw: Mapping[str, object], names: Iterable[str]) -> Dict[str, float]:
    """Map form strings for ``names`` to floats, leaving other keys untouched."""

    wanted = set(names)
    out: Dict[str, object] = dict(raw)
    for name in wanted:
        if name in out:
            out[name] = parse_numeric_input(out[name])
    return out
