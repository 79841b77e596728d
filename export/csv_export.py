"""CSV export of calculator results."""
from __future__ import annotations

from typing import Iterable

import pandas as pd

from core.formatters import format_result
from core.models import CalculatorResult

COLUMNS = ["Label", "Value", "Formatted", "Format", "Description"]


def results_frame(results: Iterable[CalculatorResult]) -> pd.DataFrame:
    rows = [
        {
            "Label": r.label,
            "Value": r.value,
            "Formatted": format_result(r),
            "Format": r.format,
            "Description": r.description or "",
        }
        for r in results
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def results_to_csv(results: Iterable[CalculatorResult]) -> bytes:
    """Results in presentation order as UTF-8 CSV bytes for ``st.download_button``."""
    return results_frame(results).to_csv(index=False).encode("utf-8")
