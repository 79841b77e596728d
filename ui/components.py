from typing import Iterable, List

import pandas as pd
import streamlit as st

from core.config import get_settings
from core.formatters import format_result
from core.models import CalculatorResult
from core.presets import DISCLAIMER
from core.rules import RuleResult


def render_result_metrics(results: List[CalculatorResult]):
    """Show highlighted results as metric tiles, four to a row."""
    highlighted = [r for r in results if r.highlight]
    for i in range(0, len(highlighted), 4):
        cols = st.columns(4)
        for col, r in zip(cols, highlighted[i : i + 4]):
            col.metric(r.label, format_result(r), help=r.description)


def render_results_table(results: Iterable[CalculatorResult]):
    rows = [
        {"Item": r.label, "Value": format_result(r), "Details": r.description or ""}
        for r in results
        if not r.highlight
    ]
    if rows:
        st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)


def render_advisories(rules: List[RuleResult]):
    for r in rules:
        if r.severity == "critical":
            st.error(f"[{r.code}] {r.message}")
        elif r.severity == "warn":
            st.warning(f"[{r.code}] {r.message}")
        else:
            st.info(f"[{r.code}] {r.message}")


def render_field_errors(labels: dict, errors: dict):
    """One error box per invalid field, labelled the way the form shows it."""
    for name, message in errors.items():
        st.error(f"{labels.get(name, name)}: {message}")


def render_footer():
    settings = get_settings()
    contact = " • ".join(
        part
        for part in (
            settings.brand_name,
            f"NMLS {settings.nmls}" if settings.nmls else "",
            settings.phone,
            settings.contact_email,
        )
        if part
    )
    st.divider()
    st.caption(contact)
    st.caption(DISCLAIMER)
