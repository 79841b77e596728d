import logging
from datetime import timedelta

import streamlit as st

from core.config import get_settings
from core.configs import CalculatorConfig, get_calculator
from core.errors import DownPaymentExceedsPriceError, ExportRateLimitError
from core.export_log import ExportLog, format_time_remaining, make_fingerprint
from core.formatters import coerce_inputs
from core.presets import STANDARD_TERM_YEARS
from core.rules import evaluate_calculator_rules, has_blocking
from export.csv_export import results_to_csv
from export.pdf_export import export_calculator_pdf
from ui.components import render_advisories, render_field_errors, render_result_metrics, render_results_table
from ui.early_payoff import render_early_payoff, render_insurance_helper
from ui.forms import render_calculator_form
from ui.sidebar import render_fee_sidebar

logger = logging.getLogger(__name__)


@st.cache_resource
def get_export_log() -> ExportLog:
    """Process-wide export log shared by every session."""
    settings = get_settings()
    return ExportLog(settings.max_exports_per_day, timedelta(hours=settings.export_window_hours))


def visitor_fingerprint() -> str:
    if "fingerprint" not in st.session_state:
        headers = st.context.headers
        st.session_state["fingerprint"] = make_fingerprint(
            headers.get("User-Agent", ""), headers.get("Accept-Language", ""), headers.get("X-Forwarded-For", "")
        )
    return st.session_state["fingerprint"]


def _input_labels(config: CalculatorConfig) -> dict:
    return {i.name: i.label for i in config.inputs}


def render_exports(config: CalculatorConfig, raw: dict, results, rules):
    """CSV download plus a rate-limited PDF download."""
    log = get_export_log()
    fingerprint = visitor_fingerprint()
    labels = _input_labels(config)
    c1, c2 = st.columns(2)
    c1.download_button(
        "Download CSV",
        data=results_to_csv(results),
        file_name=f"{config.id}_results.csv",
        mime="text/csv",
        key=f"csv_{config.id}",
    )
    status = log.check(fingerprint)
    blocked = has_blocking(rules)
    if blocked:
        c2.info("Resolve critical warnings to enable PDF export.")
    elif c2.button("Prepare PDF", key=f"pdf_{config.id}", disabled=not status.allowed):
        payload = {
            "calculator_id": config.id,
            "title": config.title,
            "metadata": config.metadata,
            "inputs": {labels[k]: v for k, v in raw.items() if k in labels},
            "results": results,
            "advisories": rules,
        }
        try:
            st.session_state[f"pdf_bytes_{config.id}"] = export_calculator_pdf(payload, log, fingerprint)
            logger.info("pdf export for %s by %s", config.id, fingerprint)
        except ExportRateLimitError as exc:
            st.error(str(exc))
        status = log.check(fingerprint)
    pdf = st.session_state.get(f"pdf_bytes_{config.id}")
    if pdf:
        c2.download_button(
            "Download PDF",
            data=pdf,
            file_name=f"{config.id}_results.pdf",
            mime="application/pdf",
            key=f"pdf_download_{config.id}",
        )
    if status.allowed:
        st.caption(f"{status.remaining} PDF exports remaining today")
    else:
        st.caption(f"PDF export limit reached. Resets in {format_time_remaining(status.reset_time)}.")


def render_calculator_page(calculator_id: str):
    """Form, results, advisories and exports for one calculator.

    Returns the calculated results, or ``None`` while the form has errors.
    """
    config = get_calculator(calculator_id)
    st.header(f"{config.icon} {config.title}")
    st.caption(config.description)

    tables = render_fee_sidebar() if config.id == "purchase" else None
    left, right = st.columns([1, 2])
    with left:
        raw = render_calculator_form(config)
        if config.id == "va-purchase" and raw.get("home_price"):
            render_insurance_helper(raw["home_price"])

    with right:
        # Blank required numbers count as zero, so range messages explain them.
        required = [i.name for i in config.numeric_inputs() if i.required]
        check = config.validate(coerce_inputs(raw, required))
        if not check.success:
            render_field_errors(_input_labels(config), check.errors)
            return None
        try:
            if tables is not None:
                results = config.calculate(check.data, tables)
            else:
                results = config.calculate(check.data)
        except DownPaymentExceedsPriceError as exc:
            render_field_errors(_input_labels(config), {exc.field: str(exc)})
            return None
        rules = evaluate_calculator_rules(config.id, results, raw)
        render_result_metrics(results)
        render_results_table(results)
        render_advisories(rules)
        render_exports(config, raw, results, rules)

    if config.id == "va-purchase":
        loan = next(r.value for r in results if r.label == "Total Loan Amount")
        if loan > 0:
            render_early_payoff(loan, check.data.interest_rate, STANDARD_TERM_YEARS)
    return results
