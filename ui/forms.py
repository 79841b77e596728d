import streamlit as st

from core.configs import CalculatorConfig, CalculatorInput
from core.state import form_key

# Inputs that only matter for one loan program.
PROGRAM_ONLY = {"first_use_va": "VA", "va_exempt": "VA"}


def widget_key(config: CalculatorConfig, name: str) -> str:
    return f"calc_{config.id}_{name}"


def _number_input(config: CalculatorConfig, item: CalculatorInput, value):
    fmt = "%.2f" if item.kind == "percentage" else "%.0f" if item.step >= 1 else None
    return st.number_input(
        item.label,
        value=None if value is None else float(value),
        step=float(item.step),
        format=fmt,
        help=item.help or None,
        placeholder=item.placeholder or None,
        key=widget_key(config, item.name),
    )


def render_calculator_form(config: CalculatorConfig) -> dict:
    """Render the inputs for ``config`` and return the raw values.

    Values start from the calculator defaults, overlaid with whatever was
    saved for this calculator in the session, and are written back under
    ``form_<id>`` so they survive a reload.
    """
    saved = st.session_state.get(form_key(config.id), {})
    values = {**config.defaults(), **saved}

    for item in config.inputs:
        value = values.get(item.name)
        program = PROGRAM_ONLY.get(item.name)
        if program and values.get("loan_program") != program:
            continue
        if item.kind == "select":
            options = list(item.options)
            index = options.index(value) if value in options else 0
            values[item.name] = st.selectbox(
                item.label, options, index=index, help=item.help or None, key=widget_key(config, item.name)
            )
        elif item.kind == "toggle":
            values[item.name] = st.checkbox(
                item.label, value=bool(value), help=item.help or None, key=widget_key(config, item.name)
            )
        else:
            values[item.name] = _number_input(config, item, value)

    st.session_state[form_key(config.id)] = values
    return values
