import json

import streamlit as st
from pydantic import ValidationError

from core.programs import default_tables, validate_fee_table

TABLE_LABELS = {
    "conv_mi": "Conventional MI Table",
    "fha": "FHA MIP Table",
    "va": "VA Funding Fee Table",
    "usda": "USDA Guarantee Fee Table",
}


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    where = ".".join(str(p) for p in err["loc"])
    return f"{where}: {err['msg']}" if where else err["msg"]


def render_fee_sidebar() -> dict:
    """Sidebar with editable MI/MIP/funding fee tables.

    Edits are kept in ``st.session_state["fee_tables"]``. Text that does not
    parse as a JSON object of non-negative rates is reported and the previous
    table stays in use.
    """
    tables = st.session_state.setdefault("fee_tables", default_tables())

    st.sidebar.header("MI / MIP / Guarantee")
    for key, label in TABLE_LABELS.items():
        text = st.sidebar.text_area(label, value=json.dumps(tables.get(key, {}), indent=2), key=f"fee_{key}")
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            st.sidebar.error(f"{label}: invalid JSON ({exc.msg})")
            continue
        if not isinstance(parsed, dict):
            st.sidebar.error(f"{label}: expected a JSON object")
            continue
        try:
            tables[key] = validate_fee_table(key, parsed)
        except ValidationError as exc:
            st.sidebar.error(f"{label}: {_first_error(exc)}")

    if st.sidebar.button("Reset to defaults", key="fee_reset"):
        tables = default_tables()
        for key in TABLE_LABELS:
            st.session_state.pop(f"fee_{key}", None)
        st.session_state["fee_tables"] = tables
        st.rerun()
    st.session_state["fee_tables"] = tables
    return tables
