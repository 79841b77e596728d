import streamlit as st

from core.config import configure_logging, get_settings
from core.configs import CALCULATORS
from core.state import load_state, save_state
from ui.calculator_page import render_calculator_page
from ui.components import render_footer
from ui.content_pages import render_blog, render_home, render_loan_options
from ui.topbar import render_topbar

PAGES = ["Home", "Calculators", "Loan Options", "Blog"]


def render_calculators():
    ids = list(CALCULATORS)
    current = st.session_state.get("calculator", ids[0])
    choice = st.sidebar.selectbox(
        "Calculator",
        ids,
        index=ids.index(current) if current in ids else 0,
        format_func=lambda c: f"{CALCULATORS[c].icon} {CALCULATORS[c].title}",
    )
    st.session_state["calculator"] = choice
    return render_calculator_page(choice)


def main():
    settings = get_settings()
    configure_logging(settings.log_level)
    st.set_page_config(page_title=settings.brand_name, page_icon="🏠", layout="wide")
    load_state()

    page = st.session_state.get("page", "Home")
    nav = st.sidebar.radio("Navigate", PAGES, index=PAGES.index(page) if page in PAGES else 0)
    st.session_state["page"] = nav

    render_topbar()
    if nav == "Home":
        render_home()
    elif nav == "Calculators":
        render_calculators()
    elif nav == "Loan Options":
        render_loan_options()
    elif nav == "Blog":
        render_blog()
    render_footer()
    save_state()


if __name__ == "__main__":
    main()
