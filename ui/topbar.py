import streamlit as st

from core.config import get_settings
from core.version import __version__


def render_topbar():
    """Sticky brand bar with the app version and contact details."""
    settings = get_settings()
    st.markdown(
        """
        <style>
        .mm-topbar {position:sticky; top:0; background-color:white; z-index:100; padding:4px 8px; border-bottom:1px solid #ddd;}
        .mm-topbar div[data-testid="stHorizontalBlock"] {align-items:center;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    with st.container():
        st.markdown('<div class="mm-topbar">', unsafe_allow_html=True)
        left, right = st.columns([3, 1])
        with left:
            st.markdown(f"**{settings.brand_name.upper()}** v{__version__}")
        with right:
            if settings.phone:
                st.markdown(f"📞 {settings.phone}")
            if settings.nmls:
                st.caption(f"NMLS {settings.nmls}")
        st.markdown("</div>", unsafe_allow_html=True)
