from typing import List

import streamlit as st

from visitor_logbook.config import settings
from visitor_logbook.schemas import Visitor
from visitor_logbook.utils.api_client import get_api_client
from visitor_logbook.utils.components import (
    parse_visitors, render_empty_state, render_filters, render_navigation,
    render_stats, render_visitor_list
)
from visitor_logbook.utils.filters import filter_visitors, is_filtered, visitor_stats
from visitor_logbook.utils.notifications import notify, show_flashes
from visitor_logbook.utils.session import open_visitor_editor

# Page configuration - must be first Streamlit command
st.set_page_config(
    page_title=settings.APP_TITLE,
    page_icon="📖",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main > div {
        padding-top: 1rem;
    }

    [data-testid="stMetricValue"] {
        font-size: 2rem;
        font-weight: bold;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


def load_visitors() -> List[Visitor]:
    result = get_api_client().get_visitors()
    if result.success and result.data is not None:
        return parse_visitors(result.data)
    notify("Failed to load visitors", "error")
    return []


def main():
    """Visitor list with search and status filter"""
    api_client = get_api_client()
    render_navigation(logout=api_client.logout)
    show_flashes()

    st.markdown(f"""
    <div style="text-align: center; padding: 1rem;">
        <h1>📖 Welcome to {settings.APP_TITLE}</h1>
        <p style="color: #888;">Track and manage all visitors in real-time</p>
    </div>
    """, unsafe_allow_html=True)

    with st.spinner("Loading visitors..."):
        visitors = load_visitors()

    render_stats(visitor_stats(visitors))

    st.markdown("---")

    term, status = render_filters("home")
    filtered = filter_visitors(visitors, term, status)

    st.markdown("---")

    if filtered:
        render_visitor_list(filtered, "Visitors", on_edit=open_visitor_editor)
    else:
        render_empty_state(is_filtered(term, status))
        if not is_filtered(term, status):
            st.caption("Ready to welcome your first visitor")


if __name__ == "__main__":
    main()
