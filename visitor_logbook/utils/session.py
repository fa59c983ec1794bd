"""
Admin session helpers backed by Streamlit session state
"""

from typing import Any, Optional

import streamlit as st

ADMIN_SESSION_KEYS = ["admin_authenticated", "admin_id", "admin_name", "admin_email"]

HOME_PAGE = "app.py"
ADD_VISITOR_PAGE = "pages/1_➕_Add_Visitor.py"
EDIT_VISITOR_PAGE = "pages/2_📝_Edit_Visitor.py"
ADMIN_LOGIN_PAGE = "pages/3_🔑_Admin_Login.py"
ADMIN_PANEL_PAGE = "pages/4_🔐_Admin_Panel.py"


def store_admin_session(admin: Any):
    """Remember the logged-in admin for navigation and greetings"""
    st.session_state.admin_authenticated = True
    if isinstance(admin, dict):
        st.session_state.admin_id = admin.get("id")
        st.session_state.admin_name = admin.get("name", "Admin")
        st.session_state.admin_email = admin.get("email", "")


def clear_admin_session():
    for key in ADMIN_SESSION_KEYS:
        st.session_state.pop(key, None)


def is_admin_logged_in() -> bool:
    return bool(st.session_state.get("admin_authenticated"))


def get_admin_name() -> str:
    return st.session_state.get("admin_name", "Admin")


def open_visitor_editor(visitor_id: int):
    """Switch to the edit page for a visitor"""
    st.session_state.edit_visitor_id = visitor_id
    st.switch_page(EDIT_VISITOR_PAGE)


def get_editing_visitor_id() -> Optional[int]:
    """Visitor to edit, from the query string or the last card clicked"""
    raw = st.query_params.get("id") or st.session_state.get("edit_visitor_id")
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None
