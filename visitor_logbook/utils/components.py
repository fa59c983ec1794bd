"""
Shared Streamlit widgets: navigation, stats, filters, visitor cards and forms
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd
import streamlit as st
from pydantic import ValidationError

from ..config import settings
from ..schemas import Admin, SexOption, Visitor, VisitorForm, form_errors
from .filters import STATUS_FILTER_LABELS, StatusFilter
from .notifications import flash
from .session import (
    ADD_VISITOR_PAGE, ADMIN_LOGIN_PAGE, ADMIN_PANEL_PAGE, HOME_PAGE,
    clear_admin_session, get_admin_name, is_admin_logged_in
)

logger = logging.getLogger(__name__)


# ==================== Data helpers ====================

def parse_visitors(data: Any) -> List[Visitor]:
    """Turn an API payload into Visitor models, skipping malformed rows"""
    visitors = []
    for row in data or []:
        try:
            visitors.append(Visitor.model_validate(row))
        except ValidationError as e:
            logger.warning(f"Skipping malformed visitor record: {e}")
    return visitors


def parse_admins(data: Any) -> List[Admin]:
    admins = []
    for row in data or []:
        try:
            admins.append(Admin.model_validate(row))
        except ValidationError as e:
            logger.warning(f"Skipping malformed admin record: {e}")
    return admins


def format_timestamp(value: Optional[datetime]) -> str:
    if not value:
        return "N/A"
    return value.strftime("%b %d, %Y %I:%M %p")


def admins_frame(admins: List[Admin]) -> pd.DataFrame:
    """Administrators as a table for display"""
    rows = [
        {
            "ID": a.id,
            "Name": a.name,
            "Email": a.email,
            "Since": format_timestamp(a.created_at),
        }
        for a in admins
    ]
    return pd.DataFrame(rows, columns=["ID", "Name", "Email", "Since"])


# ==================== Navigation ====================

def render_navigation(logout: Optional[Callable[[], Any]] = None):
    """Sidebar navigation shared by every page"""
    with st.sidebar:
        st.title(f"📖 {settings.APP_TITLE}")
        st.caption("Digital visitor management")
        st.markdown("---")

        st.page_link(HOME_PAGE, label="View Visitors", icon="👥")
        st.page_link(ADD_VISITOR_PAGE, label="Add Visitor", icon="➕")

        st.markdown("---")

        if is_admin_logged_in():
            st.markdown(f"**🔐 {get_admin_name()}**")
            st.page_link(ADMIN_PANEL_PAGE, label="Admin Panel", icon="🔐")
            if logout and st.button("🚪 Logout", use_container_width=True):
                result = logout()
                if result.success:
                    clear_admin_session()
                    flash("Logged out successfully")
                    st.switch_page(HOME_PAGE)
                else:
                    st.error("Error logging out")
        else:
            st.page_link(ADMIN_LOGIN_PAGE, label="Admin", icon="🔑")


# ==================== Stats & Filters ====================

def render_stats(stats: Dict[str, int], admin_count: Optional[int] = None):
    cols = st.columns(4 if admin_count is not None else 3)

    with cols[0]:
        st.metric("Total Visitors", stats["total"], help="All time visitors")
    with cols[1]:
        st.metric("Currently Active", stats["active"], help="Signed in visitors")
    with cols[2]:
        st.metric("Signed Out", stats["signed_out"], help="Completed visits")
    if admin_count is not None:
        with cols[3]:
            st.metric("Administrators", admin_count, help="System admins")


def render_filters(key: str) -> Tuple[str, StatusFilter]:
    st.markdown("### 🔍 Filter & Search Visitors")
    col1, col2 = st.columns([3, 1])
    with col1:
        term = st.text_input(
            "Search",
            placeholder="Search by name or purpose...",
            key=f"{key}_search"
        )
    with col2:
        status = st.selectbox(
            "Status",
            options=list(StatusFilter),
            format_func=lambda s: STATUS_FILTER_LABELS[s],
            key=f"{key}_status"
        )
    return term.strip(), status


def render_empty_state(filtered: bool):
    if filtered:
        st.info("**No matching visitors found**\n\nTry adjusting your search or filter criteria")
    else:
        st.info("**No visitors yet**\n\nVisitors will appear here once they sign in")


# ==================== Visitor Card ====================

def render_visitor_card(
    visitor: Visitor,
    on_edit: Optional[Callable[[int], Any]] = None,
    on_timeout: Optional[Callable[[int], Any]] = None,
    on_delete: Optional[Callable[[Visitor], Any]] = None,
):
    with st.container(border=True):
        col1, col2, col3 = st.columns([2, 2, 1])

        with col1:
            st.markdown(f"#### 👤 {visitor.full_name}")
            details = f"{visitor.age} years old"
            if visitor.display_sex:
                details = f"{visitor.display_sex}, {details}"
            st.caption(details)

        with col2:
            st.markdown(f"**📞 Contact:** {visitor.contact_number or 'N/A'}")
            st.markdown(f"**🎯 Purpose:** {visitor.purpose_of_visit or 'N/A'}")

        with col3:
            if visitor.is_active:
                st.success("🟢 Active")
            else:
                st.markdown("⚪ **Signed Out**")

        time_col1, time_col2 = st.columns(2)
        with time_col1:
            st.caption(f"🕒 Signed in: {format_timestamp(visitor.created_at)}")
        with time_col2:
            if not visitor.is_active:
                st.caption(f"🚪 Signed out: {format_timestamp(visitor.time_out)}")

        btn_col1, btn_col2, btn_col3 = st.columns(3)

        if on_edit:
            with btn_col1:
                if st.button("✏️ Edit", key=f"edit_{visitor.id}", use_container_width=True):
                    on_edit(visitor.id)

        if on_timeout and visitor.is_active:
            with btn_col2:
                if st.button("🚪 Sign Out", key=f"timeout_{visitor.id}", use_container_width=True):
                    on_timeout(visitor.id)

        if on_delete:
            with btn_col3:
                if st.button("🗑️ Delete", key=f"delete_{visitor.id}", use_container_width=True):
                    on_delete(visitor)


def render_visitor_list(visitors: List[Visitor], heading: str, **card_actions):
    active = sum(1 for v in visitors if v.is_active)

    head_col, badge_col = st.columns([3, 2])
    with head_col:
        st.markdown(f"## {heading} ({len(visitors)})")
    if visitors:
        with badge_col:
            st.markdown(f"🟢 **{active} Active** &nbsp;&nbsp; ⚪ **{len(visitors) - active} Signed Out**")

    for visitor in visitors:
        render_visitor_card(visitor, **card_actions)


# ==================== Visitor Form ====================

SEX_OPTIONS = [s.value for s in SexOption]


def sex_option_index(value: Optional[str]) -> Optional[int]:
    """Position of a stored sex value in SEX_OPTIONS, ignoring case"""
    if not value:
        return None
    lowered = [option.lower() for option in SEX_OPTIONS]
    normalized = value.strip().lower()
    return lowered.index(normalized) if normalized in lowered else None


def render_visitor_form(
    key: str,
    submit_text: str,
    initial: Optional[Visitor] = None,
    disabled: bool = False,
) -> Optional[VisitorForm]:
    """Render the visitor form and return validated data on submit"""
    initial_sex = (initial.display_sex or "Male") if initial else None

    with st.form(key):
        st.markdown("**👤 Personal Information**")
        col1, col2, col3 = st.columns(3)
        with col1:
            firstname = st.text_input(
                "First Name *",
                value=initial.firstname if initial else "",
                placeholder="Enter first name"
            )
        with col2:
            middlename = st.text_input(
                "Middle Name",
                value=(initial.middlename or "") if initial else "",
                placeholder="Enter middle name (optional)"
            )
        with col3:
            lastname = st.text_input(
                "Last Name *",
                value=initial.lastname if initial else "",
                placeholder="Enter last name"
            )

        col1, col2 = st.columns(2)
        with col1:
            age = st.number_input(
                "Age *",
                min_value=0,
                max_value=200,
                step=1,
                value=min(max(initial.age, 0), 200) if initial else 18
            )
        with col2:
            sex = st.selectbox(
                "Gender *",
                options=SEX_OPTIONS,
                index=sex_option_index(initial_sex),
                placeholder="Select gender"
            )

        st.markdown("**📞 Contact & Visit Details**")
        contact_number = st.text_input(
            "Contact Number *",
            value=initial.contact_number if initial else "",
            placeholder="Enter contact number"
        )
        purpose_of_visit = st.text_area(
            "Purpose of Visit *",
            value=initial.purpose_of_visit if initial else "",
            placeholder="Describe the purpose of your visit"
        )

        submitted = st.form_submit_button(
            submit_text,
            use_container_width=True,
            type="primary",
            disabled=disabled
        )

    if not submitted:
        return None

    try:
        return VisitorForm(
            firstname=firstname,
            middlename=middlename,
            lastname=lastname,
            age=int(age),
            sex=sex,
            contact_number=contact_number,
            purpose_of_visit=purpose_of_visit,
        )
    except ValidationError as e:
        for field, messages in form_errors(e).items():
            for message in messages:
                st.error(f"{field}: {message}")
        return None
