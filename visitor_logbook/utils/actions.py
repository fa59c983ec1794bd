"""
Visitor mutations triggered from the admin panel

Each action reports its outcome as a flash and reruns the page so the
panel reloads admins and visitors from the API.
"""

import streamlit as st

from .api_client import APIClient
from .notifications import flash


def sign_out_visitor(api_client: APIClient, visitor_id: int):
    result = api_client.timeout_visitor(visitor_id)
    if result.success:
        flash("Visitor signed out successfully")
    else:
        flash("Failed to sign out visitor", "error")
    st.rerun()


def delete_visitor(api_client: APIClient, visitor_id: int):
    result = api_client.delete_visitor(visitor_id)
    if result.success:
        flash("Visitor deleted successfully")
    else:
        flash("Failed to delete visitor", "error")
    st.rerun()
