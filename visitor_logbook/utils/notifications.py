"""
Toast and flash message helpers
"""

from typing import List

import streamlit as st

from ..schemas import ApiResponse

TOAST_ICONS = {
    "success": "✅",
    "error": "❌",
    "info": "ℹ️",
    "warning": "⚠️",
}


def error_messages(result: ApiResponse, fallback: str) -> List[str]:
    """Message for a failed result followed by one entry per validation error"""
    messages = [result.message or fallback]
    for field, field_messages in result.errors.items():
        for message in field_messages:
            messages.append(f"{field}: {message}")
    return messages


def notify(message: str, kind: str = "info"):
    st.toast(message, icon=TOAST_ICONS.get(kind))


def notify_errors(result: ApiResponse, fallback: str):
    for message in error_messages(result, fallback):
        notify(message, "error")


def flash(message: str, kind: str = "success"):
    """Queue a toast that survives a page switch"""
    st.session_state.setdefault("flashes", []).append((message, kind))


def show_flashes():
    for message, kind in st.session_state.pop("flashes", []):
        notify(message, kind)
