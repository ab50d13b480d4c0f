"""
Session state helpers for Streamlit.
"""

import streamlit as st


def get_current_user_id() -> str | None:
    """Get current user ID from session state."""
    return st.session_state.get("user_id")


def set_result(result: dict) -> None:
    """Store the latest suggestion response."""
    st.session_state["user_id"] = result.get("userId")
    st.session_state["recommendations"] = result.get("recommendations", [])
    st.session_state["message"] = result.get("message", "")


def clear_session() -> None:
    """Forget the current user and results."""
    for key in ("user_id", "recommendations", "message"):
        if key in st.session_state:
            del st.session_state[key]


def init_session_state() -> None:
    """Initialize session state keys if not present."""
    if "user_id" not in st.session_state:
        st.session_state["user_id"] = None
    if "recommendations" not in st.session_state:
        st.session_state["recommendations"] = []
    if "message" not in st.session_state:
        st.session_state["message"] = ""
