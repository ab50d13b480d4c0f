"""
Streamlit app for ReelPick.

Run: streamlit run reelpick/ui/app.py --server.port 8501
"""

import streamlit as st

from reelpick.ui.components.movie_card import render_movie_card
from reelpick.ui.utils.api_client import health_check, start_session, submit_feedback
from reelpick.ui.utils.session_state import (
    clear_session,
    get_current_user_id,
    init_session_state,
    set_result,
)

st.set_page_config(
    page_title="ReelPick",
    page_icon="🎬",
    layout="wide",
)

init_session_state()

st.title("🎬 ReelPick")
st.markdown("Search for a movie you like, then tell us what you think of the suggestions.")

try:
    if health_check().get("status") != "healthy":
        st.warning("API may not be fully ready")
except Exception as e:
    st.error(f"API not available: {e}")
    st.info("Start the API with: uvicorn reelpick.api.main:app --host 0.0.0.0 --port 8000")
    st.stop()

with st.form("start"):
    query = st.text_input("Movie title", placeholder="e.g. Matrix")
    if st.form_submit_button("Start") and query.strip():
        try:
            set_result(start_session(query.strip(), get_current_user_id()))
        except Exception as e:
            st.error(f"Failed to start session: {e}")

user_id = get_current_user_id()
if user_id:
    st.caption(f"Session: {user_id}")
    if st.button("New session"):
        clear_session()
        st.rerun()


def handle_feedback(tconst: str, liked: bool) -> None:
    """Send a single like/dislike and show the updated list."""
    try:
        result = submit_feedback(
            user_id,
            liked_movie_ids=[tconst] if liked else [],
            disliked_movie_ids=[] if liked else [tconst],
        )
        set_result(result)
        st.rerun()
    except Exception as e:
        st.error(f"Failed to send feedback: {e}")


if st.session_state["message"]:
    st.info(st.session_state["message"])

for movie in st.session_state["recommendations"]:
    render_movie_card(movie, on_feedback=handle_feedback if user_id else None)
