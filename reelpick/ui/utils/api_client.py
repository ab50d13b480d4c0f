"""
FastAPI client wrapper for Streamlit UI.
"""

import os
import requests


def get_api_base_url() -> str:
    """Get API base URL from env or default."""
    return os.getenv("API_BASE_URL", "http://localhost:8000").rstrip("/")


def start_session(query: str, user_id: str | None = None) -> dict:
    """Start a suggestion session from a search query."""
    payload = {"query": query}
    if user_id:
        payload["userId"] = user_id
    r = requests.post(
        f"{get_api_base_url()}/api/movies/suggest/start",
        json=payload,
        timeout=30,
    )
    r.raise_for_status()
    return r.json()


def submit_feedback(
    user_id: str,
    liked_movie_ids: list[str] | None = None,
    disliked_movie_ids: list[str] | None = None,
) -> dict:
    """Send liked/disliked movies and get updated recommendations."""
    r = requests.post(
        f"{get_api_base_url()}/api/movies/suggest/feedback",
        json={
            "userId": user_id,
            "likedMovieIds": liked_movie_ids or [],
            "dislikedMovieIds": disliked_movie_ids or [],
        },
        timeout=30,
    )
    r.raise_for_status()
    return r.json()


def get_recommendations(user_id: str) -> dict:
    """Get recommendations for a user."""
    r = requests.get(f"{get_api_base_url()}/api/movies/suggest/{user_id}", timeout=30)
    r.raise_for_status()
    return r.json()


def get_profile(user_id: str) -> dict:
    """Get the stored preference profile."""
    r = requests.get(f"{get_api_base_url()}/api/movies/suggest/{user_id}/profile", timeout=10)
    r.raise_for_status()
    return r.json()


def health_check() -> dict:
    """Check API health."""
    r = requests.get(f"{get_api_base_url()}/api/health", timeout=5)
    r.raise_for_status()
    return r.json()
