"""
API tests for the suggestion session endpoints.

Uses FastAPI TestClient against the real app with the database dependency
pointed at a seeded in-memory catalog.
"""

from sqlalchemy.exc import SQLAlchemyError

from reelpick.database import crud
from reelpick.database.models import UserPreference


def ids(data):
    return [m["tconst"] for m in data["recommendations"]]


class TestStartEndpoint:
    """Tests for POST /api/movies/suggest/start."""

    def test_start_session(self, client):
        """POST /start returns a new user id and title matches."""
        r = client.post("/api/movies/suggest/start", json={"query": "Matrix"})
        assert r.status_code == 200
        data = r.json()
        assert data["userId"].startswith("user_")
        assert data["outcome"] == "cold_start"
        assert ids(data) == ["tt0133093", "tt0234215"]

        movie = data["recommendations"][0]
        assert movie["primaryTitle"] == "The Matrix"
        assert movie["averageRating"] == 8.7
        assert movie["plot"] == "Plot not available"

    def test_start_with_user_id(self, client):
        """POST /start keeps a caller-supplied user id."""
        r = client.post("/api/movies/suggest/start", json={"query": "Wick", "userId": "u1"})
        assert r.status_code == 200
        assert r.json()["userId"] == "u1"

    def test_start_empty_query(self, client):
        """POST /start with an empty query is a validation error."""
        r = client.post("/api/movies/suggest/start", json={"query": ""})
        assert r.status_code == 422

    def test_start_persistence_failure(self, client, db_manager):
        """POST /start returns 500 when the profile cannot be saved."""
        UserPreference.__table__.drop(db_manager.engine)

        r = client.post("/api/movies/suggest/start", json={"query": "Matrix"})
        assert r.status_code == 500
        assert "Failed to save" in r.json()["detail"]


class TestFeedbackEndpoint:
    """Tests for POST /api/movies/suggest/feedback."""

    def test_feedback_returns_ranked_movies(self, client):
        """Liking The Matrix ranks Matrix Reloaded first and drops Shawshank."""
        user_id = client.post("/api/movies/suggest/start", json={"query": "Matrix"}).json()["userId"]

        r = client.post("/api/movies/suggest/feedback", json={
            "userId": user_id,
            "likedMovieIds": ["tt0133093"],
            "dislikedMovieIds": [],
        })
        assert r.status_code == 200
        data = r.json()
        assert data["outcome"] == "feedback_applied"
        assert ids(data) == ["tt0234215", "tt2911666", "tt0468569", "tt0088763"]
        assert "tt0111161" not in ids(data)
        assert data["recommendations"][0]["score"] > data["recommendations"][1]["score"]

    def test_feedback_accepts_snake_case(self, client):
        r = client.post("/api/movies/suggest/feedback", json={
            "user_id": "u1",
            "liked_movie_ids": ["tt0133093"],
        })
        assert r.status_code == 200
        assert r.json()["userId"] == "u1"

    def test_feedback_without_likes_falls_back(self, client):
        r = client.post("/api/movies/suggest/feedback", json={
            "userId": "u1",
            "dislikedMovieIds": ["tt0133093"],
        })
        assert r.status_code == 200
        data = r.json()
        assert data["outcome"] == "fallback"
        assert ids(data)[0] == "tt0111161"

    def test_feedback_missing_user(self, client):
        r = client.post("/api/movies/suggest/feedback", json={"likedMovieIds": ["tt0133093"]})
        assert r.status_code == 422


class TestRecommendationEndpoints:
    """Tests for GET /api/movies/suggest/{user_id} and its profile."""

    def test_recommendations_for_new_user(self, client):
        """A user without likes gets the top-rated list."""
        r = client.get("/api/movies/suggest/nobody")
        assert r.status_code == 200
        data = r.json()
        assert data["outcome"] == "fallback"
        assert "tt9999991" not in ids(data)

    def test_recommendations_after_feedback(self, client):
        client.post("/api/movies/suggest/feedback", json={"userId": "u1", "likedMovieIds": ["tt0133093"]})

        r = client.get("/api/movies/suggest/u1")
        assert r.status_code == 200
        data = r.json()
        assert data["outcome"] == "personalized"
        assert ids(data)[0] == "tt0234215"

    def test_recommendations_source_unavailable(self, client, monkeypatch):
        """GET returns 503 when even the top-rated list cannot be read."""
        def broken(*args, **kwargs):
            raise RuntimeError("database is locked")

        monkeypatch.setattr(crud, "get_top_rated_movies", broken)

        r = client.get("/api/movies/suggest/nobody")
        assert r.status_code == 503

    def test_get_profile(self, client):
        client.post("/api/movies/suggest/start", json={"query": "Matrix", "userId": "u1"})
        client.post("/api/movies/suggest/feedback", json={"userId": "u1", "likedMovieIds": ["tt0133093"]})

        r = client.get("/api/movies/suggest/u1/profile")
        assert r.status_code == 200
        data = r.json()
        assert data["initialQuery"] == "Matrix"
        assert data["preferredGenres"] == ["Action", "Sci-Fi"]
        assert data["preferredActors"] == ["Carrie-Anne Moss", "Keanu Reeves", "Laurence Fishburne"]

    def test_get_profile_not_found(self, client):
        r = client.get("/api/movies/suggest/nobody/profile")
        assert r.status_code == 404
        assert "not found" in r.json()["detail"].lower()

    def test_recommendations_database_error(self, client, monkeypatch):
        """A failing ledger read maps to a 500 that says what went wrong."""
        def broken(*args, **kwargs):
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(crud, "get_liked_movie_ids", broken)

        r = client.get("/api/movies/suggest/u1")
        assert r.status_code == 500
        assert "Database error" in r.json()["detail"]

    def test_get_profile_database_error(self, client, monkeypatch):
        def broken(*args, **kwargs):
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(crud, "find_preferences", broken)

        r = client.get("/api/movies/suggest/u1/profile")
        assert r.status_code == 500
        assert "Database error" in r.json()["detail"]
