"""
Shared fixtures: in-memory SQLite databases seeded with a small IMDb-shaped
catalog, a fake enrichment source and an API TestClient.
"""

import threading

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from reelpick.api.dependencies import get_db, get_omdb_client, get_suggest_engine
from reelpick.api.main import app
from reelpick.clients.omdb import OmdbClient
from reelpick.core.suggest.engine import SuggestEngine
from reelpick.database.connection import DatabaseManager
from reelpick.database.models import Base, Title, TitleRating, Person, Principal


# tconst, title, year, genres, rating, votes, runtime
MOVIES = [
    ("tt0133093", "The Matrix", 1999, "Action, Sci-Fi", 8.7, 2000000, 136),
    ("tt0234215", "The Matrix Reloaded", 2003, "Action, Sci-Fi", 7.2, 600000, 138),
    ("tt2911666", "John Wick", 2014, "Action, Crime, Thriller", 7.4, 700000, 101),
    ("tt0088763", "Back to the Future", 1985, "Adventure, Comedy, Sci-Fi", 8.5, 1200000, 116),
    ("tt0111161", "The Shawshank Redemption", 1994, "Drama", 9.3, 2800000, 142),
    ("tt0468569", "The Dark Knight", 2008, "Action, Crime, Drama", 9.0, 2700000, 152),
    ("tt9999991", "Obscure Action", 2020, "Action", 9.5, 500, 90),
]

PEOPLE = {
    "nm0000206": "Keanu Reeves",
    "nm0000401": "Laurence Fishburne",
    "nm0005251": "Carrie-Anne Moss",
    "nm0915989": "Hugo Weaving",
    "nm0905154": "Lana Wachowski",
    "nm0000150": "Michael J. Fox",
    "nm0000209": "Tim Robbins",
    "nm0000288": "Christian Bale",
    "nm0269463": "Chad Stahelski",
}

# tconst -> [(nconst, category)] in billing order
CREDITS = {
    "tt0133093": [
        ("nm0000206", "actor"),
        ("nm0000401", "actor"),
        ("nm0005251", "actress"),
        ("nm0915989", "actor"),
        ("nm0905154", "director"),
    ],
    "tt0234215": [("nm0000206", "actor"), ("nm0000401", "actor"), ("nm0905154", "director")],
    "tt2911666": [("nm0000206", "actor"), ("nm0269463", "director")],
    "tt0088763": [("nm0000150", "actor")],
    "tt0111161": [("nm0000209", "actor")],
    "tt0468569": [("nm0000288", "actor")],
}


def seed_catalog(session):
    """Insert the sample catalog."""
    for nconst, name in PEOPLE.items():
        session.add(Person(nconst=nconst, primary_name=name))
    for tconst, title, year, genres, rating, votes, runtime in MOVIES:
        session.add(Title(
            tconst=tconst,
            title_type="movie",
            primary_title=title,
            start_year=year,
            runtime_minutes=runtime,
            genres=genres,
        ))
        session.add(TitleRating(tconst=tconst, average_rating=rating, num_votes=votes))
    session.add(Title(
        tconst="tt9999992",
        title_type="short",
        primary_title="The Matrix Fan Short",
        start_year=2001,
        genres="Action, Sci-Fi",
    ))
    session.add(TitleRating(tconst="tt9999992", average_rating=9.9, num_votes=50000))
    session.flush()
    for tconst, credits in CREDITS.items():
        for ordering, (nconst, category) in enumerate(credits, start=1):
            session.add(Principal(tconst=tconst, ordering=ordering, nconst=nconst, category=category))
    session.commit()


class FakeEnrichment:
    """
    Enrichment source returning canned OMDb-style payloads.

    Ids in `failing` raise, ids missing from `details` return None.
    """

    def __init__(self, details=None, failing=()):
        self.details = details or {}
        self.failing = set(failing)
        self.calls = []
        self._lock = threading.Lock()

    def details_by_id(self, imdb_id):
        with self._lock:
            self.calls.append(imdb_id)
        if imdb_id in self.failing:
            raise ConnectionError(f"enrichment down for {imdb_id}")
        return self.details.get(imdb_id)


def omdb_payload(plot, poster="", runtime="", director="", actors=""):
    return {
        "Response": "True",
        "Plot": plot,
        "Poster": poster,
        "Runtime": runtime,
        "Director": director,
        "Actors": actors,
    }


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a new database session for testing."""
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def catalog_session(session):
    """Session on a database seeded with the sample catalog."""
    seed_catalog(session)
    return session


@pytest.fixture
def make_enrichment():
    """Factory for FakeEnrichment sources."""
    return FakeEnrichment


@pytest.fixture
def payload():
    """Factory for OMDb-style payloads."""
    return omdb_payload


@pytest.fixture
def db_manager():
    """DatabaseManager on a seeded in-memory database (shared across threads)."""
    manager = DatabaseManager(":memory:")
    manager.create_tables()
    with manager.session_scope() as session:
        seed_catalog(session)
    yield manager
    manager.close()


@pytest.fixture
def api_engine():
    """Engine instance served by the API under test (no enrichment)."""
    return SuggestEngine()


@pytest.fixture
def client(db_manager, api_engine):
    """TestClient for the real app with database, engine and OMDb client overridden."""

    def override_db():
        with db_manager.session_scope() as session:
            yield session

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_suggest_engine] = lambda: api_engine
    app.dependency_overrides[get_omdb_client] = lambda: OmdbClient(api_key=None)
    yield TestClient(app)
    app.dependency_overrides.clear()
