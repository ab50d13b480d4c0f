"""
Preference profile and its derivation from liked movies.

The profile is never patched incrementally: derive_profile() rebuilds the
genre and actor sets from the complete list of liked movies every time, so
the stored profile always agrees with the feedback ledger.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set

from reelpick.core.suggest.movie import MovieRecord

DEFAULT_ACTORS_PER_MOVIE = 3


@dataclass
class PreferenceProfile:
    """
    Preference profile for one user.

    Attributes:
        user_id: Stable user identifier
        initial_query: Query the session was started with
        preferred_genres: Genre tokens taken from liked movies
        preferred_actors: Actor names taken from liked movies
        last_updated: Time of the most recent recompute (UTC)
    """

    user_id: str
    initial_query: Optional[str] = None
    preferred_genres: Set[str] = field(default_factory=set)
    preferred_actors: Set[str] = field(default_factory=set)
    last_updated: Optional[datetime] = None

    @property
    def has_signal(self) -> bool:
        """True when both genres and actors are known, i.e. scoring can run."""
        return bool(self.preferred_genres) and bool(self.preferred_actors)


def split_tokens(value: Optional[str]) -> List[str]:
    """Split a comma-separated field into trimmed, non-empty tokens (order kept)."""
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


def extract_genres(movies: Iterable[MovieRecord]) -> Set[str]:
    """Union of the genre tokens of all movies."""
    genres: Set[str] = set()
    for movie in movies:
        genres.update(split_tokens(movie.genres))
    return genres


def extract_actors(
    movies: Iterable[MovieRecord],
    per_movie: int = DEFAULT_ACTORS_PER_MOVIE
) -> Set[str]:
    """Union of the first `per_movie` cast names of each movie."""
    actors: Set[str] = set()
    for movie in movies:
        actors.update(split_tokens(movie.cast)[:per_movie])
    return actors


def new_profile(user_id: str, initial_query: Optional[str]) -> PreferenceProfile:
    """Fresh profile for a session start: query recorded, no preferences yet."""
    return PreferenceProfile(
        user_id=user_id,
        initial_query=initial_query,
        last_updated=datetime.now(timezone.utc),
    )


def derive_profile(
    profile: PreferenceProfile,
    liked_movies: Iterable[MovieRecord],
    actors_per_movie: int = DEFAULT_ACTORS_PER_MOVIE,
    now: Optional[datetime] = None,
) -> PreferenceProfile:
    """
    Recompute a profile from the user's liked movies.

    Returns a new profile; the initial query is carried over unchanged and
    both preference sets are replaced wholesale.
    """
    liked_movies = list(liked_movies)
    return replace(
        profile,
        preferred_genres=extract_genres(liked_movies),
        preferred_actors=extract_actors(liked_movies, per_movie=actors_per_movie),
        last_updated=now or datetime.now(timezone.utc),
    )
