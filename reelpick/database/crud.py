"""
Database operations for the catalog, the preference store and the feedback ledger.

Catalog functions are read-only and return MovieRecord objects. Preference
and feedback writes are single-statement upserts (INSERT ... ON CONFLICT DO
UPDATE), so concurrent writers for the same key never produce duplicate rows.
All user-supplied text reaches SQL as bound parameters.
"""

import json
import logging
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any, Iterable, Sequence
from sqlalchemy import case, func, literal, or_, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reelpick.core.suggest.exceptions import ProfilePersistenceError
from reelpick.core.suggest.movie import MovieRecord, format_runtime, parse_float, parse_int
from reelpick.core.suggest.profile import PreferenceProfile
from reelpick.core.suggest.scoring import ACTOR_WEIGHT, GENRE_WEIGHT, RATING_FACTOR
from reelpick.database.models import (
    Title, TitleRating, Person, Principal, UserPreference, UserFeedback
)

logger = logging.getLogger(__name__)

MOVIE_TYPE = 'movie'
ACTOR_CATEGORIES = ('actor', 'actress')
DIRECTOR_CATEGORY = 'director'

# Keeps IN (...) lists under SQLite's bound-parameter limit
_IN_CHUNK = 500


def _like_pattern(text: str) -> str:
    """Build a %text% pattern with LIKE wildcards in `text` escaped."""
    escaped = text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f"%{escaped}%"


def _to_record(title: Title, rating: Optional[TitleRating]) -> MovieRecord:
    """Map a title row (and its optional rating row) to a MovieRecord."""
    return MovieRecord(
        tconst=title.tconst,
        primary_title=title.primary_title or "",
        start_year=parse_int(title.start_year),
        genres=title.genres or "",
        average_rating=parse_float(rating.average_rating) if rating else None,
        num_votes=parse_int(rating.num_votes) if rating else None,
        runtime=format_runtime(parse_int(title.runtime_minutes)),
    )


def _movie_query(session: Session):
    return session.query(Title, TitleRating).outerjoin(
        TitleRating, Title.tconst == TitleRating.tconst
    ).filter(Title.title_type == MOVIE_TYPE)


# ==================== CATALOG LOOKUP ====================

def get_movie_by_id(session: Session, tconst: str) -> Optional[MovieRecord]:
    """
    Get a movie by IMDb id.

    Args:
        session: Database session
        tconst: IMDb title id

    Returns:
        MovieRecord or None if not found
    """
    row = session.query(Title, TitleRating).outerjoin(
        TitleRating, Title.tconst == TitleRating.tconst
    ).filter(Title.tconst == tconst).first()
    if row is None:
        return None
    return _to_record(*row)


def search_movies_by_title(session: Session, query: str, limit: int = 10) -> List[MovieRecord]:
    """
    Search movies by title (case-insensitive partial match).

    Args:
        session: Database session
        query: Free text to look for in the title
        limit: Maximum number of results

    Returns:
        Movies ordered by rating (unrated last)
    """
    rows = _movie_query(session).filter(
        Title.primary_title.ilike(_like_pattern(query), escape='\\')
    ).order_by(
        TitleRating.average_rating.desc().nulls_last(),
        Title.tconst
    ).limit(limit).all()
    return [_to_record(title, rating) for title, rating in rows]


def get_top_rated_movies(session: Session, limit: int = 20, min_votes: int = 1000) -> List[MovieRecord]:
    """
    Get the highest rated movies above a popularity floor.

    Ordered by rating, then vote count (both descending), then id.
    """
    rows = session.query(Title, TitleRating).join(
        TitleRating, Title.tconst == TitleRating.tconst
    ).filter(
        Title.title_type == MOVIE_TYPE,
        TitleRating.num_votes > min_votes
    ).order_by(
        TitleRating.average_rating.desc(),
        TitleRating.num_votes.desc(),
        Title.tconst
    ).limit(limit).all()
    return [_to_record(title, rating) for title, rating in rows]


def get_cast_and_crew(session: Session, tconst: str) -> List[Dict[str, Any]]:
    """
    Get principal cast and crew for a title in billing order.

    Returns:
        List of dicts with name, category, job and characters
    """
    rows = session.query(Principal, Person).join(
        Person, Principal.nconst == Person.nconst
    ).filter(Principal.tconst == tconst).order_by(Principal.ordering).all()
    return [
        {
            'name': person.primary_name,
            'category': principal.category or '',
            'job': principal.job,
            'characters': principal.characters,
        }
        for principal, person in rows
    ]


def get_cast_names(session: Session, tconsts: Sequence[str]) -> Dict[str, List[str]]:
    """Actor/actress names per title, in billing order."""
    names: Dict[str, List[str]] = {tconst: [] for tconst in tconsts}
    for start in range(0, len(tconsts), _IN_CHUNK):
        chunk = list(tconsts[start:start + _IN_CHUNK])
        rows = session.query(Principal.tconst, Person.primary_name).join(
            Person, Principal.nconst == Person.nconst
        ).filter(
            Principal.tconst.in_(chunk),
            Principal.category.in_(ACTOR_CATEGORIES)
        ).order_by(Principal.tconst, Principal.ordering).all()
        for tconst, name in rows:
            names[tconst].append(name)
    return names


def get_scoring_candidates(
    session: Session,
    genres: Iterable[str],
    actors: Iterable[str],
    exclude_ids: Iterable[str] = (),
    min_votes: int = 1000,
    limit: Optional[int] = None
) -> List[MovieRecord]:
    """
    Get the best movies for a preference profile, scored in SQL.

    Selects movies above the popularity floor, not in `exclude_ids`, and
    computes per movie the number of preferred genres its genre string
    contains plus whether any cast member's name contains a preferred
    actor. Movies with neither are dropped; the rest are ordered by the
    weighted relevance score, then id, and cut to `limit`.

    The SQL actor test is a plain substring match, so the SQL score is never
    below the exact word-boundary score the caller recomputes on the
    returned records. Each record has cast_names populated.
    """
    genres = sorted({g for g in genres if g})
    actors = sorted({a for a in actors if a})
    exclude_ids = list(exclude_ids)
    if not genres and not actors:
        return []

    genre_hits = literal(0)
    for genre in genres:
        genre_hits = genre_hits + case(
            (Title.genres.ilike(_like_pattern(genre), escape='\\'), 1), else_=0
        )

    actor_hit = literal(0)
    if actors:
        cast_match = select(Principal.tconst).join(
            Person, Principal.nconst == Person.nconst
        ).where(
            Principal.tconst == Title.tconst,
            Principal.category.in_(ACTOR_CATEGORIES),
            or_(*[Person.primary_name.ilike(_like_pattern(a), escape='\\') for a in actors])
        ).exists()
        actor_hit = case((cast_match, 1), else_=0)

    relevance = (genre_hits * GENRE_WEIGHT + actor_hit * ACTOR_WEIGHT) * (
        func.coalesce(TitleRating.average_rating, 0.0) * RATING_FACTOR
    )

    query = session.query(Title, TitleRating).join(
        TitleRating, Title.tconst == TitleRating.tconst
    ).filter(
        Title.title_type == MOVIE_TYPE,
        TitleRating.num_votes > min_votes,
        genre_hits + actor_hit > 0
    )
    if exclude_ids:
        query = query.filter(Title.tconst.notin_(exclude_ids))
    query = query.order_by(relevance.desc(), Title.tconst)
    if limit is not None:
        query = query.limit(limit)

    records = [_to_record(title, rating) for title, rating in query.all()]
    cast = get_cast_names(session, [record.tconst for record in records])
    for record in records:
        record.cast_names = cast.get(record.tconst, [])
    return records


def get_movie_details(session: Session, tconst: str) -> Optional[MovieRecord]:
    """
    Get a movie with catalog cast (first 5 actors) and director filled in.

    Returns:
        MovieRecord or None if the id is unknown
    """
    movie = get_movie_by_id(session, tconst)
    if movie is None:
        return None

    cast_crew = get_cast_and_crew(session, tconst)
    actors = [cc['name'] for cc in cast_crew if cc['category'].lower() in ACTOR_CATEGORIES]
    directors = [cc['name'] for cc in cast_crew if cc['category'].lower() == DIRECTOR_CATEGORY]
    movie.cast = ", ".join(actors[:5])
    movie.director = directors[0] if directors else ""
    movie.cast_names = actors
    return movie


def get_top_movies_by_actor(session: Session, actor: str, limit: int = 10) -> List[MovieRecord]:
    """Best rated movies featuring an actor (partial name match)."""
    rows = session.query(Title, TitleRating, Person.primary_name).join(
        Principal, Title.tconst == Principal.tconst
    ).join(
        Person, Principal.nconst == Person.nconst
    ).outerjoin(
        TitleRating, Title.tconst == TitleRating.tconst
    ).filter(
        Title.title_type == MOVIE_TYPE,
        Person.primary_name.ilike(_like_pattern(actor), escape='\\')
    ).order_by(
        TitleRating.average_rating.desc().nulls_last(),
        Title.tconst
    ).limit(limit).all()

    movies = []
    for title, rating, name in rows:
        record = _to_record(title, rating)
        record.actor_name = name
        movies.append(record)
    return movies


def filter_movies(
    session: Session,
    actor: Optional[str] = None,
    genre: Optional[str] = None,
    from_year: Optional[int] = None,
    to_year: Optional[int] = None,
    limit: int = 20
) -> List[MovieRecord]:
    """
    Filter movies by any combination of actor, genre and year range.

    Args:
        session: Database session
        actor: Partial actor name
        genre: Partial genre name
        from_year: Earliest release year (inclusive)
        to_year: Latest release year (inclusive)
        limit: Maximum number of results

    Returns:
        Matching movies ordered by rating (unrated last)
    """
    query = _movie_query(session)

    if actor and actor.strip():
        actor_titles = session.query(Principal.tconst).join(
            Person, Principal.nconst == Person.nconst
        ).filter(Person.primary_name.ilike(_like_pattern(actor.strip()), escape='\\'))
        query = query.filter(Title.tconst.in_(actor_titles))

    if genre and genre.strip():
        query = query.filter(Title.genres.ilike(_like_pattern(genre.strip()), escape='\\'))

    if from_year is not None:
        query = query.filter(Title.start_year >= from_year)

    if to_year is not None:
        query = query.filter(Title.start_year <= to_year)

    rows = query.order_by(
        TitleRating.average_rating.desc().nulls_last(),
        Title.tconst
    ).limit(limit).all()
    return [_to_record(title, rating) for title, rating in rows]


def get_movie_count(session: Session) -> int:
    """Total number of titles of type 'movie'."""
    return session.query(func.count(Title.tconst)).filter(Title.title_type == MOVIE_TYPE).scalar()


# ==================== PREFERENCE STORE ====================

def _to_profile(row: UserPreference) -> PreferenceProfile:
    last_updated = row.last_updated
    if last_updated is not None and last_updated.tzinfo is None:
        last_updated = last_updated.replace(tzinfo=timezone.utc)
    return PreferenceProfile(
        user_id=row.user_id,
        initial_query=row.initial_query,
        preferred_genres=set(json.loads(row.preferred_genres or '[]')),
        preferred_actors=set(json.loads(row.preferred_actors or '[]')),
        last_updated=last_updated,
    )


def find_preferences(session: Session, user_id: str) -> Optional[PreferenceProfile]:
    """Get the stored profile for a user, or None if there is none."""
    row = session.query(UserPreference).filter(UserPreference.user_id == user_id).first()
    return _to_profile(row) if row else None


def get_preferences(session: Session, user_id: str) -> PreferenceProfile:
    """Get the stored profile for a user, or an empty default profile."""
    profile = find_preferences(session, user_id)
    if profile is None:
        return PreferenceProfile(user_id=user_id, last_updated=datetime.now(timezone.utc))
    return profile


def save_preferences(session: Session, profile: PreferenceProfile) -> PreferenceProfile:
    """
    Insert or replace the stored profile for profile.user_id.

    Raises:
        ProfilePersistenceError: If the write fails
    """
    last_updated = profile.last_updated or datetime.now(timezone.utc)
    if last_updated.tzinfo is not None:
        last_updated = last_updated.astimezone(timezone.utc).replace(tzinfo=None)

    values = {
        'user_id': profile.user_id,
        'initial_query': profile.initial_query,
        'preferred_genres': json.dumps(sorted(profile.preferred_genres)),
        'preferred_actors': json.dumps(sorted(profile.preferred_actors)),
        'last_updated': last_updated,
    }
    stmt = sqlite_insert(UserPreference).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=['user_id'],
        set_={key: stmt.excluded[key] for key in values if key != 'user_id'}
    )
    try:
        session.execute(stmt)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error saving preferences for user %s: %s", profile.user_id, e)
        raise ProfilePersistenceError(profile.user_id) from e
    return profile


# ==================== FEEDBACK LEDGER ====================

def upsert_feedback(session: Session, user_id: str, movie_id: str, liked: bool) -> None:
    """
    Record that a user liked or disliked a movie.

    A second call for the same (user_id, movie_id) overwrites `liked` and
    refreshes the timestamp; there is never more than one row per pair.
    The write is not committed: the caller commits once per request so a
    batch of feedback is stored all together or not at all.

    Raises:
        ProfilePersistenceError: If the write fails
    """
    stmt = sqlite_insert(UserFeedback).values(user_id=user_id, movie_id=movie_id, liked=liked)
    stmt = stmt.on_conflict_do_update(
        index_elements=['user_id', 'movie_id'],
        set_={'liked': stmt.excluded.liked, 'created_at': func.current_timestamp()}
    )
    try:
        session.execute(stmt)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error saving feedback for user %s, movie %s: %s", user_id, movie_id, e)
        raise ProfilePersistenceError(user_id, "Failed to save feedback") from e


def commit_feedback(session: Session, user_id: str) -> None:
    """
    Commit the feedback written by upsert_feedback in this session.

    Raises:
        ProfilePersistenceError: If the commit fails (nothing is stored)
    """
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error committing feedback for user %s: %s", user_id, e)
        raise ProfilePersistenceError(user_id, "Failed to save feedback") from e


def get_liked_movie_ids(session: Session, user_id: str) -> List[str]:
    """Ids of the movies a user currently likes, in first-feedback order."""
    rows = session.query(UserFeedback.movie_id).filter(
        UserFeedback.user_id == user_id,
        UserFeedback.liked.is_(True)
    ).order_by(UserFeedback.id).all()
    return [movie_id for (movie_id,) in rows]


def get_feedback_count(session: Session) -> int:
    """Total number of feedback records."""
    return session.query(func.count(UserFeedback.id)).scalar()
