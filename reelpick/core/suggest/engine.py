"""
Suggestion engine orchestrator.

Combines the feedback ledger, the preference store, the catalog and the
enrichment source into the three session operations exposed by the API:
start a session, record feedback, and get recommendations.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from reelpick.core.suggest.enrichment import EnrichmentSource, enrich_movies
from reelpick.core.suggest.exceptions import SourceUnavailable
from reelpick.core.suggest.movie import MovieRecord
from reelpick.core.suggest.profile import PreferenceProfile, derive_profile, new_profile
from reelpick.core.suggest.scoring import rank_candidates
from reelpick.database import crud

logger = logging.getLogger(__name__)

MESSAGE_COLD_START = "Session started: showing movies matching your search"
MESSAGE_NO_MATCHES = "Session started: no movies matched your search yet"
MESSAGE_FEEDBACK_APPLIED = "Feedback recorded: recommendations updated from your likes"
MESSAGE_PERSONALIZED = "Personalized recommendations based on your liked movies"
MESSAGE_FALLBACK = "Not enough preference data yet: showing top-rated movies"


class Outcome(str, Enum):
    """Which path produced a result."""
    COLD_START = "cold_start"
    FEEDBACK_APPLIED = "feedback_applied"
    PERSONALIZED = "personalized"
    FALLBACK = "fallback"


@dataclass
class SuggestConfig:
    """
    Tunable thresholds for the engine.

    Attributes:
        min_votes: Popularity floor; only movies with more votes are recommended
        start_result_limit: Number of title matches returned by a session start
        result_limit: Maximum number of personalized recommendations
        fallback_limit: Number of top-rated movies returned as fallback
        actors_per_movie: Actors taken from each liked movie into the profile
        enrichment_workers: Concurrent enrichment lookups per response
        candidate_pool_factor: Candidates loaded per result slot before exact re-scoring
    """
    min_votes: int = 1000
    start_result_limit: int = 10
    result_limit: int = 20
    fallback_limit: int = 20
    actors_per_movie: int = 3
    enrichment_workers: int = 5
    candidate_pool_factor: int = 5


@dataclass
class SuggestResult:
    """Recommendations for a user plus a message describing how they were produced."""
    user_id: str
    recommendations: List[MovieRecord] = field(default_factory=list)
    message: str = MESSAGE_PERSONALIZED
    outcome: Outcome = Outcome.PERSONALIZED


def _unique_ids(ids: Optional[Iterable[str]]) -> List[str]:
    """Strip ids, drop blanks and duplicates, keep first-seen order."""
    seen = set()
    result = []
    for movie_id in ids or []:
        movie_id = (movie_id or "").strip()
        if movie_id and movie_id not in seen:
            seen.add(movie_id)
            result.append(movie_id)
    return result


class SuggestEngine:
    """
    Preference-driven recommendation engine.

    Every call runs its whole pipeline against the database session it is
    given; the engine itself holds no per-user state.

    Usage:
        engine = SuggestEngine(enrichment_source=OmdbClient(api_key))
        result = engine.start_session(session, "Matrix")
        result = engine.record_feedback(session, result.user_id, ["tt0133093"], [])
    """

    def __init__(
        self,
        enrichment_source: Optional[EnrichmentSource] = None,
        config: Optional[SuggestConfig] = None
    ):
        """
        Initialize the engine.

        Args:
            enrichment_source: Source of plot/poster/runtime data. None disables enrichment.
            config: Thresholds; defaults to SuggestConfig()
        """
        self.enrichment_source = enrichment_source
        self.config = config or SuggestConfig()

        logger.info(
            f"SuggestEngine initialized (min_votes: {self.config.min_votes}, "
            f"enrichment: {enrichment_source is not None})"
        )

    def start_session(
        self,
        session: Session,
        query: str,
        user_id: Optional[str] = None
    ) -> SuggestResult:
        """
        Start a suggestion session from a free-text query.

        Records a fresh profile (query set, no preferences) and returns the
        title matches for the query in catalog order, without ranking.

        Args:
            session: Database session
            query: Initial search text
            user_id: Existing user id; a new one is generated if None

        Returns:
            SuggestResult whose user_id must be reused for feedback

        Raises:
            ProfilePersistenceError: If the profile cannot be saved
        """
        user_id = user_id or f"user_{uuid.uuid4()}"
        logger.info(f"Starting session for user {user_id} with query {query!r}")

        crud.save_preferences(session, new_profile(user_id, query))

        try:
            movies = crud.search_movies_by_title(session, query, self.config.start_result_limit)
        except Exception as e:
            logger.warning(f"Title search failed for {query!r}: {e}")
            session.rollback()
            return self._fallback(session, user_id)

        movies = self.enrich(movies)
        return SuggestResult(
            user_id=user_id,
            recommendations=movies,
            message=MESSAGE_COLD_START if movies else MESSAGE_NO_MATCHES,
            outcome=Outcome.COLD_START,
        )

    def record_feedback(
        self,
        session: Session,
        user_id: str,
        liked_ids: Optional[Iterable[str]] = None,
        disliked_ids: Optional[Iterable[str]] = None
    ) -> SuggestResult:
        """
        Record liked/disliked movies and return updated recommendations.

        Liked ids are written first and disliked ids second, so an id that
        appears in both lists ends up disliked. All feedback of one call is
        committed together; if any write fails none of it is stored.

        Args:
            session: Database session
            user_id: User id returned by start_session
            liked_ids: Movies the user liked
            disliked_ids: Movies the user disliked

        Returns:
            SuggestResult recomputed after the feedback was stored

        Raises:
            ProfilePersistenceError: If feedback or the profile cannot be saved
        """
        liked = _unique_ids(liked_ids)
        disliked = _unique_ids(disliked_ids)
        logger.info(f"Recording feedback for user {user_id}: {len(liked)} liked, {len(disliked)} disliked")

        # one transaction for the whole request
        try:
            for movie_id in liked:
                crud.upsert_feedback(session, user_id, movie_id, True)
            for movie_id in disliked:
                crud.upsert_feedback(session, user_id, movie_id, False)
            crud.commit_feedback(session, user_id)
        except Exception:
            session.rollback()
            raise

        result = self.get_recommendations(session, user_id)
        if result.outcome == Outcome.PERSONALIZED:
            result.message = MESSAGE_FEEDBACK_APPLIED
            result.outcome = Outcome.FEEDBACK_APPLIED
        return result

    def get_recommendations(self, session: Session, user_id: str) -> SuggestResult:
        """
        Recompute the user's profile and return ranked recommendations.

        Falls back to the top-rated list when the user likes nothing, when the
        liked movies yield no genres or no actors, when nothing scores, or
        when scoring fails.

        Args:
            session: Database session
            user_id: User id

        Returns:
            SuggestResult

        Raises:
            ProfilePersistenceError: If the recomputed profile cannot be saved
            SourceUnavailable: If even the top-rated fallback cannot be read
        """
        logger.info(f"Getting recommendations for user {user_id}")

        liked_ids = crud.get_liked_movie_ids(session, user_id)
        if not liked_ids:
            # profile is left as stored
            logger.info(f"No liked movies for user {user_id}")
            return self._fallback(session, user_id)

        stored = crud.find_preferences(session, user_id)

        try:
            liked_movies = self._load_liked_movies(session, liked_ids)
        except Exception as e:
            logger.warning(f"Could not load liked movies for user {user_id}: {e}")
            session.rollback()
            return self._fallback(session, user_id)

        profile = derive_profile(
            stored or PreferenceProfile(user_id=user_id),
            liked_movies,
            actors_per_movie=self.config.actors_per_movie,
        )
        crud.save_preferences(session, profile)

        if not profile.has_signal:
            logger.info(
                f"Profile for user {user_id} has {len(profile.preferred_genres)} genres "
                f"and {len(profile.preferred_actors)} actors; not enough to score"
            )
            return self._fallback(session, user_id)

        try:
            ranked = self._rank(session, profile, liked_ids)
        except Exception:
            logger.exception(f"Error generating personalized recommendations for user {user_id}")
            session.rollback()
            return self._fallback(session, user_id)

        if not ranked:
            logger.info(f"No candidates matched the profile of user {user_id}")
            return self._fallback(session, user_id)

        return SuggestResult(
            user_id=user_id,
            recommendations=self.enrich(ranked),
            message=MESSAGE_PERSONALIZED,
            outcome=Outcome.PERSONALIZED,
        )

    def _load_liked_movies(self, session: Session, liked_ids: List[str]) -> List[MovieRecord]:
        """Catalog details (with cast and director) for liked movies, enriched."""
        movies = []
        for movie_id in liked_ids:
            movie = crud.get_movie_details(session, movie_id)
            if movie is None:
                logger.debug(f"Liked movie {movie_id} not in catalog")
                continue
            movies.append(movie)
        return self.enrich(movies)

    def _rank(self, session: Session, profile: PreferenceProfile, liked_ids: List[str]) -> List[MovieRecord]:
        candidates = crud.get_scoring_candidates(
            session,
            genres=profile.preferred_genres,
            actors=profile.preferred_actors,
            exclude_ids=liked_ids,
            min_votes=self.config.min_votes,
            limit=self.config.result_limit * self.config.candidate_pool_factor,
        )
        logger.debug(f"Scoring {len(candidates)} candidates for user {profile.user_id}")

        ranked = rank_candidates(
            candidates,
            profile.preferred_genres,
            profile.preferred_actors,
            exclude_ids=liked_ids,
            limit=self.config.result_limit,
        )
        for movie in ranked:
            movie.cast = ", ".join(movie.cast_names[:5])
        return ranked

    def _fallback(self, session: Session, user_id: str) -> SuggestResult:
        logger.info(f"Falling back to top-rated movies for user {user_id}")
        try:
            movies = crud.get_top_rated_movies(
                session,
                limit=self.config.fallback_limit,
                min_votes=self.config.min_votes,
            )
        except Exception as e:
            raise SourceUnavailable(f"Top-rated movies unavailable: {e}") from e

        return SuggestResult(
            user_id=user_id,
            recommendations=self.enrich(movies),
            message=MESSAGE_FALLBACK,
            outcome=Outcome.FALLBACK,
        )

    def enrich(self, movies: List[MovieRecord]) -> List[MovieRecord]:
        """Enrich movies with the configured source (defaults when there is none)."""
        return enrich_movies(
            self.enrichment_source,
            movies,
            max_workers=self.config.enrichment_workers,
        )
