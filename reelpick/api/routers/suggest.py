"""
Suggestion session endpoints: start, feedback, recommendations, profile.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reelpick.api.dependencies import get_db, get_suggest_engine
from reelpick.api.models.movie import MovieResponse
from reelpick.api.models.suggest import (
    StartRequest,
    FeedbackRequest,
    SuggestResponse,
    ProfileResponse,
)
from reelpick.core.suggest.engine import SuggestEngine, SuggestResult
from reelpick.core.suggest.exceptions import ProfilePersistenceError, SourceUnavailable
from reelpick.database import crud

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/movies/suggest", tags=["suggest"])

DATABASE_ERROR_DETAIL = "Database error while processing the request"


def _to_response(result: SuggestResult) -> SuggestResponse:
    return SuggestResponse(
        user_id=result.user_id,
        recommendations=[MovieResponse.model_validate(m) for m in result.recommendations],
        message=result.message,
        outcome=result.outcome.value,
    )


def _run(operation, *args) -> SuggestResponse:
    """Run an engine operation, mapping engine and database errors to HTTP errors."""
    try:
        return _to_response(operation(*args))
    except ProfilePersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except SourceUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("Database error in %s: %s", operation.__name__, e)
        raise HTTPException(status_code=500, detail=DATABASE_ERROR_DETAIL)


@router.post("/start", response_model=SuggestResponse)
def start_suggestion(
    request: StartRequest,
    db: Session = Depends(get_db),
    engine: SuggestEngine = Depends(get_suggest_engine),
):
    """Start a recommendation session from an initial search query."""
    logger.info("Starting recommendation session for query: %s", request.query)
    return _run(engine.start_session, db, request.query.strip(), request.user_id)


@router.post("/feedback", response_model=SuggestResponse)
def submit_feedback(
    request: FeedbackRequest,
    db: Session = Depends(get_db),
    engine: SuggestEngine = Depends(get_suggest_engine),
):
    """Record liked/disliked movies and return updated recommendations."""
    logger.info("Processing feedback for user: %s", request.user_id)
    return _run(
        engine.record_feedback,
        db,
        request.user_id,
        request.liked_movie_ids,
        request.disliked_movie_ids,
    )


@router.get("/{user_id}", response_model=SuggestResponse)
def get_recommendations(
    user_id: str,
    db: Session = Depends(get_db),
    engine: SuggestEngine = Depends(get_suggest_engine),
):
    """Get personalized recommendations for a user (top-rated if no signal yet)."""
    return _run(engine.get_recommendations, db, user_id)


@router.get("/{user_id}/profile", response_model=ProfileResponse)
def get_profile(user_id: str, db: Session = Depends(get_db)):
    """Get the stored preference profile for a user."""
    try:
        profile = crud.find_preferences(db, user_id)
    except SQLAlchemyError as e:
        logger.error("Database error reading profile for %s: %s", user_id, e)
        raise HTTPException(status_code=500, detail=DATABASE_ERROR_DETAIL)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return ProfileResponse(
        user_id=profile.user_id,
        initial_query=profile.initial_query,
        preferred_genres=sorted(profile.preferred_genres),
        preferred_actors=sorted(profile.preferred_actors),
        last_updated=profile.last_updated,
    )
