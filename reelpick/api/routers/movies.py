"""
Movie catalog endpoints (search, top-rated, by actor, filter, details).
"""

from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.orm import Session

from reelpick.api.dependencies import get_db, get_suggest_engine
from reelpick.api.models.movie import MovieResponse
from reelpick.core.suggest.engine import SuggestEngine
from reelpick.database import crud

router = APIRouter(prefix="/api/movies", tags=["movies"])

# Upper bound for the top-rated listing
MAX_TOP_RATED = 20


def _respond(engine: SuggestEngine, movies) -> list[MovieResponse]:
    return [MovieResponse.model_validate(m) for m in engine.enrich(movies)]


@router.get("/search", response_model=list[MovieResponse])
def search_movies(
    query: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    engine: SuggestEngine = Depends(get_suggest_engine),
):
    """Search movies by title (partial match)."""
    return _respond(engine, crud.search_movies_by_title(db, query, limit))


@router.get("/top-rated", response_model=list[MovieResponse])
def get_top_rated_movies(
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    engine: SuggestEngine = Depends(get_suggest_engine),
):
    """Highest rated movies above the popularity floor."""
    movies = crud.get_top_rated_movies(
        db,
        limit=min(limit, MAX_TOP_RATED),
        min_votes=engine.config.min_votes,
    )
    return _respond(engine, movies)


@router.get("/top-by-actor", response_model=list[MovieResponse])
def get_top_movies_by_actor(
    actor: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    engine: SuggestEngine = Depends(get_suggest_engine),
):
    """Top rated movies for an actor."""
    return _respond(engine, crud.get_top_movies_by_actor(db, actor, limit))


@router.get("/filter", response_model=list[MovieResponse])
def filter_movies(
    actor: str | None = Query(None),
    genre: str | None = Query(None),
    from_year: int | None = Query(None, alias="fromYear"),
    to_year: int | None = Query(None, alias="toYear"),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    engine: SuggestEngine = Depends(get_suggest_engine),
):
    """Filter movies by actor, genre and year range."""
    movies = crud.filter_movies(
        db,
        actor=actor,
        genre=genre,
        from_year=from_year,
        to_year=to_year,
        limit=limit,
    )
    return _respond(engine, movies)


@router.get("/{tconst}", response_model=MovieResponse)
def get_movie(
    tconst: str,
    db: Session = Depends(get_db),
    engine: SuggestEngine = Depends(get_suggest_engine),
):
    """Get movie details by IMDb id, including cast and director."""
    movie = crud.get_movie_details(db, tconst)
    if not movie:
        raise HTTPException(status_code=404, detail="Movie not found")
    return _respond(engine, [movie])[0]
