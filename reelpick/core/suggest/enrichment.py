"""
Merge enrichment-source data into catalog movie records.

Precedence:
- plot, poster, runtime come from the enrichment source whenever it answers;
  otherwise they are reset to 'Plot not available', '' and ''.
- director and cast keep the catalog value when it is non-empty and are
  only filled from the enrichment source when the catalog had nothing.

Every movie is enriched independently. A lookup that raises, times out or
returns garbage only affects that movie, which falls back to the defaults.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Protocol

from reelpick.core.suggest.movie import MovieRecord, PLOT_NOT_AVAILABLE

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 5

# OMDb's placeholder for missing values
_MISSING = "N/A"


class EnrichmentSource(Protocol):
    def details_by_id(self, imdb_id: Optional[str]) -> Optional[Dict[str, Any]]:
        ...


def _field(details: Dict[str, Any], key: str) -> str:
    value = details.get(key)
    if value is None:
        return ""
    value = str(value).strip()
    return "" if value == _MISSING else value


def apply_defaults(movie: MovieRecord) -> MovieRecord:
    """Reset the enrichment-owned fields to their defaults."""
    movie.plot = PLOT_NOT_AVAILABLE
    movie.poster = ""
    movie.runtime = ""
    movie.director = movie.director or ""
    movie.cast = movie.cast or ""
    return movie


def merge_details(movie: MovieRecord, details: Optional[Dict[str, Any]]) -> MovieRecord:
    """
    Apply one enrichment response to a movie.

    Args:
        movie: Catalog record, possibly with director/cast already set
        details: Enrichment payload, or None if the source was unavailable

    Returns:
        The same record, updated in place
    """
    if not details:
        return apply_defaults(movie)

    movie.plot = _field(details, "Plot") or PLOT_NOT_AVAILABLE
    movie.poster = _field(details, "Poster")
    movie.runtime = _field(details, "Runtime")
    if not movie.director:
        movie.director = _field(details, "Director")
    if not movie.cast:
        movie.cast = _field(details, "Actors")
    return movie


def enrich_movie(source: Optional[EnrichmentSource], movie: MovieRecord) -> MovieRecord:
    """Enrich a single movie; never raises."""
    if source is None or not movie.tconst:
        return apply_defaults(movie)
    try:
        return merge_details(movie, source.details_by_id(movie.tconst))
    except Exception as e:
        logger.warning("Failed to enrich movie %s: %s", movie.tconst, e)
        return apply_defaults(movie)


def enrich_movies(
    source: Optional[EnrichmentSource],
    movies: List[MovieRecord],
    max_workers: int = DEFAULT_WORKERS
) -> List[MovieRecord]:
    """
    Enrich a batch of movies concurrently.

    Args:
        source: Enrichment source, or None to apply defaults only
        movies: Records to enrich (updated in place)
        max_workers: Maximum concurrent lookups

    Returns:
        The records in their original order
    """
    if not movies:
        return []
    if source is None or max_workers <= 1 or len(movies) == 1:
        return [enrich_movie(source, movie) for movie in movies]

    with ThreadPoolExecutor(max_workers=min(max_workers, len(movies))) as executor:
        futures = [executor.submit(enrich_movie, source, movie) for movie in movies]
        return [future.result() for future in futures]
