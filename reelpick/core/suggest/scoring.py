"""
Preference scoring and ranking of candidate movies.

Each candidate gets two relevance signals:

    genre_score  number of distinct preferred genres found (case-insensitive
                 substring) in the candidate's genre string
    actor_score  1 if any preferred actor matches any cast member, else 0

Actor names match case-insensitively on word boundaries: 'Keanu Reeves'
matches 'Keanu Reeves' and 'keanu reeves' but 'Reeves' alone does not match
'Reevesworth'. Names are regex-escaped, so punctuation in a name ('Jr.',
'O'Brien') is matched literally.

Only candidates with some relevance are kept, ranked by

    (genre_score * 2 + actor_score * 3) * (average_rating * 0.1)

descending, with ties broken by tconst ascending.
"""

import re
from typing import Iterable, List, Optional, Pattern, Set, Tuple

from reelpick.core.suggest.movie import MovieRecord

GENRE_WEIGHT = 2
ACTOR_WEIGHT = 3
RATING_FACTOR = 0.1


def genre_score(preferred_genres: Iterable[str], candidate_genres: Optional[str]) -> int:
    """Count preferred genres contained in the candidate's genre string."""
    if not candidate_genres:
        return 0
    haystack = candidate_genres.lower()
    return sum(1 for genre in set(preferred_genres) if genre and genre.lower() in haystack)


def build_actor_pattern(preferred_actors: Iterable[str]) -> Optional[Pattern[str]]:
    """Compile one case-insensitive word-boundary pattern for all actors, None if empty."""
    names = sorted({actor.strip() for actor in preferred_actors if actor and actor.strip()})
    if not names:
        return None
    alternation = "|".join(re.escape(name) for name in names)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


def actor_score(pattern: Optional[Pattern[str]], cast_names: Iterable[str]) -> int:
    """1 if any cast member matches the actor pattern, else 0."""
    if pattern is None:
        return 0
    return 1 if any(name and pattern.search(name) for name in cast_names) else 0


def relevance_score(genre_hits: int, actor_hit: int, average_rating: Optional[float]) -> float:
    rating = average_rating or 0.0
    return (genre_hits * GENRE_WEIGHT + actor_hit * ACTOR_WEIGHT) * (rating * RATING_FACTOR)


def score_candidate(
    movie: MovieRecord,
    preferred_genres: Set[str],
    pattern: Optional[Pattern[str]]
) -> MovieRecord:
    """Fill in genre_score, actor_score and score on the candidate."""
    movie.genre_score = genre_score(preferred_genres, movie.genres)
    movie.actor_score = actor_score(pattern, movie.cast_names)
    movie.score = relevance_score(movie.genre_score, movie.actor_score, movie.average_rating)
    return movie


def ranking_key(movie: MovieRecord) -> Tuple[float, str]:
    return (-(movie.score or 0.0), movie.tconst)


def rank_candidates(
    candidates: Iterable[MovieRecord],
    preferred_genres: Set[str],
    preferred_actors: Set[str],
    exclude_ids: Iterable[str] = (),
    limit: int = 20
) -> List[MovieRecord]:
    """
    Score, filter and order candidates.

    Args:
        candidates: Candidate movies, each with cast_names populated
        preferred_genres: Genre tokens from the profile
        preferred_actors: Actor names from the profile
        exclude_ids: Movie ids never to return (already liked)
        limit: Maximum number of results

    Returns:
        Eligible candidates (genre_score > 0 or actor_score > 0), best first
    """
    excluded = set(exclude_ids)
    pattern = build_actor_pattern(preferred_actors)

    seen: Set[str] = set()
    eligible: List[MovieRecord] = []
    for movie in candidates:
        if movie.tconst in excluded or movie.tconst in seen:
            continue
        seen.add(movie.tconst)
        score_candidate(movie, preferred_genres, pattern)
        if movie.genre_score > 0 or movie.actor_score > 0:
            eligible.append(movie)

    eligible.sort(key=ranking_key)
    return eligible[:limit]
