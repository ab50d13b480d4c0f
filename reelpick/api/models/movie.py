"""
Pydantic schemas for Movie API.

Fields are exposed in camelCase (primaryTitle, averageRating, ...).
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class MovieResponse(BaseModel):
    """Response model for a single (enriched) movie."""

    tconst: str
    primary_title: str
    start_year: int | None = None
    genres: str = ""
    average_rating: float | None = None
    num_votes: int | None = None
    runtime: str = ""
    plot: str = ""
    poster: str = ""
    director: str = ""
    cast: str = ""
    actor_name: str = ""
    score: float | None = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
