"""
Pydantic schemas for the suggestion session API.
"""

from datetime import datetime

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from reelpick.api.models.movie import MovieResponse


class _CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class StartRequest(_CamelModel):
    """Request body for starting a session."""

    query: str = Field(..., min_length=1, max_length=200)
    user_id: str | None = Field(None, max_length=64)


class FeedbackRequest(_CamelModel):
    """Request body for liked/disliked feedback."""

    user_id: str = Field(..., min_length=1, max_length=64)
    liked_movie_ids: list[str] = Field(default_factory=list)
    disliked_movie_ids: list[str] = Field(default_factory=list)


class SuggestResponse(_CamelModel):
    """Response model shared by start, feedback and recommendations."""

    user_id: str
    recommendations: list[MovieResponse]
    message: str
    outcome: str


class ProfileResponse(_CamelModel):
    """Stored preference profile for a user."""

    user_id: str
    initial_query: str | None = None
    preferred_genres: list[str]
    preferred_actors: list[str]
    last_updated: datetime | None = None
