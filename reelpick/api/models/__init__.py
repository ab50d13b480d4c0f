"""
Pydantic schemas for API request/response validation.
"""

from reelpick.api.models.movie import MovieResponse
from reelpick.api.models.suggest import (
    StartRequest,
    FeedbackRequest,
    SuggestResponse,
    ProfileResponse,
)

__all__ = [
    "MovieResponse",
    "StartRequest",
    "FeedbackRequest",
    "SuggestResponse",
    "ProfileResponse",
]
