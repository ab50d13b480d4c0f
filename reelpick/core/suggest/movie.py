"""
Movie record passed between the catalog, the scorer and the enrichment merge.

Catalog rows are loosely typed (IMDb dumps use '\\N' for missing values and
some drivers hand back numbers as strings), so the parse helpers here turn
anything unparseable into None instead of failing the whole batch.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

PLOT_NOT_AVAILABLE = "Plot not available"


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer field, returning None for missing or malformed values."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_float(value: Any) -> Optional[float]:
    """Parse a float field, returning None for missing or malformed values."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def format_runtime(minutes: Any) -> str:
    """
    Format a runtime for display.

    Integer minutes become '<n> min'; zero or negative becomes 'N/A'.
    Strings that are not plain numbers (e.g. '136 min' from OMDb) are kept.
    """
    if minutes is None or minutes == "":
        return ""
    parsed = parse_int(minutes)
    if parsed is None:
        return str(minutes)
    return f"{parsed} min" if parsed > 0 else "N/A"


@dataclass
class MovieRecord:
    """
    A movie as returned to callers.

    Base fields come from the catalog, the scoring fields are filled in by
    the scorer for personalized results only, and plot/poster/runtime/
    director/cast are settled by the enrichment merge.
    """

    tconst: str
    primary_title: str = ""
    start_year: Optional[int] = None
    genres: str = ""
    average_rating: Optional[float] = None
    num_votes: Optional[int] = None
    runtime: str = ""
    plot: str = PLOT_NOT_AVAILABLE
    poster: str = ""
    director: str = ""
    cast: str = ""
    actor_name: str = ""

    # set by the candidate query and the scorer
    cast_names: List[str] = field(default_factory=list, repr=False)
    genre_score: int = 0
    actor_score: int = 0
    score: Optional[float] = None
