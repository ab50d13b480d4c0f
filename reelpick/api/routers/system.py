"""
System API endpoints (health).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from reelpick.api.dependencies import get_db, get_omdb_client
from reelpick.clients.omdb import OmdbClient
from reelpick.database import crud

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health")
def health_check(
    db: Session = Depends(get_db),
    omdb: OmdbClient = Depends(get_omdb_client),
):
    """Health check: database reachable and enrichment configured."""
    try:
        movie_count = crud.get_movie_count(db)
        feedback_count = crud.get_feedback_count(db)
    except Exception as e:
        return {"status": "unhealthy", "database": str(e), "enrichment_enabled": omdb.enabled}
    return {
        "status": "healthy",
        "database": "connected",
        "movies": movie_count,
        "feedback": feedback_count,
        "enrichment_enabled": omdb.enabled,
    }
