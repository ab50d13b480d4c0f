"""
FastAPI dependency injection for database session, enrichment client and engine.
"""

import logging
from typing import Generator
from sqlalchemy.orm import Session

from reelpick.database.connection import get_db_manager
from reelpick.clients.omdb import OmdbClient
from reelpick.core.suggest.engine import SuggestEngine
from reelpick.api.config import (
    get_database_path,
    get_omdb_api_key,
    get_omdb_base_url,
    get_omdb_timeout,
    get_suggest_config,
)

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """Yield database session for FastAPI Depends()."""
    db_path = get_database_path()
    if not db_path.strip():
        db_path = None  # use connection default
    db_manager = get_db_manager(db_path=db_path) if db_path else get_db_manager()
    with db_manager.session_scope() as session:
        yield session


# Singletons
_omdb_client: OmdbClient | None = None
_suggest_engine: SuggestEngine | None = None


def get_omdb_client() -> OmdbClient:
    """Get or create singleton OmdbClient."""
    global _omdb_client
    if _omdb_client is None:
        _omdb_client = OmdbClient(
            api_key=get_omdb_api_key(),
            base_url=get_omdb_base_url(),
            timeout=get_omdb_timeout(),
        )
    return _omdb_client


def get_suggest_engine() -> SuggestEngine:
    """Get or create singleton SuggestEngine."""
    global _suggest_engine
    if _suggest_engine is None:
        client = get_omdb_client()
        _suggest_engine = SuggestEngine(
            enrichment_source=client if client.enabled else None,
            config=get_suggest_config(),
        )
    return _suggest_engine
