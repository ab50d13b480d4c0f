"""
SQLite engine and session handling for the catalog and user stores.

A file database gets a regular connection pool so concurrent API requests
each write through their own connection; SQLite serializes the writes and
`busy_timeout` makes a blocked writer wait instead of failing at once. The
in-memory database (':memory:') lives on a single shared connection.
"""

import os
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from reelpick.database.models import Base

DEFAULT_DB_PATH = "data/reelpick.db"
IN_MEMORY = ":memory:"

# Milliseconds a writer waits for a competing write lock
BUSY_TIMEOUT_MS = 5000


def get_database_url(db_path: str = DEFAULT_DB_PATH) -> str:
    """SQLAlchemy URL for a database file (parent directory is created) or ':memory:'."""
    if db_path == IN_MEMORY:
        return "sqlite://"

    db_dir = os.path.dirname(db_path)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    return f"sqlite:///{os.path.abspath(db_path)}"


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Turn on foreign keys and the write-lock wait for every new SQLite connection."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
    cursor.close()


class DatabaseManager:
    """
    Owns the engine and session factory for one database.

    Usage:
        db_manager = DatabaseManager("data/reelpick.db")
        db_manager.create_tables()
        with db_manager.session_scope() as session:
            crud.get_top_rated_movies(session)
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH, echo: bool = False):
        """
        Args:
            db_path: SQLite file path, or ':memory:'
            echo: Log every SQL statement
        """
        self.db_path = db_path
        self.database_url = get_database_url(db_path)

        engine_args = {"connect_args": {"check_same_thread": False}}
        if db_path == IN_MEMORY:
            engine_args["poolclass"] = StaticPool
        self.engine = create_engine(self.database_url, echo=echo, **engine_args)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_tables(self):
        """Create missing tables; existing tables are left as they are."""
        Base.metadata.create_all(bind=self.engine)

    def reset_database(self):
        """Drop and recreate every table. All catalog and user data is lost."""
        Base.metadata.drop_all(bind=self.engine)
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Session that commits on success and rolls back on any exception."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        self.engine.dispose()


_db_manager = None


def get_db_manager(db_path: str = DEFAULT_DB_PATH, echo: bool = False) -> DatabaseManager:
    """
    Process-wide DatabaseManager, created (with its tables) on first call.

    Later calls return the same instance whatever db_path they pass.
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager(db_path=db_path, echo=echo)
        _db_manager.create_tables()
    return _db_manager
