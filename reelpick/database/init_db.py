"""
Schema creation and checks for the ReelPick database.

Run directly to create any missing tables in the default database:
    python -m reelpick.database.init_db
"""

import logging
import sys

from sqlalchemy import inspect

from reelpick.database.connection import DatabaseManager, get_db_manager, DEFAULT_DB_PATH
from reelpick.utils.logging_config import configure_script_logging

logger = logging.getLogger(__name__)

CATALOG_TABLES = {'title_basics', 'title_ratings', 'name_basics', 'title_principals'}
USER_TABLES = {'user_preferences', 'user_feedback'}
EXPECTED_TABLES = CATALOG_TABLES | USER_TABLES


def init_database(db_path: str = DEFAULT_DB_PATH, reset: bool = False) -> DatabaseManager:
    """
    Open the database and make sure every table exists.

    Args:
        db_path: SQLite file path
        reset: Drop all tables first (catalog, preferences and feedback)

    Returns:
        The process-wide DatabaseManager
    """
    db_manager = get_db_manager(db_path=db_path)

    if reset:
        logger.warning("Dropping all tables in %s", db_manager.database_url)
        db_manager.reset_database()
    else:
        db_manager.create_tables()
    logger.info("Database tables ready at %s", db_manager.database_url)

    return db_manager


def verify_schema(db_manager: DatabaseManager) -> bool:
    """True when the catalog and user tables all exist; logs the missing ones."""
    missing_tables = EXPECTED_TABLES - set(inspect(db_manager.engine).get_table_names())
    if missing_tables:
        logger.error("Missing tables: %s", ", ".join(sorted(missing_tables)))
        return False
    return True


if __name__ == "__main__":
    configure_script_logging()
    sys.exit(0 if verify_schema(init_database()) else 1)
