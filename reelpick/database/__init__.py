"""
Database module for ReelPick.

This module provides database models, connection management, and the catalog,
preference and feedback operations for the SQLite database using SQLAlchemy ORM.
"""

from reelpick.database.models import (
    Base, Title, TitleRating, Person, Principal, UserPreference, UserFeedback
)
from reelpick.database.connection import DatabaseManager, get_db_manager
from reelpick.database.init_db import init_database, verify_schema
from reelpick.database import crud

__all__ = [
    # Models
    'Base',
    'Title',
    'TitleRating',
    'Person',
    'Principal',
    'UserPreference',
    'UserFeedback',
    # Connection
    'DatabaseManager',
    'get_db_manager',
    # Initialization
    'init_database',
    'verify_schema',
    # CRUD module
    'crud',
]
