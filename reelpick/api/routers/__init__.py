"""
API route handlers.
"""

from reelpick.api.routers import movies, suggest, system

__all__ = ["movies", "suggest", "system"]
