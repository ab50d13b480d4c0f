"""
Clients for third-party services.
"""

from reelpick.clients.omdb import OmdbClient

__all__ = ['OmdbClient']
