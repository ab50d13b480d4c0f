"""
OMDb API client used as the enrichment source.

details_by_id() returns the OMDb payload for an IMDb id, or None when the
movie is unknown to OMDb, the API key is missing, the request fails or the
call times out. Callers treat None as "source unavailable".
"""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.omdbapi.com/"
DEFAULT_TIMEOUT = 5.0


class OmdbClient:
    """
    Thin wrapper around the OMDb HTTP API.

    Usage:
        client = OmdbClient(api_key="...")
        details = client.details_by_id("tt0133093")
        if details:
            print(details["Plot"])
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http: Optional[Any] = None
    ):
        """
        Initialize the client.

        Args:
            api_key: OMDb API key. Without one every lookup returns None.
            base_url: OMDb endpoint
            timeout: Per-request timeout in seconds
            http: Object with a requests-style get(); defaults to the requests
                module, one connection per lookup
        """
        self.api_key = api_key or ""
        self.base_url = base_url
        self.timeout = timeout
        self.http = http or requests

        if not self.api_key:
            logger.warning("OMDb API key not configured; enrichment disabled")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def details_by_id(self, imdb_id: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Fetch full movie details (plot, poster, runtime, director, actors).

        Args:
            imdb_id: IMDb title id, e.g. 'tt0133093'

        Returns:
            OMDb response dict when OMDb answered Response == "True", else None
        """
        if not imdb_id or not self.enabled:
            return None

        params = {"i": imdb_id, "apikey": self.api_key, "plot": "full"}
        try:
            response = self.http.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout:
            logger.warning("OMDb request timed out for %s", imdb_id)
            return None
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error("Failed to fetch details for %s: %s", imdb_id, e)
            return None

        if isinstance(data, dict) and data.get("Response") == "True":
            return data

        logger.warning("OMDb returned no data for IMDb ID: %s", imdb_id)
        return None
