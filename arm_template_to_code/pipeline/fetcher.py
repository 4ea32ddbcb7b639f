"""
Schema retrieval.

Fetches schema documents over HTTP(S) or from the local filesystem and
parses them as JSON.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from .errors import RetrievalError

logger = logging.getLogger(__name__)


def is_url(location: str) -> bool:
    """Check if a location is an HTTP(S) URL rather than a file path."""
    return location.startswith(("http://", "https://"))


class SchemaFetcher:
    """Retrieves raw schema documents."""

    def __init__(self, timeout: float = 30.0, client: httpx.Client | None = None):
        """
        Initialize the fetcher.

        Args:
            timeout: HTTP timeout in seconds
            client: Optional preconfigured httpx client (e.g. with a mock transport)
        """
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(follow_redirects=True, timeout=self.timeout)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> SchemaFetcher:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch(self, location: str) -> bytes:
        """
        Fetch the raw bytes of a schema document.

        Args:
            location: HTTP(S) URL or local file path

        Returns:
            The document bytes

        Raises:
            RetrievalError: On transport failure, non-success status or missing file
        """
        logger.debug("Fetching %s", location)
        if not is_url(location):
            try:
                return Path(location).read_bytes()
            except OSError as e:
                raise RetrievalError(f"Cannot read schema file {location}: {e}") from e

        try:
            resp = self._get_client().get(location)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RetrievalError(f"Fetching {location} failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise RetrievalError(f"Fetching {location} failed: {e}") from e
        return resp.content

    def fetch_json(self, location: str) -> Any:
        """Fetch a schema document and parse it as JSON."""
        data = self.fetch(location)
        try:
            return json.loads(data)
        except ValueError as e:
            raise RetrievalError(f"Schema at {location} is not valid JSON: {e}") from e
