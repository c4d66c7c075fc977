"""
HTTP client used to reach issuer endpoints.

A thin wrapper around ``httpx`` with consistent error handling and logging.
An unreachable endpoint, an error status or a body that is not JSON all come
back as ``None`` so callers can raise their own "API not accessible" error.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx


class RestApiClient:
    """Synchronous JSON client for issuer metadata and credential endpoints."""

    def __init__(self, timeout: float = 30.0, client: httpx.Client | None = None, logger=None) -> None:
        """
        Initialize the HTTP client.

        Args:
            timeout: Request timeout in seconds
            client: Pre-configured ``httpx.Client`` (tests pass one with a mock transport)
            logger: Logger instance
        """
        self._client = client or httpx.Client(timeout=timeout)
        self.logger = logger or logging.getLogger(__name__)

    def get_api(self, url: str, headers: dict[str, str] | None = None) -> dict[str, Any] | None:
        """GET ``url`` and return the decoded JSON body, or ``None`` on failure."""
        try:
            self.logger.debug("Making GET request to %s", url)
            response = self._client.get(url, headers=headers)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error("GET request to %s failed: %s", url, e)
            return None

    def post_api(
        self,
        url: str,
        payload: dict[str, Any],
        bearer_token: str | None = None,
    ) -> dict[str, Any] | None:
        """POST ``payload`` as JSON and return the decoded JSON body, or ``None`` on failure."""
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if bearer_token:
            headers["Authorization"] = f"Bearer {bearer_token}"
        try:
            self.logger.debug("Making POST request to %s", url)
            response = self._client.post(url, json=payload, headers=headers)
            self.logger.debug("Received response: HTTP %s", response.status_code)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error("POST request to %s failed: %s", url, e)
            return None

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RestApiClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
