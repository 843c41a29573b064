"""
StreamtimeClient - read access to the Streamtime REST API.

Uses httpx for HTTP calls. Every call degrades to None on failure: upstream
outages must never propagate past the aggregation boundary, so callers treat
None as "no data this time" and move on.
"""

import logging
import time
from typing import Any

import httpx

from .. import config
from .pagination import fetch_all

logger = logging.getLogger(__name__)

RATE_LIMIT_DELAY = 1  # seconds to wait after a 429 without Retry-After

# Streamtime search views
SEARCH_VIEW_JOBS = 7
SEARCH_VIEW_JOB_ITEMS = 16
SEARCH_VIEW_JOB_ITEM_USERS = 17

_EMPTY_FILTER = {
    "conditionMatchTypeId": 1,
    "filterGroups": [],
    "filterGroupCollections": [],
}


class StreamtimeClient:
    """Thin Streamtime API client: users listing and paginated search views."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize StreamtimeClient.

        Args:
            api_key: Streamtime bearer token. If None, uses STREAMTIME_API_KEY.
            base_url: API root. If None, uses STREAMTIME_API_BASE.
            timeout: Request timeout in seconds.
        """
        self.api_key = api_key or config.STREAMTIME_API_KEY
        if not self.api_key:
            raise ValueError(
                "No Streamtime API key provided. Set STREAMTIME_API_KEY or pass api_key."
            )
        self.base_url = (base_url or config.STREAMTIME_API_BASE).rstrip("/")
        self.timeout = timeout if timeout is not None else config.STREAMTIME_TIMEOUT

    @classmethod
    def from_config(cls) -> "StreamtimeClient | None":
        """Build a client from environment config, or None if Streamtime is not configured."""
        if not config.STREAMTIME_API_KEY:
            return None
        return cls()

    def _send(self, method: str, url: str, body: dict | None) -> httpx.Response:
        return httpx.request(
            method,
            url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            json=body,
            timeout=self.timeout,
        )

    def request(self, path: str, method: str = "GET", body: dict | None = None) -> Any | None:
        """
        Make an authenticated request and return the decoded JSON body.

        Retries once on 429, honouring Retry-After.

        Returns:
            Parsed JSON, or None on transport error, non-2xx status or bad JSON.
        """
        url = f"{self.base_url}{path}"

        try:
            response = self._send(method, url, body)

            if response.status_code == 429:
                retry_after = int(response.headers.get("Retry-After", RATE_LIMIT_DELAY))
                logger.warning(f"Streamtime rate limited. Waiting {retry_after}s before retry.")
                time.sleep(retry_after)
                response = self._send(method, url, body)

            if not 200 <= response.status_code < 300:
                logger.warning(
                    f"Streamtime {method} {path} failed: {response.status_code} {response.text[:200]}"
                )
                return None

            return response.json()

        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.warning(f"Streamtime {method} {path} failed: {e}")
            return None

    def list_users(self) -> list[dict] | None:
        """Fetch the full user directory, or None if unavailable."""
        data = self.request("/users")
        if not isinstance(data, list):
            return None
        return data

    def search(self, search_view: int, max_results: int = 200, offset: int = 0) -> list[dict] | None:
        """Fetch one page of a search view."""
        data = self.request(
            f"/search?search_view={search_view}&include_statistics=false",
            method="POST",
            body={
                "offset": offset,
                "maxResults": max_results,
                "filterGroupCollection": _EMPTY_FILTER,
            },
        )
        if not isinstance(data, dict):
            return None
        results = data.get("searchResults")
        if not isinstance(results, list):
            return None
        return results

    def search_all(self, search_view: int, max_total: int = 2000, page_size: int = 200) -> list[dict]:
        """Fetch every page of a search view up to max_total records."""
        return fetch_all(
            lambda offset, limit: self.search(search_view, max_results=limit, offset=offset),
            page_size=page_size,
            max_total=max_total,
            label=f"search_view={search_view}",
        )
