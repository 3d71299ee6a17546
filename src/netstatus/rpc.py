"""HTTP client for the block explorer API.

This module provides an API client using the requests library. Requests
are blocking, so each async fetch runs its request in a worker thread.
"""

from __future__ import annotations

import asyncio
from typing import Any

import requests

from netstatus.config import DEFAULT_REQUEST_TIMEOUT
from netstatus.utils.logging import make_logger

logger = make_logger(__name__)

BLOCK_COUNT_BY_TYPE_PATH = "v2/network/block_count_by_type"
PEERS_PATH = "v2/network/peers"
OFFICIAL_REPRESENTATIVES_PATH = "v2/representatives/official"
REPRESENTATIVES_ONLINE_PATH = "v2/representatives_online"
GENESIS_BALANCE_PATH = "v2/network/genesis_balance"


class APIError(Exception):
    """Raised when an API request fails or returns an unexpected shape."""


def _unwrap(data: Any, key: str) -> Any:
    """Return data[key] for responses wrapped in a single-key envelope."""
    if isinstance(data, dict) and len(data) == 1 and isinstance(data.get(key), dict):
        return data[key]
    return data


class RequestsAPIClient:
    """Explorer API client using the requests library.

    Attributes:
        base_url: API base URL (without trailing slash)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: API base URL
            timeout: Request timeout in seconds
            session: Optional session to reuse (one is created otherwise)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _get_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def _get(self, path: str) -> Any:
        """Make a GET request and decode the JSON body.

        Args:
            path: API path relative to base_url

        Returns:
            The decoded JSON document

        Raises:
            APIError: On timeout, connection, HTTP or decoding failure
        """
        url = self._get_url(path)

        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout as e:
            logger.debug(f"API timeout for {path}")
            raise APIError(f"Timeout fetching {path}") from e
        except requests.exceptions.ConnectionError as e:
            logger.debug(f"Connection error for {path}")
            raise APIError(f"Connection error fetching {path}") from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"API error for {path}: {e}")
            raise APIError(f"Request failed for {path}: {e}") from e
        except ValueError as e:
            logger.warning(f"Invalid JSON response for {path}: {e}")
            raise APIError(f"Invalid JSON from {path}") from e

    async def _fetch_mapping(self, path: str, envelope: str) -> dict[str, Any]:
        data = _unwrap(await asyncio.to_thread(self._get, path), envelope)
        if not isinstance(data, dict):
            raise APIError(
                f"Expected JSON object from {path}, got {type(data).__name__}"
            )
        return data

    async def fetch_block_counts_by_type(self) -> dict[str, Any]:
        """Fetch block counts keyed by block type.

        Returns:
            Dict mapping block type -> count (decimal string)
        """
        return await self._fetch_mapping(BLOCK_COUNT_BY_TYPE_PATH, "blocks")

    async def fetch_peers(self) -> dict[str, Any]:
        """Fetch the peer list.

        Returns:
            Dict mapping peer address -> peer metadata
        """
        return await self._fetch_mapping(PEERS_PATH, "peers")

    async def fetch_official_representatives(self) -> dict[str, Any]:
        """Fetch the official representatives.

        Returns:
            Dict mapping representative address -> raw weight
        """
        return await self._fetch_mapping(
            OFFICIAL_REPRESENTATIVES_PATH, "representatives"
        )

    async def fetch_representatives_online(self) -> dict[str, Any]:
        """Fetch currently online representatives.

        Returns:
            Dict mapping representative address -> raw weight
        """
        return await self._fetch_mapping(
            REPRESENTATIVES_ONLINE_PATH, "representatives"
        )

    async def fetch_genesis_balance(self) -> str:
        """Fetch the raw balance still held by the genesis account.

        Returns:
            Raw balance as a decimal string
        """
        data = await asyncio.to_thread(self._get, GENESIS_BALANCE_PATH)
        if isinstance(data, dict):
            data = data.get("balance")
        if isinstance(data, bool) or not isinstance(data, (str, int)):
            raise APIError(f"Missing balance in response from {GENESIS_BALANCE_PATH}")
        return str(data)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> RequestsAPIClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
