"""Protocol definitions for the network status monitor.

These protocols describe the collaborators the poller and the feed depend
on, so that tests and alternative backends can be injected in place of the
HTTP client.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class NetworkAPI(Protocol):
    """Protocol for the three network-counter fetches polled by StatsPoller.

    Implementations:
        - RequestsAPIClient: HTTP client using the requests library

    Each fetch raises on failure; the poller treats any failure as a failed
    cycle.
    """

    async def fetch_block_counts_by_type(self) -> dict[str, Any]:
        """Fetch block counts keyed by block type.

        Returns:
            Dict mapping block type -> count (decimal string)
        """
        ...

    async def fetch_peers(self) -> dict[str, Any]:
        """Fetch the peer list.

        Returns:
            Dict mapping peer address -> peer metadata
        """
        ...

    async def fetch_official_representatives(self) -> dict[str, Any]:
        """Fetch the curated set of official representatives.

        Returns:
            Dict mapping representative address -> raw weight
        """
        ...


@runtime_checkable
class NetworkDataSource(Protocol):
    """Protocol for the source behind the live representative feed.

    Implementations:
        - RequestsAPIClient: HTTP client using the requests library
    """

    async def fetch_representatives_online(self) -> dict[str, Any]:
        """Fetch currently online representatives.

        Returns:
            Dict mapping representative address -> raw weight
        """
        ...

    async def fetch_genesis_balance(self) -> str:
        """Fetch the raw balance still held by the genesis account."""
        ...
