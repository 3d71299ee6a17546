"""Live network-health monitor for a ledger's representative network.

This package polls network counters (peers, block counts by type, official
representatives), combines them with a pushed snapshot of online
representatives, and derives voting-power and rebroadcast metrics.

Usage (CLI):
    netstatus watch
    netstatus show [--json]

Usage (Python):
    >>> import asyncio
    >>> from netstatus import StatusConfig, create_view
    >>>
    >>> view = create_view(StatusConfig(api_url="http://localhost:3001"))
    >>> asyncio.run(view.poller.poll_once())
    >>> metrics = view.compute()
"""

from __future__ import annotations

from netstatus.config import (
    DEFAULT_API_URL,
    DEFAULT_MAX_SUPPLY,
    DEFAULT_POLL_INTERVAL,
    REBROADCAST_RATIO,
    ConfigError,
    StatusConfig,
    load_config,
)
from netstatus.feed import NetworkData, NetworkDataFeed
from netstatus.metrics import MetricMath, percent_of, sum_parsed_counts
from netstatus.poller import (
    CancellationToken,
    NetworkSnapshot,
    PollerState,
    RepeatingTask,
    StatsPoller,
)
from netstatus.protocols import NetworkAPI, NetworkDataSource
from netstatus.rpc import APIError, RequestsAPIClient
from netstatus.view import StatusMetrics, StatusView

__all__ = [
    # Main classes
    "StatusView",
    "StatsPoller",
    "MetricMath",
    # Data
    "NetworkSnapshot",
    "NetworkData",
    "NetworkDataFeed",
    "StatusMetrics",
    "PollerState",
    # Scheduling
    "RepeatingTask",
    "CancellationToken",
    # Configuration
    "StatusConfig",
    "ConfigError",
    "load_config",
    "DEFAULT_API_URL",
    "DEFAULT_MAX_SUPPLY",
    "DEFAULT_POLL_INTERVAL",
    "REBROADCAST_RATIO",
    # Protocols
    "NetworkAPI",
    "NetworkDataSource",
    # Implementations
    "RequestsAPIClient",
    "APIError",
    # Functions
    "percent_of",
    "sum_parsed_counts",
    "create_view",
]


def create_view(
    config: StatusConfig | None = None,
    api: NetworkAPI | None = None,
    feed: NetworkDataFeed | None = None,
) -> StatusView:
    """Factory function to wire a StatusView with sensible defaults.

    All dependencies can be overridden for testing or custom backends.

    Args:
        config: Static configuration (default: StatusConfig())
        api: Network counter source (default: RequestsAPIClient on config.api_url)
        feed: Live representative feed (default: empty NetworkDataFeed)

    Returns:
        A StatusView whose poller has not been started yet
    """
    if config is None:
        config = StatusConfig()

    if api is None:
        api = RequestsAPIClient(config.api_url, timeout=config.request_timeout)

    if feed is None:
        feed = NetworkDataFeed()

    poller = StatsPoller(api, interval=config.poll_interval)
    return StatusView(config, feed, poller)
