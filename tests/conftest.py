"""Shared fixtures for netstatus tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from netstatus.config import StatusConfig


@pytest.fixture
def unit_config():
    """Config where raw amounts equal display amounts (precision 0)."""
    return StatusConfig(max_supply=10000, currency_precision=0, api_url="http://test")


@pytest.fixture
def fake_api():
    """NetworkAPI double whose three fetches succeed with fixed counters."""
    api = MagicMock()
    api.fetch_block_counts_by_type = AsyncMock(
        return_value={"send": "10", "receive": "5", "change": "x"}
    )
    api.fetch_peers = AsyncMock(
        return_value={"[::ffff:1.2.3.4]:7075": "18", "[::ffff:5.6.7.8]:7075": "17"}
    )
    api.fetch_official_representatives = AsyncMock(return_value={"A": 1000})
    api.fetch_representatives_online = AsyncMock(
        return_value={"A": 1000, "B": 2000}
    )
    api.fetch_genesis_balance = AsyncMock(return_value="1000")
    return api
