"""
NetworkDataFeed Unit Tests
==========================
Tests for publishing and refreshing the live representative feed.
"""

import pytest

from netstatus.feed import NetworkData, NetworkDataFeed
from netstatus.rpc import APIError


class TestNetworkDataFeed:

    def test_initial_value_is_empty(self):
        latest = NetworkDataFeed().latest

        assert dict(latest.representatives_online) == {}
        assert latest.genesis_balance == "0"
        assert latest.received_at is None

    def test_publish_replaces_value(self):
        feed = NetworkDataFeed()
        online = {"A": "1000"}

        published = feed.publish(online, "500")
        online["B"] = "2000"

        assert feed.latest is published
        assert dict(feed.latest.representatives_online) == {"A": "1000"}
        assert feed.latest.genesis_balance == "500"
        assert feed.latest.received_at is not None

    @pytest.mark.asyncio
    async def test_refresh_publishes_both_values(self, fake_api):
        feed = NetworkDataFeed()

        assert await feed.refresh(fake_api) is True
        assert dict(feed.latest.representatives_online) == {"A": 1000, "B": 2000}
        assert feed.latest.genesis_balance == "1000"

    @pytest.mark.asyncio
    async def test_refresh_failure_keeps_previous_value(self, fake_api):
        previous = NetworkData({"A": 1}, "10", received_at=1.0)
        feed = NetworkDataFeed(previous)
        fake_api.fetch_genesis_balance.side_effect = APIError("down")

        assert await feed.refresh(fake_api) is False
        assert feed.latest is previous

    @pytest.mark.asyncio
    @pytest.mark.parametrize("online", [["A", "B"], [("A", 1)], "A", None])
    async def test_refresh_rejects_non_mapping_representatives(self, fake_api, online):
        previous = NetworkData({"A": 1}, "10", received_at=1.0)
        feed = NetworkDataFeed(previous)
        fake_api.fetch_representatives_online.return_value = online

        assert await feed.refresh(fake_api) is False
        assert feed.latest is previous
