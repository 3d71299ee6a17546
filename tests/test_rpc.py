"""
RequestsAPIClient Unit Tests
============================
Tests for URL building, response decoding and error mapping.
"""

from unittest.mock import MagicMock

import pytest
import requests

from netstatus.rpc import (
    BLOCK_COUNT_BY_TYPE_PATH,
    PEERS_PATH,
    APIError,
    RequestsAPIClient,
)


def make_client(payload=None, error=None):
    session = MagicMock(spec=requests.Session)
    response = MagicMock()
    response.json.return_value = payload
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return RequestsAPIClient("http://api.test/", timeout=3, session=session), session


class TestRequestsAPIClient:

    @pytest.mark.asyncio
    async def test_fetch_block_counts(self):
        client, session = make_client({"send": "10", "receive": "5"})

        assert await client.fetch_block_counts_by_type() == {
            "send": "10",
            "receive": "5",
        }
        session.get.assert_called_once_with(
            f"http://api.test/{BLOCK_COUNT_BY_TYPE_PATH}", timeout=3
        )

    @pytest.mark.asyncio
    async def test_peers_envelope_is_unwrapped(self):
        client, session = make_client({"peers": {"[::1]:7075": "18"}})

        assert await client.fetch_peers() == {"[::1]:7075": "18"}
        assert session.get.call_args.args[0].endswith(PEERS_PATH)

    @pytest.mark.asyncio
    async def test_representative_maps(self):
        client, _ = make_client({"nano_1abc": "1000"})

        assert await client.fetch_official_representatives() == {"nano_1abc": "1000"}
        assert await client.fetch_representatives_online() == {"nano_1abc": "1000"}

    @pytest.mark.asyncio
    async def test_genesis_balance(self):
        client, _ = make_client({"balance": "123456"})
        assert await client.fetch_genesis_balance() == "123456"

    @pytest.mark.asyncio
    async def test_genesis_balance_missing(self):
        client, _ = make_client({"other": 1})
        with pytest.raises(APIError):
            await client.fetch_genesis_balance()

    @pytest.mark.asyncio
    async def test_non_object_response_raises(self):
        client, _ = make_client(["a", "b"])
        with pytest.raises(APIError):
            await client.fetch_peers()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            requests.exceptions.Timeout(),
            requests.exceptions.ConnectionError(),
            requests.exceptions.HTTPError("500 Server Error"),
        ],
    )
    async def test_transport_errors_raise_api_error(self, error):
        client, _ = make_client(error=error)
        with pytest.raises(APIError):
            await client.fetch_block_counts_by_type()

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        client, session = make_client()
        session.get.return_value.json.side_effect = ValueError("bad json")

        with pytest.raises(APIError):
            await client.fetch_peers()

    def test_context_manager_closes_session(self):
        client, session = make_client({})
        with client:
            pass
        session.close.assert_called_once()
