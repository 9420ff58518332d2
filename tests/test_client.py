"""
Tests for the node client, using httpx.MockTransport in place of a node.
"""

import json

import httpx
import pytest

from src.api.client import API_VERSION_HEADER, HTTPClientSettings, LedgerAPI, compose_api
from src.api.types import PrepareTransfersOptions, Transfer
from src.core.errors import ClientConstructionError, LedgerAPIError


def make_api(handler):
    settings = HTTPClientSettings(uri="http://node:14265", transport=httpx.MockTransport(handler))
    return compose_api(settings)


class TestComposeApi:
    def test_default_settings(self):
        api = compose_api()
        assert isinstance(api, LedgerAPI)
        assert api.uri == "http://localhost:14265"
        api.close()

    @pytest.mark.parametrize("uri", ["ftp://node", "node:14265", "http://"])
    def test_bad_uri(self, uri):
        with pytest.raises(ClientConstructionError):
            compose_api(HTTPClientSettings(uri=uri))

    def test_bad_timeout(self):
        with pytest.raises(ClientConstructionError):
            compose_api(HTTPClientSettings(timeout=0))


class TestLedgerAPI:
    def test_get_balances(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            seen["headers"] = request.headers
            return httpx.Response(200, json={"balances": ["10", "0"], "duration": 1})

        with make_api(handler) as api:
            assert api.get_balances(["0xa", "0xb"]) == [10, 0]

        assert seen["body"] == {"command": "getBalances", "addresses": ["0xa", "0xb"]}
        assert seen["headers"][API_VERSION_HEADER] == "1"

    def test_get_balances_empty_skips_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        assert make_api(handler).get_balances([]) == []

    def test_malformed_balances(self):
        api = make_api(lambda r: httpx.Response(200, json={"balances": [1]}))
        with pytest.raises(LedgerAPIError):
            api.get_balances(["0xa", "0xb"])

    def test_node_error(self):
        api = make_api(lambda r: httpx.Response(400, json={"error": "invalid command"}))
        with pytest.raises(LedgerAPIError, match="invalid command") as exc_info:
            api.get_node_info()
        assert exc_info.value.status_code == 400

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(LedgerAPIError):
            make_api(handler).get_node_info()

    def test_get_node_info(self):
        api = make_api(lambda r: httpx.Response(200, json={"appName": "node", "latestMilestoneIndex": 5}))
        assert api.get_node_info()["latestMilestoneIndex"] == 5

    def test_prepare_transfers_is_local(self, seed):
        def handler(request):
            raise AssertionError("no request expected")

        trytes = make_api(handler).prepare_transfers(
            seed, [Transfer(address="0x" + "2" * 40, message="hello")], PrepareTransfersOptions(timestamp=1)
        )
        assert len(trytes) == 1
