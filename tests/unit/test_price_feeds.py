"""Unit tests for the Coinbase spot price feed."""

import httpx
import pytest

from depthsweep.core.retry import SchemaError, TransportError
from depthsweep.integrations.price_feeds import CoinbaseSpotPriceFeed


def client_for(status, payload):
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(status, json=payload)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), captured


class TestCoinbaseSpotPriceFeed:
    """Tests for CoinbaseSpotPriceFeed.get_spot_price."""

    @pytest.mark.asyncio
    async def test_parses_ticker(self):
        client, captured = client_for(
            200, {"price": "67000.5", "bid": "67000.4", "ask": "67000.6", "volume": "1234.5"}
        )
        async with client:
            spot = await CoinbaseSpotPriceFeed(client=client).get_spot_price("BTC-USD")

        assert spot.price == 67000.5
        assert spot.bid == 67000.4
        assert spot.ask == 67000.6
        assert spot.volume_24h == 1234.5
        assert spot.source == "coinbase"
        assert captured[0].url.path == "/products/BTC-USD/ticker"

    @pytest.mark.asyncio
    async def test_optional_fields_missing(self):
        client, _ = client_for(200, {"price": "100"})
        async with client:
            spot = await CoinbaseSpotPriceFeed(client=client).get_spot_price()
        assert spot.bid is None
        assert spot.volume_24h is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"price": "n/a"}, {}, ["not", "a", "dict"], {"price": "0"}])
    async def test_invalid_price(self, payload):
        client, _ = client_for(200, payload)
        async with client:
            with pytest.raises(SchemaError, match="invalid price"):
                await CoinbaseSpotPriceFeed(client=client).get_spot_price()

    @pytest.mark.asyncio
    async def test_http_error(self):
        client, _ = client_for(502, {"message": "bad gateway"})
        async with client:
            with pytest.raises(TransportError) as exc_info:
                await CoinbaseSpotPriceFeed(client=client).get_spot_price()
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_non_finite_optional_fields_dropped(self):
        client, _ = client_for(200, {"price": "100", "bid": "inf", "ask": True, "volume": "-3"})
        async with client:
            spot = await CoinbaseSpotPriceFeed(client=client).get_spot_price()
        assert spot.price == 100.0
        assert spot.bid is None
        assert spot.ask is None
        assert spot.volume_24h is None

    @pytest.mark.asyncio
    async def test_invalid_url_is_transport_error(self):
        client, captured = client_for(200, {"price": "100"})
        async with client:
            with pytest.raises(TransportError):
                await CoinbaseSpotPriceFeed(client=client).get_spot_price("BTC-USD\x00")
        assert captured == []
