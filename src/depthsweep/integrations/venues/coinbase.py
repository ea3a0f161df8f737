"""Coinbase Exchange level-2 book.

Endpoint: GET https://api.exchange.coinbase.com/products/BTC-USD/book?level=2
Shape: {"bids": [["price", "size", num_orders], ...], "asks": [...], "sequence": ...}

Level 2 is already aggregated by price and is far lighter than level 3.
Coinbase returns bids descending and asks ascending. This is the deepest
public BTC book and the default augmentation reference.
"""

from typing import Any

from depthsweep.domain.depth import DepthSnapshot, parse_levels
from depthsweep.integrations.venues.base import HttpDepthAdapter

COINBASE_REST_URL = "https://api.exchange.coinbase.com"


class CoinbaseDepthAdapter(HttpDepthAdapter):
    default_name = "coinbase"

    def __init__(self, product: str = "BTC-USD", **kwargs: Any):
        super().__init__(**kwargs)
        self.product = product

    def request(self) -> tuple[str, dict[str, Any]]:
        return f"{COINBASE_REST_URL}/products/{self.product}/book", {"level": 2}

    def parse(self, payload: Any) -> DepthSnapshot:
        if not isinstance(payload, dict):
            raise self.schema_error("malformed order book response")
        bids = payload.get("bids")
        asks = payload.get("asks")
        if not isinstance(bids, list) or not isinstance(asks, list):
            raise self.schema_error("malformed order book response")
        return DepthSnapshot(bids=parse_levels(bids), asks=parse_levels(asks))
