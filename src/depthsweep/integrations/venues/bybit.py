"""Bybit V5 order book snapshot.

Endpoint: GET https://api.bybit.com/v5/market/orderbook?category=linear&symbol=BTCUSDT&limit=500
Shape: {"retCode": 0, "result": {"s": "BTCUSDT", "b": [[p, s]], "a": [[p, s]]}}

Depth limits per category (no pagination beyond them):
    spot 200, linear 500, inverse 500, option 25
The limit defaults to the category maximum and is clamped to [1, max].
Bybit guarantees bids descending and asks ascending.
"""

from typing import Any, Optional

from depthsweep.domain.depth import DepthSnapshot, parse_levels
from depthsweep.integrations.venues.base import HttpDepthAdapter

BYBIT_REST_URL = "https://api.bybit.com/v5"

MAX_LIMIT_BY_CATEGORY = {
    "spot": 200,
    "linear": 500,
    "inverse": 500,
    "option": 25,
}


class BybitDepthAdapter(HttpDepthAdapter):
    default_name = "bybit"

    def __init__(
        self,
        symbol: str = "BTCUSDT",
        category: str = "linear",
        limit: Optional[int] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        if category not in MAX_LIMIT_BY_CATEGORY:
            raise ValueError(f"unknown bybit category: {category}")
        max_limit = MAX_LIMIT_BY_CATEGORY[category]
        self.symbol = symbol.upper()
        self.category = category
        self.limit = max_limit if limit is None else max(1, min(limit, max_limit))

    def request(self) -> tuple[str, dict[str, Any]]:
        return f"{BYBIT_REST_URL}/market/orderbook", {
            "category": self.category,
            "symbol": self.symbol,
            "limit": self.limit,
        }

    def parse(self, payload: Any) -> DepthSnapshot:
        if not isinstance(payload, dict):
            raise self.schema_error("malformed order book response")
        ret_code = payload.get("retCode")
        if ret_code not in (None, 0):
            raise self.schema_error(f"api error retCode={ret_code} msg={payload.get('retMsg', '')}")
        result = payload.get("result") or payload
        if not isinstance(result, dict):
            raise self.schema_error("malformed order book response")
        bids = result.get("b", result.get("bids"))
        asks = result.get("a", result.get("asks"))
        if not isinstance(bids, list) or not isinstance(asks, list):
            raise self.schema_error("malformed order book response")
        return DepthSnapshot(bids=parse_levels(bids), asks=parse_levels(asks))
