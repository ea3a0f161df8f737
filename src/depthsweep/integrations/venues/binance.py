"""Binance spot depth.

Endpoint: GET https://api.binance.com/api/v3/depth?symbol=BTCUSDT&limit=5000
Shape: {"lastUpdateId": ..., "bids": [["price", "qty"], ...], "asks": [...]}
Binance returns bids descending and asks ascending.
"""

from typing import Any, Optional

from depthsweep.domain.depth import DepthSnapshot, parse_levels
from depthsweep.integrations.venues.base import HttpDepthAdapter

BINANCE_REST_URL = "https://api.binance.com/api/v3"
BINANCE_MAX_LIMIT = 5000


class BinanceDepthAdapter(HttpDepthAdapter):
    default_name = "binance"

    def __init__(self, symbol: str = "BTCUSDT", limit: int = BINANCE_MAX_LIMIT, **kwargs: Any):
        super().__init__(**kwargs)
        self.symbol = symbol.upper()
        self.limit = max(1, min(limit, BINANCE_MAX_LIMIT))

    def request(self) -> tuple[str, dict[str, Any]]:
        return f"{BINANCE_REST_URL}/depth", {"symbol": self.symbol, "limit": self.limit}

    def parse(self, payload: Any) -> DepthSnapshot:
        bids: Optional[list] = payload.get("bids") if isinstance(payload, dict) else None
        asks: Optional[list] = payload.get("asks") if isinstance(payload, dict) else None
        if not isinstance(bids, list) or not isinstance(asks, list):
            raise self.schema_error("malformed order book response")
        return DepthSnapshot(bids=parse_levels(bids), asks=parse_levels(asks))
