"""OKX order book.

Endpoint: GET https://www.okx.com/api/v5/market/books?instId=BTC-USDT&sz=400
Shape: {"code": "0", "data": [{"bids": [[px, sz, "0", n], ...], "asks": [...]}]}
OKX returns bids descending and asks ascending.
"""

from typing import Any

from depthsweep.domain.depth import DepthSnapshot, parse_levels
from depthsweep.integrations.venues.base import HttpDepthAdapter

OKX_REST_URL = "https://www.okx.com/api/v5"
OKX_MAX_DEPTH = 400


class OkxDepthAdapter(HttpDepthAdapter):
    default_name = "okx"

    def __init__(self, inst_id: str = "BTC-USDT", depth: int = OKX_MAX_DEPTH, **kwargs: Any):
        super().__init__(**kwargs)
        self.inst_id = inst_id
        self.depth = max(1, min(depth, OKX_MAX_DEPTH))

    def request(self) -> tuple[str, dict[str, Any]]:
        return f"{OKX_REST_URL}/market/books", {"instId": self.inst_id, "sz": self.depth}

    def parse(self, payload: Any) -> DepthSnapshot:
        if not isinstance(payload, dict):
            raise self.schema_error("malformed order book response")
        code = payload.get("code")
        if code not in (None, "0", 0):
            raise self.schema_error(f"api error code={code} msg={payload.get('msg', '')}")
        data = payload.get("data")
        first = data[0] if isinstance(data, list) and data else None
        if not isinstance(first, dict):
            raise self.schema_error("malformed order book response")
        bids = first.get("bids")
        asks = first.get("asks")
        if not isinstance(bids, list) or not isinstance(asks, list):
            raise self.schema_error("malformed order book response")
        return DepthSnapshot(bids=parse_levels(bids), asks=parse_levels(asks))
