"""Alltick US-equity depth.

Endpoint: GET https://quote.alltick.io/quote-stock-b-api/depth-tick?token=...&query=...
where ``query`` is the JSON document
    {"trace": "<ms timestamp>", "data": {"symbol_list": [{"code": "MSFT.US"}]}}
Shape:
    {"ret": 200, "msg": "ok",
     "data": {"tick_list": [{"code": "MSFT.US",
                             "bids": [{"price": "410.1", "volume": "300"}],
                             "asks": [...]}]}}

A ``ret`` other than 200 is an API-level error (600 usually means the code is
not recognized). Alltick does not document level ordering, so consumers must
sort. Codes vary by vendor convention; ``code_candidates`` lists the forms to
try for one ticker.
"""

import json
import time
from typing import Any, Optional

from depthsweep.domain.depth import DepthSnapshot, parse_levels
from depthsweep.integrations.venues.base import HttpDepthAdapter

ALLTICK_DEPTH_URL = "https://quote.alltick.io/quote-stock-b-api/depth-tick"
ALLTICK_OK = 200

# Vendor-specific spellings observed for tickers with a class suffix
_EXPLICIT_ALIASES = {
    "BRK-B": ["BRK.B.US", "BRK-B.US", "BRKB.US", "BRK.B", "BRKB"],
}


def code_candidates(symbol: str) -> list[str]:
    """Ordered, de-duplicated Alltick codes to try for ``symbol``.

    ``SYMBOL.US`` comes first; tickers containing '-' or '.' also get the
    dot, dash, underscore and separator-free variants.
    """
    candidates: list[str] = []

    def add(code: str) -> None:
        if code not in candidates:
            candidates.append(code)

    add(f"{symbol}.US")
    if "-" in symbol:
        add(f"{symbol.replace('-', '.')}.US")
        add(f"{symbol.replace('-', '')}.US")
        add(f"{symbol.replace('-', '_')}.US")
    if "." in symbol:
        add(f"{symbol.replace('.', '-')}.US")
        add(f"{symbol.replace('.', '')}.US")
        add(f"{symbol.replace('.', '_')}.US")
    for alias in _EXPLICIT_ALIASES.get(symbol, []):
        add(alias)
    return candidates


class AlltickDepthAdapter(HttpDepthAdapter):
    default_name = "alltick"

    def __init__(self, code: str, token: Optional[str] = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.code = code
        self.token = token

    def request(self) -> tuple[str, dict[str, Any]]:
        query = json.dumps(
            {
                "trace": str(int(time.time() * 1000)),
                "data": {"symbol_list": [{"code": self.code}]},
            },
            separators=(",", ":"),
        )
        params: dict[str, Any] = {"query": query}
        if self.token:
            params = {"token": self.token, **params}
        return ALLTICK_DEPTH_URL, params

    def parse(self, payload: Any) -> DepthSnapshot:
        if not isinstance(payload, dict):
            raise self.schema_error("malformed depth response")
        ret = payload.get("ret")
        if ret is not None and ret != ALLTICK_OK:
            raise self.schema_error(f"ret={ret} msg={payload.get('msg', '')} code={self.code}")
        data = payload.get("data") or {}
        tick_list = data.get("tick_list") if isinstance(data, dict) else None
        tick = tick_list[0] if isinstance(tick_list, list) and tick_list else None
        if not isinstance(tick, dict):
            raise self.schema_error(f"missing tick_list for {self.code}")
        bids = tick.get("bids") or []
        asks = tick.get("asks") or []
        if not isinstance(bids, list) or not isinstance(asks, list):
            raise self.schema_error(f"bids/asks are not lists for {self.code}")
        return DepthSnapshot(
            bids=parse_levels(bids, "price", "volume"),
            asks=parse_levels(asks, "price", "volume"),
        )
