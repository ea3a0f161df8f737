"""Upbit order book.

Endpoint: GET https://api.upbit.com/v1/orderbook?markets=KRW-BTC
Shape:
    [{"market": "KRW-BTC",
      "orderbook_units": [
          {"ask_price": 137002000, "bid_price": 137001000,
           "ask_size": 0.106, "bid_size": 0.036}, ...]}]

Bid and ask come paired per unit; units are best-first, so bids come out
descending and asks ascending. KRW-quoted markets need an explicit
FxSnapshot: prices are divided by ``quote_per_usd`` so the book can be merged
with USD/USDT books. Sizes (BTC) are unchanged.
"""

from typing import Any, Optional

from depthsweep.domain.depth import DepthSnapshot, FxSnapshot, PriceLevel
from depthsweep.integrations.venues.base import HttpDepthAdapter

UPBIT_REST_URL = "https://api.upbit.com/v1"


class UpbitDepthAdapter(HttpDepthAdapter):
    default_name = "upbit"

    def __init__(self, market: str = "KRW-BTC", fx: Optional[FxSnapshot] = None, **kwargs: Any):
        super().__init__(**kwargs)
        if market.upper().startswith("KRW-") and fx is None:
            raise ValueError(f"{market} is KRW-quoted; an FxSnapshot is required")
        self.market = market.upper()
        self.fx = fx if self.market.startswith("KRW-") else None

    def request(self) -> tuple[str, dict[str, Any]]:
        return f"{UPBIT_REST_URL}/orderbook", {"markets": self.market}

    def _level(self, unit: dict, price_key: str, size_key: str) -> Optional[PriceLevel]:
        level = PriceLevel.parse(unit.get(price_key), unit.get(size_key))
        if level is None or self.fx is None:
            return level
        return PriceLevel.parse(self.fx.to_usd(level.price), level.size)

    def parse(self, payload: Any) -> DepthSnapshot:
        first = payload[0] if isinstance(payload, list) and payload else None
        units = first.get("orderbook_units") if isinstance(first, dict) else None
        if not isinstance(units, list):
            raise self.schema_error("malformed order book response")

        bids: list[PriceLevel] = []
        asks: list[PriceLevel] = []
        for unit in units:
            if not isinstance(unit, dict):
                continue
            bid = self._level(unit, "bid_price", "bid_size")
            if bid is not None:
                bids.append(bid)
            ask = self._level(unit, "ask_price", "ask_size")
            if ask is not None:
                asks.append(ask)
        return DepthSnapshot(bids=tuple(bids), asks=tuple(asks))
