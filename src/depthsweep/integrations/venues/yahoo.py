"""Synthetic depth from Yahoo Finance quotes.

Endpoint: GET https://query1.finance.yahoo.com/v7/finance/quote?symbols=MSFT
Shape: {"quoteResponse": {"result": [{"symbol": "MSFT", "bid": 410.1,
        "regularMarketPrice": 410.3, "regularMarketVolume": 21000000}]}}

Yahoo exposes top of book and volume only, no L2 depth. This adapter builds an
APPROXIMATE bid ladder from those two numbers:

- anchor at the bid (falling back to the last price),
- spread 35% of the day's volume (fallback 5,000,000 shares) over up to 16
  levels,
- each level 0.15% below the previous anchor step, sizes decaying by 7% per
  level with a 10% floor, the first level weighted 1.4x.

Every generated level is marked synthetic. It is a heuristic for venues that
lack real depth, never a measurement.
"""

from typing import Any, Optional

from depthsweep.domain.depth import DepthSnapshot, PriceLevel
from depthsweep.integrations.venues.base import HttpDepthAdapter

YAHOO_QUOTE_URL = "https://query1.finance.yahoo.com/v7/finance/quote"

DEFAULT_SYNTHETIC_LEVELS = 16
FALLBACK_VOLUME = 5_000_000.0
VOLUME_FRACTION = 0.35
FIRST_LEVEL_WEIGHT = 1.4
PRICE_STEP = 0.0015
SIZE_DECAY = 0.07
MIN_SIZE_FACTOR = 0.1


def _positive(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def synthesize_bid_depth(
    bid: Optional[float],
    volume: Optional[float],
    levels: int = DEFAULT_SYNTHETIC_LEVELS,
) -> tuple[PriceLevel, ...]:
    """Deterministically generate descending synthetic bid levels.

    Args:
        bid: Top-of-book bid (or last price). None/<=0 yields no levels.
        volume: Volume proxy in shares; None/<=0 uses FALLBACK_VOLUME.
        levels: Maximum number of levels.
    """
    if not bid or bid <= 0 or levels <= 0:
        return ()
    assumed_volume = volume if volume and volume > 0 else FALLBACK_VOLUME
    target = min(assumed_volume * VOLUME_FRACTION, assumed_volume)
    first_size = target / levels * FIRST_LEVEL_WEIGHT

    out: list[PriceLevel] = []
    remaining = target
    for i in range(levels):
        if remaining <= 0:
            break
        price = bid * (1 - PRICE_STEP * i)
        size = min(remaining, first_size * max(MIN_SIZE_FACTOR, 1 - SIZE_DECAY * i))
        level = PriceLevel.parse(price, size, synthetic=True)
        if level is None:
            break
        out.append(level)
        remaining -= size
    return tuple(out)


class YahooSyntheticDepthAdapter(HttpDepthAdapter):
    """Quote-only venue; bids are synthesized, asks are empty."""

    default_name = "yahoo-synthetic"

    def __init__(self, symbol: str, levels: int = DEFAULT_SYNTHETIC_LEVELS, **kwargs: Any):
        super().__init__(**kwargs)
        self.symbol = symbol
        self.levels = levels

    def request(self) -> tuple[str, dict[str, Any]]:
        return YAHOO_QUOTE_URL, {"symbols": self.symbol}

    def parse(self, payload: Any) -> DepthSnapshot:
        response = payload.get("quoteResponse") if isinstance(payload, dict) else None
        results = response.get("result") if isinstance(response, dict) else None
        quote = results[0] if isinstance(results, list) and results else None
        if not isinstance(quote, dict):
            raise self.schema_error(f"missing quote data for {self.symbol}")

        bid = _positive(quote.get("bid")) or _positive(quote.get("regularMarketPrice"))
        volume = _positive(quote.get("regularMarketVolume"))
        return DepthSnapshot(bids=synthesize_bid_depth(bid, volume, self.levels), asks=())
