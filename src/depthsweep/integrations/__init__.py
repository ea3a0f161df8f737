"""External system adapters - venue depth endpoints and spot price feeds."""

from depthsweep.integrations.price_feeds import CoinbaseSpotPriceFeed, SpotPriceFeed
from depthsweep.integrations.venues import (
    DepthAdapter,
    HttpDepthAdapter,
    build_btc_adapters,
)

__all__ = [
    "DepthAdapter",
    "HttpDepthAdapter",
    "build_btc_adapters",
    "SpotPriceFeed",
    "CoinbaseSpotPriceFeed",
]
