# Spot Price Feeds
# External price sources for the pre-trade reference price

from depthsweep.integrations.price_feeds.base import SpotPriceFeed
from depthsweep.integrations.price_feeds.coinbase import CoinbaseSpotPriceFeed

__all__ = ["SpotPriceFeed", "CoinbaseSpotPriceFeed"]
