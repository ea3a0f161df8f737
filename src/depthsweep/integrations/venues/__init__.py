# Venue Depth Adapters
# One adapter per exchange / quote service, all producing DepthSnapshot

from depthsweep.integrations.venues.alltick import AlltickDepthAdapter, code_candidates
from depthsweep.integrations.venues.base import DepthAdapter, HttpDepthAdapter
from depthsweep.integrations.venues.binance import BinanceDepthAdapter
from depthsweep.integrations.venues.bybit import BybitDepthAdapter
from depthsweep.integrations.venues.coinbase import CoinbaseDepthAdapter
from depthsweep.integrations.venues.okx import OkxDepthAdapter
from depthsweep.integrations.venues.registry import BTC_VENUES, VenueSet, build_btc_adapters
from depthsweep.integrations.venues.upbit import UpbitDepthAdapter
from depthsweep.integrations.venues.yahoo import YahooSyntheticDepthAdapter, synthesize_bid_depth

__all__ = [
    "DepthAdapter",
    "HttpDepthAdapter",
    "BinanceDepthAdapter",
    "OkxDepthAdapter",
    "BybitDepthAdapter",
    "CoinbaseDepthAdapter",
    "UpbitDepthAdapter",
    "AlltickDepthAdapter",
    "YahooSyntheticDepthAdapter",
    "code_candidates",
    "synthesize_bid_depth",
    "BTC_VENUES",
    "VenueSet",
    "build_btc_adapters",
]
