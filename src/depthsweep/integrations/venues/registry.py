"""Build the configured set of BTC depth adapters."""

from dataclasses import dataclass, field
from typing import Callable, Optional

import httpx

from depthsweep.core.logging import get_logger
from depthsweep.integrations.venues.base import HttpDepthAdapter
from depthsweep.integrations.venues.binance import BinanceDepthAdapter
from depthsweep.integrations.venues.bybit import BybitDepthAdapter
from depthsweep.integrations.venues.coinbase import CoinbaseDepthAdapter
from depthsweep.integrations.venues.okx import OkxDepthAdapter
from depthsweep.integrations.venues.upbit import UpbitDepthAdapter
from depthsweep.settings import SweepSettings

log = get_logger(__name__)

AdapterFactory = Callable[[SweepSettings, dict], HttpDepthAdapter]

BTC_VENUES: dict[str, AdapterFactory] = {
    "binance": lambda s, kw: BinanceDepthAdapter(symbol=s.binance_symbol, **kw),
    "okx": lambda s, kw: OkxDepthAdapter(inst_id=s.okx_inst_id, **kw),
    "bybit": lambda s, kw: BybitDepthAdapter(
        symbol=s.bybit_symbol, category=s.bybit_category, **kw
    ),
    "coinbase": lambda s, kw: CoinbaseDepthAdapter(product=s.coinbase_product, **kw),
    "upbit": lambda s, kw: UpbitDepthAdapter(market=s.upbit_market, fx=s.fx, **kw),
}


@dataclass
class VenueSet:
    """Adapters ready to query, plus venues that could not be configured."""

    adapters: list[HttpDepthAdapter] = field(default_factory=list)
    disabled: dict[str, str] = field(default_factory=dict)


def build_btc_adapters(
    settings: SweepSettings,
    client: Optional[httpx.AsyncClient] = None,
) -> VenueSet:
    """Instantiate one adapter per configured venue name.

    Unknown names and venues whose construction fails (for example a
    KRW-quoted market with no FX snapshot) are reported in ``disabled``
    rather than aborting the run.
    """
    venue_set = VenueSet()
    common = {
        "timeout": settings.timeout_seconds,
        "client": client,
        "user_agent": settings.user_agent,
    }
    for name in settings.venues:
        factory = BTC_VENUES.get(name)
        if factory is None:
            venue_set.disabled[name] = "unknown venue"
            log.warning("venue_disabled", venue=name, reason="unknown venue")
            continue
        try:
            venue_set.adapters.append(factory(settings, dict(common)))
        except ValueError as e:
            venue_set.disabled[name] = str(e)
            log.warning("venue_disabled", venue=name, reason=str(e))
    return venue_set
