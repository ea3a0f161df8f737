"""Typed settings views over ConfigManager.

Configuration is loaded from ConfigManager at startup. All parameters have
sensible defaults so the tool runs without a config file.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from depthsweep.core.config import ConfigManager
from depthsweep.core.retry import RetryConfig
from depthsweep.domain.depth import FxSnapshot
from depthsweep.domain.holdings import (
    DEFAULT_BTC_ASSUMED,
    DEFAULT_BTC_LOWER,
    DEFAULT_BTC_UPPER,
)

DEFAULT_BTC_VENUES = ["binance", "bybit", "coinbase", "okx", "upbit"]


def _parse_as_of(value: Any) -> datetime:
    if isinstance(value, datetime):
        as_of = value
    elif isinstance(value, str) and value:
        as_of = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        return datetime.now(timezone.utc)
    if as_of.tzinfo is None:
        as_of = as_of.replace(tzinfo=timezone.utc)
    return as_of


def load_fx_snapshot(config: ConfigManager, prefix: str = "fx") -> Optional[FxSnapshot]:
    """Build the KRW/USD snapshot from config, or None when no rate is set."""
    rate = config.get(f"{prefix}.krw_per_usd")
    if rate is None:
        return None
    return FxSnapshot(
        quote_per_usd=float(rate),
        as_of=_parse_as_of(config.get(f"{prefix}.as_of")),
        source=str(config.get(f"{prefix}.source", "config")),
    )


@dataclass(frozen=True)
class SweepSettings:
    """Settings for the BTC multi-venue sweep.

    Attributes:
        venues: Venue names to query concurrently.
        timeout_seconds: Per-request timeout.
        retry: Caller-side retry policy for transport failures.
        reference_venue: Deep venue used to augment shallow books.
        augment: Whether to run depth augmentation.
        spot_product: Coinbase product for the spot reference.
        fx: KRW/USD snapshot for KRW-quoted venues (None disables them).
        assumed_btc / lower_btc / upper_btc: BTC holdings assumption.
    """

    venues: list[str] = field(default_factory=lambda: list(DEFAULT_BTC_VENUES))
    timeout_seconds: float = 8.0
    retry: RetryConfig = field(default_factory=RetryConfig)
    reference_venue: str = "coinbase"
    augment: bool = True
    binance_symbol: str = "BTCUSDT"
    okx_inst_id: str = "BTC-USDT"
    bybit_symbol: str = "BTCUSDT"
    bybit_category: str = "linear"
    coinbase_product: str = "BTC-USD"
    upbit_market: str = "KRW-BTC"
    spot_product: str = "BTC-USD"
    user_agent: str = "depthsweep/0.3"
    fx: Optional[FxSnapshot] = None
    assumed_btc: float = DEFAULT_BTC_ASSUMED
    lower_btc: float = DEFAULT_BTC_LOWER
    upper_btc: float = DEFAULT_BTC_UPPER

    @classmethod
    def from_config(cls, config: ConfigManager, prefix: str = "btc") -> "SweepSettings":
        return cls(
            venues=[str(v).lower() for v in config.get_list(f"{prefix}.venues", DEFAULT_BTC_VENUES)],
            timeout_seconds=config.get_float("aggregation.timeout_seconds", 8.0),
            retry=RetryConfig.from_dict(config.get_section("aggregation.retry")),
            reference_venue=str(config.get(f"{prefix}.reference_venue", "coinbase")),
            augment=config.get_bool(f"{prefix}.augment", default=True),
            binance_symbol=str(config.get("venues.binance.symbol", "BTCUSDT")),
            okx_inst_id=str(config.get("venues.okx.inst_id", "BTC-USDT")),
            bybit_symbol=str(config.get("venues.bybit.symbol", "BTCUSDT")),
            bybit_category=str(config.get("venues.bybit.category", "linear")),
            coinbase_product=str(config.get("venues.coinbase.product", "BTC-USD")),
            upbit_market=str(config.get("venues.upbit.market", "KRW-BTC")),
            spot_product=str(config.get(f"{prefix}.spot_product", "BTC-USD")),
            user_agent=str(config.get("aggregation.user_agent", "depthsweep/0.3")),
            fx=load_fx_snapshot(config),
            assumed_btc=config.get_float(f"{prefix}.assumed_btc", DEFAULT_BTC_ASSUMED),
            lower_btc=config.get_float(f"{prefix}.lower_btc", DEFAULT_BTC_LOWER),
            upper_btc=config.get_float(f"{prefix}.upper_btc", DEFAULT_BTC_UPPER),
        )


@dataclass(frozen=True)
class EquitySettings:
    """Settings for the serial equity liquidation loop.

    Attributes:
        alltick_token: Alltick API token (falls back to $ALLTICK_TOKEN).
        throttle_seconds: Delay between symbols to respect rate limits.
        timeout_seconds: Per-request timeout.
        synthetic_fallback: Use Yahoo synthetic depth when Alltick fails.
        symbols: Optional subset of the holdings table.
    """

    alltick_token: Optional[str] = None
    throttle_seconds: float = 5.0
    timeout_seconds: float = 8.0
    synthetic_fallback: bool = True
    symbols: list[str] = field(default_factory=list)
    user_agent: str = "depthsweep/0.3"

    @classmethod
    def from_config(cls, config: ConfigManager, prefix: str = "equities") -> "EquitySettings":
        token = config.get(f"{prefix}.alltick_token") or os.environ.get("ALLTICK_TOKEN") or None
        return cls(
            alltick_token=str(token) if token else None,
            throttle_seconds=config.get_float(f"{prefix}.throttle_seconds", 5.0),
            timeout_seconds=config.get_float(f"{prefix}.timeout_seconds", 8.0),
            synthetic_fallback=config.get_bool(f"{prefix}.synthetic_fallback", default=True),
            symbols=[str(s) for s in config.get_list(f"{prefix}.symbols")],
            user_agent=str(config.get("aggregation.user_agent", "depthsweep/0.3")),
        )
