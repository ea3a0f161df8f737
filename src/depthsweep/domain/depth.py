"""Normalized order-book depth records.

Every venue adapter produces the same shapes defined here, so the merge,
augmentation and liquidation code never needs to know where depth came from.
Levels flagged ``synthetic`` were produced by a heuristic rather than quoted
by a venue and must be reported as such.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class PriceLevel:
    """A single price level.

    Attributes:
        price: Price per unit, finite and strictly positive.
        size: Quantity available at this price, finite and strictly positive.
        synthetic: True when the level was extrapolated, not quoted.
    """

    price: float
    size: float
    synthetic: bool = False

    def __post_init__(self) -> None:
        if not math.isfinite(self.price) or self.price <= 0:
            raise ValueError(f"price must be finite and positive, got {self.price}")
        if not math.isfinite(self.size) or self.size <= 0:
            raise ValueError(f"size must be finite and positive, got {self.size}")

    @classmethod
    def parse(cls, price: Any, size: Any, synthetic: bool = False) -> Optional["PriceLevel"]:
        """Build a level from raw venue values, or None if they are noise.

        Accepts numbers and numeric strings. Non-numeric, non-finite and
        non-positive values yield None instead of raising.
        """
        if isinstance(price, bool) or isinstance(size, bool):
            return None
        try:
            p = float(price)
            s = float(size)
        except (TypeError, ValueError):
            return None
        if not (math.isfinite(p) and math.isfinite(s)) or p <= 0 or s <= 0:
            return None
        return cls(price=p, size=s, synthetic=synthetic)

    def to_dict(self) -> dict:
        return {"price": self.price, "size": self.size, "synthetic": self.synthetic}


def parse_levels(rows: Iterable[Any], price_key: Any = 0, size_key: Any = 1) -> tuple[PriceLevel, ...]:
    """Normalize raw rows into PriceLevels, dropping invalid ones.

    Works for arrays-of-arrays (``price_key=0, size_key=1``) and for keyed
    objects (``price_key="price", size_key="volume"``). Rows that are too
    short or lack the keys are dropped like any other noise.
    """
    levels: list[PriceLevel] = []
    for row in rows:
        try:
            raw_price = row[price_key]
            raw_size = row[size_key]
        except (IndexError, KeyError, TypeError):
            continue
        level = PriceLevel.parse(raw_price, raw_size)
        if level is not None:
            levels.append(level)
    return tuple(levels)


@dataclass(frozen=True)
class DepthSnapshot:
    """Bid and ask levels from one venue request.

    Ordering is whatever the venue returned; use ``sorted_bids()`` when an
    ordering is required. Asks are carried for symmetry only.
    """

    bids: tuple[PriceLevel, ...] = ()
    asks: tuple[PriceLevel, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "bids", tuple(self.bids))
        object.__setattr__(self, "asks", tuple(self.asks))

    @property
    def best_bid(self) -> Optional[float]:
        if not self.bids:
            return None
        return max(level.price for level in self.bids)

    @property
    def min_bid_price(self) -> Optional[float]:
        """Deepest (lowest) quoted bid."""
        if not self.bids:
            return None
        return min(level.price for level in self.bids)

    @property
    def total_bid_size(self) -> float:
        return sum(level.size for level in self.bids)

    @property
    def has_synthetic_bids(self) -> bool:
        return any(level.synthetic for level in self.bids)

    def sorted_bids(self) -> list[PriceLevel]:
        """Bids highest price first."""
        return sorted(self.bids, key=lambda level: level.price, reverse=True)

    def to_dict(self) -> dict:
        return {
            "bids": [level.to_dict() for level in self.bids],
            "asks": [level.to_dict() for level in self.asks],
        }


@dataclass(frozen=True)
class SourcedDepth:
    """A snapshot tagged with the venue that produced it.

    ``source`` must be unique within one run; it is the tie-break key for
    equal prices and the grouping key for per-venue breakdowns.
    """

    source: str
    depth: DepthSnapshot


@dataclass(frozen=True)
class AggregatedDepth:
    """Depth summed by price across sources.

    Attributes:
        bids: Summed bid levels, highest price first.
        asks: Summed ask levels, lowest price first.
        sources: Sources that contributed.
        skipped_sources: Sources that were attempted but failed upstream.
        synthetic_sources: Contributing sources whose bids include
            synthetic levels.
    """

    bids: tuple[PriceLevel, ...] = ()
    asks: tuple[PriceLevel, ...] = ()
    sources: tuple[str, ...] = ()
    skipped_sources: tuple[str, ...] = ()
    synthetic_sources: tuple[str, ...] = ()

    @property
    def total_bid_size(self) -> float:
        return sum(level.size for level in self.bids)

    @property
    def best_bid(self) -> Optional[float]:
        return self.bids[0].price if self.bids else None

    def to_dict(self, levels: Optional[int] = None) -> dict:
        """Serializable form; ``levels`` truncates each side."""
        bids = self.bids if levels is None else self.bids[:levels]
        asks = self.asks if levels is None else self.asks[:levels]
        return {
            "sources": list(self.sources),
            "skipped_sources": list(self.skipped_sources),
            "synthetic_sources": list(self.synthetic_sources),
            "bid_level_count": len(self.bids),
            "ask_level_count": len(self.asks),
            "total_bid_size": self.total_bid_size,
            "bids": [{"price": level.price, "size": level.size} for level in bids],
            "asks": [{"price": level.price, "size": level.size} for level in asks],
        }


@dataclass(frozen=True)
class FxSnapshot:
    """A single FX observation used to convert a quote currency to USD.

    Attributes:
        quote_per_usd: Units of the quote currency per 1 USD (e.g. KRW).
        as_of: When the rate was observed.
        source: Where the rate came from (e.g. "config").
    """

    quote_per_usd: float
    as_of: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source: str = "config"

    def __post_init__(self) -> None:
        if not math.isfinite(self.quote_per_usd) or self.quote_per_usd <= 0:
            raise ValueError(f"quote_per_usd must be positive, got {self.quote_per_usd}")

    def to_usd(self, price: float) -> float:
        return price / self.quote_per_usd

    def to_dict(self) -> dict:
        return {
            "quote_per_usd": self.quote_per_usd,
            "as_of": self.as_of.isoformat(),
            "source": self.source,
        }
