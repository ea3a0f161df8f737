"""Result records produced by the engine.

Plain frozen dataclasses with no behavior beyond derived properties and
``to_dict()`` for JSON reporting.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from depthsweep.domain.depth import SourcedDepth


@dataclass(frozen=True)
class LiquidationResult:
    """Outcome of sweeping bids with a market sell.

    Attributes:
        total_to_sell: Quantity the sweep tried to sell (0 for q <= 0).
        realized_proceeds: Sum of executed size times price.
        average_realized_price: Proceeds per unit sold, 0 when nothing sold.
        exhausted: True when depth ran out before the quantity was filled.
        unsold_quantity: Quantity left over after depth ran out.
        levels_consumed: Number of levels that executed a non-zero size.
    """

    total_to_sell: float
    realized_proceeds: float
    average_realized_price: float
    exhausted: bool
    unsold_quantity: float
    levels_consumed: int

    @property
    def sold_quantity(self) -> float:
        return self.total_to_sell - self.unsold_quantity

    @property
    def unsold_fraction(self) -> float:
        if self.total_to_sell <= 0:
            return 0.0
        return self.unsold_quantity / self.total_to_sell

    def to_dict(self) -> dict:
        return {
            "total_to_sell": self.total_to_sell,
            "sold_quantity": self.sold_quantity,
            "realized_proceeds": self.realized_proceeds,
            "average_realized_price": self.average_realized_price,
            "exhausted": self.exhausted,
            "unsold_quantity": self.unsold_quantity,
            "levels_consumed": self.levels_consumed,
        }


@dataclass(frozen=True)
class SourceBreakdown:
    """Per-venue share of a multi-source sweep.

    Attributes:
        source: Venue identifier.
        sold_quantity: Quantity executed against this venue's bids.
        realized_proceeds: Proceeds from this venue.
        average_price: Proceeds per unit sold, 0 when nothing sold.
        synthetic_quantity: Part of ``sold_quantity`` filled by synthetic
            (extrapolated) levels.
    """

    source: str
    sold_quantity: float
    realized_proceeds: float
    average_price: float
    synthetic_quantity: float = 0.0

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "sold_quantity": self.sold_quantity,
            "realized_proceeds": self.realized_proceeds,
            "average_price": self.average_price,
            "synthetic_quantity": self.synthetic_quantity,
        }


@dataclass(frozen=True)
class MultiSourceLiquidationResult(LiquidationResult):
    """LiquidationResult plus per-source attribution, largest contributor first."""

    breakdown: tuple[SourceBreakdown, ...] = ()

    def for_source(self, source: str) -> Optional[SourceBreakdown]:
        for entry in self.breakdown:
            if entry.source == source:
                return entry
        return None

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["breakdown"] = [entry.to_dict() for entry in self.breakdown]
        return data


@dataclass(frozen=True)
class AugmentationSummary:
    """How much synthetic depth was injected into one venue's bids."""

    source: str
    original_bid_count: int
    augmented_bid_count: int
    synthetic_levels_added: int
    scale_factor: float
    original_min_price: float
    new_min_price: float

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "original_bid_count": self.original_bid_count,
            "augmented_bid_count": self.augmented_bid_count,
            "synthetic_levels_added": self.synthetic_levels_added,
            "scale_factor": self.scale_factor,
            "original_min_price": self.original_min_price,
            "new_min_price": self.new_min_price,
        }


@dataclass(frozen=True)
class AugmentationResult:
    books: tuple[SourcedDepth, ...]
    summaries: tuple[AugmentationSummary, ...] = ()

    @property
    def synthetic_levels_added(self) -> int:
        return sum(s.synthetic_levels_added for s in self.summaries)


@dataclass(frozen=True)
class PriceImpactMetrics:
    """Gap between spot and the sweep's average realized price.

    Attributes:
        spot_price: Reference price before the sell.
        average_realized_price: Average price achieved by the sweep.
        price_difference: spot - average (0 when spot <= 0).
        discount_percent: 1 - average / spot as a fraction (0 when spot <= 0).
    """

    spot_price: float
    average_realized_price: float
    price_difference: float
    discount_percent: float

    def to_dict(self) -> dict:
        return {
            "spot_price": self.spot_price,
            "average_realized_price": self.average_realized_price,
            "price_difference": self.price_difference,
            "discount_percent": self.discount_percent,
        }


@dataclass(frozen=True)
class SpotPrice:
    """Last trade price from a ticker endpoint."""

    product: str
    price: float
    timestamp: datetime
    source: str
    bid: Optional[float] = None
    ask: Optional[float] = None
    volume_24h: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "product": self.product,
            "price": self.price,
            "bid": self.bid,
            "ask": self.ask,
            "volume_24h": self.volume_24h,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
        }


@dataclass(frozen=True)
class FetchOutcome:
    """Result of a fan-out: what succeeded and why the rest were skipped."""

    books: tuple[SourcedDepth, ...] = ()
    skipped: dict[str, str] = field(default_factory=dict)

    @property
    def sources(self) -> tuple[str, ...]:
        return tuple(book.source for book in self.books)

    @property
    def skipped_sources(self) -> tuple[str, ...]:
        return tuple(sorted(self.skipped))
