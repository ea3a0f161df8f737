"""BTC net-worth report: what would liquidating the holdings actually realize?

Pipeline for one run:
    holdings estimate -> concurrent venue fetch -> optional augmentation ->
    multi-source sweep -> merged depth summary -> spot reference -> impact

A spot price failure never fails the report; the impact section is simply
omitted. Venue failures are reported as skipped sources.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import httpx

from depthsweep.core.logging import get_logger
from depthsweep.domain.depth import AggregatedDepth, FxSnapshot
from depthsweep.domain.holdings import BtcHoldingsEstimate, estimate_btc_holdings
from depthsweep.domain.results import (
    AugmentationSummary,
    MultiSourceLiquidationResult,
    PriceImpactMetrics,
    SpotPrice,
)
from depthsweep.engine import (
    augment_with_reference,
    compute_price_impact,
    merge_depths,
    simulate_multi_source_liquidation,
)
from depthsweep.integrations.price_feeds import CoinbaseSpotPriceFeed, SpotPriceFeed
from depthsweep.integrations.venues import build_btc_adapters
from depthsweep.services.aggregation import DepthAggregator
from depthsweep.settings import SweepSettings

log = get_logger(__name__)


@dataclass(frozen=True)
class BtcNetWorthReport:
    """Everything a caller needs to present one BTC liquidation run."""

    holdings: BtcHoldingsEstimate
    liquidation: MultiSourceLiquidationResult
    depth: AggregatedDepth
    skipped: dict[str, str] = field(default_factory=dict)
    augmentation: tuple[AugmentationSummary, ...] = ()
    spot: Optional[SpotPrice] = None
    price_impact: Optional[PriceImpactMetrics] = None
    fx: Optional[FxSnapshot] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def sources(self) -> tuple[str, ...]:
        return self.depth.sources

    @property
    def skipped_sources(self) -> tuple[str, ...]:
        return tuple(sorted(self.skipped))

    @property
    def synthetic_sources(self) -> tuple[str, ...]:
        return self.depth.synthetic_sources

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "holdings": self.holdings.to_dict(),
            "liquidation": self.liquidation.to_dict(),
            "sources": list(self.sources),
            "skipped_sources": {name: self.skipped[name] for name in self.skipped_sources},
            "synthetic_sources": list(self.synthetic_sources),
            "augmentation": [summary.to_dict() for summary in self.augmentation],
            "merged_depth": self.depth.to_dict(levels=10),
            "spot": self.spot.to_dict() if self.spot else None,
            "price_impact": self.price_impact.to_dict() if self.price_impact else None,
            "fx": self.fx.to_dict() if self.fx else None,
        }


class BtcNetWorthService:
    """Run the BTC liquidation simulation end to end.

    Args:
        aggregator: Fan-out over the configured venues.
        spot_feed: Spot reference; None skips the impact section.
        settings: Holdings defaults, reference venue and augmentation flag.
    """

    def __init__(
        self,
        aggregator: DepthAggregator,
        spot_feed: Optional[SpotPriceFeed] = None,
        settings: Optional[SweepSettings] = None,
    ):
        self._aggregator = aggregator
        self._spot_feed = spot_feed
        self._settings = settings or SweepSettings()
        self._log = log.bind(component="btc_networth")

    @classmethod
    def from_settings(
        cls,
        settings: SweepSettings,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "BtcNetWorthService":
        """Wire adapters, aggregator and spot feed from settings."""
        venue_set = build_btc_adapters(settings, client=client)
        aggregator = DepthAggregator(
            venue_set.adapters,
            retry=settings.retry,
            timeout_seconds=settings.timeout_seconds,
            disabled=venue_set.disabled,
        )
        spot_feed = CoinbaseSpotPriceFeed(
            timeout=settings.timeout_seconds,
            client=client,
            user_agent=settings.user_agent,
        )
        return cls(aggregator, spot_feed=spot_feed, settings=settings)

    async def compute(self, override_btc: Optional[float] = None) -> BtcNetWorthReport:
        """Build the report.

        Raises:
            AggregateFailure: No venue returned depth.
        """
        settings = self._settings
        holdings = estimate_btc_holdings(
            override_btc,
            lower_btc=settings.lower_btc,
            upper_btc=settings.upper_btc,
            assumed_btc=settings.assumed_btc,
        )
        outcome = await self._aggregator.fetch_all()

        books = outcome.books
        summaries: tuple[AugmentationSummary, ...] = ()
        if settings.augment:
            augmented = augment_with_reference(books, settings.reference_venue)
            books, summaries = augmented.books, augmented.summaries

        liquidation = simulate_multi_source_liquidation(books, holdings.assumed_btc)
        depth = merge_depths(books, outcome.skipped_sources)

        spot = await self._fetch_spot()
        impact = (
            compute_price_impact(spot.price, liquidation.average_realized_price)
            if spot is not None
            else None
        )

        self._log.info(
            "btc_liquidation_simulated",
            quantity=holdings.assumed_btc,
            proceeds=liquidation.realized_proceeds,
            average_price=liquidation.average_realized_price,
            exhausted=liquidation.exhausted,
            sources=list(outcome.sources),
            skipped=list(outcome.skipped_sources),
        )

        return BtcNetWorthReport(
            holdings=holdings,
            liquidation=liquidation,
            depth=depth,
            skipped=dict(outcome.skipped),
            augmentation=summaries,
            spot=spot,
            price_impact=impact,
            fx=settings.fx,
        )

    async def _fetch_spot(self) -> Optional[SpotPrice]:
        if self._spot_feed is None:
            return None
        try:
            return await self._spot_feed.get_spot_price(self._settings.spot_product)
        except Exception as e:
            # the report stands without a spot reference
            self._log.warning(
                "spot_price_unavailable",
                source=self._spot_feed.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
