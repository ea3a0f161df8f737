"""Domain models - pure data structures with no I/O dependencies."""

from depthsweep.domain.depth import (
    AggregatedDepth,
    DepthSnapshot,
    FxSnapshot,
    PriceLevel,
    SourcedDepth,
    parse_levels,
)
from depthsweep.domain.holdings import (
    BtcHoldingsEstimate,
    EquityHolding,
    EquityHoldingsEstimate,
    estimate_btc_holdings,
    get_equity_holdings,
)
from depthsweep.domain.results import (
    AugmentationResult,
    AugmentationSummary,
    FetchOutcome,
    LiquidationResult,
    MultiSourceLiquidationResult,
    PriceImpactMetrics,
    SourceBreakdown,
    SpotPrice,
)

__all__ = [
    # Depth
    "PriceLevel",
    "DepthSnapshot",
    "SourcedDepth",
    "AggregatedDepth",
    "FxSnapshot",
    "parse_levels",
    # Results
    "LiquidationResult",
    "MultiSourceLiquidationResult",
    "SourceBreakdown",
    "AugmentationSummary",
    "AugmentationResult",
    "PriceImpactMetrics",
    "SpotPrice",
    "FetchOutcome",
    # Holdings
    "BtcHoldingsEstimate",
    "EquityHolding",
    "EquityHoldingsEstimate",
    "estimate_btc_holdings",
    "get_equity_holdings",
]
