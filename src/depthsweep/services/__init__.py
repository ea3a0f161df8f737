"""Services - orchestration of fetch, simulation and reporting."""

from depthsweep.services.aggregation import DepthAggregator
from depthsweep.services.equities import (
    EquityNetWorthReport,
    EquityNetWorthService,
    StockLiquidationResult,
)
from depthsweep.services.networth import BtcNetWorthReport, BtcNetWorthService

__all__ = [
    "DepthAggregator",
    "BtcNetWorthService",
    "BtcNetWorthReport",
    "EquityNetWorthService",
    "EquityNetWorthReport",
    "StockLiquidationResult",
]
