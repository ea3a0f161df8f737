"""Depth math - merge, augmentation, liquidation sweep, price impact. No I/O."""

from depthsweep.engine.augmentation import DEFAULT_REFERENCE_SOURCE, augment_with_reference
from depthsweep.engine.impact import compute_price_impact
from depthsweep.engine.liquidation import (
    simulate_liquidation,
    simulate_multi_source_liquidation,
)
from depthsweep.engine.merge import merge_depths

__all__ = [
    "merge_depths",
    "augment_with_reference",
    "DEFAULT_REFERENCE_SOURCE",
    "simulate_liquidation",
    "simulate_multi_source_liquidation",
    "compute_price_impact",
]
