"""Simulate an immediate market sell that sweeps bids, best price first.

Two entry points:

- ``simulate_liquidation``: one bid list.
- ``simulate_multi_source_liquidation``: several venues pooled into one
  price-priority queue, with per-venue attribution. Exact price ties go to the
  lexically earlier source name so results do not depend on fetch order.

With a single source both produce the same proceeds, average price,
exhaustion flag and unsold quantity.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Union

from depthsweep.domain.depth import PriceLevel, SourcedDepth
from depthsweep.domain.results import (
    LiquidationResult,
    MultiSourceLiquidationResult,
    SourceBreakdown,
)

# PriceLevel, or a bare (price, size) pair
LevelLike = Union[PriceLevel, tuple[float, float]]


@dataclass
class _Fill:
    sold: float = 0.0
    proceeds: float = 0.0
    synthetic: float = 0.0


def _valid_levels(levels: Iterable[LevelLike]) -> Iterator[PriceLevel]:
    """Yield PriceLevels; bare pairs that are not finite and positive are dropped."""
    for level in levels:
        if isinstance(level, PriceLevel):
            yield level
            continue
        price, size = level
        parsed = PriceLevel.parse(price, size)
        if parsed is not None:
            yield parsed


def _check_quantity(quantity: float) -> None:
    if not math.isfinite(quantity):
        raise ValueError(f"quantity to sell must be finite, got {quantity!r}")


def _zero_result() -> LiquidationResult:
    return LiquidationResult(
        total_to_sell=0.0,
        realized_proceeds=0.0,
        average_realized_price=0.0,
        exhausted=False,
        unsold_quantity=0.0,
        levels_consumed=0,
    )


def simulate_liquidation(bids: Iterable[LevelLike], quantity: float) -> LiquidationResult:
    """Sell ``quantity`` into ``bids`` highest price first.

    Args:
        bids: Bid levels in any order.
        quantity: Amount to sell. Values <= 0 give a zero-effect result.

    Returns:
        LiquidationResult for the sweep.

    Raises:
        ValueError: ``quantity`` is NaN or infinite.
    """
    _check_quantity(quantity)
    if quantity <= 0:
        return _zero_result()

    levels = sorted(_valid_levels(bids), key=lambda level: level.price, reverse=True)

    remaining = quantity
    proceeds = 0.0
    levels_consumed = 0
    for level in levels:
        if remaining <= 0:
            break
        executed = min(remaining, level.size)
        proceeds += executed * level.price
        remaining -= executed
        levels_consumed += 1

    sold = quantity - remaining
    return LiquidationResult(
        total_to_sell=quantity,
        realized_proceeds=proceeds,
        average_realized_price=proceeds / sold if sold > 0 else 0.0,
        exhausted=remaining > 0,
        unsold_quantity=remaining,
        levels_consumed=levels_consumed,
    )


def simulate_multi_source_liquidation(
    books: Sequence[SourcedDepth],
    quantity: float,
) -> MultiSourceLiquidationResult:
    """Sell ``quantity`` across all venues' bids in global price priority.

    Args:
        books: One entry per venue; source names must be unique.
        quantity: Amount to sell. Values <= 0 give a zero-effect result.

    Returns:
        MultiSourceLiquidationResult whose breakdown lists every input source,
        largest realized proceeds first (ties by source name).

    Raises:
        ValueError: ``quantity`` is NaN or infinite.
    """
    _check_quantity(quantity)
    fills: dict[str, _Fill] = {book.source: _Fill() for book in books}

    remaining = max(quantity, 0.0)
    proceeds = 0.0
    levels_consumed = 0

    if remaining > 0:
        pool = [
            (level.price, book.source, level.size, level.synthetic)
            for book in books
            for level in _valid_levels(book.depth.bids)
        ]
        # highest price first, then source name ascending
        pool.sort(key=lambda row: (-row[0], row[1]))

        for price, source, size, synthetic in pool:
            if remaining <= 0:
                break
            executed = min(remaining, size)
            value = executed * price
            proceeds += value
            remaining -= executed
            levels_consumed += 1

            fill = fills[source]
            fill.sold += executed
            fill.proceeds += value
            if synthetic:
                fill.synthetic += executed

    total = max(quantity, 0.0)
    sold = total - remaining
    breakdown = sorted(
        (
            SourceBreakdown(
                source=source,
                sold_quantity=fill.sold,
                realized_proceeds=fill.proceeds,
                average_price=fill.proceeds / fill.sold if fill.sold > 0 else 0.0,
                synthetic_quantity=fill.synthetic,
            )
            for source, fill in fills.items()
        ),
        key=lambda entry: (-entry.realized_proceeds, entry.source),
    )

    return MultiSourceLiquidationResult(
        total_to_sell=total,
        realized_proceeds=proceeds,
        average_realized_price=proceeds / sold if sold > 0 else 0.0,
        exhausted=remaining > 0,
        unsold_quantity=remaining,
        levels_consumed=levels_consumed,
        breakdown=tuple(breakdown),
    )
