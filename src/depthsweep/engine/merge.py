"""Merge per-venue depth into one curve by summing sizes at identical prices.

Prices are compared with plain float equality; venues are expected to quote
at compatible tick sizes, so no tolerance banding is applied.
"""

from typing import Iterable, Sequence

from sortedcontainers import SortedDict

from depthsweep.domain.depth import AggregatedDepth, PriceLevel, SourcedDepth


def _sum_by_price(levels: Iterable[PriceLevel], book: SortedDict) -> None:
    for level in levels:
        book[level.price] = book.get(level.price, 0.0) + level.size


def merge_depths(
    books: Sequence[SourcedDepth],
    skipped_sources: Iterable[str] = (),
) -> AggregatedDepth:
    """Sum sizes across sources at each price.

    Args:
        books: Snapshots that were fetched successfully.
        skipped_sources: Sources the caller attempted but excluded.

    Returns:
        AggregatedDepth with bids highest-first and asks lowest-first.
    """
    # SortedDict keeps prices ascending; bids are read back reversed.
    bid_book: SortedDict = SortedDict()
    ask_book: SortedDict = SortedDict()
    sources: list[str] = []
    synthetic_sources: list[str] = []

    for book in books:
        sources.append(book.source)
        if book.depth.has_synthetic_bids:
            synthetic_sources.append(book.source)
        _sum_by_price(book.depth.bids, bid_book)
        _sum_by_price(book.depth.asks, ask_book)

    bids = tuple(PriceLevel(price, size) for price, size in reversed(bid_book.items()))
    asks = tuple(PriceLevel(price, size) for price, size in ask_book.items())

    return AggregatedDepth(
        bids=bids,
        asks=asks,
        sources=tuple(sources),
        skipped_sources=tuple(skipped_sources),
        synthetic_sources=tuple(synthetic_sources),
    )
