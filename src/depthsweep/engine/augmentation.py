"""Extrapolate bid depth for shallow venues from a deeper reference venue.

Some public depth endpoints expose far fewer levels than others. Without
help, a sweep "runs out" of those venues long before their real liquidity is
gone. For each shallow venue we copy the reference venue's bids that lie
below the venue's deepest quote, scaled by how the two venues compare in the
price region they both cover:

    scale = own size at price >= own_min / reference size at price >= own_min

The result is a heuristic, not measured liquidity; every added level carries
``synthetic=True`` and each venue gets an AugmentationSummary.
"""

from typing import Sequence

from depthsweep.core.logging import get_logger
from depthsweep.domain.depth import DepthSnapshot, PriceLevel, SourcedDepth
from depthsweep.domain.results import AugmentationResult, AugmentationSummary

log = get_logger(__name__)

DEFAULT_REFERENCE_SOURCE = "coinbase"


def _unchanged_summary(source: str, bids: Sequence[PriceLevel]) -> AugmentationSummary:
    min_price = min((level.price for level in bids), default=0.0)
    return AugmentationSummary(
        source=source,
        original_bid_count=len(bids),
        augmented_bid_count=len(bids),
        synthetic_levels_added=0,
        scale_factor=1.0,
        original_min_price=min_price,
        new_min_price=min_price,
    )


def _augment_one(
    book: SourcedDepth,
    reference_bids: Sequence[PriceLevel],
) -> tuple[SourcedDepth, AugmentationSummary]:
    own_bids = book.depth.bids
    if not own_bids or not reference_bids:
        return book, _unchanged_summary(book.source, own_bids)

    own_min = min(level.price for level in own_bids)
    reference_min = min(level.price for level in reference_bids)
    if reference_min >= own_min:
        return book, _unchanged_summary(book.source, own_bids)

    reference_overlap = sum(level.size for level in reference_bids if level.price >= own_min)
    own_overlap = sum(level.size for level in own_bids if level.price >= own_min)
    scale = own_overlap / reference_overlap if reference_overlap > 0 else 1.0

    synthetic: list[PriceLevel] = []
    for level in reference_bids:
        if level.price >= own_min:
            continue
        size = level.size * scale
        if size > 0:
            synthetic.append(PriceLevel(level.price, size, synthetic=True))

    new_bids = sorted(
        list(own_bids) + synthetic, key=lambda level: level.price, reverse=True
    )
    summary = AugmentationSummary(
        source=book.source,
        original_bid_count=len(own_bids),
        augmented_bid_count=len(new_bids),
        synthetic_levels_added=len(synthetic),
        scale_factor=scale,
        original_min_price=own_min,
        new_min_price=new_bids[-1].price,
    )
    augmented = SourcedDepth(
        source=book.source,
        depth=DepthSnapshot(bids=tuple(new_bids), asks=book.depth.asks),
    )
    return augmented, summary


def augment_with_reference(
    books: Sequence[SourcedDepth],
    reference_source: str = DEFAULT_REFERENCE_SOURCE,
) -> AugmentationResult:
    """Augment every non-reference book using the reference book's bids.

    Args:
        books: Successfully fetched books.
        reference_source: Source name of the deep reference venue.

    Returns:
        AugmentationResult with books in input order and one summary per
        non-reference book. If the reference is absent, books are returned
        unchanged with no summaries.
    """
    reference = next((b for b in books if b.source == reference_source), None)
    if reference is None:
        log.info("augmentation_skipped", reason="reference_missing", reference=reference_source)
        return AugmentationResult(books=tuple(books), summaries=())

    reference_bids = reference.depth.sorted_bids()
    out_books: list[SourcedDepth] = []
    summaries: list[AugmentationSummary] = []

    for book in books:
        if book is reference:
            out_books.append(book)
            continue
        augmented, summary = _augment_one(book, reference_bids)
        out_books.append(augmented)
        summaries.append(summary)
        if summary.synthetic_levels_added:
            log.debug(
                "depth_augmented",
                source=book.source,
                synthetic_levels=summary.synthetic_levels_added,
                scale_factor=summary.scale_factor,
            )

    return AugmentationResult(books=tuple(out_books), summaries=tuple(summaries))
