"""
Shared pytest fixtures for depthsweep tests.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from depthsweep.domain.depth import DepthSnapshot, PriceLevel, SourcedDepth


@pytest.fixture
def make_book():
    """Build a SourcedDepth from (price, size) bid pairs."""

    def _make(source, bids, asks=()):
        return SourcedDepth(
            source=source,
            depth=DepthSnapshot(
                bids=tuple(PriceLevel(p, s) for p, s in bids),
                asks=tuple(PriceLevel(p, s) for p, s in asks),
            ),
        )

    return _make


@pytest.fixture
def make_adapter():
    """Build a fake depth adapter whose fetch_depth is an AsyncMock."""

    def _make(name, bids=(), error=None, asks=()):
        adapter = MagicMock()
        adapter.name = name
        if error is not None:
            adapter.fetch_depth = AsyncMock(side_effect=error)
        else:
            adapter.fetch_depth = AsyncMock(
                return_value=DepthSnapshot(
                    bids=tuple(PriceLevel(p, s) for p, s in bids),
                    asks=tuple(PriceLevel(p, s) for p, s in asks),
                )
            )
        return adapter

    return _make


@pytest.fixture(autouse=True)
def _configure_logging():
    """Route logs through the package setup so nothing lands on stdout before the CLI configures logging."""
    from depthsweep.core.logging import setup_logging

    setup_logging(level="WARNING")
