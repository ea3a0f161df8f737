"""Unit tests for DepthAggregator fan-out.

Tests cover:
- Partial failure (skipped sources)
- Total failure (AggregateFailure)
- Timeouts per attempt
- Retry of transport errors only
- Deterministic ordering of books
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from depthsweep.core.retry import (
    AggregateFailure,
    RetryConfig,
    SchemaError,
    TransportError,
)
from depthsweep.domain.depth import DepthSnapshot, PriceLevel
from depthsweep.services.aggregation import DepthAggregator

NO_RETRY = RetryConfig(max_attempts=1, min_wait_seconds=0, max_wait_seconds=0, jitter=False)
FAST_RETRY = RetryConfig(max_attempts=2, min_wait_seconds=0, max_wait_seconds=0, jitter=False)


class TestDepthAggregator:
    """Tests for DepthAggregator.fetch_all / aggregate."""

    def test_duplicate_names_rejected(self, make_adapter):
        with pytest.raises(ValueError, match="duplicate source names: okx"):
            DepthAggregator([make_adapter("okx", [(1, 1)]), make_adapter("okx", [(1, 1)])])

    @pytest.mark.asyncio
    async def test_failed_source_is_skipped(self, make_adapter):
        adapters = [
            make_adapter("okx", [(100, 1)]),
            make_adapter("bybit", error=SchemaError("bybit: malformed order book response", source="bybit")),
            make_adapter("binance", [(101, 2)]),
        ]
        outcome = await DepthAggregator(adapters, retry=NO_RETRY).fetch_all()

        assert outcome.sources == ("binance", "okx")
        assert outcome.skipped_sources == ("bybit",)
        assert "malformed" in outcome.skipped["bybit"]

    @pytest.mark.asyncio
    async def test_all_failed_raises(self, make_adapter):
        adapters = [
            make_adapter("okx", error=TransportError("okx: HTTP 500")),
            make_adapter("bybit", error=RuntimeError("unexpected")),
        ]
        with pytest.raises(AggregateFailure) as exc_info:
            await DepthAggregator(adapters, retry=NO_RETRY).fetch_all()

        assert set(exc_info.value.skipped) == {"okx", "bybit"}

    @pytest.mark.asyncio
    async def test_no_adapters_raises(self):
        with pytest.raises(AggregateFailure):
            await DepthAggregator([], disabled={"upbit": "no fx"}).fetch_all()

    @pytest.mark.asyncio
    async def test_disabled_venues_reported_as_skipped(self, make_adapter):
        aggregator = DepthAggregator([make_adapter("okx", [(1, 1)])], disabled={"upbit": "no fx"})
        outcome = await aggregator.fetch_all()
        assert outcome.skipped == {"upbit": "no fx"}

    @pytest.mark.asyncio
    async def test_slow_source_times_out_without_blocking_others(self, make_adapter):
        async def never_returns():
            await asyncio.sleep(10)

        slow = MagicMock()
        slow.name = "slow"
        slow.fetch_depth = AsyncMock(side_effect=never_returns)

        aggregator = DepthAggregator(
            [slow, make_adapter("fast", [(100, 1)])], retry=NO_RETRY, timeout_seconds=0.05
        )
        outcome = await aggregator.fetch_all()

        assert outcome.sources == ("fast",)
        assert "no response within" in outcome.skipped["slow"]

    @pytest.mark.asyncio
    async def test_transport_errors_retried(self, make_adapter):
        adapter = make_adapter("okx")
        adapter.fetch_depth = AsyncMock(
            side_effect=[TransportError("okx: HTTP 502"), DepthSnapshot(bids=(PriceLevel(1, 1),))]
        )
        outcome = await DepthAggregator([adapter], retry=FAST_RETRY).fetch_all()

        assert outcome.sources == ("okx",)
        assert adapter.fetch_depth.call_count == 2

    @pytest.mark.asyncio
    async def test_schema_errors_not_retried(self, make_adapter):
        bad = make_adapter("bad", error=SchemaError("bad: malformed"))
        await DepthAggregator([bad, make_adapter("ok", [(1, 1)])], retry=FAST_RETRY).fetch_all()
        assert bad.fetch_depth.call_count == 1

    @pytest.mark.asyncio
    async def test_book_order_independent_of_adapter_order(self, make_adapter):
        def adapters():
            return [make_adapter("okx", [(100, 1)]), make_adapter("binance", [(99, 1)])]

        forward = await DepthAggregator(adapters(), retry=NO_RETRY).fetch_all()
        backward = await DepthAggregator(list(reversed(adapters())), retry=NO_RETRY).fetch_all()

        assert forward.books == backward.books

    @pytest.mark.asyncio
    async def test_aggregate_merges_successes(self, make_adapter):
        adapters = [
            make_adapter("okx", [(100, 1), (99, 1)]),
            make_adapter("binance", [(100, 2)]),
            make_adapter("bybit", error=TransportError("bybit: HTTP 503")),
        ]
        merged = await DepthAggregator(adapters, retry=NO_RETRY).aggregate()

        assert [(l.price, l.size) for l in merged.bids] == [(100, 3), (99, 1)]
        assert merged.sources == ("binance", "okx")
        assert merged.skipped_sources == ("bybit",)
