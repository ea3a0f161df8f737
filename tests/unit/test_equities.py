"""Unit tests for the serial equity liquidation service.

Tests cover:
- Alltick success, empty depth and failure rows
- Code candidate fallthrough
- Yahoo synthetic fallback
- Throttling between symbols
- Report totals
- Malformed or unexpected adapter failures stay on their own row
"""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from depthsweep.core.retry import SchemaError, TransportError
from depthsweep.domain.depth import DepthSnapshot, PriceLevel
from depthsweep.domain.holdings import EquityHolding
from depthsweep.services.equities import (
    ERROR_MESSAGE_MAX_CHARS,
    EquityNetWorthService,
)
from depthsweep.settings import EquitySettings


def fake_adapter(name, depth=None, error=None):
    adapter = MagicMock()
    adapter.name = name
    if error is not None:
        adapter.fetch_depth = AsyncMock(side_effect=error)
    else:
        adapter.fetch_depth = AsyncMock(return_value=depth)
    return adapter


def book(*bids):
    return DepthSnapshot(bids=tuple(PriceLevel(p, s) for p, s in bids))


class FakeAlltick:
    """Maps Alltick codes to depth or errors; unknown codes answer ret=600."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, code):
        self.calls.append(code)
        response = self.responses.get(code, SchemaError(f"alltick: ret=600 msg=code invalid code={code}"))
        if isinstance(response, Exception):
            return fake_adapter("alltick", error=response)
        return fake_adapter("alltick", depth=response)


HOLDING = EquityHolding("MSFT", "Microsoft", 100)


class TestLiquidateOne:
    """Tests for EquityNetWorthService.liquidate."""

    @pytest.mark.asyncio
    async def test_alltick_depth_used(self):
        alltick = FakeAlltick({"MSFT.US": book((410, 60), (409, 60))})
        service = EquityNetWorthService(alltick_factory=alltick)

        result = await service.liquidate(HOLDING)

        assert result.order_book_source == "alltick"
        assert result.code == "MSFT.US"
        assert result.realized_proceeds == pytest.approx(410 * 60 + 409 * 40)
        assert result.exhausted is False
        assert result.error_message is None

    @pytest.mark.asyncio
    async def test_falls_through_candidates(self):
        alltick = FakeAlltick({"BRK.B.US": book((450, 1000))})
        service = EquityNetWorthService(alltick_factory=alltick)

        result = await service.liquidate(EquityHolding("BRK-B", "Berkshire", 10))

        assert alltick.calls == ["BRK-B.US", "BRK.B.US"]
        assert result.code == "BRK.B.US"
        assert result.order_book_source == "alltick"

    @pytest.mark.asyncio
    async def test_empty_depth_row(self):
        service = EquityNetWorthService(alltick_factory=FakeAlltick({"MSFT.US": book()}))
        result = await service.liquidate(HOLDING)

        assert result.order_book_source == "alltick-empty"
        assert result.error_message == "empty depth"
        assert result.exhausted is True
        assert result.unsold_shares == 100
        assert result.realized_proceeds == 0

    @pytest.mark.asyncio
    async def test_synthetic_fallback(self):
        fallback = MagicMock(return_value=fake_adapter("yahoo-synthetic", depth=DepthSnapshot(
            bids=(PriceLevel(400, 50, synthetic=True), PriceLevel(399, 100, synthetic=True))
        )))
        service = EquityNetWorthService(alltick_factory=FakeAlltick({}), fallback_factory=fallback)

        result = await service.liquidate(HOLDING)

        fallback.assert_called_once_with("MSFT")
        assert result.order_book_source == "yahoo-synthetic"
        assert result.is_synthetic is True
        assert result.realized_proceeds == pytest.approx(400 * 50 + 399 * 50)

    @pytest.mark.asyncio
    async def test_error_row_when_fallback_disabled(self):
        service = EquityNetWorthService(
            settings=EquitySettings(synthetic_fallback=False),
            alltick_factory=FakeAlltick({}),
        )
        result = await service.liquidate(HOLDING)

        assert result.order_book_source == "alltick-error"
        assert "ret=600" in result.error_message
        assert result.exhausted is True
        assert result.unsold_shares == 100

    @pytest.mark.asyncio
    async def test_error_row_when_fallback_fails(self):
        fallback = MagicMock(return_value=fake_adapter("yahoo-synthetic", error=TransportError("yahoo: HTTP 429")))
        service = EquityNetWorthService(alltick_factory=FakeAlltick({}), fallback_factory=fallback)

        result = await service.liquidate(HOLDING)

        assert result.order_book_source == "alltick-error"
        assert len(result.error_message) <= ERROR_MESSAGE_MAX_CHARS

    @pytest.mark.asyncio
    async def test_error_message_truncated(self):
        long_error = TransportError("alltick: " + "x" * 500)
        service = EquityNetWorthService(
            settings=EquitySettings(synthetic_fallback=False),
            alltick_factory=FakeAlltick({"MSFT.US": long_error}),
        )
        result = await service.liquidate(HOLDING)
        assert len(result.error_message) == ERROR_MESSAGE_MAX_CHARS


class TestCompute:
    """Tests for the serial loop."""

    @pytest.mark.asyncio
    async def test_throttles_between_symbols_only(self):
        sleep = AsyncMock()
        alltick = FakeAlltick({"MSFT.US": book((400, 1e9)), "CAT.US": book((300, 1e9)), "DE.US": book((500, 1e9))})
        service = EquityNetWorthService(
            settings=EquitySettings(throttle_seconds=5.0),
            alltick_factory=alltick,
            sleep=sleep,
        )

        report = await service.compute(["MSFT", "CAT", "DE"])

        assert [s.symbol for s in report.stocks] == ["MSFT", "CAT", "DE"]
        assert sleep.await_count == 2
        sleep.assert_awaited_with(5.0)

    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_the_loop(self):
        alltick = FakeAlltick({"MSFT.US": book((400, 1e9)), "CAT.US": TransportError("alltick: HTTP 500")})
        service = EquityNetWorthService(
            settings=EquitySettings(throttle_seconds=0, synthetic_fallback=False),
            alltick_factory=alltick,
            sleep=AsyncMock(),
        )

        report = await service.compute(["MSFT", "CAT"])
        sources = {s.symbol: s.order_book_source for s in report.stocks}

        assert sources == {"MSFT": "alltick", "CAT": "alltick-error"}
        assert report.total_realized_proceeds == pytest.approx(400 * 28_457_247)

    @pytest.mark.asyncio
    async def test_configured_symbols_used_by_default(self):
        service = EquityNetWorthService(
            settings=EquitySettings(throttle_seconds=0, symbols=["ECL"]),
            alltick_factory=FakeAlltick({"ECL.US": book((200, 1e9))}),
        )
        report = await service.compute()

        assert [s.symbol for s in report.stocks] == ["ECL"]
        assert report.holdings.total_distinct == 1

    @pytest.mark.asyncio
    async def test_to_dict(self):
        service = EquityNetWorthService(
            settings=EquitySettings(throttle_seconds=0),
            alltick_factory=FakeAlltick({"WM.US": book((200, 10))}),
        )
        data = (await service.compute(["WM"])).to_dict()

        assert data["stocks"][0]["order_book_source"] == "alltick"
        assert data["stocks"][0]["exhausted"] is True
        assert data["total_realized_proceeds"] == pytest.approx(2000)
        assert "yahoo-synthetic" in data["note"]


def alltick_client(ticks):
    """AsyncClient answering Alltick queries from ``ticks`` (code -> tick dict)."""

    def handler(request: httpx.Request) -> httpx.Response:
        query = json.loads(request.url.params["query"])
        code = query["data"]["symbol_list"][0]["code"]
        if code not in ticks:
            return httpx.Response(200, json={"ret": 600, "msg": "code invalid", "data": None})
        return httpx.Response(200, json={"ret": 200, "msg": "ok", "data": {"tick_list": [ticks[code]]}})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestMalformedResponses:
    """A bad answer for one symbol only affects that symbol's row."""

    @pytest.mark.asyncio
    async def test_malformed_depth_then_healthy_symbol(self):
        ticks = {
            "MSFT.US": {"code": "MSFT.US", "bids": 1, "asks": []},
            "CAT.US": {"code": "CAT.US", "bids": [{"price": "300", "volume": "1e9"}], "asks": []},
        }
        async with alltick_client(ticks) as client:
            service = EquityNetWorthService(
                settings=EquitySettings(throttle_seconds=0, synthetic_fallback=False),
                client=client,
            )
            report = await service.compute(["MSFT", "CAT"])

        msft, cat = report.stocks
        assert msft.order_book_source == "alltick-error"
        assert "not lists" in msft.error_message
        assert msft.unsold_shares == msft.shares_to_sell
        assert cat.order_book_source == "alltick"
        assert cat.exhausted is False

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_error_row(self):
        alltick = MagicMock(return_value=fake_adapter("alltick", error=RuntimeError("boom")))
        service = EquityNetWorthService(
            settings=EquitySettings(synthetic_fallback=False),
            alltick_factory=alltick,
        )

        result = await service.liquidate(HOLDING)

        assert result.order_book_source == "alltick-error"
        assert result.error_message == "RuntimeError: boom"

    @pytest.mark.asyncio
    async def test_unexpected_fallback_exception_becomes_error_row(self):
        fallback = MagicMock(return_value=fake_adapter("yahoo-synthetic", error=KeyError("quote")))
        service = EquityNetWorthService(alltick_factory=FakeAlltick({}), fallback_factory=fallback)

        result = await service.liquidate(HOLDING)

        assert result.order_book_source == "alltick-error"
        assert "fallback: KeyError" in result.error_message
