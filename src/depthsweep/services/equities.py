"""Equity liquidation report over the static holdings table.

Symbols are processed one at a time with a fixed delay between them to stay
under the depth provider's rate limit. For each symbol the Alltick code
candidates are tried in order; the first that answers wins. When none
answers, the Yahoo quote-based synthetic ladder is used if enabled.

One symbol's failure never aborts the loop; it produces a row with
``order_book_source="alltick-error"`` and a truncated error message.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

import httpx

from depthsweep.core.logging import get_logger
from depthsweep.core.retry import FetchError
from depthsweep.domain.holdings import (
    EquityHolding,
    EquityHoldingsEstimate,
    get_equity_holdings,
)
from depthsweep.domain.results import LiquidationResult
from depthsweep.engine.liquidation import simulate_liquidation
from depthsweep.integrations.venues import (
    AlltickDepthAdapter,
    DepthAdapter,
    YahooSyntheticDepthAdapter,
    code_candidates,
)
from depthsweep.settings import EquitySettings

log = get_logger(__name__)

SOURCE_ALLTICK = "alltick"
SOURCE_ALLTICK_EMPTY = "alltick-empty"
SOURCE_ALLTICK_ERROR = "alltick-error"
SOURCE_SYNTHETIC = "yahoo-synthetic"

ERROR_MESSAGE_MAX_CHARS = 160

REPORT_NOTE = (
    "Liquidation uses Alltick L2 depth. Totals reflect available levels only. "
    "Rows sourced from 'yahoo-synthetic' are quote-based approximations, and "
    "'alltick-error' rows usually mean no code mapping was recognized (ret=600)."
)

AdapterFactory = Callable[[str], DepthAdapter]
Sleeper = Callable[[float], Awaitable[None]]


def _describe(error: Exception) -> str:
    # FetchError messages already carry the source tag
    if isinstance(error, FetchError):
        return str(error)
    return f"{type(error).__name__}: {error}"


@dataclass(frozen=True)
class StockLiquidationResult:
    """Sweep outcome for one equity position.

    Attributes:
        symbol: Ticker from the holdings table.
        shares_to_sell: Position size.
        order_book_source: One of alltick, alltick-empty, yahoo-synthetic,
            alltick-error.
        code: Alltick code that answered, if any.
        error_message: Diagnostic for empty or failed rows.
    """

    symbol: str
    shares_to_sell: float
    realized_proceeds: float
    average_realized_price: float
    exhausted: bool
    unsold_shares: float
    levels_consumed: int
    order_book_source: str
    code: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def from_liquidation(
        cls,
        holding: EquityHolding,
        result: LiquidationResult,
        source: str,
        code: Optional[str] = None,
    ) -> "StockLiquidationResult":
        return cls(
            symbol=holding.symbol,
            shares_to_sell=holding.shares,
            realized_proceeds=result.realized_proceeds,
            average_realized_price=result.average_realized_price,
            exhausted=result.exhausted,
            unsold_shares=result.unsold_quantity,
            levels_consumed=result.levels_consumed,
            order_book_source=source,
            code=code,
        )

    @classmethod
    def unfilled(
        cls,
        holding: EquityHolding,
        source: str,
        message: str,
        code: Optional[str] = None,
    ) -> "StockLiquidationResult":
        """Row for a symbol with no usable depth: nothing sold."""
        return cls(
            symbol=holding.symbol,
            shares_to_sell=holding.shares,
            realized_proceeds=0.0,
            average_realized_price=0.0,
            exhausted=True,
            unsold_shares=holding.shares,
            levels_consumed=0,
            order_book_source=source,
            code=code,
            error_message=message[:ERROR_MESSAGE_MAX_CHARS],
        )

    @property
    def is_synthetic(self) -> bool:
        return self.order_book_source == SOURCE_SYNTHETIC

    @property
    def unsold_fraction(self) -> float:
        if self.shares_to_sell <= 0:
            return 0.0
        return self.unsold_shares / self.shares_to_sell

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "shares_to_sell": self.shares_to_sell,
            "realized_proceeds": self.realized_proceeds,
            "average_realized_price": self.average_realized_price,
            "exhausted": self.exhausted,
            "unsold_shares": self.unsold_shares,
            "levels_consumed": self.levels_consumed,
            "order_book_source": self.order_book_source,
            "code": self.code,
            "error_message": self.error_message,
        }


@dataclass(frozen=True)
class EquityNetWorthReport:
    holdings: EquityHoldingsEstimate
    stocks: tuple[StockLiquidationResult, ...]
    note: str = REPORT_NOTE
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_realized_proceeds(self) -> float:
        return sum(stock.realized_proceeds for stock in self.stocks)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "holdings": self.holdings.to_dict(),
            "stocks": [stock.to_dict() for stock in self.stocks],
            "total_realized_proceeds": self.total_realized_proceeds,
            "note": self.note,
        }


class EquityNetWorthService:
    """Serial Alltick-first liquidation loop.

    ``alltick_factory`` and ``fallback_factory`` build an adapter for a code
    or symbol; the defaults use the real Alltick and Yahoo adapters. ``sleep``
    is the throttle primitive.
    """

    def __init__(
        self,
        settings: Optional[EquitySettings] = None,
        client: Optional[httpx.AsyncClient] = None,
        alltick_factory: Optional[AdapterFactory] = None,
        fallback_factory: Optional[AdapterFactory] = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        self._settings = settings or EquitySettings()
        self._client = client
        self._alltick_factory = alltick_factory or self._default_alltick
        self._fallback_factory = fallback_factory or self._default_fallback
        self._sleep = sleep
        self._log = log.bind(component="equity_networth")

    def _adapter_kwargs(self) -> dict:
        return {
            "timeout": self._settings.timeout_seconds,
            "client": self._client,
            "user_agent": self._settings.user_agent,
        }

    def _default_alltick(self, code: str) -> DepthAdapter:
        return AlltickDepthAdapter(code, token=self._settings.alltick_token, **self._adapter_kwargs())

    def _default_fallback(self, symbol: str) -> DepthAdapter:
        return YahooSyntheticDepthAdapter(symbol, **self._adapter_kwargs())

    async def compute(self, symbols: Optional[list[str]] = None) -> EquityNetWorthReport:
        """Liquidate every holding in table order.

        Args:
            symbols: Optional subset; defaults to the configured symbols,
                or the whole table when none are configured.
        """
        holdings = get_equity_holdings(symbols or self._settings.symbols or None)
        throttle = self._settings.throttle_seconds

        stocks: list[StockLiquidationResult] = []
        for i, holding in enumerate(holdings.holdings):
            stock = await self.liquidate(holding)
            stocks.append(stock)
            self._log.info(
                "stock_liquidated",
                symbol=holding.symbol,
                source=stock.order_book_source,
                proceeds=stock.realized_proceeds,
                exhausted=stock.exhausted,
            )
            if i < len(holdings.holdings) - 1 and throttle > 0:
                await self._sleep(throttle)

        return EquityNetWorthReport(holdings=holdings, stocks=tuple(stocks))

    async def liquidate(self, holding: EquityHolding) -> StockLiquidationResult:
        """Simulate selling one position.

        Never raises for a data failure: any exception from an adapter becomes
        an error row so the loop can move on to the next symbol.
        """
        last_error = "no valid Alltick code mapping"
        for code in code_candidates(holding.symbol):
            try:
                depth = await self._alltick_factory(code).fetch_depth()
            except Exception as e:
                last_error = _describe(e)
                self._log.debug(
                    "alltick_code_failed",
                    symbol=holding.symbol,
                    code=code,
                    error=last_error,
                    error_type=type(e).__name__,
                )
                continue

            if not depth.bids:
                return StockLiquidationResult.unfilled(
                    holding, SOURCE_ALLTICK_EMPTY, "empty depth", code=code
                )
            result = simulate_liquidation(depth.bids, holding.shares)
            return StockLiquidationResult.from_liquidation(
                holding, result, SOURCE_ALLTICK, code=code
            )

        if self._settings.synthetic_fallback:
            try:
                depth = await self._fallback_factory(holding.symbol).fetch_depth()
            except Exception as e:
                self._log.warning(
                    "synthetic_fallback_failed",
                    symbol=holding.symbol,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                last_error = f"{last_error}; fallback: {_describe(e)}"
            else:
                self._log.warning("using_synthetic_depth", symbol=holding.symbol, alltick_error=last_error)
                result = simulate_liquidation(depth.bids, holding.shares)
                return StockLiquidationResult.from_liquidation(holding, result, SOURCE_SYNTHETIC)

        return StockLiquidationResult.unfilled(holding, SOURCE_ALLTICK_ERROR, last_error)
