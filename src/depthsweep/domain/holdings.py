"""Static holdings assumptions.

BTC: the commonly cited range for the early-miner (Satoshi) coin stash is
roughly 600k to 1.1M BTC; 1,000,000 BTC is used as a round assumption unless
overridden.

Equities: a static snapshot of a large public equity portfolio (share counts
only). Values are never stored; they are always recomputed by simulated
liquidation.
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_BTC_LOWER = 600_000.0
DEFAULT_BTC_UPPER = 1_100_000.0
DEFAULT_BTC_ASSUMED = 1_000_000.0


@dataclass(frozen=True)
class BtcHoldingsEstimate:
    assumed_btc: float
    lower_btc: float
    upper_btc: float
    note: str

    def to_dict(self) -> dict:
        return {
            "assumed_btc": self.assumed_btc,
            "range_btc": {"lower": self.lower_btc, "upper": self.upper_btc},
            "note": self.note,
        }


def estimate_btc_holdings(
    override_btc: Optional[float] = None,
    lower_btc: float = DEFAULT_BTC_LOWER,
    upper_btc: float = DEFAULT_BTC_UPPER,
    assumed_btc: float = DEFAULT_BTC_ASSUMED,
) -> BtcHoldingsEstimate:
    """Return the BTC quantity to liquidate and its plausible range."""
    return BtcHoldingsEstimate(
        assumed_btc=assumed_btc if override_btc is None else override_btc,
        lower_btc=lower_btc,
        upper_btc=upper_btc,
        note="Estimates sourced from widely cited community / analytic firm heuristics; not exact.",
    )


@dataclass(frozen=True)
class EquityHolding:
    """One position to liquidate.

    Attributes:
        symbol: Ticker in quote-service style (``BRK-B`` rather than ``BRK.B``).
        display_name: Friendly company name.
        shares: Number of shares held.
    """

    symbol: str
    display_name: str
    shares: float

    def to_dict(self) -> dict:
        return {"symbol": self.symbol, "display_name": self.display_name, "shares": self.shares}


@dataclass(frozen=True)
class EquityHoldingsEstimate:
    holdings: tuple[EquityHolding, ...]
    note: str

    @property
    def total_distinct(self) -> int:
        return len(self.holdings)

    def to_dict(self) -> dict:
        return {
            "holdings": [h.to_dict() for h in self.holdings],
            "total_distinct": self.total_distinct,
            "note": self.note,
        }


_EQUITY_HOLDINGS: tuple[EquityHolding, ...] = (
    EquityHolding("MSFT", "Microsoft", 28_457_247),
    EquityHolding("BRK-B", "Berkshire Hathaway (Class B)", 17_172_435),
    EquityHolding("WM", "Waste Management", 32_234_344),
    EquityHolding("CNI", "Canadian National Railway", 54_826_786),
    EquityHolding("CAT", "Caterpillar", 7_353_614),
    EquityHolding("DE", "John Deere", 3_557_378),
    EquityHolding("ECL", "Ecolab", 5_218_044),
)


def get_equity_holdings(symbols: Optional[list[str]] = None) -> EquityHoldingsEstimate:
    """Return the static equity table, optionally filtered to ``symbols``.

    Unknown symbols in the filter are ignored; table order is preserved.
    """
    holdings = _EQUITY_HOLDINGS
    if symbols:
        wanted = {s.upper() for s in symbols}
        holdings = tuple(h for h in holdings if h.symbol in wanted)
    return EquityHoldingsEstimate(
        holdings=holdings,
        note="Static snapshot; not dynamically refreshed.",
    )
