"""Render net-worth reports as plain text or JSON.

Text output always surfaces the caveats: exhausted depth, unsold share,
skipped venues and synthetic depth are printed whenever they apply.
"""

import json
from typing import Union

from depthsweep.services.equities import EquityNetWorthReport
from depthsweep.services.networth import BtcNetWorthReport

Report = Union[BtcNetWorthReport, EquityNetWorthReport]


def _usd(value: float, digits: int = 0) -> str:
    return f"${value:,.{digits}f}"


def format_btc_report(report: BtcNetWorthReport) -> str:
    holdings = report.holdings
    liquidation = report.liquidation
    lines = [
        f"Timestamp: {report.timestamp.isoformat()}",
        (
            f"Assumed holdings: {holdings.assumed_btc:,.0f} BTC "
            f"(range {holdings.lower_btc:,.0f} - {holdings.upper_btc:,.0f} BTC)"
        ),
        f"Sources: {', '.join(report.sources)}",
    ]
    if report.skipped:
        lines.append("Skipped sources:")
        for name in report.skipped_sources:
            lines.append(f"  {name}: {report.skipped[name]}")

    if liquidation.exhausted:
        lines.append("Warning: order book depth insufficient to fully liquidate at snapshot prices.")

    lines.append("Simulated immediate liquidation (sweeping bids across venues):")
    lines.append(f"  Realized USD: {_usd(liquidation.realized_proceeds)}")
    lines.append(f"  Average realized price: {_usd(liquidation.average_realized_price, 2)} per BTC")
    lines.append(
        f"  Unsold (insufficient bids): {liquidation.unsold_quantity:,.2f} BTC "
        f"({liquidation.unsold_fraction * 100:.4f}%)"
    )
    lines.append(f"  Levels consumed: {liquidation.levels_consumed:,}")

    lines.append("Per-source breakdown:")
    for entry in liquidation.breakdown:
        label = f"  {entry.source}: {entry.sold_quantity:,.4f} BTC -> {_usd(entry.realized_proceeds)}"
        if entry.sold_quantity > 0:
            label += f" (avg {_usd(entry.average_price, 2)})"
        if entry.synthetic_quantity > 0:
            label += f" [synthetic: {entry.synthetic_quantity:,.4f} BTC]"
        lines.append(label)

    augmented = [s for s in report.augmentation if s.synthetic_levels_added]
    if augmented:
        lines.append("Synthetic depth (extrapolated from reference venue, approximate):")
        for summary in augmented:
            lines.append(
                f"  {summary.source}: +{summary.synthetic_levels_added} levels, "
                f"scale {summary.scale_factor:.4f}, min bid "
                f"{_usd(summary.original_min_price, 2)} -> {_usd(summary.new_min_price, 2)}"
            )

    if report.spot is not None and report.price_impact is not None:
        impact = report.price_impact
        lines.append(f"Spot price now: {_usd(report.spot.price, 2)} per BTC")
        lines.append(
            f"Price impact (average vs spot): -{_usd(impact.price_difference, 2)} "
            f"({impact.discount_percent * 100:.2f}% discount)"
        )
    else:
        lines.append("Spot price unavailable (ticker fetch failed).")

    if report.fx is not None:
        lines.append(
            f"FX: {report.fx.quote_per_usd:,.2f} KRW/USD as of {report.fx.as_of.isoformat()} "
            f"({report.fx.source})"
        )
    return "\n".join(lines)


def format_equity_report(report: EquityNetWorthReport) -> str:
    lines = [
        f"Timestamp: {report.timestamp.isoformat()}",
        "Public equity holdings (depth liquidation):",
    ]
    for stock in report.stocks:
        status = " (INSUFFICIENT DEPTH)" if stock.exhausted else ""
        source = f" [{stock.order_book_source}]"
        lines.append(f"  {stock.symbol}:{source}")
        lines.append(
            f"    Shares: {stock.shares_to_sell:,.0f}  Realized: {_usd(stock.realized_proceeds)}  "
            f"Avg: {_usd(stock.average_realized_price, 2)}{status}"
        )
        if stock.unsold_shares > 0:
            lines.append(
                f"    Unsold: {stock.unsold_shares:,.0f} shares ({stock.unsold_fraction * 100:.2f}%)"
            )
        if stock.is_synthetic:
            lines.append("    Note: synthetic depth from quote data (approximation)")
        if stock.error_message:
            lines.append(f"    Note: {stock.error_message}")
    lines.append(f"Total realized USD: {_usd(report.total_realized_proceeds)}")
    lines.append(report.note)
    return "\n".join(lines)


def format_report(report: Report) -> str:
    if isinstance(report, BtcNetWorthReport):
        return format_btc_report(report)
    return format_equity_report(report)


def to_json(report: Report) -> str:
    return json.dumps(report.to_dict(), indent=2)
