"""depthsweep - Entry Point

Usage:
    python -m depthsweep [--config PATH] [--log-level LEVEL] [--json] COMMAND

Commands:
    btc      - Simulate liquidating BTC holdings across venues (default)
    equities - Simulate liquidating the equity holdings table
    version  - Show version

Examples:
    python -m depthsweep btc
    python -m depthsweep btc --btc 900000
    python -m depthsweep --json --config config/default.toml equities
"""

import argparse
import asyncio
import math
import sys
from pathlib import Path
from typing import Optional

from depthsweep import __version__


def finite_float(value: str) -> float:
    """argparse type for a finite number (rejects nan and inf)."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"must be finite: {value!r}")
    return number


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="depthsweep",
        description="Order-book depth aggregation and liquidation simulation",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"depthsweep {__version__}",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (TOML)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    btc = subparsers.add_parser("btc", help="BTC multi-venue liquidation")
    btc.add_argument(
        "--btc",
        type=finite_float,
        default=None,
        help="Override assumed BTC holdings (default 1,000,000)",
    )

    subparsers.add_parser("equities", help="Equity holdings liquidation")

    subparsers.add_parser("version", help="Show version")

    return parser.parse_args(argv)


def find_config_file(specified: Optional[Path]) -> Optional[Path]:
    """Find configuration file."""
    if specified and specified.exists():
        return specified

    search_paths = [
        Path("config/default.toml"),
        Path("depthsweep.toml"),
    ]

    for path in search_paths:
        if path.exists():
            return path

    return None


async def run_command(args: argparse.Namespace) -> int:
    """Run the btc or equities report and print it to stdout."""
    from depthsweep.core.config import ConfigManager
    from depthsweep.core.logging import get_logger, setup_logging
    from depthsweep.core.retry import AggregateFailure
    from depthsweep.report import format_report, to_json
    from depthsweep.services import BtcNetWorthService, EquityNetWorthService
    from depthsweep.settings import EquitySettings, SweepSettings

    config_path = find_config_file(args.config)
    config = ConfigManager(config_path) if config_path else ConfigManager()

    setup_logging(
        level=args.log_level or str(config.get("logging.level", "WARNING")),
        json_output=config.get_bool("logging.json", default=False),
        log_file=config.get("logging.file"),
    )
    log = get_logger("cli")
    command = args.command or "btc"
    log.info(
        "starting_depthsweep",
        version=__version__,
        command=command,
        config=str(config_path) if config_path else "defaults",
    )

    try:
        if command == "equities":
            service = EquityNetWorthService(EquitySettings.from_config(config))
            report = await service.compute()
        else:
            btc_service = BtcNetWorthService.from_settings(SweepSettings.from_config(config))
            report = await btc_service.compute(override_btc=getattr(args, "btc", None))
    except AggregateFailure as e:
        log.error("aggregate_failure", error=str(e), skipped=e.skipped)
        print(f"Failed to compute net worth: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        log.error("fatal_error", error=str(e), error_type=type(e).__name__)
        print(f"Failed to compute net worth: {e}", file=sys.stderr)
        return 1

    print(to_json(report) if args.json else format_report(report))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.command == "version":
        print(f"depthsweep {__version__}")
        return 0

    return asyncio.run(run_command(args))


if __name__ == "__main__":
    sys.exit(main())
