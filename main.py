# main.py

"""Entry point for the price_watch tracker."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("price_watch.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="price_watch",
        description=(
            "Check product pages, record prices and e-mail an alert "
            "when a price reaches its target."
        ),
    )
    parser.add_argument(
        "--products",
        type=Path,
        default=None,
        help=f"Products JSON file (default: {Settings.PRODUCTS_PATH}).",
    )
    parser.add_argument(
        "--history-file",
        type=Path,
        default=None,
        dest="history_file",
        help=f"Price history ledger (default: {Settings.HISTORY_PATH}).",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=None,
        help=(
            "Seconds to wait for a price on each page "
            f"(default: {Settings.FETCH_TIMEOUT:g})."
        ),
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Log alerts instead of sending e-mail.",
    )
    parser.add_argument(
        "--no-snapshots",
        action="store_false",
        default=True,
        dest="save_snapshots",
        help="Do not keep fetched HTML under logs/.",
    )
    parser.add_argument(
        "--history",
        metavar="NAME",
        default=None,
        help="Show the recorded price history of one product and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Show progress messages on the console.",
    )
    return parser


def main() -> None:
    """Run a price check, or show history with ``--history``."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")

    log_file = setup_logging(verbose=args.verbose)
    logger.info("price_watch starting, log file: %s", log_file)

    from src.cli.runner import run_price_check, show_history

    if args.history is not None:
        sys.exit(show_history(args.history, args.history_file))

    exit_code = asyncio.run(
        run_price_check(
            products_path=args.products,
            history_path=args.history_file,
            timeout=args.timeout,
            dry_run=args.dry_run,
            save_snapshots=args.save_snapshots,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
