# main.py

"""Entry point for the crossmatch command-line tool."""

import argparse
import asyncio
import logging
import sys

from crossmatch.config.logging_config import setup_logging
from crossmatch.config.settings import Settings

logger = logging.getLogger("crossmatch.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = [p["id"] for p in Settings.AVAILABLE_PROVIDERS]

    parser = argparse.ArgumentParser(
        prog="crossmatch",
        description=(
            "Find the same product on the other marketplace, "
            "ranked by confidence."
        ),
        epilog=f"Available platforms: {', '.join(valid_ids)}",
    )
    parser.add_argument(
        "platform",
        nargs="?",
        default=None,
        choices=valid_ids,
        help="Marketplace the source listing lives on.",
    )
    parser.add_argument(
        "product_id",
        nargs="?",
        default=None,
        help="Listing id on that marketplace (ASIN or eBay item id).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Show INFO-level progress on the console.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Check configuration and connectivity of all providers.",
    )
    return parser


def _run_match(args: argparse.Namespace) -> None:
    """Match a single listing and exit."""
    from crossmatch.cli.runner import cli_match

    exit_code = cli_match(
        platform_id=args.platform,
        product_id=args.product_id,
        output_format=args.output_format,
    )
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run provider health check."""
    from crossmatch.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to the health check or a single match run."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(
        console_level="INFO" if args.verbose else None
    )
    logger.info("crossmatch starting, log file: %s", log_file)

    if args.health:
        _run_health_check()
    elif args.platform is None or args.product_id is None:
        parser.error("platform and product_id are required")
    else:
        _run_match(args)


if __name__ == "__main__":
    main()
