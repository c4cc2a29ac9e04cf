"""CLI entry point for the price scanner.

Usage:
    python -m src.price_scanner.main wireless headphones
    python -m src.price_scanner.main gaming mouse --max-pages 5
    DEMO=1 python -m src.price_scanner.main bluetooth speaker

With no live results (network down, search blocked, zero hits) the canned
demo dataset is rendered instead. The process always exits with status 0.
"""

from __future__ import annotations

import argparse
import logging
import sys

from ..common.config import Settings
from ..common.logging import setup_logging
from .demo_data import demo_results
from .models import ScanResult
from .reporter import render_report
from .scanner import PriceScanner

logger = logging.getLogger(__name__)

BANNER = "ITEM PRICE SCRAPER - USD & MXN"
USAGE_HINTS = (
    "Usage: python -m src.price_scanner.main <search term>",
    "       python -m src.price_scanner.main gaming mouse",
    "       python -m src.price_scanner.main laptop stand",
    "       DEMO=1 python -m src.price_scanner.main bluetooth speaker",
)
RULE = "=" * 60


def collect_results(item: str, settings: Settings) -> list[ScanResult]:
    """Return live results for ``item``, or the demo dataset as a fallback."""
    if settings.demo_mode:
        logger.info("Running in demo mode with sample data")
        return demo_results(item)

    with PriceScanner(settings) as scanner:
        results = scanner.scan(item)

    if not results:
        logger.info("[FALLBACK] No live results. Running demo mode...")
        return demo_results(item)
    return results


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Item price scanner (USD & MXN)")
    parser.add_argument(
        "item",
        nargs="*",
        help="Item to search for (default: 'wireless headphones')",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Render the offline demo dataset; no network access",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        help="Number of result pages to deep-scan (default: 8)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Fetch result pages on N threads (default: 1, sequential)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    print(RULE)
    print(f"{BANNER:^60}".rstrip())
    print(RULE)

    try:
        settings = Settings.load()
        if args.demo:
            settings.demo_mode = True
        if args.max_pages is not None:
            settings.scraper.max_pages = args.max_pages
        if args.workers is not None:
            settings.scraper.max_workers = args.workers

        item = " ".join(args.item).strip() or settings.default_item
        results = collect_results(item, settings)
        print(render_report(results, item), end="")
    except Exception:
        logger.exception("Price scan failed")

    print()
    print(RULE)
    for line in USAGE_HINTS:
        print(line)
    print(RULE)
    return 0


if __name__ == "__main__":
    sys.exit(main())
