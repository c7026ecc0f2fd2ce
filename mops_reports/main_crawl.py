#!/usr/bin/env python3
"""Crawl orchestrator - walk MOPS announcements backward and persist new ones.

This module runs the incremental windowed crawl:
1. Start at the oldest stored announcement (or today for an empty store)
2. Fetch one month of announcements from MOPS
3. Normalize and append unseen records to the CSV store
4. Replan from the oldest stored timestamp and repeat
5. Stop when a window returns no data or would start before the floor date

Usage (from project root):
    cd /path/to/mops-reports
    python -m mops_reports.main_crawl
    python -m mops_reports.main_crawl --market otc --floor 2020-01-01
    python -m mops_reports.main_crawl --end-date 2024-06-17 --store data/sii.csv

CLI Flags:
    --floor, -f      Earliest window start date (default: config crawl.floor_date)
    --end-date, -e   End of the first window (default: oldest stored, else today)
    --market, -m     Market category: sii, otc, rotc, pub (default: sii)
    --store          CSV store path (default: DATA_DIR/financial_reports.csv)
    --months         Window span in months (default: config crawl.window_months)
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path when running directly
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from mops_reports.config import (  # noqa: E402
    get_crawl_config,
    get_floor_date,
    get_mops_config,
    get_store_path,
    parse_iso_date,
    setup_logging,
)
from mops_reports.crawler import run_crawl  # noqa: E402
from mops_reports.scraper import MopsClient  # noqa: E402
from mops_reports.types import CrawlResult, StoreReadError  # noqa: E402
from mops_reports.writer import ReportStore  # noqa: E402

logger = setup_logging(__name__)


def _positive_int(value: str) -> int:
    months = int(value)
    if months < 1:
        msg = f"must be at least 1, got {months}"
        raise argparse.ArgumentTypeError(msg)
    return months


def crawl(
    store_path: Path,
    floor: str | None = None,
    end_date: str | None = None,
    market: str | None = None,
    months: int | None = None,
) -> CrawlResult | None:
    """Run one crawl against MOPS.

    Parameters
    ----------
    store_path : Path
        CSV store to append to.
    floor : str, optional
        ISO floor date; defaults to the configured ``crawl.floor_date``.
    end_date : str, optional
        ISO end date of the first window.
    market : str, optional
        Market category sent to MOPS.
    months : int, optional
        Window span in calendar months.

    Returns
    -------
    CrawlResult | None
        Crawl summary, or ``None`` when the store could not be read.

    Raises
    ------
    ValueError
        If a date is malformed or the window span is below one month.
    """
    floor_date = parse_iso_date(floor) if floor else get_floor_date()
    first_end = parse_iso_date(end_date) if end_date else None
    window_months = months if months is not None else int(get_crawl_config()["window_months"])

    store = ReportStore(store_path)
    logger.info("Crawling into %s", store_path)

    try:
        with MopsClient(market=market) as client:
            return run_crawl(client, store, floor_date, end_date=first_end, months=window_months)
    except StoreReadError as err:
        logger.error("Cannot read report store: %s", err)
        return None


# =============================================================================
# CLI
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """Parse CLI flags and run the crawl.

    Returns
    -------
    int
        ``0`` when the crawl ended exhausted or at the floor; ``1`` on a fetch
        failure or unreadable store.
    """
    markets = sorted(get_mops_config().get("markets", {"sii": ""}))
    parser = argparse.ArgumentParser(
        description="Crawl MOPS financial-report announcements into a CSV store.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m mops_reports.main_crawl                         # Resume from the store
  python -m mops_reports.main_crawl --floor 2020-01-01      # Custom floor date
  python -m mops_reports.main_crawl -m otc --store data/otc.csv
        """,
    )
    parser.add_argument("--floor", "-f", help="Earliest window start (YYYY-MM-DD)")
    parser.add_argument("--end-date", "-e", help="End of the first window (YYYY-MM-DD)")
    parser.add_argument("--market", "-m", choices=markets, help="Market category (default: sii)")
    parser.add_argument("--store", type=Path, default=None, help="CSV store path")
    parser.add_argument("--months", type=_positive_int, default=None, help="Window span in months")

    args = parser.parse_args(argv)

    try:
        result = crawl(
            store_path=args.store or get_store_path(),
            floor=args.floor,
            end_date=args.end_date,
            market=args.market,
            months=args.months,
        )
    except ValueError as err:
        parser.error(str(err))

    if result is None:
        return 1

    if not result.status.is_success:
        logger.error("Crawl failed: %s", result.error)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
