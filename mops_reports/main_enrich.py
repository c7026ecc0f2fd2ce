#!/usr/bin/env python3
"""EPS enrichment - join EPS figures onto the persisted announcements.

This is a one-shot batch job over the full store:
1. Load every persisted announcement
2. Fetch EPS history once per distinct company code, sequentially
3. Join on (company code, fiscal year, quarter); unmatched rows keep no EPS
4. Write a fresh merged CSV

Usage (from project root):
    python -m mops_reports.main_enrich
    python -m mops_reports.main_enrich --store data/otc.csv --output data/otc_eps.csv

CLI Flags:
    --store      CSV store to read (default: DATA_DIR/financial_reports.csv)
    --output     Merged CSV to write (default: DATA_DIR/merged_data.csv)
    --since      EPS history start date (default: config sources.eps.from)
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

# Add project root to path when running directly
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from mops_reports.config import get_merged_path, get_store_path, setup_logging  # noqa: E402
from mops_reports.scraper import EpsClient  # noqa: E402
from mops_reports.transformer import merge_eps, unique_company_codes  # noqa: E402
from mops_reports.types import FetchError, StoreReadError  # noqa: E402
from mops_reports.writer import ReportStore, write_enriched_csv  # noqa: E402

if TYPE_CHECKING:
    from mops_reports.types import EPSRecord

logger = setup_logging(__name__)


def run_enrichment(
    store: ReportStore,
    eps_client: EpsClient,
    output_path: Path,
    since: str | None = None,
) -> Path:
    """Fetch EPS per company and write the merged CSV.

    Parameters
    ----------
    store : ReportStore
        Source of announcement records.
    eps_client : EpsClient
        Client used for one request per distinct company code.
    output_path : Path
        Destination of the merged CSV (overwritten).
    since : str, optional
        ISO start date for the EPS history.

    Returns
    -------
    Path
        Location of the merged CSV.

    Raises
    ------
    FetchError
        If any EPS request fails; nothing is written in that case.
    StoreReadError
        If the store cannot be read.
    """
    records = store.load_records()
    company_codes = unique_company_codes(records)
    logger.info("Loaded %d records for %d companies", len(records), len(company_codes))

    eps_by_company: dict[str, list[EPSRecord]] = {}
    total = len(company_codes)
    for i, company_code in enumerate(company_codes, start=1):
        eps_by_company[company_code] = eps_client.fetch(company_code, since=since)
        logger.info("[%d/%d] Fetched EPS for %s (%d quarters)", i, total, company_code, len(eps_by_company[company_code]))

    merged = merge_eps(records, eps_by_company)
    matched = sum(1 for row in merged if row.eps is not None)
    logger.info("Matched EPS for %d of %d records", matched, len(merged))

    return write_enriched_csv(merged, output_path)


# =============================================================================
# CLI
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """Parse CLI flags and run the enrichment pass.

    Returns
    -------
    int
        ``0`` when the merged CSV was written; ``1`` otherwise.
    """
    parser = argparse.ArgumentParser(description="Merge EPS figures into the announcement store.")
    parser.add_argument("--store", type=Path, default=None, help="CSV store path")
    parser.add_argument("--output", type=Path, default=None, help="Merged CSV path")
    parser.add_argument("--since", default=None, help="EPS history start date (YYYY-MM-DD)")

    args = parser.parse_args(argv)

    store = ReportStore(args.store or get_store_path())
    output_path = args.output or get_merged_path()

    try:
        with EpsClient() as client:
            run_enrichment(store, client, output_path, since=args.since)
    except (FetchError, StoreReadError) as err:
        logger.error("Enrichment failed: %s", err)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
