"""Writer module for CSV output.

Announcement store: financial_reports.csv (append-only, deduplicated)
Enriched output: merged_data.csv (rewritten on every enrichment pass)
"""

from mops_reports.writer.report_store import (
    COLUMNS,
    ENRICHED_COLUMNS,
    ReportStore,
    record_to_row,
    write_enriched_csv,
)

__all__ = [
    "COLUMNS",
    "ENRICHED_COLUMNS",
    "ReportStore",
    "record_to_row",
    "write_enriched_csv",
]
