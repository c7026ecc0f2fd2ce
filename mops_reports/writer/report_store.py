"""Append-only CSV store for announcement records.

The store is a flat CSV with a fixed column order. New rows are appended and
the header is written once, when the file is created. Rows already on disk are
never rewritten, so a re-run over the same windows only adds unseen records.

Dedup key
---------
``(Announcement DateTime, Company Code)`` using the raw ROC timestamp string
exactly as stored.

Notes
-----
Single writer, single process. Every column is read as text so company codes
keep their leading zeros.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pandas as pd

from mops_reports.config import setup_logging
from mops_reports.types import AnnouncementRecord, StoreReadError
from mops_reports.utils.roc_calendar import parse_roc_timestamp

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date, datetime
    from pathlib import Path

    from mops_reports.types import EnrichedRecord

logger = setup_logging(__name__)

COL_TIMESTAMP = "Announcement DateTime"
COL_MARKET = "Market Category"
COL_COMPANY_CODE = "Company Code"
COL_COMPANY_NAME = "Company Name"
COL_ITEM = "Announcement Item"
COL_TITLE = "Announcement Title"
COL_YEAR = "Year"
COL_PERIOD = "Period"
COL_EPS = "EPS"

COLUMNS = [
    COL_TIMESTAMP,
    COL_MARKET,
    COL_COMPANY_CODE,
    COL_COMPANY_NAME,
    COL_ITEM,
    COL_TITLE,
    COL_YEAR,
    COL_PERIOD,
]
ENRICHED_COLUMNS = [*COLUMNS, COL_EPS]
KEY_COLUMNS = (COL_TIMESTAMP, COL_COMPANY_CODE)


def record_to_row(record: AnnouncementRecord) -> dict[str, str | int]:
    """Map a record onto the persisted column names."""
    return {
        COL_TIMESTAMP: record.announcement_timestamp,
        COL_MARKET: record.market_category,
        COL_COMPANY_CODE: record.company_code,
        COL_COMPANY_NAME: record.company_name,
        COL_ITEM: record.announcement_item,
        COL_TITLE: record.announcement_title,
        COL_YEAR: record.fiscal_year,
        COL_PERIOD: record.fiscal_period,
    }


def _is_empty_file(path: Path) -> bool:
    return not path.exists() or path.stat().st_size == 0


def _ends_with_newline(path: Path) -> bool:
    with path.open("rb") as fh:
        fh.seek(-1, os.SEEK_END)
        return fh.read(1) == b"\n"


class ReportStore:
    """Deduplicating CSV store.

    Parameters
    ----------
    path : Path
        Location of the CSV file; created on first append.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def __repr__(self) -> str:
        return f"ReportStore({str(self.path)!r})"

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def _read_frame(self) -> pd.DataFrame | None:
        """Read the whole store as text, or ``None`` when there is no data.

        Raises
        ------
        StoreReadError
            If the file cannot be parsed or lacks the key columns.
        """
        if _is_empty_file(self.path):
            return None

        try:
            df = pd.read_csv(self.path, dtype=str, keep_default_na=False, encoding="utf-8")
        except pd.errors.EmptyDataError:
            return None
        except (pd.errors.ParserError, UnicodeDecodeError, OSError) as err:
            msg = f"Cannot read report store {self.path}: {err}"
            raise StoreReadError(msg) from err

        missing = [col for col in KEY_COLUMNS if col not in df.columns]
        if missing:
            msg = f"Report store {self.path} is missing columns: {', '.join(missing)}"
            raise StoreReadError(msg)

        return df.fillna("")

    def load_keys(self) -> set[tuple[str, str]]:
        """Return the dedup keys of every persisted row.

        Returns
        -------
        set[tuple[str, str]]
            ``(raw timestamp, company code)`` pairs; empty when the store does
            not exist yet.

        Raises
        ------
        StoreReadError
            If the store is unreadable; the key set must be complete before any
            append decision.
        """
        df = self._read_frame()
        if df is None:
            return set()
        return set(zip(df[COL_TIMESTAMP], df[COL_COMPANY_CODE], strict=True))

    def load_oldest_timestamp(self) -> datetime | None:
        """Return the earliest persisted announcement time (Gregorian).

        Rows whose timestamp cannot be parsed are skipped.

        Returns
        -------
        datetime | None
            Minimum timestamp, or ``None`` when the store is empty or no row
            has a readable timestamp.
        """
        df = self._read_frame()
        if df is None:
            return None

        oldest: datetime | None = None
        for raw in df[COL_TIMESTAMP]:
            try:
                stamp = parse_roc_timestamp(raw)
            except ValueError:
                logger.debug("Skipping unreadable timestamp in store: %r", raw)
                continue
            if oldest is None or stamp < oldest:
                oldest = stamp
        return oldest

    def load_oldest_date(self) -> date | None:
        """Calendar date of :meth:`load_oldest_timestamp`."""
        oldest = self.load_oldest_timestamp()
        return oldest.date() if oldest is not None else None

    def load_records(self) -> list[AnnouncementRecord]:
        """Load every persisted row as an :class:`AnnouncementRecord`.

        Raises
        ------
        StoreReadError
            If the store is unreadable or a row has a non-integer year.
        """
        df = self._read_frame()
        if df is None:
            return []

        records: list[AnnouncementRecord] = []
        for line_number, row in enumerate(df.to_dict(orient="records"), start=2):
            year_text = str(row.get(COL_YEAR, "")).strip()
            try:
                fiscal_year = int(year_text) if year_text else 0
            except ValueError as err:
                msg = f"Invalid year {year_text!r} on line {line_number} of {self.path}"
                raise StoreReadError(msg) from err

            records.append(
                AnnouncementRecord(
                    announcement_timestamp=row[COL_TIMESTAMP],
                    market_category=row.get(COL_MARKET, ""),
                    company_code=row[COL_COMPANY_CODE],
                    company_name=row.get(COL_COMPANY_NAME, ""),
                    announcement_item=row.get(COL_ITEM, ""),
                    announcement_title=row.get(COL_TITLE, ""),
                    fiscal_year=fiscal_year,
                    fiscal_period=row.get(COL_PERIOD, ""),
                ),
            )
        return records

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def filter_new(self, records: Iterable[AnnouncementRecord]) -> list[AnnouncementRecord]:
        """Return records whose key is neither persisted nor seen earlier in ``records``."""
        seen = self.load_keys()
        fresh: list[AnnouncementRecord] = []
        for record in records:
            if record.key in seen:
                continue
            seen.add(record.key)
            fresh.append(record)
        return fresh

    def append_new(self, records: Iterable[AnnouncementRecord]) -> int:
        """Append unseen records in arrival order.

        Parameters
        ----------
        records
            Freshly normalized records from one fetch.

        Returns
        -------
        int
            Number of rows appended.

        Raises
        ------
        StoreReadError
            If the existing store cannot be read.
        """
        fresh = self.filter_new(records)
        if not fresh:
            logger.debug("No new records for %s", self.path)
            return 0

        write_header = _is_empty_file(self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not write_header and not _ends_with_newline(self.path):
            # Hand-edited stores may lack a final newline
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write("\n")

        df = pd.DataFrame([record_to_row(r) for r in fresh], columns=COLUMNS)
        df.to_csv(self.path, mode="a", header=write_header, index=False, encoding="utf-8")

        logger.debug("Appended %d rows to %s", len(fresh), self.path)
        return len(fresh)


def write_enriched_csv(records: Iterable[EnrichedRecord], path: Path) -> Path:
    """Write EPS-enriched records to a fresh CSV (overwriting ``path``).

    Parameters
    ----------
    records
        Output of :func:`~mops_reports.transformer.eps_merger.merge_eps`.
    path
        Destination file.

    Returns
    -------
    Path
        Location of the written CSV. The ``EPS`` cell is empty when no value
        matched.
    """
    rows = []
    for enriched in records:
        row: dict[str, str | int | float | None] = dict(record_to_row(enriched.record))
        row[COL_EPS] = enriched.eps
        rows.append(row)

    path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(rows, columns=ENRICHED_COLUMNS)
    df.to_csv(path, index=False, encoding="utf-8", na_rep="")

    logger.info("Saved enriched CSV: %s (%d rows)", path, len(df))
    return path
