"""Normalization of raw MOPS records into :class:`AnnouncementRecord`."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from mops_reports.config import setup_logging
from mops_reports.types import AnnouncementRecord, ParseError, RecordSchemaError
from mops_reports.utils.roc_calendar import roc_year_to_gregorian

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = setup_logging(__name__)

# Raw field names returned by ezsearch_query
FIELD_DATE = "CDATE"
FIELD_TIME = "CTIME"
FIELD_MARKET = "TYPEK"
FIELD_COMPANY_ID = "COMPANY_ID"
FIELD_COMPANY_NAME = "COMPANY_NAME"
FIELD_ITEM = "AN_NAME"
FIELD_SUBJECT = "SUBJECT"

REQUIRED_FIELDS = (FIELD_DATE, FIELD_TIME, FIELD_COMPANY_ID, FIELD_SUBJECT)

# e.g. "113年第2季合併財務報告" -> ROC year 113, quarter 2
SUBJECT_PATTERN = re.compile(r"(\d{3})年第(\d)季")


def _text(raw: Mapping[str, Any], field: str) -> str:
    value = raw.get(field)
    return "" if value is None else str(value).strip()


def validate_raw_record(raw: Mapping[str, Any]) -> None:
    """Check that ``raw`` carries every required field.

    Parameters
    ----------
    raw
        One record from the portal's ``data`` list.

    Raises
    ------
    RecordSchemaError
        If the record is not a mapping or any field in ``REQUIRED_FIELDS`` is
        missing or blank.
    """
    if not hasattr(raw, "get"):
        msg = f"Raw record is not a mapping: {raw!r}"
        raise RecordSchemaError(msg)

    missing = [field for field in REQUIRED_FIELDS if not _text(raw, field)]
    if missing:
        msg = f"Raw record missing required fields: {', '.join(missing)}"
        raise RecordSchemaError(msg)


def match_subject(subject: str) -> tuple[int, str]:
    """Strict form of :func:`parse_subject`.

    Raises
    ------
    ParseError
        If the title does not carry a year/quarter marker.
    """
    match = SUBJECT_PATTERN.search(subject)
    if not match:
        msg = f"No fiscal period in title: {subject!r}"
        raise ParseError(msg)

    year = roc_year_to_gregorian(int(match.group(1)))
    return year, f"Q{match.group(2)}"


def parse_subject(subject: str) -> tuple[int, str]:
    """Extract the fiscal year and period from an announcement title.

    Parameters
    ----------
    subject
        Announcement title such as ``"113年第2季財務報告"``.

    Returns
    -------
    tuple[int, str]
        Gregorian year and ``"Qn"`` label, e.g. ``(2024, "Q2")``; ``(0, "")``
        when the title does not carry a year/quarter marker.
    """
    try:
        return match_subject(subject)
    except ParseError as err:
        logger.debug("%s; keeping record with empty fiscal fields", err)
        return 0, ""


def normalize(raw: Mapping[str, Any]) -> AnnouncementRecord:
    """Convert one validated raw record into an :class:`AnnouncementRecord`.

    Raises
    ------
    RecordSchemaError
        Propagated from :func:`validate_raw_record`.
    """
    validate_raw_record(raw)

    subject = _text(raw, FIELD_SUBJECT)
    fiscal_year, fiscal_period = parse_subject(subject)

    return AnnouncementRecord(
        announcement_timestamp=f"{_text(raw, FIELD_DATE)} {_text(raw, FIELD_TIME)}",
        market_category=_text(raw, FIELD_MARKET),
        company_code=_text(raw, FIELD_COMPANY_ID),
        company_name=_text(raw, FIELD_COMPANY_NAME),
        announcement_item=_text(raw, FIELD_ITEM),
        announcement_title=subject,
        fiscal_year=fiscal_year,
        fiscal_period=fiscal_period,
    )


def normalize_batch(raws: Iterable[Mapping[str, Any]]) -> list[AnnouncementRecord]:
    """Normalize raw records, skipping those that fail schema validation.

    Arrival order is preserved. Skipped records are logged at WARNING.
    """
    records: list[AnnouncementRecord] = []
    skipped = 0
    for raw in raws:
        try:
            records.append(normalize(raw))
        except RecordSchemaError as err:
            skipped += 1
            logger.warning("Skipping raw record: %s", err)

    if skipped:
        logger.info("Normalized %d records (%d skipped)", len(records), skipped)
    return records
