"""Record dataclasses, crawl state, and error types.

This module contains pure data structures with no I/O dependencies,
ensuring they can be imported anywhere without circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from mops_reports.utils.roc_calendar import parse_roc_timestamp, to_roc_date

__all__ = [
    "AnnouncementRecord",
    "CrawlResult",
    "CrawlState",
    "CrawlStatus",
    "DateWindow",
    "EPSRecord",
    "EnrichedRecord",
    "FetchError",
    "ParseError",
    "RecordSchemaError",
    "StoreReadError",
]


# =============================================================================
# Errors
# =============================================================================


class FetchError(Exception):
    """Transport or remote failure while fetching from a remote source."""


class ParseError(ValueError):
    """An announcement title carries no fiscal year/quarter marker.

    Non-fatal: the record is kept with ``fiscal_year=0`` and an empty period.
    """


class RecordSchemaError(ValueError):
    """A raw record is missing required fields; the record is dropped."""


class StoreReadError(Exception):
    """The persisted CSV store is unreadable or has a corrupt layout."""


# =============================================================================
# Records
# =============================================================================


@dataclass
class AnnouncementRecord:
    """One disclosure event from the MOPS announcement search.

    Attributes
    ----------
    announcement_timestamp : str
        Raw ROC timestamp ``"YYY/MM/DD HH:MM:SS"`` as received and persisted.
    market_category : str
        Market code (``sii``, ``otc``, ``rotc``, ``pub``).
    company_code : str
        Stable company identifier (kept as text, leading zeros matter).
    company_name : str
        Company short name.
    announcement_item : str
        Announcement item label.
    announcement_title : str
        Subject line, usually containing the fiscal year and quarter.
    fiscal_year : int
        Gregorian fiscal year parsed from the title, ``0`` when unparsed.
    fiscal_period : str
        ``"Q1"``..``"Q4"``, or ``""`` when unparsed.
    """

    announcement_timestamp: str
    market_category: str
    company_code: str
    company_name: str
    announcement_item: str
    announcement_title: str
    fiscal_year: int = 0
    fiscal_period: str = ""

    @property
    def key(self) -> tuple[str, str]:
        """Dedup key: raw timestamp string and company code."""
        return (self.announcement_timestamp, self.company_code)

    @property
    def announced_at(self) -> datetime:
        """Announcement time converted to the Gregorian calendar."""
        return parse_roc_timestamp(self.announcement_timestamp)

    @property
    def quarter(self) -> int | None:
        """Quarter number from ``fiscal_period``, or ``None`` when unparsed."""
        if len(self.fiscal_period) == 2 and self.fiscal_period[0] == "Q" and self.fiscal_period[1].isdigit():
            return int(self.fiscal_period[1])
        return None


@dataclass(frozen=True)
class EPSRecord:
    """Earnings per share for one company and fiscal quarter."""

    company_code: str
    fiscal_year: int
    fiscal_period: int
    eps_value: float


@dataclass
class EnrichedRecord:
    """Announcement joined with its EPS value (``None`` when unmatched)."""

    record: AnnouncementRecord
    eps: float | None = None


# =============================================================================
# Crawl State
# =============================================================================


@dataclass(frozen=True)
class DateWindow:
    """Inclusive Gregorian date range used as one fetch query."""

    start_date: date
    end_date: date

    def to_query(self) -> tuple[str, str]:
        """Render both ends as ROC date strings for the portal."""
        return to_roc_date(self.start_date), to_roc_date(self.end_date)

    def __str__(self) -> str:
        start, end = self.to_query()
        return f"{start} ~ {end}"


@dataclass(frozen=True)
class CrawlState:
    """Cursor threaded through the crawl loop; each step yields a new state."""

    current_window_end: date
    floor: date
    windows_completed: int = 0


class CrawlStatus(Enum):
    """Terminal states of a crawl run."""

    EXHAUSTED = "exhausted"
    FLOOR_REACHED = "floor_reached"
    FAILED = "failed"

    @property
    def is_success(self) -> bool:
        return self is not CrawlStatus.FAILED


@dataclass
class CrawlResult:
    """Summary of one crawl run."""

    status: CrawlStatus
    windows_fetched: int = 0
    records_fetched: int = 0
    records_appended: int = 0
    last_window: DateWindow | None = None
    error: str | None = None
    windows: list[DateWindow] = field(default_factory=list)
