"""ROC (Minguo) calendar conversions.

MOPS expresses dates as ``YYY/MM/DD`` where ``YYY`` counts years from 1912,
so the Gregorian year is the ROC year plus 1911.
"""

from __future__ import annotations

import re
from datetime import date, datetime

ROC_EPOCH_OFFSET = 1911

_ROC_DATE_RE = re.compile(r"^(\d{1,3})/(\d{1,2})/(\d{1,2})$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def roc_year_to_gregorian(year: int) -> int:
    """Convert an ROC year (e.g. ``113``) to the Gregorian year (``2024``)."""
    return year + ROC_EPOCH_OFFSET


def gregorian_year_to_roc(year: int) -> int:
    """Convert a Gregorian year (e.g. ``2024``) to the ROC year (``113``)."""
    return year - ROC_EPOCH_OFFSET


def to_roc_date(value: date) -> str:
    """Format a date as ``YYY/MM/DD`` with zero-padded month and day.

    Examples
    --------
    >>> to_roc_date(date(2024, 5, 7))
    '113/05/07'
    """
    return f"{gregorian_year_to_roc(value.year)}/{value.month:02d}/{value.day:02d}"


def parse_roc_date(value: str) -> date:
    """Parse an ROC ``YYY/MM/DD`` string into a Gregorian date.

    Parameters
    ----------
    value
        Date string such as ``"113/05/17"``.

    Returns
    -------
    date
        Gregorian date, e.g. ``date(2024, 5, 17)``.

    Raises
    ------
    ValueError
        If the string is malformed or names an impossible date.
    """
    match = _ROC_DATE_RE.match(value.strip())
    if not match:
        msg = f"Invalid ROC date: {value!r}"
        raise ValueError(msg)

    roc_year, month, day = (int(part) for part in match.groups())
    return date(roc_year_to_gregorian(roc_year), month, day)


def parse_roc_timestamp(value: str) -> datetime:
    """Parse ``"YYY/MM/DD HH:MM:SS"`` into a Gregorian datetime.

    The time part is optional; a bare date yields midnight.

    Raises
    ------
    ValueError
        If either the date or time part is malformed.
    """
    parts = value.strip().split()
    if not parts or len(parts) > 2:
        msg = f"Invalid ROC timestamp: {value!r}"
        raise ValueError(msg)

    day = parse_roc_date(parts[0])
    if len(parts) == 1:
        return datetime(day.year, day.month, day.day)

    match = _TIME_RE.match(parts[1])
    if not match:
        msg = f"Invalid ROC timestamp: {value!r}"
        raise ValueError(msg)

    hour, minute, second = match.groups()
    return datetime(day.year, day.month, day.day, int(hour), int(minute), int(second or 0))
