"""Backward date-window planning for the announcement crawl.

The crawl walks backward in one-month windows. After each persisted window the
cursor is reset to the oldest timestamp actually stored, so the position
follows the data on disk rather than assumed progress.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from dateutil.relativedelta import relativedelta

from mops_reports.types import CrawlState, DateWindow

if TYPE_CHECKING:
    from datetime import date


def check_span(months: int) -> None:
    """Reject window spans that would not move the cursor backward."""
    if months < 1:
        msg = f"Window span must be at least one month, got {months}"
        raise ValueError(msg)


def next_window(current_end: date, floor: date, months: int = 1) -> DateWindow | None:
    """Compute the window ending at ``current_end``.

    Parameters
    ----------
    current_end : date
        Inclusive end of the window.
    floor : date
        Earliest date the crawl may request.
    months : int, optional
        Window span in calendar months. Month-end days are clamped, so
        ``2024-03-31`` steps back to ``2024-02-29``.

    Returns
    -------
    DateWindow | None
        The window to fetch, or ``None`` (done) when its start falls strictly
        before ``floor``.

    Raises
    ------
    ValueError
        If ``months`` is smaller than one.

    Examples
    --------
    >>> next_window(date(2015, 1, 15), date(2015, 1, 1)) is None
    True
    """
    check_span(months)
    start = current_end - relativedelta(months=months)
    if start < floor:
        return None
    return DateWindow(start_date=start, end_date=current_end)


def initial_state(oldest_stored: date | None, floor: date, today: date) -> CrawlState:
    """Build the starting cursor: oldest stored date, else ``today``."""
    return CrawlState(current_window_end=oldest_stored or today, floor=floor)


def advance(
    state: CrawlState,
    window: DateWindow,
    oldest_stored: date | None,
    today: date,
) -> CrawlState:
    """Return the state for the iteration after ``window`` was persisted.

    The next window ends at the oldest stored date (``today`` when the store
    is still empty). When that date is not strictly earlier than the current
    window end, as after a fetch whose records were all duplicates, the cursor
    moves to ``window.start_date`` instead so the crawl cannot stall.

    Parameters
    ----------
    state : CrawlState
        State that produced ``window``.
    window : DateWindow
        Window just fetched and persisted.
    oldest_stored : date | None
        Oldest date in the store after persisting.
    today : date
        Fallback end date for an empty store.

    Returns
    -------
    CrawlState
        New state; ``state`` is left untouched.
    """
    next_end = oldest_stored or today
    if next_end >= state.current_window_end:
        next_end = window.start_date

    return replace(
        state,
        current_window_end=next_end,
        windows_completed=state.windows_completed + 1,
    )
