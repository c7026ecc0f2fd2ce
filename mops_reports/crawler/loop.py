"""Sequential crawl loop: plan, fetch, normalize, persist, replan.

States::

    Init -> FetchWindow -> Persist -> Replan -> FetchWindow ...
    FetchWindow -> Exhausted     (fetch returned no records)
    FetchWindow -> FetchError    (fatal, run aborted)
    Replan -> FloorReached       (next window starts before floor)

Persistence for a window completes before the next window is computed, so an
interrupted run leaves the store at the last successful append.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any, Protocol

from mops_reports.config import setup_logging
from mops_reports.crawler.planner import advance, check_span, initial_state, next_window
from mops_reports.transformer.normalizer import normalize_batch
from mops_reports.types import CrawlResult, CrawlStatus, FetchError

if TYPE_CHECKING:
    from mops_reports.types import DateWindow
    from mops_reports.writer.report_store import ReportStore

logger = setup_logging(__name__)


class ReportFetcher(Protocol):
    """Anything that returns raw announcement dicts for a window."""

    def fetch(self, window: DateWindow) -> list[dict[str, Any]]: ...


def run_crawl(
    fetcher: ReportFetcher,
    store: ReportStore,
    floor: date,
    today: date | None = None,
    end_date: date | None = None,
    months: int = 1,
) -> CrawlResult:
    """Crawl backward from the newest point until exhausted or the floor.

    Parameters
    ----------
    fetcher : ReportFetcher
        Remote source, e.g. :class:`~mops_reports.scraper.mops_client.MopsClient`.
    store : ReportStore
        Deduplicating CSV store.
    floor : date
        Earliest date any window may start on.
    today : date, optional
        Fallback cursor for an empty store; defaults to ``date.today()``.
    end_date : date, optional
        Explicit end of the first window, overriding the store's oldest date.
    months : int, optional
        Window span in calendar months.

    Returns
    -------
    CrawlResult
        ``EXHAUSTED`` or ``FLOOR_REACHED`` on success, ``FAILED`` with the
        error message when a fetch fails.

    Raises
    ------
    ValueError
        If ``months`` is smaller than one; nothing is fetched.
    StoreReadError
        If the store becomes unreadable; no further appends are attempted.
    """
    check_span(months)
    today = today or date.today()
    oldest = end_date or store.load_oldest_date()
    state = initial_state(oldest, floor, today)
    result = CrawlResult(status=CrawlStatus.FLOOR_REACHED)

    logger.info("Starting crawl at %s (floor %s)", state.current_window_end, floor)

    while True:
        window = next_window(state.current_window_end, state.floor, months)
        if window is None:
            logger.info("Next window starts before floor %s; crawl complete", floor)
            result.status = CrawlStatus.FLOOR_REACHED
            break

        result.last_window = window
        try:
            raw_records = fetcher.fetch(window)
        except FetchError as err:
            logger.error("Fetch failed for %s: %s", window, err)
            result.status = CrawlStatus.FAILED
            result.error = str(err)
            break

        result.windows_fetched += 1
        result.windows.append(window)

        if not raw_records:
            logger.info("No data found for %s; crawl exhausted", window)
            result.status = CrawlStatus.EXHAUSTED
            break

        records = normalize_batch(raw_records)
        appended = store.append_new(records)
        result.records_fetched += len(raw_records)
        result.records_appended += appended
        logger.info("Fetched %d reports for %s, %d new", len(raw_records), window, appended)

        state = advance(state, window, store.load_oldest_date(), today)

    logger.info(
        "Crawl finished: %s after %d windows (%d fetched, %d appended)",
        result.status.value,
        result.windows_fetched,
        result.records_fetched,
        result.records_appended,
    )
    return result
