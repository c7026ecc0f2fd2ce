"""Incremental windowed crawl of MOPS announcements.

- planner: backward one-month windows and the immutable crawl cursor
- loop: the sequential fetch/normalize/persist/replan loop
"""

from mops_reports.crawler.loop import ReportFetcher, run_crawl
from mops_reports.crawler.planner import advance, check_span, initial_state, next_window

__all__ = [
    "ReportFetcher",
    "advance",
    "check_span",
    "initial_state",
    "next_window",
    "run_crawl",
]
