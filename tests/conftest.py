"""Pytest configuration for mops_reports tests.

This module provides:
- Sample raw MOPS records and a raw-record factory
- A tmp_path-backed ReportStore fixture
- A scripted fetcher that serves records whose date falls inside the window
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from mops_reports.types import DateWindow, FetchError
from mops_reports.utils.roc_calendar import parse_roc_date
from mops_reports.writer.report_store import ReportStore

PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(PROJECT_ROOT / ".env")


def make_raw(
    cdate: str,
    company_id: str,
    subject: str = "113年第1季合併財務報告",
    ctime: str = "17:30:00",
    company_name: str = "台積電",
) -> dict[str, Any]:
    """Build one raw record shaped like an ezsearch_query ``data`` entry."""
    return {
        "CDATE": cdate,
        "CTIME": ctime,
        "TYPEK": "sii",
        "COMPANY_ID": company_id,
        "COMPANY_NAME": company_name,
        "AN_NAME": "財務報告",
        "AN_CODE": "E02",
        "CODE_NAME": "上市",
        "SUBJECT": subject,
        "HYPERLINK": "",
    }


class ScriptedFetcher:
    """Serve raw records whose ``CDATE`` lies within the requested window.

    Parameters
    ----------
    records : list[dict]
        Full remote dataset.
    fail_on_call : int, optional
        1-based call number on which to raise :class:`FetchError`.
    """

    def __init__(self, records: list[dict[str, Any]], fail_on_call: int | None = None) -> None:
        self.records = records
        self.fail_on_call = fail_on_call
        self.windows: list[DateWindow] = []

    def fetch(self, window: DateWindow) -> list[dict[str, Any]]:
        self.windows.append(window)
        if self.fail_on_call is not None and len(self.windows) == self.fail_on_call:
            msg = "connection reset"
            raise FetchError(msg)
        return [
            dict(raw)
            for raw in self.records
            if window.start_date <= parse_roc_date(raw["CDATE"]) <= window.end_date
        ]


@pytest.fixture
def store(tmp_path: Path) -> ReportStore:
    """Empty store backed by a file under ``tmp_path``."""
    return ReportStore(tmp_path / "financial_reports.csv")


@pytest.fixture
def remote_records() -> list[dict[str, Any]]:
    """Four announcements spread over spring 2024."""
    return [
        make_raw("113/06/20", "2330", "113年第1季合併財務報告"),
        make_raw("113/06/05", "0050", "113年第1季財務報告", company_name="元大台灣50"),
        make_raw("113/05/10", "2317", "113年第1季合併財務報告", company_name="鴻海"),
        make_raw("113/04/02", "1101", "112年第4季合併財務報告", company_name="台泥"),
    ]


@pytest.fixture
def crawl_dates() -> dict[str, date]:
    """Floor and today used by crawl tests."""
    return {"floor": date(2024, 3, 1), "today": date(2024, 6, 30)}
