"""Tests for the crawl and enrichment CLI entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock, patch

import pytest

from mops_reports import main_crawl, main_enrich
from mops_reports.types import FetchError
from tests.conftest import ScriptedFetcher

if TYPE_CHECKING:
    from pathlib import Path


def _fake_client(fetcher: ScriptedFetcher) -> MagicMock:
    client = MagicMock()
    client.__enter__.return_value = fetcher
    client.__exit__.return_value = False
    return client


class TestCrawlCli:
    """Exit codes of mops_reports.main_crawl.main."""

    @patch("mops_reports.main_crawl.MopsClient")
    def test_success_returns_zero(
        self,
        mock_client_cls: MagicMock,
        tmp_path: Path,
        remote_records: list[dict[str, Any]],
    ) -> None:
        mock_client_cls.return_value = _fake_client(ScriptedFetcher(remote_records))
        store_path = tmp_path / "reports.csv"

        code = main_crawl.main(
            ["--store", str(store_path), "--floor", "2024-03-01", "--end-date", "2024-06-30", "--market", "otc"],
        )

        assert code == 0
        assert store_path.exists()
        mock_client_cls.assert_called_once_with(market="otc")

    @patch("mops_reports.main_crawl.MopsClient")
    def test_fetch_failure_returns_one(
        self,
        mock_client_cls: MagicMock,
        tmp_path: Path,
        remote_records: list[dict[str, Any]],
    ) -> None:
        mock_client_cls.return_value = _fake_client(ScriptedFetcher(remote_records, fail_on_call=1))

        code = main_crawl.main(["--store", str(tmp_path / "r.csv"), "--floor", "2024-03-01", "--end-date", "2024-06-30"])

        assert code == 1

    @patch("mops_reports.main_crawl.MopsClient")
    def test_corrupt_store_returns_one(self, mock_client_cls: MagicMock, tmp_path: Path) -> None:
        mock_client_cls.return_value = _fake_client(ScriptedFetcher([]))
        store_path = tmp_path / "r.csv"
        store_path.write_text("foo,bar\n1,2\n", encoding="utf-8")

        assert main_crawl.main(["--store", str(store_path)]) == 1

    @pytest.mark.parametrize("months", ["0", "-1", "two"])
    @patch("mops_reports.main_crawl.MopsClient")
    def test_invalid_months_flag_is_rejected(self, mock_client_cls: MagicMock, months: str, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main_crawl.main(["--store", str(tmp_path / "r.csv"), "--months", months])

        assert exc_info.value.code == 2
        mock_client_cls.assert_not_called()

    @patch("mops_reports.main_crawl.get_crawl_config", return_value={"window_months": 0})
    @patch("mops_reports.main_crawl.MopsClient")
    def test_zero_configured_span_is_refused(self, mock_client_cls: MagicMock, _config: MagicMock, tmp_path: Path) -> None:
        fetcher = ScriptedFetcher([])
        mock_client_cls.return_value = _fake_client(fetcher)

        with pytest.raises(SystemExit) as exc_info:
            main_crawl.main(["--store", str(tmp_path / "r.csv"), "--end-date", "2024-06-30"])

        assert exc_info.value.code == 2
        assert fetcher.windows == []


class TestEnrichCli:
    """Exit codes of mops_reports.main_enrich.main."""

    @patch("mops_reports.main_enrich.run_enrichment")
    @patch("mops_reports.main_enrich.EpsClient")
    def test_success_returns_zero(self, _client: MagicMock, mock_run: MagicMock, tmp_path: Path) -> None:
        code = main_enrich.main(["--store", str(tmp_path / "r.csv"), "--output", str(tmp_path / "m.csv")])

        assert code == 0
        mock_run.assert_called_once()

    @patch("mops_reports.main_enrich.run_enrichment", side_effect=FetchError("down"))
    @patch("mops_reports.main_enrich.EpsClient")
    def test_fetch_error_returns_one(self, mock_client_cls: MagicMock, _run: MagicMock, tmp_path: Path) -> None:
        mock_client_cls.return_value.__exit__.return_value = False

        assert main_enrich.main(["--store", str(tmp_path / "r.csv")]) == 1
