"""Tests for JSON configuration integrity and accessor defaults.

Tests cover:
1. config.json syntax and required sections
2. MOPS form defaults and markets consumed by MopsClient
3. Crawl settings and output paths
"""

from __future__ import annotations

from datetime import date
from unittest.mock import patch

from mops_reports.config import (
    CONFIG_DIR,
    DATA_DIR,
    get_config,
    get_crawl_config,
    get_eps_config,
    get_floor_date,
    get_merged_path,
    get_mops_config,
    get_store_path,
    parse_iso_date,
)

# =============================================================================
# JSON Syntax and Loading Tests
# =============================================================================


class TestJsonSyntax:
    """Tests that the JSON config file is valid."""

    def test_config_json_exists(self) -> None:
        assert (CONFIG_DIR / "config.json").exists()

    def test_config_json_loads(self) -> None:
        config = get_config()
        assert isinstance(config, dict)
        assert len(config) > 0


# =============================================================================
# Source Sections
# =============================================================================


class TestMopsConfig:
    """MOPS settings used to build the search form."""

    def test_url_and_item(self) -> None:
        mops = get_mops_config()
        assert mops["url"].startswith("https://mops.twse.com.tw/")
        assert mops["announcement_item"] == "E02"

    def test_default_market_is_known(self) -> None:
        mops = get_mops_config()
        assert mops["default_market"] in mops["markets"]
        assert {"sii", "otc", "rotc", "pub"} <= set(mops["markets"])

    def test_form_defaults_do_not_fix_window(self) -> None:
        """Window and market fields are filled per request."""
        form = get_mops_config()["form_defaults"]
        assert not {"SDATE", "EDATE", "TYPEK", "PRO_ITEM"} & set(form)
        assert form["step"] == "00"


class TestEpsConfig:
    def test_url_and_from(self) -> None:
        eps = get_eps_config()
        assert eps["url"].startswith("https://")
        assert parse_iso_date(eps["from"]) == date(2015, 1, 1)


# =============================================================================
# Crawl Settings and Paths
# =============================================================================


class TestCrawlConfig:
    """Crawl settings and their fallbacks."""

    def test_floor_date(self) -> None:
        assert get_floor_date() == date(2015, 1, 1)

    def test_window_months_positive(self) -> None:
        assert int(get_crawl_config()["window_months"]) >= 1

    def test_missing_crawl_section_uses_defaults(self) -> None:
        with patch("mops_reports.config.get_config", return_value={"sources": {}}):
            crawl = get_crawl_config()

        assert crawl == {"floor_date": "2015-01-01", "window_months": 1, "request_timeout": 30.0}


class TestPaths:
    def test_store_and_merged_paths(self) -> None:
        assert get_store_path() == DATA_DIR / "financial_reports.csv"
        assert get_merged_path() == DATA_DIR / "merged_data.csv"
