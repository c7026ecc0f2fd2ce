"""Configuration management for mops-reports.

This module centralizes file-system paths, environment variables, and the
JSON configuration loader used by the crawl and enrichment pipeline.

Configuration file
------------------
``config/config.json`` holds the remote sources (MOPS form defaults and
headers, EPS API endpoint), crawl settings (floor date, window size, request
timeout), and output filenames.

Environment variables
---------------------
``DATA_DIR`` and ``LOGS_DIR`` override default directories. Directories are
created eagerly on import so downstream callers can rely on their existence.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any, cast

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = Path(os.getenv("DATA_DIR", PROJECT_ROOT / "data"))
LOGS_DIR = Path(os.getenv("LOGS_DIR", PROJECT_ROOT / "logs"))

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

ISO_DATE_FORMAT = "%Y-%m-%d"


def get_config() -> dict[str, Any]:
    """Load the project configuration.

    Returns
    -------
    dict[str, Any]
        Parsed contents of ``config/config.json`` including sources, crawl
        settings, and output filenames.

    Raises
    ------
    FileNotFoundError
        If ``config/config.json`` is missing.
    json.JSONDecodeError
        If the file exists but is not valid JSON.
    """
    config_path = CONFIG_DIR / "config.json"
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with Path(config_path).open(encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def setup_logging(name: str = "mops_reports") -> logging.Logger:
    """Configure a console+file logger if not already present.

    Parameters
    ----------
    name : str, optional
        Logger namespace; reused to avoid duplicate handlers.

    Returns
    -------
    logging.Logger
        Logger with INFO-level console handler and DEBUG-level daily file
        handler under ``LOGS_DIR``.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_format = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        console_handler.setFormatter(console_format)
        logger.addHandler(console_handler)

        # File handler
        log_filename = f"{datetime.now(UTC).strftime('%Y-%m-%d')}_run.log"
        file_handler = logging.FileHandler(LOGS_DIR / log_filename, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


# =============================================================================
# Section Accessors
# =============================================================================


def get_mops_config() -> dict[str, Any]:
    """Return the MOPS portal settings (url, markets, form defaults, headers)."""
    return cast("dict[str, Any]", get_config()["sources"]["mops"])


def get_eps_config() -> dict[str, Any]:
    """Return the EPS API settings (url and default ``from`` date)."""
    return cast("dict[str, Any]", get_config()["sources"]["eps"])


def get_crawl_config() -> dict[str, Any]:
    """Return crawl settings, falling back to defaults for missing keys.

    Returns
    -------
    dict[str, Any]
        Mapping with ``floor_date``, ``window_months``, and
        ``request_timeout``.
    """
    defaults: dict[str, Any] = {
        "floor_date": "2015-01-01",
        "window_months": 1,
        "request_timeout": 30.0,
    }
    return {**defaults, **get_config().get("crawl", {})}


def parse_iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a :class:`datetime.date`.

    Raises
    ------
    ValueError
        If ``value`` is not a valid ISO date.
    """
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def get_floor_date() -> date:
    """Return the earliest date the crawl may request."""
    return parse_iso_date(get_crawl_config()["floor_date"])


def _get_file_name(key: str, default: str) -> str:
    files = get_config().get("files", {})
    return cast("str", files.get(key, default))


def get_store_path() -> Path:
    """Return the path of the persisted announcement CSV under ``DATA_DIR``."""
    return DATA_DIR / _get_file_name("reports_csv", "financial_reports.csv")


def get_merged_path() -> Path:
    """Return the path of the EPS-enriched CSV under ``DATA_DIR``."""
    return DATA_DIR / _get_file_name("merged_csv", "merged_data.csv")
