"""mops-reports: incremental crawl of MOPS financial-report announcements.

The package walks the Taiwan MOPS announcement search backward in one-month
windows, persists quarterly financial-report announcements to a deduplicated
CSV, and enriches them with EPS figures from a second API.

Architecture
------------
* ``scraper``: httpx clients for MOPS (``ezsearch_query``) and the EPS API.
* ``transformer``: Raw record validation, title parsing, and the EPS join.
* ``writer``: Append-only deduplicating CSV store and enriched CSV output.
* ``crawler``: Window planner and the sequential crawl loop.
* ``utils``: ROC calendar conversions.

Configuration
-------------
Paths default to ``data/`` and ``logs/`` but respect ``DATA_DIR`` and
``LOGS_DIR`` overrides. Remote endpoints and crawl settings live in
``config/config.json``.

Examples
--------
Crawl listed companies back to the configured floor date:

    >>> python -m mops_reports.main_crawl --market sii

Enrich the store with EPS:

    >>> python -m mops_reports.main_enrich
"""

__version__ = "0.1.0"
__all__ = ["__version__"]


def get_version() -> str:
    """Return the current package version string."""
    return __version__


__all__.append("get_version")
