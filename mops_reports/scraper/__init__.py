"""Scraper module for the MOPS announcement search and the EPS API.

Clients:
- MopsClient: POST ezsearch_query for one date window, returns raw records
- EpsClient: GET profit-per-share history for one company

Both raise FetchError on any transport or payload failure; nothing retries.
"""

from mops_reports.scraper.eps_client import EpsClient
from mops_reports.scraper.mops_client import MopsClient

__all__ = [
    "EpsClient",
    "MopsClient",
]
