"""HTTP client for the per-company EPS (profit-per-share) API."""

from __future__ import annotations

import math
from typing import Any

import httpx

from mops_reports.config import get_crawl_config, get_eps_config, setup_logging
from mops_reports.types import EPSRecord, FetchError

logger = setup_logging(__name__)


def _parse_eps(value: Any) -> float | None:
    if value is None:
        return None
    try:
        eps = float(str(value).replace(",", "").strip())
    except ValueError:
        return None
    return None if math.isnan(eps) else eps


class EpsClient:
    """Fetch quarterly EPS history for one company at a time.

    Parameters
    ----------
    client : httpx.Client, optional
        Preconfigured client; one is created (and owned) when omitted.
    timeout : float, optional
        Request timeout in seconds, defaulting to the crawl config value.
    """

    def __init__(self, client: httpx.Client | None = None, timeout: float | None = None) -> None:
        self._config = get_eps_config()
        if timeout is None:
            timeout = float(get_crawl_config()["request_timeout"])
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def __enter__(self) -> EpsClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def fetch(self, company_code: str, since: str | None = None) -> list[EPSRecord]:
        """Return EPS records for ``company_code`` from ``since`` onwards.

        Parameters
        ----------
        company_code : str
            Company identifier sent as ``number``.
        since : str, optional
            ISO start date sent as ``from``; defaults to the configured value.

        Returns
        -------
        list[EPSRecord]
            One record per reported quarter. Entries with a missing or
            non-numeric EPS are skipped.

        Raises
        ------
        FetchError
            On HTTP errors, non-JSON bodies, or a payload without a ``data`` list.
        """
        params = {"number": company_code, "from": since or self._config.get("from", "2015-01-01")}

        try:
            response = self.client.get(self._config["url"], params=params)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as err:
            msg = f"EPS request failed for {company_code}: {err}"
            raise FetchError(msg) from err
        except ValueError as err:
            msg = f"EPS API returned a non-JSON body for {company_code}"
            raise FetchError(msg) from err

        items = body.get("data") if isinstance(body, dict) else None
        if not isinstance(items, list):
            msg = f"EPS API payload for {company_code} has no data list"
            raise FetchError(msg)

        records: list[EPSRecord] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            eps = _parse_eps((item.get("data") or {}).get("EPS"))
            if eps is None:
                logger.debug("Skipping EPS entry without numeric value for %s: %s", company_code, item)
                continue
            try:
                records.append(
                    EPSRecord(
                        company_code=company_code,
                        fiscal_year=int(item["year"]),
                        fiscal_period=int(item["period"]),
                        eps_value=eps,
                    ),
                )
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping malformed EPS entry for %s: %s", company_code, item)

        return records
