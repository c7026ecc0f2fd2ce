"""HTTP client for the MOPS announcement search (``ezsearch_query``).

The portal answers a form-encoded POST with a JSON body whose ``data`` list
holds one flat dict per announcement. Only the first result page is requested.

Notes
-----
No retry is performed here; any transport or decoding failure surfaces as
:class:`~mops_reports.types.FetchError` and aborts the crawl run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from mops_reports.config import get_crawl_config, get_mops_config, setup_logging
from mops_reports.types import FetchError

if TYPE_CHECKING:
    from mops_reports.types import DateWindow

logger = setup_logging(__name__)


class MopsClient:
    """Fetch raw announcement records for a date window.

    Parameters
    ----------
    market : str, optional
        Market category sent as ``TYPEK`` (``sii``, ``otc``, ``rotc``, ``pub``).
        Defaults to the configured ``default_market``.
    item : str, optional
        Announcement item code sent as ``PRO_ITEM``. Defaults to the
        configured ``announcement_item`` (``E02``, quarterly financial reports).
    client : httpx.Client, optional
        Preconfigured client; one is created (and owned) when omitted.
    timeout : float, optional
        Request timeout in seconds, defaulting to the crawl config value.
    """

    def __init__(
        self,
        market: str | None = None,
        item: str | None = None,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ) -> None:
        self._config = get_mops_config()
        self.market = market or self._config.get("default_market", "sii")
        self.item = item or self._config.get("announcement_item", "E02")

        markets = self._config.get("markets", {})
        if markets and self.market not in markets:
            msg = f"Unknown market: {self.market}. Must be one of {sorted(markets)}."
            raise ValueError(msg)

        if timeout is None:
            timeout = float(get_crawl_config()["request_timeout"])
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def __enter__(self) -> MopsClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying client when this instance created it."""
        if self._owns_client:
            self.client.close()

    def build_form(self, window: DateWindow) -> dict[str, str]:
        """Build the form payload for ``window``.

        Both ends are rendered independently as ROC dates with zero-padded
        month and day.
        """
        start, end = window.to_query()
        form = dict(self._config.get("form_defaults", {}))
        form.update(
            {
                "TYPEK": self.market,
                "PRO_ITEM": self.item,
                "SDATE": start,
                "EDATE": end,
            },
        )
        return form

    def fetch(self, window: DateWindow) -> list[dict[str, Any]]:
        """POST the search form and return the raw ``data`` records.

        Parameters
        ----------
        window : DateWindow
            Inclusive date range to query.

        Returns
        -------
        list[dict[str, Any]]
            Raw key-value records; empty when the portal reports no data.

        Raises
        ------
        FetchError
            On HTTP errors, non-JSON bodies, or an unexpected ``data`` shape.
        """
        form = self.build_form(window)
        logger.debug("POST %s SDATE=%s EDATE=%s TYPEK=%s", self._config["url"], form["SDATE"], form["EDATE"], self.market)

        try:
            response = self.client.post(
                self._config["url"],
                data=form,
                headers=self._config.get("headers", {}),
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as err:
            msg = f"MOPS request failed for {window}: {err}"
            raise FetchError(msg) from err
        except ValueError as err:
            msg = f"MOPS returned a non-JSON body for {window}"
            raise FetchError(msg) from err

        if not isinstance(body, dict):
            msg = f"MOPS returned an unexpected payload for {window}: {type(body).__name__}"
            raise FetchError(msg)

        data = body.get("data")
        if data is None:
            logger.debug("No data key in MOPS response for %s", window)
            return []
        if not isinstance(data, list):
            msg = f"MOPS 'data' is not a list for {window}"
            raise FetchError(msg)

        return data
