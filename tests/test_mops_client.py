"""Tests for the MOPS client using httpx.MockTransport."""

from __future__ import annotations

from datetime import date
from urllib.parse import parse_qs

import httpx
import pytest

from mops_reports.scraper.mops_client import MopsClient
from mops_reports.types import DateWindow, FetchError
from tests.conftest import make_raw

WINDOW = DateWindow(date(2024, 5, 17), date(2024, 6, 17))


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestBuildForm:
    """Tests for the form payload."""

    def test_window_rendered_in_roc(self) -> None:
        client = MopsClient(client=_client(lambda request: httpx.Response(200, json={})))

        form = client.build_form(WINDOW)

        assert form["SDATE"] == "113/05/17"
        assert form["EDATE"] == "113/06/17"
        assert form["TYPEK"] == "sii"
        assert form["PRO_ITEM"] == "E02"
        assert form["step"] == "00"
        assert form["page"] == "1"

    def test_market_override(self) -> None:
        client = MopsClient(market="otc", client=_client(lambda request: httpx.Response(200, json={})))

        assert client.build_form(WINDOW)["TYPEK"] == "otc"

    def test_unknown_market_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown market"):
            MopsClient(market="nyse", client=_client(lambda request: httpx.Response(200, json={})))


class TestFetch:
    """Tests for MopsClient.fetch."""

    def test_posts_form_and_returns_data(self) -> None:
        seen: dict[str, list[str]] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            seen.update(parse_qs(request.content.decode()))
            return httpx.Response(200, json={"status": "success", "data": [make_raw("113/06/01", "2330")]})

        client = MopsClient(client=_client(handler))

        records = client.fetch(WINDOW)

        assert seen["SDATE"] == ["113/05/17"]
        assert seen["EDATE"] == ["113/06/17"]
        assert len(records) == 1
        assert records[0]["COMPANY_ID"] == "2330"

    def test_missing_data_is_empty(self) -> None:
        client = MopsClient(client=_client(lambda request: httpx.Response(200, json={"status": "fail"})))

        assert client.fetch(WINDOW) == []

    def test_null_data_is_empty(self) -> None:
        client = MopsClient(client=_client(lambda request: httpx.Response(200, json={"data": None})))

        assert client.fetch(WINDOW) == []

    def test_http_error_raises_fetch_error(self) -> None:
        client = MopsClient(client=_client(lambda request: httpx.Response(503)))

        with pytest.raises(FetchError, match="MOPS request failed"):
            client.fetch(WINDOW)

    def test_transport_error_raises_fetch_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("boom", request=request)

        client = MopsClient(client=_client(handler))

        with pytest.raises(FetchError):
            client.fetch(WINDOW)

    def test_non_json_raises_fetch_error(self) -> None:
        client = MopsClient(client=_client(lambda request: httpx.Response(200, text="<html>busy</html>")))

        with pytest.raises(FetchError, match="non-JSON"):
            client.fetch(WINDOW)

    def test_non_list_data_raises_fetch_error(self) -> None:
        client = MopsClient(client=_client(lambda request: httpx.Response(200, json={"data": "oops"})))

        with pytest.raises(FetchError):
            client.fetch(WINDOW)

    def test_context_manager_keeps_injected_client_open(self) -> None:
        http = _client(lambda request: httpx.Response(200, json={"data": []}))

        with MopsClient(client=http) as client:
            client.fetch(WINDOW)

        assert not http.is_closed
