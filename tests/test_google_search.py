from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from app.errors import ConfigurationError, UpstreamError
from app.tools import google_search


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.text = str(payload)

    @property
    def is_success(self):
        return 200 <= self.status_code < 300

    def json(self):
        return self._payload


class FakeClient:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def get(self, url, params=None):
        self.calls.append((url, params))
        if self.exc:
            raise self.exc
        return self.response


def _configure(mock_settings, key="pse-key"):
    mock_settings.google_pse_api_key = key
    mock_settings.google_pse_engine_id = "engine"
    mock_settings.google_pse_base_url = "https://search.test/customsearch/v1"
    mock_settings.live_search_page_size = 5
    mock_settings.search_timeout_sec = 5.0


@pytest.mark.asyncio
async def test_search_maps_items_in_order():
    payload = {
        "items": [
            {"title": "Game 1", "snippet": "Tip-off 7pm", "link": "https://a.com/1"},
            {"title": "Game 2", "link": "https://a.com/2"},
        ]
    }
    client = FakeClient(FakeResponse(payload))
    with (
        patch("app.tools.google_search.settings") as mock_settings,
        patch("app.tools.google_search.httpx.AsyncClient", return_value=client),
    ):
        _configure(mock_settings)
        results = await google_search.search("lakers live stream schedule broadcast")

    assert [r.title for r in results] == ["Game 1", "Game 2"]
    assert results[0].snippet == "Tip-off 7pm"
    assert results[0].url == "https://a.com/1"
    assert results[1].snippet == ""
    _, params = client.calls[0]
    assert params["num"] == 5
    assert params["cx"] == "engine"
    assert params["q"] == "lakers live stream schedule broadcast"


@pytest.mark.asyncio
async def test_search_without_items_returns_empty_list():
    client = FakeClient(FakeResponse({"searchInformation": {"totalResults": "0"}}))
    with (
        patch("app.tools.google_search.settings") as mock_settings,
        patch("app.tools.google_search.httpx.AsyncClient", return_value=client),
    ):
        _configure(mock_settings)
        assert await google_search.search("nothing") == []


@pytest.mark.asyncio
async def test_search_non_success_raises_with_upstream_status():
    error = {"error": {"code": 403, "message": "API key not valid"}}
    client = FakeClient(FakeResponse(error, status_code=403))
    with (
        patch("app.tools.google_search.settings") as mock_settings,
        patch("app.tools.google_search.httpx.AsyncClient", return_value=client),
    ):
        _configure(mock_settings)
        with pytest.raises(UpstreamError) as exc_info:
            await google_search.search("q")

    assert exc_info.value.upstream_status == 403
    assert exc_info.value.details == {"code": 403, "message": "API key not valid"}


@pytest.mark.asyncio
async def test_search_timeout_is_a_failure():
    client = FakeClient(exc=httpx.ReadTimeout("too slow"))
    with (
        patch("app.tools.google_search.settings") as mock_settings,
        patch("app.tools.google_search.httpx.AsyncClient", return_value=client),
    ):
        _configure(mock_settings)
        with pytest.raises(UpstreamError, match="timed out"):
            await google_search.search("q")


@pytest.mark.asyncio
async def test_search_requires_api_key():
    with patch("app.tools.google_search.settings") as mock_settings:
        _configure(mock_settings, key="")
        with pytest.raises(ConfigurationError):
            await google_search.search("q")
