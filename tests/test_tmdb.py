from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from app.errors import UpstreamError
from app.tools import tmdb


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
    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    async def get(self, path, params=None):
        self.calls.append((path, params))
        outcome = self.routes[path]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.mark.parametrize(
    ("item", "expected"),
    [
        ({"release_date": "2023-07-19"}, 2023),
        ({"first_air_date": "2008-01-20"}, 2008),
        ({"release_date": "1999-03-31", "first_air_date": "2001-01-01"}, 1999),
        ({"release_date": "", "first_air_date": "2001-01-01"}, 2001),
        ({}, None),
        ({"release_date": "soon"}, None),
    ],
)
def test_release_year(item, expected):
    assert tmdb.release_year(item) == expected


def test_parse_region_providers_merges_streaming_tiers_only():
    region = {
        "flatrate": [{"provider_name": "Netflix"}],
        "free": [{"provider_name": "Pluto TV"}, {"provider_name": "Netflix"}],
        "ads": [{"provider_name": "Tubi"}],
        "rent": [{"provider_name": "Apple TV"}],
        "buy": [{"provider_name": "Apple TV"}, {"provider_name": "Google Play Movies"}],
    }

    providers = tmdb.parse_region_providers(region)

    assert providers.streaming == ["Netflix", "Pluto TV", "Tubi"]
    assert providers.rent == ["Apple TV"]
    assert providers.buy == ["Apple TV", "Google Play Movies"]


def test_parse_region_providers_missing_region():
    assert tmdb.parse_region_providers(None) == tmdb.WatchProviders()


@pytest.mark.asyncio
async def test_search_multi_sends_query_and_key():
    client = FakeClient({"/search/multi": FakeResponse({"results": [{"id": 1, "media_type": "movie"}]})})
    with patch("app.tools.tmdb.settings") as mock_settings:
        mock_settings.tmdb_api_key = "tmdb-key"
        results = await tmdb.search_multi(client, "Dune")

    assert results == [{"id": 1, "media_type": "movie"}]
    path, params = client.calls[0]
    assert params["query"] == "Dune"
    assert params["api_key"] == "tmdb-key"
    assert params["include_adult"] == "false"


@pytest.mark.asyncio
async def test_search_multi_failure_raises_upstream_error():
    client = FakeClient({"/search/multi": FakeResponse({"status_message": "Invalid API key"}, status_code=401)})
    with patch("app.tools.tmdb.settings") as mock_settings:
        mock_settings.tmdb_api_key = "bad"
        with pytest.raises(UpstreamError) as exc_info:
            await tmdb.search_multi(client, "Dune")

    assert exc_info.value.upstream_status == 401


@pytest.mark.asyncio
async def test_get_watch_providers_picks_region():
    payload = {
        "results": {
            "US": {"flatrate": [{"provider_name": "Max"}]},
            "GB": {"flatrate": [{"provider_name": "Sky Go"}]},
        }
    }
    client = FakeClient({"/movie/438631/watch/providers": FakeResponse(payload)})
    with patch("app.tools.tmdb.settings") as mock_settings:
        mock_settings.tmdb_api_key = "k"
        providers = await tmdb.get_watch_providers(client, "movie", 438631, "GB")

    assert providers.streaming == ["Sky Go"]


@pytest.mark.asyncio
async def test_transport_timeout_raises_upstream_error():
    client = FakeClient({"/tv/1/watch/providers": httpx.ConnectTimeout("slow")})
    with patch("app.tools.tmdb.settings") as mock_settings:
        mock_settings.tmdb_api_key = "k"
        with pytest.raises(UpstreamError, match="timed out"):
            await tmdb.get_watch_providers(client, "tv", 1, "US")
