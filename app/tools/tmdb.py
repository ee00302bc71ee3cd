from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.config import settings
from app.errors import UpstreamError
from app.services.logger import log_upstream_call

MOVIE_GENRES: dict[int, str] = {
    28: "Action", 12: "Adventure", 16: "Animation", 35: "Comedy", 80: "Crime",
    99: "Documentary", 18: "Drama", 10751: "Family", 14: "Fantasy", 36: "History",
    27: "Horror", 10402: "Music", 9648: "Mystery", 10749: "Romance", 878: "Sci-Fi",
    10770: "TV Movie", 53: "Thriller", 10752: "War", 37: "Western",
}

TV_GENRES: dict[int, str] = {
    10759: "Action & Adventure", 16: "Animation", 35: "Comedy", 80: "Crime",
    99: "Documentary", 18: "Drama", 10751: "Family", 10762: "Kids", 9648: "Mystery",
    10763: "News", 10764: "Reality", 10765: "Sci-Fi & Fantasy", 10766: "Soap",
    10767: "Talk", 10768: "War & Politics", 37: "Western",
}

STREAMING_TIERS = ("flatrate", "free", "ads")
DETAILS_APPENDS = "credits,watch/providers,external_ids,videos,recommendations"


@dataclass(slots=True)
class WatchProviders:
    streaming: list[str] = field(default_factory=list)
    rent: list[str] = field(default_factory=list)
    buy: list[str] = field(default_factory=list)


def genre_names(genre_ids: list[int] | None, media_type: str) -> list[str]:
    """Map genre ids to names; ids missing from the table are dropped."""
    table = MOVIE_GENRES if media_type == "movie" else TV_GENRES
    return [table[gid] for gid in (genre_ids or []) if gid in table]


def release_year(item: dict[str, Any]) -> int | None:
    released = item.get("release_date") or item.get("first_air_date")
    if not isinstance(released, str):
        return None
    try:
        return int(released[:4])
    except ValueError:
        return None


def parse_region_providers(region_data: dict[str, Any] | None) -> WatchProviders:
    """Streaming is the union of flatrate/free/ads; rent and buy stay separate."""
    if not region_data:
        return WatchProviders()

    def names(tiers: tuple[str, ...]) -> list[str]:
        collected: list[str] = []
        for tier in tiers:
            for provider in region_data.get(tier) or []:
                name = provider.get("provider_name")
                if name and name not in collected:
                    collected.append(name)
        return collected

    return WatchProviders(
        streaming=names(STREAMING_TIERS),
        rent=names(("rent",)),
        buy=names(("buy",)),
    )


def new_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.tmdb_base_url,
        timeout=settings.tmdb_timeout_sec,
    )


async def _get(client: httpx.AsyncClient, path: str, operation: str, **params: Any) -> dict[str, Any]:
    params["api_key"] = settings.tmdb_api_key
    started = time.monotonic()
    try:
        response = await client.get(path, params=params)
    except httpx.TimeoutException as e:
        log_upstream_call("tmdb", operation, "error", error=f"timeout: {e}")
        raise UpstreamError(f"TMDB {operation} timed out") from e
    except httpx.HTTPError as e:
        log_upstream_call("tmdb", operation, "error", error=str(e))
        raise UpstreamError(f"TMDB {operation} failed", details=str(e)) from e

    duration_ms = int((time.monotonic() - started) * 1000)
    if not response.is_success:
        log_upstream_call(
            "tmdb",
            operation,
            "error",
            duration_ms=duration_ms,
            status_code=response.status_code,
            error=response.text[:300],
        )
        raise UpstreamError(
            f"TMDB {operation} failed",
            upstream_status=response.status_code,
            details=response.text[:500],
        )

    log_upstream_call("tmdb", operation, "success", duration_ms=duration_ms, status_code=response.status_code)
    return response.json()


async def search_multi(client: httpx.AsyncClient, query: str) -> list[dict[str, Any]]:
    payload = await _get(
        client,
        "/search/multi",
        "search",
        query=query,
        language="en-US",
        include_adult="false",
        page=1,
    )
    return payload.get("results") or []


async def get_watch_providers(
    client: httpx.AsyncClient,
    media_type: str,
    tmdb_id: int,
    region: str,
) -> WatchProviders:
    payload = await _get(client, f"/{media_type}/{tmdb_id}/watch/providers", "watch_providers")
    return parse_region_providers((payload.get("results") or {}).get(region))


async def get_details(client: httpx.AsyncClient, media_type: str, tmdb_id: int) -> dict[str, Any]:
    return await _get(
        client,
        f"/{media_type}/{tmdb_id}",
        "details",
        append_to_response=DETAILS_APPENDS,
        language="en-US",
    )
