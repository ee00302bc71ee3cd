"""Movie/TV search with per-title watch-provider fan-out."""
from __future__ import annotations

import asyncio
from typing import Any

import httpx
from loguru import logger

from app.config import settings
from app.errors import ConfigurationError, InvalidRequestError, UpstreamError
from app.models.context import RequestContext
from app.models.schemas import MediaDetails, MediaSearchResponse, MediaSearchResult, Recommendation
from app.tools import tmdb

MEDIA_TYPES = ("movie", "tv")


def _require_api_key() -> None:
    if not settings.tmdb_api_key:
        raise ConfigurationError("TMDB API key not configured")


def format_runtime(minutes: int | None) -> str | None:
    if not minutes:
        return None
    hours, mins = divmod(int(minutes), 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def _title(item: dict[str, Any]) -> str:
    return item.get("title") or item.get("name") or "Unknown"


def build_result(item: dict[str, Any], providers: tmdb.WatchProviders) -> MediaSearchResult:
    media_type = item["media_type"]
    return MediaSearchResult(
        tmdb_id=item["id"],
        media_type=media_type,
        title=_title(item),
        poster_path=item.get("poster_path"),
        release_year=tmdb.release_year(item),
        genres=tmdb.genre_names(item.get("genre_ids"), media_type),
        streaming_platforms=providers.streaming,
        rent_platforms=providers.rent,
        buy_platforms=providers.buy,
        overview=item.get("overview") or "",
    )


async def _providers_or_empty(
    client: httpx.AsyncClient,
    item: dict[str, Any],
    region: str,
    semaphore: asyncio.Semaphore,
) -> tmdb.WatchProviders:
    async with semaphore:
        try:
            return await tmdb.get_watch_providers(client, item["media_type"], item["id"], region)
        except (UpstreamError, httpx.HTTPError, ValueError, AttributeError, TypeError) as e:
            logger.warning(f"Watch providers unavailable for {item['media_type']}/{item['id']}: {e}")
            return tmdb.WatchProviders()


async def search_media(query: Any, context: RequestContext, *, region: str | None = None) -> MediaSearchResponse:
    if not isinstance(query, str) or not query:
        raise InvalidRequestError("Query parameter is required")
    _require_api_key()

    region = context.region_for(region)
    logger.info(f"Searching TMDB multi for {query!r} in region {region}")

    async with tmdb.new_client() as client:
        raw_results = await tmdb.search_multi(client, query)
        matches = [item for item in raw_results if item.get("media_type") in MEDIA_TYPES]
        matches = matches[: settings.tmdb_max_results]
        logger.info(f"TMDB returned {len(raw_results)} results, kept {len(matches)}")

        semaphore = asyncio.Semaphore(max(settings.tmdb_max_parallel_requests, 1))
        providers = await asyncio.gather(
            *(_providers_or_empty(client, item, region, semaphore) for item in matches)
        )

    # gather preserves argument order, so results line up with matches.
    return MediaSearchResponse(
        results=[build_result(item, found) for item, found in zip(matches, providers)]
    )


def _director(data: dict[str, Any], media_type: str) -> str | None:
    if media_type == "movie":
        for member in (data.get("credits") or {}).get("crew") or []:
            if member.get("job") == "Director":
                return member.get("name")
        return None
    creators = data.get("created_by") or []
    return creators[0].get("name") if creators else None


def _trailer_key(data: dict[str, Any]) -> str | None:
    for video in (data.get("videos") or {}).get("results") or []:
        if video.get("site") == "YouTube" and video.get("type") == "Trailer":
            return video.get("key")
    return None


def _recommendations(data: dict[str, Any], fallback_media_type: str) -> list[Recommendation]:
    recs: list[Recommendation] = []
    for item in ((data.get("recommendations") or {}).get("results") or [])[:10]:
        recs.append(
            Recommendation(
                tmdb_id=item["id"],
                title=_title(item),
                media_type=item.get("media_type") or fallback_media_type,
                poster_path=item.get("poster_path"),
                release_year=tmdb.release_year(item),
            )
        )
    return recs


def build_details(data: dict[str, Any], media_type: str, region: str) -> MediaDetails:
    providers = tmdb.parse_region_providers(
        ((data.get("watch/providers") or {}).get("results") or {}).get(region)
    )

    if media_type == "movie":
        runtime = data.get("runtime")
    else:
        episode_run_time = data.get("episode_run_time") or []
        runtime = episode_run_time[0] if episode_run_time else None

    origin_country = data.get("origin_country") or [
        c.get("iso_3166_1") for c in data.get("production_countries") or [] if c.get("iso_3166_1")
    ]
    vote_average = data.get("vote_average")
    external_ids = data.get("external_ids") or {}

    return MediaDetails(
        tmdb_id=data["id"],
        media_type=media_type,
        title=_title(data),
        poster_path=data.get("poster_path"),
        backdrop_path=data.get("backdrop_path"),
        release_year=tmdb.release_year(data),
        genres=[g["name"] for g in data.get("genres") or [] if g.get("name")],
        streaming_platforms=providers.streaming,
        rent_platforms=providers.rent,
        buy_platforms=providers.buy,
        overview=data.get("overview") or "",
        runtime=format_runtime(runtime),
        director=_director(data, media_type),
        cast=[c.get("name") for c in ((data.get("credits") or {}).get("cast") or [])[:5] if c.get("name")],
        tmdb_rating=round(vote_average, 1) if vote_average else None,
        origin_country=origin_country[:2],
        imdb_id=external_ids.get("imdb_id") or data.get("imdb_id"),
        trailer_key=_trailer_key(data),
        recommendations=_recommendations(data, media_type),
        tagline=data.get("tagline") or None,
        status=data.get("status"),
        number_of_seasons=data.get("number_of_seasons"),
        number_of_episodes=data.get("number_of_episodes"),
    )


async def get_media_details(
    tmdb_id: Any,
    media_type: Any,
    context: RequestContext,
    *,
    region: str | None = None,
) -> MediaDetails:
    if not isinstance(tmdb_id, int) or isinstance(tmdb_id, bool):
        raise InvalidRequestError("tmdb_id is required")
    if media_type not in MEDIA_TYPES:
        raise InvalidRequestError("media_type must be 'movie' or 'tv'")
    _require_api_key()

    region = context.region_for(region)
    async with tmdb.new_client() as client:
        data = await tmdb.get_details(client, media_type, tmdb_id)
    return build_details(data, media_type, region)
