from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire shape for the live-events endpoint uses camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Requests ---


class LiveEventsRequest(BaseModel):
    query: Any = None


class MediaSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: Any = None
    region: str | None = None
    tmdb_id: int | None = None
    media_type: str | None = None
    include_details: bool = Field(default=False, alias="includeDetails")


# --- Live events ---


class SearchResultItem(BaseModel):
    title: str = ""
    snippet: str = ""
    url: str = ""


class PlatformInfo(BaseModel):
    name: str
    status: str


class LiveEvent(CamelModel):
    event_name: str
    time: str = ""
    participants: str = ""
    where_to_watch: str = ""
    link: str = ""
    summary: str = ""
    event_date: str | None = None
    streaming_platforms: list[str] | None = None
    platform_details: list[PlatformInfo] | None = None


class LiveEventsResponse(CamelModel):
    events: list[LiveEvent]
    ai_processed: bool | None = None
    message: str | None = None


# --- Movie / TV metadata ---


class MediaSearchResult(BaseModel):
    tmdb_id: int
    media_type: Literal["movie", "tv"]
    title: str
    poster_path: str | None = None
    release_year: int | None = None
    genres: list[str] = Field(default_factory=list)
    streaming_platforms: list[str] = Field(default_factory=list)
    rent_platforms: list[str] = Field(default_factory=list)
    buy_platforms: list[str] = Field(default_factory=list)
    overview: str = ""


class MediaSearchResponse(BaseModel):
    results: list[MediaSearchResult]


class Recommendation(BaseModel):
    tmdb_id: int
    title: str
    media_type: str
    poster_path: str | None = None
    release_year: int | None = None


class MediaDetails(MediaSearchResult):
    backdrop_path: str | None = None
    runtime: str | None = None
    director: str | None = None
    cast: list[str] = Field(default_factory=list)
    tmdb_rating: float | None = None
    origin_country: list[str] = Field(default_factory=list)
    imdb_id: str | None = None
    trailer_key: str | None = None
    recommendations: list[Recommendation] = Field(default_factory=list)
    tagline: str | None = None
    status: str | None = None
    number_of_seasons: int | None = None
    number_of_episodes: int | None = None


class HealthResponse(BaseModel):
    status: str
    service: str
