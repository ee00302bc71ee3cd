from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_request_context
from app.models.context import RequestContext
from app.models.schemas import (
    LiveEventsRequest,
    LiveEventsResponse,
    MediaDetails,
    MediaSearchRequest,
    MediaSearchResponse,
)
from app.services import live_events, media_search

router = APIRouter(tags=["search"])


@router.post(
    "/search-live-events",
    response_model=LiveEventsResponse,
    response_model_exclude_none=True,
)
async def search_live_events(
    request: LiveEventsRequest,
    context: RequestContext = Depends(get_request_context),
):
    """Find upcoming live events and where to watch them."""
    return await live_events.search_live_events(request.query, context)


@router.post("/search-tmdb", response_model=MediaSearchResponse | MediaDetails)
async def search_tmdb(
    request: MediaSearchRequest,
    context: RequestContext = Depends(get_request_context),
):
    """Search movies and TV shows, or fetch one title's details."""
    if request.include_details:
        return await media_search.get_media_details(
            request.tmdb_id,
            request.media_type,
            context,
            region=request.region,
        )
    return await media_search.search_media(request.query, context, region=request.region)
