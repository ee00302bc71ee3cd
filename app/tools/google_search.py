from __future__ import annotations

import time
from typing import Any

import httpx

from app.config import settings
from app.errors import ConfigurationError, UpstreamError
from app.models.schemas import SearchResultItem
from app.services.logger import log_upstream_call

MAX_PAGE_SIZE = 10  # hard cap of the custom search API


def _error_details(response: httpx.Response) -> Any:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:500]
    if isinstance(payload, dict) and "error" in payload:
        return payload["error"]
    return payload


async def search(query: str, *, max_results: int | None = None) -> list[SearchResultItem]:
    """Run one Programmable Search query and return items in relevance order."""
    if not settings.google_pse_api_key:
        raise ConfigurationError("Google API key not configured")

    count = max_results or settings.live_search_page_size
    params: dict[str, Any] = {
        "key": settings.google_pse_api_key,
        "cx": settings.google_pse_engine_id,
        "q": query,
        "num": max(1, min(count, MAX_PAGE_SIZE)),
    }

    started = time.monotonic()
    try:
        async with httpx.AsyncClient(timeout=settings.search_timeout_sec) as client:
            response = await client.get(settings.google_pse_base_url, params=params)
    except httpx.TimeoutException as e:
        log_upstream_call("google_pse", "search", "error", error=f"timeout: {e}")
        raise UpstreamError("Search request timed out") from e
    except httpx.HTTPError as e:
        log_upstream_call("google_pse", "search", "error", error=str(e))
        raise UpstreamError("Search failed", details=str(e)) from e

    duration_ms = int((time.monotonic() - started) * 1000)
    if not response.is_success:
        details = _error_details(response)
        log_upstream_call(
            "google_pse",
            "search",
            "error",
            duration_ms=duration_ms,
            status_code=response.status_code,
            error=str(details)[:300],
        )
        raise UpstreamError(
            "Search failed",
            upstream_status=response.status_code,
            details=details,
        )

    payload = response.json()
    if isinstance(payload, dict) and payload.get("error"):
        raise UpstreamError("Search failed", details=payload["error"])

    log_upstream_call(
        "google_pse",
        "search",
        "success",
        duration_ms=duration_ms,
        status_code=response.status_code,
    )

    return [
        SearchResultItem(
            title=item.get("title", "") or "",
            snippet=item.get("snippet", "") or "",
            url=item.get("link", "") or "",
        )
        for item in (payload.get("items") or [])
    ]
