"""Live-event extraction pipeline.

query -> formulated search -> web search -> completion -> typed events.

A failed search is fatal for the request. A failed, timed-out or unparsable
completion is not: the search results are mapped 1:1 into placeholder events
and the response is flagged as not AI-processed.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Union

from loguru import logger
from openai import OpenAIError
from pydantic import ValidationError

from app import llm_client
from app.config import settings
from app.errors import ConfigurationError, InvalidRequestError
from app.models.context import RequestContext
from app.models.schemas import LiveEvent, LiveEventsResponse, SearchResultItem
from app.services import platforms
from app.services.logger import log_event
from app.services.prompt_store import render_prompt
from app.tools import google_search

INTENT_TERMS = "live stream schedule broadcast"
NO_RESULTS_MESSAGE = "No results found for your search"

FALLBACK_TIME = "Check source for time"
FALLBACK_PARTICIPANTS = "See details"
FALLBACK_WHERE_TO_WATCH = "See link"

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")

# An event counts as past only once it is more than a day old, to absorb time zones.
PAST_EVENT_GRACE = timedelta(days=1)

_AT = re.compile(r"\s+at\s+", re.IGNORECASE)
_TZ_SUFFIX = re.compile(r"\s+(?:ET|CT|MT|PT|EST|EDT|CST|CDT|MST|MDT|PST|PDT)\b", re.IGNORECASE)
_EVENT_TIME_FORMATS = (
    "%B %d, %Y %I:%M %p",
    "%b %d, %Y %I:%M %p",
    "%A, %B %d, %Y %I:%M %p",
    "%a, %b %d, %Y %I:%M %p",
    "%B %d, %Y",
    "%b %d, %Y",
    "%A, %B %d, %Y",
    "%a, %b %d, %Y",
)

_TEXT_FIELDS = ("time", "participants", "whereToWatch", "link", "summary", "eventDate")


@dataclass(slots=True)
class Parsed:
    events: list[LiveEvent]


@dataclass(slots=True)
class Fallback:
    reason: str


ParseOutcome = Union[Parsed, Fallback]


@dataclass(slots=True)
class ExtractionResult:
    events: list[LiveEvent] = field(default_factory=list)
    ai_processed: bool = False
    fallback_reason: str | None = None


def formulate_query(query: str) -> str:
    cleaned = query.strip()
    if not cleaned:
        raise InvalidRequestError("Query is required")
    return f"{cleaned} {INTENT_TERMS}"


def fallback_events(results: list[SearchResultItem]) -> list[LiveEvent]:
    return [
        LiveEvent(
            event_name=item.title,
            time=FALLBACK_TIME,
            participants=FALLBACK_PARTICIPANTS,
            where_to_watch=FALLBACK_WHERE_TO_WATCH,
            link=item.url,
            summary=item.snippet,
        )
        for item in results
    ]


def build_search_context(results: list[SearchResultItem]) -> str:
    return "\n\n".join(
        f"[{i}] Title: {item.title}\nSnippet: {item.snippet}\nLink: {item.url}"
        for i, item in enumerate(results, 1)
    )


def build_messages(query: str, results: list[SearchResultItem], *, today: date | None = None) -> tuple[str, str]:
    today_iso = (today or date.today()).isoformat()
    system = render_prompt("live_events.system_prompt", today_iso=today_iso)
    user = render_prompt(
        "live_events.user_prompt",
        query=query,
        today_iso=today_iso,
        search_context=build_search_context(results),
    )
    return system, user


def _load_event_list(raw_text: str) -> Any:
    match = _JSON_ARRAY.search(raw_text)
    if match:
        return json.loads(match.group(0))
    return json.loads(raw_text)


def _parse_event_time(text: str) -> datetime | None:
    cleaned = _TZ_SUFFIX.sub("", _AT.sub(" ", text.strip())).strip()
    for fmt in _EVENT_TIME_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    return None


def is_event_in_past(time: str | None, event_date: str | None, *, now: datetime | None = None) -> bool:
    """True only when the event provably started more than a day ago.

    eventDate (ISO) is preferred; otherwise only time strings that carry a
    year are considered. Anything unparsable is kept.
    """
    started = None
    if event_date:
        try:
            started = datetime.fromisoformat(event_date.strip())
        except ValueError:
            started = None
    if started is None and time:
        started = _parse_event_time(time)
    if started is None:
        return False
    if started.tzinfo is not None:
        started = started.astimezone().replace(tzinfo=None)
    return (now or datetime.now()) - started > PAST_EVENT_GRACE


def parse_events(raw_text: str, *, now: datetime | None = None) -> ParseOutcome:
    """Parse model output into upcoming events without raising."""
    try:
        payload = _load_event_list(raw_text)
    except (json.JSONDecodeError, RecursionError) as e:
        return Fallback(reason=f"unparsable completion: {e}")

    if not isinstance(payload, list):
        return Fallback(reason=f"completion is a JSON {type(payload).__name__}, not an array")

    events: list[LiveEvent] = []
    for idx, item in enumerate(payload):
        if not isinstance(item, dict):
            logger.warning(f"Dropping event {idx}: not an object")
            continue
        try:
            events.append(LiveEvent.model_validate(_coerce_strings(item)))
        except ValidationError as e:
            logger.warning(f"Dropping event {idx}: {e.errors()[0].get('msg')}")

    if payload and not events:
        return Fallback(reason="no event in the completion had an eventName")

    upcoming = [e for e in events if not is_event_in_past(e.time, e.event_date, now=now)]
    if len(upcoming) < len(events):
        logger.info(f"Filtered {len(events) - len(upcoming)} past events, {len(upcoming)} upcoming")
    return Parsed(events=upcoming)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ", ".join(_as_text(v) for v in value if v is not None)
    if isinstance(value, (dict, bool)):
        return json.dumps(value)
    return str(value)


def _coerce_platform_details(value: Any) -> list[dict[str, str]] | None:
    if not isinstance(value, list):
        return None
    details = []
    for entry in value:
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str) or not entry["name"].strip():
            continue
        name = entry["name"].strip()
        status = entry.get("status")
        details.append({
            "name": name,
            "status": _as_text(status) if status is not None else platforms.default_status(name),
        })
    return details


def _coerce_strings(item: dict[str, Any]) -> dict[str, Any]:
    # Models emit numbers, lists or objects for free-text fields; only eventName is mandatory.
    coerced: dict[str, Any] = {}
    for key, value in item.items():
        if key == "eventName":
            coerced[key] = value.strip() if isinstance(value, str) and value.strip() else None
        elif value is None:
            continue
        elif key == "streamingPlatforms":
            names = value if isinstance(value, list) else [value]
            coerced[key] = [p for p in names if isinstance(p, str)]
        elif key == "platformDetails":
            coerced[key] = _coerce_platform_details(value)
        elif key in _TEXT_FIELDS:
            coerced[key] = _as_text(value)
    return coerced


async def extract_events(query: str, results: list[SearchResultItem]) -> ExtractionResult:
    system, user = build_messages(query, results)
    try:
        raw_text = await llm_client.complete(system=system, user=user, caller="live_events.extract")
    except OpenAIError as e:
        outcome: ParseOutcome = Fallback(reason=f"completion failed: {e}")
    else:
        logger.debug(f"Completion raw response: {raw_text[:500]}")
        outcome = parse_events(raw_text)

    if isinstance(outcome, Parsed):
        return ExtractionResult(
            events=[platforms.enrich_event(event) for event in outcome.events],
            ai_processed=True,
        )

    logger.warning(f"Using fallback events: {outcome.reason}")
    return ExtractionResult(
        events=fallback_events(results),
        ai_processed=False,
        fallback_reason=outcome.reason,
    )


def _require_credentials() -> None:
    if not settings.google_pse_api_key:
        raise ConfigurationError("Google API key not configured")
    if not settings.completion_api_key:
        raise ConfigurationError("Completion API key not configured")


async def search_live_events(query: Any, context: RequestContext) -> LiveEventsResponse:
    if not isinstance(query, str) or not query.strip():
        raise InvalidRequestError("Query is required")
    _require_credentials()

    query = query.strip()
    search_query = formulate_query(query)
    log_event("live_search_started", "Live event search started", query=query[:100], user=context.user)

    results = await google_search.search(search_query, max_results=settings.live_search_page_size)
    logger.info(f"Found {len(results)} search results for {search_query!r}")
    if not results:
        return LiveEventsResponse(events=[], message=NO_RESULTS_MESSAGE)

    extraction = await extract_events(query, results)
    log_event(
        "live_search_completed",
        "Live event search completed",
        events=len(extraction.events),
        ai_processed=extraction.ai_processed,
        fallback_reason=extraction.fallback_reason,
    )
    return LiveEventsResponse(events=extraction.events, ai_processed=extraction.ai_processed)
