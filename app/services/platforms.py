"""Static platform tables for live events.

Maps broadcast channels to the streaming services that carry them, assigns a
default availability status to platforms the model did not describe, and
classifies free-text statuses into display styles.
"""
from __future__ import annotations

import re

from app.models.schemas import LiveEvent, PlatformInfo

UNKNOWN_WHERE_TO_WATCH = "tbd"

CHANNEL_TO_STREAMING: dict[str, list[str]] = {
    "ABC": ["Hulu + Live TV", "YouTube TV", "Fubo", "DirecTV Stream"],
    "ESPN": ["Hulu + Live TV", "YouTube TV", "Fubo", "Sling Orange", "DirecTV Stream", "ESPN App"],
    "ESPN2": ["Hulu + Live TV", "YouTube TV", "Fubo", "Sling Orange", "DirecTV Stream", "ESPN App"],
    "ESPNU": ["Hulu + Live TV", "YouTube TV", "Fubo", "Sling Orange", "DirecTV Stream", "ESPN App"],
    "ESPNEWS": ["Hulu + Live TV", "YouTube TV", "Fubo", "Sling Orange", "DirecTV Stream", "ESPN App"],
    "ESPN+": ["ESPN+"],
    "FOX": ["YouTube TV", "Fubo", "Hulu + Live TV", "DirecTV Stream", "Sling Blue"],
    "FS1": ["YouTube TV", "Fubo", "Hulu + Live TV", "DirecTV Stream", "Sling Blue"],
    "FS2": ["YouTube TV", "Fubo", "Hulu + Live TV", "DirecTV Stream", "Sling Blue"],
    "Fox Sports": ["YouTube TV", "Fubo", "Hulu + Live TV", "DirecTV Stream", "Sling Blue"],
    "CBS": ["Paramount+", "YouTube TV", "Hulu + Live TV", "Fubo", "DirecTV Stream"],
    "CBS Sports Network": ["Paramount+", "YouTube TV", "Fubo", "DirecTV Stream"],
    "NBC": ["Peacock", "YouTube TV", "Hulu + Live TV", "Fubo", "DirecTV Stream"],
    "Peacock": ["Peacock"],
    "Prime Video": ["Prime Video"],
    "Amazon Prime": ["Prime Video"],
    "TNT": ["Max", "YouTube TV", "Hulu + Live TV", "DirecTV Stream"],
    "TBS": ["Max", "YouTube TV", "Hulu + Live TV", "DirecTV Stream"],
    "truTV": ["Max", "YouTube TV", "Hulu + Live TV", "DirecTV Stream"],
    "NFL Network": ["YouTube TV", "Fubo", "Sling Blue", "DirecTV Stream"],
    "NBA TV": ["YouTube TV", "Fubo", "Sling Orange", "DirecTV Stream"],
    "MLB Network": ["YouTube TV", "Fubo", "Sling Orange", "DirecTV Stream"],
    "NHL Network": ["YouTube TV", "Fubo", "DirecTV Stream"],
    "USA Network": ["Peacock", "YouTube TV", "Hulu + Live TV", "Fubo", "DirecTV Stream"],
    "USA": ["Peacock", "YouTube TV", "Hulu + Live TV", "Fubo", "DirecTV Stream"],
    "SEC Network": ["ESPN+", "Hulu + Live TV", "YouTube TV", "Fubo", "Sling Orange", "DirecTV Stream"],
    "SEC Network+": ["ESPN+", "ESPN App"],
    "Big Ten Network": ["Peacock", "YouTube TV", "Fubo", "Hulu + Live TV", "DirecTV Stream"],
    "BTN": ["Peacock", "YouTube TV", "Fubo", "Hulu + Live TV", "DirecTV Stream"],
    "ACC Network": ["ESPN+", "Hulu + Live TV", "YouTube TV", "Fubo", "Sling Orange", "DirecTV Stream"],
    "ACC Network Extra": ["ESPN+", "ESPN App"],
    "Telemundo": ["Peacock", "YouTube TV", "Hulu + Live TV", "Fubo"],
    "Universo": ["YouTube TV", "Fubo"],
    "beIN Sports": ["Fubo", "Sling Orange"],
    "Apple TV": ["Apple TV+"],
    "Apple TV+": ["Apple TV+"],
    "MLS Season Pass": ["Apple TV+"],
    "DAZN": ["DAZN"],
    "Tennis Channel": ["YouTube TV", "Fubo", "Sling Orange"],
    "Golf Channel": ["Peacock", "YouTube TV", "Fubo", "Sling Blue"],
}

_CHANNEL_LOOKUP = {name.lower(): name for name in CHANNEL_TO_STREAMING}

LIVE_TV_SERVICES = (
    "Hulu + Live TV",
    "YouTube TV",
    "Fubo",
    "DirecTV Stream",
    "Sling Orange",
    "Sling Blue",
)

BROADCAST_NETWORKS = (
    "ABC",
    "CBS",
    "NBC",
    "FOX",
    "Fox Sports",
    "FS1",
    "ESPN",
    "ESPN2",
    "TNT",
    "TBS",
    "NFL Network",
    "NBA TV",
    "MLB Network",
    "USA Network",
)

SUBSCRIPTION_SERVICES = (
    "ESPN+",
    "Peacock",
    "Paramount+",
    "Max",
    "Prime Video",
)

# Channel lists in free text: "ESPN, ABC", "TNT / truTV", "FOX and FS1".
_CHANNEL_SPLIT = re.compile(r"\s*(?:,|/|&|;|\band\b|\bor\b)\s*", re.IGNORECASE)
_PAID_STATUS = re.compile(r"\b(?:rent|rental|buy)\b")


def default_status(platform: str) -> str:
    """Status for a platform the event did not describe. First match wins."""
    if platform in LIVE_TV_SERVICES:
        return "Included"
    if platform in BROADCAST_NETWORKS:
        return "Live broadcast"
    if "app" in platform.lower():
        return "Included with provider login"
    if platform in SUBSCRIPTION_SERVICES:
        return f"Included with {platform} subscription"
    return "Included"


def status_style(status: str) -> str:
    """Classify a free-text status into one of the badge styles."""
    lowered = status.lower()
    if _PAID_STATUS.search(lowered):
        return "paid"
    if "provider login" in lowered:
        return "provider_login"
    if "subscription" in lowered:
        return "subscription"
    if "broadcast" in lowered:
        return "broadcast"
    return "included"


def is_unknown_where_to_watch(value: str | None) -> bool:
    return not value or value.strip().lower() == UNKNOWN_WHERE_TO_WATCH


def channels_to_platforms(where_to_watch: str | None) -> list[str]:
    """Known channels named in a whereToWatch string, each followed by the services carrying it."""
    if is_unknown_where_to_watch(where_to_watch):
        return []
    platforms: list[str] = []
    for channel in _CHANNEL_SPLIT.split(where_to_watch or ""):
        name = _CHANNEL_LOOKUP.get(channel.strip().lower())
        if name:
            platforms.append(name)
            platforms.extend(CHANNEL_TO_STREAMING[name])
    return _dedupe(platforms)


def resolve_platform_details(event: LiveEvent) -> list[PlatformInfo]:
    """platformDetails when present (even empty), otherwise streamingPlatforms with default statuses."""
    if event.platform_details is not None:
        return list(event.platform_details)
    return [
        PlatformInfo(name=name, status=default_status(name))
        for name in _dedupe(event.streaming_platforms or [])
    ]


def enrich_event(event: LiveEvent) -> LiveEvent:
    """Fill streamingPlatforms from the channel table and synthesize platformDetails."""
    platforms = _dedupe([*(event.streaming_platforms or []), *channels_to_platforms(event.where_to_watch)])
    enriched = event.model_copy(update={"streaming_platforms": platforms or event.streaming_platforms})
    details = resolve_platform_details(enriched)
    if details:
        enriched = enriched.model_copy(update={"platform_details": details})
    return enriched


def _dedupe(names: list[str]) -> list[str]:
    seen: set[str] = set()
    deduped: list[str] = []
    for name in names:
        cleaned = name.strip() if isinstance(name, str) else ""
        if not cleaned or cleaned in seen:
            continue
        seen.add(cleaned)
        deduped.append(cleaned)
    return deduped
