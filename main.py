"""StreamGenie - where to watch

Simple CLI for running searches without the HTTP layer.
"""

import argparse
import asyncio
import sys

from app.errors import StreamGenieError
from app.models.context import Preferences, RequestContext
from app.models.schemas import LiveEvent, MediaSearchResult
from app.services import live_events, media_search
from app.services.platforms import resolve_platform_details, status_style

STYLE_MARKERS = {
    "paid": "$",
    "provider_login": "@",
    "subscription": "+",
    "broadcast": "~",
    "included": "*",
}


def print_event(index: int, event: LiveEvent) -> None:
    print(f"\n{index}. {event.event_name}")
    print(f"   When:  {event.time}")
    if event.participants:
        print(f"   Who:   {event.participants}")
    print(f"   Watch: {event.where_to_watch}")
    for platform in resolve_platform_details(event):
        marker = STYLE_MARKERS[status_style(platform.status)]
        print(f"     [{marker}] {platform.name} - {platform.status}")
    if event.summary:
        print(f"   {event.summary}")
    if event.link:
        print(f"   {event.link}")


def print_media(index: int, item: MediaSearchResult) -> None:
    year = f" ({item.release_year})" if item.release_year else ""
    print(f"\n{index}. {item.title}{year} [{item.media_type}]")
    if item.genres:
        print(f"   {', '.join(item.genres)}")
    print(f"   Stream: {', '.join(item.streaming_platforms) or 'not streaming'}")
    if item.rent_platforms:
        print(f"   Rent:   {', '.join(item.rent_platforms)}")
    if item.buy_platforms:
        print(f"   Buy:    {', '.join(item.buy_platforms)}")


async def run_live(query: str, context: RequestContext) -> None:
    print(f"Live events: {query}")
    print("-" * 50)
    response = await live_events.search_live_events(query, context)
    if not response.events:
        print(response.message or "No events found. Try a different search term.")
        return
    if response.ai_processed is False:
        print("[!] Results may be approximate: showing raw search results.")
    for i, event in enumerate(response.events, 1):
        print_event(i, event)


async def run_media(query: str, context: RequestContext) -> None:
    print(f"Movies & TV: {query}")
    print("-" * 50)
    response = await media_search.search_media(query, context)
    # Newest first is a display concern; the service keeps TMDB order.
    results = sorted(response.results, key=lambda r: r.release_year or 0, reverse=True)
    if not results:
        print("No titles found.")
    for i, item in enumerate(results, 1):
        print_media(i, item)


def main():
    parser = argparse.ArgumentParser(description="StreamGenie where-to-watch search")
    parser.add_argument("--query", "-q", required=True, help="Search query")
    parser.add_argument(
        "--mode",
        "-m",
        choices=("live", "media"),
        default="media",
        help="Search live events or movies/TV (default: media)",
    )
    parser.add_argument("--region", "-r", default="US", help="Watch-provider region")

    args = parser.parse_args()
    context = RequestContext(preferences=Preferences(region=args.region.upper()))
    runner = run_live if args.mode == "live" else run_media

    try:
        asyncio.run(runner(args.query, context))
    except StreamGenieError as e:
        print(f"\n[!] Error: {e.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
