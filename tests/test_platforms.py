from __future__ import annotations

import pytest

from app.models.schemas import LiveEvent, PlatformInfo
from app.services import platforms


@pytest.mark.parametrize(
    ("platform", "expected"),
    [
        ("YouTube TV", "Included"),
        ("Sling Orange", "Included"),
        ("ESPN", "Live broadcast"),
        ("NBC", "Live broadcast"),
        ("ESPN App", "Included with provider login"),
        ("Peacock", "Included with Peacock subscription"),
        ("Max", "Included with Max subscription"),
        ("DAZN", "Included"),
    ],
)
def test_default_status_table(platform, expected):
    assert platforms.default_status(platform) == expected


def test_default_status_app_rule_wins_over_later_rules():
    # "Apple TV+" contains "app", so the provider-login rule fires first.
    assert platforms.default_status("Apple TV+") == "Included with provider login"


@pytest.mark.parametrize(
    ("status", "style"),
    [
        ("Rent: $3.99", "paid"),
        ("Buy for $14.99", "paid"),
        ("Included with current cable plan", "included"),
        ("Free with parent account", "included"),
        ("Included with provider login", "provider_login"),
        ("Included with Peacock subscription", "subscription"),
        ("Live broadcast", "broadcast"),
        ("Included", "included"),
    ],
)
def test_status_style(status, style):
    assert platforms.status_style(status) == style


@pytest.mark.parametrize("value", ["TBD", "tbd", "  Tbd ", "", None])
def test_unknown_where_to_watch_maps_to_nothing(value):
    assert platforms.channels_to_platforms(value) == []


def test_channels_to_platforms_splits_and_dedupes():
    result = platforms.channels_to_platforms("TNT / truTV and ESPN+")

    assert result == ["TNT", "Max", "YouTube TV", "Hulu + Live TV", "DirecTV Stream", "truTV", "ESPN+"]


def test_broadcast_channel_leads_its_services_and_is_a_live_broadcast():
    enriched = platforms.enrich_event(LiveEvent(event_name="G", where_to_watch="espn"))

    assert enriched.streaming_platforms[0] == "ESPN"
    assert "ESPN App" in enriched.streaming_platforms
    assert (enriched.platform_details[0].name, enriched.platform_details[0].status) == ("ESPN", "Live broadcast")


def test_explicit_empty_platform_details_are_kept():
    event = LiveEvent(event_name="Match", streaming_platforms=["Peacock"], platform_details=[])

    assert platforms.resolve_platform_details(event) == []
    assert platforms.enrich_event(event).platform_details == []


def test_platform_details_supersede_streaming_platforms():
    event = LiveEvent(
        event_name="Fight Night",
        streaming_platforms=["ESPN+"],
        platform_details=[PlatformInfo(name="ESPN+", status="Rent: $79.99 PPV")],
    )

    details = platforms.resolve_platform_details(event)

    assert details == [PlatformInfo(name="ESPN+", status="Rent: $79.99 PPV")]


def test_streaming_platforms_get_default_statuses():
    event = LiveEvent(event_name="Match", streaming_platforms=["Peacock", "Peacock", "Fubo"])

    details = platforms.resolve_platform_details(event)

    assert [(d.name, d.status) for d in details] == [
        ("Peacock", "Included with Peacock subscription"),
        ("Fubo", "Included"),
    ]


def test_enrich_event_keeps_model_platforms_first():
    event = LiveEvent(event_name="Game", where_to_watch="NBA TV", streaming_platforms=["NBA League Pass"])

    enriched = platforms.enrich_event(event)

    assert enriched.streaming_platforms[0] == "NBA League Pass"
    assert "Sling Orange" in enriched.streaming_platforms
    assert len(enriched.platform_details) == len(enriched.streaming_platforms)


def test_enrich_event_with_unknown_channel_leaves_event_alone():
    event = LiveEvent(event_name="Concert", where_to_watch="TBD")

    enriched = platforms.enrich_event(event)

    assert enriched.streaming_platforms is None
    assert enriched.platform_details is None
