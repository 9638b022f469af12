from datetime import UTC, datetime

from schedule_server.calendar_feed import Event
from schedule_server.text_format import discord_timestamp, format_event_line, format_events, format_grouped, group_events_by_location, truncate_field

MONDAY_3PM = datetime(2024, 6, 3, 15, 0, tzinfo=UTC)


def _event(summary, location="", description="", start=MONDAY_3PM):
    return Event(start=start, end=start, summary=summary, location=location, description=description)


def test_discord_timestamp_uses_epoch_seconds():
    assert discord_timestamp(_event("Standup")) == "<t:1717426800:F>"


def test_default_format_appends_description_only_when_present():
    text = format_events([_event("Standup", description="daily sync"), _event("Gym")])

    assert text.splitlines() == [
        "- <t:1717426800:F> | **Standup** | daily sync",
        "- <t:1717426800:F> | **Gym**",
    ]


def test_custom_pattern_supports_location():
    line = format_event_line(_event("Raid", location="twitch"), "{summary}{location} @ {timestamp}")

    assert line == "Raid | twitch @ <t:1717426800:F>"


def test_no_events_format_to_empty_text():
    assert format_events([]) == ""


def test_grouped_sections_put_primary_first_and_other_last():
    events = [_event("Chat", location=""), _event("Voice", location="Discord"), _event("Stream", location="twitch")]

    sections = group_events_by_location(events)

    assert [name for name, _ in sections] == ["***twitch streams***", "***discord***", "***other***"]
    assert sections[0][1] == "<t:1717426800:F> Stream"


def test_grouped_lines_name_untitled_events():
    sections = group_events_by_location([_event("", location="twitch", description="surprise")])

    assert sections[0][1] == "<t:1717426800:F> Untitled Event | surprise"


def test_long_sections_are_truncated_with_ellipsis():
    events = [_event("x" * 100, location="twitch") for _ in range(20)]

    (section,) = group_events_by_location(events)

    assert len(section[1]) == 1024
    assert section[1].endswith("...")
    assert truncate_field("short") == "short"


def test_format_grouped_joins_sections():
    text = format_grouped([_event("Chat", location="other"), _event("Stream", location="twitch")])

    assert text.index("***twitch streams***") < text.index("***other***")
