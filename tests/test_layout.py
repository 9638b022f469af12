from datetime import UTC, datetime

import pytest

from schedule_server.calendar_feed import Event, parse_window
from schedule_server.config import THEMES
from schedule_server.layout import build_week_layout, find_event_for_day, format_date_range, format_time_label, location_style, summary_font_size


def _event(start, summary="Event", location="", timezone="UTC"):
    return Event(start=start, end=start, summary=summary, location=location, timezone=timezone)


@pytest.mark.parametrize("count", [0, 1, 12])
def test_layout_always_has_seven_slots_in_weekday_order(count):
    events = [_event(datetime(2024, 6, 3 + (i % 7), 10 + (i % 5), 0, tzinfo=UTC), f"E{i}") for i in range(count)]

    slots = build_week_layout(events)

    assert [slot.day for slot in slots] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def test_monday_discord_event_fills_only_the_monday_slot():
    window = parse_window("2024-06-03", "2024-06-09")
    standup = _event(datetime(2024, 6, 3, 15, 0, tzinfo=UTC), "Standup", "discord")

    slots = build_week_layout([standup], window.start, window.end, THEMES["light"])

    monday = slots[0]
    assert monday.event == standup
    assert monday.summary == "Standup"
    assert monday.time_label == "3PM"
    assert monday.background_color == "#f3af52"
    assert monday.icon == "discord.svg"
    assert all(slot.event is None and slot.time_label == "No event" for slot in slots[1:])


def test_first_event_of_the_day_wins():
    late = _event(datetime(2024, 6, 4, 20, 0, tzinfo=UTC), "Late")
    early = _event(datetime(2024, 6, 4, 9, 0, tzinfo=UTC), "Early")

    assert find_event_for_day([late, early], "Tue") == early


def test_weekday_and_time_use_the_event_timezone():
    # Monday 02:00 UTC is still Sunday evening in New York
    event = _event(datetime(2024, 6, 3, 2, 0, tzinfo=UTC), "Late show", timezone="America/New_York")

    slots = build_week_layout([event])

    sunday = slots[6]
    assert sunday.event == event
    assert sunday.time_label == "10PM"
    assert slots[0].event is None


def test_events_outside_the_week_are_ignored():
    window = parse_window("2024-06-03", "2024-06-09")
    next_week = _event(datetime(2024, 6, 10, 12, 0, tzinfo=UTC), "Next week")

    slots = build_week_layout([next_week], window.start, window.end)

    assert all(slot.event is None for slot in slots)


@pytest.mark.parametrize(
    "length, expected",
    [(0, 1.1), (10, 1.1), (30, 0.825), (50, 0.55), (80, 0.55)],
)
def test_summary_font_size_shrinks_linearly(length, expected):
    assert summary_font_size("x" * length) == pytest.approx(expected)


def test_summary_font_size_never_grows_with_length():
    sizes = [summary_font_size("x" * n) for n in range(0, 70)]

    assert sizes == sorted(sizes, reverse=True)


def test_unknown_location_uses_theme_default_bucket():
    theme = THEMES["dark"]

    style = location_style("YouTube", theme)

    assert style.background_color == theme.event_bg_color
    assert style.icon == "calendar.svg"
    assert location_style(" Twitch ", theme).icon == "twitch.svg"


def test_time_label_handles_midnight_and_noon():
    assert format_time_label(_event(datetime(2024, 6, 3, 0, 30, tzinfo=UTC))) == "12AM"
    assert format_time_label(_event(datetime(2024, 6, 3, 12, 0, tzinfo=UTC))) == "12PM"


def test_date_range_label():
    window = parse_window("2024-06-03", "2024-06-09")

    assert format_date_range(window.start, window.end) == "03.06. - 09.06."
