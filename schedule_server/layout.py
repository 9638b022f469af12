from dataclasses import dataclass
from typing import Optional

from .calendar_feed import Event, filter_events
from .config import (
    DEFAULT_ICON,
    LOCATION_STYLES,
    NO_EVENT_LABEL,
    SUMMARY_FONT_MAX,
    SUMMARY_FONT_MIN,
    SUMMARY_SHRINK_END,
    SUMMARY_SHRINK_START,
    WEEKDAY_LABELS,
    LocationStyle,
    get_theme,
)


@dataclass(frozen=True)
class WeeklySlot:
    day: str
    event: Optional[Event]
    background_color: str
    icon: Optional[str]
    font_size: float
    time_label: str

    @property
    def summary(self):
        return self.event.summary if self.event else ""


def summary_font_size(text):
    length = len(text or "")
    if length <= SUMMARY_SHRINK_START:
        return SUMMARY_FONT_MAX
    if length >= SUMMARY_SHRINK_END:
        return SUMMARY_FONT_MIN
    progress = (length - SUMMARY_SHRINK_START) / (SUMMARY_SHRINK_END - SUMMARY_SHRINK_START)
    return round(SUMMARY_FONT_MAX - progress * (SUMMARY_FONT_MAX - SUMMARY_FONT_MIN), 4)


def location_style(location, theme):
    key = (location or "").strip().lower()
    return LOCATION_STYLES.get(key, LocationStyle(background_color=theme.event_bg_color, icon=DEFAULT_ICON))


def format_time_label(event):
    hour = event.local_start().hour
    return f"{hour % 12 or 12}{'AM' if hour < 12 else 'PM'}"


def format_date_range(week_start, week_end):
    return f"{week_start.strftime('%d.%m.')} - {week_end.strftime('%d.%m.')}"


def find_event_for_day(events, day_label):
    """First event, by ascending start, whose weekday in its own zone is ``day_label``."""
    for event in sorted(events, key=lambda e: e.start):
        if WEEKDAY_LABELS[event.local_start().weekday()] == day_label:
            return event
    return None


def build_week_layout(events, week_start=None, week_end=None, theme=None):
    # One slot per weekday. Same-day collisions beyond the first event are not shown.
    theme = theme or get_theme()
    if week_start is not None and week_end is not None:
        events = filter_events(events, week_start, week_end)
    slots = []
    for day in WEEKDAY_LABELS:
        event = find_event_for_day(events, day)
        if event is None:
            slots.append(WeeklySlot(day=day, event=None, background_color=theme.event_bg_color, icon=None, font_size=SUMMARY_FONT_MAX, time_label=NO_EVENT_LABEL))
            continue
        style = location_style(event.location, theme)
        slots.append(
            WeeklySlot(
                day=day,
                event=event,
                background_color=style.background_color,
                icon=style.icon,
                font_size=summary_font_size(event.summary),
                time_label=format_time_label(event),
            )
        )
    return slots
