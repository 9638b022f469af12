import datetime
import re
import urllib.parse
import warnings
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests
from icalendar import Calendar

from .config import FETCH_CALENDAR_TIMEOUT, FETCH_USER_AGENT
from .errors import CalendarParseError, FetchError, InvalidDateError, MissingParameterError, TimezoneResolutionWarning

UTC = datetime.UTC
UTC_ZONE_NAME = "UTC"
WEBCAL_PATTERN = re.compile(r"^webcal://", re.IGNORECASE)
FETCHABLE_SCHEMES = {"http", "https"}


# ==============================================================================
# Data Model
# ==============================================================================
@dataclass(frozen=True)
class Event:
    start: datetime.datetime  # UTC
    end: datetime.datetime  # UTC
    summary: str = ""
    location: str = ""
    description: str = ""
    timezone: str = UTC_ZONE_NAME  # display zone only, never re-applied to start/end

    def local_start(self):
        return self.start.astimezone(_zone_or_utc(self.timezone))

    def to_dict(self):
        return {
            "start": _isoformat_utc(self.start),
            "end": _isoformat_utc(self.end),
            "summary": self.summary,
            "location": self.location,
            "description": self.description,
            "timezone": self.timezone,
        }


@dataclass(frozen=True)
class Window:
    start: datetime.datetime
    end: datetime.datetime


# ==============================================================================
# Helper Function Definitions
# ==============================================================================
def _decode_body(content):
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return content.decode("latin-1", errors="replace")


def _isoformat_utc(value):
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _text(component, name):
    value = component.get(name)
    return str(value) if value is not None else ""


def _zone_or_utc(name):
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return UTC


def _is_known_zone(name):
    if not name:
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def _display_zone(tzid, tzinfo, calendar_zone):
    # TZID → parser's zone key (Windows names, VTIMEZONE) → calendar zone → UTC
    candidates = (str(tzid).lstrip("/"), getattr(tzinfo, "key", None)) if tzid else ()
    for name in (*candidates, calendar_zone):
        if _is_known_zone(name):
            return name
    return UTC_ZONE_NAME


def _localize_to_utc(wall_clock, zone_name, summary):
    """Interpret a naive wall-clock time in ``zone_name`` and return ``(utc_instant, zone_name)``.

    Unknown zones keep the raw wall-clock as if it were UTC and report the
    event's display zone as UTC, so the displayed time still matches the feed.
    """
    if not zone_name:
        return wall_clock.replace(tzinfo=UTC), UTC_ZONE_NAME
    try:
        zone = ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError):
        warnings.warn(f"Unknown timezone '{zone_name}' for event '{summary}'. Keeping the unconverted time.", TimezoneResolutionWarning, stacklevel=3)
        return wall_clock.replace(tzinfo=UTC), UTC_ZONE_NAME
    return wall_clock.replace(tzinfo=zone).astimezone(UTC), zone_name


def _resolve_instant(prop, calendar_zone, summary):
    value = prop.dt
    tzid = prop.params.get("TZID")
    if not isinstance(value, datetime.datetime):
        value = datetime.datetime.combine(value, datetime.time.min)
    if value.tzinfo is not None:
        return value.astimezone(UTC), _display_zone(tzid, value.tzinfo, calendar_zone)
    zone_name = str(tzid).lstrip("/") if tzid else calendar_zone
    return _localize_to_utc(value, zone_name, summary)


def _resolve_end(component, start, calendar_zone, summary):
    dtend = component.get("dtend")
    if dtend is not None:
        end, _ = _resolve_instant(dtend, calendar_zone, summary)
        return end
    duration = component.get("duration")
    if duration is not None and isinstance(duration.dt, datetime.timedelta):
        return start + duration.dt
    return start


def _parse_event_component(component, calendar_zone):
    summary = _text(component, "summary")
    dtstart = component.get("dtstart")
    if dtstart is None:
        print(f"      Warning: Skipping VEVENT without DTSTART ('{summary or 'untitled'}').")
        return None
    start, zone_name = _resolve_instant(dtstart, calendar_zone, summary)
    end = _resolve_end(component, start, calendar_zone, summary)
    return Event(
        start=start,
        end=end,
        summary=summary,
        location=_text(component, "location"),
        description=_text(component, "description"),
        timezone=zone_name,
    )


def _parse_date_param(value, label):
    if not value or not value.strip():
        raise MissingParameterError(f"{label} date is required")
    try:
        return datetime.datetime.fromisoformat(value.strip()).date()
    except ValueError as e:
        raise InvalidDateError(f"Invalid {label.lower()} date format") from e


# ==============================================================================
# Calendar Fetcher
# ==============================================================================
def to_fetch_url(url):
    if not url or not url.strip():
        raise MissingParameterError("Must provide an iCalendar URL.")
    fetch_url = WEBCAL_PATTERN.sub("https://", url.strip())
    if urllib.parse.urlparse(fetch_url).scheme.lower() not in FETCHABLE_SCHEMES:
        raise FetchError(f"Unsupported calendar URL: {url}")
    return fetch_url


def fetch_calendar_text(url):
    fetch_url = to_fetch_url(url)
    try:
        response = requests.get(fetch_url, headers={"User-Agent": FETCH_USER_AGENT}, timeout=FETCH_CALENDAR_TIMEOUT)
    except requests.exceptions.RequestException as e:
        print(f"      Calendar fetch failed for '{fetch_url}': {e}")
        raise FetchError(f"Failed to fetch calendar data: {e}") from e
    if not response.ok:
        print(f"      Calendar fetch for '{fetch_url}' returned HTTP {response.status_code}.")
        raise FetchError(f"Failed to fetch calendar data: {response.status_code} {response.reason}", upstream_status=response.status_code)
    return _decode_body(response.content)


# ==============================================================================
# Event Normalizer
# ==============================================================================
def parse_events(ics_text):
    try:
        cal = Calendar.from_ical(ics_text)
    except ValueError as e:
        raise CalendarParseError(f"Invalid iCalendar data: {e}") from e
    calendar_zone = _text(cal, "X-WR-TIMEZONE").strip() or None
    events = []
    for component in cal.walk("VEVENT"):
        try:
            event = _parse_event_component(component, calendar_zone)
        except ValueError as e:
            print(f"      Warning: Skipping unparseable VEVENT ('{_text(component, 'summary') or 'untitled'}'): {e}")
            continue
        if event is not None:
            events.append(event)
    events.sort(key=lambda e: e.start)
    return events


def fetch_calendar(url):
    return parse_events(fetch_calendar_text(url))


# ==============================================================================
# Window Filter
# ==============================================================================
def parse_window(start_param, end_param):
    start_date = _parse_date_param(start_param, "Start")
    end_date = _parse_date_param(end_param, "End")
    return Window(
        start=datetime.datetime.combine(start_date, datetime.time.min, tzinfo=UTC),
        end=datetime.datetime.combine(end_date, datetime.time.max, tzinfo=UTC),
    )


def filter_events(events, window_start, window_end):
    return [event for event in events if window_start < event.start < window_end]


def process_calendar_request(args):
    target_url = args.get("url")
    if not target_url or not target_url.strip():
        raise MissingParameterError("URL is required")
    window = parse_window(args.get("startDate"), args.get("endDate"))
    events = fetch_calendar(target_url)
    return filter_events(events, window.start, window.end), window
