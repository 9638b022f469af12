import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# ==============================================================================
# Load Environment Variables
# ==============================================================================
load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent
STATIC_DIR = PACKAGE_DIR / "static"
ICON_DIR = STATIC_DIR / "icons"


def _env_int(name, default):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"Warning: {name}={raw!r} is not an integer. Using default {default}.")
        return default


# ==============================================================================
# Configuration Constants
# ==============================================================================
FETCH_CALENDAR_TIMEOUT = _env_int("FETCH_CALENDAR_TIMEOUT", 30)
FETCH_USER_AGENT = "schedule-card-server/1.0"

CANVAS_WIDTH = 375
CANVAS_ASPECT_RATIO = 2700 / 4500
CANVAS_HEIGHT = round(CANVAS_WIDTH / CANVAS_ASPECT_RATIO)

PNG_WIDTH = _env_int("PNG_WIDTH", 800)
PNG_TIMEOUT = _env_int("PNG_TIMEOUT", 30000)

PRIMARY_LOCATION = os.environ.get("PRIMARY_LOCATION", "twitch").strip().lower() or "twitch"
FALLBACK_LOCATION = "other"
DISCORD_FIELD_LIMIT = 1024

DEFAULT_THEME = os.environ.get("DEFAULT_THEME", "light")
FONT_FAMILY = os.environ.get("FONT_FAMILY", "Lazydog, 'Comic Sans MS', sans-serif")
BACKGROUND_IMAGE_PATH = os.environ.get("BACKGROUND_IMAGE_PATH", "")

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = _env_int("PORT", 7777)

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
NO_EVENT_LABEL = "No event"

SUMMARY_FONT_MAX = 1.1
SUMMARY_FONT_MIN = 0.55
SUMMARY_SHRINK_START = 10
SUMMARY_SHRINK_END = 50


# ==============================================================================
# Themes & Location Styles
# ==============================================================================
@dataclass(frozen=True)
class Theme:
    name: str
    font_family: str
    header_color: str
    date_range_color: str
    day_color: str
    event_bg_color: str
    event_text_color: str
    no_event_color: str
    background_image_path: str


@dataclass(frozen=True)
class LocationStyle:
    background_color: str
    icon: str


THEMES = {
    "light": Theme(
        name="light",
        font_family=FONT_FAMILY,
        header_color="#ffffff",
        date_range_color="#ffffff",
        day_color="#ffffff",
        event_bg_color="#e6d195",
        event_text_color="#ffffff",
        no_event_color="#ffffff",
        background_image_path=BACKGROUND_IMAGE_PATH,
    ),
    "dark": Theme(
        name="dark",
        font_family=FONT_FAMILY,
        header_color="#ffffff",
        date_range_color="#cccccc",
        day_color="#ffffff",
        event_bg_color="#333333",
        event_text_color="#ffffff",
        no_event_color="#777777",
        background_image_path=BACKGROUND_IMAGE_PATH,
    ),
}

LOCATION_STYLES = {
    "twitch": LocationStyle(background_color="#eebd37", icon="twitch.svg"),
    "discord": LocationStyle(background_color="#f3af52", icon="discord.svg"),
}
DEFAULT_ICON = "calendar.svg"


def get_theme(name=None):
    return THEMES.get((name or DEFAULT_THEME).strip().lower(), THEMES["light"])
