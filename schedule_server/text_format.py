from .config import DISCORD_FIELD_LIMIT, FALLBACK_LOCATION, PRIMARY_LOCATION

DEFAULT_PATTERN = "- {timestamp} | **{summary}**{description}"
TRUNCATION_MARKER = "..."


def discord_timestamp(event, style="F"):
    return f"<t:{int(event.start.timestamp())}:{style}>"


def format_event_line(event, pattern=DEFAULT_PATTERN):
    replacements = {
        "{timestamp}": discord_timestamp(event),
        "{summary}": event.summary or "",
        "{description}": f" | {event.description}" if event.description else "",
        "{location}": f" | {event.location}" if event.location else "",
    }
    line = pattern
    for placeholder, value in replacements.items():
        line = line.replace(placeholder, value)
    return line


def format_events(events, pattern=None):
    return "\n".join(format_event_line(event, pattern or DEFAULT_PATTERN) for event in events).strip()


def truncate_field(text, limit=DISCORD_FIELD_LIMIT):
    if len(text) <= limit:
        return text
    return text[: limit - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


def _section_name(location, primary_location):
    if location == primary_location:
        return f"***{location} streams***"
    return f"***{location}***"


def _grouped_line(event):
    description = f" | {event.description}" if event.description else ""
    return f"{discord_timestamp(event)} {event.summary or 'Untitled Event'}{description}"


def group_events_by_location(events, primary_location=PRIMARY_LOCATION):
    """Split events into ``(section name, text)`` pairs.

    The primary location comes first, events without a location are collected
    under ``other`` and come last, everything else keeps encounter order.
    """
    grouped = {}
    for event in events:
        location = (event.location or "").strip().lower() or FALLBACK_LOCATION
        grouped.setdefault(location, []).append(event)

    ordered = []
    if primary_location in grouped:
        ordered.append(primary_location)
    ordered.extend(location for location in grouped if location not in (primary_location, FALLBACK_LOCATION))
    if FALLBACK_LOCATION in grouped and FALLBACK_LOCATION != primary_location:
        ordered.append(FALLBACK_LOCATION)

    sections = []
    for location in ordered:
        text = "\n".join(_grouped_line(event) for event in grouped[location])
        sections.append((_section_name(location, primary_location), truncate_field(text)))
    return sections


def format_grouped(events, primary_location=PRIMARY_LOCATION):
    return "\n\n".join(f"{name}\n{text}" for name, text in group_events_by_location(events, primary_location))
