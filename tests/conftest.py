from types import SimpleNamespace

import pytest


def build_ics(*events, calendar_timezone=None, timezones=()):
    lines = ["BEGIN:VCALENDAR", "VERSION:2.0", "PRODID:-//tests//schedule//EN"]
    if calendar_timezone:
        lines.append(f"X-WR-TIMEZONE:{calendar_timezone}")
    for timezone in timezones:
        lines.extend(timezone)
    for event in events:
        lines.append("BEGIN:VEVENT")
        lines.extend(event)
        lines.append("END:VEVENT")
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"


def vevent(uid, dtstart, summary=None, dtend=None, location=None, description=None):
    lines = [f"UID:{uid}", "DTSTAMP:20240101T000000Z", dtstart]
    if dtend:
        lines.append(dtend)
    if summary is not None:
        lines.append(f"SUMMARY:{summary}")
    if location is not None:
        lines.append(f"LOCATION:{location}")
    if description is not None:
        lines.append(f"DESCRIPTION:{description}")
    return lines


@pytest.fixture
def fake_get(monkeypatch):
    calls = []

    def install(body="", status_code=200, reason="OK"):
        def _get(url, **kwargs):
            calls.append((url, kwargs))
            return SimpleNamespace(ok=200 <= status_code < 300, status_code=status_code, reason=reason, content=body.encode("utf-8"))

        monkeypatch.setattr("schedule_server.calendar_feed.requests.get", _get)
        return calls

    return install


def us_eastern_vtimezone(tzid):
    return [
        "BEGIN:VTIMEZONE",
        f"TZID:{tzid}",
        "BEGIN:STANDARD",
        "DTSTART:16011104T020000",
        "TZOFFSETFROM:-0400",
        "TZOFFSETTO:-0500",
        "RRULE:FREQ=YEARLY;BYDAY=1SU;BYMONTH=11",
        "END:STANDARD",
        "BEGIN:DAYLIGHT",
        "DTSTART:16010311T020000",
        "TZOFFSETFROM:-0500",
        "TZOFFSETTO:-0400",
        "RRULE:FREQ=YEARLY;BYDAY=2SU;BYMONTH=3",
        "END:DAYLIGHT",
        "END:VTIMEZONE",
    ]
