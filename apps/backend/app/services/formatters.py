"""
formatters.py — Display helpers for YouTube Data API values.

All functions are pure. Anything they cannot parse is handed back
unchanged so a surprising upstream value still reaches the prompt.
"""

import re
from datetime import datetime

_ISO_DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$")


def format_duration(iso_duration: str) -> str:
    """
    Convert an ISO-8601 duration into a clock string.

        PT1H2M3S → 1:02:03
        PT5M30S  → 5:30
        PT45S    → 0:45
    """
    m = _ISO_DURATION_RE.match(iso_duration or "")
    if not m or iso_duration == "PT":
        return iso_duration

    hours, minutes, seconds = (int(g) if g else 0 for g in m.groups())
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_count(value: str | int | None) -> str:
    """1234567 → '1,234,567'. Missing counts (hidden likes) become '0'."""
    if value is None or value == "":
        return "0"
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        return str(value)


def parse_count(value: str | int | None) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def format_date(iso_timestamp: str) -> str:
    """'2024-01-05T10:00:00Z' → '2024-01-05'."""
    if not iso_timestamp:
        return iso_timestamp
    try:
        parsed = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    except ValueError:
        return iso_timestamp
    return parsed.strftime("%Y-%m-%d")
