"""
youtube_url.py — Pull the video identifier out of a YouTube URL.

Accepted shapes, tried in order:
  - https://www.youtube.com/watch?v=ID   (v= may follow other query params)
  - https://youtu.be/ID
  - https://www.youtube.com/shorts/ID
  - https://www.youtube.com/embed/ID

No network access. A miss returns None; the caller decides that it is a
client error.
"""

import re

_ID = r"([^&\n?#/]+)"

_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"youtube\.com/watch\?(?:[^#\n]*&)?v=" + _ID),
    re.compile(r"youtu\.be/" + _ID),
    re.compile(r"youtube\.com/shorts/" + _ID),
    re.compile(r"youtube\.com/embed/" + _ID),
)

WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"


def extract_video_id(url: str) -> str | None:
    """Return the first matching video id in *url*, or None."""
    if not url:
        return None
    for pattern in _PATTERNS:
        m = pattern.search(url)
        if m and m.group(1):
            return m.group(1)
    return None


def watch_url(video_id: str) -> str:
    return WATCH_URL_TEMPLATE.format(video_id=video_id)
