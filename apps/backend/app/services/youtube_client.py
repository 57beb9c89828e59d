"""
youtube_client.py — YouTube Data API v3 lookups for a single video.

One analysis needs three resources:
  1. videos        (snippet, contentDetails, statistics) — mandatory
  2. channels      (statistics → subscriber count)       — optional
  3. commentThreads (top 10 by relevance)                — optional

Only the first is allowed to fail the request. The channel and comment
lookups run in parallel once the video is known and degrade to
"no subscriber count" / "no comments" on any error.

An unauthenticated oEmbed lookup (title + author only) is available as a
fallback for deployments without a Data API key; see fetch_oembed().
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.core.config import settings
from app.services.formatters import format_count, format_date, format_duration, parse_count
from app.services.youtube_url import watch_url

logger = logging.getLogger(__name__)

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
OEMBED_URL = "https://www.youtube.com/oembed"

MAX_COMMENTS = 10

# H:MM:SS or MM:SS at the very start of a line, then the chapter title.
_CHAPTER_RE = re.compile(r"^((?:\d{1,2}:)?\d{1,2}:\d{2})\s+(.+)$")

_QUOTA_REASONS = {"quotaExceeded", "dailyLimitExceeded", "rateLimitExceeded"}
_THUMBNAIL_ORDER = ("maxres", "standard", "high", "medium", "default")


# ── Errors ────────────────────────────────────────────────────────────────────

class VideoFetchError(Exception):
    """The mandatory video lookup failed; the request cannot continue."""


class YouTubeConfigError(VideoFetchError):
    """No Data API key configured."""


class VideoNotFoundError(VideoFetchError):
    """Upstream returned non-success or zero items for the id."""


class QuotaExceededError(VideoFetchError):
    """The Data API key has run out of quota."""


# ── Data classes ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Chapter:
    time: str
    title: str


@dataclass
class VideoMetadata:
    """Everything the prompt needs about one video. Built once per request."""
    video_id:         str
    title:            str
    description:      str = ""
    channel_title:    str = ""
    channel_id:       str = ""
    tags:             list[str] = field(default_factory=list)
    published_at:     str = ""    # raw ISO-8601
    published_date:   str = ""    # YYYY-MM-DD
    duration_iso:     str = ""
    duration:         str = ""    # 1:02:03
    view_count:       str = "0"
    like_count:       str = "0"
    comment_count:    str = "0"
    view_count_raw:   int | None = None
    like_count_raw:   int | None = None
    comment_count_raw: int | None = None
    thumbnail_url:    str = ""
    subscriber_count: str | None = None   # None when the channel lookup failed
    chapters:         list[Chapter] = field(default_factory=list)
    top_comments:     list[str] = field(default_factory=list)
    has_details:      bool = True         # False for the oEmbed fallback


# ── Pure helpers ──────────────────────────────────────────────────────────────

def parse_chapters(description: str) -> list[Chapter]:
    """
    Scan *description* line by line for timestamped chapter markers.

        0:00 Intro        → Chapter("0:00", "Intro")
        1:23:45 Outro     → Chapter("1:23:45", "Outro")
    """
    chapters: list[Chapter] = []
    for line in (description or "").splitlines():
        m = _CHAPTER_RE.match(line)
        if m:
            chapters.append(Chapter(time=m.group(1), title=m.group(2).strip()))
    return chapters


def _best_thumbnail(video_id: str, thumbnails: dict[str, Any]) -> str:
    for size in _THUMBNAIL_ORDER:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return f"https://img.youtube.com/vi/{video_id}/hqdefault.jpg"


def _error_reasons(response: httpx.Response) -> set[str]:
    try:
        errors = response.json().get("error", {}).get("errors", [])
    except ValueError:
        return set()
    return {e.get("reason", "") for e in errors if isinstance(e, dict)}


def build_metadata(video_id: str, item: dict[str, Any]) -> VideoMetadata:
    """Map one `videos.list` item onto VideoMetadata (no secondary data yet)."""
    snippet = item.get("snippet") or {}
    details = item.get("contentDetails") or {}
    stats = item.get("statistics") or {}

    description = snippet.get("description", "")
    duration_iso = details.get("duration", "")
    published_at = snippet.get("publishedAt", "")

    return VideoMetadata(
        video_id=video_id,
        title=snippet.get("title", ""),
        description=description,
        channel_title=snippet.get("channelTitle", ""),
        channel_id=snippet.get("channelId", ""),
        tags=list(snippet.get("tags") or []),
        published_at=published_at,
        published_date=format_date(published_at),
        duration_iso=duration_iso,
        duration=format_duration(duration_iso),
        view_count=format_count(stats.get("viewCount")),
        like_count=format_count(stats.get("likeCount")),
        comment_count=format_count(stats.get("commentCount")),
        view_count_raw=parse_count(stats.get("viewCount")),
        like_count_raw=parse_count(stats.get("likeCount")),
        comment_count_raw=parse_count(stats.get("commentCount")),
        thumbnail_url=_best_thumbnail(video_id, snippet.get("thumbnails") or {}),
        chapters=parse_chapters(description),
    )


# ── Client ────────────────────────────────────────────────────────────────────

class YouTubeClient:
    """
    Thin async wrapper around the YouTube Data API v3 REST endpoints.

    `transport` lets tests plug in an httpx.MockTransport; production
    leaves it as None.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    @property
    def api_key(self) -> str:
        return settings.youtube_api_key

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=YOUTUBE_API_BASE,
            timeout=settings.youtube_timeout_seconds,
            transport=self._transport,
        )

    async def fetch_video(self, video_id: str) -> VideoMetadata:
        """
        Fetch metadata, subscriber count and top comments for *video_id*.

        Raises:
            YouTubeConfigError:  YOUTUBE_API_KEY is not set.
            QuotaExceededError:  the key is out of quota.
            VideoNotFoundError:  any other non-success, or zero items.
        """
        if not self.enabled:
            raise YouTubeConfigError("YOUTUBE_API_KEY is not set")

        async with self._client() as client:
            try:
                response = await client.get(
                    "/videos",
                    params={
                        "part": "snippet,contentDetails,statistics",
                        "id": video_id,
                        "key": self.api_key,
                    },
                )
            except httpx.HTTPError as exc:
                logger.error("YouTube videos.list request failed for %s: %s", video_id, exc)
                raise VideoNotFoundError(f"Request failed for {video_id}") from exc

            if response.status_code == 403 and _error_reasons(response) & _QUOTA_REASONS:
                logger.error("YouTube API quota exhausted (video %s)", video_id)
                raise QuotaExceededError("YouTube Data API quota exceeded")

            if not response.is_success:
                logger.warning(
                    "YouTube videos.list error for %s: %s — %s",
                    video_id, response.status_code, response.text[:200],
                )
                raise VideoNotFoundError(f"Video lookup failed: {response.status_code}")

            try:
                items = response.json().get("items", [])
            except (ValueError, AttributeError) as exc:
                logger.warning("YouTube videos.list returned an unreadable body for %s", video_id)
                raise VideoNotFoundError(f"Unreadable response for {video_id}") from exc
            if not items:
                raise VideoNotFoundError(f"Video not found: {video_id}")

            meta = build_metadata(video_id, items[0])

            subscribers, comments = await asyncio.gather(
                self._fetch_subscriber_count(client, meta.channel_id),
                self._fetch_top_comments(client, video_id),
            )

        meta.subscriber_count = subscribers
        meta.top_comments = comments
        logger.info(
            "Fetched video %s: title=%.60s chapters=%d comments=%d subscribers=%s",
            video_id, meta.title, len(meta.chapters), len(comments), subscribers,
        )
        return meta

    async def _fetch_subscriber_count(self, client: httpx.AsyncClient, channel_id: str) -> str | None:
        if not channel_id:
            return None
        try:
            response = await client.get(
                "/channels",
                params={"part": "statistics", "id": channel_id, "key": self.api_key},
            )
            response.raise_for_status()
            items = response.json().get("items", [])
            if not items:
                return None
            stats = items[0].get("statistics") or {}
            if stats.get("hiddenSubscriberCount") or "subscriberCount" not in stats:
                return None
            return format_count(stats["subscriberCount"])
        except Exception as exc:
            logger.warning("Subscriber lookup failed for channel %s: %s", channel_id, exc)
            return None

    async def _fetch_top_comments(self, client: httpx.AsyncClient, video_id: str) -> list[str]:
        try:
            response = await client.get(
                "/commentThreads",
                params={
                    "part": "snippet",
                    "videoId": video_id,
                    "order": "relevance",
                    "maxResults": MAX_COMMENTS,
                    "textFormat": "plainText",
                    "key": self.api_key,
                },
            )
            response.raise_for_status()
            comments: list[str] = []
            for item in response.json().get("items", [])[:MAX_COMMENTS]:
                top = ((item.get("snippet") or {}).get("topLevelComment") or {}).get("snippet") or {}
                text = (top.get("textDisplay") or top.get("textOriginal") or "").strip()
                if text:
                    comments.append(text)
            return comments
        except Exception as exc:
            # Comments disabled on the video comes back as a 403 here too.
            logger.warning("Comment lookup failed for %s: %s", video_id, exc)
            return []

    async def fetch_oembed(self, video_id: str) -> VideoMetadata | None:
        """
        Credential-free lookup: title and channel name only.

        Returns None when the video is unknown or the endpoint is unreachable.
        """
        try:
            async with httpx.AsyncClient(
                timeout=settings.youtube_timeout_seconds, transport=self._transport
            ) as client:
                response = await client.get(
                    OEMBED_URL, params={"url": watch_url(video_id), "format": "json"}
                )
                response.raise_for_status()
                data = response.json()
            title = data.get("title") or ""
            channel_title = data.get("author_name") or ""
        except Exception as exc:
            logger.warning("oEmbed lookup failed for %s: %s", video_id, exc)
            return None

        return VideoMetadata(
            video_id=video_id,
            title=title,
            channel_title=channel_title,
            thumbnail_url=f"https://img.youtube.com/vi/{video_id}/hqdefault.jpg",
            has_details=False,
        )


# Module-level singleton
youtube_client = YouTubeClient()
