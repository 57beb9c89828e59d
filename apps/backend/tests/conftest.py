"""
pytest configuration and shared fixtures for the Clickbait Meter API tests.

Key concern: tests must not touch YouTube, Custom Search or Gemini.
We achieve this by:
  1. Setting AI_MOCK_MODE=true so GeminiClient returns canned responses.
  2. Leaving every API key empty by default; tests that need a key set it
     on the settings singleton via the fixtures below.
  3. Stubbing HTTP with httpx.MockTransport or AsyncMock on the singletons.
  4. Disabling the rate limiter so repeated POSTs are not throttled.
"""

import os

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ["AI_MOCK_MODE"] = "true"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["OEMBED_FALLBACK"] = "false"
for _var in ("YOUTUBE_API_KEY", "GOOGLE_SEARCH_API_KEY", "GOOGLE_SEARCH_ENGINE_ID"):
    os.environ[_var] = ""


VIDEO_ID = "dQw4w9WgXcQ"

VIDEO_ITEM = {
    "id": VIDEO_ID,
    "snippet": {
        "publishedAt": "2024-01-05T10:00:00Z",
        "channelId": "UCuAXFkgsw1L7xaCfnd5JJOw",
        "title": "You WON'T BELIEVE what happened next!!!",
        "description": "0:00 Intro\nThanks for watching\n1:23:45 Outro",
        "thumbnails": {
            "default": {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/default.jpg"},
            "high": {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"},
        },
        "channelTitle": "Shock Channel",
        "tags": ["shocking", "unbelievable"],
    },
    "contentDetails": {"duration": "PT1H2M3S"},
    "statistics": {"viewCount": "1234567", "likeCount": "8900", "commentCount": "321"},
}

CHANNEL_BODY = {"items": [{"statistics": {"subscriberCount": "250000", "hiddenSubscriberCount": False}}]}

COMMENTS_BODY = {
    "items": [
        {"snippet": {"topLevelComment": {"snippet": {"textDisplay": "Total bait, nothing happened."}}}},
        {"snippet": {"topLevelComment": {"snippet": {"textDisplay": "Skip to 10:00"}}}},
    ]
}


def youtube_transport(routes: dict) -> httpx.MockTransport:
    """
    MockTransport keyed by the last path segment ("videos", "channels",
    "commentThreads", "oembed", "v1"). A value is (status, json_body), (status, text)
    for a raw body, or an exception instance to raise.
    """
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        route = routes[request.url.path.rsplit("/", 1)[-1]]
        if isinstance(route, Exception):
            raise route
        status, body = route
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    transport = httpx.MockTransport(handler)
    transport.calls = calls
    return transport


@pytest.fixture()
def youtube_key(monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "youtube_api_key", "test-yt-key")
    return "test-yt-key"


@pytest.fixture()
def search_keys(monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "google_search_api_key", "test-search-key")
    monkeypatch.setattr(settings, "google_search_engine_id", "test-cx")


@pytest.fixture()
def sample_meta():
    from app.services.youtube_client import build_metadata

    meta = build_metadata(VIDEO_ID, VIDEO_ITEM)
    meta.subscriber_count = "250,000"
    meta.top_comments = ["Total bait, nothing happened.", "Skip to 10:00"]
    return meta


@pytest.fixture()
async def client():
    """
    HTTPX async test client wired to the FastAPI app.

    Usage:
        async def test_something(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from app.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
