"""
test_analyze.py — Tests for POST /api/analyze.

Runs in mock AI mode. YouTube is stubbed on the youtube_client singleton;
the scorer and investigation are patched per test where the case needs a
specific model reply.
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from app.ai.gemini_client import StructuredOutputError, gemini_client
from app.ai.investigation_agent import investigation_agent
from app.ai.search_adapter import SearchResult, search_adapter
from app.models.clickbait import ClickbaitVerdict, FactCheckQuery, FactCheckVerdict, ReputationVerdict
from app.services.youtube_client import (
    QuotaExceededError,
    VideoNotFoundError,
    YouTubeClient,
    youtube_client,
)
from conftest import CHANNEL_BODY, COMMENTS_BODY, VIDEO_ID, VIDEO_ITEM, youtube_transport

URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"
SCORE_FIELDS = {"titleExaggeration", "thumbnailManipulation", "contentMismatch", "emotionalBait", "urgencyTactics"}

MODEL_VERDICT = ClickbaitVerdict.model_validate(
    {
        "isClickbait": True,
        "overallScore": 83,
        "scores": {
            "titleExaggeration": 90,
            "thumbnailManipulation": 70,
            "contentMismatch": 85,
            "emotionalBait": 88,
            "urgencyTactics": 60,
        },
        "analysis": "Promises the impossible, delivers a shrug.",
    }
)


@pytest.fixture()
def stub_youtube(youtube_key, sample_meta):
    with patch.object(youtube_client, "fetch_video", AsyncMock(return_value=sample_meta)) as fetch:
        yield fetch


@pytest.fixture()
def stub_scorer():
    with patch.object(gemini_client, "generate_structured", AsyncMock(return_value=MODEL_VERDICT)) as gen:
        yield gen


# ── Client input errors ───────────────────────────────────────────────────────


class TestAnalyzeInputErrors:
    async def test_invalid_url_returns_400(self, client):
        r = await client.post("/api/analyze", json={"url": "not a url"})
        assert r.status_code == 400
        assert "error" in r.json()

    async def test_empty_url_returns_400(self, client):
        r = await client.post("/api/analyze", json={"url": "   "})
        assert r.status_code == 400
        assert isinstance(r.json()["error"], str)

    async def test_missing_url_returns_400(self, client):
        r = await client.post("/api/analyze", json={})
        assert r.status_code == 400
        assert "error" in r.json()

    async def test_non_string_url_returns_400(self, client):
        r = await client.post("/api/analyze", json={"url": 12345})
        assert r.status_code == 400

    async def test_non_json_body_returns_400(self, client):
        r = await client.post(
            "/api/analyze", content=b"url=x", headers={"Content-Type": "application/json"}
        )
        assert r.status_code == 400

    async def test_get_method_not_allowed(self, client):
        r = await client.get("/api/analyze")
        assert r.status_code == 405
        assert "error" in r.json()


# ── Upstream video errors ─────────────────────────────────────────────────────


class TestAnalyzeVideoErrors:
    async def test_unset_youtube_key_returns_400(self, client):
        r = await client.post("/api/analyze", json={"url": URL})
        assert r.status_code == 400
        assert "could not retrieve" in r.json()["error"].lower()

    async def test_video_not_found_returns_400(self, client, youtube_key):
        with patch.object(youtube_client, "fetch_video", AsyncMock(side_effect=VideoNotFoundError("x"))):
            r = await client.post("/api/analyze", json={"url": URL})
        assert r.status_code == 400
        assert "could not retrieve" in r.json()["error"].lower()

    async def test_quota_exceeded_returns_400_with_own_message(self, client, youtube_key):
        with patch.object(youtube_client, "fetch_video", AsyncMock(side_effect=QuotaExceededError("x"))):
            r = await client.post("/api/analyze", json={"url": URL})
        assert r.status_code == 400
        assert "quota" in r.json()["error"].lower()

    async def test_scoring_never_attempted_after_fetch_failure(self, client, stub_scorer):
        r = await client.post("/api/analyze", json={"url": URL})
        assert r.status_code == 400
        stub_scorer.assert_not_awaited()


# ── Success ───────────────────────────────────────────────────────────────────


class TestAnalyzeSuccess:
    async def test_returns_200_with_five_scores(self, client, stub_youtube, stub_scorer):
        r = await client.post("/api/analyze", json={"url": URL})
        assert r.status_code == 200

        data = r.json()
        assert set(data["scores"]) == SCORE_FIELDS
        assert all(isinstance(v, int) and 0 <= v <= 100 for v in data["scores"].values())

    async def test_overall_score_comes_from_model_reply(self, client, stub_youtube, stub_scorer):
        data = (await client.post("/api/analyze", json={"url": URL})).json()

        assert data["overallScore"] == 83
        assert data["isClickbait"] is True
        assert data["level"] == "clickbait"
        assert data["analysis"] == "Promises the impossible, delivers a shrug."
        assert data["scores"]["contentMismatch"] == 85

    async def test_video_info_and_details(self, client, stub_youtube, stub_scorer):
        data = (await client.post("/api/analyze", json={"url": URL})).json()

        assert data["videoInfo"]["title"] == VIDEO_ITEM["snippet"]["title"]
        assert data["videoInfo"]["channelName"] == "Shock Channel"
        assert data["videoInfo"]["thumbnail"].endswith("hqdefault.jpg")
        details = data["videoDetails"]
        assert details["viewCount"] == "1,234,567"
        assert details["duration"] == "1:02:03"
        assert details["subscriberCount"] == "250,000"
        assert details["chapters"] == [
            {"time": "0:00", "title": "Intro"},
            {"time": "1:23:45", "title": "Outro"},
        ]
        assert details["commentSample"] == 2

    async def test_no_investigation_without_search_keys(self, client, stub_youtube, stub_scorer):
        data = (await client.post("/api/analyze", json={"url": URL})).json()

        assert "investigation" not in data
        assert "error" not in data
        assert stub_scorer.await_count == 1

    async def test_short_link_accepted(self, client, stub_youtube, stub_scorer):
        r = await client.post("/api/analyze", json={"url": f"https://youtu.be/{VIDEO_ID}?si=x"})
        assert r.status_code == 200
        stub_youtube.assert_awaited_once_with(VIDEO_ID)

    async def test_default_mock_mode_end_to_end(self, client, youtube_key):
        """Real HTTP mapping (MockTransport) + canned Gemini reply."""
        transport = youtube_transport(
            {
                "videos": (200, {"items": [VIDEO_ITEM]}),
                "channels": (200, CHANNEL_BODY),
                "commentThreads": (200, COMMENTS_BODY),
            }
        )
        with patch.object(youtube_client, "fetch_video", YouTubeClient(transport=transport).fetch_video):
            r = await client.post("/api/analyze", json={"url": URL})

        assert r.status_code == 200
        data = r.json()
        assert data["overallScore"] == 72
        assert data["level"] == "clickbait"


class TestAnalyzeScoringFailure:
    async def test_schema_violation_returns_500(self, client, stub_youtube):
        with patch.object(
            gemini_client, "generate_structured", AsyncMock(side_effect=StructuredOutputError("bad"))
        ):
            r = await client.post("/api/analyze", json={"url": URL})

        assert r.status_code == 500
        assert r.json() == {"error": "Analysis failed. Please try again."}

    async def test_model_error_details_not_leaked(self, client, stub_youtube):
        with patch.object(
            gemini_client, "generate_structured", AsyncMock(side_effect=RuntimeError("secret-project-id"))
        ):
            r = await client.post("/api/analyze", json={"url": URL})

        assert r.status_code == 500
        assert "secret-project-id" not in r.text


# ── Investigation ─────────────────────────────────────────────────────────────


class TestAnalyzeWithInvestigation:
    async def test_investigation_included(self, client, stub_youtube, search_keys):
        replies = {
            "fact_check_query": FactCheckQuery(query="did it happen"),
            "fact_check_verdict": FactCheckVerdict(verdict="Not supported", credible_sources=1),
            "reputation_verdict": ReputationVerdict(verdict="Bait history", signals=["clickbait accusations"]),
            "clickbait_score": MODEL_VERDICT,
        }

        async def generate(prompt, schema, response_key):
            return replies[response_key]

        hits = [SearchResult(title="Hit", snippet="Snip", link="https://e.com")]
        with (
            patch.object(gemini_client, "generate_structured", AsyncMock(side_effect=generate)) as gen,
            patch.object(search_adapter, "search", AsyncMock(return_value=hits)),
        ):
            r = await client.post("/api/analyze", json={"url": URL})

        assert r.status_code == 200
        inv = r.json()["investigation"]
        assert inv["factCheck"]["query"] == "did it happen"
        assert inv["factCheck"]["credibleSources"] == 1
        assert inv["factCheck"]["results"] == [{"title": "Hit", "snippet": "Snip", "link": "https://e.com"}]
        assert inv["channelReputation"]["signals"] == ["clickbait accusations"]
        assert gen.await_count == 4
        scoring_prompt = gen.await_args_list[-1].args[0]
        assert "Bait history" in scoring_prompt

    async def test_investigation_failure_returns_500(self, client, stub_youtube, search_keys):
        with patch.object(investigation_agent, "run", AsyncMock(side_effect=RuntimeError("boom"))):
            r = await client.post("/api/analyze", json={"url": URL})

        assert r.status_code == 500
        assert "error" in r.json()


# ── oEmbed fallback ───────────────────────────────────────────────────────────


class TestAnalyzeOembedFallback:
    async def test_fallback_used_without_key(self, client, stub_scorer, monkeypatch):
        from app.core.config import settings

        monkeypatch.setattr(settings, "oembed_fallback", True)
        offline = YouTubeClient(
            transport=youtube_transport(
                {"oembed": (200, {"title": "Tiny title", "author_name": "Tiny channel"})}
            )
        )
        with patch.object(youtube_client, "fetch_oembed", offline.fetch_oembed):
            r = await client.post("/api/analyze", json={"url": URL})

        assert r.status_code == 200
        data = r.json()
        assert data["videoInfo"]["title"] == "Tiny title"
        assert data["videoInfo"]["channelName"] == "Tiny channel"
        assert "videoDetails" not in data

    async def test_fallback_miss_returns_400(self, client, monkeypatch):
        from app.core.config import settings

        monkeypatch.setattr(settings, "oembed_fallback", True)
        with patch.object(youtube_client, "fetch_oembed", AsyncMock(return_value=None)):
            r = await client.post("/api/analyze", json={"url": URL})

        assert r.status_code == 400


# ── Unexpected failures ───────────────────────────────────────────────────────


@pytest.fixture()
async def lenient_client():
    """ASGI client that returns the app's 500 response instead of re-raising."""
    from app.main import app

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestAnalyzeUnexpectedFailure:
    async def test_uncaught_error_returns_json_500(self, lenient_client, youtube_key):
        with patch.object(youtube_client, "fetch_video", AsyncMock(side_effect=RuntimeError("kaboom"))):
            r = await lenient_client.post("/api/analyze", json={"url": URL})

        assert r.status_code == 500
        assert r.headers["content-type"].startswith("application/json")
        assert r.json() == {"error": "Analysis failed. Please try again."}
        assert "kaboom" not in r.text

    async def test_html_comment_body_still_scores(self, client, youtube_key, stub_scorer):
        transport = youtube_transport(
            {
                "videos": (200, {"items": [VIDEO_ITEM]}),
                "channels": (200, CHANNEL_BODY),
                "commentThreads": (200, "<html>oops</html>"),
            }
        )
        with patch.object(youtube_client, "fetch_video", YouTubeClient(transport=transport).fetch_video):
            r = await client.post("/api/analyze", json={"url": URL})

        assert r.status_code == 200
        assert r.json()["videoDetails"]["commentSample"] == 0
