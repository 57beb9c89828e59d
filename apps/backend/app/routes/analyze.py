"""
analyze.py — Clickbait analysis endpoint.

Route:
  POST /api/analyze
    Accepts {"url": "<YouTube URL>"}, gathers video data, optionally runs the
    web-search investigation, and asks Gemini to score the video.

HOW THE DATA FLOWS
──────────────────
1. Validate the body has a non-empty URL.                       → 400
2. extract_video_id() pulls the id out of the URL.              → 400
3. youtube_client.fetch_video() gets snippet / contentDetails /
   statistics, then subscriber count + top comments in parallel → 400
4. investigation_agent.run() (only when search is configured)   → 500
5. build_analysis_prompt() renders everything into one prompt.
6. clickbait_scorer.score() returns the validated verdict        → 500
7. Verdict + display metadata are merged into AnalysisResponse.

Every upstream call is made exactly once. Failure details are logged,
never returned to the caller.
"""

import logging

from fastapi import APIRouter, HTTPException, Request

from app.ai.clickbait_scorer import clickbait_scorer, score_level
from app.ai.investigation_agent import Investigation, investigation_agent
from app.ai.prompt_builder import build_analysis_prompt
from app.ai.search_adapter import SearchResult
from app.core.config import settings
from app.core.rate_limit import limiter
from app.models.clickbait import ClickbaitVerdict
from app.models.youtube import (
    AnalysisResponse,
    AnalyzeRequest,
    ChannelReputationOut,
    ChapterOut,
    ErrorResponse,
    FactCheckOut,
    InvestigationOut,
    SearchResultOut,
    VideoDetails,
    VideoInfo,
)
from app.services.youtube_client import (
    QuotaExceededError,
    VideoFetchError,
    VideoMetadata,
    youtube_client,
)
from app.services.youtube_url import extract_video_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyze"])

URL_REQUIRED = "A YouTube URL is required."
INVALID_URL = "That does not look like a valid YouTube URL."
COULD_NOT_RETRIEVE = "Could not retrieve video information."
QUOTA_EXCEEDED = "YouTube API quota exceeded. Please try again later."
ANALYSIS_FAILED = "Analysis failed. Please try again."


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    response_model_exclude_none=True,
    status_code=200,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(settings.analyze_rate_limit)
async def analyze_video(request: Request, payload: AnalyzeRequest):
    """
    Score a YouTube video's clickbait-ness.

    Returns isClickbait, overallScore (0–100), five sub-scores, a short
    analysis comment, display metadata and, when search is configured,
    the investigation that informed the score.
    """
    url = payload.url.strip()
    if not url:
        raise HTTPException(status_code=400, detail=URL_REQUIRED)

    video_id = extract_video_id(url)
    if not video_id:
        logger.debug("No video id in %r", url)
        raise HTTPException(status_code=400, detail=INVALID_URL)

    meta = await _fetch_metadata(video_id)

    try:
        investigation = await investigation_agent.run(meta)
    except Exception as exc:
        logger.error("Investigation failed for %s: %s", video_id, exc, exc_info=True)
        raise HTTPException(status_code=500, detail=ANALYSIS_FAILED)

    prompt = build_analysis_prompt(meta, investigation, language=settings.analysis_language)

    try:
        verdict = await clickbait_scorer.score(prompt)
    except Exception as exc:
        logger.error("Scoring failed for %s: %s", video_id, exc, exc_info=True)
        raise HTTPException(status_code=500, detail=ANALYSIS_FAILED)

    return _build_response(meta, verdict, investigation)


async def _fetch_metadata(video_id: str) -> VideoMetadata:
    if settings.oembed_fallback and not youtube_client.enabled:
        meta = await youtube_client.fetch_oembed(video_id)
        if meta is None:
            raise HTTPException(status_code=400, detail=COULD_NOT_RETRIEVE)
        return meta

    try:
        return await youtube_client.fetch_video(video_id)
    except QuotaExceededError:
        raise HTTPException(status_code=400, detail=QUOTA_EXCEEDED)
    except VideoFetchError as exc:
        logger.warning("Video fetch failed for %s: %s", video_id, exc)
        raise HTTPException(status_code=400, detail=COULD_NOT_RETRIEVE)


# ── Response mapping ──────────────────────────────────────────────────────────

def _results_out(results: list[SearchResult]) -> list[SearchResultOut]:
    return [SearchResultOut(title=r.title, snippet=r.snippet, link=r.link) for r in results]


def _investigation_out(investigation: Investigation) -> InvestigationOut:
    fc = investigation.fact_check
    rep = investigation.channel_reputation
    return InvestigationOut(
        fact_check=FactCheckOut(
            query=fc.query,
            results=_results_out(fc.results),
            verdict=fc.verdict,
            credible_sources=fc.credible_sources,
        ),
        channel_reputation=ChannelReputationOut(
            query=rep.query,
            results=_results_out(rep.results),
            verdict=rep.verdict,
            signals=rep.signals,
        ),
    )


def _build_response(
    meta: VideoMetadata,
    verdict: ClickbaitVerdict,
    investigation: Investigation | None,
) -> AnalysisResponse:
    details = None
    if meta.has_details:
        details = VideoDetails(
            published_at=meta.published_date,
            duration=meta.duration,
            view_count=meta.view_count,
            like_count=meta.like_count,
            comment_count=meta.comment_count,
            subscriber_count=meta.subscriber_count,
            tags=meta.tags,
            chapters=[ChapterOut(time=c.time, title=c.title) for c in meta.chapters],
            comment_sample=len(meta.top_comments),
        )

    return AnalysisResponse(
        is_clickbait=verdict.is_clickbait,
        overall_score=verdict.overall_score,
        level=score_level(verdict.overall_score),
        scores=verdict.scores,
        analysis=verdict.analysis,
        video_info=VideoInfo(
            title=meta.title,
            thumbnail=meta.thumbnail_url or None,
            channel_name=meta.channel_title or None,
            description=meta.description or None,
        ),
        video_details=details,
        investigation=_investigation_out(investigation) if investigation else None,
    )
