"""
youtube.py — Pydantic models for the clickbait analysis API.

Optional sections (videoDetails, investigation, error) are left out of the
JSON body entirely when absent; the route serialises with exclude_none.
"""

from typing import Literal

from pydantic import Field

from app.models.clickbait import CamelModel, ScoreBreakdown


class AnalyzeRequest(CamelModel):
    url: str = Field(..., description="YouTube video URL (watch, youtu.be, shorts or embed)")


class ChapterOut(CamelModel):
    time:  str
    title: str


class VideoInfo(CamelModel):
    title:        str
    thumbnail:    str | None = None
    channel_name: str | None = None
    description:  str | None = None


class VideoDetails(CamelModel):
    published_at:     str
    duration:         str
    view_count:       str
    like_count:       str
    comment_count:    str
    subscriber_count: str | None = None
    tags:             list[str] = Field(default_factory=list)
    chapters:         list[ChapterOut] = Field(default_factory=list)
    comment_sample:   int = 0   # how many top comments went into the prompt


class SearchResultOut(CamelModel):
    title:   str
    snippet: str = ""
    link:    str = ""


class FactCheckOut(CamelModel):
    query:            str | None = None   # None when no checkable claim was found
    results:          list[SearchResultOut] = Field(default_factory=list)
    verdict:          str
    credible_sources: int = Field(0, ge=0, le=5)


class ChannelReputationOut(CamelModel):
    query:   str
    results: list[SearchResultOut] = Field(default_factory=list)
    verdict: str
    signals: list[str] = Field(default_factory=list)


class InvestigationOut(CamelModel):
    fact_check:         FactCheckOut
    channel_reputation: ChannelReputationOut


class AnalysisResponse(CamelModel):
    is_clickbait:  bool
    overall_score: int = Field(..., ge=0, le=100)
    level:         Literal["clickbait", "suspicious", "safe"]
    scores:        ScoreBreakdown
    analysis:      str
    video_info:    VideoInfo
    video_details: VideoDetails | None = None
    investigation: InvestigationOut | None = None
    error:         bool | None = None


class ErrorResponse(CamelModel):
    error: str
