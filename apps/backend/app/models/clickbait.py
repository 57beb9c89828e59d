"""
clickbait.py — Structured-output contracts for every Gemini call.

Each model doubles as the response_schema sent to Gemini and as the
validator applied to the reply, so a field or bound changed here changes
both sides at once. Wire names are camelCase.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoreBreakdown(CamelModel):
    title_exaggeration:     int = Field(..., ge=0, le=100, description="Exaggeration in the title")
    thumbnail_manipulation: int = Field(..., ge=0, le=100, description="Sensational thumbnail cues")
    content_mismatch:       int = Field(..., ge=0, le=100, description="Gap between packaging and content")
    emotional_bait:         int = Field(..., ge=0, le=100, description="Anger / shock / fear provocation")
    urgency_tactics:        int = Field(..., ge=0, le=100, description="Artificial urgency or scarcity")


class ClickbaitVerdict(CamelModel):
    """Final scorer output."""
    is_clickbait:  bool
    overall_score: int = Field(..., ge=0, le=100)
    scores:        ScoreBreakdown
    analysis:      str = Field(..., min_length=1, max_length=400, description="100–200 character comment")


class FactCheckQuery(CamelModel):
    query: str = Field(..., description='One search query, or "not applicable"')


class FactCheckVerdict(CamelModel):
    verdict:          str
    credible_sources: int = Field(..., ge=0, le=5)


class ReputationVerdict(CamelModel):
    verdict: str
    signals: list[str] = Field(default_factory=list)
