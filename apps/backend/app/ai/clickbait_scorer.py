"""
clickbait_scorer.py — Final Gemini call that scores the video.

The assembled prompt goes out with the ClickbaitVerdict schema; whatever
comes back is validated against the same schema (bool flag, overall score
and five sub-scores as integers in 0–100, bounded comment). A reply that
does not validate raises StructuredOutputError. No retry.
"""

import logging

from app.ai.gemini_client import gemini_client
from app.models.clickbait import ClickbaitVerdict

logger = logging.getLogger(__name__)

CLICKBAIT_THRESHOLD = 70
SUSPICIOUS_THRESHOLD = 40


def score_level(overall_score: int) -> str:
    """Bucket an overall score the way the results UI colours it."""
    if overall_score >= CLICKBAIT_THRESHOLD:
        return "clickbait"
    if overall_score >= SUSPICIOUS_THRESHOLD:
        return "suspicious"
    return "safe"


class ClickbaitScorer:
    async def score(self, prompt: str) -> ClickbaitVerdict:
        verdict = await gemini_client.generate_structured(
            prompt, ClickbaitVerdict, response_key="clickbait_score"
        )
        logger.info(
            "Scored: clickbait=%s overall=%d", verdict.is_clickbait, verdict.overall_score
        )
        return verdict


# Module-level singleton
clickbait_scorer = ClickbaitScorer()
