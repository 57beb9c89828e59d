"""
investigation_agent.py — Web-search investigation before scoring.

Two branches, each a search followed by a small Gemini verdict:

  Fact-check
    0. Gemini extracts one verifiable claim from the title as a search
       query, or answers "not applicable".
    1. Search that query (skipped on "not applicable").
    2. Gemini judges the results → verdict + credible source count (0–5).

  Channel reputation
    0. Fixed query: channel name + controversy / clickbait / scam / criticism.
    1. Search that query.
    2. Gemini judges the results → verdict + warning signals.

Step 1 of both branches runs in parallel, then step 2 of both branches runs
in parallel. A branch with no results skips its Gemini call and uses the
default verdict. Model errors propagate; search errors have already been
absorbed by the search adapter.

Only engaged when the search adapter is configured; otherwise run() returns
None and the scorer works from metadata alone.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from app.ai.gemini_client import gemini_client
from app.ai.search_adapter import SearchResult, search_adapter
from app.models.clickbait import FactCheckQuery, FactCheckVerdict, ReputationVerdict
from app.services.youtube_client import VideoMetadata

logger = logging.getLogger(__name__)

NOT_APPLICABLE = "not applicable"
NOTHING_TO_VERIFY = "Nothing to verify"
NO_ISSUES_FOUND = "No issues found"

REPUTATION_QUERY_TEMPLATE = '"{channel}" (controversy OR clickbait OR scam OR criticism)'


# ── Data classes (internal; converted to Pydantic models by the route) ────────

@dataclass
class FactCheckResult:
    query: str | None
    verdict: str
    credible_sources: int = 0
    results: list[SearchResult] = field(default_factory=list)


@dataclass
class ReputationResult:
    query: str
    verdict: str
    signals: list[str] = field(default_factory=list)
    results: list[SearchResult] = field(default_factory=list)


@dataclass
class Investigation:
    fact_check: FactCheckResult
    channel_reputation: ReputationResult


# ── Prompts ───────────────────────────────────────────────────────────────────

_QUERY_PROMPT = """You help fact-check YouTube video titles.

TITLE: {title}

If the title makes a concrete, verifiable factual claim (an event, a number,
a named person doing something, a product result), turn the single most
important claim into ONE web search query that would confirm or refute it.

If the title contains no checkable claim (opinion, vlog, tutorial, pure
hype), answer with the exact text "{sentinel}".

Respond with JSON: {{"query": "..."}}"""

_FACT_CHECK_PROMPT = """You are checking whether a YouTube title's claim holds up.

TITLE: {title}
SEARCH QUERY: {query}

Search results:
{search_results}

Decide whether the results support, contradict, or fail to address the claim.
Count how many of the results come from credible sources (established news
outlets, official bodies, recognised experts); the count is between 0 and 5.

Respond with JSON: {{"verdict": "<one or two sentences>", "credibleSources": <0-5>}}"""

_REPUTATION_PROMPT = """You are assessing the reputation of a YouTube channel.

CHANNEL: {channel}
SEARCH QUERY: {query}

Search results:
{search_results}

Summarise what the results say about the channel. List any warning signals
actually supported by the results, such as past controversy, clickbait
accusations, scam or fraud allegations, or sustained criticism. Use an empty
list if there are none. Do not invent signals.

Respond with JSON: {{"verdict": "<one or two sentences>", "signals": ["..."]}}"""


# ── Helpers ───────────────────────────────────────────────────────────────────

def is_not_applicable(query: str) -> bool:
    return query.strip().strip("\"'.").lower() == NOT_APPLICABLE


def reputation_query(channel: str) -> str:
    return REPUTATION_QUERY_TEMPLATE.format(channel=channel.replace('"', ""))


def _format_search(results: list[SearchResult]) -> str:
    lines = []
    for i, r in enumerate(results, 1):
        lines.append(f"[{i}] {r.title}\n    URL: {r.link}\n    Excerpt: {r.snippet}")
    return "\n\n".join(lines)


async def _no_results() -> list[SearchResult]:
    return []


# ── Agent ─────────────────────────────────────────────────────────────────────

class InvestigationAgent:
    """Runs the fact-check and reputation branches for one video."""

    @property
    def enabled(self) -> bool:
        return search_adapter.enabled

    async def run(self, meta: VideoMetadata) -> Investigation | None:
        if not self.enabled:
            logger.debug("Search not configured — skipping investigation for %s", meta.video_id)
            return None

        logger.info("Starting investigation for %s (channel=%s)", meta.video_id, meta.channel_title)

        # ── 0. Queries ─────────────────────────────────────────────────────────
        derived = await gemini_client.generate_structured(
            _QUERY_PROMPT.format(title=meta.title, sentinel=NOT_APPLICABLE),
            FactCheckQuery,
            response_key="fact_check_query",
        )
        fc_query: str | None = None if is_not_applicable(derived.query) else derived.query.strip()
        rep_query = reputation_query(meta.channel_title)
        logger.info("Fact-check query: %r | reputation query: %r", fc_query, rep_query)

        # ── 1. Both searches in parallel ───────────────────────────────────────
        fc_results, rep_results = await asyncio.gather(
            search_adapter.search(fc_query) if fc_query else _no_results(),
            search_adapter.search(rep_query),
        )

        # ── 2. Both verdicts in parallel ───────────────────────────────────────
        fact_check, reputation = await asyncio.gather(
            self._judge_fact_check(meta.title, fc_query, fc_results),
            self._judge_reputation(meta.channel_title, rep_query, rep_results),
        )

        logger.info(
            "Investigation complete for %s: credible=%d signals=%d",
            meta.video_id, fact_check.credible_sources, len(reputation.signals),
        )
        return Investigation(fact_check=fact_check, channel_reputation=reputation)

    async def _judge_fact_check(
        self, title: str, query: str | None, results: list[SearchResult]
    ) -> FactCheckResult:
        if not query or not results:
            return FactCheckResult(query=query, verdict=NOTHING_TO_VERIFY, results=results)

        judged = await gemini_client.generate_structured(
            _FACT_CHECK_PROMPT.format(
                title=title, query=query, search_results=_format_search(results)
            ),
            FactCheckVerdict,
            response_key="fact_check_verdict",
        )
        return FactCheckResult(
            query=query,
            verdict=judged.verdict,
            credible_sources=judged.credible_sources,
            results=results,
        )

    async def _judge_reputation(
        self, channel: str, query: str, results: list[SearchResult]
    ) -> ReputationResult:
        if not results:
            return ReputationResult(query=query, verdict=NO_ISSUES_FOUND)

        judged = await gemini_client.generate_structured(
            _REPUTATION_PROMPT.format(
                channel=channel, query=query, search_results=_format_search(results)
            ),
            ReputationVerdict,
            response_key="reputation_verdict",
        )
        signals = [s.strip() for s in judged.signals if s and s.strip()]
        return ReputationResult(query=query, verdict=judged.verdict, signals=signals, results=results)


# Module-level singleton
investigation_agent = InvestigationAgent()
