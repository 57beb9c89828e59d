"""
prompt_builder.py — Render gathered video data into the scoring prompt.

build_analysis_prompt() is pure: identical inputs always give an identical
string, so prompt changes can be reviewed and tested without a model.
"""

from app.ai.investigation_agent import Investigation
from app.services.youtube_client import VideoMetadata

DESCRIPTION_LIMIT = 2000
HEADLINES_PER_BRANCH = 3

_RUBRIC = """[Scoring criteria] Score each dimension from 0 to 100.
- titleExaggeration: sensational wording in the title ("SHOCKING", "you won't believe",
  "the result of ..."), superlatives, ALL CAPS, excessive punctuation.
- thumbnailManipulation: likely thumbnail bait for this kind of video (red circles,
  arrows, shocked faces, heavy editing), inferred from title, tags and channel style.
- contentMismatch: how far the title and thumbnail promise diverge from what the
  description, chapters and viewer comments say the video actually contains.
- emotionalBait: provoking anger, surprise, fear or outrage to drive clicks.
- urgencyTactics: "watch now", "before it's deleted", "limited", fear of missing out."""

_INVESTIGATION_DIRECTIVE = """The investigation results above come from live web searches.
Weigh them heavily: a title claim contradicted by credible sources should raise
contentMismatch and the overall score; a channel with documented clickbait or scam
history should raise the overall score."""

_PROMPT = """You are an assistant that rates how much of a "clickbait" a YouTube video is.
Analyse the video information below and decide whether it is clickbait.

[Video]
Title: {title}
Channel: {channel}
Published: {published}
Duration: {duration}

[Statistics]
Views: {views}
Likes: {likes}
Comments: {comments}

Tags: {tags}

[Description]
{description}

[Chapters]
{chapters}

[Top comments]
{top_comments}
{investigation}
{rubric}
{directive}
Use viewer comments as evidence of whether the video delivered on its title.
A high like-to-view ratio with satisfied comments suggests the packaging was fair.

Set isClickbait to true when the overall score is 50 or more.
Write the analysis comment in {language}, 100 to 200 characters, specific to this
video and with a light touch of humour."""


def _format_investigation(investigation: Investigation) -> str:
    fc = investigation.fact_check
    rep = investigation.channel_reputation

    lines = ["", "[Investigation]", "Fact-check of the title:"]
    lines.append(f"  Query: {fc.query or 'not applicable (no checkable claim)'}")
    lines.append(f"  Verdict: {fc.verdict}")
    lines.append(f"  Credible sources: {fc.credible_sources}/5")
    for r in fc.results[:HEADLINES_PER_BRANCH]:
        lines.append(f"  - {r.title}: {r.snippet}")

    lines.append("Channel reputation:")
    lines.append(f"  Query: {rep.query}")
    lines.append(f"  Verdict: {rep.verdict}")
    lines.append(f"  Warning signals: {', '.join(rep.signals) if rep.signals else 'none'}")
    for r in rep.results[:HEADLINES_PER_BRANCH]:
        lines.append(f"  - {r.title}: {r.snippet}")
    lines.append("")
    return "\n".join(lines)


def build_analysis_prompt(
    meta: VideoMetadata,
    investigation: Investigation | None = None,
    language: str = "English",
) -> str:
    channel = meta.channel_title or "unknown"
    if meta.subscriber_count is not None:
        channel = f"{channel} ({meta.subscriber_count} subscribers)"

    chapters = "\n".join(f"{c.time} {c.title}" for c in meta.chapters) or "none"
    comments = "\n".join(f"- {c}" for c in meta.top_comments) or "no comments"

    return _PROMPT.format(
        title=meta.title or "unknown",
        channel=channel,
        published=meta.published_date or "unknown",
        duration=meta.duration or "unknown",
        views=meta.view_count,
        likes=meta.like_count,
        comments=meta.comment_count,
        tags=", ".join(meta.tags) if meta.tags else "none",
        description=meta.description[:DESCRIPTION_LIMIT] or "none",
        chapters=chapters,
        top_comments=comments,
        investigation=_format_investigation(investigation) if investigation else "",
        rubric=_RUBRIC,
        directive=_INVESTIGATION_DIRECTIVE + "\n" if investigation else "",
        language=language,
    )
