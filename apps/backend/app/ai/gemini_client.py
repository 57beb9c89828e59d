"""
GeminiClient — Async wrapper around the google-genai SDK.

Every call in this service asks for structured JSON: the caller passes a
pydantic model, the model is sent as the response schema, and the reply is
validated against the same model before anyone sees it.

Supports two backends:
  - Vertex AI   when GOOGLE_CLOUD_PROJECT is set (GOOGLE_CLOUD_LOCATION,
                default asia-northeast1). Credentials come from the runtime
                (Cloud Run service account / ADC).
  - Gemini API  when only GEMINI_API_KEY is set.

Supports two runtime modes (set via AI_MOCK_MODE env var):
  - MOCK mode (default): returns deterministic canned responses.
    Use for tests and local dev without credentials.
  - REAL mode: makes actual Gemini calls.

Extension pattern: add new mock response keys to _MOCK_RESPONSES and
reference them in generate_structured() calls via the response_key parameter.
"""

import logging
from typing import TypeVar

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError

from app.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class StructuredOutputError(Exception):
    """The model reply did not match the requested schema."""


# Canned responses for mock mode. Every entry must validate against the
# schema its key is used with.
_MOCK_RESPONSES: dict[str, str] = {
    "fact_check_query": '{"query": "not applicable"}',
    "fact_check_verdict": (
        '{"verdict": "[MOCK] The claim in the title is partly supported by the '
        'sources found.", "credibleSources": 2}'
    ),
    "reputation_verdict": (
        '{"verdict": "[MOCK] No notable controversy found for this channel.", '
        '"signals": []}'
    ),
    "clickbait_score": (
        '{"isClickbait": true, "overallScore": 72, '
        '"scores": {"titleExaggeration": 80, "thumbnailManipulation": 65, '
        '"contentMismatch": 55, "emotionalBait": 78, "urgencyTactics": 40}, '
        '"analysis": "[MOCK] The title leans hard on shock wording while the '
        'description and chapters point to fairly ordinary content. Classic bait, '
        'served with a side of exclamation marks."}'
    ),
}


def parse_structured(raw: str | None, schema: type[T]) -> T:
    """Validate a JSON reply against *schema*; raise StructuredOutputError on mismatch."""
    try:
        return schema.model_validate_json(raw or "")
    except ValidationError as exc:
        logger.error(
            "Model output failed %s validation: %s | raw=%.200s",
            schema.__name__, exc.errors(include_url=False), raw,
        )
        raise StructuredOutputError(f"Invalid {schema.__name__} payload") from exc


class GeminiClient:
    """
    Central Gemini interface for the service.

    Single place for backend selection, timeouts, logging and mock
    injection. Use the module-level `gemini_client` singleton.
    """

    def __init__(self) -> None:
        self.mock_mode = settings.ai_mock_mode
        self.model = settings.gemini_model
        self._client: genai.Client | None = None

        if not self.mock_mode:
            http_options = types.HttpOptions(timeout=int(settings.gemini_timeout_seconds * 1000))
            if settings.google_cloud_project:
                self._client = genai.Client(
                    vertexai=True,
                    project=settings.google_cloud_project,
                    location=settings.google_cloud_location,
                    http_options=http_options,
                )
            elif settings.gemini_api_key:
                self._client = genai.Client(
                    api_key=settings.gemini_api_key, http_options=http_options
                )
            else:
                logger.warning(
                    "Neither GOOGLE_CLOUD_PROJECT nor GEMINI_API_KEY set — falling back "
                    "to mock mode. Set AI_MOCK_MODE=true to silence this warning."
                )
                self.mock_mode = True

        if self.mock_mode:
            logger.info("GeminiClient initialised in MOCK mode")
        else:
            logger.info(
                "GeminiClient initialised in REAL mode (model: %s, vertex: %s)",
                self.model, bool(settings.google_cloud_project),
            )

    async def generate_structured(
        self,
        prompt: str,
        schema: type[T],
        response_key: str,
    ) -> T:
        """
        Generate a JSON reply conforming to *schema*.

        Args:
            prompt:        The full prompt string.
            schema:        Pydantic model used as response schema and validator.
            response_key:  Mock response key (ignored in real mode).

        Returns:
            A validated instance of *schema*.

        Raises:
            StructuredOutputError: the reply does not validate.
            Exception: Propagates google-genai SDK errors in real mode.
        """
        if self.mock_mode:
            return parse_structured(_MOCK_RESPONSES[response_key], schema)

        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=schema,
                ),
            )
        except Exception as exc:
            logger.error("Gemini API error (model=%s, key=%s): %s", self.model, response_key, exc)
            raise

        return parse_structured(response.text, schema)


# Module-level singleton — import and use this everywhere
gemini_client = GeminiClient()
