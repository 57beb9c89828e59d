"""
Application configuration loaded from environment variables.

Uses pydantic-settings for type-safe env var parsing with automatic
.env file loading. All secrets are injected via environment — never
hard-coded.

To extend: add new fields here and document them in .env.example.
See https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ─── Core ──────────────────────────────────────────────────────
    environment: str = "development"
    debug: bool = False

    # ─── CORS ──────────────────────────────────────────────────────
    # Comma-separated allowed origins for the single-page UI.
    cors_origins_str: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_str.split(",") if o.strip()]

    # ─── AI (Gemini) ───────────────────────────────────────────────
    # When True, all model calls return canned mock responses.
    # Always True in tests; set False in production with real credentials.
    ai_mock_mode: bool = True

    # Vertex AI mode is used when a project is set; otherwise API-key mode.
    google_cloud_project: str = ""
    google_cloud_location: str = "asia-northeast1"
    gemini_api_key: str = ""  # https://aistudio.google.com/
    gemini_model: str = "gemini-2.5-flash"
    gemini_timeout_seconds: float = 60.0

    # Language the model writes its analysis comment in.
    analysis_language: str = "English"

    # ─── YouTube Data API v3 ───────────────────────────────────────
    youtube_api_key: str = ""
    youtube_timeout_seconds: float = 10.0

    # Fall back to the unauthenticated oEmbed lookup (title + author only)
    # when no Data API key is configured.
    oembed_fallback: bool = False

    # ─── Optional integrations ─────────────────────────────────────
    # Investigation is disabled unless both of these are set.
    google_search_api_key: str = ""  # Custom Search JSON API key
    google_search_engine_id: str = ""  # Programmable Search Engine "cx"
    search_language: str = "lang_en"
    search_timeout_seconds: float = 10.0

    # ─── Rate limiting ─────────────────────────────────────────────
    rate_limit_enabled: bool = True
    analyze_rate_limit: str = "10/minute"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Don't fail on unknown env vars
    )


# Module-level singleton — import this everywhere instead of instantiating Settings()
settings = Settings()
