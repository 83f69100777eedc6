"""
Runtime settings loaded from environment variables.

Environment Variables:
    DEFAULT_EMBEDDING_MODEL: Model used to embed search queries (default: sentence-bert)
    EMBEDDING_TIMEOUT_SECONDS: Deadline per embedding call (default: none)
    EMBEDDING_CACHE_ENABLED: Wrap providers in the content-addressed cache (default: false)
    USE_MOCK_EMBEDDINGS: Replace every provider with MockEmbeddings (default: false)
    OPENAI_API_KEY / GEMINI_API_KEY: Credentials for the gemini provider
    GEMINI_BASE_URL: OpenAI-compatible Gemini endpoint
    TRAIN_SEED: Seed for the train/test shuffle (default: 42)
    LOG_LEVEL: Logging level for the CLI (default: INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = ("true", "1", "yes")

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in _TRUTHY


@dataclass
class Settings:
    """Engine configuration."""

    default_embedding_model: str = "sentence-bert"
    embedding_timeout_seconds: float | None = None
    embedding_cache_enabled: bool = False
    use_mock_embeddings: bool = False
    gemini_api_key: str | None = None
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    train_seed: int | None = 42
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        timeout = os.environ.get("EMBEDDING_TIMEOUT_SECONDS") or None
        seed = os.environ.get("TRAIN_SEED", "42")
        return cls(
            default_embedding_model=os.environ.get("DEFAULT_EMBEDDING_MODEL", "sentence-bert"),
            embedding_timeout_seconds=float(timeout) if timeout else None,
            embedding_cache_enabled=_env_flag("EMBEDDING_CACHE_ENABLED"),
            use_mock_embeddings=_env_flag("USE_MOCK_EMBEDDINGS"),
            gemini_api_key=os.environ.get("GEMINI_API_KEY") or os.environ.get("OPENAI_API_KEY") or None,
            gemini_base_url=os.environ.get("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL),
            # "none" disables seeding for a fresh shuffle on every train call
            train_seed=None if seed.lower() == "none" else int(seed),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the process settings (lazy-loaded from env)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
