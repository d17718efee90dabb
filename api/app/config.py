# api/app/config.py
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application configuration.

    Loads environment variables from `.env` and provides
    typed access across the API, the analysis pipeline, and scripts.
    """

    # ─────────────────────────────────────────────
    # Pydantic Settings Config
    # ─────────────────────────────────────────────
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ─────────────────────────────────────────────
    # Database
    # ─────────────────────────────────────────────
    database_url: str = "postgresql+asyncpg://localhost:5432/signal_watcher"
    database_echo: bool = False

    # ─────────────────────────────────────────────
    # OpenAI (remote analysis)
    # ─────────────────────────────────────────────
    # No key means the keyword fallback analyzer is pinned for the process.
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    openai_timeout_seconds: float = 30.0
    openai_temperature: float = 0.1
    openai_max_tokens: int = 500

    # ─────────────────────────────────────────────
    # API
    # ─────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origin: str = "http://localhost:3000"
    correlation_header: str = "X-Correlation-ID"

    # ─────────────────────────────────────────────
    # Observability
    # ─────────────────────────────────────────────
    log_level: str = "INFO"
    enable_metrics: bool = False

    # ─────────────────────────────────────────────
    # Derived Properties
    # ─────────────────────────────────────────────
    @property
    def remote_analysis_enabled(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key.strip())


# ─────────────────────────────────────────────
# Cached Settings Instance
# ─────────────────────────────────────────────
@lru_cache
def get_settings() -> Settings:
    """
    Returns a cached Settings instance so config
    is only loaded once per process.
    """
    return Settings()
