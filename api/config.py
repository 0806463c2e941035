"""
M&O Legal Desk - Configuration
Environment-based settings management
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Core
    debug: bool = False
    log_level: str = "info"
    cors_origins: str = "http://localhost:3000"

    # Generative providers
    llm_provider: str = "gemini"  # gemini, anthropic, openrouter, mock
    gemini_api_key: str = ""
    gemini_fast_model: str = "gemini-3-flash-preview"
    gemini_deep_model: str = "gemini-3-pro-preview"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    openrouter_api_key: str = ""
    openrouter_model: str = "google/gemini-2.5-flash"

    # Fetch pipeline
    fetch_max_attempts: int = 3
    fetch_base_delay_ms: int = 1000
    batch_has_more_threshold: int = 3  # Fewer records than this ends pagination
    suggestion_min_length: int = 2
    study_lab_max_chars: int = 60000

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience accessors
settings = get_settings()
