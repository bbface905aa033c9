"""Environment configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


# Value shipped in the example .env; treated the same as an unset key.
PLACEHOLDER_API_KEY = "your-gemini-api-key-here"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Mock control (forces the placeholder path even when a key is set)
    mock_gemini: bool = False

    # Google Gemini configuration
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    ai_model: str = "gemini-2.5-flash"
    llm_max_tokens: int = 1024
    llm_temperature: float = 0.7

    # HTTP surface
    api_prefix: str = "/api"
    cors_origins: str = "https://jobpsych.vercel.app,http://localhost:3000"
    rate_limit_per_minute: int = 100

    # Server configuration
    port: int = 5000
    host: str = "0.0.0.0"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    environment: Literal["development", "production"] = "development"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def has_gemini_key(self) -> bool:
        """Check if a usable Gemini API key is configured."""
        return bool(self.gemini_api_key) and self.gemini_api_key != PLACEHOLDER_API_KEY

    @property
    def cors_origin_list(self) -> list[str]:
        """Split the comma separated CORS_ORIGINS value."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
