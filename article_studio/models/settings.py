"""Settings and configuration management."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # AI Processing
    openrouter_api_key: Optional[str] = Field(None, description="OpenRouter")
    openrouter_base_url: str = Field(
        "https://openrouter.ai/api/v1", description="OpenRouter API base URL"
    )
    openrouter_model: str = Field(
        "deepseek/deepseek-chat-v3-0324:free",
        description="Model used for articles and SEO metadata",
    )
    openrouter_ideas_model: str = Field(
        "openai/gpt-3.5-turbo", description="Model used for title/keyword ideas"
    )
    openrouter_site_url: Optional[str] = Field(
        None, description="Sent as HTTP-Referer for OpenRouter rankings"
    )
    openrouter_site_name: Optional[str] = Field(
        None, description="Sent as X-Title for OpenRouter rankings"
    )

    # API Timeout Settings (in seconds)
    openrouter_timeout: float = Field(
        60.0, ge=5.0, le=300.0, description="OpenRouter API request timeout in seconds"
    )

    # Generation Settings
    generation_temperature: float = Field(
        0.7, ge=0.0, le=2.0, description="Sampling temperature for articles"
    )
    generation_max_tokens: int = Field(
        4000, ge=64, le=32000, description="Maximum tokens per generation"
    )
    seo_preview_length: int = Field(
        500, ge=50, le=5000, description="Content characters sent for SEO metadata"
    )

    # Storage
    database_path: str = Field("articles.db", description="SQLite database file")

    # Rate Limiting Settings
    rate_limit_requests: int = Field(
        10, ge=1, le=1000, description="Requests allowed per window and identity"
    )
    rate_limit_window_seconds: float = Field(
        60.0, ge=1.0, le=3600.0, description="Rate limit window length in seconds"
    )

    # Application Settings
    debug: bool = Field(False, description="Debug mode")
    log_level: str = Field("INFO", description="Log level")
