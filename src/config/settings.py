"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "RepoPrep"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Generative service (Gemini REST API)
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-flash"
    generative_timeout_seconds: float = 60.0
    ai_enabled: bool = True  # Kill switch independent of credentials

    # Content host
    content_raw_host: str = "https://raw.githubusercontent.com"
    content_api_host: str = "https://api.github.com"
    github_token: str = ""
    content_timeout_seconds: float = 10.0

    # Pipeline limits
    max_document_chars: int = Field(default=8000, ge=1)
    evaluation_context_chars: int = Field(default=3000, ge=0)
    default_question_count: int = Field(default=5, ge=1)
    max_question_count: int = Field(default=20, ge=1)

    # Langfuse (optional tracing)
    langfuse_enabled: bool = False
    langfuse_secret_key: str = ""
    langfuse_public_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    # CORS - stored as comma-separated string in env
    # Uses validation_alias to read from CORS_ORIGINS env var
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @computed_field
    @property
    def ai_available(self) -> bool:
        """Whether the generative service can be called at all."""
        return self.ai_enabled and bool(self.gemini_api_key.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
