"""Configuration management for project matching."""

from typing import Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # OpenAI Configuration
    openai_api_key: str = ""
    transcription_model: str = "whisper-1"
    transcription_language: str = "fr"
    transcription_timeout_seconds: float = 120.0
    summary_model: str = "gpt-4o-mini"
    provider_timeout_seconds: float = 30.0

    # Embedding Model
    embedding_model: str = "text-embedding-ada-002"
    embedding_dimension: int = 1536

    # Redis Configuration
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None

    # Cache Settings
    cache_enabled: bool = False
    cache_ttl_hours: int = 24

    # Background Analysis
    analysis_max_workers: int = 2
    download_chunk_size: int = 8192

    # Matching Defaults
    score_minimum: float = 0.5
    recommendation_score_minimum: float = 0.6
    collaborator_score_minimum: float = 0.6
    max_recommendations: int = 10
    complementarity_threshold: float = 0.3
    profile_window: int = 5
    preferred_theme_count: int = 3
    collaborator_pool_size: int = 20

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def cache_ttl_seconds(self) -> int:
        """Convert cache TTL from hours to seconds."""
        return self.cache_ttl_hours * 3600


# Global settings instance
settings = Settings()


class MatchingConfig(BaseModel):
    """
    Options shared by the matching components.

    Passed explicitly into each component constructor so that callers
    (and tests) can tune thresholds without touching global settings.
    """

    score_minimum: float = Field(0.5, ge=-1.0, le=1.0)
    recommendation_score_minimum: float = Field(0.6, ge=-1.0, le=1.0)
    collaborator_score_minimum: float = Field(0.6, ge=-1.0, le=1.0)
    max_recommendations: int = Field(10, gt=0)
    complementarity_threshold: float = Field(0.3, ge=0.0, le=1.0)
    profile_window: int = Field(5, gt=0)
    preferred_theme_count: int = Field(3, gt=0)
    collaborator_pool_size: int = Field(20, gt=0)

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "MatchingConfig":
        """Build a config from application settings."""
        source = source or settings
        return cls(
            score_minimum=source.score_minimum,
            recommendation_score_minimum=source.recommendation_score_minimum,
            collaborator_score_minimum=source.collaborator_score_minimum,
            max_recommendations=source.max_recommendations,
            complementarity_threshold=source.complementarity_threshold,
            profile_window=source.profile_window,
            preferred_theme_count=source.preferred_theme_count,
            collaborator_pool_size=source.collaborator_pool_size
        )
