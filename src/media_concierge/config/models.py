"""Configuration data models."""

import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = Field(..., description="LLM provider name")
    model: str = Field(..., description="Chat model used for conversational replies")
    reasoning_model: Optional[str] = Field(
        None, description="Model used for classification and parsing (defaults to model)"
    )
    api_key: str = Field(..., description="API key for the provider")
    max_tokens: int = Field(default=1000, description="Maximum tokens for completion")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Chat temperature")
    reasoning_temperature: float = Field(
        default=0.0, ge=0.0, le=2.0, description="Temperature for classification calls"
    )
    timeout: int = Field(default=30, gt=0, description="Request timeout in seconds")

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        """Validate LLM provider."""
        allowed = {"openai", "anthropic"}
        if v.lower() not in allowed:
            raise ValueError(f"Provider must be one of: {allowed}")
        return v.lower()

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Expand environment variables in API key."""
        return os.path.expandvars(v)

    @property
    def classification_model(self) -> str:
        """Model used for structured classification calls."""
        return self.reasoning_model or self.model


class RadarrProfileConfig(BaseModel):
    """Radarr default profile configuration."""

    quality_profile_id: int = Field(..., description="Default quality profile ID")
    root_folder_path: str = Field(..., description="Default root folder path")
    minimum_availability: str = Field(default="released", description="Minimum availability")
    tags: List[int] = Field(default_factory=list, description="Default tag IDs")

    @field_validator("minimum_availability")
    @classmethod
    def validate_availability(cls, v: str) -> str:
        """Validate minimum availability option."""
        allowed = {"announced", "inCinemas", "released", "preDB"}
        if v not in allowed:
            raise ValueError(f"Minimum availability must be one of: {allowed}")
        return v


class RadarrConfig(BaseModel):
    """Radarr (movie manager) integration configuration."""

    enabled: bool = Field(default=True, description="Enable Radarr integration")
    url: str = Field(..., description="Radarr base URL")
    api_key: str = Field(..., description="Radarr API key")
    timeout: int = Field(default=30, gt=0, description="Request timeout in seconds")
    default_profile: RadarrProfileConfig = Field(..., description="Default profile settings")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Expand environment variables in API key."""
        return os.path.expandvars(v)

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL."""
        return v.rstrip("/")


class SonarrProfileConfig(BaseModel):
    """Sonarr default profile configuration."""

    quality_profile_id: int = Field(..., description="Default quality profile ID")
    root_folder_path: str = Field(..., description="Default root folder path")
    language_profile_id: int = Field(default=1, description="Default language profile ID")
    series_type: str = Field(default="standard", description="Series type")
    season_folder: bool = Field(default=True, description="Use season folders")
    tags: List[int] = Field(default_factory=list, description="Default tag IDs")

    @field_validator("series_type")
    @classmethod
    def validate_series_type(cls, v: str) -> str:
        """Validate series type option."""
        allowed = {"standard", "daily", "anime"}
        if v not in allowed:
            raise ValueError(f"Series type must be one of: {allowed}")
        return v


class SonarrConfig(BaseModel):
    """Sonarr (series manager) integration configuration."""

    enabled: bool = Field(default=True, description="Enable Sonarr integration")
    url: str = Field(..., description="Sonarr base URL")
    api_key: str = Field(..., description="Sonarr API key")
    timeout: int = Field(default=30, gt=0, description="Request timeout in seconds")
    default_profile: SonarrProfileConfig = Field(..., description="Default profile settings")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Expand environment variables in API key."""
        return os.path.expandvars(v)

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL."""
        return v.rstrip("/")


class SessionConfig(BaseModel):
    """Multi-turn session context configuration."""

    ttl_minutes: int = Field(default=30, gt=0, description="Context lifetime in minutes")
    max_search_results: int = Field(
        default=10, gt=0, description="Maximum candidates kept in a context"
    )
    cleanup_interval_seconds: int = Field(
        default=300, gt=0, description="Minimum interval between expired-context purges"
    )

    @property
    def ttl_seconds(self) -> float:
        """Context lifetime in seconds."""
        return self.ttl_minutes * 60.0


class RetryConfig(BaseModel):
    """Retry policy for language-model calls."""

    max_attempts: int = Field(default=3, ge=1, description="Attempts per call")
    base_delay_seconds: float = Field(default=1.0, ge=0.0, description="Initial backoff")
    max_delay_seconds: float = Field(default=30.0, ge=0.0, description="Backoff ceiling")
    timeout_seconds: float = Field(default=30.0, gt=0.0, description="Per-attempt timeout")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - [%(user_id)s] %(message)s",
        description="Log format string",
    )
    file: Optional[str] = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, gt=0, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, ge=0, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Logging level must be one of: {allowed}")
        return v.upper()


class AppConfig(BaseModel):
    """Application behavior configuration."""

    default_user_id: str = Field(default="local", description="User id used by the CLI")
    history_limit: int = Field(
        default=20, gt=0, description="Messages of history passed to the summarizer"
    )


class Config(BaseModel):
    """Main configuration model."""

    llm: LLMConfig = Field(..., description="LLM configuration")
    radarr: RadarrConfig = Field(..., description="Radarr configuration")
    sonarr: SonarrConfig = Field(..., description="Sonarr configuration")
    session: SessionConfig = Field(
        default_factory=SessionConfig, description="Session context configuration"
    )
    retry: RetryConfig = Field(default_factory=RetryConfig, description="Retry configuration")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    app: AppConfig = Field(default_factory=AppConfig, description="Application configuration")

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
    )
