"""Configuration management module."""

from .config_manager import ConfigManager
from .models import (
    AppConfig,
    Config,
    LLMConfig,
    LoggingConfig,
    RadarrConfig,
    RetryConfig,
    SessionConfig,
    SonarrConfig,
)

__all__ = [
    "ConfigManager",
    "Config",
    "AppConfig",
    "LLMConfig",
    "LoggingConfig",
    "RadarrConfig",
    "RetryConfig",
    "SessionConfig",
    "SonarrConfig",
]
