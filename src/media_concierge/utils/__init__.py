"""Utility functions and classes."""

from .exceptions import (
    ConfigurationError,
    LLMServiceError,
    MediaConciergeError,
    RadarrServiceError,
    SonarrServiceError,
    StrategyError,
)

__all__ = [
    "MediaConciergeError",
    "ConfigurationError",
    "LLMServiceError",
    "RadarrServiceError",
    "SonarrServiceError",
    "StrategyError",
]
