"""Custom exceptions for the application."""


class MediaConciergeError(Exception):
    """Base exception for all application errors."""

    pass


class ConfigurationError(MediaConciergeError):
    """Configuration-related errors."""

    pass


class LLMServiceError(MediaConciergeError):
    """LLM service errors."""

    pass


class RadarrServiceError(MediaConciergeError):
    """Radarr service errors."""

    pass


class SonarrServiceError(MediaConciergeError):
    """Sonarr service errors."""

    pass


class StrategyError(MediaConciergeError):
    """Operation strategy errors."""

    pass
