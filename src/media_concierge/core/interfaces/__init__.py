"""Core interfaces for dependency injection."""

from .llm_service import ILLMService
from .media_strategy import IMediaStrategy
from .radarr_service import IRadarrService
from .request_handler import IMediaRequestHandler
from .session_store import ISessionStore
from .sonarr_service import ISonarrService

__all__ = [
    "ILLMService",
    "IRadarrService",
    "ISonarrService",
    "ISessionStore",
    "IMediaStrategy",
    "IMediaRequestHandler",
]
