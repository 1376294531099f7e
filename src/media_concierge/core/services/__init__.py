"""Core service implementations.

``MediaRequestHandler`` lives in ``request_handler`` and is imported from
there directly, since it depends on the strategies which depend on this package.
"""

from .llm_services import AnthropicLLMService, OpenAILLMService
from .radarr_service import RadarrService
from .request_parser import RequestParser
from .session_store import InMemorySessionStore
from .sonarr_service import SonarrService
from .topic_gate import TopicContinuityGate

__all__ = [
    "OpenAILLMService",
    "AnthropicLLMService",
    "RadarrService",
    "SonarrService",
    "InMemorySessionStore",
    "TopicContinuityGate",
    "RequestParser",
]
