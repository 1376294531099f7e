"""LLM service interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import (
    ChatMessage,
    MediaKind,
    MediaRequest,
    PartsSelection,
    SelectionReference,
)


class ILLMService(ABC):
    """Interface for language-model backed classification and summarizing."""

    @abstractmethod
    async def classify_intent(self, message: str) -> MediaRequest:
        """Classify a fresh message into media kind, search intent and terms.

        Raises:
            LLMServiceError: If the request fails or the output has the wrong shape.
        """
        pass

    @abstractmethod
    async def classify_media_kind(self, message: str) -> MediaKind:
        """Decide between movie and series for an ambiguous request.

        Returns:
            MediaKind.MOVIE or MediaKind.SERIES.

        Raises:
            LLMServiceError: If the request fails.
        """
        pass

    @abstractmethod
    async def detect_topic_continuity(self, message: str) -> str:
        """Return the raw categorical answer, expected to be "SWITCH" or "CONTINUE".

        Raises:
            LLMServiceError: If the request fails.
        """
        pass

    @abstractmethod
    async def extract_search_query(self, message: str, for_series_delete: bool = False) -> str:
        """Extract the title to search for.

        Raises:
            LLMServiceError: If the request fails.
        """
        pass

    @abstractmethod
    async def parse_selection_reference(self, message: str) -> Optional[SelectionReference]:
        """Parse "which one" from a message; None when the message has no reference.

        Raises:
            LLMServiceError: If the request fails.
        """
        pass

    @abstractmethod
    async def parse_parts(self, message: str) -> Optional[PartsSelection]:
        """Parse the seasons/episodes scope; None when nothing was specified.

        Raises:
            LLMServiceError: If the request fails.
        """
        pass

    @abstractmethod
    async def generate_response(
        self, instructions: str, history: List[ChatMessage], message: str
    ) -> str:
        """Produce a conversational reply following the given instructions.

        Raises:
            LLMServiceError: If the request fails.
        """
        pass
