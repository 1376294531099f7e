"""Request handler interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import ChatMessage, StrategyResult


class IMediaRequestHandler(ABC):
    """Top-level entry point for incoming chat messages."""

    @abstractmethod
    async def handle_message(
        self, message: str, user_id: str, history: Optional[List[ChatMessage]] = None
    ) -> StrategyResult:
        """Route a message to the right operation and return its result."""
        pass
