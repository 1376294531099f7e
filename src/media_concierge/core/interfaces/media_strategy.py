"""Operation strategy interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import ChatMessage, MediaRequest, SessionContext, StrategyResult


class IMediaStrategy(ABC):
    """One operation (download, delete, browse, status) behind a common contract."""

    @abstractmethod
    async def handle_request(
        self,
        message: str,
        history: List[ChatMessage],
        user_id: str,
        context: Optional[SessionContext] = None,
        request: Optional[MediaRequest] = None,
    ) -> StrategyResult:
        """Handle a message, resuming ``context`` when one is given.

        Never raises: every failure ends in an apologetic assistant message.

        Args:
            message: Incoming user message.
            history: Conversation so far, not including ``message``.
            user_id: User the message belongs to.
            context: Pending context to resume, if any.
            request: Classification of a fresh message, if the dispatcher made one.

        Returns:
            Images plus the history with the user message and reply appended.
        """
        pass
