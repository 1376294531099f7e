"""Topic-continuity gate."""

from ...infrastructure.logging import LoggerMixin
from ..interfaces import ILLMService, ISessionStore


class TopicContinuityGate(LoggerMixin):
    """Decides whether a message continues the user's pending operation."""

    def __init__(self, llm_service: ILLMService, session_store: ISessionStore) -> None:
        self._llm_service = llm_service
        self._session_store = session_store

    async def should_continue(self, user_id: str, message: str) -> bool:
        """Keep or discard the user's context for this message.

        Without a context this returns True without asking the model. A
        detected switch clears the context; a failed check keeps it.
        """
        if not await self._session_store.exists(user_id):
            return True

        try:
            answer = await self._llm_service.detect_topic_continuity(message)
        except Exception as e:
            self.logger.warning(
                f"Topic continuity check failed for user {user_id}, assuming continuation: {e}"
            )
            return True

        if answer.strip().upper() == "SWITCH":
            self.logger.info(f"Topic switch detected for user {user_id}, clearing context")
            await self._session_store.clear(user_id)
            return False

        return True
