"""Session context store interface."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import SessionContext


class ISessionStore(ABC):
    """Per-user storage of at most one pending operation."""

    @abstractmethod
    async def get(self, user_id: str) -> Optional[SessionContext]:
        """Active, unexpired context for a user, or None."""
        pass

    @abstractmethod
    async def set(self, user_id: str, context: SessionContext) -> None:
        """Store a context, replacing any previous one for the user.

        The store stamps ``created_at`` with its own clock.
        """
        pass

    @abstractmethod
    async def clear(self, user_id: str) -> None:
        """Remove the user's context; clearing a missing context is a no-op."""
        pass

    @abstractmethod
    async def exists(self, user_id: str) -> bool:
        """Whether the user has an active, unexpired context."""
        pass
