"""In-memory session context store."""

import asyncio
import time
from typing import Callable, Dict, Optional

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ..interfaces import ISessionStore
from ..models import SessionContext


class InMemorySessionStore(ISessionStore, LoggerMixin):
    """Process-local store keyed by user id, one context per user.

    Contexts are stamped with the store clock when set. Expired and inactive
    contexts read as absent; expired entries are purged opportunistically on
    writes, at most once per cleanup interval.
    """

    def __init__(self, config: Config, clock: Callable[[], float] = time.time) -> None:
        self._ttl_seconds = config.session.ttl_seconds
        self._cleanup_interval = config.session.cleanup_interval_seconds
        self._clock = clock
        self._contexts: Dict[str, SessionContext] = {}
        self._lock = asyncio.Lock()
        self._last_purge = clock()

    async def get(self, user_id: str) -> Optional[SessionContext]:
        async with self._lock:
            context = self._contexts.get(user_id)
            if context is None:
                return None
            if self._is_expired(context):
                del self._contexts[user_id]
                self.logger.debug(
                    f"Dropped expired {context.kind_label} context for user {user_id}"
                )
                return None
            if not context.is_active:
                return None
            return context

    async def set(self, user_id: str, context: SessionContext) -> None:
        async with self._lock:
            previous = self._contexts.get(user_id)
            if previous is not None and previous.is_active and not self._is_expired(previous):
                self.logger.debug(
                    f"Replacing {previous.kind_label} context for user {user_id} "
                    f"with {context.kind_label}"
                )
            context.created_at = self._clock()
            self._contexts[user_id] = context
            self._maybe_purge()

        self.logger.info(
            f"Stored {context.kind_label} context for user {user_id} "
            f"({len(context.candidates)} candidates)"
        )

    async def clear(self, user_id: str) -> None:
        async with self._lock:
            removed = self._contexts.pop(user_id, None)
        if removed is not None:
            self.logger.debug(f"Cleared {removed.kind_label} context for user {user_id}")

    async def exists(self, user_id: str) -> bool:
        return await self.get(user_id) is not None

    async def purge_expired(self) -> int:
        """Remove every expired context.

        Returns:
            Number of contexts removed.
        """
        async with self._lock:
            return self._purge()

    def _maybe_purge(self) -> None:
        if self._clock() - self._last_purge >= self._cleanup_interval:
            self._purge()

    def _purge(self) -> int:
        expired = [uid for uid, ctx in self._contexts.items() if self._is_expired(ctx)]
        for user_id in expired:
            del self._contexts[user_id]
        self._last_purge = self._clock()
        if expired:
            self.logger.debug(f"Purged {len(expired)} expired contexts")
        return len(expired)

    def _is_expired(self, context: SessionContext) -> bool:
        return context.age_seconds(self._clock()) > self._ttl_seconds

    def __len__(self) -> int:
        return len(self._contexts)
