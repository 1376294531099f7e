"""Top-level request dispatcher."""

from typing import Dict, List, Optional

from ...infrastructure.logging import LoggerMixin, user_context
from ..interfaces import IMediaRequestHandler, IMediaStrategy, ILLMService, ISessionStore
from ..models import (
    ChatMessage,
    MediaKind,
    MediaRequest,
    OperationKind,
    SearchIntent,
    StrategyResult,
)
from ..strategies import (
    DownloadStatusStrategy,
    MediaBrowsingStrategy,
    MovieDeleteStrategy,
    MovieDownloadStrategy,
    SeriesDeleteStrategy,
    SeriesDownloadStrategy,
)
from .topic_gate import TopicContinuityGate

STATUS_KEYWORDS = [
    "download status",
    "downloading",
    "current download",
    "any download",
    "what's download",
    "downloads",
    "download progress",
    "active download",
]
DOWNLOAD_KEYWORDS = ["download", "add", "get me", "grab", "fetch"]

ACTION_DOWNLOAD = "download"
ACTION_DELETE = "delete"


def has_keyword(message: str, keywords: List[str]) -> bool:
    """Case-insensitive substring match against a keyword list."""
    lowered = message.lower()
    return any(keyword in lowered for keyword in keywords)


class MediaRequestHandler(IMediaRequestHandler, LoggerMixin):
    """Routes each message to a strategy.

    Order per message: pending context (after the topic gate), then intent
    classification, then keyword routing to status, download, delete or browse.
    """

    def __init__(
        self,
        llm_service: ILLMService,
        session_store: ISessionStore,
        topic_gate: TopicContinuityGate,
        movie_download: MovieDownloadStrategy,
        series_download: SeriesDownloadStrategy,
        movie_delete: MovieDeleteStrategy,
        series_delete: SeriesDeleteStrategy,
        browsing: MediaBrowsingStrategy,
        status: DownloadStatusStrategy,
    ) -> None:
        self._llm_service = llm_service
        self._session_store = session_store
        self._topic_gate = topic_gate
        self._browsing = browsing
        self._status = status
        self._resume_strategies: Dict[OperationKind, IMediaStrategy] = {
            OperationKind.MOVIE_DOWNLOAD: movie_download,
            OperationKind.SERIES_DOWNLOAD: series_download,
            OperationKind.MOVIE_DELETE: movie_delete,
            OperationKind.SERIES_DELETE: series_delete,
        }
        self._action_strategies: Dict[tuple, IMediaStrategy] = {
            (ACTION_DOWNLOAD, MediaKind.MOVIE): movie_download,
            (ACTION_DOWNLOAD, MediaKind.SERIES): series_download,
            (ACTION_DELETE, MediaKind.MOVIE): movie_delete,
            (ACTION_DELETE, MediaKind.SERIES): series_delete,
        }

    async def handle_message(
        self, message: str, user_id: str, history: Optional[List[ChatMessage]] = None
    ) -> StrategyResult:
        with user_context(user_id):
            return await self._route(message, user_id, list(history or []))

    async def _route(
        self, message: str, user_id: str, history: List[ChatMessage]
    ) -> StrategyResult:
        context = await self._session_store.get(user_id)
        if context is not None and await self._topic_gate.should_continue(user_id, message):
            strategy = self._resume_strategies.get(context.operation_kind)
            if strategy is not None:
                self.logger.info(f"Resuming {context.kind_label} for user {user_id}")
                return await strategy.handle_request(message, history, user_id, context=context)

            self.logger.warning(
                f"Unknown context kind {context.operation_kind!r} for user {user_id}, clearing"
            )
            await self._session_store.clear(user_id)

        request = await self._classify(message, user_id)

        if has_keyword(message, STATUS_KEYWORDS):
            self.logger.info(f"Routing user {user_id} to download status")
            return await self._status.handle_request(message, history, user_id, request=request)

        action = self._action_for(message, request)
        if action is None:
            self.logger.info(
                f"Routing user {user_id} to browse ({request.search_intent.value})"
            )
            return await self._browsing.handle_request(message, history, user_id, request=request)

        kind = request.media_kind
        if kind == MediaKind.EITHER:
            kind = await self._disambiguate(message, user_id)

        self.logger.info(f"Routing user {user_id} to {kind.value} {action}")
        strategy = self._action_strategies[(action, kind)]
        return await strategy.handle_request(message, history, user_id, request=request)

    async def _classify(self, message: str, user_id: str) -> MediaRequest:
        try:
            return await self._llm_service.classify_intent(message)
        except Exception as e:
            self.logger.warning(f"Intent classification failed for user {user_id}: {e}")
            return MediaRequest.default()

    async def _disambiguate(self, message: str, user_id: str) -> MediaKind:
        try:
            kind = await self._llm_service.classify_media_kind(message)
        except Exception as e:
            self.logger.warning(
                f"Media kind classification failed for user {user_id}, assuming movie: {e}"
            )
            return MediaKind.MOVIE
        # Only a definite answer is usable for routing
        return kind if kind in (MediaKind.MOVIE, MediaKind.SERIES) else MediaKind.MOVIE

    def _action_for(self, message: str, request: MediaRequest) -> Optional[str]:
        if request.search_intent in (
            SearchIntent.EXTERNAL,
            SearchIntent.BOTH,
        ) and has_keyword(message, DOWNLOAD_KEYWORDS):
            return ACTION_DOWNLOAD
        if request.search_intent == SearchIntent.DELETE:
            return ACTION_DELETE
        return None
