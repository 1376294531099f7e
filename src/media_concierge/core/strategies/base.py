"""Base classes shared by the operation strategies."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import StrategyError, responses
from ...utils.selection import classify_parts, merge_parts, resolve_selection
from ..interfaces import IMediaStrategy, ISessionStore
from ..models import (
    ChatMessage,
    MediaImage,
    MediaItem,
    MediaRequest,
    MutationResult,
    OperationKind,
    PartsSpecification,
    SelectionReference,
    SessionContext,
    StrategyResult,
)
from ..services.request_parser import RequestParser


class BaseMediaStrategy(IMediaStrategy, LoggerMixin, ABC):
    """Strategy base that turns every failure into an assistant reply."""

    name = "BaseMediaStrategy"

    async def handle_request(
        self,
        message: str,
        history: List[ChatMessage],
        user_id: str,
        context: Optional[SessionContext] = None,
        request: Optional[MediaRequest] = None,
    ) -> StrategyResult:
        self.logger.info(
            f"{self.name}: handling request for user {user_id} "
            f"(resuming={context is not None}): {message[:100]!r}"
        )

        try:
            return await self._execute_request(message, history, user_id, context, request)
        except Exception as e:
            self.logger.exception(f"{self.name}: error handling request for user {user_id}: {e}")
            if context is None:
                return self._reply(history, message, responses.GENERIC_ERROR)

            await self._clear_quietly(user_id)
            return self._reply(history, message, responses.PROCESSING_ERROR)

    @abstractmethod
    async def _execute_request(
        self,
        message: str,
        history: List[ChatMessage],
        user_id: str,
        context: Optional[SessionContext],
        request: Optional[MediaRequest],
    ) -> StrategyResult:
        """Strategy-specific handling; may raise."""
        pass

    async def _clear_quietly(self, user_id: str) -> None:
        """Hook for strategies that own a session context."""
        return None

    def _reply(
        self,
        history: List[ChatMessage],
        message: str,
        text: str,
        images: Optional[List[MediaImage]] = None,
    ) -> StrategyResult:
        return StrategyResult(
            images=images or [],
            messages=[*history, ChatMessage.user(message), ChatMessage.assistant(text)],
        )


class SelectionStrategy(BaseMediaStrategy, ABC):
    """Search, let the user pick, then mutate.

    Shared state machine of the download and delete strategies. A fresh
    request parses query, reference and parts from one message; anything still
    missing after the search is stored in a session context and asked for.
    Resuming merges the new message with what the context already holds.
    """

    operation_kind: OperationKind
    media_kind = "movie"
    action = "download"
    uses_parts = False
    searches_library = False
    # Keep only the chosen candidate once a reference is known
    narrow_on_reference = True

    def __init__(
        self, config: Config, session_store: ISessionStore, request_parser: RequestParser
    ) -> None:
        self._config = config
        self._session_store = session_store
        self._request_parser = request_parser
        self._max_results = config.session.max_search_results

    @abstractmethod
    async def _search(self, query: str) -> Sequence[MediaItem]:
        """Find candidates for a query."""
        pass

    @abstractmethod
    async def _mutate(
        self, item: MediaItem, parts: Optional[PartsSpecification]
    ) -> MutationResult:
        """Run the download or delete."""
        pass

    @abstractmethod
    def _success_reply(self, item: MediaItem, parts: Optional[PartsSpecification]) -> str:
        pass

    async def _execute_request(
        self,
        message: str,
        history: List[ChatMessage],
        user_id: str,
        context: Optional[SessionContext],
        request: Optional[MediaRequest],
    ) -> StrategyResult:
        if context is not None:
            return await self._resume(message, history, user_id, context)
        return await self._new_request(message, history, user_id)

    async def _new_request(
        self, message: str, history: List[ChatMessage], user_id: str
    ) -> StrategyResult:
        parsed = await self._request_parser.parse_request(
            message,
            include_parts=self.uses_parts,
            for_series_delete=self.uses_parts and self.action == "delete",
        )
        query = parsed.search_query
        if not query:
            return self._reply(
                history, message, responses.clarify_query(self.media_kind, self.action)
            )

        try:
            results = list(await self._search(query))
        except Exception as e:
            self.logger.error(f"{self.name}: search for '{query}' failed for user {user_id}: {e}")
            return self._reply(
                history, message, responses.search_unavailable(self.media_kind, query)
            )

        self.logger.info(
            f"{self.name}: '{query}' returned {len(results)} results for user {user_id} "
            f"(reference={parsed.reference is not None}, parts={parsed.parts is not None})"
        )
        if not results:
            return self._reply(
                history,
                message,
                responses.no_results(self.media_kind, query, in_library=self.searches_library),
            )

        candidates = results[: self._max_results]
        parts = classify_parts(parsed.parts) if self.uses_parts else None
        reference = parsed.reference

        if len(candidates) == 1:
            item = candidates[0]
            if self._parts_ready(parts):
                return await self._execute(item, parts, message, history, user_id)
            # A single hit still needs an explicit scope
            await self._store(user_id, [item], query, reference=reference)
            return self._reply(history, message, responses.ask_parts(self.action, item))

        if reference is not None:
            item = resolve_selection(reference, candidates)
            if item is None:
                raise StrategyError("Resolver returned nothing for a non-empty list")
            if self._parts_ready(parts):
                return await self._execute(item, parts, message, history, user_id)

            stored = [item] if self.narrow_on_reference else candidates
            await self._store(user_id, stored, query, reference=reference)
            return self._reply(history, message, responses.ask_parts(self.action, item))

        await self._store(
            user_id,
            candidates,
            query,
            parts=parts if parts is not None and parts.is_ready else None,
        )
        return self._reply(
            history,
            message,
            responses.pick_one(
                self.media_kind,
                self.action,
                query,
                candidates,
                parts_known=self._parts_ready(parts),
            ),
        )

    async def _resume(
        self,
        message: str,
        history: List[ChatMessage],
        user_id: str,
        context: SessionContext,
    ) -> StrategyResult:
        candidates = context.candidates
        if not candidates:
            raise StrategyError(f"{context.kind_label} context for user {user_id} is empty")

        need_reference = len(candidates) > 1
        parsed = await self._request_parser.parse_selection(
            message, need_reference=need_reference, need_parts=self.uses_parts
        )

        reference = parsed.reference or context.pending_reference_selection
        parts = None
        if self.uses_parts:
            parts = merge_parts(classify_parts(parsed.parts), context.pending_parts_selection)

        if need_reference and reference is None:
            self.logger.info(f"{self.name}: no selection understood from user {user_id}")
            pending_parts = context.pending_parts_selection
            return self._reply(
                history,
                message,
                responses.pick_one(
                    self.media_kind,
                    self.action,
                    context.query,
                    candidates,
                    parts_known=not self.uses_parts
                    or (pending_parts is not None and pending_parts.is_ready),
                ),
            )

        item = resolve_selection(reference, candidates) if need_reference else candidates[0]
        if item is None:
            raise StrategyError("Resolver returned nothing for a non-empty list")

        if not self._parts_ready(parts):
            self.logger.info(f"{self.name}: still waiting on parts from user {user_id}")
            if need_reference and parsed.reference is not None:
                # The pick is kept so the next turn only has to name the parts
                stored = [item] if self.narrow_on_reference else candidates
                await self._store(
                    user_id,
                    stored,
                    context.query,
                    reference=parsed.reference,
                    parts=context.pending_parts_selection,
                )
            return self._reply(history, message, responses.ask_parts(self.action, item))

        # Cleared before mutating so a completed mutation never leaves a resumable context
        await self._session_store.clear(user_id)
        return await self._execute(item, parts, message, history, user_id)

    async def _execute(
        self,
        item: MediaItem,
        parts: Optional[PartsSpecification],
        message: str,
        history: List[ChatMessage],
        user_id: str,
    ) -> StrategyResult:
        description = parts.describe() if parts is not None else "-"
        self.logger.info(
            f"{self.name}: {self.action} {item.display_name} for user {user_id} ({description})"
        )

        try:
            result = await self._mutate(item, parts)
        except Exception as e:
            self.logger.error(
                f"{self.name}: {self.action} of {item.display_name} failed "
                f"for user {user_id}: {e}"
            )
            return self._reply(
                history, message, responses.mutation_unavailable(item, self.action)
            )

        if not result.success:
            self.logger.warning(
                f"{self.name}: {self.action} of {item.display_name} rejected: {result.error}"
            )
            return self._reply(
                history, message, responses.mutation_failed(item, self.action, result)
            )

        for warning in result.warnings:
            self.logger.warning(f"{self.name}: {warning}")
        return self._reply(
            history, message, self._success_reply(item, parts), images=self._images(item)
        )

    async def _store(
        self,
        user_id: str,
        candidates: Sequence[MediaItem],
        query: str,
        reference: Optional[SelectionReference] = None,
        parts: Optional[PartsSpecification] = None,
    ) -> None:
        context = SessionContext(
            operation_kind=self.operation_kind,
            candidates=list(candidates),
            query=query,
            pending_reference_selection=reference,
            pending_parts_selection=parts,
        )
        await self._session_store.set(user_id, context)

    async def _clear_quietly(self, user_id: str) -> None:
        try:
            await self._session_store.clear(user_id)
        except Exception as e:
            self.logger.warning(f"{self.name}: failed to clear context for user {user_id}: {e}")

    def _parts_ready(self, parts: Optional[PartsSpecification]) -> bool:
        if not self.uses_parts:
            return True
        return parts is not None and parts.is_ready

    def _images(self, item: MediaItem) -> List[MediaImage]:
        for image in getattr(item, "images", []):
            if image.get("coverType") == "poster":
                url = image.get("remoteUrl") or image.get("url")
                if url:
                    return [MediaImage(url=url, title=item.title)]
        return []
