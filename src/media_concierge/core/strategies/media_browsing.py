"""Media browsing strategy."""

from typing import List, Optional

from ...utils import responses
from ...utils.formatting import media_items_to_json
from ..interfaces import ILLMService, IRadarrService, ISonarrService
from ..models import (
    ChatMessage,
    MediaKind,
    MediaRequest,
    SearchIntent,
    SessionContext,
    StrategyResult,
)
from .base import BaseMediaStrategy


class MediaBrowsingStrategy(BaseMediaStrategy):
    """Answer questions about the library or about titles that could be added.

    Stateless: fetched data is handed to the summarizer and never stored.
    """

    name = "MediaBrowsingStrategy"

    def __init__(
        self,
        llm_service: ILLMService,
        radarr_service: IRadarrService,
        sonarr_service: ISonarrService,
    ) -> None:
        self._llm_service = llm_service
        self._radarr_service = radarr_service
        self._sonarr_service = sonarr_service

    async def _execute_request(
        self,
        message: str,
        history: List[ChatMessage],
        user_id: str,
        context: Optional[SessionContext],
        request: Optional[MediaRequest],
    ) -> StrategyResult:
        request = request or MediaRequest.default()
        query = request.search_terms.strip()
        intent = request.search_intent

        data = ""
        if intent in (SearchIntent.LIBRARY, SearchIntent.BOTH):
            data += await self._library_data(request.media_kind, query)

        if intent in (SearchIntent.EXTERNAL, SearchIntent.BOTH):
            if query:
                if intent == SearchIntent.BOTH and data:
                    data += responses.BROWSE_SEPARATOR
                data += await self._external_data(request.media_kind, query)
            else:
                self.logger.warning("External search requested but no search terms extracted")
                data += responses.EXTERNAL_SEARCH_HINT

        try:
            reply = await self._llm_service.generate_response(
                responses.BROWSE_INSTRUCTION.format(data=data), history, message
            )
        except Exception as e:
            self.logger.error(f"Browse summary failed for user {user_id}: {e}")
            return self._reply(history, message, responses.SERVICES_UNAVAILABLE)

        self.logger.info(
            f"Browse response generated for user {user_id} "
            f"(kind={request.media_kind.value}, intent={intent.value})"
        )
        return self._reply(history, message, reply)

    async def _library_data(self, kind: MediaKind, query: str) -> str:
        content = ""
        if kind in (MediaKind.MOVIE, MediaKind.EITHER):
            try:
                movies = await self._radarr_service.get_library_movies(query or None)
                if movies:
                    content += "\n\n**MOVIES IN LIBRARY:**\n" + media_items_to_json(movies)
                    content += f"\n\nTotal movies: {len(movies)}"
                else:
                    content += "\n\n**MOVIES:** No movies found in library"
            except Exception as e:
                self.logger.error(f"Failed to fetch movie library: {e}")
                content += "\n\n**MOVIES:** Unable to read the movie library (service may be unavailable)"

        if kind in (MediaKind.SERIES, MediaKind.EITHER):
            try:
                series = await self._sonarr_service.get_library_series(query or None)
                if series:
                    content += "\n\n**TV SHOWS IN LIBRARY:**\n" + media_items_to_json(series)
                    content += f"\n\nTotal shows: {len(series)}"
                else:
                    content += "\n\n**TV SHOWS:** No TV shows found in library"
            except Exception as e:
                self.logger.error(f"Failed to fetch series library: {e}")
                content += "\n\n**TV SHOWS:** Unable to read the TV library (service may be unavailable)"
        return content

    async def _external_data(self, kind: MediaKind, query: str) -> str:
        content = ""
        if kind in (MediaKind.MOVIE, MediaKind.EITHER):
            try:
                movies = await self._radarr_service.search_movies(query)
                if movies:
                    content += "\n\n**MOVIE SEARCH RESULTS:**\n" + media_items_to_json(movies)
                    content += f"\n\nFound {len(movies)} movies matching \"{query}\""
                else:
                    content += f"\n\n**MOVIE SEARCH:** No movies found for \"{query}\""
            except Exception as e:
                self.logger.error(f"Movie search for '{query}' failed: {e}")
                content += f"\n\n**MOVIES:** Unable to search for \"{query}\" (service may be unavailable)"

        if kind in (MediaKind.SERIES, MediaKind.EITHER):
            try:
                shows = await self._sonarr_service.search_series(query)
                if shows:
                    content += "\n\n**TV SHOW SEARCH RESULTS:**\n" + media_items_to_json(shows)
                    content += f"\n\nFound {len(shows)} shows matching \"{query}\""
                else:
                    content += f"\n\n**TV SHOW SEARCH:** No shows found for \"{query}\""
            except Exception as e:
                self.logger.error(f"Series search for '{query}' failed: {e}")
                content += f"\n\n**TV SHOWS:** Unable to search for \"{query}\" (service may be unavailable)"
        return content
