"""Movie delete strategy."""

from typing import List, Optional

from ...config.models import Config
from ...utils import responses
from ..interfaces import IRadarrService, ISessionStore
from ..models import LibraryMovie, MediaItem, MutationResult, OperationKind, PartsSpecification
from ..services.request_parser import RequestParser
from .base import SelectionStrategy


class MovieDeleteStrategy(SelectionStrategy):
    """Remove a movie from the Radarr library, files included."""

    name = "MovieDeleteStrategy"
    operation_kind = OperationKind.MOVIE_DELETE
    media_kind = "movie"
    action = "delete"
    searches_library = True

    def __init__(
        self,
        config: Config,
        session_store: ISessionStore,
        request_parser: RequestParser,
        radarr_service: IRadarrService,
    ) -> None:
        super().__init__(config, session_store, request_parser)
        self._radarr_service = radarr_service

    async def _search(self, query: str) -> List[LibraryMovie]:
        return await self._radarr_service.get_library_movies(query)

    async def _mutate(
        self, item: MediaItem, parts: Optional[PartsSpecification]
    ) -> MutationResult:
        if not isinstance(item, LibraryMovie):
            raise TypeError(f"Expected a library movie, got {type(item).__name__}")
        return await self._radarr_service.unmonitor_and_delete_movie(item)

    def _success_reply(self, item: MediaItem, parts: Optional[PartsSpecification]) -> str:
        return responses.delete_done(item)
