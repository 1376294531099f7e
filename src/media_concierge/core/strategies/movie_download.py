"""Movie download strategy."""

from typing import List, Optional

from ...config.models import Config
from ...utils import responses
from ..interfaces import IRadarrService, ISessionStore
from ..models import MediaItem, MovieResult, MutationResult, OperationKind, PartsSpecification
from ..services.request_parser import RequestParser
from .base import SelectionStrategy


class MovieDownloadStrategy(SelectionStrategy):
    """Find a movie outside the library and add it to Radarr.

    A single search hit is downloaded straight away; several hits are listed
    unless the message already said which one.
    """

    name = "MovieDownloadStrategy"
    operation_kind = OperationKind.MOVIE_DOWNLOAD
    media_kind = "movie"
    action = "download"

    def __init__(
        self,
        config: Config,
        session_store: ISessionStore,
        request_parser: RequestParser,
        radarr_service: IRadarrService,
    ) -> None:
        super().__init__(config, session_store, request_parser)
        self._radarr_service = radarr_service

    async def _search(self, query: str) -> List[MovieResult]:
        return await self._radarr_service.search_movies(query)

    async def _mutate(
        self, item: MediaItem, parts: Optional[PartsSpecification]
    ) -> MutationResult:
        if not isinstance(item, MovieResult):
            raise TypeError(f"Expected a movie, got {type(item).__name__}")
        return await self._radarr_service.monitor_and_download_movie(item)

    def _success_reply(self, item: MediaItem, parts: Optional[PartsSpecification]) -> str:
        return responses.download_started(item)
