"""Series download strategy."""

from typing import List, Optional

from ...config.models import Config
from ...utils import responses
from ..interfaces import ISessionStore, ISonarrService
from ..models import MediaItem, MutationResult, OperationKind, PartsSpecification, SeriesResult
from ..services.request_parser import RequestParser
from .base import SelectionStrategy


class SeriesDownloadStrategy(SelectionStrategy):
    """Find a series and monitor the requested seasons or episodes in Sonarr.

    Nothing is downloaded until the user has said which parts they want,
    even when the search returns a single show.
    """

    name = "SeriesDownloadStrategy"
    operation_kind = OperationKind.SERIES_DOWNLOAD
    media_kind = "series"
    action = "download"
    uses_parts = True

    def __init__(
        self,
        config: Config,
        session_store: ISessionStore,
        request_parser: RequestParser,
        sonarr_service: ISonarrService,
    ) -> None:
        super().__init__(config, session_store, request_parser)
        self._sonarr_service = sonarr_service

    async def _search(self, query: str) -> List[SeriesResult]:
        return await self._sonarr_service.search_series(query)

    async def _mutate(
        self, item: MediaItem, parts: Optional[PartsSpecification]
    ) -> MutationResult:
        if not isinstance(item, SeriesResult) or parts is None:
            raise TypeError("Series download needs a series and a parts specification")
        return await self._sonarr_service.monitor_and_download_series(item, parts)

    def _success_reply(self, item: MediaItem, parts: Optional[PartsSpecification]) -> str:
        return responses.download_started(item, parts)
