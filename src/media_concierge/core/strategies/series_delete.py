"""Series delete strategy."""

from typing import List, Optional

from ...config.models import Config
from ...utils import responses
from ..interfaces import ISessionStore, ISonarrService
from ..models import LibrarySeries, MediaItem, MutationResult, OperationKind, PartsSpecification
from ..services.request_parser import RequestParser
from .base import SelectionStrategy


class SeriesDeleteStrategy(SelectionStrategy):
    """Delete a whole show, or selected seasons/episodes, from Sonarr.

    Two pieces are needed before anything is deleted: which show (only when
    the library search matched more than one) and which parts. Either piece
    may arrive first, together, or across turns:

    =====================  ==========================  ===========================
    candidates             pieces known                reply
    =====================  ==========================  ===========================
    1                      parts                       delete
    1                      none                        ask for parts
    many                   show + parts                delete
    many                   show                        ask for parts
    many                   parts                       list shows, ask which one
    many                   none                        list shows, ask for both
    =====================  ==========================  ===========================

    The full candidate list is kept while only the show is known, so a later
    reference still resolves against the list the user saw.
    """

    name = "SeriesDeleteStrategy"
    operation_kind = OperationKind.SERIES_DELETE
    media_kind = "series"
    action = "delete"
    uses_parts = True
    searches_library = True
    narrow_on_reference = False

    def __init__(
        self,
        config: Config,
        session_store: ISessionStore,
        request_parser: RequestParser,
        sonarr_service: ISonarrService,
    ) -> None:
        super().__init__(config, session_store, request_parser)
        self._sonarr_service = sonarr_service

    async def _search(self, query: str) -> List[LibrarySeries]:
        return await self._sonarr_service.get_library_series(query)

    async def _mutate(
        self, item: MediaItem, parts: Optional[PartsSpecification]
    ) -> MutationResult:
        if not isinstance(item, LibrarySeries) or parts is None or not parts.is_ready:
            raise TypeError("Series delete needs a library series and ready parts")
        return await self._sonarr_service.unmonitor_and_delete_series(item, parts)

    def _success_reply(self, item: MediaItem, parts: Optional[PartsSpecification]) -> str:
        return responses.delete_done(item, parts)
