"""Download status strategy."""

import asyncio
import json
import re
from typing import List, Optional

from ...utils import responses
from ...utils.formatting import downloads_snapshot
from ..interfaces import ILLMService, IRadarrService, ISonarrService
from ..models import (
    ChatMessage,
    DownloadingEpisode,
    DownloadingMovie,
    MediaRequest,
    SessionContext,
    StrategyResult,
)
from .base import BaseMediaStrategy

SUSPICIOUS_TITLE_PATTERNS = [
    re.compile(r'"([^"]+)"'),
    re.compile(r"(\w+\s+\w+(?:\s+\w+)*)\s+(?:at\s+)?[\d.]+%"),
]


def find_suspicious_titles(reply: str, valid_titles: List[str]) -> List[str]:
    """Titles quoted or shown with a percentage that match no active download."""
    content = reply.lower()
    valid = [title.lower() for title in valid_titles]
    suspicious = []
    for pattern in SUSPICIOUS_TITLE_PATTERNS:
        for match in pattern.finditer(content):
            candidate = match.group(1).strip()
            if len(candidate) <= 3:
                continue
            if not any(candidate in title or title in candidate for title in valid):
                suspicious.append(candidate)
    return suspicious


class DownloadStatusStrategy(BaseMediaStrategy):
    """Summarize what Radarr and Sonarr are downloading right now."""

    name = "DownloadStatusStrategy"

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
        try:
            movies, episodes = await asyncio.gather(
                self._movie_downloads(), self._episode_downloads()
            )
        except Exception as e:
            self.logger.error(f"Failed to get download status for user {user_id}: {e}")
            return self._reply(history, message, responses.SERVICES_UNAVAILABLE)

        self.logger.info(
            f"Download status for user {user_id}: "
            f"{len(movies)} movies, {len(episodes)} episodes"
        )

        if not movies and not episodes:
            # No snapshot at all, so the summarizer has nothing to embellish
            instructions = responses.NOTHING_DOWNLOADING_INSTRUCTION
        else:
            instructions = responses.STATUS_SNAPSHOT_INSTRUCTION.format(
                movie_count=len(movies),
                episode_count=len(episodes),
                snapshot=json.dumps(downloads_snapshot(movies, episodes), separators=(",", ":")),
            )

        try:
            reply = await self._llm_service.generate_response(instructions, history, message)
        except Exception as e:
            self.logger.error(f"Download status summary failed for user {user_id}: {e}")
            return self._reply(history, message, responses.SERVICES_UNAVAILABLE)

        if movies or episodes:
            valid_titles = [m.movie_title for m in movies] + [e.series_title for e in episodes]
            suspicious = find_suspicious_titles(reply, valid_titles)
            if suspicious:
                self.logger.warning(
                    f"Potential hallucination in download status for user {user_id}: "
                    f"{suspicious} not in {valid_titles}"
                )

        return self._reply(history, message, reply)

    async def _movie_downloads(self) -> List[DownloadingMovie]:
        if not self._radarr_service.is_available():
            return []
        return await self._radarr_service.get_downloading_movies()

    async def _episode_downloads(self) -> List[DownloadingEpisode]:
        if not self._sonarr_service.is_available():
            return []
        return await self._sonarr_service.get_downloading_episodes()
