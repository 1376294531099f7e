"""Sonarr service interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models import (
    DownloadingEpisode,
    LibrarySeries,
    MutationResult,
    PartsSpecification,
    SeriesResult,
)


class ISonarrService(ABC):
    """Interface for the series manager."""

    @abstractmethod
    async def search_series(self, query: str) -> List[SeriesResult]:
        """Look up series outside the library.

        Raises:
            SonarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    async def get_library_series(self, query: Optional[str] = None) -> List[LibrarySeries]:
        """List library series, optionally filtered by title.

        Raises:
            SonarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    async def monitor_and_download_series(
        self, series: SeriesResult, parts: PartsSpecification
    ) -> MutationResult:
        """Monitor the requested parts of a series and start searching for them.

        Args:
            series: Series to download.
            parts: Ready parts specification (entire series or partial).

        Raises:
            SonarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    async def unmonitor_and_delete_series(
        self, series: LibrarySeries, parts: PartsSpecification
    ) -> MutationResult:
        """Delete the requested parts of a series.

        An entire-series specification removes the show; a partial one only
        unmonitors the selected episodes and deletes their files.

        Raises:
            SonarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    async def get_downloading_episodes(self) -> List[DownloadingEpisode]:
        """Episodes currently in the download queue.

        Raises:
            SonarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    async def get_system_status(self) -> Dict[str, Any]:
        """Get Sonarr system status.

        Raises:
            SonarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if Sonarr service is configured and enabled."""
        pass
