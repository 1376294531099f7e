"""Radarr service interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models import DownloadingMovie, LibraryMovie, MovieResult, MutationResult


class IRadarrService(ABC):
    """Interface for the movie manager."""

    @abstractmethod
    async def search_movies(self, query: str) -> List[MovieResult]:
        """Look up movies outside the library.

        Raises:
            RadarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    async def get_library_movies(self, query: Optional[str] = None) -> List[LibraryMovie]:
        """List library movies, optionally filtered by title.

        Raises:
            RadarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    async def monitor_and_download_movie(self, movie: MovieResult) -> MutationResult:
        """Add (or re-monitor) a movie and start a search for it.

        Raises:
            RadarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    async def unmonitor_and_delete_movie(self, movie: LibraryMovie) -> MutationResult:
        """Remove a movie from the library and delete its files.

        Raises:
            RadarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    async def get_downloading_movies(self) -> List[DownloadingMovie]:
        """Movies currently in the download queue.

        Raises:
            RadarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    async def get_system_status(self) -> Dict[str, Any]:
        """Get Radarr system status.

        Raises:
            RadarrServiceError: If request fails.
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if Radarr service is configured and enabled."""
        pass
