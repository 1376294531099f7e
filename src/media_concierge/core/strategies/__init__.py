"""Operation strategies, one per kind of user request."""

from .base import BaseMediaStrategy, SelectionStrategy
from .download_status import DownloadStatusStrategy
from .media_browsing import MediaBrowsingStrategy
from .movie_delete import MovieDeleteStrategy
from .movie_download import MovieDownloadStrategy
from .series_delete import SeriesDeleteStrategy
from .series_download import SeriesDownloadStrategy

__all__ = [
    "BaseMediaStrategy",
    "SelectionStrategy",
    "MovieDownloadStrategy",
    "SeriesDownloadStrategy",
    "MovieDeleteStrategy",
    "SeriesDeleteStrategy",
    "MediaBrowsingStrategy",
    "DownloadStatusStrategy",
]
