"""Media-related data models."""

from typing import List, Optional

from pydantic import BaseModel, Field


class MediaItem(BaseModel):
    """Common shape of every candidate shown to a user."""

    title: str = Field(..., description="Title")
    year: Optional[int] = Field(None, description="Release year")
    overview: Optional[str] = Field(None, description="Plot overview")
    genres: List[str] = Field(default_factory=list, description="Genres")

    @property
    def external_id(self) -> Optional[int]:
        """Stable id used by the media manager for this item."""
        return None

    @property
    def display_name(self) -> str:
        """Title with year, as shown in numbered lists."""
        if self.year:
            return f"{self.title} ({self.year})"
        return self.title


class MovieResult(MediaItem):
    """Movie returned by an external lookup."""

    tmdb_id: int = Field(..., description="TMDb ID")
    imdb_id: Optional[str] = Field(None, description="IMDb ID")
    title_slug: Optional[str] = Field(None, description="Radarr title slug")
    runtime: Optional[int] = Field(None, description="Runtime in minutes")
    rating: Optional[float] = Field(None, description="Average rating")
    images: List[dict] = Field(default_factory=list, description="Raw image descriptors")

    @property
    def external_id(self) -> Optional[int]:
        return self.tmdb_id


class LibraryMovie(MovieResult):
    """Movie already present in the Radarr library."""

    id: int = Field(..., description="Radarr movie ID")
    monitored: bool = Field(default=True, description="Whether Radarr monitors the movie")
    has_file: bool = Field(default=False, description="Whether a file is on disk")
    path: Optional[str] = Field(None, description="Library path")
    size_on_disk: int = Field(default=0, description="Bytes on disk")


class SeasonInfo(BaseModel):
    """Season summary as reported by Sonarr."""

    season_number: int = Field(..., description="Season number")
    monitored: bool = Field(default=False, description="Whether the season is monitored")
    episode_count: Optional[int] = Field(None, description="Episodes in season")
    episode_file_count: Optional[int] = Field(None, description="Episodes with files")


class SeriesResult(MediaItem):
    """Series returned by an external lookup."""

    tvdb_id: int = Field(..., description="TVDB ID")
    tmdb_id: Optional[int] = Field(None, description="TMDb ID")
    imdb_id: Optional[str] = Field(None, description="IMDb ID")
    title_slug: Optional[str] = Field(None, description="Sonarr title slug")
    status: Optional[str] = Field(None, description="continuing, ended, ...")
    network: Optional[str] = Field(None, description="Network")
    ended: bool = Field(default=False, description="Whether the series has ended")
    rating: Optional[float] = Field(None, description="Average rating")
    seasons: List[SeasonInfo] = Field(default_factory=list, description="Seasons")
    images: List[dict] = Field(default_factory=list, description="Raw image descriptors")

    @property
    def external_id(self) -> Optional[int]:
        return self.tvdb_id


class LibrarySeries(SeriesResult):
    """Series already present in the Sonarr library."""

    id: int = Field(..., description="Sonarr series ID")
    monitored: bool = Field(default=True, description="Whether Sonarr monitors the series")
    path: Optional[str] = Field(None, description="Library path")
    episode_file_count: int = Field(default=0, description="Episodes with files")
    size_on_disk: int = Field(default=0, description="Bytes on disk")


class DownloadingMovie(BaseModel):
    """Movie currently in the Radarr download queue."""

    id: int = Field(..., description="Queue item ID")
    movie_id: Optional[int] = Field(None, description="Radarr movie ID")
    movie_title: str = Field(..., description="Movie title")
    movie_year: Optional[int] = Field(None, description="Movie year")
    size: float = Field(default=0, description="Total size in bytes")
    size_left: float = Field(default=0, description="Bytes remaining")
    status: str = Field(default="unknown", description="Queue status")
    estimated_completion_time: Optional[str] = Field(None, description="ISO timestamp")

    @property
    def progress_percent(self) -> float:
        """Download progress as a percentage."""
        if not self.size:
            return 0.0
        return round((self.size - self.size_left) / self.size * 100, 1)


class DownloadingEpisode(BaseModel):
    """Episode currently in the Sonarr download queue."""

    id: int = Field(..., description="Queue item ID")
    series_title: str = Field(..., description="Series title")
    season_number: Optional[int] = Field(None, description="Season number")
    episode_number: Optional[int] = Field(None, description="Episode number")
    episode_title: Optional[str] = Field(None, description="Episode title")
    size: float = Field(default=0, description="Total size in bytes")
    size_left: float = Field(default=0, description="Bytes remaining")
    status: str = Field(default="unknown", description="Queue status")
    timeleft: Optional[str] = Field(None, description="Remaining time reported by Sonarr")
    estimated_completion_time: Optional[str] = Field(None, description="ISO timestamp")

    @property
    def progress_percent(self) -> float:
        """Download progress as a percentage."""
        if not self.size:
            return 0.0
        return round((self.size - self.size_left) / self.size * 100, 1)


class MutationResult(BaseModel):
    """Outcome of a download or delete request against a media manager."""

    success: bool = Field(..., description="Whether the mutation succeeded")
    message: str = Field(default="", description="Human readable summary")
    error: Optional[str] = Field(None, description="Error detail when unsuccessful")
    added: bool = Field(default=False, description="Item was newly added to the library")
    search_triggered: bool = Field(default=False, description="A download search was started")
    deleted: bool = Field(default=False, description="Item was removed from the library")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal warnings")
