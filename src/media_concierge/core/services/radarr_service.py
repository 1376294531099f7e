"""Radarr service implementation."""

import re
from typing import Any, Dict, List, Optional

import httpx

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import RadarrServiceError
from ..interfaces import IRadarrService
from ..models import DownloadingMovie, LibraryMovie, MovieResult, MutationResult

QUEUE_ACTIVE_STATUSES = {"downloading", "queued", "paused", "delay"}
QUEUE_PAGE_SIZE = 100


class RadarrService(IRadarrService, LoggerMixin):
    """Radarr service implementation."""

    def __init__(self, config: Config) -> None:
        """Initialize Radarr service.

        Args:
            config: Application configuration.
        """
        self._config = config
        self._radarr_config = config.radarr
        self._client: Optional[httpx.AsyncClient] = None

    async def search_movies(self, query: str) -> List[MovieResult]:
        """Look up movies by title.

        Args:
            query: Search term.

        Returns:
            Movies in the order Radarr ranks them.

        Raises:
            RadarrServiceError: If request fails.
        """
        self._ensure_enabled()

        try:
            results = await self._get_json("/api/v3/movie/lookup", params={"term": query})
        except Exception as e:
            error_msg = f"Failed to search Radarr for '{query}': {e}"
            self.logger.error(error_msg)
            raise RadarrServiceError(error_msg) from e

        movies = [self._parse_movie(item) for item in results if item.get("tmdbId")]
        self.logger.debug(f"Radarr lookup '{query}' returned {len(movies)} movies")
        return movies

    async def get_library_movies(self, query: Optional[str] = None) -> List[LibraryMovie]:
        """List library movies, optionally filtered by a case-insensitive title match.

        Raises:
            RadarrServiceError: If request fails.
        """
        self._ensure_enabled()

        try:
            results = await self._get_json("/api/v3/movie")
        except Exception as e:
            error_msg = f"Failed to get Radarr library: {e}"
            self.logger.error(error_msg)
            raise RadarrServiceError(error_msg) from e

        movies = [self._parse_library_movie(item) for item in results]
        if query:
            needle = query.lower().strip()
            movies = [m for m in movies if needle in m.title.lower()]
        return movies

    async def monitor_and_download_movie(self, movie: MovieResult) -> MutationResult:
        """Add a movie with search enabled, or re-monitor and search an existing one.

        Raises:
            RadarrServiceError: If request fails.
        """
        self._ensure_enabled()

        try:
            existing = await self._find_by_tmdb_id(movie.tmdb_id)
            if existing is not None:
                if existing.get("hasFile"):
                    return MutationResult(
                        success=False,
                        error=f"{movie.title} is already in your library",
                    )
                if not existing.get("monitored"):
                    existing["monitored"] = True
                    await self._request("PUT", f"/api/v3/movie/{existing['id']}", json=existing)
                await self._trigger_search(existing["id"])
                self.logger.info(f"Re-triggered search for {movie.title} ({movie.year})")
                return MutationResult(
                    success=True,
                    message=f"Search started for {movie.title}",
                    search_triggered=True,
                )

            await self._request("POST", "/api/v3/movie", json=self._build_add_payload(movie))
            self.logger.info(f"Added movie to Radarr: {movie.title} ({movie.year})")
            return MutationResult(
                success=True,
                message=f"Added {movie.title}",
                added=True,
                search_triggered=True,
            )

        except httpx.HTTPStatusError as e:
            # Radarr reports validation problems (e.g. bad root folder) as 400
            if e.response.status_code == 400:
                self.logger.error(f"Radarr rejected {movie.title}: {e.response.text}")
                return MutationResult(success=False, error=e.response.text)
            error_msg = f"Failed to add movie to Radarr: {e}"
            self.logger.error(error_msg)
            raise RadarrServiceError(error_msg) from e
        except Exception as e:
            error_msg = f"Failed to add movie to Radarr: {e}"
            self.logger.error(error_msg)
            raise RadarrServiceError(error_msg) from e

    async def unmonitor_and_delete_movie(self, movie: LibraryMovie) -> MutationResult:
        """Cancel queued downloads, then remove the movie and its files.

        Raises:
            RadarrServiceError: If request fails.
        """
        self._ensure_enabled()

        warnings: List[str] = []
        try:
            for queue_id in await self._queue_ids_for_movie(movie.id):
                try:
                    await self._request(
                        "DELETE",
                        f"/api/v3/queue/{queue_id}",
                        params={"removeFromClient": "true", "blocklist": "false"},
                    )
                except httpx.HTTPError as e:
                    warnings.append(f"Could not cancel download {queue_id}: {e}")
                    self.logger.warning(warnings[-1])

            await self._request(
                "DELETE",
                f"/api/v3/movie/{movie.id}",
                params={"deleteFiles": "true", "addImportExclusion": "false"},
            )
        except Exception as e:
            error_msg = f"Failed to remove movie from Radarr: {e}"
            self.logger.error(error_msg)
            raise RadarrServiceError(error_msg) from e

        self.logger.info(f"Deleted movie from Radarr: {movie.title} ({movie.year})")
        return MutationResult(
            success=True, message=f"Deleted {movie.title}", deleted=True, warnings=warnings
        )

    async def get_downloading_movies(self) -> List[DownloadingMovie]:
        """Movies in the queue that are still transferring.

        Raises:
            RadarrServiceError: If request fails.
        """
        self._ensure_enabled()

        try:
            page = await self._get_json(
                "/api/v3/queue", params={"includeMovie": "true", "pageSize": QUEUE_PAGE_SIZE}
            )
        except Exception as e:
            error_msg = f"Failed to get Radarr queue: {e}"
            self.logger.error(error_msg)
            raise RadarrServiceError(error_msg) from e

        records = page.get("records", []) if isinstance(page, dict) else page
        downloads = []
        for record in records:
            status = str(record.get("status", "")).lower()
            if status not in QUEUE_ACTIVE_STATUSES:
                continue
            movie = record.get("movie") or {}
            downloads.append(
                DownloadingMovie(
                    id=record["id"],
                    movie_id=record.get("movieId"),
                    movie_title=movie.get("title") or record.get("title") or "Unknown",
                    movie_year=movie.get("year"),
                    size=record.get("size") or 0,
                    size_left=record.get("sizeleft") or 0,
                    status=status,
                    estimated_completion_time=record.get("estimatedCompletionTime"),
                )
            )
        return downloads

    async def get_system_status(self) -> Dict[str, Any]:
        """Get Radarr system status.

        Raises:
            RadarrServiceError: If request fails.
        """
        if not self._radarr_config.enabled:
            return {"enabled": False}

        try:
            result = await self._get_json("/api/v3/system/status")
        except Exception as e:
            error_msg = f"Failed to get Radarr system status: {e}"
            self.logger.error(error_msg)
            raise RadarrServiceError(error_msg) from e

        if not isinstance(result, dict):
            return {"error": "Invalid response format"}
        return result

    def is_available(self) -> bool:
        return self._radarr_config.enabled and bool(self._radarr_config.api_key)

    async def _find_by_tmdb_id(self, tmdb_id: int) -> Optional[Dict[str, Any]]:
        movies = await self._get_json("/api/v3/movie", params={"tmdbId": tmdb_id})
        for movie in movies:
            if movie.get("tmdbId") == tmdb_id:
                return movie
        return None

    async def _queue_ids_for_movie(self, movie_id: int) -> List[int]:
        page = await self._get_json(
            "/api/v3/queue", params={"movieIds": movie_id, "pageSize": QUEUE_PAGE_SIZE}
        )
        records = page.get("records", []) if isinstance(page, dict) else page
        return [r["id"] for r in records if r.get("movieId") == movie_id]

    async def _trigger_search(self, movie_id: int) -> None:
        await self._request(
            "POST", "/api/v3/command", json={"name": "MoviesSearch", "movieIds": [movie_id]}
        )

    def _build_add_payload(self, movie: MovieResult) -> Dict[str, Any]:
        profile = self._radarr_config.default_profile
        payload: Dict[str, Any] = {
            "title": movie.title,
            "year": movie.year,
            "tmdbId": movie.tmdb_id,
            "titleSlug": movie.title_slug or self._generate_title_slug(movie.title, movie.year),
            "images": movie.images,
            "rootFolderPath": profile.root_folder_path,
            "qualityProfileId": profile.quality_profile_id,
            "minimumAvailability": profile.minimum_availability,
            "tags": profile.tags,
            "monitored": True,
            "addOptions": {"searchForMovie": True, "monitor": "movieOnly"},
        }
        if movie.imdb_id:
            payload["imdbId"] = movie.imdb_id
        return payload

    def _parse_movie(self, data: Dict[str, Any]) -> MovieResult:
        return MovieResult(**self._movie_fields(data))

    def _parse_library_movie(self, data: Dict[str, Any]) -> LibraryMovie:
        return LibraryMovie(
            **self._movie_fields(data),
            id=data["id"],
            monitored=data.get("monitored", True),
            has_file=data.get("hasFile", False),
            path=data.get("path"),
            size_on_disk=data.get("sizeOnDisk") or 0,
        )

    def _movie_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        ratings = data.get("ratings") or {}
        rating = (ratings.get("tmdb") or ratings.get("imdb") or {}).get("value")
        return {
            "title": data.get("title", ""),
            "year": data.get("year") or None,
            "overview": data.get("overview"),
            "genres": data.get("genres") or [],
            "tmdb_id": data["tmdbId"],
            "imdb_id": data.get("imdbId"),
            "title_slug": data.get("titleSlug"),
            "runtime": data.get("runtime"),
            "rating": rating,
            "images": data.get("images") or [],
        }

    def _generate_title_slug(self, title: str, year: Optional[int]) -> str:
        slug = re.sub(r"[^\w\s-]", "", title.lower())
        slug = re.sub(r"\s+", "-", slug)
        slug = re.sub(r"-+", "-", slug).strip("-")
        if year:
            slug = f"{slug}-{year}"
        return slug

    def _ensure_enabled(self) -> None:
        if not self._radarr_config.enabled:
            raise RadarrServiceError("Radarr is not enabled")

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._request("GET", path, params=params)
        return response.json()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> httpx.Response:
        url = f"{self._radarr_config.url}{path}"
        headers = {"X-Api-Key": self._radarr_config.api_key}
        response = await self._get_client().request(
            method, url, headers=headers, params=params, json=json
        )
        response.raise_for_status()
        return response

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._radarr_config.timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "RadarrService":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
