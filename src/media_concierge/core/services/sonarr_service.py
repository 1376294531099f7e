"""Sonarr service implementation."""

from typing import Any, Dict, List, Optional

import aiohttp

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import SonarrServiceError
from ..interfaces import ISonarrService
from ..models import (
    DownloadingEpisode,
    LibrarySeries,
    MutationResult,
    PartsSpecification,
    SeasonInfo,
    SeriesResult,
)

QUEUE_ACTIVE_STATUSES = {"downloading", "queued", "paused", "delay"}
QUEUE_PAGE_SIZE = 100


class SonarrService(ISonarrService, LoggerMixin):
    """Sonarr service implementation."""

    def __init__(self, config: Config):
        """Initialize Sonarr service.

        Args:
            config: Application configuration.
        """
        self._config = config
        self._sonarr_config = config.sonarr
        self._session: Optional[aiohttp.ClientSession] = None

    async def search_series(self, query: str) -> List[SeriesResult]:
        self._ensure_enabled()

        try:
            results = await self._request("GET", "/api/v3/series/lookup", params={"term": query})
        except Exception as e:
            error_msg = f"Failed to search Sonarr for '{query}': {e}"
            self.logger.error(error_msg)
            raise SonarrServiceError(error_msg) from e

        series = [self._parse_series(item) for item in results if item.get("tvdbId")]
        self.logger.debug(f"Sonarr lookup '{query}' returned {len(series)} series")
        return series

    async def get_library_series(self, query: Optional[str] = None) -> List[LibrarySeries]:
        self._ensure_enabled()

        try:
            results = await self._request("GET", "/api/v3/series")
        except Exception as e:
            error_msg = f"Failed to get Sonarr library: {e}"
            self.logger.error(error_msg)
            raise SonarrServiceError(error_msg) from e

        series = [self._parse_library_series(item) for item in results]
        if query:
            needle = query.lower().strip()
            series = [s for s in series if needle in s.title.lower()]
        return series

    async def monitor_and_download_series(
        self, series: SeriesResult, parts: PartsSpecification
    ) -> MutationResult:
        """Monitor the requested parts of a series and start searching.

        Series missing from the library are added first, monitoring everything
        for an entire-series request and nothing for a partial one.

        Raises:
            SonarrServiceError: If request fails.
        """
        self._ensure_enabled()
        if not parts.is_ready:
            return MutationResult(success=False, error="No seasons or episodes were specified")

        try:
            existing = await self._find_by_tvdb_id(series.tvdb_id)
            added = existing is None
            if existing is None:
                existing = await self._request(
                    "POST", "/api/v3/series", json=self._build_add_payload(series, parts)
                )
                self.logger.info(f"Added series to Sonarr: {series.title} ({series.year})")

            if parts.is_entire_series:
                if not added:
                    existing["monitored"] = True
                    for season in existing.get("seasons", []):
                        season["monitored"] = season.get("seasonNumber", 0) > 0
                    await self._request("PUT", f"/api/v3/series/{existing['id']}", json=existing)
                    await self._command({"name": "SeriesSearch", "seriesId": existing["id"]})
                return MutationResult(
                    success=True,
                    message=f"Monitoring all of {series.title}",
                    added=added,
                    search_triggered=True,
                )

            return await self._download_partial(existing, series, parts, added)

        except SonarrServiceError:
            raise
        except Exception as e:
            error_msg = f"Failed to download series from Sonarr: {e}"
            self.logger.error(error_msg)
            raise SonarrServiceError(error_msg) from e

    async def _download_partial(
        self,
        existing: Dict[str, Any],
        series: SeriesResult,
        parts: PartsSpecification,
        added: bool,
    ) -> MutationResult:
        series_id = existing["id"]
        whole_seasons = [s.season for s in parts.selectors if not s.episodes]

        existing["monitored"] = True
        for season in existing.get("seasons", []):
            if season.get("seasonNumber") in whole_seasons:
                season["monitored"] = True
        await self._request("PUT", f"/api/v3/series/{series_id}", json=existing)

        episodes = await self._request("GET", "/api/v3/episode", params={"seriesId": series_id})
        selected = self._matching_episodes(episodes, parts)
        if not selected:
            return MutationResult(
                success=False,
                error=f"No episodes of {series.title} match {parts.describe()}",
                added=added,
            )

        await self._request(
            "PUT",
            "/api/v3/episode/monitor",
            json={"episodeIds": [e["id"] for e in selected], "monitored": True},
        )

        for season_number in whole_seasons:
            await self._command(
                {"name": "SeasonSearch", "seriesId": series_id, "seasonNumber": season_number}
            )
        episode_ids = [
            e["id"] for e in selected if e.get("seasonNumber") not in whole_seasons
        ]
        if episode_ids:
            await self._command({"name": "EpisodeSearch", "episodeIds": episode_ids})

        self.logger.info(
            f"Monitoring {len(selected)} episodes of {series.title} ({parts.describe()})"
        )
        return MutationResult(
            success=True,
            message=f"Monitoring {parts.describe()} of {series.title}",
            added=added,
            search_triggered=True,
        )

    async def unmonitor_and_delete_series(
        self, series: LibrarySeries, parts: PartsSpecification
    ) -> MutationResult:
        """Delete a series, or only the files of the selected episodes.

        Raises:
            SonarrServiceError: If request fails.
        """
        self._ensure_enabled()
        if not parts.is_ready:
            return MutationResult(success=False, error="No seasons or episodes were specified")

        try:
            if parts.is_entire_series:
                await self._request(
                    "DELETE",
                    f"/api/v3/series/{series.id}",
                    params={"deleteFiles": "true", "addImportListExclusion": "false"},
                )
                self.logger.info(f"Deleted series from Sonarr: {series.title}")
                return MutationResult(success=True, message=f"Deleted {series.title}", deleted=True)

            episodes = await self._request(
                "GET", "/api/v3/episode", params={"seriesId": series.id}
            )
            selected = self._matching_episodes(episodes, parts)
            if not selected:
                return MutationResult(
                    success=False,
                    error=f"No episodes of {series.title} match {parts.describe()}",
                )

            await self._request(
                "PUT",
                "/api/v3/episode/monitor",
                json={"episodeIds": [e["id"] for e in selected], "monitored": False},
            )

            file_ids = [e["episodeFileId"] for e in selected if e.get("episodeFileId")]
            if file_ids:
                await self._request(
                    "DELETE", "/api/v3/episodefile/bulk", json={"episodeFileIds": file_ids}
                )

            whole_seasons = [s.season for s in parts.selectors if not s.episodes]
            if whole_seasons:
                record = await self._request("GET", f"/api/v3/series/{series.id}")
                for season in record.get("seasons", []):
                    if season.get("seasonNumber") in whole_seasons:
                        season["monitored"] = False
                await self._request("PUT", f"/api/v3/series/{series.id}", json=record)

        except Exception as e:
            error_msg = f"Failed to delete series parts from Sonarr: {e}"
            self.logger.error(error_msg)
            raise SonarrServiceError(error_msg) from e

        self.logger.info(
            f"Unmonitored {len(selected)} episodes of {series.title}, "
            f"deleted {len(file_ids)} files"
        )
        return MutationResult(
            success=True,
            message=f"Deleted {parts.describe()} of {series.title}",
            deleted=True,
        )

    async def get_downloading_episodes(self) -> List[DownloadingEpisode]:
        self._ensure_enabled()

        try:
            page = await self._request(
                "GET",
                "/api/v3/queue",
                params={
                    "includeSeries": "true",
                    "includeEpisode": "true",
                    "pageSize": QUEUE_PAGE_SIZE,
                },
            )
        except Exception as e:
            error_msg = f"Failed to get Sonarr queue: {e}"
            self.logger.error(error_msg)
            raise SonarrServiceError(error_msg) from e

        records = page.get("records", []) if isinstance(page, dict) else page
        downloads = []
        for record in records:
            status = str(record.get("status", "")).lower()
            if status not in QUEUE_ACTIVE_STATUSES:
                continue
            series = record.get("series") or {}
            episode = record.get("episode") or {}
            downloads.append(
                DownloadingEpisode(
                    id=record["id"],
                    series_title=series.get("title") or record.get("title") or "Unknown",
                    season_number=episode.get("seasonNumber", record.get("seasonNumber")),
                    episode_number=episode.get("episodeNumber"),
                    episode_title=episode.get("title"),
                    size=record.get("size") or 0,
                    size_left=record.get("sizeleft") or 0,
                    status=status,
                    timeleft=record.get("timeleft"),
                    estimated_completion_time=record.get("estimatedCompletionTime"),
                )
            )
        return downloads

    async def get_system_status(self) -> Dict[str, Any]:
        if not self._sonarr_config.enabled:
            return {"enabled": False}

        try:
            result = await self._request("GET", "/api/v3/system/status")
        except Exception as e:
            error_msg = f"Failed to get Sonarr system status: {e}"
            self.logger.error(error_msg)
            raise SonarrServiceError(error_msg) from e

        if not isinstance(result, dict):
            return {"error": "Invalid response format"}
        return result

    def is_available(self) -> bool:
        return self._sonarr_config.enabled and bool(self._sonarr_config.api_key)

    def _matching_episodes(
        self, episodes: List[Dict[str, Any]], parts: PartsSpecification
    ) -> List[Dict[str, Any]]:
        """Episodes covered by a partial specification, in Sonarr's order."""
        matched = []
        for episode in episodes:
            season_number = episode.get("seasonNumber")
            episode_number = episode.get("episodeNumber")
            for selector in parts.selectors:
                if selector.season != season_number:
                    continue
                if not selector.episodes or episode_number in selector.episodes:
                    matched.append(episode)
                    break
        return matched

    async def _find_by_tvdb_id(self, tvdb_id: int) -> Optional[Dict[str, Any]]:
        results = await self._request("GET", "/api/v3/series", params={"tvdbId": tvdb_id})
        for item in results:
            if item.get("tvdbId") == tvdb_id:
                return item
        return None

    async def _command(self, body: Dict[str, Any]) -> None:
        await self._request("POST", "/api/v3/command", json=body)

    def _build_add_payload(self, series: SeriesResult, parts: PartsSpecification) -> Dict[str, Any]:
        profile = self._sonarr_config.default_profile
        entire = parts.is_entire_series
        return {
            "title": series.title,
            "year": series.year,
            "tvdbId": series.tvdb_id,
            "titleSlug": series.title_slug,
            "images": series.images,
            "seasons": [
                {"seasonNumber": s.season_number, "monitored": entire and s.season_number > 0}
                for s in series.seasons
            ],
            "rootFolderPath": profile.root_folder_path,
            "qualityProfileId": profile.quality_profile_id,
            "languageProfileId": profile.language_profile_id,
            "seriesType": profile.series_type,
            "seasonFolder": profile.season_folder,
            "tags": profile.tags,
            "monitored": True,
            "addOptions": {
                "monitor": "all" if entire else "none",
                "searchForMissingEpisodes": entire,
            },
        }

    def _parse_series(self, data: Dict[str, Any]) -> SeriesResult:
        return SeriesResult(**self._series_fields(data))

    def _parse_library_series(self, data: Dict[str, Any]) -> LibrarySeries:
        statistics = data.get("statistics") or {}
        return LibrarySeries(
            **self._series_fields(data),
            id=data["id"],
            monitored=data.get("monitored", True),
            path=data.get("path"),
            episode_file_count=statistics.get("episodeFileCount") or 0,
            size_on_disk=statistics.get("sizeOnDisk") or 0,
        )

    def _series_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        seasons = []
        for season in data.get("seasons") or []:
            statistics = season.get("statistics") or {}
            seasons.append(
                SeasonInfo(
                    season_number=season.get("seasonNumber", 0),
                    monitored=season.get("monitored", False),
                    episode_count=statistics.get("totalEpisodeCount"),
                    episode_file_count=statistics.get("episodeFileCount"),
                )
            )
        return {
            "title": data.get("title", ""),
            "year": data.get("year") or None,
            "overview": data.get("overview"),
            "genres": data.get("genres") or [],
            "tvdb_id": data["tvdbId"],
            "tmdb_id": data.get("tmdbId"),
            "imdb_id": data.get("imdbId"),
            "title_slug": data.get("titleSlug"),
            "status": data.get("status"),
            "network": data.get("network"),
            "ended": data.get("ended", False),
            "rating": (data.get("ratings") or {}).get("value"),
            "seasons": seasons,
            "images": data.get("images") or [],
        }

    def _ensure_enabled(self) -> None:
        if not self._sonarr_config.enabled:
            raise SonarrServiceError("Sonarr is not enabled")

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """Send a request and decode the JSON body (None for empty bodies)."""
        url = f"{self._sonarr_config.url}{path}"
        headers = {"X-Api-Key": self._sonarr_config.api_key}
        session = self._get_session()

        async with session.request(
            method, url, headers=headers, params=params, json=json
        ) as response:
            response.raise_for_status()
            if response.content_length == 0 or response.status == 204:
                return None
            return await response.json(content_type=None)

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self._sonarr_config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "SonarrService":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
