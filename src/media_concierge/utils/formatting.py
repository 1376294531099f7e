"""Formatting helpers for summaries and candidate lists."""

import json
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from ..core.models import DownloadingEpisode, DownloadingMovie, MediaItem

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_file_size(size_bytes: Optional[float]) -> str:
    """Format a byte count as a human readable string.

    Args:
        size_bytes: Size in bytes.

    Returns:
        String such as "1.5 GB"; "0 B" for empty or missing sizes.
    """
    if not size_bytes or size_bytes <= 0:
        return "0 B"

    exponent = min(int(math.log(size_bytes, 1024)), len(SIZE_UNITS) - 1)
    value = round(size_bytes / (1024**exponent), 2)
    return f"{value:g} {SIZE_UNITS[exponent]}"


def format_time_remaining(
    estimated_completion_time: Optional[str], now: Optional[datetime] = None
) -> Optional[str]:
    """Format an ISO completion timestamp as time remaining.

    Args:
        estimated_completion_time: ISO-8601 timestamp reported by the manager.
        now: Reference time, defaults to the current UTC time.

    Returns:
        "2h 5m", "12m" or "Soon"; None when the timestamp is missing or invalid.
    """
    if not estimated_completion_time:
        return None

    try:
        completion = datetime.fromisoformat(estimated_completion_time.replace("Z", "+00:00"))
    except ValueError:
        return None

    if completion.tzinfo is None:
        completion = completion.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    seconds = int((completion - now).total_seconds())
    if seconds <= 0:
        return "Soon"

    hours, remainder = divmod(seconds, 3600)
    minutes = remainder // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_candidate_list(candidates: Sequence[MediaItem]) -> str:
    """Numbered list in stored order: "1. Title (Year)"."""
    return "\n".join(
        f"{index}. {candidate.display_name}" for index, candidate in enumerate(candidates, 1)
    )


def downloads_snapshot(
    movies: List[DownloadingMovie], episodes: List[DownloadingEpisode]
) -> Dict[str, Any]:
    """Structured snapshot of active downloads for the summarizer."""
    return {
        "summary": {"totalMovies": len(movies), "totalEpisodes": len(episodes)},
        "movies": [
            {
                "title": m.movie_title,
                "progress": m.progress_percent,
                "status": m.status,
                "size": format_file_size(m.size),
                "timeLeft": format_time_remaining(m.estimated_completion_time),
            }
            for m in movies
        ],
        "episodes": [
            {
                "series": e.series_title,
                "episode": f"S{e.season_number}E{e.episode_number}: {e.episode_title}",
                "progress": e.progress_percent,
                "status": e.status,
                "size": format_file_size(e.size),
                "timeLeft": e.timeleft or format_time_remaining(e.estimated_completion_time),
            }
            for e in episodes
        ],
    }


def media_items_to_json(items: Sequence[MediaItem]) -> str:
    """Minified JSON of media items for grounding browse summaries."""
    payload = []
    for item in items:
        payload.append(
            {
                "title": item.title,
                "year": item.year,
                "hasFile": getattr(item, "has_file", None),
                "id": item.external_id,
                "genres": item.genres,
                "rating": getattr(item, "rating", None),
                "overview": item.overview,
                "status": getattr(item, "status", None),
                "monitored": getattr(item, "monitored", None),
            }
        )
    return json.dumps(payload, separators=(",", ":"))
