"""Templated assistant replies.

Every reply a strategy can give without the summarizer lives here, so the
wording stays consistent between the fresh-request and resume paths.
"""

from typing import Optional, Sequence

from ..core.models import MediaItem, MutationResult, PartsSpecification
from .formatting import format_candidate_list

PROCESSING_ERROR = "Had trouble processing your selection. Please try searching again."
GENERIC_ERROR = "Sorry, something went wrong while handling that request. Please try again."
SERVICES_UNAVAILABLE = (
    "Sorry, I couldn't check that right now. "
    "The media services are currently unavailable. Please try again in a bit."
)
NOTHING_DOWNLOADING_INSTRUCTION = (
    "No downloads are currently active. The queue is clear! "
    "Let the user know in a friendly way and offer to help them start new downloads."
)
STATUS_SNAPSHOT_INSTRUCTION = (
    "ACTIVE DOWNLOADS FOUND: {movie_count} movies and {episode_count} episodes currently "
    "downloading. Use ONLY the data provided below and do NOT mention any titles that "
    "are not in this data: {snapshot}"
)
BROWSE_INSTRUCTION = (
    "You are a friendly home media assistant. Answer the user's request conversationally, "
    "using ONLY the media data below. If the data does not answer the request, say so."
    "\n\nMEDIA DATA:{data}"
)
BROWSE_SEPARATOR = "\n\n---\n"
EXTERNAL_SEARCH_HINT = (
    "\n\n**SEARCH:** Please provide more specific search terms to find new content."
)


def _label(kind: str) -> str:
    return "movie" if kind == "movie" else "show"


def clarify_query(kind: str, action: str) -> str:
    """Ask what to search for when no query could be extracted."""
    return f"Which {_label(kind)} would you like to {action}? Give me a title and I'll look it up."


def no_results(kind: str, query: str, in_library: bool = False) -> str:
    where = " in your library" if in_library else ""
    return f"I couldn't find any {_label(kind)}s matching \"{query}\"{where}."


def search_unavailable(kind: str, query: str) -> str:
    manager = "Radarr" if kind == "movie" else "Sonarr"
    return (
        f"Couldn't search for \"{query}\" right now. "
        f"The {manager} service might be unavailable."
    )


def pick_one(
    kind: str, action: str, query: str, candidates: Sequence[MediaItem], parts_known: bool = True
) -> str:
    """Numbered list asking the user to choose a candidate."""
    lines = [
        f"I found {len(candidates)} {_label(kind)}s matching \"{query}\":",
        "",
        format_candidate_list(candidates),
        "",
    ]
    if parts_known:
        lines.append(
            f"Which one would you like to {action}? "
            "Reply with the number or the year (e.g. \"the second one\" or \"the 2008 one\")."
        )
    else:
        lines.append(
            f"Which one would you like to {action}, and which seasons or episodes? "
            "For example: \"the first one, season 2\" or \"the 2008 one, entire series\"."
        )
    return "\n".join(lines)


def ask_parts(action: str, item: MediaItem) -> str:
    """Ask which seasons or episodes to act on for a single chosen show."""
    return (
        f"Got it, {item.display_name}. Which seasons or episodes should I {action}? "
        "You can say \"entire series\", \"season 1\", or \"season 2 episodes 3-5\"."
    )


def download_started(item: MediaItem, parts: Optional[PartsSpecification] = None) -> str:
    if parts is not None and parts.is_ready and not parts.is_entire_series:
        return f"Added {item.display_name} ({parts.describe()}) to downloads. The search has started."
    if parts is not None and parts.is_entire_series:
        return f"Added all of {item.display_name} to downloads. The search has started."
    return f"Added {item.display_name} to downloads. The search has started."


def delete_done(item: MediaItem, parts: Optional[PartsSpecification] = None) -> str:
    if parts is not None and parts.is_ready and not parts.is_entire_series:
        return f"Removed {parts.describe()} of {item.display_name} and deleted the files."
    return f"Removed {item.display_name} from your library and deleted its files."


def mutation_failed(item: MediaItem, action: str, result: MutationResult) -> str:
    detail = result.error or result.message or "unknown error"
    return f"Sorry, I couldn't {action} \"{item.title}\": {detail}"


def mutation_unavailable(item: MediaItem, action: str) -> str:
    return (
        f"Sorry, I couldn't {action} \"{item.title}\" right now. "
        "The media service might be unavailable."
    )
