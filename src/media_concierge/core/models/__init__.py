"""Core data models."""

from .intent import MediaKind, MediaRequest, SearchIntent
from .media import (
    DownloadingEpisode,
    DownloadingMovie,
    LibraryMovie,
    LibrarySeries,
    MediaItem,
    MovieResult,
    MutationResult,
    SeasonInfo,
    SeriesResult,
)
from .results import ChatMessage, MediaImage, MessageRole, StrategyResult
from .selection import (
    PartsScope,
    PartsSelection,
    PartsSpecification,
    SeasonSelector,
    SelectionKind,
    SelectionReference,
)
from .session import Candidate, OperationKind, SessionContext

__all__ = [
    "MediaKind",
    "MediaRequest",
    "SearchIntent",
    "MediaItem",
    "MovieResult",
    "LibraryMovie",
    "SeriesResult",
    "LibrarySeries",
    "SeasonInfo",
    "DownloadingMovie",
    "DownloadingEpisode",
    "MutationResult",
    "ChatMessage",
    "MediaImage",
    "MessageRole",
    "StrategyResult",
    "SelectionKind",
    "SelectionReference",
    "SeasonSelector",
    "PartsSelection",
    "PartsScope",
    "PartsSpecification",
    "Candidate",
    "OperationKind",
    "SessionContext",
]
