"""Request classification models."""

from enum import Enum

from pydantic import BaseModel, Field


class MediaKind(str, Enum):
    """Which media manager a request concerns."""

    MOVIE = "movie"
    SERIES = "series"
    EITHER = "either"


class SearchIntent(str, Enum):
    """What the user wants done with the search terms."""

    LIBRARY = "library"
    EXTERNAL = "external"
    BOTH = "both"
    DELETE = "delete"


class MediaRequest(BaseModel):
    """Classified user request."""

    media_kind: MediaKind = Field(default=MediaKind.EITHER, description="Media kind")
    search_intent: SearchIntent = Field(
        default=SearchIntent.LIBRARY, description="Search intent"
    )
    search_terms: str = Field(default="", description="Extracted search terms")

    @classmethod
    def default(cls) -> "MediaRequest":
        """Classification used when the classifier fails."""
        return cls(media_kind=MediaKind.EITHER, search_intent=SearchIntent.LIBRARY, search_terms="")

    @property
    def is_ambiguous(self) -> bool:
        return self.media_kind == MediaKind.EITHER
