"""Session context models."""

import time
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from .media import LibraryMovie, LibrarySeries, MovieResult, SeriesResult
from .selection import PartsSpecification, SelectionReference


class OperationKind(str, Enum):
    """Operations that can be left pending between turns."""

    MOVIE_DOWNLOAD = "movie-download"
    SERIES_DOWNLOAD = "series-download"
    MOVIE_DELETE = "movie-delete"
    SERIES_DELETE = "series-delete"


# Library types first so stored library records keep their ids after validation.
Candidate = Union[LibraryMovie, LibrarySeries, MovieResult, SeriesResult]


class SessionContext(BaseModel):
    """A pending operation waiting on the user's next message."""

    operation_kind: OperationKind = Field(..., description="Pending operation")
    candidates: List[Candidate] = Field(
        default_factory=list, description="Candidates in the order shown to the user"
    )
    query: str = Field(default="", description="Original search query")
    created_at: float = Field(
        default_factory=time.time, description="Creation timestamp, restamped by the store"
    )
    is_active: bool = Field(default=True, description="Inactive contexts count as absent")
    pending_reference_selection: Optional[SelectionReference] = Field(
        None, description="Reference captured before the list was shown"
    )
    pending_parts_selection: Optional[PartsSpecification] = Field(
        None, description="Parts captured on an earlier turn"
    )

    @property
    def kind_label(self) -> str:
        return self.operation_kind.value

    def age_seconds(self, now: Optional[float] = None) -> float:
        """Seconds since the context was created."""
        return (now if now is not None else time.time()) - self.created_at
