"""Selection reference and parts specification models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SelectionKind(str, Enum):
    """How a user pointed at one item of a candidate list."""

    ORDINAL = "ordinal"
    YEAR = "year"


class SelectionReference(BaseModel):
    """Parsed "which one" reference.

    An ordinal value is 1-indexed ("the second one" -> 2); a year value is the
    release year ("the 2008 one" -> 2008).
    """

    kind: SelectionKind = Field(..., description="Reference kind")
    value: int = Field(..., description="Ordinal position or release year")

    @classmethod
    def ordinal(cls, n: int) -> "SelectionReference":
        return cls(kind=SelectionKind.ORDINAL, value=n)

    @classmethod
    def year(cls, y: int) -> "SelectionReference":
        return cls(kind=SelectionKind.YEAR, value=y)


class SeasonSelector(BaseModel):
    """One season, optionally narrowed to specific episodes."""

    season: int = Field(..., ge=0, description="Season number")
    episodes: Optional[List[int]] = Field(
        None, description="Episode numbers; None means the whole season"
    )

    @field_validator("episodes")
    @classmethod
    def drop_empty_episode_list(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        """Treat an empty episode list as the whole season."""
        if v is not None and len(v) == 0:
            return None
        return v


class PartsSelection(BaseModel):
    """Raw parts object produced by the parser.

    ``selection`` of None or [] means the user asked for everything.
    """

    selection: Optional[List[SeasonSelector]] = Field(None, description="Season selectors")


class PartsScope(str, Enum):
    """Three states of a parts specification."""

    UNSPECIFIED = "unspecified"
    ENTIRE_SERIES = "entire-series"
    PARTIAL = "partial"


class PartsSpecification(BaseModel):
    """Tagged parts specification for series operations.

    UNSPECIFIED is never ready to execute; ENTIRE_SERIES and PARTIAL both are.
    """

    scope: PartsScope = Field(..., description="Specification state")
    selectors: List[SeasonSelector] = Field(
        default_factory=list, description="Selectors, only populated for PARTIAL"
    )

    @classmethod
    def unspecified(cls) -> "PartsSpecification":
        return cls(scope=PartsScope.UNSPECIFIED)

    @classmethod
    def entire_series(cls) -> "PartsSpecification":
        return cls(scope=PartsScope.ENTIRE_SERIES)

    @classmethod
    def partial(cls, selectors: List[SeasonSelector]) -> "PartsSpecification":
        if not selectors:
            raise ValueError("A partial specification needs at least one selector")
        return cls(scope=PartsScope.PARTIAL, selectors=list(selectors))

    @property
    def is_ready(self) -> bool:
        """Whether the specification is complete enough to execute."""
        return self.scope != PartsScope.UNSPECIFIED

    @property
    def is_entire_series(self) -> bool:
        return self.scope == PartsScope.ENTIRE_SERIES

    @property
    def season_numbers(self) -> List[int]:
        """Seasons named by a partial specification, in order."""
        return [selector.season for selector in self.selectors]

    def describe(self) -> str:
        """Short human readable description, e.g. "season 1, season 2 episodes 3-4"."""
        if self.scope == PartsScope.UNSPECIFIED:
            return "unspecified"
        if self.scope == PartsScope.ENTIRE_SERIES:
            return "the entire series"

        parts = []
        for selector in self.selectors:
            if not selector.episodes:
                parts.append(f"season {selector.season}")
            elif len(selector.episodes) == 1:
                parts.append(f"season {selector.season} episode {selector.episodes[0]}")
            else:
                episodes = ", ".join(str(e) for e in selector.episodes)
                parts.append(f"season {selector.season} episodes {episodes}")
        return "; ".join(parts)
