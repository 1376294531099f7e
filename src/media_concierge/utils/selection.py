"""Selection resolution and parts classification helpers."""

from typing import Optional, Sequence, TypeVar

from ..core.models.selection import (
    PartsSelection,
    PartsSpecification,
    SelectionKind,
    SelectionReference,
)

T = TypeVar("T")


def resolve_selection(reference: SelectionReference, candidates: Sequence[T]) -> Optional[T]:
    """Pick one candidate for a parsed reference.

    Out-of-range ordinals and unmatched years fall back to the first candidate.

    Args:
        reference: Parsed ordinal or year reference.
        candidates: Candidates in the order they were shown.

    Returns:
        Selected candidate, or None when the list is empty.
    """
    if not candidates:
        return None

    if reference.kind == SelectionKind.ORDINAL:
        index = reference.value - 1
        if 0 <= index < len(candidates):
            return candidates[index]
        return candidates[0]

    if reference.kind == SelectionKind.YEAR:
        for candidate in candidates:
            if getattr(candidate, "year", None) == reference.value:
                return candidate
        return candidates[0]

    return candidates[0]


def classify_parts(parts: Optional[PartsSelection]) -> PartsSpecification:
    """Turn raw parser output into a tagged parts specification.

    None is unspecified; an object without selectors is the entire series.
    """
    if parts is None:
        return PartsSpecification.unspecified()
    if not parts.selection:
        return PartsSpecification.entire_series()
    return PartsSpecification.partial(parts.selection)


def merge_parts(
    current: PartsSpecification, pending: Optional[PartsSpecification]
) -> PartsSpecification:
    """Prefer a ready specification from this turn, else the one carried over."""
    if current.is_ready:
        return current
    if pending is not None and pending.is_ready:
        return pending
    return PartsSpecification.unspecified()
