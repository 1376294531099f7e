"""Fail-safe parsing of queries, references and parts from a message."""

import asyncio
import re
from typing import Any, Optional

from pydantic import BaseModel

from ...infrastructure.logging import LoggerMixin
from ..interfaces import ILLMService
from ..models import PartsSelection, SelectionReference

DOWNLOAD_WORDS_PATTERN = re.compile(
    r"\b(download|add|get|find|search\s+for|look\s+for|movie|film|the)\b", re.IGNORECASE
)
SERIES_DELETE_WORDS_PATTERN = re.compile(
    r"\b(delete|remove|unmonitor|get\s+rid\s+of|show|series|tv|television|the)\b",
    re.IGNORECASE,
)


class ParsedRequest(BaseModel):
    """Everything parsed from one message; each part is independent."""

    search_query: str = ""
    reference: Optional[SelectionReference] = None
    parts: Optional[PartsSelection] = None


def strip_request_words(message: str, for_series_delete: bool = False) -> str:
    """Keyword-stripping fallback for query extraction."""
    pattern = SERIES_DELETE_WORDS_PATTERN if for_series_delete else DOWNLOAD_WORDS_PATTERN
    stripped = pattern.sub(" ", message)
    return re.sub(r"\s+", " ", stripped).strip(" \t\n.,!?\"'")


class RequestParser(LoggerMixin):
    """Runs the independent parsing calls concurrently."""

    def __init__(self, llm_service: ILLMService) -> None:
        self._llm_service = llm_service

    async def parse_request(
        self,
        message: str,
        include_parts: bool = False,
        for_series_delete: bool = False,
    ) -> ParsedRequest:
        """Extract query, reference and (optionally) parts from a fresh request.

        A failed query extraction falls back to keyword stripping; failed
        reference or parts parses yield None.
        """
        query_task = self._llm_service.extract_search_query(
            message, for_series_delete=for_series_delete
        )
        reference_task = self._llm_service.parse_selection_reference(message)
        parts_task = self._llm_service.parse_parts(message) if include_parts else _none()

        query, reference, parts = await asyncio.gather(
            query_task, reference_task, parts_task, return_exceptions=True
        )

        if isinstance(query, BaseException):
            self.logger.warning(f"Query extraction failed, stripping keywords instead: {query}")
            query = strip_request_words(message, for_series_delete)

        return ParsedRequest(
            search_query=(query or "").strip(),
            reference=self._settled(reference, "selection reference"),
            parts=self._settled(parts, "parts"),
        )

    async def parse_selection(
        self, message: str, need_reference: bool, need_parts: bool
    ) -> ParsedRequest:
        """Parse only the pieces a resumed operation is still missing."""
        reference_task = (
            self._llm_service.parse_selection_reference(message) if need_reference else _none()
        )
        parts_task = self._llm_service.parse_parts(message) if need_parts else _none()

        reference, parts = await asyncio.gather(
            reference_task, parts_task, return_exceptions=True
        )
        return ParsedRequest(
            reference=self._settled(reference, "selection reference"),
            parts=self._settled(parts, "parts"),
        )

    def _settled(self, result: Any, label: str) -> Any:
        if isinstance(result, BaseException):
            self.logger.debug(f"Parsing {label} failed: {result}")
            return None
        return result


async def _none() -> None:
    return None
