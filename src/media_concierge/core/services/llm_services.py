"""LLM service implementations."""

import asyncio
import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import LLMServiceError
from ..interfaces import ILLMService
from ..models import (
    ChatMessage,
    MediaKind,
    MediaRequest,
    PartsSelection,
    SeasonSelector,
    SelectionReference,
)

INTENT_PROMPT = """You classify messages sent to a home media assistant that manages movies (Radarr) and TV series (Sonarr).

Respond with valid JSON in exactly this format:
{
    "media_type": "movie" | "series" | "either",
    "search_intent": "library" | "external" | "both" | "delete",
    "search_terms": "string"
}

Rules:
- media_type: "movie" or "series" when the message makes it clear, otherwise "either"
- search_intent: "library" for questions about what the user already has,
  "external" for finding or downloading something new, "both" when both apply,
  "delete" for removing something from the library
- search_terms: the title or keywords to search for, or "" if there are none"""

MEDIA_KIND_PROMPT = """Decide whether the user is talking about a movie or a TV series.
Respond with exactly one word: MOVIE or SERIES."""

TOPIC_PROMPT = """The user has a pending request in which they were asked to pick from a list of
search results or to say which seasons/episodes they want.

Decide whether their new message continues that request (picking an item, giving a
year, ordinal, season or episode, confirming) or switches to an unrelated topic.
Respond with exactly one word: CONTINUE or SWITCH."""

SEARCH_QUERY_PROMPT = """Extract the title the user wants to search for from their message.
Remove request words such as "download", "add", "get me", "find", "search for".
Respond with only the title, without quotes. If there is no title, respond with nothing."""

SERIES_DELETE_QUERY_PROMPT = """Extract the TV show title the user wants to delete from their message.
Remove request words such as "delete", "remove", "get rid of" and any season or
episode details. Respond with only the title, without quotes. If there is no title,
respond with nothing."""

SELECTION_PROMPT = """Determine whether the user's message refers to one item of a previously shown
numbered list, either by position ("the second one", "#3", "first") or by release year
("the 2008 one").

Respond with valid JSON in exactly this format:
{
    "selection_type": "ordinal" | "year" | null,
    "value": integer_or_null
}

Positions are 1-based. Use null for both fields when the message has no such reference."""

PARTS_PROMPT = """Determine which seasons and episodes of a TV series the user is talking about.

Respond with valid JSON in exactly this format:
{
    "scope": "none" | "entire" | "partial",
    "selection": [{"season": integer, "episodes": [integer, ...] or null}]
}

Rules:
- "none": the message does not say which parts (selection must be [])
- "entire": the user wants the whole series, e.g. "entire series", "all seasons",
  "everything" (selection must be [])
- "partial": specific seasons or episodes; "episodes": null means the whole season
- Expand ranges: "episodes 3-5" becomes [3, 4, 5]"""


class BaseLLMService(ILLMService, LoggerMixin, ABC):
    """Base LLM service with prompts, parsing and retry handling."""

    def __init__(self, config: Config):
        """Initialize LLM service.

        Args:
            config: Application configuration.
        """
        self._config = config
        self._llm_config = config.llm
        self._retry_config = config.retry

    async def classify_intent(self, message: str) -> MediaRequest:
        response_text = await self._request(INTENT_PROMPT, message, reasoning=True)
        data = self._extract_json(response_text)

        try:
            request = MediaRequest(
                media_kind=data.get("media_type", "either"),
                search_intent=data.get("search_intent", "library"),
                search_terms=data.get("search_terms") or "",
            )
        except ValidationError as e:
            raise LLMServiceError(f"Invalid intent classification: {e}") from e

        self.logger.debug(
            f"Classified intent: kind={request.media_kind.value}, "
            f"intent={request.search_intent.value}, terms='{request.search_terms}'"
        )
        return request

    async def classify_media_kind(self, message: str) -> MediaKind:
        response_text = await self._request(MEDIA_KIND_PROMPT, message, reasoning=True)
        answer = response_text.strip().upper()

        if "SERIES" in answer or "TV" in answer or "SHOW" in answer:
            return MediaKind.SERIES
        if "MOVIE" in answer or "FILM" in answer:
            return MediaKind.MOVIE
        raise LLMServiceError(f"Unexpected media kind answer: {response_text!r}")

    async def detect_topic_continuity(self, message: str) -> str:
        return await self._request(TOPIC_PROMPT, message, reasoning=True)

    async def extract_search_query(self, message: str, for_series_delete: bool = False) -> str:
        prompt = SERIES_DELETE_QUERY_PROMPT if for_series_delete else SEARCH_QUERY_PROMPT
        response_text = await self._request(prompt, message, reasoning=True)
        query = response_text.strip().strip("\"'").strip()
        return query or message.strip()

    async def parse_selection_reference(self, message: str) -> Optional[SelectionReference]:
        response_text = await self._request(SELECTION_PROMPT, message, reasoning=True)
        data = self._extract_json(response_text)

        selection_type = data.get("selection_type")
        value = data.get("value")
        if selection_type is None or value is None:
            return None

        try:
            return SelectionReference(kind=selection_type, value=int(value))
        except (ValidationError, TypeError, ValueError) as e:
            raise LLMServiceError(f"Invalid selection reference: {data}") from e

    async def parse_parts(self, message: str) -> Optional[PartsSelection]:
        response_text = await self._request(PARTS_PROMPT, message, reasoning=True)
        data = self._extract_json(response_text)

        scope = str(data.get("scope", "none")).lower()
        if scope == "none":
            return None
        if scope == "entire":
            return PartsSelection(selection=None)
        if scope != "partial":
            raise LLMServiceError(f"Unknown parts scope: {scope!r}")

        try:
            selectors = [SeasonSelector(**entry) for entry in data.get("selection") or []]
        except (ValidationError, TypeError) as e:
            raise LLMServiceError(f"Invalid parts selection: {data}") from e

        if not selectors:
            # "partial" with nothing in it is not an entire-series request
            self.logger.warning(f"Partial parts answer without selectors: {data}")
            return None
        return PartsSelection(selection=selectors)

    async def generate_response(
        self, instructions: str, history: List[ChatMessage], message: str
    ) -> str:
        messages = [{"role": m.role.value, "content": m.content} for m in history]
        messages.append({"role": "user", "content": message})
        return await self._request_with_retry(instructions, messages, reasoning=False)

    async def _request(self, system_prompt: str, user_prompt: str, reasoning: bool) -> str:
        return await self._request_with_retry(
            system_prompt, [{"role": "user", "content": user_prompt}], reasoning=reasoning
        )

    async def _request_with_retry(
        self, system_prompt: str, messages: List[Dict[str, str]], reasoning: bool
    ) -> str:
        """Run one request with per-attempt timeout and exponential backoff.

        Raises:
            LLMServiceError: When every attempt failed.
        """
        model = self._llm_config.classification_model if reasoning else self._llm_config.model
        temperature = (
            self._llm_config.reasoning_temperature if reasoning else self._llm_config.temperature
        )
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._retry_config.max_attempts),
            wait=wait_exponential(
                multiplier=self._retry_config.base_delay_seconds,
                max=self._retry_config.max_delay_seconds,
            ),
            retry=retry_if_exception_type((LLMServiceError, asyncio.TimeoutError)),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await asyncio.wait_for(
                        self._make_llm_request(system_prompt, messages, model, temperature),
                        timeout=self._retry_config.timeout_seconds,
                    )
        except asyncio.TimeoutError as e:
            raise LLMServiceError(
                f"LLM request timed out after {self._retry_config.timeout_seconds}s"
            ) from e
        raise LLMServiceError("LLM request made no attempts")

    @abstractmethod
    async def _make_llm_request(
        self,
        system_prompt: str,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float,
    ) -> str:
        """Make request to LLM service.

        Args:
            system_prompt: System prompt.
            messages: Conversation messages as role/content dicts.
            model: Model name.
            temperature: Sampling temperature.

        Returns:
            LLM response text.
        """
        pass

    def _extract_json(self, response_text: str) -> Dict[str, Any]:
        """Pull the first JSON object out of a model response.

        Raises:
            LLMServiceError: If no valid JSON object is present.
        """
        json_match = re.search(r"\{.*\}", response_text, re.DOTALL)
        json_text = json_match.group(0) if json_match else response_text

        try:
            data = json.loads(json_text)
        except json.JSONDecodeError as e:
            raise LLMServiceError(f"Failed to parse LLM response as JSON: {e}") from e

        if not isinstance(data, dict):
            raise LLMServiceError("LLM response JSON must be an object")
        return data


class OpenAILLMService(BaseLLMService):
    """OpenAI LLM service implementation."""

    def __init__(self, config: Config):
        super().__init__(config)
        self._client: Any = None

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                import openai
            except ImportError:
                raise LLMServiceError(
                    "OpenAI package not installed. Install with: pip install openai"
                )
            self._client = openai.AsyncOpenAI(
                api_key=self._llm_config.api_key, timeout=self._llm_config.timeout
            )
        return self._client

    async def _make_llm_request(
        self,
        system_prompt: str,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float,
    ) -> str:
        client = self._get_client()

        try:
            response = await client.chat.completions.create(
                model=model,
                messages=[{"role": "system", "content": system_prompt}, *messages],
                max_tokens=self._llm_config.max_tokens,
                temperature=temperature,
            )
        except Exception as e:
            raise LLMServiceError(f"OpenAI API request failed: {e}") from e

        content = response.choices[0].message.content
        if content is None:
            raise LLMServiceError("OpenAI API returned empty content")
        return content

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None


class AnthropicLLMService(BaseLLMService):
    """Anthropic (Claude) LLM service implementation."""

    def __init__(self, config: Config):
        super().__init__(config)
        self._client: Any = None

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                import anthropic
            except ImportError:
                raise LLMServiceError(
                    "Anthropic package not installed. Install with: pip install anthropic"
                )
            self._client = anthropic.AsyncAnthropic(
                api_key=self._llm_config.api_key, timeout=self._llm_config.timeout
            )
        return self._client

    async def _make_llm_request(
        self,
        system_prompt: str,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float,
    ) -> str:
        client = self._get_client()

        # Anthropic takes the system prompt separately and rejects system-role messages
        chat = [m for m in messages if m["role"] != "system"]

        try:
            response = await client.messages.create(
                model=model,
                max_tokens=self._llm_config.max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=chat,
            )
        except Exception as e:
            raise LLMServiceError(f"Anthropic API request failed: {e}") from e

        content_block = response.content[0]
        if hasattr(content_block, "text"):
            return content_block.text
        raise LLMServiceError("Anthropic API returned unexpected content type")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
