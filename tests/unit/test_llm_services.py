"""Test LLM response parsing and retries."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from media_concierge.core.models import (
    ChatMessage,
    MediaKind,
    SearchIntent,
    SelectionKind,
)
from media_concierge.core.services import AnthropicLLMService, OpenAILLMService
from media_concierge.utils import LLMServiceError


@pytest.fixture
def llm_service(config):
    service = OpenAILLMService(config)
    service._make_llm_request = AsyncMock()
    return service


def respond_with(service, text):
    service._make_llm_request.return_value = text


@pytest.mark.unit
@pytest.mark.asyncio
async def test_classify_intent(llm_service):
    respond_with(
        llm_service,
        'Sure: {"media_type": "series", "search_intent": "external", "search_terms": "lost"}',
    )

    request = await llm_service.classify_intent("download lost")

    assert request.media_kind == MediaKind.SERIES
    assert request.search_intent == SearchIntent.EXTERNAL
    assert request.search_terms == "lost"
    _, _, model, temperature = llm_service._make_llm_request.call_args.args
    assert model == "gpt-4o-mini"
    assert temperature == 0.0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_classify_intent_rejects_unknown_values(llm_service):
    respond_with(llm_service, '{"media_type": "podcast", "search_intent": "library"}')

    with pytest.raises(LLMServiceError):
        await llm_service.classify_intent("hi")


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "answer,kind", [("MOVIE", MediaKind.MOVIE), ("series.", MediaKind.SERIES)]
)
async def test_classify_media_kind(llm_service, answer, kind):
    respond_with(llm_service, answer)

    assert await llm_service.classify_media_kind("fargo") == kind


@pytest.mark.unit
@pytest.mark.asyncio
async def test_extract_search_query_strips_quotes(llm_service):
    respond_with(llm_service, '"The Matrix"\n')

    assert await llm_service.extract_search_query("download the matrix") == "The Matrix"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_parse_selection_reference(llm_service):
    respond_with(llm_service, '{"selection_type": "year", "value": "2008"}')

    reference = await llm_service.parse_selection_reference("the 2008 one")

    assert reference.kind == SelectionKind.YEAR
    assert reference.value == 2008


@pytest.mark.unit
@pytest.mark.asyncio
async def test_parse_selection_reference_none(llm_service):
    respond_with(llm_service, '{"selection_type": null, "value": null}')

    assert await llm_service.parse_selection_reference("download lost") is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_parse_parts_scopes(llm_service):
    respond_with(llm_service, '{"scope": "none", "selection": []}')
    assert await llm_service.parse_parts("download lost") is None

    respond_with(llm_service, '{"scope": "entire", "selection": []}')
    entire = await llm_service.parse_parts("all of it")
    assert entire is not None
    assert entire.selection is None

    respond_with(
        llm_service,
        '{"scope": "partial", "selection": [{"season": 2, "episodes": [3, 4, 5]}, '
        '{"season": 4, "episodes": null}]}',
    )
    partial = await llm_service.parse_parts("season 2 episodes 3-5 and season 4")
    assert [s.season for s in partial.selection] == [2, 4]
    assert partial.selection[0].episodes == [3, 4, 5]
    assert partial.selection[1].episodes is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_partial_without_selectors_is_not_entire(llm_service):
    respond_with(llm_service, '{"scope": "partial", "selection": []}')

    assert await llm_service.parse_parts("some of it") is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_invalid_json_raises(llm_service):
    respond_with(llm_service, "I am not sure what you mean")

    with pytest.raises(LLMServiceError):
        await llm_service.parse_selection_reference("eh")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generate_response_sends_history(llm_service):
    respond_with(llm_service, "You have 3 movies.")
    history = [ChatMessage.user("hi"), ChatMessage.assistant("hello")]

    reply = await llm_service.generate_response("SYSTEM", history, "what do I have?")

    system_prompt, messages, model, temperature = llm_service._make_llm_request.call_args.args
    assert reply == "You have 3 movies."
    assert system_prompt == "SYSTEM"
    assert messages == [
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hello"},
        {"role": "user", "content": "what do I have?"},
    ]
    assert model == "gpt-4o"
    assert temperature == 0.7


@pytest.mark.unit
@pytest.mark.asyncio
async def test_transient_failures_are_retried(llm_service):
    llm_service._make_llm_request.side_effect = [LLMServiceError("503"), "CONTINUE"]

    assert await llm_service.detect_topic_continuity("the first one") == "CONTINUE"
    assert llm_service._make_llm_request.await_count == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_retries_give_up_after_max_attempts(llm_service, config):
    llm_service._make_llm_request.side_effect = LLMServiceError("503")

    with pytest.raises(LLMServiceError):
        await llm_service.detect_topic_continuity("the first one")
    assert llm_service._make_llm_request.await_count == config.retry.max_attempts


@pytest.mark.unit
@pytest.mark.asyncio
async def test_timeouts_become_service_errors(config):
    config.retry.max_attempts = 1
    config.retry.timeout_seconds = 0.01
    service = AnthropicLLMService(config)

    async def slow(*args):
        await asyncio.sleep(1)
        return "late"

    service._make_llm_request = slow

    with pytest.raises(LLMServiceError, match="timed out"):
        await service.detect_topic_continuity("hello")
