"""Test the series download and delete strategies."""

from unittest.mock import AsyncMock

import pytest

from media_concierge.core.models import (
    LibrarySeries,
    OperationKind,
    PartsScope,
    PartsSelection,
    PartsSpecification,
    SeasonSelector,
    SelectionReference,
    SessionContext,
)
from media_concierge.core.strategies import SeriesDeleteStrategy, SeriesDownloadStrategy
from media_concierge.utils import SonarrServiceError, responses

SEASON_ONE = PartsSelection(selection=[SeasonSelector(season=1)])
ENTIRE = PartsSelection(selection=None)


@pytest.fixture
def download_strategy(config, session_store, request_parser, mock_sonarr_service):
    return SeriesDownloadStrategy(config, session_store, request_parser, mock_sonarr_service)


@pytest.fixture
def delete_strategy(config, session_store, request_parser, mock_sonarr_service):
    return SeriesDeleteStrategy(config, session_store, request_parser, mock_sonarr_service)


@pytest.fixture
def lost():
    return LibrarySeries(title="Lost", year=2004, tvdb_id=73739, id=9)


class TestSeriesDownload:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_single_hit_still_asks_for_parts(
        self, download_strategy, mock_llm_service, mock_sonarr_service, matrix_series, session_store
    ):
        mock_llm_service.extract_search_query.return_value = "the matrix"
        mock_sonarr_service.search_series.return_value = matrix_series[:1]

        result = await download_strategy.handle_request("download the matrix", [], "alice")

        assert result.reply.startswith("Got it, The Matrix (1993). Which seasons or episodes")
        context = await session_store.get("alice")
        assert context.operation_kind == OperationKind.SERIES_DOWNLOAD
        assert context.candidates == matrix_series[:1]
        mock_sonarr_service.monitor_and_download_series.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_parts_and_reference_in_one_message(
        self, download_strategy, mock_llm_service, mock_sonarr_service, matrix_series, session_store
    ):
        mock_llm_service.extract_search_query.return_value = "the matrix"
        mock_llm_service.parse_selection_reference.return_value = SelectionReference.ordinal(2)
        mock_llm_service.parse_parts.return_value = ENTIRE
        mock_sonarr_service.search_series.return_value = matrix_series

        result = await download_strategy.handle_request(
            "download all of the second matrix show", [], "alice"
        )

        series, parts = mock_sonarr_service.monitor_and_download_series.call_args.args
        assert series is matrix_series[1]
        assert parts.scope == PartsScope.ENTIRE_SERIES
        assert result.reply == "Added all of The Matrix (1999) to downloads. The search has started."
        assert await session_store.exists("alice") is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_three_candidates_then_year_and_season(
        self, download_strategy, mock_llm_service, mock_sonarr_service, matrix_series, session_store
    ):
        mock_llm_service.extract_search_query.return_value = "the matrix"
        mock_sonarr_service.search_series.return_value = matrix_series

        first = await download_strategy.handle_request("download the matrix", [], "alice")

        assert "which seasons or episodes" in first.reply
        context = await session_store.get("alice")
        assert len(context.candidates) == 3

        mock_llm_service.parse_selection_reference.return_value = SelectionReference.year(1999)
        mock_llm_service.parse_parts.return_value = SEASON_ONE

        second = await download_strategy.handle_request(
            "the 1999 one, season 1", first.messages, "alice", context=context
        )

        series, parts = mock_sonarr_service.monitor_and_download_series.call_args.args
        assert series is matrix_series[1]
        assert parts == PartsSpecification.partial([SeasonSelector(season=1)])
        assert second.reply == (
            "Added The Matrix (1999) (season 1) to downloads. The search has started."
        )
        assert len(second.messages) == 4
        assert await session_store.exists("alice") is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_parts_given_first_are_kept_for_the_pick(
        self, download_strategy, mock_llm_service, mock_sonarr_service, matrix_series, session_store
    ):
        mock_llm_service.extract_search_query.return_value = "the matrix"
        mock_llm_service.parse_parts.return_value = SEASON_ONE
        mock_sonarr_service.search_series.return_value = matrix_series

        first = await download_strategy.handle_request(
            "download season 1 of the matrix", [], "alice"
        )
        context = await session_store.get("alice")
        assert context.pending_parts_selection.season_numbers == [1]
        assert "Reply with the number or the year" in first.reply

        mock_llm_service.parse_parts.return_value = None
        mock_llm_service.parse_selection_reference.return_value = SelectionReference.ordinal(3)

        await download_strategy.handle_request("number 3", [], "alice", context=context)

        series, parts = mock_sonarr_service.monitor_and_download_series.call_args.args
        assert series is matrix_series[2]
        assert parts.season_numbers == [1]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_resume_without_parts_asks_again_and_keeps_context(
        self, download_strategy, mock_sonarr_service, matrix_series, session_store, clock
    ):
        context = SessionContext(
            operation_kind=OperationKind.SERIES_DOWNLOAD,
            candidates=matrix_series[:1],
            query="the matrix",
            created_at=clock(),
        )
        await session_store.set("alice", context)

        result = await download_strategy.handle_request("yes", [], "alice", context=context)

        assert result.reply == responses.ask_parts("download", matrix_series[0])
        assert await session_store.get("alice") is context
        mock_sonarr_service.monitor_and_download_series.assert_not_called()


class TestSeriesDelete:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_query_uses_series_delete_extraction(
        self, delete_strategy, mock_llm_service, mock_sonarr_service
    ):
        mock_llm_service.extract_search_query.return_value = "lost"

        await delete_strategy.handle_request("delete the show lost", [], "alice")

        mock_llm_service.extract_search_query.assert_awaited_once_with(
            "delete the show lost", for_series_delete=True
        )
        mock_sonarr_service.get_library_series.assert_awaited_once_with("lost")
        mock_sonarr_service.search_series.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_one_candidate_with_parts_deletes(
        self, delete_strategy, mock_llm_service, mock_sonarr_service, lost
    ):
        mock_llm_service.extract_search_query.return_value = "lost"
        mock_llm_service.parse_parts.return_value = PartsSelection(
            selection=[SeasonSelector(season=2, episodes=[3, 4])]
        )
        mock_sonarr_service.get_library_series.return_value = [lost]

        result = await delete_strategy.handle_request(
            "delete lost season 2 episodes 3 and 4", [], "alice"
        )

        series, parts = mock_sonarr_service.unmonitor_and_delete_series.call_args.args
        assert series is lost
        assert parts.selectors[0].episodes == [3, 4]
        assert result.reply == (
            "Removed season 2 episodes 3, 4 of Lost (2004) and deleted the files."
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_one_candidate_then_entire_series(
        self, delete_strategy, mock_llm_service, mock_sonarr_service, lost, session_store
    ):
        mock_llm_service.extract_search_query.return_value = "lost"
        mock_sonarr_service.get_library_series.return_value = [lost]

        first = await delete_strategy.handle_request("delete lost", [], "alice")

        assert first.reply == responses.ask_parts("delete", lost)
        context = await session_store.get("alice")
        assert context.operation_kind == OperationKind.SERIES_DELETE
        assert context.candidates == [lost]

        mock_llm_service.parse_parts.return_value = ENTIRE
        second = await delete_strategy.handle_request(
            "the entire series", first.messages, "alice", context=context
        )

        series, parts = mock_sonarr_service.unmonitor_and_delete_series.call_args.args
        assert series is lost
        assert parts.is_entire_series
        assert second.reply == "Removed Lost (2004) from your library and deleted its files."
        # Only the first message was checked for a reference
        assert mock_llm_service.parse_selection_reference.await_count == 1
        assert await session_store.exists("alice") is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_many_candidates_with_show_and_parts_deletes(
        self, delete_strategy, mock_llm_service, mock_sonarr_service, office_library, session_store
    ):
        mock_llm_service.extract_search_query.return_value = "the office"
        mock_llm_service.parse_selection_reference.return_value = SelectionReference.year(2005)
        mock_llm_service.parse_parts.return_value = ENTIRE
        mock_sonarr_service.get_library_series.return_value = office_library

        await delete_strategy.handle_request("delete all of the 2005 office", [], "alice")

        series, parts = mock_sonarr_service.unmonitor_and_delete_series.call_args.args
        assert series is office_library[1]
        assert parts.is_entire_series
        assert await session_store.exists("alice") is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_many_candidates_with_show_only_keeps_full_list(
        self, delete_strategy, mock_llm_service, mock_sonarr_service, office_library, session_store
    ):
        mock_llm_service.extract_search_query.return_value = "the office"
        mock_llm_service.parse_selection_reference.return_value = SelectionReference.year(2005)
        mock_sonarr_service.get_library_series.return_value = office_library

        first = await delete_strategy.handle_request("delete the 2005 office", [], "alice")

        assert first.reply == responses.ask_parts("delete", office_library[1])
        context = await session_store.get("alice")
        assert context.candidates == office_library
        assert context.pending_reference_selection == SelectionReference.year(2005)

        mock_llm_service.parse_selection_reference.return_value = None
        mock_llm_service.parse_parts.return_value = PartsSelection(
            selection=[SeasonSelector(season=9)]
        )
        await delete_strategy.handle_request("season 9", [], "alice", context=context)

        series, parts = mock_sonarr_service.unmonitor_and_delete_series.call_args.args
        assert series is office_library[1]
        assert parts.season_numbers == [9]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_many_candidates_with_parts_only_lists_shows(
        self, delete_strategy, mock_llm_service, mock_sonarr_service, office_library, session_store
    ):
        mock_llm_service.extract_search_query.return_value = "the office"
        mock_llm_service.parse_parts.return_value = SEASON_ONE
        mock_sonarr_service.get_library_series.return_value = office_library

        result = await delete_strategy.handle_request("delete season 1 of the office", [], "alice")

        assert "1. The Office (2001)" in result.reply
        assert "2. The Office (2005)" in result.reply
        assert "Reply with the number or the year" in result.reply
        context = await session_store.get("alice")
        assert context.pending_parts_selection.season_numbers == [1]
        assert context.pending_reference_selection is None
        mock_sonarr_service.unmonitor_and_delete_series.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_many_candidates_with_nothing_asks_for_both(
        self, delete_strategy, mock_llm_service, mock_sonarr_service, office_library, session_store
    ):
        mock_llm_service.extract_search_query.return_value = "the office"
        mock_sonarr_service.get_library_series.return_value = office_library

        result = await delete_strategy.handle_request("delete the office", [], "alice")

        assert "and which seasons or episodes" in result.reply
        context = await session_store.get("alice")
        assert context.pending_parts_selection is None
        assert len(context.candidates) == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_delete_during_resume_leaves_no_context(
        self, delete_strategy, mock_llm_service, mock_sonarr_service, lost, session_store, clock
    ):
        context = SessionContext(
            operation_kind=OperationKind.SERIES_DELETE,
            candidates=[lost],
            query="lost",
            created_at=clock(),
        )
        await session_store.set("alice", context)
        mock_llm_service.parse_parts.return_value = ENTIRE
        mock_sonarr_service.unmonitor_and_delete_series.side_effect = SonarrServiceError("boom")

        result = await delete_strategy.handle_request("all of it", [], "alice", context=context)

        assert result.reply == responses.mutation_unavailable(lost, "delete")
        assert await session_store.exists("alice") is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_show_and_parts_on_separate_turns(
        self, delete_strategy, mock_llm_service, mock_sonarr_service, office_library, session_store
    ):
        mock_llm_service.extract_search_query.return_value = "the office"
        mock_sonarr_service.get_library_series.return_value = office_library

        first = await delete_strategy.handle_request("delete the office", [], "alice")
        assert "and which seasons or episodes" in first.reply

        mock_llm_service.parse_selection_reference.return_value = SelectionReference.year(2005)
        context = await session_store.get("alice")
        second = await delete_strategy.handle_request(
            "the 2005 one", first.messages, "alice", context=context
        )

        assert second.reply == responses.ask_parts("delete", office_library[1])
        context = await session_store.get("alice")
        assert context.candidates == office_library
        assert context.pending_reference_selection == SelectionReference.year(2005)
        mock_sonarr_service.unmonitor_and_delete_series.assert_not_called()

        mock_llm_service.parse_selection_reference.return_value = None
        mock_llm_service.parse_parts.return_value = ENTIRE
        third = await delete_strategy.handle_request(
            "entire series", second.messages, "alice", context=context
        )

        series, parts = mock_sonarr_service.unmonitor_and_delete_series.call_args.args
        assert series is office_library[1]
        assert parts.is_entire_series
        assert third.reply == "Removed The Office (2005) from your library and deleted its files."
        assert await session_store.exists("alice") is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_clear_skips_delete(
        self, delete_strategy, mock_llm_service, mock_sonarr_service, lost, session_store, monkeypatch
    ):
        context = SessionContext(
            operation_kind=OperationKind.SERIES_DELETE, candidates=[lost], query="lost"
        )
        await session_store.set("alice", context)
        mock_llm_service.parse_parts.return_value = ENTIRE
        clear = AsyncMock(side_effect=[RuntimeError("store down"), None])
        monkeypatch.setattr(session_store, "clear", clear)

        result = await delete_strategy.handle_request("all of it", [], "alice", context=context)

        assert result.reply == responses.PROCESSING_ERROR
        mock_sonarr_service.unmonitor_and_delete_series.assert_not_called()
        assert clear.await_count == 2
