"""Test formatting helpers and templated replies."""

import json
from datetime import datetime, timezone

import pytest

from media_concierge.core.models import (
    LibrarySeries,
    MovieResult,
    MutationResult,
    PartsSpecification,
    SeasonSelector,
)
from media_concierge.utils import responses
from media_concierge.utils.formatting import (
    format_candidate_list,
    format_file_size,
    format_time_remaining,
    media_items_to_json,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.unit
@pytest.mark.parametrize(
    "size,expected",
    [
        (None, "0 B"),
        (0, "0 B"),
        (512, "512 B"),
        (1536, "1.5 KB"),
        (5 * 1024**3, "5 GB"),
    ],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "eta,expected",
    [
        ("2024-05-01T14:05:00Z", "2h 5m"),
        ("2024-05-01T12:12:30Z", "12m"),
        ("2024-05-01T11:00:00Z", "Soon"),
        ("not a date", None),
        (None, None),
    ],
)
def test_format_time_remaining(eta, expected):
    assert format_time_remaining(eta, now=NOW) == expected


@pytest.mark.unit
def test_candidate_list_keeps_order_and_years():
    candidates = [
        MovieResult(title="Solaris", year=1972, tmdb_id=593),
        MovieResult(title="Solaris", year=2002, tmdb_id=2103),
        MovieResult(title="Solaris Redux", tmdb_id=1),
    ]

    assert format_candidate_list(candidates) == (
        "1. Solaris (1972)\n2. Solaris (2002)\n3. Solaris Redux"
    )


@pytest.mark.unit
def test_media_items_to_json_is_minified():
    show = LibrarySeries(title="Lost", year=2004, tvdb_id=73739, id=9, status="ended")

    payload = media_items_to_json([show])

    assert " " not in payload.replace("Lost", "")
    assert json.loads(payload) == [
        {
            "title": "Lost",
            "year": 2004,
            "hasFile": None,
            "id": 73739,
            "genres": [],
            "rating": None,
            "overview": None,
            "status": "ended",
            "monitored": True,
        }
    ]


@pytest.mark.unit
def test_pick_one_without_parts_asks_for_both():
    candidates = [MovieResult(title="Fargo", year=1996, tmdb_id=275)] * 2

    text = responses.pick_one("series", "delete", "fargo", candidates, parts_known=False)

    assert text.startswith('I found 2 shows matching "fargo":')
    assert "and which seasons or episodes?" in text


@pytest.mark.unit
def test_mutation_failed_prefers_error_detail():
    item = MovieResult(title="Heat", year=1995, tmdb_id=949)

    assert responses.mutation_failed(
        item, "download", MutationResult(success=False, error="rejected")
    ) == 'Sorry, I couldn\'t download "Heat": rejected'
    assert "unknown error" in responses.mutation_failed(
        item, "download", MutationResult(success=False)
    )


@pytest.mark.unit
def test_parts_description():
    parts = PartsSpecification.partial(
        [SeasonSelector(season=1), SeasonSelector(season=2, episodes=[5])]
    )

    assert parts.describe() == "season 1; season 2 episode 5"
    assert PartsSpecification.entire_series().describe() == "the entire series"
