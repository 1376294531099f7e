"""Pytest configuration and fixtures."""

from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest

from media_concierge.config import ConfigManager
from media_concierge.core.interfaces import ILLMService, IRadarrService, ISonarrService
from media_concierge.core.models import (
    LibraryMovie,
    LibrarySeries,
    MovieResult,
    MutationResult,
    SeriesResult,
)
from media_concierge.core.services import InMemorySessionStore, RequestParser
from media_concierge.infrastructure import Container


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without network access")
    config.addinivalue_line("markers", "integration: tests that wire the full container")


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary configuration file."""
    config_content = """
llm:
  provider: "openai"
  model: "gpt-4o"
  reasoning_model: "gpt-4o-mini"
  api_key: "test-key"

radarr:
  enabled: true
  url: "http://localhost:7878/"
  api_key: "test-radarr-key"
  default_profile:
    quality_profile_id: 1
    root_folder_path: "/movies"

sonarr:
  enabled: true
  url: "http://localhost:8989"
  api_key: "test-sonarr-key"
  default_profile:
    quality_profile_id: 2
    root_folder_path: "/tv"

session:
  ttl_minutes: 30
  max_search_results: 5
  cleanup_interval_seconds: 60

retry:
  max_attempts: 2
  base_delay_seconds: 0
  max_delay_seconds: 0
  timeout_seconds: 5
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def config_manager(temp_config_file):
    """Create a configuration manager with test config."""
    return ConfigManager(temp_config_file)


@pytest.fixture
def config(config_manager):
    """Load test configuration."""
    return config_manager.load_config()


@pytest.fixture
def container(config_manager):
    """Create a test container."""
    return Container(config_manager)


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_store(config, clock):
    """In-memory store driven by the fake clock."""
    return InMemorySessionStore(config, clock=clock)


@pytest.fixture
def mock_llm_service():
    """LLM mock whose parsers find nothing unless a test says otherwise."""
    llm = MagicMock(spec=ILLMService)
    llm.classify_intent = AsyncMock()
    llm.classify_media_kind = AsyncMock()
    llm.detect_topic_continuity = AsyncMock(return_value="CONTINUE")
    llm.extract_search_query = AsyncMock(return_value="")
    llm.parse_selection_reference = AsyncMock(return_value=None)
    llm.parse_parts = AsyncMock(return_value=None)
    llm.generate_response = AsyncMock(return_value="Here you go.")
    return llm


@pytest.fixture
def mock_radarr_service():
    """Mock Radarr service."""
    radarr = MagicMock(spec=IRadarrService)
    radarr.search_movies = AsyncMock(return_value=[])
    radarr.get_library_movies = AsyncMock(return_value=[])
    radarr.monitor_and_download_movie = AsyncMock(
        return_value=MutationResult(success=True, added=True, search_triggered=True)
    )
    radarr.unmonitor_and_delete_movie = AsyncMock(
        return_value=MutationResult(success=True, deleted=True)
    )
    radarr.get_downloading_movies = AsyncMock(return_value=[])
    radarr.get_system_status = AsyncMock(return_value={"version": "5.0.0"})
    radarr.is_available = MagicMock(return_value=True)
    return radarr


@pytest.fixture
def mock_sonarr_service():
    """Mock Sonarr service."""
    sonarr = MagicMock(spec=ISonarrService)
    sonarr.search_series = AsyncMock(return_value=[])
    sonarr.get_library_series = AsyncMock(return_value=[])
    sonarr.monitor_and_download_series = AsyncMock(
        return_value=MutationResult(success=True, search_triggered=True)
    )
    sonarr.unmonitor_and_delete_series = AsyncMock(
        return_value=MutationResult(success=True, deleted=True)
    )
    sonarr.get_downloading_episodes = AsyncMock(return_value=[])
    sonarr.get_system_status = AsyncMock(return_value={"version": "4.0.0"})
    sonarr.is_available = MagicMock(return_value=True)
    return sonarr


@pytest.fixture
def request_parser(mock_llm_service):
    return RequestParser(mock_llm_service)


@pytest.fixture
def matrix_movies() -> List[MovieResult]:
    """Lookup results for "the matrix"."""
    return [
        MovieResult(
            title="The Matrix",
            year=1999,
            tmdb_id=603,
            images=[{"coverType": "poster", "remoteUrl": "https://img/matrix.jpg"}],
        ),
        MovieResult(title="The Matrix Reloaded", year=2003, tmdb_id=604),
        MovieResult(title="The Matrix Resurrections", year=2021, tmdb_id=624860),
    ]


@pytest.fixture
def matrix_series() -> List[SeriesResult]:
    """Three shows sharing a title, distinguishable by year."""
    return [
        SeriesResult(title="The Matrix", year=1993, tvdb_id=1001),
        SeriesResult(title="The Matrix", year=1999, tvdb_id=1002),
        SeriesResult(title="The Matrix", year=2020, tvdb_id=1003),
    ]


@pytest.fixture
def library_movie() -> LibraryMovie:
    return LibraryMovie(title="Heat", year=1995, tmdb_id=949, id=12, has_file=True)


@pytest.fixture
def office_library() -> List[LibrarySeries]:
    return [
        LibrarySeries(title="The Office", year=2001, tvdb_id=78107, id=3),
        LibrarySeries(title="The Office", year=2005, tvdb_id=73244, id=4),
    ]
