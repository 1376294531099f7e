"""Test configuration management."""

from pathlib import Path

import pytest

from media_concierge.config import Config, ConfigManager


def test_config_manager_loads_config(config_manager, temp_config_file):
    """Test that config manager loads configuration correctly."""
    config = config_manager.load_config()

    assert isinstance(config, Config)
    assert config.llm.provider == "openai"
    assert config.llm.model == "gpt-4o"
    assert config.llm.classification_model == "gpt-4o-mini"
    assert config.sonarr.default_profile.root_folder_path == "/tv"
    assert config.session.max_search_results == 5


def test_config_manager_caches_config(config_manager):
    """Test that config manager caches loaded configuration."""
    config1 = config_manager.load_config()
    config2 = config_manager.get_config()

    assert config1 is config2


def test_config_manager_reload_config(config_manager):
    """Test that config manager can reload configuration."""
    config1 = config_manager.load_config()
    config2 = config_manager.reload_config()

    assert config1 is not config2
    assert config1.llm.provider == config2.llm.provider


def test_config_manager_missing_file():
    """Test that config manager raises error for missing file."""
    config_manager = ConfigManager(Path("nonexistent.yaml"))

    with pytest.raises(FileNotFoundError):
        config_manager.load_config()


def test_config_validation_invalid_provider(tmp_path):
    """Test config validation with invalid LLM provider."""
    config_content = """
llm:
  provider: "invalid"
  model: "test"
  api_key: "test"
radarr:
  url: "http://test"
  api_key: "test"
  default_profile:
    quality_profile_id: 1
    root_folder_path: "/test"
sonarr:
  url: "http://test"
  api_key: "test"
  default_profile:
    quality_profile_id: 1
    root_folder_path: "/test"
"""
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text(config_content)

    config_manager = ConfigManager(config_file)

    with pytest.raises(ValueError, match="Configuration validation failed"):
        config_manager.load_config()


def test_config_defaults_and_normalization(config):
    """Optional sections fall back to defaults and URLs lose trailing slashes."""
    assert config.radarr.url == "http://localhost:7878"
    assert config.session.ttl_seconds == 30 * 60
    assert config.app.default_user_id == "local"
    assert config.logging.level == "INFO"
    assert config.retry.max_attempts == 2


def test_api_key_expands_environment(tmp_path, monkeypatch):
    """API keys referenced as ${VAR} are expanded when loading."""
    monkeypatch.setenv("TEST_SONARR_KEY", "from-env")
    output_path = tmp_path / "config.yaml"
    ConfigManager.create_default_config(output_path)
    content = output_path.read_text().replace("${SONARR_API_KEY}", "${TEST_SONARR_KEY}")
    output_path.write_text(content)

    config = ConfigManager(output_path).load_config()

    assert config.sonarr.api_key == "from-env"


def test_config_found_through_environment_variable(temp_config_file, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path.parent)
    monkeypatch.setenv("MEDIA_CONCIERGE_CONFIG", str(temp_config_file))

    config = ConfigManager().load_config()

    assert config.sonarr.url == "http://localhost:8989"


def test_create_default_config(tmp_path):
    """Test creating default configuration file."""
    output_path = tmp_path / "default_config.yaml"

    ConfigManager.create_default_config(output_path)

    assert output_path.exists()

    # Should be able to load the created config
    config_manager = ConfigManager(output_path)
    config = config_manager.load_config()
    assert isinstance(config, Config)
    assert config.session.max_search_results == 10


def test_validate_config_file(config_manager, temp_config_file, tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("- just\n- a list\n")

    assert config_manager.validate_config_file(temp_config_file) is True
    assert config_manager.validate_config_file(broken) is False
