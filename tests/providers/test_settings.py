"""
Tests for comicshelf settings.
"""

import pytest

from comicshelf.providers.settings import ComicShelfSettings, get_settings, reset_settings


class TestComicShelfSettings:
    """Test configuration loading."""

    def test_defaults(self, monkeypatch):
        """It should provide sensible defaults."""
        for name in ("COMICVINE_TIMEOUT", "COMICSHELF_CACHE_TTL", "COMICSHELF_BATCH_SIZE", "COMICSHELF_BATCH_DELAY"):
            monkeypatch.delenv(name, raising=False)
        settings = ComicShelfSettings(_env_file=None)
        assert settings.comicvine_base_url == "https://comicvine.gamespot.com/api"
        assert settings.comicvine_timeout == 20.0
        assert settings.cache_ttl == 3600
        assert settings.batch_size == 5
        assert settings.batch_delay == 0.2

    def test_environment_overrides(self, mock_env_vars):
        """It should read values from the environment."""
        settings = get_settings()
        assert settings.comicvine_api_key == "test_api_key_12345"
        assert settings.batch_delay == 0
        assert settings.database_url == mock_env_vars["COMICSHELF_DATABASE_URL"]
        assert settings.validate_comicvine_config()

    def test_to_dict_redacts_key(self, mock_env_vars):
        """It should never expose the API key."""
        assert get_settings().to_dict()["comicvine_api_key"] == "[REDACTED]"

    def test_singleton(self, mock_env_vars):
        """It should return the same instance until reset."""
        first = get_settings()
        assert get_settings() is first
        reset_settings()
        assert get_settings() is not first

    def test_rejects_invalid_batch_size(self, monkeypatch):
        """It should validate numeric bounds."""
        monkeypatch.setenv("COMICSHELF_BATCH_SIZE", "0")
        with pytest.raises(ValueError):
            ComicShelfSettings(_env_file=None)
