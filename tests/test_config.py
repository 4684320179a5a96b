"""
Tests for configuration management

Ensures settings load from the environment with sane defaults.
"""
import os
from unittest.mock import patch

import config as cfg
from config import DEFAULT_URL, ClientSettings, get_config


class TestClientSettings:
    """Test configuration loading."""

    def test_defaults(self):
        """Test settings load without any environment."""
        settings = ClientSettings(_env_file=None)
        assert settings.app_id == ""
        assert settings.user_key == ""
        assert settings.url == DEFAULT_URL
        assert settings.log_level == "WARNING"
        assert settings.debug is False

    def test_loads_prefixed_environment(self):
        with patch.dict(os.environ, {
            'PANDORABOTS_APP_ID': 'app',
            'PANDORABOTS_USER_KEY': 'key',
            'PANDORABOTS_URL': 'http://localhost:8080',
            'PANDORABOTS_DEBUG': 'true',
        }):
            settings = ClientSettings(_env_file=None)
        assert settings.app_id == 'app'
        assert settings.user_key == 'key'
        assert settings.url == 'http://localhost:8080'
        assert settings.debug is True

    def test_unprefixed_variables_ignored(self):
        with patch.dict(os.environ, {'APP_ID': 'other'}):
            assert ClientSettings(_env_file=None).app_id == ""


class TestGetConfig:
    """Test the settings singleton."""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reset_rebuilds(self):
        first = get_config()
        cfg._config = None
        assert get_config() is not first
