"""Tests for configuration module."""

import os
from unittest.mock import patch

from vbcompetitions import config
from vbcompetitions.config import get_settings


class TestConfigHelpers:
    """Tests for configuration helper functions."""

    def test_get_int_default(self):
        """Default value when environment variable not set."""
        with patch.dict(os.environ, {}, clear=False):
            assert config._get_int('VBC_NONEXISTENT_VAR', 42) == 42

    def test_get_int_from_env(self):
        """Parse integer from environment variable."""
        with patch.dict(os.environ, {'VBC_TEST_INT': '100'}, clear=False):
            assert config._get_int('VBC_TEST_INT', 42) == 100

    def test_get_int_invalid_value(self):
        """Handle non-integer values gracefully."""
        with patch.dict(os.environ, {'VBC_TEST_INT': 'wide'}, clear=False):
            assert config._get_int('VBC_TEST_INT', 42) == 42

    def test_get_bool_true_variants(self):
        """Test 'true', '1', 'yes' variants."""
        for value in ['true', 'True', 'TRUE', '1', 'yes', 'YES']:
            with patch.dict(os.environ, {'VBC_TEST_BOOL': value}, clear=False):
                assert config._get_bool('VBC_TEST_BOOL', False) is True, f"Failed for value: {value}"

    def test_get_bool_false_variants(self):
        """Anything else is false."""
        for value in ['false', '0', 'no', 'off', 'anything_else']:
            with patch.dict(os.environ, {'VBC_TEST_BOOL': value}, clear=False):
                assert config._get_bool('VBC_TEST_BOOL', True) is False, f"Failed for value: {value}"

    def test_get_str_from_env(self):
        """Get string from environment variable."""
        with patch.dict(os.environ, {'VBC_TEST_STR': 'DEBUG'}, clear=False):
            assert config._get_str('VBC_TEST_STR', 'WARNING') == 'DEBUG'


class TestSettings:
    """Tests for the environment-driven settings snapshot."""

    def test_defaults(self, monkeypatch):
        """Settings fall back to their defaults."""
        for key in ('VBC_LOG_LEVEL', 'VBC_VALIDATE_REFERENCES', 'VBC_TABLE_NAME_WIDTH'):
            monkeypatch.delenv(key, raising=False)

        settings = get_settings()

        assert settings.LOG_LEVEL == 'WARNING'
        assert settings.VALIDATE_REFERENCES is True
        assert settings.TABLE_NAME_WIDTH == 24

    def test_environment_overrides(self, monkeypatch):
        """Environment variables override the defaults."""
        monkeypatch.setenv('VBC_LOG_LEVEL', 'DEBUG')
        monkeypatch.setenv('VBC_VALIDATE_REFERENCES', 'false')
        monkeypatch.setenv('VBC_TABLE_NAME_WIDTH', '12')

        settings = get_settings()

        assert settings.LOG_LEVEL == 'DEBUG'
        assert settings.VALIDATE_REFERENCES is False
        assert settings.TABLE_NAME_WIDTH == 12

    def test_settings_cached(self):
        """get_settings reads the environment once."""
        assert get_settings() is get_settings()


class TestConfigValues:
    """Tests for configuration constants."""

    def test_all_config_values_exist(self):
        """All expected config values are defined."""
        for name in (
            'SUPPORTED_VERSION',
            'UNKNOWN_TEAM_ID',
            'UNKNOWN_TEAM_NAME',
            'MAX_ID_LENGTH',
            'MAX_NAME_LENGTH',
            'DEFAULT_MATCH_DATE',
            'DEFAULT_MATCH_START',
        ):
            assert hasattr(config, name), f"Missing config value: {name}"

    def test_environment_settings_only_on_snapshot(self):
        """Environment-driven values are read through get_settings(), not module constants."""
        for name in ('VALIDATE_REFERENCES', 'LOG_LEVEL', 'TABLE_NAME_WIDTH'):
            assert not hasattr(config, name)
            assert hasattr(get_settings(), name)

    def test_supported_version(self):
        """Only version 1.0.0 documents are supported."""
        assert config.SUPPORTED_VERSION == '1.0.0'
