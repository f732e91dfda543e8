"""
Configuration Tests
"""

import pytest

from scancore.config import ScanCoreConfig, parse_log_level
from scancore.confirmation.engine import ConfirmationConfig


class TestDefaults:

    def test_reference_tuning(self):
        config = ScanCoreConfig()

        assert config.confirmation == ConfirmationConfig()
        assert config.pause_on_confirm is True
        assert config.log_level == "INFO"

    def test_log_level_is_normalized(self):
        assert ScanCoreConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValueError):
            ScanCoreConfig(log_level="chatty")


class TestFromEnv:

    def test_empty_environment_gives_defaults(self):
        assert ScanCoreConfig.from_env({}).to_dict() == ScanCoreConfig().to_dict()

    def test_overrides(self):
        config = ScanCoreConfig.from_env({
            'SCANCORE_CONFIRMATIONS': '3',
            'SCANCORE_WINDOW_MS': ' 1500 ',
            'SCANCORE_COOLDOWN_MS': '2000',
            'SCANCORE_PAUSE_ON_CONFIRM': 'off',
            'SCANCORE_LOG_LEVEL': 'warning',
        })

        assert config.confirmation == ConfirmationConfig(3, 1500, 2000)
        assert config.pause_on_confirm is False
        assert config.log_level == "WARNING"

    def test_blank_values_fall_back(self):
        config = ScanCoreConfig.from_env({'SCANCORE_CONFIRMATIONS': '', 'SCANCORE_LOG_LEVEL': ''})

        assert config.confirmation.confirmations_required == 2
        assert config.log_level == "INFO"

    @pytest.mark.parametrize("env, name", [
        ({'SCANCORE_WINDOW_MS': 'soon'}, 'SCANCORE_WINDOW_MS'),
        ({'SCANCORE_PAUSE_ON_CONFIRM': 'maybe'}, 'SCANCORE_PAUSE_ON_CONFIRM'),
    ])
    def test_bad_values_name_the_variable(self, env, name):
        with pytest.raises(ValueError, match=name):
            ScanCoreConfig.from_env(env)

    def test_non_positive_values_rejected(self):
        with pytest.raises(ValueError, match="cooldown_ms"):
            ScanCoreConfig.from_env({'SCANCORE_COOLDOWN_MS': '0'})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv('SCANCORE_CONFIRMATIONS', '4')
        assert ScanCoreConfig.from_env().confirmation.confirmations_required == 4


class TestResourceBounds:

    def test_defaults(self):
        config = ScanCoreConfig()
        assert (config.audit_max_entries, config.max_sessions,
                config.session_idle_timeout_s) == (1000, 256, 600)

    def test_env_overrides(self):
        config = ScanCoreConfig.from_env({
            'SCANCORE_AUDIT_MAX_ENTRIES': '20',
            'SCANCORE_MAX_SESSIONS': '4',
            'SCANCORE_SESSION_IDLE_S': '30',
        })
        assert (config.audit_max_entries, config.max_sessions,
                config.session_idle_timeout_s) == (20, 4, 30)

    @pytest.mark.parametrize("field_name", [
        'audit_max_entries', 'max_sessions', 'session_idle_timeout_s'
    ])
    @pytest.mark.parametrize("value", [0, -3, True])
    def test_rejects_non_positive(self, field_name, value):
        with pytest.raises(ValueError, match=field_name):
            ScanCoreConfig(**{field_name: value})


def test_parse_log_level():
    assert parse_log_level("warning") == "WARNING"
    with pytest.raises(ValueError):
        parse_log_level("FOO")
