"""Unit tests for ObservabilitySettings and get_settings."""

import pytest

from obskit.config import get_settings, reload_settings
from obskit.config.settings import ObservabilitySettings, normalize_level


@pytest.fixture(autouse=True)
def no_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)


class TestObservabilitySettings:
    """Tests for ObservabilitySettings model."""

    def test_default_values(self) -> None:
        """Settings has sensible defaults."""
        settings = ObservabilitySettings()
        assert settings.log_level == "info"
        assert settings.log_format == "json"

    def test_env_var_overrides(self, env_override) -> None:
        """LOG_LEVEL and LOG_FORMAT override defaults."""
        with env_override({"LOG_LEVEL": "debug", "LOG_FORMAT": "console"}):
            settings = ObservabilitySettings()
            assert settings.log_level == "debug"
            assert settings.log_format == "console"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("TRACE", "trace"),
            (" warn ", "warn"),
            ("WARNING", "warn"),
            ("critical", "fatal"),
            ("verbose", "info"),
            ("", "info"),
        ],
    )
    def test_log_level_normalisation(self, env_override, raw: str, expected: str) -> None:
        """Only recognised level names override the default."""
        with env_override({"LOG_LEVEL": raw}):
            assert ObservabilitySettings().log_level == expected

    def test_unknown_format_falls_back_to_json(self, env_override) -> None:
        with env_override({"LOG_FORMAT": "xml"}):
            assert ObservabilitySettings().log_format == "json"


class TestNormalizeLevel:
    def test_returns_none_for_non_strings(self) -> None:
        assert normalize_level(None) is None
        assert normalize_level(30) is None


class TestGetSettings:
    """Tests for get_settings function."""

    def test_returns_cached_instance(self) -> None:
        """get_settings returns the same instance on repeated calls."""
        assert get_settings() is get_settings()

    def test_reload_reads_environment_again(self, env_override) -> None:
        """reload_settings picks up environment changes."""
        assert get_settings().log_level == "info"

        with env_override({"LOG_LEVEL": "error"}):
            assert get_settings().log_level == "info"
            assert reload_settings().log_level == "error"
