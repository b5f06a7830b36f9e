"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from character_forge.core.config import (
    RulesSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from character_forge.core.exceptions import ConfigurationError


class TestStorageSettings:
    """Tests for StorageSettings configuration."""

    def test_database_path_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the database path is read from the environment."""
        db_path = tmp_path / "custom.db"
        monkeypatch.setenv("CHARACTER_FORGE_DATABASE_PATH", str(db_path))

        settings = StorageSettings()

        assert settings.database_path == db_path

    def test_home_is_expanded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a leading ~ is expanded."""
        monkeypatch.setenv("CHARACTER_FORGE_DATABASE_PATH", "~/forge/test.db")

        settings = StorageSettings()

        assert "~" not in str(settings.database_path)
        assert settings.database_path.name == "test.db"


class TestRulesSettings:
    """Tests for RulesSettings configuration."""

    def test_default_values(self) -> None:
        """Test default rules settings."""
        settings = RulesSettings()

        assert settings.data_path is None
        assert settings.default_edition == "2014"
        assert settings.point_buy_budget == 27
        assert settings.max_equipped_weapons == 2

    def test_missing_data_path_rejected(self, tmp_path: Path) -> None:
        """Test that a data_path override must exist."""
        with pytest.raises(ConfigurationError) as exc_info:
            RulesSettings(data_path=tmp_path / "missing")

        assert "data_path" in str(exc_info.value)

    def test_existing_data_path_accepted(self, tmp_path: Path) -> None:
        """Test an existing directory is accepted."""
        settings = RulesSettings(data_path=tmp_path)

        assert settings.data_path == tmp_path


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default settings initialization."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.app_name == "Character Forge"
        assert settings.app_version == "0.1.0"
        assert settings.debug is False
        assert settings.log_level == "INFO"

    def test_env_overrides(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        mock_env_vars: dict[str, str],
    ) -> None:
        """Test environment variables override defaults."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.rules.point_buy_budget == 30
        assert settings.rules.default_edition == "2024"

    def test_is_production_property(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test is_production property."""
        monkeypatch.setenv("CHARACTER_FORGE_DEBUG", "false")
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.is_production is True


class TestGetSettings:
    """Tests for get_settings singleton function."""

    def test_returns_cached_instance(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that get_settings returns the same instance."""
        monkeypatch.chdir(tmp_path)

        assert get_settings() is get_settings()

    def test_clear_cache_reloads(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that clearing the cache picks up new environment values."""
        monkeypatch.chdir(tmp_path)
        first = get_settings()

        monkeypatch.setenv("CHARACTER_FORGE_LOG_LEVEL", "ERROR")
        clear_settings_cache()
        second = get_settings()

        assert first is not second
        assert second.log_level == "ERROR"

    def test_invalid_value_raises_configuration_error(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test invalid configuration is reported as ConfigurationError."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CHARACTER_FORGE_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError):
            get_settings()
