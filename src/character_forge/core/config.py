"""Configuration management for Character Forge.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and
runtime configuration overrides.

Example:
    >>> from character_forge.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.point_buy_budget
    27

Environment Variables:
    CHARACTER_FORGE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    CHARACTER_FORGE_DATABASE_PATH: Path to the SQLite file holding saved characters/NPCs
    CHARACTER_FORGE_RULES_DATA_PATH: Directory overriding the bundled rule data
    CHARACTER_FORGE_RULES_DEFAULT_EDITION: Default rules edition ("2014" or "2024")
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from character_forge.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Configuration for local persistence.

    Attributes:
        database_path: Path to the SQLite database file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARACTER_FORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path.home() / ".character_forge" / "character_forge.db",
        description="Path to SQLite database",
    )

    @field_validator("database_path", mode="after")
    @classmethod
    def expand_database_path(cls, value: Path) -> Path:
        """Expand a leading ``~`` in the configured path."""
        return value.expanduser()


class RulesSettings(BaseSettings):
    """Configuration for the rules engine and rule data.

    Attributes:
        data_path: Optional directory with rule JSON files replacing the
            bundled SRD data.
        default_edition: Rules edition used when a caller does not pick one.
        point_buy_budget: Points available for point-buy ability scores.
        max_equipped_weapons: Number of weapons that may be equipped at once.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARACTER_FORGE_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_path: Path | None = Field(
        default=None,
        description="Override directory for rule data JSON",
    )
    default_edition: Literal["2014", "2024"] = Field(
        default="2014",
        description="Default rules edition",
    )
    point_buy_budget: int = Field(
        default=27,
        ge=1,
        le=60,
        description="Point-buy budget",
    )
    max_equipped_weapons: int = Field(
        default=2,
        ge=1,
        le=4,
        description="Maximum simultaneously equipped weapons",
    )

    @model_validator(mode="after")
    def validate_data_path(self) -> "RulesSettings":
        """Ensure an overridden data directory actually exists.

        Raises:
            ConfigurationError: If data_path is set but is not a directory.
        """
        if self.data_path is not None and not self.data_path.is_dir():
            raise ConfigurationError(
                f"Rule data directory does not exist: {self.data_path}",
                config_key="data_path",
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        log_file: Optional file that also receives standard library log records.
        storage: Local persistence settings.
        rules: Rules engine settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARACTER_FORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Character Forge",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    rules: RulesSettings = Field(default_factory=RulesSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If required configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "StorageSettings",
    "RulesSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
