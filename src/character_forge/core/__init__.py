"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        CharacterForgeError: Base exception for all application errors.
        RulesDataError, DataLoadError, UnknownSlugError: Rule data errors.
        RulesError, CharacterBuildError, EquipmentConflictError,
        DiceRollError: Rules errors.
        StorageError, DatabaseUpgradeError: Persistence errors.
        ConfigurationError, ValidationError: Configuration/validation errors.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        log_context: Bind logging context for a block.
"""

from __future__ import annotations

from character_forge.core.config import (
    RulesSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from character_forge.core.exceptions import (
    CharacterBuildError,
    CharacterForgeError,
    ConfigurationError,
    DatabaseUpgradeError,
    DataLoadError,
    DiceRollError,
    EquipmentConflictError,
    RulesDataError,
    RulesError,
    StorageError,
    UnknownSlugError,
    ValidationError,
)
from character_forge.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    log_context,
)


__all__ = [
    # Base exception
    "CharacterForgeError",
    # Rule data exceptions
    "RulesDataError",
    "DataLoadError",
    "UnknownSlugError",
    # Rules exceptions
    "RulesError",
    "CharacterBuildError",
    "DiceRollError",
    "EquipmentConflictError",
    # Storage exceptions
    "StorageError",
    "DatabaseUpgradeError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "StorageSettings",
    "RulesSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "log_context",
]
