"""Custom exception hierarchy for Character Forge.

This module defines the exception hierarchy used across the rules engine,
the rule-data loader and the local persistence layer. All exceptions
inherit from CharacterForgeError, enabling unified error handling at the
application boundary while preserving domain-specific context.

User-facing rules validation (spell counts, point-buy budgets, equipment
conflicts) is reported through result objects, not exceptions. These
exceptions cover programming errors, bad rule data and storage failures.

Example:
    >>> from character_forge.core.exceptions import UnknownSlugError
    >>> raise UnknownSlugError("No such class", slug="artificer", kind="class")
"""

from __future__ import annotations

from typing import Any


class CharacterForgeError(Exception):
    """Base exception for all Character Forge errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Rule Data Exceptions
# =============================================================================


class RulesDataError(CharacterForgeError):
    """Base exception for problems with the bundled rule data.

    Raised when reference tables (spells, classes, equipment, ...) cannot be
    read or do not have the expected shape.
    """

    def __init__(
        self,
        message: str,
        *,
        source_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize rule data error with source file context.

        Args:
            message: Human-readable error description.
            source_file: Data file that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if source_file:
            combined_details["source_file"] = source_file
        super().__init__(message, details=combined_details)


class DataLoadError(RulesDataError):
    """Raised when a rule data file is missing or is not valid JSON."""


class UnknownSlugError(RulesDataError):
    """Raised when a slug does not resolve to any reference record."""

    def __init__(
        self,
        message: str,
        *,
        slug: str | None = None,
        kind: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize unknown slug error.

        Args:
            message: Human-readable error description.
            slug: The slug that failed to resolve.
            kind: Kind of record looked up (spell, class, equipment, ...).
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if slug is not None:
            combined_details["slug"] = slug
        if kind:
            combined_details["kind"] = kind
        super().__init__(message, details=combined_details)


# =============================================================================
# Rules Engine Exceptions
# =============================================================================


class RulesError(CharacterForgeError):
    """Base exception for rules-resolution errors."""


class CharacterBuildError(RulesError):
    """Raised when creation data cannot be turned into a character.

    This typically occurs when the wizard state references a race or class
    that is not present in the rule data.
    """

    def __init__(
        self,
        message: str,
        *,
        missing: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize character build error.

        Args:
            message: Human-readable error description.
            missing: Names of the creation inputs that could not be resolved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if missing:
            combined_details["missing"] = missing
        super().__init__(message, details=combined_details)


class EquipmentConflictError(RulesError):
    """Raised when an item is force-equipped despite a rules conflict."""

    def __init__(
        self,
        message: str,
        *,
        equipment_slug: str | None = None,
        conflicts: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize equipment conflict error.

        Args:
            message: Human-readable error description.
            equipment_slug: The item that could not be equipped.
            conflicts: Slugs of the equipped items in conflict.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if equipment_slug:
            combined_details["equipment_slug"] = equipment_slug
        if conflicts:
            combined_details["conflicts"] = conflicts
        super().__init__(message, details=combined_details)


class DiceRollError(RulesError):
    """Raised when a dice expression cannot be parsed or rolled."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error.

        Args:
            message: Human-readable error description.
            expression: The dice expression that failed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression is not None:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage Exceptions
# =============================================================================


class StorageError(CharacterForgeError):
    """Raised when a local persistence operation fails."""

    def __init__(
        self,
        message: str,
        *,
        store: str | None = None,
        record_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error.

        Args:
            message: Human-readable error description.
            store: Name of the store involved (characters, npcs).
            record_id: Identifier of the record involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if store:
            combined_details["store"] = store
        if record_id:
            combined_details["record_id"] = record_id
        super().__init__(message, details=combined_details)


class DatabaseUpgradeError(StorageError):
    """Raised when the on-disk schema version does not match this release."""


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(CharacterForgeError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(CharacterForgeError):
    """Raised when data validation fails.

    This includes schema validation errors, constraint violations,
    or type mismatches in user input or stored documents.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    "CharacterForgeError",
    # Rule data
    "RulesDataError",
    "DataLoadError",
    "UnknownSlugError",
    # Rules engine
    "RulesError",
    "CharacterBuildError",
    "EquipmentConflictError",
    "DiceRollError",
    # Storage
    "StorageError",
    "DatabaseUpgradeError",
    # Configuration
    "ConfigurationError",
    "ValidationError",
]
