"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Character Forge test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from character_forge.data import RulesRepository
    from character_forge.models import Character, CharacterCreationData
    from character_forge.storage import Database


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings, repository and database singletons around each test."""
    from character_forge.core.config import clear_settings_cache
    from character_forge.data import get_repository
    from character_forge.storage import reset_database

    clear_settings_cache()
    get_repository.cache_clear()
    reset_database()
    yield
    clear_settings_cache()
    get_repository.cache_clear()
    reset_database()


@pytest.fixture(autouse=True)
def isolated_database_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the configured database at a per-test temporary file.

    Returns:
        Path of the temporary database file.
    """
    db_path = tmp_path / "store" / "character_forge.db"
    monkeypatch.setenv("CHARACTER_FORGE_DATABASE_PATH", str(db_path))
    return db_path


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "CHARACTER_FORGE_DEBUG": "true",
        "CHARACTER_FORGE_LOG_LEVEL": "DEBUG",
        "CHARACTER_FORGE_RULES_POINT_BUY_BUDGET": "30",
        "CHARACTER_FORGE_RULES_DEFAULT_EDITION": "2024",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Rule Data Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def repository() -> RulesRepository:
    """Repository over the bundled SRD data, shared across the session.

    Returns:
        RulesRepository reading the packaged JSON files.
    """
    from character_forge.data import RulesRepository

    return RulesRepository()


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def standard_scores() -> dict:
    """Standard array assigned in a fighter-friendly order.

    Returns:
        Raw ability scores keyed by Ability.
    """
    from character_forge.models import Ability

    return {
        Ability.STR: 15,
        Ability.DEX: 14,
        Ability.CON: 13,
        Ability.INT: 8,
        Ability.WIS: 12,
        Ability.CHA: 10,
    }


@pytest.fixture
def sample_creation_data(standard_scores: dict) -> CharacterCreationData:
    """Completed wizard inputs for a 1st-level hill dwarf fighter.

    Returns:
        CharacterCreationData ready for the builder.
    """
    from character_forge.models import CharacterCreationData, Skill

    return CharacterCreationData(
        name="Thorin",
        level=1,
        race_slug="hill-dwarf",
        class_slug="fighter",
        abilities=standard_scores,
        background="Soldier",
        alignment="Lawful Good",
        selected_skills=[Skill.PERCEPTION, Skill.SURVIVAL],
        selected_fighting_style="Defense",
        personality="I face problems head-on.",
    )


@pytest.fixture
def wizard_creation_data() -> CharacterCreationData:
    """Completed wizard inputs for a 1st-level high elf wizard.

    Returns:
        CharacterCreationData with INT as the top score.
    """
    from character_forge.models import Ability, CharacterCreationData, Skill

    return CharacterCreationData(
        name="Elaria",
        race_slug="high-elf",
        class_slug="wizard",
        abilities={
            Ability.STR: 8,
            Ability.DEX: 14,
            Ability.CON: 13,
            Ability.INT: 15,
            Ability.WIS: 12,
            Ability.CHA: 10,
        },
        background="Sage",
        alignment="Neutral Good",
        selected_skills=[Skill.ARCANA, Skill.INVESTIGATION],
    )


@pytest.fixture
def sample_character(sample_creation_data: CharacterCreationData, repository: RulesRepository) -> Character:
    """A built character from :func:`sample_creation_data`.

    Returns:
        Character assembled by the rules builder.
    """
    from character_forge.rules.builder import calculate_character_stats

    return calculate_character_stats(sample_creation_data, repository)


@pytest.fixture
def database(isolated_database_path: Path) -> Database:
    """A fresh database in the test's temporary directory.

    Returns:
        Database instance.
    """
    from character_forge.storage import Database

    return Database(isolated_database_path)
