"""Character Forge - 5E SRD character creation and campaign toolkit.

Rules resolution for character creation (ability scores, spellcasting,
equipment, feats, languages), typed access to the bundled SRD rule data,
local persistence for characters and a campaign NPC library.

Example:
    >>> from character_forge import CharacterCreationData, calculate_character_stats
    >>> from character_forge.rules import generate_standard_array
    >>>
    >>> data = CharacterCreationData(
    ...     name="Thorin",
    ...     race_slug="hill-dwarf",
    ...     class_slug="cleric",
    ...     background="Acolyte",
    ...     alignment="Lawful Good",
    ...     abilities=generate_standard_array(),
    ... )
    >>> character = calculate_character_stats(data)
    >>> get_database().add_character(character)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas for rule data, characters and NPCs.
    data: Bundled SRD JSON and the RulesRepository.
    rules: Derived stats, validation and character assembly.
    storage: SQLite persistence for characters and NPCs.
    npcs: NPC library manager and random NPC generation.
"""

from __future__ import annotations

# Core
from character_forge.core.config import Settings, get_settings
from character_forge.core.exceptions import CharacterForgeError
from character_forge.core.logging import configure_logging, get_logger

# Rule data
from character_forge.data import RulesRepository, get_repository

# Models
from character_forge.models import (
    NPC,
    Ability,
    Character,
    CharacterCreationData,
    Skill,
    SpellSelectionData,
)

# NPC library
from character_forge.npcs import NPCManager, generate_complete_npc

# Rules
from character_forge.rules import calculate_character_stats

# Storage
from character_forge.storage import Database, get_database


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "CharacterForgeError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Rule data
    "RulesRepository",
    "get_repository",
    # Models
    "Ability",
    "Skill",
    "Character",
    "CharacterCreationData",
    "SpellSelectionData",
    "NPC",
    # Rules
    "calculate_character_stats",
    # Storage
    "Database",
    "get_database",
    # NPCs
    "NPCManager",
    "generate_complete_npc",
]
