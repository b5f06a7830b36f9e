"""Storage module for Character Forge persistence.

Provides SQLite-based storage for:
- Saved characters
- The campaign NPC library
"""

from __future__ import annotations

from character_forge.storage.database import (
    CHARACTERS_STORE,
    NPCS_STORE,
    Database,
    get_database,
    reset_database,
)


__all__ = [
    "CHARACTERS_STORE",
    "NPCS_STORE",
    "Database",
    "get_database",
    "reset_database",
]
