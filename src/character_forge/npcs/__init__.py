"""Campaign NPC library: management and random generation."""

from __future__ import annotations

from character_forge.npcs.generator import (
    generate_complete_npc,
    generate_random_ability_scores,
    generate_random_name,
)
from character_forge.npcs.manager import LOAD_FAILURE_MESSAGE, NPCManager


__all__ = [
    "LOAD_FAILURE_MESSAGE",
    "NPCManager",
    "generate_complete_npc",
    "generate_random_ability_scores",
    "generate_random_name",
]
