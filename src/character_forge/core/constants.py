"""Application-wide constants for Character Forge.

This module defines the published rules constants used by the rules engine:
ability-score generation, armor class, and character limits.
"""

from __future__ import annotations

# =============================================================================
# Ability Score Limits
# =============================================================================

PC_ABILITY_SCORE_CAP = 20
"""Maximum ability score for player characters."""

MIN_ABILITY_SCORE = 1
"""Minimum ability score."""

UNASSIGNED_ABILITY_SCORE = 10
"""Score assumed for an ability the player has not assigned yet."""

# =============================================================================
# Point Buy Constants (PHB p.13)
# =============================================================================

POINT_BUY_TOTAL = 27
"""Total points available for point buy character creation."""

POINT_BUY_MIN = 8
"""Minimum ability score in point buy."""

POINT_BUY_MAX = 15
"""Maximum ability score in point buy (before racial bonuses)."""

POINT_BUY_COSTS = {
    8: 0,
    9: 1,
    10: 2,
    11: 3,
    12: 4,
    13: 5,
    14: 7,
    15: 9,
}

# =============================================================================
# Standard Array (PHB p.13)
# =============================================================================

STANDARD_ARRAY = (15, 14, 13, 12, 10, 8)
"""Standard array values for ability scores."""

# =============================================================================
# Armor Class
# =============================================================================

BASE_ARMOR_CLASS = 10
"""Armor class of an unarmored character before DEX."""

SHIELD_AC_BONUS = 2
"""AC bonus provided by equipping a shield."""

MAX_DEX_BONUS_MEDIUM_ARMOR = 2
"""DEX bonus cap when wearing medium armor."""

# =============================================================================
# Character Limits
# =============================================================================

MIN_LEVEL = 1
MAX_LEVEL = 20

SPELL_SLOT_LEVELS = 10
"""Length of a normalized spell slot list (index 0 is the cantrip placeholder)."""
