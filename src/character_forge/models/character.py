"""Saved character models.

A :class:`Character` is the fully resolved character sheet produced by the
rules builder and persisted to local storage. Unlike reference data it is
mutable: sheet edits, level ups and equipment changes update it in place.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from character_forge.core.constants import SPELL_SLOT_LEVELS
from character_forge.models.enums import Ability, Skill, SpellcastingType


def _utcnow_iso() -> str:
    return datetime.now().isoformat()


class CharacterModel(BaseModel):
    """Base for saved-document models."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )


# =============================================================================
# Sheet Components
# =============================================================================


class AbilityScore(CharacterModel):
    """A final ability score with its modifier."""

    score: int = Field(ge=1, le=30)
    modifier: int


class SkillValue(CharacterModel):
    """A skill total and whether the character is proficient."""

    value: int
    proficient: bool = False


class HitDice(CharacterModel):
    """Hit dice pool."""

    current: int = Field(ge=0)
    max: int = Field(ge=1)
    die_type: int = Field(default=8, ge=4, le=12)


class FeaturesAndTraits(CharacterModel):
    """Personality text plus class features and racial traits."""

    personality: str = ""
    ideals: str = ""
    bonds: str = ""
    flaws: str = ""
    class_features: list[str] = Field(default_factory=list)
    racial_traits: list[str] = Field(default_factory=list)


class SpellcastingState(CharacterModel):
    """Spellcasting state of a saved character.

    ``spell_slots`` and ``used_spell_slots`` use index 0 as the cantrip
    placeholder; index N holds the slots of spell level N.
    """

    ability: Ability
    spell_save_dc: int
    spell_attack_bonus: int
    cantrips_known: list[str] = Field(default_factory=list)
    spells_known: list[str] | None = None
    spellbook: list[str] | None = None
    prepared_spells: list[str] | None = None
    spell_slots: list[int] = Field(default_factory=lambda: [0] * SPELL_SLOT_LEVELS)
    used_spell_slots: list[int] = Field(default_factory=lambda: [0] * SPELL_SLOT_LEVELS)
    spellcasting_type: SpellcastingType
    cantrip_choices_by_level: dict[int, str] = Field(default_factory=dict)
    spell_choices_by_level: dict[int, str] = Field(default_factory=dict)

    @field_validator("ability")
    @classmethod
    def validate_casting_ability(cls, value: Ability) -> Ability:
        """Spellcasting always keys off a mental ability."""
        if value not in (Ability.INT, Ability.WIS, Ability.CHA):
            msg = f"Spellcasting ability must be INT, WIS or CHA, got {value}"
            raise ValueError(msg)
        return value

    def available_slots(self, spell_level: int) -> int:
        """Unused slots of the given spell level."""
        if not 1 <= spell_level < len(self.spell_slots):
            return 0
        used = self.used_spell_slots[spell_level] if spell_level < len(self.used_spell_slots) else 0
        return max(0, self.spell_slots[spell_level] - used)


class SrdFeatureRef(CharacterModel):
    """Reference to a class or subclass feature granted to a character."""

    name: str
    slug: str
    level: int
    source: Literal["class", "subclass"]


class SrdFeatures(CharacterModel):
    """Features granted by class and subclass."""

    class_features: list[SrdFeatureRef] = Field(default_factory=list)
    subclass_features: list[SrdFeatureRef] = Field(default_factory=list)


class InventoryItem(CharacterModel):
    """An item carried by a character, referencing equipment by slug."""

    equipment_slug: str
    quantity: int = Field(default=1, ge=0)
    equipped: bool = False
    notes: str | None = None


class Currency(CharacterModel):
    """Coins carried by a character."""

    cp: int = Field(default=0, ge=0)
    sp: int = Field(default=0, ge=0)
    gp: int = Field(default=0, ge=0)
    pp: int = Field(default=0, ge=0)

    @property
    def total_copper(self) -> int:
        """Total wealth in copper pieces."""
        return self.cp + self.sp * 10 + self.gp * 100 + self.pp * 1000


class DeathSaves(CharacterModel):
    """Death saving throw tally."""

    successes: int = Field(default=0, ge=0, le=3)
    failures: int = Field(default=0, ge=0, le=3)


# =============================================================================
# Character
# =============================================================================


class Character(CharacterModel):
    """A complete saved character.

    ``race`` and ``character_class`` hold display names as shown on the
    sheet; ``subclass`` holds a subclass slug.

    Example:
        >>> character = builder.calculate_character_stats(data, repository)
        >>> character.abilities[Ability.DEX].modifier
        2
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = "Unnamed Hero"
    race: str
    character_class: str = Field(alias="class")
    level: int = Field(default=1, ge=1, le=20)
    alignment: str = ""
    background: str = ""
    inspiration: bool = False
    proficiency_bonus: int = 2
    armor_class: int = 10
    hit_points: int
    max_hit_points: int
    hit_dice: HitDice
    speed: int = 30
    initiative: int = 0
    abilities: dict[Ability, AbilityScore]
    skills: dict[Skill, SkillValue]
    languages: list[str] = Field(default_factory=list)
    features_and_traits: FeaturesAndTraits = Field(default_factory=FeaturesAndTraits)
    spellcasting: SpellcastingState | None = None

    subclass: str | None = None
    experience_points: int = Field(default=0, ge=0)
    selected_fighting_style: str | None = None
    srd_features: SrdFeatures = Field(default_factory=SrdFeatures)
    selected_feats: list[str] = Field(default_factory=list)

    inventory: list[InventoryItem] = Field(default_factory=list)
    currency: Currency = Field(default_factory=Currency)
    equipped_armor: str | None = None
    equipped_weapons: list[str] = Field(default_factory=list)

    temporary_hit_points: int = Field(default=0, ge=0)
    death_saves: DeathSaves = Field(default_factory=DeathSaves)
    conditions: list[str] = Field(default_factory=list)

    created_at: str = Field(default_factory=_utcnow_iso)
    updated_at: str = Field(default_factory=_utcnow_iso)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("abilities")
    @classmethod
    def validate_all_abilities(cls, value: dict[Ability, AbilityScore]) -> dict[Ability, AbilityScore]:
        """Ensure all six abilities are present."""
        missing = [ability.value for ability in Ability if ability not in value]
        if missing:
            msg = f"Missing ability scores: {', '.join(missing)}"
            raise ValueError(msg)
        return value

    def ability_score(self, ability: Ability) -> int:
        """Final score of the given ability."""
        return self.abilities[ability].score

    def ability_scores(self) -> dict[Ability, int]:
        """All final scores keyed by ability."""
        return {ability: entry.score for ability, entry in self.abilities.items()}

    def touch(self) -> None:
        """Bump ``updated_at`` to now."""
        self.updated_at = _utcnow_iso()


__all__ = [
    "AbilityScore",
    "SkillValue",
    "HitDice",
    "FeaturesAndTraits",
    "SpellcastingState",
    "SrdFeatureRef",
    "SrdFeatures",
    "InventoryItem",
    "Currency",
    "DeathSaves",
    "Character",
]
