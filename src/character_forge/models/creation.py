"""Character creation wizard state.

:class:`CharacterCreationData` accumulates the user's choices across the
creation steps; :class:`SpellSelectionData` tracks spell picks for each
spellcasting type. Both are transient and mutable until the builder turns
them into a :class:`~character_forge.models.character.Character`.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from character_forge.models.character import InventoryItem
from character_forge.models.enums import (
    Ability,
    AbilityScoreMethod,
    HPCalculationMethod,
    Skill,
)
from character_forge.models.reference import EquipmentChoice


def _unassigned_abilities() -> dict[Ability, int]:
    return {ability: 0 for ability in Ability}


class SpellSelectionData(BaseModel):
    """Spells picked during character creation.

    Which lists matter depends on the class's spellcasting type:
    known casters fill ``known_spells``, prepared casters fill
    ``prepared_spells`` and wizards fill ``spellbook`` plus
    ``daily_prepared``. ``selected_spells`` is the legacy single list.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    selected_cantrips: list[str] = Field(default_factory=list)
    known_spells: list[str] | None = None
    prepared_spells: list[str] | None = None
    spellbook: list[str] | None = None
    daily_prepared: list[str] | None = None
    selected_spells: list[str] | None = None


class BackgroundAbilityChoices(BaseModel):
    """2024 background ability score bonuses picked by the player."""

    method: Literal["2/1", "1/1/1"] | None = None
    bonuses: dict[Ability, int] = Field(default_factory=dict)


class CharacterCreationData(BaseModel):
    """Inputs gathered by the character creation wizard.

    Ability scores are raw (before racial bonuses); a score of 0 means the
    slot has not been assigned yet. ``background`` holds the background
    name, ``race_slug`` and ``class_slug`` hold slugs.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    name: str = ""
    level: int = Field(default=1, ge=1, le=20)
    edition: Literal["2014", "2024"] = "2014"
    race_slug: str = ""
    class_slug: str = ""
    abilities: dict[Ability, int] = Field(default_factory=_unassigned_abilities)
    ability_score_method: AbilityScoreMethod = AbilityScoreMethod.STANDARD_ARRAY
    background: str = ""
    alignment: str = ""
    selected_skills: list[Skill] = Field(default_factory=list)
    equipment_choices: list[EquipmentChoice] = Field(default_factory=list)
    hp_calculation_method: HPCalculationMethod = HPCalculationMethod.MAX
    rolled_hp: int | None = None
    spell_selection: SpellSelectionData = Field(default_factory=SpellSelectionData)
    starting_inventory: list[InventoryItem] = Field(default_factory=list)
    subclass_slug: str | None = None
    selected_fighting_style: str | None = None
    selected_feats: list[str] = Field(default_factory=list)
    known_languages: list[str] = Field(default_factory=list)
    background_ability_choices: BackgroundAbilityChoices | None = None
    species_feat: str | None = None
    selected_lineage: str | None = None
    personality: str = ""
    ideals: str = ""
    bonds: str = ""
    flaws: str = ""


__all__ = [
    "SpellSelectionData",
    "BackgroundAbilityChoices",
    "CharacterCreationData",
]
