"""Immutable rule reference models.

These models are the typed view of the bundled SRD rule data. They are
built once by :mod:`character_forge.data` and treated as read-only lookup
tables keyed by slug.

Models:
    Spell: A spell with components, school and class list.
    Race: A playable race or species with ability bonuses.
    CharacterClass: A class with hit die, skills and spellcasting config.
    Background: A background with proficiencies and personality tables.
    Equipment: Weapons, armor and gear for the 2014 and 2024 editions.
    Feat: A feat with prerequisites and category.
    Feature: A class or subclass feature gained at a level.
    Subclass: A subclass belonging to a parent class.
    Alignment: One of the nine alignments.
    Language: A language with category and rarity.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from character_forge.models.enums import (
    Ability,
    ArmorCategory,
    CurrencyUnit,
    FeatCategory,
    SpellcastingType,
    SpellSchool,
    WeaponCategory,
    WeaponRange,
)


class ReferenceModel(BaseModel):
    """Base for all reference data: frozen and tolerant of extra keys."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )


# =============================================================================
# Spells
# =============================================================================


class SpellComponents(ReferenceModel):
    """Verbal, somatic and material components of a spell."""

    verbal: bool = False
    somatic: bool = False
    material: bool = False
    material_description: str | None = None


class Spell(ReferenceModel):
    """A spell from the rule data.

    Attributes:
        slug: Lookup key (e.g., 'magic-missile').
        name: Display name.
        level: Spell level, 0 for cantrips.
        school: School of magic.
        classes: Base class slugs that have the spell on their list.
        year: Rules edition the spell comes from.
    """

    slug: str
    name: str
    level: int = Field(ge=0, le=9)
    school: SpellSchool
    casting_time: str
    range: str
    components: SpellComponents
    duration: str
    concentration: bool = False
    ritual: bool = False
    description: str = ""
    at_higher_levels: str | None = None
    damage_type: str | None = None
    save_type: Ability | None = None
    classes: tuple[str, ...] = ()
    year: int = 2014

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_cantrip(self) -> bool:
        """Whether the spell is a cantrip."""
        return self.level == 0


# =============================================================================
# Races and Species
# =============================================================================


class Race(ReferenceModel):
    """A playable race (2014) or species (2024).

    Attributes:
        slug: Lookup key (e.g., 'hill-dwarf').
        name: Display name.
        speed: Walking speed in feet.
        ability_bonuses: Fixed ability score increases.
        racial_traits: Names of racial traits.
        languages: Languages the race always speaks.
        feat_options: 2024 species that require a feat choice list them here.
        lineages: 2024 lineage options keyed by slug.
    """

    slug: str
    name: str
    source: str = "SRD 2014"
    speed: int = 30
    ability_bonuses: dict[Ability, int] = Field(default_factory=dict)
    racial_traits: tuple[str, ...] = ()
    description: str = ""
    typical_roles: tuple[str, ...] = ()
    armor_proficiencies: tuple[str, ...] = ()
    weapon_proficiencies: tuple[str, ...] = ()
    tool_proficiencies: tuple[str, ...] = ()
    skill_proficiencies: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    feat_options: tuple[str, ...] = ()
    lineages: dict[str, str] = Field(default_factory=dict)


# =============================================================================
# Classes
# =============================================================================


class EquipmentOption(ReferenceModel):
    """A single item inside a starting equipment bundle."""

    name: str
    type: Literal["weapon", "armor", "gear", "tool"] = "gear"
    quantity: int = 1
    weight: float | None = None


class EquipmentChoice(BaseModel):
    """A starting equipment choice offered by a class.

    ``selected`` is the index of the chosen bundle in ``options`` and is
    the only mutable part of a choice during character creation.
    """

    model_config = ConfigDict(extra="ignore")

    choice_id: str
    description: str
    options: list[list[EquipmentOption]]
    selected: int | None = None


class ClassSpellcasting(ReferenceModel):
    """First-level spellcasting configuration for a class."""

    ability: Ability
    type: SpellcastingType
    cantrips_known: int = Field(default=0, ge=0)
    spells_known_or_prepared: int = Field(default=0, ge=0)
    spell_slots: tuple[int, ...] = (0, 2, 0, 0, 0, 0, 0, 0, 0, 0)


class CharacterClass(ReferenceModel):
    """A character class.

    Attributes:
        slug: Lookup key (e.g., 'wizard').
        hit_die: Hit die size (6, 8, 10 or 12).
        saving_throws: Proficient saving throw ability names.
        skill_proficiencies: Skill names the class may choose from.
        num_skill_choices: Number of skills to choose.
        spellcasting: Spellcasting config, None for non-casters.
        equipment_choices: Starting equipment choices.
    """

    slug: str
    name: str
    source: str = "SRD 2014"
    hit_die: int = Field(ge=4, le=12)
    primary_stat: str = "Varies"
    saving_throws: tuple[str, ...] = ()
    skill_proficiencies: tuple[str, ...] = ()
    num_skill_choices: int = 0
    proficiencies: tuple[str, ...] = ()
    class_features: tuple[str, ...] = ()
    description: str = ""
    spellcasting: ClassSpellcasting | None = None
    equipment_choices: tuple[EquipmentChoice, ...] = ()
    subclass_level: int = 3


# =============================================================================
# Backgrounds
# =============================================================================


class BackgroundAbilityScores(ReferenceModel):
    """2024 background ability score options."""

    choose: int = 0
    from_abilities: tuple[Ability, ...] = Field(default=(), alias="from")


class Background(ReferenceModel):
    """A character background."""

    slug: str
    name: str
    description: str = ""
    skill_proficiencies: tuple[str, ...] = ()
    tool_proficiencies: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    equipment: tuple[str, ...] = ()
    feature: str = ""
    feature_description: str = ""
    personality_traits: tuple[str, ...] = ()
    ideals: tuple[str, ...] = ()
    bonds: tuple[str, ...] = ()
    flaws: tuple[str, ...] = ()
    ability_scores: BackgroundAbilityScores | None = None
    origin_feat: str | None = None
    year: int = 2014


# =============================================================================
# Equipment
# =============================================================================


class Cost(ReferenceModel):
    """Price of an item."""

    quantity: float = 0
    unit: CurrencyUnit = CurrencyUnit.GP

    @property
    def in_gold(self) -> float:
        """Cost expressed in gold pieces."""
        return self.quantity * self.unit.copper_value / CurrencyUnit.GP.copper_value


class Damage(ReferenceModel):
    """Weapon damage dice and type."""

    damage_dice: str
    damage_type: str


class WeaponRangeValues(ReferenceModel):
    """Normal and long range in feet."""

    normal: int = 5
    long: int | None = None


class ArmorClassValues(ReferenceModel):
    """Armor class contribution of a piece of armor."""

    base: int
    dex_bonus: bool = False
    max_bonus: int | None = None


class ContainerContent(ReferenceModel):
    """An item stored inside a container or pack."""

    item_index: str
    item_name: str
    quantity: int = 1


class Equipment(ReferenceModel):
    """An item of equipment from either edition.

    ``year`` distinguishes 2014 from 2024 entries. Weapon fields are set
    only for weapons, armor fields only for armor and shields.
    """

    slug: str
    name: str
    year: Literal[2014, 2024] = 2014
    equipment_category: str
    cost: Cost = Field(default_factory=Cost)
    weight: float = 0
    description: str | None = None

    weapon_category: WeaponCategory | None = None
    weapon_range: WeaponRange | None = None
    damage: Damage | None = None
    range: WeaponRangeValues | None = None
    properties: tuple[str, ...] = ()
    two_handed_damage: Damage | None = None
    mastery: str | None = None

    armor_category: ArmorCategory | None = None
    armor_class: ArmorClassValues | None = None
    str_minimum: int | None = None
    stealth_disadvantage: bool | None = None
    don_time: str | None = None
    doff_time: str | None = None

    tool_category: str | None = None
    gear_category: str | None = None
    contents: tuple[ContainerContent, ...] = ()
    capacity: str | None = None

    @property
    def is_weapon(self) -> bool:
        """Whether the item is a weapon."""
        return self.equipment_category == "Weapon" or self.weapon_category is not None

    @property
    def is_armor(self) -> bool:
        """Whether the item is body armor or a shield."""
        return self.armor_category is not None

    @property
    def is_shield(self) -> bool:
        """Whether the item is a shield."""
        return self.armor_category is ArmorCategory.SHIELD

    @property
    def is_two_handed(self) -> bool:
        """Whether the weapon needs two hands."""
        return any(prop.lower() == "two-handed" for prop in self.properties)


# =============================================================================
# Starting Equipment and Shop
# =============================================================================


class PackageItem(ReferenceModel):
    """An item inside an adventuring equipment package."""

    name: str
    slug: str | None = None
    quantity: int = 1
    equipped: bool = False

    @property
    def resolved_slug(self) -> str:
        """The item slug, derived from the name when the data omits it."""
        if self.slug:
            return self.slug
        return "".join(ch if ch.isalnum() else "-" for ch in self.name.lower())


class EquipmentPackage(ReferenceModel):
    """An adventuring pack granted to new characters (Explorer's Pack, ...)."""

    name: str
    level: int | None = None
    starting_gold: int = 0
    recommended_for: tuple[str, ...] = ()
    description: str = ""
    items: tuple[PackageItem, ...] = ()


class QuickStartItem(BaseModel):
    """An item in a quick-start loadout.

    ``quantity`` is mutable so duplicate entries can be merged.
    """

    model_config = ConfigDict(extra="ignore")

    equipment_slug: str
    quantity: int = 1
    equipped: bool = False
    slot: str | None = None

    @property
    def merge_key(self) -> tuple[str, bool, str]:
        """Entries with the same key are merged by adding quantities."""
        return (self.equipment_slug, self.equipped, self.slot or "none")


class CoinPurse(ReferenceModel):
    """Coins granted with a quick-start loadout."""

    gp: int = 0
    sp: int = 0
    cp: int = 0


class QuickStartPreset(ReferenceModel):
    """A named class or background loadout."""

    label: str
    items: tuple[QuickStartItem, ...] = ()
    currency: CoinPurse | None = None


class QuickStartPresets(ReferenceModel):
    """Quick-start loadouts keyed by base class slug and background key."""

    classes: dict[str, QuickStartPreset] = Field(default_factory=dict)
    backgrounds: dict[str, QuickStartPreset] = Field(default_factory=dict)


class StartingWealthRule(ReferenceModel):
    """Class starting wealth: ``dice_count``d``dice_sides`` x ``multiplier`` gp."""

    class_id: str
    dice_count: int = Field(ge=1)
    dice_sides: int = Field(ge=2)
    multiplier: int = 1
    average_gp: int

    @property
    def dice_expression(self) -> str:
        """The roll in dice notation, e.g. '5d4'."""
        return f"{self.dice_count}d{self.dice_sides}"


class ShopItem(ReferenceModel):
    """An item sold in the new-player shop."""

    id: str
    name: str
    category: str = "gear"
    cost_gp: float = Field(ge=0)
    equipment_slug: str | None = None


class FightingStyle(ReferenceModel):
    """A fighting style option for martial classes."""

    name: str
    description: str = ""
    prerequisite: str = ""

    @property
    def classes(self) -> tuple[str, ...]:
        """Lowercase class slugs that may pick this style."""
        return tuple(
            part.strip().lower() for part in self.prerequisite.split(",") if part.strip()
        )


# =============================================================================
# Feats, Features and Subclasses
# =============================================================================


class FeatPrerequisites(ReferenceModel):
    """Structured 2024 feat prerequisites."""

    level: int | None = None
    stats: dict[Ability, int] = Field(default_factory=dict)
    spellcasting: bool = False
    features: tuple[str, ...] = ()


class Feat(ReferenceModel):
    """A feat.

    ``prerequisite`` is the free-text prerequisite of 2014 feats;
    ``prerequisites`` holds the structured 2024 form when present.
    """

    slug: str
    name: str
    source: str = "SRD"
    year: int = 2014
    category: FeatCategory = FeatCategory.GENERAL
    prerequisite: str | None = None
    prerequisites: FeatPrerequisites | None = None
    ability_score_increase: dict[str, Any] | None = None
    benefits: tuple[str, ...] = ()
    description: str = ""

    @property
    def source_info(self) -> str:
        """Source and edition label, e.g. 'PHB 2014'."""
        return f"{self.source} {self.year}"


class Feature(ReferenceModel):
    """A class or subclass feature gained at a given level."""

    slug: str
    name: str
    class_slug: str = Field(alias="class")
    subclass: str | None = None
    level: int = Field(ge=1, le=20)
    desc: tuple[str, ...] = ()
    feature_specific: dict[str, Any] | None = None


class Subclass(ReferenceModel):
    """A subclass (archetype) of a parent class."""

    slug: str
    name: str
    class_slug: str = Field(alias="class")
    subclass_flavor: str = ""
    desc: tuple[str, ...] = ()


# =============================================================================
# Alignments and Languages
# =============================================================================


class Alignment(ReferenceModel):
    """One of the nine alignments."""

    index: str
    name: str
    abbreviation: str
    category: str = ""
    short_desc: str = ""
    long_desc: str = ""
    examples: tuple[str, ...] = ()


class Language(ReferenceModel):
    """A language a character can speak."""

    name: str
    category: Literal["Standard", "Exotic", "Secret", "Dialect", "Rare"] = "Standard"
    edition: Literal["2014", "2024", "both"] = "both"
    rarity: Literal["standard", "rare", "secret"] = "standard"
    typical_speakers: str = ""
    description: str = ""


__all__ = [
    "ReferenceModel",
    "SpellComponents",
    "Spell",
    "Race",
    "EquipmentOption",
    "EquipmentChoice",
    "ClassSpellcasting",
    "CharacterClass",
    "BackgroundAbilityScores",
    "Background",
    "Cost",
    "Damage",
    "WeaponRangeValues",
    "ArmorClassValues",
    "ContainerContent",
    "Equipment",
    "PackageItem",
    "EquipmentPackage",
    "QuickStartItem",
    "CoinPurse",
    "QuickStartPreset",
    "QuickStartPresets",
    "StartingWealthRule",
    "ShopItem",
    "FightingStyle",
    "FeatPrerequisites",
    "Feat",
    "Feature",
    "Subclass",
    "Alignment",
    "Language",
]
