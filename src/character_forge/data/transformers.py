"""Transform raw SRD records into reference models.

The bundled spell, race, class, equipment, feature and subclass files use
the 5e SRD API layout (``index``, nested ``{"index", "name"}`` references,
``desc`` paragraph lists). The functions here flatten that layout into the
immutable models in :mod:`character_forge.models.reference`.

Backgrounds, feats, alignments and languages are stored in the model
layout already and are validated directly by the loader.
"""

from __future__ import annotations

from typing import Any, Literal

from character_forge.models.enums import (
    Ability,
    CasterProgression,
    Skill,
    SpellcastingType,
)
from character_forge.models.progression import (
    CLASS_CASTER_PROGRESSION,
    LEVEL_ONE_SPELLCASTING,
    SPELLCASTING_TYPE_MAP,
)
from character_forge.models.reference import (
    ArmorClassValues,
    CharacterClass,
    ClassSpellcasting,
    ContainerContent,
    Cost,
    Damage,
    Equipment,
    EquipmentChoice,
    EquipmentOption,
    Feature,
    Race,
    Spell,
    SpellComponents,
    Subclass,
    WeaponRangeValues,
)


ProficiencyKind = Literal["armor", "weapon", "tool", "skill"]

_TOOL_MARKERS = ("tools", "supplies", "kit", "instrument", "utensils", "set")


# =============================================================================
# Shared Helpers
# =============================================================================


def classify_proficiency(name: str) -> ProficiencyKind | None:
    """Sort an SRD proficiency name into armor, weapon, tool or skill.

    Saving throw proficiencies are not equipment or skills and return None.

    Example:
        >>> classify_proficiency("Skill: Perception")
        'skill'
        >>> classify_proficiency("Shields")
        'armor'
    """
    lowered = name.lower().strip()
    if lowered.startswith("saving throw"):
        return None
    if lowered.startswith("skill"):
        return "skill"
    if "armor" in lowered or lowered == "shields":
        return "armor"
    if any(marker in lowered for marker in _TOOL_MARKERS):
        return "tool"
    return "weapon"


def _paragraphs(value: list[str] | str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return "\n\n".join(value)


def _ref_name(value: Any) -> str | None:
    """Name of an SRD ``{"index", "name"}`` reference, or a bare string."""
    if value is None:
        return None
    if isinstance(value, dict):
        return value.get("name")
    return str(value)


def _damage(raw: dict[str, Any] | None) -> Damage | None:
    if not raw:
        return None
    return Damage(
        damage_dice=raw["damage_dice"],
        damage_type=_ref_name(raw.get("damage_type")) or "",
    )


def _contents(raw: list[dict[str, Any]] | None) -> tuple[ContainerContent, ...]:
    contents: list[ContainerContent] = []
    for entry in raw or []:
        item = entry.get("item") if entry else None
        if not item or not item.get("index") or not item.get("name"):
            continue
        contents.append(
            ContainerContent(
                item_index=item["index"],
                item_name=item["name"],
                quantity=entry.get("quantity", 1),
            )
        )
    return tuple(contents)


# =============================================================================
# Spells
# =============================================================================


def transform_spell(raw: dict[str, Any], year: int = 2014) -> Spell:
    """Transform an SRD spell record.

    Args:
        raw: SRD spell record.
        year: Rules edition of the source file.

    Returns:
        The spell reference model.
    """
    components = raw.get("components", [])
    dc = raw.get("dc")
    damage = raw.get("damage") or {}
    school_name = _ref_name(raw["school"]) or ""

    return Spell(
        slug=raw["index"],
        name=raw["name"],
        level=raw["level"],
        school=school_name[:1].upper() + school_name[1:],
        casting_time=raw["casting_time"],
        range=raw["range"],
        components=SpellComponents(
            verbal="V" in components,
            somatic="S" in components,
            material="M" in components,
            material_description=raw.get("material"),
        ),
        duration=raw["duration"],
        concentration=raw.get("concentration", False),
        ritual=raw.get("ritual", False),
        description=_paragraphs(raw.get("desc")) or "",
        at_higher_levels=_paragraphs(raw.get("higher_level")),
        damage_type=_ref_name(damage.get("damage_type")),
        save_type=Ability.from_srd(dc["dc_type"]["index"]) if dc else None,
        classes=tuple(ref["index"] for ref in raw.get("classes", [])),
        year=year,
    )


# =============================================================================
# Races
# =============================================================================


def transform_race(raw: dict[str, Any], year: int = 2014) -> Race:
    """Transform an SRD race record.

    Racial starting proficiencies are split into armor, weapon, tool and
    skill lists; skills are stored as :class:`Skill` values.
    """
    ability_bonuses = {
        Ability.from_srd(bonus["ability_score"]["index"]): bonus["bonus"]
        for bonus in raw.get("ability_bonuses", [])
    }

    buckets: dict[ProficiencyKind, list[str]] = {
        "armor": [],
        "weapon": [],
        "tool": [],
        "skill": [],
    }
    for proficiency in raw.get("starting_proficiencies", []):
        name = proficiency["name"]
        kind = classify_proficiency(name)
        if kind == "skill":
            skill = Skill.from_name(name)
            if skill is not None:
                buckets["skill"].append(skill.value)
        elif kind is not None:
            buckets[kind].append(name)

    return Race(
        slug=raw["index"],
        name=raw["name"],
        source=f"SRD {year}",
        speed=raw.get("speed", 30),
        ability_bonuses=ability_bonuses,
        racial_traits=tuple(trait["name"] for trait in raw.get("traits", [])),
        description=raw.get("description") or f"{raw['name']} from the System Reference Document.",
        armor_proficiencies=tuple(buckets["armor"]),
        weapon_proficiencies=tuple(buckets["weapon"]),
        tool_proficiencies=tuple(buckets["tool"]),
        skill_proficiencies=tuple(buckets["skill"]),
        languages=tuple(language["name"] for language in raw.get("languages", [])),
        feat_options=tuple(raw.get("feat_options", [])),
        lineages=dict(raw.get("lineages", {})),
    )


# =============================================================================
# Classes
# =============================================================================


def _first_level_slots(class_slug: str) -> tuple[int, ...]:
    """Normalized slot row (index 0 unused) for a first-level character."""
    slots = [0] * 10
    progression = CLASS_CASTER_PROGRESSION.get(class_slug, CasterProgression.NONE)
    if progression in (CasterProgression.FULL, CasterProgression.PACT):
        slots[1] = 2 if progression is CasterProgression.FULL else 1
    return tuple(slots)


def _class_spellcasting(raw: dict[str, Any]) -> ClassSpellcasting | None:
    spellcasting = raw.get("spellcasting")
    if not spellcasting:
        return None

    slug = raw["index"]
    cantrips, spells = LEVEL_ONE_SPELLCASTING.get(slug, (0, 0))
    return ClassSpellcasting(
        ability=Ability.from_srd(spellcasting["spellcasting_ability"]["index"]),
        type=SPELLCASTING_TYPE_MAP.get(slug, SpellcastingType.KNOWN),
        cantrips_known=cantrips,
        spells_known_or_prepared=spells,
        spell_slots=_first_level_slots(slug),
    )


def _equipment_choices(raw: dict[str, Any]) -> tuple[EquipmentChoice, ...]:
    choices: list[EquipmentChoice] = []
    for index, option in enumerate(raw.get("starting_equipment_options", [])):
        source = option.get("from", {})
        bundles: list[list[EquipmentOption]] = []

        if "options" in source:
            for entry in source["options"]:
                if entry.get("equipment"):
                    bundles.append([
                        EquipmentOption(
                            name=entry["equipment"]["name"],
                            quantity=entry.get("count", 1),
                        )
                    ])
                elif entry.get("equipment_category"):
                    bundles.append([
                        EquipmentOption(
                            name=f"{entry['equipment_category']['name']} (choose one)",
                        )
                    ])
        elif source.get("equipment_category"):
            bundles.append([
                EquipmentOption(name=f"Any {source['equipment_category']['name']}")
            ])

        if bundles:
            choices.append(
                EquipmentChoice(
                    choice_id=f"{raw['index']}-choice-{index}",
                    description=option.get("desc", ""),
                    options=bundles,
                )
            )
    return tuple(choices)


def transform_class(raw: dict[str, Any], year: int = 2014) -> CharacterClass:
    """Transform an SRD class record.

    Skill options come from the ``proficiencies`` choice blocks and are
    stored as :class:`Skill` values. First-level spellcasting counts come
    from the class progression tables.

    Args:
        raw: SRD class record.
        year: Rules edition of the source file.

    Returns:
        The class reference model.
    """
    skill_choices = [
        choice
        for choice in raw.get("proficiency_choices", [])
        if choice and choice.get("type") == "proficiencies"
    ]
    skills: list[str] = []
    for choice in skill_choices:
        for entry in choice.get("from", {}).get("options", []):
            item = entry.get("item") or {}
            skill = Skill.from_name(item.get("name", ""))
            if skill is not None and skill.value not in skills:
                skills.append(skill.value)

    return CharacterClass(
        slug=raw["index"],
        name=raw["name"],
        source=f"SRD {year}",
        hit_die=raw["hit_die"],
        primary_stat=raw.get("primary_stat", "Varies"),
        saving_throws=tuple(save["name"] for save in raw.get("saving_throws", [])),
        skill_proficiencies=tuple(skills),
        num_skill_choices=sum(choice.get("choose", 0) for choice in skill_choices),
        proficiencies=tuple(
            proficiency["name"]
            for proficiency in raw.get("proficiencies", [])
            if classify_proficiency(proficiency["name"]) is not None
        ),
        description=raw.get("description") or f"{raw['name']} from the System Reference Document.",
        spellcasting=_class_spellcasting(raw),
        equipment_choices=_equipment_choices(raw),
        subclass_level=raw.get("subclass_level", 3),
    )


# =============================================================================
# Equipment
# =============================================================================


def transform_equipment_2014(raw: dict[str, Any]) -> Equipment:
    """Transform a 2014 SRD equipment record.

    Thrown weapons carry their range in ``throw_range``; it wins over
    ``range`` when present.
    """
    range_source = raw.get("throw_range") or raw.get("range")
    weapon_range = None
    if range_source:
        weapon_range = WeaponRangeValues(
            normal=range_source.get("normal") or 5,
            long=range_source.get("long"),
        )

    armor_class = raw.get("armor_class")
    return Equipment(
        slug=raw["index"],
        name=raw["name"],
        year=2014,
        equipment_category=_ref_name(raw["equipment_category"]) or "Adventuring Gear",
        cost=Cost(**raw["cost"]) if raw.get("cost") else Cost(),
        weight=raw.get("weight", 0),
        description=_paragraphs(raw.get("desc")),
        weapon_category=raw.get("weapon_category"),
        weapon_range=raw.get("weapon_range"),
        damage=_damage(raw.get("damage")),
        range=weapon_range,
        properties=tuple(_ref_name(prop) or "" for prop in raw.get("properties", [])),
        two_handed_damage=_damage(raw.get("two_handed_damage")),
        armor_category=raw.get("armor_category"),
        armor_class=ArmorClassValues(**armor_class) if armor_class else None,
        str_minimum=raw.get("str_minimum") or None,
        stealth_disadvantage=raw.get("stealth_disadvantage"),
        tool_category=raw.get("tool_category"),
        gear_category=_ref_name(raw.get("gear_category")),
        contents=_contents(raw.get("contents")),
        capacity=raw.get("capacity"),
    )


def transform_equipment_2024(raw: dict[str, Any]) -> Equipment:
    """Transform a 2024 SRD equipment record.

    The 2024 data has no weapon category fields; the category and range
    are read from the names in ``equipment_categories``.
    """
    categories = [_ref_name(category) or "" for category in raw.get("equipment_categories", [])]
    weapon_category: str | None = None
    weapon_range: str | None = None
    for category in categories:
        if "Simple" in category:
            weapon_category = "Simple"
        if "Martial" in category:
            weapon_category = "Martial"
        if "Melee" in category:
            weapon_range = "Melee"
        if "Ranged" in category:
            weapon_range = "Ranged"

    armor_class = raw.get("armor_class")
    range_values = raw.get("range")
    mastery = raw.get("mastery")
    return Equipment(
        slug=raw["index"],
        name=raw["name"],
        year=2024,
        equipment_category=categories[0] if categories else "Adventuring Gear",
        cost=Cost(**raw["cost"]) if raw.get("cost") else Cost(),
        weight=raw.get("weight", 0),
        description=raw.get("description"),
        weapon_category=weapon_category,
        weapon_range=weapon_range,
        damage=_damage(raw.get("damage")),
        range=WeaponRangeValues(**range_values) if range_values else None,
        properties=tuple(_ref_name(prop) or "" for prop in raw.get("properties", [])),
        two_handed_damage=_damage(raw.get("two_handed_damage")),
        mastery=_ref_name(mastery),
        armor_category=raw.get("armor_category"),
        armor_class=ArmorClassValues(**armor_class) if armor_class else None,
        str_minimum=raw.get("str_minimum") or None,
        stealth_disadvantage=raw.get("stealth_disadvantage"),
        don_time=raw.get("don_time"),
        doff_time=raw.get("doff_time"),
        tool_category=raw.get("tool_category"),
        gear_category=_ref_name(raw.get("gear_category")),
        contents=_contents(raw.get("contents")),
    )


# =============================================================================
# Features and Subclasses
# =============================================================================


def transform_feature(raw: dict[str, Any]) -> Feature:
    """Transform an SRD class or subclass feature record."""
    subclass = raw.get("subclass")
    return Feature(
        slug=raw["index"],
        name=raw["name"],
        class_slug=raw["class"]["index"],
        subclass=subclass["index"] if subclass else None,
        level=raw["level"],
        desc=tuple(raw.get("desc", [])),
        feature_specific=raw.get("feature_specific"),
    )


def transform_subclass(raw: dict[str, Any]) -> Subclass:
    """Transform an SRD subclass record."""
    return Subclass(
        slug=raw["index"],
        name=raw["name"],
        class_slug=raw["class"]["index"],
        subclass_flavor=raw.get("subclass_flavor", ""),
        desc=tuple(raw.get("desc", [])),
    )


__all__ = [
    "ProficiencyKind",
    "classify_proficiency",
    "transform_spell",
    "transform_race",
    "transform_class",
    "transform_equipment_2014",
    "transform_equipment_2024",
    "transform_feature",
    "transform_subclass",
]
