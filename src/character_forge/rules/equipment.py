"""Equipment rules.

Armor class, equip/unequip checks and starting gear: quick-start
loadouts, starting wealth and new-player shop purchases.

Shields are wielded, so an equipped shield's slug is kept in
``Character.equipped_weapons`` next to the weapons.

Example:
    >>> result = can_equip_item(character, repository.get_equipment_by_slug("plate-armor"))
    >>> result.reason
    'Requires 15 Strength (you have 10)'
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from character_forge.core.config import get_settings
from character_forge.core.constants import BASE_ARMOR_CLASS, MAX_DEX_BONUS_MEDIUM_ARMOR, SHIELD_AC_BONUS
from character_forge.core.exceptions import EquipmentConflictError
from character_forge.core.logging import get_logger
from character_forge.data import RulesRepository, get_repository
from character_forge.models.character import Character
from character_forge.models.enums import Ability, ArmorCategory
from character_forge.models.progression import base_class_slug
from character_forge.models.reference import CoinPurse, Equipment, QuickStartItem
from character_forge.models.results import EquipmentValidationResult
from character_forge.rules.dice import roll


logger = get_logger(__name__)

DEFAULT_STARTING_WEALTH_GP = 100
"""Gold granted when a class has no starting wealth rule."""


# =============================================================================
# Armor Class
# =============================================================================


def calculate_armor_class(
    dex_modifier: int,
    armor: Equipment | None = None,
    has_shield: bool = False,
) -> int:
    """Armor class from worn armor, DEX and a shield.

    Unarmored is 10 + DEX, light armor adds full DEX, medium armor adds
    DEX up to its cap (2 by default) and heavy armor ignores DEX. A shield
    adds 2.
    """
    armor_class = BASE_ARMOR_CLASS + dex_modifier

    if armor is not None and armor.armor_class is not None:
        base = armor.armor_class.base
        if armor.armor_category is ArmorCategory.LIGHT:
            armor_class = base + dex_modifier
        elif armor.armor_category is ArmorCategory.MEDIUM:
            cap = armor.armor_class.max_bonus or MAX_DEX_BONUS_MEDIUM_ARMOR
            armor_class = base + min(dex_modifier, cap)
        elif armor.armor_category is ArmorCategory.HEAVY:
            armor_class = base

    if has_shield:
        armor_class += SHIELD_AC_BONUS
    return armor_class


def _lookup_all(slugs: list[str], repository: RulesRepository) -> list[tuple[str, Equipment]]:
    found: list[tuple[str, Equipment]] = []
    for slug in slugs:
        item = repository.get_equipment_by_slug(slug)
        if item is not None:
            found.append((slug, item))
    return found


def recalculate_armor_class(character: Character, repository: RulesRepository | None = None) -> int:
    """Armor class of a character from their equipped armor and shield."""
    repository = repository or get_repository()
    armor = (
        repository.get_equipment_by_slug(character.equipped_armor)
        if character.equipped_armor
        else None
    )
    has_shield = any(
        item.is_shield for _, item in _lookup_all(character.equipped_weapons, repository)
    )
    return calculate_armor_class(character.abilities[Ability.DEX].modifier, armor, has_shield)


# =============================================================================
# Equip Checks
# =============================================================================


def can_equip_item(
    character: Character,
    equipment: Equipment,
    repository: RulesRepository | None = None,
) -> EquipmentValidationResult:
    """Check whether a character can equip an item.

    Checks run in order and the first failure is reported: armor strength
    minimum, body-armor category clash, the equipped weapon limit, a
    shield next to a two-handed weapon and a two-handed weapon next to a
    shield.

    Args:
        character: The character equipping the item.
        equipment: The item to equip.
        repository: Rule data used to look up already equipped items.

    Returns:
        EquipmentValidationResult with the reason and conflicting slugs.
    """
    repository = repository or get_repository()

    if equipment.is_armor and equipment.str_minimum:
        strength = character.ability_score(Ability.STR)
        if strength < equipment.str_minimum:
            return EquipmentValidationResult(
                can_equip=False,
                reason=f"Requires {equipment.str_minimum} Strength (you have {strength})",
            )

    if equipment.is_armor and not equipment.is_shield and character.equipped_armor:
        current = repository.get_equipment_by_slug(character.equipped_armor)
        if current is not None and current.armor_category is not equipment.armor_category:
            return EquipmentValidationResult(
                can_equip=False,
                reason=(
                    f"Cannot equip {equipment.armor_category} armor "
                    f"while wearing {current.armor_category} armor"
                ),
                conflicts=(character.equipped_armor,),
            )

    wielded = _lookup_all(character.equipped_weapons, repository)

    if equipment.is_weapon and equipment.slug not in character.equipped_weapons:
        limit = get_settings().rules.max_equipped_weapons
        if len(character.equipped_weapons) >= limit:
            return EquipmentValidationResult(
                can_equip=False,
                reason=f"Cannot equip more than {limit} weapons",
            )

    if equipment.is_shield:
        for slug, item in wielded:
            if item.is_two_handed:
                return EquipmentValidationResult(
                    can_equip=False,
                    reason="Cannot use shield with two-handed weapons",
                    conflicts=(slug,),
                )

    if equipment.is_weapon and equipment.is_two_handed:
        shields = [slug for slug, item in wielded if item.is_shield]
        if shields:
            return EquipmentValidationResult(
                can_equip=False,
                reason="Two-handed weapons cannot be used with shields",
                conflicts=(shields[0],),
            )

    return EquipmentValidationResult(can_equip=True)


def can_unequip_item(character: Character, equipment_slug: str) -> EquipmentValidationResult:
    """Unequipping is always allowed."""
    return EquipmentValidationResult(can_equip=True)


def get_equipment_conflicts(
    character: Character,
    equipment: Equipment,
    repository: RulesRepository | None = None,
) -> list[str]:
    """Slugs of equipped items that block equipping ``equipment``."""
    return list(can_equip_item(character, equipment, repository).conflicts)


def has_equipment_conflicts(
    character: Character,
    equipment: Equipment,
    repository: RulesRepository | None = None,
) -> bool:
    """Whether equipped items block equipping ``equipment``."""
    return bool(get_equipment_conflicts(character, equipment, repository))


# =============================================================================
# Equip / Unequip
# =============================================================================


def _set_inventory_flag(character: Character, slug: str, equipped: bool) -> None:
    for item in character.inventory:
        if item.equipment_slug == slug:
            item.equipped = equipped


def equip_item(
    character: Character,
    equipment: Equipment,
    repository: RulesRepository | None = None,
) -> Character:
    """Equip an item and recalculate armor class.

    Body armor goes in the armor slot; weapons and shields are wielded.

    Returns:
        An updated copy of the character.

    Raises:
        EquipmentConflictError: If the item cannot be equipped.
    """
    repository = repository or get_repository()
    result = can_equip_item(character, equipment, repository)
    if not result.can_equip:
        raise EquipmentConflictError(
            result.reason or "Item cannot be equipped",
            equipment_slug=equipment.slug,
            conflicts=list(result.conflicts),
        )

    updated = character.model_copy(deep=True)
    if equipment.is_armor and not equipment.is_shield:
        updated.equipped_armor = equipment.slug
    elif equipment.slug not in updated.equipped_weapons:
        updated.equipped_weapons = [*updated.equipped_weapons, equipment.slug]

    _set_inventory_flag(updated, equipment.slug, True)
    updated.armor_class = recalculate_armor_class(updated, repository)
    updated.touch()
    logger.info("Item equipped", character_id=character.id, equipment_slug=equipment.slug)
    return updated


def unequip_item(
    character: Character,
    equipment_slug: str,
    repository: RulesRepository | None = None,
) -> Character:
    """Unequip an item and recalculate armor class.

    Returns:
        An updated copy of the character.
    """
    updated = character.model_copy(deep=True)
    if updated.equipped_armor == equipment_slug:
        updated.equipped_armor = None
    updated.equipped_weapons = [slug for slug in updated.equipped_weapons if slug != equipment_slug]

    _set_inventory_flag(updated, equipment_slug, False)
    updated.armor_class = recalculate_armor_class(updated, repository)
    updated.touch()
    logger.info("Item unequipped", character_id=character.id, equipment_slug=equipment_slug)
    return updated


# =============================================================================
# Starting Equipment
# =============================================================================


@dataclass(frozen=True)
class QuickStartLoadout:
    """Combined class and background quick-start gear.

    Attributes:
        items: Items with duplicates merged.
        currency: Coins from both presets.
    """

    items: list[QuickStartItem]
    currency: CoinPurse


def normalize_background_key(background_name: str) -> str:
    """Preset key for a background: "Folk Hero" -> 'folk_hero'."""
    key = "_".join(background_name.lower().split())
    return key.replace("'", "").replace('"', "")


def merge_equipment_items(items: list[QuickStartItem]) -> list[QuickStartItem]:
    """Combine entries with the same slug, equipped flag and slot.

    Order of first appearance is kept; the inputs are not modified.
    """
    merged: dict[tuple[str, bool, str], QuickStartItem] = {}
    for item in items:
        existing = merged.get(item.merge_key)
        if existing is None:
            merged[item.merge_key] = item.model_copy()
        else:
            existing.quantity += item.quantity
    return list(merged.values())


def generate_quick_start_equipment(
    class_slug: str,
    background_name: str,
    repository: RulesRepository | None = None,
) -> QuickStartLoadout:
    """Ready-made gear for a class and background.

    Subclass slugs use the base class preset. Missing presets contribute
    nothing.
    """
    repository = repository or get_repository()
    presets = repository.load_quick_start_presets()

    class_preset = presets.classes.get(base_class_slug(class_slug)) or presets.classes.get(class_slug)
    background_preset = presets.backgrounds.get(normalize_background_key(background_name))

    items: list[QuickStartItem] = []
    gp = sp = cp = 0
    for preset in (class_preset, background_preset):
        if preset is None:
            continue
        items.extend(preset.items)
        if preset.currency is not None:
            gp += preset.currency.gp
            sp += preset.currency.sp
            cp += preset.currency.cp

    return QuickStartLoadout(
        items=merge_equipment_items(items),
        currency=CoinPurse(gp=gp, sp=sp, cp=cp),
    )


def roll_starting_wealth(class_slug: str, repository: RulesRepository | None = None) -> int:
    """Roll a class's starting gold, e.g. 5d4 x 10 for a fighter.

    Classes without a wealth rule get 100 gp.
    """
    repository = repository or get_repository()
    base = base_class_slug(class_slug)
    rule = next((r for r in repository.load_starting_wealth_rules() if r.class_id == base), None)
    if rule is None:
        logger.warning("No wealth rule found for class; using default", class_slug=class_slug)
        return DEFAULT_STARTING_WEALTH_GP
    return roll(rule.dice_expression).total * rule.multiplier


def get_average_starting_wealth(class_slug: str, repository: RulesRepository | None = None) -> int:
    """Average starting gold for a class, 100 gp when it has no rule."""
    repository = repository or get_repository()
    base = base_class_slug(class_slug)
    rule = next((r for r in repository.load_starting_wealth_rules() if r.class_id == base), None)
    return rule.average_gp if rule is not None else DEFAULT_STARTING_WEALTH_GP


def calculate_purchase_cost(
    purchases: Mapping[str, int],
    repository: RulesRepository | None = None,
) -> float:
    """Gold cost of shop purchases given as item id -> quantity.

    Unknown item ids are ignored.
    """
    repository = repository or get_repository()
    total = 0.0
    for item_id, quantity in purchases.items():
        item = repository.get_shop_item(item_id)
        if item is not None:
            total += item.cost_gp * quantity
    return total


def can_afford_purchase(
    starting_gold: float,
    purchases: Mapping[str, int],
    repository: RulesRepository | None = None,
) -> bool:
    """Whether ``starting_gold`` covers the purchases."""
    return starting_gold >= calculate_purchase_cost(purchases, repository)


def validate_equipment_slug(slug: str, repository: RulesRepository | None = None) -> bool:
    """Whether the slug names an item in either edition."""
    repository = repository or get_repository()
    return repository.is_known_equipment(slug)


__all__ = [
    "DEFAULT_STARTING_WEALTH_GP",
    "calculate_armor_class",
    "recalculate_armor_class",
    "can_equip_item",
    "can_unequip_item",
    "get_equipment_conflicts",
    "has_equipment_conflicts",
    "equip_item",
    "unequip_item",
    "QuickStartLoadout",
    "normalize_background_key",
    "merge_equipment_items",
    "generate_quick_start_equipment",
    "roll_starting_wealth",
    "get_average_starting_wealth",
    "calculate_purchase_cost",
    "can_afford_purchase",
    "validate_equipment_slug",
]
