"""Tests for equipment rules."""

from __future__ import annotations

import pytest

from character_forge.core.config import clear_settings_cache
from character_forge.core.exceptions import EquipmentConflictError
from character_forge.data import RulesRepository
from character_forge.models import (
    Ability,
    AbilityScore,
    Character,
    Equipment,
    InventoryItem,
    QuickStartItem,
)
from character_forge.rules.equipment import (
    DEFAULT_STARTING_WEALTH_GP,
    calculate_armor_class,
    calculate_purchase_cost,
    can_afford_purchase,
    can_equip_item,
    can_unequip_item,
    equip_item,
    generate_quick_start_equipment,
    get_average_starting_wealth,
    get_equipment_conflicts,
    has_equipment_conflicts,
    merge_equipment_items,
    normalize_background_key,
    recalculate_armor_class,
    roll_starting_wealth,
    unequip_item,
    validate_equipment_slug,
)


def _item(repository: RulesRepository, slug: str) -> Equipment:
    item = repository.get_equipment_by_slug(slug)
    assert item is not None
    return item


def _with_strength(character: Character, score: int) -> Character:
    weaker = character.model_copy(deep=True)
    weaker.abilities[Ability.STR] = AbilityScore(score=score, modifier=(score - 10) // 2)
    return weaker


class TestArmorClass:
    """Tests for armor class calculation."""

    def test_unarmored(self) -> None:
        """Test 10 + DEX."""
        assert calculate_armor_class(2) == 12
        assert calculate_armor_class(-1) == 9

    def test_light_armor(self, repository: RulesRepository) -> None:
        """Test light armor adds full DEX."""
        assert calculate_armor_class(4, _item(repository, "leather-armor")) == 15

    def test_medium_armor_caps_dex(self, repository: RulesRepository) -> None:
        """Test medium armor caps DEX at 2."""
        scale = _item(repository, "scale-mail")
        assert calculate_armor_class(4, scale) == 16
        assert calculate_armor_class(1, scale) == 15

    def test_heavy_armor_ignores_dex(self, repository: RulesRepository) -> None:
        """Test heavy armor ignores DEX."""
        chain = _item(repository, "chain-mail")
        assert calculate_armor_class(3, chain) == 16
        assert calculate_armor_class(-1, chain) == 16

    def test_shield_bonus(self, repository: RulesRepository) -> None:
        """Test a shield adds 2."""
        assert calculate_armor_class(2, has_shield=True) == 14
        assert calculate_armor_class(0, _item(repository, "chain-mail"), has_shield=True) == 18

    def test_recalculate_for_character(self, sample_character: Character, repository: RulesRepository) -> None:
        """Test the sheet's equipped items are used."""
        assert recalculate_armor_class(sample_character, repository) == 12

        armored = sample_character.model_copy(update={"equipped_armor": "chain-mail", "equipped_weapons": ["shield"]})
        assert recalculate_armor_class(armored, repository) == 18


class TestCanEquip:
    """Tests for equip checks."""

    def test_strength_requirement(self, sample_character: Character, repository: RulesRepository) -> None:
        """Test heavy armor strength minimums."""
        weak = _with_strength(sample_character, 10)

        result = can_equip_item(weak, _item(repository, "plate-armor"), repository)

        assert not result.can_equip
        assert result.reason == "Requires 15 Strength (you have 10)"
        assert can_equip_item(sample_character, _item(repository, "plate-armor"), repository).can_equip

    def test_armor_category_clash(self, sample_character: Character, repository: RulesRepository) -> None:
        """Test body armor of another category is blocked."""
        wearing = sample_character.model_copy(update={"equipped_armor": "chain-mail"})

        result = can_equip_item(wearing, _item(repository, "leather-armor"), repository)

        assert not result.can_equip
        assert result.reason == "Cannot equip Light armor while wearing Heavy armor"
        assert result.conflicts == ("chain-mail",)

    def test_weapon_limit(self, sample_character: Character, repository: RulesRepository) -> None:
        """Test the equipped weapon limit."""
        armed = sample_character.model_copy(update={"equipped_weapons": ["longsword", "dagger"]})

        result = can_equip_item(armed, _item(repository, "handaxe"), repository)

        assert not result.can_equip
        assert result.reason == "Cannot equip more than 2 weapons"

    def test_weapon_limit_from_settings(
        self,
        sample_character: Character,
        repository: RulesRepository,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test the configured limit is honoured."""
        monkeypatch.setenv("CHARACTER_FORGE_RULES_MAX_EQUIPPED_WEAPONS", "3")
        clear_settings_cache()
        armed = sample_character.model_copy(update={"equipped_weapons": ["longsword", "dagger"]})

        assert can_equip_item(armed, _item(repository, "handaxe"), repository).can_equip

    def test_shield_with_two_handed_weapon(self, sample_character: Character, repository: RulesRepository) -> None:
        """Test a shield cannot join a two-handed weapon."""
        armed = sample_character.model_copy(update={"equipped_weapons": ["greatsword"]})

        result = can_equip_item(armed, _item(repository, "shield"), repository)

        assert not result.can_equip
        assert result.reason == "Cannot use shield with two-handed weapons"
        assert get_equipment_conflicts(armed, _item(repository, "shield"), repository) == ["greatsword"]

    def test_two_handed_weapon_with_shield(self, sample_character: Character, repository: RulesRepository) -> None:
        """Test a two-handed weapon cannot join a shield."""
        armed = sample_character.model_copy(update={"equipped_weapons": ["shield"]})

        result = can_equip_item(armed, _item(repository, "greatsword"), repository)

        assert not result.can_equip
        assert result.reason == "Two-handed weapons cannot be used with shields"
        assert has_equipment_conflicts(armed, _item(repository, "greatsword"), repository)

    def test_unequip_always_allowed(self, sample_character: Character) -> None:
        """Test unequipping never fails."""
        assert can_unequip_item(sample_character, "anything").can_equip


class TestEquipUnequip:
    """Tests for equipping and unequipping."""

    def test_equip_armor_and_shield(self, sample_character: Character, repository: RulesRepository) -> None:
        """Test armor class follows equipped gear."""
        armored = equip_item(sample_character, _item(repository, "chain-mail"), repository)
        shielded = equip_item(armored, _item(repository, "shield"), repository)

        assert armored.equipped_armor == "chain-mail"
        assert armored.armor_class == 16
        assert shielded.equipped_weapons == ["shield"]
        assert shielded.armor_class == 18
        assert sample_character.equipped_armor is None

    def test_equip_marks_inventory(self, sample_character: Character, repository: RulesRepository) -> None:
        """Test matching inventory entries are flagged as equipped."""
        carrying = sample_character.model_copy(update={"inventory": [InventoryItem(equipment_slug="dagger")]})

        updated = equip_item(carrying, _item(repository, "dagger"), repository)

        assert updated.inventory[0].equipped is True
        assert carrying.inventory[0].equipped is False

    def test_equip_conflict_raises(self, sample_character: Character, repository: RulesRepository) -> None:
        """Test a blocked equip raises EquipmentConflictError."""
        armed = sample_character.model_copy(update={"equipped_weapons": ["greatsword"]})

        with pytest.raises(EquipmentConflictError) as exc_info:
            equip_item(armed, _item(repository, "shield"), repository)

        assert exc_info.value.details["equipment_slug"] == "shield"
        assert exc_info.value.details["conflicts"] == ["greatsword"]

    def test_unequip(self, sample_character: Character, repository: RulesRepository) -> None:
        """Test unequipping restores armor class."""
        armored = equip_item(sample_character, _item(repository, "chain-mail"), repository)
        shielded = equip_item(armored, _item(repository, "shield"), repository)

        bare = unequip_item(unequip_item(shielded, "shield", repository), "chain-mail", repository)

        assert bare.equipped_armor is None
        assert bare.equipped_weapons == []
        assert bare.armor_class == 12


class TestStartingEquipment:
    """Tests for quick-start gear, wealth and purchases."""

    def test_background_key(self) -> None:
        """Test preset keys for backgrounds."""
        assert normalize_background_key("Folk Hero") == "folk_hero"
        assert normalize_background_key("Guild Artisan's") == "guild_artisans"

    def test_merge_items(self) -> None:
        """Test identical entries are merged without touching inputs."""
        first = QuickStartItem(equipment_slug="dagger", quantity=1)
        items = [first, QuickStartItem(equipment_slug="dagger", quantity=2), QuickStartItem(equipment_slug="dagger", equipped=True)]

        merged = merge_equipment_items(items)

        assert [(item.equipment_slug, item.quantity, item.equipped) for item in merged] == [
            ("dagger", 3, False),
            ("dagger", 1, True),
        ]
        assert first.quantity == 1

    def test_quick_start_loadout(self, repository: RulesRepository) -> None:
        """Test class and background presets combine."""
        loadout = generate_quick_start_equipment("fighter", "Soldier", repository)
        slugs = {item.equipment_slug: item for item in loadout.items}

        assert slugs["chain-mail"].equipped is True
        assert "insignia-of-rank" in slugs
        assert loadout.currency.gp == 10

    def test_quick_start_unknown_presets(self, repository: RulesRepository) -> None:
        """Test missing presets contribute nothing."""
        loadout = generate_quick_start_equipment("psion", "Space Pirate", repository)

        assert loadout.items == []
        assert loadout.currency.gp == 0

    def test_roll_starting_wealth(self, repository: RulesRepository) -> None:
        """Test 5d4 x 10 for fighters."""
        for _ in range(20):
            gold = roll_starting_wealth("fighter", repository)
            assert 50 <= gold <= 200
            assert gold % 10 == 0

    def test_wealth_without_rule(self, repository: RulesRepository) -> None:
        """Test classes without a rule get the default."""
        assert roll_starting_wealth("psion", repository) == DEFAULT_STARTING_WEALTH_GP
        assert get_average_starting_wealth("psion", repository) == DEFAULT_STARTING_WEALTH_GP
        assert get_average_starting_wealth("barbarian", repository) == 50

    def test_purchase_cost(self, repository: RulesRepository) -> None:
        """Test shop costs, ignoring unknown items."""
        purchases = {"longsword": 1, "dagger": 2, "moon-rock": 5}

        assert calculate_purchase_cost(purchases, repository) == 19
        assert can_afford_purchase(19, purchases, repository)
        assert not can_afford_purchase(18, purchases, repository)

    def test_validate_equipment_slug(self, repository: RulesRepository) -> None:
        """Test slug validation across editions."""
        assert validate_equipment_slug("longsword", repository)
        assert not validate_equipment_slug("vorpal-spoon", repository)
