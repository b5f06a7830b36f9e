"""Rule data repository.

:class:`RulesRepository` reads the bundled SRD JSON files (or the files in
a configured override directory), transforms them into immutable reference
models and caches the results. Every loader returns a fresh list so
callers may sort or filter without touching the cache.

Example:
    >>> from character_forge.data import get_repository
    >>> repo = get_repository()
    >>> [spell.slug for spell in repo.get_cantrips_by_class("wizard")][:2]
    ['acid-splash', 'chill-touch']
"""

from __future__ import annotations

import copy
import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Callable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from character_forge.core.config import get_settings
from character_forge.core.exceptions import DataLoadError, UnknownSlugError
from character_forge.core.logging import get_logger
from character_forge.data.transformers import (
    transform_class,
    transform_equipment_2014,
    transform_equipment_2024,
    transform_feature,
    transform_race,
    transform_spell,
    transform_subclass,
)
from character_forge.models.progression import base_class_slug
from character_forge.models.reference import (
    Alignment,
    Background,
    CharacterClass,
    Equipment,
    EquipmentPackage,
    Feat,
    Feature,
    FightingStyle,
    Language,
    QuickStartPresets,
    Race,
    ShopItem,
    Spell,
    StartingWealthRule,
    Subclass,
)


logger = get_logger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

BUNDLED_DATA_PACKAGE = "character_forge.data"
BUNDLED_DATA_DIR = "srd"


# =============================================================================
# File Names
# =============================================================================

SPELLS_FILE = "spells.json"
RACES_FILE = "races.json"
CLASSES_FILE = "classes.json"
EQUIPMENT_2014_FILE = "equipment-2014.json"
EQUIPMENT_2024_FILE = "equipment-2024.json"
BACKGROUNDS_FILE = "backgrounds.json"
FEATS_FILE = "feats.json"
FEATURES_FILE = "features.json"
SUBCLASSES_FILE = "subclasses.json"
ALIGNMENTS_FILE = "alignments.json"
LANGUAGES_FILE = "languages.json"
EQUIPMENT_PACKAGES_FILE = "equipment_packages.json"
QUICK_START_FILE = "quick_start_equipment.json"
STARTING_WEALTH_FILE = "starting_wealth.json"
SHOP_FILE = "shop.json"
FIGHTING_STYLES_FILE = "fighting_styles.json"
NPC_NAMES_FILE = "npc_names.json"


class RulesRepository:
    """Typed, cached access to the rule data.

    Attributes:
        data_path: Directory the JSON files are read from, or None for the
            data bundled with the package.
    """

    def __init__(self, data_path: str | Path | None = None) -> None:
        """Initialize the repository.

        Args:
            data_path: Directory holding rule JSON files. When None, the
                configured ``rules.data_path`` is used, falling back to the
                bundled SRD data.
        """
        if data_path is None:
            data_path = get_settings().rules.data_path
        self.data_path = Path(data_path) if data_path is not None else None
        self._cache: dict[str, Any] = {}

    # =========================================================================
    # File Access
    # =========================================================================

    def _read_json(self, filename: str) -> Any:
        """Read and parse one rule data file.

        Raises:
            DataLoadError: If the file is missing or is not valid JSON.
        """
        try:
            if self.data_path is not None:
                text = (self.data_path / filename).read_text(encoding="utf-8")
            else:
                resource = resources.files(BUNDLED_DATA_PACKAGE) / BUNDLED_DATA_DIR / filename
                text = resource.read_text(encoding="utf-8")
        except (FileNotFoundError, OSError) as exc:
            raise DataLoadError(
                f"Rule data file not found: {filename}",
                source_file=filename,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DataLoadError(
                f"Rule data file is not valid JSON: {filename}",
                source_file=filename,
                details={"line": exc.lineno, "column": exc.colno},
            ) from exc

    def _load(self, filename: str, build: Callable[[Any], T]) -> T:
        """Read ``filename`` once and cache ``build(raw)``.

        Raises:
            DataLoadError: If the file cannot be read or does not match
                the expected schema.
        """
        if filename not in self._cache:
            raw = self._read_json(filename)
            try:
                self._cache[filename] = build(raw)
            except (PydanticValidationError, KeyError, TypeError, ValueError) as exc:
                raise DataLoadError(
                    f"Rule data file has an unexpected shape: {filename}",
                    source_file=filename,
                    details={"error": str(exc)},
                ) from exc
            logger.debug("Loaded rule data", file=filename, source=str(self.data_path or "bundled"))
        return self._cache[filename]

    def _load_models(self, filename: str, model: type[M]) -> list[M]:
        records = self._load(
            filename,
            lambda raw: tuple(model.model_validate(entry) for entry in raw),
        )
        return list(records)

    def clear_cache(self) -> None:
        """Drop every cached table so the next call re-reads the files."""
        self._cache.clear()

    # =========================================================================
    # Spells
    # =========================================================================

    def load_spells(self) -> list[Spell]:
        """All spells, in file order."""
        spells = self._load(
            SPELLS_FILE,
            lambda raw: tuple(transform_spell(entry, 2014) for entry in raw),
        )
        return list(spells)

    def get_spell(self, slug: str) -> Spell | None:
        """Look up a spell by slug."""
        return next((spell for spell in self.load_spells() if spell.slug == slug), None)

    def get_spells_for_class(self, class_slug: str) -> list[Spell]:
        """Spells on the base class's list ('wizard-evocation' uses 'wizard')."""
        base = base_class_slug(class_slug)
        return [spell for spell in self.load_spells() if base in spell.classes]

    def get_cantrips_by_class(self, class_slug: str) -> list[Spell]:
        """Cantrips on the class's spell list."""
        return [spell for spell in self.get_spells_for_class(class_slug) if spell.level == 0]

    def get_leveled_spells_by_class(self, class_slug: str, level: int = 1) -> list[Spell]:
        """Spells of exactly ``level`` on the class's spell list."""
        return [spell for spell in self.get_spells_for_class(class_slug) if spell.level == level]

    # =========================================================================
    # Races, Classes and Backgrounds
    # =========================================================================

    def load_races(self) -> list[Race]:
        """All playable races."""
        races = self._load(
            RACES_FILE,
            lambda raw: tuple(transform_race(entry, 2014) for entry in raw),
        )
        return list(races)

    def get_race(self, slug: str) -> Race | None:
        """Look up a race by slug."""
        return next((race for race in self.load_races() if race.slug == slug), None)

    def load_classes(self) -> list[CharacterClass]:
        """All character classes."""
        classes = self._load(
            CLASSES_FILE,
            lambda raw: tuple(transform_class(entry, 2014) for entry in raw),
        )
        return list(classes)

    def get_class(self, slug: str) -> CharacterClass | None:
        """Look up a class by slug."""
        return next((cls for cls in self.load_classes() if cls.slug == slug), None)

    def require_class(self, slug: str) -> CharacterClass:
        """Look up a class by slug.

        Raises:
            UnknownSlugError: If no class has this slug.
        """
        character_class = self.get_class(slug)
        if character_class is None:
            raise UnknownSlugError(f"Unknown class: {slug}", slug=slug, kind="class")
        return character_class

    def load_backgrounds(self) -> list[Background]:
        """All backgrounds."""
        return self._load_models(BACKGROUNDS_FILE, Background)

    def get_background(self, name_or_slug: str) -> Background | None:
        """Look up a background by display name or slug."""
        return next(
            (
                background
                for background in self.load_backgrounds()
                if name_or_slug in (background.name, background.slug)
            ),
            None,
        )

    # =========================================================================
    # Equipment
    # =========================================================================

    def load_equipment(self) -> list[Equipment]:
        """All equipment: 2014 entries first, then 2024 entries."""
        equipment_2014 = self._load(
            EQUIPMENT_2014_FILE,
            lambda raw: tuple(transform_equipment_2014(entry) for entry in raw),
        )
        equipment_2024 = self._load(
            EQUIPMENT_2024_FILE,
            lambda raw: tuple(transform_equipment_2024(entry) for entry in raw),
        )
        return [*equipment_2014, *equipment_2024]

    def get_equipment_by_slug(self, slug: str, year: int | None = None) -> Equipment | None:
        """Look up an item by slug.

        Args:
            slug: Equipment slug.
            year: Edition to restrict the lookup to. When None the
                configured ``rules.default_edition`` is preferred, falling
                back to the other edition.

        Returns:
            The matching item, or None.
        """
        matches = [
            item
            for item in self.load_equipment()
            if item.slug == slug and (year is None or item.year == year)
        ]
        if not matches:
            return None
        preferred = int(get_settings().rules.default_edition)
        return next((item for item in matches if item.year == preferred), matches[0])

    def is_known_equipment(self, slug: str) -> bool:
        """Whether any edition has an item with this slug."""
        return self.get_equipment_by_slug(slug) is not None

    def load_equipment_packages(self) -> list[EquipmentPackage]:
        """Adventuring packs granted to new characters."""
        return self._load_models(EQUIPMENT_PACKAGES_FILE, EquipmentPackage)

    def load_quick_start_presets(self) -> QuickStartPresets:
        """Quick-start loadouts by class and background."""
        return self._load(QUICK_START_FILE, QuickStartPresets.model_validate)

    def load_starting_wealth_rules(self) -> list[StartingWealthRule]:
        """Starting wealth dice by class."""
        return self._load_models(STARTING_WEALTH_FILE, StartingWealthRule)

    def load_shop(self) -> list[ShopItem]:
        """Items sold in the new-player shop."""
        return self._load_models(SHOP_FILE, ShopItem)

    def get_shop_item(self, item_id: str) -> ShopItem | None:
        """Look up a shop item by id."""
        return next((item for item in self.load_shop() if item.id == item_id), None)

    # =========================================================================
    # Feats, Features and Subclasses
    # =========================================================================

    def load_feats(self) -> list[Feat]:
        """All feats."""
        return self._load_models(FEATS_FILE, Feat)

    def get_feat(self, slug: str) -> Feat | None:
        """Look up a feat by slug."""
        return next((feat for feat in self.load_feats() if feat.slug == slug), None)

    def load_fighting_styles(self) -> list[FightingStyle]:
        """Fighting style options."""
        return self._load_models(FIGHTING_STYLES_FILE, FightingStyle)

    def load_features(self) -> list[Feature]:
        """All class and subclass features."""
        features = self._load(
            FEATURES_FILE,
            lambda raw: tuple(transform_feature(entry) for entry in raw),
        )
        return list(features)

    def get_features_by_class(self, class_slug: str, level: int) -> list[Feature]:
        """Base class features (no subclass) gained at or below ``level``."""
        return [
            feature
            for feature in self.load_features()
            if feature.class_slug == class_slug
            and feature.level <= level
            and not feature.subclass
        ]

    def get_features_by_subclass(
        self,
        class_slug: str,
        subclass_slug: str,
        level: int,
    ) -> list[Feature]:
        """Subclass features gained at or below ``level``."""
        return [
            feature
            for feature in self.load_features()
            if feature.class_slug == class_slug
            and feature.subclass == subclass_slug
            and feature.level <= level
        ]

    def load_subclasses(self) -> list[Subclass]:
        """All subclasses."""
        subclasses = self._load(
            SUBCLASSES_FILE,
            lambda raw: tuple(transform_subclass(entry) for entry in raw),
        )
        return list(subclasses)

    def get_subclasses_by_class(self, class_slug: str) -> list[Subclass]:
        """Subclasses of the given class."""
        return [subclass for subclass in self.load_subclasses() if subclass.class_slug == class_slug]

    # =========================================================================
    # Alignments, Languages and Names
    # =========================================================================

    def load_alignments(self) -> list[Alignment]:
        """The nine alignments."""
        return self._load_models(ALIGNMENTS_FILE, Alignment)

    def load_languages(self) -> list[Language]:
        """All languages."""
        return self._load_models(LANGUAGES_FILE, Language)

    def load_npc_name_data(self) -> dict[str, Any]:
        """Name lists by species plus personality traits for NPC generation.

        Returns:
            Mapping with ``species`` (species -> ``male``/``female``/
            ``surnames`` lists) and ``personalities`` keys. The mapping is a
            fresh copy.
        """
        return copy.deepcopy(self._load(NPC_NAMES_FILE, dict))


@lru_cache(maxsize=1)
def get_repository() -> RulesRepository:
    """Get the shared rule data repository.

    Returns:
        RulesRepository reading from the configured data directory.
    """
    return RulesRepository()


__all__ = [
    "RulesRepository",
    "get_repository",
]
