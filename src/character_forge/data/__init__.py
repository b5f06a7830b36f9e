"""Rule data loading for Character Forge.

This package holds the bundled SRD rule data (``srd/*.json``) and the
repository that turns it into typed reference models.

Modules:
    loader: RulesRepository and the shared get_repository() instance
    transformers: SRD record -> reference model transforms
"""

from __future__ import annotations

from character_forge.data.loader import RulesRepository, get_repository
from character_forge.data.transformers import (
    classify_proficiency,
    transform_class,
    transform_equipment_2014,
    transform_equipment_2024,
    transform_feature,
    transform_race,
    transform_spell,
    transform_subclass,
)


__all__ = [
    "RulesRepository",
    "get_repository",
    "classify_proficiency",
    "transform_spell",
    "transform_race",
    "transform_class",
    "transform_equipment_2014",
    "transform_equipment_2024",
    "transform_feature",
    "transform_subclass",
]
