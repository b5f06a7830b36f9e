"""Character creation wizard step validation.

Each step reports what the player still has to choose before moving on.
Steps without required choices are always complete.

Example:
    >>> validation = validate_step(WizardStep.CLASS, CharacterCreationData())
    >>> validation.missing_selections
    ('Class selection',)
    >>> validation.progress_percent
    75
"""

from __future__ import annotations

from enum import IntEnum

from character_forge.data import RulesRepository, get_repository
from character_forge.models.creation import BackgroundAbilityChoices, CharacterCreationData
from character_forge.models.results import StepValidation


class WizardStep(IntEnum):
    """Creation wizard steps that have required choices."""

    DETAILS = 1
    SPECIES = 2
    CLASS = 3
    ABILITIES = 4


def _result(missing: list[str], next_action: str | None = None) -> StepValidation:
    return StepValidation(
        is_complete=not missing,
        missing_selections=tuple(missing),
        next_required_action=(next_action or missing[0]) if missing else None,
    )


def has_valid_background_ability_choices(choices: BackgroundAbilityChoices | None) -> bool:
    """Whether 2024 background bonuses follow the chosen split.

    "2/1" needs one +2 and one +1; "1/1/1" needs three +1s. Either way
    the bonuses total 3.
    """
    if choices is None or choices.method is None or not choices.bonuses:
        return False

    bonuses = list(choices.bonuses.values())
    if sum(bonuses) != 3:
        return False
    if choices.method == "2/1":
        return 2 in bonuses and 1 in bonuses
    return bonuses.count(1) == 3


def validate_details_step(
    data: CharacterCreationData,
    repository: RulesRepository | None = None,
) -> StepValidation:
    """Background, alignment and, for 2024 backgrounds, ability bonuses."""
    missing: list[str] = []
    if not data.background:
        missing.append("Background selection")
    if not data.alignment:
        missing.append("Alignment choice")

    if data.edition == "2024" and data.background:
        repository = repository or get_repository()
        background = repository.get_background(data.background)
        needs_choices = (
            background is not None
            and background.ability_scores is not None
            and background.ability_scores.choose > 0
        )
        if needs_choices and not has_valid_background_ability_choices(data.background_ability_choices):
            missing.append("Background ability score choices")

    return _result(missing)


def validate_species_step(
    data: CharacterCreationData,
    repository: RulesRepository | None = None,
) -> StepValidation:
    """Species and, for 2024 species, the species feat and lineage."""
    missing: list[str] = []
    if not data.race_slug:
        missing.append("Species selection")

    if data.edition == "2024" and data.race_slug:
        repository = repository or get_repository()
        species = repository.get_race(data.race_slug)
        if species is not None:
            if species.feat_options and not data.species_feat:
                missing.append("Species feat choice")
            if species.lineages and not data.selected_lineage:
                missing.append("Lineage choice")

    return _result(missing)


def validate_class_step(data: CharacterCreationData) -> StepValidation:
    """A class must be chosen."""
    return _result([] if data.class_slug else ["Class selection"])


def validate_abilities_step(data: CharacterCreationData) -> StepValidation:
    """Every ability score must be assigned."""
    unassigned = sum(1 for score in data.abilities.values() if score == 0)
    if not unassigned:
        return _result([])
    plural = "s" if unassigned > 1 else ""
    return _result([f"{unassigned} ability score{plural} to assign"], "Assign all ability scores")


def validate_step(
    step: WizardStep | int,
    data: CharacterCreationData,
    repository: RulesRepository | None = None,
) -> StepValidation:
    """Validate one wizard step by number."""
    if step == WizardStep.DETAILS:
        return validate_details_step(data, repository)
    if step == WizardStep.SPECIES:
        return validate_species_step(data, repository)
    if step == WizardStep.CLASS:
        return validate_class_step(data)
    if step == WizardStep.ABILITIES:
        return validate_abilities_step(data)
    return _result([])


__all__ = [
    "WizardStep",
    "has_valid_background_ability_choices",
    "validate_details_step",
    "validate_species_step",
    "validate_class_step",
    "validate_abilities_step",
    "validate_step",
]
