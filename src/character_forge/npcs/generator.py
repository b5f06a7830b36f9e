"""Random NPC generation.

Every generator takes an optional :class:`random.Random` so results can be
reproduced with a seeded instance.

Example:
    >>> npc = generate_complete_npc(random.Random(7))
    >>> sorted(npc.ability_scores.values())
    [8, 10, 12, 13, 14, 15]
"""

from __future__ import annotations

import random

from character_forge.data import RulesRepository, get_repository
from character_forge.models.enums import Ability
from character_forge.models.npc import NPC
from character_forge.rules.ability_scores import generate_standard_array


FALLBACK_NAME_PREFIXES = ("Aer", "Bel", "Cor", "Dar", "Eld", "Fal", "Gor", "Hal")
FALLBACK_NAME_SUFFIXES = ("ic", "en", "or", "in", "ar", "us", "on", "el")

RELATIONSHIP_STATUSES = (
    "Single",
    "Married",
    "Widowed",
    "Divorced",
    "In a relationship",
    "Engaged",
    "Recently divorced",
    "Long-term partnership",
)

SEXUAL_ORIENTATIONS = (
    "Heterosexual",
    "Homosexual",
    "Bisexual",
    "Asexual",
    "Pansexual",
    "Questioning",
)

PLOT_HOOKS = (
    "Owes a debt to a local crime lord",
    "Is searching for a lost family heirloom",
    "Has a mysterious tattoo that glows under moonlight",
    "Was once a member of a secret society",
    "Dreams of opening their own business",
    "Is being hunted by a rival from their past",
    "Possesses a unique magical ability they keep hidden",
    "Is writing a book about their adventures",
    "Has a collection of rare artifacts",
    "Is training to become a master of their craft",
    "Lost their home in a recent disaster",
    "Is involved in local politics",
    "Has a pet that is unusually intelligent",
    "Is searching for a cure for a family illness",
    "Once saved the life of an important noble",
)


def _rng(rng: random.Random | None) -> random.Random:
    return rng or random.Random()


def generate_random_name(
    species_slug: str,
    rng: random.Random | None = None,
    repository: RulesRepository | None = None,
) -> str:
    """A first name, plus a surname when the species has them.

    Subraces such as ``hill-dwarf`` fall back to the name list of
    ``dwarf``. Species without a name list get a two-part fantasy name.
    """
    rng = _rng(rng)
    repository = repository or get_repository()
    name_lists = repository.load_npc_name_data().get("species", {})
    names = name_lists.get(species_slug) or name_lists.get(species_slug.rsplit("-", 1)[-1])

    if not isinstance(names, dict):
        return rng.choice(FALLBACK_NAME_PREFIXES) + rng.choice(FALLBACK_NAME_SUFFIXES)

    first_names = names.get("male" if rng.random() > 0.5 else "female") or names.get("male", [])
    if not first_names:
        return rng.choice(FALLBACK_NAME_PREFIXES) + rng.choice(FALLBACK_NAME_SUFFIXES)

    first_name = rng.choice(first_names)
    surnames = names.get("surnames") or []
    return f"{first_name} {rng.choice(surnames)}" if surnames else first_name


def generate_random_occupation(
    rng: random.Random | None = None,
    repository: RulesRepository | None = None,
) -> str:
    """A background name used as the NPC's occupation."""
    repository = repository or get_repository()
    return _rng(rng).choice([background.name for background in repository.load_backgrounds()])


def generate_random_personality_traits(
    count: int = 2,
    rng: random.Random | None = None,
    repository: RulesRepository | None = None,
) -> list[str]:
    """``count`` distinct personality traits."""
    repository = repository or get_repository()
    traits = list(dict.fromkeys(repository.load_npc_name_data().get("personalities", [])))
    return _rng(rng).sample(traits, min(count, len(traits)))


def generate_random_ability_scores(rng: random.Random | None = None) -> dict[Ability, int]:
    """The standard array shuffled across the six abilities."""
    return generate_standard_array(_rng(rng))


def generate_random_alignment(
    rng: random.Random | None = None,
    repository: RulesRepository | None = None,
) -> str:
    """One of the nine alignment names."""
    repository = repository or get_repository()
    return _rng(rng).choice([alignment.name for alignment in repository.load_alignments()])


def generate_random_species(
    rng: random.Random | None = None,
    repository: RulesRepository | None = None,
) -> str:
    """A playable race slug."""
    repository = repository or get_repository()
    return _rng(rng).choice([race.slug for race in repository.load_races()])


def generate_random_relationship_status(rng: random.Random | None = None) -> str:
    return _rng(rng).choice(RELATIONSHIP_STATUSES)


def generate_random_sexual_orientation(rng: random.Random | None = None) -> str:
    return _rng(rng).choice(SEXUAL_ORIENTATIONS)


def generate_random_plot_hook(rng: random.Random | None = None) -> str:
    return _rng(rng).choice(PLOT_HOOKS)


def generate_complete_npc(
    rng: random.Random | None = None,
    repository: RulesRepository | None = None,
) -> NPC:
    """A fully populated NPC with empty notes and a fresh id."""
    rng = _rng(rng)
    repository = repository or get_repository()
    species = generate_random_species(rng, repository)

    return NPC(
        name=generate_random_name(species, rng, repository),
        species=species,
        occupation=generate_random_occupation(rng, repository),
        personality_traits=generate_random_personality_traits(2, rng, repository),
        ability_scores=generate_random_ability_scores(rng),
        alignment=generate_random_alignment(rng, repository),
        relationship_status=generate_random_relationship_status(rng),
        sexual_orientation=generate_random_sexual_orientation(rng),
        plot_hook=generate_random_plot_hook(rng),
        notes="",
    )


__all__ = [
    "RELATIONSHIP_STATUSES",
    "SEXUAL_ORIENTATIONS",
    "PLOT_HOOKS",
    "generate_random_name",
    "generate_random_occupation",
    "generate_random_personality_traits",
    "generate_random_ability_scores",
    "generate_random_alignment",
    "generate_random_species",
    "generate_random_relationship_status",
    "generate_random_sexual_orientation",
    "generate_random_plot_hook",
    "generate_complete_npc",
]
