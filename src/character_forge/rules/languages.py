"""Language rules.

A character speaks Common, their race's languages, any languages their
background grants outright, their class's secret language and the
languages they chose.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from character_forge.data import RulesRepository, get_repository
from character_forge.models.creation import CharacterCreationData
from character_forge.models.progression import base_class_slug
from character_forge.rules.progression import get_modifier


COMMON = "Common"

CLASS_LANGUAGES: dict[str, tuple[str, ...]] = {
    "rogue": ("Thieves' Cant",),
    "druid": ("Druidic",),
}

_CHOICE_COUNTS = {
    "one of your choice": 1,
    "two of your choice": 2,
}


@dataclass(frozen=True)
class BackgroundLanguageChoices:
    """Background languages split into fixed grants and free picks.

    Attributes:
        direct: Languages granted by name.
        choices: Number of languages the player picks.
    """

    direct: tuple[str, ...]
    choices: int


def parse_background_language_choices(background_languages: Iterable[str]) -> BackgroundLanguageChoices:
    """Split a background's language entries.

    Example:
        >>> parse_background_language_choices(["Elvish", "One of your choice"])
        BackgroundLanguageChoices(direct=('Elvish',), choices=1)
    """
    direct: list[str] = []
    choices = 0
    for entry in background_languages:
        count = _CHOICE_COUNTS.get(entry.strip().lower())
        if count is None:
            direct.append(entry)
        else:
            choices = count
    return BackgroundLanguageChoices(direct=tuple(direct), choices=choices)


def get_racial_languages(race_slug: str, repository: RulesRepository | None = None) -> list[str]:
    """Languages a race always speaks."""
    repository = repository or get_repository()
    race = repository.get_race(race_slug)
    return list(race.languages) if race is not None else []


def get_background_languages(background: str, repository: RulesRepository | None = None) -> list[str]:
    """Languages a background grants by name (free picks excluded)."""
    repository = repository or get_repository()
    record = repository.get_background(background)
    if record is None:
        return []
    return list(parse_background_language_choices(record.languages).direct)


def get_class_languages(class_slug: str) -> list[str]:
    """Secret languages taught by a class."""
    return list(CLASS_LANGUAGES.get(base_class_slug(class_slug), ()))


def calculate_known_languages(
    data: CharacterCreationData,
    repository: RulesRepository | None = None,
) -> list[str]:
    """All languages a new character speaks, sorted and de-duplicated."""
    repository = repository or get_repository()
    languages = {COMMON}
    languages.update(get_racial_languages(data.race_slug, repository))
    languages.update(get_background_languages(data.background, repository))
    languages.update(get_class_languages(data.class_slug))
    languages.update(data.known_languages)
    return sorted(languages)


def get_max_languages(intelligence_score: int) -> int:
    """Languages a character can pick: 1 plus any positive INT modifier."""
    return 1 + max(0, get_modifier(intelligence_score))


def get_available_languages(
    current_languages: Iterable[str],
    category: str | None = None,
    repository: RulesRepository | None = None,
) -> list[str]:
    """Languages not yet known, optionally limited to one category, sorted."""
    repository = repository or get_repository()
    known = set(current_languages)
    return sorted(
        language.name
        for language in repository.load_languages()
        if language.name not in known and (category is None or language.category == category)
    )


__all__ = [
    "COMMON",
    "CLASS_LANGUAGES",
    "BackgroundLanguageChoices",
    "parse_background_language_choices",
    "get_racial_languages",
    "get_background_languages",
    "get_class_languages",
    "calculate_known_languages",
    "get_max_languages",
    "get_available_languages",
]
