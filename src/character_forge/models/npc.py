"""NPC library models."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from character_forge.models.enums import Ability


def _now_iso() -> str:
    return datetime.now().isoformat()


class NPC(BaseModel):
    """A non-player character in the campaign NPC library.

    ``notes`` is rich-text HTML from the editor and is stored verbatim.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    species: str = ""
    occupation: str = ""
    personality_traits: list[str] = Field(default_factory=list)
    ability_scores: dict[Ability, int] = Field(default_factory=dict)
    alignment: str = ""
    relationship_status: str = ""
    sexual_orientation: str = ""
    plot_hook: str = ""
    notes: str = ""
    created_at: str = Field(default_factory=_now_iso)
    updated_at: str = Field(default_factory=_now_iso)


class NPCFilters(BaseModel):
    """Filters applied to the NPC library view.

    Empty lists mean "no filter" for that field.
    """

    model_config = ConfigDict(frozen=True)

    search: str = ""
    species: tuple[str, ...] = ()
    occupations: tuple[str, ...] = ()
    alignments: tuple[str, ...] = ()

    def matches(self, npc: NPC) -> bool:
        """Whether an NPC passes every active filter."""
        if self.search:
            needle = self.search.lower()
            haystacks = (npc.name, npc.occupation, npc.species)
            if not any(needle in text.lower() for text in haystacks):
                return False
        if self.species and npc.species not in self.species:
            return False
        if self.occupations and npc.occupation not in self.occupations:
            return False
        if self.alignments and npc.alignment not in self.alignments:
            return False
        return True


__all__ = ["NPC", "NPCFilters"]
