"""NPC library manager.

Keeps the campaign's NPCs in memory, mirrors every change to storage and
applies the library view filters. Storage failures never propagate: they
are logged and exposed through :attr:`NPCManager.error`.
"""

from __future__ import annotations

from character_forge.core.exceptions import CharacterForgeError
from character_forge.core.logging import get_logger
from character_forge.models.npc import NPC, NPCFilters
from character_forge.storage import Database, get_database


logger = get_logger(__name__)

LOAD_FAILURE_MESSAGE = (
    "Database upgrade needed. Please clear your local data store for this "
    "application and try again."
)


class NPCManager:
    """CRUD and filtering for the NPC library.

    Attributes:
        npcs: NPCs in the library, in insertion order.
        filters: Active library filters.
        error: Message from the last failed operation, or None.
    """

    def __init__(self, database: Database | None = None) -> None:
        """Initialize the manager and load the library.

        Args:
            database: Storage backend; defaults to the shared database.
        """
        self._database = database
        self.npcs: list[NPC] = []
        self.filters = NPCFilters()
        self.error: str | None = None
        self.load()

    @property
    def database(self) -> Database:
        """Storage backend, resolved on first use."""
        if self._database is None:
            self._database = get_database()
        return self._database

    def load(self) -> None:
        """Reload every NPC from storage."""
        self.error = None
        try:
            self.npcs = self.database.get_all_npcs()
        except CharacterForgeError as exc:
            logger.error("NPC data load error", error=str(exc), details=exc.details)
            self.npcs = []
            self.error = LOAD_FAILURE_MESSAGE
        else:
            logger.debug("Loaded NPC library", count=len(self.npcs))

    # =========================================================================
    # CRUD
    # =========================================================================

    def create_npc(self, npc: NPC) -> bool:
        """Add an NPC to the library.

        Returns:
            True on success, False when storage rejected it.
        """
        try:
            self.database.add_npc(npc)
        except CharacterForgeError as exc:
            logger.warning("Failed to create NPC", npc_id=npc.id, error=str(exc))
            self.error = str(exc) or "Failed to create NPC"
            return False
        self.error = None
        self.npcs.append(npc)
        return True

    def update_npc(self, npc: NPC) -> bool:
        """Save changes to an NPC, replacing the in-memory copy.

        An NPC missing from the library is added, matching storage,
        which inserts unknown ids.
        """
        try:
            self.database.update_npc(npc)
        except CharacterForgeError as exc:
            logger.warning("Failed to update NPC", npc_id=npc.id, error=str(exc))
            self.error = str(exc) or "Failed to update NPC"
            return False
        self.error = None
        if any(existing.id == npc.id for existing in self.npcs):
            self.npcs = [npc if existing.id == npc.id else existing for existing in self.npcs]
        else:
            self.npcs.append(npc)
        return True

    def delete_npc(self, npc_id: str) -> bool:
        """Remove an NPC; deleting an unknown id succeeds."""
        try:
            self.database.delete_npc(npc_id)
        except CharacterForgeError as exc:
            logger.warning("Failed to delete NPC", npc_id=npc_id, error=str(exc))
            self.error = str(exc) or "Failed to delete NPC"
            return False
        self.error = None
        self.npcs = [npc for npc in self.npcs if npc.id != npc_id]
        return True

    # =========================================================================
    # Filters
    # =========================================================================

    @property
    def filtered_npcs(self) -> list[NPC]:
        """NPCs passing the active filters."""
        return [npc for npc in self.npcs if self.filters.matches(npc)]

    def set_filters(
        self,
        *,
        search: str | None = None,
        species: list[str] | tuple[str, ...] | None = None,
        occupations: list[str] | tuple[str, ...] | None = None,
        alignments: list[str] | tuple[str, ...] | None = None,
    ) -> NPCFilters:
        """Update some filters, keeping the others."""
        updates: dict[str, object] = {}
        if search is not None:
            updates["search"] = search
        if species is not None:
            updates["species"] = tuple(species)
        if occupations is not None:
            updates["occupations"] = tuple(occupations)
        if alignments is not None:
            updates["alignments"] = tuple(alignments)
        self.filters = self.filters.model_copy(update=updates)
        return self.filters

    def clear_filters(self) -> None:
        """Reset every filter."""
        self.filters = NPCFilters()


__all__ = ["LOAD_FAILURE_MESSAGE", "NPCManager"]
