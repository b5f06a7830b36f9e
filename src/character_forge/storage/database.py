"""SQLite persistence layer for Character Forge.

Provides persistent storage for:
- Saved characters (full sheet as JSON plus name/class/level columns)
- The NPC library (one JSON document per NPC)

Storage location: configured by ``storage.database_path``
(default ~/.character_forge/character_forge.db).
"""

from __future__ import annotations

import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from character_forge.core.config import get_settings
from character_forge.core.exceptions import DatabaseUpgradeError, StorageError
from character_forge.core.logging import get_logger
from character_forge.models.character import Character
from character_forge.models.npc import NPC


logger = get_logger(__name__)

CHARACTERS_STORE = "characters"
NPCS_STORE = "npcs"


class Database:
    """SQLite database for saved characters and NPCs.

    Every operation opens its own connection, commits on success and
    rolls back on error. Documents are stored as JSON keyed by id.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize database.

        Args:
            db_path: Path to database file. If None, uses the configured
                ``storage.database_path``.

        Raises:
            DatabaseUpgradeError: If the file was written by a release
                with a different schema version.
        """
        if db_path is None:
            db_path = get_settings().storage.database_path
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()

        logger.info("Database initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self, store: str | None = None) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with commit, rollback and cleanup.

        Raises:
            StorageError: If SQLite reports an error.
        """
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(f"Database operation failed: {exc}", store=store) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Create tables and check the stored schema version."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("SELECT MAX(version) FROM schema_version")
            stored_version = cursor.fetchone()[0]
            if stored_version is not None and stored_version != self.SCHEMA_VERSION:
                raise DatabaseUpgradeError(
                    f"Database schema version {stored_version} does not match "
                    f"expected version {self.SCHEMA_VERSION}",
                    details={"path": str(self.db_path)},
                )

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS characters (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    class TEXT NOT NULL,
                    level INTEGER NOT NULL,
                    data TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS npcs (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    data TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("CREATE INDEX IF NOT EXISTS idx_characters_name ON characters(name)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_characters_class ON characters(class)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_characters_level ON characters(level)")

            if stored_version is None:
                cursor.execute(
                    "INSERT INTO schema_version (version) VALUES (?)",
                    (self.SCHEMA_VERSION,),
                )

    # =========================================================================
    # Character Operations
    # =========================================================================

    @staticmethod
    def _character_row(character: Character) -> tuple[str, str, str, int, str, str, str]:
        return (
            character.id,
            character.name,
            character.character_class,
            character.level,
            character.model_dump_json(by_alias=True),
            character.created_at,
            character.updated_at,
        )

    @staticmethod
    def _load_character(row: sqlite3.Row) -> Character:
        try:
            return Character.model_validate_json(row["data"])
        except PydanticValidationError as exc:
            raise StorageError(
                "Stored character does not match the current format",
                store=CHARACTERS_STORE,
                record_id=row["id"],
            ) from exc

    def get_all_characters(self) -> list[Character]:
        """Get all saved characters, most recently updated first."""
        with self._get_connection(CHARACTERS_STORE) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT id, data FROM characters ORDER BY updated_at DESC")
            return [self._load_character(row) for row in cursor.fetchall()]

    def get_character(self, character_id: str) -> Character | None:
        """Get a character by ID.

        Returns:
            The character if found, None otherwise.
        """
        with self._get_connection(CHARACTERS_STORE) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT id, data FROM characters WHERE id = ?", (character_id,))
            row = cursor.fetchone()
            return self._load_character(row) if row else None

    def add_character(self, character: Character) -> Character:
        """Insert a new character.

        Raises:
            StorageError: If a character with the same ID already exists.
        """
        try:
            with self._get_connection(CHARACTERS_STORE) as conn:
                conn.execute(
                    """
                    INSERT INTO characters (id, name, class, level, data, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    self._character_row(character),
                )
        except StorageError as exc:
            if isinstance(exc.__cause__, sqlite3.IntegrityError):
                raise StorageError(
                    f"Character already exists: {character.id}",
                    store=CHARACTERS_STORE,
                    record_id=character.id,
                ) from exc.__cause__
            raise

        logger.info("Added character", character_id=character.id, name=character.name)
        return character

    def update_character(self, character: Character) -> Character:
        """Save a character, inserting it when the ID is new."""
        with self._get_connection(CHARACTERS_STORE) as conn:
            conn.execute(
                """
                INSERT INTO characters (id, name, class, level, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    class = excluded.class,
                    level = excluded.level,
                    data = excluded.data,
                    updated_at = excluded.updated_at
                """,
                self._character_row(character),
            )

        logger.info("Saved character", character_id=character.id)
        return character

    def delete_character(self, character_id: str) -> bool:
        """Delete a character.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection(CHARACTERS_STORE) as conn:
            cursor = conn.execute("DELETE FROM characters WHERE id = ?", (character_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Deleted character", character_id=character_id)
        return deleted

    # =========================================================================
    # NPC Operations
    # =========================================================================

    @staticmethod
    def _npc_row(npc: NPC) -> tuple[str, str, str, str, str]:
        return (npc.id, npc.name, npc.model_dump_json(), npc.created_at, npc.updated_at)

    @staticmethod
    def _load_npc(row: sqlite3.Row) -> NPC:
        try:
            return NPC.model_validate_json(row["data"])
        except PydanticValidationError as exc:
            raise StorageError(
                "Stored NPC does not match the current format",
                store=NPCS_STORE,
                record_id=row["id"],
            ) from exc

    def get_all_npcs(self) -> list[NPC]:
        """Get every NPC in the library, oldest first."""
        with self._get_connection(NPCS_STORE) as conn:
            cursor = conn.execute("SELECT id, data FROM npcs ORDER BY created_at")
            return [self._load_npc(row) for row in cursor.fetchall()]

    def get_npc(self, npc_id: str) -> NPC | None:
        """Get an NPC by ID."""
        with self._get_connection(NPCS_STORE) as conn:
            row = conn.execute("SELECT id, data FROM npcs WHERE id = ?", (npc_id,)).fetchone()
            return self._load_npc(row) if row else None

    def add_npc(self, npc: NPC) -> NPC:
        """Insert a new NPC.

        Raises:
            StorageError: If an NPC with the same ID already exists.
        """
        try:
            with self._get_connection(NPCS_STORE) as conn:
                conn.execute(
                    "INSERT INTO npcs (id, name, data, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                    self._npc_row(npc),
                )
        except StorageError as exc:
            if isinstance(exc.__cause__, sqlite3.IntegrityError):
                raise StorageError(
                    f"NPC already exists: {npc.id}",
                    store=NPCS_STORE,
                    record_id=npc.id,
                ) from exc.__cause__
            raise

        logger.info("Added NPC", npc_id=npc.id, name=npc.name)
        return npc

    def update_npc(self, npc: NPC) -> NPC:
        """Save an NPC, inserting it when the ID is new."""
        with self._get_connection(NPCS_STORE) as conn:
            conn.execute(
                """
                INSERT INTO npcs (id, name, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    data = excluded.data,
                    updated_at = excluded.updated_at
                """,
                self._npc_row(npc),
            )

        logger.info("Saved NPC", npc_id=npc.id)
        return npc

    def delete_npc(self, npc_id: str) -> bool:
        """Delete an NPC.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection(NPCS_STORE) as conn:
            deleted = conn.execute("DELETE FROM npcs WHERE id = ?", (npc_id,)).rowcount > 0

        if deleted:
            logger.info("Deleted NPC", npc_id=npc_id)
        return deleted


# =============================================================================
# Singleton Instance
# =============================================================================


_database_instance: Database | None = None


def get_database() -> Database:
    """Get the global database instance.

    Returns:
        Database singleton at the configured path.
    """
    global _database_instance

    if _database_instance is None:
        _database_instance = Database()

    return _database_instance


def reset_database() -> None:
    """Forget the global instance so the next call reads the settings again."""
    global _database_instance
    _database_instance = None


__all__ = [
    "CHARACTERS_STORE",
    "NPCS_STORE",
    "Database",
    "get_database",
    "reset_database",
]
