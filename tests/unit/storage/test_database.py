"""Tests for the SQLite persistence layer."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from character_forge.core.exceptions import DatabaseUpgradeError, StorageError
from character_forge.models import NPC, Ability, Character
from character_forge.storage import CHARACTERS_STORE, NPCS_STORE, Database, get_database, reset_database


class TestDatabaseInit:
    """Tests for database creation."""

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        """Test the file and its directory are created."""
        db_path = tmp_path / "nested" / "dir" / "forge.db"

        Database(db_path)

        assert db_path.exists()

    def test_reopen_keeps_data(self, database: Database, sample_character: Character) -> None:
        """Test a second instance sees existing rows."""
        database.add_character(sample_character)

        reopened = Database(database.db_path)

        assert reopened.get_character(sample_character.id) is not None

    def test_schema_mismatch(self, database: Database) -> None:
        """Test a file from another schema version is rejected."""
        with sqlite3.connect(database.db_path) as conn:
            conn.execute("DELETE FROM schema_version")
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (Database.SCHEMA_VERSION + 1,))

        with pytest.raises(DatabaseUpgradeError) as exc_info:
            Database(database.db_path)

        assert exc_info.value.details["path"] == str(database.db_path)

    def test_default_path_from_settings(self, isolated_database_path: Path) -> None:
        """Test the configured path is used when none is given."""
        assert Database().db_path == isolated_database_path


class TestCharacterStore:
    """Tests for saved characters."""

    def test_add_and_get(self, database: Database, sample_character: Character) -> None:
        """Test a character survives a save and load."""
        database.add_character(sample_character)

        loaded = database.get_character(sample_character.id)

        assert loaded == sample_character

    def test_get_missing(self, database: Database) -> None:
        """Test an unknown id returns None."""
        assert database.get_character("missing") is None

    def test_add_duplicate(self, database: Database, sample_character: Character) -> None:
        """Test adding the same id twice raises StorageError."""
        database.add_character(sample_character)

        with pytest.raises(StorageError) as exc_info:
            database.add_character(sample_character)

        assert exc_info.value.details == {"store": CHARACTERS_STORE, "record_id": sample_character.id}

    def test_update_existing(self, database: Database, sample_character: Character) -> None:
        """Test updating replaces the stored sheet."""
        database.add_character(sample_character)
        changed = sample_character.model_copy(update={"level": 2, "hit_points": 5})
        changed.touch()

        database.update_character(changed)
        loaded = database.get_character(sample_character.id)

        assert loaded is not None
        assert loaded.level == 2
        assert loaded.hit_points == 5
        assert loaded.created_at == sample_character.created_at

    def test_update_inserts_new(self, database: Database, sample_character: Character) -> None:
        """Test updating an unknown id inserts it."""
        database.update_character(sample_character)

        assert [c.id for c in database.get_all_characters()] == [sample_character.id]

    def test_most_recent_first(self, database: Database, sample_character: Character) -> None:
        """Test characters are listed by last update."""
        older = sample_character.model_copy(update={"id": "older", "updated_at": "2024-01-01T00:00:00"})
        newer = sample_character.model_copy(update={"id": "newer", "updated_at": "2025-01-01T00:00:00"})
        database.add_character(older)
        database.add_character(newer)

        assert [c.id for c in database.get_all_characters()] == ["newer", "older"]

    def test_delete(self, database: Database, sample_character: Character) -> None:
        """Test deleting reports whether a row was removed."""
        database.add_character(sample_character)

        assert database.delete_character(sample_character.id) is True
        assert database.delete_character(sample_character.id) is False
        assert database.get_all_characters() == []

    def test_unreadable_document(self, database: Database, sample_character: Character) -> None:
        """Test a stored document in an old format raises StorageError."""
        database.add_character(sample_character)
        with sqlite3.connect(database.db_path) as conn:
            conn.execute("UPDATE characters SET data = ?", ('{"legacy": true}',))

        with pytest.raises(StorageError) as exc_info:
            database.get_all_characters()

        assert exc_info.value.details["record_id"] == sample_character.id


class TestNPCStore:
    """Tests for the NPC library table."""

    @pytest.fixture
    def npc(self) -> NPC:
        return NPC(
            name="Mara Brightwater",
            species="human",
            occupation="Sage",
            ability_scores={Ability.INT: 15, Ability.WIS: 14},
            notes="<p>Knows the <em>old</em> roads.</p>",
        )

    def test_add_and_get(self, database: Database, npc: NPC) -> None:
        """Test an NPC round trips including HTML notes."""
        database.add_npc(npc)

        loaded = database.get_npc(npc.id)

        assert loaded == npc
        assert loaded is not None
        assert loaded.notes == "<p>Knows the <em>old</em> roads.</p>"

    def test_add_duplicate(self, database: Database, npc: NPC) -> None:
        """Test a duplicate NPC id raises StorageError."""
        database.add_npc(npc)

        with pytest.raises(StorageError) as exc_info:
            database.add_npc(npc)

        assert exc_info.value.details["store"] == NPCS_STORE

    def test_oldest_first(self, database: Database) -> None:
        """Test NPCs are listed in creation order."""
        second = NPC(name="Second", created_at="2025-02-01T00:00:00")
        first = NPC(name="First", created_at="2025-01-01T00:00:00")
        database.add_npc(second)
        database.add_npc(first)

        assert [n.name for n in database.get_all_npcs()] == ["First", "Second"]

    def test_update_and_delete(self, database: Database, npc: NPC) -> None:
        """Test updates persist and delete removes the row."""
        database.add_npc(npc)
        npc.occupation = "Archivist"

        database.update_npc(npc)

        loaded = database.get_npc(npc.id)
        assert loaded is not None
        assert loaded.occupation == "Archivist"
        assert database.delete_npc(npc.id) is True
        assert database.get_npc(npc.id) is None
        assert database.delete_npc(npc.id) is False


class TestGetDatabase:
    """Tests for the shared database instance."""

    def test_singleton(self) -> None:
        """Test get_database returns one instance until reset."""
        first = get_database()

        assert get_database() is first

        reset_database()

        assert get_database() is not first
