"""
Tests for the player roster.
"""

from dataclasses import replace
import json

import pytest

from ..errors import PersistenceFailure, ValidationError
from ..roster import PlayerRoster


class TestRosterCRUD:
    """Tests for roster create, update and delete."""

    @pytest.fixture
    def roster(self):
        return PlayerRoster()

    def test_create_and_get(self, roster):
        alice = roster.create_player("  Alice ", photo_url="photos/alice.png")

        assert alice.name == "Alice"
        assert alice.photo_url == "photos/alice.png"
        assert roster.get_player(alice.player_id) == alice

    def test_names_unique_ignoring_case(self, roster):
        roster.create_player("Alice")
        with pytest.raises(ValidationError):
            roster.create_player("alice")

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name(self, roster, name):
        with pytest.raises(ValidationError):
            roster.create_player(name)

    def test_list_newest_first(self, roster):
        first = roster.create_player("First")
        second = roster.create_player("Second")
        # Same-tick creation would make the order ambiguous
        roster._players[first.player_id] = replace(first, created_at=second.created_at - 1)

        assert [p.name for p in roster.list_players()] == ["Second", "First"]

    def test_update(self, roster):
        alice = roster.create_player("Alice")
        updated = roster.update_player(alice.player_id, name="Alicia")

        assert updated.name == "Alicia"
        assert updated.created_at == alice.created_at
        assert roster.get_player(alice.player_id).name == "Alicia"

    def test_rename_to_own_name_allowed(self, roster):
        alice = roster.create_player("Alice")
        assert roster.update_player(alice.player_id, name="ALICE").name == "ALICE"

    def test_rename_clash(self, roster):
        alice = roster.create_player("Alice")
        roster.create_player("Bob")
        with pytest.raises(ValidationError):
            roster.update_player(alice.player_id, name="bob")

    def test_delete(self, roster):
        alice = roster.create_player("Alice")
        roster.delete_player(alice.player_id)

        assert roster.get_player(alice.player_id) is None
        with pytest.raises(ValidationError):
            roster.delete_player(alice.player_id)

    def test_participants_keep_order(self, roster):
        alice = roster.create_player("Alice")
        bob = roster.create_player("Bob")

        participants = roster.participants_for([bob.player_id, alice.player_id])
        assert [p.name for p in participants] == ["Bob", "Alice"]

    def test_participants_unknown_id(self, roster):
        with pytest.raises(ValidationError):
            roster.participants_for(["ghost"])


class TestRosterFile:
    """Tests for the roster JSON file."""

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "players.json"
        roster = PlayerRoster(path)
        alice = roster.create_player("Alice")

        reopened = PlayerRoster(path)
        assert reopened.get_player(alice.player_id) == alice
        assert json.loads(path.read_text())[0]["name"] == "Alice"

    def test_missing_file_starts_empty(self, tmp_path):
        roster = PlayerRoster(tmp_path / "nested" / "players.json")
        assert roster.list_players() == []

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "players.json"
        path.write_text("not json", encoding="utf-8")

        with pytest.raises(PersistenceFailure):
            PlayerRoster(path)

    @pytest.mark.parametrize("content", [
        [{"player_id": "p1", "name": "Alice", "nickname": "Al"}],
        {"player_id": "p1", "name": "Alice"},
        [{"name": "Alice"}],
        42,
    ])
    def test_malformed_entries(self, tmp_path, content):
        path = tmp_path / "players.json"
        path.write_text(json.dumps(content), encoding="utf-8")

        with pytest.raises(PersistenceFailure):
            PlayerRoster(path)
