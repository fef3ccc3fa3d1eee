"""
Player Roster - The local players a match can be set up with.

The roster:
- Keeps players in memory, optionally mirrored to a JSON file
- Enforces case-insensitive unique names
- Resolves an ordered list of IDs into participants for match setup

The engine never talks to the roster. Only setup callers do.
"""

from __future__ import annotations
from dataclasses import asdict, replace
from pathlib import Path
from typing import Sequence
import json
import logging
import time
import uuid

from .engine_core.state import Participant
from .errors import PersistenceFailure, ValidationError

logger = logging.getLogger(__name__)


class PlayerRoster:
    """
    Player CRUD.

    Usage:
        roster = PlayerRoster(path="~/.oche/players.json")
        alice = roster.create_player("Alice")
        participants = roster.participants_for([alice.player_id, bob.player_id])
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path).expanduser() if path else None
        self._players: dict[str, Participant] = {}
        if self.path is not None:
            self._load()

    def list_players(self) -> list[Participant]:
        """All players, newest first."""
        return sorted(self._players.values(), key=lambda p: p.created_at, reverse=True)

    def get_player(self, player_id: str) -> Participant | None:
        return self._players.get(player_id)

    def create_player(self, name: str, photo_url: str | None = None) -> Participant:
        name = self._clean_name(name)
        player = Participant(
            player_id=uuid.uuid4().hex,
            name=name,
            photo_url=photo_url,
            created_at=time.time(),
        )
        self._players[player.player_id] = player
        self._save()
        logger.info("Created player %s (%s)", name, player.player_id)
        return player

    def update_player(
        self,
        player_id: str,
        name: str | None = None,
        photo_url: str | None = None,
    ) -> Participant:
        """Rename a player or change their photo."""
        player = self._require(player_id)
        changes = {}
        if name is not None:
            changes["name"] = self._clean_name(name, exclude_id=player_id)
        if photo_url is not None:
            changes["photo_url"] = photo_url
        updated = replace(player, **changes)
        self._players[player_id] = updated
        self._save()
        return updated

    def delete_player(self, player_id: str) -> None:
        self._require(player_id)
        del self._players[player_id]
        self._save()
        logger.info("Deleted player %s", player_id)

    def participants_for(self, player_ids: Sequence[str]) -> list[Participant]:
        """Resolve IDs into participants, keeping the given (throwing) order."""
        return [self._require(pid) for pid in player_ids]

    def _require(self, player_id: str) -> Participant:
        player = self._players.get(player_id)
        if player is None:
            raise ValidationError(f"Player {player_id} not found")
        return player

    def _clean_name(self, name: str, exclude_id: str | None = None) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Player name cannot be empty")
        for p in self._players.values():
            if p.player_id != exclude_id and p.name.lower() == cleaned.lower():
                raise ValidationError(f"Player name '{cleaned}' already exists")
        return cleaned

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                entries = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceFailure(f"Could not read roster {self.path}: {e}") from e

        try:
            players = [Participant(**entry) for entry in entries]
        except TypeError as e:
            raise PersistenceFailure(f"Malformed roster {self.path}: {e}") from e

        for player in players:
            self._players[player.player_id] = player

    def _save(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump([asdict(p) for p in self.list_players()], f, indent=2)
        except OSError as e:
            raise PersistenceFailure(f"Could not write roster {self.path}: {e}") from e
