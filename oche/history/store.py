"""
Match History Store - Where completed matches go.

Stores:
- InMemoryMatchHistory: process-lifetime only (default, and for tests)
- FileMatchHistory: one JSON file per match in a directory

Design decisions:
- Only finished matches are recorded
- Records are written once and never updated
- Storage errors surface as PersistenceFailure, never as raw OSError
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
import logging
import re

from pydantic import ValidationError as PydanticValidationError

from ..engine_core.state import MatchState
from ..errors import PersistenceFailure, ValidationError
from .records import MatchRecord, MatchSummary

logger = logging.getLogger(__name__)

_MATCH_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class MatchHistoryStore(ABC):
    """
    Abstract base class for completed-match persistence.

    Subclasses only implement storage; recording and listing
    logic is shared.
    """

    def record_completed_match(self, state: MatchState) -> MatchRecord:
        """
        Persist a finished match.

        Raises ValidationError if the match isn't over and
        PersistenceFailure if it can't be stored.
        """
        if not state.game_over:
            raise ValidationError(f"Match {state.match_id} is still in progress")

        record = MatchRecord.from_state(state)
        self._write(record)
        logger.info(
            "Recorded %s match %s (winner %s, %d turns)",
            record.game_type.value, record.match_id, record.winner_id, len(record.turns),
        )
        return record

    def list_completed_matches(self) -> list[MatchSummary]:
        """Summaries of all recorded matches, newest first."""
        records = sorted(self._read_all(), key=lambda r: r.completed_at, reverse=True)
        return [r.summary() for r in records]

    @abstractmethod
    def get_match(self, match_id: str) -> MatchRecord | None:
        """Full record for a match, or None if unknown."""

    @abstractmethod
    def _write(self, record: MatchRecord) -> None:
        ...

    @abstractmethod
    def _read_all(self) -> list[MatchRecord]:
        ...


class InMemoryMatchHistory(MatchHistoryStore):
    """History kept in a dict."""

    def __init__(self):
        self._records: dict[str, MatchRecord] = {}

    def get_match(self, match_id: str) -> MatchRecord | None:
        return self._records.get(match_id)

    def _write(self, record: MatchRecord) -> None:
        self._records[record.match_id] = record

    def _read_all(self) -> list[MatchRecord]:
        return list(self._records.values())


class FileMatchHistory(MatchHistoryStore):
    """
    File-based history.

    Usage:
        history = FileMatchHistory(history_dir="~/.oche/history")
        history.record_completed_match(state)
        for summary in history.list_completed_matches():
            ...
    """

    def __init__(self, history_dir: str | Path | None = None):
        if history_dir is None:
            history_dir = Path.home() / ".oche" / "history"
        self.history_dir = Path(history_dir).expanduser()

        # Ensure history directory exists
        self.history_dir.mkdir(parents=True, exist_ok=True)

    def get_match(self, match_id: str) -> MatchRecord | None:
        if not _MATCH_ID_PATTERN.match(match_id):
            return None
        path = self._get_record_path(match_id)
        if not path.exists():
            return None
        try:
            return self._load_record(path)
        except (OSError, PydanticValidationError) as e:
            raise PersistenceFailure(f"Could not read match {match_id}: {e}") from e

    def list_record_ids(self) -> list[str]:
        return [f.stem for f in self.history_dir.glob("*.json")]

    def _write(self, record: MatchRecord) -> None:
        if not _MATCH_ID_PATTERN.match(record.match_id):
            raise PersistenceFailure(f"Match ID {record.match_id!r} can't be used as a file name")
        path = self._get_record_path(record.match_id)
        try:
            path.write_text(record.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise PersistenceFailure(f"Could not write match {record.match_id}: {e}") from e

    def _read_all(self) -> list[MatchRecord]:
        records = []
        for path in sorted(self.history_dir.glob("*.json")):
            try:
                records.append(self._load_record(path))
            except (OSError, PydanticValidationError) as e:
                logger.warning("Skipping unreadable history file %s: %s", path, e)
        return records

    def _get_record_path(self, match_id: str) -> Path:
        return self.history_dir / f"{match_id}.json"

    def _load_record(self, path: Path) -> MatchRecord:
        return MatchRecord.model_validate_json(path.read_text(encoding="utf-8"))
