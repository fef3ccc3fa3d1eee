"""
Session Manager - Owns the authoritative state of running matches.

LIFECYCLE:
1. Caller picks players from the roster and a game type
2. Manager sets up the match and opens a session for it
3. During the match:
   - Every action for a session goes through dispatch()
   - dispatch() holds the session lock, so actions apply one at a
     time in arrival order, even when several clients share a match
4. The action that ends the match triggers exactly one history write
   - A failed write is logged and reported as a warning
   - The in-memory match is never rolled back or touched again
5. Session is ended by the caller (or cleaned up when stale)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence
import logging
import threading
import time

from ..engine_core.action import Action, ActionResult
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameType, MatchSettings, MatchState
from ..errors import PersistenceFailure, SessionNotFound
from ..games.setup import setup_match
from ..history import InMemoryMatchHistory, MatchHistoryStore, MatchRecord
from ..roster import PlayerRoster

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a match session."""
    ACTIVE = "active"  # Match in progress
    GAME_OVER = "game_over"  # Match completed
    ABANDONED = "abandoned"  # Ended before completion


@dataclass
class MatchSession:
    """
    One match and its bookkeeping.

    Contains:
    - The current canonical match state
    - Whether the completed match was handed to history
    - Warnings raised along the way (e.g. history write failures)
    """
    session_id: str
    match: MatchState
    created_at: float

    state: SessionState = SessionState.ACTIVE
    persisted: bool = False
    record: MatchRecord | None = None
    warnings: list[str] = field(default_factory=list)

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def is_active(self) -> bool:
        """Check if the match is still being played."""
        return self.state is SessionState.ACTIVE


class SessionManager:
    """
    Manages match sessions.

    Responsibilities:
    - Create sessions from roster players
    - Serialize actions per session
    - Persist each completed match once
    - Clean up ended sessions
    """

    def __init__(
        self,
        roster: PlayerRoster | None = None,
        history: MatchHistoryStore | None = None,
        reducer: Reducer | None = None,
    ):
        self.roster = roster if roster is not None else PlayerRoster()
        self.history = history if history is not None else InMemoryMatchHistory()
        self.reducer = reducer or Reducer()
        self._sessions: dict[str, MatchSession] = {}
        self._lock = threading.Lock()

    def create_session(
        self,
        game_type: GameType,
        player_ids: Sequence[str],
        settings: MatchSettings | None = None,
    ) -> MatchSession:
        """
        Create a new match session.

        Args:
            game_type: X01 or Cricket
            player_ids: Roster IDs in throwing order
            settings: Game settings (defaults if None)

        Returns:
            New MatchSession with the first player up
        """
        participants = self.roster.participants_for(player_ids)
        match = setup_match(game_type, settings, participants)

        session = MatchSession(
            session_id=match.match_id,
            match=match,
            created_at=time.time(),
        )
        with self._lock:
            self._sessions[session.session_id] = session

        logger.info(
            "Started %s session %s with %d players",
            game_type.value, session.session_id, len(participants),
        )
        return session

    def get_session(self, session_id: str) -> MatchSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> MatchSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def dispatch(self, session_id: str, action: Action) -> ActionResult:
        """
        Apply an action to a session's match.

        Failed actions leave the session untouched.
        """
        session = self.require_session(session_id)
        with session._lock:
            result = self.reducer.apply(session.match, action)
            if not result.success:
                return result

            session.match = result.new_state
            if result.game_concluded:
                session.state = SessionState.GAME_OVER
                self._persist(session, result)
            return result

    def _persist(self, session: MatchSession, result: ActionResult) -> None:
        """Hand a completed match to history. Runs at most once per session."""
        if session.persisted:
            return
        session.persisted = True

        try:
            session.record = self.history.record_completed_match(session.match)
        except PersistenceFailure as e:
            logger.warning("Match %s finished but could not be saved: %s", session.session_id, e)
            self._warn(session, result, e)
        except Exception as e:
            # Unexpected store errors surface the same way
            logger.exception("History store failed for match %s", session.session_id)
            self._warn(session, result, e)

    @staticmethod
    def _warn(session: MatchSession, result: ActionResult, error: Exception) -> None:
        message = f"Match {session.session_id} finished but could not be saved: {error}"
        session.warnings.append(message)
        result.warnings.append(message)

    def end_session(self, session_id: str, reason: str = "completed") -> None:
        """
        End a session and drop it from memory.

        Matches ended before completion are not recorded.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFound(session_id)

        if session.state is SessionState.ACTIVE:
            session.state = SessionState.ABANDONED
            logger.info("Session %s abandoned (%s)", session_id, reason)

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose match is still in progress."""
        with self._lock:
            sessions = list(self._sessions.items())
        return [sid for sid, session in sessions if session.is_active()]

    def list_sessions(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Drop finished sessions older than max_age.

        Called periodically to free memory.
        """
        current_time = time.time()
        with self._lock:
            sessions = list(self._sessions.items())
        to_remove = [
            session_id
            for session_id, session in sessions
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
