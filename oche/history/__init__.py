"""
History - Completed match persistence and replay.

Only finished matches are stored. In-progress state lives
with the session that owns it.
"""

from .records import (
    MatchRecord,
    MatchSummary,
    PlayerResult,
    TurnEntry,
    ThrowEntry,
    AdjustmentEntry,
)
from .store import MatchHistoryStore, InMemoryMatchHistory, FileMatchHistory
from .replay import replay_match

__all__ = [
    "MatchRecord",
    "MatchSummary",
    "PlayerResult",
    "TurnEntry",
    "ThrowEntry",
    "AdjustmentEntry",
    "MatchHistoryStore",
    "InMemoryMatchHistory",
    "FileMatchHistory",
    "replay_match",
]
