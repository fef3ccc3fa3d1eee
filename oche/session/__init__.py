"""
Session - Match lifecycle management.

A session owns the single authoritative MatchState for one match:
1. Created from roster players and a game type
2. Receives every action through SessionManager.dispatch()
3. Hands the match to history when it ends
4. Is dropped when the caller ends it
"""

from .manager import SessionManager, MatchSession, SessionState

__all__ = [
    "SessionManager",
    "MatchSession",
    "SessionState",
]
