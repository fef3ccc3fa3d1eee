"""
Error taxonomy shared by the engine, the collaborators and the API.

Every error carries a stable ``code`` so callers can branch on it
without parsing messages.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for recoverable, caller-facing errors."""

    code = "ENGINE_ERROR"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class ValidationError(EngineError, ValueError):
    """Input was malformed or referenced something that doesn't exist."""

    code = "VALIDATION_ERROR"


class IllegalActionError(EngineError):
    """The action is well-formed but not allowed in the current state."""

    code = "ILLEGAL_ACTION"


class PersistenceFailure(EngineError):
    """A history store could not record or load a match."""

    code = "PERSISTENCE_FAILURE"


class SessionNotFound(EngineError):
    """No active session with the given ID."""

    code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id
