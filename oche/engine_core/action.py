"""
Action System - Actions, payloads, and results.

Actions represent everything a scorer can do to a running match:
1. Record a dart
2. Undo the last dart of the current turn
3. End the current turn early
4. Manually correct an X01 score

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..errors import EngineError
    from .state import MatchState


class ActionType(Enum):
    """Types of actions in the system."""
    RECORD_THROW = "record_throw"
    UNDO = "undo"
    ADVANCE_TURN = "advance_turn"
    ADJUST_SCORE = "adjust_score"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields; validation
    happens in the reducer and the rules modules.
    """
    # RECORD_THROW
    base_value: int | None = None
    multiplier: int = 1

    # ADJUST_SCORE
    player_id: str | None = None
    new_score: int | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the match state.

    Actions are validated before application and
    applied atomically by the reducer.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def record_throw(cls, base_value: int, multiplier: int = 1) -> Action:
        """Factory for a dart. base_value 0 is a miss."""
        return cls(
            action_type=ActionType.RECORD_THROW,
            payload=ActionPayload(base_value=base_value, multiplier=multiplier),
        )

    @classmethod
    def miss(cls) -> Action:
        return cls.record_throw(0, 1)

    @classmethod
    def undo(cls) -> Action:
        return cls(action_type=ActionType.UNDO)

    @classmethod
    def advance_turn(cls) -> Action:
        return cls(action_type=ActionType.ADVANCE_TURN)

    @classmethod
    def adjust_score(cls, player_id: str, new_score: int) -> Action:
        """Factory for a manual X01 score correction."""
        return cls(
            action_type=ActionType.ADJUST_SCORE,
            payload=ActionPayload(player_id=player_id, new_score=new_score),
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Error and its code (if failed)
    - Whether this action ended the match
    """
    success: bool
    new_state: MatchState | None = None
    error: str | None = None
    error_code: str | None = None
    exception: EngineError | None = None

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)  # Human-readable changes

    # True only on the action that flipped game_over
    game_concluded: bool = False

    # Non-fatal problems, e.g. history could not be saved
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None, exception: EngineError | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code, exception=exception)

    @classmethod
    def success_with_state(
        cls,
        state: MatchState,
        changes: list[str] | None = None,
        game_concluded: bool = False,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            game_concluded=game_concluded,
        )

    def unwrap(self) -> MatchState:
        """Return the new state, or raise the error that rejected the action."""
        if self.success and self.new_state is not None:
            return self.new_state
        if self.exception is not None:
            raise self.exception
        raise RuntimeError(self.error or "Action failed")
