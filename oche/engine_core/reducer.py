"""
Reducer - Applies actions to match state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state, the input state is never touched
- Validates before applying
- Returns ActionResult with success/failure
- Delegates scoring to the rules module for the match's game type
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .action import Action, ActionResult, ActionType
from .darts import parse_throw
from .state import MatchState
from ..errors import EngineError, IllegalActionError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to match state.

    Stateless - all state is in MatchState.
    Rules are looked up from the match's game type.
    """

    def apply(self, state: MatchState, action: Action) -> ActionResult:
        """
        Apply an action to the match state.

        Returns ActionResult with new state or error.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        try:
            # Validate action is legal
            self._validate_action(state, action)
            result = handler(state, action)
        except EngineError as e:
            logger.debug(
                "Rejected %s on match %s: %s", action.action_type.value, state.match_id, e
            )
            return ActionResult.failure(str(e), error_code=e.code, exception=e)

        if result.new_state is not None and result.new_state.game_over and not state.game_over:
            result.game_concluded = True
        return result

    def _validate_action(self, state: MatchState, action: Action) -> None:
        """Raise if the action can't be applied in the current state."""
        if state.game_over:
            raise IllegalActionError("Game is over - no actions allowed")

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.RECORD_THROW: self._handle_record_throw,
            ActionType.UNDO: self._handle_undo,
            ActionType.ADVANCE_TURN: self._handle_advance_turn,
            ActionType.ADJUST_SCORE: self._handle_adjust_score,
        }
        return handlers.get(action_type)

    def _rules(self, state: MatchState):
        from ..games import rules_for
        return rules_for(state.game_type)

    def _handle_record_throw(self, state: MatchState, action: Action) -> ActionResult:
        """Handle a single dart."""
        throw = parse_throw(action.payload.base_value, action.payload.multiplier)

        new_state = state.clone()
        changes = self._rules(state).record_throw(new_state, throw)
        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_undo(self, state: MatchState, action: Action) -> ActionResult:
        """Revert the most recent dart of the current turn."""
        if not state.current_turn.darts:
            raise IllegalActionError("Nothing to undo in the current turn")

        new_state = state.clone()
        player_id = new_state.current_turn.player_id
        dart = new_state.current_turn.darts.pop()

        rules = self._rules(state)
        changes = rules.undo_dart(new_state, dart)
        rules.uncount_dart(new_state, player_id, dart)
        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_advance_turn(self, state: MatchState, action: Action) -> ActionResult:
        """End the current turn early."""
        new_state = state.clone()
        changes = self._rules(state).end_turn(new_state)
        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_adjust_score(self, state: MatchState, action: Action) -> ActionResult:
        """
        Handle manual score correction.

        The scorer is authoritative - the new score bypasses the rules.
        """
        player_id = action.payload.player_id
        if player_id is None or action.payload.new_score is None:
            raise ValidationError("Score adjustment needs a player and a new score")

        new_state = state.clone()
        changes = self._rules(state).adjust_score(new_state, player_id, action.payload.new_score)
        return ActionResult.success_with_state(new_state, changes=changes)


def apply_action(state: MatchState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer()
    return reducer.apply(state, action)
