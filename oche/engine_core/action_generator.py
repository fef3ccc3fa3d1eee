"""
Action Generator - Lists the actions a match accepts right now.

Used by presentation code to enable/disable controls
(e.g. the Undo button is only live once a dart is thrown).
"""

from __future__ import annotations

from .action import ActionType
from .state import GameType, MatchState


def legal_actions(state: MatchState) -> list[ActionType]:
    """
    Generate the action types the reducer would accept.

    A finished match accepts nothing.
    """
    if state.game_over:
        return []

    actions = [ActionType.RECORD_THROW, ActionType.ADVANCE_TURN]
    if state.current_turn.darts:
        actions.append(ActionType.UNDO)
    if state.game_type is GameType.X01:
        actions.append(ActionType.ADJUST_SCORE)
    return actions
