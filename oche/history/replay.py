"""
Replay - Rebuild a match by running its turn log through the engine.

Setup and the reducer are deterministic, so feeding the recorded
darts back in (with manual adjustments at their recorded positions)
reproduces the final players and winner.
"""

from __future__ import annotations
from typing import Sequence

from ..engine_core.action import Action
from ..engine_core.reducer import Reducer
from ..engine_core.state import MatchState, Participant
from ..errors import ValidationError
from ..games.setup import settings_from_dict, setup_match
from .records import AdjustmentEntry, MatchRecord


def replay_match(record: MatchRecord, reducer: Reducer | None = None) -> MatchState:
    """
    Replay a recorded match from scratch.

    Raises ValidationError if the log doesn't fit the rules
    (e.g. a dart recorded for the wrong player).
    """
    reducer = reducer or Reducer()
    participants = [Participant(player_id=p.player_id, name=p.name) for p in record.players]
    settings = settings_from_dict(record.game_type, record.settings)
    state = setup_match(record.game_type, settings, participants, match_id=record.match_id)

    for turn in record.turns:
        if state.current_turn.player_id != turn.player_id:
            raise ValidationError(
                f"Turn {turn.turn_order} belongs to {turn.player_id} "
                f"but {state.current_turn.player_id} is up"
            )

        logged_before = len(state.turns)
        state = _apply_adjustments(state, reducer, record.adjustments, turn.turn_order, 0)
        for dart_index, dart in enumerate(turn.darts, start=1):
            state = reducer.apply(state, Action.record_throw(dart.base_value, dart.multiplier)).unwrap()
            if len(state.turns) == logged_before:
                state = _apply_adjustments(
                    state, reducer, record.adjustments, turn.turn_order, dart_index
                )

        # Short turns that didn't bust or finish were ended by hand
        if len(state.turns) == logged_before:
            state = reducer.apply(state, Action.advance_turn()).unwrap()

    # Adjustments made during the unfinished final turn
    if not state.game_over:
        state = _apply_adjustments(
            state, reducer, record.adjustments, len(record.turns), state.current_turn.darts_thrown
        )
    return state


def _apply_adjustments(
    state: MatchState,
    reducer: Reducer,
    adjustments: Sequence[AdjustmentEntry],
    turn_index: int,
    dart_index: int,
) -> MatchState:
    for adj in adjustments:
        if adj.turn_index == turn_index and adj.dart_index == dart_index:
            state = reducer.apply(state, Action.adjust_score(adj.player_id, adj.new_score)).unwrap()
    return state
