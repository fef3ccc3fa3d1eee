"""
X01 Rules - Count down from the starting score to exactly zero.

Busts:
- The remaining score would drop below zero
- With double-out, the remaining score would hit zero on a non-double

A bust restores the score the player had at the start of the turn
and ends the turn immediately.

Finish resolution (multiple finishers):
1. A finisher with no active player after them in rotation order wins outright.
2. Otherwise they take pole position and every active player after
   them gets one redemption turn.
3. A redemption bust eliminates that player.
4. Once every redemption turn is used:
   - nobody else finished: the pole player wins
   - others finished too: overtime. All finishers restart from 101,
     everyone else is eliminated, first legal finish wins.
"""

from __future__ import annotations
from typing import Sequence
import logging

from ...engine_core.darts import Throw
from ...engine_core.state import (
    DARTS_PER_TURN,
    OVERTIME_SCORE,
    DartRecord,
    GameType,
    MatchSettings,
    MatchState,
    Participant,
    RedemptionStatus,
    ScoreAdjustment,
    X01Player,
    X01Settings,
)
from ...errors import ValidationError
from ..base import GameRules

logger = logging.getLogger(__name__)

FINISHER_STATUSES = (RedemptionStatus.POLE, RedemptionStatus.FINISHED)


def is_bust(settings: X01Settings, remaining: int, throw: Throw) -> bool:
    """Check whether a dart leaving `remaining` points is a bust."""
    if remaining < 0:
        return True
    if remaining == 0 and settings.double_out and not throw.is_double:
        return True
    return False


class X01Rules(GameRules):
    """Rules for 301/501/701 style games."""

    game_type = GameType.X01

    def validate_settings(self, settings: MatchSettings) -> None:
        if not isinstance(settings, X01Settings):
            raise ValidationError("X01 requires X01Settings")
        score = settings.starting_score
        if isinstance(score, bool) or not isinstance(score, int) or score <= 0:
            raise ValidationError(f"Starting score must be a positive integer, got {score!r}")

    def create_players(
        self, participants: Sequence[Participant], settings: MatchSettings
    ) -> list[X01Player]:
        return [
            X01Player(
                player_id=p.player_id,
                name=p.name,
                score=settings.starting_score,
            )
            for p in participants
        ]

    def is_eligible(self, state: MatchState, player: X01Player) -> bool:
        if state.redemption_mode:
            return player.redemption_status is RedemptionStatus.PENDING
        return player.active

    def on_final_round(self, state: MatchState) -> list[str]:
        # X01 has no round limit
        return []

    # -------------------------------------------------------------------------
    # Throws
    # -------------------------------------------------------------------------

    def record_throw(self, state: MatchState, throw: Throw) -> list[str]:
        player = state.current_player
        turn = state.current_turn

        dart = DartRecord(base_value=throw.base_value, multiplier=throw.multiplier, score=throw.score)
        turn.darts.append(dart)
        self.count_dart(state, player.player_id, dart)

        remaining = player.score - throw.score
        if is_bust(state.settings, remaining, throw):
            return self._bust(state, player)

        player.score = remaining
        if remaining == 0:
            return self._finish(state, player)

        changes = [f"{player.name} scored {throw.score}, {remaining} left"]
        if turn.darts_thrown >= DARTS_PER_TURN:
            changes.extend(self.end_turn(state))
        return changes

    def undo_dart(self, state: MatchState, dart: DartRecord) -> list[str]:
        # Busts and finishes end the turn, so an undoable dart was a plain deduction
        player = state.current_player
        player.score += dart.score
        self._rewind_adjustments(state, player, dart)
        return [f"Undid {dart.score} for {player.name}, {player.score} left"]

    def _rewind_adjustments(self, state: MatchState, player: X01Player, dart: DartRecord) -> None:
        """Move corrections made after the undone dart to just before it."""
        turn_index = len(state.turns)
        dart_index = state.current_turn.darts_thrown
        for adj in state.adjustments:
            if adj.turn_index != turn_index or adj.dart_index <= dart_index:
                continue
            adj.dart_index = dart_index
            if adj.player_id == player.player_id:
                # The corrected score had this dart deducted
                adj.previous_score += dart.score
                adj.new_score += dart.score

    def adjust_score(self, state: MatchState, player_id: str, new_score: int) -> list[str]:
        player = state.get_player(player_id)
        if player is None:
            raise ValidationError(f"Player {player_id} not found")
        if isinstance(new_score, bool) or not isinstance(new_score, int):
            raise ValidationError(f"New score must be an integer, got {new_score!r}")

        previous = player.score
        player.score = new_score
        if state.current_turn.player_id == player_id:
            # A later bust must restore the corrected score
            state.current_turn.start_score += new_score - previous

        state.adjustments.append(
            ScoreAdjustment(
                player_id=player_id,
                previous_score=previous,
                new_score=new_score,
                turn_index=len(state.turns),
                dart_index=state.current_turn.darts_thrown,
            )
        )
        return [f"{player.name}'s score adjusted from {previous} to {new_score}"]

    def end_turn(self, state: MatchState) -> list[str]:
        player = state.current_player
        if state.redemption_mode and player.redemption_status is RedemptionStatus.PENDING:
            player.redemption_status = RedemptionStatus.FAILED

        self._log_turn(state)

        if state.redemption_mode and not self._redemption_pending(state):
            return self._resolve_redemption(state)
        return self._rotate(state)

    # -------------------------------------------------------------------------
    # Bust / finish
    # -------------------------------------------------------------------------

    def _bust(self, state: MatchState, player: X01Player) -> list[str]:
        player.score = state.current_turn.start_score
        changes = [f"{player.name} busted, back to {player.score}"]

        if state.redemption_mode:
            player.redemption_status = RedemptionStatus.BUSTED
            player.eliminated = True
            changes.append(f"{player.name} is out of contention")

        changes.extend(self.end_turn(state))
        return changes

    def _finish(self, state: MatchState, player: X01Player) -> list[str]:
        if state.overtime:
            self._log_turn(state)
            return [f"{player.name} checked out in overtime"] + self._conclude(state, player)

        if state.redemption_mode:
            player.finished = True
            player.redemption_status = RedemptionStatus.FINISHED
            changes = [f"{player.name} checked out in the redemption round"]
            changes.extend(self.end_turn(state))
            return changes

        idx = state.player_index(player.player_id)
        challengers = [p for p in state.players[idx + 1:] if p.active]
        if not challengers:
            self._log_turn(state)
            return [f"{player.name} checked out"] + self._conclude(state, player)

        player.finished = True
        player.redemption_status = RedemptionStatus.POLE
        state.first_finished_player_id = player.player_id
        state.redemption_mode = True
        for p in challengers:
            p.redemption_status = RedemptionStatus.PENDING

        logger.info(
            "Match %s: %s took pole position, %d redemption turn(s) remain",
            state.match_id, player.player_id, len(challengers),
        )
        changes = [f"{player.name} checked out first, redemption round begins"]
        changes.extend(self.end_turn(state))
        return changes

    def _redemption_pending(self, state: MatchState) -> bool:
        return any(p.redemption_status is RedemptionStatus.PENDING for p in state.players)

    def _resolve_redemption(self, state: MatchState) -> list[str]:
        """All redemption turns are used: crown the pole player or go to overtime."""
        state.redemption_mode = False
        finishers = [p for p in state.players if p.redemption_status in FINISHER_STATUSES]

        if len(finishers) == 1:
            pole = state.get_player(state.first_finished_player_id)
            return ["Nobody matched the checkout"] + self._conclude(state, pole)

        state.overtime = True
        for p in state.players:
            if p.redemption_status in FINISHER_STATUSES:
                p.score = OVERTIME_SCORE
                p.finished = False
            else:
                p.eliminated = True

        logger.info(
            "Match %s entering overtime between %s",
            state.match_id, ", ".join(p.player_id for p in finishers),
        )
        changes = [
            "Overtime: " + ", ".join(p.name for p in finishers) + f" restart from {OVERTIME_SCORE}"
        ]
        changes.extend(self._rotate(state))
        return changes
