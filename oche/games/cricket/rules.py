"""
Cricket Rules - Close 15-20 and the bull with the lowest score.

Marks:
- Numbered targets: one mark per multiplier (treble 20 = 3 marks)
- Bull: single bull 1 mark, double bull 2 marks
- Three marks close a target

Marks beyond closing overflow into points against every opponent
who hasn't closed that target (target number per mark, 25 for the bull).
Lower points are better: a player who has closed everything and holds
the lowest (or tied lowest) score wins on the spot.

If the round limit runs out, the lowest score wins. Ties go to the
player with more marks on the board, then to the earlier thrower.
"""

from __future__ import annotations
from typing import Sequence

from ...engine_core.darts import Throw
from ...engine_core.state import (
    CRICKET_ROUND_LIMITS,
    DARTS_PER_TURN,
    MARKS_TO_CLOSE,
    CricketPlayer,
    CricketSettings,
    DartRecord,
    GameType,
    MatchSettings,
    MatchState,
    Participant,
)
from ...errors import ValidationError
from ..base import GameRules


def round_limit_winner(players: Sequence[CricketPlayer]) -> CricketPlayer:
    """Pick the winner when the round limit ends the match."""
    ranked = sorted(
        enumerate(players),
        key=lambda item: (item[1].score, -item[1].total_marks, item[0]),
    )
    return ranked[0][1]


class CricketRules(GameRules):
    """Rules for cut-throat style Cricket with a round limit."""

    game_type = GameType.CRICKET

    def validate_settings(self, settings: MatchSettings) -> None:
        if not isinstance(settings, CricketSettings):
            raise ValidationError("Cricket requires CricketSettings")
        if settings.rounds_limit not in CRICKET_ROUND_LIMITS:
            raise ValidationError(
                f"Rounds limit must be one of {CRICKET_ROUND_LIMITS}, got {settings.rounds_limit!r}"
            )

    def create_players(
        self, participants: Sequence[Participant], settings: MatchSettings
    ) -> list[CricketPlayer]:
        return [CricketPlayer(player_id=p.player_id, name=p.name) for p in participants]

    def turn_start_score(self, player: CricketPlayer) -> int:
        return 0

    # -------------------------------------------------------------------------
    # Throws
    # -------------------------------------------------------------------------

    def record_throw(self, state: MatchState, throw: Throw) -> list[str]:
        player = state.current_player
        turn = state.current_turn

        dart = DartRecord(base_value=throw.base_value, multiplier=throw.multiplier, score=throw.score)
        changes = self._mark_target(state, player, throw, dart)
        turn.darts.append(dart)
        self.count_dart(state, player.player_id, dart)

        if self._has_won(state, player):
            self._log_turn(state)
            changes.extend(self._conclude(state, player))
            return changes

        if turn.darts_thrown >= DARTS_PER_TURN:
            changes.extend(self.end_turn(state))
        return changes

    def _mark_target(
        self, state: MatchState, player: CricketPlayer, throw: Throw, dart: DartRecord
    ) -> list[str]:
        target = throw.cricket_target
        if target is None:
            return [f"{player.name} missed the cricket targets"]

        board = player.cricket_scores[target]
        marks = throw.cricket_marks
        applied = max(0, min(marks, MARKS_TO_CLOSE - board.marks))
        overflow = marks - applied
        board.marks += applied

        dart.target = target
        dart.marks = marks
        dart.marks_applied = applied

        changes = [f"{player.name} hit {marks} mark(s) on {target}"]
        if applied and board.closed:
            changes.append(f"{player.name} closed {target}")

        if overflow:
            points = overflow * throw.cricket_point_value
            for opponent in state.players:
                if opponent.player_id == player.player_id or opponent.has_closed(target):
                    continue
                opponent.score += points
                dart.overflow_points[opponent.player_id] = points
                changes.append(f"{opponent.name} takes {points} on {target}")
        return changes

    def _has_won(self, state: MatchState, player: CricketPlayer) -> bool:
        if not player.closed_all:
            return False
        return all(
            player.score <= p.score
            for p in state.players
            if p.player_id != player.player_id
        )

    def undo_dart(self, state: MatchState, dart: DartRecord) -> list[str]:
        player = state.current_player
        if dart.target is not None:
            player.cricket_scores[dart.target].marks -= dart.marks_applied
        for opponent_id, points in dart.overflow_points.items():
            state.get_player(opponent_id).score -= points
        return [f"Undid last dart for {player.name}"]

    # -------------------------------------------------------------------------
    # Round limit
    # -------------------------------------------------------------------------

    def final_round_complete(self, state: MatchState) -> bool:
        return state.max_rounds is not None and state.current_round >= state.max_rounds

    def on_final_round(self, state: MatchState) -> list[str]:
        winner = round_limit_winner(state.players)
        return [f"Round limit of {state.max_rounds} reached"] + self._conclude(state, winner)
