"""
Game Rules - Interface every darts game implements.

A GameRules object is stateless. The reducer hands it a cloned
MatchState and the rules mutate that clone in place:
- record_throw: score one dart, then bust/finish/rotate as the game demands
- undo_dart: reverse the effects of a dart popped from the current turn
- end_turn: close the current turn and rotate (also used by AdvanceTurn)

Rotation, turn logging, stat counting and match conclusion are shared
here so both games move the board the same way.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Sequence
import logging

from ..engine_core.darts import Throw
from ..engine_core.state import (
    DartRecord,
    GameType,
    MatchSettings,
    MatchState,
    Participant,
    PlayerState,
    TurnRecord,
    TurnState,
)
from ..errors import IllegalActionError

logger = logging.getLogger(__name__)


class GameRules(ABC):
    """
    Abstract base class for game rules.

    Subclasses implement scoring; this class owns turn flow.
    """

    game_type: GameType

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    @abstractmethod
    def validate_settings(self, settings: MatchSettings) -> None:
        """Raise ValidationError if settings don't fit this game."""

    @abstractmethod
    def create_players(
        self, participants: Sequence[Participant], settings: MatchSettings
    ) -> list[PlayerState]:
        """Create zeroed player states in play order."""

    def turn_start_score(self, player: PlayerState) -> int:
        """Score to remember at the start of a turn."""
        return player.score

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    @abstractmethod
    def record_throw(self, state: MatchState, throw: Throw) -> list[str]:
        """Score one dart for the current player. Returns human-readable changes."""

    @abstractmethod
    def undo_dart(self, state: MatchState, dart: DartRecord) -> list[str]:
        """Reverse the rule effects of a dart already popped from the turn."""

    def end_turn(self, state: MatchState) -> list[str]:
        """Close the current turn and pass play on."""
        self._log_turn(state)
        return self._rotate(state)

    def adjust_score(self, state: MatchState, player_id: str, new_score: int) -> list[str]:
        raise IllegalActionError(f"Score adjustment is not supported in {self.game_type.value}")

    # -------------------------------------------------------------------------
    # Rotation hooks
    # -------------------------------------------------------------------------

    def is_eligible(self, state: MatchState, player: PlayerState) -> bool:
        """Whether the player takes turns right now."""
        return True

    def final_round_complete(self, state: MatchState) -> bool:
        """Whether wrapping the rotation now ends the match."""
        return False

    @abstractmethod
    def on_final_round(self, state: MatchState) -> list[str]:
        """Conclude the match once the last allowed round is played."""

    # -------------------------------------------------------------------------
    # Shared helpers
    # -------------------------------------------------------------------------

    def _log_turn(self, state: MatchState) -> None:
        turn = state.current_turn
        state.turns.append(TurnRecord(player_id=turn.player_id, darts=list(turn.darts)))
        state.current_turn = TurnState(
            player_id=turn.player_id,
            start_score=self.turn_start_score(state.current_player),
        )

    def _rotate(self, state: MatchState) -> list[str]:
        """
        Hand the board to the next eligible player after the current one.

        Wrapping past the end of the player order starts a new round.
        """
        from_idx = state.player_index(state.current_turn.player_id)
        n = state.num_players
        for step in range(1, n + 1):
            idx = (from_idx + step) % n
            if self.is_eligible(state, state.players[idx]):
                break
        else:
            raise RuntimeError(f"No eligible player left in match {state.match_id}")

        if idx <= from_idx:
            if self.final_round_complete(state):
                return self.on_final_round(state)
            state.current_round += 1

        next_player = state.players[idx]
        self._start_turn(state, next_player)
        return [f"Next player: {next_player.name}"]

    def _start_turn(self, state: MatchState, player: PlayerState) -> None:
        for p in state.players:
            p.current = p.player_id == player.player_id
        state.current_turn = TurnState(
            player_id=player.player_id,
            start_score=self.turn_start_score(player),
        )

    def _conclude(self, state: MatchState, winner: PlayerState) -> list[str]:
        """End the match. The in-progress turn must already be logged."""
        state.game_over = True
        state.winner_id = winner.player_id
        for p in state.players:
            p.current = False
        logger.info("Match %s won by %s (%s)", state.match_id, winner.name, winner.player_id)
        return [f"{winner.name} wins"]

    def count_dart(self, state: MatchState, player_id: str, dart: DartRecord) -> None:
        stats = state.player_stats[player_id]
        stats.total_score += dart.score
        stats.darts_thrown += 1
        stats.targets_hit += dart.marks

    def uncount_dart(self, state: MatchState, player_id: str, dart: DartRecord) -> None:
        stats = state.player_stats[player_id]
        stats.total_score -= dart.score
        stats.darts_thrown -= 1
        stats.targets_hit -= dart.marks
