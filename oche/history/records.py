"""
History Records - Serializable snapshots of completed matches.

A record captures what a finished match needs for the history
screen and for replay:
- Game type and settings
- Winner
- Final score and stats per player
- The ordered turn log, dart by dart
- Manual score adjustments and where they happened
"""

from __future__ import annotations
from typing import Any, Optional
import time

from pydantic import BaseModel, Field

from ..engine_core.state import CricketPlayer, GameType, MatchState, X01Player


class ThrowEntry(BaseModel):
    """One dart in a persisted turn."""
    base_value: int
    multiplier: int = 1
    score: int


class TurnEntry(BaseModel):
    """One completed turn."""
    turn_order: int
    player_id: str
    darts: list[ThrowEntry] = Field(default_factory=list)

    @property
    def scores(self) -> list[int]:
        return [d.score for d in self.darts]


class AdjustmentEntry(BaseModel):
    """A manual score correction, located after dart_index darts of turn turn_index."""
    player_id: str
    previous_score: int
    new_score: int
    turn_index: int
    dart_index: int


class PlayerResult(BaseModel):
    """Final standing and stats for one player."""
    player_id: str
    name: str
    final_score: int
    darts_thrown: int = 0
    total_score: int = 0
    targets_hit: int = 0
    average_per_dart: float = 0.0
    eliminated: bool = False
    cricket_marks: Optional[dict[str, int]] = Field(
        default=None, description="Marks per cricket target (cricket only)"
    )


class MatchSummary(BaseModel):
    """Match outcome without the turn log, for history listings."""
    match_id: str
    game_type: GameType
    settings: dict[str, Any] = Field(default_factory=dict)
    winner_id: Optional[str] = None
    completed_at: float = 0.0
    rounds_played: int = 0
    players: list[PlayerResult] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @property
    def winner(self) -> PlayerResult | None:
        for p in self.players:
            if p.player_id == self.winner_id:
                return p
        return None


class MatchRecord(MatchSummary):
    """A full completed match, replayable from its turn log."""
    turns: list[TurnEntry] = Field(default_factory=list)
    adjustments: list[AdjustmentEntry] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: MatchState, completed_at: float | None = None) -> MatchRecord:
        """Snapshot a match state."""
        players = []
        for player in state.players:
            stats = state.player_stats[player.player_id]
            result = PlayerResult(
                player_id=player.player_id,
                name=player.name,
                final_score=player.score,
                darts_thrown=stats.darts_thrown,
                total_score=stats.total_score,
                targets_hit=stats.targets_hit,
                average_per_dart=round(stats.average_per_dart, 2),
            )
            if isinstance(player, X01Player):
                result.eliminated = player.eliminated
            elif isinstance(player, CricketPlayer):
                result.cricket_marks = {
                    key: marks.marks for key, marks in player.cricket_scores.items()
                }
            players.append(result)

        turns = [
            TurnEntry(
                turn_order=index,
                player_id=turn.player_id,
                darts=[
                    ThrowEntry(base_value=d.base_value, multiplier=d.multiplier, score=d.score)
                    for d in turn.darts
                ],
            )
            for index, turn in enumerate(state.turns)
        ]

        adjustments = [
            AdjustmentEntry(
                player_id=a.player_id,
                previous_score=a.previous_score,
                new_score=a.new_score,
                turn_index=a.turn_index,
                dart_index=a.dart_index,
            )
            for a in state.adjustments
        ]

        return cls(
            match_id=state.match_id,
            game_type=state.game_type,
            settings=state.settings.to_dict(),
            winner_id=state.winner_id,
            completed_at=completed_at if completed_at is not None else time.time(),
            rounds_played=state.current_round,
            players=players,
            turns=turns,
            adjustments=adjustments,
        )

    def summary(self) -> MatchSummary:
        """Drop the logs."""
        return MatchSummary.model_validate(self.model_dump(exclude={"turns", "adjustments"}))
