"""
Match State - The state container the engine operates on.

Design principles:
- Value-passing: the reducer works on a clone and returns it, inputs are never mutated
- Serializable: everything needed to rebuild a match is plain data
- Tagged by game type: X01 and Cricket players are distinct types, and
  consumers branch on MatchState.game_type rather than probing fields
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Union
import time


DARTS_PER_TURN = 3

# Overtime restarts every finisher from this score
OVERTIME_SCORE = 101

CRICKET_TARGETS = ("15", "16", "17", "18", "19", "20", "bull")
CRICKET_ROUND_LIMITS = (15, 20, 25)
MARKS_TO_CLOSE = 3


class GameType(Enum):
    """Supported darts games."""
    X01 = "x01"
    CRICKET = "cricket"


class RedemptionStatus(Enum):
    """Where an X01 player stands in the finish-resolution protocol."""
    NONE = "none"
    POLE = "pole"  # First to finish, waiting out the redemption round
    PENDING = "pending"  # Still owed a redemption turn
    FINISHED = "finished"  # Finished during the redemption round
    FAILED = "failed"  # Used the redemption turn without finishing
    BUSTED = "busted"  # Busted during the redemption round


@dataclass(frozen=True)
class Participant:
    """
    A roster player.

    Owned by the roster. Match state copies the id and name,
    it never holds a reference to the participant itself.
    """
    player_id: str
    name: str
    photo_url: str | None = None
    created_at: float = field(default_factory=time.time)


@dataclass
class X01Settings:
    starting_score: int = 501
    double_out: bool = False

    def to_dict(self) -> dict:
        return {"starting_score": self.starting_score, "double_out": self.double_out}


@dataclass
class CricketSettings:
    rounds_limit: int = 20

    def to_dict(self) -> dict:
        return {"rounds_limit": self.rounds_limit}


MatchSettings = Union[X01Settings, CricketSettings]


@dataclass
class DartRecord:
    """
    One dart as recorded in a turn.

    base_value/multiplier are what was thrown. The remaining fields are
    the rule effects of the dart, kept so undo can reverse them exactly.
    """
    base_value: int
    multiplier: int
    score: int

    # Cricket effects
    target: str | None = None
    marks: int = 0  # Marks the dart was worth on its target
    marks_applied: int = 0  # Marks actually added before the cap
    overflow_points: dict[str, int] = field(default_factory=dict)  # opponent -> points

    @property
    def is_miss(self) -> bool:
        return self.score == 0


@dataclass
class TurnState:
    """The in-progress turn."""
    player_id: str
    darts: list[DartRecord] = field(default_factory=list)
    start_score: int = 0  # X01: remaining score when the turn began

    @property
    def darts_thrown(self) -> int:
        return len(self.darts)

    @property
    def scores(self) -> list[int]:
        return [d.score for d in self.darts]


@dataclass
class TurnRecord:
    """A completed turn in the match log."""
    player_id: str
    darts: list[DartRecord] = field(default_factory=list)

    @property
    def scores(self) -> list[int]:
        return [d.score for d in self.darts]

    @property
    def total(self) -> int:
        return sum(self.scores)


@dataclass
class ScoreAdjustment:
    """
    A manual X01 score correction.

    turn_index/dart_index locate the correction in the turn log:
    it happened after dart_index darts of turns[turn_index].
    """
    player_id: str
    previous_score: int
    new_score: int
    turn_index: int
    dart_index: int


@dataclass
class PlayerStats:
    """Cumulative per-player counters."""
    total_score: int = 0
    darts_thrown: int = 0
    targets_hit: int = 0  # Cricket only

    @property
    def average_per_dart(self) -> float:
        if not self.darts_thrown:
            return 0.0
        return self.total_score / self.darts_thrown

    @property
    def three_dart_average(self) -> float:
        return self.average_per_dart * DARTS_PER_TURN


@dataclass
class TargetMarks:
    marks: int = 0

    @property
    def closed(self) -> bool:
        return self.marks >= MARKS_TO_CLOSE


def new_cricket_board() -> dict[str, TargetMarks]:
    return {key: TargetMarks() for key in CRICKET_TARGETS}


@dataclass
class X01Player:
    """X01 player state, scoped to one match."""
    player_id: str
    name: str
    score: int
    current: bool = False
    finished: bool = False
    eliminated: bool = False
    redemption_status: RedemptionStatus = RedemptionStatus.NONE

    @property
    def active(self) -> bool:
        """Still taking turns outside the redemption round."""
        return not self.finished and not self.eliminated


@dataclass
class CricketPlayer:
    """Cricket player state, scoped to one match."""
    player_id: str
    name: str
    score: int = 0
    current: bool = False
    cricket_scores: dict[str, TargetMarks] = field(default_factory=new_cricket_board)

    def has_closed(self, target: str) -> bool:
        return self.cricket_scores[target].closed

    @property
    def closed_all(self) -> bool:
        return all(marks.closed for marks in self.cricket_scores.values())

    @property
    def total_marks(self) -> int:
        return sum(marks.marks for marks in self.cricket_scores.values())


PlayerState = Union[X01Player, CricketPlayer]


@dataclass
class MatchState:
    """
    Complete match state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    match_id: str
    game_type: GameType
    settings: MatchSettings
    players: list[PlayerState]
    current_turn: TurnState

    # Logs
    turns: list[TurnRecord] = field(default_factory=list)
    adjustments: list[ScoreAdjustment] = field(default_factory=list)
    player_stats: dict[str, PlayerStats] = field(default_factory=dict)

    current_round: int = 1
    game_over: bool = False
    winner_id: str | None = None

    # X01 finish resolution
    first_finished_player_id: str | None = None
    redemption_mode: bool = False
    overtime: bool = False

    # Cricket
    max_rounds: int | None = None

    @property
    def current_player(self) -> PlayerState:
        """Get the player whose turn it is."""
        player = self.get_player(self.current_turn.player_id)
        if player is None:
            raise LookupError(f"Current turn references unknown player {self.current_turn.player_id}")
        return player

    @property
    def num_players(self) -> int:
        return len(self.players)

    def get_player(self, player_id: str) -> PlayerState | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def player_index(self, player_id: str) -> int:
        for idx, p in enumerate(self.players):
            if p.player_id == player_id:
                return idx
        raise LookupError(f"Player {player_id} is not in this match")

    def get_winner(self) -> PlayerState | None:
        if self.winner_id is None:
            return None
        return self.get_player(self.winner_id)

    def clone(self) -> MatchState:
        """Deep copy the state."""
        return deepcopy(self)
