"""
Engine Core - Deterministic match state management.

The engine is the runtime that:
1. Holds MatchState
2. Validates darts
3. Applies actions via the reducer
4. Lists the actions currently accepted
"""

from .state import (
    GameType,
    MatchState,
    Participant,
    X01Settings,
    CricketSettings,
    X01Player,
    CricketPlayer,
    PlayerStats,
    TurnState,
    TurnRecord,
    DartRecord,
    RedemptionStatus,
)
from .action import Action, ActionType, ActionPayload, ActionResult
from .darts import Throw, parse_throw
from .reducer import Reducer, apply_action
from .action_generator import legal_actions

__all__ = [
    "GameType",
    "MatchState",
    "Participant",
    "X01Settings",
    "CricketSettings",
    "X01Player",
    "CricketPlayer",
    "PlayerStats",
    "TurnState",
    "TurnRecord",
    "DartRecord",
    "RedemptionStatus",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Throw",
    "parse_throw",
    "Reducer",
    "apply_action",
    "legal_actions",
]
