"""Lookup from game type to its rules."""

from __future__ import annotations

from ..engine_core.state import GameType
from ..errors import ValidationError
from .base import GameRules
from .cricket import CricketRules
from .x01 import X01Rules

_RULES: dict[GameType, GameRules] = {
    GameType.X01: X01Rules(),
    GameType.CRICKET: CricketRules(),
}


def rules_for(game_type: GameType) -> GameRules:
    """Get the rules object for a game type."""
    try:
        return _RULES[game_type]
    except KeyError:
        raise ValidationError(f"Unknown game type: {game_type!r}") from None
