"""
Match Setup - Creates initial match state.

This module handles:
- Validating participants and settings
- Creating zeroed player states per game type
- Seating the first participant as the current thrower
- Rebuilding settings from persisted records
"""

from __future__ import annotations
from typing import Any, Sequence
import logging
import uuid

from ..engine_core.state import (
    CricketSettings,
    GameType,
    MatchSettings,
    MatchState,
    Participant,
    PlayerStats,
    TurnState,
    X01Settings,
)
from ..errors import ValidationError
from .registry import rules_for

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2


def default_settings(game_type: GameType) -> MatchSettings:
    if game_type is GameType.X01:
        return X01Settings()
    if game_type is GameType.CRICKET:
        return CricketSettings()
    raise ValidationError(f"Unknown game type: {game_type!r}")


def settings_from_dict(game_type: GameType, data: dict[str, Any] | None) -> MatchSettings:
    """Rebuild settings for a game type from plain data."""
    data = data or {}
    if game_type is GameType.X01:
        return X01Settings(
            starting_score=data.get("starting_score", 501),
            double_out=bool(data.get("double_out", False)),
        )
    if game_type is GameType.CRICKET:
        return CricketSettings(rounds_limit=data.get("rounds_limit", 20))
    raise ValidationError(f"Unknown game type: {game_type!r}")


def setup_match(
    game_type: GameType,
    settings: MatchSettings | None,
    participants: Sequence[Participant],
    match_id: str | None = None,
) -> MatchState:
    """
    Set up a new match.

    Args:
        game_type: X01 or Cricket
        settings: Settings for that game type (defaults if None)
        participants: Players in throwing order, at least two
        match_id: Optional ID (generated if not provided)

    Returns:
        Initial MatchState with the first participant to throw
    """
    if not isinstance(game_type, GameType):
        raise ValidationError(f"Unknown game type: {game_type!r}")
    if len(participants) < MIN_PLAYERS:
        raise ValidationError(f"A match needs at least {MIN_PLAYERS} players, got {len(participants)}")

    ids = [p.player_id for p in participants]
    if len(set(ids)) != len(ids):
        raise ValidationError("Each participant can only join a match once")

    rules = rules_for(game_type)
    settings = settings if settings is not None else default_settings(game_type)
    rules.validate_settings(settings)

    players = rules.create_players(participants, settings)
    players[0].current = True

    state = MatchState(
        match_id=match_id or uuid.uuid4().hex,
        game_type=game_type,
        settings=settings,
        players=players,
        current_turn=TurnState(
            player_id=players[0].player_id,
            start_score=rules.turn_start_score(players[0]),
        ),
        player_stats={p.player_id: PlayerStats() for p in players},
        current_round=1,
        max_rounds=settings.rounds_limit if game_type is GameType.CRICKET else None,
    )

    logger.debug(
        "Set up %s match %s for %s",
        game_type.value, state.match_id, ", ".join(ids),
    )
    return state
