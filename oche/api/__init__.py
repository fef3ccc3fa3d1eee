"""
API Module - Scoreboard client interface.

Exposes the engine via REST API. A client:
1. Manages roster players
2. Starts X01 or Cricket matches
3. Sends every dart, undo and correction as it happens
4. Receives the full match state back after each action
5. Browses completed matches in history
"""

from .schemas import (
    # Requests
    CreatePlayerRequest,
    UpdatePlayerRequest,
    CreateMatchRequest,
    ThrowRequest,
    AdjustScoreRequest,
    # Responses
    ActionResponse,
    MatchStateResponse,
    HistoryListResponse,
    ErrorResponse,
    # Shared
    ParticipantInfo,
    PlayerInfo,
    TurnInfo,
    # Enums
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreatePlayerRequest",
    "UpdatePlayerRequest",
    "CreateMatchRequest",
    "ThrowRequest",
    "AdjustScoreRequest",
    # Responses
    "ActionResponse",
    "MatchStateResponse",
    "HistoryListResponse",
    "ErrorResponse",
    # Shared
    "ParticipantInfo",
    "PlayerInfo",
    "TurnInfo",
    # Enums
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
