"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between scoreboard clients and the engine.

Error Codes:
- VALIDATION_ERROR: Malformed input or unknown player
- ILLEGAL_ACTION: Action not allowed right now (game over, nothing to undo)
- SESSION_NOT_FOUND: Match session does not exist or has been ended
- MATCH_NOT_FOUND: No completed match with that ID in history
- PERSISTENCE_FAILURE: History storage failed
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.state import CRICKET_ROUND_LIMITS
from ..history.records import MatchSummary


# =============================================================================
# Enums
# =============================================================================

class GameTypeName(str, Enum):
    """Game type values."""
    X01 = "x01"
    CRICKET = "cricket"


class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ILLEGAL_ACTION = "ILLEGAL_ACTION"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class ParticipantInfo(BaseModel):
    """Roster player."""
    player_id: str
    name: str
    photo_url: Optional[str] = None
    created_at: float

    model_config = {"from_attributes": True}


class TargetInfo(BaseModel):
    """Marks on one cricket target."""
    marks: int = 0
    closed: bool = False


class StatsInfo(BaseModel):
    """Cumulative stats for a player in a match."""
    total_score: int = 0
    darts_thrown: int = 0
    targets_hit: int = 0
    average_per_dart: float = 0.0


class PlayerInfo(BaseModel):
    """Player standing in a match."""
    player_id: str
    name: str
    score: int
    is_current_turn: bool = False
    stats: StatsInfo = Field(default_factory=StatsInfo)

    # X01
    finished: Optional[bool] = None
    eliminated: Optional[bool] = None
    redemption_status: Optional[str] = None

    # Cricket
    cricket_scores: Optional[dict[str, TargetInfo]] = None


class DartInfo(BaseModel):
    base_value: int
    multiplier: int
    score: int


class TurnInfo(BaseModel):
    """A turn, completed or in progress."""
    player_id: str
    darts: list[DartInfo] = Field(default_factory=list)
    scores: list[int] = Field(default_factory=list)


# =============================================================================
# Requests
# =============================================================================

class CreatePlayerRequest(BaseModel):
    """Request to add a player to the roster."""
    name: str = Field(..., min_length=1, max_length=64)
    photo_url: Optional[str] = Field(None, description="Opaque photo reference")


class UpdatePlayerRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=64)
    photo_url: Optional[str] = None


class CreateMatchRequest(BaseModel):
    """Request to start a match."""
    game_type: GameTypeName = Field(GameTypeName.X01, description="x01 or cricket")
    player_ids: list[str] = Field(..., min_length=2, description="Roster IDs in throwing order")
    starting_score: int = Field(501, gt=0, description="X01 starting score")
    double_out: bool = Field(False, description="X01: finish on a double")
    rounds_limit: int = Field(20, description=f"Cricket round limit, one of {CRICKET_ROUND_LIMITS}")


class ThrowRequest(BaseModel):
    """A single dart. base_value 0 is a miss."""
    base_value: int = Field(..., ge=0, le=50, description="1-20, 25, 50 or 0 for a miss")
    multiplier: int = Field(1, ge=1, le=3)


class AdjustScoreRequest(BaseModel):
    """Manual X01 score correction."""
    player_id: str
    new_score: int


# =============================================================================
# Responses
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class MatchStateResponse(BaseModel):
    """Full state of a match."""
    match_id: str
    status: SessionStatus
    game_type: GameTypeName
    settings: dict[str, Any] = Field(default_factory=dict)
    players: list[PlayerInfo] = Field(default_factory=list)
    current_turn: TurnInfo
    turns: list[TurnInfo] = Field(default_factory=list)
    current_round: int = 1
    max_rounds: Optional[int] = None
    game_over: bool = False
    winner_id: Optional[str] = None

    # X01 finish resolution
    first_finished_player_id: Optional[str] = None
    redemption_mode: bool = False
    overtime: bool = False

    legal_actions: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ActionResponse(BaseModel):
    """Result of an applied action."""
    success: bool = True
    changes: list[str] = Field(default_factory=list)
    game_concluded: bool = False
    warnings: list[str] = Field(default_factory=list)
    match: MatchStateResponse


class SessionListResponse(BaseModel):
    """List of sessions."""
    sessions: list[str]
    count: int


class OperationResponse(BaseModel):
    """Response for delete-style operations."""
    success: bool
    message: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str


class HistoryListResponse(BaseModel):
    """Completed matches, newest first."""
    matches: list[MatchSummary]
    count: int
