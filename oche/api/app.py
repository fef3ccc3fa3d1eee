"""
FastAPI Application - REST API for scoreboard clients.

Endpoints:
    GET    /health                                Health check
    GET    /api/v1/players                        List roster players
    POST   /api/v1/players                        Create player
    PATCH  /api/v1/players/{id}                   Rename player / change photo
    DELETE /api/v1/players/{id}                   Delete player
    POST   /api/v1/matches                        Start a match
    GET    /api/v1/matches                        List active matches
    GET    /api/v1/matches/{id}                   Get match state
    DELETE /api/v1/matches/{id}                   End match
    POST   /api/v1/matches/{id}/throws            Record a dart
    POST   /api/v1/matches/{id}/undo              Undo the last dart of the turn
    POST   /api/v1/matches/{id}/advance           End the current turn early
    POST   /api/v1/matches/{id}/adjust            Correct an X01 score
    GET    /api/v1/history                        List completed matches
    GET    /api/v1/history/{id}                   Get a completed match with its turn log

All responses are JSON with explicit Pydantic schemas.
Errors use ErrorResponse with a machine-readable error_code.
"""

from typing import Annotated, Union
import logging

from .. import __version__
from ..config import (
    ALLOWED_ORIGINS,
    OCHE_ENV,
    OCHE_HISTORY_DIR,
    OCHE_ROSTER_FILE,
    configure_logging,
)

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreatePlayerRequest,
        UpdatePlayerRequest,
        CreateMatchRequest,
        ThrowRequest,
        AdjustScoreRequest,
        # Response models
        ActionResponse,
        ErrorResponse,
        HealthResponse,
        HistoryListResponse,
        MatchStateResponse,
        OperationResponse,
        ParticipantInfo,
        SessionListResponse,
        # Enums
        ErrorCode,
    )
    from ..history import FileMatchHistory, InMemoryMatchHistory, MatchRecord
    from ..roster import PlayerRoster
    from ..session import SessionManager

    configure_logging()

    app = FastAPI(
        title="Oche Scoring API",
        description="""
Darts scoring engine for X01 and Cricket.

## Match Flow

1. Create players with `POST /players`
2. Start a match with `POST /matches`
3. Send every dart with `POST /matches/{id}/throws`
4. Use `undo`, `advance` and `adjust` for corrections
5. Completed matches appear under `GET /history`

## Error Codes

| Code | Description |
|------|-------------|
| `VALIDATION_ERROR` | Malformed throw, bad settings or unknown player |
| `ILLEGAL_ACTION` | Not allowed right now (game over, nothing to undo) |
| `SESSION_NOT_FOUND` | Match session does not exist |
| `MATCH_NOT_FOUND` | No completed match with that ID |
| `PERSISTENCE_FAILURE` | Storage failed |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # CORS for scoreboard clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    if service is None:
        history = FileMatchHistory(OCHE_HISTORY_DIR) if OCHE_HISTORY_DIR else InMemoryMatchHistory()
        roster = PlayerRoster(OCHE_ROSTER_FILE)
        service = APIService(session_manager=SessionManager(roster=roster, history=history))
    api_service = service

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.VALIDATION_ERROR: 400,
        ErrorCode.ILLEGAL_ACTION: 409,
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.MATCH_NOT_FOUND: 404,
        ErrorCode.PERSISTENCE_FAILURE: 500,
        ErrorCode.INTERNAL_ERROR: 500,
    }

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_codes.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Player Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/players",
        response_model=list[ParticipantInfo],
        tags=["Players"],
        summary="List roster players",
    )
    async def list_players() -> list[ParticipantInfo]:
        """All roster players, newest first."""
        return api_service.list_players()

    @app.post(
        "/api/v1/players",
        response_model=ParticipantInfo,
        status_code=201,
        responses={400: {"model": ErrorResponse, "description": "Empty or duplicate name"}},
        tags=["Players"],
        summary="Create a roster player",
    )
    async def create_player(request: CreatePlayerRequest) -> Union[ParticipantInfo, JSONResponse]:
        return respond(api_service.create_player(request))

    @app.patch(
        "/api/v1/players/{player_id}",
        response_model=ParticipantInfo,
        responses={400: {"model": ErrorResponse}},
        tags=["Players"],
        summary="Update a roster player",
    )
    async def update_player(
        player_id: str,
        request: UpdatePlayerRequest,
    ) -> Union[ParticipantInfo, JSONResponse]:
        return respond(api_service.update_player(player_id, request))

    @app.delete(
        "/api/v1/players/{player_id}",
        response_model=OperationResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Players"],
        summary="Delete a roster player",
    )
    async def delete_player(player_id: str) -> Union[OperationResponse, JSONResponse]:
        """Delete a player. Completed matches in history keep their name."""
        return respond(api_service.delete_player(player_id))

    # =========================================================================
    # Match Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches",
        response_model=MatchStateResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse, "description": "Invalid players or settings"}},
        tags=["Matches"],
        summary="Start a match",
    )
    async def create_match(request: CreateMatchRequest) -> Union[MatchStateResponse, JSONResponse]:
        """
        Start a match.

        `player_ids` sets the throwing order. X01 uses `starting_score`
        and `double_out`, Cricket uses `rounds_limit`.
        """
        return respond(api_service.create_match(request))

    @app.get(
        "/api/v1/matches",
        response_model=SessionListResponse,
        tags=["Matches"],
        summary="List active matches",
    )
    async def list_matches() -> SessionListResponse:
        return api_service.list_matches()

    @app.get(
        "/api/v1/matches/{match_id}",
        response_model=MatchStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Get match state",
    )
    async def get_match(match_id: str) -> Union[MatchStateResponse, JSONResponse]:
        return respond(api_service.get_match(match_id))

    @app.delete(
        "/api/v1/matches/{match_id}",
        response_model=OperationResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="End a match",
    )
    async def end_match(
        match_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> Union[OperationResponse, JSONResponse]:
        """End a match session. Unfinished matches are not saved."""
        return respond(api_service.end_match(match_id, reason))

    # =========================================================================
    # Action Endpoints
    # =========================================================================

    action_errors = {
        400: {"model": ErrorResponse, "description": "Invalid input"},
        404: {"model": ErrorResponse, "description": "Match not found"},
        409: {"model": ErrorResponse, "description": "Action not allowed now"},
    }

    @app.post(
        "/api/v1/matches/{match_id}/throws",
        response_model=ActionResponse,
        responses=action_errors,
        tags=["Game Loop"],
        summary="Record a dart",
    )
    async def record_throw(match_id: str, request: ThrowRequest) -> Union[ActionResponse, JSONResponse]:
        """
        Record a dart for the current thrower.

        `base_value` 0 is a miss. Bull is 25, double bull is 50 with multiplier 1.
        """
        return respond(api_service.record_throw(match_id, request))

    @app.post(
        "/api/v1/matches/{match_id}/undo",
        response_model=ActionResponse,
        responses=action_errors,
        tags=["Game Loop"],
        summary="Undo the last dart of the current turn",
    )
    async def undo(match_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.undo(match_id))

    @app.post(
        "/api/v1/matches/{match_id}/advance",
        response_model=ActionResponse,
        responses=action_errors,
        tags=["Game Loop"],
        summary="End the current turn",
    )
    async def advance_turn(match_id: str) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.advance_turn(match_id))

    @app.post(
        "/api/v1/matches/{match_id}/adjust",
        response_model=ActionResponse,
        responses=action_errors,
        tags=["Game Loop"],
        summary="Correct a player's X01 score",
    )
    async def adjust_score(
        match_id: str,
        request: AdjustScoreRequest,
    ) -> Union[ActionResponse, JSONResponse]:
        return respond(api_service.adjust_score(match_id, request))

    # =========================================================================
    # History Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/history",
        response_model=HistoryListResponse,
        responses={500: {"model": ErrorResponse}},
        tags=["History"],
        summary="List completed matches",
    )
    async def list_history() -> Union[HistoryListResponse, JSONResponse]:
        return respond(api_service.list_history())

    @app.get(
        "/api/v1/history/{match_id}",
        response_model=MatchRecord,
        responses={404: {"model": ErrorResponse}},
        tags=["History"],
        summary="Get a completed match",
    )
    async def get_history_match(match_id: str) -> Union[MatchRecord, JSONResponse]:
        return respond(api_service.get_history_match(match_id))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health() -> HealthResponse:
        """Check API health status."""
        return HealthResponse(
            status="healthy",
            service="oche",
            version=__version__,
            environment=OCHE_ENV,
        )

    logger.info("Oche API ready (env=%s)", OCHE_ENV)
    return app


# For running directly: uvicorn oche.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
