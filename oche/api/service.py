"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine actions
2. Manages roster players and match sessions
3. Reads completed matches from history
4. Formats responses for scoreboard clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Engine errors come back as ErrorResponse values, never as exceptions.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    CreatePlayerRequest,
    UpdatePlayerRequest,
    CreateMatchRequest,
    ThrowRequest,
    AdjustScoreRequest,
    # Responses
    ActionResponse,
    ErrorResponse,
    HistoryListResponse,
    MatchStateResponse,
    OperationResponse,
    SessionListResponse,
    # Shared
    DartInfo,
    ParticipantInfo,
    PlayerInfo,
    StatsInfo,
    TargetInfo,
    TurnInfo,
    # Enums
    ErrorCode,
    GameTypeName,
    SessionStatus,
)
from ..engine_core.action import Action, ActionResult
from ..engine_core.action_generator import legal_actions
from ..engine_core.state import CricketPlayer, GameType, MatchState, X01Player
from ..errors import EngineError
from ..games.setup import settings_from_dict
from ..history import MatchRecord
from ..session import MatchSession, SessionManager, SessionState


_SESSION_STATUS = {
    SessionState.ACTIVE: SessionStatus.ACTIVE,
    SessionState.GAME_OVER: SessionStatus.GAME_OVER,
    SessionState.ABANDONED: SessionStatus.ABANDONED,
}


def error_response(error: EngineError) -> ErrorResponse:
    """Convert an engine error into the API error shape."""
    try:
        code = ErrorCode(error.code)
    except ValueError:
        code = ErrorCode.INTERNAL_ERROR
    return ErrorResponse(error=str(error), error_code=code)


@dataclass
class APIService:
    """
    Main API service for scoreboard clients.

    Usage:
        service = APIService()

        alice = service.create_player(CreatePlayerRequest(name="Alice"))
        bob = service.create_player(CreatePlayerRequest(name="Bob"))

        match = service.create_match(CreateMatchRequest(
            game_type="x01", player_ids=[alice.player_id, bob.player_id],
        ))
        result = service.record_throw(match.match_id, ThrowRequest(base_value=20, multiplier=3))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # =========================================================================
    # Players
    # =========================================================================

    def list_players(self) -> list[ParticipantInfo]:
        return [
            ParticipantInfo.model_validate(p)
            for p in self.session_manager.roster.list_players()
        ]

    def create_player(self, request: CreatePlayerRequest) -> ParticipantInfo | ErrorResponse:
        try:
            player = self.session_manager.roster.create_player(request.name, request.photo_url)
        except EngineError as e:
            return error_response(e)
        return ParticipantInfo.model_validate(player)

    def update_player(
        self,
        player_id: str,
        request: UpdatePlayerRequest,
    ) -> ParticipantInfo | ErrorResponse:
        try:
            player = self.session_manager.roster.update_player(
                player_id, name=request.name, photo_url=request.photo_url
            )
        except EngineError as e:
            return error_response(e)
        return ParticipantInfo.model_validate(player)

    def delete_player(self, player_id: str) -> OperationResponse | ErrorResponse:
        try:
            self.session_manager.roster.delete_player(player_id)
        except EngineError as e:
            return error_response(e)
        return OperationResponse(success=True, message=f"Player {player_id} deleted")

    # =========================================================================
    # Matches
    # =========================================================================

    def create_match(self, request: CreateMatchRequest) -> MatchStateResponse | ErrorResponse:
        """
        Start a match with roster players in the given throwing order.
        """
        game_type = GameType(GameTypeName(request.game_type).value)
        settings = settings_from_dict(game_type, request.model_dump())
        try:
            session = self.session_manager.create_session(game_type, request.player_ids, settings)
        except EngineError as e:
            return error_response(e)
        return self._build_match_state(session)

    def get_match(self, match_id: str) -> MatchStateResponse | ErrorResponse:
        session = self.session_manager.get_session(match_id)
        if not session:
            return ErrorResponse(
                error=f"Session {match_id} not found",
                error_code=ErrorCode.SESSION_NOT_FOUND,
            )
        return self._build_match_state(session)

    def end_match(self, match_id: str, reason: str = "user_ended") -> OperationResponse | ErrorResponse:
        """
        End a match session. Unfinished matches are discarded.
        """
        try:
            self.session_manager.end_session(match_id, reason)
        except EngineError as e:
            return error_response(e)
        return OperationResponse(success=True, message=f"Session {match_id} ended")

    def list_matches(self) -> SessionListResponse:
        """
        List active match IDs.
        """
        sessions = self.session_manager.list_active_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    # =========================================================================
    # Actions
    # =========================================================================

    def record_throw(self, match_id: str, request: ThrowRequest) -> ActionResponse | ErrorResponse:
        return self._dispatch(match_id, Action.record_throw(request.base_value, request.multiplier))

    def undo(self, match_id: str) -> ActionResponse | ErrorResponse:
        return self._dispatch(match_id, Action.undo())

    def advance_turn(self, match_id: str) -> ActionResponse | ErrorResponse:
        return self._dispatch(match_id, Action.advance_turn())

    def adjust_score(self, match_id: str, request: AdjustScoreRequest) -> ActionResponse | ErrorResponse:
        return self._dispatch(match_id, Action.adjust_score(request.player_id, request.new_score))

    def _dispatch(self, match_id: str, action: Action) -> ActionResponse | ErrorResponse:
        try:
            session = self.session_manager.require_session(match_id)
            result = self.session_manager.dispatch(match_id, action)
        except EngineError as e:
            return error_response(e)

        if not result.success:
            return self._failure_response(result)

        return ActionResponse(
            success=True,
            changes=result.state_changes,
            game_concluded=result.game_concluded,
            warnings=result.warnings,
            match=self._build_match_state(session),
        )

    def _failure_response(self, result: ActionResult) -> ErrorResponse:
        if result.exception is not None:
            return error_response(result.exception)
        return ErrorResponse(
            error=result.error or "Action failed",
            error_code=ErrorCode.INTERNAL_ERROR,
            details={"engine_code": result.error_code} if result.error_code else None,
        )

    # =========================================================================
    # History
    # =========================================================================

    def list_history(self) -> HistoryListResponse | ErrorResponse:
        try:
            matches = self.session_manager.history.list_completed_matches()
        except EngineError as e:
            return error_response(e)
        return HistoryListResponse(matches=matches, count=len(matches))

    def get_history_match(self, match_id: str) -> MatchRecord | ErrorResponse:
        try:
            record = self.session_manager.history.get_match(match_id)
        except EngineError as e:
            return error_response(e)
        if record is None:
            return ErrorResponse(
                error=f"Match {match_id} not found in history",
                error_code=ErrorCode.MATCH_NOT_FOUND,
            )
        return record

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _build_match_state(self, session: MatchSession) -> MatchStateResponse:
        """Convert a session's match to MatchStateResponse."""
        match = session.match
        return MatchStateResponse(
            match_id=match.match_id,
            status=_SESSION_STATUS.get(session.state, SessionStatus.ACTIVE),
            game_type=GameTypeName(match.game_type.value),
            settings=match.settings.to_dict(),
            players=[self._build_player(match, p) for p in match.players],
            current_turn=TurnInfo(
                player_id=match.current_turn.player_id,
                darts=[self._build_dart(d) for d in match.current_turn.darts],
                scores=match.current_turn.scores,
            ),
            turns=[
                TurnInfo(
                    player_id=t.player_id,
                    darts=[self._build_dart(d) for d in t.darts],
                    scores=t.scores,
                )
                for t in match.turns
            ],
            current_round=match.current_round,
            max_rounds=match.max_rounds,
            game_over=match.game_over,
            winner_id=match.winner_id,
            first_finished_player_id=match.first_finished_player_id,
            redemption_mode=match.redemption_mode,
            overtime=match.overtime,
            legal_actions=[a.value for a in legal_actions(match)],
            warnings=list(session.warnings),
        )

    def _build_player(self, match: MatchState, player) -> PlayerInfo:
        stats = match.player_stats[player.player_id]
        info = PlayerInfo(
            player_id=player.player_id,
            name=player.name,
            score=player.score,
            is_current_turn=player.current,
            stats=StatsInfo(
                total_score=stats.total_score,
                darts_thrown=stats.darts_thrown,
                targets_hit=stats.targets_hit,
                average_per_dart=round(stats.average_per_dart, 2),
            ),
        )
        if isinstance(player, X01Player):
            info.finished = player.finished
            info.eliminated = player.eliminated
            info.redemption_status = player.redemption_status.value
        elif isinstance(player, CricketPlayer):
            info.cricket_scores = {
                key: TargetInfo(marks=marks.marks, closed=marks.closed)
                for key, marks in player.cricket_scores.items()
            }
        return info

    @staticmethod
    def _build_dart(dart) -> DartInfo:
        return DartInfo(base_value=dart.base_value, multiplier=dart.multiplier, score=dart.score)
