"""
Tests for API layer.

Tests:
- API service methods
- Match lifecycle via API
- History after a completed match
- Error handling and HTTP status mapping
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    AdjustScoreRequest,
    CreateMatchRequest,
    CreatePlayerRequest,
    ErrorCode,
    ErrorResponse,
    SessionStatus,
    ThrowRequest,
    UpdatePlayerRequest,
)
from ..api.service import APIService
from ..history import InMemoryMatchHistory
from ..roster import PlayerRoster
from ..session import SessionManager


@pytest.fixture
def service():
    """Create a fresh API service with in-memory collaborators."""
    manager = SessionManager(roster=PlayerRoster(), history=InMemoryMatchHistory())
    return APIService(session_manager=manager)


@pytest.fixture
def players(service):
    alice = service.create_player(CreatePlayerRequest(name="Alice"))
    bob = service.create_player(CreatePlayerRequest(name="Bob"))
    return [alice.player_id, bob.player_id]


class TestPlayerService:
    """Tests for roster endpoints at the service layer."""

    def test_create_and_list(self, service, players):
        names = {p.name for p in service.list_players()}
        assert names == {"Alice", "Bob"}

    def test_duplicate_name(self, service, players):
        response = service.create_player(CreatePlayerRequest(name="alice"))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.VALIDATION_ERROR

    def test_update_player(self, service, players):
        response = service.update_player(players[0], UpdatePlayerRequest(photo_url="alice.png"))
        assert response.photo_url == "alice.png"
        assert response.name == "Alice"

    def test_delete_unknown_player(self, service):
        response = service.delete_player("ghost")
        assert response.error_code == ErrorCode.VALIDATION_ERROR


class TestMatchService:
    """Tests for creating, reading and ending matches."""

    def test_create_x01_match(self, service, players):
        response = service.create_match(
            CreateMatchRequest(game_type="x01", player_ids=players, starting_score=301)
        )

        assert response.status == SessionStatus.ACTIVE
        assert response.settings == {"starting_score": 301, "double_out": False}
        assert [p.score for p in response.players] == [301, 301]
        assert response.players[0].is_current_turn
        assert response.players[0].redemption_status == "none"
        assert response.current_turn.player_id == players[0]
        assert "adjust_score" in response.legal_actions
        assert "undo" not in response.legal_actions

    def test_create_cricket_match(self, service, players):
        response = service.create_match(
            CreateMatchRequest(game_type="cricket", player_ids=players, rounds_limit=25)
        )

        assert response.max_rounds == 25
        assert set(response.players[0].cricket_scores) == {"15", "16", "17", "18", "19", "20", "bull"}
        assert response.players[0].finished is None

    def test_invalid_round_limit(self, service, players):
        response = service.create_match(
            CreateMatchRequest(game_type="cricket", player_ids=players, rounds_limit=12)
        )
        assert response.error_code == ErrorCode.VALIDATION_ERROR

    def test_unknown_player(self, service, players):
        response = service.create_match(CreateMatchRequest(player_ids=[players[0], "ghost"]))
        assert response.error_code == ErrorCode.VALIDATION_ERROR

    def test_get_nonexistent_match(self, service):
        response = service.get_match("nonexistent-id")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_end_match(self, service, players):
        match = service.create_match(CreateMatchRequest(player_ids=players))

        assert service.end_match(match.match_id).success
        assert service.list_matches().count == 0
        assert service.end_match(match.match_id).error_code == ErrorCode.SESSION_NOT_FOUND


class TestActionService:
    """Tests for throw, undo, advance and adjust actions."""

    @pytest.fixture
    def match_id(self, service, players):
        return service.create_match(
            CreateMatchRequest(player_ids=players, starting_score=40)
        ).match_id

    def test_throw(self, service, match_id):
        response = service.record_throw(match_id, ThrowRequest(base_value=10, multiplier=2))

        assert response.success
        assert response.changes
        assert response.match.players[0].score == 20
        assert response.match.current_turn.scores == [20]
        assert "undo" in response.match.legal_actions

    def test_invalid_throw(self, service, match_id):
        response = service.record_throw(match_id, ThrowRequest(base_value=50, multiplier=2))
        assert response.error_code == ErrorCode.VALIDATION_ERROR

    def test_undo_nothing(self, service, match_id):
        response = service.undo(match_id)
        assert response.error_code == ErrorCode.ILLEGAL_ACTION

    def test_advance(self, service, match_id, players):
        response = service.advance_turn(match_id)
        assert response.match.current_turn.player_id == players[1]
        assert len(response.match.turns) == 1

    def test_adjust(self, service, match_id, players):
        response = service.adjust_score(match_id, AdjustScoreRequest(player_id=players[1], new_score=12))
        assert response.match.players[1].score == 12

    def test_action_on_unknown_match(self, service):
        response = service.undo("nope")
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_completed_match_lands_in_history(self, service, match_id, players):
        service.advance_turn(match_id)
        response = service.record_throw(match_id, ThrowRequest(base_value=20, multiplier=2))

        assert response.game_concluded
        assert response.match.status == SessionStatus.GAME_OVER
        assert response.match.winner_id == players[1]
        assert response.match.legal_actions == []

        history = service.list_history()
        assert history.count == 1
        assert history.matches[0].winner_id == players[1]

        record = service.get_history_match(match_id)
        assert len(record.turns) == 2

        rejected = service.record_throw(match_id, ThrowRequest(base_value=1))
        assert rejected.error_code == ErrorCode.ILLEGAL_ACTION

    def test_missing_history_match(self, service):
        response = service.get_history_match("nope")
        assert response.error_code == ErrorCode.MATCH_NOT_FOUND


class TestApp:
    """Tests for the HTTP surface."""

    @pytest.fixture
    def client(self, service):
        return TestClient(create_app(service))

    @pytest.fixture
    def player_ids(self, client):
        ids = []
        for name in ("Alice", "Bob"):
            response = client.post("/api/v1/players", json={"name": name})
            assert response.status_code == 201
            ids.append(response.json()["player_id"])
        return ids

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_full_match(self, client, player_ids):
        created = client.post(
            "/api/v1/matches",
            json={"game_type": "x01", "player_ids": player_ids, "starting_score": 40, "double_out": True},
        )
        assert created.status_code == 201
        match_id = created.json()["match_id"]

        response = client.post(f"/api/v1/matches/{match_id}/throws", json={"base_value": 20, "multiplier": 1})
        assert response.json()["match"]["players"][0]["score"] == 20

        response = client.post(f"/api/v1/matches/{match_id}/undo")
        assert response.json()["match"]["players"][0]["score"] == 40

        response = client.post(f"/api/v1/matches/{match_id}/throws", json={"base_value": 20, "multiplier": 2})
        body = response.json()
        assert body["game_concluded"] is False
        assert body["match"]["redemption_mode"] is True
        assert body["match"]["first_finished_player_id"] == player_ids[0]

        response = client.post(f"/api/v1/matches/{match_id}/advance")
        body = response.json()
        assert body["game_concluded"] is True
        assert body["match"]["winner_id"] == player_ids[0]

        listing = client.get("/api/v1/history").json()
        assert listing["count"] == 1
        detail = client.get(f"/api/v1/history/{match_id}").json()
        assert detail["winner_id"] == player_ids[0]
        assert detail["game_type"] == "x01"

    def test_validation_error_is_400(self, client, player_ids):
        match_id = client.post("/api/v1/matches", json={"player_ids": player_ids}).json()["match_id"]

        response = client.post(f"/api/v1/matches/{match_id}/throws", json={"base_value": 25, "multiplier": 3})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_illegal_action_is_409(self, client, player_ids):
        match_id = client.post("/api/v1/matches", json={"player_ids": player_ids}).json()["match_id"]

        response = client.post(f"/api/v1/matches/{match_id}/undo")
        assert response.status_code == 409
        assert response.json()["error_code"] == "ILLEGAL_ACTION"

    def test_unknown_match_is_404(self, client):
        assert client.get("/api/v1/matches/nope").status_code == 404
        assert client.post("/api/v1/matches/nope/advance").status_code == 404
        assert client.get("/api/v1/history/nope").status_code == 404

    def test_adjust_in_cricket_is_409(self, client, player_ids):
        match_id = client.post(
            "/api/v1/matches", json={"game_type": "cricket", "player_ids": player_ids}
        ).json()["match_id"]

        response = client.post(
            f"/api/v1/matches/{match_id}/adjust", json={"player_id": player_ids[0], "new_score": 0}
        )
        assert response.status_code == 409

    def test_end_match(self, client, player_ids):
        match_id = client.post("/api/v1/matches", json={"player_ids": player_ids}).json()["match_id"]

        assert client.delete(f"/api/v1/matches/{match_id}").status_code == 200
        assert client.get("/api/v1/matches").json()["count"] == 0
        assert client.get("/api/v1/history").json()["count"] == 0
