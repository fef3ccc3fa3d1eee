"""
Tests for completed match records and history stores.
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.state import GameType
from ..errors import PersistenceFailure, ValidationError
from ..history import FileMatchHistory, InMemoryMatchHistory, MatchRecord
from .conftest import play


class TestMatchRecord:
    """Tests for building records from finished matches."""

    def test_from_state(self, finished_x01_match):
        record = MatchRecord.from_state(finished_x01_match, completed_at=1000.0)

        assert record.match_id == "x01_done"
        assert record.game_type is GameType.X01
        assert record.settings == {"starting_score": 40, "double_out": False}
        assert record.winner_id == "bob"
        assert record.completed_at == 1000.0
        assert record.rounds_played == 1
        assert [t.player_id for t in record.turns] == ["alice", "bob"]
        assert record.turns[0].scores == [0, 10]
        assert record.turns[1].turn_order == 1

    def test_player_results(self, finished_x01_match):
        record = MatchRecord.from_state(finished_x01_match)

        alice, bob = record.players
        assert alice.final_score == 30
        assert alice.darts_thrown == 2
        assert alice.average_per_dart == 5.0
        assert bob.final_score == 0
        assert bob.total_score == 40
        assert record.winner.name == "Bob"
        assert alice.cricket_marks is None

    def test_cricket_marks_recorded(self, reducer, cricket_match):
        state = play(reducer, cricket_match, (20, 3), (19, 1), *[Action.advance_turn()] * 30)
        record = MatchRecord.from_state(state)

        alice = record.players[0]
        assert alice.cricket_marks["20"] == 3
        assert alice.cricket_marks["19"] == 1
        assert alice.cricket_marks["bull"] == 0
        assert record.winner_id == "alice"

    def test_summary_drops_logs(self, finished_x01_match):
        summary = MatchRecord.from_state(finished_x01_match).summary()

        assert not hasattr(summary, "turns")
        assert summary.winner_id == "bob"
        assert len(summary.players) == 2

    def test_json_round_trip(self, finished_x01_match):
        record = MatchRecord.from_state(finished_x01_match)
        restored = MatchRecord.model_validate_json(record.model_dump_json())

        assert restored == record


class TestInMemoryHistory:
    """Tests for the in-memory history store."""

    def test_record_and_get(self, finished_x01_match):
        history = InMemoryMatchHistory()
        record = history.record_completed_match(finished_x01_match)

        assert history.get_match("x01_done") == record
        assert history.get_match("missing") is None

    def test_in_progress_match_rejected(self, x01_match):
        history = InMemoryMatchHistory()
        with pytest.raises(ValidationError):
            history.record_completed_match(x01_match)

    def test_list_newest_first(self, finished_x01_match):
        history = InMemoryMatchHistory()
        older = MatchRecord.from_state(finished_x01_match, completed_at=100.0)
        newer = older.model_copy(update={"match_id": "later", "completed_at": 200.0})
        history._write(older)
        history._write(newer)

        summaries = history.list_completed_matches()
        assert [s.match_id for s in summaries] == ["later", "x01_done"]


class TestFileHistory:
    """Tests for the JSON file history store."""

    @pytest.fixture
    def history(self, tmp_path):
        return FileMatchHistory(history_dir=tmp_path / "history")

    def test_creates_directory(self, history):
        assert history.history_dir.is_dir()

    def test_write_and_read(self, history, finished_x01_match):
        record = history.record_completed_match(finished_x01_match)

        assert (history.history_dir / "x01_done.json").exists()
        assert history.list_record_ids() == ["x01_done"]
        assert history.get_match("x01_done") == record

    def test_list_summaries(self, history, finished_x01_match):
        history.record_completed_match(finished_x01_match)

        summaries = history.list_completed_matches()
        assert len(summaries) == 1
        assert summaries[0].winner_id == "bob"

    def test_unknown_match(self, history):
        assert history.get_match("nope") is None

    def test_path_like_ids_ignored(self, history):
        assert history.get_match("../secrets") is None

    def test_unsafe_match_id_not_written(self, history, finished_x01_match):
        finished_x01_match.match_id = "../escape"
        with pytest.raises(PersistenceFailure):
            history.record_completed_match(finished_x01_match)

    def test_corrupt_file_skipped_in_listing(self, history, finished_x01_match):
        history.record_completed_match(finished_x01_match)
        (history.history_dir / "broken.json").write_text("{not json", encoding="utf-8")

        summaries = history.list_completed_matches()
        assert [s.match_id for s in summaries] == ["x01_done"]

    def test_corrupt_file_get_raises(self, history):
        (history.history_dir / "broken.json").write_text("{}", encoding="utf-8")
        with pytest.raises(PersistenceFailure):
            history.get_match("broken")

    def test_survives_new_instance(self, history, finished_x01_match):
        history.record_completed_match(finished_x01_match)

        reopened = FileMatchHistory(history_dir=history.history_dir)
        assert reopened.get_match("x01_done").winner_id == "bob"
