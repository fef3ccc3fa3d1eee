"""
Pytest fixtures for Oche tests.
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.reducer import Reducer
from ..engine_core.state import (
    CricketSettings,
    GameType,
    MatchState,
    Participant,
    X01Settings,
)
from ..games.setup import setup_match


@pytest.fixture
def alice() -> Participant:
    return Participant(player_id="alice", name="Alice")


@pytest.fixture
def bob() -> Participant:
    return Participant(player_id="bob", name="Bob")


@pytest.fixture
def carol() -> Participant:
    return Participant(player_id="carol", name="Carol")


@pytest.fixture
def reducer() -> Reducer:
    return Reducer()


@pytest.fixture
def x01_match(alice, bob) -> MatchState:
    """A 2-player 501 match, Alice to throw."""
    return setup_match(GameType.X01, X01Settings(), [alice, bob], match_id="x01_test")


@pytest.fixture
def short_x01_match(alice, bob, carol) -> MatchState:
    """A 3-player 40 match, handy for checkouts."""
    return setup_match(
        GameType.X01, X01Settings(starting_score=40), [alice, bob, carol], match_id="x01_short"
    )


@pytest.fixture
def cricket_match(alice, bob) -> MatchState:
    """A 2-player Cricket match with the shortest round limit."""
    return setup_match(
        GameType.CRICKET, CricketSettings(rounds_limit=15), [alice, bob], match_id="cricket_test"
    )


def play(reducer: Reducer, state: MatchState, *darts) -> MatchState:
    """
    Apply a sequence of darts, failing loudly on a rejected action.

    Each dart is (base_value, multiplier), a bare base value, or an Action.
    """
    for dart in darts:
        if isinstance(dart, Action):
            action = dart
        elif isinstance(dart, tuple):
            action = Action.record_throw(*dart)
        else:
            action = Action.record_throw(dart)
        state = reducer.apply(state, action).unwrap()
    return state


@pytest.fixture
def finished_x01_match(reducer, alice, bob) -> MatchState:
    """A 40 match Bob wins on his first turn."""
    state = setup_match(GameType.X01, X01Settings(starting_score=40), [alice, bob], match_id="x01_done")
    return play(reducer, state, 0, (10, 1), Action.advance_turn(), (20, 2))
