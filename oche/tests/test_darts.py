"""
Tests for dart validation.

Tests:
- Board values and multipliers
- Bull special cases
- Cricket targets and marks
"""

import pytest

from ..engine_core.darts import Throw, parse_throw
from ..errors import ValidationError


class TestParseThrow:
    """Tests for parse_throw."""

    @pytest.mark.parametrize("base,mult,score", [
        (20, 3, 60),
        (1, 1, 1),
        (16, 2, 32),
        (25, 1, 25),
        (25, 2, 50),
        (50, 1, 50),
    ])
    def test_valid_throws(self, base, mult, score):
        assert parse_throw(base, mult).score == score

    def test_miss_normalizes_multiplier(self):
        """A miss scores nothing whatever multiplier was sent."""
        throw = parse_throw(0, 3)
        assert throw.is_miss
        assert throw.multiplier == 1
        assert throw.score == 0

    @pytest.mark.parametrize("base", [21, 24, 26, 49, 51, 60, -1])
    def test_invalid_base_value(self, base):
        with pytest.raises(ValidationError):
            parse_throw(base, 1)

    @pytest.mark.parametrize("mult", [0, 4, -1])
    def test_invalid_multiplier(self, mult):
        with pytest.raises(ValidationError):
            parse_throw(20, mult)

    def test_no_triple_bull(self):
        with pytest.raises(ValidationError):
            parse_throw(25, 3)

    @pytest.mark.parametrize("mult", [2, 3])
    def test_double_bull_is_single_segment(self, mult):
        with pytest.raises(ValidationError):
            parse_throw(50, mult)

    @pytest.mark.parametrize("base", [None, "20", 20.0, True])
    def test_non_integer_base(self, base):
        with pytest.raises(ValidationError):
            parse_throw(base, 1)

    def test_validation_error_code(self):
        with pytest.raises(ValidationError) as exc:
            parse_throw(99)
        assert exc.value.code == "VALIDATION_ERROR"


class TestCricketValues:
    """Tests for the cricket view of a throw."""

    def test_numbered_target(self):
        throw = Throw(19, 3)
        assert throw.cricket_target == "19"
        assert throw.cricket_marks == 3
        assert throw.cricket_point_value == 19

    def test_non_target_numbers(self):
        throw = Throw(14, 3)
        assert throw.cricket_target is None
        assert throw.cricket_marks == 0

    def test_single_bull(self):
        throw = Throw(25, 1)
        assert throw.cricket_target == "bull"
        assert throw.cricket_marks == 1
        assert throw.cricket_point_value == 25

    def test_double_bull_via_fifty(self):
        throw = Throw(50, 1)
        assert throw.cricket_target == "bull"
        assert throw.cricket_marks == 2

    def test_double_bull_via_multiplier(self):
        throw = Throw(25, 2)
        assert throw.cricket_marks == 2
        assert throw.is_double

    def test_miss(self):
        assert Throw(0, 1).cricket_target is None
