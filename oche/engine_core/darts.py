"""
Dart values - turns a (base value, multiplier) pair into a validated throw.

Board values are 1-20, single bull (25) and double bull (50). A base
value of 0 is a miss. The double bull only exists as a single segment
and there is no triple bull.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..errors import ValidationError

MISS = 0
BULL = 25
DOUBLE_BULL = 50

VALID_BASE_VALUES = frozenset(range(0, 21)) | {BULL, DOUBLE_BULL}
VALID_MULTIPLIERS = (1, 2, 3)

CRICKET_NUMBERS = frozenset(range(15, 21))


@dataclass(frozen=True)
class Throw:
    """A validated dart."""
    base_value: int
    multiplier: int

    @property
    def score(self) -> int:
        return self.base_value * self.multiplier

    @property
    def is_miss(self) -> bool:
        return self.base_value == MISS

    @property
    def is_double(self) -> bool:
        return self.multiplier == 2

    @property
    def cricket_target(self) -> str | None:
        """Cricket target key this dart landed on, if any."""
        if self.base_value in (BULL, DOUBLE_BULL):
            return "bull"
        if self.base_value in CRICKET_NUMBERS:
            return str(self.base_value)
        return None

    @property
    def cricket_marks(self) -> int:
        """Marks this dart is worth on its cricket target."""
        if self.cricket_target is None:
            return 0
        if self.base_value == DOUBLE_BULL:
            return 2
        return self.multiplier

    @property
    def cricket_point_value(self) -> int:
        """Points per overflow mark."""
        if self.cricket_target == "bull":
            return BULL
        return self.base_value


def parse_throw(base_value: int | None, multiplier: int = 1) -> Throw:
    """
    Validate a dart.

    Raises ValidationError for values that can't be hit on a board.
    """
    if base_value is None:
        raise ValidationError("Throw requires a base value")
    if isinstance(base_value, bool) or not isinstance(base_value, int):
        raise ValidationError(f"Base value must be an integer, got {base_value!r}")
    if isinstance(multiplier, bool) or not isinstance(multiplier, int):
        raise ValidationError(f"Multiplier must be an integer, got {multiplier!r}")

    if base_value not in VALID_BASE_VALUES:
        raise ValidationError(f"Invalid base value: {base_value}")
    if multiplier not in VALID_MULTIPLIERS:
        raise ValidationError(f"Invalid multiplier: {multiplier}")

    if base_value == MISS:
        return Throw(base_value=MISS, multiplier=1)
    if base_value == DOUBLE_BULL and multiplier != 1:
        raise ValidationError("Double bull can only be hit as a single segment")
    if base_value == BULL and multiplier == 3:
        raise ValidationError("There is no triple bull")

    return Throw(base_value=base_value, multiplier=multiplier)
