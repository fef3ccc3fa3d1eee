"""
Games module - Game-specific rules.

Each game has its own subpackage with its rules implementation.
Setup and the rules registry live alongside them.
"""

from .base import GameRules
from .registry import rules_for
from .setup import setup_match, settings_from_dict, default_settings
from .x01 import X01Rules
from .cricket import CricketRules

__all__ = [
    "GameRules",
    "rules_for",
    "setup_match",
    "settings_from_dict",
    "default_settings",
    "X01Rules",
    "CricketRules",
]
