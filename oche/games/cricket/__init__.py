"""
Cricket - Close 15 through 20 and the bull.
"""

from .rules import CricketRules, round_limit_winner

__all__ = ["CricketRules", "round_limit_winner"]
