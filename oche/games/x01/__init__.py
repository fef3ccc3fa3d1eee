"""
X01 - Count down to zero.

Covers 301/501/701 with optional double-out, plus the
redemption round and overtime for multiple finishers.
"""

from .rules import X01Rules, is_bust

__all__ = ["X01Rules", "is_bust"]
