"""
Oche - Darts Scoring Engine

A deterministic, turn-based engine for scoring local darts matches.
The engine provides:
- Match setup for X01 and Cricket
- A pure reducer that applies throws, undo, turn advance and score corrections
- Per-game rules (busts, double-out, redemption and overtime, cricket closures)
- Completed match history with replay
"""

__version__ = "0.1.0"
