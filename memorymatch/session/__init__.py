"""
Session Module - Drives games around the pure engine.

A session represents one play-through:
- Created when the player starts a game
- Holds a GameController (timer, audio, images, current state)
- Destroyed when the player leaves or it goes stale

Sessions are EPHEMERAL: no persistence.
"""

from .game_loop import GameController, FlipResult
from .manager import SessionManager, Session

__all__ = [
    "GameController",
    "FlipResult",
    "SessionManager",
    "Session",
]
