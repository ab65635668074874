"""
Session Module - Turn sequencing and in-memory sessions.

A session represents one journey:
- Created when a caller starts a game
- Holds the store, scheduler, controller and arbiter
- Discarded on restart or when ended

Sessions are EPHEMERAL:
- No persistence to database
- Nothing survives a process exit
"""

from .turn_controller import TurnController
from .manager import SessionManager, Session, create_game

__all__ = [
    "TurnController",
    "SessionManager",
    "Session",
    "create_game",
]
