"""
API Module - Renderer interface.

Exposes the engine via REST API. The renderer:
1. Starts a session with a roster, win condition and mode
2. Sends intents (roll, select, confirm, acknowledge, restart)
3. Polls snapshots while timed transitions play out

All state is session-scoped and in memory.
"""

from .schemas import (
    CreateSessionRequest,
    SelectOptionRequest,
    PlayerSeat,
    GameSnapshot,
    IntentResponse,
    ErrorResponse,
    PlayerInfo,
    CardInfo,
)
from .service import GameService, snapshot_from_state
from .app import create_app

__all__ = [
    "CreateSessionRequest",
    "SelectOptionRequest",
    "PlayerSeat",
    "GameSnapshot",
    "IntentResponse",
    "ErrorResponse",
    "PlayerInfo",
    "CardInfo",
    "GameService",
    "snapshot_from_state",
    "create_app",
]
