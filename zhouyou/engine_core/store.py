"""
Game Store - Holds the canonical GameState for one session.

The store is the single point of state replacement. Transforms are
read-modify-write over the whole snapshot, so any scheduled handler that
reads "current player" sees a consistent state.
"""

from __future__ import annotations
import logging
from typing import Any, Callable

from .state import GameState, PlayerState

logger = logging.getLogger(__name__)

NARRATIVE = logging.getLogger("zhouyou.narrative")


class GameStore:
    """
    Mutable holder of an immutable GameState.

    Usage:
        store = GameStore()
        store.update(lambda s: s._copy_with(turn_number=s.turn_number + 1))
        store.log("Yan Hui begins the turn.")
    """

    def __init__(self, state: GameState | None = None):
        self._state = state or GameState()
        self.version = 0

    @property
    def state(self) -> GameState:
        return self._state

    def replace_state(self, state: GameState):
        self._state = state
        self.version += 1

    def update(self, fn: Callable[[GameState], GameState]) -> GameState:
        """Apply a transform to the whole snapshot."""
        self.replace_state(fn(self._state))
        return self._state

    def set(self, **changes: Any) -> GameState:
        return self.update(lambda s: s._copy_with(**changes))

    def update_player(self, player_id: str, fn: Callable[[PlayerState], PlayerState]) -> GameState:
        return self.update(lambda s: s.map_player(player_id, fn))

    def log(self, message: str):
        """Append a narrative line (most recent first, bounded)."""
        NARRATIVE.info(message)
        self.update(lambda s: s.with_log(message))

    def reset(self, message: str | None = None):
        """Drop everything; used on restart."""
        logger.debug("Store reset")
        fresh = GameState()
        if message:
            fresh = fresh.with_log(message)
            NARRATIVE.info(message)
        self.replace_state(fresh)
