"""
Dispatcher - The interface components use to hand control onward.

Movement needs to trigger tile actions, encounters need to trigger
movement and turn advances. Instead of holding references to each other,
components hold one Dispatcher (implemented by the turn controller) that is
bound after construction.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable


class Dispatcher(ABC):
    """Control-flow hub shared by the engine components."""

    @abstractmethod
    def trigger_tile(self, tile_index: int):
        """Run the tile action for the current player at tile_index."""
        pass

    @abstractmethod
    def move(self, player_id: str, steps: int):
        """Start a stepped movement for player_id."""
        pass

    @abstractmethod
    def celebrate(
        self,
        player_id: str,
        amount: int,
        then: Callable[[], None],
        title: str | None = None,
    ):
        """Play the resource animation window, then continue with `then`."""
        pass

    @abstractmethod
    def apply_meat(self, player_id: str, delta: int) -> bool:
        """Apply a clamped resource change; returns True if the game is won."""
        pass

    @abstractmethod
    def check_victory(self) -> bool:
        """Run the victory check; returns True if a winner exists."""
        pass

    @abstractmethod
    def end_turn(self, delay_ms: int = 0):
        """Schedule the advance to the next player."""
        pass

    @abstractmethod
    def turn_guard(self) -> Callable[[], bool]:
        """Guard that fails once the current turn context is gone."""
        pass


class Bindable:
    """Mixin for components that receive the dispatcher after construction."""

    _dispatcher: Dispatcher | None = None

    def bind(self, dispatcher: Dispatcher):
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            raise RuntimeError(f"{type(self).__name__} used before bind()")
        return self._dispatcher
