"""
Victory Detector - Finds the first player at or above the win condition.

Runs after every resource mutation. Roster order breaks ties; the check
runs immediately after each mutation so a tie at the threshold can only
come from the same mutation.
"""

from __future__ import annotations
from typing import Sequence

from .state import PlayerState


class VictoryDetector:
    """Stateless winner scan."""

    def __init__(self, win_condition: int):
        self.win_condition = win_condition

    def check(self, players: Sequence[PlayerState]) -> PlayerState | None:
        for player in players:
            if player.meat >= self.win_condition:
                return player
        return None


def find_winner(players: Sequence[PlayerState], win_condition: int) -> PlayerState | None:
    """Convenience function for a one-off check."""
    return VictoryDetector(win_condition).check(players)
