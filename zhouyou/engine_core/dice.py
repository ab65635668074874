"""Dice - Seedable die rolls so timed flows stay reproducible."""

from __future__ import annotations
import random


class Dice:
    """Six-sided dice backed by a private RNG."""

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self.rng = rng or random.Random(seed)

    def roll(self) -> int:
        return self.rng.randint(1, 6)

    def roll_pair(self) -> tuple[int, int]:
        return self.roll(), self.roll()


class LoadedDice(Dice):
    """
    Dice that return a fixed sequence of faces.

    Used for scripted games and tests; falls back to 1 when exhausted.
    """

    def __init__(self, faces: list[int]):
        super().__init__(seed=0)
        self.faces = list(faces)

    def roll(self) -> int:
        if not self.faces:
            return 1
        return self.faces.pop(0)
