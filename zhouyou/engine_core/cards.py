"""
Cards and Tiles - Static definitions drawn or landed on during play.

Cards are drawn (or generated) fresh per encounter and discarded after
resolution. None of these objects are ever mutated.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .effects import CardEffect


class TileKind(Enum):
    """What landing on a tile triggers."""
    STATE = "state"  # Trial
    FATE = "fate"
    CHANCE = "chance"
    EVENT = "event"  # Informational vignette
    PLAIN = "plain"


@dataclass(frozen=True)
class Tile:
    """
    A cell on the cyclic track.

    `label` is the thematic label used to parameterize generated trials
    on State tiles.
    """
    index: int
    kind: TileKind
    name: str
    label: str | None = None

    @property
    def trial_topic(self) -> str:
        return self.label or self.name


@dataclass(frozen=True)
class TrialCard:
    """A multiple-choice question; exactly four options."""
    card_id: str
    quote: str
    question: str
    options: tuple[str, ...]
    answer_index: int
    analysis: str
    generated: bool = False

    def __post_init__(self):
        if len(self.options) != 4:
            raise ValueError(f"Trial {self.card_id} needs exactly 4 options")
        if not 0 <= self.answer_index < 4:
            raise ValueError(f"Trial {self.card_id} answer index out of range")

    def is_correct(self, index: int) -> bool:
        return index == self.answer_index


@dataclass(frozen=True)
class FateCard:
    card_id: str
    title: str
    description: str
    effect: CardEffect = field(default_factory=CardEffect)


@dataclass(frozen=True)
class ChanceCard:
    card_id: str
    title: str
    challenge: str
    effect: CardEffect = field(default_factory=CardEffect)


class EventEffectKind(Enum):
    PAUSE = "pause"
    GAIN_MEAT = "gain_meat"
    LOSE_MEAT = "lose_meat"
    NONE = "none"


@dataclass(frozen=True)
class EventCard:
    """Historical vignette shown when landing on an event tile."""
    tile_name: str
    title: str
    content: str
    effect_label: str
    effect_kind: EventEffectKind = EventEffectKind.NONE


Card = Union[TrialCard, FateCard, ChanceCard, EventCard]
