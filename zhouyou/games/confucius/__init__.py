"""
Confucius - The journey among the states.

Provides:
- BOARD_TILES / TRACK_LENGTH: the 24-cell track
- TRIAL_CARDS / FATE_CARDS / CHANCE_CARDS: static decks
- EVENT_CARDS: vignettes keyed by event tile name
- CHARACTERS: selectable travellers
"""

from ...engine_core.encounter_resolver import EncounterDecks
from .board import BOARD_TILES, TRACK_LENGTH, CHARACTERS
from .cards import TRIAL_CARDS, FATE_CARDS, CHANCE_CARDS
from .events import EVENT_CARDS


def default_decks() -> EncounterDecks:
    return EncounterDecks(fates=FATE_CARDS, chances=CHANCE_CARDS, events=dict(EVENT_CARDS))


__all__ = [
    "BOARD_TILES",
    "TRACK_LENGTH",
    "CHARACTERS",
    "TRIAL_CARDS",
    "FATE_CARDS",
    "CHANCE_CARDS",
    "EVENT_CARDS",
    "default_decks",
]
