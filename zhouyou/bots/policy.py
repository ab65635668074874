"""
Bot Policy - Interface for computer-player decisions.

A BotPolicy looks at an open encounter and returns a decision:
- Which trial option to pick
- Whether to accept a fate/chance/event card (always yes in this game)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine_core.cards import Card, TrialCard
    from ..engine_core.state import GameState


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    `choice` is the option index for trials and None for accept-only cards.
    """
    choice: int | None = None
    explanation: str = ""
    confidence: float = 1.0


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    Implementations only decide; the arbiter applies the decision.
    """

    @abstractmethod
    def choose_trial_option(self, card: TrialCard, state: GameState) -> BotDecision:
        """
        Pick one of the trial's options.

        Args:
            card: The open trial
            state: Current game state

        Returns:
            BotDecision with the chosen option index
        """
        pass

    def accept_card(self, card: Card, state: GameState) -> BotDecision:
        """Fate, chance and event cards offer no choice."""
        return BotDecision(explanation="Accepted")

    def get_name(self) -> str:
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - picks an option uniformly at random.

    The default for computer players.
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def choose_trial_option(self, card: TrialCard, state: GameState) -> BotDecision:
        if not card.options:
            raise ValueError("No options available")

        return BotDecision(
            choice=self.rng.randrange(len(card.options)),
            explanation="Selected randomly",
            confidence=1.0 / len(card.options),
        )


class FirstOptionPolicy(BotPolicy):
    """
    First-option policy - always picks option A.

    Used for deterministic testing.
    """

    def choose_trial_option(self, card: TrialCard, state: GameState) -> BotDecision:
        if not card.options:
            raise ValueError("No options available")

        return BotDecision(choice=0, explanation="Selected first option")


class ScholarPolicy(BotPolicy):
    """
    Scholar policy - always knows the answer.

    Used for scripted games and tests that need a correct trial.
    """

    def choose_trial_option(self, card: TrialCard, state: GameState) -> BotDecision:
        return BotDecision(choice=card.answer_index, explanation="Recalled the classics")
