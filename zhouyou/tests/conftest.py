"""
Pytest fixtures for Zhouyou tests.

The test board is a 12-cell track where every dice total from 2 to 12 lands
on a distinct kind of tile:

     0 Lu (start)    4 Chance               8 Zhou Archives (no vignette)
     1 road          5 Siege at Kuang       9 State of Chen
     2 State of Wei  6 Duke of She          10 road
     3 Fate          7 Gate of Zheng        11 road
"""

from __future__ import annotations
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Callable, Sequence

import pytest

from ..config import GameMode
from ..engine_core.action import Action, ActionResult
from ..engine_core.cards import ChanceCard, FateCard, Tile, TileKind, TrialCard
from ..engine_core.dice import LoadedDice
from ..engine_core.effects import CardEffect
from ..engine_core.encounter_resolver import EncounterDecks
from ..engine_core.scheduler import Scheduler
from ..engine_core.state import GameState, PlayerState, TurnStage
from ..engine_core.store import GameStore
from ..bots.arbiter import AIArbiter
from ..bots.policy import BotPolicy, ScholarPolicy
from ..generation.generator import TrialGenerator
from ..games.confucius import EVENT_CARDS
from ..session.manager import create_game
from ..session.turn_controller import TurnController


TEST_BOARD = (
    Tile(0, TileKind.PLAIN, "State of Lu"),
    Tile(1, TileKind.PLAIN, "Road to Wei"),
    Tile(2, TileKind.STATE, "State of Wei", "Wei"),
    Tile(3, TileKind.FATE, "Fate"),
    Tile(4, TileKind.CHANCE, "Chance"),
    Tile(5, TileKind.EVENT, "Siege at Kuang"),
    Tile(6, TileKind.EVENT, "Duke of She asks about government"),
    Tile(7, TileKind.EVENT, "Gate of Zheng"),
    Tile(8, TileKind.EVENT, "Zhou Archives"),
    Tile(9, TileKind.STATE, "State of Chen", "Chen"),
    Tile(10, TileKind.PLAIN, "Road to Chu"),
    Tile(11, TileKind.PLAIN, "Road to Lu"),
)

TEST_TRIAL = TrialCard(
    card_id="trial-test",
    quote="Is it not a pleasure to learn?",
    question="What makes learning a pleasure?",
    options=("A. Office", "B. Practice", "C. Memorising", "D. Praise"),
    answer_index=1,
    analysis="Practice.",
)


def seat(player_id: str, character: str, is_ai: bool = False) -> PlayerState:
    return PlayerState(player_id=player_id, character=character, is_ai=is_ai)


def fate(**effect) -> FateCard:
    return FateCard(card_id="fate-test", title="Test fate", description="...", effect=CardEffect(**effect))


def chance(**effect) -> ChanceCard:
    return ChanceCard(card_id="chance-test", title="Test chance", challenge="...", effect=CardEffect(**effect))


@dataclass
class Harness:
    """One wired game on a virtual clock."""
    controller: TurnController
    arbiter: AIArbiter

    @property
    def store(self) -> GameStore:
        return self.controller.store

    @property
    def scheduler(self) -> Scheduler:
        return self.controller.scheduler

    @property
    def state(self) -> GameState:
        return self.controller.store.state

    def player(self, player_id: str) -> PlayerState:
        return self.state.get_player(player_id)

    def start(
        self,
        players: Sequence[PlayerState] | None = None,
        win_condition: int = 10,
        mode: GameMode = GameMode.NORMAL,
    ) -> ActionResult:
        players = players or [seat("p1", "Confucius"), seat("p2", "Yan Hui")]
        return self.controller.dispatch(Action.start_game(list(players), win_condition, mode))

    def dispatch(self, action: Action) -> ActionResult:
        return self.controller.dispatch(action)

    def run_until(self, predicate: Callable[[GameState], bool], max_actions: int = 1000) -> bool:
        """Fire scheduled actions until predicate holds; False if the queue ran dry."""
        for _ in range(max_actions):
            if predicate(self.state):
                return True
            if not self.scheduler.run_next():
                return predicate(self.state)
        raise AssertionError("predicate never held")

    def run_until_stage(self, stage: TurnStage) -> bool:
        return self.run_until(lambda s: s.stage == stage or s.is_over)

    def roll_to_encounter(self) -> GameState:
        result = self.dispatch(Action.roll())
        assert result.success, result.error
        self.run_until(lambda s: s.stage in (TurnStage.ENCOUNTER, TurnStage.ENDING) or s.is_over)
        return self.state


@pytest.fixture
def make_harness() -> Callable[..., Harness]:
    """
    Factory for wired games.

    `dice` are the faces returned in order (two per turn roll, one per
    dice-branch roll). Decks default to one card each so draws are fixed.
    """

    def factory(
        dice: Sequence[int] = (),
        fates: Sequence[FateCard] | None = None,
        chances: Sequence[ChanceCard] | None = None,
        trials: Sequence[TrialCard] = (TEST_TRIAL,),
        generator: TrialGenerator | None = None,
        policy: BotPolicy | None = None,
        executor: Executor | None = None,
    ) -> Harness:
        decks = EncounterDecks(
            fates=fates or [fate(meat=1)],
            chances=chances or [chance(meat=1)],
            events=dict(EVENT_CARDS),
        )
        controller, arbiter = create_game(
            board=TEST_BOARD,
            decks=decks,
            trial_deck=trials,
            generator=generator,
            executor=executor,
            policy=policy or ScholarPolicy(),
            dice=LoadedDice(list(dice)),
            seed=0,
        )
        return Harness(controller=controller, arbiter=arbiter)

    return factory


@pytest.fixture
def harness(make_harness) -> Harness:
    """Two human players, game started, dice totalling 2 (State of Wei)."""
    h = make_harness(dice=[1, 1])
    h.start()
    return h
