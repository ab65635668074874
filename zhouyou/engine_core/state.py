"""
Game State - Canonical snapshot of a session.

Design principles:
- Immutable: every transform returns a new snapshot
- Whole-snapshot replace: the store swaps the entire state atomically
- Observable: the renderer reads snapshots, never live objects
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Iterable

from ..config import GameMode, LOG_LIMIT
from .cards import Card, TileKind


class GamePhase(Enum):
    """High-level game phases."""
    SETUP = "setup"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class TurnStage(Enum):
    """Where the current turn is in the roll/move/encounter cycle."""
    IDLE = "idle"  # Awaiting roll
    ROLLING = "rolling"
    MOVING = "moving"
    REVEALING = "revealing"  # Fate/chance icon before the card opens
    ENCOUNTER = "encounter"  # Modal open, waiting for a decision
    RESOLVING = "resolving"  # Effects or resource animation in flight
    PAUSED = "paused"  # Pause notice shown, waiting for acknowledgement
    RECOVERING = "recovering"
    ENDING = "ending"  # Turn advance scheduled
    OVER = "over"


class ModalKind(Enum):
    TRIAL = "trial"
    FATE = "fate"
    CHANCE = "chance"
    EVENT_DETAIL = "event_detail"
    WIN = "win"


@dataclass(frozen=True)
class PlayerState:
    """
    State for a single player.

    `was_paused` is one-shot: set when the last skipped turn is acknowledged,
    cleared by the recovery display at the next turn start.
    """
    player_id: str
    character: str
    is_ai: bool = False
    position: int = 0
    meat: int = 0
    is_paused: bool = False
    turns_to_skip: int = 0
    was_paused: bool = False
    has_protection: bool = False

    @property
    def label(self) -> str:
        return f"[AI] {self.character}" if self.is_ai else self.character

    def with_meat_delta(self, delta: int) -> PlayerState:
        """Return new player with meat changed, clamped at 0."""
        return self._copy_with(meat=max(0, self.meat + delta))

    def with_pause_added(self) -> PlayerState:
        return self._copy_with(is_paused=True, turns_to_skip=self.turns_to_skip + 1)

    def with_pause_acknowledged(self) -> PlayerState:
        """Consume one skipped turn."""
        remaining = max(0, self.turns_to_skip - 1)
        return self._copy_with(
            turns_to_skip=remaining,
            is_paused=remaining > 0,
            was_paused=remaining == 0,
        )

    @property
    def must_skip(self) -> bool:
        return self.is_paused and self.turns_to_skip > 0

    def _copy_with(self, **kwargs) -> PlayerState:
        return replace(self, **kwargs)


@dataclass(frozen=True)
class TrialSelection:
    selected: int | None = None
    revealed: bool = False


@dataclass(frozen=True)
class AIDecision:
    """Decision recorded by the arbiter while waiting for acknowledgement."""
    player_id: str
    modal: ModalKind
    choice: int | None = None


@dataclass(frozen=True)
class MeatAnimation:
    player_id: str
    amount: int
    title: str | None = None


@dataclass(frozen=True)
class GameState:
    """
    Complete session state at a point in time.

    All state changes go through the GameStore.
    """
    phase: GamePhase = GamePhase.SETUP
    mode: GameMode = GameMode.NORMAL
    players: tuple[PlayerState, ...] = ()
    current_player_idx: int = 0
    win_condition: int = 10
    turn_number: int = 0
    stage: TurnStage = TurnStage.IDLE

    # Encounter state
    active_modal: ModalKind | None = None
    active_card: Card | None = None
    trial_selection: TrialSelection = field(default_factory=TrialSelection)
    waiting_for_confirmation: bool = False
    ai_decision: AIDecision | None = None
    generating_trial: bool = False
    reveal: TileKind | None = None

    # Presentation hints
    dice: tuple[int, int] = (1, 1)
    meat_animation: MeatAnimation | None = None

    # Narrative log, most recent first
    log: tuple[str, ...] = ()

    winner_id: str | None = None

    @property
    def current_player(self) -> PlayerState | None:
        if not self.players:
            return None
        return self.players[self.current_player_idx]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def is_busy(self) -> bool:
        """True when the board cannot accept a roll."""
        return self.stage != TurnStage.IDLE or self.meat_animation is not None

    @property
    def is_celebrating(self) -> bool:
        return self.meat_animation is not None and self.meat_animation.amount > 0

    @property
    def winner(self) -> PlayerState | None:
        return self.get_player(self.winner_id) if self.winner_id else None

    def get_player(self, player_id: str) -> PlayerState | None:
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def find_by_character(self, character: str) -> PlayerState | None:
        for p in self.players:
            if p.character == character:
                return p
        return None

    def with_player(self, player: PlayerState) -> GameState:
        """Return new state with updated player."""
        return self.with_players([player])

    def with_players(self, updated: Iterable[PlayerState]) -> GameState:
        by_id = {p.player_id: p for p in updated}
        return self._copy_with(
            players=tuple(by_id.get(p.player_id, p) for p in self.players)
        )

    def map_player(self, player_id: str, fn: Callable[[PlayerState], PlayerState]) -> GameState:
        player = self.get_player(player_id)
        if player is None:
            return self
        return self.with_player(fn(player))

    def with_log(self, message: str) -> GameState:
        return self._copy_with(log=((message,) + self.log)[:LOG_LIMIT])

    def cleared_encounter(self) -> GameState:
        """Drop all transient encounter/selection state."""
        return self._copy_with(
            active_modal=None,
            active_card=None,
            trial_selection=TrialSelection(),
            waiting_for_confirmation=False,
            ai_decision=None,
            generating_trial=False,
            reveal=None,
        )

    def _copy_with(self, **kwargs: Any) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
