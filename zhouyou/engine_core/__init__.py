"""
Engine Core - Deterministic, timer-driven state management.

The engine:
1. Holds the canonical GameState in a GameStore
2. Schedules every timed transition on a cancelable Scheduler
3. Moves players step by step around the track
4. Resolves tile encounters and their effects
5. Detects victory after every resource change
"""

from .state import (
    GameState, GamePhase, PlayerState, TurnStage, ModalKind,
    TrialSelection, AIDecision, MeatAnimation,
)
from .cards import Tile, TileKind, TrialCard, FateCard, ChanceCard, EventCard, EventEffectKind
from .effects import CardEffect, SpecialTag
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .store import GameStore
from .scheduler import Scheduler, ScheduledAction
from .dice import Dice, LoadedDice
from .dispatcher import Dispatcher
from .movement import MovementEngine, MovePlan, plan_path
from .encounter_resolver import EncounterResolver, EncounterDecks
from .victory import VictoryDetector, find_winner

__all__ = [
    "GameState",
    "GamePhase",
    "PlayerState",
    "TurnStage",
    "ModalKind",
    "TrialSelection",
    "AIDecision",
    "MeatAnimation",
    "Tile",
    "TileKind",
    "TrialCard",
    "FateCard",
    "ChanceCard",
    "EventCard",
    "EventEffectKind",
    "CardEffect",
    "SpecialTag",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "GameStore",
    "Scheduler",
    "ScheduledAction",
    "Dice",
    "LoadedDice",
    "Dispatcher",
    "MovementEngine",
    "MovePlan",
    "plan_path",
    "EncounterResolver",
    "EncounterDecks",
    "VictoryDetector",
    "find_winner",
]
