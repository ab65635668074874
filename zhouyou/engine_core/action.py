"""
Action System - Intents, payloads, and results.

Actions represent the intent calls the renderer (or a human at the table)
can make. System transitions (movement steps, encounter resolution, turn
advance) are not actions; they are scheduled by the engine itself.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of intents accepted by the turn controller."""
    START_GAME = "start_game"
    ROLL = "roll"
    SELECT_OPTION = "select_option"
    CONFIRM_TRIAL = "confirm_trial"
    ACKNOWLEDGE_MODAL = "acknowledge_modal"
    ACKNOWLEDGE_PAUSE = "acknowledge_pause"
    CONFIRM_AI_DECISION = "confirm_ai_decision"
    RESTART = "restart"


class ErrorCode(str, Enum):
    """Structured reasons an intent was rejected."""
    GAME_OVER = "GAME_OVER"
    INVALID_STAGE = "INVALID_STAGE"
    NO_ACTIVE_CARD = "NO_ACTIVE_CARD"
    INVALID_OPTION = "INVALID_OPTION"
    NOT_WAITING = "NOT_WAITING"
    NO_PLAYERS = "NO_PLAYERS"
    NO_HANDLER = "NO_HANDLER"
    PLAYER_PAUSED = "PLAYER_PAUSED"
    INVALID_SETUP = "INVALID_SETUP"


@dataclass
class ActionPayload:
    """
    Parameters for an intent.

    Different action types read different fields; validation happens in the
    turn controller.
    """
    option_index: int | None = None

    # For START_GAME
    players: list[Any] | None = None
    win_condition: int | None = None
    mode: Any | None = None

    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def start_game(cls, players: list[Any], win_condition: int, mode: Any) -> Action:
        return cls(
            action_type=ActionType.START_GAME,
            payload=ActionPayload(players=players, win_condition=win_condition, mode=mode),
        )

    @classmethod
    def roll(cls) -> Action:
        return cls(action_type=ActionType.ROLL)

    @classmethod
    def select_option(cls, index: int) -> Action:
        return cls(
            action_type=ActionType.SELECT_OPTION,
            payload=ActionPayload(option_index=index),
        )

    @classmethod
    def confirm_trial(cls) -> Action:
        return cls(action_type=ActionType.CONFIRM_TRIAL)

    @classmethod
    def acknowledge_modal(cls) -> Action:
        return cls(action_type=ActionType.ACKNOWLEDGE_MODAL)

    @classmethod
    def acknowledge_pause(cls) -> Action:
        return cls(action_type=ActionType.ACKNOWLEDGE_PAUSE)

    @classmethod
    def confirm_ai_decision(cls) -> Action:
        return cls(action_type=ActionType.CONFIRM_AI_DECISION)

    @classmethod
    def restart(cls) -> Action:
        return cls(action_type=ActionType.RESTART)


@dataclass
class ActionResult:
    """
    Result of dispatching an intent.

    Rejections never raise and never mutate state.
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: ErrorCode | None = None

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode | None = None) -> ActionResult:
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(cls, state: Any) -> ActionResult:
        return cls(success=True, new_state=state)
