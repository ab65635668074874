"""
Configuration - Game modes, timing table and environment settings.

Timings are expressed in milliseconds of scheduler time. The engine never
sleeps; every delay is a scheduled action on the session clock, so tests run
the same timings on a virtual clock.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import os


class GameMode(Enum):
    """Play-speed / content mode chosen at game start."""
    NORMAL = "normal"  # AI waits for human acknowledgement
    QUICK = "quick"  # AI resolves its own encounters
    ADVANCED = "advanced"  # Trials are generated by the LLM collaborator

    @property
    def is_quick(self) -> bool:
        return self is GameMode.QUICK

    @property
    def generates_trials(self) -> bool:
        return self is GameMode.ADVANCED


@dataclass(frozen=True)
class Timings:
    """
    Delay table for every timed transition.

    Defaults mirror the pacing the renderer was designed around.
    """
    roll_ms: int = 600
    step_ms: int = 500
    settle_ms: int = 500
    reveal_ms: int = 1200
    meat_effect_ms: int = 1500

    ai_roll_quick_ms: int = 1000
    ai_roll_ms: int = 2500
    ai_decision_ms: int = 1500
    ai_quick_trial_resolve_ms: int = 1200
    ai_quick_resolve_ms: int = 800
    ai_pause_confirm_ms: int = 1000

    pause_to_next_ms: int = 300
    recovery_ms: int = 1000
    trial_reward_ms: int = 400
    after_reward_ms: int = 500
    after_encounter_ms: int = 500
    plain_tile_ms: int = 1000
    unknown_event_ms: int = 1200
    retrigger_ms: int = 100
    trial_poll_ms: int = 50
    bonus_move_ms: int = 600

    def ai_roll_delay(self, mode: GameMode) -> int:
        return self.ai_roll_quick_ms if mode.is_quick else self.ai_roll_ms


DEFAULT_TIMINGS = Timings()

LOG_LIMIT = 15
BONUS_MOVE_STEPS = 3
MIN_PLAYERS = 2
MAX_PLAYERS = 6


@dataclass
class Settings:
    """Process settings read from the environment."""
    log_level: str = "INFO"
    llm_model: str = "claude-3-5-haiku-latest"
    anthropic_api_key: str | None = None
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    clock_tick_ms: int = 50

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            log_level=os.getenv("ZHOUYOU_LOG_LEVEL", "INFO"),
            llm_model=os.getenv("ZHOUYOU_LLM_MODEL", "claude-3-5-haiku-latest"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
            clock_tick_ms=int(os.getenv("ZHOUYOU_CLOCK_TICK_MS", "50")),
        )


def configure_logging(level: str | int = "INFO"):
    """Install a root handler for the CLI and API entry points."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
