"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Caller creates a session -> store, scheduler and components are wired
2. start_game intent fills the roster and starts turn 1
3. During play the session clock is advanced (virtual in tests and the CLI,
   wall-clock in the API) and scheduled transitions fire
4. Restart resets the store; ending the session drops it from memory

PERSISTENCE RULES:
- No database; sessions exist only in memory
- Nothing survives a restart or a process exit
"""

from __future__ import annotations
from concurrent.futures import Executor
from dataclasses import dataclass
import logging
import random
import time
import uuid
from typing import Sequence

from ..config import Timings, DEFAULT_TIMINGS
from ..engine_core.cards import Tile, TrialCard
from ..engine_core.dice import Dice
from ..engine_core.encounter_resolver import EncounterDecks, EncounterResolver
from ..engine_core.movement import MovementEngine
from ..engine_core.scheduler import Scheduler
from ..engine_core.state import GameState
from ..engine_core.store import GameStore
from ..bots.arbiter import AIArbiter
from ..bots.policy import BotPolicy, RandomPolicy
from ..generation.generator import TrialGenerator, TrialSource
from ..games.confucius import BOARD_TILES, TRIAL_CARDS, default_decks
from .turn_controller import TurnController

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """
    One in-memory game.

    `clock_origin` anchors the session's scheduler time to wall-clock time
    when the session is driven by `tick()`.
    """
    session_id: str
    store: GameStore
    scheduler: Scheduler
    controller: TurnController
    arbiter: AIArbiter
    created_at: float
    clock_origin: float = 0.0

    @property
    def game_state(self) -> GameState:
        return self.store.state

    def is_active(self) -> bool:
        return not self.store.state.is_over

    def tick(self, now: float | None = None) -> int:
        """Fire every action due by wall-clock time `now` (seconds)."""
        now = time.monotonic() if now is None else now
        target_ms = round((now - self.clock_origin) * 1000)
        return self.scheduler.advance_to(target_ms)


def create_game(
    *,
    board: Sequence[Tile] = BOARD_TILES,
    decks: EncounterDecks | None = None,
    trial_deck: Sequence[TrialCard] = TRIAL_CARDS,
    generator: TrialGenerator | None = None,
    executor: Executor | None = None,
    policy: BotPolicy | None = None,
    dice: Dice | None = None,
    seed: int | None = None,
    timings: Timings = DEFAULT_TIMINGS,
    store: GameStore | None = None,
    scheduler: Scheduler | None = None,
) -> tuple[TurnController, AIArbiter]:
    """
    Wire one game's components together.

    All randomness derives from `seed` unless dice are injected.
    """
    rng = random.Random(seed)
    store = store or GameStore()
    scheduler = scheduler or Scheduler()
    dice = dice or Dice(rng=random.Random(rng.random()))
    decks = decks or default_decks()

    trial_source = TrialSource(
        trial_deck,
        generator=generator,
        rng=random.Random(rng.random()),
        executor=executor,
    )
    movement = MovementEngine(store, scheduler, len(board), timings)
    resolver = EncounterResolver(
        store,
        scheduler,
        board,
        decks,
        trial_source,
        dice=dice,
        rng=random.Random(rng.random()),
        timings=timings,
    )
    controller = TurnController(store, scheduler, movement, resolver, dice=dice, timings=timings)
    if policy is None:
        policy = RandomPolicy(seed=rng.randrange(2**32))
    arbiter = AIArbiter(controller, policy=policy, timings=timings)
    controller.attach_arbiter(arbiter)
    return controller, arbiter


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with a shared trial generator
    - Track active sessions
    - Drive session clocks
    - Clean up finished sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        generator: TrialGenerator | None = None,
        timings: Timings = DEFAULT_TIMINGS,
        executor: Executor | None = None,
    ):
        self.generator = generator
        self.executor = executor
        self.timings = timings
        self._sessions: dict[str, Session] = {}

    def create_session(self, seed: int | None = None, policy: BotPolicy | None = None) -> Session:
        controller, arbiter = create_game(
            generator=self.generator,
            executor=self.executor,
            policy=policy,
            seed=seed,
            timings=self.timings,
        )
        session = Session(
            session_id=str(uuid.uuid4()),
            store=controller.store,
            scheduler=controller.scheduler,
            controller=controller,
            arbiter=arbiter,
            created_at=time.time(),
            clock_origin=time.monotonic(),
        )
        self._sessions[session.session_id] = session
        logger.info("Created session %s", session.session_id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """Drop a session; its pending actions are cancelled."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.scheduler.cancel_all()
        logger.info("Ended session %s", session_id)
        return True

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def tick_all(self, now: float | None = None) -> int:
        fired = 0
        for session in list(self._sessions.values()):
            fired += session.tick(now)
        return fired

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """Remove finished sessions older than max_age; returns their ids."""
        current_time = time.time()
        stale = [
            sid for sid, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in stale:
            self.end_session(session_id)
        return stale
