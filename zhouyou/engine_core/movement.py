"""
Movement Engine - Steps a player around the cyclic track.

A move is planned up front (path + pass bonus) and then played out one cell
per scheduled step so every intermediate cell is observable in snapshots.

Wrap rule: next = (pos + 1) % track_length. Each step from a non-start cell
onto the start cell counts one pass. After the last step, a mover who is the
acting player is credited the pass bonus before the tile action runs; a
displaced player never triggers a tile action.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..config import Timings, DEFAULT_TIMINGS
from .dispatcher import Bindable
from .scheduler import Scheduler
from .state import TurnStage
from .store import GameStore

logger = logging.getLogger(__name__)

START_TILE = 0


@dataclass(frozen=True)
class MovePlan:
    """Planned movement: every cell visited and the pass bonus earned."""
    player_id: str
    start: int
    path: tuple[int, ...]
    pass_bonus: int

    @property
    def final_position(self) -> int:
        return self.path[-1] if self.path else self.start

    @property
    def steps(self) -> int:
        return len(self.path)


def plan_path(start: int, steps: int, track_length: int) -> tuple[tuple[int, ...], int]:
    """Return (cells visited, passes through start)."""
    if track_length <= 0:
        raise ValueError("track_length must be positive")

    path = []
    passes = 0
    pos = start
    for _ in range(max(0, steps)):
        nxt = (pos + 1) % track_length
        if pos != START_TILE and nxt == START_TILE:
            passes += 1
        pos = nxt
        path.append(pos)
    return tuple(path), passes


class MovementEngine(Bindable):
    """
    Plays out moves on the session scheduler.

    Usage:
        plan = movement.advance("p1", 7)
        plan.final_position, plan.pass_bonus
    """

    def __init__(
        self,
        store: GameStore,
        scheduler: Scheduler,
        track_length: int,
        timings: Timings = DEFAULT_TIMINGS,
    ):
        self.store = store
        self.scheduler = scheduler
        self.track_length = track_length
        self.timings = timings

    def advance(self, player_id: str, steps: int) -> MovePlan | None:
        """Start moving player_id by `steps` cells."""
        state = self.store.state
        player = state.get_player(player_id)
        if player is None or state.is_over:
            logger.warning("Ignoring move for %s", player_id)
            return None

        path, passes = plan_path(player.position, steps, self.track_length)
        plan = MovePlan(
            player_id=player_id,
            start=player.position,
            path=path,
            pass_bonus=passes,
        )
        logger.debug("Move planned: %s", plan)

        self.store.set(stage=TurnStage.MOVING)
        guard = self.dispatcher.turn_guard()
        if plan.path:
            self.scheduler.schedule(
                "move_step",
                self.timings.step_ms,
                lambda: self._step(plan, 0),
                guard=guard,
            )
        else:
            self._finish(plan)
        return plan

    def _step(self, plan: MovePlan, index: int):
        position = plan.path[index]
        self.store.update_player(plan.player_id, lambda p: p._copy_with(position=position))

        if index + 1 < len(plan.path):
            self.scheduler.schedule(
                "move_step",
                self.timings.step_ms,
                lambda: self._step(plan, index + 1),
                guard=self.dispatcher.turn_guard(),
            )
        else:
            self._finish(plan)

    def _finish(self, plan: MovePlan):
        state = self.store.state
        mover = state.get_player(plan.player_id)
        is_actor = state.current_player is not None and \
            state.current_player.player_id == plan.player_id

        if plan.pass_bonus > 0 and is_actor:
            self.store.log(
                f"{mover.character} passes through Lu and collects "
                f"{plan.pass_bonus} portion(s) of home sacrificial meat."
            )
            self.dispatcher.celebrate(
                plan.player_id,
                plan.pass_bonus,
                lambda: self._credit_pass_bonus(plan),
                title="Passing Lu",
            )
        else:
            self.scheduler.schedule(
                "move_settle",
                self.timings.settle_ms,
                lambda: self._land(plan),
                guard=self.dispatcher.turn_guard(),
            )

    def _credit_pass_bonus(self, plan: MovePlan):
        if self.dispatcher.apply_meat(plan.player_id, plan.pass_bonus):
            return
        self._land(plan)

    def _land(self, plan: MovePlan):
        state = self.store.state
        if state.current_player and state.current_player.player_id == plan.player_id:
            self.dispatcher.trigger_tile(plan.final_position)
        else:
            self.dispatcher.end_turn()
