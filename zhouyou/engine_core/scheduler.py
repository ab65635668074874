"""
Scheduler - Named, cancelable, re-validated delayed actions.

Every "wait, then do X" in the engine is a ScheduledAction on one logical
thread. Actions:
- have a name; scheduling a name that is already pending replaces it
- can carry a guard that is re-checked right before firing; a failed guard
  makes the action a silent no-op (stale action)
- fire in (due time, scheduling order) order

The clock is virtual. Tests drive it with advance()/run_until_idle(); the
API drives it from wall-clock time with advance_to().
"""

from __future__ import annotations
from dataclasses import dataclass, field
import heapq
import logging
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledAction:
    due_ms: int
    serial: int
    name: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)
    guard: Callable[[], bool] | None = field(default=None, compare=False, repr=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler:
    """
    Deterministic timer queue.

    Usage:
        scheduler = Scheduler()
        scheduler.schedule("roll", 600, resolve_roll)
        scheduler.advance(600)  # resolve_roll runs
    """

    def __init__(self, now_ms: int = 0):
        self.now_ms = now_ms
        self._queue: list[ScheduledAction] = []
        self._by_name: dict[str, ScheduledAction] = {}
        self._serial = 0
        self._after_run: list[Callable[[], None]] = []

    def on_after_run(self, hook: Callable[[], None]):
        """Register a hook that runs after every fired action."""
        self._after_run.append(hook)

    def schedule(
        self,
        name: str,
        delay_ms: int,
        callback: Callable[[], None],
        guard: Callable[[], bool] | None = None,
    ) -> ScheduledAction:
        self.cancel(name)
        self._serial += 1
        action = ScheduledAction(
            due_ms=self.now_ms + max(0, delay_ms),
            serial=self._serial,
            name=name,
            callback=callback,
            guard=guard,
        )
        heapq.heappush(self._queue, action)
        self._by_name[name] = action
        logger.debug("Scheduled %s at t=%d", name, action.due_ms)
        return action

    def cancel(self, name: str) -> bool:
        action = self._by_name.pop(name, None)
        if action is None:
            return False
        action.cancelled = True
        return True

    def cancel_all(self):
        for action in self._by_name.values():
            action.cancelled = True
        self._by_name.clear()
        self._queue.clear()

    def is_pending(self, name: str) -> bool:
        return name in self._by_name

    def pending_names(self) -> list[str]:
        return [a.name for a in sorted(self._by_name.values())]

    def next_due(self) -> int | None:
        self._drop_cancelled()
        return self._queue[0].due_ms if self._queue else None

    @property
    def idle(self) -> bool:
        return self.next_due() is None

    def run_next(self) -> bool:
        """Fire the earliest pending action. Returns False when idle."""
        self._drop_cancelled()
        if not self._queue:
            return False

        action = heapq.heappop(self._queue)
        self._by_name.pop(action.name, None)
        self.now_ms = max(self.now_ms, action.due_ms)

        if action.guard is not None and not action.guard():
            logger.debug("Dropped stale action %s", action.name)
        else:
            action.callback()

        for hook in self._after_run:
            hook()
        return True

    def advance_to(self, target_ms: int) -> int:
        """Fire everything due up to target_ms. Returns number fired."""
        fired = 0
        while True:
            due = self.next_due()
            if due is None or due > target_ms:
                break
            self.run_next()
            fired += 1
        self.now_ms = max(self.now_ms, target_ms)
        return fired

    def advance(self, delta_ms: int) -> int:
        return self.advance_to(self.now_ms + delta_ms)

    def run_until_idle(self, max_actions: int = 10_000) -> int:
        """Fire actions until nothing is pending (bounded)."""
        fired = 0
        while fired < max_actions and self.run_next():
            fired += 1
        return fired

    def _drop_cancelled(self):
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
