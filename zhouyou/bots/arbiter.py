"""
AI Arbiter - Plays computer-controlled seats.

After every transition the arbiter looks at the snapshot and, when the
current player is a computer:
1. Schedules the roll once the board is idle
2. Schedules a decision once an encounter card is open
3. In quick mode, resolves the decision itself and auto-confirms pauses;
   otherwise waits for a human to confirm the recorded decision

Every scheduled action re-validates player, turn, and stage before firing.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Callable

from ..config import Timings, DEFAULT_TIMINGS
from ..engine_core.action import ActionResult, ErrorCode
from ..engine_core.cards import TrialCard
from ..engine_core.encounter_resolver import OPTION_LETTERS
from ..engine_core.scheduler import Scheduler
from ..engine_core.state import AIDecision, GamePhase, ModalKind, TrialSelection, TurnStage
from ..engine_core.store import GameStore
from .policy import BotPolicy, RandomPolicy

if TYPE_CHECKING:
    from ..session.turn_controller import TurnController

logger = logging.getLogger(__name__)

ENCOUNTER_MODALS = (ModalKind.TRIAL, ModalKind.FATE, ModalKind.CHANCE, ModalKind.EVENT_DETAIL)


class AIArbiter:
    """
    Schedules and applies computer-player actions.

    Usage:
        arbiter = AIArbiter(controller, policy=RandomPolicy(seed=7))
        controller.attach_arbiter(arbiter)
    """

    def __init__(
        self,
        controller: TurnController,
        policy: BotPolicy | None = None,
        timings: Timings = DEFAULT_TIMINGS,
    ):
        self.controller = controller
        self.store: GameStore = controller.store
        self.scheduler: Scheduler = controller.scheduler
        self.policy = policy or RandomPolicy()
        self.timings = timings

    def sync(self):
        """Schedule or cancel computer actions for the current snapshot."""
        state = self.store.state
        player = state.current_player
        if state.phase != GamePhase.PLAYING or player is None or not player.is_ai:
            for name in ("ai_roll", "ai_decide", "pause_auto_confirm"):
                self.scheduler.cancel(name)
            return

        can_roll = state.stage == TurnStage.IDLE and state.meat_animation is None \
            and not player.must_skip
        if can_roll:
            if not self.scheduler.is_pending("ai_roll"):
                self.scheduler.schedule(
                    "ai_roll",
                    self.timings.ai_roll_delay(state.mode),
                    self._roll,
                    guard=self._guard(TurnStage.IDLE),
                )
        else:
            self.scheduler.cancel("ai_roll")

        can_decide = (
            state.stage == TurnStage.ENCOUNTER
            and state.active_modal in ENCOUNTER_MODALS
            and state.active_card is not None
            and state.ai_decision is None
            and not state.waiting_for_confirmation
        )
        if can_decide and not self.scheduler.is_pending("ai_decide"):
            self.scheduler.schedule(
                "ai_decide",
                self.timings.ai_decision_ms,
                self._decide,
                guard=self._guard(TurnStage.ENCOUNTER),
            )

        if state.stage == TurnStage.PAUSED and state.mode.is_quick:
            if not self.scheduler.is_pending("pause_auto_confirm"):
                self.scheduler.schedule(
                    "pause_auto_confirm",
                    self.timings.ai_pause_confirm_ms,
                    self.controller.acknowledge_pause,
                    guard=self._guard(TurnStage.PAUSED),
                )

    def _guard(self, stage: TurnStage) -> Callable[[], bool]:
        turn_guard = self.controller.turn_guard()

        def guard() -> bool:
            state = self.store.state
            return turn_guard() and state.stage == stage and state.active_modal != ModalKind.WIN

        return guard

    def _roll(self):
        result = self.controller.roll(automated=True)
        if not result.success:
            logger.debug("Computer roll skipped: %s", result.error)

    def _decide(self):
        state = self.store.state
        player = state.current_player
        card = state.active_card
        modal = state.active_modal
        if state.ai_decision is not None or card is None:
            return

        if modal == ModalKind.TRIAL and isinstance(card, TrialCard):
            decision = self.policy.choose_trial_option(card, state)
            self.store.set(
                trial_selection=TrialSelection(selected=decision.choice, revealed=True),
                ai_decision=AIDecision(player.player_id, modal, decision.choice),
            )
            self.store.log(f"{player.label} chooses {OPTION_LETTERS[decision.choice]}.")
            resolve_delay = self.timings.ai_quick_trial_resolve_ms
        else:
            decision = self.policy.accept_card(card, state)
            self.store.set(ai_decision=AIDecision(player.player_id, modal))
            self.store.log(f"{player.label} accepts the card.")
            resolve_delay = self.timings.ai_quick_resolve_ms
        logger.debug("%s decided via %s: %s", player.player_id, self.policy.get_name(), decision)

        if state.mode.is_quick:
            self.scheduler.schedule(
                "ai_resolve",
                resolve_delay,
                self._apply,
                guard=self._guard(TurnStage.ENCOUNTER),
            )
        else:
            self.store.set(waiting_for_confirmation=True)

    def confirm(self) -> ActionResult:
        """Human acknowledgement of the recorded computer decision."""
        state = self.store.state
        if state.is_over:
            return ActionResult.failure("Game is over", ErrorCode.GAME_OVER)
        if not state.waiting_for_confirmation or state.ai_decision is None:
            return ActionResult.failure("No decision awaiting confirmation", ErrorCode.NOT_WAITING)

        self.store.set(waiting_for_confirmation=False)
        return self._apply()

    def _apply(self) -> ActionResult:
        decision = self.store.state.ai_decision
        if decision is None:
            return ActionResult.failure("No recorded decision", ErrorCode.NOT_WAITING)
        return self.controller.resolve_active(decision.choice)
