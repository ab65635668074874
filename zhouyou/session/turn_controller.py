"""
Turn Controller - The top-level turn state machine.

The controller:
1. Accepts intents (roll, select, confirm, acknowledge, restart)
2. Sequences roll -> movement -> encounter -> effects -> victory -> next turn
3. Owns the advance-to-next-player transition (pause and recovery branches)
4. Implements the Dispatcher the engine components call back into

Every intent returns an ActionResult. Rejected intents never mutate state.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Callable, Sequence

from ..config import GameMode, Timings, DEFAULT_TIMINGS, MIN_PLAYERS, MAX_PLAYERS
from ..engine_core.action import Action, ActionType, ActionResult, ErrorCode
from ..engine_core.cards import TrialCard
from ..engine_core.dice import Dice
from ..engine_core.dispatcher import Dispatcher
from ..engine_core.encounter_resolver import EncounterResolver
from ..engine_core.movement import MovementEngine
from ..engine_core.scheduler import Scheduler
from ..engine_core.state import (
    GameState, GamePhase, MeatAnimation, ModalKind, PlayerState, TurnStage,
)
from ..engine_core.store import GameStore
from ..engine_core.victory import VictoryDetector

if TYPE_CHECKING:
    from ..bots.arbiter import AIArbiter

logger = logging.getLogger(__name__)


class TurnController(Dispatcher):
    """
    Drives one session.

    Usage:
        controller = TurnController(store, scheduler, movement, resolver, dice)
        controller.dispatch(Action.start_game(players, 10, GameMode.NORMAL))
        controller.dispatch(Action.roll())
        scheduler.advance(600)
    """

    def __init__(
        self,
        store: GameStore,
        scheduler: Scheduler,
        movement: MovementEngine,
        resolver: EncounterResolver,
        dice: Dice | None = None,
        timings: Timings = DEFAULT_TIMINGS,
    ):
        self.store = store
        self.scheduler = scheduler
        self.movement = movement
        self.resolver = resolver
        self.dice = dice or Dice()
        self.timings = timings
        self.arbiter: AIArbiter | None = None
        self._advancing = False

        movement.bind(self)
        resolver.bind(self)
        scheduler.on_after_run(self._after_transition)

    def attach_arbiter(self, arbiter: AIArbiter):
        self.arbiter = arbiter

    @property
    def state(self) -> GameState:
        return self.store.state

    # =========================================================================
    # Intents
    # =========================================================================

    def dispatch(self, action: Action) -> ActionResult:
        """Apply an intent and let the arbiter react to the new state."""
        handler = self._get_handler(action.action_type)
        if handler is None:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=ErrorCode.NO_HANDLER,
            )

        if action.action_type not in (ActionType.START_GAME, ActionType.RESTART):
            rejection = self._check_playing()
            if rejection:
                logger.warning("Rejected %s: %s", action.action_type.value, rejection.error)
                return rejection

        result = handler(action)
        if not result.success:
            logger.warning("Rejected %s: %s", action.action_type.value, result.error)
        self._after_transition()
        return result

    def _get_handler(self, action_type: ActionType):
        handlers = {
            ActionType.START_GAME: self._handle_start_game,
            ActionType.ROLL: lambda action: self.roll(),
            ActionType.SELECT_OPTION: self._handle_select_option,
            ActionType.CONFIRM_TRIAL: lambda action: self.confirm_trial(),
            ActionType.ACKNOWLEDGE_MODAL: lambda action: self.acknowledge_modal(),
            ActionType.ACKNOWLEDGE_PAUSE: lambda action: self.acknowledge_pause(),
            ActionType.CONFIRM_AI_DECISION: lambda action: self.confirm_ai_decision(),
            ActionType.RESTART: lambda action: self.restart(),
        }
        return handlers.get(action_type)

    def _check_playing(self) -> ActionResult | None:
        state = self.store.state
        if state.is_over:
            return ActionResult.failure("Game is over", ErrorCode.GAME_OVER)
        if state.phase != GamePhase.PLAYING or not state.players:
            return ActionResult.failure("Game has not started", ErrorCode.NO_PLAYERS)
        return None

    def _handle_start_game(self, action: Action) -> ActionResult:
        payload = action.payload
        try:
            self.start_game(
                payload.players or [],
                payload.win_condition if payload.win_condition is not None else 10,
                payload.mode or GameMode.NORMAL,
            )
        except ValueError as e:
            return ActionResult.failure(str(e), ErrorCode.INVALID_SETUP)
        return ActionResult.success_with_state(self.store.state)

    def _handle_select_option(self, action: Action) -> ActionResult:
        index = action.payload.option_index
        if index is None:
            return ActionResult.failure("Missing option index", ErrorCode.INVALID_OPTION)
        return self.select_option(index)

    def start_game(
        self,
        players: Sequence[PlayerState],
        win_condition: int = 10,
        mode: GameMode | str = GameMode.NORMAL,
    ) -> GameState:
        """
        Start a fresh game with the given roster.

        Raises ValueError for an invalid roster or win condition.
        """
        if not MIN_PLAYERS <= len(players) <= MAX_PLAYERS:
            raise ValueError(f"Need {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(players)}")
        ids = [p.player_id for p in players]
        if len(set(ids)) != len(ids):
            raise ValueError("Player ids must be unique")
        if win_condition < 1:
            raise ValueError("Win condition must be at least 1")
        mode = GameMode(mode)

        self.scheduler.cancel_all()
        roster = tuple(
            PlayerState(player_id=p.player_id, character=p.character, is_ai=p.is_ai)
            for p in players
        )
        self.store.replace_state(GameState(
            phase=GamePhase.PLAYING,
            mode=mode,
            players=roster,
            win_condition=win_condition,
            turn_number=1,
        ))
        self.store.log(
            f"The journey begins: {len(roster)} travellers, "
            f"first to {win_condition} portions of meat wins."
        )
        self.store.log(f"It is {roster[0].label}'s turn.")
        logger.info("Game started (%s mode, %d players)", mode.value, len(roster))
        return self.store.state

    def roll(self, automated: bool = False) -> ActionResult:
        """Roll two dice for the current player and start the move."""
        rejection = self._check_playing()
        if rejection:
            return rejection

        state = self.store.state
        player = state.current_player
        if state.stage == TurnStage.PAUSED:
            logger.info("%s is paused; acknowledge the pause first.", player.character)
            return ActionResult.failure(f"{player.player_id} is paused", ErrorCode.PLAYER_PAUSED)
        if state.is_busy:
            return ActionResult.failure(
                f"Board is busy ({state.stage.value})", ErrorCode.INVALID_STAGE
            )
        if player.is_ai and not automated:
            return ActionResult.failure(
                f"{player.character} is computer-controlled", ErrorCode.INVALID_STAGE
            )

        self.store.set(stage=TurnStage.ROLLING)
        self.scheduler.schedule(
            "roll",
            self.timings.roll_ms,
            lambda: self._resolve_roll(player.player_id),
            guard=self.turn_guard(),
        )
        return ActionResult.success_with_state(self.store.state)

    def _resolve_roll(self, player_id: str):
        first, second = self.dice.roll_pair()
        total = first + second
        player = self.store.state.get_player(player_id)
        self.store.set(dice=(first, second))
        self.store.log(f"{player.label} rolls {first} + {second} = {total}.")
        self.movement.advance(player_id, total)

    def select_option(self, index: int) -> ActionResult:
        player = self.store.state.current_player
        if player.is_ai:
            return ActionResult.failure(
                f"{player.character} chooses on their own", ErrorCode.INVALID_STAGE
            )
        if self.store.state.generating_trial:
            return ActionResult.failure("Trial is still being composed", ErrorCode.INVALID_STAGE)
        return self.resolver.select_option(index)

    def confirm_trial(self) -> ActionResult:
        state = self.store.state
        if state.active_modal != ModalKind.TRIAL or not isinstance(state.active_card, TrialCard):
            return ActionResult.failure("No trial is open", ErrorCode.NO_ACTIVE_CARD)
        if state.current_player.is_ai:
            return self.confirm_ai_decision()

        selection = state.trial_selection
        if not selection.revealed or selection.selected is None:
            return ActionResult.failure("Select an option first", ErrorCode.INVALID_STAGE)
        return self.resolver.resolve_trial(selection.selected)

    def acknowledge_modal(self) -> ActionResult:
        """Close the open fate/chance/event card (or confirm the trial)."""
        state = self.store.state
        if state.active_modal is None:
            return ActionResult.failure("No modal is open", ErrorCode.NO_ACTIVE_CARD)
        if state.current_player.is_ai:
            return self.confirm_ai_decision()
        if state.active_modal == ModalKind.TRIAL:
            return self.confirm_trial()
        return self.resolve_active()

    def confirm_ai_decision(self) -> ActionResult:
        if self.arbiter is None:
            return ActionResult.failure("No computer players configured", ErrorCode.NOT_WAITING)
        return self.arbiter.confirm()

    def resolve_active(self, choice: int | None = None) -> ActionResult:
        """Resolve whichever encounter is open."""
        modal = self.store.state.active_modal
        if modal == ModalKind.TRIAL:
            if choice is None:
                choice = self.store.state.trial_selection.selected
            if choice is None:
                return ActionResult.failure("No option selected", ErrorCode.INVALID_OPTION)
            return self.resolver.resolve_trial(choice)
        if modal == ModalKind.FATE:
            return self.resolver.resolve_fate()
        if modal == ModalKind.CHANCE:
            return self.resolver.resolve_chance()
        if modal == ModalKind.EVENT_DETAIL:
            return self.resolver.resolve_event()
        return ActionResult.failure("Nothing to resolve", ErrorCode.NO_ACTIVE_CARD)

    def acknowledge_pause(self) -> ActionResult:
        """Consume one skipped turn for the paused current player."""
        rejection = self._check_playing()
        if rejection:
            return rejection
        state = self.store.state
        if state.stage != TurnStage.PAUSED:
            return ActionResult.failure("No pause to acknowledge", ErrorCode.INVALID_STAGE)

        player_id = state.current_player.player_id
        self.store.update_player(player_id, lambda p: p.with_pause_acknowledged())
        player = self.store.state.get_player(player_id)
        if player.is_paused:
            self.store.log(f"{player.character} rests; {player.turns_to_skip} turn(s) still to skip.")
        else:
            self.store.log(f"{player.character} has rested and will set out again next turn.")

        self.store.set(stage=TurnStage.ENDING)
        self.scheduler.schedule(
            "advance_turn",
            self.timings.pause_to_next_ms,
            self.next_turn,
            guard=self.turn_guard(),
        )
        return ActionResult.success_with_state(self.store.state)

    def restart(self) -> ActionResult:
        self.scheduler.cancel_all()
        self._advancing = False
        self.store.reset("The journey has been reset. Choose your travellers again.")
        logger.info("Game restarted")
        return ActionResult.success_with_state(self.store.state)

    # =========================================================================
    # Turn advance
    # =========================================================================

    def next_turn(self):
        """
        Hand the turn to the next player.

        Suppressed once the game is won; never runs re-entrantly.
        """
        if self._advancing:
            logger.warning("Turn advance already in progress; ignoring")
            return
        state = self.store.state
        if state.is_over or state.active_modal == ModalKind.WIN:
            return
        if not state.players:
            logger.warning("Cannot advance turn without players")
            return

        self._advancing = True
        try:
            self.scheduler.cancel_all()
            next_idx = (state.current_player_idx + 1) % state.num_players
            self.store.update(lambda s: s.cleared_encounter()._copy_with(
                current_player_idx=next_idx,
                turn_number=s.turn_number + 1,
                stage=TurnStage.IDLE,
                meat_animation=None,
            ))
            player = self.store.state.current_player
            logger.debug("Turn %d -> %s", self.store.state.turn_number, player.player_id)

            if player.must_skip:
                self.store.set(stage=TurnStage.PAUSED)
                self.store.log(
                    f"{player.label} is paused and skips this turn "
                    f"({player.turns_to_skip} remaining)."
                )
            elif player.was_paused:
                self.store.set(stage=TurnStage.RECOVERING)
                self.store.log(f"{player.label} recovers and prepares to travel on.")
                self.scheduler.schedule(
                    "recovery",
                    self.timings.recovery_ms,
                    lambda: self._finish_recovery(player.player_id),
                    guard=self.turn_guard(),
                )
            else:
                self._start_turn()
        finally:
            self._advancing = False

    def _finish_recovery(self, player_id: str):
        self.store.update_player(player_id, lambda p: p._copy_with(was_paused=False))
        self._start_turn()

    def _start_turn(self):
        self.store.set(stage=TurnStage.IDLE)
        self.store.log(f"It is {self.store.state.current_player.label}'s turn.")

    # =========================================================================
    # Dispatcher
    # =========================================================================

    def trigger_tile(self, tile_index: int):
        if self.store.state.is_over:
            return
        self.resolver.resolve(tile_index)

    def move(self, player_id: str, steps: int):
        self.movement.advance(player_id, steps)

    def celebrate(
        self,
        player_id: str,
        amount: int,
        then: Callable[[], None],
        title: str | None = None,
    ):
        self.store.set(
            meat_animation=MeatAnimation(player_id=player_id, amount=amount, title=title),
            stage=TurnStage.RESOLVING,
        )

        def finish():
            self.store.set(meat_animation=None)
            then()

        self.scheduler.schedule(
            "meat_effect",
            self.timings.meat_effect_ms,
            finish,
            guard=self.turn_guard(),
        )

    def apply_meat(self, player_id: str, delta: int) -> bool:
        self.store.update_player(player_id, lambda p: p.with_meat_delta(delta))
        return self.check_victory()

    def check_victory(self) -> bool:
        state = self.store.state
        if state.is_over:
            return True

        winner = VictoryDetector(state.win_condition).check(state.players)
        if winner is None:
            return False

        self.scheduler.cancel_all()
        self.store.update(lambda s: s.cleared_encounter()._copy_with(
            phase=GamePhase.GAME_OVER,
            stage=TurnStage.OVER,
            active_modal=ModalKind.WIN,
            meat_animation=None,
            winner_id=winner.player_id,
        ))
        self.store.log(
            f"{winner.label} has gathered {winner.meat} portions of meat "
            f"and completes the journey!"
        )
        logger.info("Game won by %s", winner.player_id)
        return True

    def end_turn(self, delay_ms: int = 0):
        if self.store.state.is_over:
            return
        self.store.set(stage=TurnStage.ENDING)
        self.scheduler.schedule(
            "advance_turn",
            delay_ms,
            self.next_turn,
            guard=self.turn_guard(),
        )

    def turn_guard(self) -> Callable[[], bool]:
        state = self.store.state
        turn_number = state.turn_number
        player_id = state.current_player.player_id if state.current_player else None

        def guard() -> bool:
            current = self.store.state
            return (
                not current.is_over
                and current.turn_number == turn_number
                and current.current_player is not None
                and current.current_player.player_id == player_id
            )

        return guard

    def _after_transition(self):
        if self.arbiter is not None:
            self.arbiter.sync()
