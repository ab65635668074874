"""
Encounter Resolver - Tile-triggered encounters and their effects.

Given a tile, exactly one flow starts:
- State tile       -> Trial (static deck, or generated in advanced mode)
- Fate / Chance    -> reveal window, then a card drawn from the deck
- Event tile       -> historical vignette with a fixed consequence
- Plain / unknown  -> turn advances after a delay

Per encounter: Idle -> ModalOpen -> decision -> (AwaitingConfirmation)
-> Resolved -> {tile re-trigger | turn advance}. Exactly one of the two
exits happens per resolution.
"""

from __future__ import annotations
from concurrent.futures import Future
from dataclasses import dataclass, field
import logging
import random
from typing import TYPE_CHECKING, Sequence

from ..config import Timings, DEFAULT_TIMINGS, BONUS_MOVE_STEPS
from .action import ActionResult, ErrorCode
from .cards import (
    ChanceCard, EventCard, EventEffectKind, FateCard, Tile, TileKind, TrialCard,
)
from .dice import Dice
from .dispatcher import Bindable
from .effects import (
    DiceBranch, Effect, ImposePause, MeatDelta, apply_effects, expand_effect, meat_change,
)
from .scheduler import Scheduler
from .state import ModalKind, TrialSelection, TurnStage
from .store import GameStore

if TYPE_CHECKING:
    from ..generation.generator import TrialSource

logger = logging.getLogger(__name__)

OPTION_LETTERS = "ABCD"


@dataclass
class EncounterDecks:
    """Static decks; events are keyed by the tile name they belong to."""
    fates: Sequence[FateCard]
    chances: Sequence[ChanceCard]
    events: dict[str, EventCard] = field(default_factory=dict)


class EncounterResolver(Bindable):
    """
    Opens and resolves encounters for the current player.

    All public resolve_* methods return an ActionResult; when there is
    nothing to resolve they fail without touching state.
    """

    def __init__(
        self,
        store: GameStore,
        scheduler: Scheduler,
        board: Sequence[Tile],
        decks: EncounterDecks,
        trial_source: TrialSource,
        dice: Dice | None = None,
        rng: random.Random | None = None,
        timings: Timings = DEFAULT_TIMINGS,
    ):
        self.store = store
        self.scheduler = scheduler
        self.board = list(board)
        self.decks = decks
        self.trial_source = trial_source
        self.dice = dice or Dice()
        self.rng = rng or random.Random()
        self.timings = timings

    # =========================================================================
    # Opening encounters
    # =========================================================================

    def resolve(self, tile_index: int):
        """Start the encounter for the tile the current player landed on."""
        state = self.store.state
        player = state.current_player
        if state.is_over or player is None:
            return

        tile = self.board[tile_index]
        self.store.update(lambda s: s.cleared_encounter())
        self.store.log(f"{player.character} arrives at {tile.name}.")
        logger.debug("Tile action %s (%s) for %s", tile.index, tile.kind.value, player.player_id)

        if tile.kind == TileKind.STATE:
            self._open_trial(tile)
        elif tile.kind in (TileKind.FATE, TileKind.CHANCE):
            self._reveal(tile.kind)
        elif tile.kind == TileKind.EVENT:
            self._open_event(tile)
        else:
            self.store.set(stage=TurnStage.RESOLVING)
            self.dispatcher.end_turn(self.timings.plain_tile_ms)

    def _open_trial(self, tile: Tile):
        state = self.store.state
        if state.mode.generates_trials:
            self.store.set(
                active_modal=ModalKind.TRIAL,
                stage=TurnStage.ENCOUNTER,
                generating_trial=True,
            )
            self.store.log(f"Composing a trial about {tile.trial_topic}...")
            self.scheduler.schedule(
                "generate_trial",
                0,
                lambda: self._generate_trial(tile),
                guard=self.dispatcher.turn_guard(),
            )
            return

        card = self.trial_source.draw_static()
        self.store.set(
            active_modal=ModalKind.TRIAL,
            active_card=card,
            stage=TurnStage.ENCOUNTER,
        )

    def _generate_trial(self, tile: Tile):
        self._await_trial(tile, self.trial_source.request(tile.trial_topic))

    def _await_trial(self, tile: Tile, future: Future):
        """Poll the generation request on the session clock until it finishes."""
        if not future.done():
            self.scheduler.schedule(
                "generate_trial",
                self.timings.trial_poll_ms,
                lambda: self._await_trial(tile, future),
                guard=self.dispatcher.turn_guard(),
            )
            return

        draw = self.trial_source.collect(tile.trial_topic, future)
        if draw.fell_back:
            self.store.log("The sages are silent for now; drawing from the classic trials.")
        else:
            self.store.log("The trial is ready. Answer wisely.")
        self.store.set(active_card=draw.card, generating_trial=False)

    def _reveal(self, kind: TileKind):
        self.store.set(stage=TurnStage.REVEALING, reveal=kind)
        self.scheduler.schedule(
            "reveal",
            self.timings.reveal_ms,
            lambda: self._open_drawn(kind),
            guard=self.dispatcher.turn_guard(),
        )

    def _open_drawn(self, kind: TileKind):
        if kind == TileKind.FATE:
            modal, card = ModalKind.FATE, self.rng.choice(list(self.decks.fates))
        else:
            modal, card = ModalKind.CHANCE, self.rng.choice(list(self.decks.chances))
        self.store.set(
            reveal=None,
            active_modal=modal,
            active_card=card,
            stage=TurnStage.ENCOUNTER,
        )

    def _open_event(self, tile: Tile):
        card = self.decks.events.get(tile.name)
        if card is None:
            self.store.set(stage=TurnStage.RESOLVING)
            self.dispatcher.end_turn(self.timings.unknown_event_ms)
            return
        self.store.set(
            active_modal=ModalKind.EVENT_DETAIL,
            active_card=card,
            stage=TurnStage.ENCOUNTER,
        )

    # =========================================================================
    # Trial
    # =========================================================================

    def select_option(self, index: int) -> ActionResult:
        """Record and reveal a trial choice; resolution waits for confirmation."""
        state = self.store.state
        card = state.active_card
        if state.active_modal != ModalKind.TRIAL or not isinstance(card, TrialCard):
            return ActionResult.failure("No trial is open", ErrorCode.NO_ACTIVE_CARD)
        if state.trial_selection.revealed:
            return ActionResult.failure("An option was already chosen", ErrorCode.INVALID_STAGE)
        if not 0 <= index < len(card.options):
            return ActionResult.failure(f"Option {index} out of range", ErrorCode.INVALID_OPTION)

        self.store.set(trial_selection=TrialSelection(selected=index, revealed=True))
        return ActionResult.success_with_state(self.store.state)

    def resolve_trial(self, chosen_index: int) -> ActionResult:
        """Resolve the open trial against an already-selected index."""
        state = self.store.state
        card = state.active_card
        player = state.current_player
        if state.is_over:
            return ActionResult.failure("Game is over", ErrorCode.GAME_OVER)
        if state.active_modal != ModalKind.TRIAL or not isinstance(card, TrialCard) or player is None:
            return ActionResult.failure("No trial to resolve", ErrorCode.NO_ACTIVE_CARD)
        if not 0 <= chosen_index < len(card.options):
            return ActionResult.failure(f"Option {chosen_index} out of range", ErrorCode.INVALID_OPTION)

        letter = OPTION_LETTERS[chosen_index]
        player_id = player.player_id
        self.store.update(lambda s: s.cleared_encounter()._copy_with(stage=TurnStage.RESOLVING))

        if card.is_correct(chosen_index):
            self.store.log(
                f"{player.character} chooses {letter}: correct! "
                f"A portion of sacrificial meat is granted."
            )
            self.scheduler.schedule(
                "trial_reward",
                self.timings.trial_reward_ms,
                lambda: self.dispatcher.celebrate(
                    player_id, 1, lambda: self._credit_trial(player_id)
                ),
                guard=self.dispatcher.turn_guard(),
            )
        else:
            self.store.log(f"{player.character} chooses {letter}: wrong. More study is needed.")
            self.dispatcher.end_turn(self.timings.after_encounter_ms)

        return ActionResult.success_with_state(self.store.state)

    def _credit_trial(self, player_id: str):
        if self.dispatcher.apply_meat(player_id, 1):
            return
        self.dispatcher.end_turn(self.timings.after_reward_ms)

    # =========================================================================
    # Fate / Chance
    # =========================================================================

    def resolve_fate(self) -> ActionResult:
        state = self.store.state
        card = state.active_card
        player = state.current_player
        if state.is_over:
            return ActionResult.failure("Game is over", ErrorCode.GAME_OVER)
        if state.active_modal != ModalKind.FATE or not isinstance(card, FateCard) or player is None:
            return ActionResult.failure("No fate card to resolve", ErrorCode.NO_ACTIVE_CARD)

        self.store.log(f"{player.character} meets fate \"{card.title}\": {card.description}")
        self.store.update(lambda s: s.cleared_encounter()._copy_with(stage=TurnStage.RESOLVING))
        self._play_effects(player.player_id, expand_effect(card.effect))
        return ActionResult.success_with_state(self.store.state)

    def resolve_chance(self) -> ActionResult:
        state = self.store.state
        card = state.active_card
        player = state.current_player
        if state.is_over:
            return ActionResult.failure("Game is over", ErrorCode.GAME_OVER)
        if state.active_modal != ModalKind.CHANCE or not isinstance(card, ChanceCard) or player is None:
            return ActionResult.failure("No chance card to resolve", ErrorCode.NO_ACTIVE_CARD)

        self.store.log(f"{player.character} seizes the chance \"{card.title}\": {card.challenge}")
        self.store.update(lambda s: s.cleared_encounter()._copy_with(stage=TurnStage.RESOLVING))

        effects = expand_effect(card.effect)
        if effects and isinstance(effects[0], DiceBranch):
            self._roll_branch(player.player_id)
        else:
            self._play_effects(player.player_id, effects)
        return ActionResult.success_with_state(self.store.state)

    def _roll_branch(self, player_id: str):
        roll = self.dice.roll()
        if roll % 2:
            self.store.log(f"The die shows {roll}: the hosts turn hostile.")
            self._play_effects(player_id, [MeatDelta(-1), ImposePause()])
            return

        self.store.log(f"The die shows {roll}: the opportunity is seized!")
        self.dispatcher.celebrate(player_id, 1, lambda: self._credit_branch(player_id))

    def _credit_branch(self, player_id: str):
        if self.dispatcher.apply_meat(player_id, 1):
            return
        self.scheduler.schedule(
            "bonus_move",
            self.timings.bonus_move_ms,
            lambda: self.dispatcher.move(player_id, BONUS_MOVE_STEPS),
            guard=self.dispatcher.turn_guard(),
        )

    def _play_effects(self, player_id: str, effects: list[Effect]):
        delta = meat_change(effects)
        if delta:
            self.dispatcher.celebrate(player_id, delta, lambda: self._finalize(player_id, effects))
        else:
            self._finalize(player_id, effects)

    def _finalize(self, player_id: str, effects: list[Effect]):
        outcome = apply_effects(self.store.state, player_id, effects)
        self.store.replace_state(outcome.state)
        if outcome.changes:
            logger.debug("Effects for %s: %s", player_id, ", ".join(outcome.changes))

        if self.dispatcher.check_victory():
            return

        if outcome.retrigger_at is not None:
            position = outcome.retrigger_at
            self.scheduler.schedule(
                "retrigger",
                self.timings.retrigger_ms,
                lambda: self.dispatcher.trigger_tile(position),
                guard=self.dispatcher.turn_guard(),
            )
        else:
            self.dispatcher.end_turn()

    # =========================================================================
    # Event
    # =========================================================================

    def resolve_event(self) -> ActionResult:
        state = self.store.state
        card = state.active_card
        player = state.current_player
        if state.is_over:
            return ActionResult.failure("Game is over", ErrorCode.GAME_OVER)
        if state.active_modal != ModalKind.EVENT_DETAIL or not isinstance(card, EventCard) or player is None:
            return ActionResult.failure("No event to resolve", ErrorCode.NO_ACTIVE_CARD)

        player_id = player.player_id
        self.store.update(lambda s: s.cleared_encounter()._copy_with(stage=TurnStage.RESOLVING))

        if card.effect_kind in (EventEffectKind.GAIN_MEAT, EventEffectKind.LOSE_MEAT):
            amount = 1 if card.effect_kind == EventEffectKind.GAIN_MEAT else -1
            verb = "receives" if amount > 0 else "loses"
            self.store.log(f"{player.character} {verb} a portion of meat at {card.title}.")
            self.dispatcher.celebrate(player_id, amount, lambda: self._credit_event(player_id, amount))
        elif card.effect_kind == EventEffectKind.PAUSE:
            self.store.log(f"{player.character} is held up at {card.title} and pauses one turn.")
            self.store.update_player(player_id, lambda p: p.with_pause_added())
            self.dispatcher.end_turn(self.timings.after_encounter_ms)
        else:
            self.dispatcher.end_turn(self.timings.after_encounter_ms)

        return ActionResult.success_with_state(self.store.state)

    def _credit_event(self, player_id: str, amount: int):
        if self.dispatcher.apply_meat(player_id, amount):
            return
        self.dispatcher.end_turn()
