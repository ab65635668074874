"""
API Service - Business logic layer between API and engine.

The service:
1. Advances the session clock to "now" before touching a session
2. Translates requests to intents and dispatches them
3. Converts engine snapshots to response schemas

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import time
from typing import Callable

from ..config import GameMode
from ..engine_core.action import Action, ActionResult
from ..engine_core.cards import ChanceCard, EventCard, FateCard, TrialCard
from ..engine_core.state import GameState, PlayerState
from ..session import SessionManager, Session
from .schemas import (
    AIDecisionInfo,
    CardInfo,
    CreateSessionRequest,
    GameSnapshot,
    IntentResponse,
    MeatAnimationInfo,
    PlayerInfo,
    TrialSelectionInfo,
)

logger = logging.getLogger(__name__)


@dataclass
class GameService:
    """
    Main API service.

    `clock` returns seconds on the same scale as the sessions' clock origin;
    tests inject a fake clock to step time deterministically.

    Usage:
        service = GameService()
        session, result = service.create_session(request)
        response = service.dispatch(session.session_id, Action.roll())
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    clock: Callable[[], float] = time.monotonic

    def create_session(self, request: CreateSessionRequest) -> tuple[Session, IntentResponse]:
        session = self.session_manager.create_session(seed=request.seed)
        session.clock_origin = self.clock()
        players = [
            PlayerState(player_id=s.player_id, character=s.character, is_ai=s.is_ai)
            for s in request.players
        ]
        action = Action.start_game(players, request.win_condition, GameMode(request.mode.value))
        result = session.controller.dispatch(action)
        if not result.success:
            self.session_manager.end_session(session.session_id)
        return session, self._to_response(session, result)

    def get_session(self, session_id: str) -> Session | None:
        session = self.session_manager.get_session(session_id)
        if session is not None:
            session.tick(self.clock())
        return session

    def snapshot(self, session_id: str) -> GameSnapshot | None:
        session = self.get_session(session_id)
        if session is None:
            return None
        return snapshot_from_session(session)

    def dispatch(self, session_id: str, action: Action) -> IntentResponse | None:
        """Apply an intent at the current time; None if the session is unknown."""
        session = self.get_session(session_id)
        if session is None:
            return None
        result = session.controller.dispatch(action)
        return self._to_response(session, result)

    def end_session(self, session_id: str) -> bool:
        return self.session_manager.end_session(session_id)

    def list_sessions(self) -> list[str]:
        return [s.session_id for s in self.session_manager.list_sessions()]

    def tick_all(self) -> int:
        return self.session_manager.tick_all(self.clock())

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        return self.session_manager.cleanup_stale_sessions(max_age_seconds)

    def _to_response(self, session: Session, result: ActionResult) -> IntentResponse:
        return IntentResponse(
            success=result.success,
            error=result.error,
            error_code=result.error_code.value if result.error_code else None,
            state=snapshot_from_session(session),
        )


# =============================================================================
# Conversion Helpers
# =============================================================================

def snapshot_from_session(session: Session) -> GameSnapshot:
    snapshot = snapshot_from_state(session.session_id, session.store.state)
    snapshot.clock_ms = session.scheduler.now_ms
    snapshot.pending = session.scheduler.pending_names()
    return snapshot


def snapshot_from_state(session_id: str, state: GameState) -> GameSnapshot:
    current = state.current_player
    return GameSnapshot(
        session_id=session_id,
        phase=state.phase.value,
        mode=state.mode.value,
        stage=state.stage.value,
        turn_number=state.turn_number,
        win_condition=state.win_condition,
        current_player_id=current.player_id if current else None,
        players=[
            PlayerInfo(
                player_id=p.player_id,
                character=p.character,
                is_ai=p.is_ai,
                position=p.position,
                meat=p.meat,
                is_paused=p.is_paused,
                turns_to_skip=p.turns_to_skip,
                was_paused=p.was_paused,
                has_protection=p.has_protection,
                is_current_turn=current is not None and p.player_id == current.player_id,
            )
            for p in state.players
        ],
        active_modal=state.active_modal.value if state.active_modal else None,
        active_card=_card_info(state),
        trial_selection=TrialSelectionInfo(
            selected=state.trial_selection.selected,
            revealed=state.trial_selection.revealed,
        ),
        waiting_for_confirmation=state.waiting_for_confirmation,
        ai_decision=AIDecisionInfo(
            player_id=state.ai_decision.player_id,
            modal=state.ai_decision.modal.value,
            choice=state.ai_decision.choice,
        ) if state.ai_decision else None,
        generating_trial=state.generating_trial,
        reveal=state.reveal.value if state.reveal else None,
        dice=list(state.dice),
        meat_animation=MeatAnimationInfo(
            player_id=state.meat_animation.player_id,
            amount=state.meat_animation.amount,
            title=state.meat_animation.title,
        ) if state.meat_animation else None,
        is_busy=state.is_busy,
        is_celebrating=state.is_celebrating,
        log=list(state.log),
        winner_id=state.winner_id,
    )


def _card_info(state: GameState) -> CardInfo | None:
    card = state.active_card
    if card is None:
        return None

    if isinstance(card, TrialCard):
        revealed = state.trial_selection.revealed
        return CardInfo(
            kind="trial",
            card_id=card.card_id,
            quote=card.quote,
            question=card.question,
            options=list(card.options),
            answer_index=card.answer_index if revealed else None,
            analysis=card.analysis if revealed else None,
            generated=card.generated,
        )
    if isinstance(card, FateCard):
        return CardInfo(kind="fate", card_id=card.card_id, title=card.title, text=card.description)
    if isinstance(card, ChanceCard):
        return CardInfo(kind="chance", card_id=card.card_id, title=card.title, text=card.challenge)
    if isinstance(card, EventCard):
        return CardInfo(
            kind="event",
            title=card.title,
            text=card.content,
            effect_label=card.effect_label,
        )
    raise TypeError(f"Unknown card type: {type(card)}")
