"""
Tests for computer players.

Tests:
- Policies
- Automatic roll and decision timing
- Quick-mode self resolution and pause auto-confirm
- Human confirmation of computer decisions
"""

import pytest

from ..config import GameMode
from ..engine_core.action import Action, ErrorCode
from ..engine_core.state import ModalKind, TurnStage
from ..bots.policy import FirstOptionPolicy, RandomPolicy, ScholarPolicy
from .conftest import TEST_TRIAL, seat


class TestPolicies:
    """Tests for decision policies."""

    def test_random_policy_is_seeded(self):
        picks_a = [RandomPolicy(seed=3).choose_trial_option(TEST_TRIAL, None).choice for _ in range(5)]
        picks_b = [RandomPolicy(seed=3).choose_trial_option(TEST_TRIAL, None).choice for _ in range(5)]
        assert picks_a == picks_b
        assert all(0 <= p < 4 for p in picks_a)

    def test_random_policy_covers_options(self):
        policy = RandomPolicy(seed=1)
        picks = {policy.choose_trial_option(TEST_TRIAL, None).choice for _ in range(200)}
        assert picks == {0, 1, 2, 3}

    def test_first_option_policy(self):
        assert FirstOptionPolicy().choose_trial_option(TEST_TRIAL, None).choice == 0

    def test_scholar_policy(self):
        assert ScholarPolicy().choose_trial_option(TEST_TRIAL, None).choice == 1

    def test_accept_card(self):
        decision = RandomPolicy().accept_card(TEST_TRIAL, None)
        assert decision.choice is None


class TestQuickMode:
    """Tests for computer players resolving on their own."""

    @pytest.fixture
    def quick(self, make_harness):
        h = make_harness(dice=[1, 1])
        h.start([seat("p1", "Confucius", is_ai=True), seat("p2", "Zilu")], mode=GameMode.QUICK)
        return h

    def test_roll_scheduled_with_quick_delay(self, quick):
        assert quick.scheduler.is_pending("ai_roll")
        assert quick.scheduler.next_due() == 1000

        quick.scheduler.advance(1000)
        assert quick.state.stage == TurnStage.ROLLING

    def test_trial_resolved_without_human(self, quick):
        quick.run_until(lambda s: s.ai_decision is not None)
        assert quick.state.trial_selection.selected == 1
        assert quick.state.trial_selection.revealed
        assert not quick.state.waiting_for_confirmation
        assert quick.scheduler.is_pending("ai_resolve")

        quick.run_until(lambda s: s.current_player_idx == 1)
        assert quick.player("p1").meat == 1
        assert quick.scheduler.idle

    def test_paused_computer_auto_confirms(self, make_harness):
        h = make_harness()
        h.start([seat("p1", "Confucius"), seat("p2", "Zilu", is_ai=True)], mode=GameMode.QUICK)
        h.store.update_player("p2", lambda p: p.with_pause_added())

        h.controller.end_turn()
        h.scheduler.run_next()
        assert h.state.stage == TurnStage.PAUSED
        assert h.scheduler.is_pending("pause_auto_confirm")

        h.run_until(lambda s: s.current_player_idx == 0)
        assert h.player("p2").was_paused
        assert h.player("p2").turns_to_skip == 0


class TestConfirmation:
    """Tests for human acknowledgement of computer decisions."""

    @pytest.fixture
    def normal(self, make_harness):
        h = make_harness(dice=[1, 1])
        h.start([seat("p1", "Confucius", is_ai=True), seat("p2", "Zilu")])
        return h

    def test_roll_uses_long_delay(self, normal):
        assert normal.scheduler.next_due() == 2500

    def test_decision_waits_for_confirmation(self, normal):
        normal.run_until(lambda s: s.waiting_for_confirmation)

        assert normal.state.ai_decision.choice == 1
        assert normal.state.ai_decision.modal == ModalKind.TRIAL
        assert normal.scheduler.idle
        assert normal.player("p1").meat == 0

    def test_human_cannot_answer_for_computer(self, normal):
        normal.run_until(lambda s: s.waiting_for_confirmation)
        result = normal.dispatch(Action.select_option(0))
        assert result.error_code == ErrorCode.INVALID_STAGE

    def test_confirm_applies_recorded_choice(self, normal):
        normal.run_until(lambda s: s.waiting_for_confirmation)

        assert normal.dispatch(Action.confirm_trial()).success
        assert not normal.state.waiting_for_confirmation

        normal.run_until(lambda s: s.current_player_idx == 1)
        assert normal.player("p1").meat == 1

    def test_confirm_when_not_waiting(self, normal):
        result = normal.dispatch(Action.confirm_ai_decision())
        assert result.error_code == ErrorCode.NOT_WAITING

    def test_fate_decision_confirmed_via_modal(self, make_harness):
        h = make_harness(dice=[1, 2])
        h.start([seat("p1", "Confucius", is_ai=True), seat("p2", "Zilu")])
        h.run_until(lambda s: s.waiting_for_confirmation)
        assert h.state.active_modal == ModalKind.FATE

        assert h.dispatch(Action.acknowledge_modal()).success
        h.run_until(lambda s: s.current_player_idx == 1)
        assert h.player("p1").meat == 1

    def test_restart_drops_pending_computer_actions(self, normal):
        assert normal.scheduler.is_pending("ai_roll")
        normal.dispatch(Action.restart())
        assert normal.scheduler.idle
