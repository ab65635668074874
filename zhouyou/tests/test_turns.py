"""
Tests for the turn controller.

Tests:
- Game start and roster validation
- Roll gating
- Exactly-once turn advance
- Pause and recovery lifecycle
- Restart
"""

import logging

import pytest

from ..config import GameMode
from ..engine_core.action import Action, ActionType, ErrorCode
from ..engine_core.state import GamePhase, PlayerState, TurnStage
from .conftest import seat


class TestStartGame:
    """Tests for game start."""

    def test_start_sets_first_turn(self, make_harness):
        h = make_harness()
        result = h.start(mode=GameMode.QUICK)

        assert result.success
        assert h.state.phase == GamePhase.PLAYING
        assert h.state.mode == GameMode.QUICK
        assert h.state.current_player.player_id == "p1"
        assert h.state.turn_number == 1
        assert h.state.stage == TurnStage.IDLE
        assert h.state.log[0] == "It is Confucius's turn."

    def test_start_resets_player_progress(self, make_harness):
        h = make_harness()
        h.start([
            PlayerState("p1", "Confucius", meat=5, position=3),
            PlayerState("p2", "Zilu", is_paused=True, turns_to_skip=1),
        ])

        assert h.player("p1").meat == 0 and h.player("p1").position == 0
        assert not h.player("p2").is_paused

    @pytest.mark.parametrize("players,win", [
        ([seat("p1", "Confucius")], 10),
        ([seat("p1", "Confucius"), seat("p1", "Zilu")], 10),
        ([seat("p1", "Confucius"), seat("p2", "Zilu")], 0),
        ([seat(f"p{i}", "Zilu") for i in range(7)], 10),
    ])
    def test_invalid_setup_rejected(self, make_harness, players, win):
        h = make_harness()
        result = h.start(players, win_condition=win)

        assert not result.success
        assert result.error_code == ErrorCode.INVALID_SETUP
        assert h.state.phase == GamePhase.SETUP

    def test_start_game_raises_for_bad_roster(self, make_harness):
        h = make_harness()
        with pytest.raises(ValueError):
            h.controller.start_game([seat("p1", "Confucius")], 10)

    def test_intents_before_start(self, make_harness):
        h = make_harness()
        result = h.dispatch(Action.roll())
        assert result.error_code == ErrorCode.NO_PLAYERS

    def test_unknown_action_type(self, harness):
        action = Action(action_type=ActionType.ROLL)
        action.action_type = "teleport"
        result = harness.dispatch(action)
        assert result.error_code == ErrorCode.NO_HANDLER


class TestRoll:
    """Tests for roll gating."""

    def test_roll_while_busy_rejected(self, harness):
        assert harness.dispatch(Action.roll()).success
        result = harness.dispatch(Action.roll())

        assert result.error_code == ErrorCode.INVALID_STAGE
        assert harness.scheduler.pending_names() == ["roll"]

    def test_roll_during_animation_rejected(self, make_harness):
        h = make_harness(dice=[6, 6])
        h.start()
        h.dispatch(Action.roll())
        h.run_until(lambda s: s.meat_animation is not None)

        assert h.dispatch(Action.roll()).error_code == ErrorCode.INVALID_STAGE

    def test_human_cannot_roll_for_computer(self, make_harness):
        h = make_harness()
        h.start([seat("p1", "Confucius", is_ai=True), seat("p2", "Zilu")])

        result = h.dispatch(Action.roll())

        assert result.error_code == ErrorCode.INVALID_STAGE
        assert h.scheduler.is_pending("ai_roll")


class TestTurnAdvance:
    """Tests for the advance-to-next-player transition."""

    def test_advance_wraps_roster(self, make_harness):
        h = make_harness()
        h.start([seat("p1", "Confucius"), seat("p2", "Zilu"), seat("p3", "Zigong")])

        for expected in ("p2", "p3", "p1"):
            h.controller.next_turn()
            assert h.state.current_player.player_id == expected

        assert h.state.turn_number == 4

    def test_duplicate_end_turn_advances_once(self, harness):
        """Two end-of-turn requests in one turn still move exactly one seat."""
        harness.controller.end_turn(500)
        harness.controller.end_turn(500)
        harness.scheduler.run_until_idle()

        assert harness.state.current_player_idx == 1
        assert harness.state.turn_number == 2

    def test_advance_cancels_outgoing_actions(self, harness):
        harness.dispatch(Action.roll())
        harness.controller.next_turn()

        assert harness.scheduler.idle
        assert harness.state.current_player_idx == 1
        assert harness.player("p1").position == 0

    def test_stale_actions_are_ignored(self, harness):
        """An action scheduled for an earlier turn does nothing."""
        fired = []
        harness.scheduler.schedule("stale_action", 100, lambda: fired.append(1),
                                   guard=harness.controller.turn_guard())
        harness.store.set(turn_number=harness.state.turn_number + 1)
        harness.scheduler.run_until_idle()

        assert fired == []

    def test_every_turn_advances_once(self, make_harness):
        """A sequence of plain-tile turns visits each player in order."""
        h = make_harness(dice=[5, 5, 1, 1, 4, 5])
        h.start()

        h.dispatch(Action.roll())
        h.run_until(lambda s: s.turn_number == 2 and s.stage == TurnStage.IDLE)
        assert h.state.current_player.player_id == "p2"
        assert h.player("p1").position == 10


class TestPauseLifecycle:
    """Tests for pauses and recovery."""

    def test_two_turn_pause(self, harness):
        """turns_to_skip=2 needs exactly two acknowledgements, then one recovery."""
        harness.store.update_player("p2", lambda p: p.with_pause_added().with_pause_added())

        harness.controller.next_turn()
        assert harness.state.stage == TurnStage.PAUSED
        assert harness.dispatch(Action.roll()).error_code == ErrorCode.PLAYER_PAUSED
        assert harness.dispatch(Action.acknowledge_pause()).success
        p2 = harness.player("p2")
        assert p2.is_paused and p2.turns_to_skip == 1 and not p2.was_paused

        harness.scheduler.run_until_idle()
        assert harness.state.current_player.player_id == "p1"

        harness.controller.next_turn()
        assert harness.state.stage == TurnStage.PAUSED
        harness.dispatch(Action.acknowledge_pause())
        p2 = harness.player("p2")
        assert not p2.is_paused and p2.turns_to_skip == 0 and p2.was_paused

        harness.scheduler.run_until_idle()
        harness.controller.next_turn()
        assert harness.state.stage == TurnStage.RECOVERING
        assert harness.dispatch(Action.roll()).error_code == ErrorCode.INVALID_STAGE

        harness.scheduler.advance(1000)
        assert harness.state.stage == TurnStage.IDLE
        assert not harness.player("p2").was_paused

        harness.controller.next_turn()
        harness.controller.next_turn()
        assert harness.state.current_player.player_id == "p2"
        assert harness.state.stage == TurnStage.IDLE

    def test_acknowledge_without_pause(self, harness):
        result = harness.dispatch(Action.acknowledge_pause())
        assert result.error_code == ErrorCode.INVALID_STAGE

    def test_paused_roll_leaves_state_untouched(self, harness, caplog):
        """A rejected roll only reports the hint; the snapshot is unchanged."""
        harness.store.update_player("p2", lambda p: p.with_pause_added())
        harness.controller.next_turn()
        version = harness.store.version
        log = harness.state.log

        with caplog.at_level(logging.INFO, logger="zhouyou.session.turn_controller"):
            result = harness.dispatch(Action.roll())

        assert result.error_code == ErrorCode.PLAYER_PAUSED
        assert harness.store.version == version
        assert harness.state.log == log
        assert "acknowledge the pause" in caplog.text


class TestRestart:
    """Tests for restart."""

    def test_restart_mid_move(self, harness):
        harness.dispatch(Action.roll())
        harness.scheduler.advance(1100)

        result = harness.dispatch(Action.restart())

        assert result.success
        assert harness.state.phase == GamePhase.SETUP
        assert harness.state.players == ()
        assert len(harness.state.log) == 1
        assert harness.scheduler.idle

    def test_restart_then_new_game(self, harness):
        harness.dispatch(Action.restart())
        assert harness.start([seat("a", "Zengzi"), seat("b", "Zixia")]).success
        assert harness.state.current_player.player_id == "a"
