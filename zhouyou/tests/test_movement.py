"""
Tests for the movement engine.

Tests:
- Wrap-around and pass counting
- Stepped, observable movement
- Pass bonus credited before the tile action
- Displacement of a non-current player
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.movement import plan_path
from ..engine_core.state import GamePhase, ModalKind, TurnStage


class TestPlanPath:
    """Tests for path planning."""

    def test_wrap_with_one_pass(self):
        """start=10, L=12, s=5 -> final 3 with one pass."""
        path, passes = plan_path(10, 5, 12)
        assert path == (11, 0, 1, 2, 3)
        assert passes == 1

    @pytest.mark.parametrize("start,steps,length", [(0, 7, 12), (5, 30, 12), (11, 1, 12), (3, 24, 24)])
    def test_final_position_is_modular(self, start, steps, length):
        path, passes = plan_path(start, steps, length)
        assert path[-1] == (start + steps) % length
        assert passes == (start + steps) // length

    def test_leaving_start_is_not_a_pass(self):
        path, passes = plan_path(0, 3, 12)
        assert path == (1, 2, 3)
        assert passes == 0

    def test_zero_steps(self):
        assert plan_path(4, 0, 12) == ((), 0)

    def test_invalid_track(self):
        with pytest.raises(ValueError):
            plan_path(0, 1, 0)


class TestSteppedMovement:
    """Tests for timed movement through the controller."""

    def test_each_cell_is_observable(self, harness):
        """The player visits every cell, one per step window."""
        harness.dispatch(Action.roll())
        assert harness.state.stage == TurnStage.ROLLING

        harness.scheduler.advance(600)
        assert harness.state.stage == TurnStage.MOVING
        assert harness.state.dice == (1, 1)
        assert harness.player("p1").position == 0

        harness.scheduler.advance(500)
        assert harness.player("p1").position == 1
        harness.scheduler.advance(500)
        assert harness.player("p1").position == 2
        assert harness.state.active_modal is None

        harness.scheduler.advance(500)
        assert harness.state.active_modal == ModalKind.TRIAL

    def test_pass_bonus_before_tile_action(self, make_harness):
        """Passing start credits meat, then the landed tile runs."""
        h = make_harness(dice=[6, 6])
        h.start()
        h.dispatch(Action.roll())

        h.run_until(lambda s: s.meat_animation is not None)
        assert h.state.meat_animation.amount == 1
        assert h.state.meat_animation.title == "Passing Lu"
        assert h.player("p1").meat == 0

        h.run_until(lambda s: s.current_player_idx == 1)
        assert h.player("p1").meat == 1
        assert h.player("p1").position == 0
        assert any("passes through Lu" in line for line in h.state.log)
        assert any("arrives at State of Lu" in line for line in h.state.log)

    def test_pass_bonus_win_skips_tile_action(self, make_harness):
        h = make_harness(dice=[6, 6])
        h.start(win_condition=1)
        h.dispatch(Action.roll())

        h.run_until(lambda s: s.is_over)

        assert h.state.phase == GamePhase.GAME_OVER
        assert h.state.winner_id == "p1"
        assert not any("arrives at" in line for line in h.state.log)
        assert h.scheduler.idle


class TestDisplacement:
    """Tests for moving a player who is not taking the turn."""

    def test_displaced_player_triggers_no_tile(self, harness):
        harness.controller.move("p2", 2)
        harness.run_until(lambda s: s.current_player_idx == 1)

        assert harness.player("p2").position == 2
        assert harness.state.active_modal is None
        assert not any("arrives at" in line for line in harness.state.log)

    def test_displaced_player_gets_no_pass_bonus(self, harness):
        harness.store.update_player("p2", lambda p: p._copy_with(position=11))
        harness.controller.move("p2", 2)
        harness.run_until(lambda s: s.current_player_idx == 1)

        assert harness.player("p2").position == 1
        assert harness.player("p2").meat == 0
