"""
Tests for state, effects and victory detection.

Tests:
- Resource clamping
- Pause bookkeeping
- Effect application order and special tags
- Winner scan
"""

import pytest

from ..engine_core.cards import TrialCard
from ..engine_core.effects import (
    CardEffect, DiceBranch, GrantProtection, ImposePause, MeatDelta, Relocate,
    SpecialTag, SwapOrReset, apply_effects, expand_effect,
)
from ..engine_core.state import GameState, PlayerState
from ..engine_core.store import GameStore
from ..engine_core.victory import VictoryDetector, find_winner
from ..config import LOG_LIMIT


def roster(*players: PlayerState) -> GameState:
    return GameState(players=tuple(players))


class TestPlayerState:
    """Tests for player transforms."""

    def test_meat_clamped_at_zero(self):
        """Repeated negative deltas never go below zero."""
        player = PlayerState("p1", "Confucius", meat=1)
        for _ in range(5):
            player = player.with_meat_delta(-1)
            assert player.meat >= 0
        assert player.meat == 0

    def test_pause_added_accumulates(self):
        player = PlayerState("p1", "Confucius").with_pause_added().with_pause_added()
        assert player.is_paused
        assert player.turns_to_skip == 2

    def test_pause_acknowledged_sets_was_paused_on_last(self):
        player = PlayerState("p1", "Confucius").with_pause_added().with_pause_added()

        player = player.with_pause_acknowledged()
        assert player.is_paused and player.turns_to_skip == 1
        assert not player.was_paused

        player = player.with_pause_acknowledged()
        assert not player.is_paused and player.turns_to_skip == 0
        assert player.was_paused

    def test_label_marks_computer_players(self):
        assert PlayerState("p1", "Zilu", is_ai=True).label == "[AI] Zilu"
        assert PlayerState("p1", "Zilu").label == "Zilu"


class TestStore:
    """Tests for the store and narrative log."""

    def test_log_is_bounded_most_recent_first(self):
        store = GameStore()
        for i in range(LOG_LIMIT + 5):
            store.log(f"entry {i}")

        log = store.state.log
        assert len(log) == LOG_LIMIT
        assert log[0] == f"entry {LOG_LIMIT + 4}"

    def test_update_replaces_whole_snapshot(self):
        store = GameStore(roster(PlayerState("p1", "Confucius")))
        before = store.state

        store.update_player("p1", lambda p: p.with_meat_delta(2))

        assert store.state is not before
        assert before.get_player("p1").meat == 0
        assert store.state.get_player("p1").meat == 2
        assert store.version == 1

    def test_reset(self):
        store = GameStore(roster(PlayerState("p1", "Confucius")))
        store.reset("restarted")
        assert store.state.players == ()
        assert store.state.log == ("restarted",)


class TestEffects:
    """Tests for effect expansion and application."""

    def test_expansion_order(self):
        effects = expand_effect(CardEffect(meat=-1, pause=True, position=4))
        assert effects == [MeatDelta(-1), ImposePause(), Relocate(4)]

    def test_dice_branch_is_exclusive(self):
        effects = expand_effect(CardEffect(meat=2, special=SpecialTag.DICE_BRANCH))
        assert effects == [DiceBranch()]

    def test_protection_granted_and_kept(self):
        state = roster(PlayerState("p1", "Confucius"))
        outcome = apply_effects(state, "p1", [GrantProtection(), MeatDelta(-1)])

        player = outcome.state.get_player("p1")
        assert player.has_protection
        assert player.meat == 0
        assert outcome.retrigger_at is None

    def test_swap_with_named_player(self):
        state = roster(
            PlayerState("p1", "Confucius", position=7),
            PlayerState("p2", "Zilu", position=2),
        )
        outcome = apply_effects(state, "p1", [SwapOrReset("Zilu")])

        assert outcome.state.get_player("p1").position == 2
        assert outcome.state.get_player("p2").position == 7
        assert outcome.retrigger_at is None

    def test_swap_target_absent_resets_to_start(self):
        """Without the named player, the actor returns to start and re-triggers."""
        state = roster(
            PlayerState("p1", "Confucius", position=7),
            PlayerState("p2", "Yan Hui", position=2),
        )
        outcome = apply_effects(state, "p1", [SwapOrReset("Zilu")])

        assert outcome.state.get_player("p1").position == 0
        assert outcome.state.get_player("p2").position == 2
        assert outcome.retrigger_at == 0

    def test_swap_with_self_is_noop(self):
        state = roster(PlayerState("p1", "Zilu", position=5), PlayerState("p2", "Yan Hui"))
        outcome = apply_effects(state, "p1", [SwapOrReset("Zilu")])

        assert outcome.state.get_player("p1").position == 5
        assert outcome.retrigger_at is None

    def test_relocate_retriggers(self):
        state = roster(PlayerState("p1", "Confucius", position=3))
        outcome = apply_effects(state, "p1", [Relocate(9)])

        assert outcome.state.get_player("p1").position == 9
        assert outcome.retrigger_at == 9

    def test_unresolved_dice_branch_rejected(self):
        state = roster(PlayerState("p1", "Confucius"))
        with pytest.raises(ValueError):
            apply_effects(state, "p1", [DiceBranch()])


class TestTrialCard:
    def test_requires_four_options(self):
        with pytest.raises(ValueError):
            TrialCard("t", "q", "?", ("A", "B", "C"), 0, "")

    def test_answer_index_in_range(self):
        with pytest.raises(ValueError):
            TrialCard("t", "q", "?", ("A", "B", "C", "D"), 4, "")

    def test_is_correct(self):
        card = TrialCard("t", "q", "?", ("A", "B", "C", "D"), 2, "")
        assert card.is_correct(2)
        assert not card.is_correct(0)


class TestVictoryDetector:
    """Tests for the winner scan."""

    def test_no_winner_below_threshold(self):
        players = [PlayerState("p1", "Confucius", meat=2), PlayerState("p2", "Zilu", meat=1)]
        assert VictoryDetector(3).check(players) is None

    def test_first_in_roster_order_wins(self):
        players = [
            PlayerState("p1", "Confucius", meat=1),
            PlayerState("p2", "Zilu", meat=3),
            PlayerState("p3", "Zigong", meat=4),
        ]
        assert find_winner(players, 3).player_id == "p2"
