"""
Tests for the Confucius game content and the simulate command.

Tests:
- Board layout and deck integrity
- A full computer-only game on the real board
"""

import sys

import pytest

from ..cli import main
from ..engine_core.cards import TileKind
from ..games.confucius import (
    BOARD_TILES, CHANCE_CARDS, CHARACTERS, EVENT_CARDS, FATE_CARDS, TRACK_LENGTH, TRIAL_CARDS,
)


class TestBoard:
    """Tests for the track."""

    def test_track_shape(self):
        assert TRACK_LENGTH == 24
        assert [t.index for t in BOARD_TILES] == list(range(TRACK_LENGTH))
        assert BOARD_TILES[0].name == "State of Lu"

    def test_state_tiles_have_topics(self):
        for tile in BOARD_TILES:
            if tile.kind == TileKind.STATE:
                assert tile.label

    def test_event_tiles_without_vignette(self):
        missing = [
            t.name for t in BOARD_TILES
            if t.kind == TileKind.EVENT and t.name not in EVENT_CARDS
        ]
        assert missing == ["Zhou Archives"]

    def test_characters(self):
        assert len(CHARACTERS) == 6
        assert "Zilu" in CHARACTERS


class TestDecks:
    """Tests for the static decks."""

    def test_trials_are_well_formed(self):
        assert TRIAL_CARDS
        for card in TRIAL_CARDS:
            assert len(card.options) == 4
            assert 0 <= card.answer_index < 4
            assert not card.generated

    def test_relocations_stay_on_track(self):
        for card in (*FATE_CARDS, *CHANCE_CARDS):
            if card.effect.position is not None:
                assert 0 <= card.effect.position < TRACK_LENGTH

    def test_card_ids_unique(self):
        ids = [c.card_id for c in (*TRIAL_CARDS, *FATE_CARDS, *CHANCE_CARDS)]
        assert len(ids) == len(set(ids))


class TestSimulate:
    """Tests for the simulate command."""

    @pytest.mark.parametrize("mode", ["quick", "normal"])
    def test_computer_game_finishes(self, monkeypatch, capsys, mode):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        monkeypatch.setattr(sys, "argv", [
            "zhouyou", "simulate", "--players", "3", "--win", "3", "--mode", mode, "--seed", "11",
        ])

        main()

        out = capsys.readouterr().out
        assert "Finished after" in out
        assert "<- winner" in out
        assert "No winner" not in out
