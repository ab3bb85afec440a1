"""
Test Suite: Game Setup
Tests for deck parsing and pre-game setup.
"""

import logging
import os
import sys
sys.path.insert(0, 'src')

import pytest

from models import Side
from config import GameConfig
import actions
import decks
import play_console
from cards import registry
from game_setup import (
    parse_deck_string, load_deck_from_file, build_deck, setup_game, quick_setup
)


DECKS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'src', 'decks')


def _deck(name):
    return parse_deck_string(load_deck_from_file(os.path.join(DECKS_DIR, name)))


# ============================================================================
# TEST: DECK PARSING
# ============================================================================

def test_parse_deck_string():
    text = """
    # Pokemon
    4 Riolu me1-76

    2 Basic Fighting Energy sve-6
    """

    assert parse_deck_string(text) == ["me1-76"] * 4 + ["sve-6"] * 2


def test_parse_deck_string_rejects_bad_line():
    with pytest.raises(ValueError, match="Line 2"):
        parse_deck_string("4 Riolu me1-76\nRiolu")


@pytest.mark.parametrize("deck_file", ["mega_lucario_ex.txt", "dragapult_ex.txt"])
def test_bundled_decks_are_legal(deck_file):
    card_ids = _deck(deck_file)

    cards = build_deck(card_ids)

    assert len(cards) == 60
    assert any(card.is_basic_pokemon for card in cards)


def test_bundled_data_lives_inside_packages():
    """Catalog and decks resolve inside the installed packages, not the checkout root."""
    cards_dir = os.path.dirname(os.path.abspath(registry.__file__))
    assert os.path.isfile(registry.DEFAULT_CATALOG_PATH)
    assert os.path.dirname(os.path.dirname(os.path.abspath(registry.DEFAULT_CATALOG_PATH))) == cards_dir

    decks_dir = os.path.dirname(os.path.abspath(decks.__file__))
    assert os.path.abspath(play_console.DECKS_DIR) == decks_dir
    assert os.path.isfile(play_console.DEFAULT_PLAYER_DECK_PATH)
    assert os.path.isfile(play_console.DEFAULT_OPPONENT_DECK_PATH)


def test_build_deck_rejects_unknown_card():
    with pytest.raises(ValueError, match="Unknown card ID"):
        build_deck(["me1-76", "not-a-card"])


# ============================================================================
# TEST: SETUP
# ============================================================================

def test_setup_game_initial_state():
    state = setup_game(_deck("mega_lucario_ex.txt"), _deck("dragapult_ex.txt"), random_seed=42)

    assert state.turn_count == 1
    assert state.current_side == state.starting_side
    assert state.time_remaining == 60
    assert not state.is_game_over()
    for side in Side:
        player = state.get_player(side)
        assert player.prizes.count() == 6
        assert player.board.active_spot.is_basic_pokemon
        assert player.board.active_spot.played_turn == 0
        assert player.board.bench == []
        assert actions.count_cards(state, side) == 60


def test_setup_game_is_deterministic_with_seed():
    first = setup_game(_deck("mega_lucario_ex.txt"), _deck("dragapult_ex.txt"), random_seed=7)
    second = setup_game(_deck("mega_lucario_ex.txt"), _deck("dragapult_ex.txt"), random_seed=7)

    assert first.starting_side == second.starting_side
    assert [c.card_id for c in first.player.deck.cards] == [c.card_id for c in second.player.deck.cards]
    assert [c.card_id for c in first.opponent.hand.cards] == [c.card_id for c in second.opponent.hand.cards]


def test_setup_game_uses_active_chooser_for_player_only():
    calls = []

    def choose_last(side, basics):
        calls.append(side)
        return basics[-1].id

    state = setup_game(_deck("mega_lucario_ex.txt"), _deck("dragapult_ex.txt"),
                       random_seed=3, choose_active=choose_last)

    assert calls == [Side.PLAYER]
    assert state.player.board.active_spot.is_basic_pokemon


def test_setup_game_rejects_non_basic_choice():
    def choose_missing(side, basics):
        return "no-such-card"

    with pytest.raises(ValueError, match="Basic Pokémon"):
        setup_game(_deck("mega_lucario_ex.txt"), _deck("dragapult_ex.txt"),
                   random_seed=3, choose_active=choose_missing)


def test_setup_game_mulligans_until_basic(caplog):
    lonely_basic = ["me1-76"] + ["sve-6"] * 59
    caplog.set_level(logging.INFO, logger="game_setup")

    state = setup_game(lonely_basic, _deck("dragapult_ex.txt"), random_seed=11)

    mulligans = {
        name: sum(1 for r in caplog.records if r.getMessage().startswith(f"[Mulligan] {name} "))
        for name in ("Player", "Opponent")
    }
    assert mulligans["Player"] > 0
    assert state.player.board.active_spot.name == "Riolu"
    # Opening 7, minus the Active, plus one card per opposing mulligan
    assert state.player.hand.count() == 7 - 1 + mulligans["Opponent"]
    assert state.opponent.hand.count() == 7 - 1 + mulligans["Player"]
    assert actions.count_cards(state, Side.PLAYER) == 60
    assert actions.count_cards(state, Side.OPPONENT) == 60


def test_setup_game_requires_basic_pokemon():
    with pytest.raises(ValueError, match="no Basic Pokémon"):
        setup_game(["sve-6"] * 60, _deck("dragapult_ex.txt"))


def test_setup_game_requires_deck_size():
    with pytest.raises(ValueError, match="60 cards"):
        setup_game(_deck("mega_lucario_ex.txt")[:59], _deck("dragapult_ex.txt"))


def test_setup_game_honours_config():
    config = GameConfig(turn_time_limit=30, prize_count=4)
    state = setup_game(_deck("mega_lucario_ex.txt"), _deck("dragapult_ex.txt"), random_seed=1, config=config)

    assert state.time_remaining == 30
    assert state.player.prizes.count() == 4


def test_quick_setup():
    text = load_deck_from_file(os.path.join(DECKS_DIR, "mega_lucario_ex.txt"))

    state = quick_setup(text, text, random_seed=5)

    assert state.player.board.active_spot is not None
    assert state.opponent.board.active_spot is not None
