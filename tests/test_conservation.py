"""
Test Suite: Whole-Game Invariants
Random and scripted games played through the engine, checking card
conservation, bench size and that every listed action is accepted.
"""

import os
import sys
sys.path.insert(0, 'src')

import pytest

from models import Side
from engine import GameEngine
from game_setup import setup_game, parse_deck_string, load_deck_from_file
from agents import RandomBot, ScriptedBot
from play_console import play_game
from utils import XRayLogger
import actions


DECKS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'src', 'decks')


def _new_game(seed):
    lucario = parse_deck_string(load_deck_from_file(os.path.join(DECKS_DIR, "mega_lucario_ex.txt")))
    dragapult = parse_deck_string(load_deck_from_file(os.path.join(DECKS_DIR, "dragapult_ex.txt")))
    return setup_game(lucario, dragapult, random_seed=seed)


def _all_ids(state, side):
    ids = []

    def walk(pokemon):
        ids.append(pokemon.id)
        ids.extend(e.id for e in pokemon.attached_energy)
        for stage in pokemon.prior_stages:
            walk(stage)

    player = state.get_player(side)
    for zone in (player.deck, player.hand, player.discard, player.prizes):
        ids.extend(c.id for c in zone.cards)
    for pokemon in player.board.get_all_pokemon():
        walk(pokemon)
    if state.stadium is not None and state.stadium_owner == side:
        ids.append(state.stadium.id)
    return ids


def _check_invariants(state):
    for side in Side:
        ids = _all_ids(state, side)
        assert len(ids) == 60
        assert len(set(ids)) == 60
        assert actions.count_cards(state, side) == 60
        assert state.get_player(side).board.get_bench_count() <= 5


# ============================================================================
# TEST: RANDOM PLAY
# ============================================================================

@pytest.mark.parametrize("seed", [1, 2, 3])
def test_random_games_conserve_cards(seed):
    engine = GameEngine(random_seed=seed)
    state = _new_game(seed)
    bots = {Side.PLAYER: RandomBot(seed=seed), Side.OPPONENT: RandomBot(seed=seed + 100)}
    _check_invariants(state)

    for _ in range(400):
        legal = engine.get_legal_actions(state)
        if not legal:
            assert state.is_game_over()
            break
        action = bots[legal[0].side].choose_action(state, legal)
        result = engine.step(state, action)
        assert result.ok, f"{action} rejected: {result.message}"
        state = result.state
        _check_invariants(state)


# ============================================================================
# TEST: SCRIPTED PLAY
# ============================================================================

def test_scripted_game_terminates(tmp_path):
    engine = GameEngine(random_seed=5)
    state = _new_game(5)
    agents = {
        Side.PLAYER: ScriptedBot(name="Bot A", seed=5, engine=engine),
        Side.OPPONENT: ScriptedBot(name="Bot B", seed=6, engine=engine),
    }
    xray = XRayLogger(xray_dir=str(tmp_path))

    final = play_game(agents, state, engine, max_turns=60, verbose=False, xray_logger=xray)

    assert final.is_game_over() or final.turn_count > 60
    _check_invariants(final)
    with open(xray.log_path, encoding='utf-8') as f:
        log = f.read()
    assert "X-RAY GAME LOG" in log
    assert "GAME END" in log
