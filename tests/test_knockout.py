"""
Test Suite: Knockouts
Tests for knockout handling, prize taking, bench promotion and game end.
"""

import sys
sys.path.insert(0, 'src')

from models import Side, GameResult, ActionType
import actions

from conftest import make_pokemon, attach, find_action


def _bench_pokemon(name="Oddish", hp=50):
    pokemon = make_pokemon(name, hp, "Grass", attacks=[("Acid", ["Grass"], 10)])
    pokemon.played_turn = 0
    return pokemon


# ============================================================================
# TEST: KNOCKOUT THROUGH THE ENGINE
# ============================================================================

def test_knockout_promotes_first_bench_and_takes_prize(engine, battle_state):
    state = battle_state
    attach(state.player.board.active_spot, "Fire")
    oddish = _bench_pokemon("Oddish")
    sprout = _bench_pokemon("Bellsprout")
    state.opponent.board.bench = [oddish, sprout]
    bulbasaur_id = state.opponent.board.active_spot.id
    hand_before = state.player.hand.count()

    result = engine.attack(state, 0)

    assert result.ok, result.message
    new = result.state
    assert "Knocked Out" in result.message
    assert new.opponent.board.active_spot.id == oddish.id
    assert [p.id for p in new.opponent.board.bench] == [sprout.id]
    assert new.opponent.discard.find_card(bulbasaur_id) is not None
    assert new.player.prizes.count() == 5
    assert new.player.hand.count() == hand_before + 1
    assert not new.is_game_over()
    # Attack ended the turn
    assert new.current_side == Side.OPPONENT


def test_no_knockout_below_hp(engine, battle_state):
    state = battle_state
    attach(state.player.board.active_spot, "Fire")
    # Remove the weakness so 50 damage stays under 70 HP
    state.opponent.board.active_spot.weaknesses = []

    result = engine.attack(state, 0)

    assert result.ok
    defender = result.state.opponent.board.active_spot
    assert defender.damage_counters == 50
    assert result.state.player.prizes.count() == 6


def test_knockout_with_empty_bench_ends_game(engine, battle_state):
    state = battle_state
    attach(state.player.board.active_spot, "Fire")

    result = engine.attack(state, 0)

    new = result.state
    assert new.is_game_over()
    assert new.result == GameResult.PLAYER_WIN
    assert new.winner == Side.PLAYER
    assert new.opponent.board.active_spot is None


def test_taking_last_prize_wins(engine, battle_state):
    state = battle_state
    attach(state.player.board.active_spot, "Fire")
    state.opponent.board.bench = [_bench_pokemon()]
    state.player.prizes.cards = state.player.prizes.cards[:1]

    result = engine.attack(state, 0)

    assert result.state.winner == Side.PLAYER
    assert result.state.player.prizes.is_empty()


def test_every_operation_rejected_after_game_over(engine, battle_state):
    state = battle_state
    attach(state.player.board.active_spot, "Fire")
    finished = engine.attack(state, 0).state

    assert engine.get_legal_actions(finished) == []
    end = engine.end_turn(finished)
    assert not end.ok
    assert end.message == "The game is over"


# ============================================================================
# TEST: STACK DISCARD
# ============================================================================

def test_knockout_discards_prior_stages_and_energy(battle_state):
    state = battle_state
    basic = make_pokemon("Bulbasaur", 70, "Grass")
    ivysaur = make_pokemon("Ivysaur", 90, "Grass", subtypes=["Stage 1"], evolves_from="Bulbasaur")
    ivysaur.prior_stages = [basic]
    attach(ivysaur, "Grass", 2)
    ivysaur.damage_counters = 90
    state.opponent.board.active_spot = ivysaur
    state.opponent.board.bench = [_bench_pokemon()]

    actions.process_knockout(state, ivysaur, Side.PLAYER)

    discard_names = sorted(card.name for card in state.opponent.discard.cards)
    assert discard_names == ["Basic Grass Energy", "Basic Grass Energy", "Bulbasaur", "Ivysaur"]
    assert ivysaur.damage_counters == 0
    assert ivysaur.prior_stages == []


def test_knockout_keeps_card_count(battle_state):
    """Cards only move between zones during a knockout."""
    state = battle_state
    attach(state.opponent.board.active_spot, "Grass", 2)
    state.opponent.board.bench = [_bench_pokemon()]
    before = {side: actions.count_cards(state, side) for side in Side}

    actions.process_knockout(state, state.opponent.board.active_spot, Side.PLAYER)

    assert actions.count_cards(state, Side.OPPONENT) == before[Side.OPPONENT]
    assert actions.count_cards(state, Side.PLAYER) == before[Side.PLAYER]


def test_attack_action_listed_only_when_payable(engine, battle_state):
    state = battle_state
    assert find_action(engine.get_legal_actions(state), ActionType.ATTACK) is None

    attach(state.player.board.active_spot, "Fire")
    assert find_action(engine.get_legal_actions(state), ActionType.ATTACK, choice_index=0) is not None
