"""
Test Suite: Attack Effects
Tests for attacks whose outcome depends on their identity.

Tests:
- Cosmic Beam (needs Lunatone on the bench, ignores Weakness)
- Ora Jab (attach Fighting Energy from discard to the bench, then end turn)
"""

import sys
sys.path.insert(0, 'src')

import pytest

from models import ActionType, InteractionMode, Side
import actions

from conftest import make_pokemon, make_energy, catalog_card, attach, find_action


# ============================================================================
# TEST: COSMIC BEAM
# ============================================================================

@pytest.fixture
def solrock_state(battle_state):
    state = battle_state
    solrock = catalog_card("me1-75")
    solrock.played_turn = 0
    attach(solrock, "Fighting")
    state.player.board.active_spot = solrock
    defender = make_pokemon("Cranidos", 200, "Fighting", weaknesses=[("Fighting", "×2")])
    state.opponent.board.active_spot = defender
    return state


def test_cosmic_beam_does_nothing_without_lunatone(engine, solrock_state):
    result = engine.attack(solrock_state, 0)

    assert result.ok
    assert result.state.opponent.board.active_spot.damage_counters == 0
    assert result.state.current_side == Side.OPPONENT


def test_cosmic_beam_with_lunatone_ignores_weakness(engine, solrock_state):
    state = solrock_state
    state.player.board.bench = [catalog_card("me1-74")]

    result = engine.attack(state, 0)

    assert result.state.opponent.board.active_spot.damage_counters == 70


def test_cosmic_beam_ignores_other_benched_pokemon(engine, solrock_state):
    state = solrock_state
    state.player.board.bench = [make_pokemon("Riolu", 70, "Fighting")]

    result = engine.attack(state, 0)

    assert result.state.opponent.board.active_spot.damage_counters == 0


# ============================================================================
# TEST: ORA JAB
# ============================================================================

@pytest.fixture
def lucario_state(battle_state):
    state = battle_state
    lucario = catalog_card("me1-77")
    lucario.played_turn = 0
    attach(lucario, "Fighting")
    state.player.board.active_spot = lucario
    state.player.board.bench = [catalog_card("me1-76")]
    state.player.discard.cards = [catalog_card("sve-6"), catalog_card("sve-6"), make_energy("Fire")]
    state.opponent.board.active_spot = make_pokemon("Snorlax", 400, "Colorless")
    return state


def test_ora_jab_opens_discard_selection(engine, lucario_state):
    result = engine.attack(lucario_state, 0)

    state = result.state
    assert state.opponent.board.active_spot.damage_counters == 130
    assert state.pending.mode == InteractionMode.ATTACH_ENERGY_FROM_DISCARD
    assert state.pending.required_count == 2
    assert state.current_side == Side.PLAYER

    counts = [len(a.card_ids) for a in engine.get_legal_actions(state)
              if a.action_type == ActionType.CONFIRM_ENERGY_FROM_DISCARD]
    assert counts == [2, 1, 0]
    assert find_action(engine.get_legal_actions(state), ActionType.CANCEL_SELECTION) is None


def test_ora_jab_distributes_to_bench_then_ends_turn(engine, lucario_state):
    state = engine.attack(lucario_state, 0).state
    riolu_id = state.player.board.bench[0].id
    fighting_ids = [c.id for c in state.player.discard.cards if c.name == "Basic Fighting Energy"]

    state = engine.confirm_energy_from_discard_selection(state, fighting_ids).state
    assert state.pending.mode == InteractionMode.DISTRIBUTE_ENERGY_FROM_DISCARD

    active_id = state.player.board.active_spot.id
    rejected = engine.confirm_distribute_energy_target(state, active_id)
    assert not rejected.ok
    assert "Benched Pokémon only" in rejected.message

    state = engine.confirm_distribute_energy_target(state, riolu_id).state
    assert state.pending.is_active
    state = engine.confirm_distribute_energy_target(state, riolu_id).state

    assert not state.pending.is_active
    assert len(state.player.board.bench[0].attached_energy) == 2
    assert state.current_side == Side.OPPONENT
    assert actions.count_cards(state, Side.PLAYER) == actions.count_cards(lucario_state, Side.PLAYER)


def test_ora_jab_rejects_non_fighting_energy(engine, lucario_state):
    state = engine.attack(lucario_state, 0).state
    fire = next(c for c in state.player.discard.cards if c.name == "Basic Fire Energy")

    result = engine.confirm_energy_from_discard_selection(state, [fire.id])

    assert not result.ok


def test_ora_jab_empty_selection_ends_turn(engine, lucario_state):
    state = engine.attack(lucario_state, 0).state

    result = engine.confirm_energy_from_discard_selection(state, [])

    assert result.ok
    assert not result.state.pending.is_active
    assert result.state.current_side == Side.OPPONENT


def test_ora_jab_without_bench_ends_turn(engine, lucario_state):
    state = lucario_state
    state.player.board.bench = []

    result = engine.attack(state, 0)

    assert not result.state.pending.is_active
    assert result.state.current_side == Side.OPPONENT


def test_forced_end_turn_abandons_distribution(engine, lucario_state):
    state = engine.attack(lucario_state, 0).state

    assert not engine.end_turn(state).ok
    result = engine.end_turn(state, force=True)

    assert result.ok
    assert not result.state.pending.is_active
    assert result.state.current_side == Side.OPPONENT
