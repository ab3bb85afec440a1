"""
Test Suite: Abilities
Tests for activatable, passive and on-evolve abilities.

Tests:
- Instant Charge (draw 3, turn ends)
- Concealed Cards / Lunar Cycle (discard an Energy, then draw)
- Once-per-turn limits
- Wave Veil (passive, never activated)
- Heave-Ho Catcher (fires on evolution)
"""

import sys
sys.path.insert(0, 'src')

from models import ActionType, InteractionMode, Side

from conftest import make_pokemon, make_energy, catalog_card, add_to_hand, find_action


# ============================================================================
# TEST: INSTANT CHARGE
# ============================================================================

def test_instant_charge_draws_three_and_ends_turn(engine, battle_state):
    state = battle_state
    rotom = catalog_card("swsh11-58")
    state.player.board.bench = [rotom]

    action = find_action(engine.get_legal_actions(state), ActionType.USE_ABILITY, card_id=rotom.id)
    assert action is not None

    result = engine.step(state, action)

    assert result.ok, result.message
    assert result.state.player.hand.count() == 3
    assert result.state.current_side == Side.OPPONENT
    assert result.state.turn_count == 3
    assert result.state.opponent.hand.count() == 1


def test_instant_charge_needs_cards_in_deck(engine, battle_state):
    state = battle_state
    state.player.deck.cards = []
    rotom = catalog_card("swsh11-58")
    state.player.board.bench = [rotom]

    result = engine.use_ability(state, rotom.id)

    assert not result.ok
    assert "deck is empty" in result.message


# ============================================================================
# TEST: CONCEALED CARDS
# ============================================================================

def test_concealed_cards_discards_energy_then_draws_two(engine, battle_state):
    state = battle_state
    greninja = catalog_card("swsh10-46")
    state.player.board.bench = [greninja]
    water, _ = add_to_hand(state, Side.PLAYER, make_energy("Water"), catalog_card("sv1-194"))

    state = engine.use_ability(state, greninja.id).state
    assert state.pending.mode == InteractionMode.DISCARD_FROM_HAND

    offered = [a.card_ids for a in engine.get_legal_actions(state)
               if a.action_type == ActionType.CONFIRM_DISCARD]
    assert offered == [[water.id]]

    new = engine.confirm_discard_selection(state, [water.id]).state
    assert new.player.discard.find_card(water.id) is not None
    assert new.player.hand.count() == 3
    assert greninja.id in new.player.abilities_used_this_turn
    assert new.current_side == Side.PLAYER


def test_concealed_cards_is_once_per_turn(engine, battle_state):
    state = battle_state
    greninja = catalog_card("swsh10-46")
    state.player.board.bench = [greninja]
    first, _ = add_to_hand(state, Side.PLAYER, make_energy("Water"), make_energy("Fire"))

    state = engine.use_ability(state, greninja.id).state
    state = engine.confirm_discard_selection(state, [first.id]).state

    assert find_action(engine.get_legal_actions(state), ActionType.USE_ABILITY) is None
    result = engine.use_ability(state, greninja.id)
    assert not result.ok
    assert "already used this turn" in result.message


def test_concealed_cards_needs_energy_in_hand(engine, battle_state):
    state = battle_state
    greninja = catalog_card("swsh10-46")
    state.player.board.bench = [greninja]

    result = engine.use_ability(state, greninja.id)

    assert not result.ok
    assert result.message == "Concealed Cards needs an Energy card in your hand"


def test_cancelled_ability_is_not_spent(engine, battle_state):
    state = battle_state
    greninja = catalog_card("swsh10-46")
    state.player.board.bench = [greninja]
    add_to_hand(state, Side.PLAYER, make_energy("Water"))

    state = engine.use_ability(state, greninja.id).state
    new = engine.cancel_selection(state).state

    assert new.player.abilities_used_this_turn == []
    assert engine.use_ability(new, greninja.id).ok


# ============================================================================
# TEST: LUNAR CYCLE
# ============================================================================

def test_lunar_cycle_requires_solrock(engine, battle_state):
    state = battle_state
    lunatone = catalog_card("me1-74")
    state.player.board.bench = [lunatone]
    add_to_hand(state, Side.PLAYER, catalog_card("sve-6"))

    result = engine.use_ability(state, lunatone.id)

    assert not result.ok
    assert "needs Solrock in play" in result.message


def test_lunar_cycle_discards_fighting_energy_only(engine, battle_state):
    state = battle_state
    lunatone = catalog_card("me1-74")
    state.player.board.bench = [lunatone, catalog_card("me1-75")]
    fighting, fire = add_to_hand(state, Side.PLAYER, catalog_card("sve-6"), make_energy("Fire"))

    state = engine.use_ability(state, lunatone.id).state

    assert not engine.confirm_discard_selection(state, [fire.id]).ok
    new = engine.confirm_discard_selection(state, [fighting.id]).state
    assert new.player.hand.count() == 4
    assert "Lunar Cycle" in new.player.abilities_used_this_turn


def test_only_one_lunar_cycle_per_turn(engine, battle_state):
    state = battle_state
    first, second = catalog_card("me1-74"), catalog_card("me1-74")
    state.player.board.bench = [first, second, catalog_card("me1-75")]
    energy, _ = add_to_hand(state, Side.PLAYER, catalog_card("sve-6"), catalog_card("sve-6"))

    state = engine.use_ability(state, first.id).state
    state = engine.confirm_discard_selection(state, [energy.id]).state

    result = engine.use_ability(state, second.id)
    assert not result.ok


# ============================================================================
# TEST: PASSIVE AND ON-EVOLVE ABILITIES
# ============================================================================

def test_wave_veil_cannot_be_activated(engine, battle_state):
    state = battle_state
    manaphy = catalog_card("swsh9-41")
    state.player.board.bench = [manaphy]

    assert find_action(engine.get_legal_actions(state), ActionType.USE_ABILITY) is None
    result = engine.use_ability(state, manaphy.id)
    assert not result.ok
    assert "always active" in result.message


def test_heave_ho_catcher_opens_switch_on_evolve(engine, battle_state):
    state = battle_state
    makuhita = catalog_card("me1-72")
    makuhita.played_turn = 1
    state.player.board.bench = [makuhita]
    hariyama, = add_to_hand(state, Side.PLAYER, catalog_card("me1-73"))
    oddish = make_pokemon("Oddish", 50, "Grass")
    state.opponent.board.bench = [oddish]

    state = engine.evolve(state, hariyama.id, makuhita.id).state
    assert state.pending.mode == InteractionMode.SWITCH_OPPONENT_ACTIVE
    assert state.pending.source_name == "Heave-Ho Catcher"

    new = engine.confirm_switch_selection(state, oddish.id).state
    assert new.opponent.board.active_spot.id == oddish.id
    assert new.player.board.bench[0].id == hariyama.id
    assert not new.pending.is_active


def test_heave_ho_catcher_without_opponent_bench(engine, battle_state):
    state = battle_state
    makuhita = catalog_card("me1-72")
    makuhita.played_turn = 1
    state.player.board.bench = [makuhita]
    hariyama, = add_to_hand(state, Side.PLAYER, catalog_card("me1-73"))

    result = engine.evolve(state, hariyama.id, makuhita.id)

    assert result.ok
    assert not result.state.pending.is_active


def test_heave_ho_catcher_is_not_activatable(engine, battle_state):
    state = battle_state
    hariyama = catalog_card("me1-73")
    state.player.board.bench = [hariyama]

    result = engine.use_ability(state, hariyama.id)

    assert not result.ok
