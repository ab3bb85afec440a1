"""
Test Suite: Scripted Opponent
Tests for the priority order of get_next_ai_action and the ScriptedBot wrapper.
"""

import random
import sys
sys.path.insert(0, 'src')

import pytest

from models import ActionType, Side
from config import GameConfig
import actions
from agents import AITurnFlags, ScriptedBot, get_next_ai_action

from conftest import make_pokemon, make_energy, catalog_card, attach, add_to_hand


def _decide(engine, state, flags=None, config=None):
    return get_next_ai_action(state, flags or AITurnFlags(), engine=engine,
                              rng=random.Random(0), config=config or engine.config)


# ============================================================================
# TEST: PRIORITIES
# ============================================================================

def test_returns_none_when_game_over(engine, battle_state):
    actions.declare_winner(battle_state, Side.OPPONENT, "test")

    assert _decide(engine, battle_state) is None


def test_benches_basic_first(engine, battle_state):
    state = battle_state
    vulpix, _ = add_to_hand(state, Side.PLAYER, make_pokemon("Vulpix", 60, "Fire"), make_energy("Fire"))
    flags = AITurnFlags()

    action = _decide(engine, state, flags)

    assert action.action_type == ActionType.PLAY_BASIC
    assert action.card_id == vulpix.id
    assert flags.basics_played == 1


def test_basics_limit_per_turn(engine, battle_state):
    state = battle_state
    add_to_hand(state, Side.PLAYER, make_pokemon("Vulpix", 60, "Fire"), make_energy("Fire"))
    config = GameConfig(ai_basics_per_turn=0)

    action = _decide(engine, state, config=config)

    assert action.action_type == ActionType.ATTACH_ENERGY


def test_evolves_active_before_bench(engine, battle_state):
    state = battle_state
    benched = make_pokemon("Charmander", 60, "Fire")
    benched.played_turn = 0
    state.player.board.bench = [benched]
    add_to_hand(state, Side.PLAYER,
                make_pokemon("Charmeleon", 90, "Fire", subtypes=["Stage 1"], evolves_from="Charmander"))

    action = _decide(engine, state)

    assert action.action_type == ActionType.EVOLVE
    assert action.target_id == state.player.board.active_spot.id


def test_attaches_energy_the_active_needs(engine, battle_state):
    state = battle_state
    _, fire = add_to_hand(state, Side.PLAYER, make_energy("Water"), make_energy("Fire"))

    action = _decide(engine, state)

    assert action.action_type == ActionType.ATTACH_ENERGY
    assert action.card_id == fire.id
    assert action.target_id == state.player.board.active_spot.id


def test_plays_stadium(engine, battle_state):
    state = battle_state
    temple, = add_to_hand(state, Side.PLAYER, catalog_card("swsh10-155"))

    action = _decide(engine, state)

    assert action.action_type == ActionType.PLAY_TRAINER
    assert action.card_id == temple.id


@pytest.mark.parametrize("chance,expected", [(1.0, ActionType.PLAY_TRAINER), (0.0, ActionType.END_TURN)])
def test_item_chance(engine, battle_state, chance, expected):
    state = battle_state
    add_to_hand(state, Side.PLAYER, catalog_card("me1-117"))
    flags = AITurnFlags()

    action = _decide(engine, state, flags, config=GameConfig(ai_item_chance=chance))

    assert action.action_type == expected
    assert len(flags.considered_card_ids) == 1


def test_item_considered_once_per_turn(engine, battle_state):
    state = battle_state
    add_to_hand(state, Side.PLAYER, catalog_card("me1-117"))
    flags = AITurnFlags()
    config = GameConfig(ai_item_chance=0.0)

    _decide(engine, state, flags, config=config)
    second = get_next_ai_action(state, flags, engine=engine, rng=random.Random(1),
                                config=GameConfig(ai_item_chance=1.0))

    assert second.action_type == ActionType.END_TURN


def test_skips_items_without_effect(engine, battle_state):
    state = battle_state
    add_to_hand(state, Side.PLAYER, catalog_card("sv1-194"))

    action = _decide(engine, state, config=GameConfig(ai_item_chance=1.0))

    assert action.action_type == ActionType.END_TURN


def test_attacks_with_strongest_payable_attack(engine, battle_state):
    state = battle_state
    attacker = make_pokemon("Charmeleon", 90, "Fire",
                            attacks=[("Scratch", ["Colorless"], 20), ("Flamethrower", ["Fire", "Fire"], 90),
                                     ("Inferno", ["Fire", "Fire", "Fire"], 200)])
    attacker.played_turn = 0
    attach(attacker, "Fire", 2)
    state.player.board.active_spot = attacker

    action = _decide(engine, state)

    assert action.action_type == ActionType.ATTACK
    assert action.choice_index == 1


def test_ends_turn_when_nothing_to_do(engine, battle_state):
    action = _decide(engine, battle_state)

    assert action.action_type == ActionType.END_TURN
    assert action.side == Side.PLAYER


# ============================================================================
# TEST: PENDING SELECTIONS
# ============================================================================

def test_discards_cheapest_cards(engine, battle_state):
    state = battle_state
    ball, switch, fire, _ = add_to_hand(state, Side.PLAYER, catalog_card("sv1-196"), catalog_card("sv1-194"),
                                        make_energy("Fire"), make_pokemon("Vulpix", 60, "Fire"))
    state = engine.play_trainer(state, ball.id).state

    action = _decide(engine, state)

    assert action.action_type == ActionType.CONFIRM_DISCARD
    assert sorted(action.card_ids) == sorted([switch.id, fire.id])


def test_switches_in_weakest_benched_pokemon(engine, battle_state):
    state = battle_state
    boss, = add_to_hand(state, Side.PLAYER, catalog_card("sv2-172"))
    sturdy = make_pokemon("Snorlax", 150, "Colorless")
    fragile = make_pokemon("Oddish", 50, "Grass")
    state.opponent.board.bench = [sturdy, fragile]
    state = engine.play_trainer(state, boss.id).state

    action = _decide(engine, state)

    assert action.action_type == ActionType.CONFIRM_SWITCH
    assert action.target_id == fragile.id


# ============================================================================
# TEST: FLAGS AND WRAPPER
# ============================================================================

def test_flags_reset_on_new_turn():
    flags = AITurnFlags(turn_count=3, basics_played=2, considered_card_ids=["a"])

    flags.sync(3)
    assert flags.basics_played == 2

    flags.sync(4)
    assert flags.turn_count == 4
    assert flags.basics_played == 0
    assert flags.considered_card_ids == []


def test_scripted_bot_plays_full_turn(engine, battle_state):
    state = battle_state
    add_to_hand(state, Side.PLAYER, make_pokemon("Vulpix", 60, "Fire"), make_energy("Fire"))
    state.opponent.board.active_spot.hp = 300
    bot = ScriptedBot(name="Bot", seed=1, engine=engine)
    bot.on_game_start(Side.PLAYER)

    for _ in range(10):
        if state.current_side != Side.PLAYER:
            break
        action = bot.choose_action(state, engine.get_legal_actions(state))
        result = engine.step(state, action)
        assert result.ok, result.message
        state = result.state

    assert state.current_side == Side.OPPONENT
    assert state.player.board.get_bench_count() == 1
    assert state.opponent.board.active_spot.damage_counters == 100
