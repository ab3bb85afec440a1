"""
Pytest configuration and fixtures.
Provides reusable game state setups and card builders for all tests.
"""

import sys
sys.path.insert(0, 'src')

import pytest
from typing import List, Optional, Sequence, Tuple

from models import GameState, PlayerState, Card, Side
from cards.factory import create_card_from_json, create_card_instance, create_multiple
from engine import GameEngine


# ============================================================================
# CARD BUILDERS
# ============================================================================

AttackSpec = Tuple[str, Sequence[str], int]

_counter = {"n": 0}


def _next_id(prefix: str) -> str:
    _counter["n"] += 1
    return f"{prefix}_{_counter['n']}"


def make_pokemon(
    name: str = "Charmander",
    hp: int = 60,
    energy_type: str = "Fire",
    attacks: Optional[List[AttackSpec]] = None,
    weaknesses: Optional[List[Tuple[str, str]]] = None,
    resistances: Optional[List[Tuple[str, str]]] = None,
    subtypes: Sequence[str] = ("Basic",),
    evolves_from: Optional[str] = None,
    abilities: Optional[List[str]] = None,
) -> Card:
    """
    Hand-made Pokémon in card-API shape.

    attacks: [(name, cost, damage)], e.g. [("Flare", ["Fire"], 50)]
    weaknesses / resistances: [(type, value)], e.g. [("Fire", "×2")]
    """
    return create_card_from_json({
        "id": f"test-{name.lower().replace(' ', '-')}",
        "name": name,
        "supertype": "Pokémon",
        "subtypes": list(subtypes),
        "hp": str(hp),
        "types": [energy_type],
        "evolvesFrom": evolves_from,
        "attacks": [
            {"name": a_name, "cost": list(cost), "damage": str(damage), "text": ""}
            for a_name, cost, damage in (attacks or [])
        ],
        "abilities": [{"name": a, "type": "Ability", "text": ""} for a in (abilities or [])],
        "weaknesses": [{"type": t, "value": v} for t, v in (weaknesses or [])],
        "resistances": [{"type": t, "value": v} for t, v in (resistances or [])],
    }, instance_id=_next_id(name.lower().replace(' ', '_')))


def make_energy(energy_type: str = "Fire") -> Card:
    return create_card_from_json({
        "id": f"test-{energy_type.lower()}-energy",
        "name": f"Basic {energy_type} Energy",
        "supertype": "Energy",
        "subtypes": ["Basic"],
    }, instance_id=_next_id(f"{energy_type.lower()}_energy"))


def make_trainer(name: str, subtype: str = "Item") -> Card:
    return create_card_from_json({
        "id": f"test-{name.lower().replace(' ', '-')}",
        "name": name,
        "supertype": "Trainer",
        "subtypes": [subtype],
    }, instance_id=_next_id(name.lower().replace(' ', '_')))


def catalog_card(card_id: str) -> Card:
    card = create_card_instance(card_id)
    assert card is not None, f"{card_id} missing from catalog"
    return card


def attach(pokemon: Card, energy_type: str, count: int = 1) -> Card:
    for _ in range(count):
        pokemon.attached_energy.append(make_energy(energy_type))
    return pokemon


def add_to_hand(state: GameState, side: Side, *cards: Card) -> List[Card]:
    for card in cards:
        state.get_player(side).hand.add_card(card)
    return list(cards)


def fill_deck(state: GameState, side: Side, cards: List[Card]) -> None:
    state.get_player(side).deck.cards.extend(cards)


def find_action(actions, action_type, **fields):
    """First action of a type whose attributes match the given fields."""
    for action in actions:
        if action.action_type != action_type:
            continue
        if all(getattr(action, key) == value for key, value in fields.items()):
            return action
    return None


# ============================================================================
# FIXTURES: Standard Game States
# ============================================================================

@pytest.fixture
def engine():
    """Create a fresh GameEngine instance."""
    return GameEngine(random_seed=42)


@pytest.fixture
def empty_state():
    """
    Create an empty GameState with two sides.

    Starting conditions:
    - Turn 1, player's turn
    - Empty zones
    - No Pokémon in play
    """
    return GameState(
        player=PlayerState(side=Side.PLAYER, name="Player"),
        opponent=PlayerState(side=Side.OPPONENT, name="Opponent"),
        turn_count=1,
        current_side=Side.PLAYER,
    )


@pytest.fixture
def battle_state(empty_state):
    """
    Create a battle state with Active Pokémon for both sides.

    Setup:
    - Player: Charmander Active (60 HP, Fire, "Flare" [Fire] 50), played turn 0
    - Opponent: Bulbasaur Active (70 HP, Grass, weak to Fire ×2), played turn 0
    - Both sides have 6 prizes and 10 cards in deck
    - Turn 2, player's turn (attacks allowed)
    """
    state = empty_state

    charmander = make_pokemon("Charmander", 60, "Fire", attacks=[("Flare", ["Fire"], 50)],
                              weaknesses=[("Water", "×2")])
    bulbasaur = make_pokemon("Bulbasaur", 70, "Grass", attacks=[("Vine Whip", ["Grass"], 20)],
                             weaknesses=[("Fire", "×2")])
    charmander.played_turn = 0
    bulbasaur.played_turn = 0
    state.player.board.active_spot = charmander
    state.opponent.board.active_spot = bulbasaur

    for side in Side:
        player = state.get_player(side)
        player.prizes.cards = create_multiple("sve-2", 6)
        player.deck.cards = create_multiple("sve-2", 10)

    state.turn_count = 2
    return state
