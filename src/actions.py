"""
PVCGL Engine - Action Primitives (actions.py)
Atomic state-modification functions called by engine.py and the card library.

These are the "vocabulary" of the game - the fundamental operations
that modify GameState. Callers pass a state they already own (the engine
clones before calling in here), so these functions mutate in place and
return the state for chaining.
"""

import logging
import random
from typing import List, Optional

from models import (
    GameState,
    PlayerState,
    Card,
    Zone,
    Side,
    GameResult,
)


logger = logging.getLogger(__name__)


# ============================================================================
# 1. ERRORS
# ============================================================================

class CardNotFoundError(LookupError):
    """
    Raised when an action references a card that is not where it should be.

    This is a programmer error (stale UI, wrong id), not a rule violation.
    The engine converts it into a NOT_FOUND result.
    """
    pass


def take_from_zone(zone: Zone, card_id: str, zone_name: str) -> Card:
    """Remove a card from a zone or raise CardNotFoundError."""
    card = zone.remove_card(card_id)
    if card is None:
        raise CardNotFoundError(f"Card {card_id} not found in {zone_name}")
    return card


def find_in_zone(zone: Zone, card_id: str, zone_name: str) -> Card:
    card = zone.find_card(card_id)
    if card is None:
        raise CardNotFoundError(f"Card {card_id} not found in {zone_name}")
    return card


def find_in_play(player: PlayerState, card_id: str) -> Card:
    card = player.board.find_pokemon(card_id)
    if card is None:
        raise CardNotFoundError(f"Pokémon {card_id} not found in play for {player.side.value}")
    return card


# ============================================================================
# 2. DECK MANIPULATION
# ============================================================================

def draw_card(state: GameState, side: Side, amount: int = 1) -> int:
    """
    Draw cards from the front of the deck into hand.

    Draws as many as are available; an empty deck is not a loss.

    Returns:
        Number of cards actually drawn
    """
    player = state.get_player(side)
    drawn = 0
    for _ in range(amount):
        if player.deck.is_empty():
            break
        player.hand.add_card(player.deck.cards.pop(0))
        drawn += 1
    if drawn < amount:
        logger.debug(f"{side.value} drew {drawn}/{amount} (deck empty)")
    return drawn


def shuffle_deck(state: GameState, side: Side, rng: Optional[random.Random] = None) -> GameState:
    """Shuffle a side's deck with the given RNG (module RNG when None)."""
    player = state.get_player(side)
    (rng or random).shuffle(player.deck.cards)
    return state


def discard_hand(state: GameState, side: Side) -> int:
    """Move the whole hand to the discard pile. Returns the number discarded."""
    player = state.get_player(side)
    count = len(player.hand.cards)
    player.discard.cards.extend(player.hand.cards)
    player.hand.cards = []
    return count


def shuffle_hand_into_deck(state: GameState, side: Side, rng: Optional[random.Random] = None) -> int:
    player = state.get_player(side)
    count = len(player.hand.cards)
    player.deck.cards.extend(player.hand.cards)
    player.hand.cards = []
    shuffle_deck(state, side, rng)
    return count


def move_card(source: Zone, destination: Zone, card_id: str, zone_name: str = "zone") -> Card:
    """Move one card between zones by value."""
    card = take_from_zone(source, card_id, zone_name)
    destination.add_card(card)
    return card


# ============================================================================
# 3. DAMAGE CALCULATION
# ============================================================================

def calculate_damage(
    attacker: Card,
    defender: Card,
    base_damage: int,
    bonus: int = 0,
    apply_weakness_resistance: bool = True,
) -> int:
    """
    Final damage for one attack.

    Order of operations:
    1. Base damage plus the attacker's stacking bonus
    2. Weakness (multiply or add) when the defender is weak to the attacker's type
    3. Resistance (flat amount, usually negative) when the defender resists it
    4. Floor at 0

    Weakness and resistance are skipped when the attack exempts itself or
    when there is no damage to modify.

    Example:
        >>> calculate_damage(fire_attacker, grass_defender, 50)  # Grass weak to Fire x2
        100
    """
    damage = base_damage + bonus

    if not apply_weakness_resistance or damage <= 0:
        return max(0, damage)

    attacker_type = attacker.energy_type
    for weakness in defender.weaknesses:
        if weakness.energy_type == attacker_type:
            damage = weakness.apply(damage)
            break

    for resistance in defender.resistances:
        if resistance.energy_type == attacker_type:
            damage = resistance.apply(damage)
            break

    return max(0, damage)


def apply_damage(target: Card, damage: int) -> Card:
    """Add damage to a Pokémon. HP itself never changes."""
    target.damage_counters += max(0, damage)
    return target


# ============================================================================
# 4. KNOCKOUT HANDLING
# ============================================================================

def check_knockout(pokemon: Card) -> bool:
    return pokemon.hp is not None and pokemon.damage_counters >= pokemon.hp


def discard_pokemon_stack(owner: PlayerState, pokemon: Card) -> int:
    """
    Move a Pokémon, its attached energy and its prior stages to discard.

    Returns:
        Number of cards placed in the discard pile
    """
    moved = 0
    for energy in pokemon.attached_energy:
        owner.discard.add_card(energy)
        moved += 1
    stages = pokemon.prior_stages
    pokemon.attached_energy = []
    pokemon.prior_stages = []
    pokemon.damage_counters = 0
    pokemon.played_turn = None
    for stage in stages:
        moved += discard_pokemon_stack(owner, stage)
    owner.discard.add_card(pokemon)
    return moved + 1


def process_knockout(state: GameState, knocked_out: Card, attacker_side: Side) -> GameState:
    """
    Process a Pokémon knockout.

    Steps:
    1. Move the KO'd Pokémon and everything under / attached to it to discard
    2. Attacker takes one prize card into hand
    3. Owner's first benched Pokémon becomes Active (slot stays empty otherwise)
    4. Decide the game if the attacker took its last prize or the owner has
       no Pokémon left
    """
    owner = state.get_player(attacker_side.other)
    attacker = state.get_player(attacker_side)

    if owner.board.active_spot and owner.board.active_spot.id == knocked_out.id:
        owner.board.active_spot = None
    else:
        owner.board.remove_from_bench(knocked_out.id)
    discard_pokemon_stack(owner, knocked_out)

    if not attacker.prizes.is_empty():
        attacker.hand.add_card(attacker.prizes.cards.pop(0))

    if owner.board.active_spot is None and owner.board.bench:
        owner.board.active_spot = owner.board.bench.pop(0)
        logger.info(f"{owner.name} promotes {owner.board.active_spot.name} to Active")

    if attacker.prizes.is_empty():
        declare_winner(state, attacker_side, "took the last prize card")
    elif not owner.has_any_pokemon():
        declare_winner(state, attacker_side, f"{owner.name} has no Pokémon left")

    return state


def declare_winner(state: GameState, side: Side, reason: str) -> GameState:
    state.result = GameResult.PLAYER_WIN if side == Side.PLAYER else GameResult.OPPONENT_WIN
    state.winner = side
    logger.info(f"Game over: {state.get_player(side).name} wins ({reason})")
    return state


# ============================================================================
# 5. EVOLUTION AND SWITCHING
# ============================================================================

def evolve_pokemon(state: GameState, side: Side, target: Card, evolution: Card) -> Card:
    """
    Put an evolution card on top of a Pokémon in play.

    Damage and attached energy move to the new card; the old card (with its
    own prior stages) goes under it. Caller has already removed the
    evolution card from hand and validated the evolution.
    """
    player = state.get_player(side)

    evolution.damage_counters = target.damage_counters
    evolution.attached_energy = target.attached_energy
    evolution.prior_stages = target.prior_stages + [target]
    evolution.played_turn = state.turn_count

    target.attached_energy = []
    target.prior_stages = []
    target.damage_counters = 0

    if player.board.active_spot and player.board.active_spot.id == target.id:
        player.board.active_spot = evolution
    else:
        index = next(i for i, p in enumerate(player.board.bench) if p.id == target.id)
        player.board.bench[index] = evolution

    return evolution


def switch_with_bench(player: PlayerState, bench_card_id: str) -> Card:
    """
    Promote a benched Pokémon to Active.

    The previous Active, if any, goes to the front of the bench.
    """
    incoming = player.board.remove_from_bench(bench_card_id)
    if incoming is None:
        raise CardNotFoundError(f"Pokémon {bench_card_id} not on {player.side.value}'s bench")
    outgoing = player.board.active_spot
    player.board.active_spot = incoming
    if outgoing is not None:
        player.board.bench.insert(0, outgoing)
    return incoming


# ============================================================================
# 6. QUERIES
# ============================================================================

def count_cards(state: GameState, side: Side) -> int:
    """
    Every physical card a side owns, wherever it is.

    Counts deck, hand, discard, prizes, each Pokémon in play with its attached
    energy and prior stages, and the Stadium if this side owns it.
    """
    player = state.get_player(side)
    total = (
        player.deck.count()
        + player.hand.count()
        + player.discard.count()
        + player.prizes.count()
    )
    total += sum(pokemon.stack_size() for pokemon in player.board.get_all_pokemon())
    if state.stadium is not None and state.stadium_owner == side:
        total += 1
    return total


def has_pokemon_named_in_play(player: PlayerState, name: str) -> bool:
    return any(pokemon.name == name for pokemon in player.board.get_all_pokemon())


def has_pokemon_named_on_bench(player: PlayerState, name: str) -> bool:
    return any(pokemon.name == name for pokemon in player.board.bench)
