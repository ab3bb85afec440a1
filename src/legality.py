"""
PVCGL Engine - Legality & Cost Checks

Pure functions deciding whether an action is currently permitted and
whether an energy cost is payable. Nothing here mutates state.

Every check returns (allowed, reason); the reason is a human-readable
string for UI feedback and is empty when allowed.
"""

from typing import List, Optional, Tuple

from models import (
    GameState, Card, EnergyType, Side, Subtype, Supertype
)


Check = Tuple[bool, str]

ALLOWED: Check = (True, "")


# ============================================================================
# 1. ENERGY COST MATCHING
# ============================================================================

def can_pay_cost(attached: List[EnergyType], cost: List[EnergyType]) -> bool:
    """
    Check whether attached energy pays an attack cost.

    Pass 1 walks the cost from the end and consumes one matching attached
    energy for each specific (non-Colorless) requirement, failing on the
    first one with no match. Pass 2 checks that the leftover energy covers
    the Colorless requirements.

    Example:
        >>> can_pay_cost([FIRE, FIRE], [FIRE, COLORLESS])
        True
        >>> can_pay_cost([FIRE], [FIRE, FIRE])
        False
    """
    remaining = list(attached)
    colorless_needed = 0

    for requirement in reversed(cost):
        if requirement == EnergyType.COLORLESS:
            colorless_needed += 1
            continue
        if requirement in remaining:
            remaining.remove(requirement)
        else:
            return False

    return colorless_needed <= len(remaining)


# ============================================================================
# 2. GENERAL GATES
# ============================================================================

def check_free_play(state: GameState) -> Check:
    """Free-play actions need a running game and no open selection."""
    if state.is_game_over():
        return False, "The game is over"
    if state.pending.is_active:
        return False, "Finish the current selection first"
    return ALLOWED


def check_pending(state: GameState, *modes) -> Check:
    """The given pending mode(s) must be the open selection."""
    if state.is_game_over():
        return False, "The game is over"
    if state.pending.mode not in modes:
        return False, "No matching selection is in progress"
    return ALLOWED


# ============================================================================
# 3. CARD PLAYABILITY
# ============================================================================

def can_play(card: Card, state: GameState, side: Optional[Side] = None) -> Check:
    """
    Whether a card in hand may be played right now.

    Covers the per-turn rules only; effect preconditions (Nest Ball needs a
    Basic in the deck, Boss's Orders needs an opposing bench) are checked
    by the card library.
    """
    side = side or state.current_side
    player = state.get_player(side)

    allowed, reason = check_free_play(state)
    if not allowed:
        return allowed, reason

    if card.supertype == Supertype.POKEMON:
        if card.is_basic_pokemon:
            if not player.board.bench_has_room():
                return False, "Your bench is full"
            return ALLOWED
        if card.is_evolution:
            if not evolution_targets(state, side, card):
                return False, f"No Pokémon in play can evolve into {card.name} this turn"
            return ALLOWED
        return False, f"{card.name} can't be played from hand"

    if card.supertype == Supertype.ENERGY:
        if player.energy_attached_this_turn:
            return False, "You already attached an Energy this turn"
        if not player.board.get_all_pokemon():
            return False, "You have no Pokémon to attach Energy to"
        return ALLOWED

    if Subtype.SUPPORTER in card.subtypes:
        if player.supporter_played_this_turn:
            return False, "You already played a Supporter this turn"
        if state.turn_count <= 1:
            return False, "You can't play a Supporter on the first turn"
        return ALLOWED

    if Subtype.STADIUM in card.subtypes:
        if player.stadium_played_this_turn:
            return False, "You already played a Stadium this turn"
        if state.stadium is not None and state.stadium.name == card.name:
            return False, f"{card.name} is already in play"
        return ALLOWED

    return ALLOWED


# ============================================================================
# 4. EVOLUTION
# ============================================================================

def can_evolve(state: GameState, side: Side, evolution: Card, target: Card) -> Check:
    """
    Whether `evolution` may go on top of `target`.

    The target must not have entered play (or evolved) this turn, and must
    be the Pokémon the card evolves from. Cards without an evolves-from
    name accept any Pokémon.
    """
    if not evolution.is_evolution:
        return False, f"{evolution.name} is not an Evolution card"
    if target.played_turn is not None and target.played_turn >= state.turn_count:
        return False, f"{target.name} entered play this turn and can't evolve yet"
    if evolution.evolves_from and evolution.evolves_from != target.name:
        return False, f"{evolution.name} evolves from {evolution.evolves_from}, not {target.name}"
    return ALLOWED


def evolution_targets(state: GameState, side: Side, evolution: Card) -> List[Card]:
    player = state.get_player(side)
    return [
        pokemon for pokemon in player.board.get_all_pokemon()
        if can_evolve(state, side, evolution, pokemon)[0]
    ]


# ============================================================================
# 5. ATTACKS AND ABILITIES
# ============================================================================

def can_attack(state: GameState, attack_index: int) -> Check:
    """Turn, Active Pokémon, opening-turn ban and energy cost."""
    allowed, reason = check_free_play(state)
    if not allowed:
        return allowed, reason

    player = state.get_current_player()
    attacker = player.board.active_spot
    if attacker is None:
        return False, "You have no Active Pokémon"
    if state.turn_count == 1:
        return False, "The player going first can't attack on their first turn"
    if attack_index < 0 or attack_index >= len(attacker.attacks):
        return False, f"{attacker.name} has no attack #{attack_index}"
    if state.get_defending_player().board.active_spot is None:
        return False, "Your opponent has no Active Pokémon"

    attack = attacker.attacks[attack_index]
    if not can_pay_cost(attacker.attached_energy_types, attack.cost):
        return False, f"Not enough Energy for {attack.name}"
    return ALLOWED


def can_use_ability(state: GameState, card: Card, ability_index: int) -> Check:
    """Generic once-per-turn gate; effect preconditions live in the card library."""
    allowed, reason = check_free_play(state)
    if not allowed:
        return allowed, reason
    if ability_index < 0 or ability_index >= len(card.abilities):
        return False, f"{card.name} has no ability #{ability_index}"

    ability = card.abilities[ability_index]
    used = state.get_current_player().abilities_used_this_turn
    if card.id in used or ability.name in used:
        return False, f"{ability.name} was already used this turn"
    if ability.effect is None:
        return False, f"{ability.name} can't be used here"
    return ALLOWED
