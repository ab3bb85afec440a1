"""
PVCGL Engine - Game Setup Manager

Converts deck lists into a playable GameState.
Automates pre-game setup (shuffle, opening hands with mulligans, coin flip,
Active Pokémon, prizes).

Usage:
    from game_setup import quick_setup, load_deck_from_file

    state = quick_setup(load_deck_from_file("src/decks/mega_lucario_ex.txt"),
                        load_deck_from_file("src/decks/dragapult_ex.txt"),
                        random_seed=42)
"""

import logging
import random
import re
from typing import Callable, Dict, List, Optional

from models import GameState, PlayerState, Card, Side
from config import GameConfig, DEFAULT_CONFIG
from cards.factory import create_card_instance


logger = logging.getLogger(__name__)

# Picks the instance id of the Active Pokémon from the Basics in hand
ActiveChooser = Callable[[Side, List[Card]], str]

_DECK_LINE = re.compile(r'^(\d+)\s+.*?\s+([\w\-]+)$')


def parse_deck_string(deck_text: str) -> List[str]:
    """
    Parse a deck string into list of catalog IDs.

    Format: "{count} {name...} {catalog-id}" per line; blank lines and
    lines starting with '#' are ignored.

    Example:
        >>> parse_deck_string("4 Riolu me1-76\\n2 Basic Fighting Energy sve-6")
        ["me1-76", "me1-76", "me1-76", "me1-76", "sve-6", "sve-6"]

    Raises:
        ValueError: On a line that doesn't match the format
    """
    card_ids = []
    for line_number, line in enumerate(deck_text.strip().split('\n'), start=1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        match = _DECK_LINE.match(line)
        if not match:
            raise ValueError(f"Line {line_number}: can't parse deck entry '{line}'")
        card_ids.extend([match.group(2)] * int(match.group(1)))
    return card_ids


def load_deck_from_file(filepath: str) -> str:
    """Load deck string from file."""
    with open(filepath, 'r', encoding='utf-8') as f:
        return f.read()


def build_deck(card_ids: List[str]) -> List[Card]:
    """
    Create fresh card instances for a deck list.

    Raises:
        ValueError: If any catalog ID is unknown
    """
    cards = []
    for card_id in card_ids:
        card = create_card_instance(card_id)
        if card is None:
            raise ValueError(f"Unknown card ID in deck: {card_id}")
        cards.append(card)
    return cards


# ============================================================================
# SETUP
# ============================================================================

def setup_game(
    player_deck_ids: List[str],
    opponent_deck_ids: List[str],
    random_seed: Optional[int] = None,
    config: Optional[GameConfig] = None,
    choose_active: Optional[ActiveChooser] = None,
    player_name: str = "Player",
    opponent_name: str = "Opponent",
) -> GameState:
    """
    Build a GameState ready for turn 1.

    Steps:
    1. Create and shuffle both decks
    2. Draw opening hands, mulligan until each has a Basic Pokémon; every
       mulligan lets the other side draw one extra card afterwards
    3. Coin flip for the starting side
    4. Place an Active Pokémon for each side (first Basic unless a chooser
       is given)
    5. Set aside prize cards

    Raises:
        ValueError: Wrong deck size, unknown card, or a deck with no Basic Pokémon
    """
    config = config or DEFAULT_CONFIG
    rng = random.Random(random_seed)

    decks: Dict[Side, List[Card]] = {}
    for side, card_ids in ((Side.PLAYER, player_deck_ids), (Side.OPPONENT, opponent_deck_ids)):
        if len(card_ids) != config.deck_size:
            raise ValueError(f"{side.value} deck must have {config.deck_size} cards, got {len(card_ids)}")
        cards = build_deck(card_ids)
        if not any(card.is_basic_pokemon for card in cards):
            raise ValueError(f"{side.value} deck has no Basic Pokémon")
        rng.shuffle(cards)
        decks[side] = cards

    state = GameState(
        player=PlayerState(side=Side.PLAYER, name=player_name),
        opponent=PlayerState(side=Side.OPPONENT, name=opponent_name),
        time_remaining=config.turn_time_limit,
    )
    for side, cards in decks.items():
        player = state.get_player(side)
        player.deck.cards = cards
        player.board.max_bench_size = config.max_bench_size

    mulligans = {side: _draw_opening_hand(state.get_player(side), rng, config) for side in Side}
    for side in Side:
        extra = mulligans[side.other]
        if extra:
            drawn = _draw(state.get_player(side), extra)
            logger.info(f"{state.get_player(side).name} draws {drawn} extra card(s) for mulligans")

    state.starting_side = Side.PLAYER if rng.random() < 0.5 else Side.OPPONENT
    state.current_side = state.starting_side
    logger.info(f"Coin flip: {state.get_player(state.starting_side).name} goes first")

    for side in Side:
        _place_active(state.get_player(side), choose_active if side == Side.PLAYER else None)
        _set_prizes(state.get_player(side), config.prize_count)

    state.turn_count = 1
    state.message = f"{state.get_player(state.starting_side).name} goes first"
    return state


def _draw(player: PlayerState, amount: int) -> int:
    drawn = 0
    while drawn < amount and not player.deck.is_empty():
        player.hand.add_card(player.deck.cards.pop(0))
        drawn += 1
    return drawn


def _draw_opening_hand(player: PlayerState, rng: random.Random, config: GameConfig) -> int:
    """
    Draw an opening hand, redrawing until it holds a Basic Pokémon.

    Returns:
        Number of mulligans taken
    """
    mulligans = 0
    _draw(player, config.opening_hand_size)
    while not any(card.is_basic_pokemon for card in player.hand.cards):
        mulligans += 1
        logger.info(f"[Mulligan] {player.name} has no Basic Pokémon. Reshuffling...")
        player.deck.cards.extend(player.hand.cards)
        player.hand.cards = []
        rng.shuffle(player.deck.cards)
        _draw(player, config.opening_hand_size)
    return mulligans


def _place_active(player: PlayerState, choose_active: Optional[ActiveChooser]) -> None:
    basics = [card for card in player.hand.cards if card.is_basic_pokemon]
    chosen_id = choose_active(player.side, basics) if choose_active else basics[0].id
    active = player.hand.remove_card(chosen_id)
    if active is None or not active.is_basic_pokemon:
        raise ValueError(f"{player.name} must choose a Basic Pokémon from hand as Active")
    active.played_turn = 0
    player.board.active_spot = active
    logger.info(f"[Setup] {player.name} placed {active.name} as Active")


def _set_prizes(player: PlayerState, count: int) -> None:
    for _ in range(count):
        if player.deck.is_empty():
            break
        player.prizes.add_card(player.deck.cards.pop(0))


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

def quick_setup(
    player_deck_text: str,
    opponent_deck_text: str,
    random_seed: Optional[int] = None,
    config: Optional[GameConfig] = None,
) -> GameState:
    """
    Parse two deck strings and set up a game in one call.

    Example:
        >>> state = quick_setup(deck1, deck2, random_seed=42)
    """
    return setup_game(
        parse_deck_string(player_deck_text),
        parse_deck_string(opponent_deck_text),
        random_seed=random_seed,
        config=config,
    )
