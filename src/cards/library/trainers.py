"""
Shared Trainer Card Logic Library

Reusable trainer effects, one pair of functions per EffectKind:

    def <kind>_check(ctx: EffectContext, card: Card) -> Check
    def <kind>_effect(ctx: EffectContext, card: Card) -> EffectOutcome

Effects that need a choice from the player open a PendingInteraction and
leave the trainer in hand; the engine's confirm_* operations finish them
and spend the card.
"""

import logging

from models import (
    Card, CardEffect, CardFilter, EffectKind, InteractionMode,
    PendingInteraction, Subtype, Supertype
)
from legality import ALLOWED, Check
from cards.base import EffectContext, EffectOutcome
import actions


logger = logging.getLogger(__name__)


def spend_trainer(ctx: EffectContext, card_id: str) -> Card:
    """
    Move a played trainer from hand to discard and mark the Supporter flag.

    Raises:
        CardNotFoundError: If the card is no longer in hand
    """
    player = ctx.player
    card = actions.move_card(player.hand, player.discard, card_id, "hand")
    if Subtype.SUPPORTER in card.subtypes:
        player.supporter_played_this_turn = True
    return card


def _effect(card: Card) -> CardEffect:
    return card.effect or CardEffect(kind=EffectKind.NO_EFFECT)


# ============================================================================
# DRAW (Professor's Research, Iono)
# ============================================================================

def draw_cards_check(ctx: EffectContext, card: Card) -> Check:
    return ALLOWED


def draw_cards_effect(ctx: EffectContext, card: Card) -> EffectOutcome:
    effect = _effect(card)
    spend_trainer(ctx, card.id)

    discarded = 0
    if effect.discard_hand:
        discarded = actions.discard_hand(ctx.state, ctx.side)
    drawn = actions.draw_card(ctx.state, ctx.side, effect.count)

    if effect.discard_hand:
        return EffectOutcome(message=f"{card.name}: discarded {discarded} and drew {drawn} cards")
    return EffectOutcome(message=f"{card.name}: drew {drawn} cards")


# ============================================================================
# SHUFFLE HAND, DRAW (Lillie's Determination)
# ============================================================================

def shuffle_hand_draw_check(ctx: EffectContext, card: Card) -> Check:
    return ALLOWED


def shuffle_hand_draw_effect(ctx: EffectContext, card: Card) -> EffectOutcome:
    effect = _effect(card)
    spend_trainer(ctx, card.id)

    actions.shuffle_hand_into_deck(ctx.state, ctx.side, ctx.rng)
    count = effect.count
    if effect.bonus_count and ctx.player.prizes.count() == effect.prize_threshold:
        count = effect.bonus_count
    drawn = actions.draw_card(ctx.state, ctx.side, count)
    return EffectOutcome(message=f"{card.name}: shuffled hand into deck and drew {drawn} cards")


# ============================================================================
# DAMAGE BUFF (Premium Power Pro)
# ============================================================================

def damage_buff_check(ctx: EffectContext, card: Card) -> Check:
    return ALLOWED


def damage_buff_effect(ctx: EffectContext, card: Card) -> EffectOutcome:
    effect = _effect(card)
    spend_trainer(ctx, card.id)
    ctx.player.damage_bonus_this_turn += effect.amount
    return EffectOutcome(
        message=f"{card.name}: attacks do +{ctx.player.damage_bonus_this_turn} damage this turn"
    )


# ============================================================================
# NO EFFECT
# ============================================================================

def no_effect_check(ctx: EffectContext, card: Card) -> Check:
    return ALLOWED


def no_effect_effect(ctx: EffectContext, card: Card) -> EffectOutcome:
    logger.warning(f"No effect logic for {card.name} ({card.card_id}); card discarded")
    spend_trainer(ctx, card.id)
    return EffectOutcome(message=f"Played {card.name}")


# ============================================================================
# ULTRA BALL (discard 2, then search for a Pokémon)
# ============================================================================

def discard_then_search_check(ctx: EffectContext, card: Card) -> Check:
    needed = _effect(card).count
    others = [c for c in ctx.player.hand.cards if c.id != card.id]
    if len(others) < needed:
        return False, f"{card.name} needs {needed} other cards in your hand to discard"
    return ALLOWED


def discard_then_search_effect(ctx: EffectContext, card: Card) -> EffectOutcome:
    needed = _effect(card).count
    ctx.state.pending = PendingInteraction(
        mode=InteractionMode.DISCARD_FROM_HAND,
        side=ctx.side,
        source_card_id=card.id,
        source_name=card.name,
        required_count=needed,
        next_mode=InteractionMode.SEARCH_DECK_POKEMON,
    )
    return EffectOutcome(message=f"{card.name}: choose {needed} cards to discard")


# ============================================================================
# NEST BALL (Basic Pokémon from deck to bench)
# ============================================================================

BASIC_POKEMON_FILTER = CardFilter(supertype=Supertype.POKEMON, subtype=Subtype.BASIC)


def search_basic_to_bench_check(ctx: EffectContext, card: Card) -> Check:
    if not ctx.player.board.bench_has_room():
        return False, "Your bench is full"
    if not any(BASIC_POKEMON_FILTER.matches(c) for c in ctx.player.deck.cards):
        return False, "There are no Basic Pokémon in your deck"
    return ALLOWED


def search_basic_to_bench_effect(ctx: EffectContext, card: Card) -> EffectOutcome:
    ctx.state.pending = PendingInteraction(
        mode=InteractionMode.SEARCH_DECK_BASIC,
        side=ctx.side,
        source_card_id=card.id,
        source_name=card.name,
        required_count=1,
        filters=[BASIC_POKEMON_FILTER],
    )
    return EffectOutcome(message=f"{card.name}: choose a Basic Pokémon to put on your bench")


# ============================================================================
# FIGHTING GONG (Basic Pokémon or Basic Energy of one type, to hand)
# ============================================================================

def tagged_filters(effect: CardEffect):
    return [
        CardFilter(supertype=Supertype.POKEMON, subtype=Subtype.BASIC, energy_type=effect.energy_type),
        CardFilter(supertype=Supertype.ENERGY, energy_type=effect.energy_type, basic_energy_only=True),
    ]


def search_tagged_to_hand_check(ctx: EffectContext, card: Card) -> Check:
    if ctx.player.deck.is_empty():
        return False, "Your deck is empty"
    effect = _effect(card)
    filters = tagged_filters(effect)
    if not any(f.matches(c) for c in ctx.player.deck.cards for f in filters):
        element = effect.energy_type.value if effect.energy_type else "matching"
        return False, f"There are no Basic {element} Pokémon or Basic {element} Energy in your deck"
    return ALLOWED


def search_tagged_to_hand_effect(ctx: EffectContext, card: Card) -> EffectOutcome:
    effect = _effect(card)
    ctx.state.pending = PendingInteraction(
        mode=InteractionMode.SEARCH_DECK_TAGGED,
        side=ctx.side,
        source_card_id=card.id,
        source_name=card.name,
        required_count=1,
        filters=tagged_filters(effect),
    )
    element = effect.energy_type.value if effect.energy_type else "any"
    return EffectOutcome(
        message=f"{card.name}: choose a Basic {element} Pokémon or Basic {element} Energy"
    )


# ============================================================================
# BOSS'S ORDERS (switch opponent's Active)
# ============================================================================

def switch_opponent_active_check(ctx: EffectContext, card: Card) -> Check:
    if not ctx.opponent.board.bench:
        return False, "Your opponent has no Benched Pokémon"
    return ALLOWED


def switch_opponent_active_effect(ctx: EffectContext, card: Card) -> EffectOutcome:
    ctx.state.pending = PendingInteraction(
        mode=InteractionMode.SWITCH_OPPONENT_ACTIVE,
        side=ctx.side,
        source_card_id=card.id,
        source_name=card.name,
        required_count=1,
    )
    return EffectOutcome(message=f"{card.name}: choose one of your opponent's Benched Pokémon")
