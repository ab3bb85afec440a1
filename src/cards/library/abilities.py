"""
Shared Ability Logic Library

Activatable abilities, one pair of functions per EffectKind:

    def <kind>_check(ctx: EffectContext, pokemon: Card, ability: Ability) -> Check
    def <kind>_effect(ctx: EffectContext, pokemon: Card, ability: Ability) -> EffectOutcome

The engine records the Pokémon and the ability name as used once the
ability resolves (immediately, or when its discard cost is confirmed).
"""

from models import (
    Ability, Card, CardEffect, CardFilter, EffectKind, InteractionMode,
    PendingInteraction, Supertype
)
from legality import ALLOWED, Check
from cards.base import EffectContext, EffectOutcome
import actions


def mark_ability_used(ctx: EffectContext, pokemon_id: str, ability_name: str) -> None:
    used = ctx.player.abilities_used_this_turn
    for key in (pokemon_id, ability_name):
        if key not in used:
            used.append(key)


def _effect(ability: Ability) -> CardEffect:
    return ability.effect or CardEffect(kind=EffectKind.PASSIVE)


# ============================================================================
# INSTANT CHARGE (draw, then the turn ends)
# ============================================================================

def draw_then_end_turn_check(ctx: EffectContext, pokemon: Card, ability: Ability) -> Check:
    if ctx.player.deck.is_empty():
        return False, "Your deck is empty"
    return ALLOWED


def draw_then_end_turn_effect(ctx: EffectContext, pokemon: Card, ability: Ability) -> EffectOutcome:
    drawn = actions.draw_card(ctx.state, ctx.side, _effect(ability).count)
    mark_ability_used(ctx, pokemon.id, ability.name)
    return EffectOutcome(message=f"{ability.name}: drew {drawn} cards. Your turn ends.", end_turn=True)


# ============================================================================
# CONCEALED CARDS / LUNAR CYCLE (discard an Energy, then draw)
# ============================================================================

def energy_discard_filter(effect: CardEffect) -> CardFilter:
    if effect.energy_type is None:
        return CardFilter(supertype=Supertype.ENERGY)
    return CardFilter(supertype=Supertype.ENERGY, energy_type=effect.energy_type, basic_energy_only=True)


def discard_energy_then_draw_check(ctx: EffectContext, pokemon: Card, ability: Ability) -> Check:
    effect = _effect(ability)
    if effect.required_card_name and not actions.has_pokemon_named_in_play(ctx.player, effect.required_card_name):
        return False, f"{ability.name} needs {effect.required_card_name} in play"
    card_filter = energy_discard_filter(effect)
    if not any(card_filter.matches(card) for card in ctx.player.hand.cards):
        wanted = f"a Basic {effect.energy_type.value} Energy" if effect.energy_type else "an Energy"
        return False, f"{ability.name} needs {wanted} card in your hand"
    return ALLOWED


def discard_energy_then_draw_effect(ctx: EffectContext, pokemon: Card, ability: Ability) -> EffectOutcome:
    effect = _effect(ability)
    ctx.state.pending = PendingInteraction(
        mode=InteractionMode.DISCARD_FROM_HAND,
        side=ctx.side,
        source_card_id=pokemon.id,
        source_name=ability.name,
        required_count=1,
        filters=[energy_discard_filter(effect)],
        draw_count=effect.count,
        ability_name=ability.name,
    )
    return EffectOutcome(message=f"{ability.name}: choose an Energy card to discard")


# ============================================================================
# PASSIVE / TRIGGERED (never activated by hand)
# ============================================================================

def passive_check(ctx: EffectContext, pokemon: Card, ability: Ability) -> Check:
    return False, f"{ability.name} is always active and can't be used"


def on_evolve_switch_opponent_check(ctx: EffectContext, pokemon: Card, ability: Ability) -> Check:
    return False, f"{ability.name} activates when {pokemon.name} evolves"


def on_evolve_switch_opponent_trigger(ctx: EffectContext, pokemon: Card, ability: Ability) -> EffectOutcome:
    """Fired by the engine after an evolution, not through use_ability."""
    if not ctx.opponent.board.bench:
        return EffectOutcome(message="")
    ctx.state.pending = PendingInteraction(
        mode=InteractionMode.SWITCH_OPPONENT_ACTIVE,
        side=ctx.side,
        source_card_id=pokemon.id,
        source_name=ability.name,
        required_count=1,
        ability_name=ability.name,
    )
    return EffectOutcome(message=f"{ability.name}: choose one of your opponent's Benched Pokémon")
