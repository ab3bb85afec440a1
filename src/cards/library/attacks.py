"""
Shared Attack Logic Library

Attack-identity special cases, keyed by EffectKind:
- damage overrides applied before weakness/resistance (Cosmic Beam)
- follow-up selections opened after damage (Ora Jab)
"""

from typing import Optional, Tuple

from models import (
    Attack, Card, CardEffect, CardFilter, EffectKind, InteractionMode,
    PendingInteraction, Supertype
)
from cards.base import EffectContext
import actions


def resolve_damage(ctx: EffectContext, attacker: Card, attack: Attack) -> Tuple[int, bool]:
    """
    Damage before weakness/resistance, and whether they apply.

    Returns:
        (damage including the turn's bonus, apply weakness/resistance)
    """
    damage = attack.damage + ctx.player.damage_bonus_this_turn
    effect = attack.effect
    if effect is None:
        return damage, True

    if effect.kind == EffectKind.REQUIRES_BENCHED_CARD:
        if not actions.has_pokemon_named_on_bench(ctx.player, effect.required_card_name or ""):
            damage = 0

    return damage, not effect.ignores_weakness_resistance


def discard_energy_filter(effect: CardEffect) -> CardFilter:
    return CardFilter(supertype=Supertype.ENERGY, energy_type=effect.energy_type, basic_energy_only=True)


def open_follow_up(ctx: EffectContext, attacker: Card, attack: Attack) -> Optional[str]:
    """
    Open the attack's follow-up selection, if it has one that can happen.

    Returns:
        Prompt message when a selection was opened, else None (turn ends)
    """
    effect = attack.effect
    if effect is None or effect.kind != EffectKind.ATTACH_FROM_DISCARD:
        return None
    if not ctx.player.board.bench:
        return None

    card_filter = discard_energy_filter(effect)
    available = [card for card in ctx.player.discard.cards if card_filter.matches(card)]
    if not available:
        return None

    ctx.state.pending = PendingInteraction(
        mode=InteractionMode.ATTACH_ENERGY_FROM_DISCARD,
        side=ctx.side,
        source_card_id=attacker.id,
        source_name=attack.name,
        required_count=min(effect.count, len(available)),
        filters=[card_filter],
        cancellable=False,
    )
    return f"{attack.name}: choose up to {ctx.state.pending.required_count} Energy from your discard pile"
