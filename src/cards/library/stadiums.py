"""
Shared Stadium Card Logic Library

Stadium cards have special behaviors:
1. Only one Stadium can be in play at a time, shared by both sides
2. Playing a new Stadium discards the old one to its owner's discard pile
3. Cannot play a Stadium with the same name as the current one
4. The Stadium belongs to whoever played it most recently
"""

import logging

from models import Card
from legality import ALLOWED, Check
from cards.base import EffectContext, EffectOutcome
import actions


logger = logging.getLogger(__name__)


def stadium_check(ctx: EffectContext, card: Card) -> Check:
    current = ctx.state.stadium
    if current is not None and current.name == card.name:
        return False, f"{card.name} is already in play"
    return ALLOWED


def stadium_effect(ctx: EffectContext, card: Card) -> EffectOutcome:
    state = ctx.state
    stadium = actions.take_from_zone(ctx.player.hand, card.id, "hand")

    replaced = state.stadium
    if replaced is not None:
        owner_side = state.stadium_owner or ctx.side
        state.get_player(owner_side).discard.add_card(replaced)
        logger.info(f"{replaced.name} discarded to {owner_side.value}'s discard pile")

    state.stadium = stadium
    state.stadium_owner = ctx.side
    ctx.player.stadium_played_this_turn = True

    if replaced is not None:
        return EffectOutcome(message=f"{card.name} replaced {replaced.name}")
    return EffectOutcome(message=f"Played Stadium {card.name}")
