"""
PVCGL Engine - Card Logic Registry (Pure Router)

Maps an EffectKind to the check/effect functions in cards/library/.
The engine asks this module "what does this kind do" and never looks at
card names or text itself.

    TRAINER_LOGIC[EffectKind.DISCARD_THEN_SEARCH]
        -> TrainerLogic(check=discard_then_search_check,
                        effect=discard_then_search_effect)

Query functions:
    get_trainer_logic(card) -> TrainerLogic
    get_ability_logic(ability) -> Optional[AbilityLogic]
    get_on_evolve_trigger(pokemon) -> Optional[(Ability, trigger_fn)]
"""

from typing import Dict, NamedTuple, Optional, Tuple

from models import Ability, Card, EffectKind
from cards.base import CheckFn, EffectFn
from cards.library import abilities, stadiums, trainers


class TrainerLogic(NamedTuple):
    check: CheckFn
    effect: EffectFn


class AbilityLogic(NamedTuple):
    check: CheckFn
    effect: Optional[EffectFn]


TRAINER_LOGIC: Dict[EffectKind, TrainerLogic] = {
    EffectKind.NO_EFFECT: TrainerLogic(trainers.no_effect_check, trainers.no_effect_effect),
    EffectKind.DRAW_CARDS: TrainerLogic(trainers.draw_cards_check, trainers.draw_cards_effect),
    EffectKind.SHUFFLE_HAND_DRAW: TrainerLogic(
        trainers.shuffle_hand_draw_check, trainers.shuffle_hand_draw_effect
    ),
    EffectKind.STADIUM: TrainerLogic(stadiums.stadium_check, stadiums.stadium_effect),
    EffectKind.DISCARD_THEN_SEARCH: TrainerLogic(
        trainers.discard_then_search_check, trainers.discard_then_search_effect
    ),
    EffectKind.SEARCH_BASIC_TO_BENCH: TrainerLogic(
        trainers.search_basic_to_bench_check, trainers.search_basic_to_bench_effect
    ),
    EffectKind.SEARCH_TAGGED_TO_HAND: TrainerLogic(
        trainers.search_tagged_to_hand_check, trainers.search_tagged_to_hand_effect
    ),
    EffectKind.SWITCH_OPPONENT_ACTIVE: TrainerLogic(
        trainers.switch_opponent_active_check, trainers.switch_opponent_active_effect
    ),
    EffectKind.DAMAGE_BUFF: TrainerLogic(trainers.damage_buff_check, trainers.damage_buff_effect),
}

ABILITY_LOGIC: Dict[EffectKind, AbilityLogic] = {
    EffectKind.DRAW_THEN_END_TURN: AbilityLogic(
        abilities.draw_then_end_turn_check, abilities.draw_then_end_turn_effect
    ),
    EffectKind.DISCARD_ENERGY_THEN_DRAW: AbilityLogic(
        abilities.discard_energy_then_draw_check, abilities.discard_energy_then_draw_effect
    ),
    EffectKind.PASSIVE: AbilityLogic(abilities.passive_check, None),
    EffectKind.ON_EVOLVE_SWITCH_OPPONENT: AbilityLogic(abilities.on_evolve_switch_opponent_check, None),
}

ON_EVOLVE_TRIGGERS: Dict[EffectKind, EffectFn] = {
    EffectKind.ON_EVOLVE_SWITCH_OPPONENT: abilities.on_evolve_switch_opponent_trigger,
}


def get_trainer_logic(card: Card) -> TrainerLogic:
    kind = card.effect.kind if card.effect else EffectKind.NO_EFFECT
    return TRAINER_LOGIC.get(kind, TRAINER_LOGIC[EffectKind.NO_EFFECT])


def get_ability_logic(ability: Ability) -> Optional[AbilityLogic]:
    if ability.effect is None:
        return None
    return ABILITY_LOGIC.get(ability.effect.kind)


def get_on_evolve_trigger(pokemon: Card) -> Optional[Tuple[Ability, EffectFn]]:
    """First ability on the Pokémon that fires when it evolves, if any."""
    for ability in pokemon.abilities:
        if ability.effect and ability.effect.kind in ON_EVOLVE_TRIGGERS:
            return ability, ON_EVOLVE_TRIGGERS[ability.effect.kind]
    return None
