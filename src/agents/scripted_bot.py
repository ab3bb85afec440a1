"""
PVCGL Engine - Scripted Opponent

Rule-of-thumb decision engine for the automated side. It picks ONE action
from the current state each call; the driver applies it and asks again, so
every decision sees the flags the previous action changed.

Priority order:
1. Resolve our own open selection (discard / search / switch / energy)
2. Bench Basic Pokémon (limited per turn)
3. Evolve
4. Attach one Energy (Active first, matching what its attacks still need)
5. Play a Stadium different from the current one
6. Play an effectful Item, each card considered once per turn at a fixed chance
7. Attack with the strongest payable attack
8. End turn
"""

import logging
import random
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from models import (
    Action, ActionType, Card, EffectKind, EnergyType, GameState, InteractionMode,
    PlayerState, Side, Subtype
)
from config import GameConfig, DEFAULT_CONFIG
from engine import GameEngine
from agents.base import PlayerAgent


logger = logging.getLogger(__name__)


class AITurnFlags(BaseModel):
    """Per-turn memory for the scripted opponent. Resets when the turn changes."""
    turn_count: int = 0
    basics_played: int = 0
    considered_card_ids: List[str] = Field(default_factory=list, description="Items already rolled for")

    def sync(self, turn_count: int) -> None:
        if self.turn_count != turn_count:
            self.turn_count = turn_count
            self.basics_played = 0
            self.considered_card_ids = []


def get_next_ai_action(
    state: GameState,
    flags: AITurnFlags,
    engine: Optional[GameEngine] = None,
    rng: Optional[random.Random] = None,
    config: Optional[GameConfig] = None,
) -> Optional[Action]:
    """
    Next single action for the side that must act, or None if it has nothing
    to do (game over).

    Returns an END_TURN action when nothing better is available.
    """
    if state.is_game_over():
        return None
    engine = engine or GameEngine(config=config)
    config = config or engine.config
    rng = rng or random.Random()
    flags.sync(state.turn_count)

    legal = engine.get_legal_actions(state)
    if not legal:
        return None
    side = legal[0].side
    player = state.get_player(side)

    if state.pending.is_active:
        return _resolve_pending(state, player, legal)

    by_type: Dict[ActionType, List[Action]] = {}
    for action in legal:
        by_type.setdefault(action.action_type, []).append(action)

    if flags.basics_played < config.ai_basics_per_turn and ActionType.PLAY_BASIC in by_type:
        flags.basics_played += 1
        return by_type[ActionType.PLAY_BASIC][0]

    if ActionType.EVOLVE in by_type:
        return _pick_evolution(player, by_type[ActionType.EVOLVE])

    if ActionType.ATTACH_ENERGY in by_type:
        return _pick_energy_attachment(player, by_type[ActionType.ATTACH_ENERGY])

    trainer_actions = by_type.get(ActionType.PLAY_TRAINER, [])
    for action in trainer_actions:
        card = player.hand.find_card(action.card_id)
        if card is not None and card.has_subtype(Subtype.STADIUM):
            return action

    for action in trainer_actions:
        card = player.hand.find_card(action.card_id)
        if card is None or not _is_effectful_item(card) or card.id in flags.considered_card_ids:
            continue
        flags.considered_card_ids.append(card.id)
        if rng.random() < config.ai_item_chance:
            return action

    attacks = by_type.get(ActionType.ATTACK, [])
    if attacks and player.board.active_spot is not None:
        active = player.board.active_spot
        return max(attacks, key=lambda a: active.attacks[a.choice_index].damage)

    return Action(action_type=ActionType.END_TURN, side=side, display_label="End Turn")


# ============================================================================
# FREE-PLAY HEURISTICS
# ============================================================================

def _is_effectful_item(card: Card) -> bool:
    if not card.has_subtype(Subtype.ITEM):
        return False
    return card.effect is not None and card.effect.kind != EffectKind.NO_EFFECT


def _pick_evolution(player: PlayerState, options: List[Action]) -> Action:
    """Prefer evolving the Active, then the biggest resulting HP."""
    active_id = player.board.active_spot.id if player.board.active_spot else None

    def score(action: Action):
        card = player.hand.find_card(action.card_id)
        return (action.target_id == active_id, card.hp or 0 if card else 0)

    return max(options, key=score)


def _missing_types(pokemon: Card) -> List[EnergyType]:
    """Specific energy types the Pokémon's attacks still need."""
    attached = list(pokemon.attached_energy_types)
    missing = []
    for attack in pokemon.attacks:
        pool = list(attached)
        for requirement in attack.cost:
            if requirement == EnergyType.COLORLESS:
                continue
            if requirement in pool:
                pool.remove(requirement)
            else:
                missing.append(requirement)
    return missing


def _pick_energy_attachment(player: PlayerState, options: List[Action]) -> Action:
    """Attach to the Active (else first benched), preferring a needed type."""
    board = player.board
    target = board.active_spot or (board.bench[0] if board.bench else None)
    to_target = [a for a in options if target is not None and a.target_id == target.id] or options

    needed = _missing_types(target) if target is not None else []
    for action in to_target:
        energy = player.hand.find_card(action.card_id)
        if energy is not None and energy.energy_type in needed:
            return action
    return to_target[0]


# ============================================================================
# PENDING SELECTIONS
# ============================================================================

def _discard_value(card: Card) -> int:
    """Lower is cheaper to throw away."""
    if card.is_trainer:
        return 0 if card.effect is None or card.effect.kind == EffectKind.NO_EFFECT else 2
    if card.is_energy:
        return 1
    return 3 + (card.hp or 0) // 100


def _resolve_pending(state: GameState, player: PlayerState, legal: List[Action]) -> Action:
    mode = state.pending.mode
    choices = [a for a in legal if a.action_type != ActionType.CANCEL_SELECTION] or legal

    if mode == InteractionMode.DISCARD_FROM_HAND:
        def cost(action: Action) -> int:
            return sum(_discard_value(player.hand.find_card(card_id)) for card_id in action.card_ids)
        return min(choices, key=cost)

    if mode in (InteractionMode.SEARCH_DECK_POKEMON, InteractionMode.SEARCH_DECK_BASIC):
        def hp(action: Action) -> int:
            if not action.card_ids:
                return -1
            card = player.deck.find_card(action.card_ids[0])
            return card.hp or 0 if card else 0
        return max(choices, key=hp)

    if mode == InteractionMode.SEARCH_DECK_TAGGED:
        want_pokemon = len(player.board.get_all_pokemon()) < 3 and player.board.bench_has_room()

        def preference(action: Action) -> int:
            if not action.card_ids:
                return -1
            card = player.deck.find_card(action.card_ids[0])
            if card is None:
                return 0
            return 2 if card.is_pokemon == want_pokemon else 1
        return max(choices, key=preference)

    if mode == InteractionMode.SWITCH_OPPONENT_ACTIVE:
        opponent = state.get_player(player.side.other)

        def remaining(action: Action) -> int:
            pokemon = opponent.board.find_pokemon(action.target_id)
            return pokemon.remaining_hp if pokemon else 10 ** 6
        return min(choices, key=remaining)

    if mode == InteractionMode.ATTACH_ENERGY_FROM_DISCARD:
        return max(choices, key=lambda a: len(a.card_ids))

    if mode == InteractionMode.DISTRIBUTE_ENERGY_FROM_DISCARD:
        def energy_count(action: Action) -> int:
            pokemon = player.board.find_pokemon(action.target_id)
            return len(pokemon.attached_energy) if pokemon else 10 ** 6
        return min(choices, key=energy_count)

    return choices[0]


# ============================================================================
# AGENT WRAPPER
# ============================================================================

class ScriptedBot(PlayerAgent):
    """
    Agent wrapper around get_next_ai_action for the game loop and session.

    Example:
        >>> bot = ScriptedBot(seed=7)
        >>> action = bot.choose_action(state, engine.get_legal_actions(state))
    """

    def __init__(
        self,
        name: str = "Opponent",
        seed: Optional[int] = None,
        engine: Optional[GameEngine] = None,
        config: Optional[GameConfig] = None,
    ):
        super().__init__(name)
        self.config = config or DEFAULT_CONFIG
        self.engine = engine or GameEngine(config=self.config)
        self.rng = random.Random(seed)
        self.flags = AITurnFlags()

    def next_action(self, state: GameState) -> Optional[Action]:
        return get_next_ai_action(state, self.flags, self.engine, self.rng, self.config)

    def choose_action(self, state: GameState, legal_actions: List[Action]) -> Action:
        if not legal_actions:
            raise ValueError("No legal actions available")
        action = self.next_action(state)
        if action is None:
            return legal_actions[0]
        return action

    def on_action_rejected(self, action: Action, reason: str):
        logger.debug(f"{self.name}: {action} rejected ({reason})")
        if action.card_id and action.card_id not in self.flags.considered_card_ids:
            self.flags.considered_card_ids.append(action.card_id)
