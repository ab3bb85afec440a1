"""
PVCGL Engine - Rules Engine (engine.py)
The "Referee" - validates intents and applies them as state transitions.
Never guesses; only validates and executes.

Every public operation takes a GameState plus primitive ids and returns an
ActionResult. The input state is never modified: the engine clones it,
applies the change to the clone, and hands the clone back on success or
the untouched input on rejection.
"""

import logging
import random
from itertools import combinations
from typing import Callable, List, Optional, Tuple

from models import (
    GameState,
    PlayerState,
    Card,
    Side,
    Action,
    ActionType,
    ActionResult,
    ActionStatus,
    CardFilter,
    InteractionMode,
    PendingInteraction,
    Supertype,
)
from config import GameConfig, DEFAULT_CONFIG
from legality import (
    can_play, can_evolve, can_attack, can_use_ability, check_free_play,
    check_pending, evolution_targets,
)
from cards import logic_registry
from cards.base import EffectContext
from cards.library import attacks as attack_logic
from cards.library.abilities import mark_ability_used
from cards.library.trainers import spend_trainer
import actions
from actions import CardNotFoundError


logger = logging.getLogger(__name__)

Outcome = Tuple[bool, str]


class GameEngine:
    """
    The rules engine.

    Core Responsibilities:
    1. One operation per player intent (play, attach, evolve, trainer,
       ability, set active, attack, end turn)
    2. The confirm_* operations that resolve pending selections
    3. get_legal_actions() - enumerate every currently legal intent
    4. step() - dispatch an Action record to its operation
    """

    def __init__(self, config: Optional[GameConfig] = None, random_seed: Optional[int] = None):
        """Initialize engine with optional RNG seed for deterministic shuffles."""
        self.config = config or DEFAULT_CONFIG
        self.random_seed = random_seed
        self.rng = random.Random(random_seed)

    # ========================================================================
    # 1. RESULT PLUMBING
    # ========================================================================

    def _run(self, state: GameState, name: str, operation: Callable[..., Outcome], *args) -> ActionResult:
        """Clone, apply, and wrap the outcome. The input state is never touched."""
        working = state.clone()
        try:
            ok, message = operation(working, *args)
        except CardNotFoundError as e:
            logger.warning(f"{name}: {e}")
            return ActionResult(status=ActionStatus.NOT_FOUND, state=state, message=str(e))

        if not ok:
            logger.debug(f"{name} rejected: {message}")
            return ActionResult(status=ActionStatus.REJECTED, state=state, message=message)

        working.message = message
        logger.info(f"[Turn {working.turn_count}] {message}")
        return ActionResult(status=ActionStatus.OK, state=working, message=message)

    def _context(self, state: GameState, side: Optional[Side] = None) -> EffectContext:
        return EffectContext(state, side or state.current_side, self.rng)

    # ========================================================================
    # 2. FREE-PLAY OPERATIONS
    # ========================================================================

    def play_basic_to_bench(self, state: GameState, card_id: str) -> ActionResult:
        return self._run(state, "play_basic_to_bench", self._play_basic_to_bench, card_id)

    def _play_basic_to_bench(self, state: GameState, card_id: str) -> Outcome:
        allowed, reason = check_free_play(state)
        if not allowed:
            return False, reason
        player = state.get_current_player()
        card = actions.find_in_zone(player.hand, card_id, "hand")
        if not card.is_basic_pokemon:
            return False, f"{card.name} is not a Basic Pokémon"
        allowed, reason = can_play(card, state)
        if not allowed:
            return False, reason

        actions.take_from_zone(player.hand, card_id, "hand")
        card.played_turn = state.turn_count
        player.board.add_to_bench(card)
        return True, f"{player.name} put {card.name} on the Bench"

    def attach_energy(self, state: GameState, energy_card_id: str, target_id: str) -> ActionResult:
        return self._run(state, "attach_energy", self._attach_energy, energy_card_id, target_id)

    def _attach_energy(self, state: GameState, energy_card_id: str, target_id: str) -> Outcome:
        allowed, reason = check_free_play(state)
        if not allowed:
            return False, reason
        player = state.get_current_player()
        energy = actions.find_in_zone(player.hand, energy_card_id, "hand")
        target = actions.find_in_play(player, target_id)
        if not energy.is_energy:
            return False, f"{energy.name} is not an Energy card"
        allowed, reason = can_play(energy, state)
        if not allowed:
            return False, reason

        actions.take_from_zone(player.hand, energy_card_id, "hand")
        target.attached_energy.append(energy)
        player.energy_attached_this_turn = True
        return True, f"{player.name} attached {energy.name} to {target.name}"

    def evolve(self, state: GameState, evolution_card_id: str, target_id: str) -> ActionResult:
        return self._run(state, "evolve", self._evolve, evolution_card_id, target_id)

    def _evolve(self, state: GameState, evolution_card_id: str, target_id: str) -> Outcome:
        allowed, reason = check_free_play(state)
        if not allowed:
            return False, reason
        side = state.current_side
        player = state.get_player(side)
        evolution = actions.find_in_zone(player.hand, evolution_card_id, "hand")
        target = actions.find_in_play(player, target_id)
        allowed, reason = can_evolve(state, side, evolution, target)
        if not allowed:
            return False, reason

        actions.take_from_zone(player.hand, evolution_card_id, "hand")
        old_name = target.name
        evolved = actions.evolve_pokemon(state, side, target, evolution)
        message = f"{player.name} evolved {old_name} into {evolved.name}"

        trigger = logic_registry.get_on_evolve_trigger(evolved)
        if trigger:
            ability, trigger_fn = trigger
            outcome = trigger_fn(self._context(state, side), evolved, ability)
            if outcome.message:
                message = f"{message}. {outcome.message}"
        return True, message

    def play_trainer(self, state: GameState, card_id: str) -> ActionResult:
        return self._run(state, "play_trainer", self._play_trainer, card_id)

    def _play_trainer(self, state: GameState, card_id: str) -> Outcome:
        allowed, reason = check_free_play(state)
        if not allowed:
            return False, reason
        player = state.get_current_player()
        card = actions.find_in_zone(player.hand, card_id, "hand")
        if not card.is_trainer:
            return False, f"{card.name} is not a Trainer card"
        allowed, reason = can_play(card, state)
        if not allowed:
            return False, reason

        logic = logic_registry.get_trainer_logic(card)
        ctx = self._context(state)
        allowed, reason = logic.check(ctx, card)
        if not allowed:
            return False, reason
        return True, logic.effect(ctx, card).message

    def use_ability(self, state: GameState, card_id: str, ability_index: int = 0) -> ActionResult:
        return self._run(state, "use_ability", self._use_ability, card_id, ability_index)

    def _use_ability(self, state: GameState, card_id: str, ability_index: int) -> Outcome:
        player = state.get_current_player()
        pokemon = actions.find_in_play(player, card_id)
        allowed, reason = can_use_ability(state, pokemon, ability_index)
        if not allowed:
            return False, reason

        ability = pokemon.abilities[ability_index]
        logic = logic_registry.get_ability_logic(ability)
        if logic is None:
            return False, f"{ability.name} can't be used here"
        ctx = self._context(state)
        allowed, reason = logic.check(ctx, pokemon, ability)
        if not allowed:
            return False, reason
        if logic.effect is None:
            return False, f"{ability.name} can't be used here"

        outcome = logic.effect(ctx, pokemon, ability)
        if outcome.end_turn:
            return True, f"{outcome.message} {self._advance_turn(state)}"
        return True, outcome.message

    def set_active(self, state: GameState, bench_card_id: str) -> ActionResult:
        return self._run(state, "set_active", self._set_active, bench_card_id)

    def _set_active(self, state: GameState, bench_card_id: str) -> Outcome:
        allowed, reason = check_free_play(state)
        if not allowed:
            return False, reason
        player = state.get_current_player()
        incoming = actions.switch_with_bench(player, bench_card_id)
        return True, f"{player.name} moved {incoming.name} to the Active Spot"

    def end_turn(self, state: GameState, force: bool = False) -> ActionResult:
        """
        End the current turn.

        Args:
            force: Abandon any open selection first (turn timer expiry)
        """
        return self._run(state, "end_turn", self._end_turn, force)

    def _end_turn(self, state: GameState, force: bool) -> Outcome:
        if state.is_game_over():
            return False, "The game is over"
        if state.pending.is_active and not force:
            return False, "Finish the current selection first"
        return True, self._advance_turn(state)

    def _advance_turn(self, state: GameState) -> str:
        """
        Hand the turn to the other side.

        Clears any open selection, draws one card for the new side if it can,
        resets both sides' per-turn flags and the turn clock.
        """
        if state.pending.is_active:
            logger.info(f"Abandoning open selection {state.pending.mode.value}")
        state.pending = PendingInteraction()

        state.current_side = state.current_side.other
        state.turn_count += 1
        state.time_remaining = self.config.turn_time_limit
        state.player.reset_turn_flags()
        state.opponent.reset_turn_flags()

        player = state.get_current_player()
        drawn = actions.draw_card(state, state.current_side, 1)
        if drawn:
            return f"Turn {state.turn_count}: {player.name} drew a card"
        return f"Turn {state.turn_count}: {player.name}'s deck is empty"

    # ========================================================================
    # 3. COMBAT
    # ========================================================================

    def attack(self, state: GameState, attack_index: int) -> ActionResult:
        return self._run(state, "attack", self._attack, attack_index)

    def _attack(self, state: GameState, attack_index: int) -> Outcome:
        allowed, reason = can_attack(state, attack_index)
        if not allowed:
            return False, reason

        side = state.current_side
        attacker = state.get_player(side).board.active_spot
        defender = state.get_player(side.other).board.active_spot
        attack = attacker.attacks[attack_index]
        ctx = self._context(state, side)

        damage, apply_weakness_resistance = attack_logic.resolve_damage(ctx, attacker, attack)
        final_damage = actions.calculate_damage(
            attacker, defender, damage, apply_weakness_resistance=apply_weakness_resistance
        )
        actions.apply_damage(defender, final_damage)
        message = f"{attacker.name} used {attack.name} for {final_damage} damage"

        if actions.check_knockout(defender):
            actions.process_knockout(state, defender, side)
            message = f"{message}. {defender.name} was Knocked Out!"
            if state.is_game_over():
                return True, f"{message} {state.get_player(side).name} wins!"

        follow_up = attack_logic.open_follow_up(ctx, attacker, attack)
        if follow_up:
            return True, f"{message}. {follow_up}"
        return True, f"{message}. {self._advance_turn(state)}"

    # ========================================================================
    # 4. PENDING SELECTIONS
    # ========================================================================

    @staticmethod
    def _validate_selection(card_ids: List[str], maximum: int, exact: bool = False) -> Outcome:
        if len(set(card_ids)) != len(card_ids):
            return False, "The same card was selected twice"
        if exact and len(card_ids) != maximum:
            return False, f"Select exactly {maximum} card(s)"
        if len(card_ids) > maximum:
            return False, f"Select at most {maximum} card(s)"
        return True, ""

    def confirm_discard_selection(self, state: GameState, card_ids: List[str]) -> ActionResult:
        return self._run(state, "confirm_discard_selection", self._confirm_discard_selection, list(card_ids))

    def _confirm_discard_selection(self, state: GameState, card_ids: List[str]) -> Outcome:
        allowed, reason = check_pending(state, InteractionMode.DISCARD_FROM_HAND)
        if not allowed:
            return False, reason
        pending = state.pending
        ok, reason = self._validate_selection(card_ids, pending.required_count, exact=True)
        if not ok:
            return False, reason

        player = state.get_player(pending.side)
        for card_id in card_ids:
            if card_id == pending.source_card_id:
                return False, f"{pending.source_name} can't discard itself"
            card = actions.find_in_zone(player.hand, card_id, "hand")
            if not pending.accepts(card):
                return False, f"{card.name} can't be discarded for {pending.source_name}"

        for card_id in card_ids:
            actions.move_card(player.hand, player.discard, card_id, "hand")
        ctx = self._context(state, pending.side)

        if pending.ability_name:
            drawn = actions.draw_card(state, pending.side, pending.draw_count)
            mark_ability_used(ctx, pending.source_card_id, pending.ability_name)
            state.pending = PendingInteraction()
            return True, f"{pending.ability_name}: discarded {len(card_ids)} and drew {drawn} cards"

        spend_trainer(ctx, pending.source_card_id)
        if pending.next_mode == InteractionMode.SEARCH_DECK_POKEMON:
            state.pending = PendingInteraction(
                mode=InteractionMode.SEARCH_DECK_POKEMON,
                side=pending.side,
                source_name=pending.source_name,
                required_count=1,
                filters=[CardFilter(supertype=Supertype.POKEMON)],
                cancellable=False,
            )
            return True, f"{pending.source_name}: choose a Pokémon from your deck"

        state.pending = PendingInteraction()
        return True, f"{pending.source_name}: discarded {len(card_ids)} cards"

    def confirm_search_selection(self, state: GameState, card_ids: List[str]) -> ActionResult:
        """Resolve a deck search for a Pokémon (to hand) or a Basic (to bench)."""
        return self._run(state, "confirm_search_selection", self._confirm_search_selection, list(card_ids))

    def _confirm_search_selection(self, state: GameState, card_ids: List[str]) -> Outcome:
        allowed, reason = check_pending(
            state, InteractionMode.SEARCH_DECK_POKEMON, InteractionMode.SEARCH_DECK_BASIC
        )
        if not allowed:
            return False, reason
        pending = state.pending
        ok, reason = self._validate_selection(card_ids, pending.required_count)
        if not ok:
            return False, reason

        player = state.get_player(pending.side)
        to_bench = pending.mode == InteractionMode.SEARCH_DECK_BASIC
        for card_id in card_ids:
            card = actions.find_in_zone(player.deck, card_id, "deck")
            if not pending.accepts(card):
                return False, f"{card.name} can't be chosen for {pending.source_name}"
        if to_bench and len(card_ids) > player.board.max_bench_size - player.board.get_bench_count():
            return False, "Not enough room on your Bench"

        found = []
        for card_id in card_ids:
            card = actions.take_from_zone(player.deck, card_id, "deck")
            if to_bench:
                card.played_turn = state.turn_count
                player.board.add_to_bench(card)
            else:
                player.hand.add_card(card)
            found.append(card.name)

        if pending.source_card_id:
            spend_trainer(self._context(state, pending.side), pending.source_card_id)
        actions.shuffle_deck(state, pending.side, self.rng)
        state.pending = PendingInteraction()

        if not found:
            return True, f"{pending.source_name}: found nothing"
        destination = "the Bench" if to_bench else "hand"
        return True, f"{pending.source_name}: put {', '.join(found)} into {destination}"

    def confirm_tagged_search_selection(self, state: GameState, card_ids: List[str]) -> ActionResult:
        return self._run(
            state, "confirm_tagged_search_selection", self._confirm_tagged_search_selection, list(card_ids)
        )

    def _confirm_tagged_search_selection(self, state: GameState, card_ids: List[str]) -> Outcome:
        allowed, reason = check_pending(state, InteractionMode.SEARCH_DECK_TAGGED)
        if not allowed:
            return False, reason
        pending = state.pending
        ok, reason = self._validate_selection(card_ids, pending.required_count)
        if not ok:
            return False, reason

        player = state.get_player(pending.side)
        for card_id in card_ids:
            card = actions.find_in_zone(player.deck, card_id, "deck")
            if not pending.accepts(card):
                return False, f"{card.name} can't be chosen for {pending.source_name}"

        found = [actions.move_card(player.deck, player.hand, card_id, "deck").name for card_id in card_ids]
        spend_trainer(self._context(state, pending.side), pending.source_card_id)
        actions.shuffle_deck(state, pending.side, self.rng)
        state.pending = PendingInteraction()

        if not found:
            return True, f"{pending.source_name}: found nothing"
        return True, f"{pending.source_name}: put {', '.join(found)} into hand"

    def confirm_switch_selection(self, state: GameState, bench_card_id: str) -> ActionResult:
        return self._run(state, "confirm_switch_selection", self._confirm_switch_selection, bench_card_id)

    def _confirm_switch_selection(self, state: GameState, bench_card_id: str) -> Outcome:
        allowed, reason = check_pending(state, InteractionMode.SWITCH_OPPONENT_ACTIVE)
        if not allowed:
            return False, reason
        pending = state.pending
        opponent = state.get_player(pending.side.other)

        incoming = actions.switch_with_bench(opponent, bench_card_id)
        if not pending.ability_name:
            spend_trainer(self._context(state, pending.side), pending.source_card_id)
        state.pending = PendingInteraction()
        return True, f"{pending.source_name}: {incoming.name} was switched into the Active Spot"

    def confirm_energy_from_discard_selection(self, state: GameState, card_ids: List[str]) -> ActionResult:
        return self._run(
            state, "confirm_energy_from_discard_selection",
            self._confirm_energy_from_discard_selection, list(card_ids)
        )

    def _confirm_energy_from_discard_selection(self, state: GameState, card_ids: List[str]) -> Outcome:
        allowed, reason = check_pending(state, InteractionMode.ATTACH_ENERGY_FROM_DISCARD)
        if not allowed:
            return False, reason
        pending = state.pending
        ok, reason = self._validate_selection(card_ids, pending.required_count)
        if not ok:
            return False, reason

        player = state.get_player(pending.side)
        for card_id in card_ids:
            card = actions.find_in_zone(player.discard, card_id, "discard pile")
            if not pending.accepts(card):
                return False, f"{card.name} can't be chosen for {pending.source_name}"

        if not card_ids:
            return True, f"{pending.source_name}: no Energy attached. {self._advance_turn(state)}"

        state.pending = PendingInteraction(
            mode=InteractionMode.DISTRIBUTE_ENERGY_FROM_DISCARD,
            side=pending.side,
            source_card_id=pending.source_card_id,
            source_name=pending.source_name,
            required_count=len(card_ids),
            filters=pending.filters,
            selected_card_ids=list(card_ids),
            cancellable=False,
        )
        return True, f"{pending.source_name}: choose a Benched Pokémon for Energy 1 of {len(card_ids)}"

    def confirm_distribute_energy_target(self, state: GameState, target_id: str) -> ActionResult:
        return self._run(
            state, "confirm_distribute_energy_target", self._confirm_distribute_energy_target, target_id
        )

    def _confirm_distribute_energy_target(self, state: GameState, target_id: str) -> Outcome:
        allowed, reason = check_pending(state, InteractionMode.DISTRIBUTE_ENERGY_FROM_DISCARD)
        if not allowed:
            return False, reason
        pending = state.pending
        player = state.get_player(pending.side)

        target = actions.find_in_play(player, target_id)
        if player.board.active_spot is not None and player.board.active_spot.id == target.id:
            return False, f"{pending.source_name} attaches Energy to Benched Pokémon only"

        energy_id = pending.selected_card_ids.pop(0)
        energy = actions.take_from_zone(player.discard, energy_id, "discard pile")
        target.attached_energy.append(energy)
        message = f"{pending.source_name}: attached {energy.name} to {target.name}"

        if not pending.selected_card_ids:
            state.pending = PendingInteraction()
            return True, f"{message}. {self._advance_turn(state)}"

        done = pending.required_count - len(pending.selected_card_ids)
        return True, f"{message}. Choose a Benched Pokémon for Energy {done + 1} of {pending.required_count}"

    def cancel_selection(self, state: GameState) -> ActionResult:
        return self._run(state, "cancel_selection", self._cancel_selection)

    def _cancel_selection(self, state: GameState) -> Outcome:
        if not state.pending.is_active:
            return False, "No selection is in progress"
        if not state.pending.cancellable:
            return False, f"{state.pending.source_name} can't be cancelled now"
        name = state.pending.source_name
        state.pending = PendingInteraction()
        return True, f"Cancelled {name}"

    # ========================================================================
    # 5. LEGAL ACTION GENERATION
    # ========================================================================

    def get_legal_actions(self, state: GameState) -> List[Action]:
        """
        Every action the side on turn may legally take right now.

        While a selection is open only its follow-ups are listed.
        """
        if state.is_game_over():
            return []
        if state.pending.is_active:
            return self._get_pending_actions(state)

        side = state.current_side
        legal: List[Action] = []
        legal.extend(self._get_bench_actions(state, side))
        legal.extend(self._get_evolution_actions(state, side))
        legal.extend(self._get_attach_energy_actions(state, side))
        legal.extend(self._get_trainer_actions(state, side))
        legal.extend(self._get_ability_actions(state, side))
        legal.extend(self._get_set_active_actions(state, side))
        legal.extend(self._get_attack_actions(state, side))
        legal.append(Action(action_type=ActionType.END_TURN, side=side, display_label="End Turn"))
        return legal

    def _get_bench_actions(self, state: GameState, side: Side) -> List[Action]:
        player = state.get_player(side)
        return [
            Action(action_type=ActionType.PLAY_BASIC, side=side, card_id=card.id,
                   display_label=f"Play {card.name} to Bench")
            for card in _unique_by_name(player.hand.cards)
            if card.is_basic_pokemon and can_play(card, state, side)[0]
        ]

    def _get_evolution_actions(self, state: GameState, side: Side) -> List[Action]:
        player = state.get_player(side)
        legal = []
        for card in _unique_by_name(player.hand.cards):
            if not card.is_evolution:
                continue
            for target in evolution_targets(state, side, card):
                legal.append(Action(
                    action_type=ActionType.EVOLVE, side=side, card_id=card.id, target_id=target.id,
                    display_label=f"Evolve {target.name} ({_location(player, target)}) into {card.name}"
                ))
        return legal

    def _get_attach_energy_actions(self, state: GameState, side: Side) -> List[Action]:
        player = state.get_player(side)
        legal = []
        for energy in _unique_by_name(player.hand.cards):
            if not energy.is_energy or not can_play(energy, state, side)[0]:
                continue
            for target in player.board.get_all_pokemon():
                legal.append(Action(
                    action_type=ActionType.ATTACH_ENERGY, side=side, card_id=energy.id, target_id=target.id,
                    display_label=f"Attach {energy.name} to {target.name} ({_location(player, target)})"
                ))
        return legal

    def _get_trainer_actions(self, state: GameState, side: Side) -> List[Action]:
        player = state.get_player(side)
        ctx = self._context(state, side)
        legal = []
        for card in _unique_by_name(player.hand.cards):
            if not card.is_trainer or not can_play(card, state, side)[0]:
                continue
            if not logic_registry.get_trainer_logic(card).check(ctx, card)[0]:
                continue
            legal.append(Action(action_type=ActionType.PLAY_TRAINER, side=side, card_id=card.id,
                                display_label=f"Play {card.name}"))
        return legal

    def _get_ability_actions(self, state: GameState, side: Side) -> List[Action]:
        player = state.get_player(side)
        ctx = self._context(state, side)
        legal = []
        for pokemon in player.board.get_all_pokemon():
            for index, ability in enumerate(pokemon.abilities):
                if not can_use_ability(state, pokemon, index)[0]:
                    continue
                logic = logic_registry.get_ability_logic(ability)
                if logic is None or logic.effect is None or not logic.check(ctx, pokemon, ability)[0]:
                    continue
                legal.append(Action(
                    action_type=ActionType.USE_ABILITY, side=side, card_id=pokemon.id, choice_index=index,
                    display_label=f"Use {ability.name} ({pokemon.name})"
                ))
        return legal

    def _get_set_active_actions(self, state: GameState, side: Side) -> List[Action]:
        player = state.get_player(side)
        return [
            Action(action_type=ActionType.SET_ACTIVE, side=side, card_id=pokemon.id,
                   display_label=f"Move {pokemon.name} to the Active Spot")
            for pokemon in player.board.bench
        ]

    def _get_attack_actions(self, state: GameState, side: Side) -> List[Action]:
        attacker = state.get_player(side).board.active_spot
        if attacker is None:
            return []
        return [
            Action(action_type=ActionType.ATTACK, side=side, choice_index=index,
                   display_label=f"Attack: {attack.name} ({attack.damage})")
            for index, attack in enumerate(attacker.attacks)
            if can_attack(state, index)[0]
        ]

    def _get_pending_actions(self, state: GameState) -> List[Action]:
        pending = state.pending
        side = pending.side or state.current_side
        player = state.get_player(side)
        mode = pending.mode
        legal: List[Action] = []

        if mode == InteractionMode.DISCARD_FROM_HAND:
            eligible = [c for c in player.hand.cards if c.id != pending.source_card_id and pending.accepts(c)]
            for combo in combinations(eligible, pending.required_count):
                legal.append(Action(
                    action_type=ActionType.CONFIRM_DISCARD, side=side, card_ids=[c.id for c in combo],
                    display_label=f"Discard {', '.join(c.name for c in combo)}"
                ))

        elif mode in (InteractionMode.SEARCH_DECK_POKEMON, InteractionMode.SEARCH_DECK_BASIC,
                      InteractionMode.SEARCH_DECK_TAGGED):
            action_type = (ActionType.CONFIRM_TAGGED_SEARCH if mode == InteractionMode.SEARCH_DECK_TAGGED
                           else ActionType.CONFIRM_SEARCH)
            room = mode != InteractionMode.SEARCH_DECK_BASIC or player.board.bench_has_room()
            if room:
                for card in _unique_by_name(player.deck.cards):
                    if pending.accepts(card):
                        legal.append(Action(action_type=action_type, side=side, card_ids=[card.id],
                                            display_label=f"Take {card.name}"))
            legal.append(Action(action_type=action_type, side=side, card_ids=[],
                                display_label="Find nothing"))

        elif mode == InteractionMode.SWITCH_OPPONENT_ACTIVE:
            for pokemon in state.get_player(side.other).board.bench:
                legal.append(Action(action_type=ActionType.CONFIRM_SWITCH, side=side, target_id=pokemon.id,
                                    display_label=f"Switch in {pokemon.name}"))

        elif mode == InteractionMode.ATTACH_ENERGY_FROM_DISCARD:
            eligible = [c for c in player.discard.cards if pending.accepts(c)]
            for count in range(min(pending.required_count, len(eligible)), -1, -1):
                chosen = eligible[:count]
                legal.append(Action(
                    action_type=ActionType.CONFIRM_ENERGY_FROM_DISCARD, side=side,
                    card_ids=[c.id for c in chosen], display_label=f"Take {count} Energy from discard"
                ))

        elif mode == InteractionMode.DISTRIBUTE_ENERGY_FROM_DISCARD:
            for pokemon in player.board.bench:
                legal.append(Action(action_type=ActionType.DISTRIBUTE_ENERGY, side=side, target_id=pokemon.id,
                                    display_label=f"Attach Energy to {pokemon.name}"))

        if pending.cancellable:
            legal.append(Action(action_type=ActionType.CANCEL_SELECTION, side=side,
                                display_label=f"Cancel {pending.source_name}"))
        return legal

    # ========================================================================
    # 6. ACTION DISPATCH
    # ========================================================================

    def step(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an Action record through the matching operation.

        Actions for the side not on turn are rejected.
        """
        acting_side = state.pending.side if state.pending.is_active else state.current_side
        if action.side != acting_side:
            return ActionResult(status=ActionStatus.REJECTED, state=state, message="It is not your turn")

        t = action.action_type
        if t == ActionType.PLAY_BASIC:
            return self.play_basic_to_bench(state, action.card_id)
        if t == ActionType.EVOLVE:
            return self.evolve(state, action.card_id, action.target_id)
        if t == ActionType.ATTACH_ENERGY:
            return self.attach_energy(state, action.card_id, action.target_id)
        if t == ActionType.PLAY_TRAINER:
            return self.play_trainer(state, action.card_id)
        if t == ActionType.USE_ABILITY:
            return self.use_ability(state, action.card_id, action.choice_index or 0)
        if t == ActionType.SET_ACTIVE:
            return self.set_active(state, action.card_id)
        if t == ActionType.ATTACK:
            return self.attack(state, action.choice_index or 0)
        if t == ActionType.END_TURN:
            return self.end_turn(state)
        if t == ActionType.CONFIRM_DISCARD:
            return self.confirm_discard_selection(state, action.card_ids)
        if t == ActionType.CONFIRM_SEARCH:
            return self.confirm_search_selection(state, action.card_ids)
        if t == ActionType.CONFIRM_TAGGED_SEARCH:
            return self.confirm_tagged_search_selection(state, action.card_ids)
        if t == ActionType.CONFIRM_SWITCH:
            return self.confirm_switch_selection(state, action.target_id)
        if t == ActionType.CONFIRM_ENERGY_FROM_DISCARD:
            return self.confirm_energy_from_discard_selection(state, action.card_ids)
        if t == ActionType.DISTRIBUTE_ENERGY:
            return self.confirm_distribute_energy_target(state, action.target_id)
        if t == ActionType.CANCEL_SELECTION:
            return self.cancel_selection(state)

        raise ValueError(f"Unknown action type: {t}")


# ============================================================================
# HELPERS
# ============================================================================

def _unique_by_name(cards: List[Card]) -> List[Card]:
    """First copy of each card name, preserving order."""
    seen = set()
    unique = []
    for card in cards:
        if card.name not in seen:
            seen.add(card.name)
            unique.append(card)
    return unique


def _location(player: PlayerState, pokemon: Card) -> str:
    if player.board.active_spot is not None and player.board.active_spot.id == pokemon.id:
        return "Active"
    for i, bench_pokemon in enumerate(player.board.bench):
        if bench_pokemon.id == pokemon.id:
            return f"Bench {i + 1}"
    return "Unknown"
