"""
PVCGL Engine - Data Layer (models.py)
Defines the "Snapshot" of the game universe.
All models must be serializable (JSON) and clonable (Deep Copy).
"""

from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field


# ============================================================================
# 1. CARD ATTRIBUTES
# ============================================================================

class Supertype(str, Enum):
    """Card supertype classification."""
    POKEMON = "Pokemon"
    TRAINER = "Trainer"
    ENERGY = "Energy"


class Subtype(str, Enum):
    """Card subtype classification."""
    # Pokémon subtypes
    BASIC = "Basic"
    STAGE_1 = "Stage 1"
    STAGE_2 = "Stage 2"
    MEGA = "MEGA"
    EX = "ex"
    V = "V"
    RADIANT = "Radiant"
    TERA = "Tera"

    # Trainer subtypes
    ITEM = "Item"
    SUPPORTER = "Supporter"
    STADIUM = "Stadium"
    TOOL = "Pokemon Tool"
    ACE_SPEC = "ACE SPEC"

    # Energy subtypes
    SPECIAL = "Special"


class EnergyType(str, Enum):
    """Energy types for cost and weakness/resistance."""
    GRASS = "Grass"
    FIRE = "Fire"
    WATER = "Water"
    LIGHTNING = "Lightning"
    PSYCHIC = "Psychic"
    FIGHTING = "Fighting"
    DARKNESS = "Darkness"
    METAL = "Metal"
    FAIRY = "Fairy"
    DRAGON = "Dragon"
    COLORLESS = "Colorless"


class ModifierOperation(str, Enum):
    """How a weakness/resistance entry changes damage."""
    MULTIPLY = "multiply"
    ADD = "add"


class EffectKind(str, Enum):
    """
    Closed set of effect behaviours a card, ability or attack can carry.

    Attached to catalog entries at load time (cards/registry.py) so the
    engine switches on this enum instead of on card text.
    """
    # Trainers
    NO_EFFECT = "no_effect"
    DRAW_CARDS = "draw_cards"                      # Professor's Research, Iono
    SHUFFLE_HAND_DRAW = "shuffle_hand_draw"        # Lillie's Determination
    STADIUM = "stadium"
    DISCARD_THEN_SEARCH = "discard_then_search"    # Ultra Ball
    SEARCH_BASIC_TO_BENCH = "search_basic_to_bench"  # Nest Ball
    SEARCH_TAGGED_TO_HAND = "search_tagged_to_hand"  # Fighting Gong
    SWITCH_OPPONENT_ACTIVE = "switch_opponent_active"  # Boss's Orders
    DAMAGE_BUFF = "damage_buff"                    # Premium Power Pro

    # Abilities
    DRAW_THEN_END_TURN = "draw_then_end_turn"      # Instant Charge
    DISCARD_ENERGY_THEN_DRAW = "discard_energy_then_draw"  # Concealed Cards, Lunar Cycle
    PASSIVE = "passive"                            # Wave Veil
    ON_EVOLVE_SWITCH_OPPONENT = "on_evolve_switch_opponent"  # Heave-Ho Catcher

    # Attacks
    REQUIRES_BENCHED_CARD = "requires_benched_card"  # Cosmic Beam
    ATTACH_FROM_DISCARD = "attach_from_discard"    # Ora Jab


class CardEffect(BaseModel):
    """
    Tagged effect descriptor: a kind plus the parameters that kind reads.

    Examples:
        Professor's Research -> CardEffect(kind=DRAW_CARDS, count=7, discard_hand=True)
        Lunar Cycle -> CardEffect(kind=DISCARD_ENERGY_THEN_DRAW, count=3,
                                  energy_type=FIGHTING, required_card_name="Solrock")
    """
    kind: EffectKind = Field(..., description="Effect behaviour")
    count: int = Field(0, description="Cards drawn / discarded / selected")
    bonus_count: int = Field(0, description="Alternate draw count when the prize condition holds")
    prize_threshold: int = Field(0, description="Prize count that unlocks bonus_count")
    amount: int = Field(0, description="Damage amount (buffs)")
    discard_hand: bool = Field(False, description="Discard the whole hand before drawing")
    energy_type: Optional[EnergyType] = Field(None, description="Element filter")
    required_card_name: Optional[str] = Field(None, description="Named card that must be in play / benched")
    ignores_weakness_resistance: bool = Field(False, description="Attack skips weakness and resistance")


class Attack(BaseModel):
    """Attack definition."""
    name: str
    damage: int = Field(0, description="Base damage")
    cost: List[EnergyType] = Field(default_factory=list, description="Ordered energy requirements")
    text: str = ""
    effect: Optional[CardEffect] = None


class Ability(BaseModel):
    """Ability definition."""
    name: str
    kind: str = Field("Ability", description="Printed ability label")
    text: str = ""
    effect: Optional[CardEffect] = None


class ElementModifier(BaseModel):
    """A weakness or resistance entry, e.g. Fire x2 or Fighting -30."""
    energy_type: EnergyType
    operation: ModifierOperation = ModifierOperation.ADD
    amount: int = 0

    def apply(self, damage: int) -> int:
        if self.operation == ModifierOperation.MULTIPLY:
            return damage * self.amount
        return damage + self.amount


# ============================================================================
# 2. CARD RECORD
# ============================================================================

class Card(BaseModel):
    """
    A physical card in the game.

    Printed data (name, stats, attacks) comes from the catalog; the in-play
    fields (attached_energy, damage_counters, played_turn, prior_stages)
    only mean something while the card is a creature on the board.
    """
    # Identity
    id: str = Field(..., description="Unique instance ID (e.g., 'card_1a2b3c4d')")
    card_id: str = Field(..., description="Catalog ID (e.g., 'me1-77')")
    name: str
    supertype: Supertype
    subtypes: List[Subtype] = Field(default_factory=list)

    # Printed stats
    hp: Optional[int] = None
    energy_type: Optional[EnergyType] = Field(None, description="Element of a creature or energy card")
    evolves_from: Optional[str] = None
    attacks: List[Attack] = Field(default_factory=list)
    abilities: List[Ability] = Field(default_factory=list)
    weaknesses: List[ElementModifier] = Field(default_factory=list)
    resistances: List[ElementModifier] = Field(default_factory=list)
    retreat_cost: int = 0
    effect: Optional[CardEffect] = Field(None, description="Trainer effect descriptor")
    image_url: Optional[str] = None

    # In-play state
    attached_energy: List['Card'] = Field(default_factory=list, description="Energy cards attached")
    damage_counters: int = Field(0, ge=0, description="Damage taken, in HP points")
    played_turn: Optional[int] = Field(None, description="Turn the card entered play")
    prior_stages: List['Card'] = Field(default_factory=list, description="Cards this one evolved from")

    @property
    def is_pokemon(self) -> bool:
        return self.supertype == Supertype.POKEMON

    @property
    def is_trainer(self) -> bool:
        return self.supertype == Supertype.TRAINER

    @property
    def is_energy(self) -> bool:
        return self.supertype == Supertype.ENERGY

    @property
    def is_basic_pokemon(self) -> bool:
        return self.is_pokemon and Subtype.BASIC in self.subtypes

    @property
    def is_evolution(self) -> bool:
        return self.is_pokemon and (Subtype.STAGE_1 in self.subtypes or Subtype.STAGE_2 in self.subtypes)

    @property
    def is_basic_energy(self) -> bool:
        return self.is_energy and Subtype.SPECIAL not in self.subtypes

    def has_subtype(self, subtype: Subtype) -> bool:
        return subtype in self.subtypes

    @property
    def attached_energy_types(self) -> List[EnergyType]:
        """Element multiset of the attached energy, in attachment order."""
        return [energy.energy_type or EnergyType.COLORLESS for energy in self.attached_energy]

    @property
    def remaining_hp(self) -> int:
        return max(0, (self.hp or 0) - self.damage_counters)

    def stack_size(self) -> int:
        """Number of physical cards this creature represents (itself, energy, prior stages)."""
        return 1 + len(self.attached_energy) + sum(stage.stack_size() for stage in self.prior_stages)

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


# ============================================================================
# 3. ZONES
# ============================================================================

class Zone(BaseModel):
    """
    A zone that holds cards (Deck, Hand, Discard, Prizes).

    Ordered zones (deck, prizes) are drawn from the front.
    """
    cards: List[Card] = Field(default_factory=list)
    is_ordered: bool = Field(False, description="True for Deck and Prizes")
    is_private: bool = Field(False, description="True for Deck and Hand")

    def add_card(self, card: Card) -> None:
        self.cards.append(card)

    def remove_card(self, card_id: str) -> Optional[Card]:
        """Remove card by instance ID. Returns the card if found."""
        for i, card in enumerate(self.cards):
            if card.id == card_id:
                return self.cards.pop(i)
        return None

    def find_card(self, card_id: str) -> Optional[Card]:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def count(self) -> int:
        return len(self.cards)

    def is_empty(self) -> bool:
        return len(self.cards) == 0


class Board(BaseModel):
    """The Pokémon in play for one side: one Active Spot and the Bench."""
    active_spot: Optional[Card] = None
    bench: List[Card] = Field(default_factory=list)
    max_bench_size: int = Field(5, description="Bench capacity")

    def bench_has_room(self) -> bool:
        return len(self.bench) < self.max_bench_size

    def add_to_bench(self, card: Card) -> bool:
        """Returns False if the bench is full."""
        if not self.bench_has_room():
            return False
        self.bench.append(card)
        return True

    def remove_from_bench(self, card_id: str) -> Optional[Card]:
        for i, card in enumerate(self.bench):
            if card.id == card_id:
                return self.bench.pop(i)
        return None

    def get_all_pokemon(self) -> List[Card]:
        """Active first, then bench in order."""
        pokemon = []
        if self.active_spot:
            pokemon.append(self.active_spot)
        pokemon.extend(self.bench)
        return pokemon

    def find_pokemon(self, card_id: str) -> Optional[Card]:
        for pokemon in self.get_all_pokemon():
            if pokemon.id == card_id:
                return pokemon
        return None

    def get_bench_count(self) -> int:
        return len(self.bench)


# ============================================================================
# 4. PLAYER STATE
# ============================================================================

class Side(str, Enum):
    """The two sides of the table."""
    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> 'Side':
        return Side.OPPONENT if self == Side.PLAYER else Side.PLAYER


class PlayerState(BaseModel):
    """One side's zones, board and per-turn flags."""
    side: Side
    name: str = "Player"

    deck: Zone = Field(default_factory=lambda: Zone(is_ordered=True, is_private=True))
    hand: Zone = Field(default_factory=lambda: Zone(is_private=True))
    discard: Zone = Field(default_factory=Zone)
    prizes: Zone = Field(default_factory=lambda: Zone(is_ordered=True, is_private=True))
    board: Board = Field(default_factory=Board)

    # Turn flags (reset in end_turn)
    energy_attached_this_turn: bool = False
    supporter_played_this_turn: bool = False
    stadium_played_this_turn: bool = False
    damage_bonus_this_turn: int = Field(0, description="Stacking flat damage bonus")
    abilities_used_this_turn: List[str] = Field(
        default_factory=list,
        description="Card instance IDs and ability names used this turn"
    )

    def reset_turn_flags(self) -> None:
        self.energy_attached_this_turn = False
        self.supporter_played_this_turn = False
        self.stadium_played_this_turn = False
        self.damage_bonus_this_turn = 0
        self.abilities_used_this_turn = []

    def has_active_pokemon(self) -> bool:
        return self.board.active_spot is not None

    def has_any_pokemon(self) -> bool:
        return self.board.active_spot is not None or len(self.board.bench) > 0


# ============================================================================
# 5. PENDING INTERACTIONS
# ============================================================================

class InteractionMode(str, Enum):
    """Selection sub-modes that suspend free play until resolved."""
    NONE = "none"
    DISCARD_FROM_HAND = "discard_from_hand"
    SEARCH_DECK_POKEMON = "search_deck_pokemon"
    SEARCH_DECK_BASIC = "search_deck_basic"
    SEARCH_DECK_TAGGED = "search_deck_tagged"
    SWITCH_OPPONENT_ACTIVE = "switch_opponent_active"
    ATTACH_ENERGY_FROM_DISCARD = "attach_energy_from_discard"
    DISTRIBUTE_ENERGY_FROM_DISCARD = "distribute_energy_from_discard"


class CardFilter(BaseModel):
    """
    Eligibility predicate for a selection. Unset fields match anything.

    A list of filters matches a card when any one of them matches.
    """
    supertype: Optional[Supertype] = None
    subtype: Optional[Subtype] = None
    energy_type: Optional[EnergyType] = None
    basic_energy_only: bool = False

    def matches(self, card: Card) -> bool:
        if self.supertype is not None and card.supertype != self.supertype:
            return False
        if self.subtype is not None and self.subtype not in card.subtypes:
            return False
        if self.energy_type is not None and card.energy_type != self.energy_type:
            return False
        if self.basic_energy_only and not card.is_basic_energy:
            return False
        return True


class PendingInteraction(BaseModel):
    """
    The modal workflow currently suspending free play.

    Workflows chain by setting next_mode (Ultra Ball: discard -> search) and
    carry their queue of chosen cards in selected_card_ids (Ora Jab energy
    waiting to be distributed).
    """
    mode: InteractionMode = InteractionMode.NONE
    side: Optional[Side] = None
    source_card_id: Optional[str] = Field(None, description="Trainer in hand or Pokémon on board")
    source_name: str = ""
    required_count: int = Field(0, description="Exact count for discards, maximum for selections")
    filters: List[CardFilter] = Field(default_factory=list, description="Any-of eligibility")
    next_mode: InteractionMode = InteractionMode.NONE
    draw_count: int = Field(0, description="Cards drawn once a discard cost is paid")
    ability_name: Optional[str] = None
    selected_card_ids: List[str] = Field(default_factory=list)
    cancellable: bool = True

    @property
    def is_active(self) -> bool:
        return self.mode != InteractionMode.NONE

    def accepts(self, card: Card) -> bool:
        if not self.filters:
            return True
        return any(card_filter.matches(card) for card_filter in self.filters)


# ============================================================================
# 6. GAME STATE
# ============================================================================

class GameResult(str, Enum):
    """Game outcome."""
    ONGOING = "ongoing"
    PLAYER_WIN = "player_win"
    OPPONENT_WIN = "opponent_win"


class GameState(BaseModel):
    """Complete game state snapshot."""
    player: PlayerState = Field(default_factory=lambda: PlayerState(side=Side.PLAYER, name="Player"))
    opponent: PlayerState = Field(default_factory=lambda: PlayerState(side=Side.OPPONENT, name="Opponent"))

    turn_count: int = Field(1, ge=1)
    current_side: Side = Side.PLAYER
    starting_side: Side = Side.PLAYER

    stadium: Optional[Card] = None
    stadium_owner: Optional[Side] = None

    time_remaining: int = Field(60, description="Seconds left in the current turn")
    message: str = ""
    pending: PendingInteraction = Field(default_factory=PendingInteraction)

    result: GameResult = GameResult.ONGOING
    winner: Optional[Side] = None

    def get_player(self, side: Side) -> PlayerState:
        return self.player if side == Side.PLAYER else self.opponent

    def get_current_player(self) -> PlayerState:
        return self.get_player(self.current_side)

    def get_defending_player(self) -> PlayerState:
        return self.get_player(self.current_side.other)

    def is_game_over(self) -> bool:
        return self.result != GameResult.ONGOING

    def clone(self) -> 'GameState':
        """Deep copy for reducer operations."""
        return self.model_copy(deep=True)


# ============================================================================
# 7. ACTIONS
# ============================================================================

class ActionType(str, Enum):
    """All possible action intents."""
    PLAY_BASIC = "play_basic"
    EVOLVE = "evolve"
    ATTACH_ENERGY = "attach_energy"
    PLAY_TRAINER = "play_trainer"
    USE_ABILITY = "use_ability"
    SET_ACTIVE = "set_active"
    ATTACK = "attack"
    END_TURN = "end_turn"

    # Pending interaction follow-ups
    CONFIRM_DISCARD = "confirm_discard"
    CONFIRM_SEARCH = "confirm_search"
    CONFIRM_TAGGED_SEARCH = "confirm_tagged_search"
    CONFIRM_SWITCH = "confirm_switch"
    CONFIRM_ENERGY_FROM_DISCARD = "confirm_energy_from_discard"
    DISTRIBUTE_ENERGY = "distribute_energy"
    CANCEL_SELECTION = "cancel_selection"


class Action(BaseModel):
    """A player intent, replayed through GameEngine.step()."""
    action_type: ActionType
    side: Side
    card_id: Optional[str] = None
    target_id: Optional[str] = None
    choice_index: Optional[int] = Field(None, description="Attack or ability index")
    card_ids: List[str] = Field(default_factory=list, description="Selection for confirm actions")
    display_label: Optional[str] = None

    def __str__(self) -> str:
        if self.display_label:
            return self.display_label
        parts = [self.action_type.value]
        if self.card_id:
            parts.append(f"card={self.card_id}")
        if self.target_id:
            parts.append(f"target={self.target_id}")
        if self.choice_index is not None:
            parts.append(f"index={self.choice_index}")
        if self.card_ids:
            parts.append(f"cards={','.join(self.card_ids)}")
        return " ".join(parts)


class ActionStatus(str, Enum):
    """Outcome of a reducer operation."""
    OK = "ok"
    REJECTED = "rejected"
    NOT_FOUND = "not_found"


class ActionResult(BaseModel):
    """
    Result of a reducer operation.

    On REJECTED / NOT_FOUND, state is the caller's input, unchanged.
    """
    status: ActionStatus
    state: GameState
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == ActionStatus.OK


Card.model_rebuild()
