"""
PVCGL Engine - Card Factory
Creates Card objects from catalog IDs or card-API JSON data.

Usage:
    # Create a Card from a catalog ID
    lucario = create_card_instance("me1-77")

    # Create a Card from raw JSON (test fixtures, custom catalogs)
    card = create_card_from_json(json_data)

    # Create multiple copies (for deck building)
    energies = create_multiple("sve-6", count=12)
"""

import logging
import re
import uuid
from typing import Dict, List, Optional

from models import (
    Card, Attack, Ability, ElementModifier, ModifierOperation,
    EnergyType, Supertype, Subtype
)
from cards.registry import (
    get_card_data, get_trainer_effect, get_ability_effect, get_attack_effect
)


logger = logging.getLogger(__name__)

DEFAULT_RESISTANCE = -30

_SUBTYPE_ALIASES = {
    "Pokémon Tool": Subtype.TOOL,
}


# ============================================================================
# FIELD PARSERS
# ============================================================================

def parse_damage(value) -> int:
    """
    Parse a printed damage value to its leading integer.

    Example:
        >>> parse_damage("130")
        130
        >>> parse_damage("40+")
        40
        >>> parse_damage("")
        0
    """
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    match = re.match(r'\s*(\d+)', str(value))
    return int(match.group(1)) if match else 0


def parse_weakness(entry: Dict) -> Optional[ElementModifier]:
    """"×2" / "x2" multiplies; "+N" adds N."""
    energy_type = _parse_energy_type(entry.get('type'))
    if energy_type is None:
        return None
    value = str(entry.get('value', '×2')).strip()
    multiply = re.match(r'^[×xX*]\s*(\d+)$', value)
    if multiply:
        return ElementModifier(energy_type=energy_type, operation=ModifierOperation.MULTIPLY,
                               amount=int(multiply.group(1)))
    add = re.match(r'^\+\s*(\d+)$', value)
    if add:
        return ElementModifier(energy_type=energy_type, operation=ModifierOperation.ADD,
                               amount=int(add.group(1)))
    logger.warning(f"Unrecognised weakness value '{value}', treating as x2")
    return ElementModifier(energy_type=energy_type, operation=ModifierOperation.MULTIPLY, amount=2)


def parse_resistance(entry: Dict) -> Optional[ElementModifier]:
    """"-N" subtracts N; anything unparseable falls back to -30."""
    energy_type = _parse_energy_type(entry.get('type'))
    if energy_type is None:
        return None
    match = re.match(r'^\s*([-+]?\d+)', str(entry.get('value', '')))
    amount = int(match.group(1)) if match else DEFAULT_RESISTANCE
    return ElementModifier(energy_type=energy_type, operation=ModifierOperation.ADD, amount=amount)


def _parse_energy_type(value) -> Optional[EnergyType]:
    if not value:
        return None
    try:
        return EnergyType(str(value).capitalize())
    except ValueError:
        logger.warning(f"Unknown energy type '{value}'")
        return None


def _parse_subtypes(values: List[str]) -> List[Subtype]:
    subtypes = []
    for value in values or []:
        if value in _SUBTYPE_ALIASES:
            subtypes.append(_SUBTYPE_ALIASES[value])
            continue
        try:
            subtypes.append(Subtype(value))
        except ValueError:
            logger.debug(f"Ignoring unsupported subtype '{value}'")
    return subtypes


def _energy_type_for_energy_card(json_data: Dict) -> EnergyType:
    """Element of an energy card: from 'types', else from the card name, else Colorless."""
    types = json_data.get('types') or []
    if types:
        parsed = _parse_energy_type(types[0])
        if parsed:
            return parsed
    name = json_data.get('name', '').lower()
    for energy_type in EnergyType:
        if energy_type.value.lower() in name:
            return energy_type
    return EnergyType.COLORLESS


def _parse_supertype(value: str) -> Optional[Supertype]:
    lowered = (value or '').lower()
    if lowered in ('pokémon', 'pokemon'):
        return Supertype.POKEMON
    if lowered == 'trainer':
        return Supertype.TRAINER
    if lowered == 'energy':
        return Supertype.ENERGY
    return None


# ============================================================================
# JSON CARD CREATION
# ============================================================================

def new_instance_id() -> str:
    return f"card_{uuid.uuid4().hex[:8]}"


def create_card_from_json(json_data: Dict, instance_id: Optional[str] = None) -> Optional[Card]:
    """
    Create a Card from card-API JSON data.

    Args:
        json_data: Card data dictionary (e.g., an entry of standard_cards.json)
        instance_id: Optional custom instance ID (auto-generated if None)

    Returns:
        Card, or None if the JSON has no recognisable supertype

    Example:
        >>> riolu = create_card_from_json({
        ...     "id": "me1-76", "name": "Riolu", "supertype": "Pokémon",
        ...     "subtypes": ["Basic"], "hp": "70", "types": ["Fighting"],
        ...     "attacks": [{"name": "Punch", "cost": ["Colorless"], "damage": "10"}]
        ... })
        >>> riolu.hp
        70
    """
    if not json_data:
        return None
    supertype = _parse_supertype(json_data.get('supertype'))
    if supertype is None:
        logger.warning(f"Unknown supertype for card {json_data.get('id')}")
        return None

    name = json_data.get('name', 'Unknown')
    subtypes = _parse_subtypes(json_data.get('subtypes'))
    images = json_data.get('images') or {}

    fields = dict(
        id=instance_id or new_instance_id(),
        card_id=json_data.get('id', 'custom'),
        name=name,
        supertype=supertype,
        subtypes=subtypes,
        image_url=images.get('large') or images.get('small'),
    )

    if supertype == Supertype.POKEMON:
        types = json_data.get('types') or []
        fields.update(
            hp=parse_damage(json_data.get('hp')),
            energy_type=_parse_energy_type(types[0]) if types else EnergyType.COLORLESS,
            evolves_from=json_data.get('evolvesFrom'),
            retreat_cost=int(json_data.get('convertedRetreatCost') or 0),
            attacks=[
                Attack(
                    name=attack.get('name', 'Attack'),
                    damage=parse_damage(attack.get('damage')),
                    cost=[t for t in (_parse_energy_type(c) for c in attack.get('cost', [])) if t],
                    text=attack.get('text', ''),
                    effect=get_attack_effect(attack.get('name', '')),
                )
                for attack in json_data.get('attacks', [])
            ],
            abilities=[
                Ability(
                    name=ability.get('name', 'Ability'),
                    kind=ability.get('type', 'Ability'),
                    text=ability.get('text', ''),
                    effect=get_ability_effect(ability.get('name', '')),
                )
                for ability in json_data.get('abilities', [])
            ],
            weaknesses=[w for w in (parse_weakness(e) for e in json_data.get('weaknesses', [])) if w],
            resistances=[r for r in (parse_resistance(e) for e in json_data.get('resistances', [])) if r],
        )
    elif supertype == Supertype.TRAINER:
        fields['effect'] = get_trainer_effect(name, subtypes)
    else:
        fields['energy_type'] = _energy_type_for_energy_card(json_data)

    return Card(**fields)


# ============================================================================
# CARD INSTANCE CREATION
# ============================================================================

def create_card_instance(card_id: str, instance_id: Optional[str] = None) -> Optional[Card]:
    """
    Create a fresh Card from a catalog ID.

    Returns:
        Card, or None if card_id is not in the catalog
    """
    json_data = get_card_data(card_id)
    if json_data is None:
        logger.warning(f"Card {card_id} not found in catalog")
        return None
    return create_card_from_json(json_data, instance_id=instance_id)


def create_multiple(card_id: str, count: int) -> List[Card]:
    """
    Create multiple copies of a card.

    Example:
        >>> energies = create_multiple("sve-6", count=12)
        >>> len(energies)
        12
    """
    cards = []
    for _ in range(count):
        card = create_card_instance(card_id)
        if card:
            cards.append(card)
    return cards
