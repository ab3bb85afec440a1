"""
PVCGL Engine - Card Registry
Central lookup system for catalog card data and effect descriptors.

Catalog entries come from cards/data/standard_cards.json (card-API shape) and are
loaded lazily on first lookup. Effect descriptors are attached by name from
the tables below, so the engine never branches on card text.

Usage:
    data = get_card_data("me1-77")
    effect = get_trainer_effect("Ultra Ball", [Subtype.ITEM])
"""

import json
import logging
import os
from typing import Dict, List, Optional

from models import CardEffect, EffectKind, EnergyType, Subtype


logger = logging.getLogger(__name__)


# ============================================================================
# CARD DATABASE
# ============================================================================

DEFAULT_CATALOG_PATH = os.path.join(os.path.dirname(__file__), 'data', 'standard_cards.json')

# Maps catalog IDs to raw card data
_JSON_DATABASE: Dict[str, Dict] = {}


def load_catalog(path: Optional[str] = None) -> Dict[str, Dict]:
    """
    Load (or reload) the card catalog from JSON.

    Args:
        path: Catalog file path (default: cards/data/standard_cards.json)

    Returns:
        Mapping of catalog ID to raw card data

    Raises:
        FileNotFoundError: If the catalog file does not exist
    """
    json_path = path or DEFAULT_CATALOG_PATH
    if not os.path.exists(json_path):
        raise FileNotFoundError(f"Card database not found at {json_path}")

    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    _JSON_DATABASE.clear()
    for card in data.get('cards', []):
        card_id = card.get('id')
        if card_id:
            _JSON_DATABASE[card_id] = card

    logger.info(f"Loaded {len(_JSON_DATABASE)} cards from {os.path.basename(json_path)}")
    return _JSON_DATABASE


def get_card_data(card_id: str) -> Optional[Dict]:
    """Raw catalog entry for a card ID, or None if unknown."""
    if not _JSON_DATABASE:
        load_catalog()
    return _JSON_DATABASE.get(card_id)


def list_card_ids() -> List[str]:
    if not _JSON_DATABASE:
        load_catalog()
    return list(_JSON_DATABASE.keys())


# ============================================================================
# EFFECT TABLES
# ============================================================================

TRAINER_EFFECTS: Dict[str, CardEffect] = {
    "Professor's Research": CardEffect(kind=EffectKind.DRAW_CARDS, count=7, discard_hand=True),
    "Iono": CardEffect(kind=EffectKind.DRAW_CARDS, count=4),
    "Lillie's Determination": CardEffect(
        kind=EffectKind.SHUFFLE_HAND_DRAW, count=6, bonus_count=8, prize_threshold=6
    ),
    "Boss's Orders": CardEffect(kind=EffectKind.SWITCH_OPPONENT_ACTIVE),
    "Ultra Ball": CardEffect(kind=EffectKind.DISCARD_THEN_SEARCH, count=2),
    "Nest Ball": CardEffect(kind=EffectKind.SEARCH_BASIC_TO_BENCH),
    "Fighting Gong": CardEffect(kind=EffectKind.SEARCH_TAGGED_TO_HAND, energy_type=EnergyType.FIGHTING),
    "Premium Power Pro": CardEffect(kind=EffectKind.DAMAGE_BUFF, amount=30),
}

ABILITY_EFFECTS: Dict[str, CardEffect] = {
    "Instant Charge": CardEffect(kind=EffectKind.DRAW_THEN_END_TURN, count=3),
    "Concealed Cards": CardEffect(kind=EffectKind.DISCARD_ENERGY_THEN_DRAW, count=2),
    "Lunar Cycle": CardEffect(
        kind=EffectKind.DISCARD_ENERGY_THEN_DRAW,
        count=3,
        energy_type=EnergyType.FIGHTING,
        required_card_name="Solrock",
    ),
    "Wave Veil": CardEffect(kind=EffectKind.PASSIVE),
    "Heave-Ho Catcher": CardEffect(kind=EffectKind.ON_EVOLVE_SWITCH_OPPONENT),
}

ATTACK_EFFECTS: Dict[str, CardEffect] = {
    "Cosmic Beam": CardEffect(
        kind=EffectKind.REQUIRES_BENCHED_CARD,
        required_card_name="Lunatone",
        ignores_weakness_resistance=True,
    ),
    "Ora Jab": CardEffect(kind=EffectKind.ATTACH_FROM_DISCARD, count=3, energy_type=EnergyType.FIGHTING),
}


def get_trainer_effect(name: str, subtypes: List[Subtype]) -> CardEffect:
    """
    Effect descriptor for a trainer card.

    Stadiums share one behaviour; unlisted trainers resolve to NO_EFFECT.
    """
    if name in TRAINER_EFFECTS:
        return TRAINER_EFFECTS[name].model_copy()
    if Subtype.STADIUM in subtypes:
        return CardEffect(kind=EffectKind.STADIUM)
    return CardEffect(kind=EffectKind.NO_EFFECT)


def get_ability_effect(name: str) -> Optional[CardEffect]:
    effect = ABILITY_EFFECTS.get(name)
    return effect.model_copy() if effect else None


def get_attack_effect(name: str) -> Optional[CardEffect]:
    effect = ATTACK_EFFECTS.get(name)
    return effect.model_copy() if effect else None
