"""
PVCGL Engine - Cards Module
Card catalog, factory and effect logic.
"""

from cards.factory import create_card_from_json, create_card_instance, create_multiple
from cards.registry import get_card_data, load_catalog

__all__ = [
    'create_card_from_json',
    'create_card_instance',
    'create_multiple',
    'get_card_data',
    'load_catalog',
]
