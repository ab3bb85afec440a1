"""
Shared Card Logic Library

Effect implementations grouped by card kind. logic_registry.py maps each
EffectKind to the functions defined here.
"""

from . import abilities, attacks, stadiums, trainers

__all__ = ['abilities', 'attacks', 'stadiums', 'trainers']
