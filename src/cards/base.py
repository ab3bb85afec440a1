"""
PVCGL Engine - Card Logic Base Types (cards/base.py)

Shared vocabulary between the engine and the card library.

Architecture Pattern:
- Engine = Referee (knows rules, owns turn flow and pending selections)
- Card library = Strategy (knows what each effect kind does)
- logic_registry.py routes an EffectKind to its check/effect functions
"""

import random
from typing import Callable, Optional

from pydantic import BaseModel

from models import GameState, PlayerState, Side
from legality import Check


class EffectContext:
    """
    Everything an effect function needs: the working state (already cloned
    by the engine), the acting side and the engine's RNG.
    """

    def __init__(self, state: GameState, side: Side, rng: Optional[random.Random] = None):
        self.state = state
        self.side = side
        self.rng = rng or random.Random()

    @property
    def player(self) -> PlayerState:
        return self.state.get_player(self.side)

    @property
    def opponent(self) -> PlayerState:
        return self.state.get_player(self.side.other)


class EffectOutcome(BaseModel):
    """What an effect did, and whether the turn ends because of it."""
    message: str
    end_turn: bool = False


# Signatures used by the router
CheckFn = Callable[..., Check]
EffectFn = Callable[..., EffectOutcome]
