"""
PVCGL Engine - Random Bot Agent

Simple random agent for testing and fuzzing.
Selects actions uniformly at random from legal actions.
"""

import random
from typing import List, Optional, TYPE_CHECKING
from agents.base import PlayerAgent

if TYPE_CHECKING:
    from models import GameState, Action


class RandomBot(PlayerAgent):
    """
    Random agent that selects actions uniformly at random.

    Useful for:
    - Testing the game loop
    - Fuzzing rule invariants over many games
    - Quick simulation (Bot vs Bot)

    Example:
        >>> bot = RandomBot(name="RandomBot", seed=42)
        >>> action = bot.choose_action(state, legal_actions)
    """

    def __init__(self, name: str = "RandomBot", seed: Optional[int] = None):
        super().__init__(name)
        self.seed = seed
        self.rng = random.Random(seed)

    def choose_action(self, state: 'GameState', legal_actions: List['Action']) -> 'Action':
        if not legal_actions:
            raise ValueError("No legal actions available")
        return self.rng.choice(legal_actions)
