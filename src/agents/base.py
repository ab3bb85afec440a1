"""
PVCGL Engine - Base Agent Interface

Abstract base class for all player agents.
Defines the contract that all agents (Human, Random, Scripted) must follow.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from models import GameState, Action, Side


class PlayerAgent(ABC):
    """
    Abstract base class for player agents.

    All agents must implement choose_action() to select a move from legal actions.
    This enables pluggable opponents - swap agents without changing the game loop.

    Attributes:
        name: Display name for this agent
        side: Side this agent plays - assigned by the game loop
    """

    def __init__(self, name: str = "Agent"):
        self.name = name
        self.side: Optional['Side'] = None

    @abstractmethod
    def choose_action(self, state: 'GameState', legal_actions: List['Action']) -> 'Action':
        """
        Choose an action from the list of legal actions.

        Args:
            state: Current game state (read-only)
            legal_actions: List of legal actions to choose from

        Returns:
            Selected action (must be from legal_actions list)

        Raises:
            ValueError: If no legal actions available
        """
        pass

    def on_game_start(self, side: 'Side'):
        """Called when the game starts to assign this agent's side."""
        self.side = side

    def on_action_rejected(self, action: 'Action', reason: str):
        """Called when the engine rejects an action this agent chose."""
        pass

    def on_game_end(self, state: 'GameState'):
        """Called when the game ends."""
        pass

    def __repr__(self):
        side = self.side.value if self.side else None
        return f"{self.__class__.__name__}(name='{self.name}', side={side})"
