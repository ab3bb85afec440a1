"""
PVCGL Engine - Agent System

Pluggable agent architecture for the game loop.
Supports Human players, Random bots and the Scripted opponent.

Usage:
    from agents import HumanAgent, ScriptedBot

    player = HumanAgent(name="Alice")
    opponent = ScriptedBot(name="Bot", seed=7)
"""

from agents.base import PlayerAgent
from agents.human import HumanAgent
from agents.random_bot import RandomBot
from agents.scripted_bot import AITurnFlags, ScriptedBot, get_next_ai_action

__all__ = [
    'PlayerAgent',
    'HumanAgent',
    'RandomBot',
    'ScriptedBot',
    'AITurnFlags',
    'get_next_ai_action',
]
